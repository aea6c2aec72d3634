from typing import Any, Dict, Mapping

from oktasdk import commands
from oktasdk.resource.base import Resource


class ReferenceFactory:
    """Builds the request body form of nested maps.

    Nested maps are currently sent as they are.
    """

    def create_reference(self, name: str, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)


class ResourceConverter:
    """Flattens a resource graph into a JSON-ready, key-ordered dict.

    Nested resources are converted recursively, so resource graphs must
    not contain cycles.
    """

    def __init__(self, reference_factory: ReferenceFactory = None):
        self.reference_factory = reference_factory or ReferenceFactory()

    def convert(self, resource: Resource, dirty_only: bool = False) -> Dict[str, Any]:
        if not dirty_only and not resource.is_new:
            resource.materialize()
        names = [] if dirty_only else resource.property_names
        names += [
            name
            for name in resource.updated_property_names
            if name not in names
        ]
        result = {}
        for name in names:
            value = resource.get_property(name)
            result[name] = commands.to_map_value(self, value, name, dirty_only)
        return result


@commands.to_map_value.register(ResourceConverter, Resource, str, bool)
def _resource_to_map_value(
    converter: ResourceConverter,
    value: Resource,
    name: str,
    dirty_only: bool,
) -> Dict[str, Any]:
    return converter.convert(value, dirty_only)


@commands.to_map_value.register(ResourceConverter, dict, str, bool)
def _dict_to_map_value(
    converter: ResourceConverter,
    value: dict,
    name: str,
    dirty_only: bool,
) -> Dict[str, Any]:
    return converter.reference_factory.create_reference(name, value)


@commands.to_map_value.register(ResourceConverter, list, str, bool)
def _list_to_map_value(
    converter: ResourceConverter,
    value: list,
    name: str,
    dirty_only: bool,
) -> list:
    return [
        commands.to_map_value(converter, v, name, dirty_only)
        for v in value
    ]


@commands.to_map_value.register(ResourceConverter, object, str, bool)
def _value_to_map_value(
    converter: ResourceConverter,
    value: Any,
    name: str,
    dirty_only: bool,
) -> Any:
    return value
