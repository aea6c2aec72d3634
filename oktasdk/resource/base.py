from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Type, Union, TYPE_CHECKING

import datetime
import enum
import logging
import threading
import weakref

from oktasdk import commands
from oktasdk.ds.enlistment import Enlistment
from oktasdk.exceptions import HrefRequired
from oktasdk.exceptions import IllegalState
from oktasdk.exceptions import PropertyTypeMismatch
from oktasdk.utils.imports import importstr

if TYPE_CHECKING:
    from oktasdk.ds.store import DataStore

log = logging.getLogger(__name__)

HREF = 'href'


class Property:
    """Typed accessor for a single resource property.

    Declared as a class attribute of a resource, reading it returns the
    property value (materializing the resource if needed) and assigning it
    marks the property dirty.
    """
    types: Tuple[type, ...] = (object,)

    def __init__(self, name: Optional[str] = None, *, nullable: bool = False):
        self.name = name
        self.nullable = nullable

    def __set_name__(self, owner, attr):
        if self.name is None:
            self.name = attr

    def __get__(self, instance: Optional[Resource], owner):
        if instance is None:
            return self
        return self.get(instance)

    def __set__(self, instance: Resource, value):
        instance.set_property(self.name, self.dump(value), nullable=self.nullable)

    def __repr__(self):
        return f'{type(self).__name__}({self.name!r})'

    def get(self, resource: Resource):
        value = resource.get_property(self.name)
        if value is None:
            return None
        return self.load(resource, value)

    def load(self, resource: Resource, value):
        if not isinstance(value, self.types):
            raise _mismatch(resource, self.name, self.types[0].__name__, value)
        return value

    def dump(self, value):
        return value


class StringProperty(Property):
    types = (str,)


class IntegerProperty(Property):
    types = (int,)

    def load(self, resource, value):
        if isinstance(value, bool):
            raise _mismatch(resource, self.name, 'int', value)
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                raise _mismatch(resource, self.name, 'int', value)
        return super().load(resource, value)


class BooleanProperty(Property):
    types = (bool,)

    def load(self, resource, value):
        if isinstance(value, str) and value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        return super().load(resource, value)


class DateTimeProperty(Property):
    types = (datetime.datetime,)

    def load(self, resource, value):
        if isinstance(value, str):
            try:
                return datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))
            except ValueError:
                raise _mismatch(resource, self.name, 'datetime', value)
        return super().load(resource, value)

    def dump(self, value):
        if isinstance(value, datetime.datetime):
            value = value.isoformat()
            if value.endswith('+00:00'):
                value = value[:-len('+00:00')] + 'Z'
        return value


class MapProperty(Property):
    types = (Mapping,)


class ListProperty(Property):
    types = (list,)


class EnumProperty(Property):
    """Enum valued property.

    Values the enum does not know about are returned as raw strings, so
    new server-side values do not break reads.
    """

    def __init__(self, name: Optional[str] = None, enum_type: Type[enum.Enum] = None, **kwargs):
        super().__init__(name, **kwargs)
        self.enum_type = enum_type

    def load(self, resource, value):
        if isinstance(value, self.enum_type):
            return value
        try:
            return self.enum_type(value)
        except ValueError:
            log.debug("Unknown %s value %r for %r.", self.enum_type.__name__, value, self.name)
            return value

    def dump(self, value):
        if isinstance(value, enum.Enum):
            return value.value
        return value


class ResourceReference(Property):
    """Nested resource property.

    A nested map is converted to a resource instance on first read and
    swapped into the property map without marking the owner dirty.
    Collections are never swapped in, so they are always read fresh.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        resource_type: Union[str, Type[Resource]] = None,
        *,
        create_on_access: bool = False,
        **kwargs,
    ):
        super().__init__(name, **kwargs)
        self._type = resource_type
        self.create_on_access = create_on_access

    @property
    def type(self) -> Type[Resource]:
        if isinstance(self._type, str):
            self._type = importstr(self._type)
        return self._type

    def get(self, resource: Resource):
        value = resource.get_property(self.name)
        klass = self.type
        if value is None:
            if self.create_on_access:
                nested = resource.data_store.instantiate(klass)
                resource.set_property(self.name, nested, dirty=False)
                return nested
            return None
        if isinstance(value, klass):
            return value
        if isinstance(value, Mapping):
            nested = resource.data_store.instantiate(klass, dict(value))
            if not klass.is_collection():
                resource.set_property(self.name, nested, dirty=False)
            return nested
        raise _mismatch(resource, self.name, klass.__name__, value)


def _mismatch(resource: Resource, name: str, expected: str, value) -> PropertyTypeMismatch:
    given = type(value).__name__
    if resource.is_printable_property(name):
        given = f'{given} ({value!r})'
    return PropertyTypeMismatch(resource, property=name, expected=expected, given=given)


class Resource:
    """Base resource object model.

    Holds three property maps: the base `properties`, locally modified
    `dirty` overrides and names of `deleted` (explicitly nulled)
    properties. A property read returns, in that order, None for a deleted
    property, the dirty override or the base value.

    A resource that has an href, but no other data, is not materialized.
    The first read of a property that is not a dirty override fetches the
    resource and merges it under the dirty overrides.
    """
    error_type = 'resource'

    # Number of positional constructor arguments the resource factory may
    # pass: data store, data store + properties.
    constructor_arities: Tuple[int, ...] = (1, 2)

    _properties: Dict[str, Any]
    _dirty_properties: Dict[str, Any]
    _deleted_property_names: Set[str]

    def __init__(
        self,
        data_store: Optional[DataStore] = None,
        properties: Optional[Mapping[str, Any]] = None,
    ):
        self._data_store = weakref.ref(data_store) if data_store is not None else None
        self._dirty_properties = {}
        self._deleted_property_names = set()
        self._resource_href: Optional[str] = None
        self._dirty = False
        self._materialized = False
        if isinstance(properties, Enlistment):
            self._lock = properties.lock
            self._properties = properties
        else:
            self._lock = threading.RLock()
            self._properties = {}
        self.set_internal_properties(properties)

    @classmethod
    def is_collection(cls) -> bool:
        return False

    @classmethod
    def resolve_self_href(cls, data: Mapping[str, Any], base_url: Optional[str]) -> Optional[str]:
        """Build own href for data lacking `_links.self.href`."""
        return None

    @property
    def data_store(self) -> DataStore:
        store = self._data_store() if self._data_store is not None else None
        if store is None:
            raise IllegalState(self, reason="resource is not attached to a data store")
        return store

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def set_internal_properties(self, properties: Optional[Mapping[str, Any]]):
        with self._lock:
            self._dirty_properties.clear()
            self._deleted_property_names.clear()
            self._dirty = False
            if properties:
                if isinstance(self._properties, Enlistment):
                    if self._properties is not properties:
                        self._properties.set_properties(properties)
                else:
                    self._properties = dict(properties)
                href_only = len(self._properties) == 1 and HREF in self._properties
                self._materialized = not href_only
            else:
                self._materialized = False

    @property
    def href(self) -> Optional[str]:
        if self._resource_href:
            return self._resource_href
        value = self._read_property(HREF)
        if value:
            return str(value)
        links = self._read_property('_links')
        if isinstance(links, Mapping):
            self_link = links.get('self')
            if isinstance(self_link, Mapping) and self_link.get('href'):
                return self_link['href']
        return None

    @href.setter
    def href(self, href: Optional[str]):
        self._resource_href = href

    @property
    def materialized(self) -> bool:
        return self._materialized

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def is_new(self) -> bool:
        return not self.href

    def materialize(self):
        if self._materialized:
            return
        with self._lock:
            # Another thread may have finished while we waited for the lock.
            if self._materialized:
                return
            href = self.href
            fetched = self.data_store.get_resource(href, type(self), self._materialize_query())
            fetched_properties = fetched.to_raw()
            if not self._resource_href:
                self._resource_href = href
            if isinstance(self._properties, Enlistment):
                self._properties.set_properties(fetched_properties)
            else:
                self._properties = fetched_properties
            # Dirty overrides always win over fetched data.
            self._properties.update(self._dirty_properties)
            self._materialized = True

    def _materialize_query(self) -> Optional[Dict[str, Any]]:
        return None

    @property
    def property_names(self) -> List[str]:
        with self._lock:
            return list(self._properties)

    @property
    def updated_property_names(self) -> List[str]:
        with self._lock:
            return list(self._dirty_properties)

    @property
    def deleted_property_names(self) -> Set[str]:
        with self._lock:
            return set(self._deleted_property_names)

    def get_property(self, name: str) -> Any:
        if name != HREF and not self.is_new and not self._materialized:
            with self._lock:
                present = name in self._dirty_properties
            if not present:
                self.materialize()
        return self._read_property(name)

    def has_property(self, name: str) -> bool:
        with self._lock:
            return (
                name not in self._deleted_property_names and
                (name in self._dirty_properties or name in self._properties)
            )

    def _read_property(self, name: str) -> Any:
        with self._lock:
            if name in self._deleted_property_names:
                return None
            value = self._dirty_properties.get(name)
            if value is None:
                value = self._properties.get(name)
            return value

    def set_property(
        self,
        name: str,
        value: Any,
        dirty: bool = True,
        nullable: bool = False,
    ) -> Any:
        with self._lock:
            previous = self._dirty_properties.get(name)
            if previous is None:
                previous = self._properties.get(name)
            self._dirty_properties[name] = value
            if dirty:
                self._dirty = True
            if nullable and value is None:
                self._deleted_property_names.add(name)
            else:
                self._deleted_property_names.discard(name)
            return previous

    def to_raw(self) -> Dict[str, Any]:
        """Return a snapshot of base properties merged with dirty ones."""
        with self._lock:
            data = dict(self._properties)
            data.update(self._dirty_properties)
            for name in self._deleted_property_names:
                data[name] = None
            return data

    def is_printable_property(self, name: str) -> bool:
        return True

    def __repr__(self):
        with self._lock:
            props = ', '.join(
                f'{k}: {v!r}'
                for k, v in self._properties.items()
                if self.is_printable_property(k)
            )
        return f'<{type(self).__name__} {props}>'

    def __eq__(self, other):
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        with self._lock, other._lock:
            return dict(self._properties) == dict(other._properties)

    __hash__ = None


class InstanceResource(Resource):

    def save(self, partial: bool = False):
        if self.is_new:
            raise HrefRequired(self, operation='save')
        self.data_store.save(self, partial=partial)
        return self

    def delete(self):
        if self.is_new:
            raise HrefRequired(self, operation='delete')
        self.data_store.delete(self)

    def _lifecycle(self, operation: str, **query):
        if self.is_new:
            raise HrefRequired(self, operation=operation)
        self.data_store.create(
            f'{self.href}/lifecycle/{operation}',
            VoidResource(self.data_store),
            return_type=VoidResource,
            query=query or None,
        )


class VoidResource(Resource):
    """Resource without a body, used for actions like lifecycle changes."""


class Reference:
    """Unmaterialized handle to a remote resource.

    Nothing is fetched until `resolve()` is called.
    """

    def __init__(self, data_store: DataStore, href: str, resource_type: Type[Resource]):
        self.data_store = data_store
        self.href = href
        self.type = resource_type

    def __repr__(self):
        return f'Reference({self.href!r}, {self.type.__name__})'

    def __eq__(self, other):
        if isinstance(other, Reference):
            return (self.href, self.type) == (other.href, other.type)
        return NotImplemented

    def __hash__(self):
        return hash((self.href, self.type))

    def resolve(self, query: Optional[Mapping[str, Any]] = None) -> Resource:
        return self.data_store.get_resource(self.href, self.type, query)


def iter_properties(klass: Type[Resource]) -> Iterable[Property]:
    seen = set()
    for base in klass.__mro__:
        for value in vars(base).values():
            if isinstance(value, Property) and value.name not in seen:
                seen.add(value.name)
                yield value


@commands.get_error_context.register(Resource)
def get_error_context(this: Resource) -> Dict[str, str]:
    return {
        'resource': 'this.__class__.__name__',
        'href': 'this.href',
    }