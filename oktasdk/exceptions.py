from typing import Any, Dict, Iterable, List, Optional

import logging
import string


log = logging.getLogger(__name__)


class UnknownValue:

    def __str__(self):
        return '[UNKNOWN]'

    __repr__ = __str__


UNKNOWN_VALUE = UnknownValue()

# Context keys listed first, everything else follows in declaration order.
LEADING_KEYS = ('component', 'resource', 'href', 'status', 'code')


class BaseError(Exception):
    """Base for all errors raised by this package.

    Message is rendered from `template` using the error context. Context is
    built from keyword arguments and from `context`, which maps names to
    dotted attribute paths, for example `'href': 'this.href'`. `this` is the
    optional positional argument, the component the error is about.
    Components can contribute more paths via `commands.get_error_context`.
    """

    type: str = None
    template: str = None
    context: Dict[str, Any] = {}

    def __init__(self, this: Any = None, **kwargs):
        if this is None:
            self.type = 'system'
        else:
            self.type = getattr(type(this), 'error_type', 'system')
        self.context = build_context(self.context, this, kwargs)

    def __str__(self):
        lines = [self.message]
        if self.context:
            lines.append('  Context:')
            lines.extend(f'    {k}: {v}' for k, v in self.context.items())
        return '\n'.join(lines) + '\n'

    @property
    def message(self) -> str:
        context = dict(self.context)
        for name in _template_names(self.template):
            context.setdefault(name, UNKNOWN_VALUE)
        try:
            return self.template.format(**context)
        except (KeyError, IndexError, AttributeError):
            log.exception("Can't render error message for %s.", type(self).__name__)
            return self.template


def build_context(
    paths: Dict[str, Optional[str]],
    this: Any,
    kwargs: Dict[str, Any],
) -> Dict[str, Any]:
    scope = dict(kwargs)
    context: Dict[str, Any] = {}
    if this is not None:
        from oktasdk import commands
        paths = {**commands.get_error_context(this), **paths}
        scope['this'] = this
        context['component'] = f'{type(this).__module__}.{type(this).__name__}'

    used = set()
    for key, path in paths.items():
        root, *attrs = (path or key).split('.')
        if root not in scope:
            continue
        used.add(root)
        value = _follow(scope[root], attrs)
        if value is not UNKNOWN_VALUE:
            context[key] = value

    for key, value in kwargs.items():
        if key in used:
            continue
        if value is not None and not isinstance(value, (int, float, str)):
            value = str(value)
        context[key] = value

    order = _ordering(LEADING_KEYS, paths, kwargs)
    return {k: context[k] for k in sorted(context, key=order)}


def _follow(value: Any, attrs: List[str]) -> Any:
    for attr in attrs:
        if isinstance(value, dict):
            value = value.get(attr)
        elif hasattr(value, attr):
            value = getattr(value, attr)
        else:
            return UNKNOWN_VALUE
    return value


def _ordering(*groups: Iterable[str]):
    ranks: Dict[str, int] = {}
    for group in groups:
        for name in group:
            ranks.setdefault(name, len(ranks))
    return lambda key: (ranks.get(key, len(ranks)), key)


def _template_names(template: Optional[str]) -> List[str]:
    if not template:
        return []
    return [
        field.split('.')[0].split('[')[0].split('!')[0]
        for _, field, _, _ in string.Formatter().parse(template)
        if field
    ]


def error_response(error: BaseError) -> Dict[str, Any]:
    return {
        'type': error.type,
        'code': type(error).__name__,
        'template': error.template,
        'context': error.context,
        'message': error.message,
    }


class ResourceError(BaseError):
    """Raised when the API server responds with an HTTP error status.

    The first positional argument is the structured `Error` resource parsed
    from the response body.
    """

    template = "HTTP {status}, Okta {code} ({summary}), ErrorId {request_id}"
    context = {
        'status': 'this.status',
        'code': 'this.code',
        'summary': 'this.message',
        'request_id': 'this.id',
    }

    def __init__(self, error, **kwargs):
        self.error = error
        super().__init__(error, **kwargs)

    @property
    def status(self) -> int:
        return self.error.status

    @property
    def code(self) -> Optional[str]:
        return self.error.code

    @property
    def request_id(self) -> Optional[str]:
        return self.error.id

    @property
    def headers(self) -> Dict[str, Any]:
        return self.error.headers

    @property
    def causes(self):
        return self.error.causes


class IllegalState(BaseError, RuntimeError):
    template = "Illegal state: {reason}."


class EmptyResponseBody(IllegalState):
    template = "Unable to obtain resource data from the API server{source}."
    context = {
        'source': None,
    }


class NoMatchingConstructor(IllegalState):
    template = (
        "Resource class {resource} can't be constructed with {count} "
        "argument(s)."
    )


class EmptyCollection(IllegalState):
    template = (
        "This list is empty while it was expected to contain one (and only "
        "one) element."
    )


class MultipleItemsInCollection(IllegalState):
    template = (
        "Only a single resource was expected, but this list contains more "
        "than one item."
    )


class CollectionNotPersistable(IllegalState):
    template = "Collections cannot be persisted."


class InvalidArgument(BaseError, ValueError):
    template = "Invalid argument: {reason}."


class HrefRequired(InvalidArgument):
    template = (
        "'{operation}' may only be called on objects that have already been "
        "persisted and have an existing 'href' attribute."
    )


class PropertyTypeMismatch(InvalidArgument):
    template = (
        "{property!r} property value type does not match the specified "
        "type. Specified type: {expected}. Existing type: {given}."
    )


class ClassNotFound(BaseError, LookupError):
    template = "Unable to load class {name!r}. {hint}"
    context = {
        'hint': None,
    }


class InvalidDiscriminatorConfig(BaseError, ValueError):
    template = "Invalid discriminator configuration for {name!r}: {reason}."


class UriParseError(BaseError, ValueError):
    template = "Unable to parse URI {uri!r}: {reason}."


class MarshalingError(BaseError, ValueError):
    template = "Unable to convert {source} to {target}."


class RequiredConfigParam(BaseError):
    template = "{name!r} is a required configuration option."


class ConfigLocked(BaseError, RuntimeError):
    template = (
        "Configuration is locked, use `rc.fork()` if you need to change "
        "configuration."
    )
