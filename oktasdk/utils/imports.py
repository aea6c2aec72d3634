import importlib
import inspect
from typing import Any
from typing import Type

from oktasdk.exceptions import ClassNotFound


def importstr(path: str) -> Any:
    if ':' not in path:
        raise ClassNotFound(
            name=path,
            hint=(
                "Python path must be in 'dotted.path:Name' form."
            ),
        )
    module_name, name = path.split(':', 1)
    try:
        module = importlib.import_module(module_name)
        return getattr(module, name)
    except (ImportError, AttributeError) as e:
        raise ClassNotFound(
            name=path,
            hint=_get_import_hint(module_name),
            error=f'{type(e).__name__}: {e}',
        ) from e


def _get_import_hint(module_name: str) -> str:
    if 'impl' in module_name.split('.'):
        return (
            "This class lives in an implementation package, make sure the "
            "package providing the resource implementations is installed."
        )
    return ''


def full_class_name(obj: Any) -> str:
    klass: Type
    if not inspect.isclass(obj):
        klass = type(obj)
    else:
        klass = obj
    return f'{klass.__module__}.{klass.__name__}'


def class_path(klass: Type) -> str:
    return f'{klass.__module__}:{klass.__qualname__}'
