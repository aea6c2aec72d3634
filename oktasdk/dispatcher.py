from __future__ import annotations

from typing import Any, Callable, Dict, TypeVar

from multipledispatch.dispatcher import Dispatcher
from multipledispatch.dispatcher import str_signature

F = TypeVar('F', bound=Callable[..., Any])

_registry: Dict[str, Command] = {}


class Command(Dispatcher):
    """Function dispatched on the types of all positional arguments."""

    def register(self, *types) -> Callable[[F], F]:
        if not types:
            raise TypeError(f"{self.name}: implementation argument types are required.")

        def decorator(func: F) -> F:
            self.add(types, func)
            return func

        return decorator

    def resolve(self, *types) -> Callable:
        func = self.dispatch(*types)
        if func is None:
            raise NotImplementedError(
                f"{self.name} is not implemented for <{str_signature(types)}>."
            )
        return func

    def __call__(self, *args, **kwargs):
        return self.resolve(*map(type, args))(*args, **kwargs)


def command(func: Callable) -> Command:
    """Declare a command, the decorated function only provides name and docs."""
    name = func.__name__
    if name in _registry:
        raise ValueError(f"Command {name!r} is already declared.")
    _registry[name] = Command(name, doc=func.__doc__)
    return _registry[name]
