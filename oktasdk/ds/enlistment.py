from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional

import threading


class Enlistment(MutableMapping):
    """Lock-protected property map shared by several resource instances.

    Resources constructed with the same enlistment observe each other's
    changes. Iteration works on a snapshot of the keys.
    """

    def __init__(self, properties: Optional[Mapping[str, Any]] = None):
        self._lock = threading.RLock()
        self._data: Dict[str, Any] = {}
        self.set_properties(properties)

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def set_properties(self, properties: Optional[Mapping[str, Any]]):
        if properties is None:
            return
        with self._lock:
            self._data.clear()
            self._data.update(properties)

    def __getitem__(self, key: str) -> Any:
        with self._lock:
            return self._data[key]

    def __setitem__(self, key: str, value: Any):
        with self._lock:
            self._data[key] = value

    def __delitem__(self, key: str):
        with self._lock:
            del self._data[key]

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            keys = list(self._data)
        return iter(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __eq__(self, other):
        if isinstance(other, Mapping):
            with self._lock:
                return self._data == dict(other)
        return NotImplemented

    __hash__ = None

    def copy(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._data)

    def __repr__(self):
        return f'{type(self).__name__}({self.copy()!r})'
