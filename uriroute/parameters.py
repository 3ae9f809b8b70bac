"""
Parameters - ordered, immutable name -> value bindings.

Used both to expand templates (values supplied by the caller) and as the
result of resolving a path against a pattern (values extracted by a match).
"""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Tuple, Union


class Parameters(Mapping[str, str]):
    """
    Read-only mapping of variable names to bound string values.

    Insertion order is preserved. Compares equal to any mapping holding the
    same items, so ``resolve(...) == {"id": "3"}`` works in tests and callers.
    """

    __slots__ = ("_data",)

    def __init__(
        self,
        items: Optional[Union[Mapping[str, str], list[Tuple[str, str]]]] = None,
        **kwargs: str,
    ):
        data: Dict[str, str] = {}
        if items:
            if isinstance(items, Mapping):
                data.update(items)
            else:
                for key, value in items:
                    data[key] = value
        data.update(kwargs)
        self._data = data

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"Parameters({self._data!r})"

    def __hash__(self) -> int:
        return hash(tuple(self._data.items()))

    def with_values(self, **values: str) -> Parameters:
        """Return a copy with *values* added or replaced."""
        return Parameters({**self._data, **values})

    def to_dict(self) -> Dict[str, str]:
        """Convert to a regular dict."""
        return dict(self._data)


EMPTY_PARAMETERS = Parameters()
