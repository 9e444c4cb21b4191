"""Explicit "unset" marker for optional parameters.

A parameter that the declarer left out is ``UNSET``. Any other value, zero
values included, is an explicit request for that value. ``None`` never
appears in parsed parameters.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, Union

_T = TypeVar("_T")


class _Unset:
    """Singleton type of UNSET."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Unset:
        return self

    def __reduce__(self) -> str:
        return "UNSET"


UNSET = _Unset()

Maybe = Union[_T, _Unset]


def is_set(value: Any) -> bool:
    return value is not UNSET


def maybe(value: Any, convert: Callable[[Any], _T] | None = None) -> Maybe[_T]:
    """Parse a declared value: None becomes UNSET, anything else is kept (and converted)."""
    if value is None or value is UNSET:
        return UNSET
    return convert(value) if convert is not None else value


def value_or(value: Maybe[_T], default: _T) -> _T:
    return default if value is UNSET else value  # type: ignore[return-value]


def set_fields(values: dict[str, Any]) -> dict[str, Any]:
    """Drop UNSET entries from a payload mapping."""
    return {k: v for k, v in values.items() if v is not UNSET}


def is_zero(value: Any) -> bool:
    """True for UNSET, None and the zero value of common types."""
    if value is UNSET or value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, dict, tuple, set)):
        return len(value) == 0
    return False
