"""Guava-like argument and state checks used throughout cututils."""
from typing import Any, Iterable, Tuple, TypeVar, Union

# Disable naming convention warnings for type aliases
# pylint: disable=invalid-name
# Type annotation from TypeShed for classinfo argument of isinstance and issubclass

_ClassInfo = Union[type, Tuple[Union[type, Tuple], ...]]


T = TypeVar("T")


def check_arg(result: Any, msg: str = None, msg_args: Tuple = None) -> None:
    """
    Raise a `ValueError` if *result* is false-y.

    *msg* is %-interpolated with *msg_args* only when the check fails.
    """
    if not result:
        if msg:
            raise ValueError(msg % (msg_args or ()))
        else:
            raise ValueError()


def check_isinstance(item: T, classinfo: _ClassInfo) -> T:
    if not isinstance(item, classinfo):
        raise TypeError(
            f"Expected instance of type {classinfo} but got type {type(item)} for {item}"
        )
    return item


def check_all_isinstance(items: Iterable[Any], classinfo: _ClassInfo) -> None:
    for item in items:
        check_isinstance(item, classinfo)


def check_non_negative(value: int, name: str = "value") -> int:
    """
    Check *value* is an integer offset no smaller than zero and return it.

    `bool`s are rejected even though they are technically `int`s.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected {name} to be an int but got {value!r}")
    check_arg(value >= 0, "Expected %s to be non-negative but got %s", (name, value))
    return value
