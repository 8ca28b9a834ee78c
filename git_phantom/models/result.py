"""Tagged success/failure outcomes returned by git-phantom operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from git_phantom.exceptions import GitPhantomError

T = TypeVar("T")
E = TypeVar("E", bound=GitPhantomError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a typed error."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True


Result = Union[Ok[T], Err[E]]


def is_ok(result: "Result") -> bool:
    return isinstance(result, Ok)


def is_err(result: "Result") -> bool:
    return isinstance(result, Err)
