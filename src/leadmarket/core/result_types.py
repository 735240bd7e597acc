# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Result types for expected failures that callers must handle.

Lifecycle and ledger operations return ``Ok(value)`` or ``Err(error)``
instead of raising; refusals such as an illegal transition or a reached
lead cap are ordinary outcomes, not faults.
"""

from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

from attrs import frozen
from beartype import beartype

T = TypeVar("T")
E = TypeVar("E")


@frozen
class Ok(Generic[T]):
    """Success result wrapper."""

    value: T

    @beartype
    def is_ok(self) -> bool:
        """Check if result is Ok."""
        return True

    @beartype
    def is_err(self) -> bool:
        """Check if result is Err."""
        return False

    @property
    def ok_value(self) -> T:
        """Get the Ok value."""
        return self.value

    @property
    def err_value(self) -> None:
        """Get the Err value (None for Ok)."""
        return None

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the success value."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Raise ValueError as this is Ok."""
        raise ValueError("Called unwrap_err on Ok value")


@frozen
class Err(Generic[E]):
    """Error result wrapper."""

    error: E

    @beartype
    def is_ok(self) -> bool:
        """Check if result is Ok."""
        return False

    @beartype
    def is_err(self) -> bool:
        """Check if result is Err."""
        return True

    @property
    def ok_value(self) -> None:
        """Get the Ok value (None for Err)."""
        return None

    @property
    def err_value(self) -> E:
        """Get the Err value."""
        return self.error

    def unwrap(self) -> NoReturn:
        """Raise ValueError as this is Err."""
        raise ValueError(f"Called unwrap on Err value: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Return default value."""
        return default

    def unwrap_err(self) -> E:
        """Get the error value."""
        return self.error


if TYPE_CHECKING:
    Result = Ok[T] | Err[E]
else:

    class Result(Generic[T, E]):
        """Runtime factory so ``Result[T, E]`` works in annotations."""

        @staticmethod
        def ok(value: T) -> Ok[T]:
            """Create an Ok result."""
            return Ok(value)

        @staticmethod
        def err(error: E) -> Err[E]:
            """Create an Err result."""
            return Err(error)

        def __class_getitem__(cls, params: Any) -> Any:
            """Resolve ``Result[T, E]`` to ``Ok | Err`` for runtime checkers."""
            return Ok | Err
