"""Explicit success/failure values for capability calls.

The pipeline never lets a provider exception escape as message content:
every detect/translate/send call is turned into an Ok or an Err and the
caller branches on both.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from relay.core.exceptions import RelayError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful capability call."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed capability call, carrying a structured relay error."""

    error: RelayError


Result = Union[Ok[T], Err]
