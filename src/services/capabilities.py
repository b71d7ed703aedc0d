"""Optional integration capabilities injected into the services that use them."""

from dataclasses import dataclass
from typing import Generic, TypeGuard, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class Unavailable:
    """Integration is not configured or could not be loaded."""

    reason: str = "not configured"


@dataclass(frozen=True)
class Available(Generic[T]):
    """Integration is ready; ``handle`` is the object to call."""

    handle: T


Capability = Available[T] | Unavailable


def is_available(capability: Capability[T]) -> TypeGuard[Available[T]]:
    return isinstance(capability, Available)
