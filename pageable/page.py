"""Page container: one response's items plus the response itself."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pageable.exceptions import ContractViolationError, TypeMismatchError

ItemT = TypeVar("ItemT")
ResponseT = TypeVar("ResponseT")
T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[ItemT, ResponseT]):
    """A single batch of items and the response that produced it.

    ``items`` is copied into a tuple on construction, so a page never sees
    later changes to the list it was built from.  ``response`` is kept as-is
    and is never mutated by the engine.
    """

    items: tuple[ItemT, ...]
    response: ResponseT

    def __init__(self, items: Sequence[ItemT], response: ResponseT) -> None:
        if items is None:
            raise ContractViolationError("page items must not be None")
        object.__setattr__(self, "items", tuple(items))
        object.__setattr__(self, "response", response)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ItemT]:
        return iter(self.items)

    def response_as(self, response_type: type[T]) -> T:
        """Return the original response typed as *response_type*.

        Raises ``TypeMismatchError`` if the response is not an instance of
        *response_type*.
        """
        if not isinstance(self.response, response_type):
            raise TypeMismatchError(response_type, self.response)
        return self.response
