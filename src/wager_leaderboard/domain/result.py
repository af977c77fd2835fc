"""Ok/Err pair returned across the acquisition seam.

Acquirers return ``Ok(records)`` or ``Err(AcquisitionError)`` and the
pipeline matches on the variant instead of catching exceptions itself.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeAlias, TypeVar

if TYPE_CHECKING:
    from wager_leaderboard.domain.record import Record
    from wager_leaderboard.ingest.errors import AcquisitionError

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E


Result: TypeAlias = Ok[T] | Err[E]

# What one acquisition attempt yields: the extracted rows, or why there are none.
Acquisition: TypeAlias = "Result[list[Record], AcquisitionError]"
