"""
Common Value Objects

Value objects used across multiple domains:
- StayPeriod: A half-open range of logical time (check-in to check-out)
- LocationHash: Fixed-length opaque digest identifying a property location
"""

from dataclasses import dataclass

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class StayPeriod(ValueObject):
    """
    Stay period value object

    Represents a range from start (inclusive) to end (exclusive) on the
    logical clock. Used for booking periods and availability checks.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'StayPeriod') -> bool:
        """
        Check if this period overlaps with another

        Note: end is exclusive, so adjacent periods don't overlap.

        Examples:
            - StayPeriod(25, 28) overlaps with StayPeriod(27, 30) -> True
            - StayPeriod(25, 28) overlaps with StayPeriod(28, 31) -> False (adjacent)
        """
        if not isinstance(other, StayPeriod):
            raise TypeError("Can only check overlap with another StayPeriod")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start < other.end and
                self.end > other.start)

    def contains(self, instant: int) -> bool:
        """Start is inclusive, end is exclusive"""
        return self.start <= instant < self.end

    def __len__(self) -> int:
        """Number of clock units covered by the stay"""
        return self.end - self.start

    def __str__(self):
        return f"[{self.start}, {self.end})"

    def __repr__(self):
        return f"StayPeriod({self.start}, {self.end})"


@dataclass(frozen=True)
class LocationHash(ValueObject):
    """
    Location hash value object

    Exactly 32 opaque bytes. The booking layer never interprets the content.
    """
    digest: bytes

    SIZE = 32

    def __post_init__(self):
        if not isinstance(self.digest, (bytes, bytearray)):
            raise TypeError("Location hash must be bytes")
        if len(self.digest) != self.SIZE:
            raise ValueError(
                f"Location hash must be exactly {self.SIZE} bytes, got {len(self.digest)}"
            )
        # Normalize bytearray input so the value stays hashable
        object.__setattr__(self, 'digest', bytes(self.digest))

    @classmethod
    def is_valid(cls, value) -> bool:
        return isinstance(value, (bytes, bytearray)) and len(value) == cls.SIZE

    def hex(self) -> str:
        return self.digest.hex()

    def __repr__(self):
        return f"LocationHash({self.digest.hex()[:12]}...)"
