"""Error taxonomy for memora."""


class MemoraError(Exception):
    """Base class for all memora errors."""


class InvalidRating(MemoraError, ValueError):
    """A confidence rating outside the integers 0..5."""

    def __init__(self, rating: object):
        self.rating = rating
        super().__init__(f"Rating must be an integer from 0 to 5, got {rating!r}")


class UnknownEntityReference(MemoraError, KeyError):
    """A card, deck or session id that no longer exists."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: {entity_id}")

    def __str__(self) -> str:
        return f"Unknown {self.kind}: {self.entity_id}"


class SessionStateError(MemoraError):
    """A study session transition that its current state does not allow."""


class StoreCorrupted(MemoraError):
    """The persisted document exists but cannot be parsed."""
