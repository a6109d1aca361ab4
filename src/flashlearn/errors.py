"""Exceptions raised by flashlearn."""


class FlashlearnError(Exception):
    """Base exception for all flashlearn errors."""
    pass


class SetNotFoundError(FlashlearnError):
    """Raised when a set id has no backing record or could not be loaded."""

    def __init__(self, set_id: str):
        super().__init__(f"Set not found: {set_id}")
        self.set_id = set_id


class EmptySetError(FlashlearnError):
    """Raised when a set exists but holds no flashcards."""

    def __init__(self, set_id: str):
        super().__init__("This set has no flashcards")
        self.set_id = set_id


class GenerationError(FlashlearnError):
    """Raised when the AI gateway is unreachable or refuses the request."""
    pass
