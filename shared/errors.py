from __future__ import annotations


class InvalidInputError(ValueError):
    """A tick did not carry exactly one value per channel."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"expected {expected} channel values, got {received}")
        self.expected = expected
        self.received = received


__all__ = ["InvalidInputError"]
