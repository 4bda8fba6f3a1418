from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a palette, preset or parameter set is rejected.

    ``field`` names the offending entry (dotted for nested palette values, e.g.
    ``perceived.red.g``) so callers can report it back verbatim.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class EncodingError(ValueError):
    """Raised when an image cannot be serialized, e.g. it has no pixels."""
