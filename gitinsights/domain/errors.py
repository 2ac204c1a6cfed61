"""Errors raised while turning API payloads into domain results."""


class DecodeError(ValueError):
    """Raised when an API payload is missing a required field or has the wrong shape."""

    def __init__(self, entity: str, field: str, detail: str = "missing or invalid"):
        super().__init__(f"Cannot decode {entity}: field '{field}' is {detail}")
        self.entity = entity
        self.field = field


class EmptyResultError(LookupError):
    """Raised when a reduction such as "oldest item" is asked of an empty list."""
    pass
