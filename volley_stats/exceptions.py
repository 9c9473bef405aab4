"""Domain errors raised by the service layer."""


class NotFoundError(LookupError):
    """A key did not resolve to a row."""


class ConflictError(ValueError):
    """A uniqueness rule was violated."""

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value
