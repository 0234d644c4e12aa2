from typing import Iterable


class GolfValidationError(ValueError):
    """Input rejected locally, before any call to the store."""


class MissingFieldsError(GolfValidationError):
    """A payload lacks one or more required fields."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")
