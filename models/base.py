from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Optional


def first_error_message(error: ValidationError) -> str:
    """The first validator message, without pydantic's "Value error, " prefix."""
    return error.errors()[0]['msg'].removeprefix("Value error, ")


class BaseGolfModel(BaseModel):
    """Base for models that forms edit one field at a time."""
    model_config = ConfigDict(validate_assignment=True)

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Set one field. A rejected value leaves the model unchanged and its message is returned."""
        if field_name not in type(self).model_fields:
            raise AttributeError(f"{type(self).__name__} has no field {field_name!r}")
        try:
            setattr(self, field_name, value)
        except ValidationError as e:
            return first_error_message(e)
        return None
