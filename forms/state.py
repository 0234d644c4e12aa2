from enum import Enum
from pydantic import BaseModel
from typing import Optional


class Status(str, Enum):
    """What a form screen is doing right now."""
    IDLE = "idle"
    LOADING = "loading"
    SAVING = "saving"
    ERROR = "error"


class ScreenState(BaseModel):
    """Status plus the message shown in the error banner, if any."""
    status: Status = Status.IDLE
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "ScreenState":
        return cls(status=Status.IDLE)

    @classmethod
    def loading(cls) -> "ScreenState":
        return cls(status=Status.LOADING)

    @classmethod
    def saving(cls) -> "ScreenState":
        return cls(status=Status.SAVING)

    @classmethod
    def error(cls, message: str) -> "ScreenState":
        return cls(status=Status.ERROR, message=message)

    @property
    def is_busy(self) -> bool:
        return self.status in (Status.LOADING, Status.SAVING)
