"""Shared API schema pieces."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel

from securyflex.modules.presentation.styles import StatusStyle


def _assume_utc(value: datetime) -> datetime:
    # Naive timestamps from clients are UTC; mixing naive and aware breaks comparisons
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_assume_utc)]


class StatusStyleResponse(BaseModel):
    color: str
    icon: str
    label_key: str
    requires_attention: bool

    @classmethod
    def from_style(cls, style: StatusStyle) -> "StatusStyleResponse":
        return cls(
            color=style.color,
            icon=style.icon,
            label_key=style.label_key,
            requires_attention=style.requires_attention,
        )
