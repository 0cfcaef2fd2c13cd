"""Shared schema base and helpers."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Plain ``{message, statusCode}`` body."""

    message: str
    statusCode: int


def parse_calendar_date(value: object) -> object:
    """Accept ``YYYY-MM-DD`` or a full ISO datetime, keeping only the date.

    Anything else is returned untouched for the ``date`` type to reject.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                return value
        try:
            return date.fromisoformat(text)
        except ValueError:
            return value
    return value
