from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )

    @field_serializer("*", mode="wrap", when_used="unless-none")
    def serialize_values(self, value, handler, info):
        """Render datetimes as ISO 8601 strings and enums as their values."""
        result = handler(value)
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(result, Enum):
            return result.value
        return result
