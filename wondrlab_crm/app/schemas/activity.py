"""
Pydantic models for the activity log.

Activity entries are written by the services whenever a record is
created, updated, deleted or changes status, and are shown on the
dashboard as "Recent Activity".
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


class ActivityRead(BaseModel):
    id: int
    action: str
    object_type: str
    object_id: Optional[int] = None
    summary: Optional[str] = None
    actor: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime

    model_config = {
        "from_attributes": True,
    }

    @field_validator("details", mode="before")
    @classmethod
    def _decode_details(cls, value: Any) -> Any:
        # SQLite stores the payload as JSON text.
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return {"raw": value}
        return value
