"""Queue message and outcome models."""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field, field_validator


class MessageOutcome(str, Enum):
    """What the broker should do with a processed message."""

    ACK = "ack"
    NACK = "nack"


class QueueMessage(BaseModel):
    """A message delivered by the repository's event queue."""

    id: str = Field(..., min_length=1, description="Broker message id")
    headers: Dict[str, str] = Field(default_factory=dict, description="Message headers")
    body: str = Field("", description="Message payload, JSON describing the created resource")

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_headers(cls, v):
        """Coerce header values (timestamps, counters) to text."""
        if isinstance(v, dict):
            return {str(key): "" if value is None else str(value) for key, value in v.items()}
        return v
