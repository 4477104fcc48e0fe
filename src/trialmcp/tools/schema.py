"""Domain models shared by the trial tools."""

from __future__ import annotations

from pydantic import BaseModel


class ToolResponse(BaseModel):
    """Text returned to the LLM runtime, flagged when it describes a failure."""

    text: str
    is_error: bool = False
