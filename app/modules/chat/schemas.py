from pydantic import Field, field_validator
from typing import List, Literal, Optional

from app.core.schemas import CamelModel


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    query: str = Field(..., min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)
    user_id: Optional[str] = None  # sent by older clients, identity comes from the token

    @field_validator("query")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be empty")
        return value.strip()


class ChatResponse(CamelModel):
    answer: str
