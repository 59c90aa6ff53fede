# This project was developed with assistance from AI tools.
"""Chat relay request/response schemas (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """One user turn sent by the widget."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    customer_domain: str | None = Field(default=None, alias="customerDomain")
    conversation_id: str | None = Field(default=None, alias="conversationId")


class ChatResponse(BaseModel):
    """Assistant reply plus the conversation handle to resume with."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    conversation_id: str = Field(alias="conversationId")
