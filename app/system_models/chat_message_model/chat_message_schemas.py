# app/system_models/chat_message_model/chat_message_schemas.py
from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Allowed values as constants
MESSAGE_ROLE = Literal["user", "assistant"]


class ChatMessageCreate(BaseModel):
    patient_id: int = Field(..., alias="patientId")
    message: str

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("message", mode="before")
    def validate_message(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Message is required")
        return v.strip()


class ChatMessageResponse(BaseModel):
    id: int
    message: str
    role: MESSAGE_ROLE
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatPatientSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ChatHistory(BaseModel):
    patient: ChatPatientSummary
    messages: List[ChatMessageResponse]


class AIReplyStatus(BaseModel):
    delivered: bool
    fallback_reason: Optional[str] = Field(None, alias="fallbackReason")

    model_config = ConfigDict(populate_by_name=True)


class ChatExchange(BaseModel):
    user_message: ChatMessageResponse = Field(..., alias="userMessage")
    ai_message: ChatMessageResponse = Field(..., alias="aiMessage")
    ai: AIReplyStatus

    model_config = ConfigDict(populate_by_name=True)


# Response envelopes
class ChatHistoryResponse(BaseModel):
    success: bool = True
    data: ChatHistory


class ChatExchangeResponse(BaseModel):
    success: bool = True
    data: ChatExchange


class ChatDeleteResponse(BaseModel):
    success: bool = True
    message: str
