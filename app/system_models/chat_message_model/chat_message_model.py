# app/system_models/chat_message_model/chat_message_model.py
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)

    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    message = Column(Text, nullable=False)
    role = Column(String(50), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="check_message_role_values"),
        Index("idx_chat_messages_patient_id", "patient_id", "created_at"),
    )

    patient = relationship("Patient", back_populates="chat_messages")
    author = relationship("User", back_populates="chat_messages")

    def __repr__(self):
        return f"<ChatMessage {self.id}: patient={self.patient_id} role={self.role}>"
