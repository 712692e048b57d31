# app/system_services/chat_services.py
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.AIsystem.ai_client import AIReply, AIServiceClient
from app.system_models.chat_message_model.chat_message_model import ChatMessage, MessageRole
from app.system_models.patient_model.patient_model import Patient


async def get_chat_history(
    db: AsyncSession, patient_id: int, limit: int = 50
) -> Optional[Tuple[Patient, List[ChatMessage]]]:
    """Oldest-first messages for a patient, or None if the patient does not exist."""
    patient = await db.get(Patient, patient_id)
    if patient is None:
        return None

    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.patient_id == patient_id)
        .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        .limit(limit)
    )
    return patient, list(result.scalars().all())


async def add_chat_message(
    db: AsyncSession,
    patient_id: int,
    user_id: Optional[int],
    message: str,
    role: MessageRole,
) -> ChatMessage:
    db_message = ChatMessage(
        patient_id=patient_id,
        user_id=user_id,
        message=message,
        role=MessageRole(role).value,
    )
    db.add(db_message)
    await db.commit()
    await db.refresh(db_message)
    return db_message


async def send_chat_message(
    db: AsyncSession,
    ai_client: AIServiceClient,
    patient_id: int,
    user_id: Optional[int],
    message: str,
) -> Optional[Tuple[ChatMessage, ChatMessage, AIReply]]:
    """
    Store the user's message, ask the AI service for a reply and store that too.

    Returns None if the patient does not exist. The user's message is committed
    before the AI call so it survives a slow or failing service.
    """
    patient = await db.get(Patient, patient_id)
    if patient is None:
        return None

    user_message = await add_chat_message(db, patient_id, user_id, message, MessageRole.USER)

    reply = await ai_client.generate_reply(message, patient)

    ai_message = await add_chat_message(
        db, patient_id, user_id, reply.text, MessageRole.ASSISTANT
    )
    return user_message, ai_message, reply


async def delete_chat_history(db: AsyncSession, patient_id: int) -> int:
    """Remove every message for a patient. Returns the number deleted."""
    result = await db.execute(delete(ChatMessage).where(ChatMessage.patient_id == patient_id))
    await db.commit()
    return result.rowcount
