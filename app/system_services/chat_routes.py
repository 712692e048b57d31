# app/system_services/chat_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.AIsystem.ai_client import AIServiceClient, get_ai_client
from app.database.connection import get_db
from app.shared.query_params import positive_int_or_default
from app.system_models.chat_message_model.chat_message_schemas import (
    AIReplyStatus,
    ChatDeleteResponse,
    ChatExchange,
    ChatExchangeResponse,
    ChatHistory,
    ChatHistoryResponse,
    ChatMessageCreate,
    ChatMessageResponse,
    ChatPatientSummary,
)
from app.system_services.chat_services import (
    delete_chat_history,
    get_chat_history,
    send_chat_message,
)
from app.users.auth_dependencies import get_current_user_id

logger = logging.getLogger(__name__)

# All routes require authentication
router = APIRouter(dependencies=[Depends(get_current_user_id)])

DEFAULT_HISTORY_LIMIT = 50


@router.get("/{patient_id}", response_model=ChatHistoryResponse)
async def get_chat_history_endpoint(
    patient_id: int,
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Chat transcript for a patient, oldest message first."""
    limit = positive_int_or_default(limit, DEFAULT_HISTORY_LIMIT)
    try:
        history = await get_chat_history(db, patient_id, limit)
    except SQLAlchemyError:
        logger.exception("❌ Get chat history error")
        raise HTTPException(status_code=500, detail="Failed to fetch chat history")

    if history is None:
        raise HTTPException(status_code=404, detail="Patient not found")

    patient, messages = history
    return ChatHistoryResponse(
        data=ChatHistory(
            patient=ChatPatientSummary.model_validate(patient),
            messages=[ChatMessageResponse.model_validate(m) for m in messages],
        )
    )


@router.post("", response_model=ChatExchangeResponse)
async def send_message_endpoint(
    payload: ChatMessageCreate,
    db: AsyncSession = Depends(get_db),
    ai_client: AIServiceClient = Depends(get_ai_client),
    user_id: int = Depends(get_current_user_id),
):
    """
    Store the user's message and the assistant's reply.

    The reply comes from the external AI service; when that service is disabled
    or fails, a canned reply is stored instead and `ai.delivered` is false.
    """
    try:
        exchange = await send_chat_message(
            db, ai_client, payload.patient_id, user_id, payload.message
        )
    except SQLAlchemyError:
        logger.exception("❌ Send message error")
        raise HTTPException(status_code=500, detail="Failed to send message")

    if exchange is None:
        raise HTTPException(status_code=404, detail="Patient not found")

    user_message, ai_message, reply = exchange
    if not reply.delivered:
        logger.warning(
            f"⚠️ Fallback reply used for patient {payload.patient_id}: {reply.fallback_reason}"
        )

    return ChatExchangeResponse(
        data=ChatExchange(
            user_message=ChatMessageResponse.model_validate(user_message),
            ai_message=ChatMessageResponse.model_validate(ai_message),
            ai=AIReplyStatus(delivered=reply.delivered, fallback_reason=reply.fallback_reason),
        )
    )


@router.delete("/{patient_id}", response_model=ChatDeleteResponse)
async def delete_chat_history_endpoint(patient_id: int, db: AsyncSession = Depends(get_db)):
    try:
        deleted = await delete_chat_history(db, patient_id)
    except SQLAlchemyError:
        logger.exception("❌ Delete chat history error")
        raise HTTPException(status_code=500, detail="Failed to delete chat history")

    logger.info(f"🗑️ Deleted {deleted} chat messages for patient {patient_id}")
    return ChatDeleteResponse(message="Chat history deleted successfully")
