# app/AIsystem/ai_client.py
"""
AI Service Client
Forwards a chat message plus patient context to the external text-generation
service and degrades to a canned reply when the service is disabled or fails.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from config.aiconfig import ai_settings

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response from AI service"

# Fallback reasons
FALLBACK_DISABLED = "disabled"
FALLBACK_TIMEOUT = "timeout"
FALLBACK_TRANSPORT_ERROR = "transport_error"
FALLBACK_BAD_STATUS = "bad_status"
FALLBACK_BAD_PAYLOAD = "bad_payload"


def disabled_greeting(patient_name: str) -> str:
    return (
        f"Hello! Thank you for your inquiry about patient {patient_name}. "
        "As a dental assistant, I'd be happy to help you with any questions about dental care, "
        "appointments, or general information. Please note: For specific medical advice, "
        "always consult with a licensed dentist."
    )


def service_apology(patient_name: str) -> str:
    return (
        f"Thank you for your message regarding {patient_name}. As a dental assistant, "
        "I'm here to help. However, I'm currently experiencing technical difficulties connecting "
        "to our AI service. Please try again in a moment, or contact our support team for "
        "immediate assistance."
    )


@dataclass
class AIReply:
    """Outcome of one reply request: real service text or a fallback."""

    text: str
    delivered: bool
    fallback_reason: Optional[str] = None

    @classmethod
    def from_service(cls, text: str) -> "AIReply":
        return cls(text=text, delivered=True)

    @classmethod
    def fallback(cls, text: str, reason: str) -> "AIReply":
        return cls(text=text, delivered=False, fallback_reason=reason)


def build_patient_context(patient: Any) -> Dict[str, Any]:
    """Patient fields sent alongside the message."""
    dob = patient.date_of_birth
    return {
        "name": patient.name,
        "email": patient.email,
        "phone": patient.phone,
        "date_of_birth": dob.isoformat() if isinstance(dob, date) else dob,
        "medical_notes": patient.medical_notes,
    }


class AIServiceClient:
    """Thin async proxy to POST {AI_SERVICE_URL}/generate."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        enabled: bool = False,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
    ):
        self._http = http_client
        self.enabled = enabled
        self.generate_url = f"{base_url.rstrip('/')}/generate"
        self.timeout = timeout

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient) -> "AIServiceClient":
        return cls(
            http_client,
            enabled=ai_settings.AI_SERVICE_ENABLED,
            base_url=ai_settings.AI_SERVICE_URL,
            timeout=ai_settings.AI_SERVICE_TIMEOUT,
        )

    @staticmethod
    def _extract_text(body: Any) -> str:
        if not isinstance(body, dict):
            raise ValueError(f"Expected a JSON object, got {type(body).__name__}")
        text = body.get("response") or body.get("message") or NO_RESPONSE_TEXT
        if not isinstance(text, str):
            raise ValueError(f"Expected reply text, got {type(text).__name__}")
        return text

    async def generate_reply(self, message: str, patient: Any) -> AIReply:
        """
        Request a reply for `message` about `patient`.

        Never raises: every failure is reported as a fallback AIReply.
        """
        if not self.enabled:
            return AIReply.fallback(disabled_greeting(patient.name), FALLBACK_DISABLED)

        payload = {"message": message, "patient_context": build_patient_context(patient)}

        try:
            response = await self._http.post(
                self.generate_url, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            text = self._extract_text(response.json())
        except httpx.TimeoutException as e:
            logger.error(f"❌ AI service timed out after {self.timeout}s: {e!r}")
            reason = FALLBACK_TIMEOUT
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ AI service returned {e.response.status_code}")
            reason = FALLBACK_BAD_STATUS
        except httpx.HTTPError as e:
            logger.error(f"❌ AI service error: {e!r}")
            reason = FALLBACK_TRANSPORT_ERROR
        except ValueError as e:
            logger.error(f"❌ AI service sent an unreadable body: {e}")
            reason = FALLBACK_BAD_PAYLOAD
        else:
            logger.info(f"✅ AI reply received: {len(text)} chars")
            return AIReply.from_service(text)

        return AIReply.fallback(service_apology(patient.name), reason)


def get_ai_client(request: Request) -> AIServiceClient:
    """FastAPI dependency returning the client built in the app lifespan."""
    return request.app.state.ai_client
