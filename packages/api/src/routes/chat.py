# This project was developed with assistance from AI tools.
"""Chat relay endpoint used by the embeddable widget.

Request:   {"message": "...", "customerDomain": "toyota.com", "conversationId": "..."|null}
Response:  {"response": "...", "conversationId": "..."}

Errors are returned as {"error": "..."}: 400 for invalid bodies or unknown
conversations, 401 for domains outside the allow-list, 500 for anything else
(provider or database failures; details are logged, never returned).
"""

import logging

from db import get_db
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.chat import ChatRequest, ChatResponse
from ..schemas.error import ErrorResponse
from ..services.relay import (
    CONVERSATION_NOT_FOUND_MESSAGE,
    PROCESSING_FAILED_MESSAGE,
    UNAUTHORIZED_DOMAIN_MESSAGE,
    ConversationNotFoundError,
    UnauthorizedDomainError,
    relay_message,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def chat(
    req: ChatRequest,
    session: AsyncSession = Depends(get_db),
) -> ChatResponse:
    """Relay one user turn to the assistant and return its reply."""
    try:
        result = await relay_message(
            session,
            message=req.message,
            customer_domain=req.customer_domain,
            conversation_id=req.conversation_id,
        )
    except UnauthorizedDomainError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED_DOMAIN_MESSAGE,
        ) from exc
    except ConversationNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=CONVERSATION_NOT_FOUND_MESSAGE,
        ) from exc
    except Exception as exc:
        logger.exception("Chat relay failed (domain=%s)", req.customer_domain)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PROCESSING_FAILED_MESSAGE,
        ) from exc

    return ChatResponse(response=result.response, conversation_id=result.conversation_id)
