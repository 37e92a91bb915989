from fastapi import APIRouter, Depends, Request

from chat_relay.core.rate_limit import enforce_rate_limit
from chat_relay.schemas.chat import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
)
from chat_relay.services.relay_service import RelayService

router = APIRouter(tags=["Chat"])

_error_responses = {
    400: {"model": ErrorResponse, "description": "Prompt rejected by moderation"},
    429: {"model": ErrorResponse, "description": "Client or global rate limit hit"},
    500: {"model": ErrorResponse, "description": "Upstream or unexpected failure"},
}


def get_relay_service(request: Request) -> RelayService:
    return request.app.state.relay_service


@router.post(
    "/ai",
    response_model=GenerateResponse,
    responses=_error_responses,
    dependencies=[Depends(enforce_rate_limit)],
)
async def generate(
    body: GenerateRequest,
    service: RelayService = Depends(get_relay_service),
) -> GenerateResponse:
    """Legacy single-prompt endpoint.

    Runs the prompt through moderation and returns the completion as
    ``{"result": ...}``.
    """
    result = await service.generate(body.prompt)
    return GenerateResponse(result=result)


@router.post(
    "/api/openai",
    response_model=ChatResponse,
    responses=_error_responses,
    dependencies=[Depends(enforce_rate_limit)],
)
async def chat(
    body: ChatRequest,
    service: RelayService = Depends(get_relay_service),
) -> ChatResponse:
    """Chat endpoint with optional prior turns.

    Only the most recent context turns are forwarded upstream.
    """
    reply = await service.reply(body.message, body.context)
    return ChatResponse(reply=reply)
