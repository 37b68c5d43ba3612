"""FastAPI relay application.

Receives a conversation, prepends the system prompt, forwards it to the
selected provider and returns a normalized reply.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import RelayConfig
from ..llm import AttachmentError, ChatMessage, LLMProvider
from ..prompts import get_system_prompt
from .registry import ProviderRegistry
from .schemas import ChatRequest, ChatResponse, ErrorResponse, HealthResponse, TextBlock

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Turn pydantic validation errors into a single readable sentence."""
    errors = exc.errors()
    for err in errors:
        loc = err.get("loc", ())
        if err.get("type") == "json_invalid":
            return "Request body is not valid JSON"
        if loc[-1:] == ("messages",) and err.get("type") in ("missing", "too_short", "list_type"):
            return "Messages array is required"

    details = []
    for err in errors:
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "Invalid request: " + "; ".join(details)


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(body: ChatRequest, request: Request):
    """Relay a conversation to Claude or Gemini."""
    registry: ProviderRegistry = request.app.state.registry
    config: RelayConfig = request.app.state.config

    last = body.messages[-1]
    logger.info(
        "Relaying %d message(s) to %s (last: %s, %d file(s))",
        len(body.messages), body.model, last.role, len(last.files),
    )

    try:
        provider = registry.get(body.model)
        messages = [ChatMessage(role="system", content=get_system_prompt()), *body.messages]
        result = await provider.chat_completion(
            messages,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    except AttachmentError:
        # answered as 400 by the app-level handler
        raise
    except Exception as e:
        logger.exception("Error in AI chat")
        return error_response(500, str(e) or "Internal server error")

    logger.info("Reply from %s: %d chars, usage=%s", result.model, len(result.content), result.usage)
    return ChatResponse(
        content=[TextBlock(text=result.content)],
        model=result.model,
        usage=result.usage,
    )


async def health(request: Request) -> HealthResponse:
    registry: ProviderRegistry = request.app.state.registry
    return HealthResponse(providers=registry.available())


def create_app(
    config: RelayConfig | None = None,
    providers: dict[str, LLMProvider] | None = None,
) -> FastAPI:
    """Create the relay application.

    Args:
        config: Relay configuration (default: read from environment)
        providers: Pre-built providers keyed by name, used instead of
            creating SDK clients from API keys

    Returns:
        Configured FastAPI app
    """
    config = config or RelayConfig.from_env()
    registry = ProviderRegistry(config, providers)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Relay ready; providers available: %s", ", ".join(registry.available()) or "none")
        yield
        await registry.close()

    app = FastAPI(title="OwnChat Relay", lifespan=lifespan)
    app.state.config = config
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.warning("Malformed request to %s: %s", request.url.path, message)
        return error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(AttachmentError)
    async def attachment_exception_handler(request: Request, exc: AttachmentError):
        logger.warning("Rejected attachment: %s", exc)
        return error_response(400, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return error_response(500, str(exc) or "Internal server error")

    app.include_router(router, prefix="/api")
    app.add_api_route("/health", health, methods=["GET"], response_model=HealthResponse)
    return app
