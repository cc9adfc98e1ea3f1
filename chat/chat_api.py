"""FastAPI Chat Relay — HTTP front end for the webhook chat session.

Exposes the conversation and the endpoint settings over HTTP so any client
(browser frontend, Postman, curl) can chat with the configured remote agent.

Usage:
    python -m chat.run_chat --api
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from chat.config import CHAT_API_PORT, LOG_DIR, LOG_LEVEL
from chat.config_store import ConfigStore
from chat.service import ChatSession, InvalidEndpointError, validate_endpoint_url
from shared.logging_setup import setup_logger
from shared.models import Failure, Message, ProbeResult, Success

logger = setup_logger("chat_relay", LOG_DIR, "chat.log", level=LOG_LEVEL)


# ════════════════════════════════════════════════════════════
#  SESSION
# ════════════════════════════════════════════════════════════

_session: ChatSession | None = None


def get_session() -> ChatSession:
    """Return the process-wide chat session, creating it on first use."""
    global _session
    if _session is None:
        _session = ChatSession(ConfigStore())
    return _session


# ════════════════════════════════════════════════════════════
#  LIFESPAN
# ════════════════════════════════════════════════════════════


@asynccontextmanager
async def lifespan(app: FastAPI):
    # -- Startup --
    session = get_session()
    logger.info(
        "Chat relay API ready on port %d -> remote agent at %s",
        CHAT_API_PORT,
        session.endpoint_url,
    )
    yield
    # -- Shutdown --
    logger.info("Chat relay API shutting down")


# ════════════════════════════════════════════════════════════
#  FASTAPI APP
# ════════════════════════════════════════════════════════════

app = FastAPI(title="Webhook Chat Relay", lifespan=lifespan)


# ── Request / Response models ────────────────────────────

class ChatRequest(BaseModel):
    message: str = Field(description="User message text")


class ChatResponse(BaseModel):
    reply: Message
    outcome: Success | Failure = Field(description="Raw dispatch outcome")


class SettingsUpdate(BaseModel):
    url: str


class SettingsResponse(BaseModel):
    url: str
    is_default: bool


# ── POST /chat ───────────────────────────────────────────

@app.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, session: ChatSession = Depends(get_session)):
    if not req.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be empty")
    if session.busy:
        raise HTTPException(status_code=409, detail="A message is already being sent")

    logger.info("Chat request: message='%s'", req.message[:100])
    reply, outcome = await session.send(req.message)
    if not outcome.ok:
        logger.warning("Chat failed [%s]: %s", outcome.kind.value, outcome.detail)
    return ChatResponse(reply=reply, outcome=outcome)


# ── Conversation ─────────────────────────────────────────

@app.get("/messages", response_model=list[Message])
async def list_messages(session: ChatSession = Depends(get_session)):
    return list(session.log.messages)


@app.delete("/messages")
async def clear_messages(session: ChatSession = Depends(get_session)):
    if session.busy:
        raise HTTPException(status_code=409, detail="A message is being sent")
    session.clear()
    return {"status": "cleared"}


# ── Settings ─────────────────────────────────────────────

@app.get("/settings", response_model=SettingsResponse)
async def get_settings(session: ChatSession = Depends(get_session)):
    store = session.config_store
    return SettingsResponse(url=store.get(), is_default=store.is_default())


@app.put("/settings", response_model=SettingsResponse)
async def update_settings(req: SettingsUpdate, session: ChatSession = Depends(get_session)):
    """Save the endpoint unconditionally; probe it in the background."""
    try:
        session.save_endpoint(req.url)
    except InvalidEndpointError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    store = session.config_store
    return SettingsResponse(url=store.get(), is_default=store.is_default())


@app.post("/settings/test", response_model=ProbeResult)
async def probe_settings(req: SettingsUpdate, session: ChatSession = Depends(get_session)):
    try:
        url = validate_endpoint_url(req.url)
    except InvalidEndpointError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return await session.test_endpoint(url)


# ── Health check ─────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok", "service": "chat-relay"}


# ════════════════════════════════════════════════════════════
#  RUN
# ════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("chat.chat_api:app", host="0.0.0.0", port=CHAT_API_PORT, reload=True)
