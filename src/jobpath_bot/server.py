"""FastAPI application exposing chat and the CV builder over HTTP."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence
from weakref import WeakValueDictionary

import uvicorn
from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from .chat import ChatGatewayError
from .config import AppSettings
from .cv_schema import CVDocument, DocumentShapeError
from .interview import InterviewStateError
from .pdf_exporter import PDFRenderError
from .projector import TemplateProjectionError
from .prompts import INTRO_MESSAGE
from .session_store import SessionRepository, new_session_id
from .sessions import ConversationState, JobPathSession, SessionServices

logger = logging.getLogger(__name__)

PDF_HEADERS = {"Content-Disposition": 'attachment; filename="cv.pdf"'}


class ChatRequest(BaseModel):
    userMessage: str = ""
    userContext: List[str] = Field(default_factory=list)


class MessageRequest(BaseModel):
    message: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _parse_document(payload: Dict[str, Any]) -> CVDocument:
    try:
        return CVDocument.from_dict(payload)
    except DocumentShapeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def create_app(
    settings: AppSettings,
    *,
    services: Optional[SessionServices] = None,
    repository: Optional[SessionRepository] = None,
    allow_origins: Sequence[str] | None = None,
) -> FastAPI:
    """Create the FastAPI app; collaborators may be injected for testing."""

    app = FastAPI(title="JobPath Bot")

    origins = list(allow_origins) if allow_origins else ["*"]
    allow_credentials = origins != ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    shared = services or SessionServices.from_settings(settings)
    store = repository or SessionRepository(
        redis_url=settings.redis_url,
        ttl_seconds=settings.session_ttl,
    )
    # One lock per live conversation so turns never interleave.
    locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def _lock_for(session_id: str) -> asyncio.Lock:
        lock = locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            locks[session_id] = lock
        return lock

    def _load_session(session_id: str) -> JobPathSession:
        state = store.load(session_id)
        if state is None:
            raise HTTPException(status_code=404, detail="Unknown session.")
        return JobPathSession(shared, state)

    def _session_payload(session: JobPathSession) -> Dict[str, Any]:
        interview = session.state.interview
        return {
            "mode": interview.mode.value,
            "step": interview.current_step,
            "totalSteps": shared.engine.total_steps,
            "cvReady": session.cv_ready,
        }

    @app.get("/intro")
    async def intro() -> Dict[str, str]:
        return {"intro": INTRO_MESSAGE}

    @app.post("/chat", response_model=None)
    async def chat(payload: ChatRequest) -> Dict[str, str] | JSONResponse:
        if not payload.userMessage.strip():
            return _error(400, "No message provided")
        try:
            reply = await shared.chat_agent.reply(
                payload.userMessage, payload.userContext
            )
        except ChatGatewayError:
            return _error(500, "Failed to get response")
        return {"reply": reply}

    @app.post("/enhance-cv")
    async def enhance_cv(
        payload: Dict[str, Any] = Body(...),
    ) -> Dict[str, Any]:
        document = _parse_document(payload)
        enhanced = await shared.enhancer.enhance(document)
        return {"enhancedCV": enhanced.to_dict()}

    @app.post("/generate-cv", response_model=None)
    async def generate_cv(
        payload: Dict[str, Any] = Body(...),
    ) -> Response:
        document = _parse_document(payload)
        try:
            pdf_bytes = await run_in_threadpool(shared.render_document, document)
        except (TemplateProjectionError, PDFRenderError):
            logger.exception("Generate CV failed.")
            return _error(500, "Failed to generate PDF")
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers=PDF_HEADERS,
        )

    @app.post("/sessions")
    async def create_session() -> Dict[str, str]:
        session_id = new_session_id()
        store.save(session_id, ConversationState())
        return {"sessionId": session_id, "intro": INTRO_MESSAGE}

    @app.post("/sessions/{session_id}/cv")
    async def start_cv(session_id: str) -> Dict[str, Any]:
        async with _lock_for(session_id):
            session = _load_session(session_id)
            prompt = session.start_cv()
            store.save(session_id, session.state)
            return {"replies": [prompt], **_session_payload(session)}

    @app.delete("/sessions/{session_id}/cv")
    async def cancel_cv(session_id: str) -> Dict[str, Any]:
        async with _lock_for(session_id):
            session = _load_session(session_id)
            message = session.cancel_cv()
            store.save(session_id, session.state)
            return {"replies": [message], **_session_payload(session)}

    @app.post("/sessions/{session_id}/messages", response_model=None)
    async def post_message(
        session_id: str,
        payload: MessageRequest,
    ) -> Dict[str, Any] | JSONResponse:
        async with _lock_for(session_id):
            session = _load_session(session_id)
            try:
                replies = await session.handle_user_message(payload.message)
            except ChatGatewayError:
                return _error(500, "Failed to get response")
            store.save(session_id, session.state)
            return {"replies": replies, **_session_payload(session)}

    @app.get("/sessions/{session_id}/cv.pdf", response_model=None)
    async def download_cv(session_id: str) -> Response:
        async with _lock_for(session_id):
            session = _load_session(session_id)
            try:
                pdf_bytes = await run_in_threadpool(session.render_pdf)
            except InterviewStateError as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            except (TemplateProjectionError, PDFRenderError):
                logger.exception("Rendering CV for %s failed.", session_id)
                return _error(500, "Failed to generate PDF")
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers=PDF_HEADERS,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:  # pragma: no cover - simple health check
        return {"status": "ok"}

    return app


def run_server(
    settings: AppSettings,
    *,
    host: str = "127.0.0.1",
    port: int = 5001,
    allow_origins: Sequence[str] | None = None,
    log_level: str = "info",
) -> None:
    """Start the FastAPI server."""

    app = create_app(settings=settings, allow_origins=allow_origins)
    uvicorn.run(app, host=host, port=port, log_level=log_level)

