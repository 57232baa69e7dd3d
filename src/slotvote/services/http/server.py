from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from httpx import HTTPError
from postgrest.exceptions import APIError

from ...api.models import AddSlotsRequest, CreateEventRequest, DecideRequest, VoteRequest
from ...api.serializers import (
    serialize_created_event,
    serialize_invite_list,
    serialize_organizer_summary,
    serialize_public_summary,
    serialize_ranked_summary,
    serialize_slot,
)
from ...api.state import ApiState
from ...data import SupabaseNotInitializedError
from ...domain import InternalError, SchedulingError

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store"}


def get_client_ip(request: Request) -> str:
    """Resolve the caller's address, preferring the first proxy-forwarded hop."""

    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("X-Real-IP", "")
    if real_ip.strip():
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_state(request: Request) -> ApiState:
    return request.app.state.api


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
        logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("%s %s -> 400 validation error", request.method, request.url.path)
        return _error(400, "Invalid request parameters", details=jsonable_encoder(exc.errors()))

    @app.exception_handler(APIError)
    async def store_error_handler(request: Request, exc: APIError) -> JSONResponse:
        logger.exception("Store failure during %s %s", request.method, request.url.path)
        return _error(500, exc.message or "store error")

    @app.exception_handler(SupabaseNotInitializedError)
    async def store_config_handler(request: Request, exc: SupabaseNotInitializedError) -> JSONResponse:
        logger.error("Store not configured: %s", exc)
        return _error(500, "store is not configured")

    @app.exception_handler(HTTPError)
    async def store_transport_handler(request: Request, exc: HTTPError) -> JSONResponse:
        logger.exception("Store unreachable during %s %s", request.method, request.url.path)
        return _error(InternalError.status_code, InternalError.default_message)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error during %s %s", request.method, request.url.path)
        return _error(InternalError.status_code, InternalError.default_message)


def create_app(state: Optional[ApiState] = None) -> FastAPI:
    app = FastAPI(title="slotvote API", version="0.1.0")
    app.state.api = state or ApiState()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.debug("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    @app.get("/health")
    def health_check() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/events/create")
    def create_event(
        body: CreateEventRequest,
        request: Request,
        state: ApiState = Depends(get_state),
        admin_key: Optional[str] = Header(default=None, alias="X-Admin-Key"),
    ) -> Dict[str, Any]:
        result = state.events.create_event(
            title=body.title,
            description=body.description,
            duration_min=body.duration_min,
            timezone_name=body.timezone,
            deadline_at=body.deadline_at,
            location=body.location,
            slots=[item.to_domain() for item in body.slots],
            participants=[item.to_domain() for item in body.participants],
            admin_credential=admin_key,
            origin=get_client_ip(request),
        )
        return serialize_created_event(result)

    @app.post("/api/events/{event_id}/add-slots")
    def add_slots(
        event_id: str,
        body: AddSlotsRequest,
        state: ApiState = Depends(get_state),
        admin_key: Optional[str] = Header(default=None, alias="X-Admin-Key"),
        organizer_key: Optional[str] = Header(default=None, alias="X-Organizer-Key"),
    ) -> Dict[str, Any]:
        slots = state.events.add_slots(
            event_id,
            [item.to_domain() for item in body.slots],
            admin_credential=admin_key,
            organizer_credential=organizer_key,
        )
        return {"slots": [serialize_slot(slot) for slot in slots]}

    @app.post("/api/events/{event_id}/vote")
    def cast_vote(
        event_id: str,
        body: VoteRequest,
        state: ApiState = Depends(get_state),
    ) -> JSONResponse:
        state.votes.cast_vote(event_id, body.token, body.slot_id, body.choice, body.comment)
        return JSONResponse({"ok": True}, headers=NO_STORE)

    @app.get("/api/events/{event_id}/answers")
    def organizer_summary(
        event_id: str,
        state: ApiState = Depends(get_state),
        admin_key: Optional[str] = Header(default=None, alias="X-Admin-Key"),
        organizer_key: Optional[str] = Header(default=None, alias="X-Organizer-Key"),
    ) -> JSONResponse:
        summary = state.events.organizer_summary(
            event_id,
            admin_credential=admin_key,
            organizer_credential=organizer_key,
        )
        return JSONResponse(serialize_organizer_summary(summary), headers=NO_STORE)

    @app.get("/api/events/{event_id}/summary")
    def ranked_summary(event_id: str, state: ApiState = Depends(get_state)) -> Dict[str, Any]:
        return serialize_ranked_summary(state.events.ranked_summary(event_id))

    @app.get("/api/events/{event_id}/public-summary")
    def public_summary(event_id: str, state: ApiState = Depends(get_state)) -> JSONResponse:
        summary = state.events.public_summary(event_id)
        return JSONResponse(serialize_public_summary(summary), headers=NO_STORE)

    @app.post("/api/events/{event_id}/decide")
    def decide(
        event_id: str,
        body: DecideRequest,
        state: ApiState = Depends(get_state),
        admin_key: Optional[str] = Header(default=None, alias="X-Admin-Key"),
        organizer_key: Optional[str] = Header(default=None, alias="X-Organizer-Key"),
    ) -> Dict[str, Any]:
        state.events.decide(
            event_id,
            body.slot_id or "",
            admin_credential=admin_key,
            organizer_credential=organizer_key,
        )
        return {"ok": True}

    @app.get("/api/events/{event_id}/ics")
    def export_calendar(event_id: str, state: ApiState = Depends(get_state)) -> Response:
        document = state.calendar.export_current_decision(event_id)
        return Response(
            content=document.content,
            media_type=document.content_type,
            headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
        )

    @app.post("/api/events/{event_id}/rotate-key")
    def rotate_organizer_key(
        event_id: str,
        state: ApiState = Depends(get_state),
        admin_key: Optional[str] = Header(default=None, alias="X-Admin-Key"),
        organizer_key: Optional[str] = Header(default=None, alias="X-Organizer-Key"),
    ) -> Dict[str, Any]:
        new_key = state.events.rotate_organizer_key(
            event_id,
            admin_credential=admin_key,
            organizer_credential=organizer_key,
        )
        return {"ok": True, "organizerKey": new_key}

    @app.get("/api/events/{event_id}/invites")
    def list_invites(
        event_id: str,
        state: ApiState = Depends(get_state),
        admin_key: Optional[str] = Header(default=None, alias="X-Admin-Key"),
        organizer_key: Optional[str] = Header(default=None, alias="X-Organizer-Key"),
    ) -> Dict[str, Any]:
        result = state.events.list_invites(
            event_id,
            admin_credential=admin_key,
            organizer_credential=organizer_key,
        )
        return serialize_invite_list(result)

    return app


def run_local_server(host: str = "127.0.0.1", port: int = 8000, state: Optional[ApiState] = None) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(serve(create_app(state), config))
