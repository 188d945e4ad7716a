from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import orjson
from fastapi import FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import RemoteSettings, get_settings
from ..errors import InvalidSchedulePayload
from .ids import is_valid_share_id, new_share_id
from .models import ErrorResponse, LoadResponse, ShareResponse
from .repository import SharedSchedule, SharedScheduleRepository
from .validation import validate_schedule_payload

logger = logging.getLogger(__name__)

ID_ATTEMPTS = 6


def _error(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message).model_dump(exclude_none=True)
    return JSONResponse(body, status_code=status_code)


def _allocate_id(repository: SharedScheduleRepository) -> str:
    for _ in range(ID_ATTEMPTS):
        candidate = new_share_id()
        if not repository.exists(candidate):
            return candidate
    raise RuntimeError("Failed to generate unique ID.")


def _store_share(repository: SharedScheduleRepository, raw: bytes, expiry_days: Optional[int]) -> SharedSchedule:
    now = datetime.now(timezone.utc).replace(microsecond=0)
    expires_at = None
    if expiry_days:
        expires_at = (now + timedelta(days=expiry_days)).isoformat()

    record = SharedSchedule(
        id=_allocate_id(repository),
        payload=raw.decode("utf-8"),
        created_at=now.isoformat(),
        expires_at=expires_at,
    )
    repository.insert(record)
    return record


def create_app(
    settings: Optional[RemoteSettings] = None,
    repository: Optional[SharedScheduleRepository] = None,
) -> FastAPI:
    settings = settings or get_settings().remote
    repository = repository or SharedScheduleRepository(settings.database_file)

    app = FastAPI(title="Schedule Builder Share API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.post("/api/share")
    async def share_schedule(request: Request) -> JSONResponse:
        raw = await request.body()
        if len(raw) > settings.max_payload_bytes:
            return _error(413, "PAYLOAD_TOO_LARGE", f"Payload exceeds {settings.max_payload_bytes} bytes.")
        try:
            document = orjson.loads(raw)
        except orjson.JSONDecodeError:
            return _error(400, "BAD_REQUEST", "Payload must be valid JSON.")

        try:
            validate_schedule_payload(document)
        except InvalidSchedulePayload as exc:
            logger.info("Rejected shared schedule: %s", exc)
            return _error(400, "BAD_REQUEST", str(exc))

        try:
            record = await run_in_threadpool(_store_share, repository, raw, settings.expiry_days)
        except Exception:  # noqa: BLE001
            logger.exception("Storing shared schedule failed")
            return _error(500, "SERVER_ERROR")

        logger.debug("Stored shared schedule %s", record.id)
        body = ShareResponse(
            id=record.id,
            url=f"/s/{record.id}",
            embed_url=f"/embed/{record.id}",
            created_at=record.created_at,
        )
        return JSONResponse(body.model_dump(by_alias=True), status_code=201)

    @app.get("/api/load")
    def load_schedule(schedule_id: str = Query(default="", alias="id")) -> JSONResponse:
        if not is_valid_share_id(schedule_id):
            return _error(400, "BAD_ID")
        try:
            record = repository.fetch(schedule_id)
        except Exception:  # noqa: BLE001
            logger.exception("Loading shared schedule %s failed", schedule_id)
            return _error(500, "SERVER_ERROR")

        if record is None:
            return _error(404, "NOT_FOUND")
        if record.is_expired():
            return _error(410, "EXPIRED")

        body = LoadResponse(id=schedule_id, payload=orjson.loads(record.payload))
        return JSONResponse(body.model_dump(), headers={"X-Content-Type-Options": "nosniff"})

    return app


def run_share_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    settings = get_settings().remote
    config = Config()
    config.bind = [f"{host or settings.host}:{port or settings.port}"]
    logger.info("Share API listening on %s", config.bind[0])
    asyncio.run(serve(create_app(settings), config))


__all__ = ["create_app", "run_share_server"]
