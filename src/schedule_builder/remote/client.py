from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

import httpx
import orjson

from ..config import RemoteSettings, get_settings
from ..domain.models import Schedule
from ..errors import ShareError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ShareReceipt:
    id: str
    url: str
    embed_url: str
    created_at: str


class ShareClient:
    """Talks to the share backend. Failures surface as :class:`ShareError`; nothing is retried."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        settings: Optional[RemoteSettings] = None,
    ) -> None:
        self._settings = settings or get_settings().remote
        self._base_url = (base_url or self._settings.base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout if timeout is not None else self._settings.timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ShareClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def view_url(self, schedule_id: str) -> str:
        return f"{self._base_url}/s/{schedule_id}"

    def share(self, schedule: Union[Schedule, Mapping[str, Any]]) -> ShareReceipt:
        document = schedule.to_record() if isinstance(schedule, Schedule) else dict(schedule)
        body = self._request(
            "POST",
            "/api/share",
            content=orjson.dumps(document),
            headers={"Content-Type": "application/json"},
        )
        schedule_id = body.get("id")
        if not isinstance(schedule_id, str) or not schedule_id:
            raise ShareError("Share response did not include an id", code="BAD_RESPONSE")
        logger.info("Shared schedule as %s", schedule_id)
        return ShareReceipt(
            id=schedule_id,
            url=self.view_url(schedule_id),
            embed_url=f"{self._base_url}/embed/{schedule_id}",
            created_at=str(body.get("createdAt") or ""),
        )

    def load(self, schedule_id: str) -> Dict[str, Any]:
        body = self._request("GET", "/api/load", params={"id": schedule_id})
        # Older backends answer with the bare document instead of an envelope.
        document = body.get("payload") if "payload" in body else body
        if not isinstance(document, dict) or "meta" not in document or "items" not in document:
            raise ShareError("Shared schedule is not a schedule document", code="BAD_RESPONSE")
        return document

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Share backend request %s %s failed: %s", method, path, exc)
            raise ShareError(f"Share backend unreachable: {exc}", code="NETWORK_ERROR") from exc

        try:
            body = orjson.loads(response.content) if response.content else {}
        except orjson.JSONDecodeError:
            body = None

        if response.is_error:
            code = body.get("error") if isinstance(body, dict) else None
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("Share backend answered %s for %s %s", response.status_code, method, path)
            raise ShareError(
                message or code or f"Share backend answered HTTP {response.status_code}",
                code=code or "HTTP_ERROR",
                status_code=response.status_code,
            )
        if not isinstance(body, dict):
            raise ShareError("Share backend returned malformed JSON", code="BAD_RESPONSE", status_code=response.status_code)
        return body


__all__ = ["ShareClient", "ShareReceipt"]
