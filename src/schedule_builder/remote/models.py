from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShareResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    id: str
    url: str
    embed_url: str = Field(alias="embedUrl")
    created_at: str = Field(alias="createdAt")


class LoadResponse(BaseModel):
    success: bool = True
    id: str
    payload: Dict[str, Any]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = Field(default=None)
