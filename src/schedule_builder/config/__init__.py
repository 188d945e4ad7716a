"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, GridSettings, RemoteSettings, StorageSettings, get_settings

__all__ = ["AppSettings", "GridSettings", "RemoteSettings", "StorageSettings", "get_settings"]
