"""Configuration loader for minhland-ads.

Loads YAML config files with environment variable overrides.
All env vars use the MINHLAND_ prefix.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from minhland_ads.errors import ConfigurationError
from minhland_ads.schema import DEFAULT_SHEET_NAME
from minhland_ads.sheets import SheetsConfig

ENV_PREFIX = "MINHLAND_"


@dataclass
class AdsConfig:
    """Settings for the record store, the publish channels and the service."""
    spreadsheet_id: str = ""
    client_email: str = ""
    private_key: str = ""
    sheet_name: str = DEFAULT_SHEET_NAME
    zalo_access_token: str = ""
    zalo_api_url: str = "https://openapi.zalo.me"
    facebook_page_id: str = ""
    facebook_access_token: str = ""
    facebook_api_version: str = "v14.0"
    adcopy_endpoint: str = "http://localhost:8000/generate"
    docstore_path: str = "docstore.json"
    channel_timeout: float = 30.0
    max_parallel_channels: int = 4
    live_mode: bool = False
    log_level: str = "INFO"
    log_file: str = ""

    def sheets_config(self) -> SheetsConfig:
        return SheetsConfig(
            spreadsheet_id=self.spreadsheet_id,
            client_email=self.client_email,
            private_key=self.private_key,
            timeout=self.channel_timeout,
        )

    def validate_sheets(self) -> None:
        """Raise ConfigurationError if the sheet credentials are unusable."""
        self.sheets_config().validate()


def load_config(path: Path | None = None) -> AdsConfig:
    """Load config from YAML file with env var overrides.

    Env vars override YAML values. Mapping:
      MINHLAND_SPREADSHEET_ID → sheets.spreadsheet_id
      MINHLAND_CLIENT_EMAIL → sheets.client_email
      MINHLAND_PRIVATE_KEY → sheets.private_key
      MINHLAND_SHEET_NAME → sheets.sheet_name
      MINHLAND_ZALO_ACCESS_TOKEN → zalo.access_token
      MINHLAND_FACEBOOK_PAGE_ID → facebook.page_id
      MINHLAND_FACEBOOK_ACCESS_TOKEN → facebook.access_token
      MINHLAND_ADCOPY_ENDPOINT → adcopy.endpoint
      MINHLAND_DOCSTORE_PATH → docstore_path
      MINHLAND_CHANNEL_TIMEOUT → channel_timeout
      MINHLAND_MAX_PARALLEL_CHANNELS → max_parallel_channels
      MINHLAND_LIVE_MODE → live_mode
      MINHLAND_LOG_LEVEL → log_level
      MINHLAND_LOG_FILE → log_file
    """
    raw: dict[str, Any] = {}
    if path and path.exists():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raw = {}

    sheets = raw.get("sheets") or {}
    zalo = raw.get("zalo") or {}
    facebook = raw.get("facebook") or {}
    adcopy = raw.get("adcopy") or {}

    return AdsConfig(
        spreadsheet_id=_env_or("SPREADSHEET_ID", sheets.get("spreadsheet_id", "")),
        client_email=_env_or("CLIENT_EMAIL", sheets.get("client_email", "")),
        private_key=_unescape_key(_env_or("PRIVATE_KEY", sheets.get("private_key", ""))),
        sheet_name=_env_or("SHEET_NAME", sheets.get("sheet_name", DEFAULT_SHEET_NAME)),
        zalo_access_token=_env_or("ZALO_ACCESS_TOKEN", zalo.get("access_token", "")),
        zalo_api_url=zalo.get("api_url", "https://openapi.zalo.me"),
        facebook_page_id=_env_or("FACEBOOK_PAGE_ID", str(facebook.get("page_id", ""))),
        facebook_access_token=_env_or(
            "FACEBOOK_ACCESS_TOKEN",
            facebook.get("access_token", ""),
        ),
        facebook_api_version=facebook.get("api_version", "v14.0"),
        adcopy_endpoint=_env_or(
            "ADCOPY_ENDPOINT",
            adcopy.get("endpoint", "http://localhost:8000/generate"),
        ),
        docstore_path=_env_or("DOCSTORE_PATH", raw.get("docstore_path", "docstore.json")),
        channel_timeout=_env_float("CHANNEL_TIMEOUT", raw.get("channel_timeout", 30.0)),
        max_parallel_channels=_env_int(
            "MAX_PARALLEL_CHANNELS",
            raw.get("max_parallel_channels", 4),
        ),
        live_mode=_env_bool("LIVE_MODE", raw.get("live_mode", False)),
        log_level=_env_or("LOG_LEVEL", raw.get("log_level", "INFO")).upper(),
        log_file=_env_or("LOG_FILE", raw.get("log_file", "")),
    )


def _unescape_key(value: str) -> str:
    # Keys pasted into env files usually carry literal "\n" sequences.
    return value.replace("\\n", "\n")


def _env_or(suffix: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{suffix}", default)


def _env_bool(suffix: str, default: bool) -> bool:
    val = os.environ.get(f"{ENV_PREFIX}{suffix}")
    if val is None:
        return bool(default)
    return val.lower() in ("true", "1", "yes")


def _env_float(suffix: str, default: float) -> float:
    val = os.environ.get(f"{ENV_PREFIX}{suffix}")
    try:
        return float(val) if val is not None else float(default)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{suffix} must be a number") from exc


def _env_int(suffix: str, default: int) -> int:
    val = os.environ.get(f"{ENV_PREFIX}{suffix}")
    try:
        return int(val) if val is not None else int(default)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{suffix} must be an integer") from exc
