from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal
from typing import Optional
from typing import Union
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .portal.downloader import DEFAULT_FILE_PREFIX


_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")

DEFAULT_LOGIN_URL = "https://hris.rminc.com/hris/hrisLogin.aspx?Act=2"
DEFAULT_RECORDS_URL = "https://hris.rminc.com/hris/Summit/Employee/Edit_PayHistory.aspx"


def _expand_env_vars(value: object) -> object:
    if isinstance(value, str):
        def repl(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, "")

        return _ENV_VAR_PATTERN.sub(repl, value)
    if isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name, "") or "").strip().lower()
    if not raw:
        return bool(default)
    return raw in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    return int(raw)


def _deep_merge(base: object, override: object) -> object:
    if isinstance(base, dict) and isinstance(override, dict):
        out = dict(base)
        for k, v in override.items():
            if k in out:
                out[k] = _deep_merge(out[k], v)
            else:
                out[k] = v
        return out
    return override


def _default_config_from_env() -> dict:
    """
    Env-only config so most users never need a YAML file.

    Credentials are deliberately absent: they are always typed at the prompt.
    """
    return {
        "portal": {
            "login_url": os.getenv("RMI_LOGIN_URL", DEFAULT_LOGIN_URL),
            "records_url": os.getenv("RMI_RECORDS_URL", DEFAULT_RECORDS_URL),
            "date_order": os.getenv("RMI_DATE_ORDER", "MDY"),
            "file_prefix": os.getenv("RMI_FILE_PREFIX", DEFAULT_FILE_PREFIX),
        },
        "browser": {
            "headless": _env_bool("BROWSER_HEADLESS", default=True),
            "slow_mo_ms": _env_int("BROWSER_SLOW_MO_MS", 0),
            "navigation_timeout_ms": _env_int("BROWSER_NAVIGATION_TIMEOUT_MS", 30_000),
            "channel": os.getenv("BROWSER_CHANNEL", ""),
        },
        "logging": {
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "file_path": os.getenv("LOG_FILE", ""),
        },
        "debug_dir": os.getenv("DEBUG_DIR", ""),
    }


def _require_full_url(value: str, *, field_name: str) -> str:
    value = (value or "").strip()
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"{field_name} must be a full URL like '{DEFAULT_LOGIN_URL}'")
    return value


class PortalConfig(BaseModel):
    """
    Where the HRIS portal lives and how its pay-history dropdown is read.

    `date_order` describes how check dates are written in the dropdown labels (`MDY` = 01/15/2023).
    """

    login_url: str = DEFAULT_LOGIN_URL
    records_url: str = DEFAULT_RECORDS_URL
    date_order: Literal["MDY", "DMY"] = "MDY"
    file_prefix: str = DEFAULT_FILE_PREFIX

    @field_validator("date_order", mode="before")
    @classmethod
    def _upper_date_order(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _validate_urls(self) -> "PortalConfig":
        self.login_url = _require_full_url(self.login_url, field_name="portal.login_url")
        self.records_url = _require_full_url(self.records_url, field_name="portal.records_url")
        if not self.file_prefix or "/" in self.file_prefix or "\\" in self.file_prefix:
            raise ValueError("portal.file_prefix must be a non-empty file name prefix (no path separators)")
        return self


class BrowserConfig(BaseModel):
    headless: bool = True
    slow_mo_ms: int = Field(default=0, ge=0)
    viewport_width: int = Field(default=1200, gt=0)
    viewport_height: int = Field(default=1200, gt=0)
    navigation_timeout_ms: int = Field(default=30_000, ge=0)
    # Optional Playwright channel ("chrome", "msedge"); empty = bundled Chromium with automatic fallback.
    channel: str = ""


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file_path: str = ""


class AppConfig(BaseModel):
    portal: PortalConfig = PortalConfig()
    browser: BrowserConfig = BrowserConfig()
    logging: LoggingConfig = LoggingConfig()
    debug_dir: Optional[str] = None

    @field_validator("debug_dir", mode="before")
    @classmethod
    def _blank_debug_dir_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_config(path: Union[str, Path, None] = None) -> AppConfig:
    raw: dict = {}
    if path:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            raw = _expand_env_vars(raw)  # supports ${ENV_VAR} in YAML

    merged = _deep_merge(_default_config_from_env(), raw)
    return AppConfig.model_validate(merged)
