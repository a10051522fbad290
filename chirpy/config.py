"""Configuration management for the Chirpy API server."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

PRIVILEGED_PLATFORM = "dev"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

_SQLITE_PREFIXES = ("sqlite:///", "sqlite://")


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve a ``DB_URL`` style value to the on-disk SQLite database path."""

    if env_value:
        value = env_value.strip()
        for prefix in _SQLITE_PREFIXES:
            if value.startswith(prefix):
                value = value[len(prefix):]
                break
        else:
            if "://" in value:
                scheme = value.split("://", 1)[0]
                raise ValueError(f"Unsupported database scheme '{scheme}'; only sqlite is available")
        if value:
            return Path(value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "chirpy.sqlite3").resolve(strict=False)


def _resolve_port(value: Optional[str]) -> int:
    if not value or not value.strip():
        return DEFAULT_PORT
    try:
        port = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"CHIRPY_PORT must be an integer, got {value!r}") from exc
    if not 1 <= port <= 65535:
        raise ValueError(f"CHIRPY_PORT must be between 1 and 65535, got {port}")
    return port


@dataclass(frozen=True)
class Settings:
    """Runtime settings sourced from the environment."""

    database_path: Path
    platform: str = ""
    filepath_root: Path = Path(".")
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @property
    def is_privileged(self) -> bool:
        return self.platform == PRIVILEGED_PLATFORM

    @staticmethod
    def from_env(environ: Mapping[str, str]) -> "Settings":
        """Create :class:`Settings` from an environment mapping."""
        filepath_root = environ.get("CHIRPY_FILEPATH_ROOT") or "."
        return Settings(
            database_path=resolve_database_path(environ.get("DB_URL")),
            platform=environ.get("PLATFORM", "").strip(),
            filepath_root=Path(filepath_root).expanduser().resolve(strict=False),
            host=environ.get("CHIRPY_HOST", "").strip() or DEFAULT_HOST,
            port=_resolve_port(environ.get("CHIRPY_PORT")),
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings, reading a ``.env`` file first when using the process environment."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    return Settings.from_env(environ)


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "PRIVILEGED_PLATFORM",
    "Settings",
    "load_settings",
    "resolve_database_path",
]
