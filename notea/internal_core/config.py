from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _project_root() -> Path:
    # notea/internal_core/config.py -> notea -> project root
    return Path(__file__).resolve().parents[2]


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


_STORAGE_BACKENDS = {"memory", "json_file"}


@dataclass(frozen=True)
class NoteaConfig:
    NOTEA_STORAGE_BACKEND: str
    NOTEA_STORAGE_PATH: str
    NOTEA_SESSION_TTL_SECONDS: int
    NOTEA_MAX_PENDING_DOWNLOADS: int
    NOTEA_LOG_LEVEL: str
    NOTEA_CORS_ORIGINS: tuple[str, ...]

    def storage_path(self, repo_root: Path) -> Path:
        return (repo_root / self.NOTEA_STORAGE_PATH).resolve()


def load_config() -> NoteaConfig:
    backend = _getenv_str("NOTEA_STORAGE_BACKEND", "memory").strip().lower()
    if backend not in _STORAGE_BACKENDS:
        raise ValueError(
            f"Unsupported NOTEA_STORAGE_BACKEND={backend!r}; expected one of {sorted(_STORAGE_BACKENDS)}"
        )
    return NoteaConfig(
        NOTEA_STORAGE_BACKEND=backend,
        NOTEA_STORAGE_PATH=_getenv_str("NOTEA_STORAGE_PATH", "./data/notes.json"),
        NOTEA_SESSION_TTL_SECONDS=_getenv_int("NOTEA_SESSION_TTL_SECONDS", 14400),
        NOTEA_MAX_PENDING_DOWNLOADS=_getenv_int("NOTEA_MAX_PENDING_DOWNLOADS", 16),
        NOTEA_LOG_LEVEL=_getenv_str("NOTEA_LOG_LEVEL", "INFO"),
        NOTEA_CORS_ORIGINS=tuple(_getenv_list("NOTEA_CORS_ORIGINS", ["*"])),
    )


def project_root() -> Path:
    return _project_root()
