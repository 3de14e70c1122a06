"""Runtime configuration for the Futsal Scoresheet.

Settings come from environment variables so the same code runs against an
in-memory store in development, a local JSON file, or a hosted Supabase
project. A zero-argument ``AppConfig()`` is always valid.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

BACKEND_KINDS = ("memory", "json", "rest")


@dataclass(frozen=True)
class AppConfig:
    """Application settings.

    Attributes:
        backend: Which backend to use (``memory``, ``json`` or ``rest``).
        data_file: JSON file used by the ``json`` backend.
        supabase_url: Project URL for the ``rest`` backend.
        supabase_key: API key for the ``rest`` backend.
        request_timeout: Seconds before a REST request is abandoned.
        host: Interface the web server binds to.
        port: Port the web server listens on.
        log_level: Root logging level name.
        export_dir: Directory result cards are written to.
        autosave_dir: Directory unfinished matches are saved to.
    """

    backend: str = "memory"
    data_file: str = "scoresheet_data.json"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    request_timeout: float = 10.0
    host: str = "127.0.0.1"
    port: int = 7122
    log_level: str = "INFO"
    export_dir: str = "exports"
    autosave_dir: str = "autosave"

    def __post_init__(self) -> None:
        if self.backend not in BACKEND_KINDS:
            raise ValueError(
                f"Unknown backend {self.backend!r}; expected one of {', '.join(BACKEND_KINDS)}"
            )
        if self.backend == "rest" and not (self.supabase_url and self.supabase_key):
            raise ValueError("The rest backend needs SUPABASE_URL and SUPABASE_KEY")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            backend=env.get("SCORESHEET_BACKEND", defaults.backend).strip().lower(),
            data_file=env.get("SCORESHEET_DATA_FILE", defaults.data_file),
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_KEY") or None,
            request_timeout=float(env.get("SCORESHEET_REQUEST_TIMEOUT", defaults.request_timeout)),
            host=env.get("SCORESHEET_HOST", defaults.host),
            port=int(env.get("SCORESHEET_PORT", defaults.port)),
            log_level=env.get("SCORESHEET_LOG_LEVEL", defaults.log_level),
            export_dir=env.get("SCORESHEET_EXPORT_DIR", defaults.export_dir),
            autosave_dir=env.get("SCORESHEET_AUTOSAVE_DIR", defaults.autosave_dir),
        )
