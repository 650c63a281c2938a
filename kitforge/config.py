"""kitforge configuration.

Centralised, typed configuration for the scaffold service. Settings use a
Pydantic v2 model so they are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# Base templates ship inside the package next to the customizer snippets.
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates" / "base"

NPM_REGISTRY_URL = "https://registry.npmjs.org"


class Config(BaseModel):
    """Global kitforge configuration.

    Instances are created once by the CLI or the application factory and
    passed to the scaffold generator and the registry proxy.
    """

    work_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "kitforge",
        description="Parent directory for per-request working trees",
    )
    template_dir: Path = Field(
        default=DEFAULT_TEMPLATE_DIR,
        description="Directory holding one base template per output language",
    )
    registry_url: str = Field(default=NPM_REGISTRY_URL)
    cache_ttl: float = Field(default=3600.0, gt=0, description="Registry cache TTL in seconds")
    http_timeout: float = Field(default=10.0, gt=0, description="Upstream request timeout in seconds")
    search_default_limit: int = Field(default=20, ge=1)
    search_max_limit: int = Field(default=250, ge=1)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def template_path(self, name: str) -> Path:
        """Path of the base template directory called *name*."""
        return self.template_dir / name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            KITFORGE_WORK_DIR, KITFORGE_TEMPLATE_DIR, KITFORGE_REGISTRY_URL,
            KITFORGE_CACHE_TTL, KITFORGE_HTTP_TIMEOUT, KITFORGE_SEARCH_LIMIT,
            KITFORGE_HOST, KITFORGE_PORT, KITFORGE_LOG_LEVEL, KITFORGE_DEBUG.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("KITFORGE_WORK_DIR"):
            kwargs["work_dir"] = Path(os.environ["KITFORGE_WORK_DIR"])
        if os.environ.get("KITFORGE_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["KITFORGE_TEMPLATE_DIR"])
        if os.environ.get("KITFORGE_REGISTRY_URL"):
            kwargs["registry_url"] = os.environ["KITFORGE_REGISTRY_URL"]
        if os.environ.get("KITFORGE_CACHE_TTL"):
            kwargs["cache_ttl"] = float(os.environ["KITFORGE_CACHE_TTL"])
        if os.environ.get("KITFORGE_HTTP_TIMEOUT"):
            kwargs["http_timeout"] = float(os.environ["KITFORGE_HTTP_TIMEOUT"])
        if os.environ.get("KITFORGE_SEARCH_LIMIT"):
            kwargs["search_default_limit"] = int(os.environ["KITFORGE_SEARCH_LIMIT"])
        if os.environ.get("KITFORGE_HOST"):
            kwargs["host"] = os.environ["KITFORGE_HOST"]
        if os.environ.get("KITFORGE_PORT"):
            kwargs["port"] = int(os.environ["KITFORGE_PORT"])
        if os.environ.get("KITFORGE_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["KITFORGE_LOG_LEVEL"].upper()

        debug = os.environ.get("KITFORGE_DEBUG", "").lower() in ("1", "true", "yes")
        return cls(debug=debug, **kwargs)

    def ensure_directories(self) -> None:
        """Create the working-tree parent directory if it does not exist."""
        self.work_dir.mkdir(parents=True, exist_ok=True)
