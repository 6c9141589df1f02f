"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, regctl.toml only contains
overrides.  An empty file (or none at all) gives a working register.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- regctl.toml sections ---


class RegisterConfig(BaseModel):
    """[register] section."""

    model_config = {"frozen": True}

    name: str = "letter-register"


class StorageConfig(BaseModel):
    """[storage] section.

    ``path`` is relative to the register root unless absolute.  When
    unset, the backend's default file under ``.regctl/`` is used.
    """

    model_config = {"frozen": True}

    backend: Literal["json", "sqlite"] = "json"
    path: str | None = None


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    filename_prefix: str = "letter-register-export"
    indent: int = Field(default=2, ge=0)

