"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "mdsite"
    content_root:     str = Field(default="content/docs",  description="Directory of .md/.mdx documents and their assets")
    about_root:       str = Field(default="content/about", description="Directory holding about.md and its assets")
    snapshot_path:    str = Field(default=".generated/docs-snapshot.json", description="Persisted snapshot file")
    mode:             str = Field(default="live", pattern="^(live|frozen)$",
                                  description="live re-checks the content fingerprint on every access; frozen builds once")
    persist_snapshot: bool = Field(default=True, description="Write the snapshot file after each build")
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    log_level:        str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    host:             str = "127.0.0.1"
    port:             int = Field(default=8000, ge=1, le=65535)

    @property
    def live(self) -> bool:
        return self.mode == "live"


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
