from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, model_validator

from ..core.tree import DEFAULT_ROOT_KEY


class LoaderConfig(BaseModel):
    format: Literal["auto", "json", "xml"] = "auto"
    root_key: Optional[str] = DEFAULT_ROOT_KEY
    max_bytes: int = 10 * 1024 * 1024
    allow_nan: bool = False
    collect_issues: bool = False

    @model_validator(mode="after")
    def _validate_limits(self) -> "LoaderConfig":
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.root_key is not None and not self.root_key.strip():
            raise ValueError("root_key must be a non-empty string or null")
        return self


def load_config(path: str | Path) -> LoaderConfig:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Configuration root must be a mapping.")
    return LoaderConfig.model_validate(data)
