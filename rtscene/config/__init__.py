"""Configuration loading utilities for rtscene."""

from .schema import (
    LoaderConfig,
    load_config,
)

__all__ = ["LoaderConfig", "load_config"]
