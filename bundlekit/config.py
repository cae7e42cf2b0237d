"""
Centralized configuration for bundlekit

Usage:
    from bundlekit.config import BundleSettings, get_settings

    # Defaults, overridable through BUNDLEKIT_* environment variables
    settings = get_settings()

    # Override for a specific build
    custom = BundleSettings(out_dir="build", optimize=True)
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BundleSettings(BaseSettings):
    """
    Build settings.

    Environment variables use the BUNDLEKIT_ prefix.
    Example: BUNDLEKIT_OUT_DIR, BUNDLEKIT_RELOAD
    """

    model_config = SettingsConfigDict(
        env_prefix="BUNDLEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Layout
    out_dir: str = "dist"
    """Root of everything the build produces"""

    deps_dir: str = "deps"
    """Bundle output subdirectory (under out_dir)"""

    cache_dir: str = ".cache"
    """Transformed-source cache subdirectory (under out_dir)"""

    remote_dir: str = ".remote"
    """Local copies of remote modules (under out_dir)"""

    output_extension: str = ".js"

    # Behavior
    reload: bool = False
    """Bypass graph reuse and the transform cache"""

    optimize: bool = False
    """Run optimizers on emitted bundles"""

    quiet: bool = False
    """Suppress progress logging"""

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Remote modules
    http_timeout: float = Field(default=30.0, gt=0)
    """Timeout for remote module fetches (seconds)"""

    @property
    def deps_path(self) -> str:
        return os.path.join(self.out_dir, self.deps_dir)

    @property
    def cache_path(self) -> str:
        return os.path.join(self.out_dir, self.cache_dir)

    @property
    def remote_path(self) -> str:
        return os.path.join(self.out_dir, self.remote_dir)


@lru_cache
def get_settings() -> BundleSettings:
    """Process-wide default settings (environment-derived)."""
    return BundleSettings()
