"""Configuration management for the MathML lint workbench."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _get_base_dir() -> Path:
    """Get base directory, handling both development and frozen executables."""
    if getattr(sys, 'frozen', False):
        # Running as a bundled executable: keep logs under the user's home
        if sys.platform == 'win32':
            appdata = os.getenv('APPDATA', os.path.expanduser('~'))
            return Path(appdata) / 'MathMLLint'
        return Path.home() / '.mathml_lint'
    return Path(__file__).resolve().parents[1]


# Load .env from the project root (development only, not in bundled builds)
if not getattr(sys, 'frozen', False):
    _env_path = _get_base_dir() / ".env"
    if _env_path.exists():
        load_dotenv(_env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> tuple[str, ...]:
    return tuple(
        entry.strip().lower()
        for entry in os.getenv(name, default).split(",")
        if entry.strip()
    )


@dataclass
class Settings:
    """Application settings."""

    base_dir: Path = _get_base_dir()
    log_file: Path = base_dir / "mathml_lint.log"
    host: str = os.getenv("MATHML_LINT_HOST", "127.0.0.1")
    port: int = int(os.getenv("MATHML_LINT_PORT", "8000"))
    log_level: str = os.getenv("MATHML_LINT_LOG_LEVEL", "INFO")
    default_profile: str = os.getenv("MATHML_LINT_PROFILE", "authoring-guidance")
    ignore_data_mjx_attributes: bool = _env_flag("MATHML_LINT_IGNORE_DATA_MJX", "true")
    # Attribute prefixes written by external renderers (MathJax writes data-mjx-*)
    foreign_attribute_prefixes: tuple[str, ...] = _env_list(
        "MATHML_LINT_FOREIGN_PREFIXES", "data-mjx-"
    )


settings = Settings()
