import json
import os
import shutil
from dataclasses import dataclass
from typing import Any, Dict, Optional

from docnorm.pdf.optimize import DEFAULT_PDF_SETTINGS, GhostscriptOptimizer

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SETTINGS_PATH = os.path.join(PROJECT_ROOT, "config", "settings.json")


@dataclass
class Settings:
    max_side: int = 2000
    jpeg_quality: int = 75
    ghostscript_enabled: bool = False
    ghostscript_path: Optional[str] = None
    ghostscript_pdf_settings: str = DEFAULT_PDF_SETTINGS
    ghostscript_timeout: Optional[float] = 120.0
    batch_workers: int = 1


def _resolve_path(base: str, relative: str) -> str:
    return os.path.abspath(os.path.join(base, relative))


def _pick(section: Dict[str, Any], key: str, kind, default, allow_none: bool = False):
    if key not in section:
        return default
    value = section[key]
    if value is None and allow_none:
        return None
    if isinstance(value, bool) and kind is not bool:
        ok = False
    elif kind is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        ok = isinstance(value, kind)
    if not ok:
        print(f"Warning: settings key '{key}' has invalid value {value!r}; using {default!r}")
        return default
    return value


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        print(f"Warning: settings section '{name}' must be a JSON object; using defaults")
        return {}
    return section


def load_settings(path: str = SETTINGS_PATH) -> Settings:
    """Load settings from config/settings.json, falling back to defaults."""
    settings = Settings()

    if not os.path.exists(path):
        print(f"Warning: settings.json not found at {path}")
        return settings

    try:
        with open(path, "r", encoding="utf-8") as settings_file:
            raw = json.load(settings_file) or {}
    except Exception as exc:
        print(f"Warning: Could not load settings from {path}: {exc}")
        return settings

    if not isinstance(raw, dict):
        print(f"Warning: settings at {path} must be a JSON object")
        return settings

    normalize = _section(raw, "normalize")
    gs = _section(raw, "ghostscript")
    batch = _section(raw, "batch")

    settings.max_side = _pick(normalize, "max_side", int, settings.max_side)
    if settings.max_side <= 0:
        print(f"Warning: normalize.max_side must be positive; using {Settings.max_side}")
        settings.max_side = Settings.max_side
    settings.jpeg_quality = _pick(normalize, "jpeg_quality", int, settings.jpeg_quality)

    settings.ghostscript_enabled = _pick(gs, "enabled", bool, settings.ghostscript_enabled)
    settings.ghostscript_path = _pick(gs, "path", str, settings.ghostscript_path, allow_none=True)
    settings.ghostscript_pdf_settings = _pick(gs, "pdf_settings", str, settings.ghostscript_pdf_settings)
    settings.ghostscript_timeout = _pick(gs, "timeout", float, settings.ghostscript_timeout, allow_none=True)

    settings.batch_workers = max(1, _pick(batch, "workers", int, settings.batch_workers))
    return settings


def configure_dependencies(settings: Settings, project_root: str = PROJECT_ROOT) -> Optional[GhostscriptOptimizer]:
    """Return a Ghostscript optimizer when enabled and the binary can be found."""
    if not settings.ghostscript_enabled:
        return None

    candidate = settings.ghostscript_path or "gs"
    if os.sep in candidate or (os.altsep and os.altsep in candidate):
        candidate = _resolve_path(project_root, candidate)
        if not os.path.exists(candidate):
            print(f"Warning: Ghostscript path from config does not exist: {candidate}")
            return None
    elif shutil.which(candidate) is None:
        print(f"Warning: Ghostscript executable '{candidate}' not found on PATH")
        return None

    return GhostscriptOptimizer(
        executable=candidate,
        pdf_settings=settings.ghostscript_pdf_settings,
        timeout=settings.ghostscript_timeout,
    )
