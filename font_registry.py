from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import ImageFont

from leaderboard_config import FONT_DIR

log = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 10

_FONT_RE = re.compile(
    r"(?P<size>\d+(?:\.\d+)?)(?P<unit>px|pt)\s*(?:/\s*\S+\s+)?(?P<family>.*)$",
    re.IGNORECASE,
)

_registry: Dict[Tuple[str, str, str], str] = {}
_font_dir_loaded = False


@dataclass(frozen=True)
class FontSpec:
    family: str
    size: int
    weight: str = "normal"
    style: str = "normal"


def _normalize_weight(weight):
    token = str(weight).strip().lower()
    if token in ("bold", "bolder"):
        return "bold"
    if token.isdigit():
        return "bold" if int(token) >= 600 else "normal"
    return "normal"


def _normalize_style(style):
    return "italic" if str(style).strip().lower() in ("italic", "oblique") else "normal"


def parse_font(value: str) -> FontSpec:
    match = _FONT_RE.search(value or "")
    if not match:
        return FontSpec(family="", size=DEFAULT_FONT_SIZE)

    size = float(match.group("size"))
    if match.group("unit").lower() == "pt":
        size = size * 4 / 3
    family = match.group("family").split(",")[0].strip().strip("'\"")

    weight = style = "normal"
    for token in value[:match.start()].split():
        low = token.lower()
        if low in ("italic", "oblique"):
            style = "italic"
        elif low in ("bold", "bolder", "lighter", "normal") or low.isdigit():
            weight = _normalize_weight(low)
    return FontSpec(family=family, size=max(1, int(round(size))), weight=weight, style=style)


def register_font(path, family, weight="normal", style="normal"):
    try:
        ImageFont.truetype(str(path), DEFAULT_FONT_SIZE)
    except OSError as e:
        log.error("Error registering font %s from %s: %s", family, path, e)
        return False
    key = (family.lower(), _normalize_weight(weight), _normalize_style(style))
    _registry[key] = str(path)
    log.debug("Registered font %s (%s, %s) from %s", family, key[1], key[2], path)
    return True


def register_font_directory(directory):
    """Register every .ttf/.otf file in ``directory`` under its own family name."""
    count = 0
    for path in sorted(Path(directory).glob("*")):
        if path.suffix.lower() not in (".ttf", ".otf"):
            continue
        try:
            family, style_name = ImageFont.truetype(str(path), DEFAULT_FONT_SIZE).getname()
        except OSError as e:
            log.error("Skipping unreadable font %s: %s", path, e)
            continue
        style_name = (style_name or "").lower()
        weight = "bold" if any(w in style_name for w in ("bold", "black", "heavy")) else "normal"
        style = "italic" if ("italic" in style_name or "oblique" in style_name) else "normal"
        if register_font(path, family or path.stem, weight, style):
            count += 1
    return count


def clear_fonts():
    _registry.clear()
    _truetype.cache_clear()


def resolve_font_path(spec: FontSpec) -> Optional[str]:
    family = spec.family.lower()
    for key in (
        (family, spec.weight, spec.style),
        (family, spec.weight, "normal"),
        (family, "normal", spec.style),
        (family, "normal", "normal"),
    ):
        if key in _registry:
            return _registry[key]
    return next((path for (name, _, _), path in _registry.items() if name == family), None)


@lru_cache(maxsize=64)
def _truetype(path: str, size: int):
    return ImageFont.truetype(path, size)


@lru_cache(maxsize=32)
def _default_font(size: int):
    return ImageFont.load_default(size=size)


def load_font(value):
    spec = parse_font(value)
    path = resolve_font_path(spec)
    if path:
        try:
            return _truetype(path, spec.size)
        except OSError as e:
            log.warning("Could not load font %s from %s: %s", spec.family, path, e)
    return _default_font(spec.size)


def register_configured_fonts():
    """Register LEADERBOARD_FONT_DIR once per process, if it is set."""
    global _font_dir_loaded
    if _font_dir_loaded or not FONT_DIR:
        return
    _font_dir_loaded = True
    if not Path(FONT_DIR).is_dir():
        log.warning("LEADERBOARD_FONT_DIR %s is not a directory", FONT_DIR)
        return
    count = register_font_directory(FONT_DIR)
    log.info("Registered %d fonts from %s", count, FONT_DIR)
