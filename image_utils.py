import logging
import re
from functools import lru_cache
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw

log = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]
Stop = Tuple[float, RGBA]

TRANSPARENT: RGBA = (0, 0, 0, 0)

_RGB_FUNC_RE = re.compile(
    r"^rgba?\(\s*([\d.]+%?)\s*,\s*([\d.]+%?)\s*,\s*([\d.]+%?)\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)


def _clamp(value, low, high):
    return max(low, min(high, value))


def _channel(part):
    if part.endswith("%"):
        return int(round(_clamp(float(part[:-1]), 0.0, 100.0) * 2.55))
    return int(round(_clamp(float(part), 0.0, 255.0)))


def _alpha(part):
    if part.endswith("%"):
        value = float(part[:-1]) / 100
    else:
        value = float(part)
    return int(round(_clamp(value, 0.0, 1.0) * 255))


@lru_cache(maxsize=256)
def parse_color(value: str) -> RGBA:
    # ImageColor.getrgb plus rgb()/rgba() with a 0-1 alpha; ValueError if unknown
    text = value.strip()
    if text.lower() == "transparent":
        return TRANSPARENT
    match = _RGB_FUNC_RE.match(text)
    if match:
        r, g, b, a = match.groups()
        return (_channel(r), _channel(g), _channel(b), 255 if a is None else _alpha(a))
    color = ImageColor.getrgb(text)
    if len(color) == 3:
        return color + (255,)
    return color


def to_rgba(value) -> RGBA:
    """Like parse_color, but an invalid color is logged and drawn transparent."""
    try:
        return parse_color(value)
    except (AttributeError, TypeError, ValueError):
        log.warning("Ignoring invalid color %r", value)
        return TRANSPARENT


def with_alpha(color, alpha):
    return color[:3] + (alpha,)


# --- Gradients ---

def even_stops(colors: Sequence[str]) -> List[Stop]:
    """Spread colors evenly over [0, 1]; a single color becomes a flat ramp."""
    if not colors:
        return []
    if len(colors) == 1:
        color = to_rgba(colors[0])
        return [(0.0, color), (1.0, color)]
    last = len(colors) - 1
    return [(index / last, to_rgba(color)) for index, color in enumerate(colors)]


def _pixel_grid(size):
    width, height = size
    xs = np.arange(width, dtype=np.float64) + 0.5
    ys = np.arange(height, dtype=np.float64) + 0.5
    return np.meshgrid(xs, ys)


def _colorize(t, stops: Sequence[Stop]) -> Image.Image:
    offsets = np.array([offset for offset, _ in stops], dtype=np.float64)
    colors = np.array([color for _, color in stops], dtype=np.float64)
    t = np.clip(t, 0.0, 1.0)
    rgba = np.stack([np.interp(t, offsets, colors[:, i]) for i in range(4)], axis=-1)
    return Image.fromarray(np.round(rgba).astype(np.uint8))


def linear_gradient(size, start, end, stops: Sequence[Stop]) -> Image.Image:
    # Pixels outside start..end take the first or last stop
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length_sq = dx * dx + dy * dy
    if not stops or length_sq == 0:
        return Image.new("RGBA", size, TRANSPARENT)
    xs, ys = _pixel_grid(size)
    t = ((xs - start[0]) * dx + (ys - start[1]) * dy) / length_sq
    return _colorize(t, stops)


def radial_gradient(size, center, radius, stops: Sequence[Stop]) -> Image.Image:
    if not stops or radius <= 0:
        return Image.new("RGBA", size, TRANSPARENT)
    xs, ys = _pixel_grid(size)
    t = np.hypot(xs - center[0], ys - center[1]) / radius
    return _colorize(t, stops)


# --- Masks ---

def circle_mask(diameter):
    mask = Image.new("L", (diameter, diameter), 0)
    mask_draw = ImageDraw.Draw(mask)
    mask_draw.ellipse((0, 0, diameter - 1, diameter - 1), fill=255)
    return mask


def rounded_mask(size, radius, width=0):
    w, h = size
    mask = Image.new("L", (w, h), 0)
    mask_draw = ImageDraw.Draw(mask)
    box = [(0, 0), (w - 1, h - 1)]
    if width:
        mask_draw.rounded_rectangle(box, radius=radius, outline=255, width=width)
    else:
        mask_draw.rounded_rectangle(box, radius=radius, fill=255)
    return mask


def scale_alpha(image, factor):
    if factor >= 1.0:
        return image
    scaled = image.copy()
    alpha = scaled.getchannel("A").point(lambda a: int(round(a * factor)))
    scaled.putalpha(alpha)
    return scaled
