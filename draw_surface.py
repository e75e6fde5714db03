"""Canvas-like drawing on a Pillow RGBA image; each draw is its own composited layer."""
import math
from io import BytesIO

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from image_utils import TRANSPARENT, circle_mask, rounded_mask, scale_alpha, to_rgba

TEXT_ANCHORS = {"left": "ls", "center": "ms", "right": "rs"}


class LeaderboardRenderError(RuntimeError):
    pass


def shadow_padding(blur):
    # GaussianBlur radius is blur / 2; keep three sigma of the tail inside the layer
    return int(math.ceil(max(blur, 0) * 1.5))


def _apply_mask(layer, mask):
    layer.putalpha(ImageChops.multiply(layer.getchannel("A"), mask))
    return layer


class Surface:
    def __init__(self, width, height):
        try:
            self.image = Image.new("RGBA", (int(width), int(height)), TRANSPARENT)
        except (MemoryError, ValueError) as e:
            raise LeaderboardRenderError(f"Could not allocate a {width}x{height} surface: {e}") from e
        self.global_alpha = 1.0

    @property
    def width(self):
        return self.image.width

    @property
    def height(self):
        return self.image.height

    def composite(self, layer, x=0, y=0):
        x, y = int(round(x)), int(round(y))
        left, top = max(x, 0), max(y, 0)
        right = min(x + layer.width, self.width)
        bottom = min(y + layer.height, self.height)
        if right <= left or bottom <= top:
            return
        if (left, top, right, bottom) != (x, y, x + layer.width, y + layer.height):
            layer = layer.crop((left - x, top - y, right - x, bottom - y))
        self.image.alpha_composite(scale_alpha(layer, self.global_alpha), (left, top))

    def _layer(self, size, paint):
        if isinstance(paint, Image.Image):
            return paint.convert("RGBA").crop((0, 0) + size)
        return Image.new("RGBA", size, to_rgba(paint))

    # --- Shapes ---

    def fill(self, paint):
        self.fill_rect(0, 0, self.width, self.height, paint)

    def fill_rect(self, x, y, width, height, paint):
        size = (int(round(width)), int(round(height)))
        if size[0] <= 0 or size[1] <= 0:
            return
        self.composite(self._layer(size, paint), x, y)

    def fill_rounded_rect(self, x, y, width, height, radius, paint):
        size = (max(1, int(round(width))), max(1, int(round(height))))
        layer = _apply_mask(self._layer(size, paint), rounded_mask(size, radius))
        self.composite(layer, x, y)

    def stroke_rounded_rect(self, x, y, width, height, radius, color, line_width=1):
        size = (max(1, int(round(width))), max(1, int(round(height))))
        layer = Image.new("RGBA", size, to_rgba(color))
        _apply_mask(layer, rounded_mask(size, radius, width=line_width))
        self.composite(layer, x, y)

    def draw_circular_image(self, image, center_x, center_y, radius):
        diameter = int(radius * 2)
        avatar = image.convert("RGBA").resize((diameter, diameter))
        _apply_mask(avatar, circle_mask(diameter))
        self.composite(avatar, center_x - radius, center_y - radius)

    # --- Text ---

    def fill_text(self, text, x, y, font, color, align="left", shadow=None):
        # y is the baseline; shadow is an optional (color, blur) pair
        if not text:
            return
        probe = ImageDraw.Draw(self.image)
        if isinstance(font, ImageFont.FreeTypeFont):
            anchor = TEXT_ANCHORS[align]
        else:
            anchor = None
            text_width = probe.textlength(text, font=font)
            x -= {"left": 0, "center": text_width / 2, "right": text_width}[align]
            y -= font.getbbox(text)[3]

        left, top, right, bottom = probe.textbbox((x, y), text, font=font, anchor=anchor)
        pad = shadow_padding(shadow[1]) if shadow else 0
        size = (max(1, int(right - left) + 2 * pad + 2), max(1, int(bottom - top) + 2 * pad + 2))
        origin = (x - left + pad, y - top + pad)

        # Glyph coverage goes into a mask so antialiased edges keep the fill color
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).text(origin, text, font=font, fill=255, anchor=anchor)

        if shadow:
            shadow_mask = mask.filter(ImageFilter.GaussianBlur(shadow[1] / 2)) if shadow[1] > 0 else mask
            shadow_layer = _apply_mask(Image.new("RGBA", size, to_rgba(shadow[0])), shadow_mask)
            self.composite(shadow_layer, left - pad, top - pad)

        layer = _apply_mask(Image.new("RGBA", size, to_rgba(color)), mask)
        self.composite(layer, left - pad, top - pad)

    # --- Output ---

    def to_png(self) -> bytes:
        buffer = BytesIO()
        try:
            self.image.save(buffer, format="PNG")
        except (OSError, ValueError) as e:
            raise LeaderboardRenderError(f"PNG encoding failed: {e}") from e
        return buffer.getvalue()
