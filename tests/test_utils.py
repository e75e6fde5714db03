import base64
from io import BytesIO
from typing import List, Tuple

from PIL import Image

from draw_surface import Surface
from leaderboard_models import Participant

RED = (255, 0, 0, 255)


def make_participant(
    nickname: str = "Player",
    xp: float = 1000,
    needed_xp: float = 2000,
    level: int = 5,
    avatar_url: str = "",
) -> Participant:
    return Participant(
        nickname=nickname,
        avatar_url=avatar_url or f"https://cdn.example.com/{nickname}.png",
        level=level,
        xp=xp,
        needed_xp=needed_xp,
    )


def make_participants(count: int) -> List[Participant]:
    return [
        make_participant(nickname=f"Player{i + 1}", xp=(count - i) * 1000, needed_xp=10000)
        for i in range(count)
    ]


def png_bytes(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_uri(image: Image.Image) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(image)).decode("ascii")


def decode_png(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    image.load()
    return image.convert("RGBA")


def _pixels(image: Image.Image):
    data = image.tobytes()
    bands = len(image.getbands())
    return [tuple(data[i:i + bands]) for i in range(0, len(data), bands)]


def close_to(pixel, color, tolerance: int = 8) -> bool:
    return all(abs(a - b) <= tolerance for a, b in zip(pixel, color))


def count_close(image: Image.Image, box, color, tolerance: int = 8) -> int:
    region = image.crop(box)
    return sum(1 for pixel in _pixels(region) if close_to(pixel, color, tolerance))


class FakeLoader:
    """Async avatar loader returning solid squares; sources in ``failing`` raise."""

    def __init__(self, failing=(), color=RED):
        self.failing = set(failing)
        self.color = color
        self.calls: List[str] = []

    async def __call__(self, source: str) -> Image.Image:
        self.calls.append(source)
        if source in self.failing:
            raise OSError(f"cannot fetch {source}")
        return Image.new("RGBA", (64, 64), self.color)


class RecordingSurface(Surface):
    """Surface that remembers the text, strokes and fills it was asked to draw."""

    def __init__(self, width, height):
        super().__init__(width, height)
        self.texts: List[Tuple] = []
        self.strokes: List[Tuple] = []
        self.fills: List[Tuple] = []
        self.shadows: List[Tuple] = []

    def fill_text(self, text, x, y, font, color, align="left", shadow=None):
        self.texts.append((text, x, y, color, align))
        self.shadows.append((text, shadow))
        super().fill_text(text, x, y, font, color, align, shadow)

    def stroke_rounded_rect(self, x, y, width, height, radius, color, line_width=1):
        self.strokes.append((x, y, width, height, color, line_width))
        super().stroke_rounded_rect(x, y, width, height, radius, color, line_width)

    def fill_rounded_rect(self, x, y, width, height, radius, paint):
        self.fills.append((x, y, width, height, paint))
        super().fill_rounded_rect(x, y, width, height, radius, paint)

    def text_values(self) -> List[str]:
        return [entry[0] for entry in self.texts]
