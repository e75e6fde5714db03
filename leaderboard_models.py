from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Optional, Tuple, Union

from leaderboard_config import (
    DEFAULT_BACKGROUND,
    DEFAULT_FONT_STYLES,
    DEFAULT_TITLE,
    DEFAULT_XP_PRIMARY,
    DEFAULT_XP_SECONDARY,
)


def _pick(data: Mapping, *keys, default=None):
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class Participant:
    nickname: str
    avatar_url: str
    level: int
    xp: float
    needed_xp: float

    @classmethod
    def from_dict(cls, data: Mapping) -> Participant:
        return cls(
            nickname=str(_pick(data, "nickname", "username", default="")),
            avatar_url=str(_pick(data, "avatar_url", "avatarUrl", default="")),
            level=_pick(data, "level", default=0),
            xp=_pick(data, "xp", default=0),
            needed_xp=_pick(data, "needed_xp", "neededXp", default=0),
        )


@dataclass(frozen=True)
class RankTier:
    name: str
    color: str
    min_xp: float

    @classmethod
    def from_dict(cls, data: Mapping) -> RankTier:
        return cls(
            name=data["name"],
            color=data["color"],
            min_xp=_pick(data, "min_xp", "minXp", default=0),
        )


# --- Backgrounds ---

class GradientKind(StrEnum):
    LEFT_RIGHT = "linear-left-right"
    RIGHT_LEFT = "linear-right-left"
    TOP_BOTTOM = "linear-top-bottom"
    BOTTOM_TOP = "linear-bottom-top"
    TOP_LEFT_BOTTOM_RIGHT = "linear-top-left-bottom-right"
    TOP_RIGHT_BOTTOM_LEFT = "linear-top-right-bottom-left"
    RADIAL = "radial"


@dataclass(frozen=True)
class SolidBackground:
    color: str


@dataclass(frozen=True)
class GradientBackground:
    # Kept as a plain string: unknown kinds are painted as the default diagonal
    kind: str
    colors: Tuple[str, ...]


@dataclass(frozen=True)
class AuroraSpot:
    color: str
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class AuroraBackground:
    base_color: str
    spots: Tuple[AuroraSpot, ...] = ()


BackgroundSpec = Union[SolidBackground, GradientBackground, AuroraBackground]


def parse_background(value) -> BackgroundSpec:
    """Convert a color string, a mapping or a spec object into a BackgroundSpec.

    Mappings follow the shapes accepted by ``LeaderboardBuilder.set_background``:
    ``{"type": "aurora", "baseColor": ..., "spots": [...]}`` or
    ``{"type": "radial", "colors": [...]}``.
    """
    if isinstance(value, (SolidBackground, GradientBackground, AuroraBackground)):
        return value
    if isinstance(value, str):
        return SolidBackground(value)
    if isinstance(value, Mapping):
        kind = value.get("type")
        if kind == "aurora":
            spots = tuple(
                spot if isinstance(spot, AuroraSpot) else AuroraSpot(
                    color=spot["color"], x=spot["x"], y=spot["y"], radius=spot["radius"]
                )
                for spot in value.get("spots", ())
            )
            base = _pick(value, "base_color", "baseColor", default=DEFAULT_BACKGROUND)
            return AuroraBackground(base_color=base, spots=spots)
        return GradientBackground(
            kind=str(kind or GradientKind.TOP_LEFT_BOTTOM_RIGHT),
            colors=tuple(value.get("colors", ())),
        )
    raise TypeError(f"Unsupported background: {value!r}")


# --- Styling ---

@dataclass(frozen=True)
class HeaderOptions:
    title: str = DEFAULT_TITLE
    subtitle: Optional[str] = None

    @property
    def has_subtitle(self) -> bool:
        return bool(self.subtitle)


@dataclass(frozen=True)
class PodiumColors:
    first: Optional[str] = None
    second: Optional[str] = None
    third: Optional[str] = None

    def color_for(self, position: int) -> Optional[str]:
        return {1: self.first, 2: self.second, 3: self.third}.get(position) or None


@dataclass(frozen=True)
class XpBarColors:
    primary: str = DEFAULT_XP_PRIMARY
    secondary: str = DEFAULT_XP_SECONDARY


@dataclass(frozen=True)
class FontStyles:
    header_title: Optional[str] = None
    header_subtitle: Optional[str] = None
    user_position: Optional[str] = None
    user_nickname: Optional[str] = None
    user_level: Optional[str] = None
    xp_text: Optional[str] = None
    rank_text: Optional[str] = None

    def get(self, element: str) -> str:
        return getattr(self, element) or DEFAULT_FONT_STYLES[element]

    @classmethod
    def element_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


@dataclass(frozen=True)
class RenderConfig:
    background: BackgroundSpec = SolidBackground(DEFAULT_BACKGROUND)
    header: HeaderOptions = HeaderOptions()
    podium: PodiumColors = PodiumColors()
    xp_bar: XpBarColors = XpBarColors()
    fonts: FontStyles = FontStyles()
    rank_visible: bool = True
    # Sorted by min_xp, descending
    rank_tiers: Tuple[RankTier, ...] = field(default_factory=tuple)
