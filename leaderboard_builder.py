"""Fluent builder that collects leaderboard options and renders the image.

Example::

    image_bytes = await (
        LeaderboardBuilder()
        .add_font("fonts/Roboto-Bold.ttf", "Roboto", weight="bold")
        .set_header("Global Leaderboard", "Top Players")
        .set_podium(first="#FFD700", second="#C0C0C0", third="#CD7F32")
        .set_rank_tiers([RankTier("Master", "#E0B0FF", 5000), RankTier("Beginner", "#FFFFFF", 0)])
        .set_background({"type": "radial", "colors": ["#5865F2", "#0D0E12"]})
        .set_users(users)
        .set_limit(10)
        .build()
    )
"""
import re
from collections.abc import Mapping
from dataclasses import replace

from font_registry import register_font
from leaderboard_config import DEFAULT_BACKGROUND
from leaderboard_generator import generate_leaderboard_image
from leaderboard_models import (
    FontStyles,
    HeaderOptions,
    Participant,
    PodiumColors,
    RankTier,
    RenderConfig,
    SolidBackground,
    XpBarColors,
    parse_background,
)
from rank_resolver import sort_tiers

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


class LeaderboardBuilder:
    def __init__(self):
        self.users = []
        self.limit = None
        self.background = SolidBackground(DEFAULT_BACKGROUND)
        self.header = HeaderOptions()
        self.podium = PodiumColors()
        self.rank_visible = True
        self.rank_tiers = []
        self.xp_bar_colors = XpBarColors()
        self.font_styles = FontStyles()

    def add_font(self, path, family, weight="normal", style="normal"):
        """Register a font file; a failure is logged and the chain continues."""
        register_font(path, family, weight, style)
        return self

    def set_users(self, users):
        """Users must be sorted by rank already. Accepts Participant objects or dicts."""
        self.users = [
            Participant.from_dict(user) if isinstance(user, Mapping) else user
            for user in users
        ]
        return self

    def set_header(self, title, subtitle=None):
        self.header = HeaderOptions(title=title, subtitle=subtitle)
        return self

    def set_podium(self, first=None, second=None, third=None):
        self.podium = PodiumColors(first=first, second=second, third=third)
        return self

    def show_rank(self, visible=True):
        self.rank_visible = visible
        return self

    def set_rank_tiers(self, tiers):
        self.rank_tiers = sort_tiers(
            RankTier.from_dict(tier) if isinstance(tier, Mapping) else tier
            for tier in tiers
        )
        return self

    def set_xp_bar_colors(self, primary, secondary):
        self.xp_bar_colors = XpBarColors(primary=primary, secondary=secondary)
        return self

    def set_font_styles(self, **styles):
        """Override font strings per element, e.g. ``header_title="bold 48px Arial"``.

        camelCase names (``headerTitle``) are accepted too. Earlier overrides
        for other elements are kept.
        """
        known = FontStyles.element_names()
        updates = {}
        for name, value in styles.items():
            element = _snake_case(name)
            if element not in known:
                raise ValueError(f"Unknown font element: {name}")
            updates[element] = value
        self.font_styles = replace(self.font_styles, **updates)
        return self

    def set_limit(self, count):
        self.limit = count
        return self

    def set_background(self, options):
        """A color string, a gradient/aurora mapping or a BackgroundSpec instance."""
        self.background = parse_background(options)
        return self

    def to_config(self) -> RenderConfig:
        return RenderConfig(
            background=self.background,
            header=self.header,
            podium=self.podium,
            xp_bar=self.xp_bar_colors,
            fonts=self.font_styles,
            rank_visible=self.rank_visible,
            rank_tiers=tuple(self.rank_tiers),
        )

    async def build(self, loader=None, concurrency=None) -> bytes:
        return await generate_leaderboard_image(
            self.users, self.to_config(), self.limit, loader=loader, concurrency=concurrency
        )
