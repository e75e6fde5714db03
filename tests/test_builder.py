import asyncio

import pytest

from font_registry import clear_fonts
from leaderboard_builder import LeaderboardBuilder
from leaderboard_models import (
    AuroraBackground,
    AuroraSpot,
    FontStyles,
    GradientBackground,
    Participant,
    RankTier,
    SolidBackground,
)
from tests.test_utils import FakeLoader, decode_png, make_participants


def test_defaults():
    config = LeaderboardBuilder().to_config()
    assert config.background == SolidBackground("#0D0E12")
    assert config.header.title == "Leaderboard"
    assert config.header.subtitle is None
    assert config.rank_visible is True
    assert config.rank_tiers == ()
    assert config.xp_bar.primary == "#5865F2"
    assert config.xp_bar.secondary == "#A458F2"
    assert config.fonts.get("header_title") == "bold 42px Roboto"


def test_rank_tiers_sorted_descending_and_stable():
    builder = LeaderboardBuilder().set_rank_tiers([
        {"name": "Beginner", "color": "#FFFFFF", "minXp": 0},
        {"name": "Silver", "color": "#C0C0C0", "minXp": 1000},
        RankTier("Master", "#E0B0FF", 5000),
        {"name": "Bronze", "color": "#CD7F32", "min_xp": 1000},
    ])
    assert [tier.name for tier in builder.to_config().rank_tiers] == ["Master", "Silver", "Bronze", "Beginner"]


def test_set_background_variants():
    builder = LeaderboardBuilder()
    assert builder.set_background("#2C2F33").background == SolidBackground("#2C2F33")

    builder.set_background({"type": "radial", "colors": ["#5865F2", "#0D0E12"]})
    assert builder.background == GradientBackground("radial", ("#5865F2", "#0D0E12"))

    builder.set_background({
        "type": "aurora",
        "baseColor": "#0D0E12",
        "spots": [{"color": "#5865f2", "x": 0, "y": 0, "radius": 500}],
    })
    assert builder.background == AuroraBackground("#0D0E12", (AuroraSpot("#5865f2", 0, 0, 500),))

    spec = GradientBackground("linear-top-bottom", ("#000000", "#ffffff"))
    assert builder.set_background(spec).background is spec


def test_font_styles_merge():
    builder = LeaderboardBuilder()
    builder.set_font_styles(headerTitle="bold 48px Arial")
    builder.set_font_styles(user_nickname='24px "Open Sans"')
    fonts = builder.to_config().fonts
    assert fonts == FontStyles(header_title="bold 48px Arial", user_nickname='24px "Open Sans"')
    assert fonts.get("user_level") == "16px Roboto"


def test_unknown_font_element_is_rejected():
    with pytest.raises(ValueError):
        LeaderboardBuilder().set_font_styles(footer="10px Arial")


def test_podium_header_and_bar_colors():
    config = (
        LeaderboardBuilder()
        .set_header("Global Leaderboard", "Top Players")
        .set_podium(first="#FFD700", second="#C0C0C0")
        .set_xp_bar_colors("#00ff00", "#00aa00")
        .show_rank(False)
        .to_config()
    )
    assert config.header.has_subtitle
    assert config.podium.color_for(1) == "#FFD700"
    assert config.podium.color_for(3) is None
    assert config.podium.color_for(7) is None
    assert config.xp_bar.secondary == "#00aa00"
    assert config.rank_visible is False


def test_set_users_accepts_dicts():
    builder = LeaderboardBuilder().set_users([
        {"nickname": "PlayerOne", "avatarUrl": "one.png", "level": 15, "xp": 3500, "neededXp": 4000},
    ])
    assert builder.users == [Participant("PlayerOne", "one.png", 15, 3500, 4000)]


def test_add_font_failure_keeps_chain(tmp_path):
    builder = LeaderboardBuilder()
    try:
        assert builder.add_font(tmp_path / "missing.ttf", "Missing", weight="bold") is builder
    finally:
        clear_fonts()


def test_build_renders_png():
    loader = FakeLoader()
    data = asyncio.run(
        LeaderboardBuilder()
        .set_header("Weekly", "Season 3")
        .set_users(make_participants(5))
        .set_limit(3)
        .set_background({"type": "linear-top-bottom", "colors": ["#1e1e2e", "#11111b"]})
        .build(loader=loader)
    )
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    assert decode_png(data).size == (900, 150 + 300 + 20)
    assert len(loader.calls) == 3
