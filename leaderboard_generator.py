import asyncio
import logging
from collections.abc import Mapping

from avatar_loader import load_avatar
from background_generator import paint_background
from draw_surface import Surface
from font_registry import load_font, register_configured_fonts
from image_utils import even_stops, linear_gradient
from leaderboard_config import (
    AVATAR_CENTER_OFFSET_Y, AVATAR_CENTER_X, AVATAR_CONCURRENCY, AVATAR_RADIUS,
    BAR_HEIGHT, BAR_OFFSET_Y, BAR_RADIUS, BAR_TRACK_COLOR, BAR_X,
    CARD_BORDER, CARD_BORDER_WIDTH, CARD_FILL, CARD_HEIGHT, CARD_MARGIN, CARD_RADIUS,
    HEADER_SHADOW_BLUR, HEADER_SHADOW_COLOR, HEADER_SUBTITLE_Y, HEADER_TITLE_Y,
    LEVEL_OFFSET_Y, NICKNAME_OFFSET_Y, PODIUM_BORDER_WIDTH, POSITION_OFFSET_Y, POSITION_X,
    RANK_OFFSET_Y, RANK_RIGHT_MARGIN, TEXT_PRIMARY, TEXT_SECONDARY, TEXT_X, XP_TEXT_OFFSET_Y,
)
from leaderboard_layout import bar_width, compute_layout
from leaderboard_models import Participant, RenderConfig
from rank_resolver import resolve_rank

log = logging.getLogger(__name__)


def _format_number(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def xp_text(participant: Participant) -> str:
    # Raw values, even when xp is past needed_xp
    return f"{_format_number(participant.xp)} / {_format_number(participant.needed_xp)}"


def progress_ratio(participant: Participant) -> float:
    if participant.needed_xp > 0:
        return participant.xp / participant.needed_xp
    return 0


def fill_width(participant: Participant, width) -> float:
    return width * min(max(progress_ratio(participant), 0.0), 1.0)


def apply_limit(participants, limit):
    rows = list(participants)
    if limit and limit > 0:
        return rows[:limit]
    return rows


async def fetch_avatar(participant: Participant, loader):
    try:
        return await loader(participant.avatar_url)
    except Exception as e:
        log.warning("Could not load avatar for %s (%s): %s", participant.nickname, participant.avatar_url[:80], e)
        return None


async def prefetch_avatars(rows, loader, concurrency):
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch(participant):
        async with semaphore:
            return await fetch_avatar(participant, loader)

    # gather keeps the results in row order
    return await asyncio.gather(*(fetch(participant) for participant in rows))


def draw_header(surface, config: RenderConfig):
    shadow = (HEADER_SHADOW_COLOR, HEADER_SHADOW_BLUR)
    center_x = surface.width / 2
    surface.fill_text(
        config.header.title, center_x, HEADER_TITLE_Y,
        load_font(config.fonts.get("header_title")), TEXT_PRIMARY, align="center", shadow=shadow,
    )
    if config.header.has_subtitle:
        surface.fill_text(
            config.header.subtitle, center_x, HEADER_SUBTITLE_Y,
            load_font(config.fonts.get("header_subtitle")), TEXT_SECONDARY, align="center", shadow=shadow,
        )


def draw_row(surface, layout, index, participant: Participant, config: RenderConfig, avatar=None):
    position = index + 1
    y = layout.row_offset(index)
    fonts = config.fonts

    # --- Card ---
    card_width = layout.width - 2 * CARD_MARGIN
    surface.fill_rounded_rect(CARD_MARGIN, y, card_width, CARD_HEIGHT, CARD_RADIUS, CARD_FILL)
    surface.stroke_rounded_rect(CARD_MARGIN, y, card_width, CARD_HEIGHT, CARD_RADIUS, CARD_BORDER, CARD_BORDER_WIDTH)

    podium_color = config.podium.color_for(position)
    if podium_color:
        surface.stroke_rounded_rect(
            CARD_MARGIN, y, card_width, CARD_HEIGHT, CARD_RADIUS, podium_color, PODIUM_BORDER_WIDTH
        )

    surface.fill_text(
        str(position), POSITION_X, y + POSITION_OFFSET_Y,
        load_font(fonts.get("user_position")), TEXT_SECONDARY, align="center",
    )

    # --- Avatar ---
    if avatar is not None:
        surface.draw_circular_image(avatar, AVATAR_CENTER_X, y + AVATAR_CENTER_OFFSET_Y, AVATAR_RADIUS)

    # --- Name & Level ---
    surface.fill_text(participant.nickname, TEXT_X, y + NICKNAME_OFFSET_Y, load_font(fonts.get("user_nickname")), TEXT_PRIMARY)
    surface.fill_text(f"Level {participant.level}", TEXT_X, y + LEVEL_OFFSET_Y, load_font(fonts.get("user_level")), TEXT_SECONDARY)

    # --- XP Bar ---
    width = bar_width(config.rank_visible)
    bar_y = y + BAR_OFFSET_Y
    surface.fill_rounded_rect(BAR_X, bar_y, width, BAR_HEIGHT, BAR_RADIUS, BAR_TRACK_COLOR)

    filled = fill_width(participant, width)
    if filled > 0:
        # The gradient spans the whole track so the colors don't shift with progress
        stops = even_stops([config.xp_bar.primary, config.xp_bar.secondary])
        gradient = linear_gradient((width, BAR_HEIGHT), (0, 0), (width, 0), stops)
        surface.fill_rounded_rect(BAR_X, bar_y, filled, BAR_HEIGHT, BAR_RADIUS, gradient)

    surface.fill_text(
        xp_text(participant), BAR_X + width, y + XP_TEXT_OFFSET_Y,
        load_font(fonts.get("xp_text")), TEXT_PRIMARY, align="right",
    )

    # --- Rank ---
    if config.rank_visible:
        rank = resolve_rank(config.rank_tiers, participant.xp)
        if rank:
            surface.fill_text(
                rank.name, layout.width - RANK_RIGHT_MARGIN, y + RANK_OFFSET_Y,
                load_font(fonts.get("rank_text")), rank.color, align="right",
            )


async def paint_row(surface, layout, index, participant: Participant, config: RenderConfig, loader=load_avatar):
    avatar = await fetch_avatar(participant, loader)
    draw_row(surface, layout, index, participant, config, avatar)


async def generate_leaderboard_image(participants, config=None, limit=None, *, loader=None, concurrency=None) -> bytes:
    """Render the leaderboard and return it as PNG bytes.

    ``participants`` must already be sorted; row N shows the N-th entry.
    With ``concurrency`` above 1 the avatars are fetched in parallel first,
    the rows themselves are always drawn top to bottom.
    """
    config = config or RenderConfig()
    loader = loader or load_avatar
    concurrency = concurrency or AVATAR_CONCURRENCY
    register_configured_fonts()

    rows = [
        participant if not isinstance(participant, Mapping) else Participant.from_dict(participant)
        for participant in apply_limit(participants, limit)
    ]
    layout = compute_layout(config.header.has_subtitle, len(rows))

    surface = Surface(layout.width, layout.total_height)
    paint_background(surface, config.background)
    draw_header(surface, config)

    if concurrency > 1:
        avatars = await prefetch_avatars(rows, loader, concurrency)
        for index, participant in enumerate(rows):
            draw_row(surface, layout, index, participant, config, avatars[index])
    else:
        for index, participant in enumerate(rows):
            await paint_row(surface, layout, index, participant, config, loader)

    log.debug("Rendered leaderboard with %d rows (%dx%d)", len(rows), layout.width, layout.total_height)
    return surface.to_png()
