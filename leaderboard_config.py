import os

from dotenv import load_dotenv

load_dotenv()


def _parse_float(value, default):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# --- Environment ---
LOG_LEVEL = os.getenv("LEADERBOARD_LOG_LEVEL", "INFO").strip()
AVATAR_TIMEOUT = _parse_float(os.getenv("LEADERBOARD_AVATAR_TIMEOUT"), 10.0)
AVATAR_CONCURRENCY = max(1, _parse_int(os.getenv("LEADERBOARD_AVATAR_CONCURRENCY"), 1))
USER_AGENT = os.getenv("LEADERBOARD_USER_AGENT", "leaderboard-card/1.0").strip()
FONT_DIR = os.getenv("LEADERBOARD_FONT_DIR", "").strip()

# --- Canvas ---
CANVAS_WIDTH = 900
HEADER_HEIGHT = 120
HEADER_HEIGHT_WITH_SUBTITLE = 150
ROW_HEIGHT = 100
FOOTER_HEIGHT = 20

HEADER_TITLE_Y = 85
HEADER_SUBTITLE_Y = 115
HEADER_SHADOW_COLOR = "rgba(0, 0, 0, 0.5)"
HEADER_SHADOW_BLUR = 10

# --- Row card ---
CARD_MARGIN = 30
CARD_HEIGHT = 90
CARD_RADIUS = 15
CARD_FILL = "rgba(255, 255, 255, 0.04)"
CARD_BORDER = "rgba(255, 255, 255, 0.1)"
CARD_BORDER_WIDTH = 1
PODIUM_BORDER_WIDTH = 2

# Position index
POSITION_X = 80
POSITION_OFFSET_Y = 58

# Avatar
AVATAR_CENTER_X = 170
AVATAR_CENTER_OFFSET_Y = 45
AVATAR_RADIUS = 30

# Nickname / level
TEXT_X = 225
NICKNAME_OFFSET_Y = 40
LEVEL_OFFSET_Y = 65

# XP Bar Layout
BAR_X = 450
BAR_OFFSET_Y = 45
BAR_WIDTH = 200
BAR_WIDTH_NO_RANK = 350
BAR_HEIGHT = 10
BAR_RADIUS = 5
BAR_TRACK_COLOR = "rgba(0, 0, 0, 0.3)"
XP_TEXT_OFFSET_Y = 70

# Rank label
RANK_RIGHT_MARGIN = 50
RANK_OFFSET_Y = 58

# --- Colors ---
TEXT_PRIMARY = "#FFFFFF"
TEXT_SECONDARY = "#B9BBBE"

DEFAULT_BACKGROUND = "#0D0E12"
DEFAULT_TITLE = "Leaderboard"
DEFAULT_XP_PRIMARY = "#5865F2"
DEFAULT_XP_SECONDARY = "#A458F2"

# Aurora spots are painted with this global alpha
AURORA_ALPHA = 0.4

# Font settings
DEFAULT_FONT_STYLES = {
    "header_title": "bold 42px Roboto",
    "header_subtitle": "22px Roboto",
    "user_position": "bold 30px Roboto",
    "user_nickname": "bold 22px Roboto",
    "user_level": "16px Roboto",
    "xp_text": "bold 10px Roboto",
    "rank_text": "bold 22px Roboto",
}
