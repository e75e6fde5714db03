from dataclasses import dataclass

from leaderboard_config import (
    BAR_WIDTH,
    BAR_WIDTH_NO_RANK,
    CANVAS_WIDTH,
    FOOTER_HEIGHT,
    HEADER_HEIGHT,
    HEADER_HEIGHT_WITH_SUBTITLE,
    ROW_HEIGHT,
)


@dataclass(frozen=True)
class LeaderboardLayout:
    width: int
    header_height: int
    row_height: int
    total_height: int

    def row_offset(self, index: int) -> int:
        return self.header_height + index * self.row_height


def compute_layout(has_subtitle: bool, row_count: int) -> LeaderboardLayout:
    header_height = HEADER_HEIGHT_WITH_SUBTITLE if has_subtitle else HEADER_HEIGHT
    return LeaderboardLayout(
        width=CANVAS_WIDTH,
        header_height=header_height,
        row_height=ROW_HEIGHT,
        total_height=header_height + row_count * ROW_HEIGHT + FOOTER_HEIGHT,
    )


def bar_width(rank_visible: bool) -> int:
    # The bar takes over the rank column when it is hidden
    return BAR_WIDTH if rank_visible else BAR_WIDTH_NO_RANK
