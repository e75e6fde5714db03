from typing import Iterable, List, Optional, Sequence

from leaderboard_models import RankTier


def sort_tiers(tiers: Iterable[RankTier]) -> List[RankTier]:
    # sorted() is stable, tiers sharing a min_xp keep their given order
    return sorted(tiers, key=lambda tier: tier.min_xp, reverse=True)


def resolve_rank(tiers: Sequence[RankTier], xp) -> Optional[RankTier]:
    """Return the highest tier whose threshold ``xp`` reaches.

    ``tiers`` must already be ordered by ``min_xp`` descending.
    """
    if not tiers:
        return None
    return next((tier for tier in tiers if xp >= tier.min_xp), None)
