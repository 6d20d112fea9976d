"""Provisional bonus points from live BPS."""

from itertools import groupby
from typing import Iterable, Optional, Sequence

from .config import get_config
from .logging_config import get_logger
from .models import Fixture, FixtureStatus, PlayerLiveEntry
from .schemas import ScoringRules

logger = get_logger('fplive.bonus')


def compute_bonus(
    fixture_roster: Sequence[PlayerLiveEntry],
    status: FixtureStatus,
    rules: Optional[ScoringRules] = None,
) -> dict[int, int]:
    """
    Calculate provisional bonus for one fixture.

    Only fixtures in progress get provisional bonus. Finished fixtures
    already carry the official bonus in player stats, and fixtures that
    have not started award nothing.

    Ranking:
        - Only players with minutes > 0 are eligible
        - Players are ranked by BPS, highest first
        - Players with equal BPS share the rank they tie at and all get
          that rank's bonus (3, 2, 1)
        - The next group's rank skips past the tied players, so two
          players tied for 1st get 3 each and the next player gets 1

    Args:
        fixture_roster: Live entries for every player in the fixture
        status: Fixture status
        rules: Scoring rules (defaults to the configured rules)

    Returns:
        Dict mapping player_id to provisional bonus (0 if none) for every
        player in the roster
    """
    rules = rules or get_config()
    bonus = {entry.player_id: 0 for entry in fixture_roster}

    if status is not FixtureStatus.STARTED:
        return bonus

    eligible = [entry for entry in fixture_roster if entry.minutes > 0]
    # Stable sort keeps roster order within a BPS group
    ranked = sorted(eligible, key=lambda e: e.bps, reverse=True)

    rank = 1
    for _bps, group in groupby(ranked, key=lambda e: e.bps):
        if rank > len(rules.bonus_ladder):
            break
        tied = list(group)
        for entry in tied:
            bonus[entry.player_id] = rules.bonus_ladder[rank - 1]
        rank += len(tied)

    return bonus


def compute_provisional_bonus(
    fixtures: Iterable[Fixture],
    entries: Iterable[PlayerLiveEntry],
    rules: Optional[ScoringRules] = None,
) -> dict[int, int]:
    """
    Calculate provisional bonus for every fixture of a gameweek.

    Players are assigned to a fixture through their team. Players whose
    team is not in any given fixture are left out of the result.

    Args:
        fixtures: Gameweek fixtures with status
        entries: Live entries for all players (team_id required)
        rules: Scoring rules (defaults to the configured rules)

    Returns:
        Dict mapping player_id to provisional bonus
    """
    entries = list(entries)
    bonus: dict[int, int] = {}

    for fixture in sorted(fixtures, key=lambda f: f.fixture_id):
        roster = [e for e in entries if fixture.involves(e.team_id)]
        if not roster:
            continue
        fixture_bonus = compute_bonus(roster, fixture.status, rules)
        awarded = {pid: pts for pid, pts in fixture_bonus.items() if pts}
        if awarded:
            logger.debug(f'Fixture {fixture.fixture_id} provisional bonus: {awarded}')
        bonus.update(fixture_bonus)

    return bonus
