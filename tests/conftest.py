"""Shared fixtures for building squads and stat snapshots."""

import pytest

from fplive.config import clear_config_cache
from fplive.models import ManagerEntry, PlayerStatSnapshot, Position, Squad, SquadSlot

# Default 4-4-2 layout by ordinal, bench GKP/DEF/MID/FWD
DEFAULT_POSITIONS = {
    1: Position.GKP,
    2: Position.DEF,
    3: Position.DEF,
    4: Position.DEF,
    5: Position.DEF,
    6: Position.MID,
    7: Position.MID,
    8: Position.MID,
    9: Position.MID,
    10: Position.FWD,
    11: Position.FWD,
    12: Position.GKP,
    13: Position.DEF,
    14: Position.MID,
    15: Position.FWD,
}


def build_squad(player_ids=None, captain=None, vice_captain=None, positions=None):
    """
    Build a squad with player ids assigned to ordinals 1-15 in order.

    The captain defaults to the player in slot 10 and the vice-captain to
    the player in slot 6.
    """
    player_ids = list(player_ids or range(1, 16))
    positions = positions or DEFAULT_POSITIONS
    captain = player_ids[9] if captain is None else captain
    vice_captain = player_ids[5] if vice_captain is None else vice_captain

    slots = []
    for ordinal, pid in enumerate(player_ids, start=1):
        slots.append(
            SquadSlot(
                player_id=pid,
                name=f'Player {pid}',
                position=positions[ordinal],
                ordinal=ordinal,
                multiplier=0 if ordinal > 11 else (2 if pid == captain else 1),
                is_captain=pid == captain,
                is_vice_captain=pid == vice_captain,
            )
        )
    return Squad(tuple(slots))


def snapshot(player_id, minutes=90, fixture_id=1, **stats):
    """Stat snapshot for a player who played (90 minutes by default)."""
    return PlayerStatSnapshot(player_id=player_id, minutes=minutes, fixture_id=fixture_id, **stats)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Every test starts from the default rules."""
    monkeypatch.delenv('FPLIVE_RULES', raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def make_squad():
    return build_squad


@pytest.fixture
def make_snapshot():
    return snapshot


@pytest.fixture
def squad():
    """Default 4-4-2 squad of players 1-15, captain 10, vice-captain 6."""
    return build_squad()


@pytest.fixture
def make_entry():
    def _make_entry(entry_id=1, name='Manager', squad=None, **kwargs):
        return ManagerEntry(entry_id=entry_id, name=name, squad=squad or build_squad(), **kwargs)
    return _make_entry


@pytest.fixture
def full_minutes():
    """Every default squad player played 90 minutes."""
    return {pid: 90 for pid in range(1, 16)}

