"""Load a gameweek's inputs from JSON files.

Files follow the upstream API payloads:
    - live.json: /event/{gw}/live/
    - fixtures.json: /fixtures/?event={gw}
    - bootstrap.json: /bootstrap-static/ (only ``elements`` is read)
    - picks JSON: /entry/{id}/event/{gw}/picks/
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from .logging_config import get_logger
from .models import Fixture, ManagerEntry, PlayerStatSnapshot, Squad, SquadSlot
from .schemas import BootstrapFile, ElementRecord, FixturesFile, LiveFile, PicksFile
from .utils import load_json

logger = get_logger('fplive.loader')


@dataclass(frozen=True)
class GameweekData:
    """Validated live inputs shared by every manager in a gameweek."""
    stats: dict[int, PlayerStatSnapshot]
    fixtures: tuple[Fixture, ...]
    elements: dict[int, ElementRecord]


def load_elements(bootstrap_path: str | Path) -> dict[int, ElementRecord]:
    """Load player metadata keyed by element id."""
    bootstrap = load_json(bootstrap_path, schema=BootstrapFile)
    return {e.id: e for e in bootstrap.elements}


def _assign_fixture(
    snapshot: PlayerStatSnapshot,
    elements: Mapping[int, ElementRecord],
    fixtures: tuple[Fixture, ...],
) -> PlayerStatSnapshot:
    """Fill in a missing fixture_id from the player's team."""
    if snapshot.fixture_id is not None:
        return snapshot
    element = elements.get(snapshot.player_id)
    if element is None:
        return snapshot
    fixture = next((f for f in fixtures if f.involves(element.team)), None)
    if fixture is None:
        return snapshot
    return replace(snapshot, fixture_id=fixture.fixture_id)


def load_gameweek(
    live_path: str | Path,
    fixtures_path: str | Path,
    bootstrap_path: str | Path,
) -> GameweekData:
    """
    Load and validate the live data for one gameweek.

    Args:
        live_path: Path to the live stats payload
        fixtures_path: Path to the gameweek fixtures payload
        bootstrap_path: Path to the bootstrap payload

    Returns:
        GameweekData with snapshots keyed by player_id

    Raises:
        FileNotFoundError: If a file doesn't exist
        ValueError: If a file fails schema validation

    Example:
        gw = load_gameweek('data/gw12/live.json', 'data/gw12/fixtures.json',
                           'data/bootstrap.json')
        scorer = LiveScorer(12, gw.stats, gw.fixtures)
    """
    live = load_json(live_path, schema=LiveFile)
    fixture_records = load_json(fixtures_path, schema=FixturesFile).root
    fixtures = tuple(record.to_fixture() for record in fixture_records)
    elements = load_elements(bootstrap_path)

    stats = {}
    for element in live.elements:
        stats[element.id] = _assign_fixture(element.to_snapshot(), elements, fixtures)

    logger.info(
        f'Loaded {len(stats)} player snapshots, {len(fixtures)} fixtures, '
        f'{len(elements)} elements'
    )
    return GameweekData(stats=stats, fixtures=fixtures, elements=elements)


def build_squad(picks: PicksFile, elements: Mapping[int, ElementRecord]) -> Squad:
    """
    Build a Squad from validated picks.

    Raises:
        ValueError: If a pick refers to an element missing from bootstrap
    """
    slots = []
    for pick in picks.picks:
        element = elements.get(pick.element)
        if element is None:
            raise ValueError(f'Pick {pick.position} refers to unknown element {pick.element}')
        slots.append(
            SquadSlot(
                player_id=pick.element,
                name=element.web_name,
                position=element.position,
                ordinal=pick.position,
                multiplier=pick.multiplier,
                is_captain=pick.is_captain,
                is_vice_captain=pick.is_vice_captain,
            )
        )
    return Squad(tuple(slots))


def load_manager(
    picks_path: str | Path,
    elements: Mapping[int, ElementRecord],
    entry_id: int,
    name: str,
) -> ManagerEntry:
    """Load one manager's picks, chip and transfer cost."""
    picks = load_json(picks_path, schema=PicksFile)
    entry = ManagerEntry(
        entry_id=entry_id,
        name=name,
        squad=build_squad(picks, elements),
        chip=picks.chip,
        transfer_cost=picks.entry_history.event_transfers_cost,
    )
    logger.debug(f'Loaded {name} ({entry_id}): chip={entry.chip.value}, hits={entry.transfer_cost}')
    return entry
