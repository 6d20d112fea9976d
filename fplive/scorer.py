"""Live scoring engine that ties the pipeline together.

stats -> points -> bonus -> substitutions -> chip -> total
"""

from dataclasses import replace
from typing import Iterable, Mapping, Optional

from .bonus import compute_bonus
from .chips import apply_chip, calculate_team_total
from .config import get_config
from .constants import BONUS_NONE, BONUS_OFFICIAL, BONUS_PROVISIONAL
from .logging_config import get_logger
from .models import (
    ChipState,
    Fixture,
    FixtureStatus,
    ManagerEntry,
    MatchBreakdown,
    PlayerLiveEntry,
    PlayerScore,
    PlayerStatSnapshot,
    ScoredSquad,
    SquadSlot,
)
from .reconciler import reconcile
from .schemas import ScoringRules
from .scoring import compute_points
from .substitutions import resolve_substitutions
from .validators import ensure_valid_squad

logger = get_logger('fplive.scorer')


class LiveScorer:
    """
    Scores managers against one gameweek's live data.

    Holds the immutable inputs for a gameweek (stat snapshots and fixture
    statuses) and derives provisional bonus from them once. Every method is
    a pure function of those inputs and its arguments.
    """

    def __init__(
        self,
        gameweek: int,
        stats: Mapping[int, PlayerStatSnapshot],
        fixtures: Iterable[Fixture] = (),
        rules: Optional[ScoringRules] = None,
        defer_unfinished_subs: bool = False,
    ):
        """
        Initialize scorer.

        Args:
            gameweek: Gameweek number
            stats: Stat snapshots keyed by player_id
            fixtures: Gameweek fixtures with their status
            rules: Scoring rules (defaults to the configured rules)
            defer_unfinished_subs: If True, a starter with 0 minutes is only
                substituted once their fixture has finished
        """
        self.gameweek = gameweek
        self.stats = dict(stats)
        self.fixtures = {f.fixture_id: f for f in fixtures}
        self.rules = rules or get_config()
        self.defer_unfinished_subs = defer_unfinished_subs
        self._provisional_bonus: Optional[dict[int, int]] = None

    @property
    def provisional_bonus(self) -> dict[int, int]:
        """Lazy provisional bonus for every player in a fixture in progress."""
        if self._provisional_bonus is None:
            bonus: dict[int, int] = {}
            for fixture_id in sorted(self.fixtures):
                fixture = self.fixtures[fixture_id]
                roster = [
                    PlayerLiveEntry(player_id=s.player_id, bps=s.bps, minutes=s.minutes)
                    for s in sorted(self.stats.values(), key=lambda s: s.player_id)
                    if s.fixture_id == fixture_id
                ]
                bonus.update(compute_bonus(roster, fixture.status, self.rules))
            self._provisional_bonus = bonus
        return self._provisional_bonus

    def fixture_status(self, player_id: int) -> Optional[FixtureStatus]:
        """Status of the player's fixture, or None if unknown."""
        snapshot = self.stats.get(player_id)
        if snapshot is None or snapshot.fixture_id is None:
            return None
        fixture = self.fixtures.get(snapshot.fixture_id)
        return fixture.status if fixture else None

    def _effective_bonus(
        self, snapshot: PlayerStatSnapshot, status: Optional[FixtureStatus]
    ) -> tuple[int, str]:
        if status is FixtureStatus.NOT_STARTED:
            return 0, BONUS_NONE
        if status is FixtureStatus.STARTED and snapshot.bonus == 0:
            provisional = self.provisional_bonus.get(snapshot.player_id, 0)
            return provisional, BONUS_PROVISIONAL if provisional else BONUS_NONE
        # Finished, unknown fixture, or bonus already confirmed
        return snapshot.bonus, BONUS_OFFICIAL if snapshot.bonus else BONUS_NONE

    def score_player(self, slot: SquadSlot) -> PlayerScore:
        """
        Score a single squad player.

        A player without a stat snapshot has simply not played yet: they are
        scored as all zeros and flagged in data_notes.

        Args:
            slot: Squad slot of the player

        Returns:
            PlayerScore with breakdown and bonus provenance
        """
        notes = []
        snapshot = self.stats.get(slot.player_id)
        found = snapshot is not None
        if snapshot is None:
            logger.debug(f'No live stats for {slot.name} ({slot.player_id}), scoring as 0')
            notes.append('No live stats yet (scored as 0)')
            snapshot = PlayerStatSnapshot.empty(slot.player_id)
        elif snapshot.fixture_id is not None and snapshot.fixture_id not in self.fixtures:
            notes.append(f'Unknown fixture {snapshot.fixture_id} (official bonus used)')

        status = self.fixture_status(slot.player_id)
        bonus, source = self._effective_bonus(snapshot, status)
        breakdown = compute_points(replace(snapshot, bonus=bonus), slot.position, self.rules)

        return PlayerScore(
            player_id=slot.player_id,
            name=slot.name,
            position=slot.position,
            breakdown=breakdown,
            minutes=snapshot.minutes,
            bps=snapshot.bps,
            bonus_source=source,
            fixture_status=status,
            found_in_stats=found,
            data_notes=tuple(notes),
        )

    def score_squad(self, entry: ManagerEntry) -> ScoredSquad:
        """
        Score a manager's squad for the gameweek.

        Raises:
            InvalidSquad: If the squad breaks the 15-slot or formation rules
            AmbiguousFormation: If substitutions leave an illegal XI
        """
        squad = ensure_valid_squad(entry.squad, self.rules)
        scores = tuple(self.score_player(slot) for slot in squad.slots)
        points = {s.player_id: s.total_points for s in scores}

        if entry.chip is ChipState.BENCH_BOOST:
            resolved, substitutions = squad, []
        else:
            minutes = {s.player_id: s.minutes for s in scores}
            pending = ()
            if self.defer_unfinished_subs:
                pending = tuple(
                    s.player_id for s in scores
                    if s.fixture_status in (FixtureStatus.NOT_STARTED, FixtureStatus.STARTED)
                )
            resolved, substitutions = resolve_substitutions(squad, minutes, pending, self.rules)

        participants = apply_chip(resolved, entry.chip, rules=self.rules)
        provisional = {
            s.player_id: s.breakdown.bonus for s in scores if s.bonus_source == BONUS_PROVISIONAL
        }
        totals = calculate_team_total(
            participants, points, substitutions, entry.transfer_cost, provisional
        )

        logger.info(
            f'GW{self.gameweek} {entry.name} ({entry.entry_id}): '
            f'{totals.net_total} pts, {len(substitutions)} auto-subs, chip={entry.chip.value}'
        )

        return ScoredSquad(
            entry=entry,
            resolved=resolved,
            substitutions=tuple(substitutions),
            scores=scores,
            participants=participants,
            totals=totals,
        )

    def score_entries(self, entries: Iterable[ManagerEntry]) -> dict[int, ScoredSquad]:
        """
        Score multiple managers.

        Args:
            entries: Managers to score

        Returns:
            Dict mapping entry_id to ScoredSquad, in input order
        """
        entries = list(entries)
        logger.info(f'Scoring {len(entries)} managers for GW{self.gameweek}')
        return {entry.entry_id: self.score_squad(entry) for entry in entries}

    def score_match(self, entry_a: ManagerEntry, entry_b: ManagerEntry) -> MatchBreakdown:
        """Score two managers and reconcile them head-to-head."""
        return reconcile(self.score_squad(entry_a), self.score_squad(entry_b))


def score_squad(
    entry: ManagerEntry,
    stats: Mapping[int, PlayerStatSnapshot],
    fixtures: Iterable[Fixture] = (),
    gameweek: int = 0,
    rules: Optional[ScoringRules] = None,
) -> ScoredSquad:
    """Score one manager without keeping a LiveScorer around."""
    return LiveScorer(gameweek, stats, fixtures, rules).score_squad(entry)
