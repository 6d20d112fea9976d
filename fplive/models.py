"""Data models for the fplive scoring engine."""

from collections import Counter
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Mapping, Optional

from .constants import (
    BONUS_NONE,
    CHIP_BENCH_BOOST,
    CHIP_FREE_HIT,
    CHIP_TRIPLE_CAPTAIN,
    CHIP_WILDCARD,
    POSITION_LABELS,
)


class Position(Enum):
    """Playing position; values match the upstream element_type."""
    GKP = 1
    DEF = 2
    MID = 3
    FWD = 4

    @property
    def label(self) -> str:
        return POSITION_LABELS[self.value]


class FixtureStatus(Enum):
    NOT_STARTED = 'not_started'
    STARTED = 'started'
    FINISHED = 'finished'

    @classmethod
    def from_flags(cls, started: bool, finished: bool) -> 'FixtureStatus':
        """Map upstream started/finished flags to a status (finished wins)."""
        if finished:
            return cls.FINISHED
        if started:
            return cls.STARTED
        return cls.NOT_STARTED


class ChipState(Enum):
    NONE = 'none'
    TRIPLE_CAPTAIN = CHIP_TRIPLE_CAPTAIN
    BENCH_BOOST = CHIP_BENCH_BOOST
    FREE_HIT = CHIP_FREE_HIT
    WILDCARD = CHIP_WILDCARD

    @classmethod
    def from_code(cls, code: Optional[str]) -> 'ChipState':
        """Map an upstream ``active_chip`` code (or None) to a ChipState."""
        if not code:
            return cls.NONE
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f'Unknown chip code: {code!r}') from None


@dataclass(frozen=True)
class PlayerStatSnapshot:
    """Observed stats for one player in one gameweek."""
    player_id: int
    minutes: int = 0
    goals_scored: int = 0
    assists: int = 0
    clean_sheet: bool = False
    goals_conceded: int = 0
    own_goals: int = 0
    penalties_saved: int = 0
    penalties_missed: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    saves: int = 0
    bonus: int = 0
    bps: int = 0
    defensive_contribution: int = 0
    fixture_id: Optional[int] = None

    @classmethod
    def empty(cls, player_id: int) -> 'PlayerStatSnapshot':
        """All-zero snapshot for a player with no recorded stats yet."""
        return cls(player_id=player_id)


@dataclass(frozen=True)
class Fixture:
    fixture_id: int
    team_h: int
    team_a: int
    status: FixtureStatus = FixtureStatus.NOT_STARTED

    def involves(self, team_id: Optional[int]) -> bool:
        return team_id is not None and team_id in (self.team_h, self.team_a)


@dataclass(frozen=True)
class PlayerLiveEntry:
    """One row of a fixture roster, used to rank provisional bonus."""
    player_id: int
    bps: int
    minutes: int
    team_id: Optional[int] = None


@dataclass(frozen=True)
class SquadSlot:
    """A player in one of the 15 ordered squad positions."""
    player_id: int
    name: str
    position: Position
    ordinal: int  # 1-11 starting XI, 12-15 bench in priority order
    multiplier: int = 1
    is_captain: bool = False
    is_vice_captain: bool = False

    @property
    def is_starter(self) -> bool:
        return self.ordinal <= 11

    @property
    def is_bench(self) -> bool:
        return self.ordinal >= 12


@dataclass(frozen=True)
class Squad:
    """Fifteen squad slots, always held in ordinal order."""
    slots: tuple[SquadSlot, ...]

    def __post_init__(self):
        ordered = tuple(sorted(self.slots, key=lambda s: s.ordinal))
        object.__setattr__(self, 'slots', ordered)

    @property
    def starters(self) -> tuple[SquadSlot, ...]:
        return tuple(s for s in self.slots if s.is_starter)

    @property
    def bench(self) -> tuple[SquadSlot, ...]:
        return tuple(s for s in self.slots if s.is_bench)

    @property
    def captain(self) -> Optional[SquadSlot]:
        return next((s for s in self.slots if s.is_captain), None)

    @property
    def vice_captain(self) -> Optional[SquadSlot]:
        return next((s for s in self.slots if s.is_vice_captain), None)

    @property
    def player_ids(self) -> frozenset[int]:
        return frozenset(s.player_id for s in self.slots)

    def slot_for(self, player_id: int) -> Optional[SquadSlot]:
        return next((s for s in self.slots if s.player_id == player_id), None)

    def slot_for_ordinal(self, ordinal: int) -> Optional[SquadSlot]:
        return next((s for s in self.slots if s.ordinal == ordinal), None)

    def formation(self) -> Counter:
        """Position label counts of the starting XI."""
        return Counter(s.position.label for s in self.starters)


@dataclass(frozen=True)
class Substitution:
    player_out: SquadSlot
    player_in: SquadSlot
    reason: str


@dataclass(frozen=True)
class PointsBreakdown:
    """Points per scoring category; the total is always the field sum."""
    minutes: int = 0
    goals: int = 0
    assists: int = 0
    clean_sheet: int = 0
    goals_conceded: int = 0
    saves: int = 0
    penalties_saved: int = 0
    penalties_missed: int = 0
    cards: int = 0
    own_goals: int = 0
    bonus: int = 0
    defensive_contribution: int = 0

    @property
    def total(self) -> int:
        return sum(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class PlayerScore:
    """Container for a player's scored gameweek."""
    player_id: int
    name: str
    position: Position
    breakdown: PointsBreakdown = field(default_factory=PointsBreakdown)
    minutes: int = 0
    bps: int = 0
    bonus_source: str = BONUS_NONE
    fixture_status: Optional[FixtureStatus] = None
    found_in_stats: bool = False
    data_notes: tuple[str, ...] = ()  # Flags for missing or inconsistent data

    @property
    def total_points(self) -> int:
        return self.breakdown.total

    @property
    def has_played(self) -> bool:
        return self.minutes > 0 or self.fixture_status is FixtureStatus.FINISHED


@dataclass(frozen=True)
class ManagerEntry:
    """One manager's squad and chip for a gameweek."""
    entry_id: int
    name: str
    squad: Squad
    chip: ChipState = ChipState.NONE
    transfer_cost: int = 0


@dataclass(frozen=True)
class Participant:
    slot: SquadSlot
    multiplier: int


@dataclass(frozen=True)
class AdjustedParticipants:
    """The slots that count toward a total, with their effective multipliers."""
    chip: ChipState
    captain_multiplier: int
    participants: tuple[Participant, ...]

    @property
    def player_ids(self) -> frozenset[int]:
        return frozenset(p.slot.player_id for p in self.participants)

    def multiplier_for(self, player_id: int) -> int:
        """Effective multiplier, or 0 if the player does not count."""
        for p in self.participants:
            if p.slot.player_id == player_id:
                return p.multiplier
        return 0

    def total(self, points: Mapping[int, int]) -> int:
        """Sum of points x multiplier over the counted slots."""
        return sum(points.get(p.slot.player_id, 0) * p.multiplier for p in self.participants)


@dataclass(frozen=True)
class TeamTotal:
    starting_xi_total: int = 0
    captain_bonus: int = 0
    bench_boost_total: int = 0
    auto_sub_total: int = 0
    provisional_bonus: int = 0
    gross_total: int = 0
    transfer_cost: int = 0
    net_total: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class ScoredSquad:
    """A manager's fully scored gameweek."""
    entry: ManagerEntry
    resolved: Squad
    substitutions: tuple[Substitution, ...]
    scores: tuple[PlayerScore, ...]
    participants: AdjustedParticipants
    totals: TeamTotal

    @property
    def original(self) -> Squad:
        return self.entry.squad

    @property
    def net_total(self) -> int:
        return self.totals.net_total

    def score_for(self, player_id: int) -> Optional[PlayerScore]:
        return next((s for s in self.scores if s.player_id == player_id), None)

    def base_points(self, player_id: int) -> int:
        score = self.score_for(player_id)
        return score.total_points if score else 0

    def counted_multiplier(self, player_id: int) -> int:
        return self.participants.multiplier_for(player_id)

    def counted_points(self, player_id: int) -> int:
        return self.base_points(player_id) * self.counted_multiplier(player_id)

    def in_squad(self, player_id: int) -> bool:
        return player_id in self.original.player_ids

    def replacement_for(self, player_id: int) -> Optional[SquadSlot]:
        sub = next((s for s in self.substitutions if s.player_out.player_id == player_id), None)
        return sub.player_in if sub else None

    def was_subbed_in(self, player_id: int) -> bool:
        return any(s.player_in.player_id == player_id for s in self.substitutions)

    def was_subbed_out(self, player_id: int) -> bool:
        return any(s.player_out.player_id == player_id for s in self.substitutions)


@dataclass(frozen=True)
class DifferentialPlayer:
    """A contribution one side has that the other does not."""
    player_id: Optional[int]  # None for transfer-hit rows
    name: str
    points: int
    kind: str
    base_points: int = 0
    ordinal: int = 0  # Slot in the squad as picked, before substitutions
    multiplier: int = 1
    is_captain: bool = False
    subbed_in: bool = False
    has_played: bool = True


@dataclass(frozen=True)
class CommonPlayer:
    """A player counted by both sides, shown side by side."""
    player_id: int
    name: str
    base_points: int
    points_a: int
    points_b: int
    captain_a: bool = False
    captain_b: bool = False
    replaces: Optional[str] = None  # Name of the starter this player came on for
    placeholder: bool = False  # Subbed out on both sides with different replacements


@dataclass(frozen=True)
class SideBreakdown:
    entry_id: int
    name: str
    chip: ChipState
    score: int
    transfer_cost: int
    differentials: tuple[DifferentialPlayer, ...]

    @property
    def differential_total(self) -> int:
        return sum(d.points for d in self.differentials)


@dataclass(frozen=True)
class MatchBreakdown:
    """Head-to-head comparison of two scored squads."""
    side_a: SideBreakdown
    side_b: SideBreakdown
    common_players: tuple[CommonPlayer, ...]

    @property
    def margin(self) -> int:
        return abs(self.side_a.score - self.side_b.score)

    @property
    def leader(self) -> str:
        if self.side_a.score > self.side_b.score:
            return 'a'
        if self.side_b.score > self.side_a.score:
            return 'b'
        return 'draw'
