"""Pydantic schemas for validating inputs at the system boundary.

Raw records coming from the ingestion layer (live stats, picks, bootstrap
elements, fixtures) are validated here once and converted into the frozen
dataclasses in ``fplive.models``. Nothing past this module sees untyped data.
"""

from typing import Optional

from pydantic import BaseModel, Field, RootModel, field_validator, model_validator

from .models import (
    ChipState,
    Fixture,
    FixtureStatus,
    PlayerStatSnapshot,
    Position,
)


class ScoringRules(BaseModel):
    """Scoring table and squad rules (official 2025/26 values by default)."""

    minutes_full_threshold: int = Field(60, ge=1)
    minutes_full_points: int = 2
    minutes_partial_points: int = 1

    goal_points: dict[str, int] = Field(
        default_factory=lambda: {'GKP': 10, 'DEF': 6, 'MID': 5, 'FWD': 4}
    )
    assist_points: int = 3
    clean_sheet_points: dict[str, int] = Field(
        default_factory=lambda: {'GKP': 4, 'DEF': 4, 'MID': 1, 'FWD': 0}
    )
    goals_conceded_per_point: int = Field(2, ge=1)
    saves_per_point: int = Field(3, ge=1)
    penalty_saved_points: int = 5
    penalty_missed_points: int = -2
    yellow_card_points: int = -1
    red_card_points: int = -3
    own_goal_points: int = -2

    defensive_contribution_thresholds: dict[str, int] = Field(
        default_factory=lambda: {'DEF': 10, 'MID': 12, 'FWD': 12}
    )
    defensive_contribution_points: int = 2

    bonus_ladder: list[int] = Field(default_factory=lambda: [3, 2, 1])

    formation_min: dict[str, int] = Field(
        default_factory=lambda: {'GKP': 1, 'DEF': 3, 'MID': 2, 'FWD': 1}
    )
    formation_max: dict[str, int] = Field(
        default_factory=lambda: {'GKP': 1, 'DEF': 5, 'MID': 5, 'FWD': 3}
    )

    captain_multiplier: int = Field(2, ge=1, le=3)
    triple_captain_multiplier: int = Field(3, ge=1, le=3)

    @field_validator(
        'goal_points',
        'clean_sheet_points',
        'defensive_contribution_thresholds',
        'formation_min',
        'formation_max',
    )
    @classmethod
    def validate_positions(cls, v):
        """Ensure all positions are valid."""
        valid_positions = {'GKP', 'DEF', 'MID', 'FWD'}
        for pos in v:
            if pos not in valid_positions:
                raise ValueError(f'Invalid position: {pos}')
        return v

    @field_validator('bonus_ladder')
    @classmethod
    def validate_bonus_ladder(cls, v):
        """Bonus ladder must be non-increasing and non-negative."""
        if any(b < 0 for b in v):
            raise ValueError(f'Bonus values must be non-negative, got {v}')
        if v != sorted(v, reverse=True):
            raise ValueError(f'Bonus ladder must be descending, got {v}')
        return v

    @model_validator(mode='after')
    def validate_formation_bounds(self):
        """Formation minimums must not exceed maximums."""
        for pos, low in self.formation_min.items():
            high = self.formation_max.get(pos)
            if high is not None and low > high:
                raise ValueError(f'Formation min for {pos} ({low}) exceeds max ({high})')
        return self

    def goal_value(self, position: Position) -> int:
        return self.goal_points.get(position.label, 0)

    def clean_sheet_value(self, position: Position) -> int:
        return self.clean_sheet_points.get(position.label, 0)

    def defensive_threshold(self, position: Position) -> Optional[int]:
        return self.defensive_contribution_thresholds.get(position.label)

    class Config:
        extra = 'forbid'


class LiveElementStats(BaseModel):
    """The ``stats`` block of one element in the live gameweek feed."""

    minutes: int = Field(0, ge=0)
    goals_scored: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)
    clean_sheets: int = Field(0, ge=0)
    goals_conceded: int = Field(0, ge=0)
    own_goals: int = Field(0, ge=0)
    penalties_saved: int = Field(0, ge=0)
    penalties_missed: int = Field(0, ge=0)
    yellow_cards: int = Field(0, ge=0)
    red_cards: int = Field(0, ge=0)
    saves: int = Field(0, ge=0)
    bonus: int = Field(0, ge=0)
    bps: int = 0
    defensive_contribution: int = Field(0, ge=0)
    total_points: int = 0

    class Config:
        extra = 'ignore'


class LiveExplain(BaseModel):
    """One fixture entry of an element's ``explain`` list."""

    fixture: int

    class Config:
        extra = 'ignore'


class LiveElement(BaseModel):
    """One element of the live gameweek feed."""

    id: int = Field(..., ge=1)
    stats: LiveElementStats
    explain: list[LiveExplain] = Field(default_factory=list)

    def to_snapshot(self) -> PlayerStatSnapshot:
        """Convert to a PlayerStatSnapshot (first fixture wins for double gameweeks)."""
        s = self.stats
        return PlayerStatSnapshot(
            player_id=self.id,
            minutes=s.minutes,
            goals_scored=s.goals_scored,
            assists=s.assists,
            clean_sheet=s.clean_sheets > 0,
            goals_conceded=s.goals_conceded,
            own_goals=s.own_goals,
            penalties_saved=s.penalties_saved,
            penalties_missed=s.penalties_missed,
            yellow_cards=s.yellow_cards,
            red_cards=s.red_cards,
            saves=s.saves,
            bonus=s.bonus,
            bps=s.bps,
            defensive_contribution=s.defensive_contribution,
            fixture_id=self.explain[0].fixture if self.explain else None,
        )

    class Config:
        extra = 'ignore'


class LiveFile(BaseModel):
    """Complete live gameweek payload."""

    elements: list[LiveElement]

    class Config:
        extra = 'ignore'


class ElementRecord(BaseModel):
    """Bootstrap element (player) metadata."""

    id: int = Field(..., ge=1)
    web_name: str = Field(..., min_length=1)
    element_type: int = Field(..., ge=1, le=4)
    team: int = Field(..., ge=1)

    @property
    def position(self) -> Position:
        return Position(self.element_type)

    class Config:
        extra = 'ignore'


class BootstrapFile(BaseModel):
    """The parts of bootstrap-static the engine needs."""

    elements: list[ElementRecord]

    class Config:
        extra = 'ignore'


class FixtureRecord(BaseModel):
    """One fixture of the gameweek fixtures list."""

    id: int = Field(..., ge=1)
    team_h: int = Field(..., ge=1)
    team_a: int = Field(..., ge=1)
    started: Optional[bool] = False
    finished: Optional[bool] = None
    finished_provisional: Optional[bool] = False

    @model_validator(mode='after')
    def validate_teams(self):
        """A team cannot play itself."""
        if self.team_h == self.team_a:
            raise ValueError(f'Fixture {self.id} has the same home and away team')
        return self

    def to_fixture(self) -> Fixture:
        # finished_provisional only stands in when upstream omits finished
        if self.finished is not None:
            finished = self.finished
        else:
            finished = bool(self.finished_provisional)
        return Fixture(
            fixture_id=self.id,
            team_h=self.team_h,
            team_a=self.team_a,
            status=FixtureStatus.from_flags(bool(self.started), finished),
        )

    class Config:
        extra = 'ignore'


class FixturesFile(RootModel[list[FixtureRecord]]):
    """Complete fixtures payload (a bare JSON list)."""


class PickRecord(BaseModel):
    """One pick of a manager's gameweek squad."""

    element: int = Field(..., ge=1)
    position: int = Field(..., ge=1, le=15)
    multiplier: int = Field(..., ge=0, le=3)
    is_captain: bool = False
    is_vice_captain: bool = False

    class Config:
        extra = 'ignore'


class EntryHistory(BaseModel):
    """Gameweek summary attached to a picks payload."""

    points: int = 0
    event_transfers_cost: int = Field(0, ge=0)

    class Config:
        extra = 'ignore'


class PicksFile(BaseModel):
    """Complete picks payload for one manager and gameweek."""

    active_chip: Optional[str] = None
    picks: list[PickRecord]
    entry_history: EntryHistory = Field(default_factory=EntryHistory)

    @field_validator('active_chip')
    @classmethod
    def validate_chip(cls, v):
        """Ensure the chip code is one we know."""
        ChipState.from_code(v)
        return v

    @field_validator('picks')
    @classmethod
    def validate_pick_count(cls, v):
        """A gameweek squad always has 15 picks."""
        if len(v) != 15:
            raise ValueError(f'Expected 15 picks, got {len(v)}')
        return v

    @property
    def chip(self) -> ChipState:
        return ChipState.from_code(self.active_chip)

    class Config:
        extra = 'ignore'
