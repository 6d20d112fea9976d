from .models import (
    AdjustedParticipants,
    ChipState,
    CommonPlayer,
    DifferentialPlayer,
    Fixture,
    FixtureStatus,
    ManagerEntry,
    MatchBreakdown,
    Participant,
    PlayerLiveEntry,
    PlayerScore,
    PlayerStatSnapshot,
    PointsBreakdown,
    Position,
    ScoredSquad,
    SideBreakdown,
    Squad,
    SquadSlot,
    Substitution,
    TeamTotal,
)
from .exceptions import AmbiguousFormation, InvalidSquad, InvalidStat, ScoringError
from .config import clear_config_cache, get_config
from .schemas import ScoringRules
from .scoring import compute_points
from .bonus import compute_bonus, compute_provisional_bonus
from .substitutions import resolve_substitutions
from .chips import apply_chip, calculate_team_total
from .reconciler import reconcile
from .scorer import LiveScorer, score_squad
from .validators import ensure_valid_squad, validate_all_scores, validate_squad
from .loader import GameweekData, build_squad, load_gameweek, load_manager
from .utils import load_json, parse_payload

__all__ = [
    # Models
    'AdjustedParticipants',
    'ChipState',
    'CommonPlayer',
    'DifferentialPlayer',
    'Fixture',
    'FixtureStatus',
    'ManagerEntry',
    'MatchBreakdown',
    'Participant',
    'PlayerLiveEntry',
    'PlayerScore',
    'PlayerStatSnapshot',
    'PointsBreakdown',
    'Position',
    'ScoredSquad',
    'SideBreakdown',
    'Squad',
    'SquadSlot',
    'Substitution',
    'TeamTotal',
    # Errors
    'ScoringError',
    'InvalidStat',
    'InvalidSquad',
    'AmbiguousFormation',
    # Configuration
    'ScoringRules',
    'get_config',
    'clear_config_cache',
    # Scoring pipeline
    'compute_points',
    'compute_bonus',
    'compute_provisional_bonus',
    'resolve_substitutions',
    'apply_chip',
    'calculate_team_total',
    'LiveScorer',
    'score_squad',
    # Head-to-head
    'reconcile',
    # Validation
    'validate_squad',
    'ensure_valid_squad',
    'validate_all_scores',
    # JSON inputs
    'GameweekData',
    'load_gameweek',
    'load_manager',
    'build_squad',
    'load_json',
    'parse_payload',
]
