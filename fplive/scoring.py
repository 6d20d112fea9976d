"""Points calculation for a single player's gameweek."""

from dataclasses import fields
from typing import Optional

from .config import get_config
from .exceptions import InvalidStat
from .models import PlayerStatSnapshot, PointsBreakdown, Position
from .schemas import ScoringRules


def _check_stats(stats: PlayerStatSnapshot) -> None:
    """Reject snapshots holding negative or non-integer counts."""
    for f in fields(stats):
        if f.name in ('player_id', 'fixture_id', 'bps', 'clean_sheet'):
            continue
        value = getattr(stats, f.name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidStat(stats.player_id, f.name, value)
    if not isinstance(stats.clean_sheet, bool):
        raise InvalidStat(stats.player_id, 'clean_sheet', stats.clean_sheet)
    if isinstance(stats.bps, bool) or not isinstance(stats.bps, int):
        raise InvalidStat(stats.player_id, 'bps', stats.bps)


def compute_points(
    stats: PlayerStatSnapshot,
    position: Position,
    rules: Optional[ScoringRules] = None,
) -> PointsBreakdown:
    """
    Score one player's gameweek.

    Scoring (official table, configurable through ScoringRules):
        - Minutes: 1 pt for 1-59, 2 pts for 60+
        - Goals: GK 10, DEF 6, MID 5, FWD 4
        - Assists: 3 pts each
        - Clean sheet (60+ minutes): GK/DEF 4, MID 1, FWD 0
        - Goals conceded (GK/DEF only): -1 per 2, regardless of minutes
        - Saves (GK only): 1 pt per 3
        - Penalty saved: 5 pts, penalty missed: -2 pts
        - Yellow card: -1, red card: -3
        - Own goal: -2 pts each
        - Bonus: official bonus passed through unchanged
        - Defensive contribution: 2 pts once DEF reaches 10, MID/FWD 12

    Args:
        stats: Player stat snapshot for the gameweek
        position: Player position
        rules: Scoring rules (defaults to the configured rules)

    Returns:
        PointsBreakdown whose total is the sum of its fields

    Raises:
        InvalidStat: If any count is negative or not an integer
    """
    rules = rules or get_config()
    _check_stats(stats)

    minutes_pts = 0
    if stats.minutes >= rules.minutes_full_threshold:
        minutes_pts = rules.minutes_full_points
    elif stats.minutes > 0:
        minutes_pts = rules.minutes_partial_points

    goals_pts = stats.goals_scored * rules.goal_value(position)
    assists_pts = stats.assists * rules.assist_points

    clean_sheet_pts = 0
    if stats.minutes >= rules.minutes_full_threshold and stats.clean_sheet:
        clean_sheet_pts = rules.clean_sheet_value(position)

    # Applies for any minutes played, not just 60+
    goals_conceded_pts = 0
    if position_loses_points_for_goals_conceded(position):
        goals_conceded_pts = -(stats.goals_conceded // rules.goals_conceded_per_point)

    saves_pts = 0
    if position_gets_save_points(position):
        saves_pts = stats.saves // rules.saves_per_point

    cards_pts = (
        stats.yellow_cards * rules.yellow_card_points +
        stats.red_cards * rules.red_card_points
    )

    # One-time award, not per action
    defensive_pts = 0
    threshold = rules.defensive_threshold(position)
    if threshold is not None and stats.defensive_contribution >= threshold:
        defensive_pts = rules.defensive_contribution_points

    return PointsBreakdown(
        minutes=minutes_pts,
        goals=goals_pts,
        assists=assists_pts,
        clean_sheet=clean_sheet_pts,
        goals_conceded=goals_conceded_pts,
        saves=saves_pts,
        penalties_saved=stats.penalties_saved * rules.penalty_saved_points,
        penalties_missed=stats.penalties_missed * rules.penalty_missed_points,
        cards=cards_pts,
        own_goals=stats.own_goals * rules.own_goal_points,
        bonus=stats.bonus,
        defensive_contribution=defensive_pts,
    )


def validate_points(calculated: int, official: int) -> tuple[bool, int]:
    """
    Compare a calculated total against the official total_points.

    Returns:
        Tuple of (match, difference) where difference = calculated - official
    """
    return calculated == official, calculated - official


def position_gets_clean_sheet(position: Position, rules: Optional[ScoringRules] = None) -> bool:
    """Check if a position earns anything for a clean sheet."""
    return (rules or get_config()).clean_sheet_value(position) > 0


def position_loses_points_for_goals_conceded(position: Position) -> bool:
    """Only goalkeepers and defenders lose points for goals conceded."""
    return position in (Position.GKP, Position.DEF)


def position_gets_save_points(position: Position) -> bool:
    """Only goalkeepers get points for saves."""
    return position is Position.GKP
