"""Chip handling and gameweek team totals."""

from typing import Iterable, Mapping, Optional

from .config import get_config
from .models import (
    AdjustedParticipants,
    ChipState,
    Participant,
    Squad,
    Substitution,
    TeamTotal,
)
from .schemas import ScoringRules


def captain_multiplier(chip: ChipState, rules: Optional[ScoringRules] = None) -> int:
    """Captain multiplier for a chip (3 under Triple Captain, else 2)."""
    rules = rules or get_config()
    if chip is ChipState.TRIPLE_CAPTAIN:
        return rules.triple_captain_multiplier
    return rules.captain_multiplier


def apply_chip(
    squad: Squad,
    chip: ChipState,
    captain_multiplier_override: Optional[int] = None,
    rules: Optional[ScoringRules] = None,
) -> AdjustedParticipants:
    """
    Work out which slots count and with what multiplier.

    Chips:
        - None / Free Hit / Wildcard: starting XI counts, captain x2
        - Triple Captain: starting XI counts, captain x3
        - Bench Boost: all 15 slots count, captain x2

    Free Hit and Wildcard only change squad composition upstream, so they
    score exactly like no chip.

    Args:
        squad: Squad after substitutions, or the original squad under
            Bench Boost (substitutions are skipped entirely then)
        chip: Active chip
        captain_multiplier_override: Replaces the chip-derived captain
            multiplier when given (1-3)
        rules: Scoring rules (defaults to the configured rules)

    Returns:
        AdjustedParticipants with the counted slots in squad order
    """
    if captain_multiplier_override is not None and not 1 <= captain_multiplier_override <= 3:
        raise ValueError(
            f'Captain multiplier override must be 1-3, got {captain_multiplier_override}'
        )

    multiplier = (
        captain_multiplier_override
        if captain_multiplier_override is not None
        else captain_multiplier(chip, rules)
    )
    counted = squad.slots if chip is ChipState.BENCH_BOOST else squad.starters

    return AdjustedParticipants(
        chip=chip,
        captain_multiplier=multiplier,
        participants=tuple(
            Participant(slot=slot, multiplier=multiplier if slot.is_captain else 1)
            for slot in counted
        ),
    )


def calculate_team_total(
    participants: AdjustedParticipants,
    points: Mapping[int, int],
    substitutions: Iterable[Substitution] = (),
    transfer_cost: int = 0,
    provisional: Optional[Mapping[int, int]] = None,
) -> TeamTotal:
    """
    Calculate a manager's gameweek total.

    Formula: starting XI + captain bonus + bench boost - transfer cost

    Args:
        participants: Counted slots from apply_chip()
        points: Player points keyed by player_id (bonus already included)
        substitutions: Substitution log from resolve_substitutions()
        transfer_cost: Points deducted for extra transfers
        provisional: Provisional bonus keyed by player_id, reported as a
            component of the counted points

    Returns:
        TeamTotal with every component
    """
    if transfer_cost < 0:
        raise ValueError(f'Transfer cost cannot be negative, got {transfer_cost}')
    provisional = provisional or {}

    starting_xi_total = 0
    captain_bonus = 0
    bench_boost_total = 0
    provisional_bonus = 0

    for p in participants.participants:
        pts = points.get(p.slot.player_id, 0)
        if p.slot.is_starter:
            starting_xi_total += pts
        else:
            bench_boost_total += pts
        captain_bonus += pts * (p.multiplier - 1)
        provisional_bonus += provisional.get(p.slot.player_id, 0) * p.multiplier

    auto_sub_total = sum(
        points.get(sub.player_in.player_id, 0)
        for sub in substitutions
        if sub.player_in.player_id in participants.player_ids
    )

    gross_total = starting_xi_total + captain_bonus + bench_boost_total

    return TeamTotal(
        starting_xi_total=starting_xi_total,
        captain_bonus=captain_bonus,
        bench_boost_total=bench_boost_total,
        auto_sub_total=auto_sub_total,
        provisional_bonus=provisional_bonus,
        gross_total=gross_total,
        transfer_cost=transfer_cost,
        net_total=gross_total - transfer_cost,
    )
