"""Head-to-head reconciliation of two scored squads.

A differential is a contribution one side has that the other does not:
    - pure: counted here, not in the other squad at all
    - position: in both squads, counted here but benched (or subbed out) there
    - captain: counted by both, captained here only (the extra only)
    - transfer_hit: the larger transfer cost, as the cost gap
Players counted by both sides are common players and never differentials.
Every list follows original squad order, so a substitute ranks from the
bench slot they were picked in.
"""

from typing import Optional

from .constants import (
    DIFF_CAPTAIN,
    DIFF_POSITION,
    DIFF_PURE,
    DIFF_TRANSFER_HIT,
    SQUAD_SIZE,
    TRANSFER_HIT_COST,
)
from .logging_config import get_logger
from .models import (
    CommonPlayer,
    DifferentialPlayer,
    MatchBreakdown,
    ScoredSquad,
    SideBreakdown,
)

logger = get_logger('fplive.reconciler')


def _has_played(scored: ScoredSquad, player_id: int) -> bool:
    score = scored.score_for(player_id)
    return score.has_played if score else False


def _transfer_hit(this: ScoredSquad, other: ScoredSquad) -> Optional[DifferentialPlayer]:
    gap = this.entry.transfer_cost - other.entry.transfer_cost
    if gap <= 0:
        return None
    hits = max(gap // TRANSFER_HIT_COST, 1)
    return DifferentialPlayer(
        player_id=None,
        name='Transfer Hit' if hits == 1 else f'Transfer Hits ({hits}x)',
        points=-gap,
        kind=DIFF_TRANSFER_HIT,
        base_points=-gap,
        ordinal=SQUAD_SIZE + 1,
        multiplier=1,
    )


def _side_differentials(this: ScoredSquad, other: ScoredSquad) -> tuple[DifferentialPlayer, ...]:
    """
    Differentials of one side measured against the other.

    Called once per side with the arguments swapped.

    Returns:
        Differentials sorted by points descending, ties in original squad order
    """
    differentials = []

    for p in this.participants.participants:
        pid = p.slot.player_id
        base = this.base_points(pid)
        other_multiplier = other.counted_multiplier(pid)

        if other_multiplier == 0:
            kind = DIFF_POSITION if other.in_squad(pid) else DIFF_PURE
            points = base * p.multiplier
        elif p.multiplier > 1 and other_multiplier == 1:
            kind = DIFF_CAPTAIN
            points = base * (p.multiplier - 1)
        else:
            continue

        differentials.append(
            DifferentialPlayer(
                player_id=pid,
                name=p.slot.name,
                points=points,
                kind=kind,
                base_points=base,
                ordinal=this.original.slot_for(pid).ordinal,
                multiplier=p.multiplier,
                is_captain=p.slot.is_captain and p.multiplier > 1,
                subbed_in=this.was_subbed_in(pid),
                has_played=_has_played(this, pid),
            )
        )

    hit = _transfer_hit(this, other)
    if hit is not None:
        differentials.append(hit)

    return tuple(sorted(differentials, key=lambda d: (-d.points, d.ordinal)))


def _common_players(squad_a: ScoredSquad, squad_b: ScoredSquad) -> tuple[CommonPlayer, ...]:
    """Players counted by both sides plus placeholders for split substitutions."""
    rows = []

    for p in squad_a.participants.participants:
        pid = p.slot.player_id
        multiplier_b = squad_b.counted_multiplier(pid)
        if multiplier_b == 0:
            continue

        replaces = None
        sub_a = next((s for s in squad_a.substitutions if s.player_in.player_id == pid), None)
        sub_b = next((s for s in squad_b.substitutions if s.player_in.player_id == pid), None)
        if sub_a and sub_b and sub_a.player_out.player_id == sub_b.player_out.player_id:
            replaces = sub_a.player_out.name

        base = squad_a.base_points(pid)
        rows.append((
            squad_a.original.slot_for(pid).ordinal,
            CommonPlayer(
                player_id=pid,
                name=p.slot.name,
                base_points=base,
                points_a=base * p.multiplier,
                points_b=base * multiplier_b,
                captain_a=p.multiplier > 1,
                captain_b=multiplier_b > 1,
                replaces=replaces,
            ),
        ))

    # Shared starter subbed out on both sides, but for different players
    for sub_a in squad_a.substitutions:
        pid = sub_a.player_out.player_id
        replacement_b = squad_b.replacement_for(pid)
        if replacement_b is None or replacement_b.player_id == sub_a.player_in.player_id:
            continue
        rows.append((
            sub_a.player_out.ordinal,
            CommonPlayer(
                player_id=pid,
                name=sub_a.player_out.name,
                base_points=squad_a.base_points(pid),
                points_a=0,
                points_b=0,
                placeholder=True,
            ),
        ))

    rows.sort(key=lambda row: row[0])
    return tuple(row for _, row in rows)


def _side(this: ScoredSquad, other: ScoredSquad) -> SideBreakdown:
    return SideBreakdown(
        entry_id=this.entry.entry_id,
        name=this.entry.name,
        chip=this.entry.chip,
        score=this.net_total,
        transfer_cost=this.entry.transfer_cost,
        differentials=_side_differentials(this, other),
    )


def reconcile(squad_a: ScoredSquad, squad_b: ScoredSquad) -> MatchBreakdown:
    """
    Compare two scored squads head-to-head.

    Each side's score is its net total. The points swing between the sides
    is explained by the two differential lists, except that a shared captain
    with different multipliers (Triple Captain against a normal captain)
    only shows up in the common player's points.

    Args:
        squad_a: First manager's scored squad
        squad_b: Second manager's scored squad

    Returns:
        MatchBreakdown with both sides, common players, margin and leader

    Example:
        >>> match = reconcile(scored_a, scored_b)
        >>> match.leader, match.margin
        ('a', 12)
    """
    match = MatchBreakdown(
        side_a=_side(squad_a, squad_b),
        side_b=_side(squad_b, squad_a),
        common_players=_common_players(squad_a, squad_b),
    )
    logger.debug(
        f'{squad_a.entry.name} {match.side_a.score} - {match.side_b.score} '
        f'{squad_b.entry.name}: {len(match.common_players)} common, '
        f'{len(match.side_a.differentials)}/{len(match.side_b.differentials)} differentials'
    )
    return match
