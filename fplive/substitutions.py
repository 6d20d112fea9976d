"""Automatic substitution of starters who did not play.

Rules:
    1. Starters are processed in squad order (1 -> 11)
    2. Bench players are tried in bench order (12 -> 15); those with 0
       minutes are never used
    3. A goalkeeper can only be replaced by the backup goalkeeper in slot 12
    4. An outfield starter is replaced by the first bench player that keeps
       the XI within 1 GK, 3-5 DEF, 2-5 MID, 1-3 FWD
    5. Each swap is checked against the XI as it stands after earlier swaps
"""

from collections import Counter
from dataclasses import replace
from typing import Collection, Mapping, Optional

from .config import get_config
from .constants import BACKUP_GK_SLOT
from .exceptions import AmbiguousFormation
from .logging_config import get_logger
from .models import Position, Squad, SquadSlot, Substitution
from .schemas import ScoringRules

logger = get_logger('fplive.substitutions')


def count_positions(slots: Collection[SquadSlot]) -> Counter:
    """Count position labels in a group of slots."""
    return Counter(s.position.label for s in slots)


def is_valid_formation(counts: Mapping[str, int], rules: Optional[ScoringRules] = None) -> bool:
    """Check XI position counts against formation limits."""
    rules = rules or get_config()
    if sum(counts.values()) != 11:
        return False
    for pos, low in rules.formation_min.items():
        if counts.get(pos, 0) < low:
            return False
    for pos, high in rules.formation_max.items():
        if counts.get(pos, 0) > high:
            return False
    return True


def is_valid_substitution(
    starters: Collection[SquadSlot],
    player_out: SquadSlot,
    player_in: SquadSlot,
    rules: Optional[ScoringRules] = None,
) -> bool:
    """Check if swapping player_out for player_in keeps a legal formation."""
    counts = count_positions(starters)
    counts[player_out.position.label] -= 1
    counts[player_in.position.label] += 1
    return is_valid_formation(counts, rules)


def _swap(squad: Squad, player_out: SquadSlot, player_in: SquadSlot) -> Squad:
    """Exchange ordinals of a starter and a bench player."""
    moved_in = replace(player_in, ordinal=player_out.ordinal, multiplier=1)
    moved_out = replace(player_out, ordinal=player_in.ordinal, multiplier=0)
    slots = tuple(
        moved_in if s.player_id == player_in.player_id
        else moved_out if s.player_id == player_out.player_id
        else s
        for s in squad.slots
    )
    return Squad(slots)


def _find_substitute(
    starter: SquadSlot,
    current: Squad,
    available: list[SquadSlot],
    rules: ScoringRules,
) -> Optional[SquadSlot]:
    if starter.position is Position.GKP:
        return next((b for b in available if b.ordinal == BACKUP_GK_SLOT), None)

    for candidate in available:
        if is_valid_substitution(current.starters, starter, candidate, rules):
            return candidate
    return None


def resolve_substitutions(
    squad: Squad,
    minutes: Mapping[int, int],
    pending: Collection[int] = (),
    rules: Optional[ScoringRules] = None,
) -> tuple[Squad, list[Substitution]]:
    """
    Apply automatic substitutions to a squad.

    Args:
        squad: Validated 15-player squad
        minutes: Minutes played keyed by player_id (missing players count as 0)
        pending: Player ids whose fixture is still to finish; such starters
            are not substituted yet
        rules: Scoring rules (defaults to the configured rules)

    Returns:
        Tuple of (adjusted squad, substitution log). Substituted players
        exchange ordinals: the bench player takes the starter's slot with
        multiplier 1 and the starter drops to the bench with multiplier 0.

    Raises:
        AmbiguousFormation: If the resulting XI is not a legal formation
    """
    rules = rules or get_config()
    pending = frozenset(pending)

    def played(slot: SquadSlot) -> bool:
        return minutes.get(slot.player_id, 0) > 0

    non_playing = [
        s for s in squad.starters
        if not played(s) and s.player_id not in pending
    ]
    available = [b for b in squad.bench if played(b)]

    current = squad
    substitutions: list[Substitution] = []

    for starter in non_playing:
        sub = _find_substitute(starter, current, available, rules)
        if sub is None:
            logger.debug(
                f'No valid substitute for {starter.name} (slot {starter.ordinal})'
            )
            continue

        current = _swap(current, starter, sub)
        available.remove(sub)
        substitutions.append(
            Substitution(
                player_out=starter,
                player_in=sub,
                reason=f'{starter.name} did not play (0 min)',
            )
        )
        logger.debug(f'Auto-sub: {sub.name} on for {starter.name}')

    if not is_valid_formation(current.formation(), rules):
        raise AmbiguousFormation(
            f'Starting XI is not a legal formation after substitutions: '
            f'{dict(current.formation())}'
        )

    return current, substitutions
