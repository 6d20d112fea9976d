"""Validation functions for squads and scoring results."""

from collections import Counter
from typing import Iterable, Optional

from .config import get_config
from .constants import BACKUP_GK_SLOT, SQUAD_COMPOSITION, SQUAD_SIZE
from .exceptions import InvalidSquad
from .models import ChipState, PlayerScore, Position, ScoredSquad, Squad
from .schemas import ScoringRules
from .substitutions import is_valid_formation


def validate_squad(squad: Squad, rules: Optional[ScoringRules] = None) -> list[str]:
    """
    Validate that a squad complies with game rules.

    Checks:
    - Exactly 15 slots with ordinals 1-15 and no duplicate players
    - Squad composition (2 GKP, 5 DEF, 5 MID, 3 FWD)
    - One goalkeeper in the starting XI and the backup goalkeeper in slot 12
    - Starting XI formation (1 GK, 3-5 DEF, 2-5 MID, 1-3 FWD)
    - Exactly one captain and at most one vice-captain
    - Multipliers within 0-3

    Args:
        squad: Squad to validate
        rules: Scoring rules (defaults to the configured rules)

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if len(squad.slots) != SQUAD_SIZE:
        errors.append(f'Squad has {len(squad.slots)} players (expected {SQUAD_SIZE})')

    ordinals = [s.ordinal for s in squad.slots]
    if sorted(ordinals) != list(range(1, SQUAD_SIZE + 1)):
        errors.append(f'Squad ordinals must be 1-{SQUAD_SIZE} exactly once, got {ordinals}')

    # Find duplicates
    ids = Counter(s.player_id for s in squad.slots)
    duplicates = sorted(pid for pid, count in ids.items() if count > 1)
    if duplicates:
        errors.append(f'Squad has duplicate players: {", ".join(str(d) for d in duplicates)}')

    # Only meaningful once the shape is right
    if not errors:
        composition = Counter(s.position.label for s in squad.slots)
        for pos, expected in SQUAD_COMPOSITION.items():
            if composition.get(pos, 0) != expected:
                errors.append(
                    f'Squad has {composition.get(pos, 0)} {pos} players (expected {expected})'
                )

        starting_gks = [s for s in squad.starters if s.position is Position.GKP]
        if len(starting_gks) != 1:
            errors.append(f'Starting XI has {len(starting_gks)} goalkeepers (expected 1)')

        backup = squad.slot_for_ordinal(BACKUP_GK_SLOT)
        if backup is None or backup.position is not Position.GKP:
            errors.append(f'Bench slot {BACKUP_GK_SLOT} must hold the backup goalkeeper')

        if not is_valid_formation(squad.formation(), rules or get_config()):
            errors.append(f'Starting XI formation is not legal: {dict(squad.formation())}')

    captains = [s for s in squad.slots if s.is_captain]
    if len(captains) != 1:
        errors.append(f'Squad has {len(captains)} captains (expected 1)')

    vice_captains = [s for s in squad.slots if s.is_vice_captain]
    if len(vice_captains) > 1:
        errors.append(f'Squad has {len(vice_captains)} vice-captains (max 1)')
    if any(s.is_captain and s.is_vice_captain for s in squad.slots):
        errors.append('Captain cannot also be vice-captain')

    for s in squad.slots:
        if not 0 <= s.multiplier <= 3:
            errors.append(f'{s.name} has invalid multiplier {s.multiplier}')

    return errors


def ensure_valid_squad(squad: Squad, rules: Optional[ScoringRules] = None) -> Squad:
    """
    Reject an invalid squad before any scoring starts.

    Raises:
        InvalidSquad: With every problem found by validate_squad()
    """
    errors = validate_squad(squad, rules)
    if errors:
        raise InvalidSquad(errors)
    return squad


def validate_player_score(score: PlayerScore) -> list[str]:
    """
    Check that a player's score is reasonable and internally consistent.

    Sanity checks:
    - Breakdown fields add up to the total
    - Total points in reasonable range (-15 to 40)
    - Points recorded for a player with no minutes

    Args:
        score: PlayerScore object to validate

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    breakdown_sum = sum(score.breakdown.as_dict().values())
    if breakdown_sum != score.total_points:
        warnings.append(
            f'{score.name} breakdown sum ({breakdown_sum}) != total ({score.total_points})'
        )

    if score.total_points > 40:
        warnings.append(
            f'{score.name} scored {score.total_points} pts (unusually high - check for scoring bug)'
        )
    elif score.total_points < -15:
        warnings.append(
            f'{score.name} scored {score.total_points} pts (unusually low - check for scoring bug)'
        )

    if score.minutes == 0 and score.breakdown.minutes != 0:
        warnings.append(f'{score.name} has minutes points without playing')

    return warnings


def validate_team_total(scored: ScoredSquad) -> list[str]:
    """
    Check that a manager's total is reasonable.

    Sanity checks:
    - Components add up to the gross and net totals
    - Gross total not impossibly high (>250)
    - Participant count matches the chip (11, or 15 under Bench Boost)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    totals = scored.totals
    label = f'{scored.entry.name} ({scored.entry.entry_id})'

    components = totals.starting_xi_total + totals.captain_bonus + totals.bench_boost_total
    if components != totals.gross_total:
        warnings.append(f'{label} components ({components}) != gross ({totals.gross_total})')
    if totals.gross_total - totals.transfer_cost != totals.net_total:
        warnings.append(f'{label} net total does not match gross minus transfer cost')

    if totals.gross_total > 250:
        warnings.append(
            f'{label} scored {totals.gross_total} pts (unusually high - check for scoring bug)'
        )

    expected = 15 if scored.participants.chip is ChipState.BENCH_BOOST else 11
    counted = len(scored.participants.participants)
    if counted != expected:
        warnings.append(f'{label} has {counted} counted players (expected {expected})')

    return warnings


def validate_all_scores(
    scored_squads: Iterable[ScoredSquad],
) -> tuple[list[str], list[str]]:
    """
    Validate all scored squads for a gameweek.

    Returns:
        Tuple of (errors, warnings)
        - errors: Broken squads that should not be shown
        - warnings: Issues to review but not block display
    """
    errors: list[str] = []
    warnings: list[str] = []

    for scored in scored_squads:
        errors.extend(validate_squad(scored.resolved))
        for score in scored.scores:
            warnings.extend(validate_player_score(score))
        warnings.extend(validate_team_total(scored))

    return errors, warnings
