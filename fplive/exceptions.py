"""Exceptions raised by the fplive scoring engine.

Missing stats are not an error: a player who has not played yet is scored
as zero. Only malformed inputs and broken invariants raise.
"""


class ScoringError(Exception):
    """Base class for scoring engine errors."""


class InvalidStat(ScoringError, ValueError):
    """A stat snapshot holds a value no real match could produce."""

    def __init__(self, player_id: int, field_name: str, value):
        self.player_id = player_id
        self.field_name = field_name
        self.value = value
        super().__init__(f'Player {player_id} has invalid {field_name}: {value!r}')


class InvalidSquad(ScoringError, ValueError):
    """A squad violates the 15-slot or formation rules on input."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__('Invalid squad: ' + '; '.join(self.errors))


class AmbiguousFormation(ScoringError):
    """The starting XI is illegal after substitutions were applied."""
