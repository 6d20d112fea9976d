"""Unit tests for validation functions."""

import pytest

from fplive.exceptions import InvalidSquad
from fplive.models import (
    ChipState,
    PlayerScore,
    PointsBreakdown,
    Position,
    Squad,
)
from fplive.scorer import LiveScorer
from fplive.validators import (
    ensure_valid_squad,
    validate_all_scores,
    validate_player_score,
    validate_squad,
    validate_team_total,
)


class TestSquadValidation:
    """Tests for squad validation."""

    def test_valid_squad(self, squad):
        """Test that a valid squad passes all checks."""
        assert validate_squad(squad) == []

    def test_short_squad(self, squad):
        short = Squad(squad.slots[:14])
        errors = validate_squad(short)
        assert 'Squad has 14 players (expected 15)' in errors

    def test_duplicate_players(self, make_squad):
        ids = list(range(1, 16))
        ids[14] = 11
        errors = validate_squad(make_squad(ids))
        assert any('duplicate players: 11' in e for e in errors)

    def test_bad_composition(self, make_squad):
        """Test squad with three goalkeepers."""
        positions = {slot.ordinal: slot.position for slot in make_squad().slots}
        positions[15] = Position.GKP
        errors = validate_squad(make_squad(positions=positions))
        assert 'Squad has 3 GKP players (expected 2)' in errors
        assert 'Squad has 2 FWD players (expected 3)' in errors

    def test_backup_goalkeeper_slot(self, make_squad):
        positions = {slot.ordinal: slot.position for slot in make_squad().slots}
        positions[12], positions[13] = Position.DEF, Position.GKP
        errors = validate_squad(make_squad(positions=positions))
        assert any('slot 12' in e for e in errors)

    def test_illegal_formation(self, make_squad):
        """Test a 2-5-3 starting XI with a valid 15-man composition."""
        positions = {slot.ordinal: slot.position for slot in make_squad().slots}
        positions[4] = positions[5] = Position.MID
        positions[9] = Position.FWD
        positions[14] = positions[15] = Position.DEF
        errors = validate_squad(make_squad(positions=positions))
        assert any('formation' in e for e in errors)

    def test_no_captain(self, make_squad):
        errors = validate_squad(make_squad(captain=99))
        assert 'Squad has 0 captains (expected 1)' in errors

    def test_captain_is_vice_captain(self, make_squad):
        errors = validate_squad(make_squad(captain=10, vice_captain=10))
        assert 'Captain cannot also be vice-captain' in errors

    def test_multiple_errors(self, make_squad):
        ids = list(range(1, 16))
        ids[14] = 11
        errors = validate_squad(make_squad(ids, captain=99))
        assert len(errors) == 2

    def test_ensure_valid_squad(self, squad, make_squad):
        assert ensure_valid_squad(squad) is squad
        with pytest.raises(InvalidSquad) as exc_info:
            ensure_valid_squad(make_squad(captain=99))
        assert exc_info.value.errors == ['Squad has 0 captains (expected 1)']


class TestPlayerScoreValidation:
    """Tests for player score validation."""

    def test_valid_score(self):
        score = PlayerScore(
            player_id=1, name='Saka', position=Position.MID,
            breakdown=PointsBreakdown(minutes=2, goals=5, bonus=3), minutes=90,
        )
        assert validate_player_score(score) == []

    def test_unusually_high_score(self):
        score = PlayerScore(
            player_id=1, name='Haaland', position=Position.FWD,
            breakdown=PointsBreakdown(minutes=2, goals=40), minutes=90,
        )
        warnings = validate_player_score(score)
        assert len(warnings) == 1
        assert 'unusually high' in warnings[0]

    def test_unusually_low_score(self):
        score = PlayerScore(
            player_id=1, name='Unlucky', position=Position.DEF,
            breakdown=PointsBreakdown(minutes=2, own_goals=-14, cards=-4), minutes=90,
        )
        warnings = validate_player_score(score)
        assert 'unusually low' in warnings[0]

    def test_minutes_points_without_minutes(self):
        score = PlayerScore(
            player_id=1, name='Ghost', position=Position.MID,
            breakdown=PointsBreakdown(minutes=2), minutes=0,
        )
        warnings = validate_player_score(score)
        assert warnings == ['Ghost has minutes points without playing']

    def test_zero_score_valid(self):
        score = PlayerScore(player_id=1, name='Benchwarmer', position=Position.GKP)
        assert validate_player_score(score) == []


class TestTeamTotalValidation:
    """Tests for team total validation."""

    @pytest.fixture
    def stats(self, make_snapshot):
        return {pid: make_snapshot(pid) for pid in range(1, 16)}

    def test_valid_total(self, make_entry, stats):
        scored = LiveScorer(1, stats).score_squad(make_entry())
        assert validate_team_total(scored) == []

    def test_bench_boost_counts_fifteen(self, make_entry, stats):
        scored = LiveScorer(1, stats).score_squad(make_entry(chip=ChipState.BENCH_BOOST))
        assert validate_team_total(scored) == []

    def test_validate_all_scores(self, make_entry, stats):
        scorer = LiveScorer(1, stats)
        results = scorer.score_entries([make_entry(1, 'A'), make_entry(2, 'B')])
        errors, warnings = validate_all_scores(results.values())
        assert errors == []
        assert warnings == []
