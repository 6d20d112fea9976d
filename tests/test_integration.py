"""Integration tests for end-to-end workflows."""

import json

import pytest

from fplive.loader import build_squad, load_elements, load_gameweek, load_manager
from fplive.models import ChipState, FixtureStatus, Position
from fplive.reconciler import reconcile
from fplive.schemas import FixturesFile, PicksFile
from fplive.scorer import LiveScorer
from fplive.utils import parse_payload
from fplive.validators import validate_all_scores

# element_type by player id, matching the default 4-4-2 test squad
ELEMENT_TYPES = {
    1: 1, 2: 2, 3: 2, 4: 2, 5: 2, 6: 3, 7: 3, 8: 3, 9: 3, 10: 4,
    11: 4, 12: 1, 13: 2, 14: 3, 15: 4, 16: 4,
}


def write_json(path, data):
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)
    return path


def picks_payload(ids, captain, chip=None, cost=0):
    return {
        'active_chip': chip,
        'picks': [
            {
                'element': pid,
                'position': ordinal,
                'multiplier': 0 if ordinal > 11 else (2 if pid == captain else 1),
                'is_captain': pid == captain,
                'is_vice_captain': ordinal == 6,
            }
            for ordinal, pid in enumerate(ids, start=1)
        ],
        'entry_history': {'points': 0, 'event_transfers_cost': cost},
    }


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create temporary data directory with a finished gameweek."""
    data_dir = tmp_path / 'data'
    data_dir.mkdir()

    write_json(data_dir / 'bootstrap.json', {
        'events': [],
        'elements': [
            {
                'id': pid,
                'web_name': f'Player {pid}',
                'element_type': element_type,
                'team': 1 if pid <= 8 else 2,
                'now_cost': 55,
            }
            for pid, element_type in ELEMENT_TYPES.items()
        ],
    })

    elements = []
    for pid in ELEMENT_TYPES:
        stats = {'minutes': 90, 'bps': 10 + pid}
        if pid == 10:
            stats.update(goals_scored=1, bonus=3)
        element = {'id': pid, 'stats': stats}
        # Some players carry their fixture in explain, the rest map via team
        if pid % 2:
            element['explain'] = [{'fixture': 1, 'stats': []}]
        elements.append(element)
    write_json(data_dir / 'live.json', {'elements': elements})

    write_json(data_dir / 'fixtures.json', [
        {
            'id': 1, 'event': 1, 'team_h': 1, 'team_a': 2,
            'started': True, 'finished': True, 'finished_provisional': True,
        },
    ])

    a_ids = list(range(1, 16))
    b_ids = a_ids[:10] + [16] + a_ids[11:]
    write_json(data_dir / 'picks_a.json', picks_payload(a_ids, captain=10))
    write_json(data_dir / 'picks_b.json', picks_payload(b_ids, captain=10, cost=4))

    return data_dir


class TestLoader:
    """Tests for loading JSON inputs."""

    def test_load_gameweek(self, temp_data_dir):
        gw = load_gameweek(
            temp_data_dir / 'live.json',
            temp_data_dir / 'fixtures.json',
            temp_data_dir / 'bootstrap.json',
        )
        assert len(gw.stats) == 16
        assert gw.fixtures[0].status is FixtureStatus.FINISHED
        assert gw.stats[10].goals_scored == 1
        # Even ids have no explain and are assigned through their team
        assert gw.stats[2].fixture_id == 1
        assert gw.elements[16].position is Position.FWD

    def test_load_manager(self, temp_data_dir):
        elements = load_elements(temp_data_dir / 'bootstrap.json')
        entry = load_manager(temp_data_dir / 'picks_b.json', elements, 2, 'B')
        assert entry.transfer_cost == 4
        assert entry.chip is ChipState.NONE
        assert entry.squad.captain.player_id == 10
        assert entry.squad.slot_for(16).ordinal == 11

    def test_build_squad_unknown_element(self, temp_data_dir):
        elements = load_elements(temp_data_dir / 'bootstrap.json')
        picks = PicksFile(**picks_payload(list(range(20, 35)), captain=29))
        with pytest.raises(ValueError, match='unknown element'):
            build_squad(picks, elements)

    def test_missing_file(self, temp_data_dir):
        with pytest.raises(FileNotFoundError):
            load_elements(temp_data_dir / 'missing.json')

    def test_unknown_chip_rejected(self, temp_data_dir):
        elements = load_elements(temp_data_dir / 'bootstrap.json')
        path = write_json(
            temp_data_dir / 'bad_chip.json',
            picks_payload(list(range(1, 16)), captain=10, chip='5xc'),
        )
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_manager(path, elements, 3, 'C')

    def test_short_picks_rejected(self, temp_data_dir):
        elements = load_elements(temp_data_dir / 'bootstrap.json')
        payload = picks_payload(list(range(1, 16)), captain=10)
        payload['picks'] = payload['picks'][:14]
        path = write_json(temp_data_dir / 'short.json', payload)
        with pytest.raises(ValueError):
            load_manager(path, elements, 3, 'C')

    def test_parse_in_memory_payload(self):
        fixtures = parse_payload(
            [{'id': 3, 'team_h': 4, 'team_a': 5, 'started': True}], FixturesFile
        )
        assert fixtures.root[0].to_fixture().status is FixtureStatus.STARTED
        with pytest.raises(ValueError, match='test payload'):
            parse_payload([{'id': 3, 'team_h': 4, 'team_a': 4}], FixturesFile, source='test payload')

    def test_double_gameweek_totals_accepted(self, temp_data_dir):
        """Live stats summed over two fixtures can exceed single-match limits."""
        live = json.loads((temp_data_dir / 'live.json').read_text())
        live['elements'][9] = {
            'id': 10,
            'stats': {'minutes': 180, 'goals_scored': 1, 'bonus': 5, 'yellow_cards': 2},
            'explain': [{'fixture': 1, 'stats': []}, {'fixture': 2, 'stats': []}],
        }
        write_json(temp_data_dir / 'live.json', live)

        gw = load_gameweek(
            temp_data_dir / 'live.json',
            temp_data_dir / 'fixtures.json',
            temp_data_dir / 'bootstrap.json',
        )
        snapshot = gw.stats[10]
        assert (snapshot.bonus, snapshot.yellow_cards) == (5, 2)
        assert snapshot.fixture_id == 1

        entry = load_manager(temp_data_dir / 'picks_a.json', gw.elements, 1, 'A')
        player = LiveScorer(1, gw.stats, gw.fixtures).score_player(entry.squad.slot_for(10))
        # 2 (minutes) + 4 (goal) + 5 (bonus) - 2 (yellows)
        assert player.total_points == 9

    def test_negative_live_stat_rejected(self, temp_data_dir):
        write_json(temp_data_dir / 'live.json', {
            'elements': [{'id': 1, 'stats': {'minutes': -1}}],
        })
        with pytest.raises(ValueError):
            load_gameweek(
                temp_data_dir / 'live.json',
                temp_data_dir / 'fixtures.json',
                temp_data_dir / 'bootstrap.json',
            )


class TestFullGameweek:
    """Integration tests for the complete gameweek workflow."""

    def test_head_to_head(self, temp_data_dir):
        gw = load_gameweek(
            temp_data_dir / 'live.json',
            temp_data_dir / 'fixtures.json',
            temp_data_dir / 'bootstrap.json',
        )
        entry_a = load_manager(temp_data_dir / 'picks_a.json', gw.elements, 1, 'A')
        entry_b = load_manager(temp_data_dir / 'picks_b.json', gw.elements, 2, 'B')

        scorer = LiveScorer(1, gw.stats, gw.fixtures)
        results = scorer.score_entries([entry_a, entry_b])

        # Captain: 2 + 4 (goal) + 3 (bonus) = 9, doubled; ten others at 2
        assert results[1].net_total == 38
        assert results[2].net_total == 34
        assert results[1].score_for(10).bonus_source == 'official'

        match = reconcile(results[1], results[2])
        assert match.leader == 'a'
        assert match.margin == 4
        assert [d.player_id for d in match.side_a.differentials] == [11]
        assert [d.name for d in match.side_b.differentials] == ['Player 16', 'Transfer Hit']

        errors, warnings = validate_all_scores(results.values())
        assert errors == []
        assert warnings == []

    def test_provisional_finish_keeps_provisional_bonus(self, temp_data_dir):
        """Full time before bonus is confirmed still awards provisional bonus."""
        write_json(temp_data_dir / 'fixtures.json', [
            {
                'id': 1, 'event': 1, 'team_h': 1, 'team_a': 2,
                'started': True, 'finished': False, 'finished_provisional': True,
            },
        ])
        gw = load_gameweek(
            temp_data_dir / 'live.json',
            temp_data_dir / 'fixtures.json',
            temp_data_dir / 'bootstrap.json',
        )
        assert gw.fixtures[0].status is FixtureStatus.STARTED

        entry_b = load_manager(temp_data_dir / 'picks_b.json', gw.elements, 2, 'B')
        scored = LiveScorer(1, gw.stats, gw.fixtures).score_squad(entry_b)

        # Player 16 has the highest BPS in the fixture
        top = scored.score_for(16)
        assert top.breakdown.bonus == 3
        assert top.bonus_source == 'provisional'
        # Confirmed bonus is still used once it is in the stats
        assert scored.score_for(10).bonus_source == 'official'

    def test_provisional_finish_without_finished_flag(self):
        fixtures = parse_payload(
            [{'id': 1, 'team_h': 1, 'team_a': 2, 'started': True, 'finished_provisional': True}],
            FixturesFile,
        )
        assert fixtures.root[0].to_fixture().status is FixtureStatus.FINISHED
