"""Tests for the War Derive scoring core.

Covers the per-team pass, the leaderboard bonus pass, ranking and the
point table loader.
"""

import json
import os
import sys

import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from warscore.core.models import EventConfig, Maximums, TeamScore
from warscore.core.points import (
    MANY_AREAS, MAX_SIGNAL_STRENGTH, MAX_SUPERNODE_DISTANCE, MOST_BLOCK_GROUPS,
    MOST_MEASUREMENTS, POINTS_BY_TYPE, load_points_table, subjective_categories,
)
from warscore.core.scorer import (
    assign_agg_bonuses, find_unknown_bonuses, get_initial_team_scores, get_maximums,
    parse_categories, parse_measurement, rank_scores, score_teams, war_score,
)


def make_row(team, signal=-80, block_group='040190001001', distance=1.0,
             bonuses='', supernode='Tucson House', row_id='1'):
    """Build an 11-column sheet row."""
    return [row_id, team, supernode, signal, '32.24, -110.97', 'good', '', '',
            block_group, distance, bonuses]


def team_by_name(scores, name):
    return next(s for s in scores if s.team_name == name)


# ─── Parser ──────────────────────────────────────────────────────────

class TestParseCategories:
    def test_blank_values_give_empty_list(self):
        assert parse_categories(None) == []
        assert parse_categories('') == []
        assert parse_categories('   ') == []

    def test_splits_and_trims(self):
        assert parse_categories('Safety,  Twin Towers ,Coolest Object') == [
            'Safety', 'Twin Towers', 'Coolest Object']

    def test_single_category(self):
        assert parse_categories('Safety') == ['Safety']


class TestParseMeasurement:
    def test_reads_positional_columns(self):
        row = make_row('Team A', signal=-65, block_group='040190013022',
                       distance=0.66, bonuses='Safety, Best Side Quest', supernode='BICAS')
        m = parse_measurement(row)
        assert m.team_name == 'Team A'
        assert m.supernode == 'BICAS'
        assert m.signal_strength == -65
        assert m.block_group == '040190013022'
        assert m.supernode_distance == 0.66
        assert m.subjective_bonuses == ('Safety', 'Best Side Quest')

    def test_measurement_is_immutable(self):
        m = parse_measurement(make_row('Team A'))
        with pytest.raises(AttributeError):
            m.team_name = 'Team B'


# ─── Per-team pass ───────────────────────────────────────────────────

class TestInitialTeamScores:
    def test_weak_signals_score_only_measurement_points(self):
        scores = get_initial_team_scores([
            make_row('Team A', signal=-80),
            make_row('Team A', signal=-88),
        ])
        assert len(scores) == 1
        assert scores[0].total == 20
        assert scores[0].n_measurements == 2

    def test_good_signal_bonus(self):
        scores = get_initial_team_scores([
            make_row('Team A', signal=-80),
            make_row('Team A', signal=-50),
        ])
        assert scores[0].total == 30

    def test_good_signal_threshold_is_strict(self):
        scores = get_initial_team_scores([make_row('Team A', signal=-70)])
        assert scores[0].total == 10

    def test_subjective_bonuses(self):
        scores = get_initial_team_scores([
            make_row('Team A', signal=-65,
                     bonuses='Location & Contact Info, Longest Dance Party/Karaoke'),
        ])
        assert scores[0].total == 70

    def test_negative_and_zero_bonuses(self):
        scores = get_initial_team_scores([
            make_row('Team A', bonuses='Hit Equipment with Water Gun, Most Unhinged Method'),
        ])
        assert scores[0].total == 0

    def test_unknown_bonuses_are_ignored(self):
        scores = get_initial_team_scores([
            make_row('Team A', bonuses='Best Hat, Safety'),
        ])
        assert scores[0].total == 60

    def test_rows_without_team_are_skipped(self):
        scores = get_initial_team_scores([
            make_row(''),
            make_row(None, signal=None, distance=None, block_group=None),
            make_row('Team A'),
        ])
        assert [s.team_name for s in scores] == ['Team A']
        assert scores[0].n_measurements == 1

    def test_tracks_stats(self):
        scores = get_initial_team_scores([
            make_row('Team A', signal=-80, block_group='bg1', distance=1.5),
            make_row('Team A', signal=-60, block_group='bg2', distance=0.5),
            make_row('Team A', signal=-90, block_group='bg1', distance=2.5),
        ])
        team = scores[0]
        assert team.block_groups == {'bg1', 'bg2'}
        assert team.max_supernode_distance == 2.5
        assert team.max_signal_strength == -60
        assert team.min_signal_strength == -90

    def test_min_signal_starts_at_zero(self):
        scores = get_initial_team_scores([make_row('Team A', signal=5)])
        assert scores[0].max_signal_strength == 5
        assert scores[0].min_signal_strength == 0

    def test_teams_in_first_appearance_order(self):
        scores = get_initial_team_scores([
            make_row('Team B'), make_row('Team A'), make_row('Team B'),
        ])
        assert [s.team_name for s in scores] == ['Team B', 'Team A']

    def test_missing_signal_raises(self):
        with pytest.raises(ValueError, match='signal strength'):
            get_initial_team_scores([make_row('Team A', signal=None, row_id='17')])

    def test_missing_geography_raises(self):
        with pytest.raises(ValueError, match='block group, supernode distance'):
            get_initial_team_scores([make_row('Team A', block_group='', distance=None)])

    def test_custom_threshold_and_points(self):
        points = dict(POINTS_BY_TYPE, MEASUREMENT=5, GOOD_SIGNAL=1)
        config = EventConfig(points=points, good_signal_threshold=-60)
        scores = get_initial_team_scores([
            make_row('Team A', signal=-65),
            make_row('Team A', signal=-55),
        ], config)
        assert scores[0].total == 11


# ─── Leaderboard pass ────────────────────────────────────────────────

class TestMaximums:
    def test_empty(self):
        assert get_maximums([]) == Maximums(0, 0, 0, -1000, 0)

    def test_scans_all_teams(self):
        a = TeamScore('A', n_measurements=3, block_groups={'x'},
                      max_supernode_distance=1.0, max_signal_strength=-60,
                      min_signal_strength=-95)
        b = TeamScore('B', n_measurements=1, block_groups={'x', 'y'},
                      max_supernode_distance=4.0, max_signal_strength=-75,
                      min_signal_strength=-80)
        maximums = get_maximums([a, b])
        assert maximums.n_block_groups == 2
        assert maximums.n_measurements == 3
        assert maximums.max_supernode_distance == 4.0
        assert maximums.max_signal_strength == -60
        assert maximums.min_signal_strength == -95


class TestAggregateBonuses:
    ROWS = [
        make_row('Team A', signal=-80, block_group='bg1', distance=1.0),
        make_row('Team A', signal=-75, block_group='bg2', distance=2.0),
        make_row('Team B', signal=-60, block_group='bg1', distance=0.5),
        make_row('Team C', signal=-90, block_group='bg3', distance=2.0),
    ]

    def test_bonuses_by_team(self):
        scores = assign_agg_bonuses(get_initial_team_scores(self.ROWS))
        a, b, c = scores
        assert a.bonuses == [MOST_BLOCK_GROUPS, MOST_MEASUREMENTS, MAX_SUPERNODE_DISTANCE]
        assert a.total == 120
        assert b.bonuses == [MAX_SIGNAL_STRENGTH]
        assert b.total == 40
        assert c.bonuses == [MAX_SUPERNODE_DISTANCE]
        assert c.total == 30

    def test_war_score(self):
        assert war_score(self.ROWS) == [('Team A', 120), ('Team B', 40), ('Team C', 30)]

    def test_ties_all_get_the_bonus(self):
        scores = assign_agg_bonuses(get_initial_team_scores([
            make_row('Team A', block_group='bg1'),
            make_row('Team A', block_group='bg2'),
            make_row('Team B', block_group='bg3'),
            make_row('Team B', block_group='bg4'),
        ]))
        for team in scores:
            assert MOST_BLOCK_GROUPS in team.bonuses
            assert MOST_MEASUREMENTS in team.bonuses
            assert MAX_SIGNAL_STRENGTH in team.bonuses
            assert MAX_SUPERNODE_DISTANCE in team.bonuses

    def test_many_areas_stacks_with_most_block_groups(self):
        rows = [make_row('Team A', block_group=f'bg{i}') for i in range(4)]
        rows.append(make_row('Team B', block_group='bg9', signal=-90, distance=0.1))
        scores = assign_agg_bonuses(get_initial_team_scores(rows))
        a = team_by_name(scores, 'Team A')
        assert MOST_BLOCK_GROUPS in a.bonuses
        assert MANY_AREAS in a.bonuses
        assert a.total == 40 + 50 + 40 + 30 + 20 + 20
        assert MANY_AREAS not in team_by_name(scores, 'Team B').bonuses

    def test_distance_ties_are_exact(self):
        scores = assign_agg_bonuses(get_initial_team_scores([
            make_row('Team A', distance=0.1 + 0.2),
            make_row('Team B', distance=0.3),
        ]))
        assert MAX_SUPERNODE_DISTANCE in team_by_name(scores, 'Team A').bonuses
        assert MAX_SUPERNODE_DISTANCE not in team_by_name(scores, 'Team B').bonuses


# ─── Ranking and entry point ─────────────────────────────────────────

class TestRanking:
    def test_sorted_descending(self):
        scores = [TeamScore('A', total=10), TeamScore('B', total=30), TeamScore('C', total=20)]
        assert rank_scores(scores) == [('B', 30), ('C', 20), ('A', 10)]

    def test_ties_keep_input_order(self):
        scores = [TeamScore('A', total=10), TeamScore('B', total=10)]
        assert rank_scores(scores) == [('A', 10), ('B', 10)]

    def test_output_has_every_team(self):
        rows = [make_row(name, row_id=str(i))
                for i, name in enumerate(['X', 'Y', '', 'Z', 'X', None])]
        assert {team for team, _ in war_score(rows)} == {'X', 'Y', 'Z'}

    def test_total_at_least_measurement_points(self):
        rows = [
            make_row('Team A', signal=-95),
            make_row('Team A', signal=-40, bonuses='Safety'),
            make_row('Team B', signal=-85, block_group='bg2', distance=3.0),
        ]
        for team in score_teams(rows):
            assert team.total >= 10 * team.n_measurements

    def test_idempotent(self):
        rows = TestAggregateBonuses.ROWS
        snapshot = [list(r) for r in rows]
        assert war_score(rows) == war_score(rows)
        assert rows == snapshot

    def test_empty_input(self):
        assert war_score([]) == []


class TestUnknownBonuses:
    def test_counts_unknown_tags(self):
        rows = [
            make_row('Team A', bonuses='Best Hat, Safety'),
            make_row('Team B', bonuses='Best Hat'),
            make_row('', bonuses='Ignored Tag'),
        ]
        assert find_unknown_bonuses(rows, POINTS_BY_TYPE) == {'Best Hat': 2}

    def test_all_known(self):
        assert find_unknown_bonuses([make_row('Team A', bonuses='Safety')],
                                    POINTS_BY_TYPE) == {}

    def test_structural_tags_are_reported(self):
        rows = [make_row('Team A', bonuses='MEASUREMENT, Safety')]
        assert find_unknown_bonuses(rows, POINTS_BY_TYPE) == {'MEASUREMENT': 1}


# ─── Point table ─────────────────────────────────────────────────────

class TestPointsTable:
    def test_default_config_copies_table(self):
        config = EventConfig()
        config.points['Safety'] = 999
        assert POINTS_BY_TYPE['Safety'] == 50

    def test_subjective_categories(self):
        subjective = subjective_categories(POINTS_BY_TYPE)
        assert 'MEASUREMENT' not in subjective
        assert subjective['Hit Equipment with Water Gun'] == -10
        assert subjective['Trespassing Ticket'] == 30

    def test_load_points_table(self, tmp_path):
        path = tmp_path / 'points.json'
        path.write_text(json.dumps({'Safety': 5, 'MOST_BLOCK_GROUPS': 75}))
        table = load_points_table(str(path))
        assert table['MEASUREMENT'] == 10
        assert table['MOST_BLOCK_GROUPS'] == 75
        assert table['Safety'] == 5
        assert 'Twin Towers' not in table

    def test_load_points_table_rejects_non_numbers(self, tmp_path):
        path = tmp_path / 'points.json'
        path.write_text(json.dumps({'Safety': 'fifty'}))
        with pytest.raises(ValueError):
            load_points_table(str(path))

    def test_loaded_table_scores(self, tmp_path):
        path = tmp_path / 'points.json'
        path.write_text(json.dumps({'Glitter': 15}))
        config = EventConfig(points=load_points_table(str(path)))
        scores = get_initial_team_scores([make_row('Team A', bonuses='Glitter, Safety')], config)
        assert scores[0].total == 25

    def test_subjective_only_table_keeps_structural_points(self):
        config = EventConfig(points={'Glitter': 15})
        assert config.points['MEASUREMENT'] == 10
        assert config.points['MOST_BLOCK_GROUPS'] == 50
        assert war_score([make_row('Team A', bonuses='Glitter')], config) == [
            ('Team A', 10 + 15 + 50 + 30 + 20 + 20)]

    def test_table_can_override_structural_points(self):
        config = EventConfig(points={'MEASUREMENT': 1})
        assert get_initial_team_scores([make_row('Team A')], config)[0].total == 1
