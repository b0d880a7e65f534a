"""Team scoring for a War Derive.

Scoring runs in two passes:
  - Per-team pass: fold every measurement row into a running TeamScore
    (flat measurement points, good-signal bonus, subjective bonuses,
    block groups, max distance and signal stats)
  - Leaderboard pass: compare the finished TeamScores and award the
    aggregate bonuses to every team that ties the leaderboard maximum

The leaderboard pass needs the per-team pass to be complete, so the two
are kept as separate functions and composed by war_score().
"""

from collections import Counter

from .models import EventConfig, Maximums, Measurement, TeamScore
from .points import (
    GOOD_SIGNAL, MANY_AREAS, MAX_SIGNAL_STRENGTH, MAX_SUPERNODE_DISTANCE,
    MEASUREMENT, MOST_BLOCK_GROUPS, MOST_MEASUREMENTS, subjective_categories,
)


# Positions of the columns the scorer reads in a sheet row
COL_ID = 0
COL_TEAM = 1
COL_SUPERNODE = 2
COL_SIGNAL = 3
COL_LOCATION = 4
COL_BLOCK_GROUP = 8
COL_DISTANCE = 9
COL_BONUSES = 10


def parse_categories(value) -> list[str]:
    """Split a comma-separated list of categories.

    Returns an empty list for None, blanks and whitespace-only strings
    rather than a list holding one empty string.
    """
    if value is None or not isinstance(value, str) or value.strip() == '':
        return []
    return [s.strip() for s in value.split(',')]


def parse_measurement(row) -> Measurement:
    """Project a raw 11-column sheet row onto a Measurement.

    Columns 4-7 (location, vibes, screenshot, line-of-sight photo) are
    not used for scoring.
    """
    return Measurement(
        team_name=row[COL_TEAM],
        supernode=row[COL_SUPERNODE],
        signal_strength=row[COL_SIGNAL],
        block_group=row[COL_BLOCK_GROUP],
        supernode_distance=row[COL_DISTANCE],
        subjective_bonuses=tuple(parse_categories(row[COL_BONUSES])),
    )


def _check_resolved(row, measurement: Measurement):
    """Reject rows whose numeric or geographic columns were never filled in."""
    missing = []
    if measurement.signal_strength is None:
        missing.append('signal strength')
    if measurement.block_group is None or measurement.block_group == '':
        missing.append('block group')
    if measurement.supernode_distance is None:
        missing.append('supernode distance')
    if missing:
        raise ValueError(
            f"Measurement {row[COL_ID]!r} for team {measurement.team_name!r} "
            f"is missing {', '.join(missing)}")


def get_initial_team_scores(measurements, config: EventConfig | None = None) -> list[TeamScore]:
    """Fold measurement rows into one TeamScore per team.

    Rows without a team name are skipped. Teams come back in the order
    they first appear in the input.
    """
    config = config or EventConfig()
    points = config.points
    scores = {}

    for row in measurements:
        measurement = parse_measurement(row)

        # Skip rows without team names
        if not measurement.team_name:
            continue
        _check_resolved(row, measurement)

        score = scores.get(measurement.team_name)
        if score is None:
            score = TeamScore(team_name=measurement.team_name)
            scores[measurement.team_name] = score

        score.n_measurements += 1
        score.total += points[MEASUREMENT]

        if measurement.signal_strength > config.good_signal_threshold:
            score.total += points[GOOD_SIGNAL]

        if measurement.signal_strength > score.max_signal_strength:
            score.max_signal_strength = measurement.signal_strength
        if measurement.signal_strength < score.min_signal_strength:
            score.min_signal_strength = measurement.signal_strength

        # Unknown categories are ignored; zero-point ones are fine
        for bonus in measurement.subjective_bonuses:
            if bonus in points:
                score.total += points[bonus]

        score.block_groups.add(measurement.block_group)

        if measurement.supernode_distance > score.max_supernode_distance:
            score.max_supernode_distance = measurement.supernode_distance

    return list(scores.values())


def get_maximums(scores: list[TeamScore]) -> Maximums:
    """Scan all team scores once for the leaderboard-wide maximums."""
    maximums = Maximums()
    for team in scores:
        maximums.n_block_groups = max(maximums.n_block_groups, len(team.block_groups))
        maximums.n_measurements = max(maximums.n_measurements, team.n_measurements)
        maximums.max_supernode_distance = max(maximums.max_supernode_distance,
                                              team.max_supernode_distance)
        maximums.max_signal_strength = max(maximums.max_signal_strength,
                                           team.max_signal_strength)
        maximums.min_signal_strength = min(maximums.min_signal_strength,
                                           team.min_signal_strength)
    return maximums


def _award(team: TeamScore, category: str, points: dict):
    team.total += points[category]
    team.bonuses.append(category)


def assign_agg_bonuses(scores: list[TeamScore], config: EventConfig | None = None) -> list[TeamScore]:
    """Award the aggregate bonuses that depend on comparing teams.

    Every team that ties a maximum gets the bonus; there is no single
    winner. Comparisons are exact, so float distances only tie when they
    are bit-for-bit equal. MANY_AREAS is an absolute threshold and can
    stack with MOST_BLOCK_GROUPS. Scores are updated in place and the
    same list is returned.
    """
    config = config or EventConfig()
    points = config.points
    max_values = get_maximums(scores)

    for team in scores:
        n_block_groups = len(team.block_groups)
        if n_block_groups == max_values.n_block_groups:
            _award(team, MOST_BLOCK_GROUPS, points)

        if n_block_groups >= config.many_areas_threshold:
            _award(team, MANY_AREAS, points)

        if team.n_measurements == max_values.n_measurements:
            _award(team, MOST_MEASUREMENTS, points)

        if team.max_supernode_distance == max_values.max_supernode_distance:
            _award(team, MAX_SUPERNODE_DISTANCE, points)

        if team.max_signal_strength == max_values.max_signal_strength:
            _award(team, MAX_SIGNAL_STRENGTH, points)

    # TODO: furthest distance between two of a team's measurements and
    # furthest distance from another team's measurement need an all-pairs
    # distance query in geo.py; they are judged by hand as subjective tags.
    return scores


def rank_scores(scores: list[TeamScore]) -> list[tuple[str, float]]:
    """Sort by total descending and drop everything but (team, total).

    The sort is stable, so tied teams keep their first-appearance order.
    """
    ranked = sorted(scores, key=lambda s: s.total, reverse=True)
    return [(s.team_name, s.total) for s in ranked]


def score_teams(measurements, config: EventConfig | None = None) -> list[TeamScore]:
    """Run both scoring passes and return full TeamScores, highest first."""
    config = config or EventConfig()
    scores = assign_agg_bonuses(get_initial_team_scores(measurements, config), config)
    return sorted(scores, key=lambda s: s.total, reverse=True)


def war_score(measurements, config: EventConfig | None = None) -> list[tuple[str, float]]:
    """Calculate the ranked (team name, total) pairs for a list of rows."""
    return rank_scores(score_teams(measurements, config))


def find_unknown_bonuses(measurements, points: dict) -> dict:
    """Count subjective bonus tags that are not in the point table.

    Scoring ignores these silently; this is for reporting typos and
    renamed sheet options before the results are announced. Structural
    categories typed into the bonus column are reported too, since they
    are never a sheet option.
    """
    known = subjective_categories(points)
    unknown = Counter()
    for row in measurements:
        measurement = parse_measurement(row)
        if not measurement.team_name:
            continue
        for bonus in measurement.subjective_bonuses:
            if bonus and bonus not in known:
                unknown[bonus] += 1
    return dict(unknown)


def print_bonus_report(unknown: dict) -> None:
    """Print unrecognized subjective bonus tags to stdout."""
    if not unknown:
        print("\nSubjective bonuses: all tags recognized")
        return

    print(f"\nSubjective bonuses: {len(unknown)} unrecognized tag(s) ignored")
    for tag, count in sorted(unknown.items()):
        print(f'  "{tag}" ({count} row{"s" if count != 1 else ""})')
