"""Output generator for War Derive results.

Generates two text outputs from the final team scores:
  - Leaderboard CSV with place, team and total
  - Bonus report with each team's stats and aggregate bonuses
"""

import csv

from .models import TeamScore
from .points import (
    MANY_AREAS, MAX_SIGNAL_STRENGTH, MAX_SUPERNODE_DISTANCE,
    MOST_BLOCK_GROUPS, MOST_MEASUREMENTS,
)


BONUS_TITLES = {
    MOST_BLOCK_GROUPS: 'Most Block Groups',
    MANY_AREAS: 'Many Areas',
    MOST_MEASUREMENTS: 'Most Measurements',
    MAX_SUPERNODE_DISTANCE: 'Furthest From Supernode',
    MAX_SIGNAL_STRENGTH: 'Strongest Signal',
}


def assign_places(scores: list[TeamScore]) -> list[str]:
    """Return a place label per score (already sorted highest first).

    Teams with the same total share a place, marked with a T: 1T, 1T, 3.
    """
    places = []
    for i, team in enumerate(scores):
        if i > 0 and team.total == scores[i - 1].total:
            place = places[i - 1].rstrip('T')
        else:
            place = str(i + 1)
        tied = ((i > 0 and team.total == scores[i - 1].total)
                or (i + 1 < len(scores) and team.total == scores[i + 1].total))
        places.append(f'{place}T' if tied else place)
    return places


def _format_points(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def generate_leaderboard_csv(scores: list[TeamScore], output_path: str):
    """Write the leaderboard CSV, highest total first."""
    places = assign_places(scores)
    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=['place', 'team', 'total'])
        writer.writeheader()
        for place, team in zip(places, scores):
            writer.writerow({
                'place': place,
                'team': team.team_name,
                'total': _format_points(team.total),
            })


def generate_bonus_report(scores: list[TeamScore], output_path: str):
    """Write a per-team breakdown of stats and aggregate bonuses."""
    lines = []
    for place, team in zip(assign_places(scores), scores):
        lines.append('')
        lines.append('=' * 60)
        lines.append(f'  {place}. {team.team_name} - {_format_points(team.total)} points')
        lines.append('=' * 60)
        lines.append(f'  Measurements: {team.n_measurements}')
        lines.append(f'  Block groups: {len(team.block_groups)}')
        lines.append(f'  Max supernode distance: {team.max_supernode_distance:.3f}')
        lines.append(f'  Signal strength: {team.max_signal_strength} max, '
                     f'{team.min_signal_strength} min')
        if team.bonuses:
            titles = [BONUS_TITLES.get(b, b) for b in team.bonuses]
            lines.append(f'  Bonuses: {", ".join(titles)}')
        else:
            lines.append('  Bonuses: none')
        lines.append('')

    with open(output_path, 'w') as f:
        f.write('\n'.join(lines))


def print_leaderboard(scores: list[TeamScore]) -> None:
    """Print the leaderboard to stdout."""
    print("\nLeaderboard:")
    for place, team in zip(assign_places(scores), scores):
        print(f"  {place:>4}  {team.team_name:<30} {_format_points(team.total):>6}")
