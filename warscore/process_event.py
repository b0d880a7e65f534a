#!/usr/bin/env python3
"""CLI entry point for scoring a War Derive.

Usage:
    python warscore/process_event.py --source sheet --data measurements.csv \\
        --event "2023 Tucson War Derive" --output ./output/
"""

import argparse
import os
import sys

# Add parent directory to path for imports (skip when frozen by PyInstaller)
if not getattr(sys, 'frozen', False):
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from warscore.core.models import EventConfig
from warscore.core.points import (
    GOOD_SIGNAL_THRESHOLD, MANY_AREAS_THRESHOLD, POINTS_BY_TYPE, load_points_table,
)
from warscore.core.scorer import find_unknown_bonuses, print_bonus_report, score_teams
from warscore.core.geo import BlockGroupResolver, fill_geo_columns
from warscore.core.output_generator import (
    generate_bonus_report, generate_leaderboard_csv, print_leaderboard,
)
from warscore.core.pdf_generator import generate_leaderboard_pdf
from warscore.adapters.sheet_adapter import SheetAdapter
from warscore.adapters.json_adapter import JsonAdapter


ADAPTERS = {
    'sheet': SheetAdapter,
    'json': JsonAdapter,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description='Score a War Derive')
    parser.add_argument('--source', required=True, choices=sorted(ADAPTERS),
                        help='Export type: sheet (CSV/TSV) or json (Sheets API values)')
    parser.add_argument('--data', nargs='+', required=True, help='Measurement export file(s)')
    parser.add_argument('--output', required=True, help='Output directory for generated files')
    parser.add_argument('--event', default='War Derive', help='Event name for report titles')
    parser.add_argument('--points', default=None,
                        help='Path to a JSON point table (default: built-in table)')
    parser.add_argument('--block-groups', default=None,
                        help='GeoJSON block group polygons, used to fill blank block group cells')
    parser.add_argument('--id-property', default='geoid20',
                        help='Feature property holding the block group id (default geoid20)')
    parser.add_argument('--good-signal-threshold', type=float, default=GOOD_SIGNAL_THRESHOLD,
                        help=f'Signal strength (dBm) a reading must beat for the good-signal '
                             f'bonus (default {GOOD_SIGNAL_THRESHOLD})')
    parser.add_argument('--many-areas', type=int, default=MANY_AREAS_THRESHOLD,
                        help=f'Block groups needed for the many-areas bonus '
                             f'(default {MANY_AREAS_THRESHOLD})')
    parser.add_argument('--no-pdf', action='store_true', help='Skip the leaderboard PDF')

    args = parser.parse_args(argv)

    points = load_points_table(args.points) if args.points else dict(POINTS_BY_TYPE)
    config = EventConfig(
        event_name=args.event,
        points=points,
        good_signal_threshold=args.good_signal_threshold,
        many_areas_threshold=args.many_areas,
    )

    adapter = ADAPTERS[args.source]()

    rows = []
    for data_path in args.data:
        print(f"Parsing {data_path}...")
        batch = adapter.parse(data_path)
        print(f"  -> {len(batch)} rows")
        rows.extend(batch)
    if len(args.data) > 1:
        print(f"Total: {len(rows)} rows from {len(args.data)} files")

    # Fill any block group / distance cells the sheet formulas left blank
    resolver = None
    if args.block_groups:
        resolver = BlockGroupResolver.from_file(args.block_groups, id_property=args.id_property)
        print(f"Loaded {len(resolver)} block groups from {args.block_groups}")
    filled = fill_geo_columns(rows, resolver)
    if filled:
        print(f"Filled {filled} blank geography cells")

    print_bonus_report(find_unknown_bonuses(rows, config.points))

    scores = score_teams(rows, config)
    print_leaderboard(scores)

    os.makedirs(args.output, exist_ok=True)

    csv_path = os.path.join(args.output, 'leaderboard.csv')
    generate_leaderboard_csv(scores, csv_path)
    print(f"\nGenerated {csv_path}")

    report_path = os.path.join(args.output, 'bonus_report.txt')
    generate_bonus_report(scores, report_path)
    print(f"Generated {report_path}")

    if not args.no_pdf:
        pdf_path = os.path.join(args.output, 'leaderboard.pdf')
        generate_leaderboard_pdf(scores, pdf_path, event_name=config.event_name)
        print(f"Generated {pdf_path}")

    print("\nDone!")


if __name__ == '__main__':
    main()
