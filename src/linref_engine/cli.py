#!/usr/bin/env python3
"""
Linear-referencing Engine CLI

Command-line interface for parsing chainages, matching objections to RFIs,
resolving jurisdictions and checking geofence boundaries.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from .chainage import (
    format_meters,
    parse_chainage_to_meters,
    parse_location,
)
from .config_manager import ConfigManager
from .geofence import GeofenceValidator
from .jurisdiction import InMemoryTTLCache, JurisdictionResolver
from .matching import ObjectionLocation, find_matching_rfis
from .utils import RecordLoader


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='linref',
        description="Linear-referencing engine - chainage parsing, RFI matching, jurisdictions and geofences",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse chainages to meters
  %(prog)s parse K35+897 "K5+1" 189

  # Check an objection against one RFI location
  %(prog)s match "K10+500-K10+900" --range-from K10+000 --range-to K11+000

  # Find matching RFIs in an export
  %(prog)s match-file rfis.csv --specific K14+036 --output matches.csv

  # Resolve the jurisdiction for a location
  %(prog)s jurisdiction "K30+560-K30+570" --jurisdictions jurisdictions.csv

  # Check a GPS point against configured polygons
  %(prog)s --config engine.yaml geofence --lat 23.05 --lng 90.05
        """
    )

    parser.add_argument(
        '-c', '--config',
        type=Path,
        help='Engine configuration YAML file'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Minimal output (errors only)'
    )

    subparsers = parser.add_subparsers(dest='command')

    # parse
    parse_cmd = subparsers.add_parser('parse', help='Parse chainages or locations')
    parse_cmd.add_argument('values', nargs='+', help='Chainage or location strings')

    # match
    match_cmd = subparsers.add_parser('match', help='Match an objection against one RFI location')
    match_cmd.add_argument('rfi_location', help='RFI location string')
    _add_objection_arguments(match_cmd)

    # match-file
    match_file_cmd = subparsers.add_parser('match-file', help='Find matching RFIs in a CSV/Excel file')
    match_file_cmd.add_argument('input_file', type=Path, help='RFI CSV/Excel file')
    match_file_cmd.add_argument(
        '--location-column',
        default='location',
        help='RFI location column (default: location)'
    )
    match_file_cmd.add_argument(
        '-o', '--output',
        type=Path,
        help='Output CSV file for matches (default: matching_rfis_TIMESTAMP.csv)'
    )
    _add_objection_arguments(match_file_cmd)

    # jurisdiction
    jurisdiction_cmd = subparsers.add_parser('jurisdiction', help='Resolve the jurisdiction for locations')
    jurisdiction_cmd.add_argument('locations', nargs='+', help='Location strings')
    _add_jurisdiction_source(jurisdiction_cmd)

    # assign-jurisdictions
    assign_cmd = subparsers.add_parser(
        'assign-jurisdictions',
        help='Add jurisdiction columns to a daily-work file'
    )
    assign_cmd.add_argument('input_file', type=Path, help='Daily-work CSV/Excel file')
    assign_cmd.add_argument(
        '--location-column',
        default='location',
        help='Work location column (default: location)'
    )
    assign_cmd.add_argument(
        '-o', '--output',
        type=Path,
        help='Output CSV file (default: works_with_jurisdictions_TIMESTAMP.csv)'
    )
    assign_cmd.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress indicators'
    )
    _add_jurisdiction_source(assign_cmd)

    # geofence
    geofence_cmd = subparsers.add_parser('geofence', help='Check a GPS point against the configured polygons')
    geofence_cmd.add_argument('--lat', help='Latitude (omit for a missing location)')
    geofence_cmd.add_argument('--lng', help='Longitude (omit for a missing location)')

    # init-config
    init_cmd = subparsers.add_parser('init-config', help='Write an example configuration file')
    init_cmd.add_argument('output', type=Path, help='Where to write the YAML file')

    return parser


def _add_objection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '-s', '--specific',
        default='',
        help='Comma-separated specific chainages'
    )
    parser.add_argument('--range-from', default='', help='Objection range start chainage')
    parser.add_argument('--range-to', default='', help='Objection range end chainage')


def _add_jurisdiction_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '-j', '--jurisdictions',
        type=Path,
        help='Jurisdiction CSV/Excel file (default: jurisdictions.path from --config)'
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    engine_config = None
    if args.config and args.command != 'init-config':
        try:
            engine_config = ConfigManager(args.config).load()
        except (FileNotFoundError, ValueError) as e:
            print(f"❌ Error loading configuration: {e}", file=sys.stderr)
            return 1

    _configure_logging(args, engine_config)

    handlers = {
        'parse': cmd_parse,
        'match': cmd_match,
        'match-file': cmd_match_file,
        'jurisdiction': cmd_jurisdiction,
        'assign-jurisdictions': cmd_assign_jurisdictions,
        'geofence': cmd_geofence,
        'init-config': cmd_init_config,
    }
    return handlers[args.command](args, engine_config)


def _configure_logging(args, engine_config) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    elif engine_config is not None:
        level = getattr(logging, engine_config.log_level)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def cmd_parse(args, engine_config):
    """Print meters, display form and span for each value."""
    for value in args.values:
        meters = parse_chainage_to_meters(value)
        span = parse_location(value)

        if meters is None and span.start is None:
            print(f"⚠️  {value!r}: not a chainage")
            continue

        print(f"{value!r}:")
        if meters is not None:
            print(f"   Meters:  {meters}")
            print(f"   Display: {format_meters(meters)}")
        if span.is_range:
            print(f"   Range:   {span.start} - {span.end}")
        elif span.start is not None:
            print(f"   Point:   {span.start}")

    return 0


def _objection_from_args(args) -> ObjectionLocation:
    return ObjectionLocation.from_strings(
        specific=args.specific,
        range_from=args.range_from,
        range_to=args.range_to,
    )


def cmd_match(args, engine_config):
    """Exit 0 when the objection matches the RFI location."""
    objection = _objection_from_args(args)
    matched = objection.matches_rfi_location(args.rfi_location)

    if not args.quiet:
        summary = objection.chainage_summary()
        print(f"Objection: specific={summary['specific']} range={summary['range']}")
        if matched:
            print(f"✅ Matches RFI location {args.rfi_location!r}")
        else:
            print(f"❌ No match for RFI location {args.rfi_location!r}")

    return 0 if matched else 1


def cmd_match_file(args, engine_config):
    """Write RFIs matching the objection to CSV."""
    objection = _objection_from_args(args)
    if not objection.entries:
        print("❌ Error: objection has no parseable chainages", file=sys.stderr)
        return 1

    if not args.input_file.exists():
        print(f"❌ Error: Input file not found: {args.input_file}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"📊 Loading RFIs from {args.input_file}...")

    try:
        rfis = RecordLoader().load(args.input_file)
        matches = find_matching_rfis(objection, rfis, location_column=args.location_column)
    except (KeyError, ValueError) as e:
        print(f"❌ Error matching RFIs: {e}", file=sys.stderr)
        return 1

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    output_path = args.output or Path(f'matching_rfis_{timestamp}.csv')
    matches.to_csv(output_path, index=False)

    if not args.quiet:
        print(f"\n✅ {len(matches)} of {len(rfis)} RFIs match")
        print(f"📁 Exported matches to {output_path}")

    return 0


def _build_resolver(args, engine_config):
    path = args.jurisdictions
    if path is None and engine_config is not None:
        path = engine_config.jurisdictions_path

    if path is None:
        raise ValueError("No jurisdiction file given (use --jurisdictions or jurisdictions.path in --config)")

    loader = RecordLoader()
    kwargs = {}
    if engine_config is not None:
        kwargs = {
            'ttl_seconds': engine_config.jurisdiction_cache_ttl,
            'cache_key': engine_config.jurisdiction_cache_key,
        }

    return JurisdictionResolver(
        lambda: loader.load_jurisdictions(path),
        cache=InMemoryTTLCache(),
        **kwargs,
    )


def cmd_jurisdiction(args, engine_config):
    """Print the governing jurisdiction for each location."""
    try:
        resolver = _build_resolver(args, engine_config)
        resolver.get_jurisdictions()
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error loading jurisdictions: {e}", file=sys.stderr)
        return 1

    found_all = True
    for location in args.locations:
        jurisdiction = resolver.find_for_location(location)
        if jurisdiction is None:
            found_all = False
            print(f"⚠️  {location!r}: no jurisdiction")
            continue

        print(
            f"{location!r}: {jurisdiction.start_chainage}-{jurisdiction.end_chainage}"
            f" (id={jurisdiction.id}, incharge={jurisdiction.incharge})"
        )

    return 0 if found_all else 1


def cmd_assign_jurisdictions(args, engine_config):
    """Write the daily-work file with jurisdiction columns added."""
    if not args.input_file.exists():
        print(f"❌ Error: Input file not found: {args.input_file}", file=sys.stderr)
        return 1

    try:
        resolver = _build_resolver(args, engine_config)
        works = RecordLoader().load(args.input_file)
        if not args.quiet:
            print(f"📊 Loaded {len(works)} work records from {args.input_file}")

        result = resolver.assign_jurisdictions(
            works,
            location_column=args.location_column,
            progress=not (args.no_progress or args.quiet),
        )
    except (FileNotFoundError, KeyError, ValueError) as e:
        print(f"❌ Error assigning jurisdictions: {e}", file=sys.stderr)
        return 1

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    output_path = args.output or Path(f'works_with_jurisdictions_{timestamp}.csv')
    result.to_csv(output_path, index=False)

    if not args.quiet:
        matched = int(result['jurisdiction_range'].notna().sum())
        print(f"\n✅ Assigned {matched}/{len(result)} records")
        print(f"📁 Exported results to {output_path}")

    return 0


def cmd_geofence(args, engine_config):
    """Exit 0 when the point is accepted."""
    if engine_config is None:
        print("❌ Error: geofence requires --config with a geofence section", file=sys.stderr)
        return 1

    try:
        outcome = GeofenceValidator().validate_request(engine_config.geofence, args.lat, args.lng)
    except ValueError as e:
        print(f"❌ Error in geofence configuration: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        icon = "✅" if outcome.accepted else "❌"
        print(f"{icon} [{outcome.status_code}] {outcome.message}")
        if outcome.reason:
            print(f"   Reason: {outcome.reason}")

    return 0 if outcome.accepted else 1


def cmd_init_config(args, engine_config):
    """Write an example configuration file."""
    ConfigManager().save_example_config(args.output)
    if not args.quiet:
        print(f"✅ Wrote example configuration to {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
