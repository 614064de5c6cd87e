#!/usr/bin/env python3
"""
Flood Route Scenario

Finds a route across a tile map of roads, buildings and flood zones with
greedy best-first search, then plays a vehicle back along it.

Usage:
    flood-route --start X,Y --end X,Y [options]

Examples:
    flood-route --start 0,0 --end 1,12
    flood-route --config configs/default.yaml --variant flood --gif
    flood-route --start 0,0 --end 1,12 --cancel-after 2 --no-snapshot
    python -m flood_route.main --config configs/default.yaml --quiet
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import default_config, load_config, parse_cell
from .model.playback import ManualScheduler
from .model.session import Outcome, Session
from .model.state import PlaybackFrame
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter

EXIT_REJECTED = 2
EXIT_UNREACHABLE = 3


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Flood Route Scenario',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    flood-route --start 0,0 --end 1,12
    flood-route --config configs/default.yaml --variant flood --gif
    flood-route --start 0,0 --end 1,12 --cancel-after 2 --no-snapshot
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file')

    # Scenario overrides
    parser.add_argument('--variant', default=None,
                        help='Map variant (normal, flood)')
    parser.add_argument('--start', type=parse_cell, default=None,
                        help='Start cell as X,Y')
    parser.add_argument('--end', type=parse_cell, default=None,
                        help='End cell as X,Y')
    parser.add_argument('--interval', type=float, default=None,
                        help='Playback interval in milliseconds (default: 250)')
    parser.add_argument('--cancel-after', type=int, default=None,
                        help='Cancel playback after this many ticks')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Log every tick and state change')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else
        logging.WARNING if args.quiet else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s'
    )

    # Load configuration
    if args.config is None:
        config = default_config()
    else:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return 1

    # Apply CLI overrides
    if args.variant is not None:
        config.variant = args.variant
    if args.start is not None:
        config.start = args.start
    if args.end is not None:
        config.end = args.end
    if args.interval is not None:
        config.playback.interval_ms = args.interval
    if args.cancel_after is not None:
        config.playback.cancel_after = args.cancel_after
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    config.out_dir = args.out_dir

    if config.playback.interval_ms < 0:
        print("Error: --interval must be >= 0", file=sys.stderr)
        return 1
    if config.playback.cancel_after is not None and config.playback.cancel_after < 1:
        print("Error: --cancel-after must be >= 1", file=sys.stderr)
        return 1

    scheduler = ManualScheduler()
    reporter = Reporter(str(args.config) if args.config else None)

    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'playback_log.csv')
        csv_writer.open()

    session = None
    visualizer = None

    def on_tick(cell):
        frame = PlaybackFrame(
            tick=session.playback.ticks_emitted,
            time_ms=scheduler.now,
            x=cell.x,
            y=cell.y,
            tile=session.grid.tile_at(*cell).name.lower()
        )
        if csv_writer:
            csv_writer.append(frame)
        if config.gif_enabled:
            visualizer.buffer_frame(session.snapshot())
        reporter.update(frame)
        if not config.quiet:
            print(f"  Tick {frame.tick}: vehicle at ({cell.x}, {cell.y})")

    session = Session(scheduler, on_tick=on_tick,
                      interval_ms=config.playback.interval_ms)
    visualizer = Visualizer(session.grid.width, session.grid.height)

    if not config.quiet:
        print("Initializing scenario...")
        print(f"  Grid: {session.grid.width}x{session.grid.height}")
        print(f"  Variant: {config.variant}")
        print(f"  Start: {config.start}, End: {config.end}")

    result = session.select_grid_variant(config.variant)
    if result.ok and config.start is not None:
        result = session.set_start(config.start)
    if result.ok and config.end is not None:
        result = session.set_end(config.end)
    if result.ok:
        if not config.quiet:
            print("\nSearching...")
        result = session.request_search()

    # Main playback loop
    cancel_after = config.playback.cancel_after
    try:
        while not session.playback.is_finished():
            if cancel_after is not None and session.playback.ticks_emitted >= cancel_after:
                session.cancel_playback()
                reporter.cancelled = True
                if not config.quiet:
                    print(f"Playback cancelled after {cancel_after} ticks.")
                break
            # one tick at a time, so zero-interval playback still stops on cue
            if not scheduler.run_next():
                break
    except KeyboardInterrupt:
        session.cancel_playback()
        reporter.cancelled = True
        if not config.quiet:
            print("\nPlayback interrupted by user.")

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'playback_log.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(session.snapshot(), snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'playback.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, interval_ms=config.playback.interval_ms)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    if not config.quiet:
        report = reporter.generate_summary(
            session,
            result,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    if result.outcome == Outcome.REJECTED:
        print(f"Error: {result.message}", file=sys.stderr)
        return EXIT_REJECTED
    if result.outcome == Outcome.UNREACHABLE:
        if not config.quiet:
            print(result.message)
        return EXIT_UNREACHABLE
    return 0


if __name__ == '__main__':
    sys.exit(main())
