#!/usr/bin/env python3
"""
Campus Calendar - command-line view of the campus event engine.

Seeds the mock campus week and prints a day, week or month view for a
user and visibility filter, optionally exporting the shown events as .ics.
"""

import sys
import argparse
import tomllib
from datetime import date
from pathlib import Path

from campus_events.calendar_query import Window
from campus_events.config import Config, FILTER_NAMES, VIEW_NAMES
from campus_events.debug import set_debug
from campus_events.engine import EventEngine
from campus_events.ics_export import export_events
from campus_events.membership import StaticMembershipOracle
from campus_events.mock_events import MOCK_MEMBERSHIPS, seed_mock_events


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Campus Calendar - day, week and month views of campus events"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    parser.add_argument("--view", choices=VIEW_NAMES, help="Calendar view (default from config)")
    parser.add_argument("--filter", choices=FILTER_NAMES, help="Visibility filter (default from config)")
    parser.add_argument("--user", help="Viewing user id (default from config)")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Day to show, YYYY-MM-DD (default: today)"
    )
    parser.add_argument("--export", type=Path, help="Also write the shown events to this .ics file")
    return parser.parse_args(argv)


def _time_range(event) -> str:
    return f"{event.start_time:%H:%M}-{event.end_time:%H:%M}"


def _event_line(event) -> str:
    line = f"{_time_range(event)}  {event.title}"
    if event.location:
        line += f" @ {event.location}"
    return line


def render_day(engine: EventEngine, config: Config, day: date, visibility_filter: str, user_id: str) -> list[str]:
    loc = config.localization
    lines = [f"{loc.get_day_name((day.weekday() + 1) % 7)} {day.day} {loc.get_month_name(day.month)} {day.year}"]
    layout = engine.calendar.day_layout(day, visibility_filter, user_id)
    if not layout:
        lines.append("  No events")
    for slot in layout:
        marker = f" [{slot.column + 1}/{slot.total_columns}]" if slot.has_conflict else ""
        lines.append(f"  {_event_line(slot.event)}{marker}")
    return lines


def render_week(engine: EventEngine, config: Config, day: date, visibility_filter: str, user_id: str) -> list[str]:
    loc = config.localization
    lines = []
    for index, week_day in enumerate(engine.calendar.week_view(day, visibility_filter, user_id)):
        today_mark = " (today)" if week_day.is_today else ""
        lines.append(f"{loc.get_day_name(index)} {week_day.day.day} {loc.get_month_name(week_day.day.month)}{today_mark}")
        if not week_day.events:
            lines.append("  No events")
        for event in week_day.events:
            lines.append(f"  {_event_line(event)}")
    return lines


def render_month(engine: EventEngine, config: Config, day: date, visibility_filter: str, user_id: str) -> list[str]:
    loc = config.localization
    grid = engine.calendar.month_view(day, visibility_filter, user_id)
    lines = [f"{loc.get_month_name(grid.month)} {grid.year}"]
    lines.append(" ".join(f"{loc.get_day_name(i):>6}" for i in range(7)))
    for week in grid.weeks():
        cells = []
        for cell in week:
            if cell is None:
                cells.append(" " * 6)
            elif cell.count:
                cells.append(f"{cell.day.day:>3}({cell.count})")
            else:
                cells.append(f"{cell.day.day:>6}")
        lines.append(" ".join(cells))
    return lines


RENDERERS = {
    "day": (render_day, Window.day),
    "week": (render_week, Window.week),
    "month": (render_month, Window.month),
}


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.debug:
        set_debug(True)

    # Load configuration
    try:
        config = Config.load(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"\nDefault configuration location: {Config.get_default_config_path()}", file=sys.stderr)
        return 1
    except (ValueError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    # The demo week brings its own club memberships unless the config defines some
    oracle = config.membership_oracle() if config.memberships else StaticMembershipOracle(MOCK_MEMBERSHIPS)
    engine = EventEngine.from_config(config, membership_oracle=oracle)

    day = args.date or date.today()
    seed_mock_events(engine, day)

    view = args.view or config.default_view
    visibility_filter = args.filter or config.default_filter
    user_id = args.user or config.default_user

    render, window = RENDERERS[view]
    print("\n".join(render(engine, config, day, visibility_filter, user_id)))

    if args.export:
        events = engine.events_in_window(window(day), visibility_filter, user_id)
        args.export.write_bytes(export_events(events))
        print(f"\nExported {len(events)} events to {args.export}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
