"""
Configuration parser for Campus Events.

Handles TOML file parsing into typed dataclasses.
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .debug import debug_print
from .membership import StaticMembershipOracle
from .timezone_utils import is_valid_timezone


VIEW_NAMES = ("day", "week", "month")
FILTER_NAMES = ("all", "public", "private", "school-wide", "orgs")


def _debug_print(msg: str) -> None:
    debug_print("CONFIG", msg)


@dataclass
class LayoutConfig:
    """Configuration for day layout."""
    min_event_minutes: int = 30  # Shorter events are laid out as if this long


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Default to English abbreviated day names, Sunday first
    day_names: list[str] = None  # Sun Mon Tue Wed Thu Fri Sat
    # Default to English full month names
    month_names: list[str] = None  # January February ... December

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        if self.month_names is None:
            self.month_names = [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December"
            ]

    def get_day_name(self, day_index: int) -> str:
        """Get localized day name for a day-of-week index (0=Sunday, 6=Saturday)."""
        return self.day_names[day_index] if 0 <= day_index < len(self.day_names) else ""

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""


@dataclass
class Config:
    """Main configuration container for Campus Events."""

    timezone: str = "America/New_York"
    default_user: str = "user-123"
    default_view: str = "week"
    default_filter: str = "all"
    debug: bool = False
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    memberships: dict[str, list[str]] = field(default_factory=dict)  # club_id -> user ids

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'campus-events' / 'campus-events.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from a TOML file.

        An explicitly given path must exist. Without one, the default path
        is used if present and built-in defaults otherwise.
        """
        if config_path is None:
            config_path = cls.get_default_config_path()
            if not config_path.exists():
                _debug_print(f"No configuration at {config_path}, using defaults")
                return cls()

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        _debug_print(f"Loaded {config_path}: sections {list(data.keys())}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from parsed TOML data, validating values."""
        # Parse General section
        general = data.get('General', {})
        timezone = general.get('timezone', cls.timezone)
        if not is_valid_timezone(timezone):
            raise ValueError(f"Unknown timezone: {timezone}")

        default_view = general.get('default_view', cls.default_view)
        if default_view not in VIEW_NAMES:
            raise ValueError(f"default_view must be one of {', '.join(VIEW_NAMES)}: {default_view}")

        default_filter = general.get('default_filter', cls.default_filter)
        if default_filter not in FILTER_NAMES:
            raise ValueError(f"default_filter must be one of {', '.join(FILTER_NAMES)}: {default_filter}")

        # Parse Layout section
        layout_data = data.get('Layout', {})
        min_event_minutes = layout_data.get('min_event_minutes', LayoutConfig.min_event_minutes)
        if not isinstance(min_event_minutes, int) or min_event_minutes <= 0:
            raise ValueError(f"min_event_minutes must be a positive integer: {min_event_minutes}")
        layout = LayoutConfig(min_event_minutes=min_event_minutes)

        # Parse Localization section (space-separated names)
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')
        day_names = day_names_str.split() if day_names_str else None
        month_names = month_names_str.split() if month_names_str else None
        if day_names is not None and len(day_names) != 7:
            raise ValueError(f"day_names needs 7 names, got {len(day_names)}")
        if month_names is not None and len(month_names) != 12:
            raise ValueError(f"month_names needs 12 names, got {len(month_names)}")
        localization = LocalizationConfig(day_names=day_names, month_names=month_names)

        # Parse Memberships section: club_id = ["user-1", "user-2"]
        memberships = {}
        for club_id, users in data.get('Memberships', {}).items():
            if isinstance(users, str):
                users = users.split()
            memberships[club_id] = [str(u) for u in users]
        _debug_print(f"Memberships for {len(memberships)} clubs")

        return cls(
            timezone=timezone,
            default_user=general.get('default_user', cls.default_user),
            default_view=default_view,
            default_filter=default_filter,
            debug=bool(general.get('debug', False)),
            layout=layout,
            localization=localization,
            memberships=memberships,
        )

    def membership_oracle(self) -> StaticMembershipOracle:
        """Membership oracle answering from the [Memberships] table."""
        return StaticMembershipOracle(self.memberships)
