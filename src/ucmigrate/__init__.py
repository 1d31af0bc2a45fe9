"""ucmigrate — carry per-version user settings across application upgrades."""

__version__ = "0.1.0"
