"""Binary data model for a chess opening explorer: entries, statistics, keys and metrics."""

__version__ = "0.1.0"