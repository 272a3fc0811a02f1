"""Slack /project bot for tracking projects stored in Airtable."""

__version__ = "1.0.0"
