"""Slack integration package for the /project bot.

This package provides the Slack app (AsyncApp in HTTP mode), the listener
logic, and the Block Kit builders for modals and project listings.
"""
