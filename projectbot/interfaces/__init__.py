"""Inbound interfaces: the FastAPI receiver and the Slack bolt app."""
