"""Temporal workflows and activities for script processing and revisions."""
