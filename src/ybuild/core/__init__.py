"""Staleness checks and install orchestration."""
