"""
ClearSeller Orchestrator Module
===============================

Command-line and logging layer around the scoring engine.

Components:
    - CLI: score / scan / price / profit commands
    - setup_logging: Human-readable or JSON-lines logging

Usage:
    python -m clearseller.orchestrator.cli scan --file listing.json
"""

from .logging_config import JSONFormatter, setup_logging

__all__ = [
    "JSONFormatter",
    "setup_logging",
]
