"""
live_editor — apply LLM-proposed file edits to a local project.

Public API for library usage::

    from live_editor import Config, EditOrchestrator

    summary = EditOrchestrator(Config.load()).handle_edit_request(
        "Rename the header to 'Dashboard'")
"""

from .config import Config
from .orchestrator import EditOrchestrator, EditSummary, handle_edit_request

__all__ = ["Config", "EditOrchestrator", "EditSummary", "handle_edit_request"]
