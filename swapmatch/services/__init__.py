"""
SwapMatch services.

Directory access and match persistence.
"""

from swapmatch.services.directory import Directory, SqlDirectory
from swapmatch.services.matchmaking import accept_candidate, list_matches, set_match_status

__all__ = [
    "Directory",
    "SqlDirectory",
    "accept_candidate",
    "list_matches",
    "set_match_status",
]
