"""
Trip Journal client: auth, trips, events and media over the journal REST API
"""

from tripjournal.services.journal_client import JournalClient
from tripjournal.services.session import JournalSession
from tripjournal.services.response_decoder import EMPTY_RESULT

__version__ = "0.1.0"

__all__ = ["JournalClient", "JournalSession", "EMPTY_RESULT", "__version__"]
