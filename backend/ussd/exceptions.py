"""
USSD-specific exceptions.

Both derive from ``core.domain.exceptions`` so the operator API maps
them consistently; the webhook itself turns them into ``END`` replies.
"""

from __future__ import annotations

from core.domain.exceptions import Conflict, NotFound


class SessionBusy(Conflict):
    """Another turn for the same ``sessionId`` holds the session lock."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"USSD session {session_id} is busy.")
        self.session_id = session_id


class SessionNotFound(NotFound):
    """An update targeted a session that expired or never existed."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"USSD session {session_id} not found.")
        self.session_id = session_id
