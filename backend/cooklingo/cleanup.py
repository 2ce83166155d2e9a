from __future__ import annotations
from datetime import datetime, timedelta
from typing import Dict, Optional

from .quiz_session import QuizSession, QuizState


def purge_expired_sessions(sessions: Dict[str, QuizSession], ttl_minutes: int, *, now: Optional[datetime] = None) -> int:
	threshold = (now or datetime.utcnow()) - timedelta(minutes=ttl_minutes)
	# A session with a request in flight is left alone even if it looks stale
	stale = [
		sid for sid, s in sessions.items()
		if s.updated_at < threshold and s.state != QuizState.generating
	]
	for sid in stale:
		sessions.pop(sid, None)
	return len(stale)
