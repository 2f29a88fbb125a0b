"""Conversation log: a bounded, in-memory record of the current session"""

import logging
import time
import uuid
from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Optional

from . import config

logger = logging.getLogger(__name__)


class ConversationTurn:
    """Single conversation turn; only ``feedback`` may change after creation"""

    __slots__ = ("id", "role", "content", "timestamp", "confidence",
                 "sources_used", "trace", "feedback")

    def __init__(self, role: str, content: str, confidence: float = None,
                 sources_used: List[str] = None, trace: List[str] = None,
                 turn_id: str = None, timestamp: int = None):
        self.id = turn_id or uuid.uuid4().hex
        self.role = role  # 'user' or 'assistant'
        self.content = content
        self.timestamp = int(timestamp if timestamp is not None else time.time())
        self.confidence = confidence
        self.sources_used = tuple(sources_used or ())
        self.trace = tuple(trace or ())
        self.feedback: Optional[bool] = None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
            "confidence": self.confidence,
            "sources_used": list(self.sources_used),
            "trace": list(self.trace),
            "feedback": self.feedback,
        }

    def __repr__(self):
        return f"ConversationTurn(role={self.role!r}, id={self.id[:8]!r})"


class ConversationLog:
    """
    Bounded conversation history.

    Once ``max_turns`` is reached the oldest turn is evicted first.
    """

    def __init__(self, max_turns: int = None):
        self.max_turns = max_turns or config.MAX_CONVERSATION_TURNS
        self._turns: Deque[ConversationTurn] = deque(maxlen=self.max_turns)
        self.session_start = datetime.now().isoformat()

    def add_turn(self, role: str, content: str, **kwargs) -> ConversationTurn:
        """Append a turn and return it"""
        turn = ConversationTurn(role, content, **kwargs)
        self._turns.append(turn)
        return turn

    def get(self, turn_id: str) -> Optional[ConversationTurn]:
        for turn in self._turns:
            if turn.id == turn_id:
                return turn
        return None

    def mark_feedback(self, turn_id: str, helpful: bool) -> bool:
        """Flag a turn as helpful or not; False if the turn is no longer in the log"""
        turn = self.get(turn_id)
        if turn is None:
            logger.warning(f"Feedback for unknown turn: {turn_id}")
            return False
        turn.feedback = bool(helpful)
        return True

    def get_recent(self, n: int = 10) -> List[ConversationTurn]:
        """Get recent conversation turns"""
        return list(self._turns)[-n:] if n > 0 else []

    def clear(self):
        """Clear conversation history"""
        self._turns.clear()
        self.session_start = datetime.now().isoformat()
        logger.info("Conversation history cleared")

    def __len__(self):
        return len(self._turns)

    def __iter__(self):
        return iter(list(self._turns))

    def get_summary(self) -> Dict:
        """Get conversation summary"""
        user_turns = sum(1 for turn in self._turns if turn.role == "user")
        assistant = [turn for turn in self._turns if turn.role == "assistant"]
        confidences = [turn.confidence for turn in assistant if turn.confidence is not None]

        return {
            "total_turns": len(self._turns),
            "user_turns": user_turns,
            "assistant_turns": len(assistant),
            "average_confidence": round(sum(confidences) / len(confidences), 3) if confidences else 0.0,
            "helpful": sum(1 for turn in assistant if turn.feedback is True),
            "unhelpful": sum(1 for turn in assistant if turn.feedback is False),
            "session_start": self.session_start,
        }
