"""Tests for zacai/conversation.py."""

from zacai.conversation import ConversationLog


class TestConversationLog:
    def test_add_turn(self):
        log = ConversationLog()
        turn = log.add_turn("assistant", "Hello!", confidence=0.6, sources_used=["conversational"])
        assert len(log) == 1
        assert turn.id
        assert turn.sources_used == ("conversational",)
        assert turn.feedback is None

    def test_oldest_turn_is_evicted(self):
        log = ConversationLog(max_turns=3)
        for i in range(5):
            log.add_turn("user", str(i))
        assert len(log) == 3
        assert [turn.content for turn in log] == ["2", "3", "4"]

    def test_mark_feedback(self):
        log = ConversationLog()
        turn = log.add_turn("assistant", "An answer", confidence=0.8)
        assert log.mark_feedback(turn.id, True)
        assert log.get(turn.id).feedback is True

    def test_feedback_for_unknown_turn(self):
        assert ConversationLog().mark_feedback("missing", True) is False

    def test_get_recent(self):
        log = ConversationLog()
        for i in range(4):
            log.add_turn("user", str(i))
        assert [turn.content for turn in log.get_recent(2)] == ["2", "3"]
        assert log.get_recent(0) == []

    def test_summary(self):
        log = ConversationLog()
        log.add_turn("user", "hi")
        good = log.add_turn("assistant", "Hello!", confidence=0.6)
        log.add_turn("user", "3+3")
        bad = log.add_turn("assistant", "6", confidence=0.9)
        log.mark_feedback(good.id, True)
        log.mark_feedback(bad.id, False)

        summary = log.get_summary()
        assert summary["total_turns"] == 4
        assert summary["user_turns"] == 2
        assert summary["assistant_turns"] == 2
        assert summary["average_confidence"] == 0.75
        assert summary["helpful"] == 1
        assert summary["unhelpful"] == 1

    def test_clear(self):
        log = ConversationLog()
        log.add_turn("user", "hi")
        log.clear()
        assert len(log) == 0
        assert log.get_summary()["average_confidence"] == 0.0

    def test_to_dict(self):
        turn = ConversationLog().add_turn("assistant", "ok", confidence=0.5, trace=["step"])
        data = turn.to_dict()
        assert data["trace"] == ["step"]
        assert data["role"] == "assistant"
