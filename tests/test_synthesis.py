"""Tests for zacai/synthesis.py and zacai/responses.py."""

import pytest

from zacai import config
from zacai.knowledge import PersonalEntry
from zacai.reasoning import PathwayResult, ReasoningTrace
from zacai.responses import (
    GENERIC_REPLY,
    NO_INFORMATION,
    NO_MEMORIES,
    format_stats_response,
    format_trace,
    render,
)
from zacai.router import CONVERSATIONAL, FACTUAL, MATHEMATICAL, PERSONAL
from zacai.synthesis import Synthesis, synthesize, user_name_from

MATH_DATA = {
    "answer": 12,
    "steps": ["3 × 3 = 9", "9 + 3 = 12"],
    "method": "Order of operations (multiplication first)",
    "expression": "3×3+3",
}
CHAT = PathwayResult(CONVERSATIONAL, 0.6, {"kind": "generic", "reply": "x"})


class TestReasoningTrace:
    def test_append_only_steps(self):
        trace = ReasoningTrace(["one"]).add("two").extend(["three"])
        assert trace.steps == ("one", "two", "three")
        assert len(trace) == 3
        assert list(trace) == ["one", "two", "three"]


class TestSynthesize:
    def test_most_confident_wins(self):
        results = [
            PathwayResult(FACTUAL, 0.8, {"text": "a"}),
            PathwayResult(MATHEMATICAL, 0.95, MATH_DATA),
            CHAT,
        ]
        synthesis = synthesize(results)
        assert synthesis.pathway == MATHEMATICAL
        assert synthesis.confidence == 0.95
        assert synthesis.sources == [FACTUAL, MATHEMATICAL, CONVERSATIONAL]

    def test_tie_goes_to_first(self):
        results = [PathwayResult(PERSONAL, 0.9, {"facts": []}), PathwayResult(FACTUAL, 0.9, {}), CHAT]
        assert synthesize(results).pathway == PERSONAL

    def test_low_confidence_falls_back_to_conversation(self):
        results = [PathwayResult(MATHEMATICAL, 0.2), PathwayResult(FACTUAL, 0.1), CHAT]
        synthesis = synthesize(results)
        assert synthesis.pathway == CONVERSATIONAL
        assert synthesis.confidence == 0.6

    def test_threshold_is_inclusive(self):
        results = [PathwayResult(PERSONAL, 0.3), CHAT]
        assert synthesize(results).pathway == PERSONAL

    def test_no_results(self):
        synthesis = synthesize([])
        assert synthesis.pathway == CONVERSATIONAL
        assert synthesis.confidence == 0.0

    @pytest.mark.parametrize("confidence,expected", [(1.5, 1.0), (0.95, 0.95)])
    def test_confidence_is_clamped(self, confidence, expected):
        assert synthesize([PathwayResult(FACTUAL, confidence, {})]).confidence == expected

    def test_user_name(self):
        entries = [PersonalEntry("age", 30), PersonalEntry("name", "Jordan")]
        assert user_name_from(entries) == "Jordan"
        assert user_name_from([]) is None
        assert synthesize([CHAT], entries).user_name == "Jordan"


class TestRender:
    def test_math(self):
        rendered = render(Synthesis(MATHEMATICAL, 0.95, MATH_DATA))
        assert rendered.text == "The answer is 12. Here's how I solved it: 3 × 3 = 9 → 9 + 3 = 12"
        assert rendered.confidence == 0.95

    def test_name_prefix(self):
        rendered = render(Synthesis(MATHEMATICAL, 0.95, MATH_DATA, user_name="Jordan"))
        assert rendered.text.startswith("Jordan, the answer is 12")

    def test_vocabulary(self):
        data = {
            "kind": config.VOCABULARY,
            "key": "quick",
            "text": "Moving fast.",
            "details": {"part_of_speech": "adjective", "examples": ["A quick look."],
                        "synonyms": ["fast", "rapid"]},
            "hints": ["thesaurus"],
        }
        text = render(Synthesis(FACTUAL, 0.95, data)).text
        assert text.splitlines() == ["quick (adjective): Moving fast.", "Synonyms: fast, rapid"]

    def test_vocabulary_example_for_plain_definition(self):
        data = {
            "kind": config.VOCABULARY,
            "key": "quick",
            "text": "Moving fast.",
            "details": {"part_of_speech": "adjective", "examples": ["A quick look."]},
            "hints": ["definition"],
        }
        assert 'Example: "A quick look."' in render(Synthesis(FACTUAL, 0.95, data)).text

    def test_fact_with_related_topics(self):
        data = {"kind": config.FACTS, "key": "sun", "text": "The Sun is a star.",
                "details": {"related_topics": ["Solar System"]}, "hints": ["definition"]}
        text = render(Synthesis(FACTUAL, 0.9, data)).text
        assert text == "The Sun is a star.\nRelated topics: Solar System"

    def test_factual_miss(self):
        assert render(Synthesis(FACTUAL, 0.2, None)).text == NO_INFORMATION

    def test_acknowledgement_has_no_name_prefix(self):
        data = {"facts": [("name", "Jordan")], "acknowledged": True}
        rendered = render(Synthesis(PERSONAL, 0.9, data, user_name="Jordan"))
        assert rendered.text == "Nice to meet you, Jordan! I'll remember that."

    def test_acknowledgement_of_other_facts(self):
        data = {"facts": [("location", "Oslo"), ("interest_chess", "chess")], "acknowledged": True}
        text = render(Synthesis(PERSONAL, 0.9, data)).text
        assert text == "Got it, I'll remember that your location is Oslo, you like chess."

    def test_recall(self):
        data = {"facts": [("name", "Jordan"), ("age", 30)], "acknowledged": False}
        text = render(Synthesis(PERSONAL, 0.9, data, user_name="Jordan")).text
        assert text == "Jordan, I remember: name: Jordan, age: 30"

    def test_recall_shows_at_most_three_facts(self):
        facts = [(f"k{i}", i) for i in range(5)]
        text = render(Synthesis(PERSONAL, 0.6, {"facts": facts, "acknowledged": False})).text
        assert text.count(":") == 1 + config.MAX_PERSONAL_FACTS_SHOWN

    def test_no_memories(self):
        assert render(Synthesis(PERSONAL, 0.3, None)).text == NO_MEMORIES

    def test_conversational(self):
        assert render(Synthesis(CONVERSATIONAL, 0.6, {"kind": "greet", "reply": "Hello!"})).text == "Hello!"
        assert render(Synthesis(CONVERSATIONAL, 0.6, CHAT.data)).text == GENERIC_REPLY
        assert render(Synthesis(CONVERSATIONAL, 0.0, None)).text == GENERIC_REPLY


class TestCliHelpers:
    def test_format_trace(self):
        assert format_trace(["a", "b"]) == "  1. a\n  2. b"

    def test_format_stats_response(self):
        stats = {
            "knowledge": {"total_entries": 3, "learned_entries": 1,
                          config.FACTS: {"total": 3, "seed": 2, "learned": 1, "online": 0}},
            "conversation": {"total_turns": 2, "average_confidence": 0.9,
                             "helpful": 1, "unhelpful": 0, "session_start": "2024-01-01T10:00:00.123"},
        }
        text = format_stats_response(stats)
        assert "Entries    : 3" in text
        assert "Facts      : 3 (seed 2, learned 1, online 0)" in text
        assert "Avg. conf. : 90%" in text
        assert "Started    : 2024-01-01T10:00:00" in text
