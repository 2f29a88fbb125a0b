"""Tests for zacai/pathways.py."""

import pytest

from zacai import config
from zacai.knowledge import FactEntry, PersonalEntry
from zacai.learning import CALCULATION, DEFINITION, ENRICHMENT, FACT, USAGE
from zacai.pathways import (
    GENERIC,
    SMALL_TALK,
    VocabularyFactsPathway,
    content_words,
    converse,
    extract_term,
    recall,
    run_arithmetic,
)
from zacai.router import CONVERSATIONAL, FACTUAL, PERSONAL


@pytest.fixture
def pathway(seeded_store, dictionary, encyclopedia):
    return VocabularyFactsPathway(seeded_store, dictionary, encyclopedia)


def proposal_kinds(result):
    return [event.kind for event in result.proposals]


class TestContentWords:
    def test_stop_words_removed(self):
        assert content_words("What is the speed of light?") == ["speed", "light"]

    def test_duplicates_removed(self):
        assert content_words("moon moon MOON") == ["moon"]


class TestExtractTerm:
    @pytest.mark.parametrize("text,term", [
        ("define curious", "curious"),
        ("Define 'serendipity'", "serendipity"),
        ("what is the algorithm?", "algorithm"),
        ("what does ephemeral mean?", "ephemeral"),
        ("synonyms for happy", "happy"),
        ("how do you pronounce friend", "friend"),
        ("tell me about the Moon", "moon"),
        ("what is the capital of France", "capital of france"),
    ])
    def test_terms(self, text, term):
        assert extract_term(text) == term

    @pytest.mark.parametrize("text", [
        "what's my name",
        "what is 2+2",
        "what is 42",
        "hello",
        "who are you",
        None,
    ])
    def test_no_term(self, text):
        assert extract_term(text) is None


class TestArithmeticPathway:
    def test_solved_calculation_is_proposed(self):
        result = run_arithmetic("3×3+3")
        (event,) = result.proposals
        assert event.kind == CALCULATION
        assert event.key == "3×3+3"
        assert event.value == 12
        assert event.collection == config.MATHEMATICS

    def test_nothing_proposed_without_answer(self):
        assert run_arithmetic("10/0").proposals == []
        assert run_arithmetic("hello").proposals == []


class TestVocabularyFactsPathway:
    def test_seed_vocabulary(self, pathway, dictionary):
        result = pathway.run("define happy")
        assert result.pathway == FACTUAL
        assert result.confidence == config.SEED_VOCABULARY_CONFIDENCE
        assert result.data["kind"] == config.VOCABULARY
        assert result.data["text"].startswith("Feeling or showing pleasure")
        assert proposal_kinds(result) == [USAGE]
        assert dictionary.calls == []

    def test_seed_fact(self, pathway):
        result = pathway.run("what is photosynthesis")
        assert result.confidence == config.SEED_FACT_CONFIDENCE
        assert result.data["kind"] == config.FACTS

    def test_multi_word_term_is_ranked(self, pathway):
        result = pathway.run("what is the largest ocean on earth")
        assert result.data["key"] == "largest ocean"
        assert result.confidence == config.SEED_FACT_CONFIDENCE

    def test_ranking_without_a_term(self, pathway):
        result = pathway.run("tell me something about gravity")
        assert result.data["key"] == "gravity"

    def test_learned_tier(self, pathway, seeded_store, dictionary):
        seeded_store.put(FactEntry("mars", "Mars is the fourth planet from the Sun",
                                   source=config.SOURCE_LEARNED, confidence=0.85))
        result = pathway.run("what is mars")
        assert result.confidence == config.LEARNED_FACT_CONFIDENCE
        assert result.data["source"] == config.SOURCE_LEARNED
        assert dictionary.calls == []

    def test_dictionary_lookup(self, pathway, dictionary):
        result = pathway.run("what is algorithm")
        assert result.confidence == pytest.approx(0.8)
        assert result.data["source"] == config.SOURCE_ONLINE
        assert result.data["text"].startswith("A finite sequence")
        assert proposal_kinds(result) == [DEFINITION, USAGE]
        assert result.proposals[0].source == config.SOURCE_ONLINE
        assert dictionary.calls == ["algorithm"]

    def test_encyclopedia_lookup(self, pathway, dictionary, encyclopedia):
        result = pathway.run("tell me about quantum computing")
        assert result.confidence == config.ONLINE_CONFIDENCE
        assert result.data["kind"] == config.FACTS
        assert result.data["details"]["related_topics"] == ["Quantum", "Google"]
        assert proposal_kinds(result) == [FACT]
        assert encyclopedia.calls == ["quantum computing"]
        assert dictionary.calls == []

    def test_total_miss(self, pathway, dictionary, encyclopedia):
        result = pathway.run("what is zzyzx")
        assert result.confidence == config.FACTUAL_MISS_CONFIDENCE
        assert result.data is None
        assert dictionary.calls == ["zzyzx"]
        assert encyclopedia.calls == ["zzyzx"]

    def test_offline_miss(self, seeded_store):
        result = VocabularyFactsPathway(seeded_store).run("what is zzyzx")
        assert result.confidence == config.FACTUAL_MISS_CONFIDENCE
        assert result.data is None

    def test_arithmetic_question_is_not_a_fact(self, pathway, dictionary):
        result = pathway.run("what is 2+2")
        assert result.data is None
        assert dictionary.calls == []

    def test_thesaurus_from_seed_details(self, pathway, dictionary):
        result = pathway.run("synonyms for happy")
        assert "joyful" in result.data["details"]["synonyms"]
        assert proposal_kinds(result) == [ENRICHMENT, USAGE]
        assert dictionary.calls == []

    def test_grammar_enrichment(self, pathway):
        result = pathway.run("what is the plural of friend")
        assert result.data["details"]["grammar"] == {"plural": "friends"}


class TestRecall:
    def test_empty_store(self):
        result = recall("what do you remember about me", [])
        assert result.pathway == PERSONAL
        assert result.confidence == pytest.approx(0.3)
        assert result.data is None

    def test_acknowledges_just_learned(self):
        result = recall("my name is Jordan", [PersonalEntry("name", "Jordan")], just_learned=["name"])
        assert result.confidence == config.PERSONAL_MATCH_CONFIDENCE
        assert result.data == {"facts": [("name", "Jordan")], "acknowledged": True}

    def test_matched_facts_come_first(self):
        entries = [PersonalEntry("location", "Oslo"), PersonalEntry("name", "Sam")]
        result = recall("what is my name", entries)
        assert result.confidence >= 0.9
        assert result.data["facts"] == [("name", "Sam"), ("location", "Oslo")]
        assert result.data["acknowledged"] is False

    def test_unmatched_lists_everything(self):
        entries = [PersonalEntry("location", "Oslo"), PersonalEntry("name", "Sam")]
        result = recall("what do you know about me", entries)
        assert result.confidence == config.PERSONAL_UNMATCHED_CONFIDENCE
        assert len(result.data["facts"]) == 2


class TestConverse:
    @pytest.mark.parametrize("text,kind", [
        ("hello", "greet"),
        ("Good morning!", "greet"),
        ("bye", "bye"),
        ("thanks a lot", "thanks"),
        ("who are you?", "about"),
        ("can you help me", "help"),
        ("the weather is nice", GENERIC),
    ])
    def test_small_talk(self, text, kind):
        result = converse(text)
        assert result.pathway == CONVERSATIONAL
        assert result.confidence == config.CONVERSATIONAL_CONFIDENCE
        assert result.data == {"kind": kind, "reply": SMALL_TALK[kind]}
