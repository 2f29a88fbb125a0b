"""Main ZacAI Agent - Orchestrates all components"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from . import config
from .classifier import classify
from .conversation import ConversationLog
from .knowledge import KnowledgeStore
from .learning import USAGE, LearnEvent, LearningManager, extract_personal_facts
from .lookup import DictionaryClient, EncyclopediaClient
from .pathways import VocabularyFactsPathway, converse, recall, run_arithmetic
from .reasoning import PathwayResult, ReasoningTrace
from .responses import generate_greeting, render
from .router import CONVERSATIONAL, FACTUAL, MATHEMATICAL, PERSONAL, PathwayRef, select_pathways
from .seed_data import get_seed_records
from .storage import JsonStorage
from .synthesis import synthesize

logger = logging.getLogger(__name__)


@dataclass
class AgentResponse:
    """What ``ZacAgent.submit`` hands back to the caller"""
    text: str
    confidence: float
    trace: Tuple[str, ...] = ()
    pathways: List[str] = field(default_factory=list)
    turn_id: Optional[str] = None
    source: str = CONVERSATIONAL


class ZacAgent:
    """
    Main agent: classify, route, run pathways, synthesize, render, learn.

    Decision chain in submit():
      1. Personal facts in the message are learned straight away
      2. Classify the input and pick the pathways to try
      3. Run every pathway in order (a failing pathway scores 0.1)
      4. Synthesize the best result and render the reply
      5. Apply the pathways' learn proposals and persist
      6. Log both turns
    """

    def __init__(self, storage=None, dictionary=None, encyclopedia=None,
                 offline: bool = False, data_dir=None):
        logger.info("Initializing ZacAI Agent...")

        if storage is None:
            storage = JsonStorage(Path(data_dir) if data_dir else None)
        self.storage = storage
        self.offline = offline
        if offline:
            dictionary = encyclopedia = None
        else:
            dictionary = dictionary or DictionaryClient()
            encyclopedia = encyclopedia or EncyclopediaClient()

        self.store = KnowledgeStore(storage)
        self.store.load_seed(get_seed_records())
        self.store.load()

        self.learning = LearningManager(self.store)
        self.conversation = ConversationLog()
        self.factual = VocabularyFactsPathway(self.store, dictionary, encyclopedia)

        # assistant turn id -> vocabulary key the reply was about
        self._turn_terms: Dict[str, str] = {}

        logger.info("ZacAI Agent initialized successfully")

    # ── Internal helpers ─────────────────────────────────────────────────────

    def _run_pathway(self, ref: PathwayRef, text: str, just_learned: List[str]) -> PathwayResult:
        try:
            if ref.kind == MATHEMATICAL:
                return run_arithmetic(text)
            if ref.kind == FACTUAL:
                return self.factual.run(text)
            if ref.kind == PERSONAL:
                return recall(text, self.store.entries(config.PERSONAL), just_learned)
            return converse(text)
        except Exception as e:
            logger.exception(f"{ref.name} pathway failed")
            return PathwayResult(ref.kind, config.PATHWAY_ERROR_CONFIDENCE, None,
                                 [f"{ref.name} pathway failed: {e}"])

    def _apply(self, events: List[LearnEvent]):
        for event in events:
            try:
                self.learning.learn(event)
            except Exception as e:
                logger.error(f"Failed to learn {event.kind} '{event.key}': {e}")

    # ── Public API ───────────────────────────────────────────────────────────

    def submit(self, text) -> AgentResponse:
        """Answer one message; always returns a plain-language reply"""
        if not isinstance(text, str):
            text = ""
        trace = ReasoningTrace()
        trace.add(f"Received input: \"{text}\"")

        personal_events = extract_personal_facts(text)
        if personal_events:
            self._apply(personal_events)
            trace.add(f"Learned personal facts: {', '.join(e.key for e in personal_events)}")
        just_learned = [e.key for e in personal_events]

        features = classify(text)
        trace.add(f"Classified as {features.type} (complexity {features.complexity:.1f})")
        pathways = select_pathways(features)
        trace.add(f"Routing to: {', '.join(ref.name for ref in pathways)}")

        results = []
        for ref in pathways:
            result = self._run_pathway(ref, text, just_learned)
            trace.extend(result.trace)
            trace.add(f"{ref.name} confidence: {result.confidence:.2f}")
            results.append(result)

        synthesis = synthesize(results, self.store.entries(config.PERSONAL))
        trace.extend(synthesis.trace)
        rendered = render(synthesis)

        proposals = [event for result in results for event in result.proposals]
        if proposals:
            self._apply(proposals)
            trace.add(f"Learning from {len(proposals)} proposal(s)")

        self.conversation.add_turn("user", text)
        turn = self.conversation.add_turn(
            "assistant",
            rendered.text,
            confidence=rendered.confidence,
            sources_used=[synthesis.pathway],
            trace=trace.steps,
        )
        data = synthesis.data
        if synthesis.pathway == FACTUAL and isinstance(data, dict) and data.get("kind") == config.VOCABULARY:
            self._turn_terms[turn.id] = data["key"]
        if len(self._turn_terms) > self.conversation.max_turns:
            live = {t.id for t in self.conversation}
            self._turn_terms = {k: v for k, v in self._turn_terms.items() if k in live}

        return AgentResponse(
            text=rendered.text,
            confidence=rendered.confidence,
            trace=trace.steps,
            pathways=[ref.kind for ref in pathways],
            turn_id=turn.id,
            source=synthesis.pathway,
        )

    def ask(self, text: str) -> str:
        """Shortcut for callers that only want the reply text"""
        return self.submit(text).text

    def record_feedback(self, turn_id: str, helpful: bool) -> bool:
        """Mark a reply as helpful or not; helpful vocabulary replies count towards mastery"""
        if not self.conversation.mark_feedback(turn_id, helpful):
            return False
        term = self._turn_terms.get(turn_id)
        if helpful and term:
            self._apply([LearnEvent(USAGE, term, value=True)])
        return True

    def export(self) -> Dict:
        return self.store.export()

    def import_document(self, document: Dict) -> int:
        """Merge an exported document; returns how many entries were merged"""
        touched = self.store.import_document(document)
        count = sum(len(document["collections"].get(name) or []) for name in touched)
        for name in touched:
            self.store.persist(name)
        logger.info(f"Imported {count} entries into {len(touched)} collection(s)")
        return count

    def get_statistics(self) -> Dict:
        return {
            "knowledge": self.store.get_statistics(),
            "conversation": self.conversation.get_summary(),
            "learning": {
                "events_applied": self.learning.events_applied,
                "persist_failures": self.learning.persist_failures,
            },
        }

    def clear_memory(self):
        """Forget everything learned; seed knowledge stays"""
        for collection in config.COLLECTIONS:
            self.store.remove_collection(collection)
        self.store.load_seed(get_seed_records())
        if self.storage is not None:
            self.storage.clear()
        self.conversation.clear()
        self._turn_terms.clear()

    def get_greeting(self) -> str:
        return generate_greeting()
