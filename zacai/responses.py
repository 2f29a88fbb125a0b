"""Response generation: turns a synthesis into the text the user sees"""

import logging
from typing import Dict, List, NamedTuple

from . import config
from .arithmetic import format_number
from .enrichment import DEFINITION, GRAMMAR, PHONETICS, THESAURUS
from .pathways import GENERIC
from .router import CONVERSATIONAL, FACTUAL, MATHEMATICAL, PERSONAL
from .synthesis import Synthesis

logger = logging.getLogger(__name__)

NO_INFORMATION = "I don't have specific information about that, but I'd be happy to help with what I know!"
NO_MEMORIES = "I don't have any stored memories yet. Tell me something about yourself!"
GENERIC_REPLY = "I understand. What would you like to talk about?"

_GRAMMAR_LABELS = {
    "plural": "plural",
    "past_tense": "past tense",
    "present_participle": "present participle",
    "comparative": "comparative",
}


class Rendered(NamedTuple):
    text: str
    confidence: float


def _format_answer(value) -> str:
    return format_number(value) if isinstance(value, float) else str(value)


# ── Per-pathway renderers ─────────────────────────────────────────────────────

def _render_mathematical(data: Dict) -> str:
    if not data:
        return NO_INFORMATION
    text = f"the answer is {_format_answer(data['answer'])}"
    steps = data.get("steps") or []
    if steps:
        text += ". Here's how I solved it: " + " → ".join(steps)
    return text


def _render_enrichments(data: Dict) -> List[str]:
    details = data.get("details") or {}
    hints = data.get("hints") or []
    lines = []

    if THESAURUS in hints:
        synonyms = details.get("synonyms") or []
        antonyms = details.get("antonyms") or []
        if synonyms:
            lines.append(f"Synonyms: {', '.join(synonyms[:5])}")
        if antonyms:
            lines.append(f"Antonyms: {', '.join(antonyms[:5])}")
        if not synonyms and not antonyms:
            lines.append("I don't know any synonyms for it yet.")

    if PHONETICS in hints:
        if details.get("phonetic"):
            lines.append(f"Pronunciation: {details['phonetic']}")
        else:
            lines.append("I don't have a pronunciation for it yet.")

    if GRAMMAR in hints and details.get("grammar"):
        forms = ", ".join(
            f"{_GRAMMAR_LABELS.get(name, name)}: {form}"
            for name, form in details["grammar"].items()
        )
        lines.append(f"Grammar forms: {forms}")

    return lines


def _render_factual(data: Dict) -> str:
    if not data or not data.get("text"):
        return NO_INFORMATION
    details = data.get("details") or {}

    if data.get("kind") == config.VOCABULARY:
        pos = details.get("part_of_speech")
        head = f"{data['key']} ({pos})" if pos and pos != "unknown" else data["key"]
        lines = [f"{head}: {data['text']}"]
        examples = details.get("examples") or []
        if examples and set(data.get("hints") or ()) <= {DEFINITION}:
            lines.append(f"Example: \"{examples[0]}\"")
    else:
        lines = [str(data["text"])]
        related = details.get("related_topics") or []
        if related:
            lines.append(f"Related topics: {', '.join(related)}")

    lines.extend(_render_enrichments(data))
    return "\n".join(lines)


def _render_personal(data) -> str:
    if not data or not data.get("facts"):
        return NO_MEMORIES
    facts = data["facts"][:config.MAX_PERSONAL_FACTS_SHOWN]
    if data.get("acknowledged"):
        learned = dict(facts)
        if "name" in learned:
            return f"Nice to meet you, {learned['name']}! I'll remember that."
        return "Got it, I'll remember that " + ", ".join(
            f"you like {value}" if key.startswith("interest_") else f"your {key} is {value}"
            for key, value in facts
        ) + "."
    return "I remember: " + ", ".join(f"{key}: {value}" for key, value in facts)


def _render_conversational(data) -> str:
    if not data or data.get("kind", GENERIC) == GENERIC:
        return GENERIC_REPLY
    return data["reply"]


_RENDERERS = {
    MATHEMATICAL: _render_mathematical,
    FACTUAL: _render_factual,
    PERSONAL: _render_personal,
    CONVERSATIONAL: _render_conversational,
}


def render(synthesis: Synthesis) -> Rendered:
    """
    Build the reply text. The confidence is passed through unchanged.

    A known user name is prefixed, except on acknowledgements, which
    already greet the user.
    """
    renderer = _RENDERERS.get(synthesis.pathway, _render_conversational)
    text = renderer(synthesis.data)

    acknowledged = isinstance(synthesis.data, dict) and synthesis.data.get("acknowledged")
    if synthesis.user_name and not acknowledged:
        text = f"{synthesis.user_name}, {text}"
    elif text.startswith("the answer"):
        text = "T" + text[1:]

    return Rendered(text, synthesis.confidence)


# ── CLI helpers ───────────────────────────────────────────────────────────────

def generate_greeting() -> str:
    return "Hello! I'm ZacAI.\nAsk me a question, give me a sum, or tell me about yourself!"


def format_trace(trace) -> str:
    return "\n".join(f"  {i}. {step}" for i, step in enumerate(trace, 1))


def format_stats_response(stats: Dict) -> str:
    lines = ["ZacAI Statistics\n" + "─" * 40]

    if "knowledge" in stats:
        kb = stats["knowledge"]
        lines.append("\nKnowledge")
        lines.append(f"  Entries    : {kb.get('total_entries', 0)}")
        lines.append(f"  Learned    : {kb.get('learned_entries', 0)}")
        for collection in config.COLLECTIONS:
            counts = kb.get(collection) or {}
            lines.append(
                f"  {collection.capitalize():<11}: {counts.get('total', 0)} "
                f"(seed {counts.get(config.SOURCE_SEED, 0)}, "
                f"learned {counts.get(config.SOURCE_LEARNED, 0)}, "
                f"online {counts.get(config.SOURCE_ONLINE, 0)})"
            )

    if "conversation" in stats:
        conv = stats["conversation"]
        lines.append("\nConversation")
        lines.append(f"  Turns      : {conv.get('total_turns', 0)}")
        lines.append(f"  Avg. conf. : {conv.get('average_confidence', 0):.0%}")
        lines.append(f"  Feedback   : +{conv.get('helpful', 0)} / -{conv.get('unhelpful', 0)}")
        started = conv.get('session_start', '')
        if started:
            lines.append(f"  Started    : {started[:19]}")

    return "\n".join(lines)
