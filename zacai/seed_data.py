"""Curated seed knowledge: shipped with ZacAI and trusted above anything learned"""

from typing import Dict, List

from . import config

# ═══════════════════════════════════════════════════════════════════════════════
# § 1  VOCABULARY
# ═══════════════════════════════════════════════════════════════════════════════

_VOCABULARY = {
    'happy': {
        'definition': "Feeling or showing pleasure or contentment.",
        'category': 'essential',
        'part_of_speech': 'adjective',
        'phonetic': '/ˈhæpi/',
        'examples': ["She was happy to see her friends again."],
        'synonyms': ['joyful', 'cheerful', 'glad', 'content'],
        'antonyms': ['sad', 'unhappy'],
    },
    'learn': {
        'definition': "To gain knowledge or skill by studying, practising, being taught, or experiencing something.",
        'category': 'essential',
        'part_of_speech': 'verb',
        'phonetic': '/lɜːn/',
        'examples': ["Children learn to speak by listening."],
        'synonyms': ['study', 'master', 'acquire'],
        'antonyms': ['forget'],
    },
    'curious': {
        'definition': "Eager to know or learn something.",
        'category': 'essential',
        'part_of_speech': 'adjective',
        'phonetic': '/ˈkjʊəriəs/',
        'examples': ["A curious child asks a lot of questions."],
        'synonyms': ['inquisitive', 'interested'],
        'antonyms': ['indifferent'],
    },
    'technology': {
        'definition': "The application of scientific knowledge for practical purposes, especially in industry.",
        'category': 'science',
        'part_of_speech': 'noun',
        'phonetic': '/tekˈnɒlədʒi/',
        'examples': ["Technology has transformed how we communicate."],
        'synonyms': ['innovation', 'engineering'],
        'antonyms': [],
    },
    'science': {
        'definition': "The systematic study of the structure and behaviour of the physical and natural world through observation and experiment.",
        'category': 'science',
        'part_of_speech': 'noun',
        'phonetic': '/ˈsaɪəns/',
        'examples': ["Science helps us understand the universe."],
        'synonyms': ['knowledge', 'discipline'],
        'antonyms': [],
    },
    'friend': {
        'definition': "A person whom one knows and with whom one has a bond of mutual affection.",
        'category': 'essential',
        'part_of_speech': 'noun',
        'phonetic': '/frɛnd/',
        'examples': ["He is my best friend."],
        'synonyms': ['companion', 'pal', 'ally'],
        'antonyms': ['enemy', 'stranger'],
    },
    'quick': {
        'definition': "Moving fast or doing something in a short time.",
        'category': 'essential',
        'part_of_speech': 'adjective',
        'phonetic': '/kwɪk/',
        'examples': ["She took a quick look around the room."],
        'synonyms': ['fast', 'rapid', 'swift'],
        'antonyms': ['slow'],
    },
    'remember': {
        'definition': "To have in or be able to bring to one's mind an awareness of someone or something from the past.",
        'category': 'essential',
        'part_of_speech': 'verb',
        'phonetic': '/rɪˈmɛmbə/',
        'examples': ["I remember the day we met."],
        'synonyms': ['recall', 'recollect'],
        'antonyms': ['forget'],
    },
}

# ═══════════════════════════════════════════════════════════════════════════════
# § 2  MATHEMATICS
# ═══════════════════════════════════════════════════════════════════════════════

_MATHEMATICS = {
    'pi': (
        "Pi (π) is the ratio of a circle's circumference to its diameter, "
        "approximately 3.14159. It is an irrational number.", 'constants'),
    'prime number': (
        "A prime number is a whole number greater than 1 whose only divisors are "
        "1 and itself, such as 2, 3, 5, 7 and 11.", 'number theory'),
    'pythagorean theorem': (
        "In a right triangle, the square of the hypotenuse equals the sum of the "
        "squares of the other two sides: a² + b² = c².", 'geometry'),
    'order of operations': (
        "Multiplication and division are done before addition and subtraction, "
        "working left to right; brackets come first of all.", 'arithmetic'),
    'fraction': (
        "A fraction represents a part of a whole, written as a numerator over a "
        "denominator, such as 3/4.", 'arithmetic'),
    'percentage': (
        "A percentage is a number expressed as a fraction of 100. 25% of 80 is 20.", 'arithmetic'),
}

# ═══════════════════════════════════════════════════════════════════════════════
# § 3  FACTS
# ═══════════════════════════════════════════════════════════════════════════════

_FACTS = {
    'gravity': (
        "Gravity is a fundamental force that attracts objects with mass toward each "
        "other. On Earth it gives weight to physical objects.", 'science'),
    'photosynthesis': (
        "Photosynthesis is the process by which plants convert light energy, water "
        "and carbon dioxide into glucose and oxygen.", 'science'),
    'dna': (
        "DNA (deoxyribonucleic acid) is the molecule that carries genetic "
        "instructions for living organisms. It has a double helix structure.", 'science'),
    'speed of light': (
        "The speed of light in vacuum is about 299,792,458 metres per second.", 'science'),
    'sun': (
        "The Sun is the star at the centre of our solar system, a ball of hot plasma "
        "that provides light and heat to Earth.", 'astronomy'),
    'moon': (
        "The Moon is Earth's only natural satellite. It takes about 27.3 days to orbit Earth.", 'astronomy'),
    'earth': (
        "Earth is the third planet from the Sun and the only known planet to support life.", 'astronomy'),
    'water': (
        "Water (H2O) is made of two hydrogen atoms bonded to one oxygen atom. It boils "
        "at 100 degrees Celsius at sea level.", 'science'),
    'albert einstein': (
        "Albert Einstein (1879-1955) was a theoretical physicist who developed the "
        "theory of relativity.", 'history'),
    'world war 2': (
        "World War II was fought from 1939 to 1945 and was the deadliest conflict in "
        "human history.", 'history'),
    'capital of france': (
        "Paris is the capital of France.", 'geography'),
    'largest ocean': (
        "The Pacific Ocean is the largest ocean on Earth.", 'geography'),
    'tallest mountain': (
        "Mount Everest is the tallest mountain above sea level at 8,849 metres.", 'geography'),
    'internet': (
        "The Internet is a global network of computers that lets people share "
        "information and communicate.", 'technology'),
}


# ═══════════════════════════════════════════════════════════════════════════════
# § 4  PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════════

def get_seed_records() -> Dict[str, List[Dict]]:
    """
    Return the seed data as entry records grouped by collection,
    ready for ``KnowledgeStore.load_seed``.
    """
    vocabulary = []
    for word, data in _VOCABULARY.items():
        details = {k: v for k, v in data.items() if k not in ('definition', 'category')}
        vocabulary.append({
            'key': word,
            'value': data['definition'],
            'category': data['category'],
            'confidence': config.SEED_VOCABULARY_CONFIDENCE,
            'details': details,
        })

    mathematics = [
        {'key': key, 'value': text, 'category': category,
         'confidence': config.SEED_FACT_CONFIDENCE}
        for key, (text, category) in _MATHEMATICS.items()
    ]
    facts = [
        {'key': key, 'value': text, 'category': category,
         'confidence': config.SEED_FACT_CONFIDENCE}
        for key, (text, category) in _FACTS.items()
    ]

    return {
        config.VOCABULARY: vocabulary,
        config.MATHEMATICS: mathematics,
        config.FACTS: facts,
    }
