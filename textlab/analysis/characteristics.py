"""
Text profiling for strategy selection.

profile_text() derives the TextCharacteristics the StrategySelector works
from: length, language tag, a guessed domain, a complexity score and a
coarse structure tag.
"""

import re

from textlab.analysis.text_stats import compute_text_stats, split_words
from textlab.strategy.models import TextCharacteristics

# Keyword sets used to guess a domain when the caller does not supply one.
# A domain wins when at least DOMAIN_MIN_HITS of its keywords appear.
DOMAIN_KEYWORDS = {
    "technical": {
        "algorithm", "api", "database", "function", "server", "software",
        "compile", "runtime", "protocol", "latency", "thread", "kernel",
    },
    "academic": {
        "hypothesis", "methodology", "study", "analysis", "findings", "research",
        "literature", "theoretical", "empirical", "abstract", "journal",
    },
    "legal": {
        "plaintiff", "defendant", "court", "statute", "pursuant", "hereby",
        "contract", "liability", "jurisdiction", "counsel",
    },
    "medical": {
        "patient", "diagnosis", "treatment", "clinical", "symptoms", "dosage",
        "therapy", "chronic", "physician",
    },
    "social-media": {
        "lol", "omg", "follow", "retweet", "like", "share", "dm", "repost",
    },
}
DOMAIN_MIN_HITS = 2

_HASHTAG_OR_MENTION = re.compile(r'(?:^|\s)[#@]\w+')
_LIST_LINE = re.compile(r'^\s*(?:[-*•]|\d+[.)])\s+', re.MULTILINE)

# Normalizers for the complexity score
_SYLLABLE_FLOOR = 1.0
_SYLLABLE_SPAN = 1.5      # 1.0 -> 0, 2.5+ -> 1 syllables per word
_SENTENCE_SPAN = 40.0     # 0 -> 0, 40+ -> 1 words per sentence


def guess_domain(text: str) -> str:
    """Best-matching domain tag, or "general"."""
    words = {w.lower() for w in split_words(text)}
    if len(_HASHTAG_OR_MENTION.findall(text)) >= DOMAIN_MIN_HITS:
        return "social-media"

    best_domain, best_hits = "general", 0
    for domain, keywords in DOMAIN_KEYWORDS.items():
        hits = len(words & keywords)
        if hits >= DOMAIN_MIN_HITS and hits > best_hits:
            best_domain, best_hits = domain, hits
    return best_domain


def estimate_complexity(text: str) -> float:
    """
    Complexity in [0, 1].

    Average of normalized syllables-per-word, words-per-sentence and
    complex-word ratio. Empty text scores 0.
    """
    stats = compute_text_stats(text)
    if stats.words == 0:
        return 0.0
    syllable_part = (stats.avg_syllables_per_word - _SYLLABLE_FLOOR) / _SYLLABLE_SPAN
    sentence_part = stats.avg_words_per_sentence / _SENTENCE_SPAN
    complex_part = stats.complex_word_ratio
    score = (syllable_part + sentence_part + complex_part) / 3
    return max(0.0, min(1.0, score))


def detect_structure(text: str) -> str:
    stripped = text.strip()
    if not stripped:
        return "empty"
    lines = [line for line in stripped.splitlines() if line.strip()]
    if lines and len(_LIST_LINE.findall(stripped)) >= max(2, len(lines) // 2):
        return "list"
    if re.search(r'\n\s*\n', stripped):
        return "multi-paragraph"
    if re.search(r'[.!?]', stripped):
        return "paragraph"
    return "fragment"


def profile_text(text: str, language: str = "en", domain: str | None = None) -> TextCharacteristics:
    """
    Build TextCharacteristics for a text.

    Args:
        text: Input text
        language: Language tag to attach (not detected)
        domain: Known domain; guessed from keywords when None

    Returns:
        TextCharacteristics
    """
    return TextCharacteristics(
        length=len(text),
        language=language,
        domain=domain if domain is not None else guess_domain(text),
        complexity=estimate_complexity(text),
        structure=detect_structure(text),
    )
