"""
Shared text statistics used by the analysis functions.
"""

import re
from dataclasses import dataclass

_SENTENCE_SPLIT = re.compile(r'(?<=[.!?])\s+')
_WORD_STRIP = ".,!?;:\"'()[]{}"
_VOWELS = "aeiouy"


def split_sentences(text: str) -> list[str]:
    """Split text on sentence-ending punctuation followed by whitespace."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(text.strip()) if s.strip()]


def split_words(text: str) -> list[str]:
    """Whitespace-separated words with surrounding punctuation removed."""
    words = (w.strip(_WORD_STRIP) for w in text.split())
    return [w for w in words if w]


def count_syllables(word: str) -> int:
    """
    Estimate syllables by counting vowel groups.

    A trailing silent 'e' is dropped (except in "-le" endings) and every
    non-empty word has at least one syllable.
    """
    word = word.lower().strip(_WORD_STRIP)
    if not word:
        return 0
    if len(word) <= 2:
        return 1

    count = 0
    previous_was_vowel = False
    for char in word:
        is_vowel = char in _VOWELS
        if is_vowel and not previous_was_vowel:
            count += 1
        previous_was_vowel = is_vowel

    if word.endswith("e") and not word.endswith("le") and count > 1:
        count -= 1

    return max(count, 1)


@dataclass(frozen=True)
class TextStats:
    """Counts behind the readability formulas."""
    words: int
    sentences: int
    syllables: int
    characters: int
    complex_words: int

    @property
    def avg_words_per_sentence(self) -> float:
        return self.words / max(self.sentences, 1)

    @property
    def avg_syllables_per_word(self) -> float:
        return self.syllables / max(self.words, 1)

    @property
    def avg_chars_per_word(self) -> float:
        return self.characters / max(self.words, 1)

    @property
    def complex_word_ratio(self) -> float:
        return self.complex_words / max(self.words, 1)


def compute_text_stats(text: str) -> TextStats:
    words = split_words(text)
    syllable_counts = [count_syllables(w) for w in words]
    return TextStats(
        words=len(words),
        sentences=len(split_sentences(text)),
        syllables=sum(syllable_counts),
        characters=sum(len(w) for w in words),
        complex_words=sum(1 for s in syllable_counts if s >= 3),
    )
