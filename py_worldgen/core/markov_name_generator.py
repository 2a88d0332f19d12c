"""Syllable Markov chain name generator.

Territory names are built by walking a chain of syllables learned from a list
of sample names. Draws come from an Alea PRNG so a seeded run always produces
the same names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .alea_prng import AleaPRNG

VOWELS = set("aeiouy")

# Sample names used when no other base is supplied
DEFAULT_NAME_BASE = [
    "Aldoria", "Balmora", "Caldera", "Dravenn", "Elmaris", "Ferengal",
    "Galdur", "Harrow", "Istrad", "Jorvale", "Kaldris", "Lorvenia",
    "Marenth", "Norvik", "Orlane", "Pellamar", "Quessia", "Rhovan",
    "Sarvenna", "Tolmark", "Ulstrom", "Valdessa", "Westmere", "Yarrowen",
    "Zandor", "Amberly", "Brennach", "Corvalis", "Dunmore", "Estovar",
]

# Start-of-name key and end-of-name marker
_BOUNDARY = ""


@dataclass
class MarkovChain:
    """Transition table: syllable -> syllables that may follow it."""

    data: Dict[str, List[str]]

    @classmethod
    def from_names(cls, names: List[str]) -> MarkovChain:
        chain: Dict[str, List[str]] = {}
        for name in names:
            syllables = cls.split_syllables(name.lower())
            if not syllables:
                continue
            prev = _BOUNDARY
            for syllable in syllables:
                chain.setdefault(prev, []).append(syllable)
                prev = syllable
            chain.setdefault(prev, []).append(_BOUNDARY)
        return cls(data=chain)

    @staticmethod
    def split_syllables(name: str) -> List[str]:
        """
        Split a name after each vowel run.

        Consonants following the last vowel run stay with the final syllable.
        """
        syllables: List[str] = []
        current = ""
        for i, char in enumerate(name):
            current += char
            next_char = name[i + 1] if i + 1 < len(name) else ""
            if char in VOWELS and next_char not in VOWELS:
                syllables.append(current)
                current = ""
        if current:
            if syllables:
                syllables[-1] += current
            else:
                syllables.append(current)
        return syllables


class MarkovNameGenerator:
    """Generates names from a Markov chain."""

    def __init__(self, prng: Optional[AleaPRNG] = None):
        self.prng = prng or AleaPRNG("names")

    def build_chain(self, names: List[str]) -> MarkovChain:
        return MarkovChain.from_names(names)

    def generate(
        self,
        chain: MarkovChain,
        min_length: int = 4,
        max_length: int = 10,
        max_attempts: int = 20,
    ) -> Optional[str]:
        """
        Generate one name between ``min_length`` and ``max_length`` letters.

        Returns:
            The name, or None if the chain is empty or every attempt failed
        """
        if _BOUNDARY not in chain.data:
            return None
        for _ in range(max_attempts):
            name = self._walk(chain, max_length)
            name = self._tidy(name)
            if min_length <= len(name) <= max_length:
                return name
        return None

    def _walk(self, chain: MarkovChain, max_length: int) -> str:
        result = ""
        current = _BOUNDARY
        while True:
            options = chain.data.get(current)
            if not options:
                break
            syllable = self.prng.choice(options)
            if syllable == _BOUNDARY:
                break
            if len(result) + len(syllable) > max_length:
                break
            result += syllable
            current = syllable
        return result

    @staticmethod
    def _tidy(name: str) -> str:
        """Drop tripled letters and capitalize."""
        letters: List[str] = []
        for char in name:
            if len(letters) >= 2 and letters[-1] == letters[-2] == char:
                continue
            letters.append(char)
        return "".join(letters).capitalize()
