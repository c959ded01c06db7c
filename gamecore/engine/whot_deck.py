"""
Game Core - Whot Cards and Deck

Card identity, the per-suit number table and deck generation/shuffling.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class Suit(Enum):
    """Card shapes; WHOT marks the wild cards."""
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    CROSS = "cross"
    SQUARE = "square"
    STAR = "star"
    WHOT = "whot"


class RuleVersion(Enum):
    """Rule variants of the card game."""
    RULE1 = "rule1"
    RULE2 = "rule2"


WHOT_NUMBER = 20

# Numbers printed on each shape
SUIT_NUMBERS: dict[Suit, tuple[int, ...]] = {
    Suit.CIRCLE: (1, 2, 3, 4, 5, 7, 8, 10, 11, 12, 13, 14),
    Suit.TRIANGLE: (1, 2, 3, 4, 5, 7, 8, 10, 11, 12, 13, 14),
    Suit.CROSS: (1, 2, 3, 5, 7, 10, 11, 13, 14),
    Suit.SQUARE: (1, 2, 3, 5, 7, 10, 11, 13, 14),
    Suit.STAR: (1, 2, 3, 4, 5, 7, 8),
}

# Whot cards per rule version
WHOT_CARD_COUNTS: dict[RuleVersion, int] = {
    RuleVersion.RULE1: 5,
    RuleVersion.RULE2: 0,
}

# Card numbers that carry an effect in at least one rule version
SPECIAL_NUMBERS = frozenset({1, 2, 5, 8, 14, WHOT_NUMBER})


@dataclass(frozen=True)
class Card:
    """
    A single Whot card.

    Attributes:
        id: Unique identifier within a deck, e.g. "star-7" or "whot-3"
        suit: Card shape
        number: Face number (always 20 for whot cards)
    """
    id: str
    suit: Suit
    number: int

    def __post_init__(self) -> None:
        if self.suit == Suit.WHOT and self.number != WHOT_NUMBER:
            raise ValueError(f"Whot cards carry number {WHOT_NUMBER}, got {self.number}")

    @property
    def is_whot(self) -> bool:
        return self.suit == Suit.WHOT

    @property
    def is_special(self) -> bool:
        return self.number in SPECIAL_NUMBERS

    def __str__(self) -> str:
        if self.is_whot:
            return "Whot"
        return f"{self.suit.value.title()} {self.number}"


def generate_deck(rule_version: RuleVersion | str = RuleVersion.RULE1) -> list[Card]:
    """
    Build the unshuffled deck for a rule version.

    Args:
        rule_version: RULE1 (with whot cards) or RULE2 (without)

    Returns:
        List of cards, suits in table order followed by the whot cards

    Raises:
        ValueError: If the rule version is unknown
    """
    rule_version = RuleVersion(rule_version)

    deck = [
        Card(id=f"{suit.value}-{number}", suit=suit, number=number)
        for suit, numbers in SUIT_NUMBERS.items()
        for number in numbers
    ]
    deck.extend(
        Card(id=f"whot-{i}", suit=Suit.WHOT, number=WHOT_NUMBER)
        for i in range(1, WHOT_CARD_COUNTS[rule_version] + 1)
    )
    return deck


def shuffle_deck(deck: Sequence[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a shuffled copy of the deck."""
    cards = list(deck)
    (rng or random).shuffle(cards)
    return cards
