"""
Game Core - Test Configuration and Fixtures

Common fixtures and state builders for all test modules.
"""

import random
from dataclasses import replace
from typing import Callable, Sequence

import pytest

from gamecore.config.settings import Settings
from gamecore.engine.ludo import LudoEngine, LudoState, PlayerColor
from gamecore.engine.whot_deck import Card, RuleVersion, Suit
from gamecore.engine.whot_state import WhotPlayer, WhotState


def make_card(suit: Suit, number: int, tag: str = "") -> Card:
    """Build a card; `tag` keeps ids unique when a test needs duplicates."""
    if suit == Suit.WHOT:
        return Card(id=f"whot-{tag or number}", suit=suit, number=20)
    return Card(id=f"{suit.value}-{number}{tag}", suit=suit, number=number)


# =============================================================================
# GENERIC
# =============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles and rolls."""
    return random.Random(1234)


@pytest.fixture
def settings() -> Settings:
    """Settings instance independent of the environment."""
    return Settings(
        _env_file=None,
        ayo_turn_seconds=30.0,
        battle_background_stake=50,
        online_stake=50,
    )


# =============================================================================
# WHOT
# =============================================================================

@pytest.fixture
def card() -> Callable[..., Card]:
    """Card factory."""
    return make_card


@pytest.fixture
def whot_state() -> Callable[..., WhotState]:
    """
    Build a hand-constructed Whot state.

    Args (of the returned builder):
        hands: One sequence of cards per player
        top: Card on top of the pile
        market: Cards in the market (defaults to three plain cards)
        **overrides: Any other WhotState field
    """
    def build(
        hands: Sequence[Sequence[Card]],
        top: Card,
        market: Sequence[Card] | None = None,
        **overrides,
    ) -> WhotState:
        if market is None:
            market = [
                make_card(Suit.STAR, 3, "m"),
                make_card(Suit.STAR, 4, "m"),
                make_card(Suit.STAR, 7, "m"),
            ]
        players = tuple(
            WhotPlayer(id=f"player-{i}", name=f"P{i}", hand=tuple(hand))
            for i, hand in enumerate(hands)
        )
        fields = {"rule_version": RuleVersion.RULE1}
        fields.update(overrides)
        return WhotState(players=players, market=tuple(market), pile=(top,), **fields)

    return build


# =============================================================================
# LUDO
# =============================================================================

@pytest.fixture
def ludo_state() -> Callable[..., LudoState]:
    """
    Build a Ludo state with chosen token positions.

    Args (of the returned builder):
        positions_a: Four positions for player 0 (default all in house)
        positions_b: Four positions for player 1 (default all in house)
        **overrides: Any other LudoState field
    """
    def build(
        positions_a: Sequence[int] | None = None,
        positions_b: Sequence[int] | None = None,
        color_a: PlayerColor = PlayerColor.RED,
        color_b: PlayerColor = PlayerColor.YELLOW,
        **overrides,
    ) -> LudoState:
        state = LudoEngine.initialize(color_a, color_b)
        players = list(state.players)
        for seat, positions in enumerate((positions_a, positions_b)):
            if positions is None:
                continue
            player = players[seat]
            players[seat] = replace(
                player,
                tokens=tuple(
                    replace(token, position=pos)
                    for token, pos in zip(player.tokens, positions)
                ),
            )
        return replace(state, players=(players[0], players[1]), **overrides)

    return build
