"""
Game Core Rule Engines.

Pure Python game logic with zero UI/network dependencies.
Handles sowing and captures (Ayo), dice and token races (Ludo), and
card play with stacked penalties and suit calls (Whot).
"""

from gamecore.engine.base import (
    DiceRoll,
    GameConfig,
    GameKind,
    InvalidMoveError,
    InvalidSuitCallError,
    PlayMode,
)
from gamecore.engine.ayo import AyoEngine, AyoState
from gamecore.engine.ludo import LudoEngine, LudoState, MoveAction, PlayerColor
from gamecore.engine.whot import WhotEngine
from gamecore.engine.whot_deck import Card, RuleVersion, Suit
from gamecore.engine.whot_state import WhotPlayer, WhotState

__all__ = [
    # Data Classes
    "AyoState",
    "Card",
    "DiceRoll",
    "GameConfig",
    "LudoState",
    "MoveAction",
    "WhotPlayer",
    "WhotState",
    # Enums
    "GameKind",
    "PlayMode",
    "PlayerColor",
    "RuleVersion",
    "Suit",
    # Errors
    "InvalidMoveError",
    "InvalidSuitCallError",
    # Engines
    "AyoEngine",
    "LudoEngine",
    "WhotEngine",
]
