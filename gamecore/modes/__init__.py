"""
Game Core Play Modes.

Stake and winner bookkeeping around the rule engines for battle and online play.
"""

from gamecore.modes.base import Side, is_eligible, side_of
from gamecore.modes.battle import BattleMode, BattleState
from gamecore.modes.online import OnlineMode, OnlineState

__all__ = [
    "BattleMode",
    "BattleState",
    "OnlineMode",
    "OnlineState",
    "Side",
    "is_eligible",
    "side_of",
]
