"""
Game Core - Mode Wrapper Basics

Seat perspective and stake eligibility shared by battle and online play.
"""

from enum import Enum

from gamecore.engine.validators import validate_stake


class Side(Enum):
    """Seat from the local user's point of view."""
    ME = "me"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.ME else Side.ME


def side_of(player_index: int, local_player: int = 0) -> Side:
    """Map an engine player index onto the local perspective."""
    return Side.ME if player_index == local_player else Side.OPPONENT


def is_eligible(balance: int, stake: int) -> bool:
    """Whether a balance can cover a stake."""
    validate_stake(stake)
    return balance >= stake
