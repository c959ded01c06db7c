"""
Game Core - Whot Game State

Immutable state of a card game plus the pending actions that describe what
the engine is waiting for before free play resumes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from gamecore.engine.whot_deck import Card, RuleVersion, Suit


class PendingActionType(Enum):
    """Tags of the pending actions, in their canonical (lowercase) form."""
    CONTINUE = "continue"
    DEFEND = "defend"
    DRAW = "draw"
    CALL_SUIT = "call_suit"


class NextAction(Enum):
    """What happens once a suit has been called."""
    PASS = "pass"
    CONTINUE = "continue"


@dataclass(frozen=True)
class ContinueAction:
    """The same player must play again (or draw) before the turn can pass."""
    player_index: int

    action_type: ClassVar[PendingActionType] = PendingActionType.CONTINUE


@dataclass(frozen=True)
class DefendAction:
    """
    The targeted player must answer a penalty card or draw.

    Attributes:
        player_index: The defender
        count: Cards to draw if the defender gives up
        return_turn_to: Player who gets the turn after the draw (the attacker)
    """
    player_index: int
    count: int
    return_turn_to: int

    action_type: ClassVar[PendingActionType] = PendingActionType.DEFEND


@dataclass(frozen=True)
class DrawAction:
    """
    The targeted player is drawing cards one at a time.

    Attributes:
        player_index: Player who draws
        count: Cards still to draw
        return_turn_to: Player who gets the turn once drawing stops
    """
    player_index: int
    count: int
    return_turn_to: int

    action_type: ClassVar[PendingActionType] = PendingActionType.DRAW


@dataclass(frozen=True)
class CallSuitAction:
    """A whot card was played and its player must name a suit."""
    player_index: int
    next_action: NextAction = NextAction.PASS

    action_type: ClassVar[PendingActionType] = PendingActionType.CALL_SUIT


PendingAction = Union[ContinueAction, DefendAction, DrawAction, CallSuitAction]


@dataclass(frozen=True)
class WhotPlayer:
    """A seat at the table."""
    id: str
    name: str
    hand: tuple[Card, ...] = ()


@dataclass(frozen=True)
class WhotState:
    """
    Complete state of a Whot game.

    Attributes:
        players: Seats in turn order
        market: Draw pile, drawn from the front
        pile: Played cards; the last one is the card to match
        current_player: Index of the player whose move it is
        direction: +1 or -1 turn order
        pending_pick: Stacked penalty cards waiting to be drawn
        called_suit: Suit named after a whot card
        pending_action: What the engine waits for, None in free play
        last_played_card: Card that opened the current special chain (rule1)
        rule_version: Which rule set applies
        must_play_normal: Special cards are off limits for the next play (rule2)
        winner: Index of the player who emptied their hand
    """
    players: tuple[WhotPlayer, ...]
    market: tuple[Card, ...]
    pile: tuple[Card, ...]
    current_player: int = 0
    direction: int = 1
    pending_pick: int = 0
    called_suit: Suit | None = None
    pending_action: PendingAction | None = None
    last_played_card: Card | None = None
    rule_version: RuleVersion = RuleVersion.RULE1
    must_play_normal: bool = False
    winner: int | None = None

    def __post_init__(self) -> None:
        if self.direction not in (1, -1):
            raise ValueError(f"Direction must be 1 or -1, got {self.direction}")
        if not self.pile:
            raise ValueError("Pile must hold at least one card")

    @property
    def top_card(self) -> Card:
        return self.pile[-1]

    def next_player_index(self, from_index: int, steps: int = 1) -> int:
        """Seat reached by moving `steps` places in the current direction."""
        count = len(self.players)
        return (from_index + self.direction * steps) % count
