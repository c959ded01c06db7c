"""
Game Core - Snapshot Models

Pydantic models that mirror each engine state in a transport-safe form.
Payloads use camelCase keys; snake_case keys are accepted too. String enum
fields coming from a remote peer are normalized to their lowercase canonical
form here, once, before any engine sees them. Identifiers are kept verbatim.
Every value an engine state would refuse is refused here first, so a bad
payload always surfaces as a ValidationError.
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    model_validator,
)
from pydantic.alias_generators import to_camel

from gamecore.engine.ayo import AyoState
from gamecore.engine.ludo import (
    FINISH_POSITION,
    HOUSE_POSITION,
    LudoPlayer,
    LudoState,
    LudoToken,
    PlayerColor,
)
from gamecore.engine.whot_deck import WHOT_NUMBER, Card, RuleVersion, Suit
from gamecore.engine.whot_state import (
    CallSuitAction,
    ContinueAction,
    DefendAction,
    DrawAction,
    NextAction,
    PendingAction,
    PendingActionType,
    WhotPlayer,
    WhotState,
)


def _lower(value: Any) -> Any:
    """Lowercase (and trim) strings; pass anything else through."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


DieValue = Annotated[int, Field(ge=1, le=6)]
CanonicalSuit = Annotated[Suit, BeforeValidator(_lower)]


class SnapshotModel(BaseModel):
    """Base for all snapshot models."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    def to_payload(self) -> dict[str, Any]:
        """Dump to a JSON-safe dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# AYO
# =============================================================================

class AyoSnapshot(SnapshotModel):
    """Mirrors AyoState."""

    pits: list[NonNegativeInt] = Field(min_length=12, max_length=12)
    scores: list[NonNegativeInt] = Field(min_length=2, max_length=2)
    current_player: int = Field(ge=0, le=1)
    is_game_over: bool = False
    timers: list[NonNegativeFloat] = Field(min_length=2, max_length=2)
    timer_running: int | None = Field(default=None, ge=0, le=1)

    @classmethod
    def from_state(cls, state: AyoState) -> "AyoSnapshot":
        return cls(
            pits=list(state.pits),
            scores=list(state.scores),
            current_player=state.current_player,
            is_game_over=state.is_game_over,
            timers=list(state.timers),
            timer_running=state.timer_running,
        )

    def to_state(self) -> AyoState:
        return AyoState(
            pits=tuple(self.pits),
            scores=(self.scores[0], self.scores[1]),
            current_player=self.current_player,
            is_game_over=self.is_game_over,
            timers=(self.timers[0], self.timers[1]),
            timer_running=self.timer_running,
        )


# =============================================================================
# LUDO
# =============================================================================

class LudoTokenModel(SnapshotModel):
    """Mirrors LudoToken."""

    id: str
    position: int = Field(ge=HOUSE_POSITION, le=FINISH_POSITION)


class LudoPlayerModel(SnapshotModel):
    """Mirrors LudoPlayer."""

    id: str
    color: Annotated[PlayerColor, BeforeValidator(_lower)]
    tokens: list[LudoTokenModel] = Field(min_length=4, max_length=4)


class LudoSnapshot(SnapshotModel):
    """Mirrors LudoState."""

    players: list[LudoPlayerModel] = Field(min_length=2, max_length=2)
    current_player_index: int = Field(ge=0, le=1)
    dice: list[DieValue] = Field(default_factory=list, max_length=2)
    dice_used: list[bool] = Field(default_factory=list, max_length=2)
    waiting_for_roll: bool = True
    winner: str | None = None
    log: list[str] = Field(default_factory=list)
    capture_enabled: bool = False

    @model_validator(mode="after")
    def check_dice_aligned(self) -> "LudoSnapshot":
        if len(self.dice) != len(self.dice_used):
            raise ValueError("dice and diceUsed must have the same length")
        return self

    @classmethod
    def from_state(cls, state: LudoState) -> "LudoSnapshot":
        return cls(
            players=[
                LudoPlayerModel(
                    id=p.id,
                    color=p.color,
                    tokens=[LudoTokenModel(id=t.id, position=t.position) for t in p.tokens],
                )
                for p in state.players
            ],
            current_player_index=state.current_player_index,
            dice=list(state.dice),
            dice_used=list(state.dice_used),
            waiting_for_roll=state.waiting_for_roll,
            winner=state.winner,
            log=list(state.log),
            capture_enabled=state.capture_enabled,
        )

    def to_state(self) -> LudoState:
        players = tuple(
            LudoPlayer(
                id=p.id,
                color=p.color,
                tokens=tuple(LudoToken(id=t.id, position=t.position) for t in p.tokens),
            )
            for p in self.players
        )
        return LudoState(
            players=(players[0], players[1]),
            current_player_index=self.current_player_index,
            dice=tuple(self.dice),
            dice_used=tuple(self.dice_used),
            waiting_for_roll=self.waiting_for_roll,
            winner=self.winner,
            log=tuple(self.log),
            capture_enabled=self.capture_enabled,
        )


# =============================================================================
# WHOT
# =============================================================================

class CardModel(SnapshotModel):
    """Mirrors Card."""

    id: str
    suit: CanonicalSuit
    number: int = Field(ge=1, le=WHOT_NUMBER)

    @model_validator(mode="after")
    def check_whot_number(self) -> "CardModel":
        if self.suit == Suit.WHOT and self.number != WHOT_NUMBER:
            raise ValueError(f"Whot cards carry number {WHOT_NUMBER}, got {self.number}")
        return self

    @classmethod
    def from_card(cls, card: Card) -> "CardModel":
        return cls(id=card.id, suit=card.suit, number=card.number)

    def to_card(self) -> Card:
        return Card(id=self.id, suit=self.suit, number=self.number)


class PendingActionModel(SnapshotModel):
    """Flattened, tagged form of every pending action."""

    type: Annotated[PendingActionType, BeforeValidator(_lower)]
    player_index: int = Field(ge=0)
    count: int | None = Field(default=None, ge=0)
    return_turn_to: int | None = Field(default=None, ge=0)
    next_action: Annotated[NextAction, BeforeValidator(_lower)] | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "PendingActionModel":
        if self.type in (PendingActionType.DEFEND, PendingActionType.DRAW):
            if self.count is None or self.return_turn_to is None:
                raise ValueError(f"{self.type.value} requires count and returnTurnTo")
        return self

    @classmethod
    def from_action(cls, action: PendingAction) -> "PendingActionModel":
        data: dict[str, Any] = {"type": action.action_type, "player_index": action.player_index}
        if isinstance(action, (DefendAction, DrawAction)):
            data["count"] = action.count
            data["return_turn_to"] = action.return_turn_to
        elif isinstance(action, CallSuitAction):
            data["next_action"] = action.next_action
        return cls(**data)

    def to_action(self) -> PendingAction:
        if self.type == PendingActionType.CONTINUE:
            return ContinueAction(self.player_index)
        if self.type == PendingActionType.DEFEND:
            return DefendAction(self.player_index, self.count, self.return_turn_to)
        if self.type == PendingActionType.DRAW:
            return DrawAction(self.player_index, self.count, self.return_turn_to)
        return CallSuitAction(self.player_index, self.next_action or NextAction.PASS)


class WhotPlayerModel(SnapshotModel):
    """Mirrors WhotPlayer."""

    id: str
    name: str
    hand: list[CardModel] = Field(default_factory=list)


class WhotSnapshot(SnapshotModel):
    """Mirrors WhotState."""

    players: list[WhotPlayerModel] = Field(min_length=2)
    market: list[CardModel] = Field(default_factory=list)
    pile: list[CardModel] = Field(min_length=1)
    current_player: int = Field(ge=0)
    direction: Literal[1, -1] = 1
    pending_pick: int = Field(default=0, ge=0)
    called_suit: CanonicalSuit | None = None
    pending_action: PendingActionModel | None = None
    last_played_card: CardModel | None = None
    rule_version: Annotated[RuleVersion, BeforeValidator(_lower)] = RuleVersion.RULE1
    must_play_normal: bool = False
    winner: int | None = None

    @model_validator(mode="after")
    def check_indices_in_range(self) -> "WhotSnapshot":
        if self.current_player >= len(self.players):
            raise ValueError(f"currentPlayer {self.current_player} has no seat")
        if self.winner is not None and not 0 <= self.winner < len(self.players):
            raise ValueError(f"winner {self.winner} has no seat")
        return self

    @classmethod
    def from_state(cls, state: WhotState) -> "WhotSnapshot":
        return cls(
            players=[
                WhotPlayerModel(
                    id=p.id,
                    name=p.name,
                    hand=[CardModel.from_card(c) for c in p.hand],
                )
                for p in state.players
            ],
            market=[CardModel.from_card(c) for c in state.market],
            pile=[CardModel.from_card(c) for c in state.pile],
            current_player=state.current_player,
            direction=state.direction,
            pending_pick=state.pending_pick,
            called_suit=state.called_suit,
            pending_action=(
                PendingActionModel.from_action(state.pending_action)
                if state.pending_action is not None else None
            ),
            last_played_card=(
                CardModel.from_card(state.last_played_card)
                if state.last_played_card is not None else None
            ),
            rule_version=state.rule_version,
            must_play_normal=state.must_play_normal,
            winner=state.winner,
        )

    def to_state(self) -> WhotState:
        return WhotState(
            players=tuple(
                WhotPlayer(id=p.id, name=p.name, hand=tuple(c.to_card() for c in p.hand))
                for p in self.players
            ),
            market=tuple(c.to_card() for c in self.market),
            pile=tuple(c.to_card() for c in self.pile),
            current_player=self.current_player,
            direction=self.direction,
            pending_pick=self.pending_pick,
            called_suit=self.called_suit,
            pending_action=self.pending_action.to_action() if self.pending_action else None,
            last_played_card=self.last_played_card.to_card() if self.last_played_card else None,
            rule_version=self.rule_version,
            must_play_normal=self.must_play_normal,
            winner=self.winner,
        )
