"""
Game Core - Whot Card Game Engine

Deck, hands, market and pile management for the Whot card game under two
rule versions. Illegal plays raise InvalidMoveError; running out of market
cards is never an error (draws simply come up short).

All methods are stateless class methods operating on immutable data.
"""

import logging
import random
from dataclasses import replace
from typing import Sequence

from gamecore.engine.base import InvalidMoveError, InvalidSuitCallError
from gamecore.engine.validators import (
    validate_hand_size,
    validate_player_index,
    validate_player_names,
)
from gamecore.engine.whot_deck import (
    Card,
    RuleVersion,
    SPECIAL_NUMBERS,
    Suit,
    generate_deck,
    shuffle_deck,
)
from gamecore.engine.whot_rules import PICK_VALUES, get_rule_set
from gamecore.engine.whot_state import (
    CallSuitAction,
    ContinueAction,
    DefendAction,
    DrawAction,
    NextAction,
    WhotPlayer,
    WhotState,
)

logger = logging.getLogger(__name__)


class WhotEngine:
    """
    Stateless engine for the Whot card game.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    DEFAULT_HAND_SIZE = 5
    MIN_PLAYERS = 2
    MAX_PLAYERS = 4

    @classmethod
    def initialize(
        cls,
        player_names: Sequence[str],
        hand_size: int = DEFAULT_HAND_SIZE,
        rule_version: RuleVersion = RuleVersion.RULE1,
        rng: random.Random | None = None
    ) -> tuple[WhotState, list[Card]]:
        """
        Shuffle, deal and start the pile.

        Each player receives a contiguous block of `hand_size` cards in seat
        order; the rest forms the market. The first plain card in the market
        starts the pile (the very first card if every remaining card is special).

        Args:
            player_names: Display names in seat order
            hand_size: Cards dealt to each player
            rule_version: Rule set for the game
            rng: Optional random source for the shuffle

        Returns:
            Tuple of (initial state, full shuffled deck)
        """
        names = validate_player_names(player_names, cls.MIN_PLAYERS, cls.MAX_PLAYERS)
        rule_version = RuleVersion(rule_version)
        full_deck = shuffle_deck(generate_deck(rule_version), rng)
        validate_hand_size(hand_size, len(names), len(full_deck))

        players = tuple(
            WhotPlayer(
                id=f"player-{idx}",
                name=name,
                hand=tuple(full_deck[idx * hand_size:(idx + 1) * hand_size]),
            )
            for idx, name in enumerate(names)
        )

        market = full_deck[len(names) * hand_size:]
        start = next(
            (i for i, card in enumerate(market) if card.number not in SPECIAL_NUMBERS),
            0,
        )
        first_card = market[start]
        market = market[:start] + market[start + 1:]

        state = WhotState(
            players=players,
            market=tuple(market),
            pile=(first_card,),
            rule_version=rule_version,
        )
        return state, full_deck

    @classmethod
    def is_valid_move(cls, state: WhotState, card: Card) -> bool:
        """Check a card against the rule set, ignoring whose hand holds it."""
        return get_rule_set(state.rule_version).is_valid_move(state, card)

    @classmethod
    def get_valid_cards(cls, state: WhotState, player_index: int) -> list[Card]:
        """
        List the cards a player may legally play right now.

        Returns:
            Cards from the player's hand, in hand order (empty when it is not
            their move or the game is over)
        """
        validate_player_index(player_index, len(state.players))
        if state.winner is not None:
            return []
        hand = state.players[player_index].hand
        return [
            card for card in hand
            if cls._may_act(state, player_index, card) and cls.is_valid_move(state, card)
        ]

    @classmethod
    def _may_act(cls, state: WhotState, player_index: int, card: Card) -> bool:
        """Whether the player may play this card now, turn-wise."""
        if player_index == state.current_player:
            return True
        # The attacker may pile another penalty card onto the same defender
        pending = state.pending_action
        return (
            isinstance(pending, DefendAction)
            and pending.return_turn_to == player_index
            and card.number in PICK_VALUES
        )

    @classmethod
    def play_card(cls, state: WhotState, player_index: int, card: Card) -> WhotState:
        """
        Play a card from a player's hand.

        Args:
            state: Current game state
            player_index: Seat of the player making the play
            card: Card to play (must be in that player's hand)

        Returns:
            New WhotState with the card on the pile and its effect resolved

        Raises:
            InvalidMoveError: If the game is over, the player does not hold the
                card, it is not their move, or the rule set rejects the card
        """
        validate_player_index(player_index, len(state.players))
        if state.winner is not None:
            raise InvalidMoveError("The game is already over")

        player = state.players[player_index]
        if card not in player.hand:
            raise InvalidMoveError(f"{player.name} does not hold {card}")
        if not cls._may_act(state, player_index, card):
            raise InvalidMoveError(f"It is not {player.name}'s turn")
        if not cls.is_valid_move(state, card):
            raise InvalidMoveError(f"{card} cannot be played on {state.top_card}")

        hand = tuple(c for c in player.hand if c.id != card.id)
        players = list(state.players)
        players[player_index] = replace(player, hand=hand)
        placed = replace(state, players=tuple(players), pile=state.pile + (card,))

        new_state = get_rule_set(state.rule_version).apply_effect(placed, card, player_index)

        if not hand:
            return replace(new_state, winner=player_index, pending_action=None)
        return new_state

    @classmethod
    def pick_card(cls, state: WhotState, player_index: int) -> tuple[WhotState, list[Card]]:
        """
        Draw from the market.

        A defender giving up under rule 1 draws the whole stack and the turn
        returns to the attacker; a short market only shrinks the draw. The live target of a forced draw draws one
        card through execute_forced_draw. Otherwise this is a voluntary draw
        that ends the turn (rule 2 also collects any pending_pick here).

        Returns:
            Tuple of (new state, drawn cards); a voluntary draw from an empty
            market yields the unchanged state and no cards

        Raises:
            InvalidMoveError: If the game is over, a suit must be called first,
                or it is not the player's move
        """
        validate_player_index(player_index, len(state.players))
        if state.winner is not None:
            raise InvalidMoveError("The game is already over")

        pending = state.pending_action
        if isinstance(pending, DrawAction):
            if pending.player_index != player_index:
                raise InvalidMoveError("Another player is drawing")
            new_state, drawn = cls.execute_forced_draw(state)
            return new_state, [drawn] if drawn is not None else []

        if isinstance(pending, CallSuitAction):
            raise InvalidMoveError("A suit must be called before drawing")
        if player_index != state.current_player:
            raise InvalidMoveError(f"It is not {state.players[player_index].name}'s turn")

        # Giving up a defence always settles it, even when the market comes up short
        if state.rule_version == RuleVersion.RULE1 and isinstance(pending, DefendAction):
            new_state, drawn = cls._draw(state, player_index, pending.count)
            return replace(
                new_state,
                current_player=pending.return_turn_to,
                pending_action=None,
                pending_pick=0,
                last_played_card=None,
            ), drawn

        if not state.market:
            logger.debug("Market is empty, draw by player %d ignored", player_index)
            return state, []

        count = state.pending_pick if state.rule_version == RuleVersion.RULE2 else 0
        new_state, drawn = cls._draw(state, player_index, count or 1)
        return replace(
            new_state,
            current_player=state.next_player_index(player_index),
            pending_action=None,
            pending_pick=0,
            last_played_card=None,
            must_play_normal=False,
        ), drawn

    @classmethod
    def _draw(cls, state: WhotState, player_index: int, count: int) -> tuple[WhotState, list[Card]]:
        """Move up to `count` cards from the front of the market into a hand."""
        drawn = list(state.market[:count])
        if len(drawn) < count:
            logger.debug("Market short: wanted %d cards, drew %d", count, len(drawn))
        players = list(state.players)
        player = players[player_index]
        players[player_index] = replace(player, hand=player.hand + tuple(drawn))
        return replace(
            state,
            players=tuple(players),
            market=state.market[len(drawn):],
        ), drawn

    @classmethod
    def call_suit(cls, state: WhotState, player_index: int, suit: Suit) -> WhotState:
        """
        Name the suit to follow after a whot card.

        Raises:
            InvalidSuitCallError: If no suit call is pending for this player,
                or the suit named is whot itself
        """
        pending = state.pending_action
        if not isinstance(pending, CallSuitAction) or pending.player_index != player_index:
            raise InvalidSuitCallError(f"Player {player_index} has no suit to call")

        suit = Suit(suit)
        if suit == Suit.WHOT:
            raise InvalidSuitCallError("Whot is not a suit that can be called")

        if pending.next_action == NextAction.CONTINUE:
            return replace(
                state,
                called_suit=suit,
                current_player=player_index,
                pending_action=ContinueAction(player_index),
            )

        return replace(
            state,
            called_suit=suit,
            current_player=state.next_player_index(player_index),
            pending_action=None,
            pending_pick=0,
            last_played_card=None,
        )

    @classmethod
    def execute_forced_draw(cls, state: WhotState) -> tuple[WhotState, Card | None]:
        """
        Draw one card for the target of a pending forced draw.

        Call repeatedly until the draw completes. The turn goes to
        `return_turn_to` when the count reaches zero, or straight away if the
        market is already empty (the remaining draws are forfeited).

        Returns:
            Tuple of (new state, drawn card or None); without a pending draw
            the state is returned unchanged
        """
        pending = state.pending_action
        if not isinstance(pending, DrawAction):
            return state, None

        if not state.market:
            logger.debug(
                "Market empty with %d forced draws left, turn returns to %d",
                pending.count, pending.return_turn_to,
            )
            return replace(
                state,
                pending_action=None,
                current_player=pending.return_turn_to,
                last_played_card=None,
            ), None

        new_state, drawn = cls._draw(state, pending.player_index, 1)
        remaining = pending.count - 1
        if remaining <= 0:
            return replace(
                new_state,
                pending_action=None,
                current_player=pending.return_turn_to,
                last_played_card=None,
            ), drawn[0]

        return replace(new_state, pending_action=replace(pending, count=remaining)), drawn[0]

    @classmethod
    def check_winner(cls, state: WhotState) -> WhotPlayer | None:
        """Return the first player with an empty hand, if any."""
        return next((p for p in state.players if not p.hand), None)

    @classmethod
    def all_cards(cls, state: WhotState) -> list[Card]:
        """Every card in play: market, pile and all hands."""
        cards = list(state.market) + list(state.pile)
        for player in state.players:
            cards.extend(player.hand)
        return cards
