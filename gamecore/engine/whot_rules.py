"""
Game Core - Whot Rule Sets

Two independent rule variants, each a pair of pure functions:

    is_valid_move(state, card) -> bool
    apply_effect(state, card, player_index) -> WhotState

`apply_effect` receives the state after the card has already left the
player's hand and landed on the pile; it only resolves turn order, pending
actions and penalties.

Rule 1:
    - 1 (Hold On) and 8 (Suspension): the same player continues
    - 2 (Pick Two) and 5 (Pick Three): stack onto pending_pick; the next player
      must defend with another penalty card or a whot, or draw the stack
    - 14 (General Market): the next player draws one card, then the turn
      returns to the player who played it
    - 20 (Whot): the player names a suit
Rule 2:
    - 1 skips the next player, 2 adds two cards to pending_pick (not
      defendable), 14 makes every other player draw one card now
    - after 1, 2 or 14 the next play must be a plain card
"""

from dataclasses import dataclass, replace
from typing import Callable

from gamecore.engine.whot_deck import Card, RuleVersion
from gamecore.engine.whot_state import (
    CallSuitAction,
    ContinueAction,
    DefendAction,
    DrawAction,
    NextAction,
    WhotState,
)

HOLD_ON = 1
PICK_TWO = 2
PICK_THREE = 5
SUSPENSION = 8
GENERAL_MARKET = 14

# Cards each penalty card adds to the stack (rule 1)
PICK_VALUES: dict[int, int] = {PICK_TWO: 2, PICK_THREE: 3}

RULE2_SPECIALS = frozenset({HOLD_ON, PICK_TWO, GENERAL_MARKET})


@dataclass(frozen=True)
class RuleSet:
    """Legality check and effect resolution for one rule version."""
    is_valid_move: Callable[[WhotState, Card], bool]
    apply_effect: Callable[[WhotState, Card, int], WhotState]


def _matches_top(state: WhotState, card: Card) -> bool:
    top = state.top_card
    return card.suit == top.suit or card.number == top.number


# =============================================================================
# RULE 1
# =============================================================================

def is_valid_move_rule1(state: WhotState, card: Card) -> bool:
    """Check a play against the pending action, or the pile top in free play."""
    pending = state.pending_action

    if isinstance(pending, DefendAction):
        return card.number in PICK_VALUES or card.is_whot

    if isinstance(pending, ContinueAction):
        if card.is_whot:
            return True
        last = state.last_played_card
        if last is None:
            return _matches_top(state, card)
        required = state.called_suit if last.is_whot else last.suit
        return card.suit == required

    if pending is not None:
        # Drawing or calling a suit comes first
        return False

    top = state.top_card
    if top.is_whot:
        if state.called_suit is None:
            return True
        return card.suit == state.called_suit or card.is_whot

    return card.is_whot or _matches_top(state, card)


def apply_effect_rule1(state: WhotState, card: Card, player_index: int) -> WhotState:
    """Resolve a rule 1 card effect."""
    target = state.next_player_index(player_index)

    if card.number in (HOLD_ON, SUSPENSION):
        return replace(
            state,
            current_player=player_index,
            pending_action=ContinueAction(player_index),
            last_played_card=card,
            called_suit=None,
        )

    if card.number == GENERAL_MARKET:
        return replace(
            state,
            current_player=target,
            pending_action=DrawAction(target, count=1, return_turn_to=player_index),
            last_played_card=card,
            called_suit=None,
        )

    if card.number in PICK_VALUES:
        pick = state.pending_pick + PICK_VALUES[card.number]
        return replace(
            state,
            current_player=target,
            pending_pick=pick,
            pending_action=DefendAction(target, count=pick, return_turn_to=player_index),
            last_played_card=card,
            called_suit=None,
        )

    if card.is_whot:
        # A whot played under attack cancels the stack and the defender plays on
        escaping = isinstance(state.pending_action, DefendAction)
        return replace(
            state,
            current_player=player_index,
            pending_pick=0 if escaping else state.pending_pick,
            pending_action=CallSuitAction(
                player_index,
                next_action=NextAction.CONTINUE if escaping else NextAction.PASS,
            ),
            last_played_card=card,
            called_suit=None,
        )

    return replace(
        state,
        current_player=target,
        pending_pick=0,
        pending_action=None,
        last_played_card=None,
        called_suit=None,
    )


# =============================================================================
# RULE 2
# =============================================================================

def is_valid_move_rule2(state: WhotState, card: Card) -> bool:
    """Suit or number match against the pile top; plain cards only after a special."""
    if state.pending_action is not None:
        return False

    base_valid = _matches_top(state, card)
    if state.must_play_normal:
        return base_valid and card.number not in RULE2_SPECIALS
    return base_valid


def apply_effect_rule2(state: WhotState, card: Card, player_index: int) -> WhotState:
    """Resolve a rule 2 card effect."""
    if card.number == HOLD_ON:
        state = replace(state, current_player=state.next_player_index(player_index, 2))

    elif card.number == PICK_TWO:
        state = replace(
            state,
            pending_pick=state.pending_pick + PICK_VALUES[PICK_TWO],
            current_player=state.next_player_index(player_index),
        )

    elif card.number == GENERAL_MARKET:
        market = list(state.market)
        players = list(state.players)
        for idx, player in enumerate(players):
            if idx == player_index or not market:
                continue
            players[idx] = replace(player, hand=player.hand + (market.pop(0),))
        state = replace(
            state,
            players=tuple(players),
            market=tuple(market),
            current_player=state.next_player_index(player_index),
        )

    else:
        state = replace(state, current_player=state.next_player_index(player_index))

    return replace(
        state,
        called_suit=None,
        last_played_card=None,
        must_play_normal=card.number in RULE2_SPECIALS,
    )


RULE_SETS: dict[RuleVersion, RuleSet] = {
    RuleVersion.RULE1: RuleSet(is_valid_move=is_valid_move_rule1, apply_effect=apply_effect_rule1),
    RuleVersion.RULE2: RuleSet(is_valid_move=is_valid_move_rule2, apply_effect=apply_effect_rule2),
}


def get_rule_set(rule_version: RuleVersion) -> RuleSet:
    """Select the rule set for a version."""
    return RULE_SETS[RuleVersion(rule_version)]
