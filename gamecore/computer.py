"""
Game Core - Computer Opponents

Simple move selectors for playing against the computer. Each selector only
chooses among the moves the engine reports as legal.

Whot levels:
    1 Apprentice: random legal card
    2 Knight: prefer a plain suit/number match with the pile top
    3 Warrior: play plain cards first, save specials
    4 Master: throw a special when the next player is close to winning
    5 Alpha: follow the suit held most often
"""

import random
from collections import Counter

from gamecore.engine.ayo import AyoEngine, AyoState
from gamecore.engine.ludo import FINISH_POSITION, LudoEngine, LudoState, MoveAction
from gamecore.engine.whot import WhotEngine
from gamecore.engine.whot_deck import Card
from gamecore.engine.whot_rules import GENERAL_MARKET, HOLD_ON, PICK_TWO, SUSPENSION
from gamecore.engine.whot_state import WhotState

BLOCKING_NUMBERS = frozenset({HOLD_ON, PICK_TWO, SUSPENSION, GENERAL_MARKET})


def _is_blocking(card: Card) -> bool:
    return card.is_whot or card.number in BLOCKING_NUMBERS


def choose_whot_card(
    state: WhotState,
    player_index: int,
    level: int = 1,
    rng: random.Random | None = None
) -> Card | None:
    """
    Pick the card the computer plays.

    Args:
        state: Current game state
        player_index: Seat of the computer player
        level: Difficulty level 1-5
        rng: Optional random source

    Returns:
        A legal card, or None when the computer must draw instead
    """
    if not 1 <= level <= 5:
        raise ValueError(f"Level must be between 1 and 5, got {level}.")

    source = rng or random
    valid = WhotEngine.get_valid_cards(state, player_index)
    if not valid:
        return None

    if level == 1:
        return source.choice(valid)

    if level == 2:
        top = state.top_card
        preferred = [c for c in valid if c.suit == top.suit or c.number == top.number]
        return source.choice(preferred or valid)

    if level == 3:
        normals = [c for c in valid if not _is_blocking(c)]
        return normals[0] if normals else valid[0]

    if level == 4:
        opponent = state.players[state.next_player_index(player_index)]
        if len(opponent.hand) <= 2:
            blocking = [c for c in valid if _is_blocking(c)]
            if blocking:
                return blocking[0]
        return valid[0]

    suit_counts = Counter(c.suit for c in state.players[player_index].hand)
    best_suit = suit_counts.most_common(1)[0][0]
    strategic = [c for c in valid if c.suit == best_suit]
    return strategic[0] if strategic else valid[0]


def choose_ludo_move(
    state: LudoState,
    rng: random.Random | None = None
) -> MoveAction | None:
    """
    Pick a Ludo move: finish a token if possible, then capture, then leave
    house, otherwise advance at random.

    Returns:
        A legal move, or None when the computer must pass
    """
    moves = LudoEngine.get_valid_moves(state)
    if not moves:
        return None

    for wanted in (
        lambda m: m.target_position == FINISH_POSITION,
        lambda m: m.is_capture,
        lambda m: m.target_position == 0,
    ):
        matching = [m for m in moves if wanted(m)]
        if matching:
            return matching[0]

    return (rng or random).choice(moves)


def choose_ayo_pit(
    state: AyoState,
    rng: random.Random | None = None
) -> int | None:
    """
    Pick an Ayo pit: the move capturing the most seeds, random among ties.

    Returns:
        A legal pit index, or None when the game is over
    """
    pits = AyoEngine.get_valid_moves(state)
    if not pits:
        return None

    mover = state.current_player
    gains = {
        pit: AyoEngine.apply_move(state, pit).scores[mover] - state.scores[mover]
        for pit in pits
    }
    best = max(gains.values())
    return (rng or random).choice([pit for pit, gain in gains.items() if gain == best])
