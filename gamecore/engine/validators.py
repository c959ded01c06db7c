"""
Game Core - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence


def validate_player_names(
    names: Sequence[str],
    min_count: int = 2,
    max_count: int = 4
) -> tuple[str, ...]:
    """
    Validate the list of player names for a table.

    Args:
        names: Player display names in seating order
        min_count: Minimum number of players
        max_count: Maximum number of players

    Returns:
        Validated names as a tuple

    Raises:
        ValueError: If the count is out of range or a name is blank
    """
    names_tuple = tuple(names)
    count = len(names_tuple)

    if not (min_count <= count <= max_count):
        raise ValueError(
            f"Player count must be {min_count}-{max_count}, got {count}."
        )

    for i, name in enumerate(names_tuple):
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Player name at index {i} must be a non-empty string.")

    return names_tuple


def validate_hand_size(hand_size: int, player_count: int, deck_size: int) -> int:
    """
    Validate the starting hand size against the deck.

    At least one card must remain after dealing so the pile can be started.

    Raises:
        ValueError: If the hand size is not positive or the deck is too small
    """
    if not isinstance(hand_size, int):
        raise ValueError(f"Hand size must be an integer, got {type(hand_size).__name__}.")

    if hand_size <= 0:
        raise ValueError(f"Hand size must be positive, got {hand_size}.")

    if hand_size * player_count >= deck_size:
        raise ValueError(
            f"Cannot deal {hand_size} cards to {player_count} players "
            f"from a deck of {deck_size}."
        )

    return hand_size


def validate_player_index(index: int, player_count: int) -> int:
    """
    Validate a seat index.

    Raises:
        ValueError: If the index is out of range
    """
    if not isinstance(index, int):
        raise ValueError(f"Player index must be an integer, got {type(index).__name__}.")

    if not (0 <= index < player_count):
        raise ValueError(
            f"Player index {index} is out of range. Must be between 0 and {player_count - 1}."
        )

    return index


def validate_stake(stake: int) -> int:
    """
    Validate a stake amount.

    Args:
        stake: Amount placed on the game

    Returns:
        Validated stake

    Raises:
        ValueError: If stake is not a positive integer
    """
    if not isinstance(stake, int):
        raise ValueError(f"Stake must be an integer, got {type(stake).__name__}.")

    if stake <= 0:
        raise ValueError(f"Stake must be positive, got {stake}.")

    return stake
