"""
Tests for the Whot card game engine.
"""

import random

import pytest

from gamecore.engine.base import InvalidMoveError, InvalidSuitCallError
from gamecore.engine.whot import WhotEngine
from gamecore.engine.whot_deck import Card, RuleVersion, Suit
from gamecore.engine.whot_state import (
    CallSuitAction,
    ContinueAction,
    DefendAction,
    DrawAction,
    NextAction,
)


def square_market(*numbers):
    return [Card(id=f"square-{n}m", suit=Suit.SQUARE, number=n) for n in numbers]


class TestWhotInitialize:
    """Tests for dealing and starting the pile."""

    def test_deal(self, rng):
        state, deck = WhotEngine.initialize(["Ada", "Bola"], rng=rng)
        assert len(deck) == 54
        assert [len(p.hand) for p in state.players] == [5, 5]
        assert len(state.market) == 54 - 10 - 1
        assert len(state.pile) == 1
        assert state.current_player == 0

    def test_hands_are_contiguous_blocks(self, rng):
        state, deck = WhotEngine.initialize(["Ada", "Bola", "Chi"], hand_size=4, rng=rng)
        assert state.players[0].hand == tuple(deck[0:4])
        assert state.players[1].hand == tuple(deck[4:8])
        assert state.players[2].hand == tuple(deck[8:12])

    def test_first_pile_card_is_plain(self, rng):
        state, _ = WhotEngine.initialize(["Ada", "Bola"], rng=rng)
        assert not state.top_card.is_special

    def test_every_card_accounted_for(self, rng):
        state, deck = WhotEngine.initialize(["Ada", "Bola"], rng=rng)
        assert sorted(c.id for c in WhotEngine.all_cards(state)) == sorted(c.id for c in deck)

    def test_rule2_deck(self, rng):
        state, deck = WhotEngine.initialize(["Ada", "Bola"], rule_version="rule2", rng=rng)
        assert state.rule_version == RuleVersion.RULE2
        assert len(deck) == 49

    def test_player_names_and_ids(self, rng):
        state, _ = WhotEngine.initialize(["Ada", "Bola"], rng=rng)
        assert [p.name for p in state.players] == ["Ada", "Bola"]
        assert [p.id for p in state.players] == ["player-0", "player-1"]

    def test_too_few_players(self):
        with pytest.raises(ValueError, match="Player count"):
            WhotEngine.initialize(["Ada"])

    def test_hand_too_large(self):
        with pytest.raises(ValueError, match="Cannot deal"):
            WhotEngine.initialize(["Ada", "Bola"], hand_size=27)


class TestWhotRule1Validity:
    """Tests for rule 1 legality in free play."""

    def test_suit_or_number_match(self, whot_state, card):
        state = whot_state([[card(Suit.CIRCLE, 3)], []], top=card(Suit.CIRCLE, 7))
        assert WhotEngine.is_valid_move(state, card(Suit.CIRCLE, 3))
        assert WhotEngine.is_valid_move(state, card(Suit.STAR, 7))
        assert not WhotEngine.is_valid_move(state, card(Suit.STAR, 3))

    def test_whot_always_playable(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.CIRCLE, 7))
        assert WhotEngine.is_valid_move(state, card(Suit.WHOT, 20, "1"))

    def test_called_suit_locks_play(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.WHOT, 20, "1"), called_suit=Suit.STAR)
        assert WhotEngine.is_valid_move(state, card(Suit.STAR, 3))
        assert WhotEngine.is_valid_move(state, card(Suit.WHOT, 20, "2"))
        assert not WhotEngine.is_valid_move(state, card(Suit.CIRCLE, 3))

    def test_whot_without_called_suit_accepts_anything(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.WHOT, 20, "1"))
        assert WhotEngine.is_valid_move(state, card(Suit.CROSS, 11))

    def test_valid_cards_in_hand_order(self, whot_state, card):
        hand = [card(Suit.STAR, 3), card(Suit.CIRCLE, 3), card(Suit.STAR, 7)]
        state = whot_state([hand, []], top=card(Suit.CIRCLE, 7))
        assert WhotEngine.get_valid_cards(state, 0) == [hand[1], hand[2]]

    def test_not_your_turn_has_no_valid_cards(self, whot_state, card):
        state = whot_state([[], [card(Suit.CIRCLE, 3)]], top=card(Suit.CIRCLE, 7))
        assert WhotEngine.get_valid_cards(state, 1) == []


class TestWhotPlayCard:
    """Tests for playing cards and the faults it raises."""

    def test_plain_card_passes_turn(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 3), card(Suit.STAR, 4)]
        state = whot_state([hand, [card(Suit.CROSS, 7)]], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.top_card == hand[0]
        assert state.players[0].hand == (hand[1],)
        assert state.current_player == 1
        assert state.pending_action is None

    def test_card_not_held(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4)], []], top=card(Suit.CIRCLE, 7))
        with pytest.raises(InvalidMoveError, match="does not hold"):
            WhotEngine.play_card(state, 0, card(Suit.CIRCLE, 3))

    def test_not_your_turn(self, whot_state, card):
        state = whot_state([[], [card(Suit.CIRCLE, 3)]], top=card(Suit.CIRCLE, 7))
        with pytest.raises(InvalidMoveError, match="not P1's turn"):
            WhotEngine.play_card(state, 1, card(Suit.CIRCLE, 3))

    def test_card_does_not_match(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4), card(Suit.STAR, 3)], []],
                           top=card(Suit.CIRCLE, 7))
        with pytest.raises(InvalidMoveError, match="cannot be played on"):
            WhotEngine.play_card(state, 0, card(Suit.STAR, 4))

    def test_seat_out_of_range(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.CIRCLE, 7))
        with pytest.raises(ValueError, match="out of range"):
            WhotEngine.play_card(state, 2, card(Suit.CIRCLE, 3))

    def test_empty_hand_wins(self, whot_state, card):
        last = card(Suit.CIRCLE, 3)
        state = whot_state([[last], [card(Suit.STAR, 4)]], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, last)
        assert state.winner == 0
        assert state.pending_action is None
        assert WhotEngine.check_winner(state) == state.players[0]
        assert WhotEngine.get_valid_cards(state, 1) == []
        with pytest.raises(InvalidMoveError, match="already over"):
            WhotEngine.play_card(state, 1, card(Suit.STAR, 4))

    def test_no_winner_while_hands_full(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4)], [card(Suit.STAR, 3)]],
                           top=card(Suit.CIRCLE, 7))
        assert WhotEngine.check_winner(state) is None


class TestWhotRule1Specials:
    """Tests for rule 1 special cards."""

    def test_hold_on_keeps_turn_and_locks_suit(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 1), card(Suit.CIRCLE, 3), card(Suit.STAR, 1)]
        state = whot_state([hand, [card(Suit.CROSS, 7)]], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.current_player == 0
        assert state.pending_action == ContinueAction(0)
        assert WhotEngine.get_valid_cards(state, 0) == [hand[1]]

    def test_draw_during_continue_passes_turn(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 8), card(Suit.STAR, 4)]
        state = whot_state([hand, [card(Suit.CROSS, 7)]], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        state, drawn = WhotEngine.pick_card(state, 0)
        assert len(drawn) == 1
        assert state.current_player == 1
        assert state.pending_action is None

    def test_pick_two_starts_defence(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 2), card(Suit.CIRCLE, 3)]
        state = whot_state([hand, [card(Suit.STAR, 4)]], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.current_player == 1
        assert state.pending_pick == 2
        assert state.pending_action == DefendAction(1, count=2, return_turn_to=0)

    def test_stacked_penalty_drawn_and_turn_returns(self, whot_state, card):
        attacker = [card(Suit.CIRCLE, 2), card(Suit.TRIANGLE, 5), card(Suit.CIRCLE, 3)]
        defender = [card(Suit.STAR, 4), card(Suit.SQUARE, 7)]
        state = whot_state(
            [attacker, defender],
            top=card(Suit.CIRCLE, 10),
            market=square_market(1, 2, 3, 5, 10, 11),
        )

        state = WhotEngine.play_card(state, 0, attacker[0])
        state = WhotEngine.play_card(state, 0, attacker[1])
        assert state.pending_pick == 5
        assert state.pending_action == DefendAction(1, count=5, return_turn_to=0)
        assert WhotEngine.get_valid_cards(state, 1) == []

        state, drawn = WhotEngine.pick_card(state, 1)
        assert len(drawn) == 5
        assert len(state.players[1].hand) == 7
        assert state.current_player == 0
        assert state.pending_action is None
        assert state.pending_pick == 0

    def test_defence_settles_with_empty_market(self, whot_state, card):
        attacker = [card(Suit.CIRCLE, 2), card(Suit.CIRCLE, 3)]
        defender = [card(Suit.STAR, 4), card(Suit.SQUARE, 7)]
        state = whot_state([attacker, defender], top=card(Suit.CIRCLE, 7), market=[])

        state = WhotEngine.play_card(state, 0, attacker[0])
        assert WhotEngine.get_valid_cards(state, 1) == []

        state, drawn = WhotEngine.pick_card(state, 1)
        assert drawn == []
        assert state.pending_action is None
        assert state.pending_pick == 0
        assert state.current_player == 0
        assert len(state.players[1].hand) == 2

    def test_defence_settles_with_short_market(self, whot_state, card):
        attacker = [card(Suit.CIRCLE, 5), card(Suit.CIRCLE, 3)]
        defender = [card(Suit.STAR, 4)]
        state = whot_state([attacker, defender], top=card(Suit.CIRCLE, 7),
                           market=square_market(1))

        state = WhotEngine.play_card(state, 0, attacker[0])
        state, drawn = WhotEngine.pick_card(state, 1)
        assert len(drawn) == 1
        assert state.market == ()
        assert state.pending_action is None
        assert state.current_player == 0

    def test_defender_answers_with_penalty(self, whot_state, card):
        attacker = [card(Suit.CIRCLE, 2), card(Suit.CIRCLE, 3)]
        defender = [card(Suit.STAR, 5), card(Suit.SQUARE, 7)]
        state = whot_state([attacker, defender], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, attacker[0])
        assert WhotEngine.get_valid_cards(state, 1) == [defender[0]]

        state = WhotEngine.play_card(state, 1, defender[0])
        assert state.pending_action == DefendAction(0, count=5, return_turn_to=1)
        assert state.current_player == 0

    def test_whot_escapes_defence(self, whot_state, card):
        attacker = [card(Suit.CIRCLE, 2), card(Suit.CIRCLE, 3)]
        defender = [card(Suit.WHOT, 20, "1"), card(Suit.STAR, 3), card(Suit.CROSS, 7)]
        state = whot_state([attacker, defender], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, attacker[0])
        state = WhotEngine.play_card(state, 1, defender[0])
        assert state.pending_pick == 0
        assert state.pending_action == CallSuitAction(1, next_action=NextAction.CONTINUE)

        state = WhotEngine.call_suit(state, 1, Suit.STAR)
        assert state.called_suit == Suit.STAR
        assert state.current_player == 1
        assert state.pending_action == ContinueAction(1)
        assert WhotEngine.get_valid_cards(state, 1) == [defender[1]]

        state = WhotEngine.play_card(state, 1, defender[1])
        assert state.current_player == 0
        assert state.pending_action is None

    def test_whot_in_free_play_then_pass(self, whot_state, card):
        hand = [card(Suit.WHOT, 20, "1"), card(Suit.CIRCLE, 3)]
        state = whot_state([hand, [card(Suit.STAR, 4)]], top=card(Suit.CROSS, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.pending_action == CallSuitAction(0, next_action=NextAction.PASS)

        state = WhotEngine.call_suit(state, 0, Suit.STAR)
        assert state.current_player == 1
        assert state.called_suit == Suit.STAR
        assert state.pending_action is None
        assert WhotEngine.get_valid_cards(state, 1) == [card(Suit.STAR, 4)]

    def test_called_suit_rejects_other_suits(self, whot_state, card):
        hand = [card(Suit.WHOT, 20, "1"), card(Suit.CIRCLE, 3)]
        other = [card(Suit.CIRCLE, 4), card(Suit.STAR, 4)]
        state = whot_state([hand, other], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        state = WhotEngine.call_suit(state, 0, Suit.STAR)
        with pytest.raises(InvalidMoveError, match="cannot be played on"):
            WhotEngine.play_card(state, 1, other[0])

        state = WhotEngine.play_card(state, 1, other[1])
        assert state.top_card == other[1]
        assert state.called_suit is None

    def test_general_market_forced_draw(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 14), card(Suit.CIRCLE, 3)]
        state = whot_state([hand, [card(Suit.STAR, 4)]], top=card(Suit.CIRCLE, 7))

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.current_player == 1
        assert state.pending_action == DrawAction(1, count=1, return_turn_to=0)
        with pytest.raises(InvalidMoveError, match="Another player is drawing"):
            WhotEngine.pick_card(state, 0)

        state, drawn = WhotEngine.pick_card(state, 1)
        assert len(drawn) == 1
        assert len(state.players[1].hand) == 2
        assert state.current_player == 0
        assert state.pending_action is None


class TestWhotForcedDraw:
    """Tests for execute_forced_draw."""

    def test_draws_one_card_per_call(self, whot_state, card):
        state = whot_state(
            [[card(Suit.CIRCLE, 3)], [card(Suit.STAR, 4)]],
            top=card(Suit.CIRCLE, 14),
            market=square_market(1, 2, 3, 5),
            current_player=1,
            pending_action=DrawAction(1, count=3, return_turn_to=0),
        )

        state, first = WhotEngine.execute_forced_draw(state)
        assert first.id == "square-1m"
        assert state.pending_action == DrawAction(1, count=2, return_turn_to=0)

        state, _ = WhotEngine.execute_forced_draw(state)
        state, _ = WhotEngine.execute_forced_draw(state)
        assert len(state.players[1].hand) == 4
        assert len(state.market) == 1
        assert state.pending_action is None
        assert state.current_player == 0

    def test_no_pending_draw_is_noop(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.CIRCLE, 7))
        new_state, drawn = WhotEngine.execute_forced_draw(state)
        assert new_state is state
        assert drawn is None

    def test_short_market_terminates(self, whot_state, card):
        state = whot_state(
            [[card(Suit.CIRCLE, 3)], [card(Suit.STAR, 4)]],
            top=card(Suit.CIRCLE, 14),
            market=square_market(1),
            current_player=1,
            pending_action=DrawAction(1, count=3, return_turn_to=0),
        )

        state, drawn = WhotEngine.execute_forced_draw(state)
        assert drawn is not None
        assert state.pending_action == DrawAction(1, count=2, return_turn_to=0)

        state, drawn = WhotEngine.execute_forced_draw(state)
        assert drawn is None
        assert state.pending_action is None
        assert state.current_player == 0
        assert len(state.players[1].hand) == 2


class TestWhotPickCard:
    """Tests for voluntary draws."""

    def test_draw_one_and_pass(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4)], [card(Suit.STAR, 3)]],
                           top=card(Suit.CIRCLE, 7))
        state, drawn = WhotEngine.pick_card(state, 0)
        assert drawn == [card(Suit.STAR, 3, "m")]
        assert len(state.players[0].hand) == 2
        assert len(state.market) == 2
        assert state.current_player == 1

    def test_empty_market_is_noop(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4)], []], top=card(Suit.CIRCLE, 7), market=[])
        new_state, drawn = WhotEngine.pick_card(state, 0)
        assert new_state is state
        assert drawn == []

    def test_not_your_turn(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.CIRCLE, 7))
        with pytest.raises(InvalidMoveError, match="not P1's turn"):
            WhotEngine.pick_card(state, 1)

    def test_suit_call_comes_first(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4)], []], top=card(Suit.WHOT, 20, "1"),
                           pending_action=CallSuitAction(0))
        with pytest.raises(InvalidMoveError, match="suit must be called"):
            WhotEngine.pick_card(state, 0)

    def test_market_shrinks_only_by_drawn_cards(self, whot_state, card):
        state = whot_state([[card(Suit.STAR, 4)], []], top=card(Suit.CIRCLE, 7),
                           market=square_market(1))
        state, drawn = WhotEngine.pick_card(state, 0)
        assert len(drawn) == 1
        assert state.market == ()


class TestWhotCallSuit:
    """Tests for call_suit faults."""

    def test_no_pending_call(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.CIRCLE, 7))
        with pytest.raises(InvalidSuitCallError, match="no suit to call"):
            WhotEngine.call_suit(state, 0, Suit.STAR)

    def test_wrong_player(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.WHOT, 20, "1"),
                           pending_action=CallSuitAction(0))
        with pytest.raises(InvalidSuitCallError):
            WhotEngine.call_suit(state, 1, Suit.STAR)

    def test_cannot_call_whot(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.WHOT, 20, "1"),
                           pending_action=CallSuitAction(0))
        with pytest.raises(InvalidSuitCallError, match="Whot is not a suit"):
            WhotEngine.call_suit(state, 0, Suit.WHOT)

    def test_string_suit_accepted(self, whot_state, card):
        state = whot_state([[], []], top=card(Suit.WHOT, 20, "1"),
                           pending_action=CallSuitAction(0))
        assert WhotEngine.call_suit(state, 0, "star").called_suit == Suit.STAR


class TestWhotRule2:
    """Tests for rule 2."""

    def test_hold_on_skips_next_player(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 1), card(Suit.STAR, 4)]
        third = [card(Suit.CIRCLE, 2), card(Suit.CIRCLE, 3)]
        state = whot_state([hand, [card(Suit.STAR, 3)], third],
                           top=card(Suit.CIRCLE, 7), rule_version=RuleVersion.RULE2)

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.current_player == 2
        assert state.must_play_normal
        assert WhotEngine.get_valid_cards(state, 2) == [third[1]]

    def test_pick_two_collected_on_next_draw(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 2), card(Suit.STAR, 4)]
        state = whot_state([hand, [card(Suit.STAR, 3)]],
                           top=card(Suit.CIRCLE, 7), rule_version=RuleVersion.RULE2)

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.pending_pick == 2
        assert state.current_player == 1
        assert state.pending_action is None

        state, drawn = WhotEngine.pick_card(state, 1)
        assert len(drawn) == 2
        assert state.pending_pick == 0
        assert not state.must_play_normal
        assert state.current_player == 0

    def test_general_market_everyone_else_draws(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 14), card(Suit.STAR, 4)]
        state = whot_state(
            [hand, [card(Suit.STAR, 3)], [card(Suit.CROSS, 3)]],
            top=card(Suit.CIRCLE, 7),
            market=square_market(3, 5, 7),
            rule_version=RuleVersion.RULE2,
        )

        state = WhotEngine.play_card(state, 0, hand[0])
        assert state.players[1].hand[-1].id == "square-3m"
        assert state.players[2].hand[-1].id == "square-5m"
        assert len(state.players[0].hand) == 1
        assert len(state.market) == 1
        assert state.current_player == 1

    def test_general_market_stops_when_market_runs_out(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 14), card(Suit.STAR, 4)]
        state = whot_state(
            [hand, [card(Suit.STAR, 3)], [card(Suit.CROSS, 3)]],
            top=card(Suit.CIRCLE, 7),
            market=square_market(3),
            rule_version=RuleVersion.RULE2,
        )

        state = WhotEngine.play_card(state, 0, hand[0])
        assert len(state.players[1].hand) == 2
        assert len(state.players[2].hand) == 1
        assert state.market == ()

    def test_plain_card_clears_normal_lock(self, whot_state, card):
        hand = [card(Suit.CIRCLE, 3), card(Suit.STAR, 4)]
        state = whot_state([hand, [card(Suit.STAR, 3)]], top=card(Suit.CIRCLE, 1),
                           rule_version=RuleVersion.RULE2, must_play_normal=True)

        state = WhotEngine.play_card(state, 0, hand[0])
        assert not state.must_play_normal
        assert state.current_player == 1


class TestWhotRandomPlay:
    """Cards are never created or lost during play."""

    @pytest.mark.parametrize("rule_version", [RuleVersion.RULE1, RuleVersion.RULE2])
    def test_deck_conserved(self, rule_version):
        rng = random.Random(21)
        state, deck = WhotEngine.initialize(["Ada", "Bola", "Chi"], rule_version=rule_version, rng=rng)
        expected = sorted(c.id for c in deck)
        suits = [Suit.CIRCLE, Suit.TRIANGLE, Suit.CROSS, Suit.SQUARE, Suit.STAR]

        for _ in range(500):
            if state.winner is not None:
                break
            pending = state.pending_action
            if isinstance(pending, CallSuitAction):
                state = WhotEngine.call_suit(state, pending.player_index, rng.choice(suits))
            elif isinstance(pending, DrawAction):
                state, _ = WhotEngine.execute_forced_draw(state)
            else:
                player = state.current_player
                valid = WhotEngine.get_valid_cards(state, player)
                if valid:
                    state = WhotEngine.play_card(state, player, rng.choice(valid))
                else:
                    state, _ = WhotEngine.pick_card(state, player)
            assert sorted(c.id for c in WhotEngine.all_cards(state)) == expected
