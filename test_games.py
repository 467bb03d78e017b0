"""Tests for the game abstraction and the bundled games."""

import numpy as np
import pytest

from uct_ai.core import (
    GameResult, Nim, NimMove, NimState, TicTacToe, TicTacToeState,
    rank_to_utility, utilities_from_ranks
)
from uct_ai.errors import InvalidMoveError


class TestRankUtilities:
    """Tests for rank to utility conversion."""

    def test_two_players(self):
        assert rank_to_utility(1, 2) == 1.0
        assert rank_to_utility(2, 2) == -1.0
        assert rank_to_utility(1.5, 2) == 0.0

    def test_four_players_linear(self):
        values = [rank_to_utility(r, 4) for r in (1, 2, 3, 4)]
        assert values == pytest.approx([1.0, 1.0 / 3.0, -1.0 / 3.0, -1.0])

    def test_single_player(self):
        assert rank_to_utility(1, 1) == 1.0
        assert rank_to_utility(2, 1) == -1.0

    def test_vector_has_sentinel(self):
        utils = utilities_from_ranks([2, 1, 3])
        assert utils.shape == (4,)
        assert utils[0] == 0.0
        assert list(utils[1:]) == pytest.approx([0.0, 1.0, -1.0])


class TestTicTacToe:
    """Tests for tic-tac-toe."""

    def test_initial_state(self):
        state = TicTacToe().initial_state()
        assert state.num_players == 2
        assert state.mover() == 1
        assert not state.is_terminal()
        assert state.legal_moves() == list(range(9))
        assert state.result == GameResult.IN_PROGRESS

    def test_apply_is_pure(self):
        state = TicTacToe().initial_state()
        child = state.apply(4)
        assert state.board[4] == 0
        assert child.board[4] == 1
        assert child.mover() == 2
        assert 4 not in child.legal_moves()

    def test_illegal_moves(self):
        state = TicTacToe().initial_state().apply(0)
        with pytest.raises(InvalidMoveError):
            state.apply(0)
        with pytest.raises(InvalidMoveError):
            state.apply(9)

    def test_win(self):
        state = TicTacToe.from_string("XX. OO. ...")
        assert state.mover() == 1
        final = state.apply(2)
        assert final.is_terminal()
        assert final.legal_moves() == []
        assert final.winner == 1
        assert final.result == GameResult.WINNER
        assert list(final.utilities()) == [0.0, 1.0, -1.0]

        with pytest.raises(InvalidMoveError):
            final.apply(5)

    def test_draw(self):
        state = TicTacToe.from_string("XOX XOO OXX")
        assert state.is_terminal()
        assert state.winner is None
        assert state.result == GameResult.DRAW
        assert list(state.utilities()) == [0.0, 0.0, 0.0]

    def test_from_string_infers_mover(self):
        assert TicTacToe.from_string("X.. ... ...").mover() == 2
        assert TicTacToe.from_string("XO. ... ...").mover() == 1

    def test_clone_is_equal_and_independent(self):
        state = TicTacToe.from_string("X.. .O. ...")
        copy = state.clone()
        assert copy == state
        assert copy is not state

    def test_random_playout_reaches_terminal(self):
        state = TicTacToe().initial_state()
        rng = np.random.default_rng(3)
        final = state.random_playout(rng)
        assert final.is_terminal()
        assert not state.is_terminal()

    def test_random_playout_is_reproducible(self):
        state = TicTacToe().initial_state()
        a = state.random_playout(np.random.default_rng(11))
        b = state.random_playout(np.random.default_rng(11))
        assert a == b


class TestNim:
    """Tests for multi-player Nim."""

    def test_legal_moves(self):
        state = Nim(heaps=(1, 2)).initial_state()
        assert state.legal_moves() == [NimMove(0, 1), NimMove(1, 1), NimMove(1, 2)]

    def test_turn_order_wraps(self):
        state = Nim(heaps=(5,), num_players=3).initial_state()
        movers = []
        for _ in range(4):
            movers.append(state.mover())
            state = state.apply(NimMove(0, 1))
        assert movers == [1, 2, 3, 1]

    def test_illegal_move(self):
        state = Nim(heaps=(2,)).initial_state()
        with pytest.raises(InvalidMoveError):
            state.apply(NimMove(0, 3))
        with pytest.raises(InvalidMoveError):
            state.apply(NimMove(1, 1))

    def test_last_object_wins(self):
        state = Nim(heaps=(1,)).initial_state().apply(NimMove(0, 1))
        assert state.is_terminal()
        assert state.winner == 1
        assert list(state.utilities()) == [0.0, 1.0, -1.0]

    def test_misere_last_object_loses(self):
        state = Nim(heaps=(1,), misere=True).initial_state().apply(NimMove(0, 1))
        assert state.winner == 2
        assert list(state.utilities()) == [0.0, -1.0, 1.0]

    def test_three_player_utilities(self):
        state = NimState(heaps=(0, 0), players=3, to_move=3, last_mover=2)
        utils = state.utilities()
        assert utils[2] == 1.0
        assert utils[1] == utils[3] == pytest.approx(-0.5)
        assert state.winner == 2

    def test_player_count_validation(self):
        with pytest.raises(ValueError):
            Nim(num_players=1)
        with pytest.raises(ValueError):
            Nim(heaps=(3, -1))
