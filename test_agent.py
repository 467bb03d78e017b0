"""Tests for the UCT agent, its configuration, errors and matches."""

import json
import threading

import pytest

from uct_ai.arena import RandomAgent, evaluate_agents, play_match
from uct_ai.core import Nim, TicTacToe
from uct_ai.errors import (
    ConfigurationError, EmptyTreeError, UCTError, UnsupportedGameKind
)
from uct_ai.mcts import (
    UCTAgent, UCTAgentFactory, UCTConfig, check_game_supported, supports_game
)


class DiceGame(TicTacToe):
    """Tic-tac-toe pretending to contain chance events."""
    name = "Dice"

    @property
    def is_stochastic(self) -> bool:
        return True


class SimultaneousGame(TicTacToe):
    """Tic-tac-toe pretending both players move at once."""
    name = "Simultaneous"

    @property
    def is_alternating_move(self) -> bool:
        return False


class TestUCTConfig:
    """Tests for UCTConfig."""

    def test_defaults(self):
        config = UCTConfig()
        assert config.time_bounded
        assert not config.iteration_bounded
        assert config.seed is None
        assert not config.keep_tree

    def test_both_budgets_unbounded_rejected(self):
        with pytest.raises(ConfigurationError):
            UCTConfig(max_seconds=-1, max_iterations=-1)
        # Also usable as a plain ValueError
        with pytest.raises(ValueError):
            UCTConfig(max_seconds=0, max_iterations=-5)

    def test_negative_seed_rejected(self):
        with pytest.raises(ConfigurationError):
            UCTConfig(seed=-1)

    def test_presets(self):
        assert UCTConfig.default() == UCTConfig()
        assert UCTConfig.fast().max_iterations == 200
        assert not UCTConfig.strong().iteration_bounded
        only = UCTConfig.iterations_only(64, seed=3)
        assert not only.time_bounded
        assert only.max_iterations == 64
        assert only.seed == 3

    def test_dict_round_trip_ignores_unknown_keys(self):
        config = UCTConfig.from_dict({"max_iterations": 10, "seed": 1, "bogus": True})
        assert config.max_iterations == 10
        assert config.to_dict() == {
            "max_seconds": 1.0,
            "max_iterations": 10,
            "seed": 1,
            "keep_tree": False,
        }
        assert "max_iterations=10" in str(config)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_codes_and_context(self):
        error = EmptyTreeError("nothing to play", context={"visits": 0})
        assert isinstance(error, UCTError)
        assert error.code == "EMPTY_TREE"
        assert str(error) == "[EMPTY_TREE] nothing to play (visits=0)"
        assert error.to_dict() == {
            "code": "EMPTY_TREE",
            "message": "nothing to play",
            "context": {"visits": 0},
        }

    def test_custom_code(self):
        error = UCTError("boom", code="CUSTOM")
        assert str(error) == "[CUSTOM] boom"


class TestCapabilityCheck:
    """Tests for supports_game and check_game_supported."""

    def test_deterministic_alternating_games_supported(self):
        assert supports_game(TicTacToe())
        assert supports_game(Nim(num_players=4))
        check_game_supported(TicTacToe())

    def test_stochastic_rejected(self):
        assert not supports_game(DiceGame())
        with pytest.raises(UnsupportedGameKind):
            check_game_supported(DiceGame())

    def test_simultaneous_rejected(self):
        assert not supports_game(SimultaneousGame())
        with pytest.raises(UnsupportedGameKind):
            check_game_supported(SimultaneousGame())

    def test_agent_refuses_unsupported_game(self):
        agent = UCTAgent(UCTConfig.iterations_only(10))
        assert not agent.supports_game(DiceGame())
        with pytest.raises(UnsupportedGameKind):
            agent.select_action(DiceGame(), DiceGame().initial_state())


class TestUCTAgent:
    """Tests for UCTAgent."""

    def test_select_action_records_statistics(self):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(100, seed=1))
        move = agent.select_action(game, game.initial_state())

        assert move in range(9)
        assert agent.last_stats["iterations"] == 100
        assert len(agent.action_history) == 1
        assert agent.action_history[0][0] == move
        assert agent.last_tree is None

    def test_explicit_budget_overrides_config(self):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(1000, seed=1))
        agent.select_action(game, game.initial_state(), max_seconds=-1, max_iterations=50)
        assert agent.last_stats["iterations"] == 50

    def test_same_seed_same_moves(self):
        game = TicTacToe()

        def play(seed):
            agents = [UCTAgent(UCTConfig.iterations_only(150, seed=seed)),
                      UCTAgent(UCTConfig.iterations_only(150, seed=seed + 1))]
            _, moves = play_match(game, agents)
            return moves

        assert play(10) == play(10)

    def test_searches_use_independent_streams(self):
        agent = UCTAgent(UCTConfig.iterations_only(10, seed=5))
        a = agent.new_rng().integers(1 << 30, size=4)
        b = agent.new_rng().integers(1 << 30, size=4)
        assert list(a) != list(b)

    def test_single_legal_move_is_still_searched(self):
        game = TicTacToe()
        state = TicTacToe.from_string("XOX XOO OX.")
        agent = UCTAgent(UCTConfig.iterations_only(20, seed=0))
        assert agent.select_action(game, state) == 8
        assert agent.last_stats["iterations"] == 20

    def test_terminal_state_raises(self):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(20))
        with pytest.raises(EmptyTreeError):
            agent.select_action(game, TicTacToe.from_string("XXX OO. ..."))

    def test_interrupt_flag(self):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(20))
        assert not agent.wants_interrupt

        agent.interrupt()
        assert agent.wants_interrupt
        with pytest.raises(EmptyTreeError):
            agent.select_action(game, game.initial_state())

        agent.clear_interrupt()
        assert agent.select_action(game, game.initial_state()) in range(9)

        agent.wants_interrupt = True
        assert agent.wants_interrupt
        agent.wants_interrupt = False
        assert not agent.wants_interrupt

    def test_interrupt_stops_unbounded_search(self):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(10))
        timer = threading.Timer(0.05, agent.interrupt)
        timer.start()
        try:
            move = agent.select_action(game, game.initial_state(),
                                       max_seconds=-1, max_iterations=-1)
        finally:
            timer.cancel()
        assert move in range(9)
        assert agent.last_stats["stop_reason"] == "INTERRUPTED"

    def test_keep_tree_enables_analysis(self):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig(max_seconds=-1, max_iterations=300, seed=2, keep_tree=True))
        assert agent.get_principal_variation() == []
        assert agent.get_action_statistics() == {}

        move = agent.select_action(game, game.initial_state())

        assert agent.last_tree is not None
        assert agent.last_tree.root.visit_count == 300
        assert agent.get_principal_variation()[0][0] == move
        stats = agent.get_action_statistics()
        assert sum(s["visits"] for s in stats.values()) == 300

        agent.reset_statistics()
        assert agent.last_tree is None
        assert agent.action_history == []

    def test_save_statistics(self, tmp_path):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(30, seed=4), name="Saver")
        agent.select_action(game, game.initial_state())

        path = tmp_path / "stats.json"
        agent.save_statistics(str(path))
        data = json.loads(path.read_text())

        assert data["agent_name"] == "Saver"
        assert data["total_actions"] == 1
        assert data["config"]["max_iterations"] == 30
        assert data["history"][0]["stats"]["iterations"] == 30
        assert "action_visits" not in data["history"][0]["stats"]

    def test_verbose_prints_summary(self, capsys):
        game = TicTacToe()
        agent = UCTAgent(UCTConfig.iterations_only(30, seed=4), name="Talker", verbose=True)
        agent.select_action(game, game.initial_state())
        out = capsys.readouterr().out
        assert "Talker selected" in out
        assert "Iterations: 30" in out

    def test_str(self):
        agent = UCTAgent(UCTConfig(max_seconds=2.0, max_iterations=100), name="A")
        assert str(agent) == "A (UCT, 2.0s, 100 iterations)"

    def test_factory(self):
        assert UCTAgentFactory.create_fast().config == UCTConfig.fast()
        assert UCTAgentFactory.create_standard().config == UCTConfig.default()
        assert UCTAgentFactory.create_strong().config == UCTConfig.strong()
        custom = UCTAgentFactory.create_custom(max_iterations=42, seed=9, name="Mine")
        assert custom.name == "Mine"
        assert custom.config.max_iterations == 42
        assert not custom.config.time_bounded


class TestArena:
    """Tests for matches between agents."""

    def test_random_agent_plays_legal_moves(self):
        game = Nim(heaps=(2, 2), num_players=3)
        agents = [RandomAgent(seed=i) for i in range(3)]
        final, moves = play_match(game, agents)
        assert final.is_terminal()
        assert sum(m.count for m in moves) == 4

    def test_wrong_agent_count(self):
        with pytest.raises(ValueError):
            play_match(TicTacToe(), [RandomAgent()])

    def test_uct_beats_random(self):
        game = TicTacToe()
        agents = [UCTAgent(UCTConfig.iterations_only(300, seed=0), name="UCT"),
                  RandomAgent(name="Random", seed=0)]
        results = evaluate_agents(game, agents, num_games=10, show_progress=False)

        uct, rand = results["agents"]
        assert results["games"] == 10
        assert uct["wins"] + rand["wins"] + results["draws"] == 10
        assert uct["wins"] > rand["wins"]
        assert uct["mean_utility"] > 0

    def test_rotation_seats_every_agent_first(self):
        class Recorder(RandomAgent):
            def __init__(self, name):
                super().__init__(name=name, seed=1)
                self.first_moves = 0

            def select_action(self, game, state):
                if state == game.initial_state():
                    self.first_moves += 1
                return super().select_action(game, state)

        game = TicTacToe()
        agents = [Recorder("a"), Recorder("b")]
        evaluate_agents(game, agents, num_games=4, show_progress=False)
        assert [a.first_moves for a in agents] == [2, 2]


class TestCommandLine:
    """Tests for the command line helpers."""

    def test_parse_move(self):
        from uct_ai.core import NimMove
        from uct_ai.play import parse_move

        assert parse_move(TicTacToe(), "5") == 4
        assert parse_move(Nim(), "2 3") == NimMove(2, 3)
        with pytest.raises(ValueError):
            parse_move(Nim(), "2")
        with pytest.raises(ValueError):
            parse_move(TicTacToe(), "x")

    def test_watch_game_reaches_the_end(self, capsys):
        from uct_ai.play import parse_args, play_game

        args = parse_args(["--game", "nim", "--heaps", "2", "3", "--watch",
                           "--opponent", "random", "--seconds", "0",
                           "--iterations", "50", "--seed", "1"])
        final = play_game(args)
        assert final.is_terminal()
        assert "GAME OVER" in capsys.readouterr().out

    def test_evaluate_writes_results(self, tmp_path):
        from uct_ai.evaluate import main

        output = tmp_path / "results.json"
        main(["--games", "2", "--iterations", "20", "--seed", "0",
              "--output", str(output)])
        data = json.loads(output.read_text())
        assert data["games"] == 2
        assert len(data["agents"]) == 2
