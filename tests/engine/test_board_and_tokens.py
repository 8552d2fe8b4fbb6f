import unittest

import numpy as np

from builders import force_positions, new_game
from ludo_rules import (
    AIDifficulty,
    Board,
    Color,
    GameConfig,
    GameMode,
    GameStatus,
    TokenState,
    absolute_position,
    create_initial_state,
    is_safe_square,
)
from ludo_rules.board import (
    home_stretch_index,
    is_start_square,
    relative_position,
    start_square,
    start_square_color,
)
from ludo_rules.token import Token


class TestPathModel(unittest.TestCase):
    def test_absolute_position_uses_color_offset(self):
        self.assertEqual(absolute_position(Color.RED, 5), 5)
        self.assertEqual(absolute_position(Color.GREEN, 0), 13)
        self.assertEqual(absolute_position(Color.YELLOW, 30), 4)
        self.assertEqual(absolute_position(Color.BLUE, 20), 7)

    def test_off_ring_positions_have_no_absolute(self):
        for pos in (-1, 52, 57, 58):
            self.assertEqual(absolute_position(Color.GREEN, pos), -1)

    def test_relative_position_inverts_absolute(self):
        for color in Color.seat_order():
            for rel in (0, 12, 38, 51):
                self.assertEqual(relative_position(color, absolute_position(color, rel)), rel)

    def test_safe_and_start_cells(self):
        self.assertEqual(
            sorted(a for a in range(52) if is_safe_square(a)),
            [0, 8, 13, 21, 26, 34, 39, 47],
        )
        for color in Color.seat_order():
            self.assertTrue(is_start_square(start_square(color)))
            self.assertTrue(is_safe_square(start_square(color)))
            self.assertEqual(start_square_color(start_square(color)), color)
        self.assertIsNone(start_square_color(8))
        self.assertFalse(is_start_square(8))

    def test_home_stretch_index(self):
        self.assertEqual(home_stretch_index(52), 0)
        self.assertEqual(home_stretch_index(54), 2)
        self.assertEqual(home_stretch_index(57), 5)
        self.assertEqual(home_stretch_index(51), -1)
        self.assertEqual(home_stretch_index(58), -1)


class TestTokens(unittest.TestCase):
    def test_state_follows_position(self):
        token = Token(id="red-0", color=Color.RED)
        self.assertTrue(token.is_in_home())
        self.assertEqual(token.move_to(0).state, TokenState.ACTIVE)
        self.assertTrue(token.move_to(51).is_on_ring())
        self.assertTrue(token.move_to(57).is_in_home_stretch())
        self.assertEqual(token.move_to(58).state, TokenState.FINISHED)
        sent = token.move_to(20).send_home()
        self.assertEqual((sent.position, sent.state), (-1, TokenState.HOME))

    def test_moves_do_not_mutate(self):
        token = Token(id="blue-3", color=Color.BLUE)
        token.move_to(10)
        self.assertEqual(token.position, -1)
        self.assertEqual(token.slot, 3)

    def test_finished_tokens_recounted(self):
        state = force_positions(new_game(), {"red-0": 58, "red-1": 58, "red-2": 40})
        red = state.players[0]
        self.assertEqual(red.finished_tokens, 2)
        self.assertFalse(red.has_won())
        red = red.with_token(red.get_token("red-0").send_home())
        self.assertEqual(red.finished_tokens, 1)


class TestInitialState(unittest.TestCase):
    def test_single_mode_seats(self):
        cfg = GameConfig(
            mode=GameMode.SINGLE,
            player_count=3,
            ai_difficulty=AIDifficulty.HARD,
            human_player_color=Color.GREEN,
        )
        state = create_initial_state(cfg)
        self.assertEqual([p.color for p in state.players], [Color.RED, Color.GREEN, Color.YELLOW])
        self.assertEqual([p.is_ai for p in state.players], [True, False, True])
        self.assertEqual(state.players[1].name, "You")
        self.assertEqual(state.players[0].name, "Player red")
        self.assertEqual(state.players[0].ai_difficulty, AIDifficulty.HARD)
        self.assertIsNone(state.players[1].ai_difficulty)
        self.assertEqual(state.game_status, GameStatus.WAITING)
        self.assertIsNone(state.dice_value)
        for player in state.players:
            self.assertEqual([t.id for t in player.tokens], [f"{player.color.value}-{i}" for i in range(4)])
            self.assertTrue(all(t.is_in_home() for t in player.tokens))

    def test_local_mode_has_no_ai(self):
        state = create_initial_state(GameConfig(mode=GameMode.LOCAL, player_count=4))
        self.assertFalse(any(p.is_ai for p in state.players))

    def test_invalid_player_count(self):
        with self.assertRaises(ValueError):
            GameConfig(player_count=5)
        with self.assertRaises(ValueError):
            GameConfig(mode="online")

    def test_config_accepts_strings(self):
        cfg = GameConfig(mode="single", player_count=2, ai_difficulty="expert", human_player_color="blue")
        self.assertEqual(cfg.mode, GameMode.SINGLE)
        self.assertEqual(cfg.ai_difficulty, AIDifficulty.EXPERT)
        self.assertEqual(GameConfig.from_dict(cfg.to_dict()), cfg)


class TestBoardOccupancy(unittest.TestCase):
    def test_ring_occupancy_counts(self):
        state = force_positions(
            new_game(),
            {"red-0": 5, "red-1": 5, "red-2": 53, "green-0": 0},
        )
        board = Board(state.players)
        counts = board.ring_occupancy()
        self.assertEqual(counts.shape, (52,))
        self.assertEqual(int(counts[5]), 2)
        self.assertEqual(int(counts[13]), 1)
        self.assertEqual(int(counts.sum()), 3)  # home stretch is off the ring
        np.testing.assert_array_equal(
            board.ring_occupancy(exclude_color=Color.RED), board.ring_occupancy(only_color=Color.GREEN)
        )
        self.assertEqual(int(board.ring_occupancy(only_color=Color.RED, exclude_token_id="red-0")[5]), 1)
        self.assertEqual([t.id for t in board.tokens_at_absolute(13)], ["green-0"])


if __name__ == "__main__":
    unittest.main()
