import unittest

from builders import force_positions, new_game, with_dice
from ludo_rules import FinishEvent, GameStatus, Color, move_token, roll_dice, validate_state


class TestFinishing(unittest.TestCase):
    def test_single_finish_grants_bonus(self):
        state = with_dice(force_positions(new_game(), {"red-0": 55, "red-1": 10}), 3)
        after = move_token(state, "red-0")

        red = after.players[0]
        self.assertEqual(red.finished_tokens, 1)
        self.assertEqual(after.last_finish_event, FinishEvent(color=Color.RED, token_id="red-0"))
        self.assertEqual(after.current_player_index, 0)
        self.assertEqual(after.rankings, ())
        self.assertEqual(after.game_status, GameStatus.PLAYING)

    def test_two_player_game_ends_with_first_finisher(self):
        placements = {"red-0": 58, "red-1": 58, "red-2": 58, "red-3": 55}
        state = with_dice(force_positions(new_game(), placements), 3)
        after = move_token(state, "red-3")

        self.assertTrue(after.players[0].has_won())
        self.assertEqual(after.rankings, ("player-red",))
        self.assertEqual(after.winner, "player-red")
        self.assertEqual(after.game_status, GameStatus.FINISHED)
        self.assertEqual(after.last_finish_event.token_id, "red-3")
        validate_state(after)

    def test_finished_game_ignores_actions(self):
        placements = {"red-0": 58, "red-1": 58, "red-2": 58, "red-3": 55}
        after = move_token(with_dice(force_positions(new_game(), placements), 3), "red-3")
        self.assertIs(roll_dice(after, None), after)
        self.assertIs(move_token(after, "green-0"), after)


class TestThreePlayerRankings(unittest.TestCase):
    def setUp(self):
        placements = {"red-0": 58, "red-1": 58, "red-2": 58, "red-3": 55}
        placements.update({"green-0": 58, "green-1": 58, "green-2": 58, "green-3": 56})
        self.state = force_positions(new_game(player_count=3), placements)

    def test_ranks_accumulate_until_one_player_remains(self):
        first = move_token(with_dice(self.state, 3), "red-3")
        self.assertEqual(first.rankings, ("player-red",))
        self.assertEqual(first.winner, "player-red")
        self.assertEqual(first.game_status, GameStatus.PLAYING)
        # a finished player does not keep the turn despite the finish bonus
        self.assertEqual(first.current_player_index, 1)
        validate_state(first)

        second = move_token(with_dice(first, 2, current=1), "green-3")
        self.assertEqual(second.rankings, ("player-red", "player-green"))
        self.assertEqual(second.winner, "player-red")
        self.assertEqual(second.game_status, GameStatus.FINISHED)
        self.assertEqual(
            [p.color for p in second.ranked_players()], [Color.RED, Color.GREEN]
        )
        validate_state(second)

    def test_finished_seat_is_skipped_afterwards(self):
        first = move_token(with_dice(self.state, 3), "red-3")
        state = force_positions(first, {"green-3": 20, "yellow-0": 5})
        after = move_token(with_dice(state, 3, current=1), "green-3")
        self.assertEqual(after.current_player_index, 2)
        after = move_token(with_dice(after, 3, current=2), "yellow-0")
        self.assertEqual(after.current_player_index, 1)


if __name__ == "__main__":
    unittest.main()
