import os
import random
import tempfile
import unittest
from dataclasses import replace

from ludo_rules import (
    AIDifficulty,
    Color,
    GameConfig,
    GameMode,
    GameStatus,
    GameStore,
    LudoEngine,
    Scheduler,
    config,
    create_initial_state,
    validate_state,
)


class FixedDice:
    def __init__(self, *values):
        self.values = list(values)

    def randint(self, low, high):
        return self.values.pop(0)

    def random(self):
        return 0.99


LOCAL = GameConfig(mode=GameMode.LOCAL, player_count=2)
VS_AI = GameConfig(
    mode=GameMode.SINGLE,
    player_count=2,
    ai_difficulty=AIDifficulty.MEDIUM,
    human_player_color=Color.GREEN,
)


class TestHumanTurns(unittest.TestCase):
    def test_roll_lands_after_dice_delay(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(4))
        engine.start_game()
        self.assertTrue(engine.can_roll)

        self.assertTrue(engine.roll_dice())
        self.assertTrue(engine.state.is_rolling)
        self.assertFalse(engine.roll_dice())

        engine.advance(config.DICE_ROLL_DELAY / 2)
        self.assertTrue(engine.state.is_rolling)
        engine.advance(config.DICE_ROLL_DELAY)
        self.assertFalse(engine.state.is_rolling)
        self.assertEqual(engine.state.dice_value, 4)

    def test_turn_without_moves_is_skipped_later(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(3))
        engine.start_game()
        engine.roll_dice()
        engine.advance(config.DICE_ROLL_DELAY)
        self.assertEqual(engine.get_movable_tokens(), [])
        self.assertEqual(engine.current_player.color, Color.RED)

        engine.advance(config.SKIP_TURN_DELAY / 2)
        self.assertEqual(engine.current_player.color, Color.RED)
        engine.advance(config.SKIP_TURN_DELAY)
        self.assertEqual(engine.current_player.color, Color.GREEN)
        self.assertIsNone(engine.state.dice_value)

    def test_move_and_bonus_roll(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(6))
        engine.start_game()
        engine.roll_dice()
        engine.advance(config.DICE_ROLL_DELAY)
        self.assertEqual(len(engine.get_movable_tokens()), 4)

        self.assertTrue(engine.move_token("red-0"))
        self.assertEqual(engine.state.players[0].get_token("red-0").position, 0)
        self.assertEqual(engine.current_player.color, Color.RED)
        self.assertTrue(engine.can_roll)
        self.assertFalse(engine.move_token("red-0"))

    def test_rejected_action_keeps_state(self):
        engine = LudoEngine(LOCAL)
        before = engine.state
        self.assertFalse(engine.roll_dice())
        self.assertFalse(engine.move_token("red-0"))
        self.assertIs(engine.state, before)


class TestDeferredActions(unittest.TestCase):
    def test_reset_discards_pending_roll(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(5))
        engine.start_game()
        engine.roll_dice()
        version = engine.state.version

        self.assertTrue(engine.reset_game())
        engine.advance(10.0)
        self.assertEqual(engine.state.game_status, GameStatus.WAITING)
        self.assertFalse(engine.state.is_rolling)
        self.assertIsNone(engine.state.dice_value)
        self.assertGreater(engine.state.version, version)

    def test_close_discards_pending_roll(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(5))
        engine.start_game()
        engine.roll_dice()
        engine.close()
        engine.advance(10.0)
        self.assertTrue(engine.state.is_rolling)
        self.assertFalse(engine.start_game())

    def test_restored_rolling_state_resolves(self):
        state = replace(
            create_initial_state(LOCAL), game_status=GameStatus.PLAYING, is_rolling=True
        )
        engine = LudoEngine(LOCAL, restored_state=state, rng=FixedDice(2))
        engine.advance(config.DICE_ROLL_DELAY)
        self.assertEqual(engine.state.dice_value, 2)


class TestSharedScheduler(unittest.TestCase):
    def test_reset_leaves_other_engine_actions_alone(self):
        scheduler = Scheduler()
        first = LudoEngine(LOCAL, rng=FixedDice(6), scheduler=scheduler)
        second = LudoEngine(LOCAL, rng=FixedDice(4), scheduler=scheduler)
        first.start_game()
        second.start_game()

        first.roll_dice()
        second.reset_game()
        first.advance(10.0)

        self.assertFalse(first.state.is_rolling)
        self.assertEqual(first.state.dice_value, 6)
        self.assertEqual(second.state.game_status, GameStatus.WAITING)


class TestRestoredState(unittest.TestCase):
    def test_invalid_restored_state_starts_fresh(self):
        broken = replace(
            create_initial_state(LOCAL), game_status=GameStatus.PLAYING, dice_value=9
        )
        engine = LudoEngine(LOCAL, restored_state=broken)
        self.assertEqual(engine.state.game_status, GameStatus.WAITING)
        self.assertIsNone(engine.state.dice_value)
        self.assertTrue(engine.start_game())

    def test_restored_state_for_other_player_count_starts_fresh(self):
        four_players = GameConfig(mode=GameMode.LOCAL, player_count=4)
        state = replace(create_initial_state(four_players), game_status=GameStatus.PLAYING)
        engine = LudoEngine(LOCAL, restored_state=state)
        self.assertEqual(engine.state.player_count, 2)
        self.assertEqual(engine.state.game_status, GameStatus.WAITING)


class TestAITurns(unittest.TestCase):
    def test_ai_seat_cannot_be_rolled_by_hand(self):
        engine = LudoEngine(VS_AI, rng=random.Random(3))
        engine.start_game()
        self.assertTrue(engine.current_player.is_ai)
        self.assertFalse(engine.can_roll)

    def test_ai_plays_until_human_turn(self):
        engine = LudoEngine(VS_AI, rng=random.Random(3))
        seen = []
        engine.subscribe(lambda prev, cur: seen.append(cur))
        engine.start_game()
        engine.run_until_idle()

        self.assertEqual(engine.current_player.color, Color.GREEN)
        self.assertTrue(engine.can_roll)
        self.assertGreater(len(seen), 2)
        for state in seen:
            validate_state(state)
        versions = [s.version for s in seen]
        self.assertEqual(versions, sorted(versions))

    def test_ai_waits_for_its_delay(self):
        engine = LudoEngine(VS_AI, rng=random.Random(3))
        engine.start_game()
        engine.advance(0.1)
        self.assertFalse(engine.state.is_rolling)
        engine.advance(1.0)
        self.assertTrue(engine.state.is_rolling or engine.state.dice_value is not None)


class TestListeners(unittest.TestCase):
    def test_subscribe_and_unsubscribe(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(4))
        calls = []
        unsubscribe = engine.subscribe(lambda prev, cur: calls.append((prev, cur)))

        engine.start_game()
        self.assertEqual(len(calls), 1)
        prev, cur = calls[0]
        self.assertEqual(prev.game_status, GameStatus.WAITING)
        self.assertIs(cur, engine.state)

        unsubscribe()
        engine.roll_dice()
        self.assertEqual(len(calls), 1)

    def test_failing_listener_does_not_stall_ai(self):
        engine = LudoEngine(VS_AI, rng=random.Random(3))
        calls = []

        def flaky(prev, cur):
            calls.append(cur)
            if len(calls) == 1:
                raise RuntimeError("sound backend unavailable")

        seen = []
        engine.subscribe(flaky)
        engine.subscribe(lambda prev, cur: seen.append(cur))

        self.assertTrue(engine.start_game())
        self.assertEqual(len(seen), 1)
        engine.advance(100.0)
        self.assertEqual(engine.current_player.color, Color.GREEN)
        self.assertTrue(engine.can_roll)
        self.assertGreater(len(calls), 1)


class TestSessionPersistence(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = GameStore(save_path=os.path.join(self.tmp.name, "game.json"))

    def tearDown(self):
        self.tmp.cleanup()

    def test_playing_state_is_saved_and_reset_clears_it(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(6), store=self.store)
        engine.start_game()
        self.assertTrue(os.path.exists(self.store.save_path))
        engine.reset_game()
        self.assertFalse(os.path.exists(self.store.save_path))

    def test_reset_after_close_keeps_save(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(6), store=self.store)
        engine.start_game()
        engine.close()
        self.assertFalse(engine.reset_game())
        self.assertTrue(os.path.exists(self.store.save_path))

    def test_resume(self):
        engine = LudoEngine(LOCAL, rng=FixedDice(6), store=self.store)
        engine.start_game()
        engine.roll_dice()
        engine.advance(config.DICE_ROLL_DELAY)
        engine.move_token("red-0")

        resumed = LudoEngine.resume(self.store)
        self.assertIsNotNone(resumed)
        self.assertEqual(resumed.state, engine.state)
        self.assertEqual(resumed.game_config, LOCAL)

    def test_nothing_to_resume_before_start(self):
        self.store.save(create_initial_state(LOCAL), LOCAL)
        self.assertIsNone(LudoEngine.resume(self.store))
        self.assertIsNone(LudoEngine.resume(GameStore(save_path=os.path.join(self.tmp.name, "none.json"))))


if __name__ == "__main__":
    unittest.main()
