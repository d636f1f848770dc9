"""
Tests for the TurnDriver.

Tests:
- Plays a game to completion through a LocalClient
- Waits while the game is forming or others still have to move
- Transport failures are retried without double submission
- Engine rejections and NoLegalMove stop the driver
"""

from ..bots import BasePolicy, CornerPolicy, PlayerPolicy, RandomPolicy
from ..engine_core import GameEngine, GameConfig, GamePhase, ErrorCode, Move
from ..session import DriverOutcome, GameClient, LocalClient, TransportError, TurnDriver


class FlakyClient(GameClient):
    """
    Wraps a LocalClient and fails some submissions.

    fail_before: failures raised before the move reaches the engine
    fail_after: failures raised after the engine recorded the move
    """

    def __init__(self, inner: GameClient, fail_before: int = 0, fail_after: int = 0):
        self.inner = inner
        self.fail_before = fail_before
        self.fail_after = fail_after
        self.delivered = []

    def query_state(self):
        return self.inner.query_state()

    def submit_turn(self, player_id, move):
        if self.fail_before > 0:
            self.fail_before -= 1
            raise TransportError("connection reset")
        self.inner.submit_turn(player_id, move)
        self.delivered.append(move)
        if self.fail_after > 0:
            self.fail_after -= 1
            raise TransportError("response lost")


class FixedPolicy(PlayerPolicy):
    """Always proposes the same move."""

    def __init__(self, move: Move):
        self.move = move

    def decide(self, view):
        return self.move


def solo_engine(rounds=2, dimensions=(3, 3), forming_rounds=0, start=True):
    engine = GameEngine(GameConfig(dimensions=dimensions, forming_rounds=forming_rounds, rounds=rounds))
    engine.register_player("alice", payment=0).unwrap()
    if start:
        engine.start_game().unwrap()
    return engine


class Sleeper:
    """Records sleeps and runs a hook on each one."""

    def __init__(self, hook=None):
        self.calls = []
        self.hook = hook

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self.hook:
            self.hook()


class TestDriverHappyPath:
    """Drivers that play until the game finishes."""

    def test_plays_until_finished(self):
        engine = solo_engine(rounds=3)
        driver = TurnDriver(LocalClient(engine), "alice", CornerPolicy(), sleep=Sleeper())

        report = driver.run()

        assert report.outcome == DriverOutcome.GAME_FINISHED
        assert report.turns_submitted == 3
        assert report.retries == 0
        state = engine.query_state()
        assert state.phase == GamePhase.FINISHED
        assert state.get_player("alice").score == 3

    def test_waits_for_forming(self):
        """The driver polls while the game is forming."""
        engine = solo_engine(rounds=1, forming_rounds=2, start=False)

        def clock():
            engine.tick().unwrap()
            if engine.query_state().forming_rounds_remaining == 0:
                engine.start_game().unwrap()

        sleeper = Sleeper(clock)
        driver = TurnDriver(LocalClient(engine), "alice", BasePolicy(), poll_interval=1.0, sleep=sleeper)

        report = driver.run()

        assert report.outcome == DriverOutcome.GAME_FINISHED
        assert report.turns_submitted == 1
        assert sleeper.calls == [1.0, 1.0]

    def test_waits_for_other_players(self):
        """After moving, the driver polls until the round closes."""
        engine = GameEngine(GameConfig(dimensions=(3, 3), rounds=2))
        engine.register_player("alice", payment=0).unwrap()
        engine.register_player("bob", payment=0).unwrap()
        engine.start_game().unwrap()
        bob = BasePolicy()

        def bob_moves():
            state = engine.query_state()
            if state.phase == GamePhase.ACTIVE and not state.get_player("bob").has_moved:
                engine.submit_turn("bob", bob.decide(state.view_for("bob"))).unwrap()

        driver = TurnDriver(LocalClient(engine), "alice", CornerPolicy(), sleep=Sleeper(bob_moves))
        report = driver.run()

        assert report.outcome == DriverOutcome.GAME_FINISHED
        assert report.turns_submitted == 2
        assert engine.query_state().get_player("bob").turns_taken == 2

    def test_max_turns(self):
        engine = solo_engine(rounds=5)
        driver = TurnDriver(LocalClient(engine), "alice", CornerPolicy(), max_turns=2, sleep=Sleeper())

        report = driver.run()

        assert report.outcome == DriverOutcome.STOPPED
        assert report.turns_submitted == 2
        assert engine.query_state().phase == GamePhase.ACTIVE


class TestDriverRetries:
    """Transient failures are retried with backoff."""

    def test_failure_before_delivery_is_retried(self):
        engine = solo_engine(rounds=2)
        client = FlakyClient(LocalClient(engine), fail_before=2)
        sleeper = Sleeper()
        driver = TurnDriver(client, "alice", CornerPolicy(), backoff_initial=0.5, sleep=sleeper)

        report = driver.run()

        assert report.outcome == DriverOutcome.GAME_FINISHED
        assert report.retries == 2
        assert sleeper.calls == [0.5, 1.0]
        assert len(client.delivered) == 2
        assert engine.query_state().get_player("alice").turns_taken == 2

    def test_lost_response_is_not_resubmitted(self):
        """A move the engine recorded is never sent a second time."""
        engine = solo_engine(rounds=2)
        client = FlakyClient(LocalClient(engine), fail_after=1)
        driver = TurnDriver(client, "alice", CornerPolicy(), sleep=Sleeper())

        report = driver.run()

        assert report.outcome == DriverOutcome.GAME_FINISHED
        assert report.retries == 1
        assert report.turns_submitted == 2
        assert len(client.delivered) == 2
        assert engine.query_state().get_player("alice").turns_taken == 2

    def test_backoff_is_capped(self):
        engine = solo_engine(rounds=1)
        client = FlakyClient(LocalClient(engine), fail_before=4)
        sleeper = Sleeper()
        driver = TurnDriver(
            client, "alice", CornerPolicy(),
            backoff_initial=1.0, backoff_max=3.0, sleep=sleeper,
        )

        driver.run()

        assert sleeper.calls == [1.0, 2.0, 3.0, 3.0]


class TestDriverStops:
    """Conditions that end a driver early."""

    def test_rejection_stops_driver(self):
        engine = solo_engine(rounds=2)
        driver = TurnDriver(LocalClient(engine), "alice", FixedPolicy(Move.to(2, 2)), sleep=Sleeper())

        report = driver.run()

        assert report.outcome == DriverOutcome.REJECTED
        assert report.error_code == ErrorCode.ILLEGAL_MOVE
        assert report.turns_submitted == 0
        assert engine.query_state().grid.claimed_count() == 0

    def test_no_legal_move(self):
        """On a 1x1 grid there is nothing left after the first turn."""
        engine = solo_engine(rounds=3, dimensions=(1, 1))
        driver = TurnDriver(LocalClient(engine), "alice", RandomPolicy(seed=0), sleep=Sleeper())

        report = driver.run()

        assert report.outcome == DriverOutcome.NO_LEGAL_MOVE
        assert report.error_code == ErrorCode.NO_LEGAL_MOVE
        assert report.turns_submitted == 1
        assert engine.query_state().phase == GamePhase.ACTIVE

    def test_not_registered(self):
        engine = solo_engine(rounds=2)
        driver = TurnDriver(LocalClient(engine), "mallory", CornerPolicy(), sleep=Sleeper())

        assert driver.run().outcome == DriverOutcome.NOT_REGISTERED

    def test_stop(self):
        engine = solo_engine(rounds=2, start=False)
        driver = None

        def stop():
            driver.stop()

        driver = TurnDriver(LocalClient(engine), "alice", CornerPolicy(), sleep=Sleeper(stop))
        report = driver.run()

        assert report.outcome == DriverOutcome.STOPPED
        assert report.turns_submitted == 0
