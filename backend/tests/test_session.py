"""Tests for game sessions and the session store."""
import random

import pytest

from hexpull.core.errors import InvalidDirectionError
from hexpull.core.session import GameSession, SessionStore, get_session_store
from hexpull.models.board import RotationMode, TapAction


@pytest.fixture
def session():
    """Seeded 7x7 session."""
    return GameSession.new(columns=7, rows=7, seed=5)


@pytest.fixture
def crossing_session(crossing_board):
    return GameSession(crossing_board, rng=random.Random(1))


class TestNew:
    """Test cases for session creation."""

    def test_board_and_patterns_ready(self, session):
        assert session.board.on_board_count == 49
        assert len(session.patterns.records()) == 49
        assert len(session.board_id) == 32

    def test_same_seed_same_board(self):
        a = GameSession.new(columns=6, rows=6, seed=9)
        b = GameSession.new(columns=6, rows=6, seed=9)
        assert a.board.to_dict() == b.board.to_dict()

    def test_invalid_default_direction(self):
        with pytest.raises(InvalidDirectionError):
            GameSession.new(columns=3, rows=3, default_direction=0)


class TestPull:
    """Test cases for GameSession.pull."""

    def test_pull_changes_board(self, session):
        result = session.pull(24, 1, RotationMode.STRAIGHT)
        assert result.changed
        assert result.action == TapAction.PULL
        assert session.board.tile(24).removed_index == 0
        assert session.board.on_board_count == 49
        assert 24 not in {r.index for r in session.patterns.records()}

    def test_pull_removed_tile_is_noop(self, session):
        session.pull(24)
        before = session.board.to_dict()
        result = session.pull(24)
        assert not result.changed
        assert session.board.to_dict() == before

    def test_invalid_direction_leaves_board_untouched(self, session):
        before = session.board.to_dict()
        with pytest.raises(InvalidDirectionError):
            session.pull(24, 7)
        assert session.board.to_dict() == before

    def test_unknown_tile(self, session):
        with pytest.raises(KeyError):
            session.pull(999)

    def test_rotation_accepts_strings(self, session):
        result = session.pull(24, 2, "counterclockwise")
        assert result.changed

    def test_random_pulls_keep_board_consistent(self, session):
        rng = random.Random(123)
        rotations = list(RotationMode)
        for turn in range(60):
            on_board = session.board.on_board_tiles()
            target = rng.choice(on_board).index
            session.pull(target, rng.randint(1, 6), rng.choice(rotations))

            session.board.check_consistency()
            assert session.board.on_board_count == 49
            assert session.board.removed_count == turn + 1
            assert len(session.patterns.records()) == 49

        indexes = [t.index for t in session.board.tiles()]
        assert len(indexes) == len(set(indexes)) == 49 + 60


class TestTap:
    """Test cases for tap dispatch."""

    @pytest.mark.parametrize("action", ["line", "ring", "select"])
    def test_non_mutating_actions(self, session, action):
        before = session.board.to_dict()
        result = session.tap(10, action)
        assert not result.changed
        assert session.board.to_dict() == before

    def test_tap_pull(self, session):
        assert session.tap(10, TapAction.PULL, 3).changed

    def test_tap_collect(self, crossing_session):
        selected = crossing_session.board.tile_at((2, 3)).index
        result = crossing_session.tap(selected, "collect")
        assert result.changed
        assert result.collection.powerup.level == 2


class TestCollectAndClear:
    """Test cases for collecting lines and clearing the queue."""

    def test_collect_then_clear(self, crossing_session):
        board = crossing_session.board
        selected = board.tile_at((2, 3)).index

        result = crossing_session.collect(selected)
        assert len(result.collection.queued) == 8

        cleared = crossing_session.clear_queued(1)
        assert cleared.changed
        assert len(cleared.removals) == 8
        assert [r.removed_rank for r in cleared.removals] == list(range(8))
        assert board.removed_count == 8
        assert board.on_board_count == 35
        assert not any(t.queued_for_collection for t in board.on_board_tiles())

        carrier = board.tile(selected)
        assert carrier.on_board
        assert carrier.powerup is not None
        board.check_consistency()

    def test_clear_without_queue_is_noop(self, session):
        assert not session.clear_queued().changed

    def test_collect_without_lines_is_noop(self, flower_board):
        session = GameSession(flower_board)
        before = session.board.to_dict()
        assert session.patterns.get(flower_board.tile_at((3, 3)).index).core
        assert not session.collect(flower_board.tile_at((3, 3)).index).changed
        assert session.board.to_dict() == before

    def test_pulling_queued_tile_clears_flag(self, crossing_session):
        board = crossing_session.board
        crossing_session.collect(board.tile_at((2, 3)).index)
        queued = board.tile_at((2, 1)).index
        crossing_session.pull(queued)
        assert not board.tile(queued).queued_for_collection

    def test_snapshot(self, crossing_session):
        snapshot = crossing_session.snapshot()
        assert set(snapshot) == {"board_id", "tiles", "removed", "patterns"}
        assert len(snapshot["tiles"]) == len(snapshot["patterns"]) == 35


class TestSessionStore:
    """Test cases for SessionStore."""

    def test_create_get_delete(self):
        store = SessionStore()
        session = store.create(columns=3, rows=3, seed=1)
        assert session.board_id in store
        assert store.get(session.board_id) is session
        assert len(store) == 1

        store.delete(session.board_id)
        assert session.board_id not in store
        with pytest.raises(KeyError):
            store.get(session.board_id)

    def test_delete_unknown(self):
        with pytest.raises(KeyError):
            SessionStore().delete("missing")

    def test_singleton(self):
        assert get_session_store() is get_session_store()
