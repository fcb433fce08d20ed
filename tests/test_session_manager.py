"""SessionManager tests, including many games ticking concurrently."""

from __future__ import annotations

import asyncio

import pytest

from classic_snake.config import GameConfig
from classic_snake.engine import GameState
from classic_snake.events import EventRecord, GameEvent
from classic_snake.grid import Cell
from classic_snake.server.session_manager import SessionManager
from classic_snake.snake import Direction

_TINY = GameConfig(grid_width=5, grid_height=3, tick_interval_ms=10)


async def _wait_finished(manager: SessionManager, game_ids: list[str]) -> None:
    for _ in range(200):
        await asyncio.sleep(0.02)
        if all(manager.get_session(g).engine.is_finished for g in game_ids):
            return


class TestSessionLifecycle:
    def test_create_session(self):
        manager = SessionManager()
        session = manager.create_session(GameConfig())
        assert session.status == GameState.IDLE
        assert manager.get_session(session.game_id) is session
        assert len(manager.list_sessions()) == 1

    def test_unknown_game_raises_key_error(self):
        manager = SessionManager()
        with pytest.raises(KeyError, match="not found"):
            manager.record_score("missing", "alice")

    def test_negative_retention_rejected(self):
        with pytest.raises(ValueError, match=">= 0"):
            SessionManager(max_finished_sessions=-1)

    @pytest.mark.asyncio
    async def test_start_pause_direction(self):
        manager = SessionManager()
        session = manager.create_session(GameConfig(tick_interval_ms=500))
        assert await manager.start(session.game_id)
        assert not await manager.start(session.game_id)
        assert session.loop is not None and session.loop.running

        assert await manager.set_direction(session.game_id, Direction.UP)
        assert not await manager.set_direction(session.game_id, Direction.LEFT)
        assert await manager.set_paused(session.game_id, True)
        assert not await manager.set_direction(session.game_id, Direction.DOWN)
        await manager.cleanup()
        assert not session.loop.running

    @pytest.mark.asyncio
    async def test_events_queued_for_broadcast(self):
        manager = SessionManager()
        session = manager.create_session(GameConfig(tick_interval_ms=500))
        await manager.start(session.game_id)
        # Without clients the start broadcast still drains the queue.
        assert session.pending_events == []
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_new_game_stops_loop(self):
        manager = SessionManager()
        session = manager.create_session(GameConfig(tick_interval_ms=500))
        await manager.start(session.game_id)
        loop = session.loop
        await manager.new_game(session.game_id)
        assert session.loop is None
        assert not loop.running
        assert session.status == GameState.IDLE


class TestScores:
    @pytest.mark.asyncio
    async def test_record_once_per_round(self):
        manager = SessionManager()
        session = manager.create_session(_TINY)
        await manager.start(session.game_id)
        await _wait_finished(manager, [session.game_id])

        assert manager.record_score(session.game_id, "alice") == 1
        with pytest.raises(ValueError, match="already recorded"):
            manager.record_score(session.game_id, "alice")

        # A new round may record again once it finishes.
        await manager.start(session.game_id)
        assert not session.score_recorded
        await _wait_finished(manager, [session.game_id])
        assert manager.record_score(session.game_id, "bob") in (1, 2)
        await manager.cleanup()

    def test_record_requires_finished_game(self):
        manager = SessionManager()
        session = manager.create_session(GameConfig())
        with pytest.raises(ValueError, match="not finished"):
            manager.record_score(session.game_id, "alice")


class TestPruning:
    @pytest.mark.asyncio
    async def test_finished_sessions_pruned(self):
        manager = SessionManager(max_finished_sessions=0)
        first = manager.create_session(_TINY)
        await manager.start(first.game_id)
        await _wait_finished(manager, [first.game_id])
        await first.loop.wait()

        second = manager.create_session(_TINY)
        assert manager.get_session(first.game_id) is None
        assert manager.get_session(second.game_id) is second


class TestConcurrentGames:
    @pytest.mark.asyncio
    async def test_50_concurrent_games(self):
        """Run 50 games at once; every snake eventually hits a wall."""
        manager = SessionManager()
        game_ids = [
            manager.create_session(_TINY.with_overrides(seed=i)).game_id
            for i in range(50)
        ]
        for gid in game_ids:
            await manager.start(gid)

        await _wait_finished(manager, game_ids)

        finished = sum(
            1 for gid in game_ids
            if manager.get_session(gid).status == GameState.GAME_OVER
        )
        assert finished == 50, f"Only {finished}/50 games finished"
        await manager.cleanup()


def _live_loops() -> int:
    return sum(
        1 for task in asyncio.all_tasks()
        if not task.done() and task.get_coro().__qualname__ == "GameLoop._run"
    )


class TestLoopRecovery:
    @pytest.mark.asyncio
    async def test_start_resumes_game_after_loop_crash(self):
        manager = SessionManager()
        session = manager.create_session(
            GameConfig(grid_width=20, grid_height=10, tick_interval_ms=10, seed=0),
        )
        failures: list[EventRecord] = []

        def fail_on_first_meal(record: EventRecord) -> None:
            if record.event == GameEvent.SCORE_UPDATED and record.tick > 0 and not failures:
                failures.append(record)
                raise RuntimeError("listener failed")

        session.engine.events.subscribe(fail_on_first_meal)
        assert await manager.start(session.game_id)
        session.engine.food_spawner.position = Cell(4, 1)
        crashed = session.loop
        await asyncio.wait_for(crashed.wait(), timeout=2.0)

        engine = session.engine
        assert len(failures) == 1
        assert engine.state == GameState.RUNNING
        assert engine.score == 15
        assert len(engine.body) == 4
        assert engine.food not in engine.body

        assert await manager.start(session.game_id)
        assert session.loop is not crashed
        assert session.loop.running
        tick = engine.tick
        await asyncio.sleep(0.05)
        assert engine.tick > tick
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_start_racing_new_game_keeps_one_loop(self):
        manager = SessionManager()
        session = manager.create_session(_TINY.with_overrides(tick_interval_ms=500))
        engine = session.engine
        engine.start()
        engine.food_spawner.position = Cell(0, 2)
        engine.step()
        engine.step()
        assert engine.state == GameState.GAME_OVER

        await asyncio.gather(
            manager.start(session.game_id), manager.new_game(session.game_id),
        )
        assert session.status == GameState.IDLE
        assert session.loop is None
        assert _live_loops() == 0

        assert await manager.start(session.game_id)
        assert _live_loops() == 1
        await manager.cleanup()
        assert _live_loops() == 0
