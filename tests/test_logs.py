"""Tests for logging setup and emitted events."""

import logging

import pytest
from structlog.testing import capture_logs

from procgen.engine import GenerationEngine
from procgen.logs import configure_logging
from procgen.maze.config import MazeConfig
from procgen.maze.generator import MazeGenerator


class TestConfigureLogging:
    def test_accepts_level_names(self) -> None:
        configure_logging("debug")
        configure_logging(logging.WARNING)

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level: loud"):
            configure_logging("loud")


class TestEvents:
    """Generation emits snake_case structured events."""

    def test_maze_generated_event(self) -> None:
        with capture_logs() as logs:
            MazeGenerator(MazeConfig(width=4, height=4, seed=2)).generate()
        event = next(entry for entry in logs if entry["event"] == "maze_generated")
        assert event["passages"] == 15
        assert event["algorithm"] == "recursive_backtrack"

    @pytest.mark.asyncio
    async def test_engine_cache_events(self, engine: GenerationEngine) -> None:
        with capture_logs() as logs:
            await engine.generate("k", lambda context: 1)
            await engine.generate("k", lambda context: 1)
        events = [entry["event"] for entry in logs]
        assert events == [
            "cache_miss",
            "generation_started",
            "generation_completed",
            "cache_hit",
        ]
