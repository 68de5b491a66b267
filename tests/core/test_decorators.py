"""Tests for the log_execution decorator."""

import logging

import pytest

from mockstore.core.decorators import log_execution


class TestLogExecution:
    """Test entry, exit and failure logging."""

    def test_sync_function_logs_entry_and_exit(self, caplog):
        """Test logging around a plain function."""

        @log_execution(include_args=True, include_result=True)
        def add(a, b):
            return a + b

        with caplog.at_level(logging.DEBUG, logger="mockstore"):
            assert add(2, 3) == 5

        assert "Executing" in caplog.text
        assert "args=(2, 3)" in caplog.text
        assert "-> 5" in caplog.text

    @pytest.mark.asyncio
    async def test_async_function_logs_and_returns(self, caplog):
        """Test that coroutine functions stay awaitable."""

        @log_execution(level=logging.INFO)
        async def answer():
            return 42

        with caplog.at_level(logging.INFO, logger="mockstore"):
            assert await answer() == 42

        assert "Completed" in caplog.text
        assert "answer" in caplog.text

    def test_errors_are_reraised(self, caplog):
        """Test that failures propagate after being logged."""

        @log_execution()
        def broken():
            raise ValueError("nope")

        with caplog.at_level(logging.DEBUG, logger="mockstore"):
            with pytest.raises(ValueError, match="nope"):
                broken()

        assert "Error in" in caplog.text

    def test_wraps_preserves_metadata(self):
        """Test that the wrapped function keeps its name."""

        @log_execution()
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
