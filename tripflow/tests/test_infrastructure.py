"""
Tests for shared infrastructure: chat collaborator, logging, concurrency.
"""

import asyncio
import json
import logging
from types import SimpleNamespace

import pytest

from tripflow.shared.concurrency import gather_joined, with_timeout
from tripflow.shared.llm import client as client_module
from tripflow.shared.llm import OpenAIChatModel
from tripflow.shared.logging import StructuredFormatter, log_state_transition, setup_logging
from tripflow.shared.schemas import PlanState
from conftest import run


class FakeCompletions:
    def __init__(self, content="Hello", delay=0.0, error=None):
        self.content = content
        self.delay = delay
        self.error = error
        self.calls = []

    async def create(self, model, messages):
        self.calls.append({"model": model, "messages": messages})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))]
        )


def _client(**kwargs):
    completions = FakeCompletions(**kwargs)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


# ============================================================================
# Chat collaborator
# ============================================================================


class TestOpenAIChatModel:
    """chat() returns text or degrades to an empty string."""

    def test_returns_stripped_content(self):
        client, completions = _client(content="  Thought: go\nAction: finish  ")
        model = OpenAIChatModel(model="test-model", client=client)

        assert run(model.chat("hi")) == "Thought: go\nAction: finish"
        assert completions.calls[0]["model"] == "test-model"
        assert completions.calls[0]["messages"] == [{"role": "user", "content": "hi"}]

    def test_system_prompt(self):
        client, completions = _client()
        model = OpenAIChatModel(client=client, system_prompt="You plan trips.")
        run(model.chat("hi"))
        assert completions.calls[0]["messages"][0] == {"role": "system", "content": "You plan trips."}

    def test_timeout_degrades(self):
        client, _ = _client(delay=1.0)
        model = OpenAIChatModel(client=client, timeout=0.01)
        assert run(model.chat("hi")) == ""

    def test_error_degrades(self):
        client, completions = _client(error=ValueError("bad request"))
        model = OpenAIChatModel(client=client)
        assert run(model.chat("hi")) == ""
        assert len(completions.calls) == 1

    def test_none_content(self):
        client, _ = _client(content=None)
        assert run(OpenAIChatModel(client=client).chat("hi")) == ""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(client_module, "_client", None)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            client_module.get_cached_client()


# ============================================================================
# Logging
# ============================================================================


class TestStructuredLogging:
    """JSON log lines and state transition summaries."""

    def test_formatter_outputs_json(self):
        record = logging.LogRecord("tripflow.test", logging.INFO, "", 0, "hello %s", ("world",), None)
        record.extra = {"event": "x"}
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert entry["extra"] == {"event": "x"}
        assert entry["timestamp"].endswith("Z")

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging(log_file=str(log_file), logger_name="tripflow.test.setup")
        assert len(logger.handlers) == 2

        logger.info("planned")
        for handler in logger.handlers:
            handler.flush()
        line = log_file.read_text().strip().splitlines()[-1]
        assert json.loads(line)["message"] == "planned"

        # reconfiguring replaces handlers instead of stacking them
        assert len(setup_logging(logger_name="tripflow.test.setup").handlers) == 1

    def test_state_transition_summary(self):
        logger = logging.getLogger("tripflow.test.transition")
        logger.setLevel(logging.INFO)
        handler = CaptureHandler()
        logger.addHandler(handler)
        try:
            state = PlanState(reflection_count=2, approved=True)
            log_state_transition("workflow_complete", state, extra={"graph": "planning"}, logger=logger)
        finally:
            logger.removeHandler(handler)

        data = handler.records[0].extra
        assert data["event"] == "workflow_complete"
        assert data["extra"] == {"graph": "planning"}
        summary = data["state_summary"]
        assert summary["reflection_count"] == 2
        assert summary["approved"] is True
        assert summary["current_step"] == "initialized"
        assert "completed" not in summary


# ============================================================================
# Concurrency helpers
# ============================================================================


class TestConcurrency:
    """Bounded waits and joined fan-out."""

    def test_with_timeout_fallback(self):
        async def slow():
            await asyncio.sleep(1)
            return "late"

        assert run(with_timeout(slow(), 0.01, fallback="fallback")) == "fallback"

    def test_with_timeout_result(self):
        async def quick():
            return "done"

        assert run(with_timeout(quick(), 1, fallback="fallback")) == "done"
        assert run(with_timeout(quick(), None, fallback="fallback")) == "done"

    def test_gather_joined_keeps_order_and_errors(self):
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        async def fail():
            raise KeyError("missing")

        results = run(gather_joined([value("a", 0.02), fail(), value("c", 0)]))
        assert results[0] == "a"
        assert isinstance(results[1], KeyError)
        assert results[2] == "c"

    def test_gather_joined_empty(self):
        assert run(gather_joined([])) == []
