"""
Tests for the synchronous BotContext facade.
"""

import pytest

from arbwatch.engine.context import BotContext, close_bot_context, get_bot_context
from arbwatch.engine.orchestrator import Orchestrator
from arbwatch.errors import InvalidKindError, InvalidModeError, NotFoundError
from arbwatch.models import OrchestratorState
from arbwatch.monitors import CryptoMonitor, PredictionMarketMonitor, SportsArbitrageMonitor

from conftest import StaticSource, make_event, make_signal


def stub_orchestrator():
    return Orchestrator(
        crypto_monitor=CryptoMonitor(sources=[StaticSource([make_signal()])], interval_seconds=60),
        sports_monitor=SportsArbitrageMonitor(sources=[StaticSource([make_event()])], interval_seconds=60),
        prediction_monitor=PredictionMarketMonitor(sources=[StaticSource()], interval_seconds=60),
    )


@pytest.fixture
def context():
    ctx = BotContext(orchestrator_factory=stub_orchestrator, call_timeout=5)
    yield ctx
    ctx.close()


class TestBotContext:
    """Tests for the blocking facade over the async engine."""

    def test_start_and_status(self, context):
        status = context.start("manual")

        assert status.state == OrchestratorState.RUNNING_MANUAL
        assert context.get_status().opportunity_counts == {"crypto": 1, "sports": 1, "prediction": 0}

    @pytest.mark.parametrize("mode", ["sideways", " manual ", "Manual", "AUTONOMOUS", ""])
    def test_invalid_mode(self, context, mode):
        with pytest.raises(InvalidModeError):
            context.start(mode)
        assert context.get_status().state == OrchestratorState.STOPPED

    def test_manual_execution_round_trip(self, context):
        context.start("manual")

        result = context.execute_manually("crypto", "NEWCOIN:SEC EDGAR")

        assert result["success"] is True
        log = context.get_execution_log()
        assert [r.subject_id for r in log] == ["NEWCOIN:SEC EDGAR"]
        assert not context.find_opportunity("crypto", "NEWCOIN:SEC EDGAR").is_pending

    def test_errors_reach_the_caller(self, context):
        with pytest.raises(InvalidModeError):
            context.execute_manually("crypto", "NEWCOIN:SEC EDGAR")

        context.start("manual")
        with pytest.raises(InvalidKindError):
            context.execute_manually("stocks", "x")
        with pytest.raises(NotFoundError):
            context.execute_manually("sports", "event-99")

    def test_get_all_opportunities(self, context):
        context.start("manual")

        snapshot = context.get_all_opportunities()

        assert [o.opportunity_id for o in snapshot["sports"]] == ["event-1"]
        assert "timestamp" in snapshot

    def test_stop_then_close(self, context):
        context.start("autonomous")
        context.stop()

        assert context.get_status().state == OrchestratorState.STOPPED

        context.close()
        context.close()

        with pytest.raises(RuntimeError):
            context.get_status()

    def test_context_manager(self):
        with BotContext(orchestrator_factory=stub_orchestrator, call_timeout=5) as ctx:
            ctx.start("manual")
            assert ctx.get_status().is_running

        with pytest.raises(RuntimeError):
            ctx.get_status()

    def test_process_wide_context(self, monkeypatch):
        calls = []
        monkeypatch.setattr("arbwatch.engine.context.setup_logging", lambda: calls.append(1))

        ctx = get_bot_context()
        try:
            assert get_bot_context() is ctx
            assert calls == [1]
            assert ctx.get_status().state == OrchestratorState.STOPPED
        finally:
            close_bot_context()

        assert get_bot_context() is not ctx
        close_bot_context()
