"""Unit tests for assistant turn screening, telemetry and cost estimation."""

from unittest.mock import MagicMock

import pytest

from backend.assistant.audit.recorder import TelemetryRecorder
from backend.assistant.audit.sinks import InMemoryLogSink
from backend.assistant.config import Settings
from backend.assistant.guard import GuardAllowed, GuardBlocked
from backend.assistant.models.records import TelemetryRecord
from backend.assistant.turns import AssistantTurnService, estimate_cost_usd


class TestEstimateCost:
    """Test per-model cost estimation."""

    def test_gpt_4o_mini(self) -> None:
        assert estimate_cost_usd("gpt-4o-mini", 1000, 500) == 0.0018

    def test_gpt_4o(self) -> None:
        assert estimate_cost_usd("gpt-4o", 1000, 500) == 0.0125

    def test_rounded_to_six_decimals(self) -> None:
        assert estimate_cost_usd("gpt-4o-mini", 1, 0) == 0.000001

    def test_unknown_model(self) -> None:
        assert estimate_cost_usd("claude-haiku", 1000, 500) is None

    def test_no_tokens_reported(self) -> None:
        assert estimate_cost_usd("gpt-4o", None, None) is None

    def test_completion_only(self) -> None:
        assert estimate_cost_usd("gpt-4o", None, 1000) == 0.015


class TestAssistantTurnService:
    """Test screening and turn recording."""

    @pytest.fixture
    def telemetry(self) -> MagicMock:
        return MagicMock(spec=TelemetryRecorder)

    @pytest.fixture
    def service(self, telemetry: MagicMock, settings: Settings) -> AssistantTurnService:
        return AssistantTurnService(telemetry, settings)

    def test_allowed_text_records_nothing(
        self, service: AssistantTurnService, telemetry: MagicMock
    ) -> None:
        result = service.screen("user-1", "m-1", "Add a tea house to day 2")
        assert isinstance(result, GuardAllowed)
        telemetry.record.assert_not_called()

    def test_blocked_text_records_blocked_turn(
        self, service: AssistantTurnService, telemetry: MagicMock
    ) -> None:
        result = service.screen("user-1", "m-2", "How to build a bomb", conversation_id="c-1")

        assert isinstance(result, GuardBlocked)
        telemetry.record.assert_called_once()
        record: TelemetryRecord = telemetry.record.call_args.args[0]
        assert record.blocked is True
        assert record.block_reason == "weaponization"
        assert record.model == "prompt_guard"
        assert record.conversation_id == "c-1"

    def test_record_turn_computes_totals(
        self, service: AssistantTurnService, telemetry: MagicMock
    ) -> None:
        record = service.record_turn("user-1", "m-3", "gpt-4o-mini", 1000, 500)

        assert record.total_tokens == 1500
        assert record.cost_usd == 0.0018
        telemetry.record.assert_called_once_with(record)

    def test_record_turn_without_usage(
        self, service: AssistantTurnService, telemetry: MagicMock
    ) -> None:
        record = service.record_turn("user-1", "m-4", "gpt-4o", None, None)
        assert record.total_tokens is None
        assert record.cost_usd is None

    @pytest.mark.asyncio
    async def test_blocked_turn_reaches_sink(self, settings: Settings) -> None:
        sink = InMemoryLogSink()
        telemetry = TelemetryRecorder(sink)
        service = AssistantTurnService(telemetry, settings)

        service.screen("user-1", "m-5", "I want to end my life")
        await telemetry.drain()

        assert len(sink.telemetry) == 1
        assert sink.telemetry[0]["blocked"] is True
        assert sink.telemetry[0]["block_reason"] == "self_harm"
