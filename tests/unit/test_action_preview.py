"""Unit tests for the preview builder."""

from datetime import date

import pytest

from backend.assistant.actions.access import CONTEXT_RESOLVERS
from backend.assistant.actions.executor import ActionExecutor
from backend.assistant.actions.preview import (
    PREVIEW_BUILDERS,
    build_preview,
    format_date,
    format_field_list,
)
from backend.assistant.actions.schema import validate_intent, validate_preview_envelope
from backend.assistant.models.actions import INTENT_MODELS
from backend.assistant.models.preview import PreviewContext
from backend.assistant.store.inmemory import InMemoryTripStore


class TestScenarios:
    """Concrete request/context pairs from the assistant UI."""

    def test_add_destination_with_day_label(self) -> None:
        envelope = validate_preview_envelope(
            {
                "action": {
                    "type": "add_destination",
                    "dayId": "day-5",
                    "destination": {"name": "Evening Food Tour"},
                    "metadata": {"confidence": 0.92},
                }
            }
        )
        preview = build_preview(envelope.suggested_action, {"dayLabel": "Day 5 (Apr 18)"})

        assert "Evening Food Tour" in preview.summary
        assert "Day 5" in preview.summary
        assert preview.requires_confirmation is True
        assert preview.details["dayId"] == "day-5"

    def test_same_day_move_is_reorder(self) -> None:
        intent = validate_intent(
            {
                "type": "move_destination",
                "destinationId": "dest-10",
                "fromDayId": "day-2",
                "toDayId": "day-2",
                "insertIndex": 3,
            }
        )
        preview = build_preview(
            intent, {"destinationName": "Gallery Visit", "fromDayLabel": "Day 2 (Apr 11)"}
        )

        assert "Reorder" in preview.summary
        assert "Gallery Visit" in preview.summary
        assert preview.details["destinationId"] == "dest-10"


class TestPhrasing:
    """Test per-type summaries."""

    def test_add_destination_exact(self) -> None:
        intent = validate_intent(
            {"type": "add_destination", "dayId": "day-5", "destination": {"name": "Kiyomizu"}}
        )
        preview = build_preview(intent, PreviewContext(day_label="Day 5 (Apr 18)"))
        assert preview.summary == "Add Kiyomizu to Day 5 (Apr 18)"

    def test_remove_destination_exact(self) -> None:
        intent = validate_intent(
            {"type": "remove_destination", "dayId": "day-2", "destinationId": "dest-1"}
        )
        preview = build_preview(
            intent, {"destination_name": "Nishiki Market", "day_label": "Day 2 (Apr 11)"}
        )
        assert preview.summary == "Remove Nishiki Market from Day 2 (Apr 11)"

    def test_cross_day_move_names_both_days(self) -> None:
        intent = validate_intent(
            {
                "type": "move_destination",
                "destinationId": "dest-10",
                "fromDayId": "day-2",
                "toDayId": "day-3",
            }
        )
        preview = build_preview(
            intent,
            {
                "destinationName": "Gallery Visit",
                "fromDayLabel": "Day 2 (Apr 11)",
                "toDayLabel": "Day 3 (Apr 12)",
            },
        )
        assert preview.summary == "Move Gallery Visit from Day 2 (Apr 11) to Day 3 (Apr 12)"
        assert "Reorder" not in preview.summary
        assert preview.details["toDayId"] == "day-3"

    def test_update_lists_changed_fields(self) -> None:
        intent = validate_intent(
            {
                "type": "update_destination",
                "dayId": "day-2",
                "destinationId": "dest-1",
                "changes": {"city": "Kyoto", "notes": "Go early", "estimatedDurationMinutes": 90},
            }
        )
        preview = build_preview(
            intent, {"destinationName": "Fushimi Inari", "dayLabel": "Day 2 (Apr 11)"}
        )
        assert preview.summary == "Update city, notes and duration for Fushimi Inari (Day 2 (Apr 11))"
        assert preview.details["fields"] == ["city", "notes", "estimated_duration_minutes"]

    def test_reorder_references_positions(self) -> None:
        intent = validate_intent(
            {"type": "reorder_destinations", "dayId": "day-2", "fromIndex": 0, "toIndex": 2}
        )
        preview = build_preview(intent, {"dayLabel": "Day 2"})
        assert preview.summary == "Reorder stops on Day 2: move stop 1 to position 3"

    def test_set_day_location_replace_and_add(self) -> None:
        replace = validate_intent(
            {"type": "set_day_location", "dayId": "day-1", "location": {"name": "Hotel Kanra"}}
        )
        add = validate_intent(
            {
                "type": "set_day_location",
                "dayId": "day-1",
                "location": {"name": "Ryokan Yachiyo"},
                "replaceExisting": False,
            }
        )
        ctx = {"dayLabel": "Day 1 (Apr 10)"}
        assert build_preview(replace, ctx).summary == "Set base location for Day 1 (Apr 10) to Hotel Kanra"
        assert build_preview(add, ctx).summary == "Add base location Ryokan Yachiyo to Day 1 (Apr 10)"

    def test_day_level_phrasing(self) -> None:
        ctx = {"dayLabel": "Day 3 (Apr 12)", "tripName": "Kyoto Spring"}
        duplicate = validate_intent({"type": "duplicate_day", "dayId": "day-3"})
        remove = validate_intent({"type": "remove_day", "dayId": "day-3"})
        assert build_preview(duplicate, ctx).summary == "Duplicate Day 3 (Apr 12)"
        assert build_preview(remove, ctx).summary == "Remove Day 3 (Apr 12) and its stops"

    def test_add_day_phrasing(self) -> None:
        intent = validate_intent(
            {"type": "add_day", "tripId": "trip-1", "afterDayId": "day-3", "date": "2025-04-13"}
        )
        preview = build_preview(intent, {"tripName": "Kyoto Spring", "dayLabel": "Day 3 (Apr 12)"})
        assert preview.summary == "Add a day to Kyoto Spring after Day 3 (Apr 12) on Apr 13, 2025"
        assert preview.details["date"] == "2025-04-13"

    def test_update_trip_dates_names_range(self) -> None:
        intent = validate_intent(
            {
                "type": "update_trip_dates",
                "tripId": "trip-1",
                "startDate": "2025-04-10",
                "endDate": "2025-04-14",
            }
        )
        preview = build_preview(intent, {"tripName": "Kyoto Spring"})
        assert preview.summary == "Change dates of Kyoto Spring to Apr 10, 2025 – Apr 14, 2025"


class TestFallbacks:
    """Missing labels fall back to raw identifiers."""

    def test_no_context_uses_ids(self) -> None:
        intent = validate_intent(
            {"type": "remove_destination", "dayId": "day-9", "destinationId": "dest-42"}
        )
        preview = build_preview(intent)
        assert preview.summary == "Remove dest-42 from day day-9"

    def test_trip_fallback(self) -> None:
        intent = validate_intent({"type": "add_day", "tripId": "trip-7"})
        assert build_preview(intent).summary == "Add a day to trip trip-7"

    def test_every_type_requires_confirmation(self) -> None:
        payloads = [
            {"type": "add_destination", "dayId": "d", "destination": {"name": "X"}},
            {"type": "update_destination", "dayId": "d", "destinationId": "x", "changes": {"notes": "n"}},
            {"type": "remove_destination", "dayId": "d", "destinationId": "x"},
            {"type": "move_destination", "destinationId": "x", "fromDayId": "d", "toDayId": "e"},
            {"type": "reorder_destinations", "dayId": "d", "fromIndex": 0, "toIndex": 1},
            {"type": "set_day_location", "dayId": "d", "location": {"name": "Inn"}},
            {"type": "duplicate_day", "dayId": "d"},
            {"type": "remove_day", "dayId": "d"},
            {"type": "add_day", "tripId": "t"},
            {"type": "update_trip_dates", "tripId": "t", "startDate": "2025-01-01", "endDate": "2025-01-02"},
        ]
        for payload in payloads:
            preview = build_preview(validate_intent(payload))
            assert preview.requires_confirmation is True
            assert preview.summary


class TestFormatting:
    """Test label helpers."""

    def test_format_date(self) -> None:
        assert format_date(date(2025, 4, 8)) == "Apr 8, 2025"

    @pytest.mark.parametrize(
        ("fields", "expected"),
        [
            ([], "details"),
            (["name"], "name"),
            (["name", "city"], "name and city"),
            (["coordinates", "links", "end_time_iso"], "location, links and end time"),
        ],
    )
    def test_format_field_list(self, fields: list[str], expected: str) -> None:
        assert format_field_list(fields) == expected


class TestExhaustiveness:
    """Every intent variant is handled at every dispatch site."""

    def test_every_variant_has_preview_builder(self) -> None:
        assert set(PREVIEW_BUILDERS) == set(INTENT_MODELS.values())

    def test_every_variant_has_executor_handler(self) -> None:
        executor = ActionExecutor(InMemoryTripStore())
        assert executor.handled_types == frozenset(INTENT_MODELS.values())

    def test_every_variant_has_context_resolver(self) -> None:
        assert set(CONTEXT_RESOLVERS) == set(INTENT_MODELS.values())
