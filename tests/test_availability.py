"""Tests for base slot generation and business-hours lookups."""

import pytest

from scheduling_engine.errors import InputError
from scheduling_engine.schemas.booking_schema import BusinessDay, Urgency
from scheduling_engine.scheduling.availability import (
    EMERGENCY_BUSINESS_HOURS,
    STANDARD_BUSINESS_HOURS,
    business_window,
    generate_base_slots,
    is_business_open,
    select_business_hours,
)
from tests.conftest import MONDAY, SATURDAY, SUNDAY, at


class TestGenerateBaseSlots:
    def test_slots_cover_business_day_at_duration_granularity(self):
        slots = list(generate_base_slots(MONDAY, 60, STANDARD_BUSINESS_HOURS))
        assert len(slots) == 10
        assert slots[0].start == at(MONDAY, "08:00")
        assert slots[-1].end == at(MONDAY, "18:00")

    def test_slots_are_ordered_and_non_overlapping(self):
        slots = list(generate_base_slots(MONDAY, 45, STANDARD_BUSINESS_HOURS))
        for earlier, later in zip(slots, slots[1:]):
            assert earlier.end <= later.start

    def test_every_slot_has_requested_duration(self):
        for slot in generate_base_slots(MONDAY, 50, STANDARD_BUSINESS_HOURS):
            assert slot.available
            assert slot.start < slot.end
            assert (slot.end - slot.start).total_seconds() == 50 * 60

    def test_last_partial_slot_is_dropped(self):
        slots = list(generate_base_slots(MONDAY, 90, STANDARD_BUSINESS_HOURS))
        # 08:00-18:00 holds six 90-minute slots, the seventh would end at 18:30
        assert len(slots) == 6
        assert slots[-1].end == at(MONDAY, "17:00")

    def test_custom_step_produces_overlapping_starts(self):
        slots = list(generate_base_slots(MONDAY, 60, STANDARD_BUSINESS_HOURS, step_minutes=15))
        assert slots[1].start == at(MONDAY, "08:15")
        assert slots[-1].start == at(MONDAY, "17:00")

    def test_closed_day_yields_nothing(self):
        assert list(generate_base_slots(SUNDAY, 60, STANDARD_BUSINESS_HOURS)) == []

    def test_saturday_uses_short_hours(self):
        slots = list(generate_base_slots(SATURDAY, 60, STANDARD_BUSINESS_HOURS))
        assert slots[0].start == at(SATURDAY, "09:00")
        assert slots[-1].end == at(SATURDAY, "15:00")

    def test_sequence_is_restartable(self):
        first = list(generate_base_slots(MONDAY, 60, STANDARD_BUSINESS_HOURS))
        second = list(generate_base_slots(MONDAY, 60, STANDARD_BUSINESS_HOURS))
        assert first == second

    def test_non_positive_duration_rejected(self):
        with pytest.raises(InputError):
            generate_base_slots(MONDAY, 0, STANDARD_BUSINESS_HOURS)

    def test_non_positive_step_rejected(self):
        with pytest.raises(InputError):
            generate_base_slots(MONDAY, 60, STANDARD_BUSINESS_HOURS, step_minutes=-15)


class TestBusinessHours:
    def test_emergency_tier_selects_extended_table(self):
        chosen = select_business_hours(
            Urgency.EMERGENCY, STANDARD_BUSINESS_HOURS, EMERGENCY_BUSINESS_HOURS
        )
        assert chosen is EMERGENCY_BUSINESS_HOURS

    def test_urgent_tier_keeps_standard_table(self):
        chosen = select_business_hours(
            Urgency.URGENT, STANDARD_BUSINESS_HOURS, EMERGENCY_BUSINESS_HOURS
        )
        assert chosen is STANDARD_BUSINESS_HOURS

    def test_window_for_inverted_hours_is_none(self):
        hours = {0: BusinessDay(is_open=True, open="18:00", close="08:00")}
        assert business_window(MONDAY, hours) is None

    def test_open_during_hours(self):
        assert is_business_open(
            at(MONDAY, "09:30"), Urgency.STANDARD, STANDARD_BUSINESS_HOURS, EMERGENCY_BUSINESS_HOURS
        )

    def test_closing_time_itself_is_closed(self):
        assert not is_business_open(
            at(MONDAY, "18:00"), Urgency.STANDARD, STANDARD_BUSINESS_HOURS, EMERGENCY_BUSINESS_HOURS
        )

    def test_early_morning_open_only_for_emergency(self):
        moment = at(MONDAY, "07:00")
        assert not is_business_open(
            moment, Urgency.URGENT, STANDARD_BUSINESS_HOURS, EMERGENCY_BUSINESS_HOURS
        )
        assert is_business_open(
            moment, Urgency.EMERGENCY, STANDARD_BUSINESS_HOURS, EMERGENCY_BUSINESS_HOURS
        )

    def test_closed_day_counts_as_open_for_emergency(self):
        closed_sunday = dict(EMERGENCY_BUSINESS_HOURS)
        closed_sunday[6] = BusinessDay(is_open=False)
        assert is_business_open(
            at(SUNDAY, "03:00"), Urgency.EMERGENCY, STANDARD_BUSINESS_HOURS, closed_sunday
        )
        assert not is_business_open(
            at(SUNDAY, "11:00"), Urgency.STANDARD, STANDARD_BUSINESS_HOURS, closed_sunday
        )
