"""Tests for client history analysis."""

from datetime import datetime, timedelta

from scheduling_engine.config import HistoryConfig
from scheduling_engine.schemas.booking_schema import Urgency
from scheduling_engine.schemas.client_schema import Client, HistorySummary
from scheduling_engine.scheduling.history import HistoryAnalyzer
from tests.conftest import make_booking

FIRST = datetime(2026, 1, 5, 10, 0)
CLIENT = Client(id=7, name="Harbour Logistics")


def _bookings(offsets_days, hours=1.0, category="legal", urgency=Urgency.STANDARD, client_id=7):
    return [
        make_booking(
            1,
            FIRST + timedelta(days=offset),
            FIRST + timedelta(days=offset, hours=hours),
            client_id=client_id,
            category=category,
            urgency=urgency,
        )
        for offset in offsets_days
    ]


class TestHistoryAnalyzer:
    def setup_method(self):
        self.analyzer = HistoryAnalyzer(HistoryConfig())

    def test_no_bookings_gives_empty_summary(self):
        assert self.analyzer.analyze(CLIENT, []) == HistorySummary()

    def test_other_clients_bookings_ignored(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 1, 2], client_id=8))
        assert summary.total_bookings == 0

    def test_six_sessions_in_a_month_flags_frequency(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 4, 9, 14, 19, 25]))
        assert summary.total_bookings == 6
        assert summary.frequency_per_month == 6
        assert summary.average_duration_hours == 1
        assert "High booking frequency may indicate ongoing issues" in summary.risk_factors
        assert "Consider a retainer agreement for cost savings" in summary.recommendations
        assert len(summary.risk_factors) == 1

    def test_exactly_four_per_month_does_not_flag(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 7, 14, 21]))
        assert summary.frequency_per_month == 4
        assert summary.risk_factors == []

    def test_frequency_spreads_over_observed_span(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 8, 17, 25, 34, 42, 51, 60]))
        assert summary.frequency_per_month == 4
        assert summary.risk_factors == []

    def test_single_booking_counts_as_one_month(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0], hours=1.5))
        assert summary.total_bookings == 1
        assert summary.frequency_per_month == 1
        assert summary.total_hours == 1.5
        assert summary.average_duration_hours == 1.5

    def test_long_sessions_flagged_above_threshold(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 40], hours=3.5))
        assert "Long sessions may indicate complex matters" in summary.risk_factors

    def test_three_hour_sessions_not_flagged(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 40], hours=3))
        assert summary.risk_factors == []

    def test_urgent_share_above_threshold_flagged(self):
        offsets = [i * 30 for i in range(10)]
        bookings = _bookings(offsets[:4], urgency=Urgency.URGENT) + _bookings(offsets[4:])
        summary = self.analyzer.analyze(CLIENT, bookings)
        assert "High share of urgent or emergency bookings" in summary.risk_factors

    def test_urgent_share_at_threshold_not_flagged(self):
        offsets = [i * 30 for i in range(10)]
        bookings = _bookings(offsets[:3], urgency=Urgency.EMERGENCY) + _bookings(offsets[3:])
        summary = self.analyzer.analyze(CLIENT, bookings)
        assert summary.risk_factors == []

    def test_high_spend_adds_recommendation_only(self):
        client = Client(id=7, total_spent=60000)
        summary = self.analyzer.analyze(client, _bookings([0]))
        assert summary.total_spent == 60000
        assert summary.risk_factors == []
        assert summary.recommendations == ["Client qualifies for volume discount review"]

    def test_spend_at_threshold_has_no_recommendation(self):
        client = Client(id=7, total_spent=50000)
        assert self.analyzer.analyze(client, _bookings([0])).recommendations == []

    def test_preferred_categories_top_three(self):
        bookings = (
            _bookings([40], category="hr")
            + _bookings([30, 50], category="tax")
            + _bookings([10, 20], category="financial")
            + _bookings([0, 60, 70], category="legal")
        )
        summary = self.analyzer.analyze(CLIENT, bookings)
        # financial and tax tie, financial was booked first
        assert summary.preferred_categories == ["legal", "financial", "tax"]

    def test_totals_rounded_to_two_places(self):
        summary = self.analyzer.analyze(CLIENT, _bookings([0, 40, 80], hours=50 / 60))
        assert summary.total_hours == 2.5
        assert summary.average_duration_hours == 0.83

    def test_custom_threshold(self):
        analyzer = HistoryAnalyzer(HistoryConfig(high_frequency_per_month=2))
        summary = analyzer.analyze(CLIENT, _bookings([0, 5, 10]))
        assert len(summary.risk_factors) == 1


class TestEngineHistory:
    def test_engine_delegates_to_analyzer(self, engine):
        summary = engine.analyze_history(CLIENT, _bookings([0, 4, 9, 14, 19, 25]))
        assert summary.total_bookings == 6
        assert summary.risk_factors
