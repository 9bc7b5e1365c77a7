"""
Client history analysis.

Aggregates a client's bookings into volume, duration and frequency
figures, then raises advisory risk factors and recommendations at fixed
thresholds. Nothing here blocks a booking.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Optional

from scheduling_engine.config import HistoryConfig, settings
from scheduling_engine.schemas.booking_schema import ExistingBooking, Urgency
from scheduling_engine.schemas.client_schema import Client, HistorySummary
from scheduling_engine.utils import minutes_between, round_half_up

logger = logging.getLogger(__name__)

TOP_CATEGORIES = 3


class HistoryAnalyzer:
    """Calculates history signals for one client."""

    def __init__(self, config: Optional[HistoryConfig] = None) -> None:
        self.config = config or settings.history

    def analyze(self, client: Client, bookings: Iterable[ExistingBooking]) -> HistorySummary:
        own = [b for b in bookings if b.client_id == client.id]
        if not own:
            return HistorySummary()

        total = len(own)
        total_hours = sum(minutes_between(b.start, b.end) / 60 for b in own)
        average_hours = total_hours / total

        # Counter keeps first-seen order among equal counts
        counts = Counter(b.category for b in sorted(own, key=lambda b: b.start) if b.category)
        preferred = [category for category, _ in counts.most_common(TOP_CATEGORIES)]

        first = min(b.start for b in own)
        last = max(b.start for b in own)
        months = max(1.0, (last - first).total_seconds() / (86400 * self.config.days_per_month))
        frequency = total / months

        urgent = sum(1 for b in own if b.urgency in (Urgency.URGENT, Urgency.EMERGENCY))

        risk_factors: list[str] = []
        recommendations: list[str] = []

        if frequency > self.config.high_frequency_per_month:
            risk_factors.append("High booking frequency may indicate ongoing issues")
            recommendations.append("Consider a retainer agreement for cost savings")

        if average_hours > self.config.long_session_hours:
            risk_factors.append("Long sessions may indicate complex matters")
            recommendations.append("Consider splitting complex matters into multiple sessions")

        if urgent / total > self.config.urgent_share:
            risk_factors.append("High share of urgent or emergency bookings")
            recommendations.append("Consider proactive scheduling to reduce urgent bookings")

        if client.total_spent > self.config.volume_spend:
            recommendations.append("Client qualifies for volume discount review")

        logger.debug(
            "History for client %s: %d booking(s), %.2f/month, %d flag(s)",
            client.id, total, frequency, len(risk_factors),
        )

        return HistorySummary(
            total_bookings=total,
            total_hours=round_half_up(total_hours, 2),
            total_spent=client.total_spent,
            average_duration_hours=round_half_up(average_hours, 2),
            preferred_categories=preferred,
            frequency_per_month=round_half_up(frequency, 2),
            risk_factors=risk_factors,
            recommendations=recommendations,
        )
