"""Booking price calculation and cost estimation."""

import logging
from collections.abc import Callable, Iterable
from typing import Optional

from scheduling_engine.config import PricingConfig, settings
from scheduling_engine.errors import InputError
from scheduling_engine.schemas.booking_schema import (
    CostEstimate,
    CostRecommendation,
    Resource,
    Urgency,
)
from scheduling_engine.schemas.client_schema import Client
from scheduling_engine.utils import round_half_up

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 3


class PricingCalculator:
    """Pure price function: rate, duration, urgency and client tier."""

    def __init__(self, config: Optional[PricingConfig] = None) -> None:
        self.config = config or settings.pricing

    def urgency_multiplier(self, urgency: Urgency) -> float:
        return {
            Urgency.STANDARD: self.config.standard_multiplier,
            Urgency.URGENT: self.config.urgent_multiplier,
            Urgency.EMERGENCY: self.config.emergency_multiplier,
        }[urgency]

    def price_floor(self, hourly_rate: float) -> float:
        return hourly_rate * self.config.price_floor_ratio

    def calculate_price(
        self,
        hourly_rate: float,
        duration_minutes: float,
        urgency: Urgency = Urgency.STANDARD,
        client: Optional[Client] = None,
    ) -> float:
        """Price in whole currency units, never below the minimum charge."""
        if duration_minutes <= 0:
            raise InputError(f"Duration must be positive, got {duration_minutes}")
        if hourly_rate < 0:
            raise InputError(f"Hourly rate cannot be negative, got {hourly_rate}")

        price = hourly_rate * duration_minutes / 60
        price *= self.urgency_multiplier(urgency)
        if client is not None:
            price *= 1 - client.discount
        price = max(price, self.price_floor(hourly_rate))
        return round_half_up(price)

    def estimate_cost(
        self,
        resources: Iterable[Resource],
        estimated_hours: float,
        urgency: Urgency,
        score_of: Callable[[Resource], float],
    ) -> CostEstimate:
        """Cost range over already-qualified resources.

        ``score_of`` ranks resources for the recommendation list; equal
        scores fall back to ascending id.
        """
        if estimated_hours <= 0:
            raise InputError(f"Estimated hours must be positive, got {estimated_hours}")

        pool = list(resources)
        if not pool:
            return CostEstimate()

        costs = {
            r.id: self.calculate_price(r.hourly_rate, estimated_hours * 60, urgency)
            for r in pool
        }
        values = list(costs.values())
        ranked = sorted(pool, key=lambda r: (-score_of(r), r.id))[:MAX_RECOMMENDATIONS]

        return CostEstimate(
            min_cost=min(values),
            max_cost=max(values),
            average_cost=round_half_up(sum(values) / len(values)),
            recommendations=[
                CostRecommendation(
                    resource_id=r.id,
                    name=r.name,
                    cost=costs[r.id],
                    experience_years=r.experience_years,
                    rating=r.rating,
                )
                for r in ranked
            ],
        )
