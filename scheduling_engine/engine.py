"""
Scheduling engine facade.

One engine serves one vertical. Its policy (BookingRules), capability
table and business hours are injected at construction; every operation
is a synchronous, read-only function of its arguments.

Conflict-freedom is only as fresh as the bookings snapshot passed in.
Callers must re-check at commit time (see ledger.BookingLedger).
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Optional

from scheduling_engine.errors import InputError
from scheduling_engine.logging_context import get_request_logger
from scheduling_engine.schemas.booking_schema import (
    Activity,
    BookingRequest,
    BookingRules,
    BusinessHours,
    CostEstimate,
    ExistingBooking,
    InteractionMode,
    Resource,
    Room,
    Slot,
    Urgency,
    ValidationResult,
)
from scheduling_engine.schemas.client_schema import Client, HistorySummary
from scheduling_engine.scheduling.availability import (
    EMERGENCY_BUSINESS_HOURS,
    STANDARD_BUSINESS_HOURS,
    generate_base_slots,
    select_business_hours,
)
from scheduling_engine.scheduling.history import HistoryAnalyzer
from scheduling_engine.scheduling.matching import (
    CapabilityMatcher,
    ResourceMatcher,
    find_available_rooms,
)
from scheduling_engine.scheduling.pricing import PricingCalculator
from scheduling_engine.scheduling.timeline import generate_timeline
from scheduling_engine.scheduling.validation import ValidationContext, build_pipeline

logger = get_request_logger(__name__)


class SchedulingEngine:
    """Slot generation, matching, validation, pricing and history for one vertical."""

    def __init__(
        self,
        rules: BookingRules,
        capability: CapabilityMatcher,
        standard_hours: Optional[BusinessHours] = None,
        emergency_hours: Optional[BusinessHours] = None,
        complex_categories: Iterable[str] = (),
        clock: Callable[[], datetime] = datetime.now,
        pricing: Optional[PricingCalculator] = None,
        history: Optional[HistoryAnalyzer] = None,
    ) -> None:
        self.rules = rules
        self.capability = capability
        self.standard_hours = standard_hours or STANDARD_BUSINESS_HOURS
        self.emergency_hours = emergency_hours or EMERGENCY_BUSINESS_HOURS
        self.complex_categories = frozenset(c.lower() for c in complex_categories)
        self.clock = clock
        self.matcher = ResourceMatcher(rules, capability)
        self.pricing = pricing or PricingCalculator()
        self.history = history or HistoryAnalyzer()
        self.pipeline = build_pipeline(
            rules,
            capability,
            self.standard_hours,
            self.emergency_hours,
            self.complex_categories,
        )

    def generate_slots(
        self,
        date: datetime,
        category: str,
        duration_minutes: int,
        resources: Iterable[Resource],
        existing_bookings: Iterable[ExistingBooking] = (),
        urgency: Urgency = Urgency.STANDARD,
        client: Optional[Client] = None,
    ) -> list[Slot]:
        """Candidate slots for ``date``, each annotated with the best resource and price."""
        category = self.capability.require_known_category(category)
        hours = select_business_hours(urgency, self.standard_hours, self.emergency_hours)
        base_slots = generate_base_slots(
            date, duration_minutes, hours, self.rules.slot_step_minutes
        )
        pool = list(resources)
        snapshot = list(existing_bookings)

        slots = []
        for slot in base_slots:
            candidates = self.matcher.find_available_resources(
                slot.start, slot.end, category, urgency, snapshot, pool
            )
            if not candidates:
                slots.append(Slot(start=slot.start, end=slot.end, available=False))
                continue
            assigned = candidates[0]
            slots.append(Slot(
                start=slot.start,
                end=slot.end,
                available=True,
                resource_id=assigned.id,
                resource_name=assigned.name,
                expertise=list(assigned.specializations),
                price=self.pricing.calculate_price(
                    assigned.hourly_rate, duration_minutes, urgency, client
                ),
            ))

        logger.info(
            "Generated %d slot(s) for %s on %s, %d available",
            len(slots), category, date.date(), sum(1 for s in slots if s.available),
        )
        return slots

    def validate_request(
        self,
        request: BookingRequest,
        resources: Iterable[Resource],
        client: Optional[Client] = None,
        rooms: Optional[Iterable[Room]] = None,
    ) -> ValidationResult:
        """Run every check over the request; only an unknown category raises."""
        self.capability.require_known_category(request.category)
        ctx = ValidationContext(
            request=request,
            resources=list(resources),
            now=self.clock(),
            client=client,
            rooms=list(rooms) if rooms is not None else None,
        )
        return self.pipeline.run(ctx)

    def find_available_resources(
        self,
        start: datetime,
        end: datetime,
        category: str,
        urgency: Urgency,
        existing_bookings: Iterable[ExistingBooking],
        resources: Iterable[Resource],
        preferred_id: Optional[int] = None,
    ) -> list[Resource]:
        return self.matcher.find_available_resources(
            start, end, category, urgency, existing_bookings, resources, preferred_id
        )

    def find_available_rooms(
        self,
        start: datetime,
        end: datetime,
        mode: InteractionMode,
        rooms: Iterable[Room],
        existing_bookings: Iterable[ExistingBooking] = (),
        private_only: bool = True,
    ) -> list[Room]:
        return find_available_rooms(
            start, end, mode, rooms, existing_bookings, self.rules.buffer_minutes, private_only
        )

    def calculate_price(
        self,
        hourly_rate: float,
        duration_minutes: float,
        urgency: Urgency = Urgency.STANDARD,
        client: Optional[Client] = None,
    ) -> float:
        return self.pricing.calculate_price(hourly_rate, duration_minutes, urgency, client)

    def estimate_cost(
        self,
        category: str,
        estimated_hours: float,
        resources: Iterable[Resource],
        urgency: Urgency = Urgency.STANDARD,
    ) -> CostEstimate:
        """Cost range across every resource qualified for the category and urgency."""
        category = self.capability.require_known_category(category)
        qualified = [r for r in resources if self.matcher.is_qualified(r, category, urgency)]
        return self.pricing.estimate_cost(
            qualified,
            estimated_hours,
            urgency,
            score_of=lambda r: self.matcher.score(r, category),
        )

    def generate_timeline(self, booking: ExistingBooking, resource: Resource) -> list[Activity]:
        if booking.resource_id != resource.id:
            raise InputError(
                f"Booking is assigned to resource {booking.resource_id}, not {resource.id}"
            )
        return generate_timeline(booking, resource)

    def analyze_history(
        self, client: Client, bookings: Iterable[ExistingBooking]
    ) -> HistorySummary:
        return self.history.analyze(client, bookings)
