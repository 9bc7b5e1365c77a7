"""
Booking request validation as an ordered pipeline of independent checks.

The base request check runs first (interval sanity, advance window,
cancellation window), followed by the domain checks:
1. ContactCheck            - contact phone is well formed
2. EmergencyCheck          - emergency staff exist, request is soon enough
3. PreferredResourceCheck  - preferred resource exists, is active and capable
4. RemoteModeCheck         - a video room exists for remote/hybrid sessions
5. BillingCheck            - hourly billing has a sensible estimate
6. BusinessHoursCheck      - start falls inside hours, end does not overrun close
7. ContextCheck            - complex categories come with background

Errors block the booking; warnings are advisory.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from scheduling_engine.config import ValidationConfig, settings
from scheduling_engine.schemas.booking_schema import (
    BillingMode,
    BookingRequest,
    BookingRules,
    BusinessHours,
    Resource,
    Room,
    Urgency,
    ValidationResult,
)
from scheduling_engine.schemas.client_schema import Client
from scheduling_engine.scheduling.availability import (
    business_window,
    is_business_open,
    select_business_hours,
)
from scheduling_engine.scheduling.matching import CapabilityMatcher
from scheduling_engine.utils import normalize_phone

logger = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"


@dataclass
class CheckResult:
    """Outcome of a single check."""
    message: str
    severity: str = WARNING  # "error" | "warning"


@dataclass
class ValidationContext:
    """Everything a check may look at."""
    request: BookingRequest
    resources: list[Resource]
    now: datetime
    client: Optional[Client] = None
    rooms: Optional[list[Room]] = None


def _hours_until(ctx: ValidationContext) -> float:
    return (ctx.request.start - ctx.now).total_seconds() / 3600


class BaseRequestCheck:
    """Interval sanity plus the advance and cancellation windows."""

    def __init__(self, rules: BookingRules) -> None:
        self.rules = rules

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        results = []
        request = ctx.request
        hours_until = _hours_until(ctx)

        if request.start >= request.end:
            results.append(CheckResult("End time must be after start time", ERROR))

        if (
            request.urgency != Urgency.EMERGENCY
            and hours_until < self.rules.advance_booking_hours
        ):
            results.append(CheckResult(
                f"Booking must be made at least {self.rules.advance_booking_hours:g} hours in advance",
                ERROR,
            ))

        if request.start - ctx.now > timedelta(days=self.rules.max_advance_booking_days):
            results.append(CheckResult(
                f"Booking cannot be made more than {self.rules.max_advance_booking_days} days in advance",
                ERROR,
            ))

        if 0 <= hours_until < self.rules.cancellation_notice_hours:
            results.append(CheckResult(
                "Booking starts within the "
                f"{self.rules.cancellation_notice_hours:g}-hour cancellation window "
                "and cannot be cancelled free of charge",
            ))

        return results


class ContactCheck:
    def __init__(self, config: ValidationConfig) -> None:
        self.config = config

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        digits = normalize_phone(ctx.request.contact_phone).lstrip("+")
        if len(digits) < self.config.min_phone_digits:
            return [CheckResult("Valid contact phone number is required", ERROR)]
        return []


class EmergencyCheck:
    def __init__(self, config: ValidationConfig) -> None:
        self.config = config

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        if ctx.request.urgency != Urgency.EMERGENCY:
            return []
        results = []
        if not any(r.available_for_emergency and r.is_active for r in ctx.resources):
            results.append(CheckResult("No resources available for emergency bookings", ERROR))
        window = self.config.emergency_window_hours
        if _hours_until(ctx) > window:
            results.append(CheckResult(
                f"Emergency bookings are normally scheduled within {window:g} hours"
            ))
        return results


class PreferredResourceCheck:
    def __init__(self, capability: CapabilityMatcher) -> None:
        self.capability = capability

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        preferred_id = ctx.request.preferred_resource_id
        if preferred_id is None:
            return []
        preferred = next((r for r in ctx.resources if r.id == preferred_id), None)
        if preferred is None:
            return [CheckResult("Preferred resource not found, an available alternative will be assigned")]
        if not preferred.is_active:
            return [CheckResult("Preferred resource is not available, an alternative will be assigned")]
        if not self.capability.is_capable(preferred, ctx.request.category):
            return [CheckResult("Preferred resource may not specialize in this area")]
        return []


class RemoteModeCheck:
    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        if not ctx.request.interaction_mode.requires_video or ctx.rooms is None:
            return []
        if not any(room.has_video_conference and room.is_active for room in ctx.rooms):
            return [CheckResult("No video conference enabled rooms available", ERROR)]
        return []


class BillingCheck:
    def __init__(self, config: ValidationConfig) -> None:
        self.config = config

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        request = ctx.request
        results = []
        if request.billing_mode == BillingMode.HOURLY and not request.estimated_hours:
            results.append(CheckResult("Estimated hours recommended for hourly billing"))
        limit = self.config.long_session_hours
        if request.estimated_hours and request.estimated_hours > limit:
            results.append(CheckResult(
                f"Sessions over {limit:g} hours may need to be split into multiple bookings"
            ))
        return results


class BusinessHoursCheck:
    def __init__(self, standard: BusinessHours, emergency: BusinessHours) -> None:
        self.standard = standard
        self.emergency = emergency

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        request = ctx.request
        urgency = request.urgency
        if not is_business_open(request.start, urgency, self.standard, self.emergency):
            if urgency == Urgency.EMERGENCY:
                return [CheckResult("Emergency booking scheduled outside normal hours")]
            return [CheckResult("Bookings are not available at the requested time", ERROR)]

        window = business_window(
            request.start, select_business_hours(urgency, self.standard, self.emergency)
        )
        if window is not None and request.end > window[1]:
            return [CheckResult(f"Booking runs past closing time ({window[1]:%H:%M})")]
        return []


class ContextCheck:
    def __init__(self, complex_categories: frozenset[str]) -> None:
        self.complex_categories = complex_categories

    def check(self, ctx: ValidationContext) -> list[CheckResult]:
        category = ctx.request.category.lower().strip()
        context = (ctx.request.context or "").strip()
        if category in self.complex_categories and not context:
            return [CheckResult("Background information recommended for this category")]
        return []


@dataclass
class ValidationPipeline:
    """Runs every check in order and merges their findings."""
    checks: list = field(default_factory=list)
    deposit_required: bool = False

    def run(self, ctx: ValidationContext) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []
        for check in self.checks:
            for result in check.check(ctx):
                (errors if result.severity == ERROR else warnings).append(result.message)

        if errors:
            logger.info("Booking request rejected: %s", "; ".join(errors))
        elif warnings:
            logger.debug("Booking request accepted with %d warning(s)", len(warnings))

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            deposit_required=self.deposit_required,
        )


def build_pipeline(
    rules: BookingRules,
    capability: CapabilityMatcher,
    standard_hours: BusinessHours,
    emergency_hours: BusinessHours,
    complex_categories: frozenset[str],
    config: Optional[ValidationConfig] = None,
) -> ValidationPipeline:
    config = config or settings.validation
    return ValidationPipeline(
        checks=[
            BaseRequestCheck(rules),
            ContactCheck(config),
            EmergencyCheck(config),
            PreferredResourceCheck(capability),
            RemoteModeCheck(),
            BillingCheck(config),
            BusinessHoursCheck(standard_hours, emergency_hours),
            ContextCheck(complex_categories),
        ],
        deposit_required=rules.deposit_required,
    )
