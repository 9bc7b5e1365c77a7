"""Activity timeline for an accepted booking."""

from datetime import timedelta

from scheduling_engine.errors import InputError
from scheduling_engine.schemas.booking_schema import Activity, ExistingBooking, Resource
from scheduling_engine.utils import minutes_between, round_half_up

PREPARATION_MINUTES = 15
FOLLOW_UP_DELAY_MINUTES = 30
FOLLOW_UP_MINUTES = 15
CORE_SHARE = 0.8
DOCUMENTATION_SHARE = 0.2


def generate_timeline(booking: ExistingBooking, resource: Resource) -> list[Activity]:
    """Preparation, core session, documentation and an optional follow-up."""
    duration = minutes_between(booking.start, booking.end)
    if duration <= 0:
        raise InputError("Booking end must be after its start")

    def entry(at, label: str, minutes: float) -> Activity:
        return Activity(
            at=at,
            time=at.strftime("%H:%M"),
            activity=label,
            duration_minutes=int(round_half_up(minutes)),
            responsible=resource.name,
        )

    timeline = [
        entry(
            booking.start - timedelta(minutes=PREPARATION_MINUTES),
            "Review materials and prepare",
            PREPARATION_MINUTES,
        ),
        entry(booking.start, "Session begins", duration * CORE_SHARE),
        entry(
            booking.end - timedelta(minutes=duration * DOCUMENTATION_SHARE),
            "Document session and next steps",
            duration * DOCUMENTATION_SHARE,
        ),
    ]
    if booking.follow_up_required:
        timeline.append(
            entry(
                booking.end + timedelta(minutes=FOLLOW_UP_DELAY_MINUTES),
                "Schedule follow-up and send summary",
                FOLLOW_UP_MINUTES,
            )
        )
    return timeline
