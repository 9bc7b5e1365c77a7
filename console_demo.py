"""
Offline console demo: runs the scheduling engine over sample data.

Builds an engine for a registered vertical (professional-services by
default, which the sample staff are drawn for), then prints the
day's slots, a validation result, a cost estimate, a timeline and a
client history summary. No database, no network.

Usage:
    python console_demo.py
    python console_demo.py --scenario emergency
    python console_demo.py --vertical salon --category haircut
    python console_demo.py --date 2026-11-02 --category financial --duration 90
"""

import argparse
from datetime import datetime, timedelta

from scheduling_engine.config import settings
from scheduling_engine.errors import InputError
from scheduling_engine.ledger import BookingLedger
from scheduling_engine.schemas.booking_schema import (
    BookingRequest,
    BookingStatus,
    ExistingBooking,
    InteractionMode,
    Resource,
    Room,
    TimeRange,
    Urgency,
    WorkingDay,
)
from scheduling_engine.schemas.client_schema import Client, ClientTier
from scheduling_engine.verticals import create_engine, get_registered_verticals

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


def _weekdays(start: str, end: str, lunch: bool = True) -> dict[int, WorkingDay]:
    breaks = [TimeRange(start="12:00", end="13:00")] if lunch else []
    hours = {day: WorkingDay(is_working=True, start=start, end=end, breaks=breaks) for day in range(5)}
    hours[5] = WorkingDay(is_working=False)
    hours[6] = WorkingDay(is_working=False)
    return hours


SAMPLE_RESOURCES = [
    Resource(
        id=1, name="Amelia Chen", profession="lawyer",
        specializations=["corporate-law", "legal contracts"],
        working_hours=_weekdays("09:00", "17:00"), hourly_rate=320,
        available_for_emergency=True, rating=4.8, experience_years=14, total_bookings=410,
    ),
    Resource(
        id=2, name="Marcus Webb", profession="accountant",
        specializations=["tax-planning", "financial audit"],
        working_hours=_weekdays("08:00", "16:00"), hourly_rate=180,
        rating=4.5, experience_years=9, total_bookings=230,
    ),
    Resource(
        id=3, name="Priya Nair", profession="business-advisor",
        specializations=["startup-advisory", "business strategy"],
        working_hours=_weekdays("10:00", "18:00", lunch=False), hourly_rate=210,
        available_for_emergency=True, rating=4.6, experience_years=11, total_bookings=150,
    ),
]

SAMPLE_ROOMS = [
    Room(id=1, name="Board Room", has_video_conference=True, amenities=["whiteboard", "recording"]),
    Room(id=2, name="Office 2B", amenities=["privacy"]),
]

SAMPLE_CLIENT = Client(id=7, name="Harbour Logistics", tier=ClientTier.CORPORATION, total_spent=61000)


def _next_weekday(now: datetime) -> datetime:
    day = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def _sample_history(day: datetime) -> list[ExistingBooking]:
    return [
        ExistingBooking(
            id=100 + i, resource_id=1 + i % 3, client_id=SAMPLE_CLIENT.id,
            start=day - timedelta(days=7 * i, hours=-10), end=day - timedelta(days=7 * i, hours=-11),
            category=("legal", "financial", "business")[i % 3],
            urgency=Urgency.URGENT if i % 2 else Urgency.STANDARD,
            status=BookingStatus.COMPLETED,
        )
        for i in range(1, 7)
    ]


def section(title: str) -> None:
    print(f"\n{BOLD}{title}{RESET}")
    print(f"{DIM}{'-' * 60}{RESET}")


def run(vertical: str, date: datetime, category: str, duration: int, urgency: Urgency) -> None:
    engine = create_engine(vertical)
    ledger = BookingLedger(engine.rules)

    print(f"{BOLD}{'=' * 60}{RESET}")
    print(f"{BOLD}  SCHEDULING ENGINE [{vertical}] - {category} on {date.date()} ({urgency.value}){RESET}")
    print(f"{BOLD}{'=' * 60}{RESET}")

    section("Slots")
    slots = engine.generate_slots(
        date, category, duration, SAMPLE_RESOURCES, ledger.snapshot().bookings,
        urgency, SAMPLE_CLIENT,
    )
    for slot in slots:
        span = f"{slot.start:%H:%M}-{slot.end:%H:%M}"
        if slot.available:
            print(f"  {GREEN}{span}  {slot.resource_name:<14} ${slot.price:,.0f}{RESET}")
        else:
            print(f"  {DIM}{span}  unavailable{RESET}")

    chosen = next((s for s in slots if s.available), None)
    if chosen is None:
        print(f"{RED}No slot could be staffed.{RESET}")
        return

    section("Validation")
    request = BookingRequest(
        start=chosen.start, end=chosen.end, category=category, urgency=urgency,
        contact_phone="0412 345 678", interaction_mode=InteractionMode.REMOTE,
        preferred_resource_id=chosen.resource_id, estimated_hours=duration / 60,
    )
    result = engine.validate_request(request, SAMPLE_RESOURCES, SAMPLE_CLIENT, SAMPLE_ROOMS)
    colour = GREEN if result.is_valid else RED
    print(f"  {colour}valid={result.is_valid} deposit_required={result.deposit_required}{RESET}")
    for error in result.errors:
        print(f"  {RED}error: {error}{RESET}")
    for warning in result.warnings:
        print(f"  {YELLOW}warning: {warning}{RESET}")

    if result.is_valid:
        resource = next(r for r in SAMPLE_RESOURCES if r.id == chosen.resource_id)
        booking = ledger.commit(ExistingBooking(
            resource_id=chosen.resource_id, client_id=SAMPLE_CLIENT.id,
            start=chosen.start, end=chosen.end, category=category, urgency=urgency,
            follow_up_required=True,
        ), resource=resource)
        print(f"  {GREEN}Committed booking #{booking.id}{RESET}")

        section("Timeline")
        for activity in engine.generate_timeline(booking, resource):
            print(f"  {activity.time}  {activity.activity:<40} {activity.duration_minutes:>3} min")

    section("Cost estimate")
    estimate = engine.estimate_cost(category, duration / 60, SAMPLE_RESOURCES, urgency)
    print(f"  min ${estimate.min_cost:,.0f}  max ${estimate.max_cost:,.0f}  avg ${estimate.average_cost:,.0f}")
    for rec in estimate.recommendations:
        print(f"  {rec.name:<14} ${rec.cost:,.0f}  rating {rec.rating}")

    section("Client history")
    summary = engine.analyze_history(SAMPLE_CLIENT, _sample_history(date))
    print(f"  {summary.total_bookings} bookings, {summary.total_hours}h, "
          f"{summary.frequency_per_month}/month, top: {', '.join(summary.preferred_categories)}")
    for factor in summary.risk_factors:
        print(f"  {YELLOW}risk: {factor}{RESET}")
    for rec in summary.recommendations:
        print(f"  {BLUE}recommend: {rec}{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline scheduling engine demo")
    parser.add_argument(
        "--scenario",
        choices=["standard", "urgent", "emergency"],
        default="standard",
        help="Urgency tier to schedule under",
    )
    parser.add_argument(
        "--vertical",
        choices=get_registered_verticals(),
        default=settings.default_vertical,
        help="Vertical whose booking policy applies (sample staff suit professional-services)",
    )
    parser.add_argument("--date", default=None, help="Day to schedule (YYYY-MM-DD)")
    parser.add_argument("--category", default="legal", help="Request category")
    parser.add_argument("--duration", type=int, default=60, help="Duration in minutes")
    args = parser.parse_args()

    if args.date:
        date = datetime.strptime(args.date, "%Y-%m-%d")
    else:
        date = _next_weekday(datetime.now())

    try:
        run(args.vertical, date, args.category, args.duration, Urgency(args.scenario))
    except InputError as exc:
        print(f"{RED}{exc}{RESET}")
        raise SystemExit(2) from None


if __name__ == "__main__":
    main()
