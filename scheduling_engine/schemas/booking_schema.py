"""Booking, resource and slot data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from scheduling_engine.utils import parse_clock


class Urgency(str, Enum):
    STANDARD = "standard"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class InteractionMode(str, Enum):
    IN_PERSON = "in-person"
    REMOTE = "remote"
    PHONE = "phone"
    HYBRID = "hybrid"

    @property
    def requires_video(self) -> bool:
        return self in (InteractionMode.REMOTE, InteractionMode.HYBRID)


class BillingMode(str, Enum):
    HOURLY = "hourly"
    FLAT_FEE = "flat-fee"
    RETAINER = "retainer"
    PRO_BONO = "pro-bono"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class ResourceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


class BookingRules(BaseModel):
    """Static booking policy for one vertical."""
    model_config = ConfigDict(frozen=True)

    advance_booking_hours: float = Field(ge=0)
    max_advance_booking_days: int = Field(ge=1)
    cancellation_notice_hours: float = Field(ge=0)
    buffer_minutes: int = Field(ge=0)
    allow_double_booking: bool = False
    deposit_required: bool = False
    deposit_amount: Optional[float] = None
    slot_step_minutes: Optional[int] = Field(default=None, gt=0)


def _clock_string(value: str) -> str:
    parse_clock(value)
    return value


class TimeRange(BaseModel):
    """A clock-time interval within a day, ``HH:MM`` to ``HH:MM``."""
    start: str
    end: str

    check_clock = field_validator("start", "end")(_clock_string)


class WorkingDay(BaseModel):
    """One weekday of a resource's working pattern."""
    is_working: bool
    start: str = "00:00"
    end: str = "00:00"
    breaks: list[TimeRange] = Field(default_factory=list)

    check_clock = field_validator("start", "end")(_clock_string)


class BusinessDay(BaseModel):
    """One weekday of a business-hours table."""
    is_open: bool
    open: str = "00:00"
    close: str = "00:00"

    check_clock = field_validator("open", "close")(_clock_string)


# Keyed by datetime.weekday(): Monday is 0, Sunday is 6.
WorkingHours = dict[int, WorkingDay]
BusinessHours = dict[int, BusinessDay]


class Resource(BaseModel):
    """A bookable staff member, consultant, table or venue."""
    id: int
    name: str
    profession: str
    specializations: list[str] = Field(default_factory=list)
    status: ResourceStatus = ResourceStatus.ACTIVE
    working_hours: WorkingHours = Field(default_factory=dict)
    hourly_rate: float = Field(ge=0)
    max_bookings_per_day: int = Field(default=8, ge=0)
    available_for_emergency: bool = False
    rating: float = Field(default=0.0, ge=0, le=5)
    experience_years: float = Field(default=0.0, ge=0)
    total_bookings: int = Field(default=0, ge=0)

    @property
    def is_active(self) -> bool:
        return self.status == ResourceStatus.ACTIVE


class Room(BaseModel):
    """A consultation room or office."""
    id: int
    name: str
    is_active: bool = True
    is_private: bool = True
    has_video_conference: bool = False
    amenities: list[str] = Field(default_factory=list)


class BookingRequest(BaseModel):
    """A booking the caller wants to validate before committing."""
    start: datetime
    end: datetime
    category: str
    urgency: Urgency = Urgency.STANDARD
    contact_phone: str = ""
    interaction_mode: InteractionMode = InteractionMode.IN_PERSON
    preferred_resource_id: Optional[int] = None
    context: Optional[str] = None
    billing_mode: BillingMode = BillingMode.HOURLY
    estimated_hours: Optional[float] = None
    follow_up_required: bool = False


class ExistingBooking(BaseModel):
    """A booking already held in the caller's store."""
    id: Optional[int] = None
    resource_id: int
    room_id: Optional[int] = None
    client_id: Optional[int] = None
    start: datetime
    end: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    category: str = ""
    urgency: Urgency = Urgency.STANDARD
    interaction_mode: InteractionMode = InteractionMode.IN_PERSON
    follow_up_required: bool = False

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED


class Slot(BaseModel):
    """Candidate time interval with optional resource and price."""
    start: datetime
    end: datetime
    available: bool
    resource_id: Optional[int] = None
    resource_name: Optional[str] = None
    expertise: Optional[list[str]] = None
    price: Optional[float] = None

    @model_validator(mode="after")
    def unavailable_slot_is_bare(self) -> "Slot":
        if not self.available and (self.resource_id is not None or self.price is not None):
            raise ValueError("An unavailable slot cannot carry a resource or price")
        return self


class ValidationResult(BaseModel):
    """Outcome of validating a booking request."""
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    deposit_required: bool = False


class CostRecommendation(BaseModel):
    resource_id: int
    name: str
    cost: float
    experience_years: float
    rating: float


class CostEstimate(BaseModel):
    """Price range across the resources able to take a booking."""
    min_cost: float = 0
    max_cost: float = 0
    average_cost: float = 0
    recommendations: list[CostRecommendation] = Field(default_factory=list)


class Activity(BaseModel):
    """One entry of a booking's timeline."""
    at: datetime
    time: str
    activity: str
    duration_minutes: int
    responsible: str
