"""Client profile and history summary models."""

from enum import Enum

from pydantic import BaseModel, Field


class ClientTier(str, Enum):
    INDIVIDUAL = "individual"
    SMALL_BUSINESS = "small-business"
    CORPORATION = "corporation"
    NON_PROFIT = "non-profit"


CLIENT_DISCOUNTS: dict[ClientTier, float] = {
    ClientTier.INDIVIDUAL: 0.0,
    ClientTier.SMALL_BUSINESS: 0.05,
    ClientTier.CORPORATION: 0.10,
    ClientTier.NON_PROFIT: 0.15,
}


class Client(BaseModel):
    """Client record supplied by the caller."""
    id: int
    name: str = ""
    tier: ClientTier = ClientTier.INDIVIDUAL
    total_spent: float = 0.0

    @property
    def discount(self) -> float:
        return CLIENT_DISCOUNTS[self.tier]


class HistorySummary(BaseModel):
    """Aggregated signals over a client's bookings."""
    total_bookings: int = 0
    total_hours: float = 0.0
    total_spent: float = 0.0
    average_duration_hours: float = 0.0
    preferred_categories: list[str] = Field(default_factory=list)
    frequency_per_month: float = 0.0
    risk_factors: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
