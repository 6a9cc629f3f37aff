"""
Energy usage domain models and schemas.

Stored row shape, request schemas and the aggregated summary returned to
the dashboard. Attribute names of EnergyRecord match the DynamoDB item.

Dependencies: pydantic
System role: Energy API contracts
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SummaryPeriod(str, Enum):
    """Granularity of the usage summary."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EnergyRecord(BaseModel):
    """One usage reading for one user and day."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="UserId", description="Cognito sub (partition key)")
    date: str = Field(alias="Date", description="Reading date YYYY-MM-DD (sort key)")
    energy_usage: float = Field(alias="EnergyUsage", description="Usage in kWh")
    source: str = Field(default="", alias="Source", description="manual, CSV file, ...")
    ttl: int | None = Field(default=None, alias="TTL", description="Expiry epoch seconds")
    created_at: str | None = Field(default=None, alias="CreatedAt")

    def to_item(self) -> dict:
        """Return the DynamoDB item, omitting unset attributes."""
        return self.model_dump(by_alias=True, exclude_none=True)


class EnergyInputRequest(BaseModel):
    """Body of POST /energy/input."""

    date: str
    usage: float = Field(allow_inf_nan=False)
    source: str


class AggregatedUsage(BaseModel):
    """Usage totals for one summary period."""

    period: str = Field(description="Period key: date, week-start date or YYYY-MM")
    totalUsage: int | float
    avgUsage: int | float
    sourceBreakdown: dict[str, int | float] = Field(default_factory=dict)
