from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from nesthunt.core.affordability import HouseholdMember
from nesthunt.preferences import Preferences


class MemberInput(BaseModel):
    member_id: str = Field(..., min_length=1, validation_alias=AliasChoices("member_id", "id"))
    display_name: str = Field(..., validation_alias=AliasChoices("display_name", "displayName"))
    annual_salary: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("annual_salary", "annualSalary"),
    )

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_member(self) -> HouseholdMember:
        return HouseholdMember(self.member_id, self.display_name, self.annual_salary)


class HouseholdRequest(BaseModel):
    members: list[MemberInput] = Field(..., min_length=1)
    budget_min: Decimal | None = Field(default=None, ge=0)
    budget_max: Decimal | None = Field(default=None, ge=0)
    jurisdiction: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_budget(self) -> "HouseholdRequest":
        if self.budget_min is not None and self.budget_max is not None and self.budget_max < self.budget_min:
            raise ValueError("budget_max must be >= budget_min")
        ids = [m.member_id for m in self.members]
        if len(set(ids)) != len(ids):
            raise ValueError("member ids must be unique")
        return self


class ExpenseRequest(BaseModel):
    rent: Decimal | None = Field(default=None, ge=0)
    monthly_take_home: Decimal | None = Field(default=None, ge=0)
    has_parking: bool = False
    overrides: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class RecommendationStoreRequest(BaseModel):
    preferences: Preferences
    items: list[dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "ExpenseRequest",
    "HouseholdRequest",
    "MemberInput",
    "RecommendationStoreRequest",
]
