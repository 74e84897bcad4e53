"""
Budget contracts and price parsing.

Prices arrive from knowledge records and LLM output as heterogeneous text
("$25", "¥1,200", "Free", "25 per person"). parse_cost() turns them into
Decimal amounts; anything it cannot read costs 0.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, List

from pydantic import BaseModel, Field


# Optional currency symbol, digits with comma grouping and optional decimals.
# A number running straight into a letter, or a dot plus letter ("50.x", "12abc"),
# is malformed and rejected.
_PRICE_PATTERN = re.compile(r"[¥$€£]?\s*(\d[\d,]*(?:\.\d+)?)(?!\w|\.\w)")


def parse_cost(value: Any) -> Decimal:
    """
    Parse a price into a Decimal.

    Args:
        value: Number, Decimal, or free-text price

    Returns:
        Parsed amount, or Decimal("0") when nothing parseable is present
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    match = _PRICE_PATTERN.search(str(value))
    if not match:
        return Decimal("0")
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return Decimal("0")


class CostItem(BaseModel):
    """A single priced line in a budget breakdown."""

    name: str
    category: str = "general"
    cost: Decimal = Decimal("0")


class BudgetCheck(BaseModel):
    """Result of comparing summed item costs against the trip budget."""

    total_cost: Decimal = Field(description="Sum of parsed item costs")
    budget: Decimal = Field(description="Budget the total was compared against")
    within_budget: bool = Field(description="True when total_cost <= budget")
    remaining: Decimal = Field(description="budget - total_cost (negative when over)")
    recommendations: List[str] = Field(
        default_factory=list,
        description="Alternative suggestions, only produced when over budget",
    )
    cost_breakdown: List[CostItem] = Field(default_factory=list)

    @property
    def overage(self) -> Decimal:
        return max(Decimal("0"), self.total_cost - self.budget)
