"""
Budget validation capability.

Parses item prices, sums them, and compares the total against the trip
budget. Alternatives are only suggested when the plan is over budget,
most expensive items first.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel

from tripflow.shared.contracts import BudgetCheck, CostItem, parse_cost
from tripflow.tools.base import Capability, CapabilityCategory, Outcome


logger = logging.getLogger(__name__)

GENERIC_ALTERNATIVES = [
    "• Swap some paid attractions for free parks, markets or walking routes",
    "• Replace guided tours with self-guided visits",
    "• Eat at local street-food stalls or markets for some meals",
    "• Look for combined tickets or city passes",
]

_PRICE_KEYS = ("price", "estimated_cost", "cost")


def _to_cost_item(item: Any) -> CostItem:
    if isinstance(item, BaseModel):
        item = item.model_dump()
    if not isinstance(item, dict):
        return CostItem(name=str(item), cost=parse_cost(item))
    raw_price = next((item[k] for k in _PRICE_KEYS if item.get(k) is not None), None)
    category = item.get("category") or item.get("type") or "general"
    return CostItem(
        name=str(item.get("name") or "unnamed"),
        category=str(getattr(category, "value", category)),
        cost=parse_cost(raw_price),
    )


def build_recommendations(overage: Decimal, breakdown: List[CostItem]) -> List[str]:
    """Over-budget suggestions: the overage, generic ideas, then the priciest items."""
    recommendations = [f"Budget exceeded by ${overage:.2f}", "Consider these alternatives:"]
    recommendations.extend(GENERIC_ALTERNATIVES)

    priciest = sorted(
        (item for item in breakdown if item.cost > 0),
        key=lambda item: item.cost,
        reverse=True,
    )[:3]
    for item in priciest:
        recommendations.append(
            f"• Consider cheaper alternative to {item.name} (${item.cost:.2f})"
        )
    return recommendations


def validate_budget(items: Iterable[Any], budget: Any) -> BudgetCheck:
    """
    Compare summed item costs against a budget.

    Args:
        items: Dicts or models carrying name, category and a price field
        budget: Budget amount (number, Decimal or price text)

    Returns:
        BudgetCheck with exact Decimal totals
    """
    budget = parse_cost(budget)
    breakdown = [_to_cost_item(item) for item in items]
    total = sum((item.cost for item in breakdown), Decimal("0"))
    within = total <= budget

    recommendations: List[str] = []
    if not within:
        recommendations = build_recommendations(total - budget, breakdown)

    return BudgetCheck(
        total_cost=total,
        budget=budget,
        within_budget=within,
        remaining=budget - total,
        recommendations=recommendations,
        cost_breakdown=breakdown,
    )


class BudgetValidationCapability(Capability):
    name = "validate_budget"
    description = (
        "Check whether the collected attractions fit the trip budget and get "
        "cheaper alternatives when they do not."
    )
    category = CapabilityCategory.VALIDATION

    async def _run(self, params: Dict[str, Any]) -> Outcome:
        items = params.get("items") or []
        if not items:
            return Outcome.failure(
                self.name, "No items to validate. Search attractions first."
            )
        check = validate_budget(items, params.get("budget"))
        if check.within_budget:
            observation = (
                f"Within budget: total ${check.total_cost:.2f} of ${check.budget:.2f}, "
                f"${check.remaining:.2f} remaining"
            )
        else:
            observation = (
                f"Over budget: total ${check.total_cost:.2f} exceeds "
                f"${check.budget:.2f} by ${check.overage:.2f}"
            )
        return Outcome.ok(self.name, check, observation)
