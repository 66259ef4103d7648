from typing import Dict, Optional

# Tier names are stored lower-case; lookups are case-insensitive.
DEFAULT_PLAN = "basic"
PLAN_NAMES = ("basic", "standard", "deluxe")

REGULAR_PLAN_PRICES: Dict[str, float] = {
    "basic": 6500.0,
    "standard": 12500.0,
    "deluxe": 18500.0,
}

PREMIUM_PLAN_PRICES: Dict[str, float] = {
    "basic": 50000.0,
    "standard": 75000.0,
    "deluxe": 100000.0,
}


def normalize_plan(plan: str) -> str:
    return plan.lower()


def plan_price(prices: Dict[str, float], plan: str) -> Optional[float]:
    """
    Looks up the fixed price of a tier.

    Returns:
        float: The tier price.
        None: If the plan name is not one of the known tiers.
    """
    return prices.get(normalize_plan(plan))
