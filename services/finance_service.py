import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from core.utils import round_money
from models.member import GymMember, MemberKind

logger = logging.getLogger(__name__)

# (minimum loyalty points, discount rate), highest tier first
LOYALTY_TIERS: Tuple[Tuple[float, float], ...] = (
    (100.0, 0.15),
    (50.0, 0.10),
    (25.0, 0.05),
)
PREMIUM_EXTRA_RATE = 0.05

# One loyalty point for every 10 currency units paid
POINTS_PER_AMOUNT = 10

PAYMENT_METHODS = ("Cash", "Credit Card", "Debit Card", "Bank Transfer")


def base_price(member: GymMember) -> float:
    """The plan price of a regular member, or the premium charge of a premium one."""
    if member.kind is MemberKind.REGULAR:
        return member.price
    if member.kind is MemberKind.PREMIUM:
        return member.premium_charge
    return 0.0


def calculate_discount_amount(member: GymMember) -> float:
    """
    Computes a discount from the member's loyalty points.

    Tiers give 15%, 10% or 5% of the base price at 100, 50 and 25 points.
    Premium members get a further 5% of the base price at every tier. Each
    part is rounded to 2 decimals before summing and the sum is rounded again.
    The member is not modified; this is unrelated to
    PremiumMember.calculate_discount.

    Args:
        member (GymMember): Either member kind.

    Returns:
        float: The discount amount.
    """
    price = base_price(member)
    discount = 0.0

    for min_points, rate in LOYALTY_TIERS:
        if member.loyalty_points >= min_points:
            discount = round_money(price * rate)
            break

    if member.kind is MemberKind.PREMIUM:
        discount += round_money(price * PREMIUM_EXTRA_RATE)

    return round_money(discount)


@dataclass(frozen=True)
class PaymentQuote:
    member_id: int
    name: str
    member_type: str
    due_amount: float
    discount: float

    @property
    def final_amount(self) -> float:
        return self.due_amount - self.discount


@dataclass(frozen=True)
class PaymentReceipt:
    quote: PaymentQuote
    method: str
    points_earned: int
    total_points: float
    # Outcome reported by PremiumMember.pay_due_amount; None for regular members
    payment_message: Optional[str] = None


def quote_payment(member: GymMember) -> PaymentQuote:
    """Works out what the member owes now, after the loyalty discount."""
    return PaymentQuote(
        member_id=member.id,
        name=member.name,
        member_type=member.kind.value.title(),
        due_amount=base_price(member),
        discount=calculate_discount_amount(member),
    )


def process_payment(member: GymMember, method: str) -> PaymentReceipt:
    """
    Takes payment of the quoted amount and awards loyalty points for it.
    For premium members the amount is also recorded with pay_due_amount.

    Args:
        member (GymMember): The paying member. Activation is up to the caller.
        method (str): One of PAYMENT_METHODS.

    Returns:
        PaymentReceipt: What was charged and earned.

    Raises:
        ValueError: If the payment method is unknown.
    """
    if method not in PAYMENT_METHODS:
        raise ValueError(f"Unknown payment method: {method}")

    quote = quote_payment(member)
    points_earned = int(quote.final_amount // POINTS_PER_AMOUNT)
    if points_earned > 0:
        member.add_loyalty_points(points_earned)

    payment_message = None
    if member.kind is MemberKind.PREMIUM:
        payment_message = member.pay_due_amount(quote.final_amount)

    logger.info(
        "Member %s paid %.2f by %s, earned %d points",
        member.id, quote.final_amount, method, points_earned,
    )
    return PaymentReceipt(
        quote=quote,
        method=method,
        points_earned=points_earned,
        total_points=member.loyalty_points,
        payment_message=payment_message,
    )
