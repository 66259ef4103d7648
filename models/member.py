import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from models.plans import (
    DEFAULT_PLAN, PREMIUM_PLAN_PRICES, REGULAR_PLAN_PRICES, normalize_plan, plan_price
)

logger = logging.getLogger(__name__)

ALREADY_SUBSCRIBED = "You are already subscribed to this plan."
INVALID_PLAN = "Invalid plan selected."


class MemberKind(str, Enum):
    REGULAR = "regular"
    PREMIUM = "premium"


class GymMember(ABC):
    """
    Represents a gym member's identity, attendance and loyalty state.

    Identity fields (id, name, contact details, dates) are fixed at
    construction. Attendance, loyalty points and the active flag only change
    through the methods below. Business-rule failures are reported through
    returned messages, never raised.
    """
    kind: MemberKind

    def __init__(self, id: int, name: str, location: str, phone: str, email: str,
                 gender: str, dob: str, membership_start_date: str):
        self._id = id
        self._name = name
        self._location = location
        self._phone = phone
        self._email = email
        self._gender = gender
        self._dob = dob
        self._membership_start_date = membership_start_date

        self.attendance = 0
        self.loyalty_points = 0.0
        self.active_status = False

    # --- IDENTITY (read-only) ---

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def location(self) -> str:
        return self._location

    @property
    def phone(self) -> str:
        return self._phone

    @property
    def email(self) -> str:
        return self._email

    @property
    def gender(self) -> str:
        return self._gender

    @property
    def dob(self) -> str:
        return self._dob

    @property
    def membership_start_date(self) -> str:
        return self._membership_start_date

    # --- LIFECYCLE ---

    @abstractmethod
    def mark_attendance(self) -> None:
        """Records one visit. Each variant decides what else a visit earns."""

    def activate_membership(self) -> None:
        self.active_status = True

    def deactivate_membership(self) -> None:
        if self.active_status:
            self.active_status = False

    def reset_member(self) -> None:
        """Clears attendance, loyalty points and deactivates the membership."""
        self.active_status = False
        self.attendance = 0
        self.loyalty_points = 0.0

    def add_loyalty_points(self, points: float) -> None:
        if points > 0:
            self.loyalty_points += points

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r}, active={self.active_status})"


class RegularMember(GymMember):
    """
    A member on one of the three regular tiers (basic, standard, deluxe).
    Becomes eligible for an upgrade after ATTENDANCE_LIMIT visits.
    """
    kind = MemberKind.REGULAR
    ATTENDANCE_LIMIT = 30

    def __init__(self, id: int, name: str, location: str, phone: str, email: str,
                 gender: str, dob: str, membership_start_date: str, referral_source: str):
        super().__init__(id, name, location, phone, email, gender, dob, membership_start_date)
        self.referral_source = referral_source
        self.is_eligible_for_upgrade = False
        self.removal_reason = ""
        self.plan = DEFAULT_PLAN
        self.price = REGULAR_PLAN_PRICES[DEFAULT_PLAN]

    def mark_attendance(self) -> None:
        self.attendance += 1
        self.loyalty_points += 5
        if self.attendance >= self.ATTENDANCE_LIMIT:
            self.is_eligible_for_upgrade = True

    def get_plan_price(self, plan: str) -> Optional[float]:
        return plan_price(REGULAR_PLAN_PRICES, plan)

    def upgrade_plan(self, new_plan: str) -> str:
        """
        Moves the member to another regular tier.

        Args:
            new_plan (str): Tier name, matched case-insensitively.

        Returns:
            str: The outcome message. Nothing changes unless the tier is
                 known and differs from the current one.
        """
        if normalize_plan(new_plan) == normalize_plan(self.plan):
            return ALREADY_SUBSCRIBED

        new_price = self.get_plan_price(new_plan)
        if new_price is None:
            return INVALID_PLAN

        self.plan = normalize_plan(new_plan)
        self.price = new_price
        return f"Plan upgraded to {self.plan} at price {self.price}."

    def revert_regular_member(self, removal_reason: str) -> None:
        self.reset_member()
        self.is_eligible_for_upgrade = False
        self.plan = DEFAULT_PLAN
        self.price = REGULAR_PLAN_PRICES[DEFAULT_PLAN]
        self.removal_reason = removal_reason


class PremiumMember(GymMember):
    """
    A member paying a premium charge, optionally with a personal trainer.
    Tracks how much of the charge has been paid and a full-payment discount.
    """
    kind = MemberKind.PREMIUM

    def __init__(self, id: int, name: str, location: str, phone: str, gender: str,
                 dob: str, personal_trainer: str, referral_source: str, premium_charge: float,
                 email: str = "", membership_start_date: str = ""):
        super().__init__(id, name, location, phone, email, gender, dob, membership_start_date)
        self.personal_trainer = personal_trainer
        self.referral_source = referral_source
        self.premium_charge = premium_charge
        self.is_full_payment = False
        self.paid_amount = 0.0
        self.discount_amount = 0.0
        self.plan = DEFAULT_PLAN

    @property
    def remaining_amount(self) -> float:
        return self.premium_charge - self.paid_amount

    def mark_attendance(self) -> None:
        self.attendance += 1
        self.loyalty_points += 5

    def pay_due_amount(self, amount: float) -> str:
        """
        Adds a payment towards the premium charge.

        An over-payment is kept in paid_amount and does not mark the member
        as fully paid. Full payment is only reached when the paid amount
        equals the charge exactly.

        Args:
            amount (float): Amount paid now. The sign is not checked.

        Returns:
            str: The outcome message.
        """
        if self.is_full_payment:
            return "Payment is already complete."

        self.paid_amount += amount

        if self.paid_amount > self.premium_charge:
            return "Paid amount exceeds the premium charge."

        if self.paid_amount == self.premium_charge:
            self.is_full_payment = True

        return f"Payment successful. Remaining amount to be paid: {self.remaining_amount}"

    def calculate_discount(self) -> None:
        """Sets discount_amount to 10% of the charge once fully paid, else 0."""
        if self.is_full_payment:
            self.discount_amount = 0.10 * self.premium_charge
            logger.info("Discount calculated for member %s: %s", self.id, self.discount_amount)
        else:
            self.discount_amount = 0.0
            logger.info("No discount for member %s, payment not full", self.id)

    def get_plan_price(self, plan: str) -> Optional[float]:
        return plan_price(PREMIUM_PLAN_PRICES, plan)

    def upgrade_plan(self, new_plan: str) -> str:
        """
        Moves the member to another premium tier.
        A more expensive tier resets the payment state so the new charge is
        paid from zero.
        """
        if normalize_plan(new_plan) == normalize_plan(self.plan):
            return ALREADY_SUBSCRIBED

        new_charge = self.get_plan_price(new_plan)
        if new_charge is None:
            return INVALID_PLAN

        charge_difference = new_charge - self.premium_charge
        self.plan = normalize_plan(new_plan)
        self.premium_charge = new_charge

        if charge_difference > 0:
            self.is_full_payment = False
            self.paid_amount = 0.0
            return (f"Plan upgraded to {self.plan}. New charge: {self.premium_charge}. "
                    "Please make the new payment.")
        return f"Plan upgraded to {self.plan}. New charge: {self.premium_charge}"

    def revert_premium_member(self) -> None:
        self.reset_member()
        self.personal_trainer = ""
        self.is_full_payment = False
        self.paid_amount = 0.0
        self.discount_amount = 0.0
