import logging
import re
from typing import Any, Dict, Iterable, Iterator, List, Optional

from models.member import GymMember, MemberKind, PremiumMember, RegularMember

logger = logging.getLogger(__name__)

# Whole numbers in ASCII digits only, with an optional sign
MEMBER_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class MemberNotFoundError(LookupError):
    """No member with the requested ID is in the registry."""

    def __init__(self, member_id: int):
        super().__init__(f"No member found with ID: {member_id}")
        self.member_id = member_id


class ValidationError(ValueError):
    """
    A member form was rejected before anything was changed.
    `errors` holds one message per problem found.
    """

    def __init__(self, errors: List[str]):
        super().__init__("\n".join(errors))
        self.errors = errors


class MemberRegistry:
    """
    The in-memory member collection, kept in insertion order.
    IDs are unique across both member kinds.
    """

    def __init__(self, members: Optional[Iterable[GymMember]] = None):
        self.members: List[GymMember] = []
        for member in members or ():
            self.add_member(member)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[GymMember]:
        return iter(self.members)

    def add_member(self, member: GymMember) -> None:
        if self.get_member_by_id(member.id):
            raise ValidationError(["A member with this ID already exists!"])
        self.members.append(member)

    def get_member_by_id(self, member_id: int) -> Optional[GymMember]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def require_member(self, member_id: int) -> GymMember:
        member = self.get_member_by_id(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    def remove_member(self, member_id: int) -> bool:
        member = self.get_member_by_id(member_id)
        if member is None:
            return False
        self.members.remove(member)
        return True

    def regular_members(self) -> List[RegularMember]:
        return [m for m in self.members if m.kind is MemberKind.REGULAR]

    def premium_members(self) -> List[PremiumMember]:
        return [m for m in self.members if m.kind is MemberKind.PREMIUM]

    def clear(self) -> None:
        self.members = []


# --- FORM VALIDATION ---

def parse_member_id(text: str) -> int:
    """
    Converts the ID typed into a form.

    Raises:
        ValueError: If the text is not a whole number.
    """
    text = str(text).strip()
    if not MEMBER_ID_PATTERN.fullmatch(text):
        raise ValueError("ID must be a number!")
    return int(text)


def _field(form: Dict[str, Any], key: str) -> str:
    value = form.get(key)
    return "" if value is None else str(value).strip()


def _check_id(registry: MemberRegistry, form: Dict[str, Any], errors: List[str]) -> None:
    raw = _field(form, "id")
    if not raw:
        return
    try:
        member_id = parse_member_id(raw)
    except ValueError as e:
        errors.append(str(e))
        return
    if registry.get_member_by_id(member_id):
        errors.append("A member with this ID already exists!")


def validate_regular_form(registry: MemberRegistry, form: Dict[str, Any]) -> List[str]:
    """
    Checks the fields needed to create a regular member.

    Args:
        registry (MemberRegistry): Collection the member would join (for the duplicate check).
        form (dict): Raw form values keyed by field name.

    Returns:
        List[str]: Error messages, empty if the form is acceptable.
    """
    errors: List[str] = []
    required = [("id", "ID"), ("name", "Name"), ("phone", "Phone number"), ("email", "Email")]
    for key, label in required:
        if not _field(form, key):
            errors.append(f"{label} is required!")

    _check_id(registry, form, errors)
    return errors


def validate_premium_form(registry: MemberRegistry, form: Dict[str, Any]) -> List[str]:
    """
    Checks the fields needed to create a premium member.
    All identity fields plus trainer, referral source and a positive charge are required.
    """
    errors: List[str] = []
    required = [
        ("id", "ID"),
        ("name", "Name"),
        ("location", "Location"),
        ("phone", "Phone number"),
        ("gender", "Gender"),
        ("personal_trainer", "Trainer's name"),
        ("referral_source", "Referral source"),
        ("premium_charge", "Premium plan charge"),
    ]
    for key, label in required:
        if not _field(form, key):
            errors.append(f"{label} is required!")

    _check_id(registry, form, errors)

    charge = _field(form, "premium_charge")
    if charge:
        try:
            if float(charge) <= 0:
                errors.append("Premium plan charge must be greater than 0!")
        except ValueError:
            errors.append("Premium plan charge must be a valid number!")

    return errors


def create_regular_member(registry: MemberRegistry, form: Dict[str, Any]) -> RegularMember:
    """
    Validates the form, then builds the member and adds it to the registry.

    Raises:
        ValidationError: If any check fails. The registry is left unchanged.
    """
    errors = validate_regular_form(registry, form)
    if errors:
        raise ValidationError(errors)

    member = RegularMember(
        id=parse_member_id(_field(form, "id")),
        name=_field(form, "name"),
        location=_field(form, "location"),
        phone=_field(form, "phone"),
        email=_field(form, "email"),
        gender=_field(form, "gender"),
        dob=_field(form, "dob"),
        membership_start_date=_field(form, "membership_start_date"),
        referral_source=_field(form, "referral_source"),
    )
    registry.add_member(member)
    logger.info("Added regular member %s (%s)", member.id, member.name)
    return member


def create_premium_member(registry: MemberRegistry, form: Dict[str, Any]) -> PremiumMember:
    """
    Validates the form, then builds the member and adds it to the registry.

    Raises:
        ValidationError: If any check fails. The registry is left unchanged.
    """
    errors = validate_premium_form(registry, form)
    if errors:
        raise ValidationError(errors)

    member = PremiumMember(
        id=parse_member_id(_field(form, "id")),
        name=_field(form, "name"),
        location=_field(form, "location"),
        phone=_field(form, "phone"),
        gender=_field(form, "gender"),
        dob=_field(form, "dob"),
        personal_trainer=_field(form, "personal_trainer"),
        referral_source=_field(form, "referral_source"),
        premium_charge=float(_field(form, "premium_charge")),
        email=_field(form, "email"),
        membership_start_date=_field(form, "membership_start_date"),
    )
    registry.add_member(member)
    logger.info("Added premium member %s (%s)", member.id, member.name)
    return member


# --- DISPLAY ---

def member_details(member: GymMember) -> Dict[str, Any]:
    """
    Returns the member's fields as ordered label/value pairs for display.
    Kind-specific fields follow the shared ones.
    """
    details: Dict[str, Any] = {
        "ID": member.id,
        "Type": member.kind.value.title(),
        "Name": member.name,
        "Location": member.location,
        "Phone": member.phone,
        "Email": member.email,
        "Gender": member.gender,
        "Date of Birth": member.dob,
        "Membership Start Date": member.membership_start_date,
        "Attendance": member.attendance,
        "Loyalty Points": member.loyalty_points,
        "Active Status": member.active_status,
    }

    if member.kind is MemberKind.REGULAR:
        details["Plan"] = member.plan
        details["Price"] = member.price
        details["Eligible for Upgrade"] = member.is_eligible_for_upgrade
        if member.removal_reason:
            details["Removal Reason"] = member.removal_reason
    else:
        details["Plan"] = member.plan
        details["Personal Trainer"] = member.personal_trainer
        details["Premium Charge"] = member.premium_charge
        details["Paid Amount"] = member.paid_amount
        details["Full Payment Status"] = member.is_full_payment
        details["Remaining Amount to be Paid"] = member.remaining_amount
        if member.is_full_payment:
            details["Discount Amount"] = member.discount_amount

    return details
