import logging
from typing import List

from models.member import RegularMember
from services.member_service import MemberRegistry

logger = logging.getLogger(__name__)


def mark_attendance(registry: MemberRegistry, member_id: int) -> bool:
    """
    Records a check-in for the member.

    Args:
        registry (MemberRegistry): The member collection.
        member_id (int): The ID of the member checking in.

    Returns:
        bool: True if recorded, False if the member is unknown or inactive.
    """
    member = registry.get_member_by_id(member_id)
    if member is None:
        logger.warning("Attendance not marked: no member with ID %s", member_id)
        return False

    if not member.active_status:
        logger.warning("Attendance not marked: member %s is inactive", member_id)
        return False

    member.mark_attendance()
    return True


def get_upgrade_candidates(registry: MemberRegistry) -> List[RegularMember]:
    """Regular members whose attendance has made them eligible for a plan upgrade."""
    return [m for m in registry.regular_members() if m.is_eligible_for_upgrade]
