import pytest

import config
from models.member import PremiumMember, RegularMember
from services.member_service import MemberRegistry


@pytest.fixture
def regular_member() -> RegularMember:
    return RegularMember(
        id=1,
        name="Asha Gurung",
        location="Kathmandu",
        phone="980000001",
        email="asha@example.com",
        gender="Female",
        dob="1999-4-12",
        membership_start_date="2024-1-1",
        referral_source="Friend",
    )


@pytest.fixture
def premium_member() -> PremiumMember:
    return PremiumMember(
        id=10,
        name="Bina Thapa",
        location="Pokhara",
        phone="9811111111",
        gender="Female",
        dob="1995-8-30",
        personal_trainer="Ramesh",
        referral_source="Website",
        premium_charge=50000.0,
        membership_start_date="2024-2-1",
    )


@pytest.fixture
def registry(regular_member, premium_member) -> MemberRegistry:
    return MemberRegistry([regular_member, premium_member])


@pytest.fixture(autouse=True)
def isolated_paths(monkeypatch, tmp_path):
    """Points the runtime file paths at a temporary folder for every test."""
    monkeypatch.setattr(config, "DATA_FOLDER", tmp_path)
    monkeypatch.setattr(config, "REGULAR_FILE", tmp_path / config.REGULAR_DB_NAME)
    monkeypatch.setattr(config, "PREMIUM_FILE", tmp_path / config.PREMIUM_DB_NAME)
