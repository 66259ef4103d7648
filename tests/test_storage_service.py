import logging

import config
from core.table_format import split_cells
from models.member import PremiumMember, RegularMember
from services.member_service import MemberRegistry
from services.storage_service import (
    PREMIUM_SCHEMA, REGULAR_SCHEMA, UNSPECIFIED_GENDER, load_members, member_to_row, save_members
)


def _long_named_member() -> RegularMember:
    return RegularMember(
        id=2,
        name="Christopherson Longname",
        location="Lalitpur",
        phone="9800000002",
        email="chris@example.com",
        gender="Male",
        dob="1990-1-1",
        membership_start_date="2023-6-15",
        referral_source="Poster",
    )


def _populate(registry: MemberRegistry) -> None:
    asha = registry.get_member_by_id(1)
    asha.activate_membership()
    for _ in range(3):
        asha.mark_attendance()
    asha.upgrade_plan("standard")

    registry.add_member(_long_named_member())

    bina = registry.get_member_by_id(10)
    bina.activate_membership()
    for _ in range(4):
        bina.mark_attendance()
    bina.add_loyalty_points(15)
    bina.pay_due_amount(10000.0)


def test_save_writes_one_table_per_kind(registry):
    _populate(registry)
    summary = save_members(registry)

    assert summary.ok
    assert summary.regular.count == 2
    assert summary.premium.count == 1

    regular_lines = config.REGULAR_FILE.read_text(encoding="utf-8").splitlines()
    assert regular_lines[0] == REGULAR_SCHEMA.border()
    assert "REGULAR MEMBERS LIST" in regular_lines[1]
    assert split_cells(regular_lines[3]) == REGULAR_SCHEMA.headers
    assert split_cells(regular_lines[5])[:2] == ["1", "Asha Gurung"]
    assert split_cells(regular_lines[6])[1] == "Christophers..."
    assert split_cells(regular_lines[-2]) == ["Total Regular Members: 2"]

    premium_lines = config.PREMIUM_FILE.read_text(encoding="utf-8").splitlines()
    assert "PREMIUM MEMBERS LIST" in premium_lines[1]
    assert split_cells(premium_lines[5]) == [
        "10", "Bina Thapa", "Pokhara", "9811111111", "Ramesh", "2024-2-1",
        "basic", "50000.00", "35", "Active",
    ]
    assert split_cells(premium_lines[-2]) == ["Total Premium Members: 1"]


def test_save_overwrites_previous_content(registry):
    save_members(registry)
    registry.remove_member(1)
    save_members(registry)

    text = config.REGULAR_FILE.read_text(encoding="utf-8")
    assert "Asha" not in text
    assert "Total Regular Members: 0" in text


def test_round_trip_keeps_documented_fields(registry):
    _populate(registry)
    save_members(registry)

    reloaded = MemberRegistry()
    summary = load_members(reloaded)

    assert summary.ok
    assert summary.total == 3
    assert [m.id for m in reloaded] == [1, 2, 10]

    asha = reloaded.get_member_by_id(1)
    assert isinstance(asha, RegularMember)
    assert (asha.name, asha.location, asha.phone, asha.email) == (
        "Asha Gurung", "Kathmandu", "980000001", "asha@example.com"
    )
    assert asha.membership_start_date == "2024-1-1"
    assert asha.plan == "standard"
    assert asha.price == 12500.0
    assert asha.attendance == 3
    assert asha.active_status is True
    # Not stored in the regular file
    assert asha.gender == UNSPECIFIED_GENDER
    assert asha.dob == ""
    assert asha.referral_source == ""
    assert asha.loyalty_points == 0.0

    chris = reloaded.get_member_by_id(2)
    assert chris.name == "Christophers..."
    assert chris.active_status is False

    bina = reloaded.get_member_by_id(10)
    assert isinstance(bina, PremiumMember)
    assert (bina.name, bina.location, bina.phone) == ("Bina Thapa", "Pokhara", "9811111111")
    assert bina.personal_trainer == "Ramesh"
    assert bina.membership_start_date == "2024-2-1"
    assert bina.plan == "basic"
    assert bina.premium_charge == 50000.0
    assert bina.loyalty_points == 35.0
    assert bina.active_status is True
    # Not stored in the premium file
    assert bina.gender == UNSPECIFIED_GENDER
    assert bina.dob == ""
    assert bina.email == ""
    assert bina.referral_source == ""
    assert bina.attendance == 0
    assert bina.paid_amount == 0.0
    assert bina.is_full_payment is False


def test_round_trip_restores_upgrade_eligibility(regular_member):
    for _ in range(30):
        regular_member.mark_attendance()
    save_members(MemberRegistry([regular_member]))

    reloaded = MemberRegistry()
    load_members(reloaded)
    assert reloaded.get_member_by_id(1).is_eligible_for_upgrade is True


def test_load_replaces_existing_collection(registry):
    save_members(registry)
    target = MemberRegistry([_long_named_member()])

    load_members(target)

    assert [m.id for m in target] == [1, 10]


def test_load_skips_malformed_rows(regular_member, caplog):
    lines = REGULAR_SCHEMA.render([member_to_row(regular_member)])
    lines.insert(6, "| abc   | Bad Id          | Town         | 1          | x@y.z                | 2024-1-1        | basic    | 6500.00 | 0     | Active   |")
    lines.insert(6, "| 5     | Missing columns |")
    config.REGULAR_FILE.write_text("\n".join(lines) + "\n", encoding="utf-8")

    registry = MemberRegistry()
    with caplog.at_level(logging.WARNING, logger="services.storage_service"):
        summary = load_members(registry)

    assert [m.id for m in registry] == [1]
    assert summary.regular.count == 1
    assert summary.regular.skipped == 2
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2


def test_load_reports_missing_files():
    registry = MemberRegistry()
    summary = load_members(registry)

    assert len(registry) == 0
    assert summary.regular.error == "File not found"
    assert summary.premium.error == "File not found"
    assert not summary.ok
    assert "Regular Members: File not found" in summary.describe()


def test_load_continues_after_unreadable_file(registry, tmp_path):
    save_members(registry)
    unreadable = tmp_path / "regular_dir"
    unreadable.mkdir()

    target = MemberRegistry()
    summary = load_members(target, regular_path=unreadable)

    assert summary.regular.error is not None
    assert summary.premium.ok
    assert [m.id for m in target] == [10]


def test_save_continues_after_unwritable_file(registry, tmp_path):
    summary = save_members(registry, regular_path=tmp_path / "missing" / "regular.txt")

    assert summary.regular.error is not None
    assert summary.premium.ok
    assert config.PREMIUM_FILE.exists()


def test_load_skips_ids_already_loaded(regular_member, tmp_path):
    clash = PremiumMember(
        id=1, name="Clash", location="X", phone="1", gender="Male", dob="",
        personal_trainer="T", referral_source="R", premium_charge=50000.0,
    )
    save_members(MemberRegistry([regular_member]))
    premium_path = tmp_path / "other_premium.txt"
    lines = PREMIUM_SCHEMA.render([member_to_row(clash)])
    premium_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    target = MemberRegistry()
    summary = load_members(target, premium_path=premium_path)

    assert [type(m) for m in target] == [RegularMember]
    assert summary.premium.count == 0
    assert summary.premium.skipped == 1


def test_summary_describe(registry):
    summary = save_members(registry)
    text = summary.describe("saved")
    assert "Regular Members: 1 saved" in text
    assert "Premium Members: 1 saved" in text
    assert text.endswith("Total Members Saved: 2")


def test_load_skips_rows_with_non_finite_price(regular_member):
    lines = REGULAR_SCHEMA.render([member_to_row(regular_member)])
    lines[5] = lines[5].replace("6500.00", "nan    ")
    config.REGULAR_FILE.write_text("\n".join(lines) + "\n", encoding="utf-8")

    registry = MemberRegistry()
    summary = load_members(registry)

    assert len(registry) == 0
    assert summary.regular.count == 0
    assert summary.regular.skipped == 1


def test_premium_points_reload_as_whole_points(premium_member):
    premium_member.add_loyalty_points(2.5)
    save_members(MemberRegistry([premium_member]))

    reloaded = MemberRegistry()
    load_members(reloaded)

    assert reloaded.get_member_by_id(10).loyalty_points == 3.0


def test_summary_failed_ignores_missing_files(registry, tmp_path):
    assert load_members(MemberRegistry()).failed is False

    save_members(registry)
    unreadable = tmp_path / "regular_dir"
    unreadable.mkdir()
    summary = load_members(MemberRegistry(), regular_path=unreadable)

    assert summary.failed is True
    assert "Regular Members: Error reading file" in summary.describe()
