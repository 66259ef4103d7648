import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import config
from core.table_format import FLAG, INT, MONEY, POINTS, Column, TableSchema
from models.member import GymMember, MemberKind, PremiumMember, RegularMember
from models.plans import DEFAULT_PLAN, normalize_plan
from services.member_service import MemberRegistry

logger = logging.getLogger(__name__)

# Placeholders for fields the files do not keep
UNSPECIFIED_GENDER = "Not Specified"
FILE_NOT_FOUND = "File not found"

REGULAR_SCHEMA = TableSchema(
    title="REGULAR MEMBERS LIST",
    footer_label="Total Regular Members",
    columns=(
        Column("ID", 5, "id", INT),
        Column("Name", 15, "name"),
        Column("Location", 12, "location"),
        Column("Phone", 10, "phone"),
        Column("Email", 20, "email"),
        Column("Start Date", 15, "membership_start_date"),
        Column("Plan", 8, "plan"),
        Column("Price(£)", 7, "price", MONEY),
        Column("Att.", 5, "attendance", INT),
        Column("Status", 8, "active_status", FLAG),
    ),
)

PREMIUM_SCHEMA = TableSchema(
    title="PREMIUM MEMBERS LIST",
    footer_label="Total Premium Members",
    columns=(
        Column("ID", 5, "id", INT),
        Column("Name", 15, "name"),
        Column("Location", 12, "location"),
        Column("Phone", 10, "phone"),
        Column("Trainer", 15, "personal_trainer"),
        Column("Start Date", 15, "membership_start_date"),
        Column("Plan", 8, "plan"),
        Column("Charge(£)", 10, "premium_charge", MONEY),
        Column("Points", 7, "loyalty_points", POINTS),
        Column("Status", 7, "active_status", FLAG),
    ),
)

SCHEMAS = {
    MemberKind.REGULAR: REGULAR_SCHEMA,
    MemberKind.PREMIUM: PREMIUM_SCHEMA,
}


@dataclass
class FileReport:
    """Outcome of saving or loading one member file."""
    path: Optional[Path]
    count: int = 0
    skipped: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class StorageSummary:
    regular: FileReport
    premium: FileReport

    @property
    def total(self) -> int:
        return self.regular.count + self.premium.count

    @property
    def ok(self) -> bool:
        return self.regular.ok and self.premium.ok

    @property
    def failed(self) -> bool:
        """True when a file could not be read or written. A missing file on load does not count."""
        return any(r.error not in (None, FILE_NOT_FOUND) for r in (self.regular, self.premium))

    def describe(self, action: str = "loaded") -> str:
        """Human-readable summary, one line per file plus the total."""
        lines = []
        for label, report in (("Regular Members", self.regular), ("Premium Members", self.premium)):
            if report.ok:
                line = f"{label}: {report.count} {action}"
                if report.skipped:
                    line += f" ({report.skipped} malformed rows skipped)"
            else:
                line = f"{label}: {report.error}"
            lines.append(line)
        lines.append("")
        lines.append(f"Total Members {action.title()}: {self.total}")
        return "\n".join(lines)


# --- ROW MAPPING ---

def member_to_row(member: GymMember) -> Dict[str, Any]:
    """Collects the values of every column in the member's schema."""
    schema = SCHEMAS[member.kind]
    return {c.field: getattr(member, c.field) for c in schema.columns}


def regular_from_row(row: Dict[str, Any]) -> RegularMember:
    member = RegularMember(
        id=row["id"],
        name=row["name"],
        location=row["location"],
        phone=row["phone"],
        email=row["email"],
        gender=UNSPECIFIED_GENDER,
        dob="",
        membership_start_date=row["membership_start_date"],
        referral_source="",
    )
    member.plan = normalize_plan(row["plan"]) or DEFAULT_PLAN
    member.price = row["price"]
    member.attendance = row["attendance"]
    member.is_eligible_for_upgrade = member.attendance >= member.ATTENDANCE_LIMIT
    if row["active_status"]:
        member.activate_membership()
    return member


def premium_from_row(row: Dict[str, Any]) -> PremiumMember:
    member = PremiumMember(
        id=row["id"],
        name=row["name"],
        location=row["location"],
        phone=row["phone"],
        gender=UNSPECIFIED_GENDER,
        dob="",
        personal_trainer=row["personal_trainer"],
        referral_source="",
        premium_charge=row["premium_charge"],
        membership_start_date=row["membership_start_date"],
    )
    member.plan = normalize_plan(row["plan"]) or DEFAULT_PLAN
    member.loyalty_points = row["loyalty_points"]
    if row["active_status"]:
        member.activate_membership()
    return member


ROW_READERS = {
    MemberKind.REGULAR: regular_from_row,
    MemberKind.PREMIUM: premium_from_row,
}


# --- FILE I/O ---

def write_members(path: Path, kind: MemberKind, members: Sequence[GymMember]) -> int:
    """
    Overwrites the file with a table of the given members of one kind.

    Returns:
        int: Number of rows written.

    Raises:
        OSError: If the file cannot be written.
    """
    schema = SCHEMAS[kind]
    rows = [member_to_row(m) for m in members if m.kind is kind]
    lines = schema.render(rows)

    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write("\n".join(lines) + "\n")

    return len(rows)


def read_members(path: Path, kind: MemberKind) -> Tuple[List[GymMember], int]:
    """
    Parses one member file.
    Malformed rows are logged and skipped rather than failing the whole file.

    Returns:
        Tuple[List[GymMember], int]: The members read and the number of rows skipped.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8 text.
    """
    schema = SCHEMAS[kind]
    with open(path, "r", encoding="utf-8") as f:
        parsed = schema.parse(f)

    for line_no, line, reason in parsed.rejected:
        logger.warning("Skipping %s member row at %s:%d (%s): %s", kind.value, path, line_no, reason, line)

    to_member = ROW_READERS[kind]
    return [to_member(row) for row in parsed.rows], len(parsed.rejected)


def _resolve(path: Optional[Path], default: Optional[Path], name: str) -> Path:
    if path is not None:
        return Path(path)
    if default is not None:
        return default
    return Path.cwd() / name


def save_members(registry: MemberRegistry, regular_path: Optional[Path] = None,
                 premium_path: Optional[Path] = None) -> StorageSummary:
    """
    Writes the whole collection to the two member files.
    A failure on one file is recorded in the summary and does not stop the other.

    Args:
        registry (MemberRegistry): The member collection.
        regular_path (Path, optional): Defaults to config.REGULAR_FILE.
        premium_path (Path, optional): Defaults to config.PREMIUM_FILE.

    Returns:
        StorageSummary: Per-file counts and errors.
    """
    targets = (
        (MemberKind.REGULAR, _resolve(regular_path, config.REGULAR_FILE, config.REGULAR_DB_NAME)),
        (MemberKind.PREMIUM, _resolve(premium_path, config.PREMIUM_FILE, config.PREMIUM_DB_NAME)),
    )
    reports = {}
    for kind, path in targets:
        report = FileReport(path=path)
        try:
            report.count = write_members(path, kind, registry.members)
            logger.info("Saved %d %s members to %s", report.count, kind.value, path)
        except OSError as e:
            report.error = f"Error saving data to file: {e}"
            logger.error("Failed to save %s members to %s: %s", kind.value, path, e)
        reports[kind] = report

    return StorageSummary(regular=reports[MemberKind.REGULAR], premium=reports[MemberKind.PREMIUM])


def load_members(registry: MemberRegistry, regular_path: Optional[Path] = None,
                 premium_path: Optional[Path] = None) -> StorageSummary:
    """
    Replaces the collection with the members found in the two files.
    The collection is cleared first; whatever each readable file yields is
    then added, regular members before premium ones.

    Returns:
        StorageSummary: Per-file counts, skipped rows and errors.
    """
    registry.clear()
    targets = (
        (MemberKind.REGULAR, _resolve(regular_path, config.REGULAR_FILE, config.REGULAR_DB_NAME)),
        (MemberKind.PREMIUM, _resolve(premium_path, config.PREMIUM_FILE, config.PREMIUM_DB_NAME)),
    )
    reports = {}
    for kind, path in targets:
        report = FileReport(path=path)
        reports[kind] = report

        if not path.exists():
            report.error = FILE_NOT_FOUND
            logger.info("No %s member file at %s", kind.value, path)
            continue

        try:
            members, report.skipped = read_members(path, kind)
        except (OSError, UnicodeDecodeError) as e:
            report.error = f"Error reading file: {e}"
            logger.error("Failed to read %s members from %s: %s", kind.value, path, e)
            continue

        for member in members:
            if registry.get_member_by_id(member.id):
                report.skipped += 1
                logger.warning("Skipping duplicate member ID %s in %s", member.id, path)
                continue
            registry.add_member(member)
            report.count += 1

        logger.info("Loaded %d %s members from %s", report.count, kind.value, path)

    return StorageSummary(regular=reports[MemberKind.REGULAR], premium=reports[MemberKind.PREMIUM])
