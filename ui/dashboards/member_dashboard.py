import datetime
from typing import Any, Dict, Optional

from PySide6 import QtWidgets, QtCore

import config
from core.utils import format_date, month_name
from models.member import GymMember, MemberKind
from models.plans import PLAN_NAMES

# Services
from services.attendance_service import mark_attendance
from services.finance_service import base_price, calculate_discount_amount
from services.member_service import (
    MemberNotFoundError, MemberRegistry, ValidationError,
    create_premium_member, create_regular_member, parse_member_id
)
from services.storage_service import load_members, save_members

# Dialogs
from ui.dialogs.members_dialog import MembersDialog
from ui.dialogs.payment_dialog import PaymentDialog


FIRST_YEAR = 1950


class MemberDashboard(QtWidgets.QMainWindow):
    """
    The main window: a member form on the left and the action buttons on the right.
    Every action works on the registry passed in; nothing is stored here.
    """
    members_changed = QtCore.Signal()

    def __init__(self, registry: MemberRegistry):
        super().__init__()
        self.registry = registry
        self.setWindowTitle(f"💪 {config.APP_NAME}")
        self.resize(1100, 700)

        self.init_ui()
        self.apply_style()
        self.members_changed.connect(self.refresh_status)
        self.refresh_status()

    def init_ui(self) -> None:
        cw = QtWidgets.QWidget()
        self.setCentralWidget(cw)
        layout = QtWidgets.QHBoxLayout(cw)

        # --- MEMBER FORM ---
        form_box = QtWidgets.QGroupBox("GYM Member")
        form = QtWidgets.QFormLayout(form_box)

        self.inp_id = QtWidgets.QLineEdit()
        self.inp_name = QtWidgets.QLineEdit()
        self.inp_location = QtWidgets.QLineEdit()
        self.inp_phone = QtWidgets.QLineEdit()
        self.inp_email = QtWidgets.QLineEdit()
        self.inp_gender = QtWidgets.QComboBox()
        self.inp_gender.addItems(["Select Gender", "Male", "Female"])

        form.addRow("ID*", self.inp_id)
        form.addRow("Name*", self.inp_name)
        form.addRow("Location", self.inp_location)
        form.addRow("Phone*", self.inp_phone)
        form.addRow("Email", self.inp_email)
        form.addRow("Gender", self.inp_gender)

        self.dob = self._date_row()
        form.addRow("Date of Birth:", self.dob["layout"])
        self.start = self._date_row()
        form.addRow("Membership Start:", self.start["layout"])

        self.inp_referral = QtWidgets.QLineEdit()
        self.inp_removal = QtWidgets.QLineEdit()
        self.inp_removal.setPlaceholderText("Used when reverting a regular member")
        self.inp_trainer = QtWidgets.QLineEdit()
        self.inp_charge = QtWidgets.QLineEdit()
        self.inp_charge.setPlaceholderText("Premium members only")

        form.addRow("Referral Source", self.inp_referral)
        form.addRow("Removal Reason", self.inp_removal)
        form.addRow("Trainer's Name", self.inp_trainer)
        form.addRow("Premium Plan Charge", self.inp_charge)

        self.lbl_status = QtWidgets.QLabel()
        self.lbl_status.setAlignment(QtCore.Qt.AlignCenter)
        form.addRow(self.lbl_status)
        layout.addWidget(form_box, 2)

        # --- ACTIONS ---
        actions = QtWidgets.QVBoxLayout()
        buttons = [
            ("➕ Add Regular Member", self.add_regular),
            ("⭐ Add Premium Member", self.add_premium),
            ("🟢 Activate Membership", self.activate),
            ("🔴 Deactivate Membership", self.deactivate),
            ("⏱️ Mark Attendance", self.attend),
            ("⬆️ Upgrade Plan", self.upgrade),
            ("↩️ Revert Member", self.revert),
            ("🏷️ Calculate Discount", self.show_discount),
            ("💰 Pay Due", self.pay_due),
            ("📋 Display Members", self.display_members),
            ("💾 Save to File", self.save),
            ("📂 Load from File", self.load),
            ("🧹 Clear", self.clear_form),
        ]
        for text, slot in buttons:
            b = QtWidgets.QPushButton(text)
            b.setMinimumHeight(36)
            b.setCursor(QtCore.Qt.PointingHandCursor)
            b.clicked.connect(slot)
            actions.addWidget(b)
        actions.addStretch()

        aw = QtWidgets.QWidget()
        aw.setLayout(actions)
        aw.setMaximumWidth(280)
        layout.addWidget(aw, 1)

    def _date_row(self) -> Dict[str, Any]:
        td = datetime.date.today()
        day = QtWidgets.QSpinBox()
        day.setRange(1, 31)
        month = QtWidgets.QComboBox()
        month.addItems([month_name(m) for m in range(1, 13)])
        year = QtWidgets.QComboBox()
        year.addItems([str(y) for y in range(FIRST_YEAR, td.year + 1)])

        row = QtWidgets.QHBoxLayout()
        row.addWidget(day)
        row.addWidget(month)
        row.addWidget(year)
        return {"layout": row, "day": day, "month": month, "year": year}

    @staticmethod
    def _date_text(row: Dict[str, Any]) -> str:
        return format_date(int(row["year"].currentText()), row["month"].currentIndex() + 1, row["day"].value())

    def form_values(self) -> Dict[str, Any]:
        gender = self.inp_gender.currentText()
        return {
            "id": self.inp_id.text(),
            "name": self.inp_name.text(),
            "location": self.inp_location.text(),
            "phone": self.inp_phone.text(),
            "email": self.inp_email.text(),
            "gender": "" if gender == "Select Gender" else gender,
            "dob": self._date_text(self.dob),
            "membership_start_date": self._date_text(self.start),
            "referral_source": self.inp_referral.text(),
            "personal_trainer": self.inp_trainer.text(),
            "premium_charge": self.inp_charge.text(),
        }

    def refresh_status(self) -> None:
        self.lbl_status.setText(
            f"Regular: {len(self.registry.regular_members())}  |  "
            f"Premium: {len(self.registry.premium_members())}"
        )

    # --- HELPERS ---

    def ask_member(self, prompt: str = "Enter member ID:") -> Optional[GymMember]:
        """Asks for an ID and returns the member, or None after telling the user why not."""
        text, ok = QtWidgets.QInputDialog.getText(self, "Member ID", prompt)
        if not ok or not text.strip():
            return None
        try:
            return self.registry.require_member(parse_member_id(text))
        except (ValueError, MemberNotFoundError) as e:
            QtWidgets.QMessageBox.critical(self, "Error", str(e))
            return None

    # --- ACTIONS ---

    def add_regular(self) -> None:
        try:
            member = create_regular_member(self.registry, self.form_values())
        except ValidationError as e:
            QtWidgets.QMessageBox.critical(self, "Input Error", f"Please fix the following:\n{e}")
            return
        QtWidgets.QMessageBox.information(self, "Success", f"Regular member {member.name} added successfully!")
        self.members_changed.emit()

    def add_premium(self) -> None:
        try:
            member = create_premium_member(self.registry, self.form_values())
        except ValidationError as e:
            QtWidgets.QMessageBox.critical(self, "Input Error", f"Please fix the following:\n{e}")
            return
        QtWidgets.QMessageBox.information(self, "Success", f"Premium member {member.name} added successfully!")
        self.members_changed.emit()

    def activate(self) -> None:
        member = self.ask_member()
        if member:
            member.activate_membership()
            QtWidgets.QMessageBox.information(self, "Activated", f"Membership activated for: {member.name}")

    def deactivate(self) -> None:
        member = self.ask_member()
        if member:
            member.deactivate_membership()
            QtWidgets.QMessageBox.information(self, "Deactivated", f"Membership deactivated for: {member.name}")

    def attend(self) -> None:
        member = self.ask_member()
        if not member:
            return
        if mark_attendance(self.registry, member.id):
            QtWidgets.QMessageBox.information(
                self, "Success",
                f"Attendance marked for {member.name}.\n"
                f"Attendance: {member.attendance}\nLoyalty Points: {member.loyalty_points:.0f}"
            )
        else:
            QtWidgets.QMessageBox.warning(self, "Inactive", "Activate the membership before marking attendance.")

    def upgrade(self) -> None:
        member = self.ask_member("Enter member ID to upgrade plan:")
        if not member:
            return
        current = member.price if member.kind is MemberKind.REGULAR else member.premium_charge
        choices = [p.title() for p in PLAN_NAMES]
        new_plan, ok = QtWidgets.QInputDialog.getItem(
            self, "Upgrade Plan",
            f"Current Plan: {member.plan.title()} ({current:.2f})\nSelect new plan:",
            choices, choices.index(member.plan.title()) if member.plan.title() in choices else 0, False
        )
        if ok:
            QtWidgets.QMessageBox.information(self, "Upgrade Plan", member.upgrade_plan(new_plan))

    def revert(self) -> None:
        member = self.ask_member("Enter member ID to revert:")
        if not member:
            return
        if QtWidgets.QMessageBox.question(
            self, "Confirm Revert", f"Revert {member.name}?",
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No
        ) != QtWidgets.QMessageBox.Yes:
            return

        if member.kind is MemberKind.REGULAR:
            member.revert_regular_member(self.inp_removal.text().strip())
        else:
            member.revert_premium_member()
        QtWidgets.QMessageBox.information(self, "Success", f"{member.name} has been reverted successfully!")

    def show_discount(self) -> None:
        member = self.ask_member("Enter member ID to calculate discount:")
        if not member:
            return
        price = base_price(member)
        discount = calculate_discount_amount(member)
        QtWidgets.QMessageBox.information(
            self, "Discount Calculation",
            f"ID: {member.id}\nName: {member.name}\nType: {member.kind.value.title()}\n"
            f"Base Price: £{price:.2f}\nLoyalty Points: {member.loyalty_points:.0f}\n"
            f"Discount Amount: £{discount:.2f}\nFinal Price: £{price - discount:.2f}"
        )

    def pay_due(self) -> None:
        member = self.ask_member("Enter member ID to pay dues:")
        if not member:
            return
        if not member.active_status:
            if QtWidgets.QMessageBox.question(
                self, "Inactive Membership",
                "This member's membership is currently inactive. Do you want to activate it?",
                QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No
            ) != QtWidgets.QMessageBox.Yes:
                QtWidgets.QMessageBox.information(self, "Payment Cancelled", "Membership remains inactive.")
                return
            member.activate_membership()

        PaymentDialog(member, self).exec()

    def display_members(self) -> None:
        if not len(self.registry):
            QtWidgets.QMessageBox.information(self, "Info", "No members to display.")
            return
        MembersDialog(self.registry, self).exec()

    def save(self) -> None:
        summary = save_members(self.registry)
        if summary.ok:
            QtWidgets.QMessageBox.information(self, "Save Success", summary.describe("saved"))
        else:
            QtWidgets.QMessageBox.critical(self, "Save Error", summary.describe("saved"))

    def load(self) -> None:
        summary = load_members(self.registry)
        self.members_changed.emit()
        if summary.failed:
            QtWidgets.QMessageBox.critical(self, "Load Error", summary.describe("loaded"))
        else:
            QtWidgets.QMessageBox.information(self, "Load Summary", summary.describe("loaded"))

    def clear_form(self) -> None:
        if QtWidgets.QMessageBox.question(
            self, "Confirm Clear", "Are you sure you want to clear all fields?",
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No
        ) != QtWidgets.QMessageBox.Yes:
            return

        for w in (self.inp_id, self.inp_name, self.inp_location, self.inp_phone, self.inp_email,
                  self.inp_referral, self.inp_removal, self.inp_trainer, self.inp_charge):
            w.clear()
        self.inp_gender.setCurrentIndex(0)
        for row in (self.dob, self.start):
            row["day"].setValue(1)
            row["month"].setCurrentIndex(0)
            row["year"].setCurrentIndex(0)

    def apply_style(self) -> None:
        self.setStyleSheet("""
            QMainWindow { background: #121212; color: white; font-family: 'Segoe UI'; }
            QGroupBox { border: 1px solid #444; margin-top: 10px; padding-top: 15px; font-weight: bold; color: white; }
            QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 5px; }
            QLabel { color: white; }
            QLineEdit, QComboBox, QSpinBox { background: #222; color: white; border: 1px solid #555; padding: 5px; }
            QPushButton { background: #333; color: white; border: 1px solid #555; border-radius: 4px; }
            QPushButton:hover { background: #444; }
        """)
