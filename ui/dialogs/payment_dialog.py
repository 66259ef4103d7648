from typing import Optional

from PySide6 import QtWidgets, QtCore

from models.member import GymMember
from services.finance_service import PAYMENT_METHODS, process_payment, quote_payment


class PaymentDialog(QtWidgets.QDialog):
    """
    Shows what the member owes after the loyalty discount and takes the payment.
    """
    def __init__(self, member: GymMember, parent: Optional[QtWidgets.QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle("💰 Payment Confirmation")
        self.setFixedSize(400, 330)

        self.member = member
        self.quote = quote_payment(member)

        self.init_ui()
        self.apply_style()

    def init_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setSpacing(15)

        info_box = QtWidgets.QGroupBox("Member Details")
        ib_layout = QtWidgets.QFormLayout(info_box)
        ib_layout.addRow("ID:", QtWidgets.QLabel(str(self.quote.member_id)))
        ib_layout.addRow("Name:", QtWidgets.QLabel(self.quote.name))
        ib_layout.addRow("Type:", QtWidgets.QLabel(self.quote.member_type))
        ib_layout.addRow("Due Amount:", QtWidgets.QLabel(f"£{self.quote.due_amount:.2f}"))
        ib_layout.addRow("Discount:", QtWidgets.QLabel(f"£{self.quote.discount:.2f}"))
        layout.addWidget(info_box)

        lbl_final = QtWidgets.QLabel(f"Final Amount Due: £{self.quote.final_amount:.2f}")
        lbl_final.setAlignment(QtCore.Qt.AlignCenter)
        lbl_final.setStyleSheet("font-size: 16px; font-weight: bold; color: #00ff00;")
        layout.addWidget(lbl_final)

        self.inp_method = QtWidgets.QComboBox()
        self.inp_method.addItems(PAYMENT_METHODS)
        form = QtWidgets.QFormLayout()
        form.addRow("Payment Method:", self.inp_method)
        layout.addLayout(form)

        btn_layout = QtWidgets.QHBoxLayout()
        btn_pay = QtWidgets.QPushButton("✅ Confirm Payment")
        btn_pay.setFixedHeight(40)
        btn_pay.setStyleSheet("background: #006600; font-weight: bold;")
        btn_pay.clicked.connect(self.pay_and_close)

        btn_cancel = QtWidgets.QPushButton("Cancel")
        btn_cancel.setFixedHeight(40)
        btn_cancel.clicked.connect(self.reject)

        btn_layout.addWidget(btn_pay)
        btn_layout.addWidget(btn_cancel)
        layout.addLayout(btn_layout)

    def pay_and_close(self) -> None:
        receipt = process_payment(self.member, self.inp_method.currentText())

        lines = [
            "Payment Successful!",
            f"Amount Paid: £{receipt.quote.final_amount:.2f}",
            f"Payment Method: {receipt.method}",
            f"Loyalty Points Earned: {receipt.points_earned}",
            f"New Total Loyalty Points: {receipt.total_points:.0f}",
        ]
        if receipt.payment_message:
            lines.append(receipt.payment_message)

        QtWidgets.QMessageBox.information(self, "Payment Complete", "\n".join(lines))
        self.accept()

    def apply_style(self) -> None:
        self.setStyleSheet("""
            QDialog { background: #1a1a1a; color: white; font-family: 'Segoe UI'; }
            QGroupBox { border: 1px solid #444; margin-top: 10px; padding-top: 15px; font-weight: bold; }
            QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 5px; }
            QLabel { color: white; }
            QComboBox { background: #222; color: white; border: 1px solid #555; padding: 5px; }
            QPushButton { background: #333; color: white; border: 1px solid #555; border-radius: 4px; }
            QPushButton:hover { background: #444; }
        """)
