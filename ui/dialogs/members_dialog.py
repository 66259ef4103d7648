from typing import List, Optional, Sequence

from PySide6 import QtWidgets

from models.member import GymMember
from services.member_service import MemberRegistry, member_details


class MembersDialog(QtWidgets.QDialog):
    """
    Read-only view of every member, one tab per member kind.
    Columns are the display fields of the first member on each tab.
    """
    def __init__(self, registry: MemberRegistry, parent: Optional[QtWidgets.QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle("📋 Members")
        self.resize(1200, 500)

        layout = QtWidgets.QVBoxLayout(self)
        tabs = QtWidgets.QTabWidget()
        tabs.addTab(self.build_table(registry.regular_members()), "Regular Members")
        tabs.addTab(self.build_table(registry.premium_members()), "Premium Members")
        layout.addWidget(tabs)

        btn_close = QtWidgets.QPushButton("Close")
        btn_close.clicked.connect(self.accept)
        layout.addWidget(btn_close)

    @staticmethod
    def build_table(members: Sequence[GymMember]) -> QtWidgets.QTableWidget:
        rows = [member_details(m) for m in members]
        headers: List[str] = []
        for details in rows:
            for key in details:
                if key not in headers:
                    headers.append(key)

        table = QtWidgets.QTableWidget(len(rows), len(headers))
        table.setHorizontalHeaderLabels(headers)
        table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)

        for r, details in enumerate(rows):
            for c, key in enumerate(headers):
                value = details.get(key, "")
                text = f"{value:.2f}" if isinstance(value, float) else str(value)
                table.setItem(r, c, QtWidgets.QTableWidgetItem(text))

        table.resizeColumnsToContents()
        return table
