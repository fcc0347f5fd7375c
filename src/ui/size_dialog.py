from typing import Optional

from PySide6.QtWidgets import QDialog, QDialogButtonBox, QFormLayout, QLabel, QSpinBox, QWidget

from models.cell import MAX_GRID_SIZE, MIN_GRID_SIZE, Size


class SizeDialog(QDialog):
    """Asks for the size of the next grid. Confirming starts a new random grid."""

    def __init__(self, current: Size, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle("Resize Grid")

        layout = QFormLayout(self)
        layout.addRow(QLabel("The current grid will be replaced by a new random one."))

        self.width_input = QSpinBox()
        self.width_input.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.width_input.setValue(current.width)
        layout.addRow("Width", self.width_input)

        self.height_input = QSpinBox()
        self.height_input.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.height_input.setValue(current.height)
        layout.addRow("Height", self.height_input)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def selected_size(self) -> Size:
        return Size(self.width_input.value(), self.height_input.value())
