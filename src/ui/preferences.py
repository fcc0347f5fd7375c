from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QFileDialog, QSpinBox
from PySide6.QtCore import QSettings, QDir

from models.cell import MAX_GRID_SIZE, MIN_GRID_SIZE

DEFAULT_GRID_SIZE = 5


def app_settings() -> QSettings:
    return QSettings("Nonogramz", "Nonogramz")


def default_grid_size(settings: QSettings) -> int:
    """The configured size for random grids, clamped to the supported range"""
    value = int(settings.value("default_grid_size", DEFAULT_GRID_SIZE))
    return min(MAX_GRID_SIZE, max(MIN_GRID_SIZE, value))


class Preferences(QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Preferences")
        self.layout = QVBoxLayout()
        self.setLayout(self.layout)
        self.settings = app_settings()

        self.size_label = QLabel("Default Grid Size")
        self.size_input = QSpinBox()
        self.size_input.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.size_input.setValue(default_grid_size(self.settings))
        self.layout.addWidget(self.size_label)
        self.layout.addWidget(self.size_input)

        self.grids_dir_label = QLabel("Grids Directory")

        row = QHBoxLayout()
        browse_btn = QPushButton("Browse... ")
        browse_btn.clicked.connect(self.pick_grids_dir)

        self.grids_dir_input = QLineEdit()
        row.addWidget(self.grids_dir_input)
        row.addWidget(browse_btn)

        if self.settings.value("grids_dir"):
            self.grids_dir_input.setText(self.settings.value("grids_dir"))

        self.layout.addWidget(self.grids_dir_label)
        self.layout.addLayout(row)

        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self._save_settings)
        self.layout.addWidget(self.apply_button)

    def pick_grids_dir(self):
        path = QFileDialog.getExistingDirectory(self, "Select Directory", self.settings.value("grids_dir") or QDir.homePath())
        if path:
            self.grids_dir_input.setText(path)

    def _save_settings(self):
        self.settings.setValue("default_grid_size", self.size_input.value())
        self.settings.setValue("grids_dir", self.grids_dir_input.text())
