"""Modal dialog for the solved screen, dimming the grid behind it."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QColor, QFont
from PySide6.QtWidgets import (
    QDialog,
    QFrame,
    QGraphicsDropShadowEffect,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)


class ShadeOverlay(QWidget):
    """Translucent overlay covering its parent while a dialog is open."""

    def __init__(self, parent: Optional[QWidget] = None, alpha: int = 120):
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(f"background-color: rgba(0, 0, 0, {alpha});")
        if parent is not None:
            parent.installEventFilter(self)
            self._sync_to_parent()
        self.hide()

    def eventFilter(self, watched, event):  # noqa: D401 - Qt override
        if watched is self.parentWidget() and event.type() in (QEvent.Resize, QEvent.Show):
            self._sync_to_parent()
        return super().eventFilter(watched, event)

    def _sync_to_parent(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())
            self.raise_()


class MessageDialog(QDialog):
    """Frameless dialog with a headline, a detail line and a single button"""

    def __init__(self, title: str, text: str, parent: Optional[QWidget] = None, button_text: str = "Continue"):
        super().__init__(parent)
        self._overlay = ShadeOverlay(parent)

        self.setModal(True)
        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.Dialog)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)

        panel = QFrame(self)
        panel.setObjectName("messagePanel")
        panel.setStyleSheet(
            "#messagePanel { background-color: white; border-radius: 16px; padding: 16px; }"
            "QLabel { color: #111; }"
        )

        layout = QVBoxLayout(panel)
        title_label = QLabel(title, panel)
        title_label.setFont(QFont("Arial", 18, QFont.Bold))
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        text_label = QLabel(text, panel)
        text_label.setFont(QFont("Arial", 14))
        text_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(text_label)

        button = QPushButton(button_text, panel)
        button.clicked.connect(self.accept)
        layout.addWidget(button, alignment=Qt.AlignmentFlag.AlignCenter)

        shadow = QGraphicsDropShadowEffect(panel)
        shadow.setBlurRadius(35)
        shadow.setOffset(0, 12)
        shadow.setColor(QColor(0, 0, 0, 60))
        panel.setGraphicsEffect(shadow)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(12, 12, 12, 12)
        outer.addWidget(panel)

    def showEvent(self, event):  # noqa: D401 - Qt override
        self._overlay.show()
        self._overlay.raise_()
        super().showEvent(event)
        self.raise_()

    def hideEvent(self, event):  # noqa: D401 - Qt override
        self._overlay.hide()
        super().hideEvent(event)


def show_solved(parent: QWidget, text: str) -> int:
    """Show the solved screen modally with the given detail text"""
    dialog = MessageDialog("Grid solved", text, parent=parent)
    return dialog.exec()
