"""Dialog windows for the inspector shell.

Defines modal dialogs used by the GUI. This module should not read sweep
files or touch plot items.
"""

from __future__ import annotations

from typing import Optional

from pyqtgraph.Qt import QtWidgets

from sweep_inspector import __version__
from sweep_inspector.data import SweepSource
from sweep_inspector.formatting import format_frequency


class SourceInfoDialog(QtWidgets.QDialog):
    def __init__(
        self,
        parent: QtWidgets.QWidget,
        source: SweepSource,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Sweep Info")
        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()

        count = source.sweep_count()
        lo, hi = source.frequency_limits()
        form.addRow("File", QtWidgets.QLabel(path or "(none)"))
        form.addRow("Sweeps", QtWidgets.QLabel(str(count)))
        form.addRow("Start frequency", QtWidgets.QLabel(format_frequency(lo)))
        form.addRow("Stop frequency", QtWidgets.QLabel(format_frequency(hi)))
        if count:
            form.addRow("First sweep", QtWidgets.QLabel(source.timestamp_label(0)))
            form.addRow("Last sweep", QtWidgets.QLabel(source.timestamp_label(count - 1)))
        layout.addLayout(form)

        buttons = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        buttons.accepted.connect(self.accept)
        layout.addWidget(buttons)


class AboutDialog(QtWidgets.QDialog):
    def __init__(self, parent: QtWidgets.QWidget) -> None:
        super().__init__(parent)
        self.setWindowTitle("About")
        layout = QtWidgets.QVBoxLayout(self)

        version_label = QtWidgets.QLabel(f"Sweep Inspector v{__version__}")
        version_label.setStyleSheet("font-weight: 600;")
        usage_label = QtWidgets.QLabel(
            "Drag to zoom, middle drag to pan, right click or double click to zoom out."
        )
        usage_label.setWordWrap(True)

        layout.addWidget(version_label)
        layout.addWidget(usage_label)

        buttons = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        buttons.accepted.connect(self.accept)
        layout.addWidget(buttons)
