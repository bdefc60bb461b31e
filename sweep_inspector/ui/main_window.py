"""Qt main window hosting the sweep inspector.

Owns the menus, file dialogs and persisted UI state. Plot logic lives in
SweepInspector and file parsing in sweep_inspector.data.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from pyqtgraph.Qt import QtGui, QtWidgets

from sweep_inspector.config import InspectorConfig
from sweep_inspector.data import SweepFileError, SweepSource, load_history
from sweep_inspector.persistence import load_state, save_state, update_recent_files
from sweep_inspector.ui.dialogs import AboutDialog, SourceInfoDialog
from sweep_inspector.ui.inspector import SweepInspector

logger = logging.getLogger(__name__)

OPEN_FILTER = "Sweep files (*.json *.csv);;All files (*)"
EXPORT_FILTER = (
    "PNG image (*.png);;JPEG image (*.jpg);;SVG image (*.svg);;"
    "PDF document (*.pdf);;CSV data (*.csv)"
)


class SweepMainWindow(QtWidgets.QMainWindow):
    def __init__(self, cfg: InspectorConfig, state_path: Optional[str] = None):
        super().__init__()
        self.cfg = cfg
        self.state_path = state_path
        self.state: Dict = load_state(state_path)
        self.source_path: Optional[str] = None
        # load_state has already type-checked every key.
        self.recent_files: list[str] = list(self.state.get("recent_files", []))

        self.setWindowTitle("Sweep Inspector")
        self.resize(1000, 640)
        self.inspector = SweepInspector(cfg, self)
        self.setCentralWidget(self.inspector)
        self._build_menu()
        self._wire_events()
        self.statusBar().showMessage("No sweeps loaded")

    def _state_dir(self, key: str) -> str:
        value = self.state.get(key)
        if isinstance(value, str) and os.path.isdir(value):
            return value
        return os.getcwd()

    def _build_menu(self):
        menu = self.menuBar()

        file_menu = menu.addMenu("File")
        self.open_action = QtGui.QAction("Open...", self)
        self.open_action.setShortcut(QtGui.QKeySequence.StandardKey.Open)
        file_menu.addAction(self.open_action)
        self.recent_menu = file_menu.addMenu("Open Recent")
        self.export_action = QtGui.QAction("Export Plot...", self)
        self.export_action.setEnabled(False)
        self.info_action = QtGui.QAction("Sweep Info...", self)
        self.info_action.setEnabled(False)
        self.exit_action = QtGui.QAction("Exit", self)
        file_menu.addAction(self.export_action)
        file_menu.addAction(self.info_action)
        file_menu.addSeparator()
        file_menu.addAction(self.exit_action)
        self._rebuild_recent_menu()

        view_menu = menu.addMenu("View")
        self.zoom_base_action = QtGui.QAction("Zoom to Fit", self)
        view_menu.addAction(self.zoom_base_action)

        help_menu = menu.addMenu("Help")
        self.about_action = QtGui.QAction("About", self)
        help_menu.addAction(self.about_action)

    def _wire_events(self):
        self.open_action.triggered.connect(self.on_open)
        self.export_action.triggered.connect(self.on_export)
        self.info_action.triggered.connect(self.on_open_info)
        self.exit_action.triggered.connect(self.close)
        self.zoom_base_action.triggered.connect(self.inspector.zoom_to_base)
        self.about_action.triggered.connect(lambda: AboutDialog(self).exec())
        self.inspector.sweepShown.connect(self.on_sweep_shown)

    def _rebuild_recent_menu(self) -> None:
        self.recent_menu.clear()
        for path in self.recent_files:
            action = self.recent_menu.addAction(path)
            action.triggered.connect(lambda _checked=False, p=path: self.open_path(p))
        self.recent_menu.setEnabled(bool(self.recent_files))

    def set_source(self, source: SweepSource, path: Optional[str] = None) -> None:
        self.source_path = path
        self.inspector.bind(source)
        count = source.sweep_count()
        self.export_action.setEnabled(count > 0)
        self.info_action.setEnabled(True)
        if count:
            self.inspector.show_sweep(0)
        else:
            self.statusBar().showMessage("Source holds no sweeps")
        title = os.path.basename(path) if path else "in-memory"
        self.setWindowTitle(f"Sweep Inspector - {title}")

    def open_path(self, path: str) -> bool:
        try:
            history = load_history(path, self.cfg)
        except SweepFileError as exc:
            logger.error("Failed to open %s: %s", path, exc.reason)
            self._show_error("Open Failed", f"Could not open {path}", exc.reason)
            return False
        self.set_source(history, path)
        self.recent_files = update_recent_files(self.recent_files, path)
        self.state["last_open_dir"] = os.path.dirname(os.path.abspath(path))
        self._rebuild_recent_menu()
        return True

    def _show_error(self, title: str, summary: str, reason: str) -> None:
        self.statusBar().showMessage(summary)
        QtWidgets.QMessageBox.critical(
            self,
            title,
            "\n".join([summary, f"Reason: {reason}"]),
        )

    def on_open(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Open sweeps", self._state_dir("last_open_dir"), OPEN_FILTER
        )
        if not path:
            return
        self.open_path(path)

    def on_export(self):
        default = os.path.join(self._state_dir("last_export_dir"), "sweep.png")
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Export plot", default, EXPORT_FILTER
        )
        if not path:
            return
        try:
            self.inspector.export_to_file(path)
        except (OSError, ValueError) as exc:
            logger.error("Export to %s failed: %s", path, exc)
            self._show_error("Export Failed", f"Could not export to {path}", str(exc))
            return
        self.state["last_export_dir"] = os.path.dirname(os.path.abspath(path))
        self.statusBar().showMessage(f"Exported plot to {path}")

    def on_open_info(self):
        source = self.inspector.source
        if source is None:
            return
        SourceInfoDialog(self, source, self.source_path).exec()

    def on_sweep_shown(self, index: int, timestamp: str) -> None:
        source = self.inspector.source
        count = source.sweep_count() if source is not None else 0
        self.statusBar().showMessage(f"Sweep {index + 1} of {count} @ {timestamp}")

    def _persist_state(self) -> None:
        self.state["recent_files"] = self.recent_files
        try:
            save_state(self.state, self.state_path)
        except OSError as exc:
            logger.warning("Could not save UI state: %s", exc)

    def closeEvent(self, event):
        # Persist state for predictable startup behavior.
        self._persist_state()
        self.inspector.release()
        event.accept()
