"""Application entrypoint wiring for the sweep inspector.

Creates the Qt application, config, and main window. This module must not
contain plot or file-format logic beyond orchestration.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

import pyqtgraph as pg
from pyqtgraph.Qt import QtCore, QtWidgets

from sweep_inspector.config import InspectorConfig
from sweep_inspector.data import SweepFileError, load_history
from sweep_inspector.ui.main_window import SweepMainWindow

logger = logging.getLogger("sweep_inspector")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sweep-inspector", description="Browse captured RF sweeps.")
    ap.add_argument("path", nargs="?", help="sweep file (.json or .csv)")
    ap.add_argument("--index", type=int, default=0, help="sweep index to show first")
    ap.add_argument(
        "--export",
        metavar="OUT",
        help="render the sweep at --index to OUT (.png/.svg/.pdf/.csv) and exit",
    )
    ap.add_argument("--state", help="UI state file (default: ~/.sweep-inspector-state.json)")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def _export(window: SweepMainWindow, path: str, index: int, out: str) -> int:
    try:
        history = load_history(path, window.cfg)
    except SweepFileError as exc:
        logger.error("Failed to open %s: %s", path, exc.reason)
        return 1
    try:
        window.set_source(history, path)
        if index != 0:
            window.inspector.show_sweep(index)
        if window.inspector.current_index != index:
            logger.error("No sweep %d in %s", index, path)
            return 1
        # Lay out the widgets without putting a window on screen.
        window.setAttribute(QtCore.Qt.WidgetAttribute.WA_DontShowOnScreen, True)
        window.show()
        QtWidgets.QApplication.processEvents()
        window.inspector.export_to_file(out)
    except (OSError, ValueError) as exc:
        logger.error("Export to %s failed: %s", out, exc)
        return 1
    finally:
        window.close()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    cfg = InspectorConfig()
    pg.setConfigOptions(antialias=True)
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    window = SweepMainWindow(cfg, state_path=args.state)

    if args.export:
        if not args.path:
            logger.error("--export needs a sweep file")
            return 2
        return _export(window, args.path, args.index, args.export)

    if args.path and window.open_path(args.path) and args.index:
        window.inspector.show_sweep(args.index)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
