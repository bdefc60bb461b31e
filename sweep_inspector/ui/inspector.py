"""Sweep inspector widget: one sweep on a zoomable plot plus a time slider.

The widget renders whatever sweep the bound SweepSource returns for the
slider index. It owns exactly one curve and one stats annotation at a time
and never reads files or talks to hardware itself.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

import pyqtgraph as pg
from pyqtgraph.exporters import CSVExporter, ImageExporter, SVGExporter
from pyqtgraph.Qt import QtCore, QtGui, QtWidgets

from sweep_inspector.config import InspectorConfig
from sweep_inspector.data import Sweep, SweepSource, as_sweep
from sweep_inspector.formatting import FrequencyAxisItem, format_frequency
from sweep_inspector.stats import SweepStats, compute_stats

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff"}


class HoverReadout:
    """
    Keeps the sweep under the cursor for nearest-sample lookup.
    """

    def __init__(self):
        self.sweep: Optional[Sweep] = None

    def update_sweep(self, sweep: Optional[Sweep]):
        self.sweep = sweep

    def nearest_sample(self, fx: float) -> Optional[Tuple[float, float, int]]:
        if self.sweep is None:
            return None
        idx = self.sweep.nearest_index(fx)
        if idx is None:
            return None
        return float(self.sweep.freqs_hz[idx]), float(self.sweep.power_dbm[idx]), idx


class SweepViewBox(pg.ViewBox):
    """Left drag zooms to a rubber band, middle drag pans, right click zooms out."""

    def __init__(self, owner: "SweepInspector"):
        super().__init__(enableMenu=False)
        self.owner = owner
        self.setMouseMode(pg.ViewBox.RectMode)
        self.rbScaleBox.setPen(pg.mkPen("w", width=1))

    def mouseClickEvent(self, ev):
        if ev.button() == QtCore.Qt.MouseButton.RightButton:
            self.owner.zoom_to_base()
            ev.accept()
            return
        super().mouseClickEvent(ev)

    def mouseDoubleClickEvent(self, ev):
        self.owner.zoom_to_base()
        ev.accept()


class SweepInspector(QtWidgets.QWidget):
    """
    Plot of one sweep selected by a time slider.

    The slider only commits on release; dragging updates the timestamp label.
    """

    sweepShown = QtCore.Signal(int, str)

    def __init__(
        self,
        cfg: Optional[InspectorConfig] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(parent)
        self.cfg = cfg or InspectorConfig()
        self._source: Optional[SweepSource] = None
        self._curve: Optional[pg.PlotDataItem] = None
        self._annotation: Optional[pg.TextItem] = None
        self._stats: Optional[SweepStats] = None
        self._index: Optional[int] = None
        self._zoom_base: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None
        self._overlay_items: list[pg.GraphicsObject] = []
        self._mouse_proxy: Optional[pg.SignalProxy] = None
        self.hover = HoverReadout()

        self._build_ui()
        self._wire_events()

    def _build_ui(self):
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.view_box = SweepViewBox(self)
        self.freq_axis = FrequencyAxisItem("bottom")
        self.plot = pg.PlotWidget(viewBox=self.view_box, axisItems={"bottom": self.freq_axis})
        self.plot.setObjectName("SweepData")
        self.plot.setBackground(self.cfg.background)
        self.plot_item = self.plot.getPlotItem()
        self.plot_item.setTitle("RF Sweep")
        self.plot_item.setLabel("bottom", "Frequency")
        self.plot_item.setLabel("left", "Power Level (dBm)")
        self.plot_item.showGrid(x=True, y=True, alpha=self.cfg.grid_alpha)
        self.plot_item.hideButtons()
        self.plot_item.disableAutoRange()
        self.plot_item.getAxis("left").setTickSpacing(
            major=self.cfg.power_step_db, minor=self.cfg.power_step_db / 2.0
        )
        layout.addWidget(self.plot, 1)

        # Crosshair tracker that follows the mouse.
        tracker_pen = pg.mkPen(self.cfg.tracker_color, style=QtCore.Qt.PenStyle.DashLine)
        self.vline = pg.InfiniteLine(angle=90, movable=False, pen=tracker_pen)
        self.hline = pg.InfiniteLine(angle=0, movable=False, pen=tracker_pen)
        self.hover_text = pg.TextItem(
            "",
            anchor=(0, 1),
            color=self.cfg.tracker_color,
            fill=pg.mkBrush(0, 0, 0, 180),
        )
        for item in (self.vline, self.hline, self.hover_text):
            item.hide()
            self.plot_item.addItem(item, ignoreBounds=True)
            self._overlay_items.append(item)

        controls = QtWidgets.QHBoxLayout()
        self.slider = QtWidgets.QSlider(QtCore.Qt.Orientation.Horizontal)
        self.slider.setObjectName("timeIndex")
        self.slider.setRange(0, 0)
        # valueChanged fires on release only; sliderMoved covers the drag.
        self.slider.setTracking(False)
        self.slider.setEnabled(False)
        self.timestamp_label = QtWidgets.QLabel("")
        self.timestamp_label.setObjectName("timestamp")
        self.timestamp_label.setMinimumWidth(160)
        controls.addWidget(self.slider, 1)
        controls.addWidget(self.timestamp_label)
        layout.addLayout(controls)

    def _wire_events(self):
        self.slider.valueChanged.connect(self.on_slider_commit)
        self.slider.sliderMoved.connect(self.on_slider_preview)
        self.view_box.sigXRangeChanged.connect(self._on_x_range_changed)
        self._mouse_proxy = pg.SignalProxy(
            self.plot.scene().sigMouseMoved,
            rateLimit=self.cfg.hover_rate_hz,
            slot=self.on_mouse_moved,
        )

    @property
    def source(self) -> Optional[SweepSource]:
        return self._source

    @property
    def curve(self) -> Optional[pg.PlotDataItem]:
        return self._curve

    @property
    def annotation(self) -> Optional[pg.TextItem]:
        return self._annotation

    @property
    def stats(self) -> Optional[SweepStats]:
        return self._stats

    @property
    def current_index(self) -> Optional[int]:
        return self._index

    @property
    def timestamp_text(self) -> str:
        return self.timestamp_label.text()

    @property
    def zoom_base(self) -> Optional[QtCore.QRectF]:
        if self._zoom_base is None:
            return None
        (x0, x1), (y0, y1) = self._zoom_base
        return QtCore.QRectF(QtCore.QPointF(x0, y1), QtCore.QPointF(x1, y0)).normalized()

    def bind(self, source: SweepSource) -> None:
        """Attach a data source and reset the slider; the plot is left as is."""
        self._source = source
        count = source.sweep_count()
        blocked = self.slider.blockSignals(True)
        try:
            self.slider.setMaximum(max(count - 1, 0))
            self.slider.setValue(0)
        finally:
            self.slider.blockSignals(blocked)
        self.slider.setEnabled(count > 0)
        logger.debug("Bound data source with %d sweeps", count)

    def refresh(self) -> None:
        """Pick up sweeps appended to the source since it was bound."""
        if self._source is not None:
            self._sync_slider_range(self._source.sweep_count())

    def _sync_slider_range(self, count: int) -> None:
        if self.slider.maximum() == max(count - 1, 0) and self.slider.isEnabled() == (count > 0):
            return
        blocked = self.slider.blockSignals(True)
        try:
            self.slider.setMaximum(max(count - 1, 0))
        finally:
            self.slider.blockSignals(blocked)
        self.slider.setEnabled(count > 0)
        logger.debug("Slider range now covers %d sweeps", count)

    def _index_valid(self, index: int) -> bool:
        if self._source is None:
            logger.debug("Ignoring sweep %d: no data source bound", index)
            return False
        count = self._source.sweep_count()
        # The source may have grown (or shrunk) since bind.
        self._sync_slider_range(count)
        if index < 0 or index >= count:
            logger.warning("Ignoring sweep %d: source holds %d sweeps", index, count)
            return False
        return True

    def show_sweep(self, index: int) -> None:
        """Move the slider to ``index`` and render that sweep."""
        if not self._index_valid(index):
            return
        blocked = self.slider.blockSignals(True)
        try:
            self.slider.setValue(index)
        finally:
            self.slider.blockSignals(blocked)
        self.on_slider_commit(index)

    def on_slider_preview(self, index: int) -> None:
        # Update text while dragging, before the value commits.
        if self._source is None:
            self.timestamp_label.setText("")
        else:
            self.timestamp_label.setText(self._source.timestamp_label(index))

    def on_slider_commit(self, index: int) -> None:
        if not self._index_valid(index):
            return
        self.on_slider_preview(index)
        timestamp = self.timestamp_label.text()

        self._release_sweep_items()
        sweep = as_sweep(self._source.get_sweep(index))

        self._curve = pg.PlotDataItem(
            sweep.freqs_hz,
            sweep.power_dbm,
            pen=pg.mkPen(self.cfg.curve_color, width=self.cfg.curve_width),
            antialias=True,
            name=timestamp,
        )
        self.plot_item.addItem(self._curve)

        lo, hi = (float(v) for v in self._source.frequency_limits())
        y_min, y_max = self.cfg.power_min_dbm, self.cfg.power_max_dbm
        self.plot_item.setTitle(f"RF Sweep @ {timestamp}")
        # Zooming all the way out returns to the full band and power range.
        self._zoom_base = ((lo, hi), (y_min, y_max))
        self.zoom_to_base()
        self._update_freq_ticks(lo, hi)
        self.hover.update_sweep(sweep)

        if len(sweep) == 0:
            logger.warning("Sweep %d is empty; skipping statistics", index)
        else:
            self._stats = compute_stats(sweep.power_dbm)
            self._annotation = self._make_annotation(self._stats, lo + (hi - lo) / 2.0)
            self.plot_item.addItem(self._annotation, ignoreBounds=True)

        self._index = index
        self.plot.update()
        logger.debug("Rendered sweep %d (%d samples)", index, len(sweep))
        self.sweepShown.emit(index, timestamp)

    def _make_annotation(self, stats: SweepStats, x_center: float) -> pg.TextItem:
        family, size = self.cfg.annotation_font
        item = pg.TextItem(stats.label(), color=self.cfg.annotation_color, anchor=(0.5, 1.0))
        font = QtGui.QFont(family, size)
        font.setBold(True)
        item.setFont(font)
        item.setPos(x_center, self.cfg.power_min_dbm)
        return item

    def _release_sweep_items(self) -> None:
        # Detach in reverse order of creation: annotation, then curve.
        if self._annotation is not None:
            self.plot_item.removeItem(self._annotation)
            self._annotation = None
        if self._curve is not None:
            self.plot_item.removeItem(self._curve)
            self._curve = None
        self._stats = None
        self.hover.update_sweep(None)

    def zoom_to_base(self) -> None:
        if self._zoom_base is None:
            return
        x_range, y_range = self._zoom_base
        self.view_box.setRange(xRange=x_range, yRange=y_range, padding=0.0)

    def _update_freq_ticks(self, lo: float, hi: float) -> None:
        step = (hi - lo) / float(self.cfg.freq_divisions)
        if step > 0:
            self.freq_axis.setTickSpacing(major=step, minor=step / 5.0)
        else:
            self.freq_axis.setTickSpacing()

    def _on_x_range_changed(self, _vb, x_range) -> None:
        lo, hi = x_range
        self._update_freq_ticks(float(lo), float(hi))

    def readout_text(self, fx: float) -> str:
        hit = self.hover.nearest_sample(fx)
        if hit is None:
            return format_frequency(fx)
        f_sample, p_sample, _ = hit
        return f"{format_frequency(f_sample)}\n{p_sample:.2f} dBm"

    def on_mouse_moved(self, evt):
        pos = evt[0]
        vb = self.view_box

        if not vb.sceneBoundingRect().contains(pos):
            self.hover_text.setText("")
            for item in self._overlay_items:
                item.hide()
            return

        mouse_point = vb.mapSceneToView(pos)
        fx = float(mouse_point.x())
        fy = float(mouse_point.y())
        self.vline.setPos(fx)
        self.hline.setPos(fy)

        (xmin, xmax), (ymin, ymax) = vb.viewRange()
        dx = (xmax - xmin) * 0.01
        dy = (ymax - ymin) * 0.02

        self.hover_text.setText(self.readout_text(fx))
        self.hover_text.setPos(fx + dx, fy + dy)
        for item in self._overlay_items:
            item.show()

    def export_to_file(self, path: str) -> str:
        """Render the plot to ``path``; the suffix picks image, SVG, CSV or PDF."""
        path = os.fspath(path)
        ext = os.path.splitext(path)[1].lower()
        if ext in IMAGE_SUFFIXES:
            ImageExporter(self.plot_item).export(path)
        elif ext == ".svg":
            SVGExporter(self.plot_item).export(path)
        elif ext == ".csv":
            CSVExporter(self.plot_item).export(path)
        elif ext == ".pdf":
            self._export_pdf(path)
        else:
            raise ValueError(f"Unsupported export format: {ext or '(none)'}")
        logger.info("Exported plot to %s", path)
        return path

    def _export_pdf(self, path: str) -> None:
        writer = QtGui.QPdfWriter(path)
        writer.setPageOrientation(QtGui.QPageLayout.Orientation.Landscape)
        painter = QtGui.QPainter(writer)
        try:
            page = painter.viewport()
            size = self.plot.size()
            size.scale(page.size(), QtCore.Qt.AspectRatioMode.KeepAspectRatio)
            painter.setViewport(page.x(), page.y(), size.width(), size.height())
            painter.setWindow(self.plot.rect())
            self.plot.render(painter)
        finally:
            painter.end()

    def release(self) -> None:
        """Detach every plot item this widget created, newest first."""
        if self._mouse_proxy is not None:
            self._mouse_proxy.disconnect()
            self._mouse_proxy = None
        self._release_sweep_items()
        while self._overlay_items:
            self.plot_item.removeItem(self._overlay_items.pop())
        self._zoom_base = None
        self._index = None
        self._source = None

    def closeEvent(self, event):
        self.release()
        event.accept()
