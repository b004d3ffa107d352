"""Qt6 window for BloomGarden: the garden view plus its text overlay."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from .config import GardenConfig
from .constants import COUNTER_LABEL, COUNTER_SHOW_DELAY_MS, INTRO_TEXT
from .garden_scene import GardenScene, GardenView, RenderLoop
from .state import GardenState
from .tracker import SpawnEvent, SpawnTracker

logger = logging.getLogger(__name__)

_OVERLAY_STYLE = "QLabel { color: rgba(240, 240, 210, 210); background: transparent; }"
_COUNTER_STYLE = (
    "QLabel { color: rgba(255, 240, 150, 230); background-color: rgba(0, 0, 0, 90);"
    " border-radius: 10px; padding: 6px 12px; font-weight: bold; }"
)


class GardenWindow(QWidget):
    """Top-level window hosting the garden and its counter/messages."""

    def __init__(self, config: GardenConfig, state: GardenState, parent=None) -> None:
        super().__init__(parent)
        self.config = config
        self.state = state
        self.tracker = SpawnTracker(milestones=dict(state.preset.milestones))

        self.setWindowTitle("BloomGarden")
        self.resize(config.window_width, config.window_height)
        self._build_ui()

        self.loop = RenderLoop(self.scene, interval_ms=config.frame_interval_ms, parent=self)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        """Create the view and the overlay labels."""

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.scene = GardenScene(self.state, self)
        self.view = GardenView(self.scene, self)
        layout.addWidget(self.view)
        self.scene.flowerSpawned.connect(self.on_flower_spawned)

        # Overlay labels sit on top of the view; mouse events pass through.
        self.intro_label = QLabel(INTRO_TEXT, self)
        self.intro_label.setStyleSheet(_OVERLAY_STYLE + " QLabel { font-size: 20px; }")
        self.intro_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.counter_label = QLabel(self)
        self.counter_label.setStyleSheet(_COUNTER_STYLE)
        self.counter_label.hide()

        self.message_label = QLabel(self)
        self.message_label.setStyleSheet(_OVERLAY_STYLE + " QLabel { font-size: 16px; font-style: italic; }")
        self.message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.message_label.hide()

        for label in (self.intro_label, self.counter_label, self.message_label):
            label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
            label.raise_()

    def _layout_overlay(self) -> None:
        w = self.width()
        h = self.height()
        self.intro_label.setGeometry(0, h // 2 - 30, w, 60)
        self.counter_label.adjustSize()
        self.counter_label.move(w - self.counter_label.width() - 16, 16)
        self.message_label.setGeometry(0, h - 70, w, 40)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on_flower_spawned(self, _flower_total: int) -> None:
        event = self.tracker.handle_spawn()
        self.apply_spawn_event(event)

    def apply_spawn_event(self, event: SpawnEvent) -> None:
        """Update intro, counter and milestone message for one spawn."""

        if event.first:
            self.intro_label.hide()
            QTimer.singleShot(COUNTER_SHOW_DELAY_MS, self._show_counter)

        self.counter_label.setText(f"{COUNTER_LABEL}: {event.count}")
        self.counter_label.adjustSize()
        self._layout_overlay()

        if event.message:
            self.message_label.setText(event.message)
            self.message_label.show()

    def _show_counter(self) -> None:
        self.counter_label.show()
        self.counter_label.raise_()

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._layout_overlay()
        self.loop.start()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._layout_overlay()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.loop.stop()
        super().closeEvent(event)
