"""BloomGarden - click the garden to grow procedurally animated flowers.

Entry point for the sketch. Wires up:
- Logging from the configured level
- The in-memory garden state (flowers + ambient particles)
- The garden window and its frame loop
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

from .config import GardenConfig

__version__ = "0.1.0"

__all__ = ["GardenConfig", "SurfaceUnavailableError", "run", "setup_logging"]

logger = logging.getLogger(__name__)


class SurfaceUnavailableError(RuntimeError):
    """No drawing surface could be created (e.g. no screen available)."""


def setup_logging(level: str) -> None:
    """Configure root logging for the sketch."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _check_display() -> None:
    """Raise SurfaceUnavailableError when a Linux desktop platform has no display.

    Qt aborts the process inside QApplication() when xcb or wayland cannot
    connect, so this has to run first.
    """

    if not sys.platform.startswith("linux"):
        return
    platform = os.environ.get("QT_QPA_PLATFORM", "")
    if platform and not platform.startswith(("xcb", "wayland")):
        return
    if os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"):
        return
    raise SurfaceUnavailableError(
        "no display available for the garden surface (set DISPLAY or WAYLAND_DISPLAY, "
        "or QT_QPA_PLATFORM=offscreen)"
    )


def run(config: GardenConfig, argv: Optional[List[str]] = None) -> int:
    """Open the garden window and run the Qt event loop.

    Raises SurfaceUnavailableError when there is no display to connect to or
    Qt has no screen to draw on.
    """

    _check_display()

    # Qt is only needed once a window is actually opened.
    from PyQt6.QtWidgets import QApplication

    from .state import GardenState
    from .ui import GardenWindow

    app = QApplication.instance() or QApplication(argv if argv is not None else sys.argv[:1])
    if app.primaryScreen() is None:
        raise SurfaceUnavailableError(
            "no screen available for the garden surface "
            f"(Qt platform: {app.platformName() or 'unknown'})"
        )

    state = GardenState.from_config(config, config.window_width, config.window_height)
    window = GardenWindow(config, state)
    window.show()
    logger.info("BloomGarden started with the %r preset", config.preset)
    return app.exec()
