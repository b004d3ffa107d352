"""Graphics-based garden scene and view for BloomGarden.

This module is intentionally UI-focused: it draws the `GardenState` and feeds
clicks/taps back into it. All growth logic lives in `state`, all shape
construction in `geometry`.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, List

from PyQt6.QtCore import (
    QEasingCurve,
    QEvent,
    QObject,
    QPointF,
    QRectF,
    Qt,
    QTimer,
    QVariantAnimation,
    pyqtSignal,
)
from PyQt6.QtGui import (
    QBrush,
    QColor,
    QCursor,
    QLinearGradient,
    QPainter,
    QPainterPath,
    QPen,
    QRadialGradient,
)
from PyQt6.QtWidgets import (
    QFrame,
    QGraphicsEllipseItem,
    QGraphicsObject,
    QGraphicsScene,
    QGraphicsView,
    QToolTip,
)

from .constants import (
    FRAME_INTERVAL_MS,
    PARTICLE_MARGIN,
    RIPPLE_COLORS,
    RIPPLE_DURATION_MS,
    SKY_BOTTOM,
    SKY_TOP,
    SWAY_AMPLITUDE,
)
from .geometry import (
    Circle,
    Color,
    Curve,
    Ellipse,
    Line,
    QuadPath,
    Shape,
    flower_shapes,
    particle_shape,
)
from .state import Flower, GardenState

logger = logging.getLogger(__name__)

RIPPLE_Z = 1_000_000.0


class _ErrorThrottle:
    """Rate-limits user-visible nonfatal error reporting.

    Paint errors repeat on every frame; we log each one but only show a
    tooltip at most once per `cooldown_s` per key.
    """

    def __init__(self, cooldown_s: float = 6.0) -> None:
        self.cooldown_s = float(cooldown_s)
        self._last_by_key: Dict[str, float] = {}

    def should_show(self, key: str) -> bool:
        now = time.monotonic()
        last = self._last_by_key.get(key)
        if last is not None and (now - last) < self.cooldown_s:
            return False
        self._last_by_key[key] = now
        return True


def _qcolor(color: Color) -> QColor:
    r, g, b, a = color
    return QColor(r, g, b, int(round(a * 255)))


def paint_shape(painter: QPainter, shape: Shape) -> None:
    """Draw one geometry primitive."""

    if isinstance(shape, Ellipse):
        painter.save()
        painter.translate(QPointF(*shape.center))
        painter.rotate(math.degrees(shape.rotation))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(_qcolor(shape.color))
        rect = QRectF(-shape.rx, -shape.ry, shape.rx * 2, shape.ry * 2)
        if shape.half:
            # Lower half: clockwise on screen from 3 o'clock to 9 o'clock.
            path = QPainterPath()
            path.arcMoveTo(rect, 0)
            path.arcTo(rect, 0, -180)
            path.closeSubpath()
            painter.drawPath(path)
        else:
            painter.drawEllipse(rect)
        painter.restore()

    elif isinstance(shape, Circle):
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(_qcolor(shape.color))
        painter.drawEllipse(QPointF(*shape.center), shape.radius, shape.radius)

    elif isinstance(shape, Curve):
        path = QPainterPath(QPointF(*shape.start))
        path.cubicTo(QPointF(*shape.c1), QPointF(*shape.c2), QPointF(*shape.end))
        pen = QPen(_qcolor(shape.color), shape.width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(path)

    elif isinstance(shape, QuadPath):
        path = QPainterPath(QPointF(*shape.start))
        for ctrl, end in shape.segments:
            path.quadTo(QPointF(*ctrl), QPointF(*end))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(_qcolor(shape.color))
        painter.drawPath(path)

    elif isinstance(shape, Line):
        painter.setPen(QPen(_qcolor(shape.color), shape.width))
        painter.drawLine(QPointF(*shape.start), QPointF(*shape.end))


class FlowerItem(QGraphicsObject):
    """Scene item that draws one flower from its current state."""

    def __init__(self, flower: Flower, state: GardenState, parent=None) -> None:
        super().__init__(parent)
        self.flower = flower
        self.state = state

    def boundingRect(self) -> QRectF:  # noqa: N802
        flower = self.flower
        ground = self.state.height
        # Petals, leaves and sway all stay within this margin of the stem.
        reach = flower.petal_length * 1.3 + 30 + SWAY_AMPLITUDE
        top = ground - flower.stem_height - reach
        return QRectF(flower.x - reach, top, reach * 2, ground - top + 10)

    def sync(self) -> None:
        """Pick up the state change from the last tick."""

        self.prepareGeometryChange()
        self.update()

    def paint(self, painter: QPainter, option, widget=None) -> None:  # noqa: D401
        # Never raise from paint(); Qt calls it on every frame.
        try:
            painter.save()
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            for shape in flower_shapes(self.flower, self.state.height):
                paint_shape(painter, shape)
            painter.restore()
        except Exception:
            scene = self.scene()
            if isinstance(scene, GardenScene):
                scene._report_nonfatal(  # noqa: SLF001
                    "paint",
                    "BloomGarden: rendering error (see log).",
                    exc_info=True,
                )


class ParticleFieldItem(QGraphicsObject):
    """Draws the ambient particles behind every flower."""

    def __init__(self, state: GardenState, parent=None) -> None:
        super().__init__(parent)
        self.state = state
        self.setZValue(-1)

    def boundingRect(self) -> QRectF:  # noqa: N802
        m = PARTICLE_MARGIN * 2
        return QRectF(-m, -m, self.state.width + m * 2, self.state.height + m * 2)

    def paint(self, painter: QPainter, option, widget=None) -> None:  # noqa: D401
        try:
            painter.save()
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            for particle in self.state.particles:
                paint_shape(painter, particle_shape(particle))
            painter.restore()
        except Exception:
            scene = self.scene()
            if isinstance(scene, GardenScene):
                scene._report_nonfatal(  # noqa: SLF001
                    "paint_particles",
                    "BloomGarden: particle rendering error (see log).",
                    exc_info=True,
                )


class GardenScene(QGraphicsScene):
    """Scene that owns the garden state and renders it every frame."""

    flowerSpawned = pyqtSignal(int)

    def __init__(self, state: GardenState, parent=None) -> None:
        super().__init__(parent)
        self.state = state
        self.setItemIndexMethod(QGraphicsScene.ItemIndexMethod.NoIndex)
        self.setSceneRect(0, 0, state.width, state.height)
        self._err_throttle = _ErrorThrottle(cooldown_s=6.0)
        self._animations: List[QVariantAnimation] = []
        self._flower_items: List[FlowerItem] = []
        self._next_z = 0.0

        self.particle_item = ParticleFieldItem(state)
        self.addItem(self.particle_item)

    @property
    def flower_items(self) -> List[FlowerItem]:
        return list(self._flower_items)

    def _report_nonfatal(self, key: str, msg: str, *, exc_info: bool = False) -> None:
        """Log the problem and (rate-limited) show a tooltip; never raises."""

        try:
            if exc_info:
                logger.exception(msg)
            else:
                logger.warning(msg)

            if self._err_throttle.should_show(key):
                parent = self.views()[0] if self.views() else None
                QToolTip.showText(QCursor.pos(), msg, parent)
        except Exception:
            # Reporting must never take the UI down with it.
            logger.debug("Could not report nonfatal error %s", key, exc_info=True)

    # Spawning ---------------------------------------------------------
    def spawn_flower_at(self, x: float, y: float) -> Flower:
        """Plant a flower at surface coordinates (x, y), drawn above all others."""

        flower = self.state.spawn_flower_at(x, y)
        item = FlowerItem(flower, self.state)
        self._next_z += 1
        item.setZValue(self._next_z)
        self.addItem(item)
        self._flower_items.append(item)
        self._drop_evicted()

        self._create_ripple(QPointF(x, y))
        self.flowerSpawned.emit(len(self.state.flowers))
        return flower

    def _drop_evicted(self) -> None:
        """Remove items whose flower was evicted by the flower cap."""

        alive = {id(f) for f in self.state.flowers}
        kept: List[FlowerItem] = []
        for item in self._flower_items:
            if id(item.flower) in alive:
                kept.append(item)
            else:
                self.removeItem(item)
        self._flower_items = kept

    # Frame ------------------------------------------------------------
    def step(self) -> None:
        """Advance the garden by one tick."""

        self.state.step()
        self.particle_item.update()
        for item in self._flower_items:
            item.sync()

    def render_frame(self) -> None:
        """Schedule a full repaint: background, particles, then flowers."""

        self.update(self.sceneRect())

    def resize_surface(self, width: float, height: float) -> None:
        """Match the surface to the viewport. Flowers keep their coordinates."""

        self.particle_item.prepareGeometryChange()
        self.state.resize(width, height)
        self.setSceneRect(0, 0, width, height)
        for item in self._flower_items:
            item.sync()

    def drawBackground(self, painter: QPainter, rect: QRectF) -> None:  # noqa: N802
        try:
            painter.save()
            surface = self.sceneRect()
            gradient = QLinearGradient(surface.topLeft(), surface.bottomLeft())
            gradient.setColorAt(0, QColor(SKY_TOP))
            gradient.setColorAt(1, QColor(SKY_BOTTOM))
            painter.fillRect(rect, QBrush(gradient))
            painter.restore()
        except Exception:
            self._report_nonfatal("drawBackground", "BloomGarden: background render error.", exc_info=True)

    # Input ------------------------------------------------------------
    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        """Left click plants a flower where the pointer is."""

        try:
            if event.button() != Qt.MouseButton.LeftButton:
                super().mousePressEvent(event)
                return
            pos = event.scenePos()
            self.spawn_flower_at(pos.x(), pos.y())
            event.accept()
        except Exception:
            self._report_nonfatal("mousePressEvent", "BloomGarden: error handling click.", exc_info=True)

    # Effects ----------------------------------------------------------
    def _create_ripple(self, pos: QPointF) -> None:
        """Expanding, fading glow where the user clicked."""

        try:
            rng = self.state.rng
            size = 100 + rng.random() * 50
            color = RIPPLE_COLORS["gold"] if rng.random() < 0.5 else RIPPLE_COLORS["green"]

            ripple = QGraphicsEllipseItem(-size / 2, -size / 2, size, size)
            gradient = QRadialGradient(QPointF(0, 0), size / 2)
            gradient.setColorAt(0, _qcolor(color))
            gradient.setColorAt(1, QColor(0, 0, 0, 0))
            ripple.setBrush(QBrush(gradient))
            ripple.setPen(QPen(Qt.PenStyle.NoPen))
            ripple.setPos(pos)
            ripple.setZValue(RIPPLE_Z)
            ripple.setScale(0.0)
            self.addItem(ripple)

            anim = QVariantAnimation()
            anim.setDuration(RIPPLE_DURATION_MS)
            anim.setStartValue(0.0)
            anim.setEndValue(1.0)
            anim.setEasingCurve(QEasingCurve.Type.OutQuad)

            def update(value, item=ripple):
                progress = float(value)
                item.setScale(progress)
                item.setOpacity(1.0 - progress)

            anim.valueChanged.connect(update)  # type: ignore[arg-type]

            def remove_ripple(item=ripple, a=anim):
                if item.scene() is self:
                    self.removeItem(item)
                if a in self._animations:
                    self._animations.remove(a)

            anim.finished.connect(remove_ripple)
            anim.start()
            self._animations.append(anim)
        except Exception:
            self._report_nonfatal("_create_ripple", "BloomGarden: error creating ripple effect.", exc_info=True)


class GardenView(QGraphicsView):
    """View wrapper that hosts the GardenScene and adapts input to it."""

    def __init__(self, scene: GardenScene, parent=None) -> None:
        super().__init__(parent)
        self.garden_scene = scene
        self.setScene(scene)
        self.setRenderHints(QPainter.RenderHint.Antialiasing | QPainter.RenderHint.SmoothPixmapTransform)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        # Redraw everything each frame; this is the "clear" step of a frame.
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.viewport().setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        size = self.viewport().size()
        self.garden_scene.resize_surface(float(size.width()), float(size.height()))

    def viewportEvent(self, event) -> bool:  # type: ignore[override]
        """Treat the first point of a new touch like a click."""

        if event.type() == QEvent.Type.TouchBegin:
            try:
                points = event.points()
                if points:
                    scene_pos = self.mapToScene(points[0].position().toPoint())
                    self.garden_scene.spawn_flower_at(scene_pos.x(), scene_pos.y())
            except Exception:
                self.garden_scene._report_nonfatal(  # noqa: SLF001
                    "touch", "BloomGarden: error handling touch.", exc_info=True
                )
            # Accepting stops Qt from also synthesising a mouse click.
            event.accept()
            return True
        return super().viewportEvent(event)


class RenderLoop(QObject):
    """Frame driver: steps and repaints the scene once per timer tick."""

    def __init__(self, scene: GardenScene, interval_ms: int = FRAME_INTERVAL_MS, parent=None) -> None:
        super().__init__(parent)
        self.scene = scene
        self.frames = 0
        self._timer = QTimer(self)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._tick)

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if not self._timer.isActive():
            logger.debug("Render loop started (%d ms/frame)", self._timer.interval())
            self._timer.start()

    def stop(self) -> None:
        """Stop after the current frame; safe to call repeatedly."""

        if self._timer.isActive():
            self._timer.stop()
            logger.debug("Render loop stopped after %d frames", self.frames)

    def _tick(self) -> None:
        try:
            self.scene.step()
            self.scene.render_frame()
        except Exception:
            self.scene._report_nonfatal("frame", "BloomGarden: frame update failed.", exc_info=True)  # noqa: SLF001
            return
        self.frames += 1
