from __future__ import annotations

import random

import pytest

QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
QtGui = pytest.importorskip("PyQt6.QtGui")
QtCore = pytest.importorskip("PyQt6.QtCore")
QtTest = pytest.importorskip("PyQt6.QtTest")

from bloomgarden.garden_scene import GardenScene, GardenView, RenderLoop  # noqa: E402
from bloomgarden.state import GardenState, Phase  # noqa: E402


def _scene(**kwargs) -> GardenScene:
    return GardenScene(GardenState(width=800, height=600, rng=random.Random(5), **kwargs))


def test_spawn_adds_items_drawn_above_older_ones(qapp) -> None:
    scene = _scene()
    totals = []
    scene.flowerSpawned.connect(totals.append)

    scene.spawn_flower_at(100, 500)
    scene.spawn_flower_at(300, 200)

    items = scene.flower_items
    assert [item.flower for item in items] == scene.state.flowers
    assert items[0].zValue() < items[1].zValue()
    assert scene.particle_item.zValue() < items[0].zValue()
    assert totals == [1, 2]


def test_step_and_paint_a_full_lifecycle(qapp) -> None:
    scene = _scene()
    flower = scene.spawn_flower_at(100, 500)
    image = QtGui.QImage(800, 600, QtGui.QImage.Format.Format_ARGB32)

    for _ in range(400):
        scene.step()
    assert flower.phase is Phase.BLOOMED

    painter = QtGui.QPainter(image)
    scene.render(painter)
    painter.end()


def test_resize_surface_keeps_flower_origins(qapp) -> None:
    scene = _scene()
    flower = scene.spawn_flower_at(100, 500)
    scene.resize_surface(400, 300)
    assert (scene.state.width, scene.state.height) == (400, 300)
    assert scene.sceneRect().width() == 400
    assert (flower.x, flower.target_y) == (100, 500)


def test_cap_removes_evicted_items(qapp) -> None:
    scene = _scene(max_flowers=2)
    scene.spawn_flower_at(10, 300)
    oldest = scene.flower_items[0]
    for x in (20, 30):
        scene.spawn_flower_at(x, 300)
    assert [item.flower.x for item in scene.flower_items] == [20, 30]
    assert [f.x for f in scene.state.flowers] == [20, 30]
    assert oldest.scene() is None


def test_render_loop_can_be_stopped(qapp) -> None:
    scene = _scene()
    loop = RenderLoop(scene, interval_ms=5)
    loop.start()
    assert loop.running
    loop._tick()  # noqa: SLF001
    assert loop.frames == 1
    loop.stop()
    assert not loop.running
    loop.stop()


def _shown_view(qapp, scene: GardenScene) -> GardenView:
    view = GardenView(scene)
    view.resize(800, 600)
    view.show()
    qapp.processEvents()
    return view


def test_left_click_plants_a_flower_at_the_pointer(qapp) -> None:
    scene = _scene()
    view = _shown_view(qapp, scene)

    QtTest.QTest.mouseClick(
        view.viewport(),
        QtCore.Qt.MouseButton.LeftButton,
        QtCore.Qt.KeyboardModifier.NoModifier,
        QtCore.QPoint(120, 340),
    )

    assert [(f.x, f.target_y) for f in scene.state.flowers] == [(120.0, 340.0)]
    assert len(scene.flower_items) == 1
    view.close()


def test_other_buttons_do_not_plant(qapp) -> None:
    scene = _scene()
    view = _shown_view(qapp, scene)

    QtTest.QTest.mouseClick(
        view.viewport(),
        QtCore.Qt.MouseButton.RightButton,
        QtCore.Qt.KeyboardModifier.NoModifier,
        QtCore.QPoint(120, 340),
    )

    assert scene.state.flowers == []
    view.close()


def test_touch_begin_plants_one_flower(qapp) -> None:
    scene = _scene()
    view = _shown_view(qapp, scene)
    point = QtGui.QEventPoint(
        0,
        QtGui.QEventPoint.State.Pressed,
        QtCore.QPointF(200, 300),
        QtCore.QPointF(200, 300),
    )
    event = QtGui.QTouchEvent(
        QtCore.QEvent.Type.TouchBegin,
        None,
        QtCore.Qt.KeyboardModifier.NoModifier,
        [point],
    )

    assert view.viewportEvent(event) is True
    assert event.isAccepted()
    assert [(f.x, f.target_y) for f in scene.state.flowers] == [(200.0, 300.0)]
    view.close()
