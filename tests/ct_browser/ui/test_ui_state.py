from __future__ import annotations

import asyncio

from ct_browser.config.model import GlobalConfig
from ct_browser.core.dataset_registry import DatasetRegistry
from ct_browser.core.paths import BLANK_URL
from ct_browser.services.catalog_loader import CatalogLoader
from ct_browser.ui.async_runner import AsyncRunner
from ct_browser.ui.callbacks.callbacks_frames import broadcast_anchor, handle_frame_event
from ct_browser.ui.callbacks.callbacks_panes import apply_pane_trigger
from ct_browser.ui.dash_app import build_session_factory
from ct_browser.ui.frames import BrowserFrame, LocationOutbox
from ct_browser.ui.helpers import render_pane
from ct_browser.ui.ids import IDs, pane_id

BRAIN_CATALOG_URL = "https://ex.org/brain/data/neurons.json"
BRAIN_CATALOG = {
    "names": ["T1", "T2"],
    "neurons": [
        {"name": "T1", "urls": {"combined": "t1.html", "left": "t1-left.html"}},
        {"name": "T2", "urls": {"right": "t2-right.html"}},
    ],
}
T1_URL = "https://ex.org/brain/types/t1.html"
T1_LEFT_URL = "https://ex.org/brain/types/t1-left.html"


class FakeFetcher:
    async def __call__(self, url):
        return {BRAIN_CATALOG_URL: BRAIN_CATALOG}[url]


def make_session():
    registry = DatasetRegistry()
    registry.add("Brain", "https://ex.org/brain")
    factory = build_session_factory(registry, CatalogLoader(fetch_json=FakeFetcher()), GlobalConfig(debounce_ms=10))
    return factory("session-ui")


def trigger(name, pane="a"):
    return pane_id(name, pane)


def test_browser_frame_commands():
    frame = BrowserFrame("a")
    callbacks = []
    frame.on_navigated(callbacks.append)

    frame.navigate(BLANK_URL)
    assert frame.take_command() is None

    frame.navigate(T1_URL)
    assert not frame.is_ready()
    assert frame.take_command() == {"url": T1_URL, "rev": 1}
    assert frame.take_command() is None

    frame.report_navigation(T1_LEFT_URL)
    assert frame.is_ready()
    assert frame.location == T1_LEFT_URL
    assert callbacks == [T1_LEFT_URL]

    frame.jump_to_anchor("summary")
    assert frame.take_anchor() == "summary"
    assert frame.take_anchor() is None


def test_location_outbox_keeps_latest():
    outbox = LocationOutbox()
    outbox("/?dataset-a=X")
    outbox("/?dataset-a=Y")
    assert outbox.take() == "/?dataset-a=Y"
    assert outbox.take() is None


def test_pane_triggers_drive_session():
    async def scenario():
        session = make_session()
        steps = [
            await apply_pane_trigger(session, "a", trigger(IDs.Pane.DATASET_SELECT), {"dataset": "Brain"}),
            await apply_pane_trigger(session, "a", trigger(IDs.Pane.CELLTYPE_SELECT), {"celltype": "T1"}),
            # the selector echoing back the value it was just given
            await apply_pane_trigger(session, "a", trigger(IDs.Pane.HEMISPHERE_SELECT), {"hemisphere": "combined"}),
            await apply_pane_trigger(
                session, "a", trigger(IDs.Pane.FRAME_NAV), {"frame_nav": {"currentUrl": T1_LEFT_URL}}
            ),
        ]
        return steps

    loaded, selected, echoed, reconciled = asyncio.run(scenario())

    assert loaded["view"]["celltype_options"] == [{"label": "T1", "value": "T1"}, {"label": "T2", "value": "T2"}]
    assert loaded["view"]["hemisphere_disabled"]
    assert loaded["frame_cmd"] is None
    assert loaded["location"] == "/?dataset-a=Brain"
    assert loaded["layout"]["placeholder_visible"]

    assert selected["frame_cmd"] == {"url": T1_URL, "rev": 1}
    assert selected["view"]["hemisphere"] == "combined"
    assert selected["location"] == "/?dataset-a=Brain&celltype-a=T1&hemisphere-a=combined"
    assert selected["layout"]["visible"] == {"a": True, "b": False}

    assert echoed["frame_cmd"] is None
    assert echoed["location"] is None

    assert reconciled["view"]["hemisphere"] == "left"
    assert reconciled["frame_cmd"] is None
    assert reconciled["location"] == "/?dataset-a=Brain&celltype-a=T1&hemisphere-a=left"


def test_returning_to_previous_selection_after_frame_navigation_reloads_frame():
    async def scenario():
        session = make_session()
        await apply_pane_trigger(session, "a", trigger(IDs.Pane.DATASET_SELECT), {"dataset": "Brain"})
        await apply_pane_trigger(session, "a", trigger(IDs.Pane.CELLTYPE_SELECT), {"celltype": "T1"})
        moved = await apply_pane_trigger(
            session, "a", trigger(IDs.Pane.FRAME_NAV), {"frame_nav": {"currentUrl": T1_LEFT_URL}}
        )
        back = await apply_pane_trigger(session, "a", trigger(IDs.Pane.HEMISPHERE_SELECT), {"hemisphere": "combined"})
        return session, moved, back

    session, moved, back = asyncio.run(scenario())

    assert moved["view"]["hemisphere"] == "left"
    assert session.frames["a"].location == T1_URL
    assert back["view"]["hemisphere"] == "combined"
    assert back["frame_cmd"] == {"url": T1_URL, "rev": 2}
    assert back["location"] == "/?dataset-a=Brain&celltype-a=T1&hemisphere-a=combined"


def test_render_pane_keeps_unknown_hemisphere_visible():
    async def scenario():
        session = make_session()
        await session.select_dataset("a", "Brain")
        session.select_cell_type("a", "T2")
        session.select_hemisphere("a", "dorsal")
        return session

    view = render_pane(asyncio.run(scenario()).pane("a"))

    assert view["hemisphere"] == "dorsal"
    assert view["hemisphere_options"][-1] == {"label": "dorsal (n/a)", "value": "dorsal"}
    assert view["status"].startswith("No page available for T2")


def test_render_empty_pane():
    view = render_pane(make_session().pane("b"))
    assert view["dataset"] is None
    assert view["celltype_disabled"]
    assert view["status"] == "No dataset selected."


def test_frame_events_and_anchor_broadcast():
    async def scenario():
        session = make_session()
        await handle_frame_event(session, "a", trigger(IDs.Pane.FRAME_READY), {"ready": True}, None)
        jumps = await broadcast_anchor(session, "#inputs")
        return session, jumps

    session, jumps = asyncio.run(scenario())

    assert session.frames["a"].is_ready()
    assert not session.frames["b"].is_ready()
    assert jumps == {"a": "inputs"}


def test_async_runner_runs_on_background_loop():
    runner = AsyncRunner(name="test-loop")
    try:
        async def answer():
            await asyncio.sleep(0)
            return 42

        assert runner.run(answer(), timeout=5) == 42
    finally:
        runner.close()
