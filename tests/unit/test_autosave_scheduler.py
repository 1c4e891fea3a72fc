"""Unit tests for debounced autosave, driven through the workspace."""

import asyncio

import pytest

from projectdesk.application.services import DraftOverlay, ProjectWorkspace, SaveState
from projectdesk.domain.exceptions import SaveError
from projectdesk.infrastructure.storage.memory_draft_store import InMemoryDraftStore
from tests.fakes import PROJECT_ID, FakeProjectGateway

QUIET = 0.05


async def _open(gateway: FakeProjectGateway) -> tuple[ProjectWorkspace, DraftOverlay]:
    drafts = DraftOverlay(InMemoryDraftStore())
    workspace = ProjectWorkspace(gateway, drafts, quiet_period=QUIET)
    await workspace.load(PROJECT_ID)
    return workspace, drafts


async def _settle(workspace: ProjectWorkspace) -> None:
    await asyncio.sleep(QUIET * 3)
    await workspace.scheduler.flush()


@pytest.mark.asyncio
async def test_burst_of_edits_produces_one_save_with_latest_values():
    gateway = FakeProjectGateway()
    workspace, _ = await _open(gateway)

    workspace.set_field("content", "a")
    workspace.set_field("content", "ab")
    workspace.set_field("credits", "250")
    workspace.set_field("content", "abc")
    assert workspace.save_state is SaveState.ARMED

    await _settle(workspace)

    assert len(gateway.updates) == 1
    body = gateway.updates[0]
    assert body["content"] == "abc"
    assert body["credits"] == "250"
    assert body["status"] == "IN_BEARBEITUNG"
    assert "output_text" not in body
    assert workspace.save_state is SaveState.IDLE


@pytest.mark.asyncio
async def test_each_edit_restarts_the_quiet_period():
    gateway = FakeProjectGateway()
    workspace, _ = await _open(gateway)

    for text in ("a", "b", "c", "d"):
        workspace.set_field("content", text)
        await asyncio.sleep(QUIET / 2)

    assert gateway.updates == []
    await _settle(workspace)
    assert [u["content"] for u in gateway.updates] == ["d"]


@pytest.mark.asyncio
async def test_output_text_travels_inside_payload():
    gateway = FakeProjectGateway()
    workspace, _ = await _open(gateway)

    workspace.set_field("output_text", "Gutachten v2")
    await _settle(workspace)

    assert gateway.updates[0]["payload"]["output_text"] == "Gutachten v2"
    assert gateway.project.payload["output_text"] == "Gutachten v2"


@pytest.mark.asyncio
async def test_successful_save_discards_draft():
    gateway = FakeProjectGateway()
    workspace, drafts = await _open(gateway)

    workspace.set_field("content", "saved soon")
    assert drafts.read(PROJECT_ID) == {"content": "saved soon"}

    await _settle(workspace)

    assert drafts.read(PROJECT_ID) is None
    assert workspace.scheduler.last_saved_at is not None


@pytest.mark.asyncio
async def test_autosave_failure_is_swallowed_and_draft_kept(caplog):
    gateway = FakeProjectGateway()
    gateway.fail_updates = 1
    workspace, drafts = await _open(gateway)

    workspace.set_field("content", "unsaved")
    await _settle(workspace)

    assert gateway.updates == []
    assert workspace.get_field("content") == "unsaved"
    assert drafts.read(PROJECT_ID) == {"content": "unsaved"}
    assert workspace.save_state is SaveState.IDLE
    assert "Autosave failed" in caplog.text


@pytest.mark.asyncio
async def test_manual_save_failure_raises_and_keeps_values():
    gateway = FakeProjectGateway()
    gateway.fail_updates = 1
    workspace, drafts = await _open(gateway)

    workspace.set_field("content", "unsaved")
    with pytest.raises(SaveError) as exc_info:
        await workspace.save()

    assert exc_info.value.cause.status_code == 500
    assert workspace.get_field("content") == "unsaved"
    assert drafts.read(PROJECT_ID) == {"content": "unsaved"}


@pytest.mark.asyncio
async def test_manual_save_cancels_armed_timer():
    gateway = FakeProjectGateway()
    workspace, _ = await _open(gateway)

    workspace.set_field("content", "now")
    await workspace.save()
    await _settle(workspace)

    assert len(gateway.updates) == 1


@pytest.mark.asyncio
async def test_saves_never_overlap():
    gateway = FakeProjectGateway()
    workspace, _ = await _open(gateway)
    gateway.hold_updates()

    workspace.set_field("content", "auto")
    await asyncio.sleep(QUIET * 2)
    assert workspace.save_state is SaveState.SAVING

    manual = asyncio.create_task(workspace.save())
    await asyncio.sleep(0)
    gateway.release()
    await manual
    await workspace.scheduler.flush()

    assert gateway.max_in_flight == 1
    assert len(gateway.updates) == 2


@pytest.mark.asyncio
async def test_edit_during_save_arms_a_new_cycle():
    gateway = FakeProjectGateway()
    workspace, drafts = await _open(gateway)
    gateway.hold_updates()

    workspace.set_field("content", "first")
    await asyncio.sleep(QUIET * 2)
    assert workspace.save_state is SaveState.SAVING

    workspace.set_field("content", "second")
    gateway.release()
    await asyncio.sleep(QUIET * 4)
    await workspace.scheduler.flush()

    assert [u["content"] for u in gateway.updates] == ["first", "second"]
    assert gateway.project.content == "second"
    assert drafts.read(PROJECT_ID) is None


@pytest.mark.asyncio
async def test_close_stops_pending_autosave():
    gateway = FakeProjectGateway()
    workspace, drafts = await _open(gateway)

    workspace.set_field("content", "left behind")
    await workspace.close()
    await asyncio.sleep(QUIET * 3)

    assert gateway.updates == []
    assert drafts.read(PROJECT_ID) == {"content": "left behind"}
