"""Unit tests for the NotesEditor."""

import asyncio

import pytest

from projectdesk.application.services import DraftOverlay, ProjectWorkspace
from projectdesk.domain.entities import NoteList
from projectdesk.domain.exceptions import EntityNotFoundError, SaveError, ValidationError
from projectdesk.infrastructure.storage.memory_draft_store import InMemoryDraftStore
from tests.fakes import PROJECT_ID, FakeProjectGateway, make_project

FOREIGN_PAYLOAD = {
    "foo": "bar",
    "order": {"items": [1, 2, 3]},
    "crm_notes": {"customer": [], "internal": [], "archived": ["keep"]},
}


async def _open(gateway: FakeProjectGateway) -> ProjectWorkspace:
    workspace = ProjectWorkspace(gateway, DraftOverlay(InMemoryDraftStore()), quiet_period=0.05)
    await workspace.load(PROJECT_ID)
    return workspace


@pytest.mark.asyncio
async def test_blank_note_is_rejected_without_request():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)

    for text in ("", "   ", "\n\t"):
        with pytest.raises(ValidationError):
            await workspace.add_note(NoteList.INTERNAL, text)

    assert gateway.updates == []
    assert workspace.notes(NoteList.INTERNAL) == []


@pytest.mark.asyncio
async def test_notes_are_prepended_newest_first():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)

    await workspace.add_note("customer", "A")
    await workspace.add_note("customer", "B")

    assert [n.text for n in workspace.notes("customer")] == ["B", "A"]
    stored = gateway.project.payload["crm_notes"]["customer"]
    assert [n["text"] for n in stored] == ["B", "A"]
    assert workspace.notes("internal") == []


@pytest.mark.asyncio
async def test_failed_add_rolls_back():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)
    await workspace.add_note(NoteList.INTERNAL, "kept")

    gateway.fail_updates = 1
    with pytest.raises(SaveError):
        await workspace.add_note(NoteList.INTERNAL, "lost")

    assert [n.text for n in workspace.notes(NoteList.INTERNAL)] == ["kept"]


@pytest.mark.asyncio
async def test_remove_note_and_restore_on_failure():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)
    first = await workspace.add_note(NoteList.CUSTOMER, "one")
    second = await workspace.add_note(NoteList.CUSTOMER, "two")

    gateway.fail_updates = 1
    with pytest.raises(SaveError):
        await workspace.remove_note(NoteList.CUSTOMER, first.id)
    assert [n.id for n in workspace.notes(NoteList.CUSTOMER)] == [second.id, first.id]

    await workspace.remove_note(NoteList.CUSTOMER, first.id)
    assert [n.id for n in workspace.notes(NoteList.CUSTOMER)] == [second.id]
    assert [n["id"] for n in gateway.project.payload["crm_notes"]["customer"]] == [second.id]


@pytest.mark.asyncio
async def test_remove_unknown_note_raises():
    workspace = await _open(FakeProjectGateway())

    with pytest.raises(EntityNotFoundError):
        await workspace.remove_note(NoteList.INTERNAL, "missing")


@pytest.mark.asyncio
async def test_unknown_list_is_rejected():
    workspace = await _open(FakeProjectGateway())

    with pytest.raises(ValidationError):
        await workspace.add_note("private", "text")


@pytest.mark.asyncio
async def test_note_writes_preserve_foreign_payload_keys():
    gateway = FakeProjectGateway(project=make_project(payload=FOREIGN_PAYLOAD))
    workspace = await _open(gateway)

    await workspace.add_note(NoteList.INTERNAL, "Hello")

    payload = gateway.updates[0]["payload"]
    assert payload["foo"] == "bar"
    assert payload["order"] == {"items": [1, 2, 3]}
    assert payload["crm_notes"]["archived"] == ["keep"]
    assert [n["text"] for n in payload["crm_notes"]["internal"]] == ["Hello"]
    assert set(gateway.updates[0]) == {"payload"}


@pytest.mark.asyncio
async def test_adds_on_one_list_run_one_at_a_time():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)
    gateway.hold_updates()

    first = asyncio.create_task(workspace.add_note(NoteList.INTERNAL, "first"))
    second = asyncio.create_task(workspace.add_note(NoteList.INTERNAL, "second"))
    await asyncio.sleep(0.01)
    gateway.release()
    await asyncio.gather(first, second)

    assert gateway.max_in_flight == 1
    assert len(gateway.updates) == 2
    assert [n["text"] for n in gateway.updates[-1]["payload"]["crm_notes"]["internal"]] == [
        "second",
        "first",
    ]


@pytest.mark.asyncio
async def test_non_text_note_is_rejected():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)

    with pytest.raises(ValidationError):
        await workspace.add_note(NoteList.INTERNAL, 5)

    assert gateway.updates == []


@pytest.mark.asyncio
async def test_note_added_during_field_save_survives():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)
    gateway.hold_updates()

    workspace.set_field("content", "autosaved")
    await asyncio.sleep(0.1)
    adding = asyncio.create_task(workspace.add_note(NoteList.INTERNAL, "Test"))
    await asyncio.sleep(0)
    gateway.release()
    await adding
    await workspace.scheduler.flush()

    assert gateway.max_in_flight == 1
    assert gateway.project.content == "autosaved"
    assert [n["text"] for n in gateway.project.payload["crm_notes"]["internal"]] == ["Test"]


@pytest.mark.asyncio
async def test_field_save_queued_behind_failed_note_does_not_send_it():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)
    gateway.hold_updates()

    adding = asyncio.create_task(workspace.add_note(NoteList.INTERNAL, "rolled back"))
    await asyncio.sleep(0)
    workspace.set_field("content", "queued edit")
    await asyncio.sleep(0.1)
    gateway.fail_updates = 1
    gateway.release()

    with pytest.raises(SaveError):
        await adding
    await workspace.scheduler.flush()

    assert workspace.notes(NoteList.INTERNAL) == []
    assert gateway.project.content == "queued edit"
    assert gateway.project.payload["crm_notes"]["internal"] == []


@pytest.mark.asyncio
async def test_writes_to_both_lists_keep_each_other():
    gateway = FakeProjectGateway()
    workspace = await _open(gateway)
    gateway.hold_updates()

    internal = asyncio.create_task(workspace.add_note(NoteList.INTERNAL, "Test"))
    customer = asyncio.create_task(workspace.add_note(NoteList.CUSTOMER, "Hello"))
    await asyncio.sleep(0.01)
    gateway.release()
    await asyncio.gather(internal, customer)

    notes = gateway.project.payload["crm_notes"]
    assert [n["text"] for n in notes["internal"]] == ["Test"]
    assert [n["text"] for n in notes["customer"]] == ["Hello"]
