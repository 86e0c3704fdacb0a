"""Tests for FormShell and the form session store."""

from __future__ import annotations

import asyncio

import pytest

from accessdesk.api.client import ApiError
from accessdesk.forms.models import FormErrorKind
from accessdesk.forms.shell import FormSessionStore, FormShell


class BlockingApi:
    """Holds every create call until ``release`` is set."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.created: list[tuple[str, dict]] = []

    async def create(self, resource, payload):
        self.created.append((resource, payload))
        await self.release.wait()
        return {"id": "slow-1", **payload}


class TestRecordEditing:
    def test_defaults_seed_record(self, conditional_wizard, fake_api):
        shell = FormShell(conditional_wizard, fake_api)
        assert shell.record == {"client_type": "a3s"}

    def test_defaults_not_shared(self, conditional_wizard, fake_api):
        shell = FormShell(conditional_wizard, fake_api)
        shell.set_field("client_type", "p15r")
        assert conditional_wizard.defaults == {"client_type": "a3s"}

    def test_set_field_unknown(self, three_step_wizard, fake_api):
        shell = FormShell(three_step_wizard, fake_api)
        with pytest.raises(KeyError):
            shell.set_field("phone", "555")

    def test_update_is_all_or_nothing(self, three_step_wizard, fake_api):
        shell = FormShell(three_step_wizard, fake_api)
        with pytest.raises(KeyError):
            shell.update({"name": "Acme", "phone": "555"})
        assert "name" not in shell.record

    def test_initial_values(self, three_step_wizard, fake_api):
        shell = FormShell(three_step_wizard, fake_api, initial={"name": "Acme"})
        assert shell.next().ok
        assert shell.engine.current_step_index == 1

    def test_edits_visible_to_engine(self, three_step_wizard, fake_api):
        shell = FormShell(three_step_wizard, fake_api)
        assert not shell.go_to_step(2).ok
        shell.set_field("name", "Acme")
        assert shell.go_to_step(2).ok
        assert shell.engine.current_step_index == 2


class TestSubmit:
    @pytest.mark.asyncio
    async def test_success_closes_shell(self, three_step_wizard, fake_api):
        shell = FormShell(three_step_wizard, fake_api, initial={"name": "Acme"})
        shell.go_to_step(2)
        result = await shell.submit()
        assert result.ok
        assert shell.closed
        assert shell.result["id"] == "new-1"
        assert fake_api.created == [("/clients", {"name": "Acme"})]

    @pytest.mark.asyncio
    async def test_backend_error(self, three_step_wizard, fake_api):
        fake_api.fail_with = ApiError("Server unavailable", status_code=503)
        shell = FormShell(three_step_wizard, fake_api, initial={"name": "Acme"})
        shell.go_to_step(2)
        result = await shell.submit()
        assert not result.ok
        assert result.error.kind == FormErrorKind.SUBMISSION
        assert not shell.closed
        assert shell.result is None
        assert not shell.is_submitting

    @pytest.mark.asyncio
    async def test_second_submit_refused_while_in_flight(self, three_step_wizard):
        api = BlockingApi()
        shell = FormShell(three_step_wizard, api, initial={"name": "Acme"})
        shell.go_to_step(2)

        first = asyncio.create_task(shell.submit())
        await asyncio.sleep(0)
        assert shell.is_submitting

        second = await shell.submit()
        assert not second.ok
        assert second.error.kind == FormErrorKind.SUBMISSION

        api.release.set()
        assert (await first).ok
        assert len(api.created) == 1

    @pytest.mark.asyncio
    async def test_late_response_discarded_after_close(self, three_step_wizard):
        api = BlockingApi()
        shell = FormShell(three_step_wizard, api, initial={"name": "Acme"})
        shell.go_to_step(2)

        task = asyncio.create_task(shell.submit())
        await asyncio.sleep(0)
        shell.close()
        api.release.set()
        result = await task

        assert not result.ok
        assert shell.result is None
        assert shell.closed

    @pytest.mark.asyncio
    async def test_closed_shell_refuses(self, three_step_wizard, fake_api):
        shell = FormShell(three_step_wizard, fake_api, initial={"name": "Acme"})
        shell.close()
        result = await shell.submit()
        assert not result.ok
        assert fake_api.created == []


class TestSnapshot:
    def test_snapshot_fields(self, conditional_wizard, fake_api):
        shell = FormShell(conditional_wizard, fake_api)
        snap = shell.snapshot()
        assert snap["wizard_id"] == "conditional"
        assert snap["current_step"] == "contact"
        assert [s["visible"] for s in snap["steps"]] == [True, False, True]
        assert snap["progress"] == 50.0
        assert snap["record"] == {"client_type": "a3s"}


class TestFormSessionStore:
    def test_save_get_remove(self, three_step_wizard, fake_api):
        store = FormSessionStore()
        shell = FormShell(three_step_wizard, fake_api)
        store.save(shell)
        assert store.get(shell.id) is shell
        assert store.list_open() == [shell]
        assert store.remove(shell.id) is shell
        assert shell.closed
        assert store.get(shell.id) is None

    def test_remove_unknown(self):
        assert FormSessionStore().remove("nope") is None
