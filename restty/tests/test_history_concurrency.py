"""
Tests for history operations that overlap each other or a session change.

A Gate holds chosen remote calls mid-flight so other operations can run
before they complete.
"""

import threading

import pytest

from restty.schemas.execute import Exchange, ExecuteRequest
from restty.schemas.history import SyncStatus
from restty.services.history_service import HistoryService
from restty.services.remote_store import RemoteHistoryStore
from restty.state import AppState

from .fakes import Gate, target_transport


HISTORY_PATH = "/rest/v1/history"


def make_exchange(url: str) -> Exchange:
    return Exchange(
        method="GET",
        url=url,
        status_label="200 OK",
        response_body="{}",
        elapsed="5ms",
    )


def start(target, *args) -> tuple[threading.Thread, list]:
    """Run target(*args) in a thread, collecting its return value."""
    results = []
    thread = threading.Thread(target=lambda: results.append(target(*args)))
    thread.start()
    return thread, results


@pytest.fixture
def upload_gate(remote):
    return Gate(remote.handle, "POST", HISTORY_PATH)


@pytest.fixture
def gated_state(settings, credentials, upload_gate):
    return AppState.build(
        settings=settings,
        credentials=credentials,
        transport=target_transport(),
        remote_transport=upload_gate.transport,
    )


class TestSessionChangeDuringUpload:
    """An upload that completes after the session changed is not inserted."""

    def test_logout_during_append(self, gated_state, upload_gate, remote):
        gated_state.login("dev@test.com", "password123")

        thread, results = start(gated_state.send, ExecuteRequest(url="https://example.com/ok"))
        try:
            assert upload_gate.wait_for(1)
            gated_state.logout()
        finally:
            upload_gate.release.set()
            thread.join(timeout=5)

        outcome = results[0]
        assert outcome.result.status_label == "200 OK"
        assert outcome.history.status is SyncStatus.OK
        assert outcome.history.record is not None
        assert gated_state.session is None
        assert gated_state.history.records == ()
        # The record still reached the remote store
        assert remote.rows[-1]["id"] == outcome.history.record.id

    def test_other_user_login_during_append(self, gated_state, upload_gate, remote):
        other = remote.add_user("other@test.com", "secret")
        remote.add_row(other["id"], "https://example.com/theirs")
        gated_state.login("dev@test.com", "password123")

        thread, results = start(gated_state.send, ExecuteRequest(url="https://example.com/ok"))
        try:
            assert upload_gate.wait_for(1)
            gated_state.logout()
            gated_state.login("other@test.com", "secret")
        finally:
            upload_gate.release.set()
            thread.join(timeout=5)

        records = gated_state.history.records
        assert [r.url for r in records] == ["https://example.com/theirs"]
        assert all(r.user_id == other["id"] for r in records)
        assert results[0].history.record.user_id != other["id"]


class TestSessionChangeDuringLoad:

    def test_clear_during_load_discards_result(self, settings, remote, session):
        gate = Gate(remote.handle, "GET", HISTORY_PATH)
        history = HistoryService(RemoteHistoryStore(settings, transport=gate.transport), settings)
        remote.add_row(session.user_id, "https://example.com/stale")

        thread, results = start(history.load_all, session)
        try:
            assert gate.wait_for(1)
            history.clear()
        finally:
            gate.release.set()
            thread.join(timeout=5)

        assert results[0].status is SyncStatus.SKIPPED
        assert history.records == ()


class TestOverlappingMutations:
    """Concurrent appends and deletes keep the cap and the ordering."""

    def test_appends_and_deletes_interleaved(self, settings, remote, session, upload_gate):
        history = HistoryService(RemoteHistoryStore(settings, transport=upload_gate.transport), settings)
        for i in range(98):
            remote.add_row(session.user_id, f"https://example.com/old/{i}")
        assert history.load_all(session).count == 98
        old_ids = [r.id for r in history.records]

        new_urls = {f"https://example.com/new/{i}" for i in range(5)}
        workers = [start(history.append, session, make_exchange(url)) for url in sorted(new_urls)]
        try:
            assert upload_gate.wait_for(len(workers))
            # Deletes complete while every upload is still held
            assert history.delete(session, old_ids[0]).removed is True
            assert history.delete(session, old_ids[50]).removed is True
            assert len(history.records) == 96
        finally:
            upload_gate.release.set()
            for thread, _ in workers:
                thread.join(timeout=5)

        assert all(results[0].ok for _, results in workers)
        records = history.records
        ids = [r.id for r in records]
        assert len(records) == 100
        assert len(set(ids)) == 100
        assert {r.url for r in records[:5]} == new_urls
        surviving = [i for i in old_ids if i not in (old_ids[0], old_ids[50])]
        assert ids[5:] == surviving[:95]

    def test_cap_holds_under_concurrent_appends(self, settings, remote, session, upload_gate):
        history = HistoryService(RemoteHistoryStore(settings, transport=upload_gate.transport), settings)
        for i in range(100):
            remote.add_row(session.user_id, f"https://example.com/old/{i}")
        history.load_all(session)
        newest_old = history.records[0].id

        workers = [
            start(history.append, session, make_exchange(f"https://example.com/new/{i}"))
            for i in range(8)
        ]
        try:
            assert upload_gate.wait_for(len(workers))
        finally:
            upload_gate.release.set()
            for thread, _ in workers:
                thread.join(timeout=5)

        records = history.records
        assert len(records) == 100
        assert all(r.url.startswith("https://example.com/new/") for r in records[:8])
        assert records[8].id == newest_old
