# This project was developed with assistance from AI tools.
"""Functional tests: admin console actions on clients, links, and audit."""

import pytest
from db.enums import ProfileStatus

from ..factories import make_event, make_profile
from .mock_db import make_mock_session
from .personas import admin, agent, client_alice

pytestmark = pytest.mark.functional


class TestBulkExpire:
    def test_only_active_links_are_counted(self, make_client):
        # "a" was ACTIVE; "b" was already EXPIRED so the store does not return it
        session = make_mock_session(items=["a"])
        client = make_client(admin(), session)

        resp = client.post("/api/admin/payment-links/bulk-expire", json={"link_ids": ["a", "b"]})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["expired_count"] == 1
        assert body["message"] == "1 link(s) expired successfully"

    def test_empty_selection_is_400(self, make_client):
        client = make_client(admin(), make_mock_session(items=[]))
        resp = client.post("/api/admin/payment-links/bulk-expire", json={"link_ids": []})
        assert resp.status_code == 400

    def test_agent_is_forbidden(self, make_client):
        session = make_mock_session(items=["a"])
        client = make_client(agent(), session)
        resp = client.post("/api/admin/payment-links/bulk-expire", json={"link_ids": ["a"]})
        assert resp.status_code == 403
        session.execute.assert_not_awaited()

    def test_expire_stale(self, make_client):
        client = make_client(admin(), make_mock_session(items=["old-1", "old-2"]))
        resp = client.post("/api/admin/payment-links/expire-stale")
        assert resp.status_code == 200
        assert resp.json()["expired_count"] == 2


class TestClientStatus:
    def test_unknown_status_is_400_without_mutation(self, make_client):
        profile = make_profile(id="client-1", status=ProfileStatus.ACTIVE)
        session = make_mock_session(single=profile)
        client = make_client(admin(), session)

        resp = client.post(
            "/api/admin/clients/client-1/status", json={"status": "BANNED", "reason": "abuse"},
        )

        assert resp.status_code == 400
        assert profile.status == ProfileStatus.ACTIVE
        session.execute.assert_not_awaited()

    def test_admin_suspends_client(self, make_client):
        profile = make_profile(id="client-1", status=ProfileStatus.ACTIVE)
        client = make_client(admin(), make_mock_session(single=profile))

        resp = client.post(
            "/api/admin/clients/client-1/status",
            json={"status": "SUSPENDED", "reason": "Chargeback"},
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "client_id": "client-1",
            "old_status": "ACTIVE",
            "new_status": "SUSPENDED",
        }

    def test_reason_required(self, make_client):
        client = make_client(admin(), make_mock_session(single=make_profile()))
        resp = client.post("/api/admin/clients/client-1/status", json={"status": "ACTIVE"})
        assert resp.status_code == 400

    def test_agent_cannot_change_status(self, make_client):
        client = make_client(agent(), make_mock_session(single=make_profile()))
        resp = client.post(
            "/api/admin/clients/client-1/status", json={"status": "ACTIVE", "reason": "ok"},
        )
        assert resp.status_code == 403

    def test_agent_lists_clients(self, make_client):
        client = make_client(agent(), make_mock_session(items=[make_profile(id="c1")]))
        resp = client.get("/api/admin/clients?status=ACTIVE")
        assert resp.status_code == 200
        assert resp.json()["data"][0]["id"] == "c1"

    def test_client_cannot_list_clients(self, make_client):
        client = make_client(client_alice(), make_mock_session(items=[]))
        assert client.get("/api/admin/clients").status_code == 403


class TestAudit:
    def test_entity_events(self, make_client):
        events = [make_event(id=3, entity_type="order", entity_id="order-1", event_type="PAYMENT_RECEIVED")]
        client = make_client(agent(), make_mock_session(items=events))
        resp = client.get("/api/admin/events/order/order-1")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        assert body["events"][0]["event_type"] == "PAYMENT_RECEIVED"

    def test_unknown_entity_type_is_400(self, make_client):
        client = make_client(agent(), make_mock_session(items=[]))
        assert client.get("/api/admin/events/invoice/x").status_code == 400

    def test_verify_is_admin_only(self, make_client):
        client = make_client(agent(), make_mock_session(items=[]))
        assert client.get("/api/admin/audit/verify").status_code == 403

    def test_verify_empty_chain(self, make_client):
        client = make_client(admin(), make_mock_session(items=[]))
        resp = client.get("/api/admin/audit/verify")
        assert resp.status_code == 200
        assert resp.json() == {"status": "OK", "events_checked": 0, "first_break_id": None}
