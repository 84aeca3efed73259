"""Integration tests for the event catalog endpoints.

Run with: pytest tests/test_event_catalog.py -v
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from events.cache import EVENT_LIST_KEY


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_list_events_returns_results(self, api_client: APIClient, event_row):
        """Given events exist, returns them."""
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert [e["id"] for e in response.json()["results"]] == [str(event_row.id)]

    def test_list_events_empty_catalog(self, api_client: APIClient):
        """Given no events, returns empty list."""
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.json() == {"results": []}

    def test_list_events_cached_response(self, api_client: APIClient):
        """Given cached data, returns from cache."""
        cache.set(EVENT_LIST_KEY, [{"id": "cached"}])
        response = api_client.get("/api/events")
        assert response.json() == {"results": [{"id": "cached"}]}


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, event_row):
        """Given event exists, returns event details."""
        response = api_client.get(f"/api/events/{event_row.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Nairobi Jazz Night"

    def test_get_event_not_found(self, api_client: APIClient):
        """Given event does not exist, returns 404."""
        response = api_client.get(f"/api/events/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        """Given invalid UUID, returns 400."""
        response = api_client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"


@pytest.mark.django_db
class TestTierList:
    """Tests for GET /api/events/{id}/tiers"""

    def test_tiers_report_availability(self, api_client: APIClient, tier_row):
        """Tiers include remaining slots and availability."""
        response = api_client.get(f"/api/events/{tier_row.event_id}/tiers")
        assert response.status_code == 200
        [tier] = response.json()["results"]
        assert tier["quantity"] == 2
        assert tier["remaining"] == 2
        assert tier["is_available"] is True

    def test_tiers_event_not_found(self, api_client: APIClient):
        """Given event does not exist, returns 404."""
        response = api_client.get(f"/api/events/{uuid4()}/tiers")
        assert response.status_code == 404


def new_event_body(**overrides) -> dict:
    starts_at = timezone.now() + timedelta(days=10)
    body = {
        "name": "Sauti Sol Live",
        "location": "KICC",
        "starts_at": starts_at.isoformat(),
        "ends_at": (starts_at + timedelta(hours=5)).isoformat(),
        "tiers": [
            {"name": "Regular", "price": "1000", "quantity": 100},
            {"name": "VIP", "price": "5000", "quantity": 10},
        ],
    }
    body.update(overrides)
    return body


@pytest.mark.django_db
class TestHostEventEndpoints:
    """Tests for POST /api/events, PUT /api/events/{id}, /api/events/host and stats"""

    def test_create_requires_login(self, api_client: APIClient):
        """Anonymous users cannot create events."""
        response = api_client.post("/api/events", new_event_body(), format="json")
        assert response.status_code in (401, 403)

    def test_create_event(self, api_client: APIClient, host):
        """The event is created with its tiers and shows up in the public list."""
        api_client.force_authenticate(user=host)
        response = api_client.post("/api/events", new_event_body(), format="json")
        assert response.status_code == 201
        body = response.json()
        assert body["is_active"] is True
        assert sorted(t["name"] for t in body["tiers"]) == ["Regular", "VIP"]

        listed = api_client.get("/api/events").json()["results"]
        assert [e["id"] for e in listed] == [body["id"]]
        tiers = api_client.get(f"/api/events/{body['id']}/tiers").json()["results"]
        assert len(tiers) == 2

    def test_create_rejects_inverted_schedule(self, api_client: APIClient, host):
        """An event ending before it starts returns 400."""
        api_client.force_authenticate(user=host)
        body = new_event_body()
        body["ends_at"], body["starts_at"] = body["starts_at"], body["ends_at"]
        response = api_client.post("/api/events", body, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_EVENT"

    def test_create_without_tiers_is_a_validation_error(self, api_client: APIClient, host):
        """The tiers list cannot be empty."""
        api_client.force_authenticate(user=host)
        response = api_client.post("/api/events", new_event_body(tiers=[]), format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_update_event(self, api_client: APIClient, host, event_row):
        """The host can rename and deactivate an event; the public list drops it."""
        api_client.force_authenticate(user=host)
        response = api_client.put(
            f"/api/events/{event_row.id}", {"name": "Jazz Night II", "is_active": False}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Jazz Night II"
        assert response.json()["is_active"] is False
        assert api_client.get("/api/events").json()["results"] == []

    def test_update_by_another_user(self, api_client: APIClient, staff, event_row):
        """Someone else's event cannot be edited."""
        api_client.force_authenticate(user=staff)
        response = api_client.put(f"/api/events/{event_row.id}", {"name": "Mine"}, format="json")
        assert response.status_code == 403
        assert response.json()["code"] == "NOT_EVENT_HOST"

    def test_host_event_list(self, api_client: APIClient, host, event_row):
        """The host sees their events, including inactive ones."""
        event_row.is_active = False
        event_row.save()
        api_client.force_authenticate(user=host)
        response = api_client.get("/api/events/host")
        assert response.status_code == 200
        assert [e["id"] for e in response.json()["results"]] == [str(event_row.id)]

    def test_event_stats(self, api_client: APIClient, host, tier_row):
        """Stats report sales per tier and the fees taken."""
        api_client.force_authenticate(user=host)
        response = api_client.get(f"/api/events/{tier_row.event_id}/stats")
        assert response.status_code == 200
        body = response.json()
        assert body["tickets_sold"] == 0
        assert body["net_revenue"] == "0.00"
        assert [t["name"] for t in body["tiers"]] == ["Regular"]

    def test_event_stats_for_another_user(self, api_client: APIClient, staff, event_row):
        """Stats are private to the host."""
        api_client.force_authenticate(user=staff)
        response = api_client.get(f"/api/events/{event_row.id}/stats")
        assert response.status_code == 403
