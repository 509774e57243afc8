"""HTTP facade tests through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from deckframe.api.main import create_app
from deckframe.services.structure_service import StructureService

from conftest import rectangle


@pytest.fixture
def client():
    return TestClient(create_app())


def points_payload(points):
    return [{"x": p.x, "y": p.y} for p in points]


class TestStructureEndpoint:
    def test_rectangle(self, client) -> None:
        response = client.post("/api/structure", json={
            "points": points_payload(rectangle(16, 12)),
            "ledger_indices": 0,
            "inputs": {"joist_spacing": 16, "deck_height": 36},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["point_count"] == 4
        assert body["rule_count"] == 15
        structure = body["structure"]
        assert structure["error"] is None
        assert len(structure["joists"]) == 11
        assert structure["validation"]["valid"] is True
        assert structure["beams"][0]["usage"] == "Outer Beam"

    def test_engine_error_is_returned_in_body(self, client) -> None:
        response = client.post("/api/structure", json={
            "points": points_payload(rectangle(16, 12)),
            "ledger_indices": [],
        })
        assert response.status_code == 200
        structure = response.json()["structure"]
        assert structure["error"] == "No ledger edge selected."
        assert structure["validation"] is None

    def test_invalid_request(self, client) -> None:
        response = client.post("/api/structure", json={
            "points": points_payload(rectangle(16, 12)),
            "ledger_indices": 0,
            "inputs": {"attachment_type": "bolted"},
        })
        assert response.status_code == 422


class TestMetaEndpoints:
    def test_rules_in_execution_order(self, client) -> None:
        response = client.get("/api/rules")
        assert response.status_code == 200
        ids = [r["id"] for r in response.json()]
        assert ids[0] == "sizing.joists"
        assert ids[-1] == "beams.merge"
        assert len(ids) == 15

    def test_health(self, client) -> None:
        assert client.get("/api/health").json() == {"status": "ok"}


class TestService:
    def test_derives_dimensions(self) -> None:
        result = StructureService().calculate(rectangle(16, 12), 0)
        assert result.error is None
        assert result.validation is not None and result.validation.valid

    def test_empty_footprint(self) -> None:
        assert StructureService().calculate([], 0).error == "Deck dimensions invalid."
