"""Tests for the HTTP API."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from py_voronoi.api.main import app
from py_voronoi.canvas import VoronoiCanvas


@pytest.fixture
def canvas():
    fresh = VoronoiCanvas(width=800, height=600)
    with patch("py_voronoi.api.main.canvas", fresh):
        yield fresh


@pytest.fixture
def client(canvas):
    return TestClient(app)


class TestBasicEndpoints:
    """Test service endpoints."""

    def test_root(self, client):
        """Test the root endpoint."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client, canvas):
        """Test the health check."""
        canvas.add_point(10, 10)
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "points": 1}

    def test_empty_diagram(self, client):
        """Test the diagram before any point is added."""
        data = client.get("/diagram").json()

        assert data["width"] == 800
        assert data["height"] == 600
        assert data["cells"] == []


class TestPointEndpoints:
    """Test adding, removing and resetting."""

    def test_add_point(self, client):
        """Test that adding a point returns its id and the new diagram."""
        response = client.post("/points", json={"x": 10, "y": 10})

        assert response.status_code == 200
        data = response.json()
        cells = data["diagram"]["cells"]
        assert len(cells) == 1
        assert cells[0]["point_id"] == data["point_id"]
        assert cells[0]["area"] == pytest.approx(480000, rel=1e-9)
        assert cells[0]["color"] == "rgb(133, 224, 133)"

    def test_add_point_validation(self, client):
        """Test that malformed points are rejected."""
        response = client.post("/points", json={"x": "left"})
        assert response.status_code == 422

    def test_remove_point(self, client):
        """Test removing a point by id."""
        first = client.post("/points", json={"x": 100, "y": 100}).json()["point_id"]
        second = client.post("/points", json={"x": 700, "y": 500}).json()["point_id"]

        data = client.delete(f"/points/{first}").json()

        assert data["removed"] is True
        assert [c["point_id"] for c in data["diagram"]["cells"]] == [second]

    def test_remove_stale_point(self, client):
        """Test that removing an unknown id succeeds as a no-op."""
        response = client.delete("/points/999")

        assert response.status_code == 200
        assert response.json()["removed"] is False

    def test_reset(self, client):
        """Test the reset trigger."""
        client.post("/points", json={"x": 100, "y": 100})
        client.post("/points", json={"x": 700, "y": 500})

        response = client.post("/reset")

        assert response.status_code == 200
        assert response.json()["cells"] == []


class TestPointerEndpoint:
    """Test pointer event dispatch over HTTP."""

    def test_background_click_adds(self, client):
        """Test a click on empty canvas."""
        data = client.post("/pointer", json={"kind": "click", "x": 300, "y": 200}).json()

        assert data["action"] == "added"
        assert data["diagram"]["cells"][0]["x"] == 300

    def test_marker_click_removes(self, client):
        """Test that a marker click removes and never adds."""
        point_id = client.post("/points", json={"x": 300, "y": 200}).json()["point_id"]

        data = client.post("/pointer", json={
            "kind": "click", "x": 300, "y": 200, "target": "marker", "target_id": point_id,
        }).json()

        assert data["consumed"] is True
        assert data["action"] == "removed"
        assert data["diagram"]["cells"] == []

    def test_hover_tooltip(self, client):
        """Test the area tooltip over a cell."""
        point_id = client.post("/points", json={"x": 10, "y": 10}).json()["point_id"]

        data = client.post("/pointer", json={
            "kind": "hover", "x": 50, "y": 50, "target": "cell", "target_id": point_id,
        }).json()
        assert data["tooltip"]["visible"] is True
        assert data["tooltip"]["text"] == "Area: 480000.00"

        data = client.post("/pointer", json={
            "kind": "move", "x": 50, "y": 50, "page_x": 70, "page_y": 90,
            "target": "cell", "target_id": point_id,
        }).json()
        assert (data["tooltip"]["left"], data["tooltip"]["top"]) == (80, 80)

    def test_invalid_kind(self, client):
        """Test that unknown event kinds are rejected."""
        response = client.post("/pointer", json={"kind": "drag", "x": 1, "y": 1})
        assert response.status_code == 422

    def test_target_without_id_rejected(self, client, canvas):
        """Test that a marker click missing its id is rejected, not added."""
        client.post("/points", json={"x": 100, "y": 100})

        response = client.post("/pointer", json={"kind": "click", "x": 100, "y": 100, "target": "marker"})

        assert response.status_code == 422
        assert len(canvas.store) == 1

    def test_id_without_target_rejected(self, client, canvas):
        """Test that a target id needs a target layer."""
        response = client.post("/pointer", json={"kind": "click", "x": 100, "y": 100, "target_id": 0})

        assert response.status_code == 422
        assert len(canvas.store) == 0


class TestSvgEndpoints:
    """Test markup and export download."""

    def test_svg_markup(self, client):
        """Test the current surface markup."""
        client.post("/points", json={"x": 10, "y": 10})
        response = client.get("/svg")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert response.text.startswith("<svg")
        assert "<circle" in response.text

    def test_export_download(self, client):
        """Test the SVG file download."""
        client.post("/points", json={"x": 10, "y": 10})
        response = client.get("/export")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/svg+xml;charset=utf-8"
        assert 'filename="voronoi_cells.svg"' in response.headers["content-disposition"]
        assert response.text.startswith('<?xml version="1.0" standalone="no"?>')
