"""Geometry routes through the FastAPI app."""
import os
import sys
sys.path.insert(0, os.path.dirname(__file__))

import io

from ezdxf import recover
from fastapi.testclient import TestClient

import routes.geometry
from main import app

client = TestClient(app)

ROOMS = [
    {"name": "Living", "x": 0, "y": 0, "width": 10, "height": 10,
     "doors": [{"wall": "south", "position": 0.5, "width": 3}],
     "windows": [{"wall": "north"}, {"wall": "east"}]},
    {"name": "Kitchen", "x": 10, "y": 0, "width": 10, "height": 10},
]


def test_health():
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_adjacency():
    r = client.post("/api/geometry/adjacency", json={"rooms": ROOMS, "tolerance": 1})
    assert r.status_code == 200
    data = r.json()
    assert data["rooms"]["0"]["shared"] == [
        {"neighbor": 1, "wall": "east", "start": 0, "end": 10},
    ]
    assert data["rooms"]["1"]["exterior"] == ["north", "east", "south"]
    assert data["overlaps"] == []


def test_negative_tolerance_is_422():
    r = client.post("/api/geometry/adjacency", json={"rooms": ROOMS, "tolerance": -1})
    assert r.status_code == 422


def test_envelope():
    r = client.post("/api/geometry/envelope", json={"rooms": ROOMS})
    assert r.json()["envelope"]["maxX"] == 20
    r = client.post("/api/geometry/envelope", json={"rooms": []})
    assert r.json() == {"envelope": None}


def test_openings():
    r = client.post("/api/geometry/openings", json={"rooms": ROOMS})
    assert r.status_code == 200
    living, kitchen = r.json()["rooms"]
    assert [g["kind"] for g in living] == ["door", "window"]
    assert living[0]["start"] == [3.5, 10]
    assert "arc" in living[0]
    assert kitchen == []


def test_dxf():
    r = client.post("/api/geometry/dxf", json={"floor": {"rooms": ROOMS}, "scale": 12})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/dxf")
    assert r.content.endswith(b"0\nEOF\n")
    assert b"$DWGCODEPAGE\n3\nANSI_1252\n" in r.content


def test_export(tmp_path, monkeypatch):
    monkeypatch.setattr(routes.geometry, "EXPORT_DIR", tmp_path)
    r = client.post("/api/geometry/export",
                    json={"floor": {"rooms": ROOMS}, "filename": "ground"})
    assert r.status_code == 200
    data = r.json()
    assert data["dxf_url"] == "/exports/ground.dxf"
    assert (tmp_path / "ground.dxf").exists()
    # 1 envelope + 2 rooms x 3 + 1 door x 2 + 1 exterior window x 2
    assert data["entity_count"] == 11
    assert data["errors"] == []


def test_bad_filename_rejected():
    r = client.post("/api/geometry/export",
                    json={"floor": {"rooms": ROOMS}, "filename": "../escape"})
    assert r.status_code == 422


def test_export_keeps_non_ascii_names(tmp_path, monkeypatch):
    monkeypatch.setattr(routes.geometry, "EXPORT_DIR", tmp_path)
    rooms = [{"name": "Küche", "x": 0, "y": 0, "width": 12, "height": 10}]
    r = client.post("/api/geometry/export",
                    json={"floor": {"rooms": rooms}, "filename": "kueche"})
    assert r.status_code == 200
    assert r.json()["entity_count"] == 4

    doc, _ = recover.read(io.BytesIO((tmp_path / "kueche.dxf").read_bytes()))
    texts = {t.dxf.text for t in doc.modelspace().query("TEXT")}
    assert texts == {"KÜCHE", "120 SF"}
