"""Integration tests for the Tunesmith HTTP API."""

import asyncio
import io

import mido
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server.main import app, mount_client

POP_EXAMPLE = {
    "genre": "pop",
    "key": "C",
    "mood": "happy",
    "tempo": 120,
    "duration": 8,
    "complexity": 2,
}


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def generate(client, **overrides):
    response = client.post("/api/generate", json={**POP_EXAMPLE, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["composition"]


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "timestamp" in body


def test_options(client):
    body = client.get("/api/options").json()

    assert "pop" in body["genres"]
    assert "Am" in body["keys"]
    assert "mysterious" in body["moods"]
    assert body["complexity"] == [1, 2, 3, 4, 5]


def test_generate_pop_example(client):
    response = client.post("/api/generate", json=POP_EXAMPLE)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Composition generated successfully"

    composition = body["composition"]
    assert composition["id"]
    assert len(composition["melody"]) == 8
    assert len(composition["harmony"]) == 4
    assert len(composition["bassLine"]) == 4
    assert len(composition["drums"]) == 16
    assert composition["title"].startswith("Joyful ")
    assert composition["title"].endswith(" in C")
    assert composition["metadata"]["tempo"] == 120
    assert set(composition["melody"][0]) == {"note", "duration", "velocity", "time", "pitch"}
    assert set(composition["harmony"][0]) == {"chord", "duration", "time", "velocity", "chordName"}


def test_generate_classical_has_null_drums(client):
    composition = generate(client, genre="classical")
    assert composition["drums"] is None


def test_generate_zero_duration(client):
    composition = generate(client, duration=0)

    assert composition["melody"] == []
    assert composition["harmony"] == []
    assert composition["bassLine"] == []
    assert composition["drums"] == []


def test_seeded_generation_is_reproducible(client):
    first = generate(client, seed=77)
    second = generate(client, seed=77)

    assert first["id"] != second["id"]
    assert first["melody"] == second["melody"]
    assert first["title"] == second["title"]


def test_missing_parameters(client):
    response = client.post("/api/generate", json={"genre": "pop", "key": "C"})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required parameters"


def test_unknown_genre_rejected_and_not_stored(client):
    before = client.get("/api/compositions").json()["compositions"]

    response = client.post("/api/generate", json={**POP_EXAMPLE, "genre": "unknown"})

    assert response.status_code == 400
    assert response.json()["field"] == "genre"
    after = client.get("/api/compositions").json()["compositions"]
    assert len(after) == len(before)


def test_duration_over_limit_rejected(client):
    response = client.post("/api/generate", json={**POP_EXAMPLE, "duration": 100000})

    assert response.status_code == 400
    assert response.json()["field"] == "duration"


@pytest.mark.parametrize("duration", ["Infinity", "NaN"])
def test_non_finite_duration_rejected(client, duration):
    before = client.get("/api/compositions").json()["compositions"]
    body = '{"genre": "pop", "key": "C", "mood": "happy", "duration": ' + duration + "}"

    response = client.post(
        "/api/generate", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    after = client.get("/api/compositions").json()["compositions"]
    assert len(after) == len(before)


def test_lookup_roundtrip(client):
    composition = generate(client)

    response = client.get(f"/api/composition/{composition['id']}")

    assert response.status_code == 200
    assert response.json()["composition"] == composition


def test_lookup_unknown_id(client):
    response = client.get("/api/composition/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Composition not found"}


def test_list_compositions(client):
    first = generate(client)
    second = generate(client, genre="jazz")

    compositions = client.get("/api/compositions").json()["compositions"]

    assert [item["id"] for item in compositions][-2:] == [first["id"], second["id"]]


def test_download_midi(client):
    composition = generate(client, genre="rock")

    response = client.post(f"/api/download-midi/{composition['id']}")

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/midi"
    expected_name = composition["title"].replace(" ", "_") + ".mid"
    assert expected_name in response.headers["content-disposition"]

    midi_file = mido.MidiFile(file=io.BytesIO(response.content))
    assert len(midi_file.tracks) == 5


def test_download_midi_unknown_id(client):
    response = client.post("/api/download-midi/nope")
    assert response.status_code == 404


def test_metrics(client):
    generate(client)
    client.get("/api/composition/nope")
    client.post("/api/generate", json={**POP_EXAMPLE, "mood": "angry"})

    snapshot = client.get("/api/metrics").json()

    assert snapshot["compositions_generated"] == 1
    assert snapshot["lookup_misses"] == 1
    assert snapshot["invalid_requests"] == 1
    assert snapshot["generation_latency_ms"]["samples"] == 1


def _record_loop_state(calls, func):
    def wrapper(*args, **kwargs):
        try:
            asyncio.get_running_loop()
            calls.append("event_loop")
        except RuntimeError:
            calls.append("worker")
        return func(*args, **kwargs)

    return wrapper


def test_generation_and_export_run_in_worker_threads(client, monkeypatch):
    container = client.app.state.container
    service = container.get_composition_service()
    exporter = container.get_midi_exporter()
    calls = []
    monkeypatch.setattr(service, "generate", _record_loop_state(calls, service.generate))
    monkeypatch.setattr(exporter, "to_bytes", _record_loop_state(calls, exporter.to_bytes))

    composition = generate(client)
    response = client.post(f"/api/download-midi/{composition['id']}")

    assert response.status_code == 200
    assert calls == ["worker", "worker"]


def test_client_assets_served_from_site_root(tmp_path):
    (tmp_path / "app.js").write_text("console.log('tunesmith');")
    site = FastAPI()

    @site.get("/api/health")
    async def health():
        return {"success": True}

    mount_client(site, tmp_path)

    with TestClient(site) as site_client:
        asset = site_client.get("/app.js")
        assert asset.status_code == 200
        assert "tunesmith" in asset.text
        assert site_client.get("/api/health").json() == {"success": True}


def test_missing_client_directory_is_not_mounted(tmp_path):
    site = FastAPI()
    mount_client(site, tmp_path / "missing")

    assert not any(getattr(route, "name", None) == "client" for route in site.routes)
