import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


def _payload(frames, **extra):
    body = {"videoId": "swing-001", "frames": [frame.to_dict() for frame in frames]}
    body.update(extra)
    return body


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "SwingCoach API"


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["detectors"] == 20


def test_mistake_catalog(client):
    response = client.get("/api/mistakes")

    assert response.status_code == 200
    mistakes = response.json()
    assert len(mistakes) == 20
    assert {"id", "category", "name", "description"} <= set(mistakes[0])
    assert mistakes[0]["id"] == "POOR_POSTURE"


class TestAnalyzeFrames:

    def test_analysis(self, client, face_on_swing):
        response = client.post("/api/analysis/frames", json=_payload(face_on_swing))

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "analysis_swing-001"
        assert data["cameraAngle"]["angle"] == "face-on"
        assert len(data["frames"]) == len(face_on_swing)
        assert [s["phase"] for s in data["phaseSegments"]][0] == "address"
        assert 0 <= data["overallScore"] <= 100
        assert data["metrics"]["hipSway"] is not None

    def test_club_override(self, client, dtl_swing):
        response = client.post(
            "/api/analysis/frames", json=_payload(dtl_swing, clubTypeOverride="driver")
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "analysis_swing-001_driver"
        assert data["clubTypeOverridden"] is True
        assert data["metrics"]["hipSway"] is None

    def test_object_landmarks(self, client, face_on_swing):
        body = _payload(face_on_swing[:3])
        for frame in body["frames"]:
            frame["landmarks"] = [
                {"x": x, "y": y, "z": z, "visibility": v} for x, y, z, v in frame["landmarks"]
            ]
        response = client.post("/api/analysis/frames", json=body)
        assert response.status_code == 200

    def test_empty_frames(self, client):
        response = client.post("/api/analysis/frames", json={"videoId": "empty", "frames": []})

        assert response.status_code == 200
        assert response.json()["overallScore"] == 0

    def test_unknown_club_rejected(self, client, face_on_swing):
        response = client.post(
            "/api/analysis/frames", json=_payload(face_on_swing, clubTypeOverride="putter")
        )
        assert response.status_code == 422

    def test_wrong_landmark_count_rejected(self, client, face_on_swing):
        body = _payload(face_on_swing[:2])
        body["frames"][0]["landmarks"] = body["frames"][0]["landmarks"][:32]

        response = client.post("/api/analysis/frames", json=body)
        assert response.status_code == 422

    def test_missing_video_id_rejected(self, client):
        response = client.post("/api/analysis/frames", json={"frames": []})
        assert response.status_code == 422

    def test_offset_frame_index_rejected(self, client, face_on_swing):
        body = _payload(face_on_swing)
        for frame in body["frames"]:
            frame["frameIndex"] += 3

        response = client.post("/api/analysis/frames", json=body)
        assert response.status_code == 400
        assert "frameIndex" in response.json()["detail"]

    def test_decreasing_timestamps_rejected(self, client, face_on_swing):
        body = _payload(face_on_swing)
        body["frames"][10]["timestamp"] = body["frames"][9]["timestamp"] - 0.01

        response = client.post("/api/analysis/frames", json=body)
        assert response.status_code == 400
        assert "timestamps must strictly increase" in response.json()["detail"]
