"""Tests for the Flask JSON API.

Tests use ``pytest.importorskip`` so they are skipped gracefully when
Flask is not installed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

flask = pytest.importorskip("flask")

from disk_motion.config import ConfigError, DiskConfig  # noqa: E402
from disk_motion.web.app import CONFIG_ENV_VAR, app_from_args, create_app  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400

_TEXTBOOK = {"requests": [98, 183, 37, 122, 14, 124, 65, 67], "start_head": 53}


def _create_client(config: DiskConfig | None = None) -> Any:
    """Create a test client from a fresh app."""
    app = create_app(config)
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify the app factory."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(), flask.Flask)

    def test_config_endpoint(self) -> None:
        """GET /api/config reports disk size and tokens."""
        client = _create_client(DiskConfig(disk_max=499))
        data = client.get("/api/config").get_json()
        assert data["disk_max"] == 499
        assert "c-look" in data["algorithms"]
        assert data["directions"] == ["left", "right"]


class TestSimulateEndpoint:
    """Verify POST /api/simulate."""

    def test_returns_trace(self) -> None:
        """A valid body returns the steps and totals."""
        client = _create_client()
        body = {**_TEXTBOOK, "algorithm": "scan", "direction": "left"}
        response = client.post("/api/simulate", json=body)
        assert response.status_code == HTTP_OK
        data = response.get_json()
        assert data["total_seek"] == 236
        assert data["head_path"][:-1] == [53, 37, 14, 0, 65, 67, 98, 122, 124, 183]
        assert data["steps"][0] == {
            "head": 53,
            "cumulative_seek": 0,
            "served": [],
            "served_order": [],
        }
        assert data["steps"][-1] == data["steps"][-2]

    def test_accepts_comma_string(self) -> None:
        """requests may be sent as the raw text of an input box."""
        client = _create_client()
        body = {
            "algorithm": "fcfs",
            "requests": "98, 183, 37, 122, 14, 124, 65, 67",
            "start_head": 53,
        }
        data = client.post("/api/simulate", json=body).get_json()
        assert data["total_seek"] == 640
        assert data["average_seek"] == 80.0

    def test_missing_field(self) -> None:
        """A body without the algorithm is a 400."""
        client = _create_client()
        response = client.post("/api/simulate", json=_TEXTBOOK)
        assert response.status_code == HTTP_BAD_REQUEST
        assert "algorithm" in response.get_json()["error"]

    def test_no_json_body(self) -> None:
        """A non-JSON body is a 400."""
        client = _create_client()
        response = client.post("/api/simulate", data="nope")
        assert response.status_code == HTTP_BAD_REQUEST

    def test_invalid_input(self) -> None:
        """Engine precondition failures become 400 responses."""
        client = _create_client()
        body = {"algorithm": "scan", "requests": [500], "start_head": 53}
        response = client.post("/api/simulate", json=body)
        assert response.status_code == HTTP_BAD_REQUEST
        assert "outside the disk" in response.get_json()["error"]

    def test_requests_wrong_type(self) -> None:
        """requests must be a list or a string."""
        client = _create_client()
        body = {"algorithm": "scan", "requests": 5, "start_head": 53}
        assert client.post("/api/simulate", json=body).status_code == HTTP_BAD_REQUEST


class TestCompareEndpoint:
    """Verify POST /api/compare."""

    def test_ranks_algorithms(self) -> None:
        """Results are ranked best first."""
        client = _create_client()
        response = client.post("/api/compare", json={**_TEXTBOOK, "direction": "right"})
        assert response.status_code == HTTP_OK
        data = response.get_json()
        assert data["best"] == "sstf"
        assert [r["rank"] for r in data["results"]] == list(range(6))
        totals = [r["total_seek"] for r in data["results"]]
        assert totals == sorted(totals)

    def test_missing_start_head(self) -> None:
        """A body without start_head is a 400."""
        client = _create_client()
        response = client.post("/api/compare", json={"requests": [1, 2]})
        assert response.status_code == HTTP_BAD_REQUEST


class TestRandomEndpoint:
    """Verify GET /api/random."""

    def test_default_count(self) -> None:
        """Without a count, five requests are generated."""
        client = _create_client()
        data = client.get("/api/random").get_json()
        assert len(data["requests"]) == 5
        assert 0 <= data["start_head"] <= 199
        assert data["direction"] in {"left", "right"}

    def test_count_not_a_number(self) -> None:
        """A count that is not an integer is a 400, not a silent default."""
        client = _create_client()
        response = client.get("/api/random?count=abc")
        assert response.status_code == HTTP_BAD_REQUEST
        assert "integer" in response.get_json()["error"]

    def test_count_out_of_range(self) -> None:
        """Counts outside 5-50 are a 400."""
        client = _create_client()
        assert client.get("/api/random?count=99").status_code == HTTP_BAD_REQUEST


class TestLogEndpoint:
    """Verify the /api/log endpoints."""

    def test_records_simulations_and_rejections(self) -> None:
        """Successful runs log INFO, rejected input logs WARNING."""
        client = _create_client()
        client.post("/api/simulate", json={**_TEXTBOOK, "algorithm": "look"})
        client.post("/api/simulate", json={"algorithm": "look", "requests": [], "start_head": 1})
        entries = client.get("/api/log").get_json()["entries"]
        assert entries[0].startswith("[INFO] simulate: LOOK")
        assert entries[1].startswith("[WARNING] simulate:")

    def test_filter_by_level_and_source(self) -> None:
        """level and source narrow the returned entries."""
        client = _create_client()
        client.post("/api/simulate", json={**_TEXTBOOK, "algorithm": "look"})
        client.post("/api/compare", json={"requests": [1]})
        client.post("/api/compare", json=_TEXTBOOK)
        warnings = client.get("/api/log?level=warning").get_json()["entries"]
        assert warnings == ["[WARNING] compare: Missing 'start_head' field"]
        compare_entries = client.get("/api/log?source=compare").get_json()["entries"]
        assert len(compare_entries) == 2

    def test_unknown_level(self) -> None:
        """An unknown level name is a 400."""
        client = _create_client()
        assert client.get("/api/log?level=loud").status_code == HTTP_BAD_REQUEST

    def test_delete_clears(self) -> None:
        """DELETE /api/log empties the log."""
        client = _create_client()
        client.post("/api/simulate", json={**_TEXTBOOK, "algorithm": "sstf"})
        assert client.delete("/api/log").status_code == HTTP_OK
        assert client.get("/api/log").get_json()["entries"] == []

    def test_log_does_not_grow_without_bound(self) -> None:
        """A busy server keeps only the newest log_capacity entries."""
        capacity = 10
        app = create_app(log_capacity=capacity)
        client = app.test_client()
        for _ in range(3 * capacity):
            client.post("/api/simulate", json={**_TEXTBOOK, "algorithm": "fcfs"})
        entries = client.get("/api/log").get_json()["entries"]
        assert len(entries) == capacity


class TestCommandLine:
    """Verify the disk-motion-web argument handling."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without arguments the server uses a 0-199 disk on port 8080."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        app, port = app_from_args([])
        assert port == 8080
        assert app.test_client().get("/api/config").get_json()["disk_max"] == 199

    def test_config_file_argument(self, tmp_path: Path) -> None:
        """--config loads the disk size used by every route."""
        path = tmp_path / "disk.json"
        path.write_text(json.dumps({"disk_max": 499}))
        app, port = app_from_args(["--config", str(path), "--port", "9000"])
        client = app.test_client()
        assert port == 9000
        assert client.get("/api/config").get_json()["disk_max"] == 499
        body = {"algorithm": "scan", "requests": [450], "start_head": 400}
        assert client.post("/api/simulate", json=body).get_json()["total_seek"] == 99

    def test_config_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The config path can come from DISK_MOTION_CONFIG."""
        path = tmp_path / "disk.json"
        path.write_text(json.dumps({"disk_max": 49}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        app, _ = app_from_args([])
        assert app.test_client().get("/api/config").get_json()["disk_max"] == 49

    def test_bad_config_file(self, tmp_path: Path) -> None:
        """An unreadable config file stops start-up with ConfigError."""
        with pytest.raises(ConfigError):
            app_from_args(["--config", str(tmp_path / "absent.json")])
