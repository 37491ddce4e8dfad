"""Flask application factory for the DiskMotion JSON API.

The ``create_app`` function builds a Flask app around the scheduling
engine with these endpoints:

- ``POST /api/simulate`` — full step-by-step trace of one algorithm.
- ``POST /api/compare`` — every algorithm ranked by total seek.
- ``GET /api/random`` — a random workload to simulate.
- ``GET /api/config`` — disk size and the accepted tokens.
- ``GET /api/log`` — the service log, filtered by ``level`` and ``source``.
- ``DELETE /api/log`` — empty the service log.

Rendering, animation, and export live in the browser; this layer only
validates input, calls the engine, and serializes what it returns.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any

from flask import Flask, Response, jsonify, request

from disk_motion.algorithms import Algorithm, Direction, SchedulingError
from disk_motion.config import DEFAULT_CONFIG, DiskConfig, load_config
from disk_motion.history import SimulationRun, Step, generate
from disk_motion.logging import DEFAULT_CAPACITY, Logger, parse_level
from disk_motion.requests import MIN_RANDOM_REQUESTS, parse_request_list, random_workload
from disk_motion.stats import average_seek, compare_all

_HTTP_BAD_REQUEST = 400
_NO_BODY = "Expected a JSON object body"
_DEFAULT_PORT = 8080
CONFIG_ENV_VAR = "DISK_MOTION_CONFIG"


def _step_to_json(step: Step) -> dict[str, Any]:
    return {
        "head": step.head,
        "cumulative_seek": step.cumulative_seek,
        "served": sorted(step.served),
        "served_order": list(step.served_order),
    }


def _run_to_json(run: SimulationRun) -> dict[str, Any]:
    return {
        "algorithm": run.algorithm.value,
        "start_head": run.start_head,
        "direction": run.direction.value,
        "request_set": list(run.request_set.order),
        "steps": [_step_to_json(step) for step in run.steps],
        "total_seek": run.total_seek,
        "average_seek": round(run.average_seek, 2),
        "head_path": run.head_path,
    }


def _requests_from(data: dict[str, Any], config: DiskConfig) -> list[int]:
    """Accept either a JSON list of ints or a comma-separated string."""
    raw = data["requests"]
    if isinstance(raw, str):
        return parse_request_list(raw, config=config)
    if not isinstance(raw, list):
        msg = "'requests' must be a list of integers or a comma-separated string"
        raise SchedulingError(msg)
    return raw


def create_app(
    config: DiskConfig | None = None,
    *,
    log_capacity: int = DEFAULT_CAPACITY,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Disk geometry for every simulation (defaults to 0-199).
        log_capacity: Most service log entries kept in memory.

    Returns:
        A configured Flask application ready to serve.

    """
    disk = config if config is not None else DEFAULT_CONFIG
    logger = Logger(capacity=log_capacity)

    app = Flask(__name__)
    app.extensions["disk_motion.logger"] = logger

    def _bad_request(message: str, *, source: str) -> tuple[Response, int]:
        logger.warning(message, source=source)
        return jsonify({"error": message}), _HTTP_BAD_REQUEST

    def _missing(data: Any, *fields: str) -> str | None:
        if not isinstance(data, dict):
            return _NO_BODY
        absent = [f for f in fields if f not in data]
        if absent:
            return "Missing " + ", ".join(f"'{f}'" for f in absent) + " field"
        return None

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run one algorithm and return its trace.

        Expects JSON body: ``{"algorithm", "requests", "start_head", "direction"?}``

        """
        data = request.get_json(silent=True)
        problem = _missing(data, "algorithm", "requests", "start_head")
        if not isinstance(data, dict) or problem is not None:
            return _bad_request(problem or _NO_BODY, source="simulate")
        try:
            requests = _requests_from(data, disk)
            run = generate(
                data["algorithm"],
                requests,
                data["start_head"],
                data.get("direction", Direction.RIGHT),
                config=disk,
            )
        except SchedulingError as e:
            return _bad_request(str(e), source="simulate")
        logger.info(
            f"{run.algorithm.label} head={run.start_head} dir={run.direction} "
            f"requests={len(run.request_set)} total={run.total_seek}",
            source="simulate",
        )
        return jsonify(_run_to_json(run))

    @app.route("/api/compare", methods=["POST"])
    def compare() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Rank every algorithm by total seek for one input.

        Expects JSON body: ``{"requests", "start_head", "direction"?}``

        """
        data = request.get_json(silent=True)
        problem = _missing(data, "requests", "start_head")
        if not isinstance(data, dict) or problem is not None:
            return _bad_request(problem or _NO_BODY, source="compare")
        try:
            requests = _requests_from(data, disk)
            results = compare_all(
                requests,
                data["start_head"],
                data.get("direction", Direction.RIGHT),
                config=disk,
            )
        except SchedulingError as e:
            return _bad_request(str(e), source="compare")
        distinct = len(set(requests))
        best = results[0]
        logger.info(f"best={best.algorithm.label} total={best.total_seek}", source="compare")
        return jsonify(
            {
                "results": [
                    {
                        "rank": rank,
                        "algorithm": r.algorithm.value,
                        "total_seek": r.total_seek,
                        "average_seek": round(average_seek(r.total_seek, distinct), 2),
                    }
                    for rank, r in enumerate(results)
                ],
                "best": best.algorithm.value,
            }
        )

    @app.route("/api/random")
    def random_inputs() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return a random workload (``?count=N``, default 5)."""
        raw_count = request.args.get("count")
        if raw_count is None:
            count = MIN_RANDOM_REQUESTS
        else:
            try:
                count = int(raw_count)
            except ValueError:
                msg = f"Count must be an integer, got {raw_count!r}"
                return _bad_request(msg, source="random")
        try:
            requests, start_head, direction = random_workload(count, config=disk)
        except SchedulingError as e:
            return _bad_request(str(e), source="random")
        return jsonify(
            {"requests": requests, "start_head": start_head, "direction": direction.value}
        )

    @app.route("/api/config")
    def disk_config() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the disk size and accepted tokens."""
        return jsonify(
            {
                "disk_max": disk.disk_max,
                "algorithms": [a.value for a in Algorithm],
                "directions": [d.value for d in Direction],
            }
        )

    @app.route("/api/log")
    def service_log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the service log, oldest first.

        Optional query parameters: ``level`` (minimum severity, e.g.
        ``warning``) and ``source`` (e.g. ``simulate``).

        """
        level = request.args.get("level")
        try:
            min_level = parse_level(level) if level is not None else None
        except ValueError as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST
        entries = logger.filter(min_level=min_level, source=request.args.get("source"))
        return jsonify({"entries": [str(e) for e in entries]})

    @app.route("/api/log", methods=["DELETE"])
    def clear_log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Empty the service log."""
        logger.clear()
        return jsonify({"entries": []})

    return app


def build_parser() -> argparse.ArgumentParser:
    """Construct the ``disk-motion-web`` argument parser."""
    parser = argparse.ArgumentParser(description="DiskMotion scheduling API server")
    parser.add_argument(
        "--config",
        type=Path,
        default=os.environ.get(CONFIG_ENV_VAR),
        help=f"JSON disk configuration file (default: ${CONFIG_ENV_VAR}, else a 0-199 disk)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=_DEFAULT_PORT,
        help=f"Port to listen on (default: {_DEFAULT_PORT})",
    )
    return parser


def app_from_args(argv: list[str] | None = None) -> tuple[Flask, int]:
    """Build the app and port described by command-line arguments.

    Raises:
        ConfigError: If the configuration file cannot be loaded.

    """
    args = build_parser().parse_args(argv)
    return create_app(load_config(args.config)), args.port


def main(argv: list[str] | None = None) -> None:
    """Run the API development server.

    This is the ``disk-motion-web`` console entry point.
    """
    app, port = app_from_args(argv)
    app.run(debug=True, port=port)
