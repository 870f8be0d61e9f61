"""HTTP application: configuration, JSON responses, routes and the server entry point."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sqlite3
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from flask import Flask, Response, request, send_from_directory

from tubely.assets import ensure_assets_dir
from tubely.database import Client

logger = logging.getLogger(__name__)

_REQUIRED = (
    ("db_path", "DB_PATH", "DB_URL must be set"),
    ("jwt_secret", "JWT_SECRET", "JWT_SECRET environment variable is not set"),
    ("platform", "PLATFORM", "PLATFORM environment variable is not set"),
    ("filepath_root", "FILEPATH_ROOT", "FILEPATH_ROOT environment variable is not set"),
    ("assets_root", "ASSETS_ROOT", "ASSETS_ROOT environment variable is not set"),
    ("s3_bucket", "S3_BUCKET", "S3_BUCKET environment variable is not set"),
    ("s3_region", "S3_REGION", "S3_REGION environment variable is not set"),
    ("s3_cf_distribution", "S3_CF_DISTRO", "S3_CF_DISTRO environment variable is not set"),
    ("port", "PORT", "PORT environment variable is not set"),
)


@dataclass(frozen=True)
class Config:
    """Settings the server runs with."""

    db_path: str
    jwt_secret: str
    platform: str
    filepath_root: str
    assets_root: str
    s3_bucket: str
    s3_region: str
    s3_cf_distribution: str
    port: str


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Read the configuration from the environment; raise ValueError if a value is missing."""
    env = os.environ if environ is None else environ
    values = {}
    for field, key, message in _REQUIRED:
        value = env.get(key, "")
        if not value:
            raise ValueError(message)
        values[field] = value
    return Config(**values)


def _encode(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def json_response(code: int, payload: Any) -> Response:
    """A JSON response with the given status code."""
    try:
        body = json.dumps(payload, default=_encode, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        logger.error("Error marshalling JSON: %s", exc)
        return Response(status=500, mimetype="application/json")
    return Response(body, status=code, mimetype="application/json")


def error_response(code: int, msg: str, err: Optional[BaseException] = None) -> Response:
    """A JSON error response of the form ``{"error": msg}``."""
    if err is not None:
        logger.error("%s", err)
    if code > 499:
        logger.error("Responding with 5XX error: %s", msg)
    return json_response(code, {"error": msg})


def create_app(config: Config, db: Client) -> Flask:
    """Build the web application serving the app, the assets and the API."""
    app = Flask(__name__, static_folder=None)
    app_root = os.path.abspath(config.filepath_root)
    assets_root = os.path.abspath(config.assets_root)

    @app.after_request
    def _no_cache_assets(response: Response) -> Response:
        if request.path.startswith("/assets/"):
            response.headers["Cache-Control"] = "no-store"
        return response

    @app.route("/app/", defaults={"filename": ""})
    @app.route("/app/<path:filename>")
    def serve_app(filename: str) -> Response:
        if not filename or filename.endswith("/"):
            filename += "index.html"
        return send_from_directory(app_root, filename)

    @app.route("/assets/<path:filename>")
    def serve_asset(filename: str) -> Response:
        return send_from_directory(assets_root, filename)

    @app.get("/api/videos/<video_id>")
    def get_video(video_id: str) -> Response:
        try:
            parsed = uuid.UUID(video_id)
        except ValueError as exc:
            return error_response(400, "Invalid video ID", exc)
        try:
            video = db.get_video(parsed)
        except sqlite3.Error as exc:
            return error_response(404, "Couldn't get video", exc)
        if video is None:
            return error_response(404, "Couldn't get video")
        return json_response(200, video)

    @app.post("/admin/reset")
    def reset() -> Response:
        if config.platform != "dev":
            return Response(
                "Reset is only allowed in dev environment.", status=403, mimetype="text/plain"
            )
        try:
            db.reset()
        except sqlite3.Error as exc:
            return error_response(500, "Couldn't reset database", exc)
        return Response("Database reset to initial state", status=200, mimetype="text/plain")

    return app


def main(argv: Optional[list[str]] = None) -> None:
    """Load the configuration from ``.env`` and the environment and serve."""
    from dotenv import load_dotenv

    argparse.ArgumentParser(description="Serve the video storage API.").parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if not os.path.isfile(".env") or not load_dotenv(".env"):
        raise SystemExit("Error loading .env file")

    try:
        config = load_config()
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    try:
        db = Client(config.db_path)
    except sqlite3.Error as exc:
        raise SystemExit(f"Couldn't connect to database: {exc}") from exc

    try:
        try:
            ensure_assets_dir(config.assets_root)
        except OSError as exc:
            raise SystemExit(f"Couldn't create assets directory: {exc}") from exc
        app = create_app(config, db)
        logger.info("Serving on: http://localhost:%s/app/", config.port)
        app.run(host="0.0.0.0", port=int(config.port))
    finally:
        db.close()