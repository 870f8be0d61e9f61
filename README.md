# tubely

A small HTTP server for a video-hosting site. It keeps users, refresh
tokens and video metadata in an SQLite database, serves a static
front-end and stored asset files from local disk, and comes with helpers
that use `ffprobe` / `ffmpeg` to inspect MP4 files and prepare them for
streaming.

## Installation

```
pip install .
```

The helpers in `tubely.media` need `ffprobe` and `ffmpeg` on your `PATH`.

## Configuration

The `tubely` command loads a `.env` file from the working directory; the
file must exist and set at least one variable, otherwise the command stops
with `Error loading .env file`. Settings are then read from the
environment, and every one of these is required:

| Variable        | Meaning                                                   |
|-----------------|-----------------------------------------------------------|
| `DB_PATH`       | Path of the SQLite database file                          |
| `JWT_SECRET`    | Key for access tokens (read, but not used by any route)   |
| `PLATFORM`      | Deployment platform; `dev` enables `POST /admin/reset`    |
| `FILEPATH_ROOT` | Directory of static files served under `/app/`            |
| `ASSETS_ROOT`   | Directory of stored assets, served under `/assets/`       |
| `S3_BUCKET`     | Bucket name (kept in the configuration)                   |
| `S3_REGION`     | Region of that bucket (kept in the configuration)         |
| `S3_CF_DISTRO`  | Content distribution domain (kept in the configuration)   |
| `PORT`          | Port to listen on                                         |

An example `.env`:

```
DB_PATH=./tubely.db
JWT_SECRET=secret
PLATFORM=dev
FILEPATH_ROOT=./app
ASSETS_ROOT=./assets
S3_BUCKET=tubely-example
S3_REGION=us-east-1
S3_CF_DISTRO=cdn.example.com
PORT=8091
```

## Running

```
tubely
```

The command opens (and if needed creates) the database, creates the
assets directory if it does not exist, logs
`Serving on: http://localhost:<PORT>/app/` and listens on all interfaces.
A missing setting, a database that cannot be opened or an assets
directory that cannot be created stops it with a message.

## Routes

- `GET /app/...` — static files from `FILEPATH_ROOT`; a path ending in `/`
  serves its `index.html`
- `GET /assets/...` — files from `ASSETS_ROOT`, sent with
  `Cache-Control: no-store`
- `GET /api/videos/{videoID}` — one video's metadata as JSON; `400` with
  `Invalid video ID` for a malformed id, `404` with `Couldn't get video`
  if there is no such video
- `POST /admin/reset` — delete every row of every table; only when
  `PLATFORM=dev`, otherwise `403` with a plain-text message

Errors come back as JSON of the form `{"error": "message"}`.

## What it does not do

The HTTP server has no routes for signing up, logging in, refreshing or
revoking tokens, creating, listing or deleting videos, or uploading
thumbnails and videos, and it checks no `Authorization` headers. It does
not upload anything to a bucket or sign object URLs. The database layer
and the media helpers below support such features, but nothing in the
package wires them to HTTP.

## Library use

`tubely.database.Client` stores and fetches `User`, `RefreshToken` and
`Video` records; each has a `to_dict()` giving its JSON form.

```python
from datetime import datetime, timedelta, timezone

from tubely.assets import get_asset_path, media_type_to_ext, object_url
from tubely.database import Client
from tubely.media import aspect_ratio_directory, classify_aspect_ratio

password = "password"
with Client("tubely.db") as db:
    user = db.create_user("someone@example.com", password)
    video = db.create_video("My clip", "A short clip", user.id)
    video.thumbnail_url = "http://localhost:8091/assets/thumb.png"
    db.update_video(video)
    db.get_videos(user.id)          # newest first

    expires = datetime.now(timezone.utc) + timedelta(days=60)
    db.create_refresh_token("token", user.id, expires)
    db.get_user_by_refresh_token("token")
    db.revoke_refresh_token("token")

media_type_to_ext("video/mp4")              # ".mp4"
media_type_to_ext("nonsense")               # ".bin"
get_asset_path("image/png")                 # random URL-safe name ending in ".png"
object_url("bucket", "us-east-1", "a.mp4")  # "https://bucket.s3.us-east-1.amazonaws.com/a.mp4"
classify_aspect_ratio(1920, 1080)           # "16:9"
aspect_ratio_directory("9:16")              # "portrait"
```

`tubely.media.get_video_aspect_ratio(path)` runs `ffprobe` on a file and
classifies its first stream; `tubely.media.process_video_for_fast_start(path)`
runs `ffmpeg` to write `<path>.processing` with the index moved to the
front and returns that path. Both raise `tubely.media.MediaError` on
failure.

For testing or embedding, `tubely.app.create_app(config, db)` builds the
Flask application from a `Config` (see `tubely.app.load_config`, which
raises `ValueError` for a missing setting) and a database `Client`.
`tubely.app.json_response` and `tubely.app.error_response` build the JSON
responses the routes use.

## Development

```
pip install -e ".[test]"
pytest
```