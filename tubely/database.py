"""SQLite storage for users, refresh tokens and video metadata."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        password TEXT NOT NULL,
        email TEXT UNIQUE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS refresh_tokens (
        token TEXT PRIMARY KEY,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        revoked_at TIMESTAMP,
        user_id TEXT NOT NULL,
        expires_at TIMESTAMP NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS videos (
        id TEXT PRIMARY KEY,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        title TEXT NOT NULL,
        description TEXT,
        thumbnail_url TEXT,
        video_url TEXT TEXT,
        user_id INTEGER,
        FOREIGN KEY(user_id) REFERENCES users(id)
    )
    """,
)

_VIDEO_COLUMNS = (
    "id, created_at, updated_at, title, description, thumbnail_url, video_url, user_id"
)


def _parse_ts(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _store_ts(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _format_ts(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


@dataclass
class User:
    """A registered user."""

    id: uuid.UUID
    email: str
    password: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "created_at": _format_ts(self.created_at),
            "updated_at": _format_ts(self.updated_at),
            "email": self.email,
            "password": self.password,
        }


@dataclass
class Video:
    """Metadata of an uploaded video."""

    id: uuid.UUID
    title: str
    description: str
    user_id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "created_at": _format_ts(self.created_at),
            "updated_at": _format_ts(self.updated_at),
            "thumbnail_url": self.thumbnail_url,
            "video_url": self.video_url,
            "title": self.title,
            "description": self.description,
            "user_id": str(self.user_id),
        }


@dataclass
class RefreshToken:
    """A refresh token issued to a user."""

    token: str
    user_id: uuid.UUID
    expires_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "user_id": str(self.user_id),
            "expires_at": _format_ts(self.expires_at),
            "created_at": _format_ts(self.created_at),
            "updated_at": _format_ts(self.updated_at),
            "revoked_at": _format_ts(self.revoked_at),
        }


def _row_to_video(row: sqlite3.Row) -> Video:
    return Video(
        id=uuid.UUID(str(row["id"])),
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
        title=row["title"],
        description=row["description"] or "",
        thumbnail_url=row["thumbnail_url"],
        video_url=row["video_url"],
        user_id=uuid.UUID(str(row["user_id"])),
    )


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=uuid.UUID(row["id"]),
        email=row["email"],
        password=row["password"],
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
    )


class Client:
    """Connection to the SQLite database; creates the tables on open."""

    def __init__(self, path: str) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        try:
            for statement in _SCHEMA:
                self._conn.execute(statement)
        except sqlite3.Error:
            self._conn.close()
            raise

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def reset(self) -> None:
        """Delete every row of every table."""
        for table in ("refresh_tokens", "users", "videos"):
            try:
                self._conn.execute(f"DELETE FROM {table}")
            except sqlite3.Error as exc:
                raise sqlite3.DatabaseError(f"failed to reset table {table}: {exc}") from exc

    # Refresh tokens

    def create_refresh_token(
        self, token: str, user_id: uuid.UUID, expires_at: datetime
    ) -> Optional[RefreshToken]:
        self._conn.execute(
            """
            INSERT INTO refresh_tokens (token, created_at, updated_at, user_id, expires_at)
            VALUES (?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP, ?, ?)
            """,
            (token, str(user_id), _store_ts(expires_at)),
        )
        return self.get_refresh_token(token)

    def revoke_refresh_token(self, token: str) -> None:
        self._conn.execute(
            "UPDATE refresh_tokens SET revoked_at = CURRENT_TIMESTAMP WHERE token = ?",
            (token,),
        )

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]:
        row = self._conn.execute(
            """
            SELECT token, created_at, updated_at, user_id, expires_at, revoked_at
            FROM refresh_tokens WHERE token = ?
            """,
            (token,),
        ).fetchone()
        if row is None:
            return None
        return RefreshToken(
            token=row["token"],
            user_id=uuid.UUID(row["user_id"]),
            expires_at=_parse_ts(row["expires_at"]),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
            revoked_at=_parse_ts(row["revoked_at"]),
        )

    def delete_refresh_token(self, token: str) -> None:
        self._conn.execute("DELETE FROM refresh_tokens WHERE token = ?", (token,))

    # Users

    def get_users(self) -> list[User]:
        """All users, with only their id and e-mail filled in."""
        rows = self._conn.execute("SELECT id, email FROM users").fetchall()
        return [User(id=uuid.UUID(row["id"]), email=row["email"]) for row in rows]

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._conn.execute(
            "SELECT id, created_at, updated_at, email, password FROM users WHERE email = ?",
            (email,),
        ).fetchone()
        return None if row is None else _row_to_user(row)

    def get_user_by_refresh_token(self, token: str) -> Optional[User]:
        row = self._conn.execute(
            """
            SELECT u.id, u.email, u.created_at, u.updated_at, u.password
            FROM users u JOIN refresh_tokens rt ON u.id = rt.user_id
            WHERE rt.token = ?
            """,
            (token,),
        ).fetchone()
        return None if row is None else _row_to_user(row)

    def create_user(self, email: str, password: str) -> Optional[User]:
        user_id = uuid.uuid4()
        self._conn.execute(
            """
            INSERT INTO users (id, created_at, updated_at, email, password)
            VALUES (?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP, ?, ?)
            """,
            (str(user_id), email, password),
        )
        return self.get_user(user_id)

    def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        row = self._conn.execute(
            "SELECT id, created_at, updated_at, email, password FROM users WHERE id = ?",
            (str(user_id),),
        ).fetchone()
        return None if row is None else _row_to_user(row)

    def delete_user(self, user_id: uuid.UUID) -> None:
        self._conn.execute("DELETE FROM users WHERE id = ?", (str(user_id),))

    # Videos

    def get_videos(self, user_id: uuid.UUID) -> list[Video]:
        rows = self._conn.execute(
            f"SELECT {_VIDEO_COLUMNS} FROM videos WHERE user_id = ? ORDER BY created_at DESC",
            (str(user_id),),
        ).fetchall()
        return [_row_to_video(row) for row in rows]

    def create_video(self, title: str, description: str, user_id: uuid.UUID) -> Optional[Video]:
        video_id = uuid.uuid4()
        self._conn.execute(
            """
            INSERT INTO videos (id, created_at, updated_at, title, description, user_id)
            VALUES (?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP, ?, ?, ?)
            """,
            (str(video_id), title, description, str(user_id)),
        )
        return self.get_video(video_id)

    def get_video(self, video_id: uuid.UUID) -> Optional[Video]:
        row = self._conn.execute(
            f"SELECT {_VIDEO_COLUMNS} FROM videos WHERE id = ?",
            (str(video_id),),
        ).fetchone()
        return None if row is None else _row_to_video(row)

    def update_video(self, video: Video) -> None:
        self._conn.execute(
            """
            UPDATE videos
            SET title = ?, description = ?, thumbnail_url = ?, video_url = ?, user_id = ?
            WHERE id = ?
            """,
            (
                video.title,
                video.description,
                video.thumbnail_url,
                video.video_url,
                str(video.user_id),
                str(video.id),
            ),
        )

    def delete_video(self, video_id: uuid.UUID) -> None:
        self._conn.execute("DELETE FROM videos WHERE id = ?", (str(video_id),))