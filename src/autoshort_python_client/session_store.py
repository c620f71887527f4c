from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from dateutil.parser import isoparse
from datetime import datetime
from threading import Lock
from .base_client import get_logger
from .errors import StoreReadError
import json
import time
import os


# Sessions older (or newer, under clock skew) than this are ignored.
SESSION_TTL_MS = 2 * 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Session:
    """
    An authenticated session for one username.

    ``created_at`` is expressed in epoch milliseconds.
    """

    username: str
    access_token: Optional[str] = field(default=None, repr=False)
    id_account: Optional[str] = None
    created_at: int = 0

    @property
    def is_complete(self) -> bool:
        """A session is usable only with both token and account id."""
        return bool(self.access_token) and bool(self.id_account)

    def to_dict(self) -> Dict[str, Any]:
        created = datetime.fromtimestamp(self.created_at / 1000)
        return {
            "username": self.username,
            "access_token": self.access_token,
            "id_account": self.id_account,
            "date": created.isoformat(sep=" ", timespec="seconds"),
            "timestamp": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """
        Build a Session from a persisted record.

        Raises
        ------
        ValueError
            If the record has no username or no usable creation time.
        """
        username = data.get("username")
        if not username:
            raise ValueError("Session record without username")

        timestamp = data.get("timestamp")
        if timestamp is None:
            # Older records may only carry the human-readable date.
            raw_date = data.get("date")
            if not raw_date:
                raise ValueError("Session record without timestamp")
            timestamp = isoparse(raw_date).timestamp() * 1000

        return cls(
            username=username,
            access_token=data.get("access_token"),
            id_account=data.get("id_account"),
            created_at=int(timestamp),
        )


class SessionStore:
    """
    Flat JSON cache of previous sessions, keyed by username.

    Responsibilities:
    - Read the cache once at construction, failing soft on any problem.
    - Decide whether a cached session is still fresh.
    - Append new sessions and rewrite the whole file.

    The file is a JSON array, one object per login. Records are never
    removed; stale ones are simply ignored by lookups. There is no locking
    across processes, so concurrent writers overwrite each other.
    """

    # Serializes in-process writers (login runs on a worker thread).
    _lock = Lock()

    def __init__(
        self,
        path: Optional[str] = None,
        *,
        verbose: bool = False
    ) -> None:
        """
        Parameters
        ----------
        path : str, optional
            Location of the JSON cache. ``None`` keeps sessions in memory
            only.
        verbose : bool, default=False
            Enable INFO logging.
        """
        self.path = path
        self.logger = get_logger("autoshort.store", verbose)
        self.sessions: List[Session] = []
        try:
            self.sessions = self._read()
        except StoreReadError as e:
            self.logger.debug(f"Ignoring session cache: {e}")

    def _read(self) -> List[Session]:
        """
        Parse the cache file.

        Raises
        ------
        StoreReadError
            If the file cannot be opened or is not a JSON array.
        """
        if not self.path or not os.path.exists(self.path):
            return []

        try:
            with open(self.path, "r") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreReadError(f"Unreadable session cache {self.path}: {e}")

        if not isinstance(raw, list):
            raise StoreReadError(
                f"Session cache {self.path} is not a JSON array"
            )

        sessions = []
        for record in raw:
            if not isinstance(record, dict):
                continue
            try:
                sessions.append(Session.from_dict(record))
            except (TypeError, ValueError, AttributeError, OverflowError):
                # Skip a broken record, keep the rest.
                continue
        return sessions

    def load(
        self,
        username: str
    ) -> Optional[Session]:
        """
        Return the most recently stored session for ``username``.

        Returns ``None`` when no record exists. Never raises.
        """
        for session in reversed(self.sessions):
            if session.username == username:
                return session
        return None

    @staticmethod
    def is_fresh(
        session: Session,
        now: Optional[int] = None
    ) -> bool:
        """
        True iff ``|now - session.created_at| < 2h`` (both in epoch ms).

        The absolute difference tolerates clock skew in either direction.
        """
        if now is None:
            now = now_ms()
        return abs(now - session.created_at) < SESSION_TTL_MS

    def append(
        self,
        session: Session
    ) -> None:
        """
        Add ``session`` and rewrite the cache file in full.

        Raises
        ------
        OSError
            If the cache file cannot be written.
        """
        with SessionStore._lock:
            self.sessions.append(session)
            if not self.path:
                return

            with open(self.path, "w") as f:
                json.dump([s.to_dict() for s in self.sessions], f, indent=2)

        self.logger.info(f"Session for {session.username} saved to {self.path}")
