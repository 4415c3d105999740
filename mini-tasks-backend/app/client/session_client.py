# File: app/client/session_client.py

"""
Client-side session handling for the Mini Tasks API.

Mirrors what the web client does with its session:
  - keeps ``{token, user, expires_at}`` (optionally persisted to a JSON file)
  - sends ``Authorization: Bearer <token>`` on every protected call
  - re-validates the session against ``/auth/me`` at start-up and on a timer,
    and logs out on any non-2xx answer
"""

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
TOKEN_LIFETIME = timedelta(hours=24)
DEFAULT_CHECK_INTERVAL = 4 * 60  # seconds


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code}: {message}")


@dataclass
class StoredSession:
    token: str
    user: Dict[str, Any]
    # Client-side estimate only; the server decides expiry
    expires_at: datetime

    def to_dict(self) -> dict:
        return {"token": self.token, "user": self.user, "expires_at": self.expires_at.isoformat()}

    @classmethod
    def from_dict(cls, data: dict) -> "StoredSession":
        return cls(
            token=data["token"],
            user=data["user"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


class SessionStore:
    """In-memory session storage."""

    def __init__(self):
        self._session: Optional[StoredSession] = None

    def load(self) -> Optional[StoredSession]:
        return self._session

    def save(self, session: StoredSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStore(SessionStore):
    """Session storage backed by a JSON file."""

    def __init__(self, path):
        super().__init__()
        self.path = Path(path)

    def load(self) -> Optional[StoredSession]:
        if not self.path.exists():
            return None
        try:
            return StoredSession.from_dict(json.loads(self.path.read_text(encoding="utf-8")))
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding unreadable session file %s", self.path)
            self.clear()
            return None

    def save(self, session: StoredSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session.to_dict()), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        body = response.json()
        code = body.get("code", "unknown")
        message = body.get("message", response.text)
    except ValueError:
        code, message = "unknown", response.text
    raise ApiError(response.status_code, code, message)


class SessionClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http: Optional[httpx.Client] = None,
        store: Optional[SessionStore] = None,
        timeout: float = 10.0,
    ):
        # ``http`` lets callers plug in their own client (e.g. a TestClient)
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.store = store or SessionStore()

    # ---------- session state ----------

    @property
    def session(self) -> Optional[StoredSession]:
        return self.store.load()

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def current_user(self) -> Optional[Dict[str, Any]]:
        session = self.session
        return session.user if session else None

    def _auth_headers(self) -> Dict[str, str]:
        session = self.session
        if session is None:
            return {}
        return {"Authorization": f"Bearer {session.token}"}

    def _start_session(self, response: httpx.Response) -> Dict[str, Any]:
        _raise_for_error(response)
        data = response.json()
        self.store.save(
            StoredSession(
                token=data["token"],
                user=data["user"],
                expires_at=datetime.now(timezone.utc) + TOKEN_LIFETIME,
            )
        )
        return data["user"]

    def register(self, email: str, password: str) -> Dict[str, Any]:
        return self._start_session(self.http.post("/auth/register", json={"email": email, "password": password}))

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._start_session(self.http.post("/auth/login", json={"email": email, "password": password}))

    def logout(self) -> None:
        self.store.clear()

    def validate_session(self) -> bool:
        """
        Ask ``/auth/me`` whether the stored token is still good.

        Any non-2xx answer, or a transport failure, drops the session.
        """
        if self.session is None:
            return False
        try:
            response = self.http.get("/auth/me", headers=self._auth_headers())
        except httpx.HTTPError as exc:
            logger.warning("Session check failed: %s", exc)
            self.logout()
            return False

        if not response.is_success:
            logger.info("Session rejected by server (%s), logging out", response.status_code)
            self.logout()
            return False

        session = self.session
        if session is not None:
            session.user = response.json()
            self.store.save(session)
        return True

    def restore_session(self) -> bool:
        """Start-up check for a persisted session."""
        return self.validate_session()

    # ---------- API calls ----------

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = self.http.request(method, url, headers=self._auth_headers(), **kwargs)
        _raise_for_error(response)
        return response

    def get_me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me").json()

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks").json()["tasks"]

    def create_task(self, title: str, priority: str = "medium", description: Optional[str] = None) -> Dict[str, Any]:
        body = {"title": title, "priority": priority}
        if description is not None:
            body["description"] = description
        return self._request("POST", "/tasks", json=body).json()

    def update_task(self, task_id: str, completed: bool) -> Dict[str, Any]:
        return self._request("PUT", f"/tasks/{task_id}", json={"completed": completed}).json()

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")


class SessionWatcher:
    """
    Re-validates a client's session on a background timer.

    ``on_expired`` is called once, the first time a check drops the session.
    """

    def __init__(
        self,
        client: SessionClient,
        interval: float = DEFAULT_CHECK_INTERVAL,
        on_expired: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.interval = interval
        self.on_expired = on_expired
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def check_now(self) -> bool:
        if not self.client.is_authenticated:
            return False
        valid = self.client.validate_session()
        if not valid:
            self._stop.set()
            if self.on_expired:
                self.on_expired()
        return valid

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.check_now()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="session-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval + 1)
            self._thread = None
