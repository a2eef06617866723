import json
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonFileStore:
    """A single JSON object kept in a file, rewritten whole on every change"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def initialize(self) -> None:
        with self._lock:
            if not self.path.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write({})
                logger.info("Created data file %s", self.path)

    def read(self) -> Dict[str, Any]:
        with self._lock:
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except FileNotFoundError:
                return {}
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not read %s, treating it as empty: %s", self.path, e)
                return {}
            return data if isinstance(data, dict) else {}

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """Read, let the caller mutate, then write back; nothing is written if the block raises"""
        with self._lock:
            data = self.read()
            yield data
            self._write(data)

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)


class UserRepository(JsonFileStore):
    """users.json: email -> user record"""

    def get(self, email: str) -> Optional[Dict[str, Any]]:
        return self.read().get(email)

    def add(self, email: str, password_hash: str, password_salt: str) -> Optional[Dict[str, Any]]:
        """Store a new user; returns None when the email is already taken"""
        with self.transaction() as users:
            if email in users:
                return None
            user = {
                "userId": uuid.uuid4().hex,
                "email": email,
                "passwordHash": password_hash,
                "passwordSalt": password_salt,
                "createdAt": now_utc_iso(),
            }
            users[email] = user
        return user


class RoadmapRepository(JsonFileStore):
    """roadmaps.json: user id -> list of roadmaps, oldest first"""

    def list_for(self, user_id: str) -> List[Dict[str, Any]]:
        return self.read().get(user_id, [])

    def get(self, user_id: str, roadmap_id: str) -> Optional[Dict[str, Any]]:
        for roadmap in self.list_for(user_id):
            if roadmap.get("id") == roadmap_id:
                return roadmap
        return None

    def add(self, user_id: str, career: str, skills: List[str], recommendations: Any = None) -> Dict[str, Any]:
        timestamp = now_utc_iso()
        roadmap = {
            "id": uuid.uuid4().hex,
            "career": career,
            "skills": list(skills),
            "recommendations": recommendations,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        with self.transaction() as roadmaps:
            roadmaps.setdefault(user_id, []).append(roadmap)
        return roadmap

    def delete(self, user_id: str, roadmap_id: str) -> bool:
        """
        Remove one roadmap. Returns False only when the user has no roadmap
        list at all; deleting an id that is not in the list is a no-op.
        """
        with self.transaction() as roadmaps:
            if user_id not in roadmaps:
                return False
            roadmaps[user_id] = [r for r in roadmaps[user_id] if r.get("id") != roadmap_id]
        return True
