"""
Console user accounts.

Passwords are stored as bcrypt hashes of their SHA-256 hex digest, which keeps
long passwords under bcrypt's 72 byte limit.
"""

import hashlib
import threading
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import bcrypt

from config import USERS_FILE
from services.persistence import load_json, save_json


@dataclass
class User:
  id: int
  username: str
  password_hash: str

  def public(self) -> Dict[str, Any]:
    return {"id": self.id, "username": self.username}


def _digest(password: str) -> bytes:
  return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("ascii")


class UserStore:
  def __init__(self, path: str = USERS_FILE, rounds: int = 12):
    self.path = path
    self.rounds = rounds
    self._lock = threading.Lock()

  def hash_password(self, password: str) -> str:
    return bcrypt.hashpw(_digest(password), bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

  def _read(self) -> Dict[str, Any]:
    data = load_json(self.path, {"next_id": 1, "users": []})
    users: List[User] = []
    if isinstance(data, dict) and isinstance(data.get("users"), list):
      for row in data["users"]:
        if not isinstance(row, dict):
          continue
        try:
          users.append(User(int(row["id"]), str(row["username"]), str(row["password_hash"])))
        except (KeyError, TypeError, ValueError):
          print(f"[users] ignoring malformed user row in {self.path}")
    next_id = data.get("next_id") if isinstance(data, dict) else None
    if not isinstance(next_id, int):
      next_id = max([u.id for u in users], default=0) + 1
    return {"next_id": next_id, "users": users}

  def _write(self, data: Dict[str, Any]) -> None:
    save_json(self.path, {"next_id": data["next_id"], "users": [asdict(u) for u in data["users"]]})

  def list(self) -> List[User]:
    with self._lock:
      return self._read()["users"]

  def get(self, username: str) -> Optional[User]:
    name = str(username).strip()
    with self._lock:
      for user in self._read()["users"]:
        if user.username == name:
          return user
    return None

  def add(self, username: str, password: str) -> Optional[User]:
    """Create a user; None when the username is taken."""
    name = str(username).strip()
    if not name or not password:
      raise ValueError("username and password required")
    password_hash = self.hash_password(password)
    with self._lock:
      data = self._read()
      if any(u.username == name for u in data["users"]):
        return None
      user = User(data["next_id"], name, password_hash)
      data["users"].append(user)
      data["next_id"] += 1
      self._write(data)
    print(f"[users] added user {name}")
    return user

  def edit(self, user_id: int, username: str, password: str = "") -> bool:
    """Rename a user and, when a password is given, reset it."""
    name = str(username).strip()
    if not name:
      raise ValueError("username required")
    password_hash = self.hash_password(password) if password else None
    with self._lock:
      data = self._read()
      target = next((u for u in data["users"] if u.id == user_id), None)
      if target is None:
        return False
      if any(u.username == name and u.id != user_id for u in data["users"]):
        raise ValueError("username already exists")
      target.username = name
      if password_hash:
        target.password_hash = password_hash
      self._write(data)
    print(f"[users] edited user {user_id}")
    return True

  def delete(self, user_id: int) -> bool:
    with self._lock:
      data = self._read()
      kept = [u for u in data["users"] if u.id != user_id]
      if len(kept) == len(data["users"]):
        return False
      if not kept:
        raise ValueError("cannot delete the last user")
      data["users"] = kept
      self._write(data)
    print(f"[users] deleted user {user_id}")
    return True

  def verify(self, username: str, password: str) -> bool:
    user = self.get(username)
    if user is None or not password:
      return False
    try:
      return bcrypt.checkpw(_digest(password), user.password_hash.encode("ascii"))
    except ValueError:
      return False

  def ensure(self, username: str, password: str) -> bool:
    """Seed an account when it does not exist yet; True when one was created."""
    if not username or not password or self.get(username) is not None:
      return False
    return self.add(username, password) is not None
