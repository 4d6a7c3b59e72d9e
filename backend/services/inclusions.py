"""
Peer map inclusion list.

Rows are {"id": int, "PeerMapInclusions": str}; the second field is the peer
id allowed on the public map.
"""

import threading
from typing import Any, Dict, List

from config import INCLUSIONS_FILE
from errors import InclusionStoreError, StoreError
from peermap import INCLUSION_FIELD
from services.persistence import load_json, save_json


class InclusionStore:
  def __init__(self, path: str = INCLUSIONS_FILE):
    self.path = path
    self._lock = threading.Lock()

  def _read(self) -> Dict[str, Any]:
    try:
      data = load_json(self.path, {"next_id": 1, "rows": []})
    except StoreError as exc:
      raise InclusionStoreError(str(exc)) from exc
    if not isinstance(data, dict) or not isinstance(data.get("rows"), list):
      raise InclusionStoreError(f"malformed inclusion file {self.path}")
    return data

  def _write(self, data: Dict[str, Any]) -> None:
    try:
      save_json(self.path, data)
    except StoreError as exc:
      raise InclusionStoreError(str(exc)) from exc

  def list(self) -> List[Dict[str, Any]]:
    with self._lock:
      return [dict(row) for row in self._read()["rows"] if isinstance(row, dict)]

  def add(self, peer_id: Any) -> Dict[str, Any]:
    text = str(peer_id if peer_id is not None else "").strip()
    if not text:
      raise ValueError("peer id required")
    with self._lock:
      data = self._read()
      next_id = int(data.get("next_id") or 1)
      row = {"id": next_id, INCLUSION_FIELD: text}
      data["rows"].append(row)
      data["next_id"] = next_id + 1
      self._write(data)
    print(f"[inclusions] added peer {text}")
    return dict(row)

  def delete(self, row_id: int) -> bool:
    """Remove a row by id; False when no such row exists."""
    with self._lock:
      data = self._read()
      rows = data["rows"]
      kept = [row for row in rows if not (isinstance(row, dict) and row.get("id") == row_id)]
      if len(kept) == len(rows):
        return False
      data["rows"] = kept
      self._write(data)
    print(f"[inclusions] deleted row {row_id}")
    return True
