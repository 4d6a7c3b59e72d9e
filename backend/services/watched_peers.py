"""
Watched peer contact records, keyed by peer id.
"""

import threading
from dataclasses import asdict, dataclass, fields
from typing import Dict, List

from config import WATCHED_PEERS_FILE
from services.persistence import load_json, save_json


@dataclass
class WatchedPeer:
  peerId: str
  name: str = ""
  email: str = ""
  phone: str = ""
  discordWebhookUrl: str = ""


FIELD_NAMES = {f.name for f in fields(WatchedPeer)}


class WatchedPeerStore:
  def __init__(self, path: str = WATCHED_PEERS_FILE):
    self.path = path
    self._lock = threading.Lock()

  def _read(self) -> Dict[str, WatchedPeer]:
    raw = load_json(self.path, {})
    peers: Dict[str, WatchedPeer] = {}
    if not isinstance(raw, dict):
      return peers
    for key, value in raw.items():
      if not isinstance(value, dict):
        continue
      known = {k: str(v) for k, v in value.items() if k in FIELD_NAMES and v is not None}
      known["peerId"] = str(key)
      peers[str(key)] = WatchedPeer(**known)
    return peers

  def _write(self, peers: Dict[str, WatchedPeer]) -> None:
    save_json(self.path, {k: asdict(v) for k, v in peers.items()})

  def list(self) -> List[WatchedPeer]:
    with self._lock:
      return list(self._read().values())

  def add(self, peer: WatchedPeer) -> bool:
    """Add a peer; False when the id is already watched."""
    peer.peerId = str(peer.peerId).strip()
    if not peer.peerId:
      raise ValueError("peer id required")
    with self._lock:
      peers = self._read()
      if peer.peerId in peers:
        return False
      peers[peer.peerId] = peer
      self._write(peers)
    return True

  def update(self, peer: WatchedPeer) -> bool:
    peer.peerId = str(peer.peerId).strip()
    with self._lock:
      peers = self._read()
      if peer.peerId not in peers:
        return False
      peers[peer.peerId] = peer
      self._write(peers)
    return True

  def delete(self, peer_id: str) -> bool:
    with self._lock:
      peers = self._read()
      if peers.pop(str(peer_id).strip(), None) is None:
        return False
      self._write(peers)
    return True
