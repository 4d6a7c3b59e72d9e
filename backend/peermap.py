"""
Peer map aggregation.

Groups FNE peers by their rounded coordinates so peers sharing a site collapse
into a single map marker, and hides peers that are not on the inclusion list
from anonymous viewers.
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from config import PEER_MAP_PRECISION

INCLUSION_FIELD = "PeerMapInclusions"

# (latitude, longitude) as fixed-precision strings
LocationKey = Tuple[str, str]


@dataclass
class GroupedLocation:
  latitude: str
  longitude: str
  location: Optional[str]
  peers: List[Dict[str, Any]] = field(default_factory=list)

  @property
  def key(self) -> str:
    return f"{self.latitude},{self.longitude}"

  def as_dict(self) -> Dict[str, Any]:
    return {
      "latitude": self.latitude,
      "longitude": self.longitude,
      "location": self.location,
      "peers": list(self.peers),
    }


def peer_id_text(peer: Dict[str, Any]) -> str:
  """Return the peer id as a trimmed string ("" when absent)."""
  value = peer.get("peerId")
  if value is None:
    return ""
  return str(value).strip()


def inclusion_ids(inclusions: Iterable[Any]) -> Set[str]:
  """Normalize inclusion rows into a set of trimmed peer id strings."""
  ids: Set[str] = set()
  for row in inclusions or []:
    value = row.get(INCLUSION_FIELD) if isinstance(row, dict) else row
    if value is None:
      continue
    text = str(value).strip()
    if text:
      ids.add(text)
  return ids


def format_coordinate(value: Any, places: int = PEER_MAP_PRECISION) -> Optional[str]:
  """Format a coordinate to a fixed number of decimals, None if unusable."""
  if value is None or isinstance(value, bool):
    return None
  try:
    number = float(value)
  except (TypeError, ValueError):
    return None
  if not math.isfinite(number):
    return None
  # exact binary value, ties away from zero
  quantum = Decimal(1).scaleb(-places)
  try:
    rounded = Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP)
  except InvalidOperation:
    return None
  # -0.00001 and 0.00001 must share a key
  if rounded == 0:
    rounded = Decimal(0).quantize(quantum)
  return f"{rounded:f}"


def _peer_info(peer: Dict[str, Any]) -> Dict[str, Any]:
  config = peer.get("config")
  if not isinstance(config, dict):
    return {}
  info = config.get("info")
  return info if isinstance(info, dict) else {}


def location_key(peer: Dict[str, Any]) -> Optional[LocationKey]:
  """Return the grouping key for a peer, None when it has no usable coordinates."""
  info = _peer_info(peer)
  lat = format_coordinate(info.get("latitude"))
  lng = format_coordinate(info.get("longitude"))
  if lat is None or lng is None:
    return None
  return lat, lng


def visible_peers(
  peers: Sequence[Dict[str, Any]],
  allowed: Set[str],
  authenticated: bool,
) -> List[Dict[str, Any]]:
  """Select the peers a viewer may see."""
  if authenticated:
    return list(peers)
  return [peer for peer in peers if isinstance(peer, dict) and peer_id_text(peer) in allowed]


def build_peer_map(
  peers: Sequence[Dict[str, Any]],
  inclusions: Sequence[Any],
  authenticated: bool,
) -> Tuple[List[GroupedLocation], Sequence[Any]]:
  """
  Group peers into map markers.

  Anonymous viewers only see peers on the inclusion list. Peers without both
  coordinates are skipped and logged. Groups come back in the order their
  coordinates were first seen; when peers at one spot disagree on the
  location label the first one wins. The inclusion rows are returned as-is.
  """
  allowed = inclusion_ids(inclusions)
  grouped: Dict[LocationKey, GroupedLocation] = {}

  for peer in visible_peers(peers or [], allowed, authenticated):
    if not isinstance(peer, dict):
      print(f"[peermap] skipped malformed peer entry: {peer!r}")
      continue
    key = location_key(peer)
    if key is None:
      print(f"[peermap] skipped peer with incomplete info: {peer.get('peerId')}")
      continue
    group = grouped.get(key)
    if group is None:
      group = GroupedLocation(
        latitude=key[0],
        longitude=key[1],
        location=_peer_info(peer).get("location"),
      )
      grouped[key] = group
    group.peers.append(peer)

  return list(grouped.values()), inclusions


def peer_map_view(
  name: str,
  peers: Sequence[Dict[str, Any]],
  inclusions: Sequence[Any],
  authenticated: bool,
) -> Dict[str, Any]:
  """Build the view model served by the peer map routes."""
  groups, rows = build_peer_map(peers, inclusions, authenticated)
  return {
    "name": name,
    "peers": [group.as_dict() for group in groups],
    "PeerMapInclusions": list(rows),
  }
