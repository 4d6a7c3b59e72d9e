"""
JSON file persistence shared by the local stores.
"""

import json
import os
from typing import Any

from errors import StoreError


def load_json(path: str, default: Any) -> Any:
  """Load JSON from path, returning default when the file does not exist."""
  if not os.path.exists(path):
    return default
  try:
    with open(path, "r", encoding="utf-8") as handle:
      return json.load(handle)
  except (OSError, ValueError) as exc:
    print(f"[state] failed to load {path}: {exc}")
    raise StoreError(f"failed to load {path}") from exc


def save_json(path: str, data: Any) -> None:
  """Write JSON atomically (tmp file + rename)."""
  try:
    directory = os.path.dirname(path)
    if directory:
      os.makedirs(directory, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as handle:
      json.dump(data, handle, indent=2)
    os.replace(tmp_path, path)
  except OSError as exc:
    print(f"[state] failed to save {path}: {exc}")
    raise StoreError(f"failed to save {path}") from exc
