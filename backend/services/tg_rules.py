"""
Talkgroup rules file (the FNE's rules YAML).
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from errors import RulesError


class TgRulesHandler:
  def __init__(self, path: str):
    self.path = path
    self.rules: Optional[Dict[str, Any]] = None

  def read(self) -> Dict[str, Any]:
    try:
      with open(self.path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
      print(f"[rules] failed to read {self.path}: {exc}")
      raise RulesError(f"failed to read {self.path}") from exc
    if not isinstance(data, dict):
      raise RulesError(f"{self.path} does not contain a mapping")
    self.rules = data
    return data

  def write(self, rules: Dict[str, Any]) -> None:
    if not isinstance(rules, dict):
      raise RulesError("rules must be a mapping")
    tmp_path = f"{self.path}.tmp"
    try:
      with open(tmp_path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(rules, handle, default_flow_style=False, sort_keys=False)
      os.replace(tmp_path, self.path)
    except (OSError, yaml.YAMLError) as exc:
      print(f"[rules] failed to write {self.path}: {exc}")
      raise RulesError(f"failed to write {self.path}") from exc
    self.rules = rules
    print(f"[rules] wrote {len(self.group_voice())} talkgroups to {self.path}")

  def group_voice(self) -> List[Any]:
    groups = (self.rules or {}).get("groupVoice")
    return groups if isinstance(groups, list) else []
