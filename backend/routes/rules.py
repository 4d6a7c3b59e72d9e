"""
Talkgroup rules views.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from auth import require_user
from errors import RulesError
from helpers import base_view, read_rules
from services.tg_rules import TgRulesHandler

router = APIRouter()


@router.get("/pui/talkgroups")
def public_talkgroups(request: Request):
  """Read-only talkgroup list for the public UI."""
  handler = read_rules(request)
  return base_view(request, rules=handler.rules)


@router.get("/tg_rules")
def tg_rules(request: Request, user: str = Depends(require_user)):
  fne_type = request.app.state.fne_type
  if fne_type not in ("FNE2", "CFNE"):
    raise HTTPException(status_code=400, detail="invalid_fne_type")
  handler = read_rules(request)
  if fne_type == "CFNE":
    return base_view(request, rules=handler.rules, groups=handler.rules)
  return base_view(request, rules=handler.rules)


@router.post("/writeTgRuleChanges")
def write_tg_rule_changes(
  request: Request,
  rules: Dict[str, Any] = Body(...),
  user: str = Depends(require_user),
):
  handler = TgRulesHandler(request.app.state.rule_path)
  try:
    handler.write(rules)
  except RulesError:
    raise HTTPException(status_code=500, detail="tg_rules_write_failed")
  print(f"[rules] rules updated by {user}")
  return {"ok": True, "total_talkgroups": len(handler.group_voice())}
