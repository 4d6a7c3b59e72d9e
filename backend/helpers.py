"""
Shared helper functions for routes.
"""

from typing import Any, Dict, List

from fastapi import HTTPException, Request
from starlette.concurrency import run_in_threadpool

from auth import current_user
from errors import FneError, InclusionStoreError, RulesError
from services.tg_rules import TgRulesHandler


def base_view(request: Request, **extra: Any) -> Dict[str, Any]:
  """Common fields for every console view model."""
  state = request.app.state
  payload = {
    "name": state.name,
    "user": current_user(request),
    "fne_type": state.fne_type,
  }
  payload.update(extra)
  return payload


async def fetch_peer_list(request: Request) -> List[Dict[str, Any]]:
  """Return the FNE peer roster or fail the request with 502."""
  try:
    response = await request.app.state.fne.get_peer_list()
  except FneError as exc:
    raise HTTPException(status_code=502, detail="peer_list_unavailable") from exc
  if not response or not isinstance(response.get("peers"), list):
    raise HTTPException(status_code=502, detail="peer_list_unavailable")
  return response["peers"]


async def fetch_inclusions(request: Request) -> List[Dict[str, Any]]:
  """Return the inclusion rows or fail the request with 500."""
  try:
    return await run_in_threadpool(request.app.state.inclusions.list)
  except InclusionStoreError as exc:
    print(f"[inclusions] lookup failed: {exc}")
    raise HTTPException(status_code=500, detail="inclusions_unavailable") from exc


async def fne_passthrough(coro, detail: str) -> Dict[str, Any]:
  """Await an FNE call and map its failure to a 502."""
  try:
    return await coro
  except FneError as exc:
    raise HTTPException(status_code=502, detail=detail) from exc


def read_rules(request: Request) -> TgRulesHandler:
  handler = TgRulesHandler(request.app.state.rule_path)
  try:
    handler.read()
  except RulesError as exc:
    raise HTTPException(status_code=500, detail="tg_rules_unavailable") from exc
  return handler
