"""
API routes guarded by the x-dvmfne-manager-api-key header.
"""

from fastapi import APIRouter, Depends, Request

from auth import require_api_key
from helpers import fetch_inclusions, fetch_peer_list, fne_passthrough, read_rules
from peermap import peer_map_view

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])


@router.get("/stats")
async def api_stats(request: Request):
  """Return FNE statistics as reported by the FNE."""
  return await fne_passthrough(request.app.state.fne.get_stats(), "fne_stats_unavailable")


@router.get("/tg/list")
def api_tg_list(request: Request):
  handler = read_rules(request)
  return {
    "total_talkgroups": len(handler.group_voice()),
    "talkgroup_rules": handler.rules,
  }


@router.get("/rid/list")
async def api_rid_list(request: Request):
  acl = await fne_passthrough(request.app.state.fne.get_rid_acl(), "rid_list_unavailable")
  return {
    "total_rids": len(acl.get("rids") or []),
    "rid_list": acl,
  }


@router.get("/peers/map")
async def api_peer_map(request: Request):
  """Peer map groups for API consumers; the key grants full visibility."""
  peers = await fetch_peer_list(request)
  inclusions = await fetch_inclusions(request)
  return peer_map_view(request.app.state.name, peers, inclusions, authenticated=True)
