"""
Peer map, peer roster, inclusion list and watched peer routes.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from auth import current_user, require_user
from errors import InclusionStoreError, StoreError
from helpers import base_view, fetch_inclusions, fetch_peer_list, fne_passthrough
from peermap import peer_map_view
from services.watched_peers import WatchedPeer

router = APIRouter()


# =========================
# Peer map
# =========================
@router.get("/fnePeerMap")
async def fne_peer_map(request: Request):
  """Peer map; anonymous viewers only see included peers."""
  authenticated = current_user(request) is not None
  peers = await fetch_peer_list(request)
  inclusions = await fetch_inclusions(request)
  return peer_map_view(request.app.state.name, peers, inclusions, authenticated)


@router.get("/fnePeerList")
async def fne_peer_list(request: Request, user: str = Depends(require_user)):
  peers = await fetch_peer_list(request)
  return base_view(request, peers=peers)


@router.get("/fneAffiliationList")
async def fne_affiliation_list(request: Request):
  response = await fne_passthrough(
    request.app.state.fne.get_affiliation_list(),
    "affiliation_list_unavailable",
  )
  return base_view(request, peers=response.get("affiliations") or [])


@router.get("/fneStatus")
async def fne_status(request: Request, user: str = Depends(require_user)):
  return await fne_passthrough(request.app.state.fne.get_status(), "fne_status_unavailable")


# =========================
# Inclusions
# =========================
@router.get("/peerMapInclusions")
async def peer_map_inclusions(request: Request, user: str = Depends(require_user)):
  return base_view(request, inclusions=await fetch_inclusions(request))


@router.post("/addInclusion")
def add_inclusion(
  request: Request,
  PeerMapInclusions: str = Form(...),
  user: str = Depends(require_user),
):
  try:
    request.app.state.inclusions.add(PeerMapInclusions)
  except ValueError:
    raise HTTPException(status_code=400, detail="peer_id_required")
  except InclusionStoreError:
    raise HTTPException(status_code=500, detail="inclusion_add_failed")
  return RedirectResponse("/peerMapInclusions", status_code=303)


@router.post("/deleteInclusion/{row_id}")
def delete_inclusion(request: Request, row_id: int, user: str = Depends(require_user)):
  try:
    deleted = request.app.state.inclusions.delete(row_id)
  except InclusionStoreError:
    raise HTTPException(status_code=500, detail="inclusion_delete_failed")
  if not deleted:
    raise HTTPException(status_code=404, detail="inclusion_not_found")
  return RedirectResponse("/peerMapInclusions", status_code=303)


# =========================
# Watched peers
# =========================
@router.get("/manageWatchedPeers")
def manage_watched_peers(request: Request, user: str = Depends(require_user)):
  try:
    peers = request.app.state.watched.list()
  except StoreError:
    raise HTTPException(status_code=500, detail="database_error")
  return base_view(request, peers=[asdict(p) for p in peers])


@router.post("/addWatchedPeer")
def add_watched_peer(
  request: Request,
  peerId: str = Form(...),
  name: str = Form(""),
  email: str = Form(""),
  phone: str = Form(""),
  discordWebhookUrl: str = Form(""),
  user: str = Depends(require_user),
):
  peer = WatchedPeer(peerId, name, email, phone, discordWebhookUrl)
  try:
    added = request.app.state.watched.add(peer)
  except ValueError:
    raise HTTPException(status_code=400, detail="peer_id_required")
  except StoreError:
    raise HTTPException(status_code=500, detail="database_error")
  if not added:
    raise HTTPException(status_code=409, detail="peer_already_watched")
  return RedirectResponse("/manageWatchedPeers", status_code=303)


@router.post("/editWatchedPeer/{peer_id}")
def edit_watched_peer(
  request: Request,
  peer_id: str,
  name: str = Form(""),
  email: str = Form(""),
  phone: str = Form(""),
  discordWebhookUrl: str = Form(""),
  user: str = Depends(require_user),
):
  peer = WatchedPeer(peer_id, name, email, phone, discordWebhookUrl)
  try:
    updated = request.app.state.watched.update(peer)
  except StoreError:
    raise HTTPException(status_code=500, detail="database_error")
  if not updated:
    raise HTTPException(status_code=404, detail="peer_not_found")
  return RedirectResponse("/manageWatchedPeers", status_code=303)


@router.post("/deleteWatchedPeer/{peer_id}")
def delete_watched_peer(request: Request, peer_id: str, user: str = Depends(require_user)):
  try:
    deleted = request.app.state.watched.delete(peer_id)
  except StoreError:
    raise HTTPException(status_code=500, detail="database_error")
  if not deleted:
    raise HTTPException(status_code=404, detail="peer_not_found")
  return RedirectResponse("/manageWatchedPeers", status_code=303)
