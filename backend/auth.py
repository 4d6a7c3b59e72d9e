"""
Authentication helpers for console pages and API routes.
"""

import hmac
from typing import Optional

from fastapi import HTTPException, Request

from config import API_KEY_HEADER
from errors import StoreError


def current_user(request: Request) -> Optional[str]:
  """Return the logged-in username for this request, if any."""
  user = request.session.get("user")
  return str(user) if user else None


def require_user(request: Request) -> str:
  """Dependency for console pages; anonymous visitors are sent home."""
  user = current_user(request)
  if not user:
    raise HTTPException(status_code=303, detail="login_required", headers={"Location": "/"})
  return user


def verify_credentials(request: Request, username: str, password: str) -> bool:
  """Check a login against the user store."""
  try:
    return request.app.state.users.verify(username, password)
  except StoreError as exc:
    print(f"[auth] user store unavailable: {exc}")
    return False


def require_api_key(request: Request) -> None:
  """Raise HTTPException if the API key header is missing or wrong."""
  state = request.app.state
  if state.api_auth_disabled:
    return
  if not state.api_key:
    raise HTTPException(status_code=503, detail="api_key_not_set")
  key = request.headers.get(API_KEY_HEADER)
  if not key or not hmac.compare_digest(key.encode("utf-8"), state.api_key.encode("utf-8")):
    raise HTTPException(status_code=401, detail="unauthorized")
