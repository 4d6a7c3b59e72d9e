"""
Landing, login and logout routes.
"""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse

from auth import require_user, verify_credentials
from helpers import base_view

router = APIRouter()


@router.get("/")
def root(request: Request):
  """Landing page view model."""
  return base_view(request, message=request.query_params.get("message"))


@router.get("/login")
def login_form(request: Request):
  return base_view(request, message=None)


@router.post("/auth")
def login_submit(request: Request, username: str = Form(...), password: str = Form(...)):
  """Log a user in and remember them in the session."""
  ip = request.client.host if request.client else "unknown"
  print(f"[auth] auth request; user={username} ip={ip}")
  if verify_credentials(request, username, password):
    request.session["user"] = username
    print(f"[auth] auth request granted; user={username} ip={ip}")
    return RedirectResponse("/", status_code=303)
  print(f"[auth] auth request failed; user={username} ip={ip}")
  return JSONResponse(
    base_view(request, message="Invalid username or password"),
    status_code=401,
  )


@router.get("/logout")
def logout(request: Request):
  request.session.clear()
  return RedirectResponse("/", status_code=303)


@router.get("/overview")
def overview(request: Request, user: str = Depends(require_user)):
  """Summary of how this console is wired to its FNE (no secrets)."""
  state = request.app.state
  return base_view(
    request,
    config={
      "fne_rest_url": getattr(state.fne, "base_url", None),
      "rule_path": state.rule_path,
      "api_auth_enabled": not state.api_auth_disabled,
    },
  )
