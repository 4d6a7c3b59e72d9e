"""
FNE Manager - FastAPI Application

Builds the console app with its collaborators injected, so tests and
alternative deployments can swap the FNE client or the stores.
"""

from typing import Any, Optional

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from config import (
  ADMIN_PASSWORD,
  ADMIN_USERNAME,
  API_AUTH_DISABLED,
  API_KEY,
  FNE_TYPE,
  RULE_PATH,
  SERVER_NAME,
  SESSION_MAX_AGE,
  SESSION_SECRET,
)
from routes.api import router as api_router
from routes.peers import router as peers_router
from routes.rules import router as rules_router
from routes.static import router as static_router
from routes.users import router as users_router
from services.fne import FneClient
from services.inclusions import InclusionStore
from services.users import UserStore
from services.watched_peers import WatchedPeerStore


def create_app(
  fne: Optional[Any] = None,
  inclusions: Optional[Any] = None,
  watched: Optional[Any] = None,
  users: Optional[Any] = None,
  rule_path: str = RULE_PATH,
  name: str = SERVER_NAME,
  fne_type: str = FNE_TYPE,
  api_key: str = API_KEY,
  api_auth_disabled: bool = API_AUTH_DISABLED,
  admin_username: str = ADMIN_USERNAME,
  admin_password: str = ADMIN_PASSWORD,
  session_secret: str = SESSION_SECRET,
) -> FastAPI:
  """Create the app and register all routes.

  When admin credentials are given and no user by that name exists yet, the
  account is created in the user store.
  """
  app = FastAPI(title=name, version="1.0.0")
  app.add_middleware(SessionMiddleware, secret_key=session_secret, max_age=SESSION_MAX_AGE)

  app.state.fne = fne if fne is not None else FneClient()
  app.state.inclusions = inclusions if inclusions is not None else InclusionStore()
  app.state.watched = watched if watched is not None else WatchedPeerStore()
  app.state.users = users if users is not None else UserStore()
  app.state.rule_path = rule_path
  app.state.name = name
  app.state.fne_type = fne_type.strip().upper()
  app.state.api_key = api_key
  app.state.api_auth_disabled = api_auth_disabled

  app.include_router(static_router)
  app.include_router(peers_router)
  app.include_router(rules_router)
  app.include_router(users_router)
  app.include_router(api_router)

  if app.state.users.ensure(admin_username, admin_password):
    print(f"[startup] created console user {admin_username}")
  if not app.state.users.list():
    print("[startup] no console users; set ADMIN_USERNAME/ADMIN_PASSWORD to create one")
  if api_auth_disabled:
    print("[startup] API key check disabled")
  print(f"[startup] {name} ready (type={app.state.fne_type})")
  return app
