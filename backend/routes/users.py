"""
Console user management.
"""

from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from auth import require_user
from errors import StoreError
from helpers import base_view

router = APIRouter()


def _back_to_users(error: Optional[str] = None, success: Optional[str] = None) -> RedirectResponse:
  params = {}
  if error:
    params["error"] = error
  if success:
    params["success"] = success
  url = "/users" + (f"?{urlencode(params)}" if params else "")
  return RedirectResponse(url, status_code=303)


@router.get("/users")
def list_users(request: Request, user: str = Depends(require_user)):
  try:
    users = request.app.state.users.list()
  except StoreError:
    raise HTTPException(status_code=500, detail="users_unavailable")
  return base_view(
    request,
    users=[u.public() for u in users],
    error=request.query_params.get("error"),
    success=request.query_params.get("success"),
  )


@router.post("/addUser")
def add_user(
  request: Request,
  username: str = Form(""),
  password: str = Form(""),
  user: str = Depends(require_user),
):
  try:
    created = request.app.state.users.add(username, password)
  except ValueError:
    return _back_to_users(error="Username and password required")
  except StoreError:
    return _back_to_users(error="Error adding user")
  if created is None:
    return _back_to_users(error="User already exists")
  print(f"[users] {user} added user {created.username}")
  return _back_to_users(success="User added successfully")


@router.post("/editUser")
def edit_user(
  request: Request,
  id: int = Form(...),
  username: str = Form(""),
  password: str = Form(""),
  user: str = Depends(require_user),
):
  try:
    updated = request.app.state.users.edit(id, username, password)
  except ValueError as exc:
    return _back_to_users(error=str(exc).capitalize())
  except StoreError:
    return _back_to_users(error="Error editing user")
  if not updated:
    return _back_to_users(error="User not found")
  return _back_to_users(success="User edited successfully")


@router.post("/deleteUser")
def delete_user(request: Request, id: int = Form(...), user: str = Depends(require_user)):
  try:
    deleted = request.app.state.users.delete(id)
  except ValueError as exc:
    return _back_to_users(error=str(exc).capitalize())
  except StoreError:
    return _back_to_users(error="Error deleting user")
  if not deleted:
    return _back_to_users(error="User not found")
  print(f"[users] {user} deleted user {id}")
  return _back_to_users(success="User deleted")
