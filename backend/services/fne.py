"""
FNE REST API client.

Talks to the DVM FNE's REST interface to read the live peer roster,
affiliations, RID ACL and status counters.
"""

import hashlib
from typing import Any, Dict, Optional

import httpx

from config import FNE_REST_PASSWORD, FNE_REST_TIMEOUT, FNE_REST_URL
from errors import FneError

AUTH_HEADER = "X-DVM-Auth-Token"


class FneClient:
  """Thin async wrapper around the FNE REST endpoints."""

  def __init__(
    self,
    base_url: str = FNE_REST_URL,
    password: str = FNE_REST_PASSWORD,
    timeout: float = FNE_REST_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
  ):
    """Initialize the client.

    Args:
      base_url: FNE REST base URL, e.g. http://127.0.0.1:9990
      password: REST password; hashed with SHA-256 for the auth handshake
      timeout: Per-request timeout in seconds
      transport: Optional httpx transport (used by tests)
    """
    self.base_url = base_url.rstrip("/")
    self.password = password
    self.timeout = timeout
    self.transport = transport
    self.token: Optional[str] = None

  def _client(self) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

  async def _authenticate(self, client: httpx.AsyncClient) -> str:
    digest = hashlib.sha256(self.password.encode("utf-8")).hexdigest()
    response = await client.put("/auth", json={"auth": digest})
    response.raise_for_status()
    data = response.json()
    token = data.get("token") if isinstance(data, dict) else None
    if not token:
      raise FneError("auth_token_missing")
    self.token = str(token)
    return self.token

  async def _get(self, path: str) -> Dict[str, Any]:
    try:
      async with self._client() as client:
        token = self.token or await self._authenticate(client)
        response = await client.get(path, headers={AUTH_HEADER: token})
        if response.status_code == 401:
          # token expired on the FNE side
          token = await self._authenticate(client)
          response = await client.get(path, headers={AUTH_HEADER: token})
        response.raise_for_status()
        data = response.json()
    except httpx.TimeoutException as exc:
      print(f"[fne] timeout on {path}")
      raise FneError("fne_timeout") from exc
    except httpx.HTTPStatusError as exc:
      print(f"[fne] {path} returned HTTP {exc.response.status_code}")
      raise FneError(f"fne_http_{exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
      print(f"[fne] request to {path} failed: {exc}")
      raise FneError("fne_unreachable") from exc
    except ValueError as exc:
      print(f"[fne] {path} returned invalid JSON")
      raise FneError("fne_invalid_json") from exc
    if not isinstance(data, dict):
      raise FneError("fne_invalid_payload")
    return data

  async def _get_list(self, path: str, field: str) -> Dict[str, Any]:
    data = await self._get(path)
    if not isinstance(data.get(field), list):
      print(f"[fne] {path} response has no {field} list")
      raise FneError(f"fne_missing_{field}")
    return data

  async def get_peer_list(self) -> Dict[str, Any]:
    """Return {"peers": [...]} from the FNE."""
    return await self._get_list("/peer/query", "peers")

  async def get_affiliation_list(self) -> Dict[str, Any]:
    return await self._get_list("/report-affiliations", "affiliations")

  async def get_rid_acl(self) -> Dict[str, Any]:
    return await self._get_list("/rid/query", "rids")

  async def get_status(self) -> Dict[str, Any]:
    return await self._get("/status")

  async def get_stats(self) -> Dict[str, Any]:
    return await self._get("/stats")
