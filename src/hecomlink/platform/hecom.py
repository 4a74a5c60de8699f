"""
Hecom open API client over httpx.

Authenticates with the client-credentials grant on behalf of a platform
user, keeps the access token until shortly before it expires, and unwraps
the platform's ``{"result", "desc", "data"}`` response envelope.
"""

import logging
import time
from typing import Any

import httpx

from hecomlink.config import PlatformConfig
from hecomlink.platform.base import ObjectNotFoundError, PlatformClient, PlatformError

logger = logging.getLogger("hecomlink.platform")


class HecomClient(PlatformClient):
    TOKEN_PATH = "/oauth/token"
    OBJECTS_PATH = "/v1/oapi/meta/objects"
    OBJECT_DESC_PATH = "/v1/oapi/meta/objects/{name}/description"
    DATA_SQL_PATH = "/v1/oapi/data/objects/query"
    DEPT_SQL_PATH = "/v1/oapi/org/depts/query"
    USERS_PATH = "/v1/oapi/org/users"

    TOKEN_REFRESH_MARGIN = 60  # seconds

    def __init__(self, config: PlatformConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._token: str | None = None
        self._token_expires_at = 0.0

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_host,
                headers={"Content-Type": "application/json", "User-Agent": "hecomlink/0.1.0"},
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # --- Auth ---

    async def _access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        resp = await self.client.post(
            self.TOKEN_PATH,
            auth=(self.config.client_id, self.config.client_secret),
            data={"grant_type": "client_credentials", "username": self.config.username},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        self._handle_error(resp)
        body = resp.json()
        token = body.get("access_token")
        if not token:
            raise PlatformError("Token endpoint returned no access_token", resp.status_code)
        expires_in = float(body.get("expires_in", 3600))
        self._token = token
        self._token_expires_at = time.monotonic() + max(0.0, expires_in - self.TOKEN_REFRESH_MARGIN)
        logger.info(f"Obtained access token for {self.config.username} (expires in {expires_in:.0f}s)")
        return token

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        token = await self._access_token()
        resp = await self.client.request(method, path, headers={"Authorization": f"Bearer {token}"}, **kwargs)
        if resp.status_code == 401:
            # Token revoked server-side; drop it so the next call re-authenticates.
            self._token = None
        self._handle_error(resp)
        return self._unwrap(resp.json())

    @staticmethod
    def _unwrap(body: Any) -> Any:
        if not isinstance(body, dict) or "result" not in body:
            return body
        if str(body["result"]) != "0":
            raise PlatformError(body.get("desc") or f"Platform error {body['result']}")
        return body.get("data")

    # --- Metadata ---

    async def get_objects(self) -> list[dict[str, Any]]:
        data = await self._request("GET", self.OBJECTS_PATH)
        return list(data or [])

    async def get_object_description(self, name: str) -> dict[str, Any] | None:
        try:
            data = await self._request("GET", self.OBJECT_DESC_PATH.format(name=name))
        except ObjectNotFoundError:
            return None
        return data or None

    # --- Data ---

    async def query_data_by_sql(self, sql: str) -> dict[str, Any]:
        return await self._request("POST", self.DATA_SQL_PATH, json={"sql": sql}) or {}

    async def query_depts_by_sql(self, sql: str) -> dict[str, Any]:
        return await self._request("POST", self.DEPT_SQL_PATH, json={"sql": sql}) or {}

    async def create_user(self, user: dict[str, Any]) -> str:
        data = await self._request("POST", self.USERS_PATH, json=user)
        if isinstance(data, dict):
            return str(data.get("id", ""))
        return str(data or "")
