"""
src/tools/platform.py — async HTTP client for the Experience Platform REST APIs

Every request carries the platform headers (bearer token, API key, IMS org,
sandbox). Non-2xx responses raise PlatformAPIError with the status and body so
tool failures can be reported to the user as-is.

Token acquisition is not handled here: the access token is read from config.
"""


from typing import Any, Dict, Optional
import httpx
from loguru import logger

import config


class PlatformAPIError(Exception):

    def __init__(self, status_code: int, body: str):

        super().__init__(f"API Error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class PlatformClient:

    def __init__(
            self,
            *,
            base_url: str = config.PLATFORM_URL,
            access_token: str = config.PLATFORM_ACCESS_TOKEN,
            api_key: str = config.PLATFORM_API_KEY,
            ims_org: str = config.PLATFORM_IMS_ORG,
            sandbox: str = config.PLATFORM_SANDBOX,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):

        self.sandbox = sandbox
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "x-api-key": api_key,
                "x-gw-ims-org-id": ims_org,
                "x-sandbox-name": sandbox,
            },
            timeout=config.PLATFORM_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def request(
            self,
            method: str,
            path: str,
            *,
            params: Optional[Dict[str, Any]] = None,
            json: Any = None,
            accept: str = "application/json",
    ) -> Any:

        # Drop unset query params so callers can pass optional filters straight through
        params = {k: v for k, v in (params or {}).items() if v is not None}

        resp = await self._http.request(method, path, params=params, json=json, headers={"Accept": accept})
        logger.debug("{} {} -> {}", method, path, resp.status_code)

        if resp.is_error:
            raise PlatformAPIError(resp.status_code, resp.text)

        if not resp.content:
            return {}

        return resp.json()

    async def get(self, path: str, *, params: Optional[Dict[str, Any]] = None, accept: str = "application/json") -> Any:

        return await self.request("GET", path, params=params, accept=accept)

    async def post(self, path: str, *, json: Any = None) -> Any:

        return await self.request("POST", path, json=json)

    async def aclose(self) -> None:

        await self._http.aclose()
