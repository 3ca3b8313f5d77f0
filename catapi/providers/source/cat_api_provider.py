"""TheCatAPI image source implementing IImageSource.

Calls ``GET /v1/images/search?limit=<n>&has_breeds=1`` with the
``x-api-key`` header and maps each element to a :class:`FetchedImage`,
keeping one temperament string per breed.  A pass makes exactly one
request; failures are not retried here.
"""

from __future__ import annotations

from typing import Any

import httpx

from catapi.interfaces.image_source import IImageSource
from catapi.models.source import FetchedImage
from catapi.utils.errors import SourceError
from catapi.utils.logging import get_logger

_PROVIDER_NAME = "thecatapi"
_DEFAULT_BASE_URL = "https://api.thecatapi.com"
_SEARCH_PATH = "/v1/images/search"
_USER_AGENT = "catapi/0.1.0"


class CatApiImageSource(IImageSource):
    """Fetches a batch of breed-annotated images from TheCatAPI.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``; its timeout bounds the request.
    base_url:
        API root, without a trailing slash.
    api_key:
        Sent as ``x-api-key``; omitted when empty (anonymous tier).
    batch_limit:
        ``limit`` query parameter, i.e. images per pass.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = _DEFAULT_BASE_URL,
        api_key: str = "",
        batch_limit: int = 25,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._batch_limit = batch_limit
        self._logger = get_logger(__name__)

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    async def fetch_batch(self) -> list[FetchedImage]:
        url = f"{self._base_url}{_SEARCH_PATH}"
        params = {"limit": self._batch_limit, "has_breeds": 1}
        headers = {"User-Agent": _USER_AGENT, "Accept": "application/json"}
        if self._api_key:
            headers["x-api-key"] = self._api_key

        try:
            response = await self._http.get(url, params=params, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            self._logger.warning("cat_api_request_failed", url=url, error=str(exc))
            raise SourceError(
                message=f"Image search request failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if not isinstance(payload, list):
            raise SourceError(
                message=f"Expected a JSON array, got {type(payload).__name__}",
                provider_name=_PROVIDER_NAME,
            )

        images = self._parse_images(payload)
        self._logger.info("cat_api_batch_fetched", count=len(images))
        return images

    @staticmethod
    def _parse_images(payload: list[Any]) -> list[FetchedImage]:
        images: list[FetchedImage] = []
        for item in payload:
            if not isinstance(item, dict):
                raise SourceError(
                    message=f"Unexpected array element: {item!r}",
                    provider_name=_PROVIDER_NAME,
                )
            try:
                images.append(FetchedImage.from_payload(item))
            except (TypeError, ValueError) as exc:
                raise SourceError(
                    message=f"Malformed image payload: {exc}",
                    provider_name=_PROVIDER_NAME,
                ) from exc
        return images
