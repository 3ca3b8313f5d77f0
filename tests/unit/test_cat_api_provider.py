"""Unit tests for CatApiImageSource -- httpx client is mocked throughout."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from catapi.providers.source.cat_api_provider import CatApiImageSource
from catapi.utils.errors import SourceError

_SAMPLE_PAYLOAD = [
    {
        "id": "0XYvRd7oD",
        "url": "https://cdn2.thecatapi.com/images/0XYvRd7oD.jpg",
        "width": 1204,
        "height": 1445,
        "breeds": [
            {"id": "abys", "name": "Abyssinian", "temperament": "Active, Energetic, Independent"},
        ],
    },
    {
        "id": "ozEvzdVM-",
        "url": "https://cdn2.thecatapi.com/images/ozEvzdVM-.jpg",
        "width": 1200,
        "height": 800,
        "breeds": [],
    },
]


def _mock_response(payload, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def http_client() -> AsyncMock:
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(return_value=_mock_response(_SAMPLE_PAYLOAD))
    return client


class TestFetchBatch:
    @pytest.mark.asyncio
    async def test_parses_images_and_temperaments(self, http_client: AsyncMock) -> None:
        source = CatApiImageSource(http_client=http_client, api_key="secret")

        images = await source.fetch_batch()

        assert [i.external_id for i in images] == ["0XYvRd7oD", "ozEvzdVM-"]
        assert images[0].width == 1204
        assert images[0].temperaments == ["Active, Energetic, Independent"]
        assert images[1].temperaments == []

    @pytest.mark.asyncio
    async def test_request_shape(self, http_client: AsyncMock) -> None:
        source = CatApiImageSource(
            http_client=http_client,
            base_url="https://api.thecatapi.com/",
            api_key="secret",
            batch_limit=25,
        )

        await source.fetch_batch()

        args, kwargs = http_client.get.call_args
        assert args[0] == "https://api.thecatapi.com/v1/images/search"
        assert kwargs["params"] == {"limit": 25, "has_breeds": 1}
        assert kwargs["headers"]["x-api-key"] == "secret"

    @pytest.mark.asyncio
    async def test_no_api_key_header_when_unset(self, http_client: AsyncMock) -> None:
        await CatApiImageSource(http_client=http_client).fetch_batch()
        _, kwargs = http_client.get.call_args
        assert "x-api-key" not in kwargs["headers"]

    @pytest.mark.asyncio
    async def test_transport_error_raises_source_error(self, http_client: AsyncMock) -> None:
        http_client.get = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))
        source = CatApiImageSource(http_client=http_client)

        with pytest.raises(SourceError) as exc_info:
            await source.fetch_batch()
        assert exc_info.value.provider_name == "thecatapi"

    @pytest.mark.asyncio
    async def test_http_status_error_raises_source_error(self, http_client: AsyncMock) -> None:
        response = _mock_response({"message": "unauthorized"}, status_code=401)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "401 Unauthorized", request=MagicMock(), response=MagicMock()
        )
        http_client.get = AsyncMock(return_value=response)

        with pytest.raises(SourceError):
            await CatApiImageSource(http_client=http_client).fetch_batch()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_source_error(self, http_client: AsyncMock) -> None:
        response = _mock_response(None)
        response.json.side_effect = ValueError("Expecting value")
        http_client.get = AsyncMock(return_value=response)

        with pytest.raises(SourceError):
            await CatApiImageSource(http_client=http_client).fetch_batch()

    @pytest.mark.asyncio
    async def test_non_list_body_raises_source_error(self, http_client: AsyncMock) -> None:
        http_client.get = AsyncMock(return_value=_mock_response({"images": []}))

        with pytest.raises(SourceError, match="JSON array"):
            await CatApiImageSource(http_client=http_client).fetch_batch()

    @pytest.mark.asyncio
    async def test_malformed_dimension_raises_source_error(self, http_client: AsyncMock) -> None:
        bad = [{"id": "x", "url": "https://cdn2.thecatapi.com/images/x.jpg", "width": "wide"}]
        http_client.get = AsyncMock(return_value=_mock_response(bad))

        with pytest.raises(SourceError, match="Malformed"):
            await CatApiImageSource(http_client=http_client).fetch_batch()

    def test_provider_name(self, http_client: AsyncMock) -> None:
        assert CatApiImageSource(http_client=http_client).get_provider_name() == "thecatapi"
