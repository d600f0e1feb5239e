"""
Unit tests for the district ranking extractor
"""

import pytest
import httpx
from core.config import Settings
from core.exceptions import (
    APIExtractionError,
    ExtractionError,
    NetworkError,
    HTTPStatusError,
    ResponseReadError
)
from ingestion.extractors.api_extractor import TrafficIndexExtractor


class FailingStream(httpx.AsyncByteStream):
    """Response body that breaks after the headers arrived"""

    async def __aiter__(self):
        yield b'[{"id": "A1",'
        raise httpx.ReadError("connection reset by peer")


class TestTrafficIndexExtractor:
    """Test extractor request and error handling"""

    @pytest.mark.asyncio
    async def test_fetch_data_success(self, test_settings, make_transport, mock_payload):
        """Test the body is returned byte for byte"""
        extractor = TrafficIndexExtractor(
            test_settings.endpoint,
            transport=make_transport(content=mock_payload)
        )

        body = await extractor.fetch()

        assert body == mock_payload

    @pytest.mark.asyncio
    async def test_request_uses_fixed_params_and_headers(self, make_transport):
        """Test query parameters and browser headers are sent"""
        requests = []
        endpoint = Settings(_env_file=None).endpoint
        extractor = TrafficIndexExtractor(endpoint, transport=make_transport(requests=requests))

        await extractor.fetch()

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "GET"
        assert request.url.host == "report.amap.com"
        assert request.url.path == "/ajax/districtRank.do"
        assert request.url.params["linksType"] == "4"
        assert request.url.params["cityCode"] == "440100"
        assert request.headers["User-Agent"].startswith("Mozilla/5.0")
        assert request.headers["Accept"].startswith("text/html")
        assert request.headers["Accept-Language"] == "zh-CN,zh;q=0.9"

    @pytest.mark.asyncio
    async def test_non_200_status_raises(self, test_settings, make_transport):
        """Test a 500 response is terminal and carries the status code"""
        extractor = TrafficIndexExtractor(
            test_settings.endpoint,
            transport=make_transport(status_code=500, content=b"Internal Server Error")
        )

        with pytest.raises(HTTPStatusError) as exc_info:
            await extractor.fetch()

        assert exc_info.value.status_code == 500
        assert exc_info.value.context["status_code"] == 500
        assert "500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_other_success_statuses_are_rejected(self, test_settings, make_transport):
        """Test only 200 counts as success"""
        extractor = TrafficIndexExtractor(
            test_settings.endpoint,
            transport=make_transport(status_code=204, content=b"")
        )

        with pytest.raises(HTTPStatusError) as exc_info:
            await extractor.fetch()

        assert exc_info.value.status_code == 204

    @pytest.mark.asyncio
    async def test_connection_error_raises_network_error(self, test_settings):
        """Test transport failures are wrapped with the cause"""

        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        extractor = TrafficIndexExtractor(
            test_settings.endpoint,
            transport=httpx.MockTransport(handler)
        )

        with pytest.raises(NetworkError) as exc_info:
            await extractor.fetch()

        assert isinstance(exc_info.value.original_exception, httpx.ConnectError)
        assert "Connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value, ExtractionError)

    @pytest.mark.asyncio
    async def test_timeout_raises_network_error(self, test_settings):
        """Test timeouts are reported as network errors"""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        extractor = TrafficIndexExtractor(
            test_settings.endpoint,
            transport=httpx.MockTransport(handler)
        )

        with pytest.raises(NetworkError, match="timed out"):
            await extractor.fetch()

    @pytest.mark.asyncio
    async def test_body_read_failure_raises(self, test_settings):
        """Test a broken body stream is a read error, not a network error"""

        def handler(request):
            return httpx.Response(200, stream=FailingStream())

        extractor = TrafficIndexExtractor(
            test_settings.endpoint,
            transport=httpx.MockTransport(handler)
        )

        with pytest.raises(ResponseReadError) as exc_info:
            await extractor.fetch()

        assert isinstance(exc_info.value.original_exception, httpx.ReadError)

    @pytest.mark.asyncio
    async def test_invalid_url_raises(self):
        """Test a URL that cannot be requested fails as an extraction error"""
        endpoint = Settings(_env_file=None, TRAFFIC_API_URL="ftp://example.test/rank").endpoint
        extractor = TrafficIndexExtractor(endpoint)

        with pytest.raises(APIExtractionError):
            await extractor.fetch()
