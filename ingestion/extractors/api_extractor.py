"""
District congestion ranking extractor.

This module performs the single outbound request of an ETL run:
- Fixed query parameters (link type selector, city code) from configuration
- Browser-like headers, since the provider rejects obvious script clients
- Terminal error handling with custom exceptions; nothing is retried
"""

import httpx
from typing import Optional
from core.config import TrafficEndpoint
from core.exceptions import (
    APIExtractionError,
    NetworkError,
    HTTPStatusError,
    ResponseReadError
)
import logging

logger = logging.getLogger(__name__)


class TrafficIndexExtractor:
    """
    Fetch the raw district ranking payload for one city.

    Attributes:
        endpoint: URL, query parameters, headers and timeout of the request
        transport: Optional httpx transport, used to point tests at a mock
    """

    def __init__(
        self,
        endpoint: TrafficEndpoint,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.endpoint = endpoint
        self.transport = transport

    async def fetch(self) -> bytes:
        """
        Issue one GET request and return the response body.

        Returns:
            Raw response bytes, exactly as sent by the provider

        Raises:
            NetworkError: Connection, DNS, TLS or timeout failure
            HTTPStatusError: Any status other than 200
            ResponseReadError: The body could not be read
            APIExtractionError: The request could not be built or sent
        """
        url = self.endpoint.url
        context = {"api_url": url, "params": self.endpoint.params}

        logger.info(f"Fetching district ranking from {url} (params: {self.endpoint.params})")

        try:
            async with httpx.AsyncClient(
                timeout=self.endpoint.timeout,
                transport=self.transport
            ) as client:
                async with client.stream(
                    "GET",
                    url,
                    params=self.endpoint.params,
                    headers=self.endpoint.headers
                ) as response:
                    if response.status_code != 200:
                        raise HTTPStatusError(
                            f"Received status code {response.status_code}",
                            status_code=response.status_code,
                            context=context
                        )

                    try:
                        body = await response.aread()
                    except httpx.HTTPError as e:
                        raise ResponseReadError(
                            "Failed to read response body",
                            context=context,
                            original_exception=e
                        )

        except httpx.TimeoutException as e:
            raise NetworkError(
                f"Request timed out after {self.endpoint.timeout} seconds",
                context=context,
                original_exception=e
            )

        except httpx.TransportError as e:
            raise NetworkError(
                "Network error while fetching data",
                context=context,
                original_exception=e
            )

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise APIExtractionError(
                "Failed to send request",
                context=context,
                original_exception=e
            )

        logger.info(f"Received {len(body)} bytes from {url}")
        return body
