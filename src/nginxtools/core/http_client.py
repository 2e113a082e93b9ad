"""HTTP client for the proxy's status and config endpoints."""

from dataclasses import dataclass

import httpx

from nginxtools.core.exceptions import E_TIMEOUT, ProxyRequestError


@dataclass
class HttpResponse:
    """Text response from one of the proxy's endpoints."""

    status_code: int
    text: str
    url: str


class ProxyHttpClient:
    """Thin GET wrapper around httpx.AsyncClient with a fixed timeout."""

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Proxy base URL, e.g. http://localhost:8080
            timeout_s: Request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get(self, path: str) -> HttpResponse:
        """GET a path and return its body as text.

        Args:
            path: Endpoint path, e.g. /status

        Returns:
            HttpResponse for a 2xx reply

        Raises:
            ProxyRequestError: On timeout, connection failure, or non-2xx status
        """
        url = self.url_for(path)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self._transport
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProxyRequestError(
                f"Request failed with status code {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise ProxyRequestError(
                f"Timed out after {self.timeout_s}s",
                error_code=E_TIMEOUT,
                url=url,
            ) from e
        except httpx.HTTPError as e:
            raise ProxyRequestError(str(e) or type(e).__name__, url=url) from e

        return HttpResponse(status_code=response.status_code, text=response.text, url=url)
