from pathlib import Path

import httpx
import pytest

from xmrctl.exceptions import DownloadError
from xmrctl.host import Fetcher

RELEASE_URL = "https://github.com/xmrig/xmrig/releases/download/v6.22.2/xmrig.tar.gz"
CDN_URL = "https://objects.githubusercontent.com/xmrig.tar.gz"


def _handler(request: httpx.Request) -> httpx.Response:
    if str(request.url) == RELEASE_URL:
        return httpx.Response(302, headers={"Location": CDN_URL})
    if str(request.url) == CDN_URL:
        return httpx.Response(200, content=b"tarball-bytes")
    if request.url.path == "/config.json":
        return httpx.Response(200, text='{"cpu": {}}')
    return httpx.Response(404)


@pytest.fixture
def fetcher() -> Fetcher:
    client = httpx.Client(transport=httpx.MockTransport(_handler), follow_redirects=True)
    return Fetcher(client)


class TestFetch:
    def test_follows_redirects_to_file(self, fetcher: Fetcher, tmp_path: Path) -> None:
        dest = tmp_path / "downloads" / "xmrig.tar.gz"

        result = fetcher.fetch(RELEASE_URL, dest)

        assert result == dest
        assert dest.read_bytes() == b"tarball-bytes"

    def test_http_error_raises_download_error(
        self, fetcher: Fetcher, tmp_path: Path
    ) -> None:
        url = "https://example.com/missing.tar.gz"

        with pytest.raises(DownloadError, match="404") as exc_info:
            _ = fetcher.fetch(url, tmp_path / "x")

        assert exc_info.value.url == url

    def test_transport_error_raises_download_error(self, tmp_path: Path) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = Fetcher(httpx.Client(transport=httpx.MockTransport(_refuse)))

        with pytest.raises(DownloadError, match="connection refused"):
            _ = fetcher.fetch(RELEASE_URL, tmp_path / "x")


class TestFetchText:
    def test_returns_body(self, fetcher: Fetcher) -> None:
        assert fetcher.fetch_text("https://example.com/config.json") == '{"cpu": {}}'

    def test_http_error_raises_download_error(self, fetcher: Fetcher) -> None:
        with pytest.raises(DownloadError):
            _ = fetcher.fetch_text("https://example.com/other")


class TestClose:
    def test_context_manager_closes_client(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(_handler))

        with Fetcher(client) as fetcher:
            assert fetcher.fetch_text("https://example.com/config.json")

        assert client.is_closed
