"""Plain HTTP fetch collaborator built on httpx."""

from pathlib import Path  # noqa: TC003 - Used in runtime type annotations
from typing import Self, final

import httpx

from xmrctl.exceptions import DownloadError

DEFAULT_TIMEOUT: float = 60.0


@final
class Fetcher:
    """Download files over HTTP(S), following redirects.

    Release downloads are redirected from github.com to a CDN host, so
    redirects are always followed.
    """

    __slots__ = ("_client",)

    def __init__(self, client: httpx.Client | None = None) -> None:
        """Initialize the fetcher.

        Args:
            client: httpx client to use. Creates one if None; tests pass a
                client with a MockTransport.
        """
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=DEFAULT_TIMEOUT,
            headers={"User-Agent": "xmrctl"},
        )

    def fetch(self, url: str, dest: Path) -> Path:
        """Download a URL to a local file.

        Args:
            url: The URL to download.
            dest: Destination file path; parent directories are created.

        Returns:
            The destination path.

        Raises:
            DownloadError: If the request fails or returns a non-2xx status.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._client.stream("GET", url) as response:
                _ = response.raise_for_status()
                with dest.open("wb") as f:
                    for chunk in response.iter_bytes():
                        _ = f.write(chunk)
        except httpx.HTTPStatusError as e:
            msg = f"Download failed ({e.response.status_code}): {url}"
            raise DownloadError(msg, url=url, cause=e) from e
        except httpx.HTTPError as e:
            msg = f"Download failed: {url}: {e}"
            raise DownloadError(msg, url=url, cause=e) from e
        except OSError as e:
            msg = f"Failed to write download to {dest}: {e}"
            raise DownloadError(msg, url=url, cause=e) from e
        return dest

    def fetch_text(self, url: str) -> str:
        """Download a URL and return the body as text.

        Raises:
            DownloadError: If the request fails or returns a non-2xx status.
        """
        try:
            response = self._client.get(url)
            _ = response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"Download failed ({e.response.status_code}): {url}"
            raise DownloadError(msg, url=url, cause=e) from e
        except httpx.HTTPError as e:
            msg = f"Download failed: {url}: {e}"
            raise DownloadError(msg, url=url, cause=e) from e
        return response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
