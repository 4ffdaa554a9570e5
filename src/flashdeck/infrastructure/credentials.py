"""
Key-file credential resolution for the remote blob store.

A password selects a key file ``<source>/<password>.txt`` whose three lines
are the access key, the secret key and the region. The source is either a
local directory or an http(s) base URL.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import httpx

from flashdeck.domain.constants import REQUEST_TIMEOUT
from flashdeck.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobCredentials:
    access_key: str
    secret_key: str
    region: str

    def __repr__(self) -> str:
        return f"BlobCredentials(access_key={self.access_key!r}, region={self.region!r})"


def sanitize_password(password: str) -> str:
    """Keep word characters only, so the password cannot walk out of the key directory."""
    return re.sub(r"\W", "", password)


def parse_key_file(text: str) -> BlobCredentials:
    lines = [line.strip() for line in text.splitlines()]
    if len(lines) < 3 or not all(lines[:3]):
        raise ConfigurationError("Key file must hold access key, secret key and region lines")
    return BlobCredentials(access_key=lines[0], secret_key=lines[1], region=lines[2])


async def load_credentials(
    source: str | None, password: str | None, client: httpx.AsyncClient | None = None
) -> BlobCredentials:
    """
    Resolve blob-store credentials from a password.

    Raises:
        ConfigurationError: No password or source, or the key file is missing or malformed.
    """
    if not password:
        raise ConfigurationError("Need Password")
    if not source:
        raise ConfigurationError("Need a key file source (keys_source)")

    name = f"{sanitize_password(password)}.txt"

    if source.startswith(("http://", "https://")):
        url = f"{source.rstrip('/')}/{name}"
        logger.debug(f"Fetching key file from {source}")
        owns_client = client is None
        client = client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
        try:
            resp = await client.get(url)
        except httpx.HTTPError as e:
            raise ConfigurationError(f"Could not fetch key file: {e}") from e
        finally:
            if owns_client:
                await client.aclose()
        if resp.status_code != 200:
            raise ConfigurationError(f"Key file request failed with HTTP {resp.status_code}")
        return parse_key_file(resp.text)

    path = Path(source).expanduser() / name
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Could not read key file {path}: {e}") from e
    return parse_key_file(text)
