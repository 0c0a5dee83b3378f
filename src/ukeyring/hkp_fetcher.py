__version__ = "1.1.0"

from re import DOTALL, compile
from time import sleep
from urllib.parse import quote, urlparse

import requests
from zenlib.logging import loggify
from zenlib.util import colorize as c_

from .exceptions import ConnectivityError, ExtractionError, KeyNotFoundError

DEFAULT_SCHEME = "http"
SCHEME_ALIASES = {"hkp": "http", "hkps": "https"}
LOOKUP_PATH = "/pks/lookup?options=mr&op=get&search=0x%s"

# Key servers are flaky, a lookup is attempted this many times before giving up
DEFAULT_ATTEMPTS = 50
DEFAULT_DELAY = 1.0
DEFAULT_TIMEOUT = 30

# Matches from the first BEGIN to the last END, every returned key is kept
PUBLIC_KEY_BLOCK = compile(r"(-----BEGIN PGP PUBLIC KEY BLOCK-----.*-----END PGP PUBLIC KEY BLOCK-----)", DOTALL)


class RemoteError(Exception):
    """The key server was reached, but did not return a usable response."""


def requests_get(url: str, timeout=DEFAULT_TIMEOUT) -> str:
    """Fetches a URL with requests, returning the response body.
    Raises ConnectivityError if the host can't be reached, RemoteError for anything the server returns."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.ConnectionError as e:
        raise ConnectivityError(e) from e
    except requests.RequestException as e:
        raise RemoteError(e) from e
    return response.text


def get_lookup_url(server_address: str, key_id: str) -> str:
    """Builds the HKP lookup URL for a key ID.
    Servers without a scheme use http, hkp/hkps schemes are mapped to http/https."""
    server_address = server_address.rstrip("/")
    scheme = urlparse(server_address).scheme
    if not scheme or "://" not in server_address:
        server_address = "%s://%s" % (DEFAULT_SCHEME, server_address)
    elif scheme in SCHEME_ALIASES:
        server_address = SCHEME_ALIASES[scheme] + server_address[len(scheme) :]
    return server_address + LOOKUP_PATH % quote(key_id, safe="")


@loggify
class HkpKeyFetcher:
    """
    Fetches ASCII armored public keys from HKP key servers.

    http_get takes a URL and returns the body, raising ConnectivityError when the server
    can't be reached and RemoteError when it responds with an error.
    Remote errors are retried, connectivity errors are not.
    """

    def __init__(
        self, http_get=requests_get, sleep=sleep, attempts=DEFAULT_ATTEMPTS, delay=DEFAULT_DELAY, *args, **kwargs
    ):
        if attempts < 1:
            raise ValueError("Fetch attempts must be at least 1: %s" % attempts)
        self.http_get = http_get
        self.sleep = sleep
        self.attempts = attempts
        self.delay = delay

    def fetch(self, server_address: str, key_id: str) -> str:
        """Returns the armored key block for key_id from server_address."""
        url = get_lookup_url(server_address, key_id)
        self.logger.info("Fetching key '%s' from: %s" % (c_(key_id, "blue"), c_(url, "blue")))

        last_error = None
        for attempt in range(1, self.attempts + 1):
            try:
                body = self.http_get(url)
            except ConnectivityError as e:
                raise ConnectivityError("Unable to contact key server '%s', details: %s" % (url, e)) from e
            except RemoteError as e:
                last_error = e
                if attempt < self.attempts:
                    self.logger.warning(
                        "[%d/%d] Key server returned an error, retrying: %s" % (attempt, self.attempts, e)
                    )
                    self.sleep(self.delay)
                continue

            if match := PUBLIC_KEY_BLOCK.search(body):
                self.logger.debug("[%s] Fetched key block after %d attempt(s)" % (key_id, attempt))
                return match.group(1)
            raise ExtractionError(
                "Key server response for '%s' did not contain a public key block:\n%s" % (key_id, body)
            )

        raise KeyNotFoundError(
            "Contacted key server OK, but key ID '%s' was not found after %d attempts: %s"
            % (key_id, self.attempts, last_error)
        ) from last_error
