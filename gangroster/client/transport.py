"""
Transports carry a mutation from the client to the gateway.

``send`` returns the gateway's MutationResult. Domain failures come back as
failed results; only network-level trouble raises ``TransportError``, which
is the one failure the optimistic layer retries.
"""

import logging

import requests

from gangroster.core.errors import ErrorKind
from gangroster.core.params import Params
from gangroster.core.results import MutationResult

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """The request may not have reached the server."""


class LocalTransport:
    """Calls the gateway in-process, as the acting user in ``ctx``."""

    def __init__(self, ctx):
        self.ctx = ctx

    def send(self, operation: str, params: Params) -> MutationResult:
        from gangroster.core.gateway import OPERATIONS

        op = OPERATIONS.get(operation)
        if op is None:
            return MutationResult.failure("Unknown operation", ErrorKind.VALIDATION)
        return op.run(self.ctx, params)

    def fetch_fighter(self, fighter_id) -> MutationResult:
        from gangroster.core.gateway import get_fighter_view

        return get_fighter_view(self.ctx, str(fighter_id))


class HttpTransport:
    """
    Talks to the JSON API with ``requests``.

    Connection errors, timeouts, broken response bodies and 502/503/504
    responses raise ``TransportError``. Any other request error is a failed
    result that is not retried. A body that is not a JSON object is a store
    error.
    """

    NETWORK_STATUS_CODES = frozenset({502, 503, 504})

    def __init__(self, base_url: str, session=None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, operation: str, params: Params) -> MutationResult:
        url = (
            f"{self.base_url}/api/fighters/{params.fighter_id}"
            f"/mutations/{operation}/"
        )
        return self._request("POST", url, json=params.to_payload())

    def fetch_fighter(self, fighter_id) -> MutationResult:
        return self._request("GET", f"{self.base_url}/api/fighters/{fighter_id}/")

    def _request(self, method: str, url: str, **kwargs) -> MutationResult:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
        ) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        except requests.RequestException as e:
            logger.exception(f"{method} {url} could not be sent")
            return MutationResult.failure(f"Request failed: {e}", ErrorKind.NETWORK)

        if response.status_code in self.NETWORK_STATUS_CODES:
            raise TransportError(f"{method} {url} returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            logger.error(
                f"Non-JSON response from {url} (status {response.status_code})"
            )
            return MutationResult.failure(
                f"Unexpected response from server ({response.status_code})",
                ErrorKind.STORE_ERROR,
            )
        if not isinstance(payload, dict):
            logger.error(f"Response from {url} is not a JSON object")
            return MutationResult.failure(
                f"Unexpected response from server ({response.status_code})",
                ErrorKind.STORE_ERROR,
            )
        return MutationResult.from_dict(payload)
