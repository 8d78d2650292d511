"""HTTP client for the FileHeap service."""

import uuid
from typing import Any, Optional

import httpx

from common.constants import DEFAULT_TIMEOUT, HEADER_REQUEST_ID, USER_AGENT
from common.logging_config import get_logger
from common.models import Package
from fileheap.errors import TransportError
from fileheap.package import PackageRef
from fileheap.responses import parse_response

logger = get_logger(__name__)


def parse_address(address: str) -> httpx.URL:
    """
    Parse a base server address in the form [scheme://]host[:port].

    The scheme defaults to https and the port to the scheme's standard port.

    Raises:
        ValueError: If the address has a path, query, fragment or credentials
    """
    address = address.strip()
    if "://" not in address:
        address = f"https://{address}"

    try:
        url = httpx.URL(address)
    except httpx.InvalidURL as e:
        raise ValueError(f"invalid address {address!r}: {e}") from e

    if (
        not url.host
        or url.path not in ("", "/")
        or url.query
        or url.fragment
        or url.userinfo
    ):
        raise ValueError("address must be base server address in the form [scheme://]host[:port]")
    return url.copy_with(path="/")


class Client:
    """
    Entry point to the FileHeap API.

    The client owns one httpx.Client. Tests may replace `session` with a
    client built on a mock transport; requests are always issued with paths
    relative to the session's base URL.
    """

    def __init__(
        self,
        address: str,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            address: Base server address, [scheme://]host[:port]
            transport: Optional httpx transport (for tests or custom networking)
            timeout: Default request timeout in seconds
        """
        self.base_url = parse_address(address)
        self.timeout = timeout
        self.session = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT},
        )
        logger.debug(f"Initialized FileHeap client [base_url={self.base_url}]")

    def url(self, path: str) -> str:
        """Absolute URL of a path on the server."""
        return str(self.base_url.join(path))

    def send_request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        headers: Optional[dict] = None,
        content: Any = None,
        timeout: Optional[float] = None,
        stream: bool = False,
    ) -> httpx.Response:
        """
        Send a single request. Never retries.

        With stream=True the body is left unread and the caller must close
        the response.

        Raises:
            TransportError: If the request fails below the HTTP layer
        """
        request_id = str(uuid.uuid4())
        request_headers = {HEADER_REQUEST_ID: request_id, "User-Agent": USER_AGENT}
        if headers:
            request_headers.update(headers)

        request = self.session.build_request(
            method,
            path,
            params=params,
            json=json,
            content=content,
            headers=request_headers,
            timeout=timeout if timeout is not None else self.timeout,
        )

        logger.debug(f"Sending request: {method} {path} [request_id={request_id}]")
        try:
            response = self.session.send(request, stream=stream)
        except httpx.TransportError as e:
            logger.debug(f"Request failed: {method} {path} error={type(e).__name__} [request_id={request_id}]")
            raise TransportError(f"{method} {path}: {e}") from e

        logger.debug(
            f"Response received: {method} {path} status={response.status_code} [request_id={request_id}]"
        )
        return response

    def new_package(self, timeout: Optional[float] = None) -> tuple[PackageRef, Package]:
        """Create a new, empty package."""
        response = self.send_request("POST", "/packages", timeout=timeout)
        try:
            package = parse_response(response, Package)
        finally:
            response.close()
        logger.info(f"Created package {package.id}")
        return PackageRef(client=self, id=package.id), package

    def package(self, package_id: str) -> PackageRef:
        """Reference an existing package by ID. The package isn't checked."""
        return PackageRef(client=self, id=package_id)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
