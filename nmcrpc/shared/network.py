"""JSON-RPC transport to the daemon with timeout handling and opt-in retries."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, TypeVar

import requests
from requests.exceptions import ConnectionError, HTTPError, RequestException, Timeout

from nmcrpc.shared.logging import sanitize_rpc_params
from nmcrpc.shared.settings import RpcSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransportErrorType(Enum):
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


@dataclass
class TransportError(Exception):
    error_type: TransportErrorType
    message: str
    original_error: Exception | None = None
    status_code: int | None = None
    response_text: str | None = None

    def __str__(self) -> str:
        return self.message


class RpcErrorCode(IntEnum):
    """Error codes reported by the daemon that this library reacts to."""

    TYPE_ERROR = -3
    WALLET_ERROR = -4
    INVALID_ADDRESS_OR_KEY = -5
    WALLET_UNLOCK_NEEDED = -13
    WALLET_PASSPHRASE_INCORRECT = -14


@dataclass
class RpcError(Exception):
    code: int
    message: str
    method: str = ""

    def __str__(self) -> str:
        if self.method:
            return f"RPC error {self.code} in {self.method}: {self.message}"
        return f"RPC error {self.code}: {self.message}"


@dataclass
class TimeoutConfig:
    connect_timeout: float = 5.0
    read_timeout: float = 60.0

    @property
    def request_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


@dataclass
class RetryConfig:
    # Retrying is off by default: a request that timed out may still have
    # been executed, and repeating name_new or name_firstupdate would
    # broadcast a second transaction.
    max_retries: int = 0
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    retryable_status_codes: set[int] = field(
        default_factory=lambda: {408, 429, 502, 503, 504}
    )

    def calculate_delay(self, attempt: int) -> float:
        delay = self.base_delay * (self.exponential_base**attempt)
        return min(delay, self.max_delay)


DEFAULT_TIMEOUT_CONFIG = TimeoutConfig()
DEFAULT_RETRY_CONFIG = RetryConfig()


def classify_error(error: Exception) -> TransportErrorType:
    if isinstance(error, Timeout):
        return TransportErrorType.TIMEOUT
    elif isinstance(error, ConnectionError):
        return TransportErrorType.CONNECTION_ERROR
    elif isinstance(error, HTTPError):
        return TransportErrorType.HTTP_ERROR
    return TransportErrorType.UNKNOWN


def create_transport_error(
    error: Exception, url: str, context: str = ""
) -> TransportError:
    error_type = classify_error(error)
    context_prefix = f"{context}: " if context else ""

    if error_type == TransportErrorType.TIMEOUT:
        message = f"{context_prefix}Connection timeout. Daemon may be busy: {url}"
    elif error_type == TransportErrorType.CONNECTION_ERROR:
        message = (
            f"{context_prefix}Cannot connect to daemon: {url}. "
            "Check that it is running and accepts RPC connections."
        )
    elif error_type == TransportErrorType.HTTP_ERROR:
        status_code = getattr(error.response, "status_code", None)
        response_text = getattr(error.response, "text", None)
        if status_code == 401:
            message = f"{context_prefix}HTTP error 401: RPC authentication failed"
        else:
            message = f"{context_prefix}HTTP error {status_code}: {response_text or 'Unknown error'}"
        return TransportError(
            error_type=error_type,
            message=message,
            original_error=error,
            status_code=status_code,
            response_text=response_text,
        )
    else:
        message = f"{context_prefix}Network error: {str(error)}"

    return TransportError(
        error_type=error_type,
        message=message,
        original_error=error,
    )


def should_retry(error: Exception, retry_config: RetryConfig) -> bool:
    if isinstance(error, Timeout):
        return True
    if isinstance(error, ConnectionError):
        return True
    if isinstance(error, HTTPError):
        status_code = getattr(error.response, "status_code", None)
        if status_code and status_code in retry_config.retryable_status_codes:
            return True
    return False


class JsonRpcClient:
    """Blocking JSON-RPC connection to one daemon.

    A single instance is shared by every object talking to the daemon; it is
    not safe for concurrent use from several threads.
    """

    def __init__(
        self,
        settings: RpcSettings,
        timeout_config: TimeoutConfig | None = None,
        retry_config: RetryConfig | None = None,
        on_retry: Callable[[int, Exception, float], None] | None = None,
        session: requests.Session | None = None,
    ):
        self.settings = settings
        self.url = settings.url
        self.timeout_config = timeout_config or DEFAULT_TIMEOUT_CONFIG
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self.on_retry = on_retry
        self.session = session or requests.Session()
        self._next_id = 0
        self._suppress_logging = False

    def disable_logging_one_shot(self) -> None:
        """Do not log the parameters of the next call (used for passphrases)."""
        self._suppress_logging = True

    def _execute_with_retry(
        self,
        operation: Callable[[], T],
        context: str = "",
    ) -> T:
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                return operation()
            except RequestException as e:
                last_error = e

                if attempt < self.retry_config.max_retries and should_retry(
                    e, self.retry_config
                ):
                    delay = self.retry_config.calculate_delay(attempt)
                    logger.warning(
                        "RPC request failed (attempt %d/%d), retrying in %.1fs: %s",
                        attempt + 1,
                        self.retry_config.max_retries + 1,
                        delay,
                        str(e),
                    )

                    if self.on_retry:
                        self.on_retry(attempt + 1, e, delay)

                    time.sleep(delay)
                else:
                    break

        raise create_transport_error(
            last_error or Exception("Unknown error"), self.url, context
        )

    def _decode_response(self, response: requests.Response, method: str) -> Any:
        # The daemon reports RPC errors with a non-200 status and a JSON body,
        # so the body has to be inspected before the status code.
        try:
            body = response.json()
        except ValueError:
            response.raise_for_status()
            raise TransportError(
                error_type=TransportErrorType.INVALID_RESPONSE,
                message=f"RPC {method}: daemon returned a non-JSON response",
                status_code=response.status_code,
                response_text=response.text,
            )

        if not isinstance(body, dict):
            raise TransportError(
                error_type=TransportErrorType.INVALID_RESPONSE,
                message=f"RPC {method}: unexpected response structure",
                status_code=response.status_code,
                response_text=response.text,
            )

        error = body.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(
                    code=int(error.get("code", 0)),
                    message=str(error.get("message", "")),
                    method=method,
                )
            raise RpcError(code=0, message=str(error), method=method)

        response.raise_for_status()

        if "result" not in body:
            raise TransportError(
                error_type=TransportErrorType.INVALID_RESPONSE,
                message=f"RPC {method}: response has no result",
                status_code=response.status_code,
                response_text=response.text,
            )
        return body["result"]

    def execute(self, method: str, *params: Any) -> Any:
        """Call ``method`` with positional ``params`` and return its result.

        Raises RpcError for errors reported by the daemon and TransportError
        for everything that prevented getting an answer.
        """
        request_id = self._next_id
        self._next_id += 1

        payload = {
            "jsonrpc": "1.0",
            "id": request_id,
            "method": method,
            "params": list(params),
        }

        if self._suppress_logging:
            self._suppress_logging = False
            logger.debug("RPC call %s (parameters not logged)", method)
        else:
            logger.debug(
                "RPC call %s %s", method, sanitize_rpc_params(method, list(params))
            )

        def operation() -> Any:
            response = self.session.post(
                self.url,
                json=payload,
                auth=self.settings.auth,
                headers={"Accept": "application/json"},
                timeout=self.timeout_config.request_timeout,
            )
            return self._decode_response(response, method)

        return self._execute_with_retry(operation, context=f"RPC {method}")
