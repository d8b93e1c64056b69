"""
Tallyman API Base

The call path shared by every API client: build the HTTP request from a
request descriptor, send it through the transport, classify any failure and
decode the response body.
"""

import json
import time
from typing import Any, Optional

import httpx
import pydantic
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ..utils.config import DEFAULT_BASE_URL, ClientConfig
from ..utils.errors import (
    HTTPError,
    MalformedResponseError,
    RequestFailedError,
    ServiceUnavailableError,
    TallymanError,
    UserValidationFailedError,
    ValidationError,
)
from ..utils.logging import get_logger, log_api_call, log_api_failure
from ..wireformat.common import USER_VALIDATION_FAILED_CODE, ErrorResponse
from ..wireformat.requests import RequestDescriptor, content_type

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

# Matched case-insensitively against transport error text.
CONNECTIVITY_FAILURES = (
    "connection refused",
    "no such host",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "network is unreachable",
    "all connection attempts failed",
)


def build_request(descriptor: RequestDescriptor, base_url: str) -> httpx.Request:
    """Turn a request descriptor into an httpx request against base_url."""
    body = descriptor.body()
    headers = {}
    content = None
    if body is not None:
        headers["Content-Type"] = content_type(descriptor)
        content = json.dumps(body).encode("utf-8")
    return httpx.Request(
        descriptor.method, descriptor.url(base_url), headers=headers, content=content
    )


def classify_transport_error(
    error: BaseException, base_url: Optional[str] = None
) -> TallymanError:
    """Classify an error raised by the transport itself.

    Connectivity failures become ServiceUnavailableError; anything else is
    carried unchanged inside a RequestFailedError.
    """
    text = str(error)
    lowered = text.lower()
    if any(phrase in lowered for phrase in CONNECTIVITY_FAILURES):
        return ServiceUnavailableError(
            text, base_url=base_url, details={"original_error": text}
        )
    return RequestFailedError(text, cause=error)


def check_response(response: httpx.Response, base_url: Optional[str] = None) -> None:
    """Raise the classified error for a non-2xx response.

    Raises:
        ServiceUnavailableError: On HTTP 503
        UserValidationFailedError: When the error code reports a rejected identity
        HTTPError: For any other decodable error body
        MalformedResponseError: When the error body is not a JSON error object
    """
    if response.status_code == httpx.codes.SERVICE_UNAVAILABLE:
        raise ServiceUnavailableError(
            "service unavailable",
            base_url=base_url,
            details={"status_code": response.status_code},
        )
    if response.is_success:
        return

    text = response.text
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, pydantic.ValidationError):
        raise MalformedResponseError(
            f"{response.reason_phrase}: {text}",
            body=text,
            status=response.reason_phrase,
            details={"status_code": response.status_code},
        )

    if error.code == USER_VALIDATION_FAILED_CODE:
        raise UserValidationFailedError(error.error, details={"code": error.code})
    raise HTTPError(
        error.error, status_code=response.status_code, details={"code": error.code}
    )


def decode_response(response: httpx.Response, result_type: Any) -> Any:
    """Decode a successful response body into result_type.

    Raises:
        MalformedResponseError: When the body does not decode into result_type
    """
    try:
        return pydantic.TypeAdapter(result_type).validate_json(response.content)
    except pydantic.ValidationError as e:
        raise MalformedResponseError(
            f"failed to unmarshal the response: {e}",
            body=response.text,
            status=response.reason_phrase,
        )


def require(**arguments: str) -> None:
    """Reject empty required arguments before any request is made."""
    for name, value in arguments.items():
        if not value:
            raise ValidationError(f"{name.replace('_', ' ')} required", field=name)


class APIClient:
    """Base for the service clients.

    Holds the transport and base URL fixed at construction; each call builds
    its own request and response objects.
    """

    default_base_url = DEFAULT_BASE_URL

    def __init__(self, config: Optional[ClientConfig] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration; omitted fields take the defaults
        """
        self.config = config or ClientConfig()
        self.base_url = self._resolve_base_url(self.config)
        self._owns_transport = self.config.transport is None
        self._transport = self.config.transport or httpx.Client(
            timeout=self.config.timeout, verify=self.config.verify_ssl
        )

    def _resolve_base_url(self, config: ClientConfig) -> str:
        return config.base_url or self.default_base_url

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self._transport.close()

    def _call(self, operation: str, descriptor: RequestDescriptor, result_type: Any) -> Any:
        """Send one request and return the decoded result or raise one classified error."""
        request = build_request(descriptor, self.base_url)
        url = str(request.url)

        with tracer.start_as_current_span(f"tallyman.{operation}") as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("http.url", url)
            start_time = time.time()

            try:
                response = self._transport.send(request)
            except (httpx.TransportError, OSError) as e:
                error = classify_transport_error(e, self.base_url)
                self._record_failure(span, operation, request.method, url, error)
                raise error from e

            duration_ms = (time.time() - start_time) * 1000
            span.set_attribute("http.status_code", response.status_code)

            try:
                check_response(response, self.base_url)
                result = decode_response(response, result_type)
            except TallymanError as e:
                self._record_failure(
                    span,
                    operation,
                    request.method,
                    url,
                    e,
                    {"status_code": response.status_code},
                )
                raise

            log_api_call(
                logger=logger,
                operation=operation,
                method=request.method,
                url=url,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            return result

    @staticmethod
    def _record_failure(span, operation, method, url, error, additional_data=None):
        span.set_attribute("tallyman.error_kind", error.error_code or "")
        span.set_status(Status(StatusCode.ERROR, error.message))
        log_api_failure(
            logger=logger,
            operation=operation,
            method=method,
            url=url,
            error_kind=error.error_code or type(error).__name__,
            message=error.message,
            additional_data=additional_data,
        )
