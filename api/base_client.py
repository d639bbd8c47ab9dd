"""
Base API Client
Provides URL building, request dispatch and response classification for the partner API
"""

import requests
from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Tuple, Union
from base.logger import Logger
from api.config import APIConfig
from api.exceptions import ApiError
from models.direct_digital import ClientConfig
from models.types import HttpMethod, Namespace, RequestDescriptor, is_supported

TRUSTED_PARTNER_PARAM = 'trustedPartnerID'


# ==================== Response Classification ====================

def is_response_successful(status_code: int) -> bool:
    """HTTP status in [200, 300)"""
    return 200 <= status_code < 300


def is_body_successful(body: Any) -> bool:
    """The partner API flags application errors with a truthy 'code' field"""
    if isinstance(body, dict):
        return not body.get('code')
    return True


def serialize_params(params: Optional[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """
    Flatten a parameter mapping into ordered key/value pairs

    - None values are dropped
    - booleans become 'true' / 'false'
    - lists and tuples become one repeated key per element, order kept

    Args:
        params: Parameter mapping

    Returns:
        list: (key, value) pairs ready for the query string or form body
    """
    pairs = []
    for key, value in (params or {}).items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                item = 'true' if item else 'false'
            pairs.append((key, str(item)))
    return pairs


# ==================== Transport ====================

@dataclass
class TransportResponse:
    """Status code and parsed JSON body (None when the body is not JSON)"""
    status_code: int
    body: Any = None


class RequestsTransport:
    """
    Default transport backed by a requests.Session

    Raises requests' own exceptions on network failure and never raises
    for an HTTP error status; the client decides what counts as failure.
    """

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout if timeout is not None else APIConfig.DEFAULT_TIMEOUT
        self.session = session or requests.Session()

        # Every endpoint answers in JSON
        self.session.headers.update({
            'Accept': 'application/json'
        })

    def send(
        self,
        method: str,
        url: str,
        params: Optional[List[Tuple[str, str]]] = None,
        form: Optional[List[Tuple[str, str]]] = None
    ) -> TransportResponse:
        """
        Send one request

        Args:
            method: 'GET' or 'POST'
            url: Fully built URL without query string
            params: Query string pairs, always encoded into the URL
            form: Optional form body pairs (application/x-www-form-urlencoded)

        Returns:
            TransportResponse
        """
        response = self.session.request(
            method,
            url,
            params=params,
            data=form,
            timeout=self.timeout
        )

        try:
            body = response.json()
        except ValueError:
            body = None

        return TransportResponse(status_code=response.status_code, body=body)

    def close(self):
        self.session.close()


# ==================== Base Client ====================

class BaseAPIClient:
    """
    Base client for the partner API
    All business methods go through _get / _post, which both go through
    _send_and_classify
    """

    def __init__(
        self,
        host: Optional[str] = None,
        api_version: Optional[Union[str, int, float]] = None,
        trusted_partner_id: Optional[str] = None,
        transport=None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the API client

        Args:
            host: Partner API host. Defaults to DD_HOST from config
            api_version: API version identifier. Defaults to DD_API_VERSION
            trusted_partner_id: Trusted partner id. Defaults to DD_TRUSTED_PARTNER_ID
            transport: Object with send(method, url, params, form). Defaults to RequestsTransport
            timeout: Request timeout in seconds, used by the default transport
        """
        self.config: ClientConfig = APIConfig.build_client_config(
            host=host,
            api_version=api_version,
            trusted_partner_id=trusted_partner_id,
            timeout=timeout
        )
        self.transport = transport or RequestsTransport(timeout=self.config.timeout)
        self.logger = Logger()

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def api_version(self):
        return self.config.version

    def supports(self, operation: str) -> bool:
        """Whether the configured API version allows a gated operation"""
        return is_supported(operation, self.config.version)

    def _skip_unsupported(self, operation: str) -> bool:
        """Log and report a gated operation the configured version does not allow"""
        if self.supports(operation):
            return False
        self.logger.warning(
            f"{operation} is not available for API version {self.config.api_version}, skipping"
        )
        return True

    def build_url(self, endpoint: str, namespace: Namespace) -> str:
        """Build full URL from endpoint and namespace"""
        if not endpoint.startswith('/'):
            endpoint = f'/{endpoint}'
        return f"{self.config.host}{namespace.path}/services{endpoint}"

    def _log_request(self, method: str, url: str, params: List[Tuple[str, str]], form=None):
        """Log API request details without the partner id"""
        self.logger.info(f"API Request: {method} {url}")
        visible = [(k, v) for k, v in params if k != TRUSTED_PARTNER_PARAM]
        if visible:
            self.logger.debug(f"Request Params: {visible}")
        if form:
            self.logger.debug(f"Request Form: {form}")

    def _log_response(self, response: TransportResponse, success: bool):
        """Log API response details"""
        self.logger.info(f"API Response: {response.status_code} - Success: {success}")
        if response.body is not None:
            self.logger.debug(f"Response Body: {response.body}")

    def _get(self, endpoint: str, namespace: Namespace, query: Optional[Dict[str, Any]] = None):
        """
        Send GET request

        Args:
            endpoint: API endpoint
            namespace: Service namespace
            query: Query parameters, list values become repeated keys

        Returns:
            Parsed response body
        """
        descriptor = RequestDescriptor(
            method=HttpMethod.GET,
            namespace=namespace,
            endpoint=endpoint,
            query=query or {}
        )
        return self._send_and_classify(descriptor)

    def _post(
        self,
        endpoint: str,
        namespace: Namespace,
        query: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None
    ):
        """
        Send POST request

        Query parameters stay in the URL so repeated keys survive; form is
        sent as the request body.

        Args:
            endpoint: API endpoint
            namespace: Service namespace
            query: Query parameters
            form: Optional form body

        Returns:
            Parsed response body
        """
        descriptor = RequestDescriptor(
            method=HttpMethod.POST,
            namespace=namespace,
            endpoint=endpoint,
            query=query or {},
            form=form
        )
        return self._send_and_classify(descriptor)

    def _send_and_classify(self, descriptor: RequestDescriptor):
        """
        Dispatch a request and apply the success contract

        Returns:
            Parsed response body on success

        Raises:
            ApiError: status outside [200, 300) or truthy 'code' in the body
            requests.exceptions.RequestException: network failure, re-raised as-is
        """
        url = self.build_url(descriptor.endpoint, descriptor.namespace)

        query = dict(descriptor.query)
        query[TRUSTED_PARTNER_PARAM] = self.config.trusted_partner_id
        params = serialize_params(query)
        form = serialize_params(descriptor.form) if descriptor.form is not None else None

        method = descriptor.method.value
        self._log_request(method, url, params, form)

        try:
            response = self.transport.send(method, url, params, form)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"{method} request failed: {str(e)}")
            raise

        success = is_response_successful(response.status_code) and is_body_successful(response.body)
        self._log_response(response, success)

        if not success:
            message = f"{response.status_code} - {url} failed"
            self.logger.error(f"{message} (Body: {response.body})")
            raise ApiError(message, status_code=response.status_code, body_meta=response.body)

        return response.body
