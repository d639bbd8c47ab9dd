"""
API Module
Provides the client for the DirectDigital / Xplana partner integration API

This module contains:
- BaseAPIClient: URL building, request dispatch and response classification
- DirectDigitalAPI: trusted-partner operations (products, fulfillment,
  embed codes, bookstore redemption, status)
- RequestsTransport: default requests.Session backed transport
- ApiError: raised when the API reports failure
- APIConfig: environment backed defaults
"""

from api.base_client import (
    BaseAPIClient,
    RequestsTransport,
    TransportResponse,
    is_response_successful,
    is_body_successful,
    serialize_params,
)
from api.direct_digital_api import DirectDigitalAPI
from api.exceptions import ApiError
from api.config import APIConfig

__all__ = [
    'BaseAPIClient',
    'RequestsTransport',
    'TransportResponse',
    'is_response_successful',
    'is_body_successful',
    'serialize_params',
    'DirectDigitalAPI',
    'ApiError',
    'APIConfig',
]
