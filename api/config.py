"""
API Configuration Module
Manages environment variables and client defaults
"""

import os
from typing import Optional, Union
from dotenv import load_dotenv

from models.direct_digital import ClientConfig

# Load environment variables from .env file if it exists
load_dotenv()


class APIConfig:
    """Configuration class for the DirectDigital client"""

    # Partner API host, e.g. https://partner.example.com
    DEFAULT_HOST = os.getenv('DD_HOST', '')

    # API version identifier ('v1', 'v2', 0.7, '0.8', ...)
    DEFAULT_API_VERSION = os.getenv('DD_API_VERSION', 'v1')

    # Trusted partner id sent with every request
    DEFAULT_TRUSTED_PARTNER_ID = os.getenv('DD_TRUSTED_PARTNER_ID', '')

    # Request timeout settings (in seconds)
    DEFAULT_TIMEOUT = float(os.getenv('DD_TIMEOUT', '30'))

    @classmethod
    def build_client_config(
        cls,
        host: Optional[str] = None,
        api_version: Optional[Union[str, int, float]] = None,
        trusted_partner_id: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> ClientConfig:
        """
        Build a validated client configuration

        Explicit arguments win over environment defaults.

        Args:
            host: Partner API host
            api_version: API version identifier
            trusted_partner_id: Trusted partner id
            timeout: Request timeout in seconds

        Returns:
            ClientConfig: Immutable configuration

        Raises:
            ValueError: If no host is given or configured
        """
        host = host if host is not None else cls.DEFAULT_HOST
        if not host:
            raise ValueError("No API host configured. Pass host or set DD_HOST.")

        return ClientConfig(
            host=host,
            api_version=api_version if api_version is not None else cls.DEFAULT_API_VERSION,
            trusted_partner_id=(
                trusted_partner_id if trusted_partner_id is not None
                else cls.DEFAULT_TRUSTED_PARTNER_ID
            ),
            timeout=timeout if timeout is not None else cls.DEFAULT_TIMEOUT
        )
