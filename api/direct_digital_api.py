"""
DirectDigital API Client
Handles trusted-partner operations against the DirectDigital / Xplana integration API
"""

import time
from typing import Optional, Dict, Any, List, Union
from api.base_client import BaseAPIClient
from models.direct_digital import (
    UserInfo,
    EmbedCodeOptions,
    UserProductsResponse,
    ServiceStatus
)
from models.types import Namespace

CORE = Namespace.CORE_SERVICES
PLATFORM = Namespace.PLATFORM_INTEGRATION


def _user_info(user_info: Optional[Union[UserInfo, Dict[str, Any]]]) -> UserInfo:
    if user_info is None:
        return UserInfo()
    if isinstance(user_info, UserInfo):
        return user_info
    return UserInfo(**user_info)


def _codes(product_codes: Union[str, List[str], None]) -> Optional[List[str]]:
    if product_codes is None:
        return None
    if isinstance(product_codes, str):
        return [product_codes]
    return list(product_codes)


class DirectDigitalAPI(BaseAPIClient):
    """
    DirectDigital API client for trusted-partner operations:
    - Product catalog and verification
    - Fulfillment, deactivation and renewal of user products
    - Embed codes for the bookshelf widget
    - Bookstore code redemption
    - Service status

    Operations the configured API version does not support return None
    without sending a request.
    """

    name = 'directDigital'

    def __init__(
        self,
        host: Optional[str] = None,
        api_version: Optional[Union[str, int, float]] = None,
        trusted_partner_id: Optional[str] = None,
        transport=None,
        timeout: Optional[float] = None,
        version: Optional[Union[str, int, float]] = None
    ):
        """
        Initialize the DirectDigital API client

        Args:
            host: Partner API host
            api_version: API version identifier ('v1', 'v2', 0.7, '0.8', ...)
            trusted_partner_id: Trusted partner id sent with every request
            transport: Custom transport, defaults to a requests.Session backed one
            timeout: Request timeout in seconds
            version: Alias for api_version
        """
        super().__init__(
            host=host,
            api_version=api_version if api_version is not None else version,
            trusted_partner_id=trusted_partner_id,
            transport=transport,
            timeout=timeout
        )
        self.logger.info(f"DirectDigitalAPI client initialized (API version {self.config.api_version})")

    # ==================== Status ====================

    def check_status(self) -> ServiceStatus:
        """
        Check whether the partner host answers at all

        Any HTTP response counts as online. Any error raised by the transport
        counts as offline, so this never raises.

        Returns:
            ServiceStatus: online flag, web subsystem flag and latency like '12.3ms'

        Example:
            >>> dd = DirectDigitalAPI(host="https://partner.example.com")
            >>> status = dd.check_status()
            >>> if not status.online:
            ...     print(f"Partner API down ({status.latency})")
        """
        start = time.perf_counter()
        try:
            self.transport.send('GET', self.config.host, [], None)
            web_status = True
        except Exception as e:
            self.logger.warning(f"Status check failed: {type(e).__name__}: {str(e)}")
            web_status = False

        latency_ms = max((time.perf_counter() - start) * 1000, 0.0)
        status = ServiceStatus.from_web_status(web_status, latency_ms)
        self.logger.info(f"Status check - online: {status.online}, latency: {status.latency}")
        return status

    # ==================== Products ====================

    def deactivate_user_products(self, customer_id: str, product_codes: List[str]):
        """
        Deactivate products for a customer

        API Endpoint: POST /xplana-platform-integration/services/deactivateUserProducts
        """
        query = {
            'customerID': customer_id,
            'productCode': _codes(product_codes)
        }
        self.logger.info(f"Deactivating products for customer: {customer_id}")
        return self._post('/deactivateUserProducts', PLATFORM, query)

    def fulfill_products(
        self,
        customer_id: str,
        user_info: Optional[Union[UserInfo, Dict[str, Any]]],
        product_codes: List[str]
    ):
        """
        Grant a customer access to products

        API Endpoint: POST /xplana-platform-integration/services/fulfillProducts

        Args:
            customer_id: Partner-side customer id
            user_info: Customer details (UserInfo or dict of its fields)
            product_codes: Product codes to fulfil

        Returns:
            Parsed response body
        """
        query = {
            'customerid': customer_id,
            **_user_info(user_info).as_userinfovo(),
            'productCode': _codes(product_codes)
        }
        self.logger.info(f"Fulfilling products for customer: {customer_id}")
        return self._post('/fulfillProducts', PLATFORM, query)

    def renew_product(self, customer_id: str, product_codes: List[str]):
        """
        Renew products for a customer

        API Endpoint: POST /xplana-platform-integration/services/renewProducts

        Returns:
            Parsed response body, or None when the API version is too old
        """
        if self._skip_unsupported('renew_product'):
            return None

        query = {
            'customerID': customer_id,
            'productCode': _codes(product_codes)
        }
        self.logger.info(f"Renewing products for customer: {customer_id}")
        return self._post('/renewProducts', PLATFORM, query)

    def retrieve_products(self):
        """
        List the products available to the trusted partner

        API Endpoint: GET /xplana-platform-integration/services/retrieveProducts
        """
        self.logger.info("Retrieving partner products")
        return self._get('/retrieveProducts', PLATFORM, {})

    def retrieve_user_products(self, customer_id: str):
        """
        API Endpoint: GET /xplana-platform-integration/services/retrieveUserProducts

        Returns:
            Parsed response body with 'active' and 'inactive' product code lists
        """
        query = {'customerID': customer_id}
        self.logger.info(f"Retrieving products for customer: {customer_id}")
        return self._get('/retrieveUserProducts', PLATFORM, query)

    def verify_products(self, product_codes: List[str]):
        """API Endpoint: POST /xplana-platform-integration/services/verifyProducts"""
        query = {'productCode': _codes(product_codes)}
        self.logger.info(f"Verifying {len(query['productCode'] or [])} product code(s)")
        return self._post('/verifyProducts', PLATFORM, query)

    def generate_mobile_key(self, customer_id: str):
        """API Endpoint: GET /xplana-platform-integration/services/generateMobileKey"""
        query = {'customerID': customer_id}
        self.logger.info(f"Generating mobile key for customer: {customer_id}")
        return self._get('/generateMobileKey', PLATFORM, query)

    # ==================== Bookstore ====================

    def redeem_code_from_bookstore(
        self,
        customer_id: str,
        user_info: Optional[Union[UserInfo, Dict[str, Any]]],
        redeem_code: str
    ):
        """
        Redeem a bookstore code for a customer

        API Endpoint: /directdigital/services/redeemCodeFromBookStore
        Sent as GET below API version 0.8 and as POST from 0.8 on.

        Args:
            customer_id: Partner-side customer id
            user_info: Customer details
            redeem_code: Code printed on the bookstore access card

        Returns:
            Parsed response body, or None when the API version is too old
        """
        if self._skip_unsupported('redeem_code_from_bookstore'):
            return None

        query = {
            'customerID': customer_id,
            **_user_info(user_info).as_userinfovo(),
            'redeemCode': redeem_code
        }
        endpoint = '/redeemCodeFromBookStore'

        self.logger.info(f"Redeeming bookstore code for customer: {customer_id}")
        if self.supports('redeem_code_from_bookstore_post'):
            return self._post(endpoint, CORE, query)
        return self._get(endpoint, CORE, query)

    # ==================== Embed Codes ====================

    def retrieve_embed_code(
        self,
        customer_id: str,
        user_info: Optional[Union[UserInfo, Dict[str, Any]]] = None,
        options: Optional[Union[EmbedCodeOptions, Dict[str, Any]]] = None
    ):
        """
        Retrieve the bookshelf embed code using the flavour the API version supports

        Versions below the V2 gate use retrieve_embed_code_v1 and ignore options.
        """
        if self.supports('retrieve_embed_code_v2'):
            return self.retrieve_embed_code_v2(customer_id, user_info, options)
        return self.retrieve_embed_code_v1(customer_id, user_info)

    def retrieve_embed_code_v1(
        self,
        customer_id: str,
        user_info: Optional[Union[UserInfo, Dict[str, Any]]] = None
    ):
        """API Endpoint: GET /xplana-platform-integration/services/retrieveEmbedCode"""
        query = {
            'customerID': customer_id,
            **_user_info(user_info).as_embed_params()
        }
        self.logger.info(f"Retrieving embed code (v1) for customer: {customer_id}")
        return self._get('/retrieveEmbedCode', PLATFORM, query)

    def retrieve_embed_code_v2(
        self,
        customer_id: str,
        user_info: Optional[Union[UserInfo, Dict[str, Any]]] = None,
        options: Optional[Union[EmbedCodeOptions, Dict[str, Any]]] = None
    ):
        """
        Retrieve the bookshelf embed code with display options

        API Endpoint: GET /directdigital/services/retrieveEmbedCode

        Args:
            customer_id: Partner-side customer id
            user_info: Customer details
            options: EmbedCodeOptions or dict with remote, empty_mode, width, height
                (defaults: False, False, '100%', '100%')

        Returns:
            Parsed response body
        """
        if options is None:
            options = EmbedCodeOptions()
        elif not isinstance(options, EmbedCodeOptions):
            options = EmbedCodeOptions(**options)

        query = {
            'customerID': customer_id,
            **_user_info(user_info).as_embed_params(),
            **options.as_params()
        }
        self.logger.info(f"Retrieving embed code (v2) for customer: {customer_id}")
        return self._get('/retrieveEmbedCode', CORE, query)

    def retrieve_integrated_embed_code(
        self,
        customer_id: str,
        remote: bool = False,
        user_info: Optional[Union[UserInfo, Dict[str, Any]]] = None
    ):
        """
        Retrieve the embed code for an integrated (in-page) bookshelf

        API Endpoint: POST /xplana-platform-integration/services/retrieveIntegratedEmbedCode

        Returns:
            Parsed response body, or None when the API version is too old
        """
        if self._skip_unsupported('retrieve_integrated_embed_code'):
            return None

        query = {
            'customerID': customer_id,
            'remote': bool(remote),
            **_user_info(user_info).as_userinfovo()
        }
        self.logger.info(f"Retrieving integrated embed code for customer: {customer_id}")
        return self._post('/retrieveIntegratedEmbedCode', PLATFORM, query)

    # ==================== Derived Queries ====================

    def _user_products(self, body) -> UserProductsResponse:
        """Parse a retrieveUserProducts body, treating anything but an object as empty"""
        if not isinstance(body, dict):
            if body is not None:
                self.logger.warning(f"Unexpected retrieveUserProducts body: {body!r}")
            body = {}
        return UserProductsResponse.model_validate(body)

    def get_user_product_count(
        self,
        customer_id: str,
        do_count_active: bool = False,
        do_count_inactive: bool = False
    ) -> int:
        """
        Count a customer's products

        Args:
            customer_id: Partner-side customer id
            do_count_active: Include active products
            do_count_inactive: Include inactive products

        Returns:
            int: Number of products in the selected lists
        """
        body = self.retrieve_user_products(customer_id)
        products = self._user_products(body)
        return products.count(do_count_active=do_count_active, do_count_inactive=do_count_inactive)

    def is_product_fulfilled(self, customer_id: str, product_code: str) -> bool:
        """True if product_code is one of the customer's active products"""
        body = self.retrieve_user_products(customer_id)
        products = self._user_products(body)
        return products.has_active(product_code)

    def is_user(self, customer_id: str) -> bool:
        """
        True if the customer owns any product, active or not

        Note: the partner API only knows customer ids. Callers holding a
        username must resolve it to a customer id first.
        """
        count = self.get_user_product_count(
            customer_id,
            do_count_active=True,
            do_count_inactive=True
        )
        return count > 0
