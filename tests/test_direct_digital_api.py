"""
DirectDigital API Tests
Business methods, derived queries, version gating and status checks
"""

import pytest
import requests
from pydantic import ValidationError
from api.direct_digital_api import DirectDigitalAPI
from api.exceptions import ApiError
from models.direct_digital import EmbedCodeOptions, ServiceStatus
from fixtures import FakeTransport, TEST_HOST, TEST_PARTNER_ID

PLATFORM_URL = f"{TEST_HOST}/xplana-platform-integration/services"
CORE_URL = f"{TEST_HOST}/directdigital/services"


@pytest.mark.api
class TestProductOperations:

    def test_deactivate_user_products(self, dd_api, fake_transport):
        dd_api.deactivate_user_products('c1', ['A', 'B'])

        sent = fake_transport.last
        assert sent.method == 'POST'
        assert sent.url == f"{PLATFORM_URL}/deactivateUserProducts"
        assert sent.param('customerID') == ['c1']
        assert sent.param('productCode') == ['A', 'B']
        assert sent.param('trustedPartnerID') == [TEST_PARTNER_ID]

    def test_fulfill_products(self, dd_api, fake_transport, user_info):
        fake_transport.queue(200, {'fulfilled': ['A']})

        result = dd_api.fulfill_products('c1', user_info, ['A'])

        assert result == {'fulfilled': ['A']}
        sent = fake_transport.last
        assert sent.method == 'POST'
        assert sent.url == f"{PLATFORM_URL}/fulfillProducts"
        assert sent.param('customerid') == ['c1']
        assert sent.param('userinfovo.email') == ['ada@example.com']
        assert sent.param('userinfovo.firstname') == ['Ada']
        assert sent.param('userinfovo.lastname') == ['Lovelace']
        assert sent.param('userinfovo.username') == ['ada']
        assert sent.param('productCode') == ['A']

    def test_fulfill_products_accepts_dict_user_info(self, dd_api, fake_transport):
        dd_api.fulfill_products('c1', {'email': 'x@example.com'}, ['A'])

        sent = fake_transport.last
        assert sent.param('userinfovo.email') == ['x@example.com']
        assert sent.param('userinfovo.firstname') == []

    def test_fulfill_products_accepts_camel_case_user_info(self, dd_api, fake_transport):
        user = {'firstName': 'Ada', 'lastName': 'Lovelace', 'email': 'ada@example.com', 'username': 'ada'}

        dd_api.fulfill_products('c1', user, ['A'])

        sent = fake_transport.last
        assert sent.param('userinfovo.firstname') == ['Ada']
        assert sent.param('userinfovo.lastname') == ['Lovelace']
        assert sent.param('userinfovo.email') == ['ada@example.com']
        assert sent.param('userinfovo.username') == ['ada']

    def test_unknown_user_info_key_is_rejected(self, dd_api, fake_transport):
        with pytest.raises(ValidationError):
            dd_api.fulfill_products('c1', {'firstname': 'Ada'}, ['A'])

        assert fake_transport.call_count == 0

    def test_generate_mobile_key(self, dd_api, fake_transport):
        fake_transport.queue(200, {'mobileKey': 'k-1'})

        assert dd_api.generate_mobile_key('c1') == {'mobileKey': 'k-1'}
        assert fake_transport.last.method == 'GET'
        assert fake_transport.last.url == f"{PLATFORM_URL}/generateMobileKey"
        assert fake_transport.last.param('customerID') == ['c1']

    def test_retrieve_user_products(self, dd_api, fake_transport):
        body = {'active': ['A'], 'inactive': ['B']}
        fake_transport.queue(200, body)

        assert dd_api.retrieve_user_products('c1') == body
        assert fake_transport.last.url == f"{PLATFORM_URL}/retrieveUserProducts"

    def test_retrieve_products_sends_only_partner_id(self, dd_api, fake_transport):
        dd_api.retrieve_products()

        sent = fake_transport.last
        assert sent.method == 'GET'
        assert sent.url == f"{PLATFORM_URL}/retrieveProducts"
        assert sent.param_keys() == ['trustedPartnerID']

    def test_verify_products(self, dd_api, fake_transport):
        dd_api.verify_products(['X', 'Y', 'Z'])

        sent = fake_transport.last
        assert sent.method == 'POST'
        assert sent.url == f"{PLATFORM_URL}/verifyProducts"
        assert sent.param('productCode') == ['X', 'Y', 'Z']

    def test_single_product_code_string(self, dd_api, fake_transport):
        dd_api.verify_products('X')
        assert fake_transport.last.param('productCode') == ['X']

    def test_api_error_propagates(self, dd_api, fake_transport):
        fake_transport.queue(500, {'error': 'down'})

        with pytest.raises(ApiError) as exc_info:
            dd_api.retrieve_products()

        assert exc_info.value.body_meta == {'error': 'down'}


@pytest.mark.api
class TestEmbedCodes:

    def test_v1_embed_code(self, dd_api, fake_transport, user_info):
        dd_api.retrieve_embed_code_v1('c1', user_info)

        sent = fake_transport.last
        assert sent.method == 'GET'
        assert sent.url == f"{PLATFORM_URL}/retrieveEmbedCode"
        assert sent.param('email') == ['ada@example.com']
        assert sent.param('firstname') == ['Ada']
        assert sent.param('lastname') == ['Lovelace']
        assert sent.param('username') == ['ada']
        for key in ('remote', 'emptyMode', 'width', 'height'):
            assert sent.param(key) == []

    def test_v2_embed_code_defaults(self, dd_api, fake_transport, user_info):
        dd_api.retrieve_embed_code_v2('c1', user_info, {})

        sent = fake_transport.last
        assert sent.url == f"{CORE_URL}/retrieveEmbedCode"
        assert sent.param('remote') == ['false']
        assert sent.param('emptyMode') == ['false']
        assert sent.param('width') == ['100%']
        assert sent.param('height') == ['100%']

    def test_v2_embed_code_options(self, dd_api, fake_transport, user_info):
        options = EmbedCodeOptions(remote=True, empty_mode=True, width='640px', height='480px')
        dd_api.retrieve_embed_code_v2('c1', user_info, options)

        sent = fake_transport.last
        assert sent.param('remote') == ['true']
        assert sent.param('emptyMode') == ['true']
        assert sent.param('width') == ['640px']
        assert sent.param('height') == ['480px']

    def test_dispatch_v1(self, make_api, fake_transport, user_info):
        make_api(api_version='v1').retrieve_embed_code('c1', user_info)
        assert fake_transport.last.url == f"{PLATFORM_URL}/retrieveEmbedCode"

    @pytest.mark.parametrize("version", ['v2', '0.6', 0.7, '0.8'])
    def test_dispatch_v2(self, make_api, fake_transport, user_info, version):
        make_api(api_version=version).retrieve_embed_code('c1', user_info, {'width': '50%'})

        assert fake_transport.last.url == f"{CORE_URL}/retrieveEmbedCode"
        assert fake_transport.last.param('width') == ['50%']

    def test_integrated_embed_code(self, make_api, fake_transport, user_info):
        dd = make_api(api_version='0.7')
        dd.retrieve_integrated_embed_code('c1', True, user_info)

        sent = fake_transport.last
        assert sent.method == 'POST'
        assert sent.url == f"{PLATFORM_URL}/retrieveIntegratedEmbedCode"
        assert sent.param('remote') == ['true']
        assert sent.param('userinfovo.username') == ['ada']


@pytest.mark.api
class TestVersionGating:

    @pytest.mark.parametrize("version", ['v1', 'v2', '0.7'])
    def test_renew_product_below_gate(self, make_api, fake_transport, version):
        assert make_api(api_version=version).renew_product('c1', ['A']) is None
        assert fake_transport.call_count == 0

    def test_renew_product_at_gate(self, make_api, fake_transport):
        fake_transport.queue(200, {'renewed': ['A']})

        result = make_api(api_version='0.8').renew_product('c1', ['A'])

        assert result == {'renewed': ['A']}
        assert fake_transport.last.method == 'POST'
        assert fake_transport.last.url == f"{PLATFORM_URL}/renewProducts"
        assert fake_transport.last.param('productCode') == ['A']

    @pytest.mark.parametrize("version", ['v1', 'v2', 0.6])
    def test_integrated_embed_code_below_gate(self, make_api, fake_transport, user_info, version):
        dd = make_api(api_version=version)
        assert dd.retrieve_integrated_embed_code('c1', False, user_info) is None
        assert fake_transport.call_count == 0

    def test_redeem_below_gate(self, make_api, fake_transport, user_info):
        assert make_api(api_version='v1').redeem_code_from_bookstore('c1', user_info, 'R-1') is None
        assert fake_transport.call_count == 0

    @pytest.mark.parametrize("version", ['v2', '0.6', '0.7'])
    def test_redeem_uses_get(self, make_api, fake_transport, user_info, version):
        make_api(api_version=version).redeem_code_from_bookstore('c1', user_info, 'R-1')

        sent = fake_transport.last
        assert sent.method == 'GET'
        assert sent.url == f"{CORE_URL}/redeemCodeFromBookStore"
        assert sent.param('customerID') == ['c1']
        assert sent.param('redeemCode') == ['R-1']
        assert sent.param('userinfovo.email') == ['ada@example.com']

    @pytest.mark.parametrize("version", ['0.8', '1.0'])
    def test_redeem_uses_post_from_0_8(self, make_api, fake_transport, user_info, version):
        make_api(api_version=version).redeem_code_from_bookstore('c1', user_info, 'R-1')

        assert fake_transport.last.method == 'POST'
        assert fake_transport.last.param('redeemCode') == ['R-1']

    def test_version_alias(self, fake_transport):
        dd = DirectDigitalAPI(host=TEST_HOST, version='v2', transport=fake_transport)
        assert dd.api_version == 'v2'
        assert dd.supports('redeem_code_from_bookstore')


@pytest.mark.api
class TestDerivedQueries:

    def test_count_active_only(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['A', 'B'], 'inactive': ['C']})
        assert dd_api.get_user_product_count('c1', do_count_active=True) == 2

    def test_count_inactive_only(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['A', 'B'], 'inactive': ['C']})
        assert dd_api.get_user_product_count('c1', do_count_inactive=True) == 1

    def test_count_both(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['A', 'B'], 'inactive': ['C']})
        assert dd_api.get_user_product_count('c1', do_count_active=True, do_count_inactive=True) == 3
        assert fake_transport.call_count == 1

    def test_count_neither(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['A'], 'inactive': ['C']})
        assert dd_api.get_user_product_count('c1') == 0

    def test_is_product_fulfilled(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['ABC', 'DEF'], 'inactive': ['XYZ']})
        assert dd_api.is_product_fulfilled('c1', 'DEF') is True

    def test_is_product_fulfilled_exact_match_only(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['ABCD'], 'inactive': ['AB']})
        assert dd_api.is_product_fulfilled('c1', 'AB') is False

    def test_is_product_fulfilled_case_sensitive(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': ['abc'], 'inactive': []})
        assert dd_api.is_product_fulfilled('c1', 'ABC') is False

    def test_is_product_fulfilled_empty_active(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': [], 'inactive': ['X']})
        assert dd_api.is_product_fulfilled('c1', 'X') is False

    def test_is_user(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': [], 'inactive': ['X']})
        assert dd_api.is_user('c1') is True
        assert fake_transport.last.param('customerID') == ['c1']

    def test_is_not_user(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': [], 'inactive': []})
        assert dd_api.is_user('c1') is False

    def test_null_product_lists_count_as_empty(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': None, 'inactive': ['X']})
        assert dd_api.get_user_product_count('c1', do_count_active=True, do_count_inactive=True) == 1

    def test_null_active_list_is_not_fulfilled(self, dd_api, fake_transport):
        fake_transport.queue(200, {'active': None, 'inactive': None})
        assert dd_api.is_product_fulfilled('c1', 'A') is False

    @pytest.mark.parametrize("body", [None, ['A', 'B'], 'not an object'])
    def test_non_object_body_counts_as_no_products(self, dd_api, fake_transport, body):
        fake_transport.queue(200, body)
        assert dd_api.get_user_product_count('c1', do_count_active=True, do_count_inactive=True) == 0

    def test_derived_query_propagates_api_error(self, dd_api, fake_transport):
        fake_transport.queue(200, {'code': 'CUSTOMER_NOT_FOUND'})

        with pytest.raises(ApiError) as exc_info:
            dd_api.is_product_fulfilled('c1', 'A')

        assert exc_info.value.body_meta == {'code': 'CUSTOMER_NOT_FOUND'}

    def test_derived_query_propagates_transport_error(self, make_api, failing_transport):
        dd = make_api(transport=failing_transport)

        with pytest.raises(requests.exceptions.ConnectionError):
            dd.get_user_product_count('c1', do_count_active=True)


@pytest.mark.api
class TestCheckStatus:

    def test_online(self, dd_api, fake_transport):
        fake_transport.queue(200, None)

        status = dd_api.check_status()

        assert isinstance(status, ServiceStatus)
        assert status.online is True
        assert status.subsystems.web is True
        assert fake_transport.last.method == 'GET'
        assert fake_transport.last.url == TEST_HOST

    def test_online_on_error_status(self, dd_api, fake_transport):
        fake_transport.queue(503, {'code': 'MAINTENANCE'})
        assert dd_api.check_status().online is True

    def test_offline_never_raises(self, make_api, failing_transport):
        status = make_api(transport=failing_transport).check_status()

        assert status.online is False
        assert status.subsystems.web is False
        assert status.latency.endswith('ms')
        assert float(status.latency[:-2]) >= 0

    def test_status_dump(self, dd_api):
        dumped = dd_api.check_status().model_dump()
        assert set(dumped) == {'online', 'subsystems', 'latency'}
        assert dumped['subsystems'] == {'web': True}

    @pytest.mark.parametrize("error", [
        ConnectionRefusedError("refused"),
        OSError("network unreachable"),
        RuntimeError("transport bug"),
    ])
    def test_offline_on_non_requests_transport_error(self, make_api, error):
        status = make_api(transport=FakeTransport(error=error)).check_status()

        assert status.online is False
        assert status.subsystems.web is False
        assert float(status.latency[:-2]) >= 0


@pytest.mark.api
def test_client_name(dd_api):
    assert dd_api.name == 'directDigital'
