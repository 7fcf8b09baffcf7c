from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from requests.exceptions import ConnectionError, Timeout

from billing import BillingClient, cancel_subscription, simulate_subscription


def make_user(plan='free', active=False, customer_id=None):
    return SimpleNamespace(id=7, plan=plan, subscription_active=active, billing_customer_id=customer_id)


def fake_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestLocalBilling:
    def test_reads_user_row(self):
        client = BillingClient()
        assert client.current_plan(make_user('pro', True)) == 'pro'

    def test_inactive_subscription_is_free(self):
        client = BillingClient()
        assert client.current_plan(make_user('pro', False)) == 'free'

    def test_simulate_and_cancel(self):
        user = make_user()
        simulate_subscription(user, 'pro')
        assert (user.plan, user.subscription_active) == ('pro', True)

        cancel_subscription(user)
        assert (user.plan, user.subscription_active) == ('free', False)

    def test_simulate_unknown_plan_stays_free(self):
        user = make_user()
        simulate_subscription(user, 'premium')
        assert (user.plan, user.subscription_active) == ('free', False)


class TestRemoteBilling:
    @patch('billing.requests.get')
    def test_active_plan(self, mock_get):
        mock_get.return_value = fake_response({'active': True, 'plan': 'pro'})
        client = BillingClient('https://billing.example.com/', api_key='k', timeout=3)

        assert client.current_plan(make_user(customer_id='cus_1')) == 'pro'

        url = mock_get.call_args[0][0]
        assert url == 'https://billing.example.com/customers/cus_1/subscription'
        assert mock_get.call_args[1]['headers']['Authorization'] == 'Bearer k'
        assert mock_get.call_args[1]['timeout'] == 3

    @patch('billing.requests.get')
    def test_falls_back_to_user_id(self, mock_get):
        mock_get.return_value = fake_response({'active': False, 'plan': 'pro'})
        client = BillingClient('https://billing.example.com')

        assert client.current_plan(make_user()) == 'free'
        assert mock_get.call_args[0][0].endswith('/customers/7/subscription')

    @patch('billing.requests.get', side_effect=Timeout())
    def test_timeout_fails_closed(self, mock_get):
        client = BillingClient('https://billing.example.com')
        assert client.subscription_status(make_user('pro', True)) == {'active': False, 'plan': 'free'}

    @patch('billing.requests.get', side_effect=ConnectionError('down'))
    def test_connection_error_fails_closed(self, mock_get):
        client = BillingClient('https://billing.example.com')
        assert client.current_plan(make_user('pro', True)) == 'free'

    @patch('billing.requests.get')
    def test_bad_json_fails_closed(self, mock_get):
        response = fake_response(None)
        response.json.side_effect = ValueError('not json')
        mock_get.return_value = response
        client = BillingClient('https://billing.example.com')
        assert client.current_plan(make_user()) == 'free'
