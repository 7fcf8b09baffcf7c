# billing.py

import logging

import requests
from requests.exceptions import RequestException, Timeout

from entitlements import Plan, resolve_plan

logger = logging.getLogger(__name__)

INACTIVE = {'active': False, 'plan': Plan.FREE.value}


class BillingClient:
    """Reads a user's subscription from the billing provider.

    With no base_url the plan stored on the user row is used (simulated
    billing for local runs). Any failure talking to the provider reports
    an inactive free subscription.
    """

    def __init__(self, base_url=None, api_key=None, timeout=10):
        self.base_url = base_url.rstrip('/') if base_url else None
        self.api_key = api_key
        self.timeout = timeout

    @property
    def is_remote(self):
        return self.base_url is not None

    def subscription_status(self, user):
        if not self.is_remote:
            return {
                'active': bool(user.subscription_active),
                'plan': user.plan or Plan.FREE.value,
            }
        return self._fetch_status(user.billing_customer_id or str(user.id))

    def current_plan(self, user):
        """Plan string for entitlement checks; 'free' unless the subscription is active"""
        status = self.subscription_status(user)
        if not status.get('active'):
            return Plan.FREE.value
        return status.get('plan') or Plan.FREE.value

    def _fetch_status(self, customer_id):
        url = f"{self.base_url}/customers/{customer_id}/subscription"
        headers = {'Accept': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f"Bearer {self.api_key}"

        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except Timeout:
            logger.warning("Billing provider timed out for customer %s", customer_id)
            return dict(INACTIVE)
        except RequestException as e:
            logger.warning("Billing provider error for customer %s: %s", customer_id, e)
            return dict(INACTIVE)
        except ValueError:
            logger.warning("Billing provider returned invalid JSON for customer %s", customer_id)
            return dict(INACTIVE)

        if not isinstance(data, dict):
            return dict(INACTIVE)
        return {
            'active': bool(data.get('active')),
            'plan': data.get('plan') or Plan.FREE.value,
        }


def simulate_subscription(user, plan):
    """Put a user on a plan without a payment provider (local runs only)"""
    resolved = resolve_plan(plan)
    user.plan = resolved.value
    user.subscription_active = resolved is not Plan.FREE
    logger.info("Simulated %s subscription for user %s", resolved.value, user.id)
    return resolved


def cancel_subscription(user):
    user.plan = Plan.FREE.value
    user.subscription_active = False
    logger.info("Cancelled subscription for user %s", user.id)
