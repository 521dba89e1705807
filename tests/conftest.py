import asyncio

import pytest

from insights.dates import DateRange
from insights.errors import ProviderError
from insights.models import AdAccount


def action(action_type, value):
    return {'action_type': action_type, 'value': value}


ACCOUNT_ROW = {
    'spend': '200.00',
    'impressions': '50000',
    'reach': '40000',
    'clicks': '2500',
    'cpc': '0.08',
    'cpm': '4.00',
    'ctr': '5.0',
    'actions': [action('purchase', '10'), action('add_to_cart', '25'), action('lead', '3')],
    'action_values': [action('purchase', '600.00')],
    'date_start': '2024-03-01',
    'date_stop': '2024-03-07',
}

CAMPAIGN_ROWS = [
    {
        'campaign_id': '111',
        'campaign_name': 'Spring Sale',
        'spend': '150.00',
        'impressions': '30000',
        'reach': '25000',
        'clicks': '1500',
        'cpc': '0.10',
        'cpm': '5.00',
        'ctr': '5.0',
        'actions': [action('purchase', '8')],
        'action_values': [action('purchase', '480.00')],
        'date_start': '2024-03-01',
        'date_stop': '2024-03-07',
    },
    {
        'campaign_id': '222',
        'campaign_name': 'Lead Gen',
        'spend': '50.00',
        'impressions': '20000',
        'reach': '15000',
        'clicks': '1000',
        'cpc': '0.05',
        'cpm': '2.50',
        'ctr': '5.0',
        'actions': [action('lead', '3')],
        'date_start': '2024-03-01',
        'date_stop': '2024-03-07',
    },
]

DAILY_ROWS = [
    {
        'date_start': '2024-03-01',
        'spend': '120.00',
        'impressions': '30000',
        'clicks': '1500',
        'actions': [action('purchase', '6'), action('lead', '2')],
        'action_values': [action('purchase', '360.00')],
    },
    {
        'date_start': '2024-03-02',
        'spend': '80.00',
        'impressions': '20000',
        'clicks': '1000',
        'actions': [action('purchase', '4'), action('lead', '1')],
        'action_values': [action('purchase', '240.00')],
    },
]

CAMPAIGN_SCOPED_ROW = {
    'spend': '150.00',
    'impressions': '30000',
    'reach': '25000',
    'clicks': '1500',
    'cpc': '0.10',
    'cpm': '5.00',
    'ctr': '5.0',
    'actions': [action('purchase', '8')],
    'action_values': [action('purchase', '480.00')],
}

CAMPAIGN_DAILY_ROWS = [
    {
        'date_start': '2024-03-01',
        'spend': '100.00',
        'impressions': '18000',
        'clicks': '900',
        'actions': [action('purchase', '5')],
        'action_values': [action('purchase', '300.00')],
    },
]


def tier_of(level=None, time_increment=None):
    """Name the tier a fetch_tier call is asking for."""
    if time_increment == 1:
        return 'daily'
    if level == 'campaign':
        return 'campaign'
    return 'insights'


class FakeAdapter:
    """
    Scripted stand-in for the Meta adapter.

    ``responses`` maps (scope, tier) to a list of rows or an exception to raise.
    Every call is recorded in ``calls``.
    """
    def __init__(self, responses=None, accounts=None):
        self.responses = responses or {}
        self.accounts = accounts if accounts is not None else []
        self.calls = []

    async def list_ad_accounts(self, credential):
        self.calls.append(('accounts', credential))
        if isinstance(self.accounts, Exception):
            raise self.accounts
        return self.accounts

    async def fetch_tier(self, scope, fields, date_range, credential,
                         level=None, limit=None, time_increment=None):
        tier = tier_of(level, time_increment)
        self.calls.append((scope, tier, date_range, limit))
        await asyncio.sleep(0)
        response = self.responses.get((scope, tier), [])
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def network_calls(self):
        return len(self.calls)


@pytest.fixture
def account():
    return AdAccount(id='act_123456', account_id='123456', name='Shop | Main', currency='USD')


@pytest.fixture
def date_range():
    return DateRange.from_strings('2024-03-01', '2024-03-07')


@pytest.fixture
def other_range():
    return DateRange.from_strings('2024-02-01', '2024-02-29')


@pytest.fixture
def adapter():
    return FakeAdapter(
        responses={
            ('act_123456', 'insights'): [ACCOUNT_ROW],
            ('act_123456', 'campaign'): CAMPAIGN_ROWS,
            ('act_123456', 'daily'): DAILY_ROWS,
            ('111', 'insights'): [CAMPAIGN_SCOPED_ROW],
            ('111', 'daily'): CAMPAIGN_DAILY_ROWS,
            ('222', 'insights'): [],
            ('222', 'daily'): [],
        },
        accounts=[
            {'id': 'act_123456', 'account_id': '123456', 'name': 'Shop | Main',
             'currency': 'USD', 'account_status': 1},
            {'id': 'act_789012', 'account_id': '789012', 'name': 'Sandbox',
             'currency': 'EUR', 'account_status': 2},
        ],
    )


def invalid_token_error():
    return ProviderError('Invalid OAuth access token.', code=190)
