from datetime import date

import pytest

from insights.accounts import find_account, group_accounts, normalize_account_id
from insights.dates import DateRange, last_n_days
from insights.errors import ValidationError
from insights.models import AdAccount


def test_from_strings():
    date_range = DateRange.from_strings('2024-03-01', '2024-03-07')

    assert date_range.since == date(2024, 3, 1)
    assert date_range.until == date(2024, 3, 7)
    assert date_range.days == 7
    assert date_range.as_params() == {'since': '2024-03-01', 'until': '2024-03-07'}
    assert str(date_range) == '2024-03-01 to 2024-03-07'


@pytest.mark.parametrize('since, until', [
    ('2024-13-01', '2024-13-07'),
    ('03/01/2024', '2024-03-07'),
    ('2024-03-08', '2024-03-07'),
    (None, '2024-03-07'),
])
def test_from_strings_invalid(since, until):
    with pytest.raises(ValidationError):
        DateRange.from_strings(since, until)


def test_last_n_days():
    date_range = last_n_days(14, today=date(2024, 3, 15))
    assert date_range == DateRange(date(2024, 3, 1), date(2024, 3, 15))


def test_last_n_days_rejects_non_positive():
    with pytest.raises(ValidationError):
        last_n_days(0)


def test_normalize_account_id():
    assert normalize_account_id('123') == 'act_123'
    assert normalize_account_id(' act_123 ') == 'act_123'


def test_account_from_api():
    account = AdAccount.from_api({'id': 'act_1', 'account_id': '1', 'name': 'A', 'currency': 'USD',
                                  'account_status': 2})
    assert account.account_id == '1'
    assert not account.is_active

    account = AdAccount.from_api({'account_id': '42', 'name': 'B'})
    assert account.id == 'act_42'
    assert account.is_active


def test_group_accounts_by_folder():
    accounts = [
        AdAccount('act_1', '1', 'Client A | Shop', 'USD'),
        AdAccount('act_2', '2', 'Solo', 'USD'),
        AdAccount('act_3', '3', 'Client A|Leads', 'USD'),
        AdAccount('act_4', '4', ' Client B | Main', 'EUR'),
    ]
    groups = group_accounts(accounts)

    assert list(groups) == ['Client A', 'Ungrouped', 'Client B']
    assert [a.id for a in groups['Client A']] == ['act_1', 'act_3']
    assert [a.id for a in groups['Ungrouped']] == ['act_2']


def test_find_account():
    accounts = [AdAccount('act_1', '1', 'First', 'USD'), AdAccount('act_2', '2', 'Second', 'USD')]

    assert find_account(accounts, 'act_2').name == 'Second'
    assert find_account(accounts, '1').name == 'First'
    assert find_account(accounts, 'Second').id == 'act_2'
    assert find_account(accounts, 'missing') is None


def test_find_account_with_or_without_prefix():
    """Node IDs resolve whether or not either side carries act_"""
    accounts = [AdAccount('555', '555', 'Bare', 'USD'), AdAccount('act_2', '2', 'Second', 'USD')]

    assert find_account(accounts, 'act_555').name == 'Bare'
    assert find_account(accounts, ' act_2 ').name == 'Second'
    assert find_account(accounts, 'act_9') is None
