import asyncio
import logging
from typing import Any, Dict, List

from insights.dates import DateRange
from insights.errors import InsightsError, PartialResultError
from insights.models import AdAccount, TierResult
from insights import normalizer

logger = logging.getLogger(__name__)

INSIGHT_FIELDS = [
    'spend',
    'impressions',
    'reach',
    'clicks',
    'cpc',
    'cpm',
    'ctr',
    'actions',
    'action_values',
    'cost_per_action_type',
]
CAMPAIGN_FIELDS = ['campaign_name', 'campaign_id'] + INSIGHT_FIELDS
DAILY_FIELDS = ['spend', 'impressions', 'clicks', 'actions', 'action_values']
CAMPAIGN_LIMIT = 50


class TierAggregator:
    """
    Runs the account / campaign / daily query cascade for one scope.

    The adapter must provide ``async fetch_tier(scope, fields, date_range,
    credential, level=None, limit=None, time_increment=None)`` returning a list
    of row dicts, and raise ProviderError / TransportError on failure.

    Failure policy is asymmetric: the insights tier is mandatory, the campaign
    and daily tiers degrade to empty lists.
    """
    def __init__(self, adapter):
        self.adapter = adapter

    async def aggregate(self, account: AdAccount, date_range: DateRange, credential: str) -> TierResult:
        """
        Fetch account insights, the campaign breakdown and the daily series.

        Raises:
            ProviderError / TransportError: If the account tier fails
        """
        insights_rows, campaign_rows, daily_rows = await asyncio.gather(
            self.adapter.fetch_tier(account.id, INSIGHT_FIELDS, date_range, credential),
            self.adapter.fetch_tier(
                account.id, CAMPAIGN_FIELDS, date_range, credential,
                level='campaign', limit=CAMPAIGN_LIMIT,
            ),
            self.adapter.fetch_tier(account.id, DAILY_FIELDS, date_range, credential, time_increment=1),
            return_exceptions=True,
        )

        self._raise_if_failed(insights_rows)
        return TierResult(
            insights=normalizer.parse_first_row(insights_rows),
            campaigns=normalizer.parse_campaign_rows(self._degrade(campaign_rows, account.id, 'campaign')),
            daily=normalizer.parse_daily_rows(self._degrade(daily_rows, account.id, 'daily')),
        )

    async def aggregate_scope(self, scope_id: str, date_range: DateRange, credential: str) -> TierResult:
        """
        Fetch insights and the daily series for a single campaign.

        If the insights tier fails, PartialResultError is raised from the original
        error with ``partial`` holding empty insights and whatever daily data
        did arrive.
        """
        insights_rows, daily_rows = await asyncio.gather(
            self.adapter.fetch_tier(scope_id, INSIGHT_FIELDS, date_range, credential),
            self.adapter.fetch_tier(scope_id, DAILY_FIELDS, date_range, credential, time_increment=1),
            return_exceptions=True,
        )

        daily = normalizer.parse_daily_rows(self._degrade(daily_rows, scope_id, 'daily'))
        if isinstance(insights_rows, InsightsError):
            partial = TierResult(insights=normalizer.empty_insights(), daily=daily)
            raise PartialResultError(str(insights_rows), partial) from insights_rows
        self._raise_if_failed(insights_rows)

        return TierResult(insights=normalizer.parse_first_row(insights_rows), daily=daily)

    def _raise_if_failed(self, result: Any):
        if isinstance(result, BaseException):
            raise result

    def _degrade(self, result: Any, scope: str, tier: str) -> List[Dict[str, Any]]:
        if isinstance(result, InsightsError):
            logger.warning("Ignoring %s tier failure for %s: %s", tier, scope, result)
            return []
        if isinstance(result, BaseException):
            raise result
        return result or []
