import logging
from typing import Dict, List, Optional

from insights.accounts import group_accounts
from insights.aggregator import TierAggregator
from insights.dates import DateRange
from insights.errors import CredentialError, InsightsError
from insights.models import AccountInsights, AdAccount, CampaignInsight, DailyPoint, TierResult
from insights.normalizer import empty_insights
from insights.selection import Selection, TOGGLE_OFF

logger = logging.getLogger(__name__)


class AggregationController:
    """
    Owns the dashboard's data state: the credential, the discovered accounts,
    the account baseline and the displayed snapshot.

    The baseline is the result of the last successful ``load_account`` and is
    only ever replaced wholesale. The displayed slot (``insights`` / ``daily``)
    is either a copy of the baseline or the drill-down into one campaign.

    Operations never raise for upstream failures. They store the message in
    ``error`` and always settle ``loading``. Each load is tagged with a
    generation number and a response that has been overtaken by a newer
    request is dropped, so the most recently issued request wins.
    """
    def __init__(self, adapter, credential: Optional[str] = None):
        self.adapter = adapter
        self.aggregator = TierAggregator(adapter)
        self.credential = credential or None
        self.selection = Selection()
        self._pending = 0
        self._discovery_generation = 0
        self._account_generation = 0
        self._campaign_generation = 0
        self._reset_state()

    def _reset_state(self):
        self.accounts: List[AdAccount] = []
        self.selected_account: Optional[AdAccount] = None
        self.date_range: Optional[DateRange] = None
        self.baseline: Optional[TierResult] = None
        self.insights: Optional[AccountInsights] = None
        self.campaigns: List[CampaignInsight] = []
        self.daily: List[DailyPoint] = []
        self.error: Optional[str] = None
        self.selection.clear()

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @property
    def selected_campaign_id(self) -> Optional[str]:
        return self.selection.selected_id

    @property
    def selected_campaign(self) -> Optional[CampaignInsight]:
        campaign_id = self.selection.selected_id
        if campaign_id is None:
            return None
        return next((c for c in self.campaigns if c.campaign_id == campaign_id), None)

    def account_groups(self) -> Dict[str, List[AdAccount]]:
        return group_accounts(self.accounts)

    def clear_error(self):
        self.error = None

    def _begin(self):
        self._pending += 1
        self.error = None

    def _end(self):
        self._pending = max(self._pending - 1, 0)

    def _fail(self, error: Exception):
        logger.error("%s", error)
        self.error = str(error)

    def _require_credential(self) -> bool:
        if self.credential:
            return True
        self._fail(CredentialError("Missing Meta access token"))
        return False

    async def connect(self, credential: Optional[str] = None):
        """Store the credential (when given) and discover the ad accounts it can see."""
        if credential:
            self.credential = credential
        if not self._require_credential():
            return

        self._discovery_generation += 1
        generation = self._discovery_generation

        self._begin()
        try:
            rows = await self.adapter.list_ad_accounts(self.credential)
        except InsightsError as e:
            if generation == self._discovery_generation:
                self._fail(e)
            return
        finally:
            self._end()

        if generation != self._discovery_generation:
            logger.debug("Discarding stale account discovery")
            return

        self.accounts = [AdAccount.from_api(row) for row in rows]
        logger.info("Discovered %d ad accounts", len(self.accounts))

    async def load_account(self, account: AdAccount, date_range: DateRange):
        """Run the three-tier cascade and make its result the new baseline."""
        if not self._require_credential():
            return

        self._account_generation += 1
        self._campaign_generation += 1
        generation = self._account_generation

        self._begin()
        try:
            result = await self.aggregator.aggregate(account, date_range, self.credential)
        except InsightsError as e:
            if generation == self._account_generation:
                self._fail(e)
            return
        finally:
            self._end()

        if generation != self._account_generation:
            logger.debug("Discarding stale load for %s (%s)", account.id, date_range)
            return

        self.selected_account = account
        self.date_range = date_range
        self.baseline = result
        self.campaigns = result.campaigns
        self.selection.clear()
        self.insights, self.daily = Selection.restore(result)
        logger.info(
            "Loaded %s for %s: %d campaigns, %d days",
            account, date_range, len(result.campaigns), len(result.daily),
        )

    async def select_campaign(self, campaign_id: str):
        """
        Drill into one campaign, or toggle back to the baseline when it is
        already selected. A no-op until an account has been loaded.
        """
        if self.baseline is None or self.date_range is None or not self.credential:
            return

        if self.selection.plan(campaign_id) == TOGGLE_OFF:
            self.clear_selection()
            return

        self._campaign_generation += 1
        generation = (self._account_generation, self._campaign_generation)

        self._begin()
        try:
            result = await self.aggregator.aggregate_scope(campaign_id, self.date_range, self.credential)
        except InsightsError as e:
            if generation != (self._account_generation, self._campaign_generation):
                return
            self._fail(e)
            result = e.partial or TierResult(insights=empty_insights())
        finally:
            self._end()

        if generation != (self._account_generation, self._campaign_generation):
            logger.debug("Discarding stale campaign load for %s", campaign_id)
            return

        self.selection.select(campaign_id)
        self.insights = result.insights
        self.daily = result.daily

    def clear_selection(self):
        """Return to the account baseline without a network call."""
        self._campaign_generation += 1
        self.selection.clear()
        if self.baseline is not None:
            self.insights, self.daily = Selection.restore(self.baseline)

    def disconnect(self):
        """Forget the credential and every piece of loaded state."""
        self._discovery_generation += 1
        self._account_generation += 1
        self._campaign_generation += 1
        self.credential = None
        self._reset_state()
