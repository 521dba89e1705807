from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

ActionRecords = List[Dict[str, str]]


@dataclass
class AdAccount:
    id: str
    account_id: str
    name: str
    currency: str
    account_status: int = 1

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AdAccount":
        account_id = str(data.get('account_id') or data.get('id', '').replace('act_', ''))
        return cls(
            id=data.get('id') or f"act_{account_id}",
            account_id=account_id,
            name=data.get('name', ''),
            currency=data.get('currency', ''),
            account_status=int(data.get('account_status', 1) or 0),
        )

    @property
    def is_active(self) -> bool:
        return self.account_status == 1

    def __str__(self):
        return f"{self.name} ({self.id})"


@dataclass
class AccountInsights:
    """Normalized metric snapshot for an account or a single campaign."""
    spend: float = 0.0
    impressions: int = 0
    reach: int = 0
    clicks: int = 0
    cpc: float = 0.0
    cpm: float = 0.0
    ctr: float = 0.0
    purchases: float = 0.0
    purchase_value: float = 0.0
    roas: float = 0.0
    cost_per_purchase: float = 0.0
    add_to_cart: float = 0.0
    leads: float = 0.0
    conversations: float = 0.0

    def copy(self) -> "AccountInsights":
        return replace(self)


@dataclass
class CampaignInsight:
    """
    One campaign-level row as returned upstream, with its normalized metrics.
    The raw row is kept so callers can render the provider's own strings.
    """
    campaign_id: str
    campaign_name: str
    row: Dict[str, Any]
    insights: AccountInsights

    @property
    def actions(self) -> Optional[ActionRecords]:
        return self.row.get('actions')

    @property
    def action_values(self) -> Optional[ActionRecords]:
        return self.row.get('action_values')


@dataclass
class DailyPoint:
    date: str
    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    purchases: float = 0.0
    revenue: float = 0.0
    leads: float = 0.0


@dataclass
class TierResult:
    insights: AccountInsights
    campaigns: List[CampaignInsight] = field(default_factory=list)
    daily: List[DailyPoint] = field(default_factory=list)
