"""
Turns raw insight rows into the fixed metric set.

Conversion events arrive as open-ended lists of action records
(``{"action_type": ..., "value": "12.5"}``). Each metric reads them through
``lookup``/``lookup_any`` with an explicit, priority-ordered label tuple, and
ratios are only ever computed by ``derive_ratios``.
"""

import math
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

from insights.models import AccountInsights, ActionRecords, CampaignInsight, DailyPoint

PURCHASE = ('purchase',)
ADD_TO_CART = ('add_to_cart',)
LEAD = ('lead',)
# Labels differ by campaign objective and placement; first match wins
CONVERSATION_STARTED = (
    'onsite_conversion.messaging_conversation_started_7d',
    'messaging_conversation_started_7d',
    'onsite_conversion.total_messaging_connection',
)


class Ratios(NamedTuple):
    roas: float
    cost_per_purchase: float


def to_float(value: Any) -> float:
    """Parse a numeric string, returning 0 for anything unparseable."""
    if value is None or value == '':
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_int(value: Any) -> int:
    """Parse an integer count; "12.7" truncates to 12, garbage gives 0."""
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    return int(to_float(value))


def _record_type(record: Dict[str, Any]) -> Optional[str]:
    return record.get('action_type', record.get('type'))


def lookup(records: Optional[ActionRecords], label: str) -> float:
    """Value of the first record whose type equals label, else 0."""
    if not records:
        return 0.0
    for record in records:
        if isinstance(record, dict) and _record_type(record) == label:
            return to_float(record.get('value'))
    return 0.0


def lookup_any(records: Optional[ActionRecords], labels: Sequence[str]) -> float:
    """Try each candidate label in priority order; the first present one wins."""
    if not records:
        return 0.0
    for label in labels:
        for record in records:
            if isinstance(record, dict) and _record_type(record) == label:
                return to_float(record.get('value'))
    return 0.0


def derive_ratios(spend: float, purchases: float, purchase_value: float) -> Ratios:
    return Ratios(
        roas=purchase_value / spend if spend > 0 else 0.0,
        cost_per_purchase=spend / purchases if purchases > 0 else 0.0,
    )


def empty_insights() -> AccountInsights:
    return AccountInsights()


def parse_insights_row(row: Dict[str, Any]) -> AccountInsights:
    actions = row.get('actions')
    action_values = row.get('action_values')
    spend = to_float(row.get('spend'))
    purchases = lookup_any(actions, PURCHASE)
    purchase_value = lookup_any(action_values, PURCHASE)
    ratios = derive_ratios(spend, purchases, purchase_value)

    return AccountInsights(
        spend=spend,
        impressions=to_int(row.get('impressions')),
        reach=to_int(row.get('reach')),
        clicks=to_int(row.get('clicks')),
        cpc=to_float(row.get('cpc')),
        cpm=to_float(row.get('cpm')),
        ctr=to_float(row.get('ctr')),
        purchases=purchases,
        purchase_value=purchase_value,
        roas=ratios.roas,
        cost_per_purchase=ratios.cost_per_purchase,
        add_to_cart=lookup_any(actions, ADD_TO_CART),
        leads=lookup_any(actions, LEAD),
        conversations=lookup_any(actions, CONVERSATION_STARTED),
    )


def parse_first_row(rows: Optional[List[Dict[str, Any]]]) -> AccountInsights:
    """An aggregated tier has a single row; no rows means no activity."""
    if not rows:
        return empty_insights()
    return parse_insights_row(rows[0])


def parse_campaign_rows(rows: Iterable[Dict[str, Any]]) -> List[CampaignInsight]:
    campaigns = []
    seen = set()
    for row in rows or []:
        campaign_id = str(row.get('campaign_id', ''))
        if campaign_id in seen:
            continue
        seen.add(campaign_id)
        campaigns.append(CampaignInsight(
            campaign_id=campaign_id,
            campaign_name=row.get('campaign_name', ''),
            row=row,
            insights=parse_insights_row(row),
        ))
    return campaigns


def parse_daily_rows(rows: Iterable[Dict[str, Any]]) -> List[DailyPoint]:
    """One point per upstream row, in upstream order; the year is stripped from the date."""
    return [
        DailyPoint(
            date=(row.get('date_start') or '')[5:],
            spend=to_float(row.get('spend')),
            impressions=to_int(row.get('impressions')),
            clicks=to_int(row.get('clicks')),
            purchases=lookup_any(row.get('actions'), PURCHASE),
            revenue=lookup_any(row.get('action_values'), PURCHASE),
            leads=lookup_any(row.get('actions'), LEAD),
        )
        for row in rows or []
    ]
