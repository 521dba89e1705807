from typing import List

from insights.controller import AggregationController
from insights.models import AccountInsights, AdAccount, CampaignInsight, DailyPoint


def format_currency(amount: float) -> str:
    return f"${amount:,.2f}"


def format_metric(value: float, suffix: str = "") -> str:
    return f"{value:,.2f}{suffix}"


def format_compact(value: float, decimals: int = 0) -> str:
    """1234 -> 1.2K, 2500000 -> 2.5M"""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return f"{value:.{decimals}f}"


def roas_rating(roas: float) -> str:
    if roas >= 2:
        return "Good"
    if roas >= 1:
        return "Average"
    return "Low"


def render_summary(insights: AccountInsights) -> List[str]:
    rows = [
        ("Spend", format_currency(insights.spend)),
        ("Impressions", format_compact(insights.impressions)),
        ("Reach", format_compact(insights.reach)),
        ("Clicks", format_compact(insights.clicks)),
        ("CTR", format_metric(insights.ctr, "%")),
        ("CPC", format_currency(insights.cpc)),
        ("CPM", format_currency(insights.cpm)),
        ("Purchases", format_compact(insights.purchases)),
        ("Purchase Value", format_currency(insights.purchase_value)),
        ("ROAS", f"{format_metric(insights.roas, 'x')} ({roas_rating(insights.roas)})"),
        ("Cost/Purchase", format_currency(insights.cost_per_purchase)),
        ("Add to Cart", format_compact(insights.add_to_cart)),
        ("Leads", format_compact(insights.leads)),
        ("Conversations", format_compact(insights.conversations)),
    ]
    lines = [f"{'Metric':<20} {'Value':<20}", "-" * 40]
    lines.extend(f"{label:<20} {value:<20}" for label, value in rows)
    return lines


def render_campaigns(campaigns: List[CampaignInsight], selected_id: str = None) -> List[str]:
    if not campaigns:
        return ["No campaign data for this period"]

    lines = [
        f"  {'Campaign':<40} {'Spend':>12} {'Impr':>8} {'Clicks':>8} {'CTR':>7} "
        f"{'Purch':>6} {'Revenue':>12} {'ROAS':>7}",
        "-" * 110,
    ]
    for campaign in campaigns:
        m = campaign.insights
        marker = "*" if campaign.campaign_id == selected_id else " "
        lines.append(
            f"{marker} {campaign.campaign_name[:40]:<40} "
            f"{format_currency(m.spend):>12} "
            f"{format_compact(m.impressions):>8} "
            f"{format_compact(m.clicks):>8} "
            f"{format_metric(m.ctr, '%'):>7} "
            f"{format_compact(m.purchases):>6} "
            f"{format_currency(m.purchase_value):>12} "
            f"{format_metric(m.roas, 'x'):>7}"
        )
    return lines


def render_daily(daily: List[DailyPoint]) -> List[str]:
    if not daily:
        return ["No daily data for this period"]

    lines = [
        f"{'Date':<8} {'Spend':>12} {'Impr':>8} {'Clicks':>8} {'Purch':>6} {'Revenue':>12} {'Leads':>6}",
        "-" * 66,
    ]
    for point in daily:
        lines.append(
            f"{point.date:<8} "
            f"{format_currency(point.spend):>12} "
            f"{format_compact(point.impressions):>8} "
            f"{format_compact(point.clicks):>8} "
            f"{format_compact(point.purchases):>6} "
            f"{format_currency(point.revenue):>12} "
            f"{format_compact(point.leads):>6}"
        )
    return lines


def render_accounts(controller: AggregationController) -> List[str]:
    lines = [f"Found {len(controller.accounts)} ad accounts"]
    for folder, accounts in controller.account_groups().items():
        lines.append(f"\n{folder}")
        for account in accounts:
            status = "Active" if account.is_active else "Disabled"
            lines.append(f"  {account.name:<40} {account.id:<22} {account.currency:<5} {status}")
    return lines


def render_report(controller: AggregationController) -> str:
    """Plain-text rendering of what the dashboard currently displays."""
    account: AdAccount = controller.selected_account
    if account is None or controller.insights is None:
        return "No account loaded"

    lines = [
        f"\n{account.name}",
        f"ID: {account.account_id} · Currency: {account.currency} · "
        f"{controller.date_range} ({controller.date_range.days} days)",
        "=" * 110,
    ]
    selected = controller.selected_campaign
    if controller.selected_campaign_id:
        name = selected.campaign_name if selected else controller.selected_campaign_id
        lines.append(f"Filtered by campaign: {name}")

    lines.extend(render_summary(controller.insights))
    lines.append("\nCampaigns")
    lines.extend(render_campaigns(controller.campaigns, controller.selected_campaign_id))
    lines.append("\nDaily")
    lines.extend(render_daily(controller.daily))
    return "\n".join(lines)
