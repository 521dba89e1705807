from insights.controller import AggregationController
from insights.dates import DateRange
from insights.errors import (
    CredentialError,
    InsightsError,
    PartialResultError,
    ProviderError,
    TransportError,
    ValidationError,
)
from insights.models import AccountInsights, AdAccount, CampaignInsight, DailyPoint, TierResult
