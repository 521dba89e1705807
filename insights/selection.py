from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from insights.models import AccountInsights, DailyPoint, TierResult

# What select(campaign_id) has to do next
FETCH = 'fetch'
TOGGLE_OFF = 'toggle_off'


@dataclass(frozen=True)
class SelectionState:
    campaign_id: Optional[str] = None

    @property
    def is_selected(self) -> bool:
        return self.campaign_id is not None


UNSELECTED = SelectionState()


class Selection:
    """
    Campaign drill-down over an account baseline.

    Two states: UNSELECTED and SelectionState(campaign_id). Selecting the
    campaign that is already selected toggles back to UNSELECTED. Restoring
    the view never touches the network: the displayed slot is rebuilt as a
    copy of the baseline, which this class only reads.
    """
    def __init__(self):
        self.state = UNSELECTED

    @property
    def selected_id(self) -> Optional[str]:
        return self.state.campaign_id

    def is_selected(self, campaign_id: str) -> bool:
        return self.state.campaign_id == campaign_id

    def plan(self, campaign_id: str) -> str:
        """Decide between fetching a campaign and toggling the current one off."""
        if self.is_selected(campaign_id):
            return TOGGLE_OFF
        return FETCH

    def select(self, campaign_id: str):
        self.state = SelectionState(campaign_id)

    def clear(self):
        self.state = UNSELECTED

    @staticmethod
    def restore(baseline: TierResult) -> Tuple[AccountInsights, List[DailyPoint]]:
        """Value copy of the baseline insights and daily series for display."""
        return baseline.insights.copy(), [
            replace(point) for point in baseline.daily
        ]
