from collections import OrderedDict
from typing import Dict, Iterable, List

from insights.models import AdAccount

UNGROUPED = "Ungrouped"
FOLDER_SEPARATOR = "|"


def normalize_account_id(account_id: str) -> str:
    """Ensure an ad account ID carries the act_ prefix."""
    account_id = str(account_id).strip()
    if not account_id.startswith("act_"):
        account_id = f"act_{account_id}"
    return account_id


def group_accounts(accounts: Iterable[AdAccount]) -> Dict[str, List[AdAccount]]:
    """
    Group accounts into folders by the name prefix before '|'
    (e.g. "Client A | Shop" lands in "Client A"). Order is preserved.
    """
    groups = OrderedDict()
    for account in accounts:
        parts = account.name.split(FOLDER_SEPARATOR)
        folder = parts[0].strip() if len(parts) > 1 else UNGROUPED
        groups.setdefault(folder, []).append(account)
    return groups


def find_account(accounts: Iterable[AdAccount], key: str):
    """
    Find an account by node ID, numeric ID or exact name. Returns None if absent.
    Node IDs match with or without the act_ prefix on either side.
    """
    key = str(key).strip()
    node_id = normalize_account_id(key)
    for account in accounts:
        if key in (account.account_id, account.name) or node_id == normalize_account_id(account.id):
            return account
    return None
