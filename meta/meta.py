import json
import logging
from typing import Optional, Dict, Any, List

import httpx

from insights.config import Settings
from insights.dates import DateRange
from insights.errors import CredentialError, ProviderError, TransportError

logger = logging.getLogger(__name__)

ACCOUNT_FIELDS = ['account_id', 'name', 'currency', 'account_status']


class Meta:
    """
    A class to interact with the Meta (Facebook) Marketing API insights endpoint.
    Acts as the reporting adapter consumed by the tier aggregator.

    The access token is never stored here; every call receives the credential
    owned by the caller.
    """
    def __init__(self, settings: Settings = None, client: httpx.AsyncClient = None):
        self.settings = settings or Settings.from_env()
        self.base_url = self.settings.base_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.settings.timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Perform a GET and decode the JSON body.

        Raises:
            TransportError: If the request fails or the body is not JSON
            ProviderError: If the API answers with a structured error
        """
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid response from {url} (status {response.status_code})"
            ) from e

        # The Graph API reports errors in the body, usually with a 4xx status
        if isinstance(data, dict) and data.get('error'):
            error = data['error']
            raise ProviderError(
                error.get('message', 'Unknown Meta API error'),
                code=error.get('code'),
            )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        return data

    async def _get(self, path: str, params: Dict[str, Any], credential: str) -> Dict[str, Any]:
        """
        GET a Graph API path with the caller's access token.

        Raises:
            CredentialError: If no credential was supplied
        """
        if not credential:
            raise CredentialError("Missing Meta access token")

        params = dict(params)
        params['access_token'] = credential
        return await self._request(f"{self.base_url}/{path}", params)

    async def list_ad_accounts(self, credential: str, user_id: str = 'me') -> List[Dict[str, Any]]:
        """
        List all ad accounts accessible to the authenticated user.

        Args:
            credential: The access token to query with
            user_id: The user ID to get accounts for, defaults to 'me'

        Returns:
            List of dictionaries containing account details
        """
        data = await self._get(
            f"{user_id}/adaccounts",
            {
                'fields': ','.join(ACCOUNT_FIELDS),
                'limit': 100,
            },
            credential,
        )
        return data.get('data', [])

    async def fetch_tier(
        self,
        scope: str,
        fields: List[str],
        date_range: DateRange,
        credential: str,
        level: Optional[str] = None,
        limit: Optional[int] = None,
        time_increment: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get insights rows for a scope (ad account or campaign node).

        Args:
            scope: Graph node ID, e.g. act_XXXXXX or a campaign ID
            fields: List of insight fields to retrieve
            date_range: Inclusive since/until range
            credential: The access token to query with
            level: Optional breakdown level ('campaign' etc.)
            limit: Optional maximum number of rows; without it every page is read
            time_increment: 1 for a per-day breakdown

        Returns:
            List of insight rows as returned by the API, across all pages

        Raises:
            ProviderError: If the API answers with a structured error
            TransportError: If the request fails
        """
        params = {
            'fields': ','.join(fields),
            'time_range': json.dumps(date_range.as_params()),
        }
        if level:
            params['level'] = level
        if limit:
            params['limit'] = limit
        if time_increment:
            params['time_increment'] = time_increment

        logger.debug("Fetching insights for %s (level=%s, time_increment=%s)", scope, level, time_increment)
        data = await self._get(f"{scope}/insights", params, credential)
        rows = list(data.get('data', []))

        # A capped query is one page; otherwise follow the cursor to the end.
        # The next URL already carries the token and query parameters.
        next_url = None if limit else data.get('paging', {}).get('next')
        while next_url:
            data = await self._request(next_url)
            rows.extend(data.get('data', []))
            next_url = data.get('paging', {}).get('next')

        return rows
