import argparse
import asyncio
import logging
import sys

from insights.accounts import find_account
from insights.config import Settings
from insights.controller import AggregationController
from insights.dates import DateRange, last_n_days
from insights.errors import ValidationError
from meta.meta import Meta
from reports.insights_report import render_accounts, render_report


def mask_string(s: str, visible_chars: int = 6) -> str:
    """Mask a string, showing only the first few characters"""
    if not s:
        return "Not set"
    return s[:visible_chars] + "..."


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Meta Ads account insights report')
    parser.add_argument('--token', type=str, help='Access token (defaults to META_ACCESS_TOKEN)')
    parser.add_argument('--account', type=str, help='Ad account ID, numeric ID or name')
    parser.add_argument('--start', type=str, help='Start date (YYYY-MM-DD)')
    parser.add_argument('--end', type=str, help='End date (YYYY-MM-DD)')
    parser.add_argument('--days', type=int, help='Number of days to look back (default: 7)')
    parser.add_argument('--campaign', type=str, help='Campaign ID to drill into')
    parser.add_argument('--list', action='store_true', help='List accessible ad accounts and exit')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    if bool(args.start) != bool(args.end):
        parser.error('Both --start and --end must be provided together')
    if not args.list and not args.account:
        parser.error('--account is required unless --list is given')
    return args


def resolve_date_range(args, settings: Settings) -> DateRange:
    if args.start and args.end:
        return DateRange.from_strings(args.start, args.end)
    return last_n_days(args.days or settings.default_days)


async def run(args) -> int:
    try:
        settings = Settings.from_env()
        date_range = resolve_date_range(args, settings)
    except ValidationError as e:
        print(f"Error: {e}")
        return 2

    token = args.token or settings.access_token
    print(f"Access token: {mask_string(token)}")

    async with Meta(settings) as meta:
        controller = AggregationController(meta, credential=token)

        await controller.connect()
        if controller.error:
            print(f"Error: {controller.error}")
            return 1

        if args.list:
            print("\n".join(render_accounts(controller)))
            return 0

        account = find_account(controller.accounts, args.account)
        if account is None:
            print(f"Ad account not found: {args.account}")
            return 1

        print(f"\nFetching insights for {account.name} ({date_range})...")
        await controller.load_account(account, date_range)
        if controller.error:
            print(f"Error: {controller.error}")
            return 1

        if args.campaign:
            await controller.select_campaign(args.campaign)
            if controller.error:
                print(f"Warning: {controller.error}")

        print(render_report(controller))
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
