#!/usr/bin/env python3
"""
Daily P&L Report
Reads a report request (orders, cost fields, ad spend, RTO / discard ids)
from a JSON file and prints the daily table.

    python scripts/pnl_report.py orders.json --month 2025-06 --target 100000
"""
import argparse
import json
import os
import sys
from decimal import Decimal

from dateutil import parser as date_parser

# Add project root to python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from profitlens.core import setup_logging
from profitlens.schemas.report import ReportRequest
from profitlens.schemas.projection import HistoricalProjectionRequest
from profitlens.services import PnLService, ProjectionService


def dash(value) -> str:
    """Undefined values print as a dash, never as 0"""
    return "-" if value is None else str(value)


def print_daily(report, month: str = None):
    print(f"{'Date':<12} | {'Orders':>6} | {'Counted':>7} | {'Pending':>7} | {'Ad Spend':>12} | {'P&L':>12} | {'Estimated':>12}")
    print("-" * 90)
    for day in report.daily:
        if month and not day.date.isoformat().startswith(month):
            continue
        flag = " *" if day.ad_spend_only else ""
        print(
            f"{day.date.isoformat():<12} | {day.order_count:>6} | {day.counted_orders:>7} | {day.pending_orders:>7} | "
            f"{day.ad_spend:>12} | {day.pnl:>12} | {day.estimated_pnl:>12}{flag}"
        )

    print("-" * 90)
    stats = report.stats
    print(f"NDR rate: {stats.ndr_rate}%   Avg P&L / final order: {dash(stats.avg_pnl_per_final_order)}   ROAS: {dash(stats.roas)}")
    for m in report.monthly:
        if month and m.month != month:
            continue
        print(f"{m.month}: revenue {m.revenue}, ad spend {m.ad_spend}, P&L {m.pnl} (estimated {m.estimated_pnl})")


def print_notices(notices):
    if not notices:
        return
    print("\nNotices:")
    for notice in notices:
        subject = f" [{notice.subject}]" if notice.subject else ""
        print(f"  {notice.code.value}{subject}: {notice.message}")


def main():
    arg_parser = argparse.ArgumentParser(description="Print the daily P&L for an order feed")
    arg_parser.add_argument("input", help="JSON file with orders, cost_fields and ad_spend")
    arg_parser.add_argument("--month", help="Only show this month (YYYY-MM)")
    arg_parser.add_argument("--target", type=Decimal, help="Monthly profit target for a projection")
    arg_parser.add_argument("--since", help="Projection window start (any date format)")
    arg_parser.add_argument("--as-of", dest="as_of", help="Projection reference date (any date format)")
    arg_parser.add_argument("--working-days", dest="working_days", type=int)
    arg_parser.add_argument("-v", "--verbose", action="store_true")
    args = arg_parser.parse_args()

    setup_logging(level="INFO" if args.verbose else "WARNING")

    with open(args.input, encoding="utf-8") as f:
        payload = json.load(f)

    report = PnLService.build_report(ReportRequest.model_validate(payload))
    print_daily(report, args.month)
    print_notices(report.notices)

    if args.target is not None:
        request = HistoricalProjectionRequest.model_validate({
            **payload,
            "target_monthly_profit": args.target,
            "window_start": date_parser.parse(args.since).date() if args.since else None,
            "as_of": date_parser.parse(args.as_of).date() if args.as_of else None,
            "working_days": args.working_days,
        })
        result = ProjectionService.from_history(request)
        avg = result.averages
        proj = result.projection
        print(f"\nProjection for {args.target} / month ({avg.window_start} .. {avg.window_end}, {avg.final_orders} final orders)")
        if not proj.feasible:
            print(f"  No feasible projection: {proj.reason}")
        else:
            print(f"  {'':<10} {'Monthly':>14} {'Daily':>12}")
            print(f"  {'Orders':<10} {proj.monthly_orders_required:>14} {proj.daily_orders_required:>12}")
            print(f"  {'Revenue':<10} {proj.monthly_revenue_required:>14} {proj.daily_revenue_required:>12}")
            print(f"  {'Ad spend':<10} {dash(proj.monthly_ad_spend_required):>14} {dash(proj.daily_ad_spend_required):>12}")
        print_notices(proj.notices)


if __name__ == "__main__":
    main()
