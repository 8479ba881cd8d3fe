"""
ClearSeller CLI
===============

Command-line interface for the winning-product scoring engine.

Commands:
    score   - Score one scraped product payload
    scan    - Score a JSON array of payloads and rank the winners
    price   - Suggested resale price for a supplier price
    profit  - Profitability of a selling price

Usage:
    python -m clearseller.orchestrator.cli score --file product.json
    python -m clearseller.orchestrator.cli score --payload '{"rating": 4.8, "reviewCount": 12000}'
    python -m clearseller.orchestrator.cli scan --file listing.json --limit 10
    python -m clearseller.orchestrator.cli price --supplier-price 8 --source aliexpress
    python -m clearseller.orchestrator.cli profit --supplier-price 8 --selling-price 24.99
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from ..config import get_settings
from ..scoring.pricing import calculate_profit, markup_multiplier, suggest_listing_price
from ..scoring.product_scorer import ProductScoringEngine
from ..signals.normalizer import normalize_signal, normalize_signals
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _engine() -> ProductScoringEngine:
    return ProductScoringEngine(get_settings().scoring)


def _score_bar(score: int, width: int = 20) -> str:
    filled = max(0, min(width, int(score / 100 * width)))
    return "█" * filled + "░" * (width - filled)


def cmd_score(args):
    """Score a single product payload."""
    try:
        if args.file:
            payload = _load_json(args.file)
        elif args.payload:
            payload = json.loads(args.payload)
        else:
            print("ERROR: --file or --payload is required")
            return 1

        signal = normalize_signal(payload)
        analysis = _engine().analyze(signal)

        if args.json:
            output = {"signal": signal.to_dict(), "analysis": analysis.to_dict()}
            print(json.dumps(output, indent=2, ensure_ascii=False))
            return 0

        print("=" * 60)
        print(f"SCORING RESULT: {signal.title or '(untitled)'}")
        print("=" * 60)
        print()
        print(f"Total Score: {analysis.total_score}/100")
        print(f"Potential: {analysis.potential.value.upper()}")
        print(f"Winner: {'Yes' if analysis.is_winner else 'No'}")
        if analysis.suggested_price:
            print(f"Suggested price: ${analysis.suggested_price:.2f}")
        print()

        print("Breakdown:")
        for name, score in analysis.breakdown.to_dict().items():
            print(f"  {name:12} [{_score_bar(score)}] {score}/100")

        if analysis.reasons:
            print()
            print("Reasons:")
            for reason in analysis.reasons:
                print(f"  {reason}")

        if analysis.warnings:
            print()
            print("Warnings:")
            for warning in analysis.warnings:
                print(f"  - {warning}")

        return 0

    except Exception as e:
        print(f"ERROR: Failed to score product: {e}")
        logger.exception("Scoring failed")
        return 1


def cmd_scan(args):
    """Score a list of payloads and rank them."""
    try:
        payloads = _load_json(args.file)
        if not isinstance(payloads, list):
            print("ERROR: scan expects a JSON array of products")
            return 1

        signals = normalize_signals(payloads, skip_invalid=args.skip_invalid)
        result = _engine().scan(
            signals,
            prefilter=not args.no_prefilter,
            limit=args.limit,
            min_score=args.min_score,
        )

        if args.json:
            output = {
                "scanned": result.scanned,
                "filteredOut": result.filtered_out,
                "winners": result.winner_count,
                "results": [
                    {"signal": signal.to_dict(), "analysis": analysis.to_dict()}
                    for signal, analysis in result.results
                ],
            }
            print(json.dumps(output, indent=2, ensure_ascii=False))
            return 0

        print("=" * 60)
        print("SCAN RESULTS")
        print("=" * 60)
        print(f"Scanned: {result.scanned}")
        print(f"Below minimum criteria: {result.filtered_out}")
        print(f"Winners: {result.winner_count}")
        print()

        if not result.results:
            print("No products matched.")
            return 0

        for i, (signal, analysis) in enumerate(result.results, 1):
            title = signal.title[:50] + "..." if len(signal.title) > 50 else signal.title
            marker = "🏆" if analysis.is_winner else "  "
            print(f"{i:>3}. {marker} {analysis.total_score:>3}/100 {analysis.potential.value:<6} {title}")

        return 0

    except Exception as e:
        print(f"ERROR: Scan failed: {e}")
        logger.exception("Scan failed")
        return 1


def cmd_price(args):
    """Suggested resale price."""
    try:
        config = get_settings().scoring
        suggested = suggest_listing_price(args.supplier_price, args.source, price=args.price, config=config)

        if args.json:
            print(json.dumps({
                "supplierPrice": args.supplier_price,
                "source": args.source,
                "markupMultiplier": markup_multiplier(args.source, config),
                "suggestedPrice": suggested,
            }, indent=2))
            return 0

        print(f"Supplier price: ${args.supplier_price:.2f} ({args.source})")
        print(f"Markup: x{markup_multiplier(args.source, config)}")
        print(f"Suggested price: ${suggested:.2f}")
        return 0

    except Exception as e:
        print(f"ERROR: Failed to estimate price: {e}")
        logger.exception("Price estimation failed")
        return 1


def cmd_profit(args):
    """Profitability of a selling price."""
    try:
        result = calculate_profit(
            args.supplier_price,
            args.selling_price,
            platform=args.platform,
            shipping_method=args.shipping,
        )

        if args.json:
            print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
            return 0

        print("=" * 60)
        print(f"PROFIT: ${result.selling_price:.2f} on {result.platform}")
        print("=" * 60)
        print(f"Product cost: ${result.product_cost:.2f}")
        print(f"Platform fees: ${result.fees.platform_fees:.2f}")
        print(f"Payment processing: ${result.fees.payment_processing:.2f}")
        print(f"Shipping ({result.shipping_method}): ${result.fees.shipping:.2f}")
        print(f"Total costs: ${result.total_costs:.2f}")
        print()
        print(f"Net profit: ${result.net_profit:.2f}")
        print(f"Margin: {result.profit_margin:.1f}%")
        print(f"ROI: {result.roi:.1f}%")
        print(f"Break-even price: ${result.break_even_price:.2f}")
        print()
        print(result.recommendation)
        return 0

    except Exception as e:
        print(f"ERROR: Failed to calculate profit: {e}")
        logger.exception("Profit calculation failed")
        return 1


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clearseller",
        description="ClearSeller winning-product scoring CLI",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # score command
    score_parser = subparsers.add_parser("score", help="Score one product payload")
    score_parser.add_argument("--file", help="JSON file holding one product object")
    score_parser.add_argument("--payload", help="Inline JSON product object")
    score_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Score and rank a list of products")
    scan_parser.add_argument("--file", required=True, help="JSON file holding an array of products")
    scan_parser.add_argument("--limit", type=_non_negative_int, help="Maximum results to show")
    scan_parser.add_argument("--min-score", type=int, help="Minimum total score")
    scan_parser.add_argument(
        "--no-prefilter",
        action="store_true",
        help="Score every product, even those below the minimum criteria",
    )
    scan_parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip malformed payloads instead of failing",
    )
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # price command
    price_parser = subparsers.add_parser("price", help="Suggested resale price")
    price_parser.add_argument("--supplier-price", type=float, required=True, help="Supplier cost")
    price_parser.add_argument("--source", default="aliexpress", help="Source marketplace (default: aliexpress)")
    price_parser.add_argument("--price", type=float, help="Explicit listing price (overrides the estimate)")
    price_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # profit command
    profit_parser = subparsers.add_parser("profit", help="Profitability of a selling price")
    profit_parser.add_argument("--supplier-price", type=float, required=True, help="Supplier cost")
    profit_parser.add_argument("--selling-price", type=float, required=True, help="Selling price")
    profit_parser.add_argument(
        "--platform",
        default="shopify",
        choices=["shopify", "woocommerce", "etsy"],
        help="Storefront platform (default: shopify)",
    )
    profit_parser.add_argument(
        "--shipping",
        default="standard",
        choices=["standard", "express"],
        help="Shipping method (default: standard)",
    )
    profit_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        log_settings = get_settings().logging
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    setup_logging(
        level="DEBUG" if args.verbose else log_settings.level,
        json_output=log_settings.json_logs,
        log_file=log_settings.log_file,
        engine_level=log_settings.engine_level,
    )

    # Dispatch to command handler
    commands = {
        "score": cmd_score,
        "scan": cmd_scan,
        "price": cmd_price,
        "profit": cmd_profit,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
