#!/usr/bin/env python3
"""Print analytics and an ESG summary for a company.

Usage:
    python scripts/company_report.py COMPANY [OPTIONS]

Examples:
    # Overview, sentiment trend and ESG distribution
    python scripts/company_report.py Tesla

    # Include the 20 most recent articles and the generated summary
    python scripts/company_report.py Tesla --timeline 20 --summary

    # List negative governance coverage
    python scripts/company_report.py Tesla --sentiment Negative --category Governance
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.analytics.aggregator import AnalyticsAggregator
from src.classification.pipeline import ClassificationPipeline
from src.data_collection.database import db
from src.data_collection.models import ESG_LABELS, SENTIMENT_LABELS


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Report ESG analytics for a company",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("company", help="Company name")
    parser.add_argument(
        "--timeline",
        type=int,
        default=0,
        metavar="N",
        help="Show the N most recent articles",
    )
    parser.add_argument(
        "--sentiment",
        choices=list(SENTIMENT_LABELS),
        help="List stored articles with this sentiment",
    )
    parser.add_argument(
        "--category",
        choices=list(ESG_LABELS),
        help="List stored articles in this ESG category",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Generate an ESG summary with Claude (statistical fallback without API key)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )
    return parser.parse_args()


def print_analytics(aggregator: AnalyticsAggregator, company: str, timeline_limit: int) -> None:
    overview = aggregator.overview(company)
    print(f"\n=== Overview: {company} ===")
    print(f"Total articles:        {overview.total_articles}")
    print(f"Last updated:          {overview.last_updated or 'n/a'}")
    print(f"Sentiment:             {overview.sentiment_breakdown}")
    print(f"ESG:                   {overview.esg_breakdown}")

    print("\n=== Sentiment Trend ===")
    for point in aggregator.sentiment_trend(company):
        print(
            f"{point.date.isoformat()}  +{point.positive} -{point.negative} "
            f"={point.neutral}  (total {point.total})"
        )

    distribution = aggregator.esg_distribution(company)
    print("\n=== ESG Distribution ===")
    for entry in distribution.entries:
        print(f"{entry.category:<15} {entry.count}")
    print(f"{'Total':<15} {distribution.total}")

    if timeline_limit > 0:
        print("\n=== Timeline ===")
        for entry in aggregator.timeline(company, limit=timeline_limit):
            categories = ", ".join(entry.categories) or "-"
            print(f"{entry.date:%Y-%m-%d}  [{entry.sentiment or '-'}] [{categories}] {entry.title} ({entry.source})")


def print_articles(company: str, sentiment: str | None, category: str | None) -> None:
    with db.get_session() as session:
        articles = db.get_stored_articles(
            session, company, sentiment=sentiment, esg_category=category
        )

    filters = ", ".join(f for f in (sentiment, category) if f)
    print(f"\n=== Articles ({filters}) ===")
    for article in articles:
        categories = ", ".join(article.esg_categories or []) or "-"
        print(f"{article.published_at:%Y-%m-%d}  [{article.sentiment or '-'}] [{categories}] {article.title}")
    print(f"{len(articles)} articles")


def print_summary(pipeline: ClassificationPipeline, company: str) -> None:
    result = pipeline.summarize_company(company)
    print("\n=== ESG Summary ===")
    if not result.success:
        print(result.message)
        return

    summary = result.summary
    if result.fallback:
        print("(statistical summary)")
    print(summary.overall_summary)
    if summary.key_concerns:
        print("\nKey concerns:")
        for concern in summary.key_concerns:
            print(f"  - {concern}")
    if summary.positive_highlights:
        print("\nPositive highlights:")
        for highlight in summary.positive_highlights:
            print(f"  - {highlight}")
    if summary.trending_topics:
        print("\nTrending topics:")
        for topic in summary.trending_topics:
            print(f"  - {topic.topic} [{topic.category}, {topic.sentiment}, {topic.importance}]")
    print(f"\nRecommendations: {summary.recommendations}")
    print(f"Analyzed articles: {result.analyzed_articles}")

    usage = pipeline.get_stats().get("summary")
    if usage:
        print(f"API calls: {usage['total_api_calls']}, estimated cost: ${usage['estimated_cost_usd']:.4f}")


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.verbose)

    db.init_db()

    print_analytics(AnalyticsAggregator(), args.company, args.timeline)

    if args.sentiment or args.category:
        print_articles(args.company, args.sentiment, args.category)

    if args.summary:
        print_summary(ClassificationPipeline(), args.company)

    return 0


if __name__ == "__main__":
    sys.exit(main())
