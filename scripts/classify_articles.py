#!/usr/bin/env python3
"""CLI script for sentiment and ESG classification of stored articles.

Usage:
    python scripts/classify_articles.py {sentiment,esg} [OPTIONS]

Examples:
    # Classify sentiment for up to 10 unanalyzed articles of any company
    python scripts/classify_articles.py sentiment

    # Categorize ESG for one company's articles
    python scripts/classify_articles.py esg --company Tesla --limit 20

    # Classify a specific article
    python scripts/classify_articles.py esg --article-id 12345678-1234-1234-1234-123456789abc

    # Show classification progress for a company
    python scripts/classify_articles.py sentiment --company Tesla --stats
"""

import argparse
import logging
import sys
from pathlib import Path
from uuid import UUID

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.analytics.aggregator import AnalyticsAggregator
from src.classification.config import classification_settings
from src.classification.pipeline import ClassificationPipeline
from src.data_collection.database import ArticleNotFoundError, db


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Reduce noise from HTTP libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def positive_int(value: str) -> int:
    """argparse type for a strictly positive integer."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def print_usage(pipeline: ClassificationPipeline) -> None:
    """Print generative API usage, if any calls were made."""
    for component, usage in pipeline.get_stats().items():
        print(f"\n=== API Usage ({component}) ===")
        print(f"Model:                 {usage['model']}")
        print(f"API calls:             {usage['total_api_calls']}")
        print(f"Input tokens:          {usage['total_input_tokens']}")
        print(f"Output tokens:         {usage['total_output_tokens']}")
        print(f"Estimated cost:        ${usage['estimated_cost_usd']:.4f}")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Classify article sentiment or ESG categories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "dimension",
        choices=["sentiment", "esg"],
        help="Which classification to run",
    )
    parser.add_argument(
        "--company",
        type=str,
        help="Only classify articles of this company (default: all companies)",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        default=classification_settings.classification_batch_size,
        help=f"Number of articles to process (default: {classification_settings.classification_batch_size})",
    )
    parser.add_argument(
        "--article-id",
        type=str,
        help="Classify a specific article by UUID",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show classification statistics for --company and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )
    return parser.parse_args()


def show_stats(dimension: str, company: str) -> None:
    """Display classification progress for a company."""
    aggregator = AnalyticsAggregator()
    if dimension == "sentiment":
        stats = aggregator.sentiment_stats(company)
    else:
        stats = aggregator.esg_stats(company)

    print(f"\n=== {dimension.upper()} Statistics: {company} ===")
    print(f"Classified:            {stats.classified}")
    print(f"Pending:               {stats.unclassified}")
    for label, count in stats.distribution.items():
        print(f"  {label:<20} {count}")
    print()


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)

    db.init_db()

    if args.stats:
        if not args.company:
            logger.error("--stats requires --company")
            return 1
        show_stats(args.dimension, args.company)
        return 0

    if args.dimension == "esg" and not classification_settings.anthropic_api_key:
        logger.warning(
            "ANTHROPIC_API_KEY not set. Articles will receive the default ESG category."
        )

    pipeline = ClassificationPipeline()

    if args.article_id:
        try:
            article_id = UUID(args.article_id)
        except ValueError:
            logger.error(f"Invalid article ID format: {args.article_id}")
            return 1

        try:
            if args.dimension == "sentiment":
                article, result = pipeline.classify_article_sentiment(article_id)
                print(f"\n{article.title}\nSentiment: {result.sentiment}")
            else:
                article, result = pipeline.classify_article_esg(article_id)
                print(f"\n{article.title}")
                print(f"Categories: {', '.join(result.categories)} (primary: {result.primary})")
                print(f"Explanation: {result.explanation}")
            if result.error:
                print(f"Fallback used: {result.error}")
            print_usage(pipeline)
            return 0
        except ArticleNotFoundError as e:
            logger.error(str(e))
            return 1

    try:
        if args.dimension == "sentiment":
            stats = pipeline.classify_sentiment_batch(company=args.company, limit=args.limit)
        else:
            stats = pipeline.classify_esg_batch(company=args.company, limit=args.limit)
    except Exception as e:
        logger.error(f"Classification failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    print("\n=== Classification Results ===")
    print(f"{stats.message}")
    print(f"Succeeded:             {stats.succeeded}")
    print(f"Failed:                {stats.failed}")
    print(f"Total:                 {stats.total}")

    if stats.errors:
        print(f"\nErrors ({len(stats.errors)}):")
        for error in stats.errors[:5]:
            print(f"  - {error}")
        if len(stats.errors) > 5:
            print(f"  ... and {len(stats.errors) - 5} more")

    print_usage(pipeline)

    return 0 if not stats.errors else 1


if __name__ == "__main__":
    sys.exit(main())
