#!/usr/bin/env python3
"""
Company ESG News Collection Script

Usage:
    python scripts/collect_news.py COMPANY [OPTIONS]

Options:
    --page-size N       Number of articles to fetch (default: 10)
    --list-companies    List companies with stored articles and exit
    --verbose, -v       Enable verbose logging

Examples:
    # Fetch and store the latest ESG news for Tesla
    python scripts/collect_news.py Tesla

    # Fetch more articles
    python scripts/collect_news.py "Coca-Cola" --page-size 25

    # Show which companies are already stored
    python scripts/collect_news.py --list-companies
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data_collection.api_client import NewsSearchError
from src.data_collection.collector import NewsCollector
from src.data_collection.config import settings
from src.data_collection.database import db


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


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Collect ESG news for a company",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "company",
        nargs="?",
        help="Company name to search for",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.news_page_size,
        help=f"Number of articles to fetch (default: {settings.news_page_size})",
    )
    parser.add_argument(
        "--list-companies",
        action="store_true",
        help="List companies with stored articles and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)

    db.init_db()

    if args.list_companies:
        with db.get_session() as session:
            companies = db.get_all_companies(session)
        print("\n=== Stored Companies ===")
        for company in companies:
            print(f"  {company}")
        print()
        return 0

    if not args.company:
        logger.error("Company name is required")
        return 1

    if not settings.newsdata_api_key:
        logger.error("NEWSDATA_API_KEY not set. Please set it in .env or environment.")
        return 1

    collector = NewsCollector()

    try:
        articles, stats = collector.collect_company_news(args.company, page_size=args.page_size)
    except NewsSearchError as e:
        logger.error(str(e))
        return 1

    print("\n=== Collection Results ===")
    print(f"Company:              {args.company}")
    print(f"Articles returned:    {len(articles)}")
    print(f"New articles:         {stats.articles_new}")
    print(f"Already stored:       {stats.articles_duplicates}")
    print(f"API calls:            {collector.api_client.api_calls_made}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
