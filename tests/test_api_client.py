"""Tests for the NewsData API client."""

from datetime import timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.data_collection.api_client import ArticleData, NewsDataClient, NewsSearchError
from src.data_collection.config import MAX_QUERY_LENGTH


def raw_article(i: int, **overrides) -> dict:
    raw = {
        "article_id": f"raw_{i}",
        "title": f"Tesla ESG story {i}",
        "link": f"https://example.com/tesla-{i}",
        "description": "Tesla sustainability update",
        "content": "Body",
        "pubDate": "2024-12-14 12:00:00",
        "image_url": None,
        "source_id": "reuters",
        "source_name": "Reuters",
        "creator": ["A. Writer"],
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def client(mock_newsdata_client):
    return NewsDataClient(api_key="test_key")


@pytest.fixture
def mock_newsdata_client():
    with patch("src.data_collection.api_client.NewsDataApiClient") as mock:
        yield mock.return_value


class TestInit:
    def test_missing_api_key_raises(self):
        with patch("src.data_collection.api_client.settings") as mock_settings:
            mock_settings.newsdata_api_key = ""
            with pytest.raises(ValueError, match="API key is required"):
                NewsDataClient()


class TestArticleParsing:
    """Tests for parsing raw API responses into ArticleData."""

    def test_parse_full_article(self, client):
        article = client._parse_article(raw_article(1))

        assert article.url == "https://example.com/tesla-1"
        assert article.title == "Tesla ESG story 1"
        assert article.source_name == "Reuters"
        assert article.source_id == "reuters"
        assert article.author == "A. Writer"
        assert article.published_at.tzinfo == timezone.utc
        assert article.published_at.hour == 12

    def test_parse_iso_z_date(self, client):
        article = client._parse_article(raw_article(1, pubDate="2024-12-14T23:30:00Z"))

        assert article.published_at.day == 14
        assert article.published_at.tzinfo == timezone.utc

    def test_non_utc_offset_converted(self):
        article = ArticleData(
            url="https://example.com/a",
            title="Title",
            published_at="2024-12-15T01:00:00+02:00",
        )

        assert article.published_at.day == 14
        assert article.published_at.hour == 23

    def test_missing_date_rejected(self, client):
        with pytest.raises(ValidationError):
            client._parse_article(raw_article(1, pubDate=None))

    def test_missing_link_rejected(self, client):
        with pytest.raises(ValidationError):
            client._parse_article(raw_article(1, link=""))


class TestQueryGeneration:
    """Tests for ESG query building."""

    def test_queries_under_length_limit(self, client):
        queries = client.generate_search_queries("Tesla")

        assert len(queries) >= 4
        for query in queries:
            assert len(query) <= MAX_QUERY_LENGTH

    def test_queries_mention_company(self, client):
        for query in client.generate_search_queries("Tesla"):
            assert query.startswith('"Tesla" AND (')

    def test_every_pillar_covered(self, client):
        joined = " ".join(client.generate_search_queries("Tesla"))

        assert "ESG" in joined
        assert "climate change" in joined
        assert "human rights" in joined
        assert "corruption" in joined


class TestSearchNews:
    """Tests for the search calls."""

    def test_success_parses_results(self, client, mock_newsdata_client):
        mock_newsdata_client.news_api.return_value = {
            "status": "success",
            "results": [raw_article(1), raw_article(2)],
        }

        articles = client.search_news("query")

        assert len(articles) == 2
        assert client.api_calls_made == 1

    def test_unparseable_results_skipped(self, client, mock_newsdata_client):
        mock_newsdata_client.news_api.return_value = {
            "status": "success",
            "results": [raw_article(1), raw_article(2, pubDate=None)],
        }

        articles = client.search_news("query")

        assert len(articles) == 1

    def test_api_error_status_raises(self, client, mock_newsdata_client):
        mock_newsdata_client.news_api.return_value = {
            "status": "error",
            "results": {"message": "Rate limit exceeded"},
        }

        with pytest.raises(NewsSearchError, match="Rate limit exceeded"):
            client.search_news("query")

    def test_transport_error_raises(self, client, mock_newsdata_client):
        mock_newsdata_client.news_api.side_effect = Exception("429 Too Many Requests")

        with pytest.raises(NewsSearchError):
            client.search_news("query")
        assert client.api_calls_made == 1


class TestSearchCompanyNews:
    """Tests for collecting a page of company news."""

    def test_stops_at_page_size(self, client, mock_newsdata_client):
        mock_newsdata_client.news_api.return_value = {
            "status": "success",
            "results": [raw_article(i) for i in range(5)],
        }

        articles = client.search_company_news("Tesla", page_size=3)

        assert len(articles) == 3
        assert mock_newsdata_client.news_api.call_count == 1

    def test_deduplicates_across_queries(self, client, mock_newsdata_client):
        responses = [
            {"status": "success", "results": [raw_article(1), raw_article(2)]},
            {"status": "success", "results": [raw_article(2), raw_article(3)]},
        ]
        mock_newsdata_client.news_api.side_effect = responses + [
            {"status": "success", "results": []}
        ] * 20

        articles = client.search_company_news("Tesla", page_size=3)

        assert [a.url for a in articles] == [
            "https://example.com/tesla-1",
            "https://example.com/tesla-2",
            "https://example.com/tesla-3",
        ]

    def test_empty_company_rejected(self, client, mock_newsdata_client):
        with pytest.raises(ValueError):
            client.search_company_news(" ")

        mock_newsdata_client.news_api.assert_not_called()
