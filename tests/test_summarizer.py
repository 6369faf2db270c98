"""Tests for company summary generation."""

import json
from types import SimpleNamespace

import pytest

from src.classification.summarizer import (
    FALLBACK_RECOMMENDATION,
    SummaryGenerator,
    build_basic_summary,
    strip_code_fences,
)


def article(title: str, sentiment: str | None = None, categories: list[str] | None = None):
    return SimpleNamespace(
        title=title,
        description=f"About {title}",
        sentiment=sentiment,
        esg_categories=categories,
    )


VALID_SUMMARY = {
    "overall_summary": "Tesla shows strong environmental progress.",
    "key_concerns": ["Labor disputes"],
    "positive_highlights": ["Emission cuts"],
    "trending_topics": [
        {
            "topic": "Factory emissions",
            "category": "Environmental",
            "sentiment": "Positive",
            "importance": "High",
        }
    ],
    "recommendations": "Watch labor relations.",
}


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestBuildBasicSummary:
    """Deterministic fallback summary."""

    def test_dominant_labels(self):
        articles = [
            article("A", "Negative", ["Social"]),
            article("B", "Negative", ["Social", "Governance"]),
            article("C", "Positive", ["Environmental"]),
        ]

        result = build_basic_summary(articles, "Nike")

        assert result.success is True
        assert result.fallback is True
        assert result.analyzed_articles == 3
        assert result.summary.overall_summary == (
            "Based on 3 articles, Nike has a predominantly negative ESG coverage, "
            "with focus on Social issues."
        )
        assert result.summary.recommendations == FALLBACK_RECOMMENDATION

    def test_ties_go_to_first_label(self):
        articles = [
            article("A", "Negative", ["Governance"]),
            article("B", "Positive", ["Environmental"]),
        ]

        result = build_basic_summary(articles, "Nike")

        assert "predominantly positive" in result.summary.overall_summary
        assert "focus on Environmental issues" in result.summary.overall_summary

    def test_unlabeled_articles_default_to_first_labels(self):
        result = build_basic_summary([article("A"), article("B")], "Nike")

        assert "predominantly positive" in result.summary.overall_summary
        assert "focus on Environmental issues" in result.summary.overall_summary
        assert result.summary.trending_topics == []

    def test_concerns_and_highlights_capped(self):
        articles = [article(f"Bad {i}", "Negative") for i in range(5)]
        articles += [article("Good", "Positive")]

        summary = build_basic_summary(articles, "Nike").summary

        assert summary.key_concerns == ["Bad 0", "Bad 1", "Bad 2"]
        assert summary.positive_highlights == ["Good"]

    def test_topic_importance(self):
        articles = [article(f"E{i}", "Positive", ["Environmental"]) for i in range(4)]
        articles += [article("S", "Positive", ["Social"])]

        topics = build_basic_summary(articles, "Nike").summary.trending_topics

        assert [(t.category, t.importance) for t in topics] == [
            ("Environmental", "High"),
            ("Social", "Medium"),
        ]
        assert all(t.sentiment == "Positive" for t in topics)
        assert topics[0].topic == "Environmental initiatives"


class TestSummaryGenerator:
    """Tests for SummaryGenerator.summarize."""

    def test_no_articles_unsuccessful(self, mock_generative_client):
        generator = SummaryGenerator(client=mock_generative_client)

        result = generator.summarize([], "Nike")

        assert result.success is False
        assert result.message == "No articles available for summary generation"
        mock_generative_client.generate.assert_not_called()

    def test_model_summary_parsed(self, mock_generative_client):
        mock_generative_client.generate.return_value = json.dumps(VALID_SUMMARY)
        generator = SummaryGenerator(client=mock_generative_client)

        result = generator.summarize([article("A", "Positive", ["Environmental"])], "Tesla")

        assert result.success is True
        assert result.fallback is False
        assert result.analyzed_articles == 1
        assert result.summary.trending_topics[0].topic == "Factory emissions"

    def test_fenced_summary_parsed(self, mock_generative_client):
        mock_generative_client.generate.return_value = (
            "```json\n" + json.dumps(VALID_SUMMARY, indent=2) + "\n```"
        )
        generator = SummaryGenerator(client=mock_generative_client)

        result = generator.summarize([article("A", "Positive")], "Tesla")

        assert result.fallback is False
        assert result.summary.overall_summary == VALID_SUMMARY["overall_summary"]

    @pytest.mark.parametrize(
        "answer",
        ["Sorry, I cannot help with that.", '{"key_concerns": []}', '{"overall_summary": '],
    )
    def test_invalid_answer_falls_back(self, mock_generative_client, answer):
        mock_generative_client.generate.return_value = answer
        generator = SummaryGenerator(client=mock_generative_client)

        result = generator.summarize([article("A", "Negative", ["Social"])], "Nike")

        assert result.success is True
        assert result.fallback is True
        assert result.summary.key_concerns == ["A"]

    def test_model_failure_falls_back(self, mock_generative_client):
        mock_generative_client.generate.side_effect = RuntimeError("timeout")
        generator = SummaryGenerator(client=mock_generative_client)

        result = generator.summarize([article("A", "Positive")], "Nike")

        assert result.success is True
        assert result.fallback is True

    def test_prompt_limited_to_twenty_articles(self, mock_generative_client):
        mock_generative_client.generate.return_value = json.dumps(VALID_SUMMARY)
        generator = SummaryGenerator(client=mock_generative_client)
        articles = [article(f"Story {i}", "Neutral") for i in range(30)]

        result = generator.summarize(articles, "Nike")

        prompt = mock_generative_client.generate.call_args[0][0]
        assert "Story 19" in prompt
        assert "Story 20" not in prompt
        assert "Nike" in prompt
        assert result.analyzed_articles == 30
