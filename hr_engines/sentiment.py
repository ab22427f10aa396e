"""
hr_engines.sentiment -- Keyword-based sentiment, themes and phrase extraction.

Responsibility:
    Score free-text review feedback as positive, neutral or negative,
    list the themes it touches, and pull out the strengths and improvement
    areas reviewers name with stock phrases ("strong in X.", "focus on Y,").

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by ``hr_engines.insights`` and ``hr_modules.performance.service``.

Invariants enforced:
    - Keyword hits are substring matches per whitespace token, case
      insensitive; a token counts at most once per polarity.  Multi-word
      keywords therefore never match a single token.
    - score = (positive hits - negative hits) / token count * 100.
    - Themes are reported in definition order, not by mention count.
    - Strengths and improvements keep first-seen order without duplicates.

This is a heuristic, not a language model: false positives and negatives
are expected.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hr_config.schema import SentimentPolicy
from hr_engines.records import FeedbackRecord
from hr_engines.tracer import traced_engine
from hr_kernel.domain.rounding import round_half_ceiling, round_half_up
from hr_kernel.logging_config import get_logger

logger = get_logger("engines.sentiment")


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class SentimentAnalysis:
    overall_sentiment: Sentiment
    sentiment_score: float
    average_rating: float
    key_themes: tuple[str, ...] = field(default=())
    strengths: tuple[str, ...] = field(default=())
    improvements: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallSentiment": self.overall_sentiment.value,
            "sentimentScore": self.sentiment_score,
            "averageRating": self.average_rating,
            "keyThemes": list(self.key_themes),
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
        }


NEUTRAL_ANALYSIS = SentimentAnalysis(
    overall_sentiment=Sentiment.NEUTRAL,
    sentiment_score=0.0,
    average_rating=0.0,
)


class FeedbackSentimentAnalyzer:
    """Scores feedback text against the configured keyword lists."""

    def __init__(self, policy: SentimentPolicy | None = None):
        self._policy = policy or SentimentPolicy()
        self._strength_patterns = [
            re.compile(p, re.IGNORECASE) for p in self._policy.strength_patterns
        ]
        self._improvement_patterns = [
            re.compile(p, re.IGNORECASE) for p in self._policy.improvement_patterns
        ]

    @property
    def policy(self) -> SentimentPolicy:
        return self._policy

    def text_sentiment(self, texts: Sequence[str]) -> tuple[Sentiment, float]:
        """Classify texts by net keyword hits per hundred tokens."""
        positive_words = self._policy.positive_keywords
        negative_words = self._policy.negative_keywords
        positive = 0
        negative = 0
        total_words = 0

        for text in texts:
            words = text.lower().split()
            total_words += len(words)
            for word in words:
                if any(kw in word for kw in positive_words):
                    positive += 1
                if any(kw in word for kw in negative_words):
                    negative += 1

        score = (positive - negative) / total_words * 100 if total_words else 0.0

        if score > self._policy.positive_threshold:
            sentiment = Sentiment.POSITIVE
        elif score < self._policy.negative_threshold:
            sentiment = Sentiment.NEGATIVE
        else:
            sentiment = Sentiment.NEUTRAL
        return sentiment, round_half_ceiling(score, 1)

    def key_themes(self, feedback: Sequence[FeedbackRecord]) -> tuple[str, ...]:
        all_text = " ".join(f.feedback_text.lower() for f in feedback)
        themes = [
            theme
            for theme, keywords in self._policy.themes
            if sum(all_text.count(kw) for kw in keywords) > 0
        ]
        return tuple(themes[: self._policy.max_themes])

    def _extract(
        self, feedback: Sequence[FeedbackRecord], patterns: list[re.Pattern[str]]
    ) -> tuple[str, ...]:
        found: dict[str, None] = {}
        for record in feedback:
            for pattern in patterns:
                for match in pattern.finditer(record.feedback_text):
                    phrase = match.group(1)
                    if phrase and len(phrase) < self._policy.max_phrase_length:
                        found[phrase.strip()] = None
        return tuple(list(found)[: self._policy.max_phrases])

    def strengths(self, feedback: Sequence[FeedbackRecord]) -> tuple[str, ...]:
        return self._extract(feedback, self._strength_patterns)

    def improvements(self, feedback: Sequence[FeedbackRecord]) -> tuple[str, ...]:
        return self._extract(feedback, self._improvement_patterns)

    @traced_engine("sentiment", "1.0", fingerprint_fields=("feedback",))
    def analyze(self, *, feedback: Sequence[FeedbackRecord]) -> SentimentAnalysis:
        """Aggregate sentiment over every feedback record.

        No feedback is neutral with a zero score and zero average rating.
        """
        if not feedback:
            return NEUTRAL_ANALYSIS

        ratings = [f.rating for f in feedback if f.rating is not None]
        average = sum(ratings) / len(ratings) if ratings else 0.0
        sentiment, score = self.text_sentiment([f.feedback_text for f in feedback])

        return SentimentAnalysis(
            overall_sentiment=sentiment,
            sentiment_score=score,
            average_rating=round_half_up(average, 1),
            key_themes=self.key_themes(feedback),
            strengths=self.strengths(feedback),
            improvements=self.improvements(feedback),
        )
