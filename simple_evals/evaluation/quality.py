"""Coherence and relevance evaluators backed by DeepEval's GEval.

GEval prompts the judge model with the evaluation steps below and returns a
0-1 score plus a rationale. The score is mapped onto the 1-5 scale and
interpreted into a rating.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from deepeval.metrics import GEval
from deepeval.test_case import LLMTestCaseParams

from simple_evals.errors import EvaluatorError
from simple_evals.evaluation.base import Evaluator
from simple_evals.evaluation.deepeval_helpers import to_test_case
from simple_evals.evaluation.models import (
    MAX_SCORE,
    MIN_PASSING_SCORE,
    MIN_SCORE,
    EvaluationResult,
    NumericMetric,
    failed_metric,
    interpret_score,
)

if TYPE_CHECKING:
    from simple_evals.conversation import ChatConfiguration
    from simple_evals.providers.base import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

COHERENCE_METRIC_NAME = "Coherence"
RELEVANCE_METRIC_NAME = "Relevance"


def score_to_value(score: float) -> float:
    """Map a 0-1 GEval score onto the 1-5 scale."""
    clamped = min(max(score, 0.0), 1.0)
    return round(MIN_SCORE + (MAX_SCORE - MIN_SCORE) * clamped, 2)


def value_to_score(value: float) -> float:
    return (value - MIN_SCORE) / (MAX_SCORE - MIN_SCORE)


class GEvalEvaluator(Evaluator):
    """Base for single-metric evaluators that score through GEval."""

    metric_name: ClassVar[str]
    evaluation_steps: ClassVar[list[str]]

    @property
    def metric_names(self) -> tuple[str, ...]:
        return (self.metric_name,)

    def build_metric(self, judge: Any) -> GEval:
        return GEval(
            name=self.metric_name,
            evaluation_steps=self.evaluation_steps,
            evaluation_params=[LLMTestCaseParams.INPUT, LLMTestCaseParams.ACTUAL_OUTPUT],
            model=judge,
            threshold=value_to_score(MIN_PASSING_SCORE),
            async_mode=True,
        )

    async def _measure(
        self, messages: list[ChatMessage], response: ChatResponse, judge: Any
    ) -> GEval:
        geval = self.build_metric(judge)
        try:
            await geval.a_measure(to_test_case(messages, response), _show_indicator=False)
        except Exception as e:
            raise EvaluatorError(self.metric_name, f"judge call failed: {e}") from e
        return geval

    async def evaluate(
        self,
        messages: list[ChatMessage],
        response: ChatResponse,
        chat_configuration: ChatConfiguration,
    ) -> EvaluationResult:
        if not response.text.strip():
            return EvaluationResult(
                [failed_metric(self.metric_name, "The response supplied for evaluation was empty.")]
            )

        try:
            geval = await self._measure(messages, response, chat_configuration.judge)
        except EvaluatorError as e:
            logger.warning(f"{self.metric_name} evaluation failed: {e}")
            return EvaluationResult([failed_metric(self.metric_name, e)])

        if getattr(geval, "error", None):
            return EvaluationResult(
                [failed_metric(self.metric_name, f"The judge reported an error: {geval.error}")]
            )
        if geval.score is None:
            return EvaluationResult(
                [failed_metric(self.metric_name, "The judge returned no parsable score.")]
            )

        value = score_to_value(float(geval.score))
        metric = NumericMetric(
            name=self.metric_name,
            value=value,
            reason=geval.reason or "",
            interpretation=interpret_score(self.metric_name, value),
        )
        logger.info(f"{self.metric_name}={value:g} ({metric.interpretation.rating.label})")
        return EvaluationResult([metric])


class CoherenceEvaluator(GEvalEvaluator):
    """Judges whether the response is logically consistent and well organized."""

    metric_name = COHERENCE_METRIC_NAME
    evaluation_steps = [
        "Read the conversation and the response to its final user message.",
        "Check that the ideas in the response follow a logical order and connect to one another.",
        "Penalize contradictions, abrupt topic changes, and statements that do not follow"
        " from earlier ones.",
        "Reward a response that reads as a unified, well-structured answer to the question asked.",
    ]


class RelevanceEvaluator(GEvalEvaluator):
    """Judges whether the response addresses what the user actually asked."""

    metric_name = RELEVANCE_METRIC_NAME
    evaluation_steps = [
        "Identify the question or request in the final user message, taking the system"
        " instructions into account.",
        "Check whether the response directly addresses every part of that question.",
        "Penalize content unrelated to the question and parts of the question left unanswered.",
        "Reward a response whose content is focused on exactly what was asked.",
    ]
