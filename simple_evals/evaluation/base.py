"""Evaluator interface and the composite that fans out to several evaluators."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from simple_evals.errors import ConfigurationError, EvaluatorError
from simple_evals.evaluation.models import EvaluationResult, failed_metric

if TYPE_CHECKING:
    from simple_evals.conversation import ChatConfiguration
    from simple_evals.providers.base import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)


class Evaluator(ABC):
    """Scores a response against the conversation that produced it.

    Each evaluator produces exactly one metric per name in ``metric_names``.
    """

    @property
    @abstractmethod
    def metric_names(self) -> tuple[str, ...]:
        """Fixed names of the metrics this evaluator produces."""

    @abstractmethod
    async def evaluate(
        self,
        messages: list[ChatMessage],
        response: ChatResponse,
        chat_configuration: ChatConfiguration,
    ) -> EvaluationResult:
        """Evaluate ``response`` to ``messages``.

        Args:
            messages: The conversation that was sent.
            response: The model's reply.
            chat_configuration: Supplies the judge model.

        Returns:
            An EvaluationResult holding one metric per metric name.

        Raises:
            EvaluatorError: If no score could be produced at all.
        """


class CompositeEvaluator(Evaluator):
    """Runs several evaluators concurrently and merges their metrics.

    A failure in one evaluator becomes a failed metric in the merged result;
    the other evaluators still complete.
    """

    def __init__(self, *evaluators: Evaluator) -> None:
        if not evaluators:
            raise ConfigurationError("CompositeEvaluator needs at least one evaluator")

        seen: set[str] = set()
        for evaluator in evaluators:
            for name in evaluator.metric_names:
                if name in seen:
                    raise ConfigurationError(
                        f"Metric '{name}' is produced by more than one evaluator"
                    )
                seen.add(name)
        self._evaluators = tuple(evaluators)

    @property
    def metric_names(self) -> tuple[str, ...]:
        return tuple(name for e in self._evaluators for name in e.metric_names)

    async def _run_one(
        self,
        evaluator: Evaluator,
        messages: list[ChatMessage],
        response: ChatResponse,
        chat_configuration: ChatConfiguration,
    ) -> EvaluationResult:
        try:
            result = await evaluator.evaluate(messages, response, chat_configuration)
        except EvaluatorError as e:
            logger.warning(f"{type(evaluator).__name__} failed: {e}")
            return EvaluationResult([failed_metric(n, e) for n in evaluator.metric_names])

        for name in evaluator.metric_names:
            if name not in result:
                message = f"{type(evaluator).__name__} produced no '{name}' metric"
                result.add(failed_metric(name, message))
        return result

    async def evaluate(
        self,
        messages: list[ChatMessage],
        response: ChatResponse,
        chat_configuration: ChatConfiguration,
    ) -> EvaluationResult:
        """Evaluate with every child evaluator and return the union of metrics."""
        results = await asyncio.gather(
            *(
                self._run_one(e, messages, response, chat_configuration)
                for e in self._evaluators
            )
        )
        merged = EvaluationResult()
        for result in results:
            merged.merge(result)
        return merged
