# app/core/results.py
"""
Discriminated results for extraction strategy chains.

A strategy answers ``Ok(value)`` when it found the field, ``NotFound()`` when
its markup is absent, ``TransientError`` when it could not decide (a broken
selector, odd markup) and ``FatalError`` when no later strategy can help.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar, Union

from app.core.logging import get_logger

logger = get_logger().bind(module="extraction_results")

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class TransientError:
    reason: str


@dataclass(frozen=True)
class FatalError:
    reason: str


StrategyResult = Union[Ok[T], NotFound, TransientError, FatalError]


def found(value: T | None) -> StrategyResult:
    """Wrap a lookup outcome: empty strings and ``None`` count as not found."""
    if value is None:
        return NotFound()
    if isinstance(value, str) and not value.strip():
        return NotFound()
    return Ok(value)


def first_found(
    field: str,
    strategies: Sequence[Callable[[object], StrategyResult]],
    document: object,
) -> StrategyResult:
    """
    Run ``strategies`` in order against ``document`` and return the first
    ``Ok``. Later strategies are fallbacks only; results are never merged.
    """
    for strategy in strategies:
        name = getattr(strategy, "__name__", repr(strategy))
        try:
            result = strategy(document)
        except Exception as exc:
            result = TransientError(f"{type(exc).__name__}: {exc}")

        if isinstance(result, Ok):
            return result
        if isinstance(result, TransientError):
            logger.debug("extraction_strategy_skipped", field=field, strategy=name, reason=result.reason)
            continue
        if isinstance(result, FatalError):
            logger.warning("extraction_chain_aborted", field=field, strategy=name, reason=result.reason)
            return result
    return NotFound()
