"""
Per-item outcomes of a share batch.

A batch keeps going after a failed item, so the dispatcher records an Ok
(uploaded URL) or Err (the exception) for every item instead of raising.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Iterable, List, Tuple, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err:
    error: Exception


Result = Union[Ok[T], Err]


def split_results(results: Iterable[Result[T]]) -> Tuple[List[T], List[Exception]]:
    """Separate successful values from errors, keeping their order."""
    values: List[T] = []
    errors: List[Exception] = []
    for result in results:
        if isinstance(result, Err):
            errors.append(result.error)
        else:
            values.append(result.value)
    return values, errors
