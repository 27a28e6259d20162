"""Clases base para almacenes de datos de salud."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

NO_LIMIT = 0

AuthorizationCompletion = Callable[[bool, "HealthDataError | None"], None]
ResultsHandler = Callable[
    ["SampleQuery", "Sequence[Any] | None", "HealthDataError | None"], None
]


class HealthDataError(Exception):
    """Base error reported by a health store."""


class HealthDataUnavailableError(HealthDataError):
    """Health data is not available on this device."""


class AuthorizationDeniedError(HealthDataError):
    """The store refused the requested access."""


@dataclass(frozen=True)
class SortDescriptor:
    """Sort key for a sample query (``start_date`` or ``end_date``)."""

    key: str
    ascending: bool = True


@dataclass(frozen=True)
class SampleQuery:
    """A one-shot query for every sample of a type.

    Attributes:
        sample_type: Quantity type identifier.
        handler: Called once with ``(query, results, error)`` on the store's
            worker thread.
        predicate: Optional filter applied to each raw sample.
        limit: Maximum number of results, ``NO_LIMIT`` for all.
        sort_descriptors: Optional ordering; None keeps store order.
    """

    sample_type: str
    handler: ResultsHandler
    predicate: Callable[[Any], bool] | None = None
    limit: int = NO_LIMIT
    sort_descriptors: tuple[SortDescriptor, ...] | None = None


class HealthStore(ABC):
    """Abstract health data store.

    Completions are delivered asynchronously on a context owned by the
    store; callers must hop back to their own thread before touching state.
    """

    @abstractmethod
    def is_health_data_available(self) -> bool:
        """Whether this store has any health data to offer."""

    @abstractmethod
    def request_authorization(
        self,
        share: set[str],
        read: set[str],
        completion: AuthorizationCompletion,
    ) -> Any:
        """Request access to the given sample types.

        Args:
            share: Types the caller wants to write.
            read: Types the caller wants to read.
            completion: Called with ``(success, error)``.
        """

    @abstractmethod
    def execute(self, query: SampleQuery) -> Any:
        """Run ``query``; results go to ``query.handler``."""
