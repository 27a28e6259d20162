"""Lectura de muestras de temperatura desde el almacén de salud."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from temperature_monitor.dispatch import Dispatcher
from temperature_monitor.model import RawQuantitySample, TemperatureEntry
from temperature_monitor.sample_types import DEGREE_CELSIUS, QuantityType
from temperature_monitor.sources.base import (
    NO_LIMIT,
    HealthDataError,
    HealthStore,
    ResultsHandler,
    SampleQuery,
)

logger = logging.getLogger(__name__)

EntriesConsumer = Callable[[list[TemperatureEntry]], None]


def build_query(sample_type: QuantityType, handler: ResultsHandler) -> SampleQuery:
    """Unfiltered, unsorted, unlimited query for ``sample_type``."""
    return SampleQuery(
        sample_type=sample_type.identifier,
        handler=handler,
        predicate=None,
        limit=NO_LIMIT,
        sort_descriptors=None,
    )


def normalize_samples(samples: Sequence[RawQuantitySample]) -> list[TemperatureEntry]:
    """Map raw samples 1:1 to entries, keeping store order."""
    return [
        TemperatureEntry(
            id=sample.uuid,
            temperature=sample.double_value(DEGREE_CELSIUS),
            start_date=sample.start_date,
            end_date=sample.end_date,
        )
        for sample in samples
    ]


def _as_samples(results: Any) -> list[RawQuantitySample] | None:
    if not isinstance(results, (list, tuple)):
        return None
    if not all(isinstance(item, RawQuantitySample) for item in results):
        return None
    return list(results)


class SampleFetcher:
    """Runs the temperature query and hands entries to the owner thread."""

    def __init__(
        self,
        store: HealthStore,
        sample_type: QuantityType,
        dispatcher: Dispatcher,
    ) -> None:
        self._store = store
        self._sample_type = sample_type
        self._dispatcher = dispatcher

    def read_data(
        self,
        consumer: EntriesConsumer,
        on_error: Callable[[], None] | None = None,
    ) -> None:
        """Issue the query; ``consumer`` later receives the full list.

        ``consumer`` runs on the dispatcher's thread and is not called at all
        when the store reports an error or an unexpected result shape; in
        that case ``on_error`` is posted instead.
        """
        logger.info("reading data")

        def handler(
            _query: SampleQuery,
            results: Sequence[Any] | None,
            error: HealthDataError | None,
        ) -> None:
            samples = _as_samples(results)
            if samples is None:
                logger.warning("Error reading data: %s", error)
                self._report(on_error)
                return
            try:
                entries = normalize_samples(samples)
            except ValueError as exc:
                logger.warning("Error reading data: %s", exc)
                self._report(on_error)
                return
            logger.debug("Fetched %d samples", len(entries))
            self._dispatcher.post(lambda: consumer(entries))

        self._store.execute(build_query(self._sample_type, handler))

    def _report(self, on_error: Callable[[], None] | None) -> None:
        if on_error is not None:
            self._dispatcher.post(on_error)
