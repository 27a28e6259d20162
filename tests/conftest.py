from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import pytest

from temperature_monitor.model import RawQuantitySample, TemperatureEntry
from temperature_monitor.sample_types import SLEEPING_WRIST_TEMPERATURE
from temperature_monitor.sources.base import (
    AuthorizationCompletion,
    AuthorizationDeniedError,
    HealthDataError,
    HealthStore,
    SampleQuery,
)

T0 = datetime(2022, 10, 29, 2, 0, tzinfo=timezone.utc)

EXPORT_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<HealthData locale="en_US">
 <ExportDate value="2022-11-01 09:00:00 +0100"/>
 <Record type="{SLEEPING_WRIST_TEMPERATURE}" sourceName="Watch" unit="degC"
  startDate="2022-10-30 01:10:00 +0100" endDate="2022-10-30 07:05:00 +0100" value="36.21">
  <MetadataEntry key="HKAlgorithmVersion" value="1"/>
 </Record>
 <Record type="HKQuantityTypeIdentifierHeartRate" sourceName="Watch" unit="count/min"
  startDate="2022-10-30 02:00:00 +0100" endDate="2022-10-30 02:00:00 +0100" value="52"/>
 <Record type="{SLEEPING_WRIST_TEMPERATURE}" sourceName="Watch" unit="degC"
  startDate="2022-10-28 23:40:00 +0100" endDate="2022-10-29 06:55:00 +0100" value="35.87"/>
 <Record type="{SLEEPING_WRIST_TEMPERATURE}" sourceName="Watch" unit="degF"
  startDate="2022-10-31 00:30:00 +0100" endDate="2022-10-31 06:30:00 +0100" value="98.6"/>
</HealthData>
"""


def make_sample(
    value: float,
    hours: int = 0,
    unit: str = "degC",
    uuid: UUID | None = None,
) -> RawQuantitySample:
    start = T0 + timedelta(hours=hours)
    return RawQuantitySample(
        uuid=uuid or uuid4(),
        sample_type=SLEEPING_WRIST_TEMPERATURE,
        value=value,
        unit=unit,
        start_date=start,
        end_date=start + timedelta(hours=1),
    )


def make_entry(temperature: float, hours: int = 0) -> TemperatureEntry:
    start = T0 + timedelta(hours=hours)
    return TemperatureEntry(
        id=uuid4(),
        temperature=temperature,
        start_date=start,
        end_date=start + timedelta(hours=1),
    )


class FakeHealthStore(HealthStore):
    """Completes synchronously unless ``defer_queries`` is set."""

    def __init__(
        self,
        results: Sequence[Any] | None = (),
        available: bool = True,
        authorized: bool = True,
        error: HealthDataError | None = None,
        defer_queries: bool = False,
    ) -> None:
        self.results = results
        self.available = available
        self.authorized = authorized
        self.error = error
        self.defer_queries = defer_queries
        self.auth_requests: list[tuple[set[str], set[str]]] = []
        self.queries: list[SampleQuery] = []

    def is_health_data_available(self) -> bool:
        return self.available

    def request_authorization(
        self,
        share: set[str],
        read: set[str],
        completion: AuthorizationCompletion,
    ) -> None:
        self.auth_requests.append((share, read))
        if self.authorized:
            completion(True, None)
        else:
            completion(False, AuthorizationDeniedError("denied"))

    def execute(self, query: SampleQuery) -> None:
        self.queries.append(query)
        if not self.defer_queries:
            query.handler(query, self.results, self.error)


@pytest.fixture
def samples() -> list[RawQuantitySample]:
    return [make_sample(35.2, 0), make_sample(37.8, 24), make_sample(36.0, 48)]
