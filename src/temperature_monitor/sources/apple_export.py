"""Almacén de salud respaldado por una exportación de Apple Health."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
import zipfile
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any
from uuid import NAMESPACE_URL, UUID, uuid5

from temperature_monitor.model import RawQuantitySample
from temperature_monitor.sample_types import known_identifiers
from temperature_monitor.sources.base import (
    NO_LIMIT,
    AuthorizationCompletion,
    AuthorizationDeniedError,
    HealthDataError,
    HealthDataUnavailableError,
    HealthStore,
    SampleQuery,
)

logger = logging.getLogger(__name__)

_EXPORT_XML = "export.xml"
_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%dT%H:%M:%S%z")
_IDENTITY_FIELDS = (
    "type",
    "sourceName",
    "sourceVersion",
    "device",
    "creationDate",
    "startDate",
    "endDate",
    "value",
    "unit",
)


@dataclass(frozen=True)
class ExportPaths:
    """Location of an Apple Health export (``export.zip`` or ``export.xml``).

    ``root`` is None when no export has been configured.
    """

    root: Path | None


class AppleHealthExportStore(HealthStore):
    """Read-only store over the ``Record`` elements of an export.

    Completions run on a single worker thread owned by the store.
    """

    def __init__(self, paths: ExportPaths) -> None:
        """Create a store.

        Args:
            paths: Export location.
        """
        self._paths = paths
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="health-store"
        )

    def is_health_data_available(self) -> bool:
        export = self._export_file()
        return export is not None and export.is_file()

    def request_authorization(
        self,
        share: set[str],
        read: set[str],
        completion: AuthorizationCompletion,
    ) -> Future[None]:
        return self._executor.submit(self._authorize, set(share), set(read), completion)

    def execute(self, query: SampleQuery) -> Future[None]:
        return self._executor.submit(self._run_query, query)

    def close(self, wait: bool = True) -> None:
        """Stop the worker thread.

        Args:
            wait: Block until queued work has finished. When False, queued
                work is cancelled and a query already running is abandoned.
        """
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def _authorize(
        self,
        share: set[str],
        read: set[str],
        completion: AuthorizationCompletion,
    ) -> None:
        if not self.is_health_data_available():
            completion(False, HealthDataUnavailableError(self._describe_root()))
            return
        if share:
            completion(
                False,
                AuthorizationDeniedError(
                    f"Export store is read-only: {sorted(share)}"
                ),
            )
            return
        unknown = read - known_identifiers()
        if unknown:
            completion(
                False, AuthorizationDeniedError(f"Unknown types: {sorted(unknown)}")
            )
            return
        completion(True, None)

    def _run_query(self, query: SampleQuery) -> None:
        try:
            samples = self.read_samples(query)
        except HealthDataError as exc:
            query.handler(query, None, exc)
            return
        except (OSError, ET.ParseError, zipfile.BadZipFile, ValueError) as exc:
            logger.debug("Query for %s failed", query.sample_type, exc_info=True)
            query.handler(query, None, HealthDataError(str(exc)))
            return
        query.handler(query, samples, None)

    def read_samples(self, query: SampleQuery) -> list[RawQuantitySample]:
        """Collect the samples matching ``query`` synchronously.

        Raises:
            HealthDataUnavailableError: If the export does not exist.
            ValueError: If a matching record is malformed.
        """
        if not self.is_health_data_available():
            raise HealthDataUnavailableError(self._describe_root())

        out: list[RawQuantitySample] = []
        with self._open_xml() as stream:
            for attrs in _iter_records(stream, query.sample_type):
                sample = _record_to_sample(attrs)
                if query.predicate is not None and not query.predicate(sample):
                    continue
                out.append(sample)
                if query.limit != NO_LIMIT and not query.sort_descriptors:
                    if len(out) >= query.limit:
                        break

        for descriptor in reversed(query.sort_descriptors or ()):
            out.sort(
                key=lambda s: getattr(s, descriptor.key),
                reverse=not descriptor.ascending,
            )
        if query.limit != NO_LIMIT:
            out = out[: query.limit]
        return out

    def _describe_root(self) -> str:
        if self._paths.root is None:
            return "no export configured"
        return str(self._paths.root)

    def _export_file(self) -> Path | None:
        root = self._paths.root
        if root is None:
            return None
        if root.is_dir():
            return root / _EXPORT_XML
        return root

    @contextmanager
    def _open_xml(self) -> Iterator[IO[bytes]]:
        root = self._export_file()
        if root is None:
            raise HealthDataUnavailableError(self._describe_root())
        if zipfile.is_zipfile(root):
            with zipfile.ZipFile(root) as zf:
                name = _find_export_member(zf)
                with zf.open(name) as stream:
                    yield stream
        else:
            with root.open("rb") as stream:
                yield stream


def _find_export_member(zf: zipfile.ZipFile) -> str:
    """Return the export.xml member (usually apple_health_export/export.xml)."""
    for name in zf.namelist():
        if name == _EXPORT_XML or name.endswith("/" + _EXPORT_XML):
            return name
    raise FileNotFoundError(f"No {_EXPORT_XML} in {zf.filename}")


def _iter_records(stream: IO[bytes], sample_type: str) -> Iterator[dict[str, str]]:
    """Yield attributes of matching top-level ``Record`` elements.

    Every finished top-level element (``Record``, ``Workout``,
    ``ActivitySummary``, ...) is dropped from the tree so memory stays flat on
    multi-GB exports.
    """
    root: ET.Element | None = None
    depth = 0
    for event, elem in ET.iterparse(stream, events=("start", "end")):
        if event == "start":
            if root is None:
                root = elem
            depth += 1
            continue
        depth -= 1
        if depth != 1:
            continue
        if elem.tag == "Record" and elem.get("type") == sample_type:
            yield dict(elem.attrib)
        if root is not None:
            root.clear()


def _record_to_sample(attrs: dict[str, Any]) -> RawQuantitySample:
    sample_type = str(attrs.get("type", ""))
    value = attrs.get("value")
    if value is None:
        raise ValueError(f"Record without value: {sample_type}")
    start = _parse_date(attrs.get("startDate"))
    end = _parse_date(attrs.get("endDate"))
    return RawQuantitySample(
        uuid=_record_uuid(attrs),
        sample_type=sample_type,
        value=float(value),
        unit=str(attrs.get("unit", "degC")),
        start_date=start,
        end_date=end,
    )


def _record_uuid(attrs: dict[str, Any]) -> UUID:
    """Exports carry no sample UUID; derive a stable one from the record."""
    key = "|".join(
        str(attrs.get(field, ""))
        for field in _IDENTITY_FIELDS
    )
    return uuid5(NAMESPACE_URL, f"x-apple-health-record:{key}")


def _parse_date(raw: Any) -> datetime:
    """Parse Apple export dates ("2024-01-15 08:23:44 -0500")."""
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("Record without date")
    text = raw.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized date: {raw!r}")
