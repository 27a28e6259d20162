"""Controlador de la pantalla: autorización, lectura y estado."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from temperature_monitor.dispatch import Dispatcher
from temperature_monitor.model import TemperatureEntry
from temperature_monitor.presentation import chart_domain, sorted_for_display
from temperature_monitor.reader import SampleFetcher
from temperature_monitor.sample_types import SLEEPING_WRIST_TEMPERATURE, quantity_type
from temperature_monitor.sources.base import HealthDataError, HealthStore

logger = logging.getLogger(__name__)


class UnsupportedPlatformError(RuntimeError):
    """The health store does not define the sleeping wrist temperature type."""


class LoadStatus(enum.Enum):
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class ScreenState:
    """State owned by the screen; only touched on the owner thread."""

    entries: list[TemperatureEntry] = field(default_factory=list)
    status: LoadStatus = LoadStatus.IDLE

    @property
    def has_data(self) -> bool:
        return len(self.entries) > 0


class TemperatureScreenController:
    """Drives appear -> authorize -> fetch for the temperature screen."""

    def __init__(
        self,
        store: HealthStore,
        dispatcher: Dispatcher,
        on_change: Callable[[ScreenState], None] | None = None,
        sample_type_id: str = SLEEPING_WRIST_TEMPERATURE,
    ) -> None:
        """Create the controller.

        Args:
            store: Health store to read from.
            dispatcher: Hands results back to the owner thread.
            on_change: Called on the owner thread after every state change.
            sample_type_id: Quantity type to read.

        Raises:
            UnsupportedPlatformError: If the type is not defined.
        """
        sample_type = quantity_type(sample_type_id)
        if sample_type is None:
            raise UnsupportedPlatformError(
                f"*** Sample type {sample_type_id} is not available ***"
            )
        self.state = ScreenState()
        self._store = store
        self._dispatcher = dispatcher
        self._sample_type = sample_type
        self._fetcher = SampleFetcher(store, sample_type, dispatcher)
        self._on_change = on_change

    def on_appear(self) -> None:
        self.ask_permission()

    def retry(self) -> None:
        """User asked to try again: redo the whole authorization step."""
        self.ask_permission()

    def ask_permission(self) -> None:
        if not self._store.is_health_data_available():
            logger.warning("Health data is not available")
            self._set_status(LoadStatus.FAILED)
            return

        self._set_status(LoadStatus.AUTHORIZING)
        self._store.request_authorization(
            share=set(),
            read={self._sample_type.identifier},
            completion=self._on_authorization,
        )

    def _on_authorization(self, success: bool, error: HealthDataError | None) -> None:
        # Store worker thread.
        if not success:
            logger.error("Error! Authorization failed: %s", error)
            self._dispatcher.post(lambda: self._set_status(LoadStatus.FAILED))
            return
        logger.info("Has access to data")
        self._dispatcher.post(lambda: self._set_status(LoadStatus.LOADING))
        self._fetcher.read_data(self._apply_entries, self._on_read_error)

    def _on_read_error(self) -> None:
        self._set_status(LoadStatus.FAILED)

    def _apply_entries(self, entries: list[TemperatureEntry]) -> None:
        self.state.entries = entries
        self._set_status(LoadStatus.LOADED)

    def _set_status(self, status: LoadStatus) -> None:
        self.state.status = status
        if self._on_change is not None:
            self._on_change(self.state)

    @property
    def settled(self) -> bool:
        return self.state.status in (LoadStatus.LOADED, LoadStatus.FAILED)

    def display_entries(self) -> list[TemperatureEntry]:
        return sorted_for_display(self.state.entries)

    def domain(self) -> tuple[float, float]:
        return chart_domain(self.state.entries)
