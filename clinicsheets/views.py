from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Type

from pydantic import BaseModel

from .config import Settings
from .fetch import FetchError, SheetFetcher
from .models import DoctorRecord, PatientRecord, RenderedTable, ViewName
from .normalize import Record
from .poller import Poller, PollerState
from .rules import DOCTOR_FIELDS, EMPTY_MESSAGES, LOADING_MESSAGES, PATIENT_FIELDS
from .search import filter_records

logger = logging.getLogger(__name__)

VIEW_FIELDS: Dict[ViewName, Sequence[str]] = {
    ViewName.doctors: DOCTOR_FIELDS,
    ViewName.patients: PATIENT_FIELDS,
}

VIEW_MODELS: Dict[ViewName, Type[BaseModel]] = {
    ViewName.doctors: DoctorRecord,
    ViewName.patients: PatientRecord,
}


def render_table(view: ViewName, records: Sequence[Record], loading: bool = False) -> RenderedTable:
    """
    Map records to display rows using the view's fixed field list.

    An empty sequence renders the view's placeholder message instead of rows:
    the loading message while data is still being fetched for an empty
    dashboard, otherwise the "no data" message.
    """
    if view not in VIEW_FIELDS:
        raise ValueError(f"View {view.value!r} has no table")

    columns = list(VIEW_FIELDS[view])
    if not records:
        messages = LOADING_MESSAGES if loading else EMPTY_MESSAGES
        return RenderedTable(view=view, columns=columns, message=messages[view.value])

    model = VIEW_MODELS[view]
    rows = []
    for record in records:
        typed = model.model_validate(record)
        rows.append([getattr(typed, name) for name in columns])
    return RenderedTable(view=view, columns=columns, rows=rows)


class DashboardState:
    """
    Datasets, active view and polling lifecycle of one dashboard.

    Data views keep the poller running; the home view stops it.
    """

    def __init__(self, settings: Settings, fetcher: SheetFetcher):
        self.settings = settings
        self.fetcher = fetcher
        self.doctors: List[Record] = []
        self.patients: List[Record] = []
        self.active_view = ViewName.home
        self.loaded = False
        self.refreshing = False
        self.poller = Poller(self.refresh, settings.polling_interval)

    @property
    def polling(self) -> bool:
        return self.poller.state is PollerState.POLLING

    @property
    def loading(self) -> bool:
        """True before the first load, or while a refresh runs with both datasets empty."""
        if not self.loaded:
            return True
        return self.refreshing and not self.doctors and not self.patients

    def records_for(self, view: ViewName) -> List[Record]:
        if view is ViewName.doctors:
            return self.doctors
        if view is ViewName.patients:
            return self.patients
        raise ValueError(f"View {view.value!r} has no records")

    def table(self, view: ViewName, query: str = "") -> RenderedTable:
        records = self.records_for(view)
        if query.strip():
            records = filter_records(query, records)
        return render_table(view, records, loading=self.loading)

    def switch_view(self, view: ViewName) -> Optional[RenderedTable]:
        self.active_view = view
        if view is ViewName.home:
            self.poller.stop()
            return None
        self.poller.start()
        return self.table(view)

    def search(self, view: ViewName, query: str) -> RenderedTable:
        return self.table(view, query)

    async def _load(self, url: str) -> List[Record]:
        try:
            return await self.fetcher.fetch_records(url)
        except FetchError as exc:
            logger.error("Failed to fetch data: %s", exc)
            return []

    async def refresh(self) -> None:
        self.refreshing = True
        try:
            # A failed fetch empties its dataset
            self.doctors, self.patients = await asyncio.gather(
                self._load(self.settings.doctors_url),
                self._load(self.settings.patients_url),
            )
        finally:
            self.refreshing = False
        self.loaded = True
        logger.debug("Loaded %d doctors, %d patients", len(self.doctors), len(self.patients))

    async def close(self) -> None:
        self.poller.stop()
        await self.fetcher.aclose()
