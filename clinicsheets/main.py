from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, File, HTTPException, Request, UploadFile

from .config import Settings, configure_logging
from .fetch import SheetFetcher
from .models import HealthResponse, NormalizeResponse, RefreshResponse, RenderedTable, ViewName, ViewResponse
from .normalize import decode_csv_bytes, parse_csv_table
from .views import DashboardState


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        state = DashboardState(settings, SheetFetcher(settings.request_timeout, transport=transport))
        app.state.dashboard = state
        state.switch_view(ViewName.home)
        initial = None
        if settings.refresh_on_startup:
            initial = asyncio.create_task(state.refresh())
        try:
            yield
        finally:
            if initial is not None and not initial.done():
                initial.cancel()
            await state.close()

    app = FastAPI(
        title="clinic-sheets",
        description="Doctor directory and patient database served from published spreadsheet exports",
        version="0.1.0",
        lifespan=lifespan,
    )

    def dashboard(request: Request) -> DashboardState:
        return request.app.state.dashboard

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": True}

    @app.get("/views/{view}", response_model=ViewResponse)
    async def switch_view(view: ViewName, request: Request):
        state = dashboard(request)
        table = state.switch_view(view)
        return ViewResponse(view=view, polling=state.polling, table=table)

    @app.get("/views/{view}/table", response_model=RenderedTable)
    async def search_view(view: ViewName, request: Request, q: str = ""):
        if view is ViewName.home:
            raise HTTPException(status_code=404, detail="The home view has no table")
        return dashboard(request).search(view, q)

    @app.post("/refresh", response_model=RefreshResponse)
    async def refresh(request: Request):
        state = dashboard(request)
        await state.refresh()
        return RefreshResponse(doctors=len(state.doctors), patients=len(state.patients))

    @app.post("/normalize", response_model=NormalizeResponse)
    async def normalize_csv(file: UploadFile = File(...)):
        if not file.filename or not file.filename.lower().endswith(".csv"):
            raise HTTPException(status_code=422, detail="Only CSV files are supported")

        raw = await file.read()
        text, encoding = decode_csv_bytes(raw)
        header, records = parse_csv_table(text)
        return {
            "encoding": encoding,
            "header": header,
            "records": records,
            "summary": {"rows": len(records), "columns": len(header)},
        }

    return app


app = create_app()
