"""Endpoints for reported works and profiles.

Both resources share the same routes and rules; :func:`build_router` creates
one router per :class:`~msga.services.reports.ReportKind`.
"""
from __future__ import annotations

from typing import Callable

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends, status

from msga.core.dependencies import (
    Claims,
    get_current_user,
    get_optional_user,
    get_secret_manager,
    get_store,
    get_webhook_transport,
    require_admin,
)
from msga.core.security import SecretManager
from msga.db.store import DocumentStore
from msga.schemas.report import ReportCreate, ReportDeleteResponse, ReportRead, ReportStatusUpdate, ReportUpdate
from msga.services.notifications import notify_report_event
from msga.services.reports import PROFILE, WORK, ReportEvent, ReportKind, ReportService

Announce = Callable[[ReportEvent], None]


async def get_announcer(
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_store),
    secret_manager: SecretManager = Depends(get_secret_manager),
    transport: httpx.AsyncBaseTransport | None = Depends(get_webhook_transport),
) -> Announce:
    """Schedule webhook delivery of a report event after the response is sent."""

    def announce(event: ReportEvent) -> None:
        background_tasks.add_task(
            notify_report_event,
            store,
            secret_manager,
            event.event_type,
            event.report,
            event.updated_by,
            transport=transport,
        )

    return announce


def build_router(kind: ReportKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.collection}", tags=[kind.collection])

    async def get_service(store: DocumentStore = Depends(get_store)) -> ReportService:
        return ReportService(store, kind)

    @router.get("", response_model=list[ReportRead])
    async def list_reports(service: ReportService = Depends(get_service)) -> list[ReportRead]:
        return [ReportRead.model_validate(report) for report in await service.list_all()]

    @router.get("/{report_id}", response_model=ReportRead)
    async def get_report(report_id: int, service: ReportService = Depends(get_service)) -> ReportRead:
        return ReportRead.model_validate(await service.get(report_id))

    @router.post("", response_model=ReportRead, status_code=status.HTTP_201_CREATED)
    async def create_report(
        payload: ReportCreate,
        service: ReportService = Depends(get_service),
        announce: Announce = Depends(get_announcer),
        current_user: Claims | None = Depends(get_optional_user),
    ) -> ReportRead:
        report, event = await service.create(
            payload.url,
            title=payload.title,
            reason=payload.reason,
            proofs=payload.proofs,
            additional_info=payload.additional_info,
            caller=current_user,
        )
        announce(event)
        return ReportRead.model_validate(report)

    @router.put("/{report_id}/status", response_model=ReportRead)
    async def update_report_status(
        report_id: int,
        payload: ReportStatusUpdate,
        service: ReportService = Depends(get_service),
        announce: Announce = Depends(get_announcer),
        current_user: Claims = Depends(get_current_user),
    ) -> ReportRead:
        report, event = await service.update_status(report_id, payload.status, current_user)
        announce(event)
        return ReportRead.model_validate(report)

    @router.put("/{report_id}/approve", response_model=ReportRead)
    async def approve_report(
        report_id: int,
        service: ReportService = Depends(get_service),
        announce: Announce = Depends(get_announcer),
        current_user: Claims = Depends(get_current_user),
    ) -> ReportRead:
        report, event = await service.approve(report_id, current_user)
        announce(event)
        return ReportRead.model_validate(report)

    @router.put("/{report_id}", response_model=ReportRead)
    async def update_report(
        report_id: int,
        payload: ReportUpdate,
        service: ReportService = Depends(get_service),
        announce: Announce = Depends(get_announcer),
        current_user: Claims = Depends(get_current_user),
    ) -> ReportRead:
        report, event = await service.update_fields(report_id, payload.patch(), current_user)
        announce(event)
        return ReportRead.model_validate(report)

    @router.delete("/{report_id}", response_model=ReportDeleteResponse)
    async def delete_report(
        report_id: int,
        service: ReportService = Depends(get_service),
        announce: Announce = Depends(get_announcer),
        current_user: Claims = Depends(require_admin),
    ) -> ReportDeleteResponse:
        result, event = await service.delete(report_id, current_user)
        announce(event)
        return ReportDeleteResponse.model_validate(result)

    return router


works_router = build_router(WORK)
profiles_router = build_router(PROFILE)
