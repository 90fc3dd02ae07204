"""Lifecycle of reported works and profiles.

Works and profiles follow the same rules and differ only in their collection,
URL pattern, status set and wording, captured by :class:`ReportKind`.
Reports move ``pending_review -> in_progress -> <verdict>``; any valid target
status is accepted, and every status change also marks the report approved.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from msga.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from msga.db.store import PROFILES, WORKS, Document, DocumentStore, next_id
from msga.services.users import ROLE_ADMIN, SH_PROFILE_URL_PATTERN

logger = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"
PENDING_REVIEW = "pending_review"
IN_PROGRESS = "in_progress"

PROTECTED_FIELDS = ("approved", "status")


@dataclass(frozen=True, slots=True)
class ReportKind:
    collection: str
    event_prefix: str
    label: str
    url_pattern: re.Pattern[str]
    statuses: tuple[str, ...]

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found. Please check the ID and try again."

    @property
    def exists_message(self) -> str:
        return f"This {self.label.lower()} has already been reported."

    def default_title(self, report_id: int) -> str:
        return f"Reported {self.label} {report_id}"


WORK = ReportKind(
    collection=WORKS,
    event_prefix="work",
    label="Work",
    url_pattern=re.compile(r"^https://www\.scribblehub\.com/series/\d+"),
    statuses=(PENDING_REVIEW, IN_PROGRESS, "confirmed", "taken_down", "original"),
)

PROFILE = ReportKind(
    collection=PROFILES,
    event_prefix="profile",
    label="Profile",
    url_pattern=SH_PROFILE_URL_PATTERN,
    statuses=(PENDING_REVIEW, IN_PROGRESS, "confirmed_violator", "false_positive"),
)


@dataclass(slots=True)
class ReportEvent:
    """A change to a report that should be announced to webhooks."""

    event_type: str
    report: Document
    updated_by: str


class ReportService:
    """Create, review, edit and delete reports of one kind."""

    def __init__(self, store: DocumentStore, kind: ReportKind) -> None:
        self._store = store
        self.kind = kind

    def _event(self, action: str, report: Document, caller: dict[str, Any] | None) -> ReportEvent:
        updated_by = caller["username"] if caller else ANONYMOUS
        return ReportEvent(f"{self.kind.event_prefix}_{action}", report, updated_by)

    async def _load(self, report_id: int) -> tuple[dict[str, Document], Document]:
        reports = await self._store.get(self.kind.collection)
        report = reports.get(str(report_id))
        if report is None:
            raise NotFoundError(self.kind.not_found_message)
        return reports, report

    def _check_url(self, url: str | None, reports: dict[str, Document], exclude_id: int | None = None) -> str:
        """Return the trimmed URL, or raise if it is missing, malformed or taken."""

        submitted_url = (url or "").strip()
        if not submitted_url:
            raise ValidationError(f"{self.kind.label} URL is required.")
        if not self.kind.url_pattern.match(submitted_url):
            raise ValidationError(f"Invalid ScribbleHub {self.kind.label.lower()} URL format.")
        for key, other in reports.items():
            if exclude_id is not None and int(key) == exclude_id:
                continue
            if (other.get("url") or "").strip() == submitted_url:
                raise ConflictError(self.kind.exists_message)
        return submitted_url

    async def list_all(self) -> list[Document]:
        reports = await self._store.get(self.kind.collection)
        healed = []
        for key, report in reports.items():
            # Reviewed reports must be approved; repair records written before that rule held.
            if not report.get("approved") and report.get("status") != PENDING_REVIEW:
                report["approved"] = True
                healed.append(key)
        if healed:
            logger.warning("Auto-approved %d reviewed %s with approved=false: %s", len(healed), self.kind.collection, healed)
            await self._store.set(self.kind.collection, reports)
        return [reports[key] for key in sorted(reports, key=int)]

    async def get(self, report_id: int) -> Document:
        _, report = await self._load(report_id)
        return report

    async def create(
        self,
        url: str | None,
        title: str | None = None,
        reason: str | None = None,
        proofs: list[str] | None = None,
        additional_info: str | None = None,
        caller: dict[str, Any] | None = None,
    ) -> tuple[Document, ReportEvent]:
        reporter = caller["username"] if caller else ANONYMOUS
        logger.info("New %s report submitted: url=%s reporter=%s", self.kind.event_prefix, url, reporter)

        reports = await self._store.get(self.kind.collection)
        submitted_url = self._check_url(url, reports)

        report_id = next_id(reports)
        report = {
            "id": report_id,
            "title": title or self.kind.default_title(report_id),
            "url": submitted_url,
            "status": PENDING_REVIEW,
            "reporter": reporter,
            "reason": reason or "",
            "proofs": [proof for proof in proofs or [] if proof],
            "additionalInfo": additional_info or "",
            "dateReported": date.today().isoformat(),
            "approved": False,
        }
        reports[str(report_id)] = report
        await self._store.set(self.kind.collection, reports)
        logger.info("%s report %s created by %s", self.kind.label, report_id, reporter)
        return report, self._event("created", report, caller)

    async def update_status(
        self, report_id: int, status: str | None, caller: dict[str, Any] | None = None
    ) -> tuple[Document, ReportEvent]:
        reports, report = await self._load(report_id)
        if status not in self.kind.statuses:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(self.kind.statuses)}")
        report["status"] = status
        report["approved"] = True
        await self._store.set(self.kind.collection, reports)
        logger.info("%s %s status set to %s", self.kind.label, report_id, status)
        return report, self._event("updated", report, caller)

    async def approve(self, report_id: int, caller: dict[str, Any] | None = None) -> tuple[Document, ReportEvent]:
        reports, report = await self._load(report_id)
        report["approved"] = True
        report["status"] = IN_PROGRESS
        await self._store.set(self.kind.collection, reports)
        logger.info("%s %s approved", self.kind.label, report_id)
        return report, self._event("updated", report, caller)

    async def update_fields(
        self, report_id: int, patch: dict[str, Any], caller: dict[str, Any]
    ) -> tuple[Document, ReportEvent]:
        reports, report = await self._load(report_id)
        if caller.get("role") != ROLE_ADMIN and any(field in patch for field in PROTECTED_FIELDS):
            raise ForbiddenError("You are not authorized to modify this field.")

        changes = {key: value for key, value in patch.items() if key != "id"}
        if "url" in changes:
            changes["url"] = self._check_url(changes["url"], reports, exclude_id=report_id)
        if "status" in changes:
            if changes["status"] not in self.kind.statuses:
                raise ValidationError(f"Invalid status. Must be one of: {', '.join(self.kind.statuses)}")
            # A reviewed status implies approval unless the caller set it explicitly.
            changes.setdefault("approved", True)
        if all(report.get(key) == value for key, value in changes.items()):
            logger.info("%s %s update by %s changed nothing", self.kind.label, report_id, caller.get("username"))
        report.update(changes)
        await self._store.set(self.kind.collection, reports)
        logger.info("%s %s updated fields %s", self.kind.label, report_id, sorted(changes))
        return report, self._event("updated", report, caller)

    async def delete(self, report_id: int, caller: dict[str, Any]) -> tuple[dict[str, Any], ReportEvent]:
        if caller.get("role") != ROLE_ADMIN:
            raise ForbiddenError("You are not authorized to delete this entry.")
        reports, report = await self._load(report_id)
        del reports[str(report_id)]
        await self._store.set(self.kind.collection, reports)
        logger.info("%s %s deleted by %s", self.kind.label, report_id, caller.get("username"))
        return {"success": True, "deletedId": report_id}, self._event("deleted", report, caller)
