"""Tests for the report lifecycle rules shared by works and profiles."""
import pytest

from msga.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from msga.db.store import WORKS
from msga.services.reports import PROFILE, WORK, ReportService

WORK_URL = "https://www.scribblehub.com/series/12345/some-story/"
PROFILE_URL = "https://www.scribblehub.com/profile/777/suspect/"

ADMIN = {"id": 0, "username": "admin", "role": "admin"}
USER = {"id": 1, "username": "reader", "role": "user"}


@pytest.fixture
def works(store) -> ReportService:
    return ReportService(store, WORK)


@pytest.fixture
def profiles(store) -> ReportService:
    return ReportService(store, PROFILE)


class TestCreate:
    @pytest.mark.asyncio
    async def test_defaults(self, works):
        report, event = await works.create(f"  {WORK_URL} ", proofs=["a", "", None])

        assert report["id"] == 1
        assert report["url"] == WORK_URL
        assert report["title"] == "Reported Work 1"
        assert report["status"] == "pending_review"
        assert report["reporter"] == "Anonymous"
        assert report["proofs"] == ["a"]
        assert report["approved"] is False
        assert event.event_type == "work_created"
        assert event.updated_by == "Anonymous"

    @pytest.mark.asyncio
    async def test_reporter_from_caller(self, profiles):
        report, event = await profiles.create(PROFILE_URL, title="Suspect", caller=USER)

        assert report["reporter"] == "reader"
        assert event.event_type == "profile_created"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_missing_url(self, works, url):
        with pytest.raises(ValidationError):
            await works.create(url)

    @pytest.mark.asyncio
    async def test_url_must_match_kind(self, works, profiles):
        with pytest.raises(ValidationError):
            await works.create(PROFILE_URL)
        with pytest.raises(ValidationError):
            await profiles.create(WORK_URL)

    @pytest.mark.asyncio
    async def test_duplicate_url(self, works):
        await works.create(WORK_URL)
        with pytest.raises(ConflictError):
            await works.create(WORK_URL + "  ")

    @pytest.mark.asyncio
    async def test_id_follows_max_existing(self, store, works):
        await store.set(WORKS, {"9": {"id": 9, "url": "https://www.scribblehub.com/series/9", "status": "pending_review"}})
        report, _ = await works.create(WORK_URL)
        assert report["id"] == 10


class TestStatusAndApprove:
    @pytest.mark.asyncio
    async def test_status_change_forces_approval(self, works):
        await works.create(WORK_URL)
        report, event = await works.update_status(1, "taken_down", USER)

        assert report["status"] == "taken_down"
        assert report["approved"] is True
        assert event.event_type == "work_updated"
        assert event.updated_by == "reader"

    @pytest.mark.asyncio
    async def test_invalid_status_for_kind(self, works, profiles):
        await works.create(WORK_URL)
        await profiles.create(PROFILE_URL)
        with pytest.raises(ValidationError):
            await works.update_status(1, "false_positive")
        with pytest.raises(ValidationError):
            await profiles.update_status(1, "taken_down")

    @pytest.mark.asyncio
    async def test_backward_transition_accepted(self, profiles):
        await profiles.create(PROFILE_URL)
        await profiles.update_status(1, "confirmed_violator")
        report, _ = await profiles.update_status(1, "pending_review")
        assert report["status"] == "pending_review"
        assert report["approved"] is True

    @pytest.mark.asyncio
    async def test_approve(self, works):
        await works.create(WORK_URL)
        report, _ = await works.approve(1)
        assert report["approved"] is True
        assert report["status"] == "in_progress"

    @pytest.mark.asyncio
    async def test_missing_report(self, works):
        with pytest.raises(NotFoundError):
            await works.update_status(5, "confirmed")
        with pytest.raises(NotFoundError):
            await works.approve(5)


class TestUpdateFields:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, value", [("status", "confirmed"), ("approved", True)])
    async def test_user_cannot_write_protected_fields(self, works, field, value):
        await works.create(WORK_URL)
        with pytest.raises(ForbiddenError):
            await works.update_fields(1, {"title": "x", field: value}, USER)

    @pytest.mark.asyncio
    async def test_user_can_write_other_fields(self, works):
        await works.create(WORK_URL)
        report, event = await works.update_fields(1, {"title": "Better title", "reason": "copied"}, USER)

        assert report["title"] == "Better title"
        assert report["reason"] == "copied"
        assert report["approved"] is False
        assert event.event_type == "work_updated"

    @pytest.mark.asyncio
    async def test_admin_can_write_protected_fields(self, works):
        await works.create(WORK_URL)
        report, _ = await works.update_fields(1, {"status": "original", "approved": True}, ADMIN)
        assert report["status"] == "original"

    @pytest.mark.asyncio
    async def test_status_edit_implies_approval(self, works):
        await works.create(WORK_URL)
        report, _ = await works.update_fields(1, {"status": "confirmed"}, ADMIN)

        assert report["status"] == "confirmed"
        assert report["approved"] is True
        assert (await works.get(1))["approved"] is True

    @pytest.mark.asyncio
    async def test_status_edit_keeps_explicit_approval(self, works):
        await works.create(WORK_URL)
        report, _ = await works.update_fields(1, {"status": "confirmed", "approved": False}, ADMIN)
        assert report["approved"] is False

    @pytest.mark.asyncio
    async def test_status_edit_rejects_unknown_status(self, works):
        await works.create(WORK_URL)
        with pytest.raises(ValidationError):
            await works.update_fields(1, {"status": "bogus"}, ADMIN)

        assert (await works.get(1))["status"] == "pending_review"

    @pytest.mark.asyncio
    async def test_noop_patch_succeeds(self, works, caplog):
        created, _ = await works.create(WORK_URL, title="Same")
        with caplog.at_level("INFO", logger="msga.services.reports"):
            report, _ = await works.update_fields(1, {"title": "Same"}, USER)

        assert report == created
        assert "changed nothing" in caplog.text

    @pytest.mark.asyncio
    async def test_id_cannot_be_rewritten(self, works):
        await works.create(WORK_URL)
        report, _ = await works.update_fields(1, {"id": 42}, ADMIN)
        assert report["id"] == 1

    @pytest.mark.asyncio
    async def test_url_change_is_validated(self, works):
        await works.create(WORK_URL)
        await works.create("https://www.scribblehub.com/series/2")
        with pytest.raises(ConflictError):
            await works.update_fields(2, {"url": WORK_URL}, ADMIN)
        with pytest.raises(ValidationError):
            await works.update_fields(2, {"url": "https://example.com"}, ADMIN)


class TestDeleteAndList:
    @pytest.mark.asyncio
    async def test_only_admin_deletes(self, works):
        await works.create(WORK_URL)
        with pytest.raises(ForbiddenError):
            await works.delete(1, USER)

        result, event = await works.delete(1, ADMIN)
        assert result == {"success": True, "deletedId": 1}
        assert event.event_type == "work_deleted"
        with pytest.raises(NotFoundError):
            await works.get(1)

    @pytest.mark.asyncio
    async def test_delete_missing(self, works):
        with pytest.raises(NotFoundError):
            await works.delete(3, ADMIN)

    @pytest.mark.asyncio
    async def test_list_heals_reviewed_unapproved_reports(self, store, works):
        await store.set(
            WORKS,
            {
                "2": {"id": 2, "url": "u2", "status": "confirmed", "approved": False},
                "1": {"id": 1, "url": "u1", "status": "pending_review", "approved": False},
            },
        )

        listed = await works.list_all()

        assert [r["id"] for r in listed] == [1, 2]
        assert listed[0]["approved"] is False
        assert listed[1]["approved"] is True
        assert (await store.get(WORKS))["2"]["approved"] is True
