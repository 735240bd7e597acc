"""Unit tests for lead submission, caps and payouts."""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest
from factories import FIXED_NOW, FakeClock, make_submission, make_terms

from leadmarket.core.config import Settings
from leadmarket.models.connection import Actor, LeadCaps
from leadmarket.models.lead import LeadStatus
from leadmarket.models.rating import RatingProfile
from leadmarket.schemas.leads import CapStatus
from leadmarket.services.connections import ConnectionLifecycle, InMemoryConnectionStore
from leadmarket.services.errors import (
    CapReached,
    ConnectionNotFound,
    InvalidTransition,
    LeadNotFound,
    NotAuthorized,
)
from leadmarket.services.leads import (
    InMemoryLeadStore,
    LeadLedger,
    evaluate_caps,
    format_cap_status,
    month_start,
    week_start,
)
from leadmarket.services.locks import ConnectionLocks


async def _submit_many(
    ledger: LeadLedger, provider: Actor, connection_id: UUID, count: int
) -> list:
    return [
        await ledger.submit_lead(provider, connection_id, make_submission())
        for _ in range(count)
    ]


class TestSubmission:
    """Test lead recording and connection totals."""

    async def test_submit_records_lead_and_totals(
        self,
        ledger: LeadLedger,
        lifecycle: ConnectionLifecycle,
        active_connection,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test payout, lead fields and running totals."""
        result = await ledger.submit_lead(
            provider, active_connection.id, make_submission()
        )

        lead = result.unwrap()
        assert lead.payout == Decimal("50")
        assert lead.status is LeadStatus.PENDING
        assert lead.connection_id == active_connection.id
        assert lead.provider_id == provider.user_id
        assert lead.buyer_id == buyer.user_id
        assert lead.customer_state == "PA"
        assert lead.submitted_at == FIXED_NOW

        connection = (await lifecycle.get_connection(buyer, active_connection.id)).unwrap()
        assert connection.total_leads == 1
        assert connection.total_paid == Decimal("50")
        assert connection.last_lead_at == FIXED_NOW
        assert connection.version == active_connection.version + 1

    async def test_payout_fixed_at_submission(
        self,
        ledger: LeadLedger,
        lifecycle: ConnectionLifecycle,
        active_connection,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test a rate change never reprices earlier leads."""
        first = (
            await ledger.submit_lead(provider, active_connection.id, make_submission())
        ).unwrap()
        (
            await lifecycle.update_terms(buyer, active_connection.id, make_terms(rate="75"))
        ).unwrap()
        second = (
            await ledger.submit_lead(provider, active_connection.id, make_submission())
        ).unwrap()

        leads = (await ledger.list_leads(buyer, active_connection.id)).unwrap()
        stored_first = next(lead for lead in leads if lead.id == first.id)
        assert stored_first.payout == Decimal("50")
        assert second.payout == Decimal("75")

        connection = (await lifecycle.get_connection(buyer, active_connection.id)).unwrap()
        assert connection.total_leads == 2
        assert connection.total_paid == Decimal("125")

    async def test_selected_quote_snapshot_kept(
        self,
        ledger: LeadLedger,
        active_connection,
        provider: Actor,
        rating_engine,
    ) -> None:
        """Test the customer's chosen quote travels with the lead."""
        quote = rating_engine.compute_quotes(
            RatingProfile(age=35, car_model="2019 Honda Civic", state="PA")
        )[0]

        lead = (
            await ledger.submit_lead(
                provider, active_connection.id, make_submission(selected_quote=quote)
            )
        ).unwrap()

        assert lead.selected_quote == quote

    async def test_only_the_connection_provider_submits(
        self,
        ledger: LeadLedger,
        active_connection,
        buyer: Actor,
        provider: Actor,
    ) -> None:
        """Test buyers and other providers are refused."""
        stranger = Actor(user_id=uuid4(), role=provider.role)

        for actor in (buyer, stranger):
            result = await ledger.submit_lead(
                actor, active_connection.id, make_submission()
            )
            assert isinstance(result.unwrap_err(), NotAuthorized)

    async def test_connection_must_be_active(
        self,
        ledger: LeadLedger,
        lifecycle: ConnectionLifecycle,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test pending and terminated connections take no leads."""
        invited = (await lifecycle.invite_provider(buyer, provider.user_id)).unwrap()

        pending = await ledger.submit_lead(provider, invited.id, make_submission())

        error = pending.unwrap_err()
        assert isinstance(error, InvalidTransition)
        assert error.operation == "submit_lead"

        (await lifecycle.accept(provider, invited.id)).unwrap()
        (await lifecycle.terminate(buyer, invited.id)).unwrap()
        terminated = await ledger.submit_lead(provider, invited.id, make_submission())
        assert isinstance(terminated.unwrap_err(), InvalidTransition)

    async def test_unknown_connection(self, ledger: LeadLedger, provider: Actor) -> None:
        """Test submitting to a missing connection."""
        result = await ledger.submit_lead(provider, uuid4(), make_submission())

        assert isinstance(result.unwrap_err(), ConnectionNotFound)


class TestCaps:
    """Test weekly and monthly cap enforcement."""

    async def test_weekly_cap_blocks_sixth_lead(
        self,
        ledger: LeadLedger,
        lifecycle: ConnectionLifecycle,
        activate,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test a 5-lead weekly cap refuses the sixth, changing nothing."""
        connection = await activate(provider, buyer, make_terms(weekly=5))

        accepted = await _submit_many(ledger, provider, connection.id, 5)
        assert all(r.is_ok() for r in accepted)

        refused = await ledger.submit_lead(provider, connection.id, make_submission())

        error = refused.unwrap_err()
        assert isinstance(error, CapReached)
        assert error.limit_type == "weekly"
        assert error.limit == 5
        assert error.count == 5
        assert error.message == "Weekly lead cap reached (5 leads). Resets Monday."

        current = (await lifecycle.get_connection(buyer, connection.id)).unwrap()
        assert current.total_leads == 5
        assert current.total_paid == Decimal("250")
        assert len((await ledger.list_leads(buyer, connection.id)).unwrap()) == 5

    async def test_rejected_leads_still_count(
        self,
        ledger: LeadLedger,
        activate,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test caps count every submission whatever its disposition."""
        connection = await activate(provider, buyer, make_terms(weekly=2))
        leads = [r.unwrap() for r in await _submit_many(ledger, provider, connection.id, 2)]
        for lead in leads:
            (await ledger.update_lead_status(buyer, lead.id, LeadStatus.REJECTED)).unwrap()

        result = await ledger.submit_lead(provider, connection.id, make_submission())

        assert isinstance(result.unwrap_err(), CapReached)

    async def test_weekly_window_resets_monday(
        self,
        ledger: LeadLedger,
        activate,
        provider: Actor,
        buyer: Actor,
        clock: FakeClock,
    ) -> None:
        """Test the weekly count restarts at Monday 00:00."""
        connection = await activate(provider, buyer, make_terms(weekly=1))
        (await ledger.submit_lead(provider, connection.id, make_submission())).unwrap()

        # Sunday 23:59, still the same week
        clock.now = datetime(2025, 6, 22, 23, 59, tzinfo=timezone.utc)
        blocked = await ledger.submit_lead(provider, connection.id, make_submission())
        assert isinstance(blocked.unwrap_err(), CapReached)

        clock.now = datetime(2025, 6, 23, 0, 0, tzinfo=timezone.utc)
        allowed = await ledger.submit_lead(provider, connection.id, make_submission())
        assert allowed.is_ok()

    async def test_monthly_cap_and_reset(
        self,
        ledger: LeadLedger,
        activate,
        provider: Actor,
        buyer: Actor,
        clock: FakeClock,
    ) -> None:
        """Test the monthly count restarts on the 1st."""
        connection = await activate(provider, buyer, make_terms(monthly=3))
        for day in (2, 10, 18):
            clock.now = datetime(2025, 6, day, 9, 0, tzinfo=timezone.utc)
            (await ledger.submit_lead(provider, connection.id, make_submission())).unwrap()

        clock.now = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)
        error = (
            await ledger.submit_lead(provider, connection.id, make_submission())
        ).unwrap_err()
        assert isinstance(error, CapReached)
        assert error.limit_type == "monthly"
        assert error.message == "Monthly lead cap reached (3 leads). Resets next month."

        clock.now = datetime(2025, 7, 1, 0, 0, tzinfo=timezone.utc)
        assert (
            await ledger.submit_lead(provider, connection.id, make_submission())
        ).is_ok()

    async def test_both_caps_message(
        self,
        ledger: LeadLedger,
        activate,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test the combined message when both caps are hit."""
        connection = await activate(provider, buyer, make_terms(weekly=2, monthly=2))
        await _submit_many(ledger, provider, connection.id, 2)

        error = (
            await ledger.submit_lead(provider, connection.id, make_submission())
        ).unwrap_err()

        assert isinstance(error, CapReached)
        assert error.message == "Both weekly and monthly lead caps have been reached"
        assert error.limit_type == "weekly"

    async def test_caps_advisory_without_pause(
        self,
        ledger: LeadLedger,
        activate,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test caps only inform when the buyer did not ask to pause."""
        connection = await activate(provider, buyer, make_terms(weekly=1, pause=False))

        results = await _submit_many(ledger, provider, connection.id, 3)

        assert all(r.is_ok() for r in results)
        status = await ledger.cap_status(connection)
        assert status.weekly_cap_reached is True
        assert status.can_submit_lead is True
        assert status.weekly_remaining == 0
        assert format_cap_status(status) == "3/1 weekly"

    async def test_concurrent_submissions_respect_cap(
        self,
        ledger: LeadLedger,
        lifecycle: ConnectionLifecycle,
        activate,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test racing submissions cannot overshoot the cap."""
        connection = await activate(provider, buyer, make_terms(weekly=3))

        results = await asyncio.gather(
            *(
                ledger.submit_lead(provider, connection.id, make_submission())
                for _ in range(8)
            )
        )

        assert sum(r.is_ok() for r in results) == 3
        current = (await lifecycle.get_connection(buyer, connection.id)).unwrap()
        assert current.total_leads == 3

    async def test_cap_window_uses_reference_timezone(
        self,
        connection_store: InMemoryConnectionStore,
        lead_store: InMemoryLeadStore,
        locks: ConnectionLocks,
        provider: Actor,
        buyer: Actor,
    ) -> None:
        """Test Monday is Monday in the configured timezone."""
        settings = Settings(reference_timezone="America/New_York")
        # Sunday 22:00 in New York, already Monday in UTC
        clock = FakeClock(datetime(2025, 6, 23, 2, 0, tzinfo=timezone.utc))
        lifecycle = ConnectionLifecycle(connection_store, locks, settings, clock)
        ledger = LeadLedger(connection_store, lead_store, locks, settings, clock)
        invited = (
            await lifecycle.invite_provider(buyer, provider.user_id, make_terms(weekly=1))
        ).unwrap()
        (await lifecycle.accept(provider, invited.id)).unwrap()
        (await ledger.submit_lead(provider, invited.id, make_submission())).unwrap()

        # 23:30 Sunday in New York
        clock.now = datetime(2025, 6, 23, 3, 30, tzinfo=timezone.utc)
        assert isinstance(
            (
                await ledger.submit_lead(provider, invited.id, make_submission())
            ).unwrap_err(),
            CapReached,
        )

        clock.now = datetime(2025, 6, 23, 4, 0, tzinfo=timezone.utc)  # 00:00 EDT
        assert (await ledger.submit_lead(provider, invited.id, make_submission())).is_ok()


class TestCapStatus:
    """Test cap evaluation and formatting."""

    def test_unlimited(self) -> None:
        """Test no caps means unlimited."""
        status = evaluate_caps(None, weekly_count=12, monthly_count=40)

        assert status.can_submit_lead is True
        assert status.message is None
        assert status.weekly_remaining is None
        assert format_cap_status(status) == "Unlimited"

    def test_partial_usage(self) -> None:
        """Test remaining counts and the usage line."""
        caps = LeadCaps(weekly_limit=5, monthly_limit=20)

        status = evaluate_caps(caps, weekly_count=3, monthly_count=10)

        assert status.weekly_remaining == 2
        assert status.monthly_remaining == 10
        assert status.can_submit_lead is True
        assert format_cap_status(status) == "3/5 weekly • 10/20 monthly"

    def test_monthly_only(self) -> None:
        """Test a monthly cap alone."""
        status = evaluate_caps(LeadCaps(monthly_limit=20), 0, 20)

        assert status.monthly_cap_reached is True
        assert status.can_submit_lead is False
        assert format_cap_status(status) == "20/20 monthly"

    def test_format_from_model(self) -> None:
        """Test formatting a hand-built status."""
        status = CapStatus(weekly_count=1, monthly_count=1, weekly_limit=4)

        assert format_cap_status(status) == "1/4 weekly"

    async def test_cap_status_counts_current_windows(
        self,
        ledger: LeadLedger,
        activate,
        provider: Actor,
        buyer: Actor,
        clock: FakeClock,
    ) -> None:
        """Test last week's leads count toward the month only."""
        connection = await activate(provider, buyer, make_terms(weekly=5, monthly=20))
        clock.now = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)
        await _submit_many(ledger, provider, connection.id, 2)
        clock.now = FIXED_NOW
        await _submit_many(ledger, provider, connection.id, 3)

        status = await ledger.cap_status(connection)

        assert (status.weekly_count, status.monthly_count) == (3, 5)
        assert format_cap_status(status) == "3/5 weekly • 5/20 monthly"


class TestWindows:
    """Test window start computation."""

    def test_week_start_is_monday_midnight(self) -> None:
        utc = ZoneInfo("UTC")

        assert week_start(FIXED_NOW, utc) == datetime(2025, 6, 16, tzinfo=utc)
        monday = datetime(2025, 6, 16, 0, 0, tzinfo=timezone.utc)
        assert week_start(monday, utc) == monday

    def test_month_start(self) -> None:
        utc = ZoneInfo("UTC")

        assert month_start(FIXED_NOW, utc) == datetime(2025, 6, 1, tzinfo=utc)

    def test_week_start_in_other_timezone(self) -> None:
        """Test the window follows the reference timezone's calendar."""
        new_york = ZoneInfo("America/New_York")
        moment = datetime(2025, 6, 16, 2, 0, tzinfo=timezone.utc)  # Sun 22:00 EDT

        assert week_start(moment, new_york) == datetime(2025, 6, 9, tzinfo=new_york)


class TestLeadStatus:
    """Test buyer dispositions."""

    async def test_claim_then_convert(
        self,
        ledger: LeadLedger,
        lifecycle: ConnectionLifecycle,
        active_connection,
        provider: Actor,
        buyer: Actor,
        clock: FakeClock,
    ) -> None:
        """Test the buyer's path through statuses leaves totals alone."""
        lead = (
            await ledger.submit_lead(provider, active_connection.id, make_submission())
        ).unwrap()

        clock.advance(hours=2)
        claimed = (
            await ledger.update_lead_status(buyer, lead.id, LeadStatus.CLAIMED)
        ).unwrap()
        assert claimed.claimed_at == clock.now

        clock.advance(days=1)
        converted = (
            await ledger.update_lead_status(buyer, lead.id, LeadStatus.CONVERTED)
        ).unwrap()
        assert converted.closed_at == clock.now
        assert converted.payout == lead.payout

        connection = (await lifecycle.get_connection(buyer, active_connection.id)).unwrap()
        assert connection.total_leads == 1
        assert connection.total_paid == Decimal("50")

    @pytest.mark.parametrize(
        ("path", "refused"),
        [
            ([LeadStatus.CLAIMED, LeadStatus.CONVERTED], LeadStatus.CLAIMED),
            ([LeadStatus.REJECTED], LeadStatus.CLAIMED),
            ([], LeadStatus.CONVERTED),  # must be claimed first
            ([LeadStatus.EXPIRED], LeadStatus.REJECTED),
        ],
    )
    async def test_illegal_status_moves(
        self,
        ledger: LeadLedger,
        active_connection,
        provider: Actor,
        buyer: Actor,
        path: list[LeadStatus],
        refused: LeadStatus,
    ) -> None:
        """Test terminal lead statuses and skipped steps are refused."""
        lead = (
            await ledger.submit_lead(provider, active_connection.id, make_submission())
        ).unwrap()
        for status in path:
            (await ledger.update_lead_status(buyer, lead.id, status)).unwrap()

        result = await ledger.update_lead_status(buyer, lead.id, refused)

        assert isinstance(result.unwrap_err(), InvalidTransition)

    async def test_only_the_buyer_updates(
        self,
        ledger: LeadLedger,
        active_connection,
        provider: Actor,
        other_buyer: Actor,
    ) -> None:
        """Test providers and other buyers cannot change a lead's status."""
        lead = (
            await ledger.submit_lead(provider, active_connection.id, make_submission())
        ).unwrap()

        for actor in (provider, other_buyer):
            result = await ledger.update_lead_status(actor, lead.id, LeadStatus.CLAIMED)
            assert isinstance(result.unwrap_err(), NotAuthorized)

    async def test_unknown_lead(self, ledger: LeadLedger, buyer: Actor) -> None:
        result = await ledger.update_lead_status(buyer, uuid4(), LeadStatus.CLAIMED)

        assert isinstance(result.unwrap_err(), LeadNotFound)
