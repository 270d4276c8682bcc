"""Tests for ledger events, event views and subject sessions."""

from suu_core.models import (
    BattleOutcome,
    LedgerEvent,
    ListingPurchasedEvent,
    MintedEvent,
    Phase,
    SubjectSession,
)


class TestLedgerEvent:
    def test_matches_suffix(self):
        e = LedgerEvent(event_type="0xpkg::suu::BattleEvent")
        assert e.matches("BattleEvent")
        assert not e.matches("Event")
        assert LedgerEvent(event_type="BattleEvent").matches("BattleEvent")

    def test_get_int_from_strings(self):
        e = LedgerEvent(event_type="x", fields={"nft_id": "42", "empty": ""})
        assert e.get_int("nft_id") == 42
        assert e.get_int("empty", "missing", default=-1) == -1
        assert e.get_str("nft_id") == "42"


class TestEventViews:
    def test_minted(self):
        view = MintedEvent.model_validate({
            "nft_id": "5", "owner": "0xab", "element": 2, "monster_type": "3",
            "level": 1, "timestamp": "1700000000000",
        })
        assert view.asset_id == 5
        assert view.category == 3
        assert view.timestamp == 1_700_000_000_000

    def test_battle_outcome_defaults(self):
        view = BattleOutcome.model_validate({"nft_id": "1", "is_golden_monster": True})
        assert view.is_rare
        assert not view.is_win
        assert view.reward_amount == 0

    def test_purchase(self):
        view = ListingPurchasedEvent.model_validate({
            "nft_id": "9", "seller": "0x1", "buyer": "0x2", "price": "1000",
            "fee": "25", "seller_amount": "975", "timestamp": "1",
        })
        assert view.price == view.fee + view.seller_amount


class TestSubjectSession:
    def test_new_session_is_idle(self):
        session = SubjectSession(42)
        assert session.phase is Phase.IDLE
        assert not session.is_active
        assert not session.can_reveal(10**15)
        assert session.remaining_ms(0) == 0

    def test_committed_countdown(self):
        session = SubjectSession(42, phase=Phase.COMMITTED, deadline=1_000)
        assert session.is_active
        assert session.remaining_ms(400) == 600
        assert not session.can_reveal(999)
        assert session.can_reveal(1_000)

    def test_orphaned_is_active_but_not_revealable(self):
        session = SubjectSession(42, phase=Phase.ORPHANED, deadline=0)
        assert session.is_active
        assert not session.can_reveal(10)

    def test_reset(self):
        session = SubjectSession(42, phase=Phase.REVEALED, commitment_id="0x1", deadline=5)
        session.reset()
        assert session.phase is Phase.IDLE
        assert session.commitment_id == ""
        assert session.deadline == 0
