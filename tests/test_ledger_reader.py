"""Tests for typed contract queries."""

import asyncio

import pytest

from suu_core.commit_reveal import CommitRevealMachine, RevealTiming
from suu_core.errors import DecodeError, LedgerError, RevealTooEarlyError
from suu_core.models import CommitKind
from suu_core.network import BackoffPolicy, ChainClock, EventRetryFetcher, LedgerReader
from suu_core.protocol import TransactionBuilder
from suu_core.storage import InMemorySecretStore

import bcs_fixtures as bcs
from fakes import CONTRACT, OTHER_PLAYER, PLAYER, FakeClock, FakeNetwork, event, no_sleep, returns


def make_reader():
    net = FakeNetwork()
    return LedgerReader(net, CONTRACT), net


class TestAssets:
    def test_get_asset(self):
        reader, net = make_reader()
        net.query_results["get_nft"] = returns(bcs.asset(level=4))
        asset = asyncio.run(reader.get_asset(42))
        assert asset is not None
        assert asset.asset_id == 42
        assert asset.level == 4
        assert net.query_calls == [("get_nft", [42])]

    def test_missing_asset(self):
        reader, _ = make_reader()
        assert asyncio.run(reader.get_asset(42)) is None

    def test_corrupt_asset_raises(self):
        reader, net = make_reader()
        net.query_results["get_nft"] = returns(bcs.asset()[:-3])
        with pytest.raises(DecodeError):
            asyncio.run(reader.get_asset(42))

    def test_current_encounter(self):
        reader, net = make_reader()
        net.query_results["get_nft_current_enemy"] = returns(bcs.option(bcs.encounter(level=6)))
        assert asyncio.run(reader.get_current_encounter(1)).level == 6
        net.query_results["get_nft_current_enemy"] = returns(bcs.option(None))
        assert asyncio.run(reader.get_current_encounter(1)) is None

    def test_next_encounter_time(self):
        reader, net = make_reader()
        net.query_results["get_next_enemy_random_time"] = returns(bcs.u64(123))
        assert asyncio.run(reader.get_next_encounter_time(1)) == 123

    def test_active_asset(self):
        reader, net = make_reader()
        net.query_results["get_active_nft"] = returns(bcs.u64(0))
        assert asyncio.run(reader.get_active_asset(PLAYER)) is None
        net.query_results["get_active_nft"] = returns(bcs.u64(8))
        assert asyncio.run(reader.get_active_asset(PLAYER)) == 8

    def test_user_assets_filters_owner_and_sorts(self):
        reader, net = make_reader()
        net.query_results["get_owner_nft_count"] = returns(bcs.u64(3))
        net.query_results["get_owner_nft_id_at"] = lambda _owner, index: [bcs.u64([3, 11, 7][index])]
        owners = {3: PLAYER, 11: PLAYER, 7: OTHER_PLAYER}
        net.query_results["get_nft"] = lambda asset_id: [bcs.asset(owner=owners[asset_id])]
        assets = asyncio.run(reader.get_user_assets(PLAYER))
        assert [a.asset_id for a in assets] == [11, 3]


class TestMarket:
    def test_listing(self):
        reader, net = make_reader()
        net.query_results["get_listing_info"] = returns(
            bcs.address(PLAYER), bcs.u64(5_000), bcs.u64(99),
        )
        listing = asyncio.run(reader.get_listing(4))
        assert listing.seller == PLAYER
        assert listing.price == 5_000

    def test_not_listed(self):
        reader, _ = make_reader()
        assert asyncio.run(reader.get_listing(4)) is None

    def test_listed_ids(self):
        reader, net = make_reader()
        net.query_results["get_market_list_len"] = returns(bcs.u64(5))
        net.query_results["get_market_list_id_at"] = lambda index: [bcs.u64(100 + index)]
        assert asyncio.run(reader.get_market_listed_ids()) == [100, 101, 102, 103, 104]
        assert asyncio.run(reader.get_market_listed_ids_page(limit=2)) == [104, 103]
        assert asyncio.run(reader.get_market_listed_ids_page(limit=2, page=2)) == [100]
        assert asyncio.run(reader.get_market_listed_ids_page(limit=2, page=3)) == []


class TestContract:
    def test_info_balances_config(self):
        reader, net = make_reader()
        net.query_results["get_contract_info"] = returns(bcs.address(PLAYER), bcs.u64(10), bcs.u64(3))
        net.query_results["get_contract_balances"] = returns(bcs.u64(6), bcs.u64(4))
        net.query_results["get_game_config_values"] = returns(
            bcs.u64(1), bcs.u64(2), bcs.u64(300), bcs.u64(900),
        )
        assert asyncio.run(reader.get_contract_info()).total_minted == 3
        assert asyncio.run(reader.get_contract_balances()).total == 10
        assert asyncio.run(reader.get_game_config()).rare_max_probability == 900


class TestEvents:
    def test_minted_events_filtered_by_owner(self):
        reader, net = make_reader()
        for i, owner in enumerate([PLAYER, OTHER_PLAYER, PLAYER]):
            net.event_log.setdefault("NFTMintedEvent", []).append(event(
                "NFTMintedEvent", nft_id=str(i), owner=owner, element=1, level=1, timestamp=str(i),
            ))
        minted = asyncio.run(reader.minted_events(owner=PLAYER.upper().replace("0X", "0x")))
        assert [m.asset_id for m in minted] == [2, 0]

    def test_iter_events_pages(self):
        reader, net = make_reader()
        net.event_log["ListingCreatedEvent"] = [
            event("ListingCreatedEvent", nft_id=str(i), seller=PLAYER, price="1", timestamp="1")
            for i in range(5)
        ]

        async def collect(max_pages):
            return [e async for e in reader.iter_events("ListingCreatedEvent", limit=2, max_pages=max_pages)]

        assert len(asyncio.run(collect(1))) == 2
        assert len(asyncio.run(collect(10))) == 5
        created = asyncio.run(reader.listing_created_events())
        assert [c.asset_id for c in created] == [4, 3, 2, 1, 0]

    def test_scan_reports_truncation(self):
        reader, net = make_reader()
        net.event_log["ListingCreatedEvent"] = [
            event("ListingCreatedEvent", nft_id=str(i), seller=PLAYER, price="1", timestamp="1")
            for i in range(5)
        ]

        async def walk(max_pages):
            scan = reader.iter_events("ListingCreatedEvent", limit=2, max_pages=max_pages)
            seen = [e async for e in scan]
            return len(seen), scan.truncated

        assert asyncio.run(walk(2)) == (4, True)
        assert asyncio.run(walk(3)) == (5, False)


class TestChain:
    def test_chain_time(self):
        reader, net = make_reader()
        net.objects["0x6"] = {"fields": {"id": {"id": "0x6"}, "timestamp_ms": "1700000123456"}}
        assert asyncio.run(reader.get_chain_time()) == 1_700_000_123_456

    def test_chain_time_unwrapped_fields(self):
        reader, net = make_reader()
        net.objects["0x6"] = {"timestamp_ms": "42"}
        assert asyncio.run(reader.get_chain_time()) == 42

    def test_missing_clock_object(self):
        reader, _ = make_reader()
        with pytest.raises(LedgerError):
            asyncio.run(reader.get_chain_time())

    def test_user_balance(self):
        reader, net = make_reader()
        net.balances[PLAYER] = 2_500_000_000
        assert asyncio.run(reader.get_user_balance(PLAYER)) == 2_500_000_000
        assert asyncio.run(reader.get_user_balance(OTHER_PLAYER)) == 0


class TestChainClock:
    def test_follows_ledger_offset(self):
        reader, net = make_reader()
        local = FakeClock(now=1_000_000)
        net.objects["0x6"] = {"timestamp_ms": "995000"}
        clock = ChainClock(reader, local)
        assert clock.now_ms() == 1_000_000
        assert asyncio.run(clock.sync()) == -5_000
        assert clock.synced
        local.advance(1_000)
        assert clock.now_ms() == 996_000

    def test_defers_reveal_for_fast_local_clock(self):
        net = FakeNetwork()
        reader = LedgerReader(net, CONTRACT)
        net.objects["0x6"] = {"timestamp_ms": str(net.clock.now - 60_000)}
        clock = ChainClock(reader, net.clock)
        asyncio.run(clock.sync())
        fetcher = EventRetryFetcher(net, BackoffPolicy(attempts=2), no_sleep)
        machine = CommitRevealMachine(
            TransactionBuilder(CONTRACT), net, net, InMemorySecretStore(), clock, RevealTiming(), fetcher,
        )
        session = asyncio.run(machine.commit(CommitKind.BATTLE, 42, 3, 1, 1))
        net.clock.now = session.deadline
        with pytest.raises(RevealTooEarlyError):
            asyncio.run(machine.reveal(42))
        assert machine.seconds_remaining(42) == 60
