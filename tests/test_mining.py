# tests/test_mining.py
import pytest
from unittest.mock import AsyncMock, MagicMock

from chaindesk.api.models import MineResult
from chaindesk.exceptions import InvalidPrizeError, RequestFailedError
from chaindesk.workflows.mining import MiningSession, PrizeLookup

class TestPrizeLookup:
    @pytest.mark.asyncio
    async def test_refresh_caches_value(self, client):
        client.get_prize.return_value = 12.5
        lookup = PrizeLookup(client)

        assert await lookup.refresh() == 12.5
        assert await lookup.ensure() == 12.5
        client.get_prize.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_prize_clears_value(self, client):
        client.get_prize.return_value = 12.5
        lookup = PrizeLookup(client)
        await lookup.refresh()

        client.get_prize.side_effect = InvalidPrizeError("Invalid prize value received.")
        with pytest.raises(InvalidPrizeError):
            await lookup.refresh()
        assert lookup.prize is None
        assert lookup.loading is False

    @pytest.mark.asyncio
    async def test_ensure_swallows_failure(self, client):
        client.get_prize.side_effect = RequestFailedError("down")
        lookup = PrizeLookup(client)
        assert await lookup.ensure() is None

    def test_clear(self, client):
        lookup = PrizeLookup(client)
        lookup.prize = 3.0
        lookup.clear()
        assert lookup.prize is None

class TestMiningSession:
    @pytest.mark.asyncio
    async def test_message_names_wallet(self, client, wallets):
        client.get_prize.return_value = 50
        client.mine_block.return_value = MineResult(message="Block #5 mined.")
        on_success = AsyncMock()
        session = MiningSession(client, wallets, on_success=on_success)

        outcome = await session.mine("addr_alice")

        client.mine_block.assert_awaited_once_with("addr_alice")
        assert outcome.reward == 50
        assert outcome.message == (
            "Block #5 mined. Mining reward: 50 coins credited to Alice (plus collected fees)."
        )
        on_success.assert_awaited_once()
        assert session.mining is False

    @pytest.mark.asyncio
    async def test_unknown_miner_is_shortened(self, client):
        client.get_prize.return_value = 1.5
        client.mine_block.return_value = MineResult()
        session = MiningSession(client, [])

        outcome = await session.mine("abcdef0123456789abcdef")

        assert outcome.message.startswith("Pending transactions were mined into a new block.")
        assert "credited to abcdef...abcdef" in outcome.message

    @pytest.mark.asyncio
    async def test_missing_prize_leaves_reward_out(self, client, wallets):
        client.get_prize.side_effect = RequestFailedError("down")
        client.mine_block.return_value = MineResult(message="Mined.")
        on_success = MagicMock()
        session = MiningSession(client, wallets, on_success=on_success)

        outcome = await session.mine("addr_bob")

        assert outcome.message == "Mined."
        assert outcome.reward is None
        on_success.assert_called_once()

    @pytest.mark.asyncio
    async def test_mine_failure_propagates(self, client, wallets):
        client.get_prize.return_value = 5
        client.mine_block.side_effect = RequestFailedError("no pending transactions")
        on_success = MagicMock()
        session = MiningSession(client, wallets, on_success=on_success)

        with pytest.raises(RequestFailedError):
            await session.mine("addr_bob")
        on_success.assert_not_called()
        assert session.mining is False

    @pytest.mark.asyncio
    async def test_miner_required(self, client):
        with pytest.raises(ValueError):
            await MiningSession(client).mine("")
        client.mine_block.assert_not_awaited()
