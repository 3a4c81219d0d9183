# src/chaindesk/workflows/mining.py
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence, Union

from ..api.client import ChainApiClient
from ..api.models import MineResult, Wallet
from ..exceptions import ChainDeskError
from ..utils.config import Config
from ..utils.format import format_amount, shorten
from ..utils.logger import get_logger

logger = get_logger(__name__)

class PrizeLookup:
    """Cached block reward"""

    def __init__(self, client: ChainApiClient):
        self.client = client
        self.prize: Optional[float] = None
        self.loading = False

    async def refresh(self) -> float:
        self.loading = True
        try:
            self.prize = await self.client.get_prize()
        except ChainDeskError:
            self.prize = None
            raise
        finally:
            self.loading = False
        return self.prize

    async def ensure(self) -> Optional[float]:
        """Return the cached reward, fetching it once if needed"""
        if self.prize is not None:
            return self.prize
        try:
            return await self.refresh()
        except ChainDeskError as e:
            logger.warning(f"Reward fetch failed: {e}")
            return None

    def clear(self):
        self.prize = None

@dataclass
class MineOutcome:
    result: MineResult
    reward: Optional[float]
    message: str

class MiningSession:
    def __init__(
        self,
        client: ChainApiClient,
        wallets: Sequence[Wallet] = (),
        on_success: Optional[Callable[[], Union[None, Awaitable[None]]]] = None
    ):
        self.client = client
        self.wallets = list(wallets)
        self.on_success = on_success
        self.prize = PrizeLookup(client)
        self.mining = False

    def _miner_label(self, miner: str) -> str:
        for wallet in self.wallets:
            if wallet.address == miner and wallet.name:
                return wallet.name
        return shorten(miner) or 'selected wallet'

    async def mine(self, miner: str) -> MineOutcome:
        """Mine pending transactions into a new block credited to miner"""
        if not miner:
            raise ValueError("A mining wallet is required")

        self.mining = True
        try:
            reward = await self.prize.ensure()
            result = await self.client.mine_block(miner)
        finally:
            self.mining = False

        message = result.message or Config.DEFAULT_MINE_MESSAGE
        if reward is not None:
            message += (
                f" Mining reward: {format_amount(reward)} coins credited to "
                f"{self._miner_label(miner)} (plus collected fees)."
            )
        logger.info(f"Block mined successfully by {miner}")

        if self.on_success is not None:
            outcome = self.on_success()
            if inspect.isawaitable(outcome):
                await outcome
        return MineOutcome(result=result, reward=reward, message=message)
