# src/chaindesk/wallet/balances.py
import asyncio
from typing import Dict, Iterable, List, Optional

from ..api.client import ChainApiClient
from ..api.models import Wallet
from ..exceptions import ChainDeskError
from ..utils.logger import get_logger

logger = get_logger(__name__)

class WalletBook:
    """Wallet list with confirmed and pending balances kept in step"""

    def __init__(self, client: ChainApiClient):
        self.client = client
        self.wallets: List[Wallet] = []

    def get(self, address: str) -> Optional[Wallet]:
        for wallet in self.wallets:
            if wallet.address == address:
                return wallet
        return None

    @property
    def addresses(self) -> List[str]:
        return [wallet.address for wallet in self.wallets]

    async def _fetch_one(self, address: str) -> Optional[float]:
        try:
            return await self.client.get_wallet_balance(address)
        except ChainDeskError as e:
            logger.warning(f"Balance fetch failed for {address}: {e}")
            return None

    async def fetch_balances(self, addresses: Iterable[str]) -> Dict[str, float]:
        """Fetch confirmed balances concurrently; failed addresses are left out"""
        unique = list(dict.fromkeys(addresses))
        if not unique:
            return {}

        results = await asyncio.gather(*(self._fetch_one(address) for address in unique))
        return {
            address: balance
            for address, balance in zip(unique, results)
            if balance is not None
        }

    async def fetch_pending_balances(self, addresses: Iterable[str]) -> Dict[str, float]:
        """Fetch the pending balance batch; a failed batch yields no updates"""
        addresses = list(addresses)
        if not addresses:
            return {}

        try:
            return await self.client.fetch_pending_balances(addresses)
        except ChainDeskError as e:
            logger.warning(f"Pending balance fetch failed: {e}")
            return {}

    def _merge(
        self,
        wallets: List[Wallet],
        balances: Dict[str, float],
        pending: Dict[str, float]
    ) -> List[Wallet]:
        merged = []
        for wallet in wallets:
            previous = self.get(wallet.address)
            update = {}
            if wallet.address in balances:
                update['balance'] = balances[wallet.address]
            elif wallet.balance is None and previous is not None:
                update['balance'] = previous.balance
            if wallet.address in pending:
                update['pending_balance'] = pending[wallet.address]
            elif previous is not None:
                update['pending_balance'] = previous.pending_balance
            merged.append(wallet.model_copy(update=update) if update else wallet)
        return merged

    async def refresh(self) -> List[Wallet]:
        """Reload wallets and both balance kinds, applied as one update"""
        fetched = await self.client.get_wallets()
        addresses = [wallet.address for wallet in fetched]
        balances, pending = await asyncio.gather(
            self.fetch_balances(addresses),
            self.fetch_pending_balances(addresses),
        )
        self.wallets = self._merge(fetched, balances, pending)
        logger.debug(f"Loaded {len(self.wallets)} wallets")
        return self.wallets

    async def refresh_balances(self, addresses: Optional[Iterable[str]] = None) -> List[Wallet]:
        """Refresh balances for known wallets without reloading the list"""
        addresses = list(addresses) if addresses is not None else self.addresses
        balances, pending = await asyncio.gather(
            self.fetch_balances(addresses),
            self.fetch_pending_balances(addresses),
        )
        self.wallets = self._merge(self.wallets, balances, pending)
        return self.wallets

    async def create_wallet(self, name: Optional[str] = None) -> Wallet:
        wallet = await self.client.create_wallet(name)
        logger.info(f"Created wallet {wallet.name or wallet.address}")
        await self.refresh()
        return wallet
