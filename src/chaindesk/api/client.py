# File: src/chaindesk/api/client.py
"""
Endpoint-level client for the chain service.

Every method accepts wrapped and unwrapped responses alike and returns
canonical models from api.models.
"""

from typing import Any, Dict, List, Optional, Sequence

from .models import Block, BuildSignResult, MineResult, Transaction, ValidationResult, Wallet
from .normalize import (
    map_chain,
    map_transaction,
    map_wallet,
    map_wallets,
    normalize_pending_balances,
    parse_balance,
    parse_build_sign,
    parse_mine_result,
    parse_prize,
    parse_status,
    parse_validation_result,
    require_success,
)
from .transport import HttpTransport
from ..exceptions import MalformedResponseError
from ..utils.logger import get_logger

logger = get_logger(__name__)

class ChainApiClient:
    def __init__(self, transport: HttpTransport):
        self.transport = transport

    @classmethod
    def from_url(cls, base_url: str, request_timeout: Optional[float] = None) -> 'ChainApiClient':
        if request_timeout is None:
            return cls(HttpTransport(base_url))
        return cls(HttpTransport(base_url, request_timeout=request_timeout))

    # Status

    async def get_status(self) -> str:
        return parse_status(await self.transport.get('/'))

    # Wallets

    async def get_wallets(self) -> List[Wallet]:
        data = require_success(await self.transport.get('/wallet'))
        return map_wallets(data)

    async def create_wallet(self, name: Optional[str] = None) -> Wallet:
        payload = {"name": name} if name else None
        data = require_success(await self.transport.post('/wallet/create', payload))
        return map_wallet(data)

    async def get_wallet_balance(self, address: str) -> float:
        data = require_success(await self.transport.post('/wallet/balance', {"address": address}))
        return parse_balance(data)

    async def fetch_pending_balances(self, addresses: Sequence[str]) -> Dict[str, float]:
        """Batch pending (mempool-inclusive) balances; empty input skips the call"""
        unique = list(dict.fromkeys(address for address in addresses if address))
        if not unique:
            return {}

        data = require_success(await self.transport.post('/pending_balance', {"addresses": unique}))
        return normalize_pending_balances(data)

    # Transactions

    async def build_and_sign(self, payload: Dict[str, Any]) -> BuildSignResult:
        data = require_success(await self.transport.post('/transaction/build_sign', payload))
        return parse_build_sign(data)

    async def approve_transaction(self, result: BuildSignResult) -> Any:
        return require_success(await self.transport.post('/transaction/approve', result.to_payload()))

    async def get_mempool(self) -> List[Transaction]:
        data = require_success(await self.transport.get('/mempool'))
        if not isinstance(data, list):
            raise MalformedResponseError("Transaction list expected")
        return [map_transaction(item) for item in data]

    # Mining

    async def mine_block(self, miner: str) -> MineResult:
        data = require_success(await self.transport.post('/mine', {"miner": miner}))
        return parse_mine_result(data)

    async def get_prize(self) -> float:
        data = require_success(await self.transport.get('/prize'))
        return parse_prize(data)

    # Chain

    async def get_chain(self) -> List[Block]:
        data = require_success(await self.transport.get('/chain'))
        return map_chain(data)

    async def validate_chain(self) -> ValidationResult:
        data = require_success(await self.transport.get('/validate'))
        return parse_validation_result(data)

    async def update_block(self, index: int, previous_hash: str) -> Any:
        logger.debug(f"Updating block #{index} previous_hash")
        return require_success(
            await self.transport.post('/block/', {"index": index, "previous_hash": previous_hash})
        )

    async def remine_block(self, index: int) -> Any:
        return require_success(await self.transport.post('/block/remine', {"index": index}))

    async def close(self):
        await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
