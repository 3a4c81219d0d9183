# src/chaindesk/workflows/chain.py
"""
Local editing of the block list against the last server snapshot.

``loaded`` is the last chain fetched from the server and is never edited.
``edited`` is the working copy shown to the operator. Edits are pushed to
the server per block after a quiet period; restore pushes the loaded values
back and resets the working copy.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from ..api.client import ChainApiClient
from ..api.models import Block, ValidationResult
from ..exceptions import ChainDeskError
from ..utils.config import Config
from ..utils.logger import get_logger
from .debounce import DebounceRegistry

logger = get_logger(__name__)

@dataclass
class RestoreReport:
    restored: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

@dataclass
class ChainValidation:
    result: ValidationResult
    invalid_indexes: List[int]
    chain_valid: bool

    @property
    def message(self) -> str:
        if self.chain_valid:
            return "Chain integrity verified successfully."
        summary = ', '.join(f"#{index}" for index in self.invalid_indexes) or 'Some blocks'
        if self.invalid_indexes:
            summary = f"Blocks {summary}"
        return f"Validation failed. {summary} require attention."

class ChainReconciler:
    def __init__(
        self,
        client: ChainApiClient,
        debounce_delay: float = Config.BLOCK_UPDATE_DEBOUNCE,
        on_update_error: Optional[Callable[[int, Exception], None]] = None
    ):
        self.client = client
        self.loaded: List[Block] = []
        self.edited: List[Block] = []
        self.invalid_indexes: Set[int] = set()
        self.remining: Set[int] = set()
        self.loading = False
        self.validating = False
        self.restoring = False
        self._updates = DebounceRegistry(debounce_delay, on_error=on_update_error)

    # Snapshot state

    def get_block(self, index: int) -> Optional[Block]:
        for block in self.edited:
            if block.index == index:
                return block
        return None

    def is_invalid(self, index: int) -> bool:
        return index in self.invalid_indexes

    def is_remining(self, index: int) -> bool:
        return index in self.remining

    def pending_updates(self) -> List[int]:
        return self._updates.pending()

    def changed_blocks(self) -> List[Block]:
        """Loaded versions of every block whose hash linkage was edited"""
        originals: Dict[int, Block] = {block.index: block for block in self.loaded}
        changed = []
        for block in self.edited:
            original = originals.get(block.index)
            if original is None:
                continue
            if block.hash == original.hash and block.previous_hash == original.previous_hash:
                continue
            changed.append(original)
        return changed

    # Operations

    async def load(self) -> List[Block]:
        """Replace both snapshots with the server chain"""
        self._updates.cancel_all()
        self.loading = True
        try:
            chain = await self.client.get_chain()
        finally:
            self.loading = False

        self.loaded = list(chain)
        self.edited = list(chain)
        self.invalid_indexes = set()
        logger.info(f"Loaded chain with {len(chain)} blocks")
        return self.edited

    def edit_block(self, index: int, field_name: str, value: str) -> Block:
        """Edit a block locally and schedule a debounced push to the server"""
        if field_name not in Config.EDITABLE_BLOCK_FIELDS:
            raise ValueError(f"Block field {field_name!r} is not editable")

        target = self.get_block(index)
        if target is None:
            raise KeyError(f"Unknown block index {index}")

        updated = target.model_copy(update={field_name: value})
        self.edited = [updated if block.index == index else block for block in self.edited]
        self._updates.schedule(index, lambda: self._push_update(updated))
        return updated

    async def _push_update(self, block: Block):
        await self.client.update_block(block.index, block.previous_hash)
        logger.debug(f"Pushed previous_hash edit for block #{block.index}")

    async def restore(self) -> RestoreReport:
        """Write loaded values back for every edited block, then reset the view"""
        report = RestoreReport()
        if not self.loaded:
            return report

        self._updates.cancel_all()
        self.restoring = True
        try:
            to_restore = self.changed_blocks()
            results = await asyncio.gather(
                *(self.client.update_block(block.index, block.previous_hash) for block in to_restore),
                return_exceptions=True
            )
            for block, outcome in zip(to_restore, results):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, ChainDeskError):
                        raise outcome
                    logger.error(f"Failed to restore block #{block.index}: {outcome}")
                    report.failed.append(block.index)
                else:
                    report.restored.append(block.index)

            self.edited = list(self.loaded)
            self.invalid_indexes = set()
        finally:
            self.restoring = False

        logger.info(f"Restored {len(report.restored)} blocks to their last loaded state")
        return report

    async def validate(self) -> ChainValidation:
        """Validate the server chain and mark invalid known blocks"""
        self.validating = True
        try:
            result = await self.client.validate_chain()
        finally:
            self.validating = False

        known = {block.index for block in self.edited}
        invalid = [index for index in result.invalid_indexes if index in known]
        self.invalid_indexes = set(invalid)

        validation = ChainValidation(
            result=result,
            invalid_indexes=invalid,
            chain_valid=result.is_valid or not invalid,
        )
        if validation.chain_valid:
            logger.info("Blockchain validated")
        else:
            logger.info(f"Blockchain invalid: {validation.message}")
        return validation

    async def remine(self, index: int) -> Optional[ChainValidation]:
        """Remine one block, then reload and revalidate the whole chain"""
        if index in self.remining:
            logger.warning(f"Block #{index} is already being remined")
            return None

        self.remining.add(index)
        try:
            await self.client.remine_block(index)
            logger.info(f"Block #{index} submitted for re-mining")
            await self.load()
            return await self.validate()
        finally:
            self.remining.discard(index)

    async def flush(self):
        """Let pending pushes fire and wait for them"""
        await self._updates.drain()

    async def close(self):
        """Cancel pending pushes; nothing is written after this"""
        cancelled = self._updates.cancel_all()
        if cancelled:
            logger.debug(f"Cancelled {cancelled} pending block updates")
