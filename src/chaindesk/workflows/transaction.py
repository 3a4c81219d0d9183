# src/chaindesk/workflows/transaction.py
"""
Four-stage transaction stepper.

PARTICIPANTS -> KEY_CONFIRMATION -> BUILD_AND_SIGN -> APPROVE

Moving forward is guarded per stage; moving back is always allowed and
keeps the data entered so far. Approving successfully resets the whole
workflow.
"""

import inspect
from enum import IntEnum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from ..api.client import ChainApiClient
from ..api.models import BuildSignResult, Wallet
from ..api.normalize import approval_message
from ..exceptions import ChainDeskError, InsufficientBalanceError, StepBlockedError
from ..utils.coerce import to_number
from ..utils.format import format_amount
from ..utils.logger import get_logger
from ..wallet.keys import generate_private_key

logger = get_logger(__name__)

SuccessCallback = Callable[[], Union[None, Awaitable[None]]]

class Stage(IntEnum):
    PARTICIPANTS = 0
    KEY_CONFIRMATION = 1
    BUILD_AND_SIGN = 2
    APPROVE = 3

class TransactionWorkflow:
    def __init__(
        self,
        client: ChainApiClient,
        wallets: Sequence[Wallet] = (),
        on_success: Optional[SuccessCallback] = None,
        key_generator: Callable[[], str] = generate_private_key
    ):
        self.client = client
        self.wallets: List[Wallet] = list(wallets)
        self.on_success = on_success
        self.key_generator = key_generator
        self.reset()

    def reset(self):
        """Discard all transient state and return to the first stage"""
        self.stage = Stage.PARTICIPANTS
        self.sender: Optional[str] = None
        self.receiver: Optional[str] = None
        self.amount: Optional[float] = None
        self.fee: Optional[float] = None
        self.note = ''
        self.private_key = ''
        self.original_private_key = ''
        self.build_result: Optional[BuildSignResult] = None
        self.building = False
        self.approving = False

    cancel = reset

    def set_wallets(self, wallets: Sequence[Wallet]):
        self.wallets = list(wallets)

    # Participants

    @property
    def sender_wallet(self) -> Optional[Wallet]:
        for wallet in self.wallets:
            if wallet.address == self.sender:
                return wallet
        return None

    def select_sender(self, address: Optional[str]):
        """Select the sender and preload its known private key"""
        self.sender = address
        wallet = self.sender_wallet
        key = (wallet.private_key if wallet else None) or ''
        self.original_private_key = key
        self.private_key = key

    def select_receiver(self, address: Optional[str]):
        self.receiver = address

    def set_amount(self, value: Any):
        self.amount = to_number(value)

    def set_fee(self, value: Any):
        self.fee = to_number(value)

    def set_note(self, note: Optional[str]):
        self.note = note or ''

    @property
    def confirmed_balance(self) -> float:
        wallet = self.sender_wallet
        if wallet is None or wallet.balance is None:
            return 0
        return wallet.balance

    @property
    def pending_balance(self) -> float:
        wallet = self.sender_wallet
        if wallet is None or wallet.pending_balance is None:
            return self.confirmed_balance
        return wallet.pending_balance

    @property
    def available_to_spend(self) -> float:
        # The stricter of confirmed and pending balance wins
        return max(0, min(self.confirmed_balance, self.pending_balance))

    @property
    def total_spend(self) -> Optional[float]:
        if self.amount is None:
            return None
        return self.amount + (self.fee or 0)

    @property
    def amount_error(self) -> Optional[str]:
        total = self.total_spend
        if total is None or total <= self.available_to_spend:
            return None
        label = 'Amount + fee' if self.fee else 'Amount'
        return f"{label} exceeds available balance ({format_amount(self.available_to_spend)} coins)."

    def _check_participants(self):
        if not self.sender or not self.receiver:
            raise StepBlockedError("Sender and receiver are required")
        if self.sender == self.receiver:
            raise StepBlockedError("Sender and receiver must differ")
        if self.amount is None or self.amount <= 0:
            raise StepBlockedError("Amount must be a positive number")
        error = self.amount_error
        if error:
            raise InsufficientBalanceError(error, self.available_to_spend, self.total_spend)

    # Key confirmation

    @property
    def key_warning(self) -> Optional[str]:
        if self.private_key:
            return None
        return "This wallet does not expose a private key. You can still continue, but signing may fail."

    def regenerate_key(self) -> str:
        self.private_key = self.key_generator()
        self.build_result = None
        return self.private_key

    def restore_original_key(self):
        self.private_key = self.original_private_key
        self.build_result = None

    def _check_key(self):
        # An empty key only passes when the wallet never had one
        if not self.private_key and self.original_private_key:
            raise StepBlockedError("A private key is required")
        if not self.private_key:
            logger.warning(f"Continuing without a private key for {self.sender}")

    # Build and sign

    def build_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "sender_address": self.sender,
            "receiver_address": self.receiver,
            "amount": self.amount,
        }
        if self.fee is not None:
            payload["fee"] = self.fee
        note = self.note.strip()
        if note:
            payload["note"] = note
        if self.private_key:
            payload["private_key"] = self.private_key
        return payload

    async def build_and_sign(self) -> BuildSignResult:
        """Have the server build and sign the transaction"""
        if self.stage != Stage.BUILD_AND_SIGN:
            raise StepBlockedError("Signing is only possible in the build and sign stage")
        self._check_participants()
        self.building = True
        try:
            self.build_result = await self.client.build_and_sign(self.build_payload())
        except ChainDeskError as e:
            self.build_result = None
            logger.error(f"Failed to sign transaction: {e}")
            raise
        finally:
            self.building = False

        logger.info("Transaction built and signed successfully")
        return self.build_result

    def _check_build(self):
        if self.build_result is None:
            raise StepBlockedError("Transaction data missing. Please rebuild before approving.")

    # Navigation

    def can_advance(self) -> bool:
        try:
            self._check_stage()
        except StepBlockedError:
            return False
        return self.stage < Stage.APPROVE

    def _check_stage(self):
        if self.stage == Stage.PARTICIPANTS:
            self._check_participants()
        elif self.stage == Stage.KEY_CONFIRMATION:
            self._check_key()
        elif self.stage == Stage.BUILD_AND_SIGN:
            self._check_build()

    def advance(self) -> Stage:
        """Move to the next stage if the current stage's guard passes"""
        if self.stage == Stage.APPROVE:
            raise StepBlockedError("Already at the final stage")
        self._check_stage()
        self.stage = Stage(self.stage + 1)
        logger.debug(f"Transaction workflow advanced to {self.stage.name}")
        return self.stage

    def go_back(self, stage: Optional[Stage] = None) -> Stage:
        """Return to an earlier stage without clearing data"""
        if stage is None:
            stage = Stage(max(self.stage - 1, Stage.PARTICIPANTS))
        if stage > self.stage:
            raise StepBlockedError("Cannot skip forward")
        self.stage = Stage(stage)
        return self.stage

    # Approve

    async def approve(self) -> str:
        """Submit the signed transaction; resets the workflow on success"""
        if self.stage != Stage.APPROVE:
            raise StepBlockedError("Approval is only possible in the final stage")
        self._check_build()

        self.approving = True
        try:
            response = await self.client.approve_transaction(self.build_result)
        except ChainDeskError as e:
            logger.error(f"Approval failed: {e}")
            raise
        finally:
            self.approving = False

        message = approval_message(response)
        logger.info(f"Transaction approved: {message}")
        if self.on_success is not None:
            outcome = self.on_success()
            if inspect.isawaitable(outcome):
                await outcome
        self.reset()
        return message
