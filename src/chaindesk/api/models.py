# File: src/chaindesk/api/models.py
from typing import Any, List, Optional

from pydantic import BaseModel, Field

class Wallet(BaseModel):
    address: str
    name: Optional[str] = None
    public_key: str = ''
    private_key: Optional[str] = None
    balance: Optional[float] = None  # None means not fetched yet, never zero
    pending_balance: Optional[float] = None

class Transaction(BaseModel):
    sender: Optional[str] = None
    receiver: Optional[str] = None
    amount: float
    fee: Optional[float] = None
    note: Optional[str] = None
    hash: Optional[str] = None
    status: Optional[str] = None

class Coinbase(BaseModel):
    amount: Optional[float] = None
    receiver_address: Optional[str] = None
    sender_address: Optional[str] = None

class GenesisAllocation(BaseModel):
    receiver_address: Optional[str] = None
    value: Optional[float] = None

class BlockData(BaseModel):
    type: Optional[str] = None
    transactions: Optional[List[Transaction]] = None
    coinbase: Optional[Coinbase] = None
    alloc: Optional[List[GenesisAllocation]] = None

class Block(BaseModel):
    index: int
    hash: str
    previous_hash: str
    difficulty: Optional[float] = None
    mining_time: Optional[float] = None
    timestamp: Optional[str] = None
    transactions: List[Transaction] = Field(default_factory=list)
    data: Optional[BlockData] = None

class BuildSignResult(BaseModel):
    """Server-built transaction bundle, forwarded to approval untouched"""
    tx: Any
    pub: str
    sign: str

    def to_payload(self) -> dict:
        return {"tx": self.tx, "pub": self.pub, "sign": self.sign}

class ValidationEntry(BaseModel):
    index: int
    valid: bool

class ValidationResult(BaseModel):
    is_valid: bool
    entries: List[ValidationEntry] = Field(default_factory=list)

    @property
    def invalid_indexes(self) -> List[int]:
        return [entry.index for entry in self.entries if not entry.valid]

class ApiResult(BaseModel):
    data: Any = None
    success: bool = True
    error: Optional[str] = None

class MineResult(BaseModel):
    message: Optional[str] = None
    block: Optional[Block] = None
