# File: src/chaindesk/api/normalize.py
"""
Response normalization.

The backend is inconsistent about wrapping responses in a
``{data, success, error}`` envelope and about the shape of several
payloads. Callers go through these functions and never special-case an
endpoint.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import (
    ApiResult,
    Block,
    BuildSignResult,
    MineResult,
    Transaction,
    ValidationEntry,
    ValidationResult,
    Wallet,
)
from ..exceptions import InvalidPrizeError, MalformedResponseError, RequestFailedError
from ..utils.coerce import to_bool, to_index, to_number
from ..utils.config import Config

PENDING_VALUE_KEYS = ("value", "amount", "can_spend", "balance", "pending")
PRIZE_KEYS = ("prize", "reward", "amount", "value")

def normalize_error_message(error: Any) -> Optional[str]:
    """Collapse the envelope's error field into a single message"""
    if not error:
        return None
    if isinstance(error, str):
        return error
    if isinstance(error, (list, tuple)):
        parts = [part if isinstance(part, str) else ('' if part is None else str(part)) for part in error]
        return ', '.join(part for part in parts if part)
    if isinstance(error, dict):
        message = error.get('message')
        if isinstance(message, str):
            return message
        try:
            return json.dumps(error)
        except (TypeError, ValueError):
            return str(error)
    return str(error)

def is_envelope(payload: Any) -> bool:
    return isinstance(payload, dict) and 'success' in payload and ('data' in payload or 'error' in payload)

def unwrap_envelope(payload: Any) -> ApiResult:
    """Split an envelope into data/success/error; bare payloads are the data"""
    if is_envelope(payload):
        return ApiResult(
            data=payload.get('data'),
            success=payload['success'] is not False,
            error=normalize_error_message(payload.get('error')),
        )
    return ApiResult(data=payload, success=True, error=None)

def require_success(payload: Any) -> Any:
    """Return the payload data or raise RequestFailedError"""
    result = unwrap_envelope(payload)
    if not result.success:
        raise RequestFailedError(result.error or Config.DEFAULT_REQUEST_ERROR)
    return result.data

def normalize_pending_balances(data: Any) -> Dict[str, float]:
    """Reduce a map or a list of entries to address -> pending balance"""
    balances: Dict[str, float] = {}

    if isinstance(data, list):
        for entry in data:
            if not isinstance(entry, dict):
                continue
            address = entry.get('address')
            if not address or not isinstance(address, str):
                continue
            value = None
            for key in PENDING_VALUE_KEYS:
                value = to_number(entry.get(key))
                if value is not None:
                    break
            if value is None:
                continue
            balances[address] = value
        return balances

    if isinstance(data, dict):
        for address, raw in data.items():
            value = to_number(raw)
            if address and value is not None:
                balances[str(address)] = value
        return balances

    return balances

def parse_prize(data: Any) -> float:
    """Extract the block reward from a number, string or object"""
    value = None
    if isinstance(data, dict):
        for key in PRIZE_KEYS:
            value = to_number(data.get(key))
            if value is not None:
                break
    else:
        value = to_number(data)

    if value is None:
        raise InvalidPrizeError("Invalid prize data received")
    return value

def parse_balance(data: Any) -> float:
    """Read a balance from a bare number or a {balance} object"""
    raw = data.get('balance') if isinstance(data, dict) else data
    value = to_number(raw)
    if value is None:
        raise MalformedResponseError(f"Invalid balance data received: {data!r}")
    return value

def _validation_entries(value: Any) -> List[ValidationEntry]:
    if not isinstance(value, list):
        return []

    entries = []
    for candidate in value:
        if not isinstance(candidate, dict):
            continue
        index = to_index(candidate.get('index'))
        if index is None:
            continue
        valid = to_bool(candidate.get('valid'))
        if valid is None:
            valid = to_bool(candidate.get('status'))
        if valid is None:
            continue
        entries.append(ValidationEntry(index=index, valid=valid))
    return entries

def parse_validation_result(payload: Any) -> ValidationResult:
    """
    Normalize the /validate response.

    A bare boolean is a whole-chain verdict. An object may carry ``valid``
    (boolean or per-block list), ``status``, ``results`` and ``blocks``.
    Per-block entries are deduplicated by index, later entries winning.
    With no overall flag and no entries the chain counts as valid; this
    mirrors endpoints that only report failures.
    """
    if not isinstance(payload, dict):
        verdict = to_bool(payload)
        if verdict is None:
            raise MalformedResponseError(f"Invalid validation data received: {payload!r}")
        return ValidationResult(is_valid=verdict, entries=[])

    raw_valid = payload.get('valid')
    direct_valid = to_bool(raw_valid) if raw_valid is not None and not isinstance(raw_valid, list) else None
    direct_status = to_bool(payload.get('status'))

    collected = (
        _validation_entries(raw_valid)
        + _validation_entries(payload.get('results'))
        + _validation_entries(payload.get('blocks'))
    )

    unique: Dict[int, ValidationEntry] = {}
    for entry in collected:
        unique[entry.index] = entry
    entries = list(unique.values())

    if direct_valid is not None:
        is_valid = direct_valid
    elif direct_status is not None:
        is_valid = direct_status
    elif not entries:
        is_valid = True
    else:
        is_valid = all(entry.valid for entry in entries)

    return ValidationResult(is_valid=is_valid, entries=entries)

def map_wallet(raw: Any) -> Wallet:
    if not isinstance(raw, dict) or not isinstance(raw.get('address'), str):
        raise MalformedResponseError(f"Invalid wallet record: {raw!r}")

    public_key = raw.get('public_key')
    if public_key is None:
        public_key = raw.get('public')
    return Wallet(
        address=raw['address'],
        name=raw.get('name'),
        public_key=public_key or '',
        private_key=raw.get('private_key'),
        balance=to_number(raw.get('balance')),
    )

def map_wallets(data: Any) -> List[Wallet]:
    if not isinstance(data, list):
        raise MalformedResponseError("Wallet list expected")
    return [map_wallet(item) for item in data]

def map_transaction(raw: Any) -> Transaction:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"Invalid transaction record: {raw!r}")

    fields = dict(raw)
    if fields.get('sender') is None:
        fields['sender'] = fields.get('sender_address')
    if fields.get('receiver') is None:
        fields['receiver'] = fields.get('receiver_address')
    try:
        return Transaction.model_validate(fields)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid transaction record: {e}") from e

def map_block(raw: Any) -> Block:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"Invalid block record: {raw!r}")

    fields = dict(raw)
    data = fields.get('data')
    transactions = fields.get('transactions')
    if transactions is None and isinstance(data, dict):
        transactions = data.get('transactions')
    fields['transactions'] = [map_transaction(tx) for tx in transactions or []]
    if isinstance(fields.get('timestamp'), (int, float)) and not isinstance(fields.get('timestamp'), bool):
        fields['timestamp'] = str(fields['timestamp'])
    if isinstance(data, dict) and data.get('transactions') is not None:
        fields['data'] = dict(data, transactions=[map_transaction(tx) for tx in data['transactions']])
    try:
        return Block.model_validate(fields)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid block record: {e}") from e

def map_chain(data: Any) -> List[Block]:
    if not isinstance(data, list):
        raise MalformedResponseError("Block list expected")
    return [map_block(item) for item in data]

def parse_build_sign(data: Any) -> BuildSignResult:
    try:
        return BuildSignResult.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid build/sign response: {e}") from e

def parse_mine_result(data: Any) -> MineResult:
    if not isinstance(data, dict):
        return MineResult(message=data if isinstance(data, str) else None)
    block = data.get('block')
    return MineResult(
        message=data.get('message') if isinstance(data.get('message'), str) else None,
        block=map_block(block) if isinstance(block, dict) else None,
    )

def parse_status(data: Any) -> str:
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and data.get('status'):
        return str(data['status'])
    return 'ok'

def approval_message(data: Any) -> str:
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and isinstance(data.get('message'), str):
        return data['message']
    return Config.DEFAULT_APPROVAL_MESSAGE
