# tests/test_normalize.py
import pytest

from chaindesk.api.normalize import (
    approval_message,
    map_block,
    map_chain,
    map_wallet,
    normalize_error_message,
    normalize_pending_balances,
    parse_balance,
    parse_build_sign,
    parse_mine_result,
    parse_prize,
    parse_status,
    parse_validation_result,
    require_success,
    unwrap_envelope,
)
from chaindesk.exceptions import InvalidPrizeError, MalformedResponseError, RequestFailedError

class TestEnvelope:
    def test_envelope_with_data(self):
        result = unwrap_envelope({"success": True, "data": [1, 2]})
        assert result.data == [1, 2]
        assert result.success is True
        assert result.error is None

    def test_envelope_with_error_only(self):
        result = unwrap_envelope({"success": False, "error": "boom"})
        assert result.data is None
        assert result.success is False
        assert result.error == "boom"

    def test_success_defaults_to_true_unless_false(self):
        assert unwrap_envelope({"success": None, "data": 1}).success is True
        assert unwrap_envelope({"success": 0, "data": 1}).success is True

    @pytest.mark.parametrize("payload", [
        [1, 2, 3],
        5,
        "text",
        None,
        True,
        {"data": 1},
        {"success": True},
        {"balance": 10},
    ])
    def test_non_envelopes_are_the_data(self, payload):
        result = unwrap_envelope(payload)
        assert result.data == payload
        assert result.success is True
        assert result.error is None

    def test_require_success_returns_data(self):
        assert require_success({"success": True, "data": {"a": 1}}) == {"a": 1}
        assert require_success([1]) == [1]

    def test_require_success_raises_with_message(self):
        with pytest.raises(RequestFailedError, match="insufficient funds"):
            require_success({"success": False, "error": "insufficient funds"})

    def test_require_success_default_message(self):
        with pytest.raises(RequestFailedError, match="Request failed"):
            require_success({"success": False, "error": None})

class TestErrorMessages:
    def test_string(self):
        assert normalize_error_message("bad") == "bad"

    def test_list_parts(self):
        assert normalize_error_message(["a", None, "", 3, "b"]) == "a, 3, b"

    def test_object_with_message(self):
        assert normalize_error_message({"message": "nope", "code": 1}) == "nope"

    def test_object_without_message(self):
        assert normalize_error_message({"code": 7}) == '{"code": 7}'

    def test_other_values(self):
        assert normalize_error_message(404) == "404"
        assert normalize_error_message(None) is None
        assert normalize_error_message("") is None

class TestPendingBalances:
    def test_map_and_list_are_equivalent(self):
        assert normalize_pending_balances({"addr": 5}) == {"addr": 5}
        assert normalize_pending_balances([{"address": "addr", "value": 5}]) == {"addr": 5}

    def test_alternate_value_keys(self):
        data = [
            {"address": "a", "amount": "1.5"},
            {"address": "b", "can_spend": 2},
            {"address": "c", "balance": 3},
            {"address": "d", "pending": 4},
            {"address": "e", "value": None, "amount": 6},
        ]
        assert normalize_pending_balances(data) == {"a": 1.5, "b": 2, "c": 3, "d": 4, "e": 6}

    def test_incomplete_entries_are_skipped(self):
        data = [
            {"value": 5},
            {"address": "", "value": 5},
            {"address": "x"},
            {"address": "y", "value": "n/a"},
            "garbage",
            {"address": "z", "value": 0},
        ]
        assert normalize_pending_balances(data) == {"z": 0}

    def test_map_skips_non_numeric(self):
        assert normalize_pending_balances({"a": "3", "b": None, "c": "x"}) == {"a": 3.0}

    def test_out_of_range_integers_are_skipped(self):
        huge = 10 ** 400
        assert normalize_pending_balances({"a": huge, "b": 5}) == {"b": 5}
        assert normalize_pending_balances([{"address": "a", "value": huge}]) == {}

    def test_other_shapes_are_empty(self):
        assert normalize_pending_balances(None) == {}
        assert normalize_pending_balances(12) == {}

class TestPrize:
    @pytest.mark.parametrize("payload, expected", [
        (50, 50),
        ("12.5", 12.5),
        ({"prize": 10}, 10),
        ({"reward": "7"}, 7.0),
        ({"amount": 3}, 3),
        ({"value": 1}, 1),
        ({"prize": "bad", "reward": 9, "value": 1}, 9),
        ({"prize": 0, "reward": 9}, 0),
    ])
    def test_valid_prizes(self, payload, expected):
        assert parse_prize(payload) == expected

    @pytest.mark.parametrize("payload", [None, "abc", {}, {"prize": None}, [], True, {"prize": 10 ** 400}])
    def test_invalid_prizes(self, payload):
        with pytest.raises(InvalidPrizeError):
            parse_prize(payload)

    def test_invalid_prize_is_malformed_response(self):
        with pytest.raises(MalformedResponseError):
            parse_prize({"other": 1})

class TestBalance:
    def test_shapes(self):
        assert parse_balance(12) == 12
        assert parse_balance("4.5") == 4.5
        assert parse_balance({"balance": 0}) == 0

    def test_malformed_balance_is_not_zero(self):
        with pytest.raises(MalformedResponseError):
            parse_balance({"amount": 3})
        with pytest.raises(MalformedResponseError):
            parse_balance(None)

class TestValidationResult:
    def test_bare_boolean(self):
        result = parse_validation_result(False)
        assert result.is_valid is False
        assert result.entries == []

    def test_no_entries_means_valid(self):
        result = parse_validation_result({"status": None, "valid": None, "results": [], "blocks": []})
        assert result.is_valid is True
        assert result.entries == []

    def test_later_duplicate_wins(self):
        result = parse_validation_result({
            "results": [{"index": 2, "valid": True}],
            "blocks": [{"index": 2, "valid": False}],
        })
        assert [(e.index, e.valid) for e in result.entries] == [(2, False)]
        assert result.is_valid is False

    def test_entries_from_valid_list(self):
        result = parse_validation_result({
            "valid": [{"index": 0, "valid": True}, {"index": "1", "status": "false"}],
        })
        assert [(e.index, e.valid) for e in result.entries] == [(0, True), (1, False)]
        assert result.is_valid is False

    def test_entries_need_index_and_verdict(self):
        result = parse_validation_result({
            "results": [
                {"index": 0},
                {"valid": True},
                {"index": "x", "valid": True},
                {"index": 3, "valid": "maybe"},
                {"index": 4, "status": 1},
            ],
        })
        assert [(e.index, e.valid) for e in result.entries] == [(4, True)]

    def test_direct_valid_takes_priority(self):
        result = parse_validation_result({
            "valid": True,
            "status": False,
            "blocks": [{"index": 1, "valid": False}],
        })
        assert result.is_valid is True
        assert result.invalid_indexes == [1]

    def test_status_used_when_valid_missing(self):
        result = parse_validation_result({"status": "false", "results": [{"index": 1, "valid": True}]})
        assert result.is_valid is False

    def test_conjunction_of_entries(self):
        result = parse_validation_result({"results": [{"index": 0, "valid": True}, {"index": 1, "valid": True}]})
        assert result.is_valid is True

    def test_unrecognized_payload(self):
        with pytest.raises(MalformedResponseError):
            parse_validation_result("sometimes")

class TestWalletMapping:
    def test_public_key_fallbacks(self):
        assert map_wallet({"address": "a", "public_key": "pk"}).public_key == "pk"
        assert map_wallet({"address": "a", "public": "pub"}).public_key == "pub"
        assert map_wallet({"address": "a"}).public_key == ""

    def test_fields_are_renamed(self):
        wallet = map_wallet({"address": "a", "name": "A", "private_key": "sk", "balance": "3"})
        assert wallet.private_key == "sk"
        assert wallet.name == "A"
        assert wallet.balance == 3.0

    def test_missing_balance_stays_unknown(self):
        assert map_wallet({"address": "a"}).balance is None

    def test_invalid_record(self):
        with pytest.raises(MalformedResponseError):
            map_wallet({"name": "no address"})

class TestBlockMapping:
    def test_transactions_from_data(self):
        block = map_block({
            "index": 0,
            "hash": "h0",
            "previous_hash": "0",
            "timestamp": 1700000000.5,
            "data": {
                "type": "genesis",
                "transactions": [{"sender_address": "s", "receiver_address": "r", "amount": 5}],
                "alloc": [{"receiver_address": "r", "value": 5}],
            },
        })
        assert block.timestamp == "1700000000.5"
        assert block.transactions[0].sender == "s"
        assert block.transactions[0].receiver == "r"
        assert block.data.alloc[0].value == 5

    def test_chain_requires_list(self):
        with pytest.raises(MalformedResponseError):
            map_chain({"index": 0})

    def test_block_missing_hash(self):
        with pytest.raises(MalformedResponseError):
            map_block({"index": 0, "previous_hash": "0"})

class TestMiscPayloads:
    def test_build_sign_keeps_tx_untouched(self):
        tx = {"sender": "a", "nested": {"x": [1, 2]}}
        result = parse_build_sign({"tx": tx, "pub": "p", "sign": "s"})
        assert result.to_payload() == {"tx": tx, "pub": "p", "sign": "s"}

    def test_build_sign_missing_signature(self):
        with pytest.raises(MalformedResponseError):
            parse_build_sign({"tx": {}, "pub": "p"})

    def test_mine_result(self):
        result = parse_mine_result({"message": "mined", "block": {"index": 3, "hash": "h", "previous_hash": "p"}})
        assert result.message == "mined"
        assert result.block.index == 3
        assert parse_mine_result(None).message is None

    def test_status(self):
        assert parse_status("up") == "up"
        assert parse_status({"status": 200}) == "200"
        assert parse_status({}) == "ok"

    def test_approval_message(self):
        assert approval_message("queued") == "queued"
        assert approval_message({"message": "added"}) == "added"
        assert approval_message({"message": 5}) == "Transaction moved to mempool."
        assert approval_message(None) == "Transaction moved to mempool."
