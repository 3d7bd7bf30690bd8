import json

import pytest

from cotacao.services.normalizer import normalize

from .conftest import SAMPLE_PAYLOAD


def _dump(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


def test_bare_string_under_pair_key_is_the_bid():
    record = normalize(_dump({"USDBRL": "5.50"}))

    assert record.bid == "5.50"
    assert record.code == "USD"
    assert record.codein == "BRL"
    assert record.name == "Dollar/Real"
    assert record.high == "0"
    assert record.ask == "0"
    assert record.timestamp.isdigit()
    assert record.create_date


def test_nested_object_fills_missing_fields_with_defaults():
    payload = {"USDBRL": {"code": "USD", "codein": "BRL", "bid": "5.55", "high": "5.60"}}

    record = normalize(_dump(payload))

    assert record.bid == "5.55"
    assert record.high == "5.60"
    assert record.low == "0"
    assert record.var_bid == "0"
    assert record.name == "Dollar/Real"


def test_full_nested_payload_is_copied_field_by_field():
    record = normalize(_dump(SAMPLE_PAYLOAD))

    expected = SAMPLE_PAYLOAD["USDBRL"]
    assert record.model_dump(by_alias=True) == expected


def test_nested_non_string_fields_fall_back_to_defaults():
    payload = {"USDBRL": {"bid": "5.10", "high": 5.2, "name": None, "timestamp": 1700000000}}

    record = normalize(_dump(payload))

    assert record.bid == "5.10"
    assert record.high == "0"
    assert record.name == "Dollar/Real"
    assert record.timestamp != "1700000000"
    assert record.timestamp.isdigit()


@pytest.mark.parametrize(
    "payload",
    [
        {"USDBRL": {"high": "5.60"}},
        {"USDBRL": {"bid": 5.55}},
        {"USDBRL": 5.55},
        {"USDBRL": ["5.55"]},
        {"USDBRL": None},
        {},
        {"EURBRL": {"bid": "6.00"}},
        ["5.55"],
        "5.55",
    ],
)
def test_unrecognized_shapes_yield_default_bid(payload):
    record = normalize(_dump(payload))

    assert record.bid == "0"
    assert record.code == "USD"
    assert record.high == "0"


@pytest.mark.parametrize("raw", [b"", b"not json", b"{\"USDBRL\":", b"\xff\xfe\x00", b"<html>502</html>"])
def test_malformed_bytes_never_raise(raw):
    record = normalize(raw)

    assert record.bid == "0"


def test_nesting_deeper_than_the_decoder_allows_yields_defaults():
    raw = b'{"USDBRL": ' + b"[" * 200000 + b"]" * 200000 + b"}"

    record = normalize(raw)

    assert record.bid == "0"
    assert record.code == "USD"


def test_flat_record_without_pair_key_is_decoded_strictly():
    payload = {"code": "USD", "codein": "BRL", "bid": "5.42", "pctChange": "0.3"}

    record = normalize(_dump(payload))

    assert record.bid == "5.42"
    assert record.pct_change == "0.3"
    assert record.low == "0"


def test_empty_bid_is_forced_to_zero():
    assert normalize(_dump({"USDBRL": ""})).bid == "0"
    assert normalize(_dump({"USDBRL": {"bid": ""}})).bid == "0"
    assert normalize(_dump({"bid": ""})).bid == "0"


def test_custom_pair_key():
    record = normalize(_dump({"EURBRL": "6.01"}), pair_key="EURBRL")

    assert record.bid == "6.01"


def test_normalize_is_idempotent_apart_from_now_defaults():
    raw = _dump({"USDBRL": {"bid": "5.55", "high": "5.60"}})

    first = normalize(raw).model_dump(exclude={"timestamp", "create_date"})
    second = normalize(raw).model_dump(exclude={"timestamp", "create_date"})

    assert first == second
    assert normalize(_dump(SAMPLE_PAYLOAD)) == normalize(_dump(SAMPLE_PAYLOAD))
