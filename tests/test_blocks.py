import copy
import json
import pickle

import pytest

from hashledger.blocks import Block
from hashledger.exceptions import DecodeError, EncodingError, ParseError

HELLO_HASH = "RGUWhlfUKobrBmf5xjKPHUCBVe2wuP+FbDrLfQXEz2g="
HELLO_JSON = '{"parent_hash":"MA==","transactions":"Hello World","hash":"' + HELLO_HASH + '"}'


def test_constructor():
    b = Block("MA==", "Hello World")
    assert b.parent_hash == "MA=="
    assert b.transactions == "Hello World"
    assert b.hash == HELLO_HASH


def test_hash_is_deterministic():
    assert Block("MA==", "Hello World").hash == Block("MA==", "Hello World").hash
    assert Block("MA==", "Hello World") == Block("MA==", "Hello World")
    assert Block("MA==", "Hello World").hash != Block("MA==", "Hello World!").hash


def test_hash_is_44_char_base64():
    b = Block(HELLO_HASH, "payload with ünïcode")
    assert len(b.hash) == 44
    assert b.hash.endswith("=")
    assert b.verify()


def test_verify_true():
    assert Block("MA==", "Hello World").verify()
    restored = Block.from_dict({"parent_hash": "MA==", "transactions": "Hello World", "hash": HELLO_HASH})
    assert restored.verify()


@pytest.mark.parametrize(
    "fields",
    [
        {"parent_hash": "MA==", "transactions": "foo bar", "hash": HELLO_HASH},
        {"parent_hash": "MQ==", "transactions": "Hello World", "hash": HELLO_HASH},
        {"parent_hash": "MA==", "transactions": "Hello World", "hash": "AAAA" + HELLO_HASH[4:]},
    ],
)
def test_verify_false_on_tampered_field(fields):
    assert not Block.from_dict(fields).verify()


def test_verify_false_on_undecodable_parent_hash():
    b = Block.from_dict({"parent_hash": "not base64!", "transactions": "Hello World", "hash": HELLO_HASH})
    assert b.verify() is False


@pytest.mark.parametrize("bad", ["not base64!", "MA=", "M", "MA==é"])
def test_constructor_rejects_malformed_parent_hash(bad):
    with pytest.raises(DecodeError) as excinfo:
        Block(bad, "Hello World")
    assert excinfo.value.value == bad


def test_block_is_immutable():
    b = Block("MA==", "Hello World")
    with pytest.raises(AttributeError):
        b.hash = "tampered"
    with pytest.raises(AttributeError):
        b.transactions = "tampered"
    assert b.hash == HELLO_HASH


def test_to_json_is_canonical():
    b = Block("MA==", "Hello World")
    assert b.to_json() == HELLO_JSON
    assert str(b) == HELLO_JSON
    assert list(b.to_dict()) == ["parent_hash", "transactions", "hash"]


def test_from_json():
    b = Block.from_json(HELLO_JSON)
    assert b.parent_hash == "MA=="
    assert b.transactions == "Hello World"
    assert b.hash == HELLO_HASH


def test_from_json_tolerates_whitespace():
    pretty = json.dumps(json.loads(HELLO_JSON), indent=4)
    assert Block.from_json(pretty) == Block("MA==", "Hello World")


def test_from_json_does_not_verify():
    tampered = HELLO_JSON.replace("Hello World", "Goodbye World")
    b = Block.from_json(tampered)
    assert b.transactions == "Goodbye World"
    assert not b.verify()


def test_round_trip():
    b = Block(HELLO_HASH, 'quotes " and \\ backslashes')
    assert Block.from_json(b.to_json()) == b


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        '{"parent_hash":"MA==","transactions":"Hello World"}',
        '{"parent_hash":"MA==","transactions":1,"hash":"x"}',
        '{"parent_hash":null,"transactions":"Hello World","hash":"x"}',
    ],
)
def test_from_json_rejects_bad_schema(text):
    with pytest.raises(ParseError):
        Block.from_json(text)


def test_hashable():
    assert len({Block("MA==", "a"), Block("MA==", "a"), Block("MA==", "b")}) == 2


def test_constructor_rejects_lone_surrogate_payload():
    with pytest.raises(EncodingError):
        Block("MA==", "\ud800")


def test_from_json_rejects_lone_surrogate_escape():
    text = '{"parent_hash":"MA==","transactions":"\\ud800","hash":"' + HELLO_HASH + '"}'
    with pytest.raises(ParseError):
        Block.from_json(text)


def test_from_json_accepts_escaped_surrogate_pair():
    text = '{"parent_hash":"MA==","transactions":"\\ud83d\\ude00","hash":"' + HELLO_HASH + '"}'
    b = Block.from_json(text)
    assert b.transactions == "\U0001F600"
    assert not b.verify()


def test_copy_and_deepcopy():
    b = Block("MA==", "Hello World")
    for clone in (copy.copy(b), copy.deepcopy(b)):
        assert clone == b
        assert clone.hash == HELLO_HASH
        assert clone.verify()


def test_pickle_round_trip():
    b = Block("MA==", "Hello World")
    restored = pickle.loads(pickle.dumps(b))
    assert restored == b
    assert restored.verify()
    with pytest.raises(AttributeError):
        restored.hash = "tampered"


def test_pickle_keeps_tampered_hash():
    tampered = Block.from_dict({"parent_hash": "MA==", "transactions": "foo bar", "hash": HELLO_HASH})
    restored = pickle.loads(pickle.dumps(tampered))
    assert restored.hash == HELLO_HASH
    assert not restored.verify()
