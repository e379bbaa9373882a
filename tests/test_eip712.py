"""Tests for the EIP-712 typed data encoder."""

from __future__ import annotations

import pytest

from picosign import (
    Domain,
    SchemaMismatchError,
    TypeDescriptor,
    UnsupportedTypeError,
    domain_separator,
    eip712_digest,
    eip712_hash_full_message,
    encode_data,
    encode_type,
    hash_struct,
    keccak256,
    type_hash,
)

# --- EIP-712 "Ether Mail" example ---
PERSON = TypeDescriptor("Person", [("name", "string"), ("wallet", "address")])
MAIL = TypeDescriptor(
    "Mail",
    [("from", "Person"), ("to", "Person"), ("contents", "string")],
    references=[PERSON],
)
MAIL_DOMAIN = Domain(
    name="Ether Mail",
    version="1",
    chain_id=1,
    verifying_contract="0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
)
MAIL_MESSAGE = {
    "from": {"name": "Cow", "wallet": "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"},
    "to": {"name": "Bob", "wallet": "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"},
    "contents": "Hello, Bob!",
}
MAIL_ENCODED_TYPE = (
    "Mail(Person from,Person to,string contents)Person(string name,address wallet)"
)
MAIL_TYPE_HASH = bytes.fromhex(
    "a0cedeb2dc280ba39b857546d74f5549c3a1d7bdc2dd96bf881f76108e23dac2"
)
MAIL_FROM_HASH = bytes.fromhex(
    "fc71e5fa27ff56c350aa531bc129ebdf613b772b6604664f5d8dbe21b85eb0c8"
)
MAIL_TO_HASH = bytes.fromhex(
    "cd54f074a4af31b4411ff6a60c9719dbd559c221c8ac3492d9d872b041d703d1"
)
MAIL_CONTENTS_HASH = bytes.fromhex(
    "b5aadf3154a261abdd9086fc627b61efca26ae5702701d05cd2305f7c52a2fc8"
)
MAIL_STRUCT_HASH = bytes.fromhex(
    "c52c0ee5d84264471806290a3f2c4cecfc5490626bf912d01f240d7a274b371e"
)
MAIL_DOMAIN_SEPARATOR = bytes.fromhex(
    "f2cee375fa42b42143804025fc449deafd50cc031ca257e0b194a650a912090f"
)
MAIL_DIGEST = bytes.fromhex(
    "be609aee343fb3c4b28e1df9e632fca64fcfaede20f02e86244efddf30957bd2"
)
EIP712_DOMAIN_TYPE_HASH = bytes.fromhex(
    "8b73c3c69bb8fe3d512ecc4cf759cc79239f7b179b0ffacaa9a75d522b39400f"
)


def test_encode_type_appends_references_sorted() -> None:
    assert encode_type(MAIL) == MAIL_ENCODED_TYPE
    assert encode_type(PERSON) == "Person(string name,address wallet)"


def test_type_hash_golden() -> None:
    assert type_hash(MAIL) == MAIL_TYPE_HASH


def test_encode_data_golden() -> None:
    assert encode_data(MAIL, MAIL_MESSAGE) == (
        MAIL_TYPE_HASH + MAIL_FROM_HASH + MAIL_TO_HASH + MAIL_CONTENTS_HASH
    )


def test_hash_struct_golden() -> None:
    assert hash_struct(MAIL, MAIL_MESSAGE) == MAIL_STRUCT_HASH


def test_domain_separator_golden() -> None:
    assert domain_separator(MAIL_DOMAIN) == MAIL_DOMAIN_SEPARATOR


def test_eip712_digest_golden() -> None:
    assert eip712_digest(MAIL_DOMAIN, MAIL, MAIL_MESSAGE) == MAIL_DIGEST


def test_eip712_hash_full_message_golden() -> None:
    full = {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "Person": [
                {"name": "name", "type": "string"},
                {"name": "wallet", "type": "address"},
            ],
            "Mail": [
                {"name": "from", "type": "Person"},
                {"name": "to", "type": "Person"},
                {"name": "contents", "type": "string"},
            ],
        },
        "primaryType": "Mail",
        "domain": {
            "name": "Ether Mail",
            "version": "1",
            "chainId": 1,
            "verifyingContract": "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
        },
        "message": MAIL_MESSAGE,
    }
    assert eip712_hash_full_message(full) == MAIL_DIGEST


def test_full_message_rejects_domain_type_mismatch() -> None:
    full = {
        "types": {
            "EIP712Domain": NAME_ONLY_DOMAIN,
            "Message": [{"name": "number", "type": "uint256"}],
        },
        "primaryType": "Message",
        "domain": {"name": "Test", "version": "1"},
        "message": {"number": 1},
    }
    with pytest.raises(SchemaMismatchError):
        eip712_hash_full_message(full)


def test_from_types_matches_direct_construction() -> None:
    types = {
        "Mail": [
            {"name": "from", "type": "Person"},
            {"name": "to", "type": "Person"},
            {"name": "contents", "type": "string"},
        ],
        "Person": [
            {"name": "name", "type": "string"},
            {"name": "wallet", "type": "address"},
        ],
    }
    assert TypeDescriptor.from_types("Mail", types) == MAIL


def test_hash_struct_deterministic(fake_backend) -> None:
    first = hash_struct(MAIL, MAIL_MESSAGE, backend=fake_backend)
    second = hash_struct(MAIL, dict(MAIL_MESSAGE), backend=fake_backend)
    assert first == second
    assert hash_struct(MAIL, MAIL_MESSAGE) == hash_struct(MAIL, MAIL_MESSAGE)


def test_field_order_changes_type_hash() -> None:
    ab = TypeDescriptor("Pair", [("a", "uint256"), ("b", "address")])
    ba = TypeDescriptor("Pair", [("b", "address"), ("a", "uint256")])
    assert encode_type(ab) == "Pair(uint256 a,address b)"
    assert encode_type(ba) == "Pair(address b,uint256 a)"
    assert ab != ba
    assert type_hash(ab) != type_hash(ba)


def test_domain_separator_depends_on_salt() -> None:
    base = Domain(
        name="Test", version="1", chain_id=1, verifying_contract="0x" + "00" * 19 + "01"
    )
    salted = Domain(
        name="Test",
        version="1",
        chain_id=1,
        verifying_contract="0x" + "00" * 19 + "01",
        salt=b"\x00" * 32,
    )
    assert domain_separator(base) != domain_separator(salted)


def test_domain_type_lists_only_present_fields(fake_backend) -> None:
    domain_separator(Domain(name="Test", chain_id=5), backend=fake_backend)
    assert b"EIP712Domain(string name,uint256 chainId)" in fake_backend.preimages


def test_domain_type_hash_for_standard_fields(fake_backend) -> None:
    domain_separator(MAIL_DOMAIN, backend=fake_backend)
    type_string = fake_backend.preimages[0]
    assert keccak256(type_string) == EIP712_DOMAIN_TYPE_HASH


def test_domain_from_dict() -> None:
    domain = Domain.from_dict(
        {
            "name": "Ether Mail",
            "version": "1",
            "chainId": "1",
            "verifyingContract": "0xcccccccccccccccccccccccccccccccccccccccc",
        }
    )
    assert domain == MAIL_DOMAIN
    assert domain.verifying_contract == b"\xcc" * 20


def test_domain_rejects_unknown_key() -> None:
    with pytest.raises(SchemaMismatchError):
        Domain.from_dict({"name": "A", "chain": 1})


def test_domain_rejects_short_salt() -> None:
    with pytest.raises(SchemaMismatchError):
        Domain(name="A", salt=b"\x01" * 31)


def test_nested_references_listed_once(fake_backend) -> None:
    asset = TypeDescriptor("Asset", [("token", "address"), ("amount", "uint256")])
    person = TypeDescriptor("Person", [("wallet", "address"), ("holdings", "Asset[]")], [asset])
    order = TypeDescriptor(
        "Order",
        [("maker", "Person"), ("taker", "Person"), ("give", "Asset")],
        references=[person, asset],
    )
    assert encode_type(order) == (
        "Order(Person maker,Person taker,Asset give)"
        "Asset(address token,uint256 amount)"
        "Person(address wallet,Asset[] holdings)"
    )
    assert order.dependencies() == ["Asset", "Person"]


def test_recursive_type_from_types() -> None:
    types = {
        "Node": [
            {"name": "value", "type": "uint8"},
            {"name": "children", "type": "Node[]"},
        ]
    }
    node = TypeDescriptor.from_types("Node", types)
    assert encode_type(node) == "Node(uint8 value,Node[] children)"
    leaf = {"value": 2, "children": []}
    tree = {"value": 1, "children": [leaf, leaf]}
    assert len(hash_struct(node, tree)) == 32


def test_array_encoding(fake_backend) -> None:
    bag = TypeDescriptor("Bag", [("ids", "uint256[]"), ("tags", "string[2]")])
    encode_data(bag, {"ids": [1, 2], "tags": ["a", "b"]}, backend=fake_backend)
    ids_preimage = (1).to_bytes(32, "big") + (2).to_bytes(32, "big")
    assert ids_preimage in fake_backend.preimages
    assert b"a" in fake_backend.preimages and b"b" in fake_backend.preimages


def test_atomic_encodings(fake_backend) -> None:
    desc = TypeDescriptor(
        "Atoms",
        [
            ("flag", "bool"),
            ("small", "int8"),
            ("who", "address"),
            ("tag", "bytes4"),
            ("blob", "bytes"),
        ],
    )
    encoded = encode_data(
        desc,
        {
            "flag": True,
            "small": -1,
            "who": "0x" + "ab" * 20,
            "tag": b"\xde\xad\xbe\xef",
            "blob": "0x0102",
        },
        backend=fake_backend,
    )
    words = [encoded[i : i + 32] for i in range(32, len(encoded), 32)]
    assert words[0] == (1).to_bytes(32, "big")
    assert words[1] == b"\xff" * 32
    assert words[2] == b"\x00" * 12 + b"\xab" * 20
    assert words[3] == b"\xde\xad\xbe\xef" + b"\x00" * 28
    assert b"\x01\x02" in fake_backend.preimages


def test_missing_field_rejected() -> None:
    with pytest.raises(SchemaMismatchError):
        hash_struct(PERSON, {"name": "Cow"})


def test_extra_field_rejected() -> None:
    with pytest.raises(SchemaMismatchError):
        hash_struct(PERSON, {"name": "Cow", "wallet": "0x" + "00" * 20, "age": 3})


def test_nested_struct_shape_rejected() -> None:
    message = dict(MAIL_MESSAGE, to="Bob")
    with pytest.raises(SchemaMismatchError):
        hash_struct(MAIL, message)


def test_array_shape_rejected() -> None:
    bag = TypeDescriptor("Bag", [("ids", "uint256[]"), ("pair", "uint8[2]")])
    with pytest.raises(SchemaMismatchError):
        hash_struct(bag, {"ids": 1, "pair": [1, 2]})
    with pytest.raises(SchemaMismatchError):
        hash_struct(bag, {"ids": [], "pair": [1, 2, 3]})


@pytest.mark.parametrize(
    "type_, value",
    [
        ("uint8", 256),
        ("uint256", -1),
        ("int8", 128),
        ("bool", 1),
        ("uint256", True),
        ("bytes32", b"\x00" * 31),
        ("address", "0x1234"),
        ("string", 5),
    ],
)
def test_value_out_of_type_rejected(type_: str, value: object) -> None:
    desc = TypeDescriptor("One", [("v", type_)])
    with pytest.raises(SchemaMismatchError):
        hash_struct(desc, {"v": value})


@pytest.mark.parametrize("type_", ["uint7", "bytes33", "fixed128x18", "Missing", "int"])
def test_unsupported_type_rejected(type_: str) -> None:
    with pytest.raises(UnsupportedTypeError):
        TypeDescriptor("One", [("v", type_)])


def test_conflicting_reference_rejected() -> None:
    other_person = TypeDescriptor("Person", [("name", "string")])
    with pytest.raises(SchemaMismatchError):
        TypeDescriptor("Pair", [("a", "Person"), ("b", "Person")], [PERSON, other_person])


def test_unknown_primary_type_rejected() -> None:
    with pytest.raises(UnsupportedTypeError):
        TypeDescriptor.from_types("Mail", {"Person": [{"name": "n", "type": "string"}]})


NAME_ONLY_DOMAIN = [{"name": "name", "type": "string"}]


def _full_message(**overrides) -> dict:
    full = {
        "types": {
            "EIP712Domain": NAME_ONLY_DOMAIN,
            "Message": [{"name": "number", "type": "uint256"}],
        },
        "primaryType": "Message",
        "domain": {"name": "Test"},
        "message": {"number": 1},
    }
    full.update(overrides)
    return full


def test_full_message_hashes_minimal_domain() -> None:
    assert len(eip712_hash_full_message(_full_message())) == 32


@pytest.mark.parametrize(
    "overrides",
    [
        {"types": []},
        {"types": "Message(uint256 number)"},
        {"types": {"EIP712Domain": [{"name": "name"}], "Message": []}},
        {"types": {"EIP712Domain": {"name": "name", "type": "string"}}},
        {"types": {"EIP712Domain": NAME_ONLY_DOMAIN, "Message": [{"name": "number"}]}},
        {"types": {"EIP712Domain": NAME_ONLY_DOMAIN, "Message": ["uint256 number"]}},
        {"domain": ["Test"]},
        {"message": [1]},
    ],
)
def test_full_message_malformed_input_rejected(overrides: dict) -> None:
    with pytest.raises(SchemaMismatchError):
        eip712_hash_full_message(_full_message(**overrides))


def test_full_message_must_be_mapping() -> None:
    with pytest.raises(SchemaMismatchError):
        eip712_hash_full_message([("domain", {})])


@pytest.mark.parametrize("types", [[], None, "Message"])
def test_from_types_requires_mapping(types) -> None:
    with pytest.raises(SchemaMismatchError):
        TypeDescriptor.from_types("Message", types)


def test_from_types_requires_name_and_type() -> None:
    with pytest.raises(SchemaMismatchError):
        TypeDescriptor.from_types("Message", {"Message": [{"name": "number"}]})
