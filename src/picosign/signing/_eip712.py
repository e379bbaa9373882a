"""
EIP-712 typed-data hashing: type strings, type hashes, struct hashes and the
domain separator. Output matches eth_account encode_typed_data.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from typing import NamedTuple

from ..curves._backend import CryptoBackend, resolve_backend
from ..curves.address import to_address_bytes
from ..errors import SchemaMismatchError, UnsupportedTypeError

_EIP712_ATOMIC_TYPES = frozenset(
    ["string", "bytes", "bool", "address"]
    + [f"uint{bits}" for bits in range(8, 257, 8)]
    + [f"int{bits}" for bits in range(8, 257, 8)]
    + [f"bytes{size}" for size in range(1, 33)]
)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_TYPE_REF = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*(\[[0-9]*\])*$")
_ARRAY_SUFFIX = re.compile(r"^(.+)\[([0-9]*)\]$")

_DOMAIN_TYPE_NAME = "EIP712Domain"


class Field(NamedTuple):
    """One struct member: field name and EIP-712 type string (e.g. "Person[]")."""

    name: str
    type: str


Definitions = tuple[tuple[str, tuple[Field, ...]], ...]


def _core_type(type_: str) -> str:
    return type_.split("[")[0]


def _normalize_fields(
    type_name: str, fields: Iterable[Field | tuple[str, str]]
) -> tuple[Field, ...]:
    if not isinstance(type_name, str) or not _IDENTIFIER.match(type_name):
        raise SchemaMismatchError(f"invalid type name {type_name!r}")
    if type_name in _EIP712_ATOMIC_TYPES:
        raise UnsupportedTypeError(f"struct name {type_name!r} shadows an atomic type")
    out: list[Field] = []
    seen: set[str] = set()
    for item in fields:
        try:
            name, type_ = item
        except (TypeError, ValueError) as exc:
            raise SchemaMismatchError(
                f"{type_name}: field must be a (name, type) pair, got {item!r}"
            ) from exc
        if not isinstance(name, str) or not _IDENTIFIER.match(name):
            raise SchemaMismatchError(f"{type_name}: invalid field name {name!r}")
        if not isinstance(type_, str) or not _TYPE_REF.match(type_):
            raise UnsupportedTypeError(f"{type_name}.{name}: invalid type {type_!r}")
        if name in seen:
            raise SchemaMismatchError(f"{type_name}: duplicate field {name!r}")
        seen.add(name)
        out.append(Field(name, type_))
    return tuple(out)


def _field_pairs(type_name: object, type_fields: object) -> list[tuple[str, str]]:
    """(name, type) pairs from an eth_account style [{"name": ..., "type": ...}] list."""
    if isinstance(type_fields, (str, bytes, Mapping)) or not isinstance(
        type_fields, Sequence
    ):
        raise SchemaMismatchError(f"{type_name}: fields must be a list of mappings")
    try:
        return [(f["name"], f["type"]) for f in type_fields]
    except (KeyError, TypeError) as exc:
        raise SchemaMismatchError(
            f"{type_name}: fields must be {{'name', 'type'}} mappings"
        ) from exc


def _reachable(primary: str, graph: Mapping[str, tuple[Field, ...]]) -> list[str]:
    """Struct names reachable from primary (primary first), depth-first over field types."""
    order: list[str] = []
    stack = [primary]
    seen = {primary}
    while stack:
        current = stack.pop()
        order.append(current)
        for fld in graph[current]:
            core = _core_type(fld.type)
            if core in _EIP712_ATOMIC_TYPES or core in seen:
                continue
            if core not in graph:
                raise UnsupportedTypeError(
                    f"{current}.{fld.name}: unknown type {fld.type!r}"
                )
            seen.add(core)
            stack.append(core)
    return order


def _close(primary: str, graph: Mapping[str, tuple[Field, ...]]) -> Definitions:
    return tuple(sorted((name, graph[name]) for name in _reachable(primary, graph)))


def _merge(
    graph: dict[str, tuple[Field, ...]], name: str, fields: tuple[Field, ...]
) -> None:
    existing = graph.get(name)
    if existing is not None and existing != fields:
        raise SchemaMismatchError(f"conflicting definitions for type {name!r}")
    graph[name] = fields


@dataclass(frozen=True, init=False)
class TypeDescriptor:
    """
    A named EIP-712 struct schema.

    fields are ordered (order changes the type hash). definitions holds every
    struct reachable from this one, keyed by name, so nested types resolve
    without any outside registry.

    Build directly, passing the descriptors of referenced structs:

        person = TypeDescriptor("Person", [("name", "string"), ("wallet", "address")])
        mail = TypeDescriptor(
            "Mail",
            [("from", "Person"), ("to", "Person"), ("contents", "string")],
            references=[person],
        )

    or from an eth_account style types mapping with TypeDescriptor.from_types.
    """

    name: str
    fields: tuple[Field, ...]
    definitions: Definitions = field(repr=False)

    def __init__(
        self,
        name: str,
        fields: Iterable[Field | tuple[str, str]],
        references: Iterable[TypeDescriptor] = (),
    ) -> None:
        own = _normalize_fields(name, fields)
        graph = {name: own}
        for ref in references:
            for ref_name, ref_fields in ref.definitions:
                _merge(graph, ref_name, ref_fields)
        self._set(name, graph)

    def _set(self, name: str, graph: Mapping[str, tuple[Field, ...]]) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "fields", graph[name])
        object.__setattr__(self, "definitions", _close(name, graph))

    @classmethod
    def from_types(
        cls,
        primary_type: str,
        types: Mapping[str, Sequence[Mapping[str, str]]],
    ) -> TypeDescriptor:
        """
        Build from {"TypeName": [{"name": ..., "type": ...}, ...], ...}.

        Types not reachable from primary_type (e.g. EIP712Domain) are ignored.
        """
        if not isinstance(types, Mapping):
            raise SchemaMismatchError(
                f"types must be a mapping of type name to fields, got {type(types).__name__}"
            )
        graph: dict[str, tuple[Field, ...]] = {}
        for type_name, type_fields in types.items():
            graph[type_name] = _normalize_fields(
                type_name, _field_pairs(type_name, type_fields)
            )
        if not isinstance(primary_type, str) or primary_type not in graph:
            raise UnsupportedTypeError(f"primary type {primary_type!r} not in types")
        descriptor = cls.__new__(cls)
        descriptor._set(primary_type, graph)
        return descriptor

    def resolve(self, type_name: str) -> TypeDescriptor:
        """Descriptor for a struct referenced from this one."""
        return _resolve(self, type_name)

    def dependencies(self) -> list[str]:
        """Referenced struct names, excluding this one, sorted."""
        return [name for name, _ in self.definitions if name != self.name]


@lru_cache(maxsize=256)
def _resolve(descriptor: TypeDescriptor, type_name: str) -> TypeDescriptor:
    if type_name == descriptor.name:
        return descriptor
    graph = dict(descriptor.definitions)
    if type_name not in graph:
        raise UnsupportedTypeError(f"type {type_name!r} not referenced by {descriptor.name}")
    resolved = TypeDescriptor.__new__(TypeDescriptor)
    resolved._set(type_name, graph)
    return resolved


def _format_definition(name: str, fields: tuple[Field, ...]) -> str:
    return f"{name}({','.join(f'{f.type} {f.name}' for f in fields)})"


def encode_type(descriptor: TypeDescriptor) -> str:
    """
    Type string: the primary definition, then every referenced struct once,
    sorted by name (e.g. 'Mail(Person from,Person to,string contents)Person(string name,address wallet)').
    """
    graph = dict(descriptor.definitions)
    out = [_format_definition(descriptor.name, descriptor.fields)]
    for dep in descriptor.dependencies():
        out.append(_format_definition(dep, graph[dep]))
    return "".join(out)


def type_hash(
    descriptor: TypeDescriptor, *, backend: CryptoBackend | None = None
) -> bytes:
    """Keccak-256 of the encoded type string."""
    return resolve_backend(backend).keccak256(encode_type(descriptor).encode("utf-8"))


def _coerce_bytes(value: object, path: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str) and value.startswith("0x"):
        try:
            return bytes.fromhex(value[2:])
        except ValueError as exc:
            raise SchemaMismatchError(f"{path}: invalid hex {value!r}") from exc
    raise SchemaMismatchError(
        f"{path}: expected bytes or 0x-hex str, got {type(value).__name__}"
    )


def _coerce_int(value: object, path: str) -> int:
    if isinstance(value, bool):
        raise SchemaMismatchError(f"{path}: bool is not an integer value")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16 if value.startswith(("0x", "-0x")) else 10)
        except ValueError as exc:
            raise SchemaMismatchError(f"{path}: invalid integer {value!r}") from exc
    raise SchemaMismatchError(f"{path}: expected int, got {type(value).__name__}")


def _encode_atomic(
    type_: str, value: object, backend: CryptoBackend, path: str
) -> bytes:
    """Encode one atomic/dynamic value to its 32-byte word."""
    if type_ == "string":
        if isinstance(value, str):
            return backend.keccak256(value.encode("utf-8"))
        if isinstance(value, (bytes, bytearray)):
            return backend.keccak256(bytes(value))
        raise SchemaMismatchError(f"{path}: expected str, got {type(value).__name__}")
    if type_ == "bytes":
        return backend.keccak256(_coerce_bytes(value, path))
    if type_ == "bool":
        if not isinstance(value, bool):
            raise SchemaMismatchError(f"{path}: expected bool, got {type(value).__name__}")
        return (1 if value else 0).to_bytes(32, "big")
    if type_ == "address":
        try:
            return to_address_bytes(value).rjust(32, b"\x00")
        except SchemaMismatchError as exc:
            raise SchemaMismatchError(f"{path}: {exc}") from exc
    if type_.startswith("bytes"):
        size = int(type_[5:])
        data = _coerce_bytes(value, path)
        if len(data) != size:
            raise SchemaMismatchError(f"{path}: {type_} needs {size} bytes, got {len(data)}")
        return data.ljust(32, b"\x00")
    # uintN / intN
    signed = type_.startswith("int")
    bits = int(type_[3:] if signed else type_[4:])
    v = _coerce_int(value, path)
    lo, hi = (-(1 << (bits - 1)), 1 << (bits - 1)) if signed else (0, 1 << bits)
    if not lo <= v < hi:
        raise SchemaMismatchError(f"{path}: {v} out of range for {type_}")
    return v.to_bytes(32, "big", signed=signed)


def _encode_field(
    descriptor: TypeDescriptor,
    type_: str,
    value: object,
    backend: CryptoBackend,
    path: str,
) -> bytes:
    array = _ARRAY_SUFFIX.match(type_)
    if array:
        element_type, length = array.group(1), array.group(2)
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(
            value, Sequence
        ):
            raise SchemaMismatchError(
                f"{path}: expected array for {type_}, got {type(value).__name__}"
            )
        if length and len(value) != int(length):
            raise SchemaMismatchError(
                f"{path}: {type_} needs {length} elements, got {len(value)}"
            )
        return backend.keccak256(
            b"".join(
                _encode_field(descriptor, element_type, item, backend, f"{path}[{i}]")
                for i, item in enumerate(value)
            )
        )
    if type_ in _EIP712_ATOMIC_TYPES:
        return _encode_atomic(type_, value, backend, path)
    if type_ in dict(descriptor.definitions):
        nested = descriptor.resolve(type_)
        return backend.keccak256(_encode_data(nested, value, backend, path))
    raise UnsupportedTypeError(f"{path}: unsupported type {type_!r}")


def _encode_data(
    descriptor: TypeDescriptor,
    value: Mapping[str, object],
    backend: CryptoBackend,
    path: str,
) -> bytes:
    if not isinstance(value, Mapping):
        raise SchemaMismatchError(
            f"{path}: expected mapping for {descriptor.name}, got {type(value).__name__}"
        )
    names = [f.name for f in descriptor.fields]
    missing = [n for n in names if n not in value]
    if missing:
        raise SchemaMismatchError(f"{path}: missing field(s) {', '.join(missing)}")
    extra = sorted(map(str, set(value) - set(names)))
    if extra:
        raise SchemaMismatchError(f"{path}: unexpected field(s) {', '.join(extra)}")
    out = bytearray(type_hash(descriptor, backend=backend))
    for fld in descriptor.fields:
        out += _encode_field(
            descriptor, fld.type, value[fld.name], backend, f"{path}.{fld.name}"
        )
    return bytes(out)


def encode_data(
    descriptor: TypeDescriptor,
    value: Mapping[str, object],
    *,
    backend: CryptoBackend | None = None,
) -> bytes:
    """
    typeHash || one 32-byte word per field, in declared order.

    Raises:
        SchemaMismatchError: value is not a mapping with exactly the descriptor's fields,
            or a field value does not fit its type.
        UnsupportedTypeError: a field type outside the supported set.
    """
    return _encode_data(descriptor, value, resolve_backend(backend), descriptor.name)


def hash_struct(
    descriptor: TypeDescriptor,
    value: Mapping[str, object],
    *,
    backend: CryptoBackend | None = None,
) -> bytes:
    """Keccak-256 of encode_data (the struct hash)."""
    backend = resolve_backend(backend)
    return backend.keccak256(_encode_data(descriptor, value, backend, descriptor.name))


# name, type, Domain attribute; canonical EIP712Domain field order
_DOMAIN_FIELDS = (
    ("name", "string", "name"),
    ("version", "string", "version"),
    ("chainId", "uint256", "chain_id"),
    ("verifyingContract", "address", "verifying_contract"),
    ("salt", "bytes32", "salt"),
)


@dataclass(frozen=True)
class Domain:
    """
    EIP-712 domain. Every field is optional; the EIP712Domain type string
    lists only the fields that are set.
    """

    name: str | None = None
    version: str | None = None
    chain_id: int | None = None
    verifying_contract: bytes | None = None
    salt: bytes | None = None

    def __post_init__(self) -> None:
        for attr in ("name", "version"):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, str):
                raise SchemaMismatchError(f"domain {attr} must be str")
        if self.chain_id is not None:
            chain_id = _coerce_int(self.chain_id, "EIP712Domain.chainId")
            if not 0 <= chain_id < 1 << 256:
                raise SchemaMismatchError("EIP712Domain.chainId out of uint256 range")
            object.__setattr__(self, "chain_id", chain_id)
        if self.verifying_contract is not None:
            object.__setattr__(
                self, "verifying_contract", to_address_bytes(self.verifying_contract)
            )
        if self.salt is not None:
            salt = _coerce_bytes(self.salt, "EIP712Domain.salt")
            if len(salt) != 32:
                raise SchemaMismatchError("EIP712Domain.salt must be 32 bytes")
            object.__setattr__(self, "salt", salt)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Domain:
        """Build from eth_account style keys (name, version, chainId, verifyingContract, salt)."""
        if not isinstance(data, Mapping):
            raise SchemaMismatchError(
                f"domain must be a mapping, got {type(data).__name__}"
            )
        attrs = {key: attr for key, _, attr in _DOMAIN_FIELDS}
        unknown = sorted(str(k) for k in data if k not in attrs)
        if unknown:
            raise SchemaMismatchError(f"invalid domain key(s) {', '.join(unknown)}")
        return cls(**{attrs[k]: v for k, v in data.items()})

    def present_fields(self) -> Iterator[tuple[Field, object]]:
        """(Field, value) for each set field, in canonical order."""
        for key, type_, attr in _DOMAIN_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                yield Field(key, type_), value


def domain_separator(domain: Domain, *, backend: CryptoBackend | None = None) -> bytes:
    """
    hashStruct of the domain under an EIP712Domain type built from its set fields.
    """
    present = list(domain.present_fields())
    descriptor = TypeDescriptor(_DOMAIN_TYPE_NAME, [f for f, _ in present])
    value = {f.name: v for f, v in present}
    return hash_struct(descriptor, value, backend=backend)


def eip712_digest(
    domain: Domain,
    descriptor: TypeDescriptor,
    value: Mapping[str, object],
    *,
    backend: CryptoBackend | None = None,
) -> bytes:
    """keccak256(0x19 || 0x01 || domainSeparator || hashStruct(value))."""
    backend = resolve_backend(backend)
    return backend.keccak256(
        b"\x19\x01"
        + domain_separator(domain, backend=backend)
        + hash_struct(descriptor, value, backend=backend)
    )


def eip712_hash_full_message(
    full_message: Mapping[str, object], *, backend: CryptoBackend | None = None
) -> bytes:
    """
    EIP-712 hash to sign from full_message (domain, types, primaryType, message).

    Matches eth_account encode_typed_data(full_message=...) then keccak256(\\x19\\x01||header||body).

    Args:
        full_message: Dict with keys "domain", "types", "primaryType", "message".

    Returns:
        32-byte hash to sign.
    """
    if not isinstance(full_message, Mapping):
        raise SchemaMismatchError("full_message must be a mapping")
    missing = [
        k for k in ("domain", "types", "primaryType", "message") if k not in full_message
    ]
    if missing:
        raise SchemaMismatchError(f"full_message missing key(s) {', '.join(missing)}")
    domain = Domain.from_dict(full_message["domain"])
    types = full_message["types"]
    if not isinstance(types, Mapping):
        raise SchemaMismatchError("full_message types must be a mapping")
    if _DOMAIN_TYPE_NAME in types:
        declared = _field_pairs(_DOMAIN_TYPE_NAME, types[_DOMAIN_TYPE_NAME])
        derived = [tuple(f) for f, _ in domain.present_fields()]
        if declared != derived:
            raise SchemaMismatchError(
                "EIP712Domain type does not match the fields present in domain"
            )
    descriptor = TypeDescriptor.from_types(full_message["primaryType"], types)
    return eip712_digest(domain, descriptor, full_message["message"], backend=backend)


__all__: tuple[str, ...] = (
    "Domain",
    "Field",
    "TypeDescriptor",
    "domain_separator",
    "eip712_digest",
    "eip712_hash_full_message",
    "encode_data",
    "encode_type",
    "hash_struct",
    "type_hash",
)
