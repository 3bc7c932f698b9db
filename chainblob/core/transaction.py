"""Sui transaction types, serialized as BCS by canoser.

Declares the part of Sui's TransactionData schema needed to build a
programmable transaction with pure and shared object inputs, SplitCoins,
MoveCall and TransferObjects. Enum variants are declared in on-chain order;
only the leading variants in use are listed.

Examples:
    >>> builder = ProgrammableTransactionBuilder()
    >>> amount = builder.pure_u64(500_000_000)
    >>> coin = builder.split_coins(GAS_COIN, [amount])
    >>> tx_bytes = builder.finish(sender, gas_payment, gas_price, gas_budget)

Tests:
    - tests/unit/test_transaction.py
"""

from __future__ import annotations

import base58
from canoser import ArrayT, RustEnum, Struct, Uint8, Uint16, Uint64

from chainblob.core.types import ObjectRef, normalize_address

ADDRESS_LENGTH = 32
DIGEST_LENGTH = 32


class Address(Struct):
    """32 fixed bytes, no length prefix."""

    _fields = [("value", ArrayT(Uint8, ADDRESS_LENGTH, False))]

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        return cls(list(bytes.fromhex(normalize_address(value)[2:])))


class Digest(Struct):
    """Object digest, serialized as a length-prefixed byte vector."""

    _fields = [("value", ArrayT(Uint8, DIGEST_LENGTH))]

    @classmethod
    def from_base58(cls, value: str) -> "Digest":
        raw = base58.b58decode(value)
        if len(raw) != DIGEST_LENGTH:
            raise ValueError(f"Object digest must be {DIGEST_LENGTH} bytes, got {len(raw)}")
        return cls(list(raw))


class ObjectReference(Struct):
    _fields = [("object_id", Address), ("sequence", Uint64), ("object_digest", Digest)]

    @classmethod
    def from_ref(cls, ref: ObjectRef) -> "ObjectReference":
        return cls(Address.from_hex(ref.object_id), ref.version, Digest.from_base58(ref.digest))


class SharedObjectReference(Struct):
    _fields = [("object_id", Address), ("initial_shared_version", Uint64), ("mutable", bool)]


class ObjectArg(RustEnum):
    _enums = [
        ("ImmOrOwnedObject", ObjectReference),
        ("SharedObject", SharedObjectReference),
    ]


class CallArg(RustEnum):
    _enums = [
        ("Pure", [Uint8]),
        ("Object", ObjectArg),
    ]


class Argument(RustEnum):
    _enums = [
        ("GasCoin", None),
        ("Input", Uint16),
        ("Result", Uint16),
        ("NestedResult", (Uint16, Uint16)),
    ]


class TypeTag(RustEnum):
    # Vector and Struct tags are not needed by the calls built here.
    _enums = [
        ("Bool", None),
        ("U8", None),
        ("U64", None),
        ("U128", None),
        ("Address", None),
        ("Signer", None),
    ]


class ProgrammableMoveCall(Struct):
    _fields = [
        ("package", Address),
        ("module", str),
        ("function", str),
        ("type_arguments", [TypeTag]),
        ("arguments", [Argument]),
    ]


class TransferObjects(Struct):
    _fields = [("objects", [Argument]), ("recipient", Argument)]


class SplitCoins(Struct):
    _fields = [("coin", Argument), ("amounts", [Argument])]


class Command(RustEnum):
    _enums = [
        ("MoveCall", ProgrammableMoveCall),
        ("TransferObjects", TransferObjects),
        ("SplitCoins", SplitCoins),
    ]


class ProgrammableTransaction(Struct):
    _fields = [("inputs", [CallArg]), ("commands", [Command])]


class TransactionKind(RustEnum):
    _enums = [("ProgrammableTransaction", ProgrammableTransaction)]


class GasData(Struct):
    _fields = [
        ("payment", [ObjectReference]),
        ("owner", Address),
        ("price", Uint64),
        ("budget", Uint64),
    ]


class TransactionExpiration(RustEnum):
    _enums = [("NoExpiration", None), ("Epoch", Uint64)]


class TransactionDataV1(Struct):
    _fields = [
        ("kind", TransactionKind),
        ("sender", Address),
        ("gas_data", GasData),
        ("expiration", TransactionExpiration),
    ]


class TransactionData(RustEnum):
    _enums = [("V1", TransactionDataV1)]


GAS_COIN = Argument("GasCoin")


class ProgrammableTransactionBuilder:
    """Accumulates inputs and commands and serializes TransactionData."""

    def __init__(self) -> None:
        self._inputs: list[CallArg] = []
        self._commands: list[Command] = []

    def _add_input(self, arg: CallArg) -> Argument:
        self._inputs.append(arg)
        return Argument("Input", len(self._inputs) - 1)

    def _add_command(self, command: Command) -> Argument:
        self._commands.append(command)
        return Argument("Result", len(self._commands) - 1)

    def pure(self, value: bytes) -> Argument:
        """Pure input holding already BCS-encoded bytes."""
        return self._add_input(CallArg("Pure", list(value)))

    def pure_u64(self, value: int) -> Argument:
        return self.pure(Uint64.encode(value))

    def pure_address(self, value: str) -> Argument:
        return self.pure(Address.from_hex(value).serialize())

    def shared_object(self, object_id: str, initial_shared_version: int, mutable: bool = True) -> Argument:
        shared = SharedObjectReference(Address.from_hex(object_id), initial_shared_version, mutable)
        return self._add_input(CallArg("Object", ObjectArg("SharedObject", shared)))

    def split_coins(self, coin: Argument, amounts: list[Argument]) -> Argument:
        return self._add_command(Command("SplitCoins", SplitCoins(coin, amounts)))

    def move_call(
        self,
        package: str,
        module: str,
        function: str,
        arguments: list[Argument],
    ) -> Argument:
        """MoveCall without type arguments."""
        call = ProgrammableMoveCall(Address.from_hex(package), module, function, [], arguments)
        return self._add_command(Command("MoveCall", call))

    def transfer_objects(self, objects: list[Argument], recipient: Argument) -> None:
        self._add_command(Command("TransferObjects", TransferObjects(objects, recipient)))

    def finish(
        self,
        sender: str,
        gas_payment: list[ObjectRef],
        gas_price: int,
        gas_budget: int,
    ) -> bytes:
        """Serialize TransactionData::V1 with no expiration."""
        owner = Address.from_hex(sender)
        data = TransactionData(
            "V1",
            TransactionDataV1(
                TransactionKind(
                    "ProgrammableTransaction",
                    ProgrammableTransaction(self._inputs, self._commands),
                ),
                owner,
                GasData(
                    [ObjectReference.from_ref(ref) for ref in gas_payment],
                    owner,
                    gas_price,
                    gas_budget,
                ),
                TransactionExpiration("NoExpiration"),
            ),
        )
        return data.serialize()
