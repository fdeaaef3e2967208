"""Account records of the dice game and their on-chain byte layouts."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import ClassVar, Optional

PUBKEY_LEN = 32
DISCRIMINATOR_LEN = 8

_U8_MAX = 0xFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
_BET_PADDING = 5

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_INDEX = {char: index for index, char in enumerate(_ALPHABET)}


def _b58encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_ALPHABET[remainder])
    leading = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading + "".join(reversed(digits))


def _b58decode(text: str) -> bytes:
    number = 0
    for char in text:
        try:
            number = number * 58 + _ALPHABET_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    leading = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading + body


class Pubkey:
    """A 32-byte public key, shown in base58."""

    __slots__ = ("_raw",)

    def __init__(self, value: "bytes | bytearray | str | Pubkey" = bytes(PUBKEY_LEN)) -> None:
        if isinstance(value, Pubkey):
            raw = value._raw
        elif isinstance(value, str):
            raw = _b58decode(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
        else:
            raise TypeError(f"cannot make a Pubkey from {type(value).__name__}")
        if len(raw) != PUBKEY_LEN:
            raise ValueError(f"a Pubkey is {PUBKEY_LEN} bytes, got {len(raw)}")
        self._raw = raw

    def __bytes__(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return _b58encode(self._raw)

    def __repr__(self) -> str:
        return f"Pubkey({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Pubkey):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)


def _discriminator(name: str) -> bytes:
    return hashlib.sha256(f"account:{name}".encode()).digest()[:DISCRIMINATOR_LEN]


def _check_pubkey(name: str, value: object) -> None:
    if not isinstance(value, Pubkey):
        raise TypeError(f"{name} must be a Pubkey, got {type(value).__name__}")


def _check_int(name: str, value: object, limit: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= limit:
        raise ValueError(f"{name} must be an integer in 0..{limit}, got {value!r}")


class _Reader:
    """Sequential little-endian reader over account data."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ValueError("account data too short")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u64(self) -> int:
        return int.from_bytes(self.take(8), "little")

    def flag(self) -> bool:
        value = self.u8()
        if value > 1:
            raise ValueError(f"invalid boolean byte {value}")
        return value == 1

    def pubkey(self) -> Pubkey:
        return Pubkey(self.take(PUBKEY_LEN))


def _open(discriminator: bytes, data: bytes, name: str) -> _Reader:
    data = bytes(data)
    if data[:DISCRIMINATOR_LEN] != discriminator:
        raise ValueError(f"account data is not a {name}")
    return _Reader(data[DISCRIMINATOR_LEN:])


def _pad(body: bytes, size: int) -> bytes:
    return body + bytes(size - len(body))


@dataclass
class GlobalState:
    """Program-wide settings: the controlling authority and its treasury."""

    authority: Pubkey
    treasury_pda: Pubkey
    treasury_bump: int = 0
    bump: int = 0

    LEN: ClassVar[int] = PUBKEY_LEN + PUBKEY_LEN + 1 + 1
    DISCRIMINATOR: ClassVar[bytes] = _discriminator("GlobalState")

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        _check_pubkey("authority", self.authority)
        _check_pubkey("treasury_pda", self.treasury_pda)
        _check_int("treasury_bump", self.treasury_bump, _U8_MAX)
        _check_int("bump", self.bump, _U8_MAX)

    def to_bytes(self) -> bytes:
        """Serialise with the account discriminator in front."""
        self._validate()
        return (
            self.DISCRIMINATOR
            + bytes(self.authority)
            + bytes(self.treasury_pda)
            + bytes([self.treasury_bump, self.bump])
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "GlobalState":
        """Parse account data written by :meth:`to_bytes`."""
        reader = _open(cls.DISCRIMINATOR, data, "GlobalState")
        return cls(
            authority=reader.pubkey(),
            treasury_pda=reader.pubkey(),
            treasury_bump=reader.u8(),
            bump=reader.u8(),
        )


@dataclass
class TreasuryAccount:
    """Account that only holds lamports; its data is the discriminator alone."""

    LEN: ClassVar[int] = 0
    DISCRIMINATOR: ClassVar[bytes] = _discriminator("TreasuryAccount")

    def to_bytes(self) -> bytes:
        """Serialise: just the discriminator."""
        return self.DISCRIMINATOR

    @classmethod
    def from_bytes(cls, data: bytes) -> "TreasuryAccount":
        """Check the discriminator and return the account."""
        _open(cls.DISCRIMINATOR, data, "TreasuryAccount")
        return cls()


@dataclass
class RollState:
    """One die roll, bound to a randomness account."""

    randomness_account: Pubkey
    revealed: bool = False
    result: Optional[int] = None
    total_bets_amount: int = 0
    bump: int = 0

    # Option<u8> reserves two bytes: the tag and the value.
    LEN: ClassVar[int] = PUBKEY_LEN + 1 + 2 + 8 + 1
    DISCRIMINATOR: ClassVar[bytes] = _discriminator("RollState")

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        _check_pubkey("randomness_account", self.randomness_account)
        if not isinstance(self.revealed, bool):
            raise TypeError("revealed must be a bool")
        if self.result is not None:
            _check_int("result", self.result, _U8_MAX)
        _check_int("total_bets_amount", self.total_bets_amount, _U64_MAX)
        _check_int("bump", self.bump, _U8_MAX)

    def to_bytes(self) -> bytes:
        """Serialise with the discriminator, zero-filled to the full account size."""
        self._validate()
        option = b"\x00" if self.result is None else bytes([1, self.result])
        body = (
            bytes(self.randomness_account)
            + bytes([int(self.revealed)])
            + option
            + self.total_bets_amount.to_bytes(8, "little")
            + bytes([self.bump])
        )
        return self.DISCRIMINATOR + _pad(body, self.LEN)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RollState":
        """Parse account data; trailing zero fill is ignored."""
        reader = _open(cls.DISCRIMINATOR, data, "RollState")
        randomness_account = reader.pubkey()
        revealed = reader.flag()
        tag = reader.u8()
        if tag == 0:
            result = None
        elif tag == 1:
            result = reader.u8()
        else:
            raise ValueError(f"invalid option tag {tag}")
        return cls(
            randomness_account=randomness_account,
            revealed=revealed,
            result=result,
            total_bets_amount=reader.u64(),
            bump=reader.u8(),
        )


@dataclass
class BetState:
    """A player's bet on one roll, stored in a fixed 80-byte layout."""

    player: Pubkey
    roll: Pubkey
    amount: int = 0
    guess: int = 0
    claimed: bool = False
    bump: int = 0

    LEN: ClassVar[int] = PUBKEY_LEN + PUBKEY_LEN + 8 + 1 + 1 + 1 + _BET_PADDING
    DISCRIMINATOR: ClassVar[bytes] = _discriminator("BetState")

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        _check_pubkey("player", self.player)
        _check_pubkey("roll", self.roll)
        _check_int("amount", self.amount, _U64_MAX)
        _check_int("guess", self.guess, _U8_MAX)
        _check_int("bump", self.bump, _U8_MAX)

    def to_bytes(self) -> bytes:
        """Serialise with the discriminator in the fixed C layout."""
        self._validate()
        return (
            self.DISCRIMINATOR
            + bytes(self.player)
            + bytes(self.roll)
            + self.amount.to_bytes(8, "little")
            + bytes([self.guess, 1 if self.claimed else 0, self.bump])
            + bytes(_BET_PADDING)
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "BetState":
        """Parse account data written by :meth:`to_bytes`."""
        reader = _open(cls.DISCRIMINATOR, data, "BetState")
        bet = cls(
            player=reader.pubkey(),
            roll=reader.pubkey(),
            amount=reader.u64(),
            guess=reader.u8(),
            claimed=reader.u8() != 0,
            bump=reader.u8(),
        )
        reader.take(_BET_PADDING)
        return bet