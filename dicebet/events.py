"""Events emitted by the dice game program."""

from __future__ import annotations

from dataclasses import dataclass

from dicebet.accounts import Pubkey

_U8_MAX = 0xFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
RANDOMNESS_LEN = 32


def _require_pubkey(name: str, value: object) -> None:
    if not isinstance(value, Pubkey):
        raise TypeError(f"{name} must be a Pubkey, got {type(value).__name__}")


def _require_range(name: str, value: int, limit: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= limit:
        raise ValueError(f"{name} must be an integer in 0..{limit}, got {value!r}")


@dataclass(frozen=True)
class BetPlaced:
    """A player placed a bet."""

    user: Pubkey
    amount: int

    def __post_init__(self) -> None:
        _require_pubkey("user", self.user)
        _require_range("amount", self.amount, _U64_MAX)


@dataclass(frozen=True)
class BetCancelled:
    """A player cancelled a bet."""

    user: Pubkey

    def __post_init__(self) -> None:
        _require_pubkey("user", self.user)


@dataclass(frozen=True)
class WinningsClaimed:
    """A player claimed winnings; ``amount`` is what the player received net of commission."""

    user: Pubkey
    amount: int

    def __post_init__(self) -> None:
        _require_pubkey("user", self.user)
        _require_range("amount", self.amount, _U64_MAX)


@dataclass(frozen=True)
class DieRollTriggered:
    """The game operator started a new roll."""

    user: Pubkey

    def __post_init__(self) -> None:
        _require_pubkey("user", self.user)


@dataclass(frozen=True)
class TreasuryWithdrawn:
    """The authority withdrew funds from the treasury."""

    user: Pubkey
    amount: int

    def __post_init__(self) -> None:
        _require_pubkey("user", self.user)
        _require_range("amount", self.amount, _U64_MAX)


@dataclass(frozen=True)
class DieRollRevealed:
    """The roll result was revealed together with the raw randomness behind it."""

    result: int
    randomness: bytes

    def __post_init__(self) -> None:
        _require_range("result", self.result, _U8_MAX)
        if not isinstance(self.randomness, (bytes, bytearray)):
            raise TypeError("randomness must be bytes")
        if len(self.randomness) != RANDOMNESS_LEN:
            raise ValueError(
                f"randomness must be {RANDOMNESS_LEN} bytes, got {len(self.randomness)}"
            )
        object.__setattr__(self, "randomness", bytes(self.randomness))