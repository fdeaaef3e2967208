"""The dice betting program: contract set-up and bet placement over an in-memory ledger."""

from __future__ import annotations

import hashlib
from typing import Iterable, Optional, TypeVar, Union

from dicebet.accounts import (
    PUBKEY_LEN,
    BetState,
    GlobalState,
    Pubkey,
    RollState,
    TreasuryAccount,
)
from dicebet.errors import BetError, ErrorCode
from dicebet.events import BetPlaced

PROGRAM_ID = Pubkey("FRb5eZnHH434Z5tQzoifEVL5MC8XCs4t3jXkkraszuZg")

MIN_BET_LAMPORTS = 1_000_000  # 0.001 SOL
MAX_BET_LAMPORTS = 100_000_000  # 0.1 SOL
MIN_POT_FOR_ROLL_LAMPORTS = 100_000_000  # 0.1 SOL

MAX_SEED_LEN = 32
MAX_SEEDS = 16

_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
_PDA_MARKER = b"ProgramDerivedAddress"

# Edwards25519 curve parameters, used to keep derived addresses off the curve.
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P

Seed = Union[bytes, bytearray, memoryview, Pubkey]
_Record = TypeVar("_Record")


def _is_on_curve(point: bytes) -> bool:
    """Tell whether 32 bytes decompress to a point on the Edwards25519 curve."""
    y = (int.from_bytes(point, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    ratio = u * pow(v, _P - 2, _P) % _P
    return ratio == 0 or pow(ratio, (_P - 1) // 2, _P) == 1


def _seed_bytes(seeds: Iterable[Seed]) -> list[bytes]:
    result = []
    for seed in seeds:
        if not isinstance(seed, (bytes, bytearray, memoryview, Pubkey)):
            raise TypeError(f"a seed must be bytes or a Pubkey, got {type(seed).__name__}")
        raw = bytes(seed)
        if len(raw) > MAX_SEED_LEN:
            raise ValueError(f"a seed is at most {MAX_SEED_LEN} bytes, got {len(raw)}")
        result.append(raw)
    return result


def _create_program_address(seeds: list[bytes], program_id: Pubkey) -> Pubkey:
    if len(seeds) > MAX_SEEDS:
        raise ValueError(f"at most {MAX_SEEDS} seeds are allowed, got {len(seeds)}")
    digest = hashlib.sha256(b"".join(seeds) + bytes(program_id) + _PDA_MARKER).digest()
    if _is_on_curve(digest):
        raise ValueError("seeds give an address on the curve")
    return Pubkey(digest)


def find_program_address(seeds: Iterable[Seed], program_id: Pubkey) -> tuple[Pubkey, int]:
    """Derive the program address for ``seeds`` and return it with its bump seed."""
    raw = _seed_bytes(seeds)
    if len(raw) >= MAX_SEEDS:
        raise ValueError(f"at most {MAX_SEEDS - 1} seeds are allowed besides the bump")
    program_id = Pubkey(program_id)
    for bump in range(255, 0, -1):
        try:
            return _create_program_address(raw + [bytes([bump])], program_id), bump
        except ValueError:
            continue
    raise ValueError("no valid bump seed found for these seeds")


def _check_key(name: str, value: object) -> None:
    if not isinstance(value, Pubkey):
        raise TypeError(f"{name} must be a Pubkey, got {type(value).__name__}")


def _check_u64(name: str, value: object) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer, got {value}")


class DiceProgram:
    """The dice game program with its accounts, lamport balances and emitted events.

    Each instruction either applies all of its changes or raises and leaves
    the ledger untouched.
    """

    def __init__(self, program_id: Pubkey = PROGRAM_ID) -> None:
        self.program_id = Pubkey(program_id)
        self.accounts: dict[Pubkey, object] = {}
        self.events: list[object] = []
        self._lamports: dict[Pubkey, int] = {}

    def fund(self, key: Pubkey, lamports: int) -> int:
        """Credit ``lamports`` to ``key`` and return its new balance."""
        _check_key("key", key)
        _check_u64("lamports", lamports)
        total = self.balance(key) + lamports
        if total > _U64_MAX:
            raise ValueError("balance would overflow")
        self._lamports[key] = total
        return total

    def balance(self, key: Pubkey) -> int:
        """Return the lamports held by ``key``."""
        _check_key("key", key)
        return self._lamports.get(key, 0)

    def _pda(self, *seeds: Seed) -> tuple[Pubkey, int]:
        return find_program_address(seeds, self.program_id)

    def _load(self, key: Pubkey, kind: type[_Record], name: str) -> _Record:
        _check_key(name, key)
        record = self.accounts.get(key)
        if record is None:
            raise KeyError(f"{name} account {key} does not exist")
        if not isinstance(record, kind):
            raise TypeError(f"{name} account {key} is not a {kind.__name__}")
        return record

    def _require_free(self, key: Pubkey) -> None:
        if key in self.accounts:
            raise ValueError(f"account {key} is already in use")

    def initialize_contract(self, authority: Pubkey, max_bet_config: int) -> GlobalState:
        """Create the global state and the authority's treasury account."""
        _check_key("authority", authority)
        _check_u64("max_bet_config", max_bet_config)  # accepted but not used
        global_key, global_bump = self._pda(b"global-state")
        treasury_key, treasury_bump = self._pda(b"treasury", authority)
        self._require_free(global_key)
        self._require_free(treasury_key)
        state = GlobalState(
            authority=authority,
            treasury_pda=treasury_key,
            treasury_bump=treasury_bump,
            bump=global_bump,
        )
        self.accounts[global_key] = state
        self.accounts[treasury_key] = TreasuryAccount()
        return state

    def open_roll(self, randomness_account: Pubkey) -> Pubkey:
        """Create the roll state bound to ``randomness_account`` and return its address."""
        _check_key("randomness_account", randomness_account)
        roll_key, roll_bump = self._pda(b"roll", randomness_account)
        self._require_free(roll_key)
        self.accounts[roll_key] = RollState(randomness_account=randomness_account, bump=roll_bump)
        return roll_key

    def place_bet(
        self,
        player: Pubkey,
        roll: Pubkey,
        guess: int,
        amount: int,
        previous_bet: Optional[Pubkey] = None,
        previous_roll: Optional[Pubkey] = None,
    ) -> Pubkey:
        """Place a bet on ``roll``, move ``amount`` to the treasury and return the bet address."""
        _check_key("player", player)

        # Account resolution and constraints.
        global_key, _ = self._pda(b"global-state")
        global_state = self._load(global_key, GlobalState, "global state")
        roll_state = self._load(roll, RollState, "roll state")
        expected_roll = _create_program_address(
            [b"roll", bytes(roll_state.randomness_account), bytes([roll_state.bump])],
            self.program_id,
        )
        if expected_roll != roll:
            raise ValueError("roll state does not match its seeds")
        treasury_key = _create_program_address(
            [b"treasury", bytes(global_state.authority), bytes([global_state.treasury_bump])],
            self.program_id,
        )
        self._load(treasury_key, TreasuryAccount, "treasury")
        bet_key, bet_bump = self._pda(b"bet", roll, player)

        prior_bet: Optional[BetState] = None
        if previous_bet is not None:
            prior_bet = self._load(previous_bet, BetState, "previous bet")
            if prior_bet.player != player:
                raise BetError(ErrorCode.PREVIOUS_BET_DOES_NOT_BELONG_TO_PLAYER)
        prior_roll: Optional[RollState] = None
        if previous_roll is not None:
            prior_roll = self._load(previous_roll, RollState, "previous roll")

        # Instruction checks.
        if not isinstance(guess, int) or isinstance(guess, bool):
            raise TypeError(f"guess must be an integer, got {type(guess).__name__}")
        if not 1 <= guess <= 6:
            raise BetError(ErrorCode.INVALID_GUESS)
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError(f"amount must be an integer, got {type(amount).__name__}")
        if amount < MIN_BET_LAMPORTS:
            raise BetError(ErrorCode.BET_TOO_SMALL)
        if amount > MAX_BET_LAMPORTS:
            raise BetError(ErrorCode.BET_TOO_LARGE)
        existing = self.accounts.get(bet_key)
        if existing is not None:
            raise BetError(ErrorCode.ALREADY_BET)

        if prior_bet is not None:
            if prior_roll is None or previous_roll != prior_bet.roll:
                raise BetError(ErrorCode.INVALID_PREVIOUS_ROLL_ACCOUNT)
            if prior_roll.revealed and not prior_bet.claimed:
                raise BetError(ErrorCode.PREVIOUS_BET_UNCLAIMED)

        player_balance = self.balance(player)
        if player_balance < amount:
            raise ValueError(
                f"insufficient lamports: {player} holds {player_balance}, needs {amount}"
            )
        treasury_balance = self.balance(treasury_key) + amount
        if treasury_balance > _U64_MAX:
            raise ValueError("treasury balance would overflow")
        new_total = roll_state.total_bets_amount + amount
        if new_total > _U64_MAX:
            raise BetError(ErrorCode.MATH_OVERFLOW)

        # Commit.
        self.accounts[bet_key] = BetState(
            player=player,
            roll=roll,
            amount=amount,
            guess=guess,
            claimed=False,
            bump=bet_bump,
        )
        self._lamports[player] = player_balance - amount
        self._lamports[treasury_key] = treasury_balance
        roll_state.total_bets_amount = new_total
        self.events.append(BetPlaced(user=player, amount=amount))
        return bet_key