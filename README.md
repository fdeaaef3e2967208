# dicebet

A small in-memory model of a dice-betting game. An authority sets the game up
with a treasury. Rolls are opened against a randomness account. Players guess a
die face from 1 to 6 for an open roll and stake lamports, which move from the
player's balance to the treasury.

The package holds the account records and their fixed byte layouts, the event
records, the error codes, and a program object that checks and applies bets.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `dicebet.errors`

- `ErrorCode`: an enumeration of every failure the game can report. Each member
  has a `message()` that returns its text, for example
  `ErrorCode.INVALID_GUESS.message()` gives
  `"Invalid guess. Must be between 1 and 6."`.
- `BetError(code)`: the exception raised for a game rule failure. Its `code`
  attribute holds the `ErrorCode` and its message is that code's message. Any
  argument that is not an `ErrorCode` raises `TypeError`.

### `dicebet.events`

Frozen dataclasses for the game's events: `BetPlaced(user, amount)`,
`BetCancelled(user)`, `WinningsClaimed(user, amount)`,
`DieRollTriggered(user)`, `TreasuryWithdrawn(user, amount)` and
`DieRollRevealed(result, randomness)`. `user` must be a `Pubkey`. Amounts must
fit in an unsigned 64-bit integer. `result` must fit in a byte, and
`randomness` must be exactly 32 bytes.

### `dicebet.accounts`

- `Pubkey`: a 32-byte key. You can build one from bytes, from a base58 string or
  from another `Pubkey`. `bytes(key)` gives the raw bytes and `str(key)` gives
  base58. Keys compare by value and can be hashed.
- Account records, each with `to_bytes()` and the class method
  `from_bytes(data)`. The serialised form starts with an 8-byte discriminator
  that is specific to the account type. `from_bytes` raises `ValueError` when
  the discriminator is wrong or the data is too short.
  - `GlobalState(authority, treasury_pda, treasury_bump, bump)`. Its data is
    66 bytes after the discriminator.
  - `TreasuryAccount()`. It has no data, only the discriminator.
  - `RollState(randomness_account, revealed, result, total_bets_amount, bump)`.
    `result` is `None` until it is set. The record is zero-filled to 44 bytes
    after the discriminator.
  - `BetState(player, roll, amount, guess, claimed, bump)`. Its data is a fixed
    80-byte layout, padding included.

### `dicebet.program`

- `find_program_address(seeds, program_id)`: derives an off-curve address from
  seeds (bytes or `Pubkey`s, each at most 32 bytes) and returns `(address, bump)`.
- `PROGRAM_ID`, `MIN_BET_LAMPORTS`, `MAX_BET_LAMPORTS` and
  `MIN_POT_FOR_ROLL_LAMPORTS`.
- `DiceProgram(program_id=PROGRAM_ID)`: holds the accounts, the lamport
  balances and the emitted events.
  - `fund(key, lamports)` credits a balance and returns the new balance.
    `balance(key)` reads a balance.
  - `initialize_contract(authority, max_bet_config)` creates the global state
    and the authority's treasury account, then returns the `GlobalState`.
    `max_bet_config` is checked to be an unsigned 64-bit integer but is
    otherwise unused.
  - `open_roll(randomness_account)` creates a `RollState` and returns its
    address.
  - `place_bet(player, roll, guess, amount, previous_bet=None,
    previous_roll=None)` records a `BetState`, moves `amount` from the player to
    the treasury, adds it to the roll's `total_bets_amount`, appends a
    `BetPlaced` event to `events`, and returns the bet's address.
  - `accounts` maps addresses to records, and `events` lists emitted events.

An instruction either applies all of its changes or raises and leaves
everything as it was.

## Example

```python
from dicebet.accounts import Pubkey
from dicebet.errors import BetError, ErrorCode
from dicebet.program import DiceProgram

program = DiceProgram(Pubkey(bytes(32)))
authority = Pubkey(bytes([1]) * 32)
player = Pubkey(bytes([2]) * 32)

program.fund(player, 500_000_000)
program.initialize_contract(authority, 100_000_000)

roll = program.open_roll(Pubkey(bytes([3]) * 32))
bet = program.place_bet(player, roll, guess=4, amount=10_000_000)
assert program.balance(player) == 490_000_000

try:
    program.place_bet(player, roll, guess=9, amount=10_000_000)
except BetError as err:
    assert err.code is ErrorCode.INVALID_GUESS
```

## Bet rules

- The guess must be from 1 to 6 (`INVALID_GUESS`).
- The amount must be at least 1,000,000 lamports (`BET_TOO_SMALL`) and at most
  100,000,000 lamports (`BET_TOO_LARGE`).
- A player can place only one bet per roll (`ALREADY_BET`).
- When `previous_bet` is given, it must belong to the player
  (`PREVIOUS_BET_DOES_NOT_BELONG_TO_PLAYER`). `previous_roll` must also be given
  and must be that bet's roll (`INVALID_PREVIOUS_ROLL_ACCOUNT`). If that roll has
  been revealed and the bet is unclaimed, the new bet is refused
  (`PREVIOUS_BET_UNCLAIMED`).
- If the roll's total would overflow 64 bits, the bet fails with `MATH_OVERFLOW`.

Some failures are not game rules and raise ordinary Python exceptions:

- A missing account raises `KeyError`.
- An account of the wrong kind raises `TypeError`.
- A player whose balance is too low raises `ValueError`.

## What it does not do

The program only sets up the game, opens rolls and places bets. It does not
reveal roll results, cancel bets, pay out or claim winnings, or withdraw from
the treasury. The matching events (`BetCancelled`, `WinningsClaimed`,
`DieRollTriggered`, `TreasuryWithdrawn`, `DieRollRevealed`) and error codes
exist as records, but nothing in the package emits or raises them. Everything
is kept in memory: there is no persistence, no network access and no command
line tool.