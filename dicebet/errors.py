"""Error codes raised by the dice game program."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Every failure the program can report, each with its user-facing message."""

    # Bet-related
    INVALID_GUESS = "Invalid guess. Must be between 1 and 6."
    BET_TOO_LARGE = "Bet amount exceeds maximum allowed."
    BET_TOO_SMALL = "Bet amount is below minimum allowed."
    ALREADY_BET = "Bet already placed for this roll."
    ROLL_ALREADY_SETTLED = "Cannot cancel bet, roll has already been settled."
    PREVIOUS_BET_UNCLAIMED = (
        "You have unclaimed winnings from a previous bet that must be settled first."
    )
    PREVIOUS_BET_DOES_NOT_BELONG_TO_PLAYER = (
        "The provided previous bet state does not belong to the player."
    )
    INVALID_PREVIOUS_ROLL_ACCOUNT = "Invalid previous roll account provided."
    ALREADY_CLAIMED = "Already claimed winnings."

    # Roll-related
    ROLL_NOT_SETTLED = "Randomness not yet revealed."
    ALREADY_SETTLED = "Randomness already revealed."
    RANDOMNESS_NOT_RESOLVED = (
        "Randomness not resolved. Switchboard Oracle has not provided a result yet."
    )
    INSUFFICIENT_TREASURY_FOR_ROLL = (
        "Insufficient treasury funds to trigger a new roll. Pot needs more SOL."
    )

    # Treasury / funds
    INSUFFICIENT_TREASURY = "Insufficient treasury funds to cover payout."
    UNAUTHORIZED_WITHDRAW = "Unauthorized withdrawal from treasury."
    INSUFFICIENT_TREASURY_FOR_WITHDRAWAL = (
        "Insufficient treasury funds for withdrawal. Cannot withdraw below minimum pot."
    )

    # Arithmetic
    MATH_OVERFLOW = "Arithmetic overflow occurred."
    MATH_UNDERFLOW = "Arithmetic underflow occurred."

    def message(self) -> str:
        """Return the human-readable message for this error."""
        return self.value


class BetError(Exception):
    """Raised when an instruction fails with one of the program's error codes."""

    def __init__(self, code: ErrorCode) -> None:
        if not isinstance(code, ErrorCode):
            raise TypeError(f"expected an ErrorCode, got {type(code).__name__}")
        super().__init__(code.message())
        self.code = code