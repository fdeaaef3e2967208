import pytest

from dicebet.errors import BetError, ErrorCode


def test_invalid_guess_message():
    assert ErrorCode.INVALID_GUESS.message() == "Invalid guess. Must be between 1 and 6."


def test_math_overflow_message():
    assert ErrorCode.MATH_OVERFLOW.message() == "Arithmetic overflow occurred."


def test_previous_bet_unclaimed_message():
    assert ErrorCode.PREVIOUS_BET_UNCLAIMED.message() == (
        "You have unclaimed winnings from a previous bet that must be settled first."
    )


def test_messages_are_unique():
    messages = [str(BetError(code)) for code in ErrorCode]
    assert len(messages) == 18
    assert len(set(messages)) == len(messages)


def test_bet_error_carries_code():
    err = BetError(ErrorCode.BET_TOO_SMALL)
    assert err.code is ErrorCode.BET_TOO_SMALL
    assert str(err) == "Bet amount is below minimum allowed."


@pytest.mark.parametrize("code", list(ErrorCode))
def test_bet_error_str_matches_message(code):
    assert str(BetError(code)) == code.message()


def test_bet_error_rejects_non_code():
    with pytest.raises(TypeError):
        BetError("Bet already placed for this roll.")