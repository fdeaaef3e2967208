import pytest

from dicebet.accounts import (
    DISCRIMINATOR_LEN,
    PUBKEY_LEN,
    BetState,
    GlobalState,
    Pubkey,
    RollState,
    TreasuryAccount,
)

PROGRAM_ID = "FRb5eZnHH434Z5tQzoifEVL5MC8XCs4t3jXkkraszuZg"
ALICE = Pubkey(bytes(range(32)))
BOB = Pubkey(bytes(range(100, 132)))


def test_zero_pubkey_base58():
    assert str(Pubkey()) == "1" * 32


def test_pubkey_base58_round_trip():
    key = Pubkey(PROGRAM_ID)
    assert str(key) == PROGRAM_ID
    assert Pubkey(bytes(key)) == key


def test_pubkey_bytes_round_trip():
    assert bytes(Pubkey(str(ALICE))) == bytes(range(32))


def test_pubkey_hash_and_equality():
    assert {ALICE, Pubkey(bytes(ALICE))} == {ALICE}


def test_pubkey_wrong_length():
    with pytest.raises(ValueError):
        Pubkey(bytes(PUBKEY_LEN - 1))


def test_pubkey_invalid_character():
    with pytest.raises(ValueError):
        Pubkey("0OIl")


def test_pubkey_wrong_type():
    with pytest.raises(TypeError):
        Pubkey(42)


def test_discriminators_distinct():
    encoded = [
        GlobalState(ALICE, BOB).to_bytes(),
        TreasuryAccount().to_bytes(),
        RollState(ALICE).to_bytes(),
        BetState(ALICE, BOB).to_bytes(),
    ]
    discs = {data[:DISCRIMINATOR_LEN] for data in encoded}
    assert len(discs) == 4
    assert encoded[0][:DISCRIMINATOR_LEN] == GlobalState.DISCRIMINATOR


def test_global_state_round_trip():
    state = GlobalState(ALICE, BOB, treasury_bump=254, bump=253)
    data = state.to_bytes()
    assert len(data) == DISCRIMINATOR_LEN + GlobalState.LEN
    assert data[:DISCRIMINATOR_LEN] == GlobalState.DISCRIMINATOR
    assert GlobalState.from_bytes(data) == state


def test_global_state_layout():
    data = GlobalState(ALICE, BOB, treasury_bump=7, bump=9).to_bytes()
    body = data[DISCRIMINATOR_LEN:]
    assert body[:32] == bytes(ALICE)
    assert body[32:64] == bytes(BOB)
    assert body[64:] == bytes([7, 9])


def test_global_state_rejects_bad_bump():
    with pytest.raises(ValueError):
        GlobalState(ALICE, BOB, bump=256)


def test_global_state_rejects_other_discriminator():
    data = RollState(ALICE).to_bytes()
    with pytest.raises(ValueError):
        GlobalState.from_bytes(data)


def test_global_state_truncated():
    data = GlobalState(ALICE, BOB).to_bytes()
    with pytest.raises(ValueError):
        GlobalState.from_bytes(data[:-1])


def test_treasury_round_trip():
    data = TreasuryAccount().to_bytes()
    assert len(data) == DISCRIMINATOR_LEN + TreasuryAccount.LEN
    assert TreasuryAccount.from_bytes(data) == TreasuryAccount()


def test_treasury_rejects_foreign_data():
    with pytest.raises(ValueError):
        TreasuryAccount.from_bytes(BetState(ALICE, BOB).to_bytes())


@pytest.mark.parametrize("result", [None, 1, 6])
def test_roll_state_round_trip(result):
    state = RollState(ALICE, revealed=result is not None, result=result,
                      total_bets_amount=123_456_789, bump=250)
    data = state.to_bytes()
    assert len(data) == DISCRIMINATOR_LEN + RollState.LEN
    assert RollState.from_bytes(data) == state


def test_roll_state_none_tag():
    body = RollState(ALICE).to_bytes()[DISCRIMINATOR_LEN:]
    assert body[PUBKEY_LEN + 1] == 0


def test_roll_state_some_tag_and_value():
    body = RollState(ALICE, revealed=True, result=4).to_bytes()[DISCRIMINATOR_LEN:]
    assert body[PUBKEY_LEN] == 1
    assert body[PUBKEY_LEN + 1:PUBKEY_LEN + 3] == bytes([1, 4])


def test_roll_state_invalid_bool_byte():
    data = bytearray(RollState(ALICE).to_bytes())
    data[DISCRIMINATOR_LEN + PUBKEY_LEN] = 2
    with pytest.raises(ValueError):
        RollState.from_bytes(bytes(data))


def test_roll_state_rejects_overflowing_total():
    state = RollState(ALICE)
    state.total_bets_amount = 2**64
    with pytest.raises(ValueError):
        state.to_bytes()


def test_bet_state_round_trip():
    bet = BetState(ALICE, BOB, amount=50_000_000, guess=3, claimed=True, bump=200)
    data = bet.to_bytes()
    assert len(data) == DISCRIMINATOR_LEN + BetState.LEN
    assert BetState.from_bytes(data) == bet


def test_bet_state_layout():
    bet = BetState(ALICE, BOB, amount=1_000_000, guess=5, claimed=False, bump=17)
    body = bet.to_bytes()[DISCRIMINATOR_LEN:]
    assert body[:32] == bytes(ALICE)
    assert body[32:64] == bytes(BOB)
    assert body[64:72] == (1_000_000).to_bytes(8, "little")
    assert body[72:75] == bytes([5, 0, 17])
    assert body[75:] == bytes(BetState.LEN - 75)


def test_bet_state_nonzero_claimed_byte_reads_true():
    data = bytearray(BetState(ALICE, BOB).to_bytes())
    data[DISCRIMINATOR_LEN + 73] = 9
    assert BetState.from_bytes(bytes(data)).claimed is True


def test_bet_state_defaults_unclaimed_and_empty():
    bet = BetState.from_bytes(BetState(ALICE, BOB).to_bytes())
    assert bet.amount == 0
    assert bet.claimed is False


def test_bet_state_rejects_bad_guess_byte():
    with pytest.raises(ValueError):
        BetState(ALICE, BOB, guess=300)


def test_bet_state_requires_pubkeys():
    with pytest.raises(TypeError):
        BetState(bytes(ALICE), BOB)