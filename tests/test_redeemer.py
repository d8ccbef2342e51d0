import pytest

from conftest import E18, fund_and_mint

from vusd_engine.errors import AuthorizationError, StateError, ValidationError


@pytest.fixture
def approved(minted, alice):
    minted.vusd.approve(alice, minted.redeemer.address, 2 ** 256 - 1)
    return minted


def test_redeem_full_balance(chain, approved, dai, alice):
    balance = approved.vusd.balance_of(alice)
    expected = approved.redeemer.redeemable(dai.address, balance)

    paid = approved.redeemer.redeem(alice, dai.address, balance)

    assert paid == expected == 1000 * E18
    assert dai.balance_of(alice) == expected
    assert approved.vusd.balance_of(alice) == 0
    assert approved.vusd.total_supply == 0
    assert approved.treasury.withdrawable(dai.address) == 0


def test_redeem_to_other_address(approved, dai, alice, bob):
    paid = approved.redeemer.redeem(alice, dai.address, 400 * E18, to=bob)
    assert dai.balance_of(bob) == paid == 400 * E18
    assert dai.balance_of(alice) == 0
    assert approved.vusd.balance_of(alice) == 600 * E18


def test_redeem_shares_accrued_yield(chain, approved, dai, c_dai, alice):
    dai.faucet(c_dai.address, 100 * E18)
    c_dai.set_supply_rate(10 ** 15)
    chain.mine(10)
    c_dai.accrue_interest()

    assert approved.redeemer.redeemable(dai.address, 500 * E18) == 505 * E18
    paid = approved.redeemer.redeem(alice, dai.address, 500 * E18)
    assert paid == 505 * E18
    assert approved.treasury.withdrawable(dai.address) == 505 * E18


def test_redeemable_is_linear(approved, dai):
    redeemer = approved.redeemer
    for amount in (1, 7 * E18, 333 * E18):
        single = redeemer.redeemable(dai.address, amount)
        double = redeemer.redeemable(dai.address, 2 * amount)
        assert abs(double - 2 * single) <= 1


def test_redeemable_defaults_to_holder_balance(approved, dai, alice, bob):
    redeemer = approved.redeemer
    assert redeemer.redeemable(dai.address, holder=alice) == 1000 * E18
    assert redeemer.redeemable(dai.address, holder=bob) == 0
    assert redeemer.redeemable(bob, 1000 * E18) == 0


def test_redeemable_needs_amount_or_holder(approved, dai):
    with pytest.raises(ValidationError) as exc:
        approved.redeemer.redeemable(dai.address)
    assert exc.value.reason == "holder-is-required"


def test_redeem_fee_is_withheld(approved, dai, governor, alice):
    approved.redeemer.update_redeem_fee(governor, 30)
    paid = approved.redeemer.redeem(alice, dai.address, 1000 * E18)
    assert paid == 1000 * E18 - 1000 * E18 * 30 // 10_000
    # The withheld share stays behind with no VUSD left against it
    assert approved.treasury.withdrawable(dai.address) == 3 * E18
    assert approved.vusd.total_supply == 0


def test_redeem_requires_allowance(minted, dai, alice):
    with pytest.raises(StateError) as exc:
        minted.redeemer.redeem(alice, dai.address, 10 * E18)
    assert exc.value.reason == "transfer amount exceeds allowance"
    assert minted.vusd.balance_of(alice) == 1000 * E18


def test_redeem_unsupported_token(approved, alice, bob):
    with pytest.raises(StateError) as exc:
        approved.redeemer.redeem(alice, bob, E18)
    assert exc.value.reason == "token-is-not-supported"


def test_redeem_zero_amount(approved, dai, alice):
    with pytest.raises(StateError) as exc:
        approved.redeemer.redeem(alice, dai.address, 0)
    assert exc.value.reason == "redeemable-is-zero"


def test_redeem_more_than_balance(approved, dai, alice, bob):
    fund_and_mint(approved, dai, bob, 10 * E18)
    with pytest.raises(StateError) as exc:
        approved.redeemer.redeem(alice, dai.address, 1001 * E18)
    assert exc.value.reason == "burn amount exceeds balance"
    assert approved.vusd.total_supply == 1010 * E18


def test_redeem_rolls_back_when_treasury_rejects(approved, dai, governor, alice, bob):
    approved.treasury.update_redeemer(governor, bob)
    with pytest.raises(AuthorizationError):
        approved.redeemer.redeem(alice, dai.address, 100 * E18)
    assert approved.vusd.balance_of(alice) == 1000 * E18
    assert dai.balance_of(alice) == 0


def test_update_redeem_fee(chain, approved, governor, alice):
    redeemer = approved.redeemer
    with pytest.raises(AuthorizationError):
        redeemer.update_redeem_fee(alice, 1)
    with pytest.raises(ValidationError) as exc:
        redeemer.update_redeem_fee(governor, 0)
    assert exc.value.reason == "same-redeem-fee"
    with pytest.raises(ValidationError) as exc:
        redeemer.update_redeem_fee(governor, 10_001)
    assert exc.value.reason == "redeem-fee-limit-reached"

    redeemer.update_redeem_fee(governor, 25)
    event = chain.events("UpdatedRedeemFee")[-1]
    assert (event["old"], event["new"]) == (0, 25)
