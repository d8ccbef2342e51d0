import pytest

from vusd_engine.chain.environment import ZERO_ADDRESS
from vusd_engine.errors import AuthorizationError, ValidationError
from vusd_engine.tokens.ledger import VUSD


@pytest.fixture
def vusd(chain, governor):
    return VUSD(chain, governor, treasury=governor)


def test_two_step_governor_transfer(chain, vusd, governor, alice):
    vusd.update_governor(governor, alice)
    assert vusd.governor == governor
    assert vusd.proposed_governor == alice

    vusd.accept_governorship(alice)
    assert vusd.governor == alice
    assert vusd.proposed_governor == ZERO_ADDRESS

    event = chain.events("UpdatedGovernor")[-1]
    assert (event["old"], event["new"]) == (governor, alice)


def test_only_governor_can_propose(vusd, alice, bob):
    with pytest.raises(AuthorizationError) as exc:
        vusd.update_governor(alice, bob)
    assert exc.value.reason == "caller-is-not-the-governor"


def test_propose_rejects_zero_and_same(vusd, governor):
    with pytest.raises(ValidationError) as exc:
        vusd.update_governor(governor, ZERO_ADDRESS)
    assert exc.value.reason == "proposed-governor-is-zero"

    with pytest.raises(ValidationError) as exc:
        vusd.update_governor(governor, governor)
    assert exc.value.reason == "same-governor"


def test_only_proposed_governor_can_accept(vusd, governor, alice, bob):
    with pytest.raises(AuthorizationError):
        vusd.accept_governorship(alice)

    vusd.update_governor(governor, alice)
    with pytest.raises(AuthorizationError) as exc:
        vusd.accept_governorship(bob)
    assert exc.value.reason == "caller-is-not-the-proposed-governor"
    assert vusd.governor == governor


def test_old_governor_loses_rights(vusd, governor, alice, bob):
    vusd.update_governor(governor, alice)
    vusd.accept_governorship(alice)
    with pytest.raises(AuthorizationError):
        vusd.update_minter(governor, bob)
    vusd.update_minter(alice, bob)
    assert vusd.minter == bob
