import numpy as np
import pytest

from vusd_engine.simulation.engine import SimulationEngine
from vusd_engine.simulation.markets import CollateralConfig, build_demo_market
from vusd_engine.stablecoin.balance_sheet import StablecoinInvariants


@pytest.fixture
def market():
    return build_demo_market(
        collaterals=[CollateralConfig("DAI", "Dai Stablecoin", 18)],
        supply_rate_per_block=10 ** 10,
    )


def test_demo_market_is_wired(market):
    system = market.system
    dai = market.token("DAI")
    assert system.collateral_tokens() == [dai.address]
    assert system.treasury.c_tokens(dai.address) == market.c_tokens["DAI"].address
    assert system.treasury.comptroller == market.comptroller.address
    assert system.treasury.swap_manager == market.swap_manager.address
    assert market.governor == system.governor


def test_default_market_whitelists_three_tokens():
    market = build_demo_market()
    assert sorted(market.tokens) == ["DAI", "USDC", "USDT"]
    assert len(market.system.collateral_tokens()) == 3
    assert market.c_tokens["USDC"].decimals == 6


def test_simulation_keeps_system_solvent(market):
    engine = SimulationEngine(market, n_holders=5, seed=7, blocks_per_step=50, claim_interval=20)
    result = engine.run(60)

    assert len(result.states) == 60
    assert result.block_path()[-1] == market.chain.block_number
    assert np.all(np.diff(result.block_path()) == 50)
    assert sum(result.action_counts().values()) == 60
    assert result.action_counts().get("claim") == 2
    assert result.min_backing_ratio() >= 1.0
    assert StablecoinInvariants().all_invariants_hold(market.system)
    assert len(result.metrics) == 60


def test_simulation_is_reproducible():
    def run():
        market = build_demo_market(collaterals=[CollateralConfig("DAI", "Dai Stablecoin", 18)])
        return SimulationEngine(market, n_holders=4, seed=11).run(30)

    first, second = run(), run()
    assert [s.action for s in first.states] == [s.action for s in second.states]
    np.testing.assert_array_equal(first.supply_path(), second.supply_path())


def test_failed_actions_are_recorded(market):
    engine = SimulationEngine(market, n_holders=3, seed=1, action_weights=(0.0, 1.0, 0.0), claim_interval=0)
    result = engine.run(5)
    assert result.failure_rate() == 1.0
    assert {s.error for s in result.states} == {"redeemable-is-zero"}


def test_action_weights_validated(market):
    with pytest.raises(ValueError):
        SimulationEngine(market, action_weights=(1.0, 0.0))
    with pytest.raises(ValueError):
        SimulationEngine(market, action_weights=(0.0, 0.0, 0.0))
