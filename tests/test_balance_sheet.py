import math

from conftest import E18, E6, fund_and_mint

from vusd_engine.stablecoin.balance_sheet import BalanceSheet, SolvencyMonitor, StablecoinInvariants


def test_empty_system_is_unbounded(system):
    sheet = BalanceSheet.from_system(system)
    assert sheet.total_assets() == 0
    assert sheet.total_liabilities() == 0
    assert math.isinf(sheet.backing_ratio())
    assert sheet.composition() == {token: 0.0 for token in system.collateral_tokens()}


def test_balance_sheet_after_mints(system, dai, usdc, alice, bob):
    fund_and_mint(system, dai, alice, 300 * E18)
    fund_and_mint(system, usdc, bob, 100 * E6)

    sheet = BalanceSheet.from_system(system)
    assert sheet.collateral == {dai.address: 300 * E18, usdc.address: 100 * E6}
    assert sheet.total_liabilities() == 300 * E18 + 100 * E6
    assert sheet.surplus() == 0
    assert sheet.backing_ratio() == 1.0
    assert sheet.is_fully_backed()


def test_minting_fee_creates_surplus(system, dai, governor, alice):
    system.minter.update_minting_fee(governor, 100)
    fund_and_mint(system, dai, alice, 1000 * E18)

    sheet = BalanceSheet.from_system(system)
    assert sheet.surplus() == 10 * E18
    assert sheet.backing_ratio() > 1.0


def test_invariants_hold_for_wired_system(minted):
    checks = StablecoinInvariants().check_invariants(minted)
    assert all(checks.values()), checks
    assert StablecoinInvariants().all_invariants_hold(minted)


def test_invariants_detect_whitelist_drift(minted, dai, governor):
    minted.treasury.remove_whitelisted_token(governor, dai.address)
    checks = StablecoinInvariants().check_invariants(minted)
    assert checks["whitelists_in_sync"] is False
    # Removing the position from the books leaves supply unbacked
    assert checks["min_backing_ratio"] is False


def test_monitor_records_history_and_warnings(minted, dai, governor):
    monitor = SolvencyMonitor(minted)
    health = monitor.check_health()
    assert health["healthy"] is True
    assert health["warnings"] == []
    assert health["metrics"]["total_liabilities"] == 1000 * E18

    minted.minter.remove_whitelisted_token(governor, dai.address)
    health = monitor.check_health()
    assert health["healthy"] is False
    assert any("whitelists differ" in w for w in health["warnings"])
    assert len(monitor.history) == 2
