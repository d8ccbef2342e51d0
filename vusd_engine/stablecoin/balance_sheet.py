"""VUSD balance sheet and backing checks."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vusd_engine.stablecoin.system import VUSDSystem


@dataclass
class BalanceSheet:
    """
    Treasury balance sheet in base units.

    Assets = Liabilities + Surplus

    The Minter issues one VUSD base unit per collateral base unit (less fee),
    so collateral is summed in raw base units, the same units it was issued
    against. No price feed is involved.
    """

    # Assets: withdrawable collateral per token, in that token's base units
    collateral: Dict[str, int] = field(default_factory=dict)

    # Liabilities
    stablecoin_supply: int = 0

    block_number: int = 0

    @classmethod
    def from_system(cls, system: VUSDSystem) -> "BalanceSheet":
        """Read the current balance sheet off a deployed system."""
        return cls(
            collateral=system.treasury.positions(),
            stablecoin_supply=system.vusd.total_supply,
            block_number=system.chain.block_number,
        )

    def total_assets(self) -> int:
        return sum(self.collateral.values())

    def total_liabilities(self) -> int:
        return self.stablecoin_supply

    def surplus(self) -> int:
        """Protocol surplus: fees and yield not owed to any holder at par."""
        return self.total_assets() - self.total_liabilities()

    def backing_ratio(self) -> float:
        """
        Calculate backing ratio.

        BR = Assets / Liabilities
        """
        liabilities = self.total_liabilities()
        if liabilities == 0:
            return float('inf')
        return self.total_assets() / liabilities

    def composition(self) -> Dict[str, float]:
        """Share of total assets held in each collateral token."""
        assets = self.total_assets()
        if assets == 0:
            return {token: 0.0 for token in self.collateral}
        return {token: amount / assets for token, amount in self.collateral.items()}

    def is_fully_backed(self, min_ratio: float = 1.0) -> bool:
        return self.backing_ratio() >= min_ratio


@dataclass
class SolvencyMetrics:
    """Backing metrics at one block."""

    block_number: int
    backing_ratio: float
    surplus: int
    surplus_pct: float
    total_assets: int
    total_liabilities: int
    composition: Dict[str, float]

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "block_number": self.block_number,
            "backing_ratio": self.backing_ratio,
            "surplus": self.surplus,
            "surplus_pct": self.surplus_pct,
            "total_assets": self.total_assets,
            "total_liabilities": self.total_liabilities,
            "composition": dict(self.composition),
        }


@dataclass
class StablecoinInvariants:
    """
    Invariants that must hold for a deployed system.

    Ledger consistency and whitelist agreement are structural; the backing
    threshold is a policy knob.
    """

    min_backing_ratio: float = 1.0

    def check_invariants(self, system: VUSDSystem) -> Dict[str, bool]:
        """
        Check if invariants hold.

        Args:
            system: Deployed system

        Returns:
            Dictionary of invariant -> bool (True = holding)
        """
        vusd = system.vusd
        minter = system.minter
        treasury = system.treasury
        redeemer = system.redeemer
        sheet = BalanceSheet.from_system(system)

        minter_pairs = {token: minter.c_tokens(token) for token in minter.whitelisted_tokens()}
        treasury_pairs = {token: treasury.c_tokens(token) for token in treasury.whitelisted_tokens()}

        return {
            "supply_matches_balances": sum(vusd.balances.values()) == vusd.total_supply,
            "min_backing_ratio": sheet.backing_ratio() >= self.min_backing_ratio,
            "whitelists_in_sync": minter_pairs == treasury_pairs,
            "fees_in_range": (
                0 <= minter.minting_fee <= minter.max_minting_fee
                and 0 <= redeemer.redeem_fee <= redeemer.max_redeem_fee
            ),
            "wired": (
                vusd.minter == minter.address
                and vusd.treasury == treasury.address
                and treasury.redeemer == redeemer.address
            ),
        }

    def all_invariants_hold(self, system: VUSDSystem) -> bool:
        """Check if all critical invariants hold."""
        checks = self.check_invariants(system)

        critical = [
            "supply_matches_balances",
            "min_backing_ratio",
        ]

        return all(checks[inv] for inv in critical)


class SolvencyMonitor:
    """
    Tracks backing of a deployed system over time.

    Each ``calculate_solvency_metrics`` call appends to ``history`` so the
    simulator and dashboard can chart backing as yield accrues.
    """

    def __init__(
        self,
        system: VUSDSystem,
        invariants: Optional[StablecoinInvariants] = None
    ):
        """
        Initialize monitor.

        Args:
            system: Deployed system
            invariants: System invariants
        """
        self.system = system
        self.invariants = invariants or StablecoinInvariants()
        self.history: List[SolvencyMetrics] = []

    def calculate_solvency_metrics(self) -> SolvencyMetrics:
        sheet = BalanceSheet.from_system(self.system)
        liabilities = sheet.total_liabilities()
        surplus = sheet.surplus()

        metrics = SolvencyMetrics(
            block_number=sheet.block_number,
            backing_ratio=sheet.backing_ratio(),
            surplus=surplus,
            surplus_pct=surplus / liabilities if liabilities > 0 else 0.0,
            total_assets=sheet.total_assets(),
            total_liabilities=liabilities,
            composition=sheet.composition(),
        )

        self.history.append(metrics)
        return metrics

    def check_health(self) -> Dict[str, object]:
        """
        Comprehensive health check.

        Returns:
            Dictionary with health status
        """
        metrics = self.calculate_solvency_metrics()
        invariants_check = self.invariants.check_invariants(self.system)

        return {
            "healthy": all(invariants_check.values()),
            "metrics": metrics.to_dict(),
            "invariants": invariants_check,
            "warnings": self._generate_warnings(metrics, invariants_check),
        }

    def _generate_warnings(
        self,
        metrics: SolvencyMetrics,
        invariants: Dict[str, bool]
    ) -> List[str]:
        """Generate warning messages."""
        warnings = []

        if not invariants["supply_matches_balances"]:
            warnings.append("🚨 CRITICAL: VUSD balances do not sum to total supply!")

        if not invariants["min_backing_ratio"]:
            warnings.append(f"⚠️ Backing ratio below minimum: {metrics.backing_ratio:.2%}")

        if not invariants["whitelists_in_sync"]:
            warnings.append("⚠️ Minter and Treasury whitelists differ")

        if not invariants["wired"]:
            warnings.append("⚠️ Ledger, Minter, Treasury and Redeemer addresses are not wired together")

        return warnings
