"""Agent-style simulation of holders minting, transferring and redeeming VUSD."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from vusd_engine.config.settings import settings
from vusd_engine.errors import VUSDError
from vusd_engine.simulation.markets import DemoMarket
from vusd_engine.stablecoin.balance_sheet import SolvencyMetrics, SolvencyMonitor
from vusd_engine.utils.math import from_base_units, to_base_units

logger = logging.getLogger(__name__)

MAX_ALLOWANCE = 2 ** 256 - 1


@dataclass
class SimulationState:
    """Outcome of one simulated action."""

    step: int
    block_number: int
    action: str  # 'mint', 'redeem', 'transfer' or 'claim'
    actor: str
    token: Optional[str]
    succeeded: bool
    vusd_supply: int
    total_backing: int  # Collateral base units
    backing_ratio: float
    error: Optional[str] = None


@dataclass
class SimulationResult:
    """Results from a simulation run."""

    seed: Optional[int]
    states: List[SimulationState]
    metrics: List[SolvencyMetrics] = field(default_factory=list)

    def supply_path(self) -> np.ndarray:
        """VUSD supply after each step, in whole VUSD."""
        return np.array([from_base_units(s.vusd_supply, 18) for s in self.states])

    def backing_path(self) -> np.ndarray:
        """Treasury backing after each step, scaled like VUSD supply."""
        return np.array([from_base_units(s.total_backing, 18) for s in self.states])

    def backing_ratio_path(self) -> np.ndarray:
        return np.array([s.backing_ratio for s in self.states])

    def block_path(self) -> np.ndarray:
        return np.array([s.block_number for s in self.states])

    def failure_rate(self) -> float:
        if not self.states:
            return 0.0
        return float(np.mean([not s.succeeded for s in self.states]))

    def action_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for state in self.states:
            counts[state.action] = counts.get(state.action, 0) + 1
        return counts

    def min_backing_ratio(self) -> float:
        """Lowest finite backing ratio observed (inf before anything is minted)."""
        ratios = self.backing_ratio_path()
        finite = ratios[np.isfinite(ratios)]
        return float(finite.min()) if finite.size else float('inf')


class SimulationEngine:
    """
    Runs random holder activity against a demo market.

    Each step mines ``blocks_per_step`` blocks, accrues every market, then
    picks one action for a random holder:
    - mint: faucet collateral and deposit it
    - redeem: burn part of the holder's VUSD for a random collateral
    - transfer: split part of the balance between two other holders
    Every ``claim_interval`` steps the governor claims lending rewards into
    the first collateral. Rejected actions are recorded, not raised.
    """

    ACTIONS = ("mint", "redeem", "transfer")

    def __init__(
        self,
        market: DemoMarket,
        n_holders: Optional[int] = None,
        seed: Optional[int] = None,
        blocks_per_step: Optional[int] = None,
        action_weights: Sequence[float] = (0.5, 0.3, 0.2),
        max_deposit: float = 10_000,
        claim_interval: int = 50
    ):
        """
        Initialize simulation engine.

        Args:
            market: Deployed demo market
            n_holders: Number of simulated holders (defaults to settings)
            seed: Random seed (defaults to settings)
            blocks_per_step: Blocks mined per step (defaults to settings)
            action_weights: Probabilities of mint/redeem/transfer
            max_deposit: Largest single deposit, in whole tokens
            claim_interval: Steps between reward claims (0 disables)
        """
        if len(action_weights) != len(self.ACTIONS):
            raise ValueError("action_weights must have one weight per action")
        weights = np.asarray(action_weights, dtype=float)
        if weights.sum() <= 0:
            raise ValueError("action_weights must sum to a positive value")

        self.market = market
        self.system = market.system
        self.chain = market.chain
        self.seed = settings.random_seed if seed is None else seed
        self.rng = np.random.default_rng(self.seed)
        self.blocks_per_step = settings.blocks_per_step if blocks_per_step is None else blocks_per_step
        self.action_weights = weights / weights.sum()
        self.max_deposit = max_deposit
        self.claim_interval = claim_interval
        self.monitor = SolvencyMonitor(self.system)
        self.symbols = list(market.tokens)

        count = settings.n_holders if n_holders is None else n_holders
        self.holders = [self.chain.new_account(f"holder-{i}") for i in range(count)]
        for holder in self.holders:
            for token in market.tokens.values():
                token.approve(holder, self.system.minter.address, MAX_ALLOWANCE)
            self.system.vusd.approve(holder, self.system.redeemer.address, MAX_ALLOWANCE)

    def run(self, n_steps: Optional[int] = None) -> SimulationResult:
        """
        Run the simulation.

        Args:
            n_steps: Number of actions (defaults to settings)

        Returns:
            SimulationResult
        """
        n_steps = settings.n_steps if n_steps is None else n_steps
        states = [self.step(i) for i in range(n_steps)]
        result = SimulationResult(seed=self.seed, states=states, metrics=list(self.monitor.history))
        logger.info(
            "Simulated %d steps: supply=%.2f VUSD, min backing ratio=%.6f, failure rate=%.1f%%",
            n_steps,
            result.supply_path()[-1] if states else 0.0,
            result.min_backing_ratio(),
            result.failure_rate() * 100,
        )
        return result

    def step(self, index: int) -> SimulationState:
        self.chain.mine(self.blocks_per_step)
        for c_token in self.market.c_tokens.values():
            c_token.accrue_interest()

        if self.claim_interval and index > 0 and index % self.claim_interval == 0:
            return self._record(index, "claim", self.system.governor, self.symbols[0], self._claim)

        action = self.ACTIONS[self.rng.choice(len(self.ACTIONS), p=self.action_weights)]
        holder = self.holders[self.rng.integers(len(self.holders))]
        symbol = self.symbols[self.rng.integers(len(self.symbols))]
        handler = {
            "mint": self._mint,
            "redeem": self._redeem,
            "transfer": self._transfer,
        }[action]
        return self._record(index, action, holder, symbol, lambda: handler(holder, symbol))

    def _record(self, index, action, actor, symbol, run) -> SimulationState:
        error = None
        try:
            run()
            succeeded = True
        except VUSDError as exc:
            succeeded = False
            error = exc.reason

        metrics = self.monitor.calculate_solvency_metrics()
        return SimulationState(
            step=index,
            block_number=self.chain.block_number,
            action=action,
            actor=actor,
            token=symbol,
            succeeded=succeeded,
            vusd_supply=metrics.total_liabilities,
            total_backing=metrics.total_assets,
            backing_ratio=metrics.backing_ratio,
            error=error,
        )

    # Actions

    def _mint(self, holder: str, symbol: str) -> None:
        token = self.market.tokens[symbol]
        amount = to_base_units(round(float(self.rng.uniform(1, self.max_deposit)), 2), token.decimals)
        token.faucet(holder, amount)
        self.system.minter.mint(holder, token.address, amount)

    def _redeem(self, holder: str, symbol: str) -> None:
        token = self.market.tokens[symbol]
        balance = self.system.vusd.balance_of(holder)
        amount = int(balance * float(self.rng.uniform(0.1, 1.0)))
        self.system.redeemer.redeem(holder, token.address, amount)

    def _transfer(self, holder: str, symbol: str) -> None:
        others = [h for h in self.holders if h != holder]
        if len(others) < 2:
            recipients = others
        else:
            picks = self.rng.choice(len(others), size=2, replace=False)
            recipients = [others[i] for i in picks]
        balance = self.system.vusd.balance_of(holder)
        share = int(balance * float(self.rng.uniform(0.0, 0.5))) // max(len(recipients), 1)
        self.system.vusd.multi_transfer(holder, recipients, [share] * len(recipients))

    def _claim(self) -> None:
        token = self.market.tokens[self.symbols[0]]
        self.system.treasury.claim_comp_and_convert_to(self.system.governor, token.address)
