"""Simulated collateral markets around a deployed VUSD system."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vusd_engine.chain.environment import Chain
from vusd_engine.config.settings import settings
from vusd_engine.protocol.compound import Comptroller, CToken
from vusd_engine.protocol.swap import FixedRateSwapManager
from vusd_engine.stablecoin.system import VUSDSystem, deploy_system
from vusd_engine.tokens.erc20 import FaucetToken
from vusd_engine.utils.math import EXP_SCALE, to_base_units


@dataclass
class CollateralConfig:
    """A collateral asset and its lending market."""

    symbol: str
    name: str
    decimals: int
    initial_exchange_rate: int = EXP_SCALE
    comp_speed: int = 10 ** 12  # Reward units per block per whole wrapped token


DEFAULT_COLLATERALS: List[CollateralConfig] = [
    CollateralConfig("DAI", "Dai Stablecoin", 18),
    CollateralConfig("USDC", "USD Coin", 6),
    CollateralConfig("USDT", "Tether USD", 6),
]


@dataclass
class DemoMarket:
    """A deployed system plus the external collaborators it talks to."""

    chain: Chain
    system: VUSDSystem
    tokens: Dict[str, FaucetToken] = field(default_factory=dict)  # symbol -> collateral
    c_tokens: Dict[str, CToken] = field(default_factory=dict)  # symbol -> market
    comp: Optional[FaucetToken] = None
    comptroller: Optional[Comptroller] = None
    swap_manager: Optional[FixedRateSwapManager] = None

    @property
    def governor(self) -> str:
        return self.system.governor

    def token(self, symbol: str) -> FaucetToken:
        return self.tokens[symbol]


def build_demo_market(
    chain: Optional[Chain] = None,
    collaterals: Optional[List[CollateralConfig]] = None,
    supply_rate_per_block: Optional[int] = None,
    cash_buffer: float = 1_000_000,
    comp_price: int = 50,
    minting_fee: Optional[int] = None,
    redeem_fee: Optional[int] = None
) -> DemoMarket:
    """
    Deploy collateral tokens, cToken markets, rewards, a swap manager and VUSD.

    Each market is seeded with ``cash_buffer`` of extra underlying, standing in
    for the borrower repayments that fund interest in a live market. The swap
    manager converts COMP at ``comp_price`` dollars and holds inventory for it.

    Args:
        chain: Chain to deploy on (a fresh one if omitted)
        collaterals: Assets to whitelist (DAI/USDC/USDT if omitted)
        supply_rate_per_block: Interest rate of every market (defaults to settings)
        cash_buffer: Extra underlying per market, in whole tokens
        comp_price: Dollar price of the reward token used by the swap manager
        minting_fee: Initial minting fee
        redeem_fee: Initial redeem fee

    Returns:
        DemoMarket
    """
    chain = chain or Chain()
    collaterals = collaterals or DEFAULT_COLLATERALS
    rate = settings.supply_rate_per_block if supply_rate_per_block is None else supply_rate_per_block
    governor = chain.new_account("governor")

    comp = FaucetToken(chain, "Compound", "COMP", 18)
    comptroller = Comptroller(chain, comp.address)
    comp.faucet(comptroller.address, to_base_units(10_000_000, 18))
    swap_manager = FixedRateSwapManager(chain)

    tokens: Dict[str, FaucetToken] = {}
    c_tokens: Dict[str, CToken] = {}
    for asset in collaterals:
        token = FaucetToken(chain, asset.name, asset.symbol, asset.decimals)
        c_token = CToken(
            chain,
            token.address,
            comptroller=comptroller.address,
            initial_exchange_rate=asset.initial_exchange_rate,
            supply_rate_per_block=rate,
        )
        token.faucet(c_token.address, to_base_units(cash_buffer, asset.decimals))
        # Speeds are per 1e18 wrapped base units; rescale for low-decimal markets
        comptroller.set_comp_speed(c_token.address, asset.comp_speed * 10 ** (18 - asset.decimals))

        # COMP (18 decimals) -> token base units, 1e18 mantissa
        swap_manager.set_rate(comp.address, token.address, comp_price * 10 ** asset.decimals)
        token.faucet(swap_manager.address, to_base_units(cash_buffer, asset.decimals))

        tokens[asset.symbol] = token
        c_tokens[asset.symbol] = c_token

    system = deploy_system(
        chain,
        governor,
        collaterals=[(tokens[s].address, c_tokens[s].address) for s in tokens],
        comptroller=comptroller.address,
        swap_manager=swap_manager.address,
        minting_fee=minting_fee,
        redeem_fee=redeem_fee,
    )

    return DemoMarket(
        chain=chain,
        system=system,
        tokens=tokens,
        c_tokens=c_tokens,
        comp=comp,
        comptroller=comptroller,
        swap_manager=swap_manager,
    )
