"""
Pytest configuration and shared fixtures for test suite.
"""
from __future__ import annotations

import os

import pytest

# Keep tests independent of a developer's .env overrides.
os.environ.setdefault("VUSD_DEFAULT_MINTING_FEE", "0")
os.environ.setdefault("VUSD_DEFAULT_REDEEM_FEE", "0")

from vusd_engine.chain.environment import Chain  # noqa: E402
from vusd_engine.protocol.compound import CToken  # noqa: E402
from vusd_engine.stablecoin.system import deploy_system  # noqa: E402
from vusd_engine.tokens.erc20 import FaucetToken  # noqa: E402

E18 = 10 ** 18
E6 = 10 ** 6


@pytest.fixture
def chain():
    return Chain()


@pytest.fixture
def governor(chain):
    return chain.new_account("governor")


@pytest.fixture
def alice(chain):
    return chain.new_account("alice")


@pytest.fixture
def bob(chain):
    return chain.new_account("bob")


@pytest.fixture
def carol(chain):
    return chain.new_account("carol")


@pytest.fixture
def dai(chain):
    return FaucetToken(chain, "Dai Stablecoin", "DAI", 18)


@pytest.fixture
def usdc(chain):
    return FaucetToken(chain, "USD Coin", "USDC", 6)


@pytest.fixture
def c_dai(chain, dai):
    return CToken(chain, dai.address)


@pytest.fixture
def c_usdc(chain, usdc):
    return CToken(chain, usdc.address)


@pytest.fixture
def system(chain, governor, dai, c_dai, usdc, c_usdc):
    """Wired system with DAI and USDC whitelisted and zero fees."""
    return deploy_system(
        chain,
        governor,
        collaterals=[(dai.address, c_dai.address), (usdc.address, c_usdc.address)],
        minting_fee=0,
        redeem_fee=0,
    )


def fund_and_mint(system, token, holder, amount):
    """Faucet ``amount`` of collateral to ``holder`` and mint VUSD with it."""
    token.faucet(holder, amount)
    token.approve(holder, system.minter.address, amount)
    return system.minter.mint(holder, token.address, amount)


@pytest.fixture
def minted(system, dai, alice):
    """Alice holds 1000 VUSD minted from 1000 DAI."""
    fund_and_mint(system, dai, alice, 1000 * E18)
    return system
