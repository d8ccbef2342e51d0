"""Streamlit dashboard for the VUSD engine."""

import streamlit as st
import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from vusd_engine.simulation.markets import DEFAULT_COLLATERALS, build_demo_market
from vusd_engine.simulation.engine import SimulationEngine
from vusd_engine.stablecoin.balance_sheet import SolvencyMonitor
from vusd_engine.utils.math import fee_to_basis_points, from_base_units


st.set_page_config(
    page_title="VUSD Dashboard",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main > div {
        padding-top: 2rem;
    }
    .stMetric {
        background-color: rgba(255, 255, 255, 0.05);
        border: 1px solid rgba(255, 255, 255, 0.1);
        padding: 0.5rem;
        border-radius: 0.5rem;
    }
</style>
""", unsafe_allow_html=True)


st.title("VUSD Engine")
st.caption("Collateral-backed stable token with a yield-bearing treasury.")
st.markdown("---")


st.sidebar.header("Inputs")

st.sidebar.subheader("Fees")

minting_fee = st.sidebar.number_input(
    "Minting Fee (of 10,000)",
    min_value=0,
    max_value=10_000,
    value=0,
    step=5,
    help="Withheld from every mint; stays in the treasury as surplus."
)
redeem_fee = st.sidebar.number_input(
    "Redeem Fee (of 10,000)",
    min_value=0,
    max_value=10_000,
    value=30,
    step=5,
    help="Withheld from every redemption payout."
)

st.sidebar.subheader("Collateral")

collateral_choice = st.sidebar.multiselect(
    "Whitelisted Tokens",
    ["DAI", "USDC", "USDT"],
    default=["DAI", "USDC", "USDT"]
)
supply_apy = st.sidebar.slider(
    "Lending Supply APY",
    min_value=0.0,
    max_value=0.2,
    value=0.05,
    step=0.005,
    format="%.3f",
    help="Simple interest earned by every cToken market."
)
blocks_per_year = 2_102_400

with st.sidebar.expander("Rewards", expanded=False):
    comp_price = st.slider(
        "Reward Token Price ($)",
        min_value=1,
        max_value=500,
        value=50,
        step=1
    )
    claim_interval = st.slider(
        "Claim Interval (steps)",
        min_value=0,
        max_value=200,
        value=50,
        step=10,
        help="0 disables reward claiming."
    )

st.sidebar.markdown("---")
st.sidebar.subheader("Simulation")

n_holders = st.sidebar.slider(
    "Holders",
    min_value=2,
    max_value=50,
    value=10,
    step=1
)
n_steps = st.sidebar.slider(
    "Steps",
    min_value=20,
    max_value=1000,
    value=200,
    step=20
)
blocks_per_step = st.sidebar.slider(
    "Blocks per Step",
    min_value=1,
    max_value=10_000,
    value=100,
    step=50
)
seed = st.sidebar.number_input("Random Seed", min_value=0, value=42, step=1)

with st.sidebar.expander("Action Mix", expanded=False):
    mint_weight = st.slider("Mint", 0.0, 1.0, 0.5, 0.05)
    redeem_weight = st.slider("Redeem", 0.0, 1.0, 0.3, 0.05)
    transfer_weight = st.slider("Transfer", 0.0, 1.0, 0.2, 0.05)

st.sidebar.caption("Amounts are shown in whole tokens; fees are numerators over 10,000.")

run_simulation = st.sidebar.button(
    "Run Simulation", type="primary", width="stretch")


if run_simulation:

    weights = (mint_weight, redeem_weight, transfer_weight)
    if not collateral_choice:
        st.error("Select at least one collateral token.")
        st.stop()
    if sum(weights) <= 0:
        st.error("At least one action weight must be positive.")
        st.stop()

    configs = {asset.symbol: asset for asset in DEFAULT_COLLATERALS}

    with st.spinner("Deploying VUSD system..."):
        market = build_demo_market(
            collaterals=[configs[symbol] for symbol in collateral_choice],
            supply_rate_per_block=int(supply_apy * 10 ** 18 / blocks_per_year),
            comp_price=comp_price,
            minting_fee=int(minting_fee),
            redeem_fee=int(redeem_fee),
        )
        system = market.system

    st.success("System deployed")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Collateral Tokens", len(system.collateral_tokens()))
    with col2:
        st.metric("Minting Fee", f"{fee_to_basis_points(system.minter.minting_fee, system.minter.max_minting_fee):.0f} bps")
    with col3:
        st.metric("Redeem Fee", f"{fee_to_basis_points(system.redeemer.redeem_fee, system.redeemer.max_redeem_fee):.0f} bps")
    with col4:
        st.metric("Version", system.vusd.VERSION)

    with st.spinner("Running holder simulation..."):
        engine = SimulationEngine(
            market,
            n_holders=n_holders,
            seed=int(seed),
            blocks_per_step=blocks_per_step,
            action_weights=weights,
            claim_interval=claim_interval,
        )
        result = engine.run(n_steps)

    health = SolvencyMonitor(system).check_health()

    st.markdown("### Final Balance Sheet")

    supply_path = result.supply_path()
    backing_path = result.backing_path()
    final_supply = supply_path[-1] if len(supply_path) else 0.0
    final_backing = backing_path[-1] if len(backing_path) else 0.0

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("VUSD Supply", f"{final_supply:,.2f}")
    with col2:
        st.metric("Treasury Backing", f"${final_backing:,.2f}")
    with col3:
        st.metric("Surplus", f"${final_backing - final_supply:,.2f}")
    with col4:
        ratio = health["metrics"]["backing_ratio"]
        st.metric("Backing Ratio", "n/a" if not np.isfinite(ratio) else f"{ratio:.4%}")

    if health["healthy"]:
        st.success("All invariants hold")
    for warning in health["warnings"]:
        st.warning(warning)

    st.markdown("---")

    tab1, tab2, tab3, tab4 = st.tabs(
        ["Supply & Backing", "Backing Ratio", "Composition", "Activity"])

    blocks = result.block_path()

    with tab1:
        st.subheader("Supply and Backing Over Time")

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=blocks, y=supply_path, mode="lines", name="VUSD Supply"))
        fig.add_trace(go.Scatter(
            x=blocks, y=backing_path, mode="lines", name="Treasury Backing"))
        fig.update_layout(
            xaxis_title="Block",
            yaxis_title="Amount ($)",
            height=500,
            hovermode="x unified"
        )
        st.plotly_chart(fig, width="stretch")

    with tab2:
        st.subheader("Backing Ratio")

        ratios = result.backing_ratio_path()
        finite = np.isfinite(ratios)

        fig = make_subplots(rows=2, cols=1, shared_xaxes=True,
                            subplot_titles=("Backing Ratio", "Surplus ($)"))
        fig.add_trace(go.Scatter(
            x=blocks[finite], y=ratios[finite], mode="lines", name="Backing Ratio"), row=1, col=1)
        fig.add_hline(y=1.0, line_dash="dash", line_color="red", row=1, col=1)
        fig.add_trace(go.Scatter(
            x=blocks, y=backing_path - supply_path, mode="lines", name="Surplus",
            fill="tozeroy"), row=2, col=1)
        fig.update_layout(height=600, showlegend=False)
        st.plotly_chart(fig, width="stretch")

        col1, col2 = st.columns(2)
        with col1:
            st.metric("Minimum Backing Ratio", "n/a" if not np.isfinite(result.min_backing_ratio())
                      else f"{result.min_backing_ratio():.4%}")
        with col2:
            st.metric("Failure Rate", f"{result.failure_rate():.1%}")

    with tab3:
        st.subheader("Treasury Composition")

        positions = system.treasury.positions()
        labels = [system.chain.label(token) for token in positions]
        values = [
            from_base_units(amount, system.chain.contract_at(token).decimals)
            for token, amount in positions.items()
        ]
        fig = go.Figure(go.Pie(labels=labels, values=values, hole=0.4))
        fig.update_layout(height=450)
        st.plotly_chart(fig, width="stretch")

        st.dataframe({
            "Token": labels,
            "Withdrawable": values,
            "cToken": [system.chain.label(system.treasury.c_tokens(t)) for t in positions],
        })

    with tab4:
        st.subheader("Simulated Actions")

        counts = result.action_counts()
        failures = {}
        for state in result.states:
            if not state.succeeded:
                failures[state.error] = failures.get(state.error, 0) + 1

        col1, col2 = st.columns(2)
        with col1:
            fig = go.Figure(go.Bar(x=list(counts), y=list(counts.values()),
                                   marker_color='rgb(55, 83, 109)'))
            fig.update_layout(title="Actions", height=400)
            st.plotly_chart(fig, width="stretch")
        with col2:
            if failures:
                fig = go.Figure(go.Bar(x=list(failures), y=list(failures.values()),
                                       marker_color='rgb(200, 80, 80)'))
                fig.update_layout(title="Rejections by Reason", height=400)
                st.plotly_chart(fig, width="stretch")
            else:
                st.info("No rejected actions")

        st.metric("Holders with Balance", len(system.vusd.holders()))

else:

    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown("""
        ## Welcome to the VUSD Dashboard

        Configure fees, collateral and holder activity in the sidebar.

        ### Quick Start:
        1. Pick the whitelisted collateral and fees
        2. Set the lending APY and simulation length
        3. Click "Run Simulation"

        Holders mint, transfer and redeem VUSD while the treasury earns
        lending yield; the dashboard tracks supply, backing and surplus.
        """)
