from decimal import Decimal

import pytest

from twamm_sim.common.errors import SimulationError
from twamm_sim.common.models import Parameters
from twamm_sim.persistence.summary_logger import content_hash
from twamm_sim.simulator.engine import BlockDecision, TwammSimulation, run_simulation
from twamm_sim.simulator.interface import PoolOperation


@pytest.fixture(scope="module")
def scenario_a():
    # 10M/10M pool, $1M over 2 intervals, 0.01% / 0.005% fees, $0.37 arb cost
    return run_simulation(Parameters(arbitrage_cost_usd="0.37"))


@pytest.fixture(scope="module")
def scenario_b():
    return run_simulation(Parameters(arbitrage_cost_usd="1000000"))


def test_scenario_a_commits_multiple_arbitrages(scenario_a):
    counts = scenario_a.decisions()
    arb = scenario_a.context.stats.arbitrage
    assert counts[BlockDecision.COMMITTED] > 1
    assert arb.swaps == counts[BlockDecision.COMMITTED]
    assert arb.gas_usd == Decimal("0.37") * arb.swaps
    assert arb.net_profit_usd > arb.swaps  # every commit clears the $1 threshold
    assert scenario_a.context.order.proceeds_received < scenario_a.schedule.actual_order_amount
    assert scenario_a.trade_cost_percent > 0


def test_scenario_a_sells_the_whole_order(scenario_a):
    order = scenario_a.context.order
    assert order.remaining_to_sell == 0
    assert order.last_virtual_execution_time == scenario_a.schedule.order_length_seconds
    assert len(scenario_a.outcomes) == scenario_a.schedule.order_length_blocks + 1
    assert scenario_a.outcomes[-1].mutated_state


def test_first_block_has_nothing_to_arbitrage(scenario_a):
    first = scenario_a.outcomes[0]
    assert first.decision is BlockDecision.NO_ARB_CANDIDATE
    assert first.execution.sell_amount == 0
    assert first.quote is None


def test_rejected_blocks_leave_state_untouched(scenario_a):
    previous = None
    for outcome in scenario_a.outcomes:
        if previous is not None and not outcome.mutated_state:
            assert outcome.reserve_x == previous.reserve_x
            assert outcome.reserve_y == previous.reserve_y
            assert outcome.remaining_to_sell == previous.remaining_to_sell
            assert outcome.proceeds_received == previous.proceeds_received
        previous = outcome


def test_order_progress_is_monotonic(scenario_a):
    remaining = [o.remaining_to_sell for o in scenario_a.outcomes]
    proceeds = [o.proceeds_received for o in scenario_a.outcomes]
    assert all(a >= b for a, b in zip(remaining, remaining[1:]))
    assert all(a <= b for a, b in zip(proceeds, proceeds[1:]))


def test_statistics_match_order_progress(scenario_a):
    stats = scenario_a.context.stats
    order = scenario_a.context.order
    assert stats.y_proceeds_lt == order.proceeds_received
    committed = [o for o in scenario_a.outcomes if o.mutated_state]
    assert stats.x_fees_lt == sum((o.execution.fee_amount for o in committed), Decimal(0))


def test_commits_clear_the_threshold(scenario_a):
    params = scenario_a.parameters
    for outcome in scenario_a.outcomes:
        if outcome.decision is BlockDecision.COMMITTED:
            assert outcome.net_profit > params.arbitrage_profit_threshold_usd
        elif outcome.decision is BlockDecision.CANDIDATE_EVALUATED:
            assert outcome.net_profit <= params.arbitrage_profit_threshold_usd


def test_scenario_b_only_terminal_settlement(scenario_b):
    counts = scenario_b.decisions()
    assert counts[BlockDecision.COMMITTED] == 0
    assert counts[BlockDecision.TERMINAL_SETTLEMENT] == 1
    assert scenario_b.context.stats.arbitrage.swaps == 0
    changes = [o for o in scenario_b.outcomes if o.mutated_state]
    assert len(changes) == 1
    terminal = changes[0]
    assert terminal.block_number == scenario_b.schedule.order_length_blocks
    assert terminal.execution.sell_amount == scenario_b.schedule.actual_order_amount
    assert scenario_b.context.order.remaining_to_sell == 0


def test_lt_only_settlement_never_shrinks_product(scenario_b):
    initial = scenario_b.initial_liquidity / 2
    pool = scenario_b.context.pool
    assert pool.reserve_x * pool.reserve_y >= initial * initial
    # settlement applies the order alone, without any arbitrage leg
    terminal = scenario_b.outcomes[-1]
    assert pool.reserve_x == terminal.execution.reserve_x
    assert pool.reserve_y == terminal.execution.reserve_y


def test_terminal_settlement_without_arbitrage_candidate():
    # at a 50% short-term fee no arbitrage is ever worth sizing
    result = run_simulation(Parameters(duration_intervals=0, short_term_fee_rate="0.5"))
    counts = result.decisions()
    assert counts[BlockDecision.COMMITTED] == 0
    assert counts[BlockDecision.TERMINAL_SETTLEMENT] == 1
    assert result.context.order.remaining_to_sell == 0


def test_scenario_c_zero_intervals():
    result = run_simulation(Parameters(duration_intervals=0))
    assert result.schedule.order_length_blocks == 150
    assert len(result.outcomes) == 151
    assert result.context.order.remaining_to_sell == 0


def test_identical_parameters_give_identical_records():
    params = Parameters(duration_intervals=0)
    first = run_simulation(params).to_record()
    second = run_simulation(params).to_record()
    assert first == second
    assert content_hash(first) == content_hash(second)


def test_record_fields(scenario_a):
    record = scenario_a.to_record()
    assert list(record)[:4] == ["stFee", "ltFee", "arbThreshold", "arbCost"]
    assert record["ltSellSpecified"] == "1000000"
    assert record["ltSellActual"] == "999999.9999999999999999"
    assert record["durationInt"] == "2"
    assert record["durationSec"] == "900"
    assert record["ltUnsold"] == "0"
    assert record["initialLiquidityUsd"] == "20000000"
    assert Decimal(record["finalLiquidityUsd"]) > Decimal("20000000")
    assert record["arbs"] == str(scenario_a.context.stats.arbitrage.swaps)
    assert all(isinstance(v, str) for v in record.values())


def test_operations_tag_committed_effects(scenario_a):
    committed = next(o for o in scenario_a.outcomes if o.decision is BlockDecision.COMMITTED)
    ops = committed.operations("USDC-X", "USDC-Y")
    assert [op.kind for op in ops] == [PoolOperation.LONG_TERM_SWAP, PoolOperation.SWAP]
    assert ops[0].amount_in == committed.execution.sell_amount
    assert ops[1].amount_in == committed.quote.sell_amount
    assert scenario_a.outcomes[0].operations("USDC-X", "USDC-Y") == []


def test_step_does_not_keep_outcomes_when_disabled():
    sim = TwammSimulation(Parameters(duration_intervals=0), keep_outcomes=False)
    result = sim.run()
    assert result.outcomes == []
    assert result.context.order.remaining_to_sell == 0


def test_run_cannot_be_repeated():
    sim = TwammSimulation(Parameters(duration_intervals=0), keep_outcomes=False)
    result = sim.run()
    proceeds = result.context.order.proceeds_received
    with pytest.raises(SimulationError):
        sim.run()
    assert sim.context.order.proceeds_received == proceeds


def test_product_holds_within_rounding_without_lt_fee():
    # with no fee to re-add, half-ceil rounding of the Y reserve can shave
    # a few 1e-12 off x*y; the drift stays far below one unit of k
    params = Parameters(lt_order_amount="7", long_term_fee_rate="0", arbitrage_cost_usd="1000000")
    result = run_simulation(params)
    initial = result.initial_liquidity / 2
    pool = result.context.pool
    drift = pool.reserve_x * pool.reserve_y - initial * initial
    assert abs(drift) <= initial * initial * Decimal("1e-24")
    assert result.context.order.remaining_to_sell == 0
