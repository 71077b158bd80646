"""Human-readable report blocks for a simulation run."""

from __future__ import annotations

from decimal import Decimal

from twamm_sim.common.models import OrderSchedule, Parameters
from twamm_sim.common.numeric import format_decimal as fmt
from twamm_sim.simulator.engine import BlockDecision, BlockOutcome, SimulationResult

RULE = "-" * 81
DOUBLE_RULE = "=" * 81


def format_pool_details(params: Parameters) -> str:
    x, y = params.initial_reserves()
    return (
        "Pool Details:\n"
        f"{RULE}\n"
        f"Reserve {params.token_x.symbol}: {fmt(x)}\n"
        f"Reserve {params.token_y.symbol}: {fmt(y)}\n"
        f"LT Fee:         {fmt(Decimal(100) * params.long_term_fee_rate)} %\n"
        f"ST Fee:         {fmt(Decimal(100) * params.short_term_fee_rate)} %\n"
        f"Arb Threshold:  {fmt(params.arbitrage_profit_threshold_usd)} $USD\n"
        f"Arb Cost:       {fmt(params.arbitrage_cost_usd)} $USD\n"
        f"EVO Gas:        {fmt(params.evo_gas_usd)} $USD\n"
    )


def format_trade_details(params: Parameters, schedule: OrderSchedule) -> str:
    sym = params.token_x.symbol
    return (
        "Trade Details:\n"
        f"{RULE}\n"
        f"Specified Sell: {fmt(params.lt_order_amount)} {sym}\n"
        f"Actual Sell:    {fmt(schedule.actual_order_amount)} {sym}\n"
        f"Duration:       {schedule.order_length_seconds} seconds\n"
        f"Sales Rate:     {fmt(schedule.sales_rate)} {sym} / second\n"
    )


def format_block_outcome(outcome: BlockOutcome, token_x: str = "X", token_y: str = "Y") -> str:
    ex = outcome.execution
    lines = [
        "Iteration Details:",
        RULE,
        f"Block Number:      {outcome.block_number}",
        f"Block Time:        {outcome.block_time} seconds",
        f"Sell Amt:          {fmt(ex.sell_amount)} {token_x}",
        f"Fee Amt:           {fmt(ex.fee_amount)} {token_x}",
        f"Sell Amt Aft Fee:  {fmt(ex.sell_amount_net)} {token_x}",
        f"Buy Amount:        {fmt(ex.buy_amount)} {token_y}",
        f"Purchase Price:    {fmt(ex.effective_price) if ex.effective_price is not None else 'n/a'} {token_x} / {token_y}",
        f"New Pool Price:    {fmt(ex.pool_price)} {token_x} / {token_y}",
        "- - - - - Arbitrage - - - - -",
    ]
    quote = outcome.quote
    if quote is None:
        lines.append("No arbitrage profitable yet.")
    else:
        lines += [
            f"Arb+:              {fmt(quote.roots.plus)} {token_y}",
            f"Arb-:              {fmt(quote.roots.minus)} {token_y}",
            f"Sell Amt:          {fmt(quote.sell_amount)} {token_y}",
            f"Fee Amt:           {fmt(quote.fee_amount)} {token_y}",
            f"Sell Amt Aft Fee:  {fmt(quote.sell_amount_net)} {token_y}",
            f"Buy Amount:        {fmt(quote.buy_amount)} {token_x}",
            f"Gross Profit:      {fmt(quote.gross_profit)} {token_x}",
            f"New Pool Price:    {fmt(quote.pool_price)} {token_x} / {token_y}",
        ]
    lines.append(f"Decision:          {outcome.decision.value}")
    return "\n".join(lines) + "\n"


def format_trade_result(result: SimulationResult) -> str:
    sym_x = result.parameters.token_x.symbol
    sym_y = result.parameters.token_y.symbol
    order = result.context.order
    stats = result.context.stats
    arb = stats.arbitrage
    # order is complete once less than one second of sales is left
    done = "✅" if order.remaining_to_sell < result.schedule.sales_rate else "❌"
    counts = result.decisions()
    return (
        "Trade result\n"
        f"{DOUBLE_RULE}\n"
        f"Sold:         {fmt(result.schedule.actual_order_amount)} {sym_x}\n"
        f"  Remaining:  {fmt(order.remaining_to_sell)} {sym_x} {done}\n"
        f"Bought:       {fmt(order.proceeds_received)} {sym_y}\n"
        f"Trade Cost:   {fmt(result.trade_cost_percent)} %\n"
        f"Fees:         {fmt(stats.x_fees_lt)}\n"
        f"Arbs:         {arb.swaps} (profit {fmt(arb.net_profit_usd)} $USD, gas {fmt(arb.gas_usd)} $USD)\n"
        f"Terminal:     {counts[BlockDecision.TERMINAL_SETTLEMENT]}\n"
    )


__all__ = [
    "format_pool_details",
    "format_trade_details",
    "format_block_outcome",
    "format_trade_result",
]
