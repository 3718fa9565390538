"""Tax helpers for the manoeuvre: interest deduction, RRSP withdrawals, capital gains."""

# Share of a realized capital gain that is taxable in Canada
CAPITAL_GAINS_INCLUSION_RATE = 0.5


def calc_tax_refund(rrsp_contribution: float, deductible_interest: float, tax_rate: float) -> float:
    """Refund from an RRSP contribution plus deductible investment-loan interest."""
    return (rrsp_contribution + deductible_interest) * tax_rate


def calc_interest_tax_saving(deductible_interest: float, tax_rate: float) -> float:
    """Tax saved by deducting investment-loan interest at the marginal rate."""
    return deductible_interest * tax_rate


def calc_after_tax_withdrawal(balance: float, retirement_tax_rate: float) -> float:
    """Net value of a tax-deferred balance withdrawn at ``retirement_tax_rate``."""
    return balance * (1 - retirement_tax_rate)


def calc_unrealized_gain(market_value: float, adjusted_cost_base: float) -> float:
    return market_value - adjusted_cost_base


def calc_capital_gains_tax(market_value: float, adjusted_cost_base: float, tax_rate: float) -> float:
    """Tax owed if a non-registered portfolio were sold outright.

    Losses produce no tax (they are not credited against other income here).
    """
    gain = max(0.0, market_value - adjusted_cost_base)
    return gain * CAPITAL_GAINS_INCLUSION_RATE * tax_rate


def real_value(nominal: float, inflation_rate: float, years: int) -> float:
    """Deflate ``nominal`` to today's dollars. Zero or negative inflation is ignored."""
    if inflation_rate <= 0:
        return nominal
    return nominal / (1 + inflation_rate) ** years
