"""Integration tests for the yearly simulator, KPI aggregation and orchestrator."""

import math

import pytest

from rentability.application.services.kpis import (
    aggregate_kpis,
    assess_kpis,
    build_cashflow_vector,
    exit_breakdown,
    total_investment,
)
from rentability.application.services.simulation import (
    annual_rent_months,
    calculate,
    resolve_hold_years,
    run_simulation,
    simulate_year,
)
from rentability.core.exceptions import SimulationError
from rentability.domain.calculator.financial import LoanYear


class TestSimulateYear:
    """Tests for a single simulated year."""

    def test_year_one_standard(self, base_input):
        loan = LoanYear(payment=10648.32, insurance=480, interest=4720, principal=5928.32, remaining_debt=154071.68)
        year = simulate_year(base_input, 1, loan)

        assert year.gross_revenue == 12000.0
        assert year.vacancy_loss == 600.0
        assert year.net_revenue == 11400.0
        assert year.condo_fees == 1200.0
        assert year.insurance == 240.0
        assert year.property_tax == 1200.0
        assert year.management == 798.0
        assert year.maintenance == 114.0
        assert year.total_charges == 3552.0
        assert year.cashflow_before_tax == pytest.approx(-3280.32, abs=0.01)
        # Real regime: 11,400 - 3,552 - 4,720 at 47.2%
        assert year.taxable_income == 3128.0
        assert year.tax == pytest.approx(1476.42, abs=0.01)
        assert year.cashflow_after_tax == pytest.approx(-4756.74, abs=0.01)
        assert year.cumulative_cashflow == year.cashflow_after_tax

    def test_indexation_and_charges_growth(self, make_input):
        inputs = make_input(charges={"chargesIncrease": 10.0})
        year = simulate_year(inputs, 3, LoanYear())
        assert year.gross_revenue == pytest.approx(12000 * 1.02 ** 2, abs=0.01)
        assert year.condo_fees == pytest.approx(1200 * 1.1 ** 2, abs=0.01)
        assert year.property_tax == pytest.approx(1200 * 1.1 ** 2, abs=0.01)

    def test_ancillary_revenues(self, make_input):
        """Parking and storage are monthly, other revenues annual."""
        inputs = make_input(revenues={"parkingRent": 50, "storageRent": 25, "otherRevenues": 300, "vacancyRate": 0})
        year = simulate_year(inputs, 1, LoanYear())
        assert year.gross_revenue == 12000 + 900 + 300

    def test_capex_exact_year_only(self, make_input):
        inputs = make_input(charges={"plannedCapex": [
            {"year": 3, "amount": 8000, "description": "Roof"},
            {"year": 3, "amount": 500, "description": "Boiler service"},
            {"year": 5, "amount": 2000, "description": "Paint"},
        ]})
        assert simulate_year(inputs, 2, LoanYear()).capex == 0.0
        assert simulate_year(inputs, 3, LoanYear()).capex == 8500.0
        assert simulate_year(inputs, 5, LoanYear()).capex == 2000.0

    def test_recoverable_charges_annualised(self, make_input):
        inputs = make_input(charges={"recoverableCharges": 50})
        year = simulate_year(inputs, 1, LoanYear())
        assert year.recoverable_charges == 600.0
        assert year.total_charges == 3552.0 - 600.0

    def test_previous_cumulative_carried(self, base_input):
        year = simulate_year(base_input, 2, LoanYear(), previous_cumulative=-1000.0)
        assert year.cumulative_cashflow == pytest.approx(-1000.0 + year.cashflow_after_tax, abs=0.01)

    def test_non_finite_rent_coerced(self, make_input):
        """A NaN rent yields a zero-revenue year, not a NaN year."""
        inputs = make_input(revenues={"monthlyRent": float("nan")})
        year = simulate_year(inputs, 1, LoanYear())
        assert year.gross_revenue == 0.0
        assert year.net_revenue == 0.0
        assert all(math.isfinite(v) for v in year.model_dump().values())

    def test_year_zero_rejected(self, base_input):
        with pytest.raises(SimulationError) as excinfo:
            simulate_year(base_input, 0, LoanYear())
        assert excinfo.value.year == 0


class TestSeasonality:
    """High-season multiplier on monthly rent."""

    def test_disabled(self, make_input):
        inputs = make_input(revenues={"highSeasonMonths": [7, 8], "highSeasonMultiplier": 2.0})
        assert annual_rent_months(inputs.revenues) == 12.0

    def test_enabled(self, make_input):
        inputs = make_input(revenues={
            "seasonalityEnabled": True,
            "highSeasonMonths": [7, 8],
            "highSeasonMultiplier": 1.5,
            "vacancyRate": 0,
        })
        assert annual_rent_months(inputs.revenues) == 13.0
        assert simulate_year(inputs, 1, LoanYear()).gross_revenue == 13000.0

    def test_invalid_months_ignored(self, make_input):
        inputs = make_input(revenues={
            "seasonalityEnabled": True,
            "highSeasonMonths": [0, 7, 13],
            "highSeasonMultiplier": 3.0,
        })
        assert annual_rent_months(inputs.revenues) == 14.0


class TestHoldYears:

    @pytest.mark.parametrize("hold,expected", [(10, 10), (10.9, 10), (0, 1), (-5, 1), (100, 60)])
    def test_clamped(self, make_input, hold, expected):
        assert resolve_hold_years(make_input(exit={"holdYears": hold})) == expected

    def test_falls_back_to_horizon(self, make_input):
        inputs = make_input(exit={"holdYears": None}, context={"horizon": 25})
        assert resolve_hold_years(inputs) == 25


class TestCalculate:
    """End-to-end engine runs on the standard scenario."""

    def test_schedule_shape(self, base_input, fixed_time):
        result = calculate(base_input, calculated_at=fixed_time)
        assert len(result.yearly_results) == 10
        assert [y.year for y in result.yearly_results] == list(range(1, 11))
        assert result.calculated_at == fixed_time
        assert result.input == base_input

    def test_deterministic(self, base_input, fixed_time):
        assert calculate(base_input, fixed_time) == calculate(base_input, fixed_time)

    def test_default_timestamp_is_utc(self, base_input):
        assert calculate(base_input).calculated_at.utcoffset().total_seconds() == 0

    def test_loan_columns_match_schedule(self, base_input, fixed_time):
        first = calculate(base_input, fixed_time).yearly_results[0]
        assert first.loan_payment == pytest.approx(12 * 887.36, abs=0.05)
        assert first.loan_insurance == 480.0
        assert first.remaining_debt == pytest.approx(160000 - first.principal, abs=0.01)

    def test_loan_matures_before_exit(self, make_input, fixed_time):
        """Years after maturity carry no debt service."""
        result = calculate(make_input(financing={"duration": 60}), fixed_time)
        assert result.yearly_results[4].remaining_debt == 0.0
        for year in result.yearly_results[5:]:
            assert year.loan_payment == 0.0
            assert year.loan_insurance == 0.0
            assert year.remaining_debt == 0.0

    def test_deferral_partial(self, make_input, fixed_time):
        result = calculate(make_input(financing={"deferredMonths": 12, "deferredType": "partial"}), fixed_time)
        first = result.yearly_results[0]
        assert first.principal == 0.0
        assert first.remaining_debt == 160000.0
        assert first.loan_payment == first.interest

    def test_extreme_inputs_complete(self, make_input, fixed_time):
        """Out-of-range values are clamped and the result is still complete."""
        inputs = make_input(
            revenues={"indexationRate": 5000, "vacancyRate": float("inf")},
            financing={"interestRate": float("nan"), "duration": 99999},
            exit={"holdYears": 1000},
        )
        result = calculate(inputs, fixed_time)
        assert len(result.yearly_results) == 60
        for value in result.kpis.model_dump().values():
            assert not math.isnan(value)


class TestKpis:
    """KPI formulas on the standard scenario."""

    @pytest.fixture
    def result(self, base_input, fixed_time):
        return calculate(base_input, fixed_time)

    def test_investment(self, result):
        kpis = result.kpis
        assert kpis.total_investment == 230000.0
        assert kpis.own_funds == 70000.0
        assert kpis.ltv == 80.0

    def test_yields(self, result):
        kpis = result.kpis
        assert kpis.gross_yield == pytest.approx(5.2174, abs=1e-4)
        assert kpis.net_yield == pytest.approx(4.9565, abs=1e-4)
        assert kpis.net_net_yield == pytest.approx(3.2035, abs=1e-4)
        assert kpis.cap_rate == kpis.gross_yield

    def test_cash_on_cash(self, result):
        first = result.yearly_results[0]
        assert result.kpis.cash_on_cash == pytest.approx(first.cashflow_after_tax / 70000 * 100, abs=1e-4)

    def test_dscr(self, result):
        first = result.yearly_results[0]
        expected = (11400 - 3552) / (first.loan_payment + first.loan_insurance)
        assert result.kpis.dscr == pytest.approx(expected, abs=1e-4)

    def test_break_even_rent(self, result):
        first = result.yearly_results[0]
        expected = (first.total_charges + first.loan_payment + first.loan_insurance + first.tax) / 12
        assert result.kpis.break_even_rent == pytest.approx(expected, abs=0.01)

    def test_exit(self, result):
        kpis = result.kpis
        assert kpis.exit_price == pytest.approx(243798.88, abs=0.01)
        assert kpis.capital_gain == pytest.approx(43798.88, abs=0.01)
        assert kpis.net_capital_gain == pytest.approx(43798.88 - 8321.79, abs=0.01)

    def test_final_equity_and_return(self, base_input, result):
        last = result.yearly_results[-1]
        sale = exit_breakdown(base_input, last, 10)
        expected = sum(y.cashflow_after_tax for y in result.yearly_results) + sale.terminal_net
        assert result.kpis.final_equity == pytest.approx(expected, abs=0.05)
        assert result.kpis.total_return == pytest.approx((expected - 70000) / 70000 * 100, abs=1e-3)
        assert sale.terminal_net == pytest.approx(
            sale.exit_price - sale.selling_costs - sale.capital_gains_tax - last.remaining_debt, abs=0.01
        )

    def test_irr_is_percent(self, result):
        """IRR is reported in % and consistent with a zero NPV."""
        from rentability.domain.calculator.irr import npv

        sale = exit_breakdown(result.input, result.yearly_results[-1], 10)
        flows = build_cashflow_vector(70000, result.yearly_results, sale.terminal_net)
        assert npv(result.kpis.irr / 100, flows) == pytest.approx(0.0, abs=5.0)

    def test_negative_own_funds(self, make_input, fixed_time):
        """A loan above the investment gives no entry outlay and no cash-on-cash blow-up."""
        result = calculate(make_input(financing={"loanAmount": 250000}), fixed_time)
        assert result.kpis.own_funds == -20000.0
        assert result.kpis.payback_years == 0.0

    def test_early_repayment_penalty(self, make_input, fixed_time):
        """The penalty is capped at six months of interest."""
        with_penalty = make_input(financing={"earlyRepaymentPenalty": 3.0})
        result = calculate(with_penalty, fixed_time)
        last = result.yearly_results[-1]
        sale = exit_breakdown(with_penalty, last, 10)
        # 3% of the debt exceeds 6 months at 3%/year (1.5%)
        assert sale.early_repayment_penalty == pytest.approx(last.remaining_debt * 0.015, abs=0.01)

        baseline = calculate(make_input(), fixed_time)
        assert result.kpis.final_equity == pytest.approx(
            baseline.kpis.final_equity - sale.early_repayment_penalty, abs=0.02
        )

    def test_no_penalty_when_loan_repaid(self, make_input, fixed_time):
        inputs = make_input(financing={"earlyRepaymentPenalty": 3.0, "duration": 60})
        result = calculate(inputs, fixed_time)
        assert exit_breakdown(inputs, result.yearly_results[-1], 10).early_repayment_penalty == 0.0

    def test_empty_schedule(self, base_input):
        kpis = aggregate_kpis(base_input, [], 0)
        assert kpis.irr == 0.0
        assert kpis.total_investment == 0.0

    def test_irr_solved_flag(self, base_input, make_input, fixed_time):
        """The flag separates a solved irr from a missing root reported as 0."""
        hold_years = resolve_hold_years(base_input)
        solved = run_simulation(base_input, fixed_time)
        assert solved.irr_solved is True
        assert solved.result == calculate(base_input, fixed_time)
        report = assess_kpis(base_input, solved.result.yearly_results, hold_years)
        assert report.irr_solved is True
        assert report.kpis == solved.result.kpis

        no_root = make_input(
            revenues={"monthlyRent": 0},
            financing={"loanAmount": 0},
            exit={"method": None, "sellingCosts": 100},
        )
        unsolved = run_simulation(no_root, fixed_time)
        assert unsolved.irr_solved is False
        assert unsolved.result.kpis.irr == 0.0

    def test_total_investment_ignores_missing_furniture(self, make_input):
        inputs = make_input(context={"furnitureCost": None})
        assert total_investment(inputs.context) == 225000.0
