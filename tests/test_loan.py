"""
Unit tests for loan amortization: annuity formulas, schedule termination,
insurance modes, annual aggregation and degenerate terms.

Version: 0.4.0
Last Updated: 2026-10-18
Status: Active
"""

import unittest
import warnings

import numpy as np

from personal_finance_formulas.loan import (
    AmortizationResult,
    InsuranceMode,
    InsurancePolicy,
    LoanTerms,
    amortize,
    annuity_payment,
    annuity_principal,
)
from personal_finance_formulas.utils import round_half_away

from tests.utilities import generate_random_loans


# =============================================================================
# Test Parameters
# =============================================================================

# Running-rounded annual sums may drift from the sum of rounded periods by at
# most half a cent per period
ANNUAL_ROUNDING_DRIFT: float = 12 * 0.005

# Module-level shared data (populated by setUpModule)
RANDOM_LOANS: list[LoanTerms] = []


def setUpModule():
    """Generate the random loan population."""
    RANDOM_LOANS.extend(generate_random_loans(50))
    if not RANDOM_LOANS:
        raise RuntimeError("setUpModule failed: No random loans were created")


def tearDownModule():
    RANDOM_LOANS.clear()


def _amortize_quietly(terms: LoanTerms) -> AmortizationResult:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return amortize(terms)


# =============================================================================
# Annuity formulas
# =============================================================================

class TestAnnuityFormulas(unittest.TestCase):

    def test_payment(self):
        expected = 100000 * 0.0025 / (1 - 1.0025 ** -120)
        self.assertAlmostEqual(annuity_payment(100000, 0.0025, 120), expected, places=10)

    def test_zero_rate_is_straight_line(self):
        self.assertEqual(annuity_payment(12000, 0.0, 12), 1000.0)
        self.assertEqual(annuity_principal(1000, 0.0, 12), 12000.0)

    def test_principal_inverts_payment(self):
        for rate in (0.0, 0.001, 0.0025, 0.01):
            with self.subTest(rate=rate):
                payment = annuity_payment(1000, rate, 24)
                self.assertAlmostEqual(annuity_principal(payment, rate, 24), 1000, places=8)

    def test_non_positive_periods_rejected(self):
        with self.assertRaises(ValueError):
            annuity_payment(1000, 0.01, 0)
        with self.assertRaises(ValueError):
            annuity_principal(100, 0.01, -1)


# =============================================================================
# Inputs
# =============================================================================

class TestLoanInputs(unittest.TestCase):

    def test_invalid_terms(self):
        cases = [
            dict(principal=-1, annual_rate=0.03, years=10),
            dict(principal=1000, annual_rate=-0.01, years=10),
            dict(principal=1000, annual_rate=0.03, years=-1),
            dict(principal=1000, annual_rate=0.03, years=1.5),
            dict(principal=1000, annual_rate=0.03, years=10, payments_per_year=0),
        ]
        for kwargs in cases:
            with self.subTest(**kwargs):
                with self.assertRaises(ValueError):
                    LoanTerms(**kwargs)

    def test_whole_float_years_coerced(self):
        terms = LoanTerms(principal=1000, annual_rate=0.03, years=10.0)
        self.assertEqual(terms.years, 10)
        self.assertIsInstance(terms.years, int)
        self.assertEqual(terms.total_periods, 120)
        self.assertAlmostEqual(terms.periodic_rate, 0.0025, places=15)

    def test_insurance_mode_from_wire_value(self):
        self.assertIs(InsurancePolicy("crdPct", 0.001).mode, InsuranceMode.PERCENT_OF_REMAINING_BALANCE)
        self.assertIs(InsurancePolicy("initialPct", 0.001).mode, InsuranceMode.INITIAL_PERCENT_OF_PRINCIPAL)
        with self.assertRaises(ValueError):
            InsurancePolicy("flat", 0.001)
        with self.assertRaises(ValueError):
            InsurancePolicy(InsuranceMode.PERCENT_OF_REMAINING_BALANCE, -0.001)


# =============================================================================
# Schedule
# =============================================================================

class TestAmortizationSchedule(unittest.TestCase):

    def setUp(self):
        self.terms = LoanTerms(principal=100000, annual_rate=0.03, years=10)
        self.result = amortize(self.terms)
        self.level_payment = annuity_payment(100000, self.terms.periodic_rate, 120)

    def test_lengths(self):
        self.assertEqual(len(self.result.schedule), 120)
        self.assertEqual(len(self.result.annual_aggregate), 10)

    def test_first_period(self):
        first = self.result.schedule[0]
        first_principal = self.level_payment - 100000 * self.terms.periodic_rate
        self.assertEqual(first.period, 1)
        self.assertEqual(first.payment, round_half_away(self.level_payment, 2))
        self.assertEqual(first.interest, 250.0)
        self.assertEqual(first.principal, round_half_away(first_principal, 2))
        self.assertEqual(first.insurance, 0.0)
        self.assertEqual(first.ending_balance, round_half_away(100000 - first_principal, 2))

    def test_terminates_at_zero(self):
        self.assertEqual(self.result.schedule[-1].ending_balance, 0.0)

    def test_balance_non_increasing(self):
        balances = self.result.column("ending_balance")
        self.assertTrue(np.all(np.diff(balances) <= 0))
        self.assertTrue(np.all(balances >= 0))

    def test_totals(self):
        totals = self.result.totals
        self.assertGreater(totals.interest, 0)
        self.assertEqual(totals.insurance, 0.0)
        self.assertEqual(totals.cost, totals.interest)
        self.assertAlmostEqual(totals.payments, self.level_payment * 120, delta=0.01)
        self.assertAlmostEqual(totals.payments - totals.interest, 100000, delta=0.02)

    def test_first_annual_aggregate(self):
        first = self.result.annual_aggregate[0]
        self.assertEqual(first.year, 1)
        self.assertGreater(first.interest, 0)
        self.assertGreater(first.principal, 0)
        self.assertEqual(first.insurance, 0.0)
        self.assertAlmostEqual(first.payment, self.level_payment * 12, delta=ANNUAL_ROUNDING_DRIFT)
        self.assertEqual(first.ending_balance, self.result.schedule[11].ending_balance)

    def test_column(self):
        interest = self.result.column("interest")
        self.assertIsInstance(interest, np.ndarray)
        self.assertEqual(interest.shape, (120,))
        self.assertEqual(interest[0], 250.0)
        with self.assertRaises(ValueError):
            self.result.column("crd")

    def test_aggregate_for_year(self):
        self.assertIs(self.result.aggregate_for_year(1), self.result.annual_aggregate[0])
        self.assertIs(self.result.aggregate_for_year(10), self.result.annual_aggregate[9])
        self.assertIsNone(self.result.aggregate_for_year(0))
        self.assertIsNone(self.result.aggregate_for_year(11))

    def test_quarterly_payments(self):
        result = amortize(LoanTerms(principal=50000, annual_rate=0.04, years=5, payments_per_year=4))
        self.assertEqual(len(result.schedule), 20)
        self.assertEqual(len(result.annual_aggregate), 5)
        self.assertEqual(result.schedule[0].interest, 500.0)
        self.assertEqual(result.schedule[-1].ending_balance, 0.0)


class TestAmortizationDegenerateTerms(unittest.TestCase):

    def test_zero_rate(self):
        with self.assertWarns(UserWarning):
            result = amortize(LoanTerms(principal=12000, annual_rate=0.0, years=1))
        self.assertEqual(len(result.schedule), 12)
        first = result.schedule[0]
        self.assertEqual(first.interest, 0.0)
        self.assertEqual(first.principal, 1000.0)
        self.assertEqual(first.payment, 1000.0)
        self.assertEqual(first.ending_balance, 11000.0)
        self.assertEqual(result.schedule[11].ending_balance, 0.0)
        self.assertEqual(result.totals.interest, 0.0)
        self.assertEqual(result.totals.payments, 12000.0)

    def test_zero_years(self):
        with self.assertWarns(UserWarning):
            result = amortize(LoanTerms(principal=12000, annual_rate=0.03, years=0))
        self.assertEqual(result.schedule, ())
        self.assertEqual(result.annual_aggregate, ())
        self.assertEqual(result.totals.payments, 0.0)
        self.assertEqual(result.totals.cost, 0.0)

    def test_zero_principal(self):
        result = amortize(LoanTerms(principal=0, annual_rate=0.03, years=2))
        self.assertEqual(len(result.schedule), 24)
        self.assertTrue(np.all(result.column("payment") == 0))
        self.assertEqual(result.totals.payments, 0.0)


# =============================================================================
# Insurance
# =============================================================================

class TestAmortizationInsurance(unittest.TestCase):

    def test_initial_percent_is_constant(self):
        insurance = InsurancePolicy(InsuranceMode.INITIAL_PERCENT_OF_PRINCIPAL, 0.001)
        result = amortize(LoanTerms(principal=100000, annual_rate=0.03, years=10, insurance=insurance))
        expected = round_half_away(100000 * 0.001 / 120, 2)
        self.assertEqual(result.schedule[0].insurance, expected)
        self.assertEqual(result.schedule[50].insurance, expected)
        self.assertEqual(result.schedule[119].insurance, expected)
        self.assertEqual(result.totals.insurance, 100.0)
        self.assertAlmostEqual(result.totals.cost, result.totals.interest + 100.0, delta=0.011)

    def test_percent_of_balance_decreases(self):
        insurance = InsurancePolicy(InsuranceMode.PERCENT_OF_REMAINING_BALANCE, 0.0001)
        result = amortize(LoanTerms(principal=100000, annual_rate=0.03, years=1, insurance=insurance))
        self.assertEqual(result.schedule[0].insurance, 10.0)
        premiums = result.column("insurance")
        self.assertTrue(np.all(np.diff(premiums) <= 0))
        self.assertGreater(result.schedule[0].insurance, result.schedule[1].insurance)
        self.assertGreaterEqual(result.schedule[11].insurance, 0)
        self.assertLess(result.schedule[11].insurance, 10.0)
        self.assertGreater(result.totals.insurance, 0)
        self.assertLess(result.totals.insurance, 100000 * 0.0001 * 12)

    def test_payment_includes_insurance(self):
        insurance = InsurancePolicy(InsuranceMode.PERCENT_OF_REMAINING_BALANCE, 0.0001)
        terms = LoanTerms(principal=100000, annual_rate=0.03, years=1, insurance=insurance)
        result = amortize(terms)
        level = annuity_payment(100000, terms.periodic_rate, 12)
        self.assertEqual(result.schedule[0].payment, round_half_away(level + 10.0, 2))

    def test_annual_aggregates_match_periods(self):
        insurance = InsurancePolicy(InsuranceMode.INITIAL_PERCENT_OF_PRINCIPAL, 0.001)
        result = amortize(LoanTerms(principal=100000, annual_rate=0.03, years=2, insurance=insurance))
        self.assertEqual(len(result.annual_aggregate), 2)

        for year, agg in enumerate(result.annual_aggregate, start=1):
            periods = result.schedule[(year - 1) * 12:year * 12]
            for name in ("interest", "principal", "insurance", "payment"):
                with self.subTest(year=year, field=name):
                    expected = sum(getattr(p, name) for p in periods)
                    self.assertAlmostEqual(getattr(agg, name), expected, delta=ANNUAL_ROUNDING_DRIFT)
            self.assertEqual(agg.ending_balance, periods[-1].ending_balance)

        self.assertEqual(result.annual_aggregate[1].ending_balance, 0.0)


# =============================================================================
# Random loan population
# =============================================================================

class TestRandomLoans(unittest.TestCase):
    """Identities that must hold for any loan."""

    def test_schedule_terminates(self):
        for i, terms in enumerate(RANDOM_LOANS):
            with self.subTest(loan=i, terms=terms):
                result = _amortize_quietly(terms)
                self.assertEqual(len(result.schedule), terms.total_periods)
                self.assertEqual(len(result.annual_aggregate), terms.years)
                self.assertEqual(result.schedule[-1].ending_balance, 0.0)

    def test_principal_repaid(self):
        for i, terms in enumerate(RANDOM_LOANS):
            with self.subTest(loan=i):
                result = _amortize_quietly(terms)
                repaid = float(np.sum(result.column("principal")))
                self.assertAlmostEqual(repaid, terms.principal, delta=0.005 * terms.total_periods + 0.01)

    def test_payment_identity(self):
        """payment = interest + principal + insurance, up to rounding of each field."""
        for i, terms in enumerate(RANDOM_LOANS):
            result = _amortize_quietly(terms)
            for p in result.schedule[:-1]:
                with self.subTest(loan=i, period=p.period):
                    self.assertAlmostEqual(p.payment, p.interest + p.principal + p.insurance, delta=0.02)

    def test_cost_is_interest_plus_insurance(self):
        for i, terms in enumerate(RANDOM_LOANS):
            with self.subTest(loan=i):
                totals = _amortize_quietly(terms).totals
                self.assertAlmostEqual(totals.cost, totals.interest + totals.insurance, delta=0.011)


if __name__ == '__main__':
    unittest.main()
