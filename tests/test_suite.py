"""
Personal Finance Formulas Test Suite

This module provides a unified test suite that runs all calculator tests
bottom-up (utilities before the calculators built on them) using unittest's
standard `load_tests` protocol.

Test Execution Order:
1. Numeric utilities (test_utils)
2. Rate solver (test_rate_solver)
3. Loan amortization (test_loan)
4. Debt capacity (test_debt)
5. Savings projection (test_savings)
6. Rental cash flow (test_rental)
7. Gross-to-net pay (test_gross_to_net)
8. VAT (test_vat)
9. Form defaults (test_settings)
10. Reference examples (test_examples_verification)

Usage:
    # Run all tests in order (recommended)
    python -m unittest tests.test_suite

    # Or run individual test modules
    python -m unittest tests.test_loan
    python -m unittest tests.test_rental

Version: 0.4.0
Last Updated: 2026-10-18
"""

import unittest
import sys


# =============================================================================
# Test Suite Definition (using unittest's load_tests protocol)
# =============================================================================

def load_tests(loader, standard_tests, pattern):
    """
    Custom test loader using unittest's standard `load_tests` protocol.

    Enforces MODULE execution order by loading modules sequentially into the
    suite. Tests within each module still run in alphabetical order.

    setUpModule() is called by the runner for each module as its first test
    runs; modules here do not depend on each other's module-level state.

    Args:
        loader: TestLoader instance
        standard_tests: Tests that would be loaded by default discovery
        pattern: Pattern used to match test files (ignored here)

    Returns:
        unittest.TestSuite containing all calculator tests in order
    """
    test_modules = [
        'tests.test_utils',
        'tests.test_rate_solver',
        'tests.test_loan',
        'tests.test_debt',
        'tests.test_savings',
        'tests.test_rental',
        'tests.test_gross_to_net',
        'tests.test_vat',
        'tests.test_settings',
        'tests.test_examples_verification',
    ]

    suite = unittest.TestSuite()

    for module_name in test_modules:
        try:
            module = __import__(module_name, fromlist=[''])
            suite.addTest(loader.loadTestsFromModule(module))
        except ImportError as e:
            # Keep loading the remaining modules; the failure is reported here
            print(f"WARNING: Failed to import test module {module_name}: {e}",
                  file=sys.stderr)

    return suite


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
