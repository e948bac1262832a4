"""
Verification of every calculator against the worked reference examples.

Runs each entry of REFERENCE_EXAMPLES and compares every expected figure at
the example's precision.

Version: 0.4.0
Last Updated: 2026-10-18
Status: Active
"""

import unittest
import warnings

from personal_finance_formulas.examples import (
    REFERENCE_EXAMPLES,
    Calculator,
    ReferenceExample,
    resolve,
)


class TestReferenceExamples(unittest.TestCase):

    def test_every_calculator_has_an_example(self):
        covered = {ex.calculator for ex in REFERENCE_EXAMPLES.values()}
        self.assertEqual(covered, set(Calculator))

    def test_ids_are_unique_keys(self):
        for key, ex in REFERENCE_EXAMPLES.items():
            with self.subTest(id=key):
                self.assertIsInstance(ex, ReferenceExample)
                self.assertEqual(key, ex.id)
                self.assertTrue(ex.expected)

    def test_expected_values(self):
        for ex_id, ex in REFERENCE_EXAMPLES.items():
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                result = ex.run()
            for path, expected in ex.expected.items():
                with self.subTest(example=ex_id, path=path):
                    self.assertAlmostEqual(resolve(result, path), expected, places=ex.places)


class TestPackageExports(unittest.TestCase):

    def test_examples_available_from_package(self):
        import personal_finance_formulas as pff

        self.assertIs(pff.REFERENCE_EXAMPLES, REFERENCE_EXAMPLES)
        self.assertIs(pff.ReferenceExample, ReferenceExample)
        self.assertIs(pff.Calculator, Calculator)
        for name in ("REFERENCE_EXAMPLES", "ReferenceExample", "Calculator"):
            with self.subTest(name=name):
                self.assertIn(name, pff.__all__)


class TestResolve(unittest.TestCase):

    def test_resolves_indexed_paths(self):
        result = REFERENCE_EXAMPLES["SAV-1"].run()
        self.assertEqual(resolve(result, "series[0].t"), 0)
        self.assertEqual(resolve(result, "final_capital"), result.final_capital)

    def test_invalid_segment(self):
        result = REFERENCE_EXAMPLES["VAT-1"].run()
        with self.assertRaises(ValueError):
            resolve(result, "price_excl_tax[")
        with self.assertRaises(AttributeError):
            resolve(result, "missing")


if __name__ == '__main__':
    unittest.main()
