"""
Unit tests for price field lookup.
"""

import unittest

import pandas as pd
import pytest

from tqkit.core.ohlc import find_field, price_column, has_ohlc, has_hlc, pick_price, typical_price
from tqkit.exceptions import ColumnError


@pytest.mark.unit
class TestFieldLookup(unittest.TestCase):

    def setUp(self):
        self.yahoo = pd.DataFrame({
            'Open': [1.0], 'High': [3.0], 'Low': [0.5], 'Close': [2.0],
            'Adj Close': [1.9], 'Volume': [10],
        })

    def test_find_field_ignores_case(self):
        self.assertEqual(find_field(self.yahoo, 'close'), 'Close')
        self.assertEqual(find_field(self.yahoo, 'volume'), 'Volume')

    def test_adjusted_aliases(self):
        self.assertEqual(find_field(self.yahoo, 'adjusted'), 'Adj Close')
        frame = pd.DataFrame({'AAPL.Adjusted': [1.0]})
        self.assertIsNone(find_field(frame, 'adjusted'))
        self.assertEqual(find_field(pd.DataFrame({'adj_close': [1.0]}), 'adjusted'), 'adj_close')

    def test_price_column_raises_when_absent(self):
        with self.assertRaises(ColumnError):
            price_column(pd.DataFrame({'x': [1.0]}), 'close')

    def test_has_ohlc(self):
        self.assertTrue(has_ohlc(self.yahoo))
        self.assertFalse(has_ohlc(self.yahoo.drop(columns='Open')))
        self.assertTrue(has_hlc(self.yahoo.drop(columns='Open')))


@pytest.mark.unit
class TestPickPrice(unittest.TestCase):

    def test_single_column_used_as_is(self):
        frame = pd.DataFrame({'adjusted': [1.0, 2.0]})
        self.assertEqual(pick_price(frame).name, 'adjusted')

    def test_close_chosen_from_several(self):
        frame = pd.DataFrame({'open': [1.0], 'close': [2.0]})
        self.assertEqual(pick_price(frame).name, 'close')

    def test_ambiguous_columns_raise(self):
        with self.assertRaises(ColumnError):
            pick_price(pd.DataFrame({'a': [1.0], 'b': [2.0]}))

    def test_typical_price(self):
        frame = pd.DataFrame({'high': [3.0], 'low': [1.0], 'close': [2.0]})
        self.assertAlmostEqual(typical_price(frame).iloc[0], 2.0)

    def test_typical_price_falls_back_to_single_column(self):
        frame = pd.DataFrame({'adjusted': [5.0]})
        self.assertEqual(typical_price(frame).iloc[0], 5.0)
