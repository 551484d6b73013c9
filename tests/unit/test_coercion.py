"""
Unit tests for tidy <-> time-series coercion.
"""

import unittest
import warnings

import numpy as np
import pandas as pd
import pytest

from tqkit.core.coercion import (
    as_timeseries,
    as_tidy,
    find_date_column,
    split_groups,
    resolve_groups,
    to_long,
    to_wide,
)
from tqkit.exceptions import CoercionError, ColumnError


def _tidy():
    return pd.DataFrame({
        'symbol': ['A', 'A', 'B', 'B'],
        'date': pd.to_datetime(['2020-01-02', '2020-01-01', '2020-01-01', '2020-01-02']),
        'close': [2.0, 1.0, 10.0, 11.0],
        'volume': [200, 100, 1000, 1100],
    })


@pytest.mark.unit
class TestFindDateColumn(unittest.TestCase):

    def test_prefers_date_column(self):
        self.assertEqual(find_date_column(_tidy()), 'date')

    def test_falls_back_to_first_datetime_column(self):
        frame = _tidy().rename(columns={'date': 'timestamp'})
        self.assertEqual(find_date_column(frame), 'timestamp')

    def test_explicit_missing_column_raises(self):
        with self.assertRaises(ColumnError):
            find_date_column(_tidy(), 'when')

    def test_no_date_column_raises(self):
        with self.assertRaises(CoercionError):
            find_date_column(pd.DataFrame({'x': [1, 2]}))


@pytest.mark.unit
class TestAsTimeseries(unittest.TestCase):

    def test_indexes_by_date_and_sorts(self):
        ts = as_timeseries(_tidy().iloc[:2], select='close')
        self.assertIsInstance(ts.index, pd.DatetimeIndex)
        self.assertEqual(ts.index.name, 'date')
        self.assertTrue(ts.index.is_monotonic_increasing)
        self.assertEqual(ts['close'].tolist(), [1.0, 2.0])

    def test_default_keeps_numeric_columns_only(self):
        ts = as_timeseries(_tidy().drop(columns='symbol'))
        self.assertEqual(list(ts.columns), ['close', 'volume'])

    def test_selected_non_numeric_column_warns(self):
        with pytest.warns(UserWarning, match='Non-numeric'):
            ts = as_timeseries(_tidy(), select=['symbol', 'close'])
        self.assertEqual(list(ts.columns), ['close'])

    def test_unselected_non_numeric_column_warns(self):
        with pytest.warns(UserWarning, match="\\['symbol'\\]"):
            ts = as_timeseries(_tidy())
        self.assertEqual(list(ts.columns), ['close', 'volume'])

    def test_numeric_only_frame_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            as_timeseries(_tidy().drop(columns='symbol'))

    def test_missing_selected_column_raises(self):
        with self.assertRaises(ColumnError):
            as_timeseries(_tidy(), select='adjusted')

    def test_no_numeric_columns_raises(self):
        frame = pd.DataFrame({'date': pd.to_datetime(['2020-01-01']), 'name': ['x']})
        with self.assertRaises(CoercionError):
            as_timeseries(frame)

    def test_unparseable_dates_raise(self):
        frame = pd.DataFrame({'date': ['not a date', 'nor this'], 'close': [1.0, 2.0]})
        with self.assertRaises(CoercionError):
            as_timeseries(frame)

    def test_string_dates_are_parsed(self):
        frame = pd.DataFrame({'date': ['2020-01-01', '2020-01-02'], 'close': [1.0, 2.0]})
        ts = as_timeseries(frame)
        self.assertEqual(ts.index[0], pd.Timestamp('2020-01-01'))

    def test_input_is_not_modified(self):
        frame = _tidy()
        before = frame.copy()
        as_timeseries(frame, select='close')
        pd.testing.assert_frame_equal(frame, before)


@pytest.mark.unit
class TestAsTidy(unittest.TestCase):

    def test_round_trip_preserves_values(self):
        frame = _tidy().iloc[:2]
        tidy = as_tidy(as_timeseries(frame, select=['close', 'volume']))
        self.assertEqual(list(tidy.columns), ['date', 'close', 'volume'])
        self.assertEqual(tidy['close'].tolist(), [1.0, 2.0])
        self.assertIsInstance(tidy.index, pd.RangeIndex)

    def test_series_uses_its_name(self):
        series = pd.Series([1.0, 2.0], index=pd.date_range('2020-01-01', periods=2), name='SMA')
        tidy = as_tidy(series)
        self.assertEqual(list(tidy.columns), ['date', 'SMA'])

    def test_unnamed_series_becomes_value(self):
        series = pd.Series([1.0], index=pd.date_range('2020-01-01', periods=1))
        self.assertEqual(list(as_tidy(series).columns), ['date', 'value'])

    def test_period_index_becomes_timestamps(self):
        frame = pd.DataFrame({'x': [1, 2]}, index=pd.period_range('2020-01', periods=2, freq='M'))
        tidy = as_tidy(frame)
        self.assertEqual(tidy['date'].iloc[1], pd.Timestamp('2020-02-01'))

    def test_non_datetime_index_raises(self):
        with self.assertRaises(CoercionError):
            as_tidy(pd.DataFrame({'x': [1, 2]}, index=['a', 'b']))

    def test_value_named_like_date_column_raises(self):
        series = pd.Series([1.0, 2.0], index=pd.date_range('2020-01-01', periods=2), name='date')
        with self.assertRaises(CoercionError):
            as_tidy(series)
        self.assertEqual(list(as_tidy(series, date_col='when').columns), ['when', 'date'])

    def test_custom_date_column_name(self):
        ts = as_timeseries(_tidy().iloc[:2], select='close')
        self.assertEqual(as_tidy(ts, date_col='when').columns[0], 'when')


@pytest.mark.unit
class TestWideLong(unittest.TestCase):

    def test_to_wide_spreads_identifiers(self):
        wide = to_wide(_tidy(), id_col='symbol', value_col='close')
        self.assertEqual(list(wide.columns), ['A', 'B'])
        self.assertEqual(wide.loc['2020-01-01', 'A'], 1.0)
        self.assertEqual(wide.loc['2020-01-02', 'B'], 11.0)

    def test_to_wide_requires_value_col_when_ambiguous(self):
        with self.assertRaises(CoercionError):
            to_wide(_tidy(), id_col='symbol')

    def test_to_wide_duplicates_raise(self):
        frame = pd.concat([_tidy(), _tidy().iloc[:1]])
        with self.assertRaises(CoercionError):
            to_wide(frame, value_col='close')

    def test_to_wide_missing_identifier_raises(self):
        with self.assertRaises(ColumnError):
            to_wide(_tidy(), id_col='ticker', value_col='close')

    def test_to_long_melts_back(self):
        wide = to_wide(_tidy(), value_col='close')
        long = to_long(wide, id_col='symbol', value_name='close')
        self.assertEqual(list(long.columns), ['symbol', 'date', 'close'])
        self.assertEqual(len(long), 4)
        self.assertEqual(long['symbol'].tolist(), ['A', 'A', 'B', 'B'])

    def test_to_wide_keeps_missing_as_nan(self):
        frame = _tidy().iloc[:3]
        wide = to_wide(frame, value_col='close')
        self.assertTrue(np.isnan(wide.loc['2020-01-02', 'B']))


@pytest.mark.unit
class TestSplitGroups(unittest.TestCase):

    def test_ungrouped_yields_whole_frame(self):
        groups = list(split_groups(_tidy()))
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0][0], {})

    def test_groups_in_order_of_appearance(self):
        frame = _tidy().iloc[::-1]
        keys = [keys['symbol'] for keys, _ in split_groups(frame, 'symbol')]
        self.assertEqual(keys, ['B', 'A'])

    def test_accepts_dataframe_groupby(self):
        frame, cols = resolve_groups(_tidy().groupby('symbol'))
        self.assertEqual(cols, ['symbol'])
        self.assertEqual(len(frame), 4)

    def test_groupby_on_series_raises(self):
        frame = _tidy()
        with self.assertRaisesRegex(CoercionError, 'column names'):
            resolve_groups(frame.groupby(frame['symbol']))

    def test_groupby_plus_group_by_raises(self):
        with self.assertRaises(CoercionError):
            resolve_groups(_tidy().groupby('symbol'), 'symbol')

    def test_missing_group_column_raises(self):
        with self.assertRaises(ColumnError):
            list(split_groups(_tidy(), 'sector'))
