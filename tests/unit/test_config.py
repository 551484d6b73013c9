"""
Tests for configuration loading, validation and access.
"""

import logging
import os
import unittest

import pytest
import yaml

from tqkit.config import (
    ConfigError,
    ConfigLoader,
    ConfigManager,
    ConfigValidator,
    get_config,
    set_config,
)
from tqkit.config.core.validator import DATA_SOURCES
from tqkit.data import get_options
from tqkit.log import setup_logging


@pytest.mark.unit
class TestConfigLoader(unittest.TestCase):
    """Test YAML loading and merging."""

    @pytest.fixture(autouse=True)
    def _config_dir(self, temp_config_dir):
        self.config_dir = temp_config_dir

    def test_load_all_merges_domain_files(self):
        config = ConfigLoader(self.config_dir).load_all()
        self.assertEqual(set(config), {'data', 'charts', 'logging'})
        self.assertEqual(config['data']['crypto_exchange'], 'kraken')

    def test_profile_overrides_are_deep_merged(self):
        config = ConfigLoader(self.config_dir).load_all('quick')
        self.assertEqual(config['data']['default_lookback_years'], 1)
        self.assertEqual(config['data']['crypto_exchange'], 'kraken')
        self.assertEqual(config['logging']['level'], 'DEBUG')
        self.assertEqual(config['logging']['format'], '%(levelname)s:%(message)s')

    def test_missing_profile_raises(self):
        with self.assertRaises(ConfigError):
            ConfigLoader(self.config_dir).load_all('nope')

    def test_missing_domain_file_raises(self):
        os.remove(os.path.join(self.config_dir, 'charts.yaml'))
        with self.assertRaises(ConfigError) as ctx:
            ConfigLoader(self.config_dir).load_all()
        self.assertIn('charts.yaml', str(ctx.exception))

    def test_malformed_yaml_raises(self):
        with open(os.path.join(self.config_dir, 'data.yaml'), 'w') as f:
            f.write('data: [unclosed\n')
        with self.assertRaises(ConfigError):
            ConfigLoader(self.config_dir).load_all()

    def test_non_mapping_file_raises(self):
        with open(os.path.join(self.config_dir, 'logging.yaml'), 'w') as f:
            yaml.dump(['INFO'], f)
        with self.assertRaises(ConfigError):
            ConfigLoader(self.config_dir).load_all()

    def test_merge_replaces_non_dict_values(self):
        merged = ConfigLoader().merge_configs({'a': {'b': 1, 'c': 2}, 'd': [1]},
                                              {'a': {'b': 3}, 'd': [2]})
        self.assertEqual(merged, {'a': {'b': 3, 'c': 2}, 'd': [2]})


@pytest.mark.unit
class TestConfigValidator(unittest.TestCase):
    """Test validation rules."""

    def setUp(self):
        self.config = ConfigLoader().load_all()
        self.validator = ConfigValidator()

    def test_packaged_defaults_are_valid(self):
        result = self.validator.validate(self.config)
        self.assertTrue(result.is_valid(), result.errors)

    def test_source_names_match_registry(self):
        self.assertEqual(list(DATA_SOURCES), get_options())

    def test_unknown_source(self):
        self.config['data']['default_source'] = 'bond.prices'
        self.assertFalse(self.validator.validate(self.config).is_valid())

    def test_lookback_must_be_positive_integer(self):
        for bad in (0, 2.5, True, 'ten'):
            self.config['data']['default_lookback_years'] = bad
            self.assertFalse(self.validator.validate(self.config).is_valid(), bad)

    def test_invalid_colour(self):
        self.config['charts']['color_up'] = 'not-a-colour'
        result = self.validator.validate(self.config)
        self.assertTrue(any('color_up' in error for error in result.errors))

    def test_invalid_linestyle(self):
        self.config['charts']['moving_average']['linestyle'] = 'wavy'
        self.assertFalse(self.validator.validate(self.config).is_valid())

    def test_alpha_range(self):
        self.config['charts']['bbands']['alpha'] = 1.5
        self.assertFalse(self.validator.validate(self.config).is_valid())

    def test_invalid_log_level(self):
        self.config['logging']['level'] = 'LOUD'
        self.assertFalse(self.validator.validate(self.config).is_valid())

    def test_missing_logging_section_is_a_warning(self):
        del self.config['logging']
        result = self.validator.validate(self.config)
        self.assertTrue(result.is_valid())
        self.assertTrue(result.warnings)


@pytest.mark.unit
class TestConfigManager(unittest.TestCase):
    """Test the manager facade and typed accessors."""

    @pytest.fixture(autouse=True)
    def _config_dir(self, temp_config_dir):
        self.config_dir = temp_config_dir

    def test_packaged_defaults(self):
        config = ConfigManager()
        data = config.get_data_config()
        self.assertEqual(data.default_source, 'stock.prices')
        self.assertEqual(data.default_lookback_years, 10)
        self.assertEqual(data.crypto_exchange, 'coinbase')
        self.assertEqual(config.get_chart_config().color_up, 'darkblue')
        self.assertEqual(config.get_logging_config().level, 'INFO')

    def test_packaged_verbose_profile(self):
        config = ConfigManager(profile_name='verbose')
        self.assertEqual(config.get_data_config().default_lookback_years, 1)
        self.assertEqual(config.get_logging_config().level, 'DEBUG')

    def test_custom_directory(self):
        config = ConfigManager(config_dir=self.config_dir)
        charts = config.get_chart_config()
        self.assertEqual(charts.color_up, 'green')
        self.assertEqual(charts.moving_average.linestyle, 'solid')
        self.assertEqual(charts.bbands.alpha, 0.1)
        self.assertEqual(config.get_data_config().crypto_timeframe, '1h')

    def test_invalid_file_raises_config_error(self):
        path = os.path.join(self.config_dir, 'charts.yaml')
        with open(path) as f:
            charts = yaml.safe_load(f)
        charts['charts']['color_down'] = 'blurple'
        with open(path, 'w') as f:
            yaml.dump(charts, f)

        with self.assertRaises(ConfigError) as ctx:
            ConfigManager(config_dir=self.config_dir)
        self.assertIn('color_down', str(ctx.exception))

    def test_active_config(self):
        custom = ConfigManager(config_dir=self.config_dir)
        set_config(custom)
        self.assertIs(get_config(), custom)
        set_config(None)
        self.assertIsNot(get_config(), custom)
        self.assertEqual(get_config().get_data_config().crypto_exchange, 'coinbase')


@pytest.mark.unit
class TestSetupLogging(unittest.TestCase):
    """Test root logger configuration."""

    def setUp(self):
        root = logging.getLogger()
        self.saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        root.handlers = self.saved[1]
        root.setLevel(self.saved[0])

    @pytest.fixture(autouse=True)
    def _config_dir(self, temp_config_dir):
        self.config_dir = temp_config_dir

    def test_level_from_config(self):
        setup_logging(ConfigManager(config_dir=self.config_dir))
        self.assertEqual(logging.getLogger().level, logging.WARNING)

    def test_level_override(self):
        setup_logging(ConfigManager(config_dir=self.config_dir), level='debug')
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        self.assertGreaterEqual(logging.getLogger('urllib3').level, logging.WARNING)
