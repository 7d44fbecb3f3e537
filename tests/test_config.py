"""
Tests for YAML feature configuration.
"""

import os
import sys

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest

from melceps import FeatureConfig, load_config, mfcc_feats, save_config


class TestFeatureConfig:

    def test_defaults(self):
        config = FeatureConfig()
        assert config.sample_rate == 16000
        assert config.num_coefs == 13
        assert config.energy is True
        assert config.pre_emphasis == 0.97

    def test_from_dict_nested_and_flat(self):
        nested = FeatureConfig.from_dict({'features': {'fft_size': 1024, 'num_filters': 40}})
        flat = FeatureConfig.from_dict({'fft_size': 1024, 'num_filters': 40})

        assert nested == flat
        assert nested.fft_size == 1024
        assert nested.window_length == 1024

    def test_unknown_keys_ignored(self, caplog):
        config = FeatureConfig.from_dict({'num_coefs': 12, 'n_mels': 128})

        assert config.num_coefs == 12
        assert 'n_mels' in caplog.text

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(ValueError):
            FeatureConfig.from_dict([1, 2, 3])

    def test_load_yaml(self, tmp_path):
        path = tmp_path / 'features.yaml'
        path.write_text(
            "features:\n"
            "  sample_rate: 8000\n"
            "  num_coefs: 10\n"
            "  energy: false\n"
            "  pre_emphasis: null\n"
        )
        config = load_config(path)

        assert config.sample_rate == 8000
        assert config.num_coefs == 10
        assert config.energy is False
        assert config.pre_emphasis is None

    def test_load_empty_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text("")
        assert load_config(path) == FeatureConfig()

    def test_save_and_load(self, tmp_path):
        config = FeatureConfig(window_length=400, window_stride=160, pre_emphasis=None)
        path = tmp_path / 'saved.yaml'
        save_config(config, path)

        assert load_config(path) == config

    def test_shipped_default_config(self):
        path = os.path.join(os.path.dirname(__file__), '..', 'configs', 'default.yaml')
        assert load_config(path) == FeatureConfig()

    def test_extract(self):
        config = FeatureConfig(window_length=512, window_stride=256, num_coefs=12)
        signal = np.random.randn(4000)

        feats = config.extract(signal)
        expected = mfcc_feats(signal, 16000, 512, 256, 512, 20, 12)

        assert np.allclose(feats, expected)

    def test_create_processor(self):
        processor = FeatureConfig(energy=False, pre_emphasis=None).create_processor()

        assert processor.energy is False
        assert processor.pre_emphasis is None
        assert processor.process_frame(np.random.randn(1024)).shape == (13,)
