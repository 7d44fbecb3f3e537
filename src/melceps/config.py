"""
Feature extraction configuration, loadable from YAML.

Example file::

    features:
      sample_rate: 16000
      window_length: 1024
      window_stride: 512
      fft_size: 512
      num_filters: 20
      num_coefs: 13
      energy: true
      pre_emphasis: 0.97   # null disables pre-emphasis
"""

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import yaml

from .mfcc import DEFAULT_PRE_EMPHASIS, MFCC, mfcc_feats

logger = logging.getLogger(__name__)


@dataclass
class FeatureConfig:
    """MFCC extraction parameters. Lengths and strides are in samples."""
    sample_rate: int = 16000
    window_length: int = 1024
    window_stride: int = 512
    fft_size: int = 512
    num_filters: int = 20
    num_coefs: int = 13
    energy: bool = True
    pre_emphasis: Optional[float] = DEFAULT_PRE_EMPHASIS

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> 'FeatureConfig':
        """Build from a flat mapping or one nested under a 'features' key."""
        if not config:
            return cls()
        if not isinstance(config, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(config).__name__}")
        if isinstance(config.get('features'), dict):
            config = config['features']

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            logger.warning(f"Ignoring unknown feature options: {', '.join(unknown)}")
        return cls(**{k: v for k, v in config.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def create_processor(self) -> MFCC:
        return MFCC(
            self.sample_rate,
            self.fft_size,
            self.num_filters,
            self.num_coefs,
            energy=self.energy,
            pre_emphasis=self.pre_emphasis
        )

    def extract(self, signal: Sequence[float]) -> np.ndarray:
        """Run mfcc_feats() on a signal with these parameters."""
        return mfcc_feats(
            signal,
            self.sample_rate,
            self.window_length,
            self.window_stride,
            self.fft_size,
            self.num_filters,
            self.num_coefs,
            energy=self.energy,
            pre_emphasis=self.pre_emphasis
        )


def load_config(config_path: Union[str, Path]) -> FeatureConfig:
    """Load a FeatureConfig from a YAML file."""
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    return FeatureConfig.from_dict(config)


def save_config(config: FeatureConfig, config_path: Union[str, Path]) -> None:
    """Write a FeatureConfig as YAML under a 'features' key."""
    with open(config_path, 'w') as f:
        yaml.safe_dump({'features': config.to_dict()}, f, sort_keys=False)
