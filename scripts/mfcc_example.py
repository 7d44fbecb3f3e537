#!/usr/bin/env python3
"""
Minimal batch extraction example on a synthetic ramp signal.

Usage:
    python scripts/mfcc_example.py
"""

import sys
from pathlib import Path

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

import numpy as np

from melceps import mfcc_feats


def main():
    sample_rate = 16000
    window_length = 1024
    window_stride = 512
    fft_size = 512
    num_filters = 20
    num_coefs = 13

    signal = np.arange(16000, dtype=np.float64)
    features = mfcc_feats(
        signal, sample_rate, window_length, window_stride,
        fft_size, num_filters, num_coefs
    )
    print(f"Generated {features.shape[0]} x {features.shape[1]} MFCC features "
          f"from signal of length {len(signal)}")


if __name__ == "__main__":
    main()
