#!/usr/bin/env python3
"""
Extract MFCC features from a WAV file.

Usage:
    melceps speech.wav --output feats.npy
    melceps speech.wav --config features.yaml --no-energy -v
    python -m melceps speech.wav --fft-size 1024 --num-filters 40
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from scipy.io import wavfile

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import FeatureConfig, load_config
from .errors import MFCCParameterError
from .mfcc import split_signal, validate_parameters
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

console = Console()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='melceps',
        description='Extract MFCC features from a WAV file'
    )
    parser.add_argument('audio', type=str, help='Input WAV file')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML feature configuration')
    parser.add_argument('--window-length', type=int, default=None,
                        help='Window length in samples')
    parser.add_argument('--window-stride', type=int, default=None,
                        help='Window stride in samples')
    parser.add_argument('--fft-size', type=int, default=None)
    parser.add_argument('--num-filters', type=int, default=None)
    parser.add_argument('--num-coefs', type=int, default=None)
    parser.add_argument('--no-energy', action='store_true',
                        help='Keep cepstral coefficient 0 instead of the log-energy')
    emphasis = parser.add_mutually_exclusive_group()
    emphasis.add_argument('--pre-emphasis', type=float, default=None,
                          help='Pre-emphasis factor')
    emphasis.add_argument('--no-pre-emphasis', action='store_true')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output file (.npy or .csv)')
    parser.add_argument('--log-file', type=str, default=None)
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace, sample_rate: int) -> FeatureConfig:
    """Config file first, then command line overrides; sample rate from the audio."""
    config = load_config(args.config) if args.config else FeatureConfig()

    overrides = {
        'window_length': args.window_length,
        'window_stride': args.window_stride,
        'fft_size': args.fft_size,
        'num_filters': args.num_filters,
        'num_coefs': args.num_coefs,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)

    if args.no_energy:
        config.energy = False
    if args.no_pre_emphasis:
        config.pre_emphasis = None
    elif args.pre_emphasis is not None:
        config.pre_emphasis = args.pre_emphasis

    config.sample_rate = sample_rate
    return config


def read_wav(path: str) -> Tuple[int, np.ndarray]:
    """Read a WAV file as a mono float64 signal (channels averaged)."""
    sample_rate, data = wavfile.read(path)
    data = np.asarray(data, dtype=np.float64)
    if data.ndim > 1:
        data = data.mean(axis=1)
    return sample_rate, data


def save_features(features: np.ndarray, output: str) -> None:
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == '.csv':
        np.savetxt(path, features, delimiter=',')
    else:
        np.save(path, features)


def print_summary(config: FeatureConfig, features: np.ndarray, n_samples: int) -> None:
    table = Table(title="MFCC extraction", box=box.ROUNDED)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", justify="right")

    for key, value in config.to_dict().items():
        table.add_row(key, str(value))
    table.add_row("samples", str(n_samples))
    table.add_row("frames", str(features.shape[0]))

    console.print(table)
    if features.size:
        console.print(Panel(
            f"shape {features.shape[0]} x {features.shape[1]}\n"
            f"min {features.min():.4f}  max {features.max():.4f}  mean {features.mean():.4f}",
            title="Features",
            border_style="green"
        ))


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(
        log_file=args.log_file,
        level=logging.DEBUG if args.verbose else logging.INFO,
        name='melceps',
        console_level=logging.DEBUG if args.verbose else logging.WARNING
    )

    sample_rate, signal = read_wav(args.audio)
    config = build_config(args, sample_rate)
    logger.info(f"Loaded {args.audio}: {len(signal)} samples at {sample_rate} Hz")

    try:
        validate_parameters(
            len(signal), config.sample_rate, config.window_length, config.window_stride,
            config.fft_size, config.num_filters, config.num_coefs,
            energy=config.energy
        )
    except MFCCParameterError as e:
        console.print(f"[red]Invalid parameters:[/red] {e}")
        return 2

    frames = split_signal(signal, config.window_length, config.window_stride)
    processor = config.create_processor()

    features = []
    with Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True
    ) as progress:
        task = progress.add_task("Frames", total=len(frames))
        for frame in frames:
            features.append(processor.process_frame(frame))
            progress.advance(task)
    features = np.vstack(features)

    print_summary(config, features, len(signal))

    if args.output:
        save_features(features, args.output)
        logger.info(f"Saved features to {args.output}")
        console.print(f"Saved to [bold]{args.output}[/bold]")

    return 0


if __name__ == '__main__':
    sys.exit(main())
