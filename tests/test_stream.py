"""
Tests for the push-style streaming adapter.

Run:
    pytest tests/test_stream.py -v
"""

import os
import sys

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest

from melceps import MFCC, MFCCStream, StreamClosedError, mfcc_feats, split_signal
from melceps.errors import InvalidWindowLength, InvalidWindowStride


def make_processor(**kwargs):
    return MFCC(16000, 256, 20, 13, **kwargs)


def feed_in_chunks(stream, signal, chunk_sizes):
    results = []
    start = 0
    i = 0
    while start < len(signal):
        size = chunk_sizes[i % len(chunk_sizes)]
        results.extend(stream.feed(signal[start:start + size]))
        start += size
        i += 1
    return results


class TestSubmitFrame:
    """Frame-by-frame delivery."""

    def test_matches_processor(self):
        frames = np.random.randn(4, 256)
        stream = MFCCStream(make_processor())

        streamed = np.vstack([stream.submit_frame(f) for f in frames])
        expected = make_processor().process_frames(frames)

        assert np.allclose(streamed, expected)

    def test_subscribers_receive_in_order(self):
        frames = np.random.randn(3, 256)
        stream = MFCCStream(make_processor())
        first, second = [], []
        stream.subscribe(first.append)
        stream.subscribe(second.append)

        returned = [stream.submit_frame(f) for f in frames]

        assert len(first) == len(second) == 3
        for got_a, got_b, expected in zip(first, second, returned):
            assert np.array_equal(got_a, expected)
            assert np.array_equal(got_b, expected)

    def test_unsubscribe_stops_delivery(self):
        stream = MFCCStream(make_processor())
        received = []
        subscription = stream.subscribe(received.append)

        stream.submit_frame(np.random.randn(256))
        subscription.unsubscribe()
        stream.submit_frame(np.random.randn(256))
        subscription.unsubscribe()

        assert len(received) == 1
        assert not subscription.active

    def test_unsubscribe_from_callback(self):
        stream = MFCCStream(make_processor())
        received = []

        def once(coefs):
            received.append(coefs)
            subscription.unsubscribe()

        subscription = stream.subscribe(once)
        others = []
        stream.subscribe(others.append)

        stream.submit_frame(np.random.randn(256))
        stream.submit_frame(np.random.randn(256))

        assert len(received) == 1
        assert len(others) == 2

    def test_close(self):
        stream = MFCCStream(make_processor(), window_length=256)
        received = []
        subscription = stream.subscribe(received.append)
        stream.close()

        assert stream.closed
        assert not subscription.active
        with pytest.raises(StreamClosedError):
            stream.submit_frame(np.random.randn(256))
        with pytest.raises(StreamClosedError):
            stream.feed(np.random.randn(256))
        with pytest.raises(StreamClosedError):
            stream.subscribe(received.append)
        assert received == []

        # Closing twice is harmless
        stream.close()

    def test_empty_frame_rejected(self):
        stream = MFCCStream(make_processor())
        received = []
        stream.subscribe(received.append)

        with pytest.raises(InvalidWindowLength):
            stream.submit_frame([])
        assert received == []

    def test_context_manager(self):
        with MFCCStream(make_processor()) as stream:
            stream.submit_frame(np.random.randn(256))
        assert stream.closed


class TestFeed:
    """Raw sample chunks cut into frames."""

    @pytest.mark.parametrize("window,stride,chunks", [
        (256, 128, [100]),
        (256, 256, [1000, 3, 77]),
        (200, 300, [37, 512]),
        (256, 64, [4096]),
    ])
    def test_matches_batch(self, window, stride, chunks):
        signal = np.random.randn(4000)
        stream = MFCCStream(make_processor(), window_length=window, window_stride=stride)

        streamed = feed_in_chunks(stream, signal, chunks)
        expected = mfcc_feats(signal, 16000, window, stride, 256, 20, 13)

        assert len(streamed) == len(split_signal(signal, window, stride))
        assert np.allclose(np.vstack(streamed), expected)

    def test_partial_frame_is_buffered(self):
        stream = MFCCStream(make_processor(), window_length=256)

        assert stream.feed(np.random.randn(200)) == []
        assert len(stream.feed(np.random.randn(100))) == 1

    def test_feed_needs_window_length(self):
        stream = MFCCStream(make_processor())
        with pytest.raises(InvalidWindowLength):
            stream.feed(np.random.randn(256))

    def test_invalid_framing(self):
        with pytest.raises(InvalidWindowLength):
            MFCCStream(make_processor(), window_length=0)
        with pytest.raises(InvalidWindowStride):
            MFCCStream(make_processor(), window_length=256, window_stride=-1)
