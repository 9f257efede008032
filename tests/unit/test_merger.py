"""Unit tests for merge and interleave."""

import pytest
import numpy as np

from autorecorder.audio.buffer import ChannelBuffer
from autorecorder.audio.merger import merge, interleave
from autorecorder.exceptions import LengthMismatch


@pytest.mark.unit
class TestMerge:
    """Test cases for merge."""

    def test_concatenates_in_arrival_order(self):
        channel = ChannelBuffer()
        channel.append([1.0, 2.0])
        channel.append([3.0])
        channel.append([4.0, 5.0, 6.0])

        result = merge(channel)

        assert result.dtype == np.float32
        np.testing.assert_array_equal(result, [1, 2, 3, 4, 5, 6])

    def test_length_matches_total(self, audio_test_data):
        channel = ChannelBuffer()
        chunks = [audio_test_data("noise", frames=n) for n in (4096, 4096, 100)]
        for chunk in chunks:
            channel.append(chunk)

        result = merge(channel)

        assert len(result) == len(channel) == 8292
        np.testing.assert_array_equal(result, np.concatenate(chunks))

    def test_empty_buffer(self):
        result = merge(ChannelBuffer())

        assert len(result) == 0
        assert result.dtype == np.float32

    def test_does_not_mutate_input(self):
        channel = ChannelBuffer()
        channel.append([0.5, 0.5])
        channel.append([0.25])

        result = merge(channel)
        result[:] = 0.0

        assert len(channel.chunks) == 2
        np.testing.assert_array_equal(channel.chunks[0], [0.5, 0.5])
        np.testing.assert_array_equal(channel.chunks[1], [0.25])


@pytest.mark.unit
class TestInterleave:
    """Test cases for interleave."""

    def test_alternates_left_and_right(self):
        result = interleave([1.0, 2.0, 3.0], [-1.0, -2.0, -3.0])

        np.testing.assert_array_equal(result, [1, -1, 2, -2, 3, -3])

    @pytest.mark.parametrize("length", [0, 1, 7, 4096])
    def test_even_and_odd_indices(self, length, audio_test_data):
        left = audio_test_data("noise", frames=length)
        right = audio_test_data("noise", frames=length)

        result = interleave(left, right)

        assert len(result) == 2 * length
        np.testing.assert_array_equal(result[0::2], left)
        np.testing.assert_array_equal(result[1::2], right)

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatch):
            interleave([0.0, 0.0], [0.0])
