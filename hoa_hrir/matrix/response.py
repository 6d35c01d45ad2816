"""
Impulse Response Loading Module

A ``Response`` wraps one stereo HRIR WAV file: its measurement direction,
parsed from the filename, and its decoded samples. Decoding problems never
propagate; they mark the response invalid so that the subject skips it.
"""

import os
import struct
import logging
import numpy as np
from scipy.io import wavfile
from typing import Optional

from .utils import Direction, StereoSamples, format_name
from .naming import FilenameGrammar
from .exceptions import DecodingError

# Set up logging
logger = logging.getLogger(__name__)

NUMBER_OF_CHANNELS = 2


def decode_wav(file_path: str) -> StereoSamples:
    """
    Decode a two-channel WAV file to float samples in [-1, 1].

    Args:
        file_path: Path to the WAV file

    Returns:
        Samples, shape (n_samples, 2)

    Raises:
        DecodingError: If the file cannot be read or is not two-channel
    """
    try:
        _, data = wavfile.read(file_path)
    except (OSError, ValueError, EOFError, struct.error) as e:
        raise DecodingError(f"Can't load wav file {file_path}: {str(e)}")

    if data.ndim != 2 or data.shape[1] != NUMBER_OF_CHANNELS:
        channels = 1 if data.ndim == 1 else data.shape[1]
        raise DecodingError(f"Expected {NUMBER_OF_CHANNELS} channels in {file_path}, got {channels}")

    # Convert to float and normalize
    if data.dtype == np.uint8:
        samples = (data.astype(np.float64) - 128.0) / 128.0
    elif np.issubdtype(data.dtype, np.integer):
        samples = data.astype(np.float64) / float(-np.iinfo(data.dtype).min)
    else:
        samples = data.astype(np.float64)

    return samples


class Response:
    """
    A directional impulse response read from a WAV file.

    Attributes:
        path: Path to the WAV file
        name: File name without directory and extension
        direction: Measurement direction parsed from the name
    """

    def __init__(self, path: str, grammar: FilenameGrammar):
        self.path = path
        self.name = format_name(path)
        self.direction, self._parsed = grammar.parse(os.path.basename(path))
        self._samples: Optional[StereoSamples] = None
        self._decoded = False

    @property
    def azimuth(self) -> float:
        return self.direction.azimuth

    @property
    def elevation(self) -> float:
        return self.direction.elevation

    @property
    def valid(self) -> bool:
        """True while the name parsed and no decoding attempt has failed."""
        return self._parsed and (not self._decoded or self._samples is not None)

    @property
    def loaded(self) -> bool:
        return self._samples is not None

    def read(self) -> bool:
        """
        Decode the samples of the file.

        Returns:
            True on success; on failure the response becomes invalid
        """
        self._decoded = True
        try:
            self._samples = decode_wav(self.path)
        except DecodingError as e:
            logger.warning(str(e))
            self._samples = None
            return False
        return True

    @property
    def samples_per_channel(self) -> int:
        return 0 if self._samples is None else self._samples.shape[0]

    def sample(self, channel: int, index: int) -> float:
        """Sample of a channel, 0 for any out-of-range channel or index."""
        if self._samples is None or not (0 <= channel < NUMBER_OF_CHANNELS):
            return 0.0
        if not (0 <= index < self._samples.shape[0]):
            return 0.0
        return float(self._samples[index, channel])

    def samples(self, channel: int, length: int) -> np.ndarray:
        """
        A channel zero-padded or truncated to ``length`` samples.

        Equivalent to ``[self.sample(channel, j) for j in range(length)]``.
        """
        padded = np.zeros(length)
        if self._samples is None or not (0 <= channel < NUMBER_OF_CHANNELS):
            return padded
        count = min(length, self._samples.shape[0])
        padded[:count] = self._samples[:count, channel]
        return padded

    def __repr__(self) -> str:
        azimuth, elevation = self.direction.to_degrees()
        return (f"Response({self.name!r}, azimuth={azimuth:.1f}°, elevation={elevation:.1f}°, "
                f"samples={self.samples_per_channel}, valid={self.valid})")
