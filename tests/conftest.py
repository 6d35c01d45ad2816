"""
Pytest configuration file for HRIR matrix creator tests.
"""

import pytest
import numpy as np
from scipy.io import wavfile

from hoa_hrir.matrix.config import SubjectConfig
from hoa_hrir.matrix.utils import Dimension, HrirDatabase


def _listen_name(azimuth: int, elevation: int, radius: str = 'R0195') -> str:
    """Build a Listen-style file name for integer degrees."""
    return f"IRC_1002_C_{radius}_T{azimuth:03d}_P{elevation:03d}.wav"


@pytest.fixture
def listen_name():
    """Return the Listen file name builder."""
    return _listen_name


@pytest.fixture
def write_wav():
    """Return a function writing a WAV file from a (n_samples, n_channels) array."""
    def _write(path, samples, sample_rate=44100):
        wavfile.write(str(path), sample_rate, np.asarray(samples))
        return str(path)
    return _write


@pytest.fixture
def unit_impulses():
    """Four stereo samples of value 1.0."""
    return np.ones((4, 2), dtype=np.float32)


@pytest.fixture
def listen_subject(tmp_path, write_wav, unit_impulses):
    """Listen subject with azimuths 0°, 90° and 180° on the horizontal plane."""
    folder = tmp_path / 'IRC_1002'
    folder.mkdir()
    for azimuth in (0, 90, 180):
        write_wav(folder / _listen_name(azimuth, 0), unit_impulses)
    return str(folder)


@pytest.fixture
def mixed_elevation_subject(tmp_path, write_wav, unit_impulses):
    """Listen subject with two horizontal and two elevated responses."""
    folder = tmp_path / 'IRC_1003'
    folder.mkdir()
    for azimuth, elevation in ((0, 0), (90, 0), (0, 30), (90, 315)):
        write_wav(folder / _listen_name(azimuth, elevation), unit_impulses)
    return str(folder)


@pytest.fixture
def make_config(tmp_path):
    """Return a factory of subject configurations writing into tmp_path/results."""
    def _make(folder, order=1, dimension=Dimension.HOA_2D, database=HrirDatabase.LISTEN, **kwargs):
        kwargs.setdefault('output_directory', str(tmp_path / 'results'))
        return SubjectConfig(order=order, wave_folder=folder, dimension=dimension,
                             database_type=database, **kwargs)
    return _make
