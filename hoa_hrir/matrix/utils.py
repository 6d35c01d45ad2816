"""
General Utility Functions and Definitions

This module contains the fundamental data structures, enumerations and
filesystem helpers used across the HRIR matrix creator: the measurement
direction, the dimension and database selectors, and the folder enumerator
and name formatter used to discover impulse response files.

See Also:
    - config: For centralized configuration management
    - naming: For the filename grammars that produce directions
"""

import math
import os
import re
from enum import Enum
from dataclasses import dataclass
from typing import List, Tuple
import numpy as np

# Type aliases for improved readability
Matrix = np.ndarray  # Shape: (responses_size * number_of_harmonics,)
StereoSamples = np.ndarray  # Shape: (n_samples, 2)
HarmonicVector = np.ndarray  # Shape: (number_of_harmonics,)

WAV_EXTENSION = '.wav'


class Dimension(Enum):
    """
    Dimensionality of the ambisonic decomposition.

    Attributes:
        HOA_2D: Circular harmonics, horizontal plane only (2*order+1 harmonics)
        HOA_3D: Spherical harmonics over the full sphere ((order+1)² harmonics)
    """
    HOA_2D = '2d'
    HOA_3D = '3d'

    @property
    def label(self) -> str:
        """Upper-case label used in artifact names ('2D' or '3D')."""
        return self.value.upper()


class HrirDatabase(Enum):
    """
    HRIR databases whose filenames encode the measurement direction.

    Attributes:
        LISTEN: IRCAM Listen naming, e.g. ``IRC_1002_C_R0195_T180_P060.wav``
        SADIE: York SADIE naming, e.g. ``azi_13,0_ele_-64,8.wav``
    """
    LISTEN = 'listen'
    SADIE = 'sadie'


@dataclass(frozen=True)
class Direction:
    """
    Measurement direction of an impulse response.

    Attributes:
        azimuth: Azimuth in radians
        elevation: Elevation in radians, 0 on the horizontal plane
    """
    azimuth: float = 0.0
    elevation: float = 0.0

    def to_degrees(self) -> Tuple[float, float]:
        """Return (azimuth, elevation) in degrees."""
        return (math.degrees(self.azimuth), math.degrees(self.elevation))


def degrees_to_radians(degrees: float) -> float:
    """Convert an angle in degrees to radians as ``degrees / 360 * 2π``."""
    return degrees / 360.0 * 2.0 * math.pi


def format_name(path: str) -> str:
    """
    Strip the directory and the extension from a file path.

    Everything from the first '.' of the base name on is treated as the
    extension, so ``/a/b/IRC_1002.wav`` gives ``IRC_1002``.
    """
    name = os.path.basename(path)
    pos = name.find('.')
    if pos != -1:
        name = name[:pos]
    return name


def format_classname(folder_name: str) -> str:
    """
    Build a class name from a subject folder name.

    Separators are dropped; the first character of each part keeps its case
    and the rest is lower-cased, so ``IRC_1002_C`` becomes ``Irc1002C``.
    Names that would start with a digit get a ``Subject`` prefix.
    """
    parts = [part for part in re.split(r'[^0-9A-Za-z]+', folder_name) if part]
    classname = ''.join(part[0] + part[1:].lower() for part in parts)
    if not classname or classname[0].isdigit():
        classname = 'Subject' + classname
    return classname


def list_files(folder: str, extension: str = WAV_EXTENSION) -> List[str]:
    """
    List the files of a folder matching an extension.

    Args:
        folder: Folder to scan (not recursive)
        extension: Extension to match, case-insensitive; empty matches all

    Returns:
        Sorted list of file paths
    """
    files = []
    for entry in sorted(os.listdir(folder)):
        path = os.path.join(folder, entry)
        if not os.path.isfile(path):
            continue
        if extension and not entry.lower().endswith(extension.lower()):
            continue
        files.append(path)
    return files


def list_folders(root: str) -> List[str]:
    """
    List the immediate subfolders of a root folder.

    Args:
        root: Root folder, one subfolder per subject

    Returns:
        Sorted list of folder paths, hidden folders excluded
    """
    return [os.path.join(root, entry) for entry in sorted(os.listdir(root))
            if not entry.startswith('.') and os.path.isdir(os.path.join(root, entry))]
