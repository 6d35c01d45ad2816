"""
Subject Aggregation Module

A subject is one listener's set of directional impulse responses. This module
discovers the valid responses of a subject folder and projects them onto the
circular (2D) or spherical (3D) harmonic basis, accumulating one encoding
matrix per ear.

Both matrices are flat arrays of ``responses_size * number_of_harmonics``
values with the time sample as outer index and the harmonic as inner index.

The 2D and 3D aggregations differ only by three pure functions, grouped in a
``DimensionStrategy``:

- the elevation filter: 2D keeps only responses measured at elevation 0
- the pre-scale divisor applied to each sample: ``order + 1`` in 2D, the
  number of valid responses in 3D
- the per-harmonic weight applied after projection: 0.5 on the zeroth
  harmonic in 2D; ``2l+1`` for ``m == 0`` and ``(2l+1)·4π`` otherwise in 3D

The weights are tied to the sampling grids of the Listen and SADIE databases.
"""

import os
import math
import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, Dict, List

from .config import SubjectConfig
from .math_utils import HarmonicEncoder, number_of_harmonics
from .naming import get_grammar
from .response import Response
from .utils import Dimension, Direction, Matrix, list_files, WAV_EXTENSION
from .exceptions import ValidationError

# Set up logging
logger = logging.getLogger(__name__)


# =====================================================================================
# Dimension strategies
# =====================================================================================

@dataclass(frozen=True)
class DimensionStrategy:
    """Filtering and weighting rules of one dimension"""

    dimension: Dimension
    accepts: Callable[[Direction], bool]
    pre_scale: Callable[[int, int], float]  # (order, number_of_responses) -> divisor
    weight: Callable[[HarmonicEncoder, int], float]  # (encoder, harmonic index) -> weight

    def weights(self, encoder: HarmonicEncoder) -> np.ndarray:
        """Weights of every harmonic of the encoder, shape (n_harmonics,)."""
        return np.array([self.weight(encoder, k) for k in range(encoder.n_harmonics)])


def _accept_horizontal(direction: Direction) -> bool:
    return direction.elevation == 0


def _accept_all(direction: Direction) -> bool:
    return True


def _order_divisor(order: int, number_of_responses: int) -> float:
    return order + 1.0


def _responses_divisor(order: int, number_of_responses: int) -> float:
    return float(number_of_responses)


def _weight_2d(encoder: HarmonicEncoder, index: int) -> float:
    return 0.5 if index == 0 else 1.0


def _weight_3d(encoder: HarmonicEncoder, index: int) -> float:
    degree = encoder.harmonic_degree(index)
    weight = 2.0 * degree + 1.0
    if encoder.harmonic_order(index) != 0:
        weight *= 4.0 * math.pi
    return weight


STRATEGIES: Dict[Dimension, DimensionStrategy] = {
    Dimension.HOA_2D: DimensionStrategy(Dimension.HOA_2D, _accept_horizontal, _order_divisor, _weight_2d),
    Dimension.HOA_3D: DimensionStrategy(Dimension.HOA_3D, _accept_all, _responses_divisor, _weight_3d),
}


# =====================================================================================
# Matrix storage
# =====================================================================================

class HarmonicMatrix:
    """
    Accumulation buffer indexed by (time sample, harmonic).

    The storage is row-major: ``flat[index(j, k)]`` is harmonic ``k`` of time
    sample ``j``.
    """

    def __init__(self, responses_size: int, n_harmonics: int):
        self.responses_size = responses_size
        self.n_harmonics = n_harmonics
        self._data = np.zeros((responses_size, n_harmonics))

    def index(self, time_sample: int, harmonic: int) -> int:
        if not (0 <= time_sample < self.responses_size and 0 <= harmonic < self.n_harmonics):
            raise IndexError(f"({time_sample}, {harmonic}) outside a "
                             f"{self.responses_size}x{self.n_harmonics} matrix")
        return time_sample * self.n_harmonics + harmonic

    def column(self, harmonic: int) -> np.ndarray:
        """Coefficients of one harmonic over time."""
        if not 0 <= harmonic < self.n_harmonics:
            raise IndexError(f"Harmonic {harmonic} outside a {self.n_harmonics}-harmonic matrix")
        flat = self.flat
        return np.array([flat[self.index(j, harmonic)] for j in range(self.responses_size)])

    def accumulate(self, block: np.ndarray) -> None:
        """Add a (responses_size, n_harmonics) block of coefficients; the shape guards the layout."""
        if block.shape != self._data.shape:
            raise ValidationError(f"Block of shape {block.shape} does not match matrix {self._data.shape}")
        self._data += block

    @property
    def flat(self) -> Matrix:
        return self._data.reshape(-1)

    def __len__(self) -> int:
        return self._data.size


# =====================================================================================
# Subject
# =====================================================================================

class Subject:
    """
    Aggregates the impulse responses of one subject folder.

    Call ``read`` once to discover the responses and compute the ``left``
    and ``right`` matrices.
    """

    def __init__(self, config: SubjectConfig):
        self.config = config
        self.strategy = STRATEGIES[config.dimension]
        self.encoder = HarmonicEncoder(config.dimension, config.order, config.normalization)
        self.responses: List[Response] = []
        self._responses_size = 0
        self._left = HarmonicMatrix(0, self.number_of_harmonics)
        self._right = HarmonicMatrix(0, self.number_of_harmonics)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def classname(self) -> str:
        return self.config.classname

    @property
    def dimension(self) -> Dimension:
        return self.config.dimension

    @property
    def decomposition_order(self) -> int:
        return self.config.order

    @property
    def number_of_harmonics(self) -> int:
        return number_of_harmonics(self.config.dimension, self.config.order)

    @property
    def number_of_responses(self) -> int:
        return len(self.responses)

    @property
    def responses_size(self) -> int:
        """Sample count of the longest valid response."""
        return self._responses_size

    @property
    def matrices_size(self) -> int:
        return self.responses_size * self.number_of_harmonics

    @property
    def left(self) -> Matrix:
        return self._left.flat

    @property
    def right(self) -> Matrix:
        return self._right.flat

    def column(self, side: str, harmonic: int) -> np.ndarray:
        """Coefficients of one harmonic of the 'left' or 'right' matrix."""
        matrices = {'left': self._left, 'right': self._right}
        if side not in matrices:
            raise ValueError(f"Side must be 'left' or 'right', got {side}")
        return matrices[side].column(harmonic)

    @property
    def directions(self) -> List[Direction]:
        return [response.direction for response in self.responses]

    def read(self) -> None:
        """Discover the valid responses, then project and accumulate them."""
        self.responses = self._discover()
        self._responses_size = max((r.samples_per_channel for r in self.responses), default=0)
        logger.info(f"Subject {self.name} ({self.dimension.label}): {self.number_of_responses} responses "
                    f"of {self.responses_size} samples")
        self._accumulate()

    def candidate_files(self) -> List[str]:
        """WAV files of the subject folder, restricted to ``config.wave_files`` when set."""
        files = list_files(self.config.wave_folder, WAV_EXTENSION)
        if self.config.wave_files:
            wanted = self.config.wave_files
            files = [f for f in files if os.path.basename(f) in wanted
                     or os.path.splitext(os.path.basename(f))[0] in wanted]
        return files

    def _discover(self) -> List[Response]:
        grammar = get_grammar(self.config.database_type)
        responses = []
        for path in self.candidate_files():
            response = Response(path, grammar)
            if not response.valid:
                continue
            if not self.strategy.accepts(response.direction):
                logger.debug(f"Skipping {response.name}: rejected by the {self.dimension.label} filter")
                continue
            if response.read():
                responses.append(response)
        return responses

    def _accumulate(self) -> None:
        size = self.responses_size
        self._left = HarmonicMatrix(size, self.number_of_harmonics)
        self._right = HarmonicMatrix(size, self.number_of_harmonics)

        divisor = self.strategy.pre_scale(self.decomposition_order, self.number_of_responses)
        for response in self.responses:
            self.encoder.set_azimuth(response.azimuth)
            if self.dimension == Dimension.HOA_3D:
                self.encoder.set_elevation(response.elevation)
            weights = self.strategy.weights(self.encoder)

            left = self.encoder.process(response.samples(0, size) / divisor) * weights
            right = self.encoder.process(response.samples(1, size) / divisor) * weights
            self._left.accumulate(left)
            self._right.accumulate(right)
