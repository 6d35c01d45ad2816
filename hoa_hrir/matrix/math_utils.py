"""
Core Mathematical Functions for Circular and Spherical Harmonics

This module provides the harmonic basis evaluator used by the subject
aggregator: harmonic indexing for 2D (circular) and 3D (spherical)
decompositions, associated Legendre polynomials, real spherical harmonics,
and an encoder that projects a signal onto the basis at a fixed direction.

Harmonic ordering:
    2D: index 0 is degree 0; index 2l-1 is (l, -l) and index 2l is (l, l),
        i.e. [1, sin(az), cos(az), sin(2az), cos(2az), ...]
    3D: Ambisonic Channel Number, index = l*(l+1) + m

See Also:
    - subject: For the aggregation that consumes the encoder output
"""

import numpy as np
import math
import functools
from typing import Union
from enum import Enum, auto

from .utils import Dimension
from .exceptions import MathError

# Cache size for factorial memoization
_FACTORIAL_CACHE_SIZE = 64


class AmbisonicNormalization(Enum):
    """
    Defines the normalization convention for 3D spherical harmonics.

    Attributes:
        SN3D: Schmidt semi-normalized, the omnidirectional harmonic is 1
        N3D: Fully normalized, SN3D * sqrt(2l+1)
    """
    SN3D = auto()
    N3D = auto()


@functools.lru_cache(maxsize=_FACTORIAL_CACHE_SIZE)
def factorial(n: int) -> int:
    """
    Compute factorial, optimized with caching for repeated calls.

    Args:
        n: Non-negative integer

    Returns:
        n! (n factorial)

    Raises:
        MathError.DomainError: If n is negative

    Examples:
        >>> factorial(5)
        120
    """
    if n < 0:
        raise MathError.DomainError("Factorial not defined for negative numbers")
    if n <= 1:
        return 1
    return n * factorial(n - 1)


def number_of_harmonics(dimension: Dimension, order: int) -> int:
    """
    Number of harmonics of a decomposition.

    Args:
        dimension: 2D or 3D decomposition
        order: Decomposition order (>= 0)

    Returns:
        2*order+1 for 2D, (order+1)² for 3D
    """
    if order < 0:
        raise MathError.DomainError(f"Decomposition order must be non-negative, got {order}")
    if dimension == Dimension.HOA_2D:
        return 2 * order + 1
    return (order + 1) ** 2


def harmonic_degree(index: int, dimension: Dimension) -> int:
    """Degree l of the harmonic at ``index``."""
    if index < 0:
        raise MathError.DomainError(f"Harmonic index must be non-negative, got {index}")
    if dimension == Dimension.HOA_2D:
        return (index + 1) // 2
    return math.isqrt(index)


def harmonic_order(index: int, dimension: Dimension) -> int:
    """Order component m of the harmonic at ``index`` (signed)."""
    degree = harmonic_degree(index, dimension)
    if dimension == Dimension.HOA_2D:
        if index == 0:
            return 0
        return -degree if index % 2 else degree
    return index - degree * (degree + 1)


def associated_legendre(l: int, m: int, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Compute the associated Legendre function P_l^m(x) without the
    Condon-Shortley phase, as used by ambisonic conventions.

    Args:
        l: Degree (l >= 0)
        m: Order, only |m| is used
        x: Value or array where -1 <= x <= 1

    Returns:
        The associated Legendre function value(s), 0 when |m| > l

    Raises:
        MathError.DomainError: If l < 0 or x lies outside [-1, 1]

    Examples:
        >>> associated_legendre(1, 1, 0.5)
        0.8660254037844386
    """
    if l < 0:
        raise MathError.DomainError(f"Degree l must be non-negative, got {l}")

    m_abs = abs(m)
    if m_abs > l:
        return np.zeros_like(x) if isinstance(x, np.ndarray) else 0.0

    x_array = np.asarray(x, dtype=np.float64)
    if np.any(np.abs(x_array) > 1.0 + 1e-10):
        raise MathError.DomainError("Input x must be in range [-1, 1], got values outside this range")
    x_array = np.clip(x_array, -1.0, 1.0)

    # P_m^m
    pmm = np.ones_like(x_array)
    somx2 = np.sqrt((1.0 - x_array) * (1.0 + x_array))
    fact = 1.0
    for _ in range(m_abs):
        pmm = pmm * fact * somx2
        fact += 2.0

    if l == m_abs:
        return pmm if isinstance(x, np.ndarray) else float(pmm)

    # P_{m+1}^m
    pmmp1 = x_array * (2.0 * m_abs + 1.0) * pmm
    if l == m_abs + 1:
        return pmmp1 if isinstance(x, np.ndarray) else float(pmmp1)

    # (l-m) P_l^m = (2l-1) x P_{l-1}^m - (l+m-1) P_{l-2}^m
    pll = pmmp1
    for ll in range(m_abs + 2, l + 1):
        pll = (x_array * (2.0 * ll - 1.0) * pmmp1 - (ll + m_abs - 1.0) * pmm) / (ll - m_abs)
        pmm = pmmp1
        pmmp1 = pll

    return pll if isinstance(x, np.ndarray) else float(pll)


def real_spherical_harmonic(l: int, m: int, azimuth: float, elevation: float,
                            normalization: AmbisonicNormalization = AmbisonicNormalization.SN3D) -> float:
    """
    Compute the real spherical harmonic of degree l and order m.

    Args:
        l: Degree (l >= 0)
        m: Order (-l <= m <= l); negative orders use sin(|m|·azimuth)
        azimuth: Azimuth in radians
        elevation: Elevation in radians from the horizontal plane
        normalization: Normalization convention

    Returns:
        The value of the real spherical harmonic
    """
    if l < 0:
        raise MathError.DomainError("Degree l must be non-negative")
    if abs(m) > l:
        raise MathError.DomainError("Order m must satisfy -l <= m <= l")

    m_abs = abs(m)
    norm = math.sqrt((1.0 if m == 0 else 2.0) * factorial(l - m_abs) / factorial(l + m_abs))
    if normalization == AmbisonicNormalization.N3D:
        norm *= math.sqrt(2 * l + 1)

    plm = associated_legendre(l, m_abs, math.sin(elevation))

    if m == 0:
        return norm * plm
    elif m > 0:
        return norm * plm * math.cos(m * azimuth)
    else:
        return norm * plm * math.sin(m_abs * azimuth)


def circular_harmonic(index: int, azimuth: float) -> float:
    """Compute the 2D circular harmonic at ``index``: 1, sin(l·az) or cos(l·az)."""
    degree = harmonic_degree(index, Dimension.HOA_2D)
    if degree == 0:
        return 1.0
    if harmonic_order(index, Dimension.HOA_2D) < 0:
        return math.sin(degree * azimuth)
    return math.cos(degree * azimuth)


class HarmonicEncoder:
    """
    Projects signals onto the harmonic basis evaluated at a fixed direction.

    The direction is set with ``set_azimuth`` (and ``set_elevation`` for 3D);
    ``process`` then returns one coefficient per harmonic for every input
    sample.
    """

    def __init__(self, dimension: Dimension, order: int,
                 normalization: AmbisonicNormalization = AmbisonicNormalization.SN3D):
        self.dimension = dimension
        self.order = order
        self.normalization = normalization
        self.n_harmonics = number_of_harmonics(dimension, order)
        self.azimuth = 0.0
        self.elevation = 0.0
        self._basis = np.zeros(self.n_harmonics)
        self._update_basis()

    def set_azimuth(self, azimuth: float) -> None:
        self.azimuth = float(azimuth)
        self._update_basis()

    def set_elevation(self, elevation: float) -> None:
        """Set the elevation; ignored by 2D encoders."""
        self.elevation = float(elevation)
        self._update_basis()

    def harmonic_degree(self, index: int) -> int:
        return harmonic_degree(index, self.dimension)

    def harmonic_order(self, index: int) -> int:
        return harmonic_order(index, self.dimension)

    @property
    def basis(self) -> np.ndarray:
        """Basis values at the current direction, shape (n_harmonics,)."""
        return self._basis.copy()

    def process(self, samples: Union[float, np.ndarray]) -> np.ndarray:
        """
        Encode a scalar or a signal at the current direction.

        Args:
            samples: Scalar or array of samples

        Returns:
            Harmonic coefficients, shape samples.shape + (n_harmonics,)
        """
        return np.multiply.outer(np.asarray(samples, dtype=np.float64), self._basis)

    def _update_basis(self) -> None:
        if self.dimension == Dimension.HOA_2D:
            for k in range(self.n_harmonics):
                self._basis[k] = circular_harmonic(k, self.azimuth)
        else:
            for k in range(self.n_harmonics):
                self._basis[k] = real_spherical_harmonic(
                    harmonic_degree(k, self.dimension), harmonic_order(k, self.dimension),
                    self.azimuth, self.elevation, self.normalization)
