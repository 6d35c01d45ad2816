"""
Filename Grammars for HRIR Databases

HRIR databases encode the measurement direction of each impulse response in
its filename. Each supported database has a grammar class that turns a
filename into a ``Direction``; grammars never raise on malformed names, they
report them as invalid.

Examples:
    >>> ListenGrammar().parse('IRC_1002_C_R0195_T090_P000.wav')
    (Direction(azimuth=1.5707963267948966, elevation=0.0), True)
    >>> SadieGrammar().parse('azi_13,0_ele_-64,8.wav')[1]
    True
"""

import re
import math
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, Type

from .utils import Direction, HrirDatabase, degrees_to_radians, format_name

# Set up logging
logger = logging.getLogger(__name__)

# Leading unsigned integer after a Listen token; names are cut at their first '.'
_LEADING_NUMBER = re.compile(r'\d+')


class FilenameGrammar(ABC):
    """Parses a measurement direction out of a response filename."""

    database: HrirDatabase

    def parse(self, filename: str) -> Tuple[Direction, bool]:
        """
        Parse the direction encoded in a filename.

        Args:
            filename: File name or path; directory and extension are ignored

        Returns:
            (direction, valid); the direction is (0, 0) when invalid
        """
        direction = self.parse_name(format_name(filename))
        if direction is None:
            logger.debug(f"No {self.database.value} direction in filename: {filename}")
            return Direction(), False
        return direction, True

    @abstractmethod
    def parse_name(self, name: str) -> Optional[Direction]:
        """Parse an extension-less name, returning None when it does not match."""


class ListenGrammar(FilenameGrammar):
    """
    IRCAM Listen naming: ``IRC_1002_C_R0195_T180_P060``.

    The first ``_T`` must be immediately followed by the azimuth in degrees,
    and a later ``_P`` by the elevation in degrees. Both are whole numbers:
    the name ends at its first ``.``, so ``_T090.5_P000`` has no elevation.
    """

    database = HrirDatabase.LISTEN

    def parse_name(self, name: str) -> Optional[Direction]:
        azimuth, rest = self._read_token(name, '_T')
        if azimuth is None:
            return None
        elevation, _ = self._read_token(rest, '_P')
        if elevation is None:
            return None
        return Direction(degrees_to_radians(azimuth), degrees_to_radians(elevation))

    @staticmethod
    def _read_token(name: str, token: str) -> Tuple[Optional[float], str]:
        pos = name.find(token)
        if pos == -1:
            return None, name
        match = _LEADING_NUMBER.match(name, pos + len(token))
        if match is None:
            return None, name
        return float(match.group()), name[match.end():]


class SadieGrammar(FilenameGrammar):
    """
    York SADIE naming: ``azi_13,0_ele_-64,8``.

    Exactly four underscore-separated tokens, with commas as decimal separators.
    """

    database = HrirDatabase.SADIE

    def parse_name(self, name: str) -> Optional[Direction]:
        tokens = name.split('_')
        if len(tokens) != 4 or tokens[0] != 'azi' or tokens[2] != 'ele':
            return None
        try:
            azimuth = float(tokens[1].replace(',', '.'))
            elevation = float(tokens[3].replace(',', '.'))
        except ValueError:
            return None
        if not (math.isfinite(azimuth) and math.isfinite(elevation)):
            return None
        return Direction(degrees_to_radians(azimuth), degrees_to_radians(elevation))


_GRAMMARS: Dict[HrirDatabase, Type[FilenameGrammar]] = {
    HrirDatabase.LISTEN: ListenGrammar,
    HrirDatabase.SADIE: SadieGrammar,
}


def get_grammar(database: HrirDatabase) -> FilenameGrammar:
    """Return the grammar instance for a database."""
    return _GRAMMARS[database]()


def parse_direction(filename: str, database: HrirDatabase) -> Tuple[Direction, bool]:
    """Parse the direction of ``filename`` with the grammar of ``database``."""
    return get_grammar(database).parse(filename)
