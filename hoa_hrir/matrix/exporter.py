"""
Matrix Export Module

Serializes the matrices of an aggregated subject. Exporters only format; the
numbers are written with the shortest representation that round-trips at the
requested precision, in time-sample-major, harmonic-minor order.

Formats:
    cpp: one C++ header per (subject, dimension) with float and double arrays
    pd: one text column per harmonic and ear, for Pure Data tables
"""

import os
import logging
import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, List, Type

from .config import GENERATED_FILE_HEADER
from .subject import Subject
from .utils import Dimension
from .exceptions import ExportError

# Set up logging
logger = logging.getLogger(__name__)

# Magnitudes outside this range are written in scientific notation
_POSITIONAL_RANGE = (1e-4, 1e16)

PRECISIONS = ('float', 'double')
SIDES = ('left', 'right')


def format_number(value: float, precision: str = 'double') -> str:
    """
    Format a value as a C++ floating-point literal.

    Args:
        value: Value to format
        precision: 'float' (rounded to 32 bits, 'f' suffix) or 'double'

    Returns:
        Shortest literal that round-trips at that precision; zero is
        written '0.f' or '0.'

    Examples:
        >>> format_number(0.25, 'float')
        '0.25f'
        >>> format_number(1.0)
        '1.'
    """
    if precision not in PRECISIONS:
        raise ValueError(f"Precision must be one of {PRECISIONS}, got {precision}")

    is_float = precision == 'float'
    number = np.float32(value) if is_float else np.float64(value)
    suffix = 'f' if is_float else ''

    if number == 0:
        return '0.' + suffix

    magnitude = abs(float(number))
    if _POSITIONAL_RANGE[0] <= magnitude < _POSITIONAL_RANGE[1]:
        text = np.format_float_positional(number, unique=True, trim='.')
    else:
        text = np.format_float_scientific(number, unique=True, trim='.')
    return text + suffix


class MatrixExporter(ABC):
    """Writes the matrices of a subject to one or more files."""

    format_name: str

    @abstractmethod
    def write(self, subject: Subject) -> List[str]:
        """
        Write the artifacts of a subject.

        Returns:
            Paths of the written files

        Raises:
            ExportError: If a destination cannot be written
        """

    @staticmethod
    def basename(subject: Subject) -> str:
        """``<classname>_<2D|3D>``, the name of the subject's artifacts."""
        return f"{subject.classname}_{subject.dimension.label}"


class CppHeaderExporter(MatrixExporter):
    """Renders a subject as a C++ header declaring a struct of static arrays."""

    format_name = 'cpp'
    indent = '    '

    def filename(self, subject: Subject) -> str:
        config = subject.config
        return os.path.join(config.output_directory,
                            config.filename_prefix + self.basename(subject) + config.file_extension)

    def render(self, subject: Subject) -> str:
        tab = self.indent
        dimension = 'Dimension::Hoa2d' if subject.dimension == Dimension.HOA_2D else 'Dimension::Hoa3d'
        lines = [GENERATED_FILE_HEADER]

        if subject.config.notes:
            lines.append(f"/* Notes:\n{subject.config.notes}\n*/\n")

        lines.append("#pragma once\n")
        lines.append("namespace hoa { namespace hrir\n{")
        lines.append(f"{tab}struct {self.basename(subject)}")
        lines.append(f"{tab}{{")
        lines.append(f"{tab * 2}static const Dimension dimension = {dimension};")
        lines.append(f"{tab * 2}static const size_t order = {subject.decomposition_order};")
        lines.append(f"{tab * 2}static const size_t number_of_harmonics = {subject.number_of_harmonics};")
        lines.append(f"{tab * 2}static const size_t responses_size = {subject.responses_size};")
        lines.append(f"{tab * 2}static const size_t matrices_size = {subject.matrices_size};")
        lines.append("")

        for precision in PRECISIONS:
            for side in SIDES:
                lines.extend(self._render_data(precision, side, getattr(subject, side)))

        lines.append(f"{tab}}};\n")
        lines.append("}}\n")
        return "\n".join(lines)

    def _render_data(self, precision: str, side: str, data: np.ndarray) -> List[str]:
        tab = self.indent
        values = ", ".join(format_number(value, precision) for value in data)
        return [
            f"{tab * 2}static {precision} const* get_{precision}_{side}()",
            f"{tab * 2}{{",
            f"{tab * 3}static const {precision} data[] = {{{values}}};",
            "",
            f"{tab * 3}return data;",
            f"{tab * 2}}}",
            "",
        ]

    def write(self, subject: Subject) -> List[str]:
        filename = self.filename(subject)
        try:
            os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
            with open(filename, 'w') as f:
                f.write(self.render(subject))
        except OSError as e:
            raise ExportError(f"Can't write {filename}: {str(e)}")

        logger.info(f"{self.basename(subject)} response written to {filename}")
        return [filename]


class PdTextExporter(MatrixExporter):
    """
    Writes one column per harmonic and ear, one double per line, in the folder
    ``<output_directory>/<classname>_<2D|3D>``: ``ir<index>l.txt`` and
    ``ir<index>r.txt``.
    """

    format_name = 'pd'

    def folder(self, subject: Subject) -> str:
        return os.path.join(subject.config.output_directory, self.basename(subject))

    def render_column(self, subject: Subject, side: str, harmonic: int) -> str:
        return "".join(format_number(value, 'double') + "\n" for value in subject.column(side, harmonic))

    def write(self, subject: Subject) -> List[str]:
        folder = self.folder(subject)
        written = []
        try:
            os.makedirs(folder, exist_ok=True)
            for harmonic in range(subject.number_of_harmonics):
                for side in SIDES:
                    filename = os.path.join(folder, f"ir{harmonic}{side[0]}.txt")
                    with open(filename, 'w') as f:
                        f.write(self.render_column(subject, side, harmonic))
                    written.append(filename)
        except OSError as e:
            raise ExportError(f"Can't write PD tables to {folder}: {str(e)}")

        logger.info(f"{self.basename(subject)} written as {len(written)} PD tables in {folder}")
        return written


EXPORTERS: Dict[str, Type[MatrixExporter]] = {
    CppHeaderExporter.format_name: CppHeaderExporter,
    PdTextExporter.format_name: PdTextExporter,
}


def get_exporter(format_name: str) -> MatrixExporter:
    """Return an exporter instance for a format name ('cpp' or 'pd')."""
    try:
        return EXPORTERS[format_name]()
    except KeyError:
        raise ExportError(f"Unknown export format '{format_name}'. Use one of: {', '.join(EXPORTERS)}")
