"""
HOA HRIR Matrix Creator

Builds ambisonic binaural encoding matrices from per-subject directories of
head-related impulse responses.
"""

from .utils import Direction, Dimension, HrirDatabase
from .config import SubjectConfig, CreatorConfig
from .naming import ListenGrammar, SadieGrammar, get_grammar, parse_direction
from .response import Response
from .math_utils import HarmonicEncoder, AmbisonicNormalization, number_of_harmonics
from .subject import Subject
from .exporter import CppHeaderExporter, PdTextExporter, format_number
from .creator import create_subject_matrices, create_matrices, main

__version__ = '0.1.0'
