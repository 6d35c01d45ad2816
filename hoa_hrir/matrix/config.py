"""
Configuration Management Module

This module provides centralized configuration management for the HRIR
matrix creator, including constants, default output settings, and the
per-subject and batch configuration records.
"""

import os
import json
from typing import Dict, Any, List, Set, Iterable
from dataclasses import dataclass, field

from .utils import Dimension, HrirDatabase, format_classname, list_folders
from .math_utils import AmbisonicNormalization
from .exceptions import ConfigurationError


# =====================================================================================
# Constants
# =====================================================================================

# Ambisonic settings
DEFAULT_DECOMPOSITION_ORDER = 5
MAX_SUPPORTED_ORDER = 35

# Output settings
DEFAULT_FILENAME_PREFIX = 'Hoa_Hrir_'
DEFAULT_FILE_EXTENSION = '.hpp'
DEFAULT_OUTPUT_DIRECTORY = './'

# Text prepended to every generated artifact
GENERATED_FILE_HEADER = (
    "// Copyright (c) 2012-2019 CICM - Universite Paris 8 - Labex Arts H2H.\n"
    "// For information on usage and redistribution, and for a DISCLAIMER OF ALL\n"
    "// WARRANTIES, see the file, \"LICENSE.txt,\" in this distribution.\n\n"
    "// This file has been generated by hoa-hrir-matrix\n"
)


# =====================================================================================
# Configuration Classes
# =====================================================================================

@dataclass
class SubjectConfig:
    """Configuration of one subject: where its responses live and how to aggregate and export them"""

    # Required
    order: int
    wave_folder: str
    classname: str = ''
    dimension: Dimension = Dimension.HOA_2D
    database_type: HrirDatabase = HrirDatabase.LISTEN

    # Optional
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    file_extension: str = DEFAULT_FILE_EXTENSION
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    wave_files: Set[str] = field(default_factory=set)
    notes: str = ''
    normalization: AmbisonicNormalization = AmbisonicNormalization.SN3D

    def __post_init__(self):
        """Validate configuration after initialization"""
        if isinstance(self.dimension, str):
            self.dimension = _parse_enum(Dimension, self.dimension, 'dimension')
        if isinstance(self.database_type, str):
            self.database_type = _parse_enum(HrirDatabase, self.database_type, 'database type')
        if isinstance(self.normalization, str):
            try:
                self.normalization = AmbisonicNormalization[self.normalization.upper()]
            except KeyError:
                raise ConfigurationError(f"Unknown normalization: {self.normalization}")

        if not isinstance(self.order, int) or self.order < 0 or self.order > MAX_SUPPORTED_ORDER:
            raise ConfigurationError(f"Decomposition order must be between 0 and {MAX_SUPPORTED_ORDER}")

        if not self.wave_folder:
            raise ConfigurationError("Wave folder is required")

        if not self.classname:
            self.classname = format_classname(os.path.basename(os.path.normpath(self.wave_folder)))
        if not self.classname.isidentifier():
            raise ConfigurationError(f"Class name '{self.classname}' is not a valid identifier")

        self.wave_files = set(self.wave_files)

    @property
    def name(self) -> str:
        """Subject name, the name of its folder."""
        return os.path.basename(os.path.normpath(self.wave_folder))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization"""
        return {
            'order': self.order,
            'wave_folder': self.wave_folder,
            'classname': self.classname,
            'dimension': self.dimension.value,
            'database_type': self.database_type.value,
            'filename_prefix': self.filename_prefix,
            'file_extension': self.file_extension,
            'output_directory': self.output_directory,
            'wave_files': sorted(self.wave_files),
            'notes': self.notes,
            'normalization': self.normalization.name,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SubjectConfig':
        """Create configuration from dictionary"""
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Subject configuration must be an object, "
                                     f"got {type(config_dict).__name__}")
        try:
            return cls(**config_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid subject configuration: {str(e)}")


@dataclass
class CreatorConfig:
    """Complete configuration of a run: one record per (subject, dimension)"""

    subjects: List[SubjectConfig] = field(default_factory=list)

    @classmethod
    def from_root(cls, root: str, order: int,
                  dimensions: Iterable[Dimension] = (Dimension.HOA_2D, Dimension.HOA_3D),
                  database_type: HrirDatabase = HrirDatabase.LISTEN,
                  output_directory: str = DEFAULT_OUTPUT_DIRECTORY,
                  filename_prefix: str = DEFAULT_FILENAME_PREFIX,
                  file_extension: str = DEFAULT_FILE_EXTENSION,
                  notes: str = '') -> 'CreatorConfig':
        """
        Build one subject configuration per subfolder of a database root.

        Args:
            root: Folder containing one subfolder per subject
            order: Decomposition order
            dimensions: Dimensions to produce for each subject
            database_type: Naming grammar of the response files

        Returns:
            Configuration listing every (subject, dimension) pair

        Raises:
            ConfigurationError: If the root folder does not exist
        """
        if not os.path.isdir(root):
            raise ConfigurationError(f"No such folder: {root}")

        subjects = []
        for folder in list_folders(root):
            for dimension in dimensions:
                subjects.append(SubjectConfig(
                    order=order,
                    wave_folder=folder,
                    dimension=dimension,
                    database_type=database_type,
                    output_directory=output_directory,
                    filename_prefix=filename_prefix,
                    file_extension=file_extension,
                    notes=notes,
                ))
        return cls(subjects=subjects)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization"""
        return {'subjects': [subject.to_dict() for subject in self.subjects]}

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'CreatorConfig':
        """Create configuration from dictionary"""
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Creator configuration must be an object, "
                                     f"got {type(config_dict).__name__}")
        subjects = config_dict.get('subjects', [])
        if not isinstance(subjects, list):
            raise ConfigurationError("'subjects' must be a list of subject configurations")
        return cls(subjects=[SubjectConfig.from_dict(subject) for subject in subjects])

    def save(self, file_path: str) -> None:
        """Save configuration to file"""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, file_path: str) -> 'CreatorConfig':
        """Load configuration from file"""
        try:
            with open(file_path, 'r') as f:
                return cls.from_dict(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot load configuration {file_path}: {str(e)}")


def _parse_enum(enum_type, value: str, label: str):
    try:
        return enum_type(value.lower())
    except ValueError:
        choices = ', '.join(member.value for member in enum_type)
        raise ConfigurationError(f"Unknown {label} '{value}'. Use one of: {choices}")
