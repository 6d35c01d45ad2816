"""
HRIR Matrix Creation Module

Drives the whole pipeline: for every configured (subject, dimension) pair,
read and aggregate the subject's responses, then export its matrices.
Subjects are processed one after the other and independently; a failure
while exporting one subject is recorded and the run moves on.
"""

import sys
import logging
from typing import Any, Dict, Iterable, Optional, Sequence

from .config import (CreatorConfig, SubjectConfig, DEFAULT_DECOMPOSITION_ORDER,
                     DEFAULT_FILENAME_PREFIX, DEFAULT_FILE_EXTENSION, DEFAULT_OUTPUT_DIRECTORY)
from .exporter import get_exporter, EXPORTERS
from .subject import Subject
from .utils import Dimension, HrirDatabase
from .exceptions import HrirError

# Set up logging
logger = logging.getLogger(__name__)


def create_subject_matrices(config: SubjectConfig, formats: Iterable[str] = ('cpp',)) -> Dict[str, Any]:
    """
    Aggregate one subject and export its matrices.

    Args:
        config: Subject configuration
        formats: Export format names

    Returns:
        Dictionary with the subject counters and the written files

    Raises:
        ExportError: If an artifact cannot be written
    """
    exporters = [get_exporter(name) for name in formats]

    subject = Subject(config)
    subject.read()

    written = []
    for exporter in exporters:
        written.extend(exporter.write(subject))

    return {
        'name': subject.name,
        'classname': subject.classname,
        'dimension': subject.dimension.label,
        'order': subject.decomposition_order,
        'number_of_harmonics': subject.number_of_harmonics,
        'number_of_responses': subject.number_of_responses,
        'responses_size': subject.responses_size,
        'matrices_size': subject.matrices_size,
        'files': written,
    }


def create_matrices(config: CreatorConfig, formats: Iterable[str] = ('cpp',)) -> Dict[str, Any]:
    """
    Process every subject of a configuration.

    Args:
        config: Creator configuration
        formats: Export format names

    Returns:
        Dictionary with the number of subjects processed, succeeded and failed
    """
    formats = list(formats)
    successful = []
    failed = []

    for subject_config in config.subjects:
        try:
            successful.append(create_subject_matrices(subject_config, formats))
        except (HrirError, OSError) as e:
            logger.error(f"Failed to create {subject_config.classname} "
                         f"({subject_config.dimension.label}): {str(e)}")
            failed.append({
                'name': subject_config.name,
                'dimension': subject_config.dimension.label,
                'error': str(e)
            })

    return {
        'n_subjects': len(config.subjects),
        'n_successful': len(successful),
        'n_failed': len(failed),
        'successful': successful,
        'failed': failed
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Create ambisonic binaural matrices from HRIR databases')

    # Input
    parser.add_argument('root', nargs='?', help='Database folder with one subfolder per subject')
    parser.add_argument('--config', help='JSON creator configuration (replaces the root options)')

    # Aggregation options
    parser.add_argument('--order', type=int, default=DEFAULT_DECOMPOSITION_ORDER, help='Decomposition order')
    parser.add_argument('--dimension', nargs='+', choices=[d.value for d in Dimension],
                        default=[d.value for d in Dimension], help='Dimensions to create')
    parser.add_argument('--database', choices=[d.value for d in HrirDatabase],
                        default=HrirDatabase.LISTEN.value, help='Naming convention of the wave files')

    # Output options
    parser.add_argument('--output', default=DEFAULT_OUTPUT_DIRECTORY, help='Output directory')
    parser.add_argument('--prefix', default=DEFAULT_FILENAME_PREFIX, help='Output filename prefix')
    parser.add_argument('--extension', default=DEFAULT_FILE_EXTENSION, help='Output file extension')
    parser.add_argument('--format', nargs='+', choices=list(EXPORTERS), default=['cpp'], help='Export formats')
    parser.add_argument('--notes', default='', help='Notes written in the generated headers')
    parser.add_argument('--verbose', action='store_true', help='Log skipped files')

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        if args.config:
            config = CreatorConfig.load(args.config)
        elif args.root:
            config = CreatorConfig.from_root(
                args.root, args.order,
                dimensions=[Dimension(d) for d in args.dimension],
                database_type=HrirDatabase(args.database),
                output_directory=args.output,
                filename_prefix=args.prefix,
                file_extension=args.extension,
                notes=args.notes,
            )
        else:
            parser.error('a root folder or --config is required')
    except HrirError as e:
        logger.error(f"Invalid configuration: {str(e)}")
        return 1

    result = create_matrices(config, args.format)
    logger.info(f"Matrix creation completed: {result['n_successful']} successful, "
                f"{result['n_failed']} failed")

    return 1 if result['n_failed'] else 0


if __name__ == "__main__":
    sys.exit(main())
