"""
Unit tests for the creator module.

These tests verify the batch driver and the command-line entry point.
"""

import os
import pytest

from hoa_hrir.matrix.creator import create_subject_matrices, create_matrices, main
from hoa_hrir.matrix.config import CreatorConfig
from hoa_hrir.matrix.utils import Dimension


class TestCreateSubjectMatrices:
    """Tests for single-subject creation."""

    def test_result(self, listen_subject, make_config):
        """Test the returned counters and written files."""
        result = create_subject_matrices(make_config(listen_subject, order=1), ['cpp', 'pd'])
        assert result['name'] == 'IRC_1002'
        assert result['dimension'] == '2D'
        assert result['number_of_harmonics'] == 3
        assert result['number_of_responses'] == 3
        assert result['responses_size'] == 4
        assert result['matrices_size'] == 12
        assert len(result['files']) == 1 + 2 * 3
        assert all(os.path.exists(path) for path in result['files'])


class TestCreateMatrices:
    """Tests for batch creation."""

    def test_failure_does_not_stop_other_subjects(self, listen_subject, make_config, tmp_path):
        """Test that an export failure is recorded and the next subject still runs."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('')
        config = CreatorConfig(subjects=[
            make_config(listen_subject, output_directory=str(blocker / 'out')),
            make_config(listen_subject, dimension=Dimension.HOA_3D),
        ])
        result = create_matrices(config)
        assert result['n_subjects'] == 2
        assert result['n_failed'] == 1
        assert result['n_successful'] == 1
        assert result['failed'][0]['dimension'] == '2D'
        assert result['successful'][0]['dimension'] == '3D'

    def test_truncated_file_does_not_stop_the_run(self, listen_subject, make_config, listen_name):
        """Test that a truncated WAV file is skipped and every subject still succeeds."""
        with open(os.path.join(listen_subject, listen_name(45, 0)), 'wb') as f:
            f.write(b'RIFF\x24')
        config = CreatorConfig(subjects=[
            make_config(listen_subject),
            make_config(listen_subject, dimension=Dimension.HOA_3D),
        ])
        result = create_matrices(config)
        assert result['n_successful'] == 2
        assert all(s['number_of_responses'] == 3 for s in result['successful'])

    def test_empty_subject_succeeds(self, tmp_path, make_config):
        """Test that a subject without responses still exports."""
        folder = tmp_path / 'Empty'
        folder.mkdir()
        result = create_matrices(CreatorConfig(subjects=[make_config(str(folder))]))
        assert result['n_successful'] == 1
        assert result['successful'][0]['matrices_size'] == 0


class TestMain:
    """Tests for the command-line entry point."""

    def test_root(self, listen_subject, tmp_path):
        """Test creating both dimensions for every subject of a root folder."""
        output = tmp_path / 'headers'
        status = main([str(tmp_path), '--order', '2', '--output', str(output)])
        assert status == 0
        assert sorted(os.listdir(output)) == ['Hoa_Hrir_Irc1002_2D.hpp', 'Hoa_Hrir_Irc1002_3D.hpp']

    def test_config_file(self, listen_subject, make_config, tmp_path):
        """Test creating from a JSON configuration."""
        path = str(tmp_path / 'config.json')
        CreatorConfig(subjects=[make_config(listen_subject, classname='Listen1002')]).save(path)
        assert main(['--config', path]) == 0
        assert os.path.exists(tmp_path / 'results' / 'Hoa_Hrir_Listen1002_2D.hpp')

    def test_missing_root(self, tmp_path):
        """Test that a missing root folder fails."""
        assert main([str(tmp_path / 'missing')]) == 1

    def test_no_input(self):
        """Test that running without root or configuration is a usage error."""
        with pytest.raises(SystemExit):
            main([])

    def test_config_file_not_an_object(self, tmp_path):
        """Test that a JSON configuration that is not an object fails cleanly."""
        path = tmp_path / 'config.json'
        path.write_text('[1, 2]')
        assert main(['--config', str(path)]) == 1
