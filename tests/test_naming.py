"""
Unit tests for the naming module.

These tests verify that directions are recovered from Listen and SADIE
filenames and that malformed names are reported as invalid.
"""

import math
import pytest

from hoa_hrir.matrix.naming import ListenGrammar, SadieGrammar, get_grammar, parse_direction
from hoa_hrir.matrix.utils import Direction, HrirDatabase


def radians(degrees):
    return degrees / 360.0 * 2.0 * math.pi


class TestListenGrammar:
    """Tests for IRCAM Listen filenames."""

    @pytest.mark.parametrize("azimuth, elevation", [
        (0, 0), (15, 0), (90, 0), (180, 60), (345, 315), (270, 45),
    ])
    def test_parse_known_directions(self, azimuth, elevation):
        """Test that azimuth and elevation are recovered in radians."""
        name = f"IRC_1002_C_R0195_T{azimuth:03d}_P{elevation:03d}.wav"
        direction, valid = ListenGrammar().parse(name)
        assert valid
        assert direction.azimuth == pytest.approx(radians(azimuth))
        assert direction.elevation == pytest.approx(radians(elevation))

    def test_horizontal_elevation_is_exactly_zero(self):
        """Test that P000 parses to an elevation equal to 0."""
        direction, valid = ListenGrammar().parse("IRC_1002_C_R0195_T030_P000.wav")
        assert valid
        assert direction.elevation == 0

    def test_path_is_ignored(self):
        """Test that directories in the path do not affect parsing."""
        direction, valid = ListenGrammar().parse("/data/IRC_1002/IRC_1002_C_R0195_T090_P000.wav")
        assert valid
        assert direction.azimuth == pytest.approx(math.pi / 2)

    @pytest.mark.parametrize("name", [
        "IRC_1002_C_R0195_T090.wav",       # missing _P
        "IRC_1002_C_R0195_P000.wav",       # missing _T
        "IRC_1002_C_R0195_TX90_P000.wav",  # no digit after _T
        "IRC_1002_C_R0195_T090_PX00.wav",  # no digit after _P
        "IRC_1002_C_R0195_T090.5_P000.wav",  # name ends at the first dot
        "IRC_1002_C_R0195_P000_T090.wav",  # wrong token order
        "noise.wav",
        "",
    ])
    def test_malformed_names_are_invalid(self, name):
        """Test that malformed names are invalid and do not raise."""
        direction, valid = ListenGrammar().parse(name)
        assert not valid
        assert direction == Direction()


class TestSadieGrammar:
    """Tests for York SADIE filenames."""

    @pytest.mark.parametrize("azimuth, elevation, name", [
        (13.0, -64.8, "azi_13,0_ele_-64,8.wav"),
        (0.0, 0.0, "azi_0,0_ele_0,0.wav"),
        (247.5, 30.0, "azi_247,5_ele_30,0.wav"),
        (90.0, 90.0, "azi_90_ele_90.wav"),
    ])
    def test_parse_known_directions(self, azimuth, elevation, name):
        """Test that comma decimals are converted and parsed."""
        direction, valid = SadieGrammar().parse(name)
        assert valid
        assert direction.azimuth == pytest.approx(radians(azimuth))
        assert direction.elevation == pytest.approx(radians(elevation))

    @pytest.mark.parametrize("name", [
        "azi_13,0_ele.wav",              # too few tokens
        "azi_13,0_ele_-64,8_x.wav",      # too many tokens
        "az_13,0_ele_-64,8.wav",         # wrong first keyword
        "azi_13,0_elev_-64,8.wav",       # wrong second keyword
        "azi_abc_ele_-64,8.wav",         # not a number
        "azi_1,2,3_ele_0.wav",           # two separators
        "azi_inf_ele_0.wav",             # not finite
    ])
    def test_malformed_names_are_invalid(self, name):
        """Test that wrong token shapes are invalid and do not raise."""
        _, valid = SadieGrammar().parse(name)
        assert not valid


class TestGrammarLookup:
    """Tests for grammar selection by database."""

    def test_get_grammar(self):
        """Test that each database maps to its grammar."""
        assert isinstance(get_grammar(HrirDatabase.LISTEN), ListenGrammar)
        assert isinstance(get_grammar(HrirDatabase.SADIE), SadieGrammar)

    def test_parse_direction_uses_database_grammar(self):
        """Test that a Listen name is not a valid SADIE name and vice versa."""
        assert parse_direction("IRC_1002_C_R0195_T090_P000.wav", HrirDatabase.LISTEN)[1]
        assert not parse_direction("IRC_1002_C_R0195_T090_P000.wav", HrirDatabase.SADIE)[1]
        assert parse_direction("azi_90,0_ele_0,0.wav", HrirDatabase.SADIE)[1]
        assert not parse_direction("azi_90,0_ele_0,0.wav", HrirDatabase.LISTEN)[1]
