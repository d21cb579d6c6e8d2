import math
import pickle

import pytest

# Target the CODATA 2019 table
from physconst import codata2019
from physconst.codata2019 import CODATA2019, CONSTANTS_DICT
from physconst.core.config import MIN_WORKING_BITS
from physconst.core.display import as_dict, describe
from physconst.core.enums import Precision
from physconst.core.precision import context, get_working_precision, is_arbitrary, to_fixed, working_precision
from physconst.core.registry import measurement, value


def test_constants_registry_is_not_empty():
    """Sanity check that the registry exists and has entries."""
    assert CODATA2019 is not None
    assert len(CODATA2019) > 0


def test_constants_dict_no_duplicates():
    """Ensure there are no duplicate names and dict is consistent with the registry."""
    names = CODATA2019.names()
    assert len(names) == len(set(names)), "Duplicate constant names found"
    assert set(CONSTANTS_DICT.keys()) == set(names)


def test_every_constant_has_its_own_type():
    types = {type(c) for c in CODATA2019}
    assert len(types) == len(CODATA2019)
    assert all(type(c).__name__ == c.name for c in CODATA2019)


def test_exported_by_name_and_symbol():
    assert codata2019.c_0 is codata2019.SpeedOfLightInVacuum
    assert codata2019.ħ is codata2019.PlanckConstantOver2pi
    assert CODATA2019["μ_0"] is CODATA2019["MagneticConstant"]
    assert "c_0" in codata2019.__all__


@pytest.mark.parametrize("name", CODATA2019.names())
def test_fixed_and_arbitrary_values_agree(name):
    """The float value of a literal constant is its exact value rounded to binary64."""
    c = CODATA2019[name]
    fixed = value(c).magnitude
    exact = value(c, Precision.ARBITRARY).magnitude
    assert isinstance(fixed, float)
    assert is_arbitrary(exact)
    assert fixed == to_fixed(exact)


@pytest.mark.parametrize("name", CODATA2019.names())
def test_values_agree_at_every_working_precision(name):
    """Rounding the arbitrary value to binary64 gives the fixed value at any accepted width."""
    c = CODATA2019[name]
    fixed = value(c).magnitude
    for bits in range(MIN_WORKING_BITS, 401):
        with working_precision(bits):
            assert to_fixed(value(c, Precision.ARBITRARY).magnitude) == fixed, bits


def test_newtonian_constant_symbol():
    assert codata2019.G is codata2019.NewtonianConstantOfGravitation
    assert "Gg" not in CODATA2019


@pytest.mark.parametrize("name", CODATA2019.names())
def test_arbitrary_measurement_matches_value(name):
    c = CODATA2019[name]
    assert measurement(c, Precision.ARBITRARY).magnitude.nominal_value == value(c, Precision.ARBITRARY).magnitude


def test_speed_of_light_at_768_bits():
    """Raising the working precision changes the width, not the value."""
    before = get_working_precision()
    with working_precision(768):
        v = value(codata2019.c_0, Precision.ARBITRARY).magnitude
        assert context().prec == 768
        assert to_fixed(v) == value(codata2019.c_0).magnitude == 299792458.0
    assert get_working_precision() == before


def test_magnetic_constant_is_rounded_from_4pi():
    with working_precision(256):
        exact = value(codata2019.μ_0, Precision.ARBITRARY).magnitude
        assert exact == 4 * (+context().pi) / 10**7
    assert value(codata2019.μ_0).magnitude == to_fixed(exact)
    assert value(codata2019.μ_0).magnitude == pytest.approx(4e-7 * math.pi, rel=1e-15)


def test_hbar_is_h_over_2pi():
    h, hbar = codata2019.h, codata2019.ħ
    assert value(hbar).magnitude == value(h).magnitude / (2 * math.pi)
    assert value(hbar).units == value(h).units
    expected = value(h, Precision.ARBITRARY).magnitude / (2 * (+context().pi))
    assert value(hbar, Precision.ARBITRARY).magnitude == expected


def test_hbar_uncertainty_follows_h():
    h, hbar = codata2019.h, codata2019.ħ
    assert hbar.uncertainty().magnitude == pytest.approx(8.1e-42 / (2 * math.pi), rel=1e-12)
    assert measurement(hbar).magnitude.sources == measurement(h).magnitude.sources

    ratio = measurement(hbar) / (measurement(h) / (2 * math.pi))
    assert ratio.magnitude.nominal_value == 1.0
    assert ratio.magnitude.std_dev == 0


def test_electric_constant_relation():
    """ε_0 = 1 / (μ_0 c_0²), and it is exact because both inputs are."""
    mu_0, c_0, eps_0 = codata2019.μ_0, codata2019.c_0, codata2019.ε_0
    expected = 1 / (value(mu_0).magnitude * value(c_0).magnitude ** 2)
    assert value(eps_0).magnitude == pytest.approx(expected, rel=1e-15)
    assert value(eps_0).magnitude == pytest.approx(8.854187817620389e-12, rel=1e-15)
    assert eps_0.is_exact
    assert measurement(eps_0).magnitude.std_dev == 0


def test_is_exact_flags():
    assert codata2019.c_0.is_exact
    assert codata2019.atm.is_exact
    assert not codata2019.h.is_exact
    assert not codata2019.ħ.is_exact


def test_relative_uncertainty():
    assert codata2019.h.relative_uncertainty() == pytest.approx(8.1e-42 / 6.626070040e-34)
    assert codata2019.c_0.relative_uncertainty() == 0


def test_describe_exact_constant():
    text = describe(codata2019.c_0)
    assert text.splitlines()[0] == "Speed of light in vacuum (c_0)"
    assert "299792458.0" in text
    assert "Standard uncertainty          = (exact)" in text
    assert "Reference                     = CODATA 2019" in text


def test_describe_example_matches_output():
    example = [line.strip() for line in describe.__doc__.splitlines() if line.strip()][-5:]
    rendered = describe(codata2019.c_0).splitlines()
    assert example[0] == rendered[0]
    assert example[-1] == rendered[-1] == "Reference                     = CODATA 2019"


def test_str_of_uncertain_constant():
    text = str(codata2019.h)
    assert "Planck constant (h)" in text
    assert "8.1e-42" in text
    assert "Relative standard uncertainty = 1.2e-08" in text


def test_as_dict():
    data = as_dict(codata2019.ħ)
    assert data["name"] == "PlanckConstantOver2pi"
    assert data["derived"] is True
    assert data["exact"] is False


def test_pickle_preserves_identity():
    assert pickle.loads(pickle.dumps(codata2019.c_0)) is codata2019.c_0


def test_repr():
    assert repr(codata2019.c_0) == "<SpeedOfLightInVacuum (c_0)>"
