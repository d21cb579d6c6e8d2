"""
CODATA 2019 constants table.

Every constant is available as a module attribute under its name and under
its symbol, e.g. ``SpeedOfLightInVacuum`` and ``c_0`` are the same identity.

The Newtonian constant of gravitation is published as ``G``. Tables that also
carry Sanchez's gravitational constant name it ``Gg`` instead; this one does not.

Exports:
    - CODATA2019: The ConstantRegistry holding the table.
    - CONSTANTS_DICT: Dictionary mapping constant names to identities.
    - All constant names and symbols available as module attributes.
"""

from typing import Dict

import sympy as sp

from physconst.core.constant import Constant
from physconst.core.registry import ConstantRegistry

CODATA2019 = ConstantRegistry("CODATA2019")

_REFERENCE = "CODATA 2019"

# --- Literal constants ---
#   name, symbol, description, fixed value, exact value, unit,
#   fixed uncertainty, exact uncertainty

CODATA2019.define(
    "FineStructureConstant", "α", "Fine-structure constant",
    7.2973525664e-3, "7.2973525664e-3", "",
    1.7e-12, "1.7e-12", _REFERENCE,
)
CODATA2019.define(
    "BohrRadius", "a_0", "Bohr radius",
    0.52917721067e-10, "0.52917721067e-10", "m",
    1.2e-20, "1.2e-20", _REFERENCE,
)
CODATA2019.define(
    "StandardAtmosphere", "atm", "Standard atmosphere",
    101325.0, 101325, "Pa",
    0.0, 0, _REFERENCE,
)
CODATA2019.define(
    "WienWavelengthDisplacementLawConstant", "b", "Wien wavelength displacement law constant",
    2.8977729e-3, "2.8977729e-3", "m * K",
    1.7e-9, "1.7e-9", _REFERENCE,
)
CODATA2019.define(
    "SpeedOfLightInVacuum", "c_0", "Speed of light in vacuum",
    299792458.0, 299792458, "m / s",
    0.0, 0, _REFERENCE,
)
# Rounded from 4π·10⁻⁷ at definition time
CODATA2019.define(
    "MagneticConstant", "μ_0", "Magnetic constant",
    None, 4 * sp.pi / 10**7, "N / A**2",
    0.0, 0, _REFERENCE,
)
CODATA2019.define(
    "ElementaryCharge", "e", "Elementary charge",
    1.6021766208e-19, "1.6021766208e-19", "C",
    9.8e-28, "9.8e-28", _REFERENCE,
)
CODATA2019.define(
    "NewtonianConstantOfGravitation", "G", "Newtonian constant of gravitation",
    6.67408e-11, "6.67408e-11", "m**3 / (kg * s**2)",
    3.1e-15, "3.1e-15", _REFERENCE,
)
CODATA2019.define(
    "StandardAccelerationOfGravitation", "g_n", "Standard acceleration of gravitation",
    9.80665, "9.80665", "m / s**2",
    0.0, 0, _REFERENCE,
)
CODATA2019.define(
    "HyperFineGroundStateFreqCs", "ΔνCs", "Ground state hyperfine frequency of cesium-133",
    9192631770.0, 9192631770, "Hz",
    0.0, 0, _REFERENCE,
)
CODATA2019.define(
    "ElectronMass", "m_e", "Electron mass at rest",
    9.10938356e-31, "9.10938356e-31", "kg",
    1.1e-38, "1.1e-38", _REFERENCE,
)
CODATA2019.define(
    "ProtonMass", "m_p", "Proton mass",
    1.672621898e-27, "1.672621898e-27", "kg",
    2.1e-35, "2.1e-35", _REFERENCE,
)
CODATA2019.define(
    "NeutronMass", "m_n", "Neutron mass",
    1.674927471e-27, "1.674927471e-27", "kg",
    2.1e-35, "2.1e-35", _REFERENCE,
)
CODATA2019.define(
    "AtomicMassConstant", "m_u", "Atomic mass constant",
    1.660539040e-27, "1.660539040e-27", "kg",
    2.0e-35, "2.0e-35", _REFERENCE,
)
CODATA2019.define(
    "PlanckConstant", "h", "Planck constant",
    6.626070040e-34, "6.626070040e-34", "J * s",
    8.1e-42, "8.1e-42", _REFERENCE,
)
CODATA2019.define(
    "BoltzmannConstant", "k_B", "Boltzmann constant",
    1.38064852e-23, "1.38064852e-23", "J / K",
    7.9e-30, "7.9e-30", _REFERENCE,
)
CODATA2019.define(
    "BohrMagneton", "μ_B", "Bohr magneton",
    9.274009994e-24, "9.274009994e-24", "J / T",
    5.7e-32, "5.7e-32", _REFERENCE,
)
CODATA2019.define(
    "AvogadroConstant", "N_A", "Avogadro constant",
    6.022140857e23, 602214085700000000000000, "1 / mol",
    7.4e15, 7400000000000000, _REFERENCE,
)
CODATA2019.define(
    "MolarGasConstant", "R", "Molar gas constant",
    8.3144598, "8.3144598", "J / (mol * K)",
    4.8e-6, "4.8e-6", _REFERENCE,
)
CODATA2019.define(
    "RydbergConstant", "R_inf", "Rydberg constant",
    10973731.568508, "10973731.568508", "1 / m",
    6.5e-5, "6.5e-5", _REFERENCE,
)
CODATA2019.define(
    "StefanBoltzmannConstant", "σ", "Stefan-Boltzmann constant",
    5.670367e-8, "5.670367e-8", "W / (m**2 * K**4)",
    1.3e-13, "1.3e-13", _REFERENCE,
)
CODATA2019.define(
    "ThomsonCrossSection", "σ_e", "Thomson cross section",
    0.66524587158e-28, "0.66524587158e-28", "m**2",
    9.1e-38, "9.1e-38", _REFERENCE,
)

# --- Derived constants ---

_h = CODATA2019["PlanckConstant"].sympy_symbol
_mu_0 = CODATA2019["MagneticConstant"].sympy_symbol
_c_0 = CODATA2019["SpeedOfLightInVacuum"].sympy_symbol

CODATA2019.define_derived(
    "PlanckConstantOver2pi", "ħ", "Planck constant over 2pi",
    _h / (2 * sp.pi), "J * s", _REFERENCE,
)
CODATA2019.define_derived(
    "ElectricConstant", "ε_0", "Electric constant (vacuum permittivity)",
    1 / (_mu_0 * _c_0**2), "F / m", _REFERENCE,
)
CODATA2019.define_derived(
    "CharacteristicImpedanceOfVacuum", "Z_0", "Characteristic impedance of vacuum",
    _mu_0 * _c_0, "ohm", _REFERENCE,
)

# --- Generate Exports ---

CONSTANTS_DICT: Dict[str, Constant] = {c.name: c for c in CODATA2019}

# Export by constant name and by symbol
for _const in CODATA2019:
    globals()[_const.name] = _const
    globals()[_const.symbol] = _const

__all__ = ["CODATA2019", "CONSTANTS_DICT"]
__all__.extend(CODATA2019.names())
__all__.extend(CODATA2019.aliases())
