import numpy as np
import pytest

from corrofem.electro_surface import ElectroSurface
from corrofem.surface_output import surface_overpotential, surface_reaction_current


def _inputs(charge_conservation=False, chem_pot=False):
    model = {
        "AreaGroups_C": ["Pit", "Bar"],
        "AreaGroups_E": ["Pit", "Bar"],
        "SurfaceReactions": [["Cathode"], ["Anode"]],
    }
    if charge_conservation:
        model["ChargeConservation"] = True
    else:
        model["E_m"] = 0.2
    return {
        "Models": {"Surface": model},
        "properties": {
            "Species": {"Types": ["H", "OH"], "UseChemPotentials": chem_pot},
            "SurfaceReactions": {
                "Reactions": ["HER"],
                "HER": {
                    "Type": "Electrochemical",
                    "i0": [1.0e-2, 0.0],
                    "alpha": 0.5,
                    "E_eq": 0.0,
                    "electrons_In": 2,
                    "Species_In": ["H"],
                    "n_In": [2],
                    "Species_Out": [],
                    "n_Out": [],
                    "C_ref": 1.0e3,
                    "Surface": "Cathode",
                },
            },
        },
    }


def _surface(**kwargs):
    return ElectroSurface.from_inputs("Surface", _inputs(**kwargs))


def test_overpotential_is_metal_minus_electrolyte():
    surface = _surface()
    e = np.array([0.1, -0.3])
    eta = surface_overpotential(surface, np.eye(2), e)
    assert np.allclose(eta + e, surface.e_m)


def test_overpotential_interpolates_with_export_shapes():
    surface = _surface()
    e = np.array([0.1, -0.3])
    eta = surface_overpotential(surface, [[0.5, 0.5]], e)
    nodal = surface_overpotential(surface, np.eye(2), e)
    assert eta.shape == (1,)
    assert eta[0] == pytest.approx(nodal.mean())


def test_overpotential_uses_given_metal_potential_with_charge_conservation():
    surface = _surface(charge_conservation=True)
    e = np.array([0.0, 0.25])
    eta = surface_overpotential(surface, np.eye(2), e, e_metal=0.5)
    assert np.allclose(eta + e, 0.5)


def test_overpotential_requires_metal_potential_with_charge_conservation():
    surface = _surface(charge_conservation=True)
    with pytest.raises(ValueError):
        surface_overpotential(surface, np.eye(2), [0.0, 0.0])


def test_overpotential_rejects_mismatched_shapes():
    with pytest.raises(ValueError):
        surface_overpotential(_surface(), np.eye(3), [0.0, 0.0])


def test_reaction_current_matches_reaction_rates_at_nodes():
    surface = _surface()
    reaction = surface.reactions[0]
    c = np.array([[100.0, 50.0], [1.0, 2.0]])
    e = np.array([0.0, 0.1])
    currents = surface_reaction_current(surface, "HER", 0, np.eye(2), c, e)
    for n in range(2):
        expected = reaction.rates("Cathode", c[:, n], e[n], surface.e_m).current
        assert currents[n] == pytest.approx(expected)
    assert np.all(currents != 0.0)


def test_reaction_current_zero_on_area_without_its_surface():
    surface = _surface()
    c = np.array([[100.0, 50.0], [1.0, 2.0]])
    currents = surface_reaction_current(surface, "HER", 1, np.eye(2), c, [0.0, 0.0])
    assert np.array_equal(currents, np.zeros(2))


def test_reaction_current_uses_exponential_of_chemical_potentials():
    chem = _surface(chem_pot=True)
    plain = _surface()
    c_log = np.log(np.array([[100.0, 50.0], [1.0, 2.0]]))
    e = np.array([0.0, 0.1])
    from_log = surface_reaction_current(chem, "HER", 0, np.eye(2), c_log, e)
    direct = surface_reaction_current(plain, "HER", 0, np.eye(2), np.exp(c_log), e)
    assert np.allclose(from_log, direct)


def test_reaction_current_unknown_reaction():
    with pytest.raises(KeyError):
        surface_reaction_current(_surface(), "OER", 0, np.eye(2), np.ones((2, 2)), [0.0, 0.0])


def test_reaction_current_area_out_of_range():
    with pytest.raises(IndexError):
        surface_reaction_current(_surface(), "HER", 2, np.eye(2), np.ones((2, 2)), [0.0, 0.0])


def test_reaction_current_rejects_bad_concentration_shape():
    with pytest.raises(ValueError):
        surface_reaction_current(_surface(), "HER", 0, np.eye(2), np.ones((3, 2)), [0.0, 0.0])