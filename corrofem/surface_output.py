"""Nodal output fields of the metal-surface model: overpotential and reaction currents."""

from __future__ import annotations

import numpy as np

from .electro_surface import ElectroSurface

__all__ = ["surface_overpotential", "surface_reaction_current"]


def _metal_potential(surface: ElectroSurface, e_metal) -> float:
    if surface.charge_conservation:
        if e_metal is None:
            raise ValueError("Metal potential is required with charge conservation")
        return float(e_metal)
    return float(surface.e_m)


def _export_shapes(n_export, n_nodes: int) -> np.ndarray:
    shapes = np.asarray(n_export, dtype=float)
    if shapes.ndim != 2 or shapes.shape[1] != n_nodes:
        raise ValueError(f"Export shape values must have shape (points, {n_nodes})")
    return shapes


def surface_overpotential(surface, n_export, e, e_metal=None):
    """Overpotential (metal minus electrolyte potential) at each export point of one element.

    ``n_export`` holds the shape values at the export points (points, nodes)
    and ``e`` the nodal electrolyte potentials.
    """
    e = np.asarray(e, dtype=float)
    if e.ndim != 1:
        raise ValueError("Potentials must be one-dimensional")
    shapes = _export_shapes(n_export, e.shape[0])
    em = _metal_potential(surface, e_metal)
    return em - shapes @ e


def surface_reaction_current(surface, reaction_name, area, n_export, c, e, e_metal=None):
    """Current density of one reaction at each export point of an element of ``area``.

    The current is summed over all surface types present on the area.
    ``c`` holds nodal concentration degrees of freedom (species, nodes).
    """
    reaction = next((r for r in surface.reactions if r.name == reaction_name), None)
    if reaction is None:
        raise KeyError(f"Surface reaction {reaction_name} is not defined")
    if not 0 <= area < len(surface.interface_reaction_types):
        raise IndexError(f"Area {area} out of range")

    c = np.asarray(c, dtype=float)
    e = np.asarray(e, dtype=float)
    if e.ndim != 1:
        raise ValueError("Potentials must be one-dimensional")
    n_species = len(surface.species)
    if c.shape != (n_species, e.shape[0]):
        raise ValueError(f"Expected concentrations of shape {(n_species, e.shape[0])}")
    shapes = _export_shapes(n_export, e.shape[0])
    em = _metal_potential(surface, e_metal)
    surface_types = surface.interface_reaction_types[area]

    currents = np.zeros(shapes.shape[0])
    for point, shape in enumerate(shapes):
        e_pot = float(shape @ e)
        c_point = c @ shape
        if surface.chem_pot_based:
            c_point = np.exp(c_point)
        currents[point] = sum(
            reaction.rates(surface_type, c_point, e_pot, em).current
            for surface_type in surface_types
        )
    return currents