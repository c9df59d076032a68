"""Reactions on the metal surface, with optional current conservation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar

import numpy as np

from .inputs import InputError, InputTree
from .reactions import SurfaceReaction

__all__ = ["SurfaceElementSystem", "ElectroSurface"]

_MIN_CHEM_POT_SLOPE = 1.0e-4
_EM_DAMPING = 1.0e-8


@dataclass(eq=False)
class SurfaceElementSystem:
    """Element residuals and tangent blocks of a surface element.

    ``f_c`` (species, nodes) is the concentration residual, ``k_cc[i, j]`` holds
    dF_C[i]/dC[j], ``k_ce[i]`` dF_C[i]/dE and ``k_cem[i]`` dF_C[i]/dEm.
    ``f_em`` is the scaled current-conservation residual with derivatives
    ``k_emem`` (w.r.t. Em), ``k_eme`` (w.r.t. E) and ``k_emc`` (w.r.t. C).
    The metal-potential entries are zero without charge conservation.
    """

    f_c: np.ndarray
    k_cc: np.ndarray
    k_ce: np.ndarray
    k_cem: np.ndarray
    f_em: float
    k_emem: float
    k_eme: np.ndarray
    k_emc: np.ndarray


@dataclass(eq=False)
class ElectroSurface:
    """Surface reactions on groups of boundary elements.

    Each area lists which surface types (e.g. "Cathode", "Anode") are present
    on it; every surface reaction is evaluated for each of these types.
    """

    model_name: ClassVar[str] = "Electrochemistry/ElectroSurface"
    current_scale: ClassVar[float] = 1.0e8

    name: str
    area_groups_c: tuple
    area_groups_e: tuple
    interface_reaction_types: tuple
    species: tuple
    reactions: tuple
    charge_conservation: bool = False
    e_m: float | None = None
    active_current_threshold: float = 1.0e-5
    chem_pot_based: bool = False
    reaction_currents: np.ndarray = field(init=False)
    reaction_areas: np.ndarray = field(init=False)

    def __post_init__(self):
        if not (
            len(self.area_groups_c) == len(self.area_groups_e) == len(self.interface_reaction_types)
        ):
            raise InputError(
                f"{self.model_name} {self.name}: area groups and surface reactions differ in length"
            )
        if not self.charge_conservation and self.e_m is None:
            raise InputError(f"{self.model_name} {self.name}: E_m is required")
        self.reaction_currents = np.zeros(len(self.reactions))
        self.reaction_areas = np.zeros(len(self.reactions))

    @classmethod
    def from_inputs(cls, name, inputs):
        if not isinstance(inputs, InputTree):
            inputs = InputTree(inputs)
        base = ("Models", name)
        groups_c = tuple(inputs.get_required((*base, "AreaGroups_C")))
        groups_e = tuple(inputs.get_required((*base, "AreaGroups_E")))
        surface_types = tuple(
            tuple(types) for types in inputs.get_required((*base, "SurfaceReactions"))
        )
        species = tuple(inputs.get_required(("properties", "Species", "Types")))

        charge_conservation = bool(inputs.get_optional((*base, "ChargeConservation"), False))
        e_m = None
        if not charge_conservation:
            e_m = float(inputs.get_required((*base, "E_m")))

        reaction_names = inputs.get_required(("properties", "SurfaceReactions", "Reactions"))
        reactions = tuple(SurfaceReaction.from_inputs(r, inputs) for r in reaction_names)
        threshold = float(inputs.get_optional((*base, "ActiveCurrent_Threshold"), 1.0e-5))
        chem_pot_based = bool(
            inputs.get_optional(("properties", "Species", "UseChemPotentials"), False)
        )
        return cls(
            name=name,
            area_groups_c=groups_c,
            area_groups_e=groups_e,
            interface_reaction_types=surface_types,
            species=species,
            reactions=reactions,
            charge_conservation=charge_conservation,
            e_m=e_m,
            active_current_threshold=threshold,
            chem_pot_based=chem_pot_based,
        )

    def reset_currents(self):
        """Clear the accumulated reaction currents and active areas."""
        self.reaction_currents[:] = 0.0
        self.reaction_areas[:] = 0.0

    def _metal_potential(self, e_metal):
        if self.charge_conservation:
            if e_metal is None:
                raise ValueError("Metal potential is required with charge conservation")
            return float(e_metal)
        return float(self.e_m)

    def assemble_element(self, area, n_c, weights, c, e, e_metal=None):
        """Assemble one surface element of ``area`` using lumped integration.

        ``n_c`` holds shape values (ip, nodes), ``c`` nodal values (species,
        nodes) and ``e`` nodal electrolyte potentials. Reaction currents and
        active areas are accumulated on the model.
        """
        if not 0 <= area < len(self.interface_reaction_types):
            raise IndexError(f"Area {area} out of range")
        n_c = np.asarray(n_c, dtype=float)
        w = np.asarray(weights, dtype=float)
        c = np.asarray(c, dtype=float)
        e = np.asarray(e, dtype=float)
        ns = len(self.species)
        if n_c.ndim != 2:
            raise ValueError("Shape values must be two-dimensional (ip, nodes)")
        ipcount, nn = n_c.shape
        if w.shape != (ipcount,):
            raise ValueError("Integration point counts do not match")
        if c.shape != (ns, nn):
            raise ValueError(f"Expected concentrations of shape {(ns, nn)}")
        if e.shape != (nn,):
            raise ValueError(f"Expected {nn} potential values")
        em = self._metal_potential(e_metal)
        scale = self.current_scale
        surface_types = self.interface_reaction_types[area]

        f_c = np.zeros((ns, nn))
        k_cc = np.zeros((ns, ns, nn, nn))
        k_ce = np.zeros((ns, nn, nn))
        k_cem = np.zeros((ns, nn))
        f_em = 0.0
        k_emem = 0.0
        k_eme = np.zeros(nn)
        k_emc = np.zeros((ns, nn))

        w_lumped = w @ n_c

        for n, wn in enumerate(w_lumped):
            if self.chem_pot_based:
                dnode = np.array([max(_MIN_CHEM_POT_SLOPE, math.exp(v)) for v in c[:, n]])
            else:
                dnode = np.ones(ns)
            c_loc = c[:, n]
            e_loc = float(e[n])
            for r_idx, reaction in enumerate(self.reactions):
                for surface in surface_types:
                    rates = reaction.rates(surface, c_loc, e_loc, em)
                    if not rates.active:
                        continue
                    f_c[:, n] -= wn * rates.flux
                    k_ce[:, n, n] += wn * rates.dflux_de
                    k_cc[:, :, n, n] -= wn * rates.dflux_dc * dnode[np.newaxis, :]
                    if self.charge_conservation:
                        k_cem[:, n] -= wn * rates.dflux_de
                        f_em += wn * rates.current * scale
                        k_emem += wn * rates.dcurrent_de * scale
                        k_eme[n] -= wn * rates.dcurrent_de * scale
                        k_emc[:, n] += wn * rates.dcurrent_dc * scale * dnode
                    self.reaction_currents[r_idx] += wn * rates.current
                    if abs(rates.current) >= self.active_current_threshold:
                        self.reaction_areas[r_idx] += wn
            if self.charge_conservation:
                k_emem += wn * scale * _EM_DAMPING

        return SurfaceElementSystem(
            f_c=f_c,
            k_cc=k_cc,
            k_ce=k_ce,
            k_cem=k_cem,
            f_em=f_em,
            k_emem=k_emem,
            k_eme=k_eme,
            k_emc=k_emc,
        )

    def time_data_names(self):
        """Names of the per-step output values."""
        names = []
        for reaction in self.reactions:
            names.append(f"{self.name}/i_{reaction.name}")
            names.append(f"{self.name}/A_{reaction.name}")
        names.append(f"{self.name}/E_m")
        return names

    def time_data(self, e_metal=None):
        """Current and active area per reaction, followed by the metal potential."""
        values = []
        for current, area in zip(self.reaction_currents, self.reaction_areas):
            values.append(float(current))
            values.append(float(area))
        values.append(self._metal_potential(e_metal))
        return values