"""Imposed boundary concentrations and electrolyte potential for electrochemistry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from .inputs import InputError, InputTree

__all__ = ["EchemConstraints"]

_MIN_CHEM_POT_CONCENTRATION = math.exp(-30.0)
_MIN_NEUTRALITY_CONCENTRATION = 1.0e-20


@dataclass(eq=False)
class EchemConstraints:
    """Fixes species concentrations on one node group and the potential on another.

    One species may take its concentration from electroneutrality by giving a
    string (e.g. "Neutrality") as its ``C0``.
    """

    model_name: ClassVar[str] = "Electrochemistry/EchemConstraints"
    potential_dof: ClassVar[str] = "ePot"

    name: str
    node_group_c: str
    node_group_e: str
    species: tuple
    z: np.ndarray
    c0: np.ndarray
    e0: float
    chem_pot_based: bool = False

    @classmethod
    def from_inputs(cls, name, inputs):
        if not isinstance(inputs, InputTree):
            inputs = InputTree(inputs)
        base = ("Models", name)
        group_c = inputs.get_required((*base, "NodeGroup_C"))
        group_e = inputs.get_required((*base, "NodeGroup_E"))
        species = tuple(inputs.get_required((*base, "Species")))
        chem_pot_based = bool(
            inputs.get_optional(("properties", "Species", "UseChemPotentials"), False)
        )
        e0 = float(inputs.get_required((*base, "ePot")))

        charges = np.zeros(len(species))
        c0 = np.zeros(len(species))
        neutral = None
        for i, sp in enumerate(species):
            props = ("properties", "Species", sp)
            charges[i] = float(inputs.get_required((*props, "z")))
            kind = inputs.get_type((*props, "C0"))
            if kind == "Number":
                value = float(inputs.get_required((*props, "C0")))
                if chem_pot_based and value < _MIN_CHEM_POT_CONCENTRATION:
                    value = _MIN_CHEM_POT_CONCENTRATION
                c0[i] = value
            elif kind == "String":
                if neutral is not None:
                    raise ValueError(
                        "Multiple species are designated as initialized from electroneutrality"
                    )
                neutral = i
            else:
                inputs.get_required((*props, "C0"))
                raise InputError(f"C0 of species {sp} must be a number or a string")

        if neutral is not None:
            if charges[neutral] == 0.0:
                raise ValueError("Initial concentrations do not follow from electroneutrality")
            others = np.arange(len(species)) != neutral
            filler = float(np.sum(charges[others] * c0[others]))
            c0[neutral] = -filler / charges[neutral]
            if c0[neutral] < _MIN_NEUTRALITY_CONCENTRATION:
                raise ValueError("Initial concentrations do not follow from electroneutrality")

        return cls(
            name=name,
            node_group_c=group_c,
            node_group_e=group_e,
            species=species,
            z=charges,
            c0=c0,
            e0=e0,
            chem_pot_based=chem_pot_based,
        )

    def constraint_values(self):
        """Imposed value for each species degree of freedom, then for the potential.

        Concentrations are given as their logarithm when chemical potentials are used.
        """
        values = {}
        for sp, conc in zip(self.species, self.c0):
            values[sp] = math.log(conc) if self.chem_pot_based else float(conc)
        values[self.potential_dof] = float(self.e0)
        return values