"""Surface (electrochemical) and volume reaction rates with their derivatives."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .inputs import InputError, InputTree

__all__ = [
    "FARADAY",
    "GAS_CONSTANT",
    "TEMPERATURE",
    "ReactionType",
    "SurfaceRates",
    "VolumeRates",
    "SurfaceReaction",
    "VolumeReaction",
]

FARADAY = 96485.3321
GAS_CONSTANT = 8.31446261815324
TEMPERATURE = 293.15

_ETA_LIMIT = 1.5
_EQUILIBRIUM_FLOOR = 1.0e-16
_OVERSHOOT_TARGET = 1.0e-6


class ReactionType(str, Enum):
    """Kind of reaction, as named in the input file."""

    DYNAMIC = "Dynamic"
    EQUILIBRIUM = "Equilibrium"
    ELECTRO = "Electrochemical"


@dataclass(eq=False)
class SurfaceRates:
    """Result of a surface reaction evaluation; derivatives w.r.t. metal potential."""

    active: bool
    flux: np.ndarray
    dflux_dc: np.ndarray
    dflux_de: np.ndarray
    current: float
    dcurrent_de: float
    dcurrent_dc: np.ndarray


@dataclass(eq=False)
class VolumeRates:
    """Result of a volume reaction evaluation."""

    rate: float
    flux: np.ndarray
    dflux_dc: np.ndarray
    relevant_species: tuple


def _read_stoichiometry(inputs: InputTree, base: tuple, name: str):
    species = tuple(inputs.get_required(("properties", "Species", "Types")))
    in_names = inputs.get_required((*base, "Species_In"))
    out_names = inputs.get_required((*base, "Species_Out"))
    n_in = inputs.get_required((*base, "n_In"))
    n_out = inputs.get_required((*base, "n_Out"))
    c_ref = float(inputs.get_required((*base, "C_ref")))
    return (
        species,
        _species_counts(species, in_names, n_in, name),
        _species_counts(species, out_names, n_out, name),
        c_ref,
    )


def _species_counts(species, names, counts, reaction_name) -> np.ndarray:
    if len(names) != len(counts):
        raise InputError(f"Species and counts of reaction {reaction_name} differ in length")
    lookup = dict(zip(names, (int(n) for n in counts)))
    return np.array([lookup.get(s, 0) for s in species], dtype=int)


def _product_and_gradient(scaled: np.ndarray, mask: np.ndarray, c_ref: float):
    """Product of ``scaled`` over ``mask`` and its derivative w.r.t. each concentration."""
    product = float(np.prod(scaled[mask]))
    gradient = np.zeros(len(scaled))
    for i in np.flatnonzero(mask):
        others = mask.copy()
        others[i] = False
        gradient[i] = float(np.prod(scaled[others])) / c_ref
    return product, gradient


def _as_concentrations(values, n_species: int) -> np.ndarray:
    c = np.asarray(values, dtype=float)
    if c.shape != (n_species,):
        raise ValueError(f"Expected {n_species} concentrations, got shape {c.shape}")
    return c


@dataclass(eq=False)
class SurfaceReaction:
    """Butler-Volmer type electrochemical reaction taking place on one surface type."""

    name: str
    species: tuple
    in_counts: np.ndarray
    out_counts: np.ndarray
    c_ref: float
    surface: str
    i0: float
    i0_reverse: float
    alpha: float
    e_eq: float
    n_electrons: int
    lumped: bool = False
    reaction_type: ReactionType = ReactionType.ELECTRO

    @classmethod
    def from_inputs(cls, name, inputs):
        base = ("properties", "SurfaceReactions", name)
        raw_type = inputs.get_required((*base, "Type"))
        surface = inputs.get_required((*base, "Surface"))
        if raw_type != ReactionType.ELECTRO.value:
            raise ValueError(f"Undefined reaction type for {name}")
        rates = inputs.get_required((*base, "i0"))
        if len(rates) < 2:
            raise InputError(f"Reaction {name} needs forward and backward i0")
        alpha = float(inputs.get_required((*base, "alpha")))
        e_eq = float(inputs.get_required((*base, "E_eq")))
        n_electrons = int(inputs.get_required((*base, "electrons_In")))
        lumped = bool(inputs.get_optional((*base, "Lumped"), False))
        species, in_counts, out_counts, c_ref = _read_stoichiometry(inputs, base, name)
        return cls(
            name=name,
            species=species,
            in_counts=in_counts,
            out_counts=out_counts,
            c_ref=c_ref,
            surface=surface,
            i0=float(rates[0]),
            i0_reverse=float(rates[1]),
            alpha=alpha,
            e_eq=e_eq,
            n_electrons=n_electrons,
            lumped=lumped,
        )

    def rates(self, surface_name, concentrations, e_pot, e_metal):
        """Evaluate fluxes, current and derivatives for the given local state.

        Derivatives with respect to potential are taken w.r.t. the metal
        potential; those w.r.t. the electrolyte potential carry the opposite sign.
        """
        n = len(self.species)
        c = _as_concentrations(concentrations, n)
        if surface_name != self.surface:
            return SurfaceRates(
                active=False,
                flux=np.zeros(n),
                dflux_dc=np.zeros((n, n)),
                dflux_de=np.zeros(n),
                current=0.0,
                dcurrent_de=0.0,
                dcurrent_dc=np.zeros(n),
            )

        f_rt = FARADAY / GAS_CONSTANT / TEMPERATURE
        eta = max(-_ETA_LIMIT, min(_ETA_LIMIT, e_metal - e_pot - self.e_eq))
        scale = FARADAY * self.n_electrons
        k_f = self.i0 / scale * math.exp(-self.alpha * eta * f_rt)
        k_b = self.i0_reverse / scale * math.exp((1.0 - self.alpha) * eta * f_rt)
        dk_f = k_f * -self.alpha * f_rt
        dk_b = k_b * (1.0 - self.alpha) * f_rt

        non_negative = c >= 0.0
        c_used = np.where(non_negative, c, 0.0)
        dc = non_negative.astype(float)
        scaled = c_used / self.c_ref

        r_f, dr_f = _product_and_gradient(scaled, self.in_counts > 0, self.c_ref)
        r_b, dr_b = _product_and_gradient(scaled, self.out_counts > 0, self.c_ref)

        net = (self.out_counts - self.in_counts).astype(float)
        rate = r_f * k_f - r_b * k_b
        d_rate_de = r_f * dk_f - r_b * dk_b
        d_rate_dc = (dr_f * k_f - dr_b * k_b) * dc

        return SurfaceRates(
            active=True,
            flux=rate * net,
            dflux_dc=np.outer(net, d_rate_dc),
            dflux_de=d_rate_de * net,
            current=scale * rate,
            dcurrent_de=scale * d_rate_de,
            dcurrent_dc=scale * d_rate_dc,
        )


@dataclass(eq=False)
class VolumeReaction:
    """Reaction within the pore solution, either dynamic or near equilibrium."""

    name: str
    species: tuple
    in_counts: np.ndarray
    out_counts: np.ndarray
    c_ref: float
    reaction_type: ReactionType
    equilibrium_constant: float = 0.0
    k_dummy: float = 0.0
    k_forward: float = 0.0
    k_backward: float = 0.0
    lumped: bool = False

    @classmethod
    def from_inputs(cls, name, inputs):
        base = ("properties", "VolumeReactions", name)
        raw_type = inputs.get_required((*base, "Type"))
        params = {}
        if raw_type == ReactionType.EQUILIBRIUM.value:
            reaction_type = ReactionType.EQUILIBRIUM
            params["equilibrium_constant"] = float(inputs.get_required((*base, "K")))
            params["k_dummy"] = float(inputs.get_required((*base, "k_dummy")))
        elif raw_type == ReactionType.DYNAMIC.value:
            reaction_type = ReactionType.DYNAMIC
            rates = inputs.get_required((*base, "k"))
            if len(rates) < 2:
                raise InputError(f"Reaction {name} needs forward and backward k")
            params["k_forward"] = float(rates[0])
            params["k_backward"] = float(rates[1])
        else:
            raise ValueError(f"Undefined reaction type for {name}")
        lumped = bool(inputs.get_optional((*base, "Lumped"), False))
        species, in_counts, out_counts, c_ref = _read_stoichiometry(inputs, base, name)
        return cls(
            name=name,
            species=species,
            in_counts=in_counts,
            out_counts=out_counts,
            c_ref=c_ref,
            reaction_type=reaction_type,
            lumped=lumped,
            **params,
        )

    def rates(self, concentrations):
        """Evaluate reaction rate, species fluxes and their concentration derivatives."""
        n = len(self.species)
        c = _as_concentrations(concentrations, n)

        if self.reaction_type is ReactionType.EQUILIBRIUM:
            k_f = self.equilibrium_constant * self.k_dummy
            k_b = self.k_dummy
            floor = _EQUILIBRIUM_FLOOR
        else:
            k_f = self.k_forward
            k_b = self.k_backward
            floor = 0.0
        above = c >= floor
        c_used = np.where(above, c, floor)
        dc = above.astype(float)
        scaled = c_used / self.c_ref

        in_mask = self.in_counts != 0
        out_mask = self.out_counts != 0
        r_f, dr_f = _product_and_gradient(scaled, in_mask, self.c_ref)
        r_b, dr_b = _product_and_gradient(scaled, out_mask, self.c_ref)
        relevant = tuple(int(i) for i in np.flatnonzero(in_mask | out_mask))

        net = (self.out_counts - self.in_counts).astype(float)
        rate = k_f * r_f - k_b * r_b
        flux = rate * net
        dflux = np.outer(net, (k_f * dr_f - k_b * dr_b) * dc)

        if self.reaction_type is ReactionType.EQUILIBRIUM:
            # Drives negative concentrations back towards positive values.
            extra = 0.0
            d_extra = np.zeros(n)
            for i, (n_in, n_out, ci) in enumerate(zip(self.in_counts, self.out_counts, c)):
                if ci >= 0.0:
                    continue
                if n_in > 0:
                    extra += self.k_dummy / n_in * (_OVERSHOOT_TARGET - ci)
                    d_extra[i] = -self.k_dummy / n_in
                if n_out > 0:
                    extra += -self.k_dummy / n_out * (_OVERSHOOT_TARGET - ci)
                    d_extra[i] = self.k_dummy / n_out
            flux = flux + extra * net
            dflux = dflux + np.outer(net, d_extra)

        return VolumeRates(rate=rate, flux=flux, dflux_dc=dflux, relevant_species=relevant)