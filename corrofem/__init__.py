"""Electro-chemical corrosion building blocks: inputs, reactions, surface models and constraints."""

__version__ = "1.0.0"

__all__ = [
    "inputs",
    "reactions",
    "electro_surface",
    "surface_output",
    "echem_constraints",
]