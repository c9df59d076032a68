# corrofem

Building blocks for finite element simulations of corrosion. The package reads
model parameters from a nested input document, evaluates reaction rates with
their derivatives, and computes the element-level residuals and tangent blocks
of reactions on a metal surface. Assembling these into a global system and
solving it is left to the caller.

## Modules

- `corrofem.inputs` — `InputTree`, a read-only view over a nested input
  document (for example a parsed JSON file). `get_required(path)` raises
  `InputError` when the entry is missing, `get_optional(path, default)` falls
  back to the default, and `get_type(path)` names the kind of value stored
  (`"Number"`, `"String"`, `"Bool"`, `"Array"`, `"Object"`, `"Null"` or
  `"Missing"`).
- `corrofem.reactions` — `SurfaceReaction` (electrochemical, Butler-Volmer
  type, with the overpotential clamped to ±1.5 V) and `VolumeReaction`
  (`"Equilibrium"` or `"Dynamic"`). Their `rates(...)` methods return
  `SurfaceRates` and `VolumeRates` holding fluxes, current and derivatives with
  respect to concentrations and potential. Both are built with
  `from_inputs(name, inputs)`.
- `corrofem.electro_surface` — `ElectroSurface`, the reactions on the metal
  surface for a set of element areas. `assemble_element(...)` uses lumped
  integration and returns a `SurfaceElementSystem` with the concentration
  residual, the tangent blocks and, with `ChargeConservation`, the scaled
  current-conservation residual for the metal potential. Reaction currents and
  active areas are accumulated per reaction; `reset_currents()`,
  `time_data_names()` and `time_data(...)` give access to them.
- `corrofem.surface_output` — `surface_overpotential(...)` and
  `surface_reaction_current(...)` evaluate nodal output fields of an
  `ElectroSurface` at export points of one element.
- `corrofem.echem_constraints` — `EchemConstraints`, imposed boundary
  concentrations and electrolyte potential. One species may give a string as
  its `C0` to take its concentration from electroneutrality.
  `constraint_values()` maps each species (and `"ePot"`) to the imposed value,
  using the logarithm of the concentration when chemical potentials are used.

Invalid input raises `InputError` (a `ValueError`) or `ValueError`, for example
for an undefined reaction type or concentrations that cannot follow from
electroneutrality.

## Installation

```
pip install .
```

## Example

```python
from corrofem.inputs import InputTree
from corrofem.reactions import SurfaceReaction, VolumeReaction

inputs = InputTree({
    "properties": {
        "Species": {"Types": ["H", "OH"]},
        "VolumeReactions": {
            "Reactions": ["Auto-Ionisation"],
            "Auto-Ionisation": {
                "Type": "Equilibrium",
                "K": 1.0e-14,
                "k_dummy": 1.0e7,
                "Species_In": [],
                "n_In": [],
                "Species_Out": ["H", "OH"],
                "n_Out": [1, 1],
                "C_ref": 1.0e3,
                "Lumped": True,
            },
        },
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
})

volume = VolumeReaction.from_inputs("Auto-Ionisation", inputs)
rates = volume.rates([1.0e-4, 1.0e-4])
print(rates.rate, rates.flux, rates.relevant_species)

her = SurfaceReaction.from_inputs("HER", inputs)
surface_rates = her.rates("Cathode", [1.0, 1.0e-4], e_pot=0.0, e_metal=-0.5)
print(surface_rates.active, surface_rates.current, surface_rates.flux)
```

## What the package does not do

It works on single elements and local states only. It has no mesh, no degree
of freedom bookkeeping, no global assembly, no linear or non-linear solver and
no time stepping; shape values, weights and nodal values are passed in by the
caller. It provides no models for bulk species transport in the electrolyte or
for applied external forcing, no lookup of models by name, no file output and
no command-line program.

## Running the tests

```
pip install .[test]
pytest
```