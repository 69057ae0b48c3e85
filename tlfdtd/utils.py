import dataclasses

import equinox as eqx

from tlfdtd.parameters import GeneratorKind, LoadKind, ParameterSet


def update_parameter(params: ParameterSet, name: str, new_value) -> ParameterSet:
    """Returns a copy of ``params`` with a single field replaced.

    The copy is not validated and any simulation built from ``params`` is now
    stale: the caller must initialize a new one.
    """
    # Kind selectors are static fields, not leaves
    if name == "generator":
        return dataclasses.replace(params, generator=GeneratorKind(new_value))
    if name == "load":
        return dataclasses.replace(params, load=LoadKind(new_value))
    if name not in ParameterSet.NUMERIC_FIELDS:
        raise KeyError(f"'{name}' is not a line parameter")

    return eqx.tree_at(lambda p: getattr(p, name), params, new_value)


def update_parameters(params: ParameterSet, **changes) -> ParameterSet:
    """Applies :func:`update_parameter` for every keyword."""
    for name, value in changes.items():
        params = update_parameter(params, name, value)
    return params
