"""Construction of materials from parameter dictionaries.

Named references (coordinate systems, functors, material properties) are looked
up in the tables passed to ``from_dict``; objects can also be passed directly.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Optional

from .elasticity import ElasticityTensor
from .permeability import PermeabilityTensor

logger = logging.getLogger(__name__)

_BEDDING_NOTE = ("If the plane e1-e2 of the local coordinate system is representing the bedding, "
                 "this permeability controls flow {} to this bedding.")

PERMEABILITY_DESCRIPTIONS = {
    "local_coordinate_system": "The object that defines the local coordinate system.",
    "permeability1": "Intrinsic permeability in direction of the 'e1' axis of the local coordinate "
                     "system in unit LE^2 (e.g. m^2). " + _BEDDING_NOTE.format("parallel"),
    "permeability2": "Intrinsic permeability in direction of the 'e2' axis of the local coordinate "
                     "system in unit LE^2 (e.g. m^2). " + _BEDDING_NOTE.format("parallel"),
    "permeability3": "Intrinsic permeability in direction of the 'e3' axis of the local coordinate "
                     "system in unit LE^2 (e.g. m^2). " + _BEDDING_NOTE.format("normal"),
    "prefactor_functor": "Optional functor to use as a scalar prefactor on the permeability tensor.",
    "prefactor_mat_prop": "Optional material property to use as a scalar prefactor on the permeability tensor.",
    "num_vars": "Number of solution variables the derivative slots are sized for.",
}

ELASTICITY_DESCRIPTIONS = {
    "Ep": "Young's modulus parallel to the bedding.",
    "Es": "Young's modulus normal to the bedding.",
    "nu_p": "Poisson ratio within the bedding plane.",
    "nu_s": "Poisson ratio for contraction in the bedding under load normal to it.",
    "G_s": "Shear modulus for shear across the bedding.",
    "local_coordinate_system": "The object that defines the local coordinate system.",
    "geological_angles": "Dip direction, dip and optional bedding rotation in degrees.",
    "prefactor_functor": "Optional functor to use as a scalar prefactor on the elasticity tensor.",
    "prefactor_function": "Alias of prefactor_functor.",
    "prefactor_mat_prop": "Optional material property to use as a scalar prefactor on the elasticity tensor.",
    "base_name": "Optional prefix for the elasticity tensor property name.",
}


class MissingParameterError(ValueError):
    """A required parameter was not supplied."""

    def __init__(self, name, description=""):
        self.name = name
        message = f"Missing required parameter '{name}'"
        if description:
            message += f": {description}"
        super().__init__(message)


def _resolve(value, table, kind):
    if isinstance(value, str):
        if table is None or value not in table:
            raise KeyError(f"Unknown {kind} '{value}'")
        return table[value]
    return value


def _check_keys(params, cls, descriptions):
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(params) - names)
    if unknown:
        raise ValueError(f"Unknown parameters for {cls.__name__}: {unknown}")
    for f in fields(cls):
        if f.name in getattr(cls, "required", ()) and params.get(f.name) is None:
            raise MissingParameterError(f.name, descriptions.get(f.name, ""))


@dataclass
class PermeabilityParameters:
    permeability1: float
    permeability2: float
    permeability3: float
    local_coordinate_system: Any
    prefactor_functor: Optional[Any] = None
    prefactor_mat_prop: Optional[Any] = None
    num_vars: int = 0

    required = ("permeability1", "permeability2", "permeability3", "local_coordinate_system")

    @classmethod
    def from_dict(cls, params, user_objects=None, functors=None, properties=None):
        """Validate a parameter dictionary and resolve its named references."""
        params = dict(params)
        _check_keys(params, cls, PERMEABILITY_DESCRIPTIONS)

        params["local_coordinate_system"] = _resolve(
            params["local_coordinate_system"], user_objects, "local coordinate system")
        if params.get("prefactor_functor") is not None:
            params["prefactor_functor"] = _resolve(params["prefactor_functor"], functors, "functor")
        if params.get("prefactor_mat_prop") is not None:
            params["prefactor_mat_prop"] = _resolve(params["prefactor_mat_prop"], properties, "material property")
        return cls(**params)

    def build(self):
        return PermeabilityTensor(
            self.permeability1, self.permeability2, self.permeability3, self.local_coordinate_system,
            prefactor_functor=self.prefactor_functor, prefactor_mat_prop=self.prefactor_mat_prop,
            num_vars=self.num_vars)


@dataclass
class ElasticityParameters:
    Ep: float
    Es: float
    nu_p: float
    nu_s: float
    G_s: float
    local_coordinate_system: Optional[Any] = None
    geological_angles: Optional[Any] = None
    prefactor_functor: Optional[Any] = None
    prefactor_mat_prop: Optional[Any] = None
    base_name: str = ""
    prefactor_function: Optional[Any] = None

    required = ("Ep", "Es", "nu_p", "nu_s", "G_s")

    @classmethod
    def from_dict(cls, params, user_objects=None, functors=None, properties=None):
        """Validate a parameter dictionary and resolve its named references."""
        params = dict(params)
        _check_keys(params, cls, ELASTICITY_DESCRIPTIONS)

        if params.get("local_coordinate_system") is not None:
            params["local_coordinate_system"] = _resolve(
                params["local_coordinate_system"], user_objects, "local coordinate system")
        for name in ("prefactor_functor", "prefactor_function"):
            if params.get(name) is not None:
                params[name] = _resolve(params[name], functors, "functor")
        if params.get("prefactor_mat_prop") is not None:
            params["prefactor_mat_prop"] = _resolve(params["prefactor_mat_prop"], properties, "material property")
        return cls(**params)

    def build(self):
        return ElasticityTensor(
            self.Ep, self.Es, self.nu_p, self.nu_s, self.G_s,
            local_coordinate_system=self.local_coordinate_system,
            geological_angles=self.geological_angles,
            prefactor_functor=self.prefactor_functor,
            prefactor_mat_prop=self.prefactor_mat_prop,
            base_name=self.base_name,
            prefactor_function=self.prefactor_function)


MATERIAL_TYPES = {
    "OpalinusPermeabilityTensor": PermeabilityParameters,
    "OpalinusElasticityTensor": ElasticityParameters,
}


def build_material(type_name, params, user_objects=None, functors=None, properties=None):
    """
    Build a material of the given type from a parameter dictionary.

    Raises:
        ValueError: If type_name is unknown or params are invalid
        MissingParameterError: If a required parameter is missing
        KeyError: If a named reference cannot be resolved
    """
    if type_name not in MATERIAL_TYPES:
        raise ValueError(f"Unknown material type '{type_name}'. Valid options are: {list(MATERIAL_TYPES)}")
    parameters = MATERIAL_TYPES[type_name].from_dict(params, user_objects, functors, properties)
    logger.debug("Building %s from %s", type_name, parameters)
    return parameters.build()
