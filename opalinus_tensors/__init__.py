from .config import (
    ElasticityParameters,
    MissingParameterError,
    PermeabilityParameters,
    build_material,
)
from .coordinate_systems import CartesianLocalCoordinateSystem, FrameRotation
from .elasticity import ElasticityTensor
from .materials import TransverselyIsotropicMaterial
from .permeability import PermeabilityTensor
from .prefactors import (
    ConstantPrefactor,
    EvaluationState,
    FunctionPrefactor,
    MaterialPropertyPrefactor,
    PointScalarSource,
    QueryPoint,
)

__version__ = "0.1.0"
