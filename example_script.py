import numpy as np
import matplotlib.pyplot as plt
from opalinus_tensors import (
    CartesianLocalCoordinateSystem,
    ElasticityTensor,
    PermeabilityTensor,
    QueryPoint,
)
from opalinus_tensors.plotting import plot_directional_tensor

# Bedding dipping 45 degrees towards south-east
bedding = CartesianLocalCoordinateSystem.from_geological_angles(dip_direction=135.0, dip=45.0)

# Permeability with a depth dependent prefactor
permeability = PermeabilityTensor(
    permeability1=1e-18,
    permeability2=1e-18,
    permeability3=1e-20,
    local_coordinate_system=bedding,
    prefactor_functor=lambda x, state: np.exp(x[2] / 100.0),
)

elasticity = ElasticityTensor(Ep=9.0e9, Es=4.0e9, nu_p=0.35, nu_s=0.25, G_s=1.6e9,
                              geological_angles=(135.0, 45.0))

point = QueryPoint([0.0, 0.0, -50.0])
print("Permeability at", point.coordinates)
print(permeability.evaluate(point))
print("Voigt stiffness (Pa)")
print(elasticity.voigt())

plot_directional_tensor(permeability.base_tensor, plane='xz', label='permeability (m^2)')
plot_directional_tensor(elasticity.base_tensor, plane='xz', label="Young's modulus (Pa)")
plt.show()
