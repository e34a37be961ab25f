import pytest
import numpy as np

from opalinus_tensors.coordinate_systems import CartesianLocalCoordinateSystem
from opalinus_tensors.permeability import PermeabilityTensor
from opalinus_tensors.prefactors import (
    ConstantPrefactor,
    EvaluationState,
    FunctionPrefactor,
    MaterialPropertyPrefactor,
    QueryPoint,
)


class ExplodingSource:
    def evaluate(self, point, state):
        raise AssertionError("source should not have been evaluated")


@pytest.fixture
def identity_cs():
    return CartesianLocalCoordinateSystem()


@pytest.fixture
def tilted_cs():
    return CartesianLocalCoordinateSystem.from_geological_angles(135.0, 40.0, 10.0)


@pytest.fixture
def opalinus_permeabilities():
    """Permeability parallel (P-samples) and normal (S-samples) to bedding, m^2"""
    return 1e-18, 1e-18, 1e-20


@pytest.fixture
def points():
    return [QueryPoint([0.0, 0.0, z], element=0, qp=qp) for qp, z in enumerate([0.0, 1.0, 2.0])]


def test_identity_rotation_example(identity_cs, opalinus_permeabilities):
    material = PermeabilityTensor(*opalinus_permeabilities, identity_cs)
    K = material.evaluate(QueryPoint([0.0, 0.0, 0.0]))
    np.testing.assert_array_equal(K, np.diag([1e-18, 1e-18, 1e-20]))
    np.testing.assert_array_equal(material.input_permeability, np.diag([1e-18, 1e-18, 1e-20]))


def test_functor_prefactor_example(identity_cs, opalinus_permeabilities):
    half_at_origin = FunctionPrefactor(lambda x, s: 0.5 if np.allclose(x, 0.0) else 1.0)
    material = PermeabilityTensor(*opalinus_permeabilities, identity_cs, prefactor_functor=half_at_origin)

    K = material.evaluate(QueryPoint([0.0, 0.0, 0.0]))
    np.testing.assert_allclose(K, np.diag([5e-19, 5e-19, 5e-21]), rtol=1e-15, atol=0)

    # only at that point
    K_other = material.evaluate(QueryPoint([1.0, 0.0, 0.0]))
    np.testing.assert_array_equal(K_other, np.diag([1e-18, 1e-18, 1e-20]))


@pytest.mark.parametrize("angles", [(0, 0, 0), (30, 45, 0), (135, 40, 10), (270, 89, 60), (10, 170, -45)])
def test_rotation_preserves_spectrum(angles):
    cs = CartesianLocalCoordinateSystem.from_geological_angles(*angles)
    material = PermeabilityTensor(3e-15, 2e-16, 5e-17, cs)
    K = material.base_tensor
    np.testing.assert_allclose(K, K.T, rtol=0, atol=1e-27)
    np.testing.assert_allclose(np.linalg.eigvalsh(K), [5e-17, 2e-16, 3e-15], rtol=1e-10)


def test_quarter_turn_swaps_axes():
    cs = CartesianLocalCoordinateSystem.from_axes([0, 1, 0], [-1, 0, 0])
    material = PermeabilityTensor(1.0, 2.0, 3.0, cs)
    np.testing.assert_allclose(material.base_tensor, np.diag([2.0, 1.0, 3.0]), atol=1e-15)


def test_normal_permeability_along_bedding_normal(tilted_cs):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs)
    n = tilted_cs.normal_local_axis
    assert n @ material.base_tensor @ n == pytest.approx(1e-20, rel=1e-10)


def test_no_prefactor_is_bitwise_base(tilted_cs, points):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs)
    assert not material.has_prefactor
    for point in points:
        for _ in range(3):
            np.testing.assert_array_equal(material.evaluate(point), material.base_tensor)


def test_output_does_not_alias_base(tilted_cs):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs)
    K = material.evaluate(QueryPoint([0.0, 0.0, 0.0]))
    K[0, 0] = 1.0
    assert material.base_tensor[0, 0] != 1.0
    with pytest.raises(ValueError):
        material.base_tensor[0, 0] = 1.0


def test_constant_functor_scales_every_point(tilted_cs, points):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs, prefactor_functor=ConstantPrefactor(3.0))
    for point in points:
        np.testing.assert_allclose(material.evaluate(point), 3.0 * material.base_tensor)


def test_both_prefactors_multiply(tilted_cs, points):
    functor = FunctionPrefactor(lambda x, s: 1.0 + x[2])
    mat_prop = MaterialPropertyPrefactor([0.5, 0.25, 2.0])
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs,
                                  prefactor_functor=functor, prefactor_mat_prop=mat_prop)
    expected = [1.0 * 0.5, 2.0 * 0.25, 3.0 * 2.0]
    for point, factor in zip(points, expected):
        np.testing.assert_allclose(material.evaluate(point), factor * material.base_tensor)


def test_mat_prop_only(tilted_cs, points):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs,
                                  prefactor_mat_prop=MaterialPropertyPrefactor([0.5, 0.25, 2.0]))
    np.testing.assert_allclose(material.evaluate(points[2]), 2.0 * material.base_tensor)


def test_zero_functor_short_circuits_property(tilted_cs):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs,
                                  prefactor_functor=ConstantPrefactor(0.0), prefactor_mat_prop=ExplodingSource())
    K = material.evaluate(QueryPoint([0.0, 0.0, 0.0]))
    np.testing.assert_array_equal(K, np.zeros((3, 3)))


def test_zero_functor_with_nan_property(tilted_cs):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs,
                                  prefactor_functor=0.0, prefactor_mat_prop=MaterialPropertyPrefactor([np.nan]))
    K = material.evaluate(QueryPoint([0.0, 0.0, 0.0]))
    assert not np.any(np.isnan(K))
    np.testing.assert_array_equal(K, np.zeros((3, 3)))


def test_state_is_passed_to_functor(identity_cs):
    seen = []

    def record(x, state):
        seen.append(state)
        return state.time

    material = PermeabilityTensor(1.0, 1.0, 1.0, identity_cs, prefactor_functor=record)
    state = EvaluationState(time=2.0, step="old")
    np.testing.assert_array_equal(material.evaluate(QueryPoint([0, 0, 0]), state), 2.0 * np.eye(3))
    assert seen == [state]


def test_compute_properties(tilted_cs, points):
    material = PermeabilityTensor(1e-18, 1e-18, 1e-20, tilted_cs, num_vars=2)
    props = material.compute_properties(points)

    assert set(props) == {"PorousFlow_permeability_qp",
                          "dPorousFlow_permeability_qp_dvar",
                          "dPorousFlow_permeability_qp_dgradvar"}
    assert props["PorousFlow_permeability_qp"].shape == (3, 3, 3)
    assert props["dPorousFlow_permeability_qp_dvar"].shape == (3, 2, 3, 3)
    assert props["dPorousFlow_permeability_qp_dgradvar"].shape == (3, 3, 2, 3, 3)
    assert not np.any(props["dPorousFlow_permeability_qp_dvar"])
    assert not np.any(props["dPorousFlow_permeability_qp_dgradvar"])
    for K in props["PorousFlow_permeability_qp"]:
        np.testing.assert_array_equal(K, material.base_tensor)


def test_compute_properties_from_coordinates(identity_cs):
    material = PermeabilityTensor(1.0, 2.0, 3.0, identity_cs,
                                  prefactor_functor=lambda x, s: x[0])
    props = material.compute_properties(np.array([[1.0, 0, 0], [2.0, 0, 0]]))
    np.testing.assert_array_equal(props["PorousFlow_permeability_qp"][1], np.diag([2.0, 4.0, 6.0]))


def test_compute_properties_no_points(identity_cs):
    material = PermeabilityTensor(1.0, 2.0, 3.0, identity_cs)
    props = material.compute_properties([])
    assert props["PorousFlow_permeability_qp"].shape == (0, 3, 3)
    assert props["dPorousFlow_permeability_qp_dvar"].shape == (0, 0, 3, 3)


def test_custom_frame_rotation():
    """Any object with rotate_local_to_global can act as coordinate system."""
    class SwapXY:
        def rotate_local_to_global(self, tensor):
            P = np.array([[0, 1, 0], [1, 0, 0], [0, 0, 1]], dtype=float)
            return P @ tensor @ P.T

    material = PermeabilityTensor(1.0, 2.0, 3.0, SwapXY())
    np.testing.assert_array_equal(material.base_tensor, np.diag([2.0, 1.0, 3.0]))


def test_invalid_coordinate_system():
    with pytest.raises(TypeError, match="rotate_local_to_global"):
        PermeabilityTensor(1.0, 2.0, 3.0, object())


def test_invalid_num_vars(identity_cs):
    with pytest.raises(ValueError, match="num_vars must be non-negative"):
        PermeabilityTensor(1.0, 2.0, 3.0, identity_cs, num_vars=-1)


def test_negative_permeability_is_accepted(identity_cs, caplog):
    material = PermeabilityTensor(-1.0, 0.0, 1.0, identity_cs)
    np.testing.assert_array_equal(material.base_tensor, np.diag([-1.0, 0.0, 1.0]))
    assert "Negative permeability" in caplog.text
