# 文件: PyIGAMat/tests/test_functions.py
"""
可求值函数接口单元测试
"""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from igamat.functions import (
    EvaluableFunction,
    ConstantFunction,
    ExpressionFunction,
    MapData,
    as_points,
    second_derivative_pairs,
)
from igamat.geometry import BilinearPatch
from igamat.exceptions import (
    ConfigurationError,
    DomainMismatchError,
    NumericalFailure,
    UnsupportedOperationError,
)


class _Polynomial(EvaluableFunction):
    """f(x, y) = (x^2 y, sin(x) + y)，只实现求值，导数走差分"""

    @property
    def domain_dim(self):
        return 2

    @property
    def target_dim(self):
        return 2

    def _evaluate(self, u):
        x, y = u
        return np.array([x * x * y, np.sin(x) + y])


class _ValuesOnly(_Polynomial):
    """禁用差分的函数"""
    finite_differences = False


class TestPoints:
    """测试点集转换"""

    def test_vector_is_single_point(self):
        u = as_points([0.1, 0.2, 0.3])
        assert u.shape == (3, 1)

    def test_scalar_is_one_dimensional_point(self):
        assert as_points(0.5).shape == (1, 1)

    def test_dimension_check(self):
        with pytest.raises(DomainMismatchError):
            as_points(np.zeros((2, 4)), dim=3)

    def test_second_derivative_ordering(self):
        """先纯导数后混合导数"""
        assert second_derivative_pairs(3) == [(0, 0), (1, 1), (2, 2), (0, 1), (0, 2), (1, 2)]
        assert second_derivative_pairs(1) == [(0, 0)]


class TestEvaluationContract:
    """测试求值契约"""

    @pytest.mark.parametrize("fun", [
        ConstantFunction(1.0, domain_dim=2),
        ExpressionFunction("x", "y", "x*y", domain_dim=2),
        _Polynomial(),
    ])
    def test_empty_points(self, fun):
        """空点集返回 target_dim 行 0 列"""
        result = fun.evaluate(np.zeros((fun.domain_dim, 0)))
        assert result.shape == (fun.target_dim, 0)
        assert fun.derivative(np.zeros((fun.domain_dim, 0))).shape == (fun.target_dim * 2, 0)

    def test_domain_mismatch(self):
        fun = ExpressionFunction("x*y", domain_dim=2)
        with pytest.raises(DomainMismatchError):
            fun.evaluate(np.zeros((3, 2)))

    def test_column_order_preserved(self):
        fun = ExpressionFunction("x + 10*y", domain_dim=2)
        pts = np.array([[0.0, 1.0, 2.0], [3.0, 4.0, 5.0]])
        assert np.allclose(fun.evaluate(pts), [[30.0, 41.0, 52.0]])

    def test_eval_component(self):
        fun = ExpressionFunction("x", "2*x", "3*x", domain_dim=1)
        result = fun.eval_component([[1.0, 2.0]], 2)
        assert result.shape == (1, 2)
        assert np.allclose(result, [[3.0, 6.0]])

        with pytest.raises(IndexError):
            fun.eval_component([[1.0]], 3)

    def test_bad_result_shape(self):
        class _Broken(_Polynomial):
            def _evaluate(self, u):
                return np.zeros((1, u.shape[1]))

        with pytest.raises(DomainMismatchError):
            _Broken().evaluate([0.1, 0.2])

    def test_repr(self):
        assert "domain_dim=2" in repr(_Polynomial())


class TestFiniteDifferences:
    """测试缺省差分导数"""

    def setup_method(self):
        self.fun = _Polynomial()
        self.pt = np.array([[0.3], [0.7]])

    def test_first_derivative(self):
        """行按分量分组: [∂x f1, ∂y f1, ∂x f2, ∂y f2]"""
        d = self.fun.derivative(self.pt)
        assert d.shape == (4, 1)
        expected = [2 * 0.3 * 0.7, 0.3 ** 2, np.cos(0.3), 1.0]
        assert np.allclose(d[:, 0], expected, atol=1e-8)

    def test_second_derivative(self):
        """每个分量: [xx, yy, xy]"""
        d2 = self.fun.second_derivative(self.pt)
        assert d2.shape == (6, 1)
        expected = [2 * 0.7, 0.0, 2 * 0.3, -np.sin(0.3), 0.0, 0.0]
        assert np.allclose(d2[:, 0], expected, atol=1e-4)

    def test_jacobian_blocks(self):
        J = self.fun.jacobian(np.array([[0.3, 0.1], [0.7, 0.2]]))
        assert J.shape == (2, 2, 2)
        assert np.allclose(J[1], [[2 * 0.1 * 0.2, 0.01], [np.cos(0.1), 1.0]], atol=1e-8)

    def test_disabled_finite_differences(self):
        fun = _ValuesOnly()
        assert fun.evaluate(self.pt).shape == (2, 1)
        with pytest.raises(UnsupportedOperationError):
            fun.derivative(self.pt)
        with pytest.raises(UnsupportedOperationError):
            fun.second_derivative(self.pt)


class TestConstantFunction:
    """测试常值函数"""

    def test_vector_value(self):
        fun = ConstantFunction([1.0, 2.0], domain_dim=3)
        assert fun.target_dim == 2
        result = fun.evaluate(np.random.rand(3, 4))
        assert np.allclose(result, [[1.0] * 4, [2.0] * 4])

    def test_zero_derivatives(self):
        fun = ConstantFunction(5.0, domain_dim=2)
        assert np.allclose(fun.derivative([0.1, 0.2]), 0.0)
        assert fun.second_derivative([0.1, 0.2]).shape == (3, 1)

    def test_negative_dimension(self):
        with pytest.raises(ConfigurationError):
            ConstantFunction(1.0, domain_dim=-1)


class TestExpressionFunction:
    """测试符号表达式函数"""

    def setup_method(self):
        self.fun = ExpressionFunction("1*x", "2*y", "x*y*z^2", domain_dim=3)
        self.pt = np.full((3, 1), 0.25)

    def test_evaluate(self):
        result = self.fun.evaluate(self.pt)
        assert np.allclose(result[:, 0], [0.25, 0.5, 0.00390625])

    def test_analytic_derivative(self):
        d = self.fun.derivative(self.pt)[:, 0]
        expected = [1, 0, 0, 0, 2, 0, 0.015625, 0.015625, 0.03125]
        assert np.allclose(d, expected, atol=1e-14)

    def test_analytic_second_derivative(self):
        """x*y*z^2: [xx, yy, zz, xy, xz, yz]"""
        d2 = self.fun.second_derivative(self.pt)
        assert d2.shape == (18, 1)
        assert np.allclose(d2[12:, 0], [0.0, 0.0, 0.125, 0.0625, 0.125, 0.125])

    def test_hessian_and_laplacian(self):
        H = self.fun.hessian(self.pt, coord=2)[0]
        assert np.allclose(H, [[0.0, 0.0625, 0.125],
                               [0.0625, 0.0, 0.125],
                               [0.125, 0.125, 0.125]])
        assert np.allclose(self.fun.laplacian(self.pt)[:, 0], [0.0, 0.0, 0.125])

    def test_matches_finite_differences(self):
        """解析导数与差分导数一致"""
        pts = np.array([[0.1, 0.4], [0.2, 0.5], [0.3, 0.6]])
        fd = EvaluableFunction._derivative(self.fun, pts)
        assert np.allclose(self.fun.derivative(pts), fd, atol=1e-8)

    def test_constant_expression_broadcast(self):
        fun = ExpressionFunction("1", "x^2", domain_dim=1)
        result = fun.evaluate([[1.0, 2.0, 3.0]])
        assert np.allclose(result, [[1, 1, 1], [1, 4, 9]])

    def test_zero_dimensional_domain(self):
        fun = ExpressionFunction("2.5", domain_dim=0)
        assert np.allclose(fun.evaluate(np.zeros((0, 2))), [[2.5, 2.5]])

    def test_unknown_variable(self):
        with pytest.raises(ConfigurationError):
            ExpressionFunction("x*z", domain_dim=2)

    def test_invalid_expression(self):
        with pytest.raises(ConfigurationError):
            ExpressionFunction("x*(", domain_dim=1)

    def test_clone(self):
        other = self.fun.clone()
        assert other is not self.fun
        assert np.array_equal(other.evaluate(self.pt), self.fun.evaluate(self.pt))


class TestComputeMap:
    """测试参数映射数据"""

    def test_flat_surface(self):
        data = BilinearPatch.unit_square().compute_map([[0.5], [0.25]])
        assert isinstance(data, MapData)
        sample = data.sample(0)
        assert np.allclose(sample.position, [0.5, 0.25, 0.0])
        assert np.allclose(sample.jacobian, [[1, 0], [0, 1], [0, 0]])
        assert np.allclose(sample.normal, [0, 0, 1])

    def test_normal_is_unit(self):
        patch = BilinearPatch([[0, 0, 0], [2, 0, 0], [2, 3, 0], [0, 3, 0]])
        data = patch.compute_map([[0.3], [0.3]])
        assert np.isclose(np.linalg.norm(data.normal(0)), 1.0)

    def test_planar_curve_normal(self):
        curve = ExpressionFunction("2*x", "0", domain_dim=1)
        data = curve.compute_map([[0.5]])
        assert np.allclose(data.normal(0), [0.0, -1.0])

    def test_no_normal_for_volume_map(self):
        data = ExpressionFunction("x", "y", domain_dim=2).compute_map([0.1, 0.2])
        assert data.normals is None
        with pytest.raises(ValueError):
            data.normal(0)


class TestNewtonRaphson:
    """测试逆映射"""

    def test_invert_bilinear_patch(self):
        patch = BilinearPatch([[0, 0], [2, 0], [2.5, 1.5], [0, 1]])
        target = patch.evaluate([0.3, 0.6])[:, 0]
        arg = patch.newton_raphson(target, [0.5, 0.5], accuracy=1e-12)
        assert np.allclose(arg, [0.3, 0.6], atol=1e-10)

    def test_no_convergence(self):
        fun = ExpressionFunction("x^2 + 1", domain_dim=1)
        with pytest.raises(NumericalFailure):
            fun.newton_raphson([0.0], [0.5], max_loop=20)

    def test_value_size_mismatch(self):
        fun = ExpressionFunction("x", domain_dim=1)
        with pytest.raises(DomainMismatchError):
            fun.newton_raphson([0.0, 1.0], [0.5])


class TestCloneAndPieces:
    """测试复制与多片访问"""

    def test_clone_is_independent(self):
        fun = ConstantFunction(3.0, domain_dim=1)
        other = fun.clone()
        assert other is not fun
        assert np.array_equal(other.evaluate([[1.0]]), fun.evaluate([[1.0]]))

    def test_single_piece(self):
        fun = _Polynomial()
        assert fun.num_pieces == 1
        assert fun.piece(0) is fun
        with pytest.raises(IndexError):
            fun.piece(1)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
