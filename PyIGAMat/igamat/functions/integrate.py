# 文件: PyIGAMat/igamat/functions/integrate.py
"""
厚度方向积分

把 "曲面 + 厚度坐标" 上的被积函数沿局部厚度坐标积分，得到纯曲面场:
- ThicknessIntegrator: 固定厚度
- VariableThicknessIntegrator: 厚度为面内坐标的函数

算法 (每个输入点):
1. 确定局部厚度 t
2. 构造一维积分区间 [-t/2, +t/2]
3. 用 ZCoordinateLift 在该点提升被积函数
4. 按 QuadratureRule 积分所有分量
5. 写入 result[:, j]

被积函数求值失败时整个调用失败，不返回部分结果；积分结果非有限时抛出 NumericalFailure。

积分规则是配置参数，接受由此带来的近似误差。每个点重新构造积分区间，
实现简单，不针对重复求值优化。
"""

import logging
from abc import abstractmethod
from typing import Optional

import numpy as np

from ..exceptions import DomainMismatchError, NumericalFailure
from ..quadrature import QuadratureRule
from .interfaces import EvaluableFunction
from .lift import ZCoordinateLift

logger = logging.getLogger(__name__)


class _ThroughThicknessIntegral(EvaluableFunction):
    """
    厚度积分的公共部分

    子类只需提供 _thickness(u) -> (n,) 逐点厚度。
    提升函数在每次调用内部新建，实例不保存调用间的可变缓存。
    """

    def __init__(self, function: EvaluableFunction, rule: Optional[QuadratureRule] = None):
        if function.domain_dim < 1:
            raise DomainMismatchError(
                f"Integrand needs at least one (thickness) coordinate, got domain dimension {function.domain_dim}"
            )
        self._fun = function.clone()
        self.rule = rule if rule is not None else QuadratureRule()

    @property
    def domain_dim(self) -> int:
        return self._fun.domain_dim - 1

    @property
    def target_dim(self) -> int:
        return self._fun.target_dim

    @property
    def function(self) -> EvaluableFunction:
        return self._fun

    @abstractmethod
    def _thickness(self, u: np.ndarray) -> np.ndarray:
        pass

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        n = u.shape[1]
        thickness = self._thickness(u)
        if np.any(thickness <= 0):
            logger.warning(
                "%s: non-positive thickness at %d of %d points, integrating over a degenerate interval",
                type(self).__name__, int(np.sum(thickness <= 0)), n
            )

        integrand = ZCoordinateLift(self._fun, copy=False)
        result = np.empty((self.target_dim, n))
        for j in range(n):
            half = thickness[j] / 2.0
            integrand.set_point(u[:, j])
            result[:, j] = self.rule.integrate(integrand, -half, half)

        if not np.all(np.isfinite(result)):
            bad = int(np.sum(~np.all(np.isfinite(result), axis=0)))
            raise NumericalFailure(
                f"{type(self).__name__} produced non-finite integrals at {bad} of {n} points"
            )

        logger.debug(
            "%s: integrated %d components at %d points (order=%d, intervals=%d)",
            type(self).__name__, self.target_dim, n, self.rule.order, self.rule.intervals
        )
        return result


class ThicknessIntegrator(_ThroughThicknessIntegral):
    """
    固定厚度积分

    F(p) = ∫_{-t/2}^{t/2} f(p, z) dz

    被积函数 f 的定义域为 d 维，本函数的定义域为 d-1 维。
    一维被积函数 (只有厚度坐标) 对应零维定义域，输入点为 (0, n) 矩阵。

    t <= 0 不做检查: t = 0 积分为零，t < 0 得到反向 (有向) 积分。

    Example:
        integrator = ThicknessIntegrator(material_matrix, thickness=0.01)
        A = integrator.evaluate(surface_points)    # (9, n)
    """

    def __init__(
        self,
        function: EvaluableFunction,
        thickness: float,
        rule: Optional[QuadratureRule] = None
    ):
        """
        Args:
            function: 被积函数 (最后一个坐标为厚度坐标)
            thickness: 厚度 t
            rule: 厚度方向积分规则，缺省为 QuadratureRule()
        """
        super().__init__(function, rule)
        self.thickness = float(thickness)

    def _thickness(self, u: np.ndarray) -> np.ndarray:
        return np.full(u.shape[1], self.thickness)

    def clone(self) -> 'ThicknessIntegrator':
        return ThicknessIntegrator(self._fun, self.thickness, self.rule)

    def __repr__(self) -> str:
        return f"ThicknessIntegrator({self._fun!r}, thickness={self.thickness})"


class VariableThicknessIntegrator(_ThroughThicknessIntegral):
    """
    变厚度积分

    F(p) = ∫_{-t(p)/2}^{t(p)/2} f(p, z) dz

    厚度场 t 在每个点只求值一次，然后构造该点的积分区间。

    Example:
        t = ExpressionFunction("0.01 + 0.005*x", domain_dim=2)
        integrator = VariableThicknessIntegrator(material_matrix, t)
    """

    def __init__(
        self,
        function: EvaluableFunction,
        thickness: EvaluableFunction,
        rule: Optional[QuadratureRule] = None
    ):
        """
        Args:
            function: 被积函数 (最后一个坐标为厚度坐标)
            thickness: 标量厚度场，定义域为面内参数域
            rule: 厚度方向积分规则

        Raises:
            DomainMismatchError: 厚度场维数与被积函数面内维数不符，或不是标量场
        """
        super().__init__(function, rule)
        if thickness.domain_dim != function.domain_dim - 1:
            raise DomainMismatchError(
                f"Thickness field domain dimension {thickness.domain_dim} does not match "
                f"the in-plane dimension {function.domain_dim - 1}"
            )
        if thickness.target_dim != 1:
            raise DomainMismatchError(
                f"Thickness field must be scalar, got target dimension {thickness.target_dim}"
            )
        self._t = thickness.clone()

    @property
    def thickness(self) -> EvaluableFunction:
        return self._t

    def _thickness(self, u: np.ndarray) -> np.ndarray:
        return self._t.evaluate(u)[0]

    def clone(self) -> 'VariableThicknessIntegrator':
        return VariableThicknessIntegrator(self._fun, self._t, self.rule)

    def __repr__(self) -> str:
        return f"VariableThicknessIntegrator({self._fun!r}, thickness={self._t!r})"
