import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.special import roots_legendre

from .constants import DEFAULT_QUADRATURE_INTERVALS, DEFAULT_QUADRATURE_ORDER
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Quadrature:
    """
    数值积分模块
    负责生成一维高斯积分点 (Gauss-Legendre integration points) 和权重。
    """

    @staticmethod
    def get_points(order):
        """
        根据积分阶数返回 [-1, 1] 上的积分点坐标和权重。

        Args:
            order (int): 积分点的数量 (>= 1)

        Returns:
            points (np.array): 局部坐标 ξ 的位置列表
            weights (np.array): 对应的权重列表
        """
        if order < 1:
            raise ConfigurationError(f"Integration order {order} not supported.")

        points, weights = roots_legendre(order)
        return np.asarray(points, dtype=float), np.asarray(weights, dtype=float)


@dataclass(frozen=True)
class QuadratureRule:
    """
    一维复合 Gauss 积分规则

    将积分区间等分为 intervals 段，每段使用 order 个 Gauss 点。
    积分规则是配置参数，而不是由被积函数推导，近似误差由调用者控制。

    Attributes:
        order: 每段的 Gauss 点数
        intervals: 等分段数

    Example:
        rule = QuadratureRule(order=3, intervals=2)
        value = rule.integrate(f, -0.5, 0.5)   # f 为一维 EvaluableFunction
    """

    order: int = DEFAULT_QUADRATURE_ORDER
    intervals: int = DEFAULT_QUADRATURE_INTERVALS

    def __post_init__(self):
        if int(self.order) != self.order or self.order < 1:
            raise ConfigurationError(f"Quadrature order must be a positive integer, got {self.order}")
        if int(self.intervals) != self.intervals or self.intervals < 1:
            raise ConfigurationError(
                f"Number of quadrature intervals must be a positive integer, got {self.intervals}"
            )

    def nodes(self, lower: float, upper: float):
        """
        区间 [lower, upper] 上的积分点与权重

        上下限颠倒时权重为负 (有向积分)，零长度区间的权重全为零。

        Returns:
            points: (1, order*intervals)
            weights: (order*intervals,)
        """
        xi, w = Quadrature.get_points(self.order)
        breaks = np.linspace(lower, upper, self.intervals + 1)
        half = 0.5 * np.diff(breaks)
        mid = 0.5 * (breaks[:-1] + breaks[1:])

        points = (mid[:, None] + half[:, None] * xi[None, :]).reshape(1, -1)
        weights = (half[:, None] * w[None, :]).reshape(-1)
        return points, weights

    def integrate(self, function, lower: float, upper: float, component: Optional[int] = None):
        """
        在一维区间上积分

        被积函数在所有积分点上一次性求值，按权重求和。

        Args:
            function: 定义域为一维的 EvaluableFunction
            lower, upper: 积分上下限
            component: 指定分量，None 返回全部分量

        Returns:
            标量 (指定分量) 或 (m,) 向量
        """
        points, weights = self.nodes(lower, upper)
        values = function.evaluate(points)
        integral = values @ weights
        if component is None:
            return integral
        return float(integral[component])
