# 文件: PyIGAMat/igamat/functions/lift.py
"""
厚度方向提升

ZCoordinateLift: 固定面内点，把 d 维函数视为厚度坐标 z 的一维函数
"""

import numpy as np

from ..exceptions import DomainMismatchError
from .interfaces import EvaluableFunction, as_points


class ZCoordinateLift(EvaluableFunction):
    """
    厚度坐标提升函数

    g(z) = f(p, z)，其中 p 为通过 set_point() 固定的 (d-1) 维面内点。
    每次求值都在调用内部构造 (d, n) 坐标矩阵: 前 d-1 行为重复的 p，
    最后一行为 z，然后委托给内部函数。

    同一实例不能在多个线程中以不同的点并发使用。

    Example:
        lift = ZCoordinateLift(f)          # f: 3 维定义域
        lift.set_point([0.25, 0.25])
        lift.evaluate([[0.1, 0.2]])        # = f([[.25, .25], [.25, .25], [.1, .2]])
    """

    def __init__(self, function: EvaluableFunction, point=None, copy: bool = True):
        """
        Args:
            function: 内部函数
            point: 初始面内点，缺省为空 (适用于一维内部函数)
            copy: True 时持有内部函数的副本；False 时直接引用，
                  调用者须保证该函数不被其他对象修改
        """
        self._fun = function.clone() if copy else function
        self._point = np.zeros(0)
        if point is not None:
            self.set_point(point)

    @property
    def domain_dim(self) -> int:
        return 1

    @property
    def target_dim(self) -> int:
        return self._fun.target_dim

    @property
    def function(self) -> EvaluableFunction:
        return self._fun

    def set_point(self, in_plane) -> None:
        """
        设置固定的面内点

        Args:
            in_plane: 一个面内点，一维数组或 (d-1, 1) 矩阵
        """
        p = as_points(in_plane)
        if p.shape[1] != 1:
            raise DomainMismatchError(
                f"Exactly one in-plane point is accepted, got {p.shape[1]}"
            )
        self._point = p[:, 0].copy()

    def point(self) -> np.ndarray:
        return self._point.copy()

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        m = self._point.size
        if self._fun.domain_dim != m + 1:
            raise DomainMismatchError(
                f"Inner domain dimension {self._fun.domain_dim} does not match "
                f"in-plane point length + 1 = {m + 1}"
            )
        n = u.shape[1]
        lifted = np.empty((m + 1, n))
        lifted[:m, :] = self._point[:, None]
        lifted[m, :] = u[0]
        return self._fun.evaluate(lifted)

    def clone(self) -> 'ZCoordinateLift':
        return ZCoordinateLift(self._fun, self._point)

    def __repr__(self) -> str:
        return f"ZCoordinateLift({self._fun!r}, point={self._point.tolist()})"
