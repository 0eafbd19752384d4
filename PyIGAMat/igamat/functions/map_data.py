# 文件: PyIGAMat/igamat/functions/map_data.py
"""
参数映射数据

MapData: 参数映射在一组点上的求值结果 (位置、雅可比矩阵、单位法向)
ParametricMapSample: 单个点的只读数据元组
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional
import numpy as np


class ParametricMapSample(NamedTuple):
    """单个参数点处的映射数据 (只读)"""
    position: np.ndarray
    jacobian: np.ndarray
    normal: Optional[np.ndarray]


@dataclass
class MapData:
    """
    参数映射数据容器

    由 EvaluableFunction.compute_map() 生成，每次调用新建，归调用者所有。

    Attributes:
        points: 参数点 (d, n)
        values: 物理位置 (D, n)
        jacobians: 雅可比矩阵 (n, D, d)
        normals: 单位法向 (D, n)，仅对余维 1 的映射 (平面曲线、空间曲面) 定义

    Example:
        data = surface.compute_map(points)
        J = data.jacobian(0)      # 第 0 个点的 (3, 2) 雅可比
        n = data.normal(0)        # 第 0 个点的单位法向
    """

    points: np.ndarray
    values: np.ndarray
    jacobians: np.ndarray
    normals: Optional[np.ndarray] = field(default=None)

    @property
    def num_points(self) -> int:
        return self.points.shape[1]

    def jacobian(self, i: int) -> np.ndarray:
        return self.jacobians[i]

    def normal(self, i: int) -> np.ndarray:
        if self.normals is None:
            raise ValueError("Normals are only defined for maps of codimension one")
        return self.normals[:, i]

    def sample(self, i: int) -> ParametricMapSample:
        """第 i 个点的 (位置, 雅可比, 法向) 元组"""
        normal = None if self.normals is None else self.normals[:, i].copy()
        return ParametricMapSample(
            position=self.values[:, i].copy(),
            jacobian=self.jacobians[i].copy(),
            normal=normal,
        )

    def copy(self) -> 'MapData':
        """深拷贝"""
        return MapData(
            points=self.points.copy(),
            values=self.values.copy(),
            jacobians=self.jacobians.copy(),
            normals=None if self.normals is None else self.normals.copy(),
        )

    def __repr__(self) -> str:
        return f"MapData(n={self.num_points}, dim={self.values.shape[0]})"
