# 文件: PyIGAMat/igamat/materials/interfaces.py
"""
材料矩阵核心接口定义

设计原则:
1. MaterialMatrix: 所有材料矩阵的抽象基类，值空间固定为展平的 3x3 张量 (9 维)
2. 刚度张量按列优先展平，对称性由构造保证
"""

from abc import abstractmethod

import numpy as np

from ..exceptions import NumericalFailure
from ..functions.interfaces import EvaluableFunction, as_points


class MaterialMatrix(EvaluableFunction):
    """
    材料矩阵抽象基类

    平面应力刚度张量 (Voigt 记号 3x3)，每个点输出展平后的 9 个分量。

    子类必须实现:
    - domain_dim
    - _evaluate(): 返回 (9, n)

    Example:
        C = material.tensors(points)   # (n, 3, 3)
    """

    @property
    def target_dim(self) -> int:
        return 9

    @property
    @abstractmethod
    def domain_dim(self) -> int:
        pass

    def tensors(self, points) -> np.ndarray:
        """逐点刚度张量 (n, 3, 3)"""
        u = as_points(points, self.domain_dim)
        result = self.evaluate(u)
        # 每列按列优先还原
        return result.T.reshape(-1, 3, 3).transpose(0, 2, 1)

    @staticmethod
    def _check_finite(result: np.ndarray, name: str) -> np.ndarray:
        if not np.all(np.isfinite(result)):
            raise NumericalFailure(f"{name} produced non-finite stiffness values")
        return result


# =============================================================================
# 辅助函数
# =============================================================================

def flatten_tensor(C: np.ndarray) -> np.ndarray:
    """将 3x3 张量按列优先展平为 (9,) 向量"""
    C = np.asarray(C, dtype=float)
    if C.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 tensor, got shape {C.shape}")
    return C.reshape(-1, order='F')


def unflatten_tensor(column: np.ndarray) -> np.ndarray:
    """将 (9,) 向量还原为 3x3 张量 (列优先)"""
    column = np.asarray(column, dtype=float)
    if column.size != 9:
        raise ValueError(f"Expected 9 entries, got {column.size}")
    return column.reshape(3, 3, order='F')


def symmetric_tensor(c00, c11, c22, c01, c02, c12) -> np.ndarray:
    """由 6 个独立分量构造对称 3x3 张量"""
    return np.array([
        [c00, c01, c02],
        [c01, c11, c12],
        [c02, c12, c22]
    ], dtype=float)
