import logging
from typing import Iterable, List

import numpy as np

from .exceptions import ConfigurationError
from .functions.interfaces import EvaluableFunction

logger = logging.getLogger(__name__)


class BilinearPatch(EvaluableFunction):
    """
    双线性参数曲面片

    参数域 [0,1]^2，角点按 (0,0), (1,0), (1,1), (0,1) 逆时针给出:
    x(u, v) = Σ N_a(u, v) P_a

    即一次 B 样条正方形片，嵌入二维或三维空间。导数为解析实现。
    """

    def __init__(self, corners):
        """
        Args:
            corners: 角点坐标 (4, D)，D = 2 或 3
        """
        P = np.asarray(corners, dtype=float)
        if P.ndim != 2 or P.shape[0] != 4 or P.shape[1] not in (2, 3):
            raise ConfigurationError(f"Expected 4 corner points in 2D or 3D, got shape {P.shape}")
        self.corners = P

    @classmethod
    def unit_square(cls, embed_dim: int = 3) -> 'BilinearPatch':
        """单位正方形片 (嵌入三维时位于 z = 0 平面)"""
        corners = np.zeros((4, embed_dim))
        corners[:, :2] = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]
        return cls(corners)

    @property
    def domain_dim(self) -> int:
        return 2

    @property
    def target_dim(self) -> int:
        return self.corners.shape[1]

    def _calc_shape_functions(self, u, v):
        """
        计算参数坐标 (u, v) 处的双线性形函数。

        Returns:
            N: 形函数 (4, n)
            dN: 对 (u, v) 的导数 (2, 4, n)
        """
        um, vm = 1 - u, 1 - v

        N = np.array([um * vm, u * vm, u * v, um * v])

        dN = np.empty((2, 4, u.size))
        dN[0] = [-vm, vm, v, -v]
        dN[1] = [-um, -u, u, um]
        return N, dN

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        N, _ = self._calc_shape_functions(u[0], u[1])
        return self.corners.T @ N

    def _derivative(self, u: np.ndarray) -> np.ndarray:
        _, dN = self._calc_shape_functions(u[0], u[1])
        n = u.shape[1]
        # (D, 2, n): 每个分量对 u, v 的导数
        grads = np.einsum('ad,kan->dkn', self.corners, dN)
        return grads.reshape(self.target_dim * 2, n)

    def _second_derivative(self, u: np.ndarray) -> np.ndarray:
        n = u.shape[1]
        # 只有混合导数 ∂uv 非零
        P = self.corners
        d2 = np.zeros((self.target_dim, 3, n))
        d2[:, 2, :] = (P[0] - P[1] + P[2] - P[3])[:, None]
        return d2.reshape(self.target_dim * 3, n)

    def __repr__(self) -> str:
        return f"BilinearPatch(corners={self.corners.tolist()})"


class MultiPatch:
    """
    多片几何

    有序的参数片集合，piece(k) 返回第 k 片。满足 FunctionSet 协议，
    可作为材料矩阵的几何输入。

    Example:
        mp = MultiPatch([BilinearPatch.unit_square()])
        mp.add_patch(BilinearPatch(corners))
        mp.piece(1).compute_map(points)
    """

    def __init__(self, patches: Iterable[EvaluableFunction] = ()):
        self._patches: List[EvaluableFunction] = []
        for patch in patches:
            self.add_patch(patch)

    def add_patch(self, patch: EvaluableFunction) -> int:
        """添加一片，返回其索引"""
        if self._patches:
            first = self._patches[0]
            if (patch.domain_dim, patch.target_dim) != (first.domain_dim, first.target_dim):
                raise ConfigurationError(
                    f"Patch dimensions ({patch.domain_dim}, {patch.target_dim}) differ from "
                    f"({first.domain_dim}, {first.target_dim})"
                )
        self._patches.append(patch)
        logger.debug("Added patch %d: %r", len(self._patches) - 1, patch)
        return len(self._patches) - 1

    @property
    def num_pieces(self) -> int:
        return len(self._patches)

    @property
    def domain_dim(self) -> int:
        return self._first().domain_dim

    @property
    def target_dim(self) -> int:
        return self._first().target_dim

    def piece(self, k: int) -> EvaluableFunction:
        if not 0 <= k < len(self._patches):
            raise IndexError(f"Patch index {k} out of range for {len(self._patches)} patches")
        return self._patches[k]

    def _first(self) -> EvaluableFunction:
        if not self._patches:
            raise ConfigurationError("MultiPatch has no patches")
        return self._patches[0]

    def __len__(self) -> int:
        return len(self._patches)

    def __repr__(self) -> str:
        return f"MultiPatch(num_pieces={self.num_pieces})"
