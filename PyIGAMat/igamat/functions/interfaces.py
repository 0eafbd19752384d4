# 文件: PyIGAMat/igamat/functions/interfaces.py
"""
可求值函数核心接口

设计原则:
1. EvaluableFunction: 从 d 维参数域到 m 维值空间的函数的抽象基类
   - 求值 (_evaluate) 必须实现
   - 一阶/二阶导数可覆盖为解析实现，否则使用中心差分
2. FunctionSet: 多片 (multi-patch) 函数集合的协议，使用鸭子类型
3. 点集统一为 (d, n) 矩阵，每一列是一个点，输出的第 i 列对应第 i 个输入点
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import List, Protocol, Tuple, runtime_checkable

import numpy as np

from ..constants import FD_STEP
from ..exceptions import DomainMismatchError, NumericalFailure, UnsupportedOperationError
from .map_data import MapData

logger = logging.getLogger(__name__)


def as_points(points, dim: int = None) -> np.ndarray:
    """
    将输入转换为 (d, n) 点矩阵

    标量视为一个一维点，一维数组视为单个点 (一列)。

    Args:
        points: 点坐标 (标量、一维数组或 (d, n) 矩阵)
        dim: 期望的行数 (定义域维数)，None 表示不检查

    Raises:
        DomainMismatchError: 维数不匹配
    """
    u = np.asarray(points, dtype=float)
    if u.ndim == 0:
        u = u.reshape(1, 1)
    elif u.ndim == 1:
        u = u.reshape(-1, 1)
    elif u.ndim != 2:
        raise DomainMismatchError(f"Points must be given as a (d, n) matrix, got shape {u.shape}")

    if dim is not None and u.shape[0] != dim:
        raise DomainMismatchError(
            f"Points have {u.shape[0]} rows but the domain dimension is {dim}"
        )
    return u


def second_derivative_pairs(dim: int) -> List[Tuple[int, int]]:
    """
    二阶导数的排列顺序: 先纯导数 (xx, yy, zz)，再混合导数 (xy, xz, yz)
    """
    pairs = [(k, k) for k in range(dim)]
    pairs += [(k, l) for k in range(dim) for l in range(k + 1, dim)]
    return pairs


class EvaluableFunction(ABC):
    """
    可求值函数抽象基类

    所有函数都必须实现:
    - domain_dim: 定义域维数 d
    - target_dim: 值空间维数 m
    - _evaluate(): 在已校验的 (d, n) 点矩阵上求值，返回 (m, n)

    可选覆盖:
    - _derivative(): 一阶导数，缺省为中心差分
    - _second_derivative(): 二阶导数，缺省为中心差分
    - clone(): 缺省为深拷贝
    - piece(): 多片定义域上的限制，缺省返回自身

    缺省导数使用固定步长 fd_step 的中心差分，调用者不应期望比该步长下
    截断误差与舍入误差的折中更高的精度。

    Example:
        f = ExpressionFunction("x*y", "x^2", domain_dim=2)
        values = f.evaluate([[0.1, 0.2], [0.3, 0.4]])   # (2, 2)
        grads = f.derivative([[0.1], [0.3]])            # (4, 1)
    """

    # 为 False 且未覆盖导数钩子时，导数请求抛出 UnsupportedOperationError
    finite_differences = True
    fd_step = FD_STEP

    @property
    @abstractmethod
    def domain_dim(self) -> int:
        """定义域维数 d"""
        pass

    @property
    @abstractmethod
    def target_dim(self) -> int:
        """值空间维数 m"""
        pass

    @abstractmethod
    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        """
        在点 u 上求值

        Args:
            u: 已校验的点矩阵 (d, n)，n >= 1

        Returns:
            结果矩阵 (m, n)
        """
        pass

    # ------------------------------------------------------------------
    # 求值
    # ------------------------------------------------------------------

    def evaluate(self, points) -> np.ndarray:
        """
        在点集上求值

        Args:
            points: 点矩阵 (d, n)

        Returns:
            结果矩阵 (m, n)，空点集返回 (m, 0)

        Raises:
            DomainMismatchError: 点的行数不等于 domain_dim
        """
        u = as_points(points, self.domain_dim)
        if u.shape[1] == 0:
            return np.zeros((self.target_dim, 0))
        return self._checked(self._evaluate(u), self.target_dim, u.shape[1])

    def eval_component(self, points, comp: int) -> np.ndarray:
        """只返回第 comp 个分量，形状 (1, n)"""
        if not 0 <= comp < self.target_dim:
            raise IndexError(f"Component {comp} out of range for target dimension {self.target_dim}")
        return self.evaluate(points)[comp:comp + 1, :]

    def derivative(self, points) -> np.ndarray:
        """
        一阶导数

        Returns:
            (m*d, n) 矩阵，按分量分组: [∂1 f1, ∂2 f1, ..., ∂1 f2, ...]
        """
        u = as_points(points, self.domain_dim)
        rows = self.target_dim * self.domain_dim
        if u.shape[1] == 0:
            return np.zeros((rows, 0))
        return self._checked(self._derivative(u), rows, u.shape[1])

    def second_derivative(self, points) -> np.ndarray:
        """
        二阶导数

        Returns:
            (S*m, n) 矩阵，S = d(d+1)/2；每个分量先纯导数后混合导数
        """
        u = as_points(points, self.domain_dim)
        d = self.domain_dim
        rows = self.target_dim * d * (d + 1) // 2
        if u.shape[1] == 0:
            return np.zeros((rows, 0))
        return self._checked(self._second_derivative(u), rows, u.shape[1])

    def jacobian(self, points) -> np.ndarray:
        """逐点雅可比矩阵 (n, m, d)"""
        u = as_points(points, self.domain_dim)
        der = self.derivative(u)
        return der.reshape(self.target_dim, self.domain_dim, u.shape[1]).transpose(2, 0, 1)

    def hessian(self, points, coord: int = 0) -> np.ndarray:
        """分量 coord 的逐点 Hessian 矩阵 (n, d, d)"""
        if not 0 <= coord < self.target_dim:
            raise IndexError(f"Component {coord} out of range for target dimension {self.target_dim}")
        u = as_points(points, self.domain_dim)
        d, n = self.domain_dim, u.shape[1]
        pairs = second_derivative_pairs(d)
        d2 = self.second_derivative(u).reshape(self.target_dim, len(pairs), n)[coord]

        H = np.zeros((n, d, d))
        for s, (k, l) in enumerate(pairs):
            H[:, k, l] = d2[s]
            H[:, l, k] = d2[s]
        return H

    def laplacian(self, points) -> np.ndarray:
        """拉普拉斯算子 (纯二阶导数之和)，形状 (m, n)"""
        u = as_points(points, self.domain_dim)
        d, n = self.domain_dim, u.shape[1]
        S = d * (d + 1) // 2
        d2 = self.second_derivative(u).reshape(self.target_dim, S, n)
        return d2[:, :d, :].sum(axis=1)

    # ------------------------------------------------------------------
    # 缺省导数实现 (中心差分)
    # ------------------------------------------------------------------

    def _derivative(self, u: np.ndarray) -> np.ndarray:
        if not self.finite_differences:
            raise UnsupportedOperationError(
                f"{type(self).__name__} provides no derivative and finite differences are disabled"
            )
        d, n = u.shape
        h = self.fd_step
        grads = np.empty((self.target_dim, d, n))
        for k in range(d):
            grads[:, k, :] = (
                self.evaluate(self._shifted(u, {k: h}))
                - self.evaluate(self._shifted(u, {k: -h}))
            ) / (2.0 * h)
        return grads.reshape(self.target_dim * d, n)

    def _second_derivative(self, u: np.ndarray) -> np.ndarray:
        if not self.finite_differences:
            raise UnsupportedOperationError(
                f"{type(self).__name__} provides no second derivative and finite differences are disabled"
            )
        d, n = u.shape
        h = self.fd_step
        pairs = second_derivative_pairs(d)
        f0 = self.evaluate(u)

        out = np.empty((self.target_dim, len(pairs), n))
        for s, (k, l) in enumerate(pairs):
            if k == l:
                out[:, s, :] = (
                    self.evaluate(self._shifted(u, {k: h}))
                    - 2.0 * f0
                    + self.evaluate(self._shifted(u, {k: -h}))
                ) / (h * h)
            else:
                out[:, s, :] = (
                    self.evaluate(self._shifted(u, {k: h, l: h}))
                    - self.evaluate(self._shifted(u, {k: h, l: -h}))
                    - self.evaluate(self._shifted(u, {k: -h, l: h}))
                    + self.evaluate(self._shifted(u, {k: -h, l: -h}))
                ) / (4.0 * h * h)
        return out.reshape(self.target_dim * len(pairs), n)

    @staticmethod
    def _shifted(u: np.ndarray, shifts: dict) -> np.ndarray:
        v = u.copy()
        for k, h in shifts.items():
            v[k, :] += h
        return v

    @staticmethod
    def _checked(result, rows: int, cols: int) -> np.ndarray:
        result = np.asarray(result, dtype=float)
        if result.shape != (rows, cols):
            raise DomainMismatchError(
                f"Evaluation produced shape {result.shape}, expected {(rows, cols)}"
            )
        return result

    # ------------------------------------------------------------------
    # 参数映射
    # ------------------------------------------------------------------

    def compute_map(self, points) -> MapData:
        """
        计算参数映射数据 (位置、雅可比、单位法向)

        法向只对余维 1 的映射定义: 平面曲线 (d=1, m=2) 和空间曲面 (d=2, m=3)。
        退化点 (切向量线性相关) 处的法向为零向量。
        """
        u = as_points(points, self.domain_dim)
        values = self.evaluate(u)
        jacobians = self.jacobian(u)

        d, m = self.domain_dim, self.target_dim
        normals = None
        if m == d + 1 and d in (1, 2):
            if d == 2:
                normals = np.cross(jacobians[:, :, 0], jacobians[:, :, 1]).T
            else:
                normals = np.stack([jacobians[:, 1, 0], -jacobians[:, 0, 0]])
            norms = np.linalg.norm(normals, axis=0)
            normals = np.divide(normals, norms, out=np.zeros_like(normals), where=norms > 0)

        return MapData(points=u, values=values, jacobians=jacobians, normals=normals)

    # ------------------------------------------------------------------
    # 逆映射
    # ------------------------------------------------------------------

    def newton_raphson(
        self,
        value,
        arg,
        accuracy: float = 1e-6,
        max_loop: int = 100
    ) -> np.ndarray:
        """
        Newton-Raphson 迭代求解 f(arg) = value

        雅可比非方阵时使用最小二乘步。

        Args:
            value: 目标值 (m,)
            arg: 初始参数 (d,)
            accuracy: 残差范数容差
            max_loop: 最大迭代次数

        Returns:
            收敛的参数 (d,)

        Raises:
            NumericalFailure: 不收敛或出现非有限值
        """
        target = np.asarray(value, dtype=float).reshape(-1)
        if target.size != self.target_dim:
            raise DomainMismatchError(
                f"Target value has {target.size} entries, expected {self.target_dim}"
            )
        x = as_points(arg, self.domain_dim)[:, :1].copy()

        for it in range(max_loop):
            residual = target - self.evaluate(x)[:, 0]
            if not np.all(np.isfinite(residual)):
                raise NumericalFailure(f"Non-finite residual in Newton iteration {it}")
            if np.linalg.norm(residual) <= accuracy:
                logger.debug("Newton-Raphson converged after %d iterations", it)
                return x[:, 0]

            J = self.jacobian(x)[0]
            delta, *_ = np.linalg.lstsq(J, residual, rcond=None)
            x[:, 0] += delta

        residual = target - self.evaluate(x)[:, 0]
        if np.linalg.norm(residual) <= accuracy:
            return x[:, 0]
        raise NumericalFailure(
            f"Newton-Raphson did not converge in {max_loop} iterations "
            f"(residual {np.linalg.norm(residual):.3e})"
        )

    # ------------------------------------------------------------------
    # 复制与多片访问
    # ------------------------------------------------------------------

    def clone(self) -> 'EvaluableFunction':
        """独立副本，求值语义相同，不共享可变缓存"""
        return copy.deepcopy(self)

    @property
    def num_pieces(self) -> int:
        return 1

    def piece(self, k: int) -> 'EvaluableFunction':
        """
        第 k 片上的限制

        单片函数只有第 0 片，即自身。
        """
        if k != 0:
            raise IndexError(f"{type(self).__name__} has a single piece, got index {k}")
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(domain_dim={self.domain_dim}, target_dim={self.target_dim})"


@runtime_checkable
class FunctionSet(Protocol):
    """
    函数集合协议 (例如多片几何)

    任何实现了以下成员的类都可以作为材料矩阵的几何输入:
    - piece(k): 第 k 片函数 (EvaluableFunction)
    - num_pieces: 片数
    - domain_dim / target_dim
    """

    @property
    def domain_dim(self) -> int:
        ...

    @property
    def target_dim(self) -> int:
        ...

    @property
    def num_pieces(self) -> int:
        ...

    def piece(self, k: int) -> EvaluableFunction:
        ...
