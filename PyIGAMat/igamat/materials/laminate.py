# 文件: PyIGAMat/igamat/materials/laminate.py
"""
复合材料层合板刚度

提供:
- Ply: 单层 (正交各向异性) 参数
- LaminateStiffnessMatrix: 经典层合板理论的面内刚度 (A 项)

只计算面内 A 项，不包含耦合 (B) 与弯曲 (D) 项。
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from ..constants import RECIPROCITY_RTOL, THICKNESS_RTOL
from ..exceptions import ConfigurationError, NumericalFailure
from .interfaces import MaterialMatrix, flatten_tensor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ply:
    """
    单层参数 (不可变)

    Attributes:
        E1: 纤维方向杨氏模量
        E2: 横向杨氏模量
        shear_modulus: 面内剪切模量 G12
        nu12: 主泊松比
        nu21: 次泊松比，需满足 nu21*E1 == nu12*E2
        thickness: 单层厚度
        fiber_angle: 纤维角 (弧度)，从层合板 x 轴逆时针量取
    """

    E1: float
    E2: float
    shear_modulus: float
    nu12: float
    nu21: float
    thickness: float
    fiber_angle: float = 0.0

    def check_reciprocity(self, rtol: float = RECIPROCITY_RTOL) -> None:
        """
        检查互易关系 nu21*E1 == nu12*E2

        Raises:
            ConfigurationError: 超出容差
        """
        lhs = self.nu21 * self.E1
        rhs = self.nu12 * self.E2
        if not np.isclose(lhs, rhs, rtol=rtol, atol=0.0):
            raise ConfigurationError(
                "No symmetry in material properties, nu12*E2 != nu21*E1: "
                f"nu12 = {self.nu12}, E2 = {self.E2}, nu12*E2 = {rhs}; "
                f"nu21 = {self.nu21}, E1 = {self.E1}, nu21*E1 = {lhs}"
            )

    def local_stiffness(self) -> np.ndarray:
        """
        材料主轴下的正交各向异性平面应力刚度 Dmat (3x3)

        | E1/Δ       nu21*E1/Δ  0   |
        | nu12*E2/Δ  E2/Δ       0   |
        | 0          0          G12 |

        其中 Δ = 1 - nu12*nu21
        """
        delta = 1.0 - self.nu12 * self.nu21
        D = np.zeros((3, 3))
        D[0, 0] = self.E1 / delta
        D[1, 1] = self.E2 / delta
        D[2, 2] = self.shear_modulus
        D[0, 1] = self.nu21 * self.E1 / delta
        D[1, 0] = self.nu12 * self.E2 / delta
        return D

    def transformation(self) -> np.ndarray:
        """
        应力变换矩阵 Tmat (3x3)

        | c²      s²     sc      |
        | s²      c²     -sc     |
        | -2sc    2sc    c² - s² |
        """
        c = np.cos(self.fiber_angle)
        s = np.sin(self.fiber_angle)
        return np.array([
            [c * c, s * s, s * c],
            [s * s, c * c, -s * c],
            [-2.0 * s * c, 2.0 * s * c, c * c - s * s]
        ])

    def rotated_stiffness(self) -> np.ndarray:
        """层合板坐标下的刚度 Tᵀ D T"""
        T = self.transformation()
        return T.T @ self.local_stiffness() @ T


class LaminateStiffnessMatrix(MaterialMatrix):
    """
    层合板面内刚度矩阵 (经典层合板理论 A 项)

    A = Σ_i t_i · T_iᵀ D_i T_i

    按铺层顺序 (从一个表面到另一个表面) 累加。结果与面内位置无关，
    输入点只决定输出的列数。

    铺层参数在求值时校验: 序列长度一致、非空、每层满足互易关系。

    Example:
        lam = LaminateStiffnessMatrix(
            youngs_moduli=[(300.0, 200.0)],
            shear_moduli=[100.0],
            poisson_ratios=[(0.3, 0.2)],
            thicknesses=[0.1],
            fiber_angles=[np.pi / 2],
        )
        A = lam.stiffness()               # (3, 3)
        result = lam.evaluate(points)     # (9, n)
    """

    def __init__(
        self,
        youngs_moduli: Sequence[Tuple[float, float]],
        shear_moduli: Sequence[float],
        poisson_ratios: Sequence[Tuple[float, float]],
        thicknesses: Sequence[float],
        fiber_angles: Sequence[float]
    ):
        """
        Args:
            youngs_moduli: 每层 (E1, E2)
            shear_moduli: 每层 G12
            poisson_ratios: 每层 (nu12, nu21)
            thicknesses: 每层厚度
            fiber_angles: 每层纤维角 (弧度)
        """
        self._youngs_moduli = tuple(tuple(float(x) for x in e) for e in youngs_moduli)
        self._shear_moduli = tuple(float(g) for g in shear_moduli)
        self._poisson_ratios = tuple(tuple(float(x) for x in nu) for nu in poisson_ratios)
        self._thicknesses = tuple(float(t) for t in thicknesses)
        self._fiber_angles = tuple(float(phi) for phi in fiber_angles)

    @classmethod
    def from_plies(cls, plies: Iterable[Ply]) -> 'LaminateStiffnessMatrix':
        plies = list(plies)
        return cls(
            youngs_moduli=[(p.E1, p.E2) for p in plies],
            shear_moduli=[p.shear_modulus for p in plies],
            poisson_ratios=[(p.nu12, p.nu21) for p in plies],
            thicknesses=[p.thickness for p in plies],
            fiber_angles=[p.fiber_angle for p in plies],
        )

    @property
    def domain_dim(self) -> int:
        return 2

    @property
    def total_thickness(self) -> float:
        return float(sum(self._thicknesses))

    def plies(self) -> Tuple[Ply, ...]:
        """
        校验并返回铺层序列

        Raises:
            ConfigurationError: 序列长度不一致、空铺层、互易关系不满足
        """
        sizes = {
            'Young\'s moduli': len(self._youngs_moduli),
            'shear moduli': len(self._shear_moduli),
            'Poisson ratios': len(self._poisson_ratios),
            'thicknesses': len(self._thicknesses),
            'fiber angles': len(self._fiber_angles),
        }
        if len(set(sizes.values())) != 1:
            logger.error("Inconsistent laminate definition: %s", sizes)
            raise ConfigurationError(f"Sizes of the ply property sequences are not equal: {sizes}")
        if sizes['thicknesses'] == 0:
            raise ConfigurationError("No plies defined")

        for name, values in (('Young\'s moduli', self._youngs_moduli),
                             ('Poisson ratios', self._poisson_ratios)):
            if any(len(v) != 2 for v in values):
                raise ConfigurationError(f"Every entry of the {name} must be a pair")

        plies = tuple(
            Ply(E1=E[0], E2=E[1], shear_modulus=G, nu12=nu[0], nu21=nu[1],
                thickness=t, fiber_angle=phi)
            for E, G, nu, t, phi in zip(self._youngs_moduli, self._shear_moduli,
                                        self._poisson_ratios, self._thicknesses,
                                        self._fiber_angles)
        )
        for i, ply in enumerate(plies):
            try:
                ply.check_reciprocity()
            except ConfigurationError as exc:
                logger.error("Ply %d violates the reciprocal relation", i)
                raise ConfigurationError(f"Ply {i}: {exc}") from exc
        return plies

    def stiffness(self) -> np.ndarray:
        """
        面内刚度 A (3x3)

        Raises:
            ConfigurationError: 铺层定义无效
            NumericalFailure: 厚度累加一致性检查失败或结果非有限
        """
        plies = self.plies()
        t_tot = sum(p.thickness for p in plies)

        A = np.zeros((3, 3))
        t_temp = 0.0
        for i, ply in enumerate(plies):
            logger.debug(
                "Ply %d: E1=%g, E2=%g, G12=%g, t=%g, angle=%g rad",
                i, ply.E1, ply.E2, ply.shear_modulus, ply.thickness, ply.fiber_angle
            )
            A += ply.rotated_stiffness() * ply.thickness
            t_temp += ply.thickness

        if not np.isclose(t_tot, t_temp, rtol=THICKNESS_RTOL, atol=0.0):
            raise NumericalFailure(
                f"Total thickness after loop is wrong: accumulated {t_temp}, sum(thickness) = {t_tot}"
            )
        # D01 与 D10 只在舍入误差内相等
        A = 0.5 * (A + A.T)
        return self._check_finite(A, type(self).__name__)

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        column = flatten_tensor(self.stiffness())
        return np.tile(column[:, None], (1, u.shape[1]))

    def clone(self) -> 'LaminateStiffnessMatrix':
        return LaminateStiffnessMatrix(
            self._youngs_moduli, self._shear_moduli, self._poisson_ratios,
            self._thicknesses, self._fiber_angles
        )

    def __repr__(self) -> str:
        return f"LaminateStiffnessMatrix(num_plies={len(self._thicknesses)}, thickness={self.total_thickness:g})"
