# 文件: PyIGAMat/igamat/materials/plane_stress.py
"""
曲线坐标下的各向同性平面应力材料矩阵

提供:
- PlaneStressMaterialMatrix: 依赖曲面度量张量的平面应力弹性张量
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ..exceptions import ConfigurationError, DomainMismatchError, NumericalFailure
from ..functions.interfaces import EvaluableFunction
from .interfaces import MaterialMatrix, flatten_tensor, symmetric_tensor

logger = logging.getLogger(__name__)

FIELD_DOMAINS = ('physical', 'parametric')


class PlaneStressMaterialMatrix(MaterialMatrix):
    """
    各向同性平面应力材料矩阵 (曲线坐标)

    输入点为 (u, v, s): (u, v) 为曲面参数坐标，s 为最后乘到张量上的标量
    (例如局部厚度或积分权重，与 ThicknessIntegrator 组合时即厚度坐标)。

    每个点的计算:
    1. 由曲面映射得到雅可比 J 与单位法向 n，构造标架 F = [J | n]
    2. 度量张量 G = F⁻¹ (F⁻¹)ᵀ
    3. 在同一位置求 E, ν，计算
       λ = Eν / ((1+ν)(1-2ν)),  μ = E / (2(1+ν)),  C* = 4λμ / (λ+2μ)
    4. 由 G00, G01, G11 按闭式公式填充对称 3x3 张量，再乘以 s

    不检查 E, ν 的物理范围 (例如 ν ≥ 0.5)，导致的非有限结果以
    NumericalFailure 报告。

    Attributes:
        field_domain: 'physical' 在物理位置上求材料场 (定义域 3 维)，
                      'parametric' 在参数坐标上求材料场 (定义域 2 维)

    Example:
        surface = BilinearPatch.unit_square()
        E = ConstantFunction(210e9, domain_dim=3)
        nu = ConstantFunction(0.3, domain_dim=3)
        mm = PlaneStressMaterialMatrix(surface, E, nu)
        C = mm.tensors([[0.5], [0.5], [1.0]])     # (1, 3, 3)
    """

    def __init__(
        self,
        surface,
        youngs_modulus: EvaluableFunction,
        poisson_ratio: EvaluableFunction,
        field_domain: str = 'physical'
    ):
        """
        Args:
            surface: 曲面参数映射 (EvaluableFunction 或 FunctionSet)，二维参数域嵌入三维
            youngs_modulus: 杨氏模量标量场
            poisson_ratio: 泊松比标量场
            field_domain: 材料场的定义域，'physical' 或 'parametric'

        Raises:
            ConfigurationError: field_domain 无效
            DomainMismatchError: 曲面或材料场维数不符
        """
        if field_domain not in FIELD_DOMAINS:
            raise ConfigurationError(
                f"field_domain must be one of {FIELD_DOMAINS}, got {field_domain!r}"
            )
        if surface.domain_dim != 2 or surface.target_dim != 3:
            raise DomainMismatchError(
                f"Expected a surface with 2 parameters embedded in 3D, got "
                f"domain {surface.domain_dim} and target {surface.target_dim}"
            )

        field_dim = surface.target_dim if field_domain == 'physical' else surface.domain_dim
        for name, field in (("Young's modulus", youngs_modulus), ("Poisson's ratio", poisson_ratio)):
            if field.domain_dim != field_dim or field.target_dim != 1:
                raise DomainMismatchError(
                    f"{name} must be a scalar field on a {field_dim}-dimensional domain, got "
                    f"domain {field.domain_dim} and target {field.target_dim}"
                )

        self._surface = surface
        self._E = youngs_modulus
        self._nu = poisson_ratio
        self.field_domain = field_domain

        # 单槽缓存: 只保留最近一次 piece() 的结果
        self._piece: Optional['PlaneStressMaterialMatrix'] = None

    @property
    def domain_dim(self) -> int:
        return self._surface.domain_dim + 1

    @property
    def surface(self):
        return self._surface

    @property
    def num_pieces(self) -> int:
        return self._surface.num_pieces

    def piece(self, k: int) -> 'PlaneStressMaterialMatrix':
        """
        限制到第 k 片曲面

        返回的对象归本实例所有，下一次调用 piece() 后即失效
        (单槽缓存，而不是按索引缓存)。
        """
        self._piece = PlaneStressMaterialMatrix(
            self._surface.piece(k), self._E, self._nu, self.field_domain
        )
        logger.debug("Material matrix restricted to piece %d", k)
        return self._piece

    @staticmethod
    def lame_parameters(E: float, nu: float) -> Tuple[float, float, float]:
        """
        Returns:
            (λ, μ, C*)，C* = 4λμ / (λ+2μ)
        """
        lam = E * nu / ((1. + nu) * (1. - 2. * nu))
        mu = E / (2. * (1. + nu))
        C_constant = 4 * lam * mu / (lam + 2 * mu)
        return lam, mu, C_constant

    @staticmethod
    def metric(jacobian: np.ndarray, normal: np.ndarray) -> np.ndarray:
        """
        度量张量 G = F⁻¹ (F⁻¹)ᵀ，F = [J | n]

        Raises:
            NumericalFailure: 法向退化或标架奇异
        """
        norm = np.linalg.norm(normal)
        if not norm > 0:
            raise NumericalFailure("Degenerate surface normal, the local frame is singular")

        F = np.empty((3, 3))
        F[:, :2] = jacobian
        F[:, 2] = normal / norm
        try:
            F_inv = np.linalg.inv(F)
        except np.linalg.LinAlgError as exc:
            raise NumericalFailure(f"Singular local frame matrix:\n{F}") from exc
        return F_inv @ F_inv.T

    @classmethod
    def stiffness(cls, E: float, nu: float, G: np.ndarray) -> np.ndarray:
        """
        由度量张量的面内分量 G00, G01, G11 构造对称 3x3 张量
        """
        _, mu, C_constant = cls.lame_parameters(E, nu)
        G00, G01, G11 = G[0, 0], G[0, 1], G[1, 1]

        return symmetric_tensor(
            C_constant * G00 * G00 + 2 * mu * (2 * G00 * G00),
            C_constant * G11 * G11 + 2 * mu * (2 * G11 * G11),
            C_constant * G01 * G01 + 2 * mu * (G00 * G11 + G01 * G01),
            C_constant * G00 * G11 + 2 * mu * (2 * G01 * G01),
            C_constant * G00 * G01 + 2 * mu * (2 * G00 * G01),
            C_constant * G01 * G11 + 2 * mu * (2 * G01 * G11),
        )

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        m = self._surface.domain_dim
        n = u.shape[1]

        data = self._surface.piece(0).compute_map(u[:m])
        field_points = data.values if self.field_domain == 'physical' else data.points
        E = self._E.evaluate(field_points)[0]
        nu = self._nu.evaluate(field_points)[0]

        result = np.empty((self.target_dim, n))
        with np.errstate(divide='ignore', invalid='ignore'):
            for i in range(n):
                G = self.metric(data.jacobian(i), data.normal(i))
                C = self.stiffness(E[i], nu[i], G)
                result[:, i] = flatten_tensor(C * u[m, i])

        return self._check_finite(result, type(self).__name__)

    def clone(self) -> 'PlaneStressMaterialMatrix':
        return PlaneStressMaterialMatrix(
            self._surface, self._E.clone(), self._nu.clone(), self.field_domain
        )

    def __repr__(self) -> str:
        return (
            f"PlaneStressMaterialMatrix(surface={self._surface!r}, E={self._E!r}, "
            f"nu={self._nu!r}, field_domain={self.field_domain!r})"
        )
