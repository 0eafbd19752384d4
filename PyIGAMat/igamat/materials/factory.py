# 文件: PyIGAMat/igamat/materials/factory.py
"""
材料工厂模块

提供统一的材料矩阵创建入口。
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np

from ..exceptions import ConfigurationError
from ..functions.expression import ConstantFunction
from ..functions.integrate import ThicknessIntegrator, VariableThicknessIntegrator
from ..functions.interfaces import EvaluableFunction
from ..quadrature import QuadratureRule
from .interfaces import MaterialMatrix
from .laminate import LaminateStiffnessMatrix, Ply
from .plane_stress import PlaneStressMaterialMatrix

logger = logging.getLogger(__name__)

_PLY_KEYS = ('E1', 'E2', 'G12', 'nu12', 'nu21', 'thickness')

FieldLike = Union[float, EvaluableFunction]


class MaterialFactory:
    """
    材料工厂

    根据材料属性字典创建对应的材料矩阵。
    提供便捷的工厂方法简化常见材料的创建。

    Example:
        # 各向同性平面应力
        mat = MaterialFactory.create('Steel', {'E': 210e9, 'nu': 0.3}, surface=patch)

        # 层合板
        mat = MaterialFactory.create('CFRP', {
            'plies': [
                {'E1': 300.0, 'E2': 200.0, 'G12': 100.0,
                 'nu12': 0.3, 'nu21': 0.2, 'thickness': 0.1, 'angle': 0.0},
            ]
        })

        # 沿厚度积分
        integrated = MaterialFactory.create_integrated(mat, thickness=0.01)
    """

    @staticmethod
    def create(name: str, props: Mapping[str, Any], surface=None) -> MaterialMatrix:
        """
        根据属性字典创建材料矩阵

        Args:
            name: 材料名称 (用于错误消息)
            props: 材料属性字典，两种结构之一:
                {
                    'E': float | EvaluableFunction,    # 杨氏模量
                    'nu': float | EvaluableFunction,   # 泊松比
                    'field_domain': str,               # 可选，'physical' (缺省) 或 'parametric'
                }
                {
                    'plies': [                         # 铺层顺序
                        {'E1', 'E2', 'G12', 'nu12', 'nu21', 'thickness',
                         'angle' (弧度, 可选) 或 'angle_deg' (度, 可选)},
                    ]
                }
            surface: 曲面几何 (平面应力材料必需)

        Returns:
            MaterialMatrix: 材料矩阵

        Raises:
            ConfigurationError: 缺少必需参数
        """
        plies = props.get('plies')
        if plies is not None:
            try:
                return MaterialFactory.create_laminate(
                    [MaterialFactory._ply_from_dict(p) for p in plies]
                )
            except ConfigurationError as exc:
                raise ConfigurationError(f"Material '{name}': {exc}") from exc

        E = props.get('E')
        nu = props.get('nu')
        if E is None or nu is None:
            raise ConfigurationError(
                f"Material '{name}' missing required parameters. "
                f"Got E={E}, nu={nu}"
            )
        if surface is None:
            raise ConfigurationError(
                f"Material '{name}' is a plane stress material and needs a surface"
            )

        return MaterialFactory.create_plane_stress(
            surface, E, nu, field_domain=props.get('field_domain', 'physical')
        )

    @staticmethod
    def create_plane_stress(
        surface,
        E: FieldLike,
        nu: FieldLike,
        field_domain: str = 'physical'
    ) -> PlaneStressMaterialMatrix:
        """
        创建各向同性平面应力材料矩阵

        常数参数自动包装为 ConstantFunction，定义域维数由 field_domain 决定。
        """
        field_dim = surface.target_dim if field_domain == 'physical' else surface.domain_dim
        return PlaneStressMaterialMatrix(
            surface,
            MaterialFactory._as_field(E, field_dim),
            MaterialFactory._as_field(nu, field_dim),
            field_domain=field_domain
        )

    @staticmethod
    def create_laminate(plies: Iterable[Ply]) -> LaminateStiffnessMatrix:
        """由铺层序列创建层合板刚度矩阵，并立即校验"""
        material = LaminateStiffnessMatrix.from_plies(plies)
        material.plies()
        return material

    @staticmethod
    def create_integrated(
        material: EvaluableFunction,
        thickness: FieldLike,
        rule: Optional[QuadratureRule] = None
    ) -> EvaluableFunction:
        """
        创建沿厚度积分的材料

        Args:
            material: 被积函数 (最后一个坐标为厚度坐标)
            thickness: 常数厚度或厚度场
            rule: 积分规则

        Returns:
            ThicknessIntegrator (常数厚度) 或 VariableThicknessIntegrator (厚度场)
        """
        if isinstance(thickness, EvaluableFunction):
            return VariableThicknessIntegrator(material, thickness, rule)
        return ThicknessIntegrator(material, float(thickness), rule)

    @staticmethod
    def _as_field(value: FieldLike, dim: int) -> EvaluableFunction:
        if isinstance(value, EvaluableFunction):
            return value
        return ConstantFunction(float(value), domain_dim=dim)

    @staticmethod
    def _ply_from_dict(props: Mapping[str, Any]) -> Ply:
        missing = [key for key in _PLY_KEYS if key not in props]
        if missing:
            raise ConfigurationError(f"Ply definition missing parameters {missing}")

        if 'angle_deg' in props:
            angle = np.radians(float(props['angle_deg']))
        else:
            angle = float(props.get('angle', 0.0))

        return Ply(
            E1=float(props['E1']),
            E2=float(props['E2']),
            shear_modulus=float(props['G12']),
            nu12=float(props['nu12']),
            nu21=float(props['nu21']),
            thickness=float(props['thickness']),
            fiber_angle=float(angle),
        )
