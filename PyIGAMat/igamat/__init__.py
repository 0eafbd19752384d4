# 文件: PyIGAMat/igamat/__init__.py
"""
PyIGAMat 核心模块

等几何薄壳分析的本构 (材料) 计算:
- 可求值函数、厚度坐标提升与厚度积分
- 曲线坐标下的平面应力材料矩阵
- 层合板面内刚度
"""

# ==============================================================================
# 函数系统
# ==============================================================================
from igamat.functions import (
    EvaluableFunction,
    FunctionSet,
    MapData,
    ParametricMapSample,
    ConstantFunction,
    ExpressionFunction,
    ZCoordinateLift,
    ThicknessIntegrator,
    VariableThicknessIntegrator,
)

# ==============================================================================
# 材料
# ==============================================================================
from igamat.materials import (
    MaterialMatrix,
    PlaneStressMaterialMatrix,
    Ply,
    LaminateStiffnessMatrix,
    MaterialFactory,
    flatten_tensor,
    unflatten_tensor,
)

# ==============================================================================
# 其他
# ==============================================================================
from igamat.geometry import BilinearPatch, MultiPatch
from igamat.quadrature import Quadrature, QuadratureRule
from igamat.exceptions import (
    IGAMatError,
    DomainMismatchError,
    ConfigurationError,
    NumericalFailure,
    UnsupportedOperationError,
)
from igamat.logging_config import setup_logging

__version__ = "0.1.0"

__all__ = [
    # === 函数系统 ===
    'EvaluableFunction',
    'FunctionSet',
    'MapData',
    'ParametricMapSample',
    'ConstantFunction',
    'ExpressionFunction',
    'ZCoordinateLift',
    'ThicknessIntegrator',
    'VariableThicknessIntegrator',

    # === 材料 ===
    'MaterialMatrix',
    'PlaneStressMaterialMatrix',
    'Ply',
    'LaminateStiffnessMatrix',
    'MaterialFactory',
    'flatten_tensor',
    'unflatten_tensor',

    # === 其他 ===
    'BilinearPatch',
    'MultiPatch',
    'Quadrature',
    'QuadratureRule',
    'IGAMatError',
    'DomainMismatchError',
    'ConfigurationError',
    'NumericalFailure',
    'UnsupportedOperationError',
    'setup_logging',
]
