# 文件: PyIGAMat/igamat/functions/__init__.py
"""
可求值函数系统

分层架构:
- interfaces.py: EvaluableFunction 抽象基类和 FunctionSet 协议
- map_data.py: 参数映射数据 (位置、雅可比、法向)
- expression.py: 常值函数与符号表达式函数
- lift.py: 厚度坐标提升 ZCoordinateLift
- integrate.py: 厚度积分 ThicknessIntegrator / VariableThicknessIntegrator

使用方法:
    from igamat.functions import ExpressionFunction, ThicknessIntegrator

    f = ExpressionFunction("1", "x", "x^2", domain_dim=1)
    F = ThicknessIntegrator(f, thickness=1.0)
    F.evaluate(np.zeros((0, 1)))     # [[1.0], [0.0], [1/12]]

扩展指南:
    添加新函数:
        1. 继承 EvaluableFunction
        2. 实现 domain_dim, target_dim 和 _evaluate()
        3. 可选覆盖 _derivative() / _second_derivative() 提供解析导数
"""

from .interfaces import (
    EvaluableFunction,
    FunctionSet,
    as_points,
    second_derivative_pairs,
)
from .map_data import MapData, ParametricMapSample
from .expression import ConstantFunction, ExpressionFunction
from .lift import ZCoordinateLift
from .integrate import ThicknessIntegrator, VariableThicknessIntegrator

__all__ = [
    'EvaluableFunction',
    'FunctionSet',
    'as_points',
    'second_derivative_pairs',
    'MapData',
    'ParametricMapSample',
    'ConstantFunction',
    'ExpressionFunction',
    'ZCoordinateLift',
    'ThicknessIntegrator',
    'VariableThicknessIntegrator',
]
