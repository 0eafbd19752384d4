# 文件: PyIGAMat/igamat/materials/__init__.py
"""
PyIGAMat 材料系统

分层架构:
- interfaces.py: MaterialMatrix 抽象基类和张量辅助函数
- plane_stress.py: 曲线坐标下的各向同性平面应力材料矩阵
- laminate.py: 铺层与层合板面内刚度 (经典层合板理论 A 项)
- factory.py: 材料工厂

使用方法:
    from igamat.materials import MaterialFactory

    mat = MaterialFactory.create('Steel', {'E': 210e9, 'nu': 0.3}, surface=patch)
    C = mat.tensors([[0.5], [0.5], [1.0]])     # (1, 3, 3)
"""

from .interfaces import (
    MaterialMatrix,
    flatten_tensor,
    unflatten_tensor,
    symmetric_tensor,
)
from .plane_stress import PlaneStressMaterialMatrix
from .laminate import Ply, LaminateStiffnessMatrix
from .factory import MaterialFactory

__all__ = [
    'MaterialMatrix',
    'flatten_tensor',
    'unflatten_tensor',
    'symmetric_tensor',
    'PlaneStressMaterialMatrix',
    'Ply',
    'LaminateStiffnessMatrix',
    'MaterialFactory',
]
