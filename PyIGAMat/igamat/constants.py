"""
全局数值常量

FD_STEP: 默认中心差分步长。缺省导数实现的精度受截断误差与舍入误差
         共同限制，一阶导数约 1e-10 量级，二阶导数约 1e-6 量级。
RECIPROCITY_RTOL: 正交各向异性互易关系 nu21*E1 == nu12*E2 的相对容差
THICKNESS_RTOL: 铺层总厚度一致性检查的相对容差
DEFAULT_QUADRATURE_ORDER: 每个积分区间的 Gauss 点数
DEFAULT_QUADRATURE_INTERVALS: 厚度方向的积分区间数
"""

FD_STEP = 1e-5

RECIPROCITY_RTOL = 1e-8
THICKNESS_RTOL = 1e-12

DEFAULT_QUADRATURE_ORDER = 2
DEFAULT_QUADRATURE_INTERVALS = 3
