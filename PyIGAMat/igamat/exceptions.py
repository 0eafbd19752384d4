# 文件: PyIGAMat/igamat/exceptions.py
"""
异常类型

所有错误均同步抛出给直接调用者，内部不做重试:
- DomainMismatchError: 点的维数与函数声明的定义域维数不一致
- ConfigurationError: 配置错误 (铺层序列长度不一致、空铺层、互易关系不满足等)
- NumericalFailure: 数值失败 (局部标架奇异、结果非有限值、内部一致性检查失败)
- UnsupportedOperationError: 请求了未实现且禁用了有限差分的导数
"""


class IGAMatError(Exception):
    """PyIGAMat 所有异常的基类"""


class DomainMismatchError(IGAMatError, ValueError):
    """点的维数与函数定义域维数不匹配"""


class ConfigurationError(IGAMatError, ValueError):
    """材料或积分配置无效"""


class NumericalFailure(IGAMatError, ArithmeticError):
    """数值计算失败 (矩阵奇异、非有限值、一致性检查不通过)"""


class UnsupportedOperationError(IGAMatError, NotImplementedError):
    """函数不支持所请求的运算"""
