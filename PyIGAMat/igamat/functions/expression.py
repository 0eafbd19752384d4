# 文件: PyIGAMat/igamat/functions/expression.py
"""
基本函数

提供:
- ConstantFunction: 常值场 (厚度、均匀材料参数)
- ExpressionFunction: 符号表达式函数，基于 sympy 的解析导数
"""

from tokenize import TokenError

import numpy as np
import sympy
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    standard_transformations,
)

from ..exceptions import ConfigurationError
from .interfaces import EvaluableFunction, second_derivative_pairs

_VARIABLES = ('x', 'y', 'z', 'w')
_TRANSFORMATIONS = standard_transformations + (convert_xor,)


class ConstantFunction(EvaluableFunction):
    """
    常值函数 f(u) = c

    Example:
        thickness = ConstantFunction(0.01, domain_dim=2)
        E = ConstantFunction(210e9, domain_dim=3)
    """

    def __init__(self, value, domain_dim: int):
        """
        Args:
            value: 常值 (标量或向量)
            domain_dim: 定义域维数
        """
        if domain_dim < 0:
            raise ConfigurationError(f"Domain dimension must be non-negative, got {domain_dim}")
        self._value = np.atleast_1d(np.asarray(value, dtype=float)).reshape(-1)
        self._dim = int(domain_dim)

    @property
    def domain_dim(self) -> int:
        return self._dim

    @property
    def target_dim(self) -> int:
        return self._value.size

    @property
    def value(self) -> np.ndarray:
        return self._value.copy()

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        return np.tile(self._value[:, None], (1, u.shape[1]))

    def _derivative(self, u: np.ndarray) -> np.ndarray:
        return np.zeros((self.target_dim * self._dim, u.shape[1]))

    def _second_derivative(self, u: np.ndarray) -> np.ndarray:
        S = self._dim * (self._dim + 1) // 2
        return np.zeros((self.target_dim * S, u.shape[1]))

    def __repr__(self) -> str:
        return f"ConstantFunction({self._value.tolist()}, domain_dim={self._dim})"


class ExpressionFunction(EvaluableFunction):
    """
    符号表达式函数

    每个分量由一个字符串表达式给出，变量依次为 x, y, z, w，
    支持 '^' 作为乘方。一阶与二阶导数由 sympy 解析求得，覆盖缺省的差分实现。

    Example:
        f = ExpressionFunction("1*x", "2*y", "x*y*z^2", domain_dim=3)
        f.evaluate([0.25, 0.25, 0.25])   # [[0.25], [0.5], [0.00390625]]
    """

    def __init__(self, *expressions: str, domain_dim: int):
        """
        Args:
            expressions: 各分量表达式
            domain_dim: 定义域维数 (0-4)

        Raises:
            ConfigurationError: 无表达式、维数越界、表达式含未知变量或无法解析
        """
        if not expressions:
            raise ConfigurationError("At least one expression is required")
        if not 0 <= domain_dim <= len(_VARIABLES):
            raise ConfigurationError(
                f"Domain dimension must be in [0, {len(_VARIABLES)}], got {domain_dim}"
            )

        self._strings = tuple(str(e) for e in expressions)
        self._dim = int(domain_dim)
        self._symbols = tuple(sympy.Symbol(name) for name in _VARIABLES[:self._dim])

        local_dict = {s.name: s for s in self._symbols}
        try:
            self._exprs = [
                parse_expr(e, local_dict=local_dict, transformations=_TRANSFORMATIONS)
                for e in self._strings
            ]
        except (SyntaxError, TypeError, TokenError, sympy.SympifyError) as exc:
            raise ConfigurationError(f"Cannot parse expressions {self._strings}: {exc}") from exc

        unknown = set().union(*(e.free_symbols for e in self._exprs)) - set(self._symbols)
        if unknown:
            names = sorted(s.name for s in unknown)
            raise ConfigurationError(
                f"Expressions use variables {names} outside the {self._dim}-dimensional domain"
            )

        pairs = second_derivative_pairs(self._dim)
        self._values = self._lambdify(self._exprs)
        self._grads = self._lambdify(
            [sympy.diff(e, s) for e in self._exprs for s in self._symbols]
        )
        self._hessians = self._lambdify(
            [sympy.diff(e, self._symbols[k], self._symbols[l])
             for e in self._exprs for k, l in pairs]
        )

    def _lambdify(self, exprs):
        return sympy.lambdify(self._symbols, exprs, modules='numpy')

    @staticmethod
    def _call(fn, u: np.ndarray, rows: int) -> np.ndarray:
        n = u.shape[1]
        if rows == 0:
            return np.zeros((0, n))
        values = fn(*u)
        return np.array([np.broadcast_to(np.asarray(v, dtype=float), (n,)) for v in values])

    @property
    def domain_dim(self) -> int:
        return self._dim

    @property
    def target_dim(self) -> int:
        return len(self._exprs)

    @property
    def expressions(self):
        return self._strings

    def _evaluate(self, u: np.ndarray) -> np.ndarray:
        return self._call(self._values, u, self.target_dim)

    def _derivative(self, u: np.ndarray) -> np.ndarray:
        return self._call(self._grads, u, self.target_dim * self._dim)

    def _second_derivative(self, u: np.ndarray) -> np.ndarray:
        S = self._dim * (self._dim + 1) // 2
        return self._call(self._hessians, u, self.target_dim * S)

    def clone(self) -> 'ExpressionFunction':
        return ExpressionFunction(*self._strings, domain_dim=self._dim)

    def __repr__(self) -> str:
        exprs = ", ".join(repr(e) for e in self._strings)
        return f"ExpressionFunction({exprs}, domain_dim={self._dim})"
