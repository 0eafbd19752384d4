# 文件: PyIGAMat/tests/test_geometry.py
"""
几何与日志配置单元测试
"""

import logging
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from igamat.functions import EvaluableFunction, FunctionSet
from igamat.geometry import BilinearPatch, MultiPatch
from igamat.exceptions import ConfigurationError
from igamat.logging_config import LOG_FORMAT, PACKAGE_LOGGER, setup_logging


class TestBilinearPatch:
    """测试双线性曲面片"""

    def setup_method(self):
        self.patch = BilinearPatch([[0, 0, 0], [2, 0, 0.5], [2.5, 1.5, 1], [0, 1, 0]])

    def test_corners(self):
        corners = self.patch.evaluate([[0, 1, 1, 0], [0, 0, 1, 1]])
        assert np.allclose(corners.T, self.patch.corners)

    def test_partition_of_unity(self):
        N, dN = self.patch._calc_shape_functions(np.array([0.3, 0.7]), np.array([0.1, 0.9]))
        assert np.allclose(N.sum(axis=0), 1.0)
        assert np.allclose(dN.sum(axis=1), 0.0)

    def test_derivative_matches_finite_differences(self):
        pts = np.random.rand(2, 5)
        fd = EvaluableFunction._derivative(self.patch, pts)
        assert np.allclose(self.patch.derivative(pts), fd, atol=1e-8)

    def test_second_derivative_matches_finite_differences(self):
        pts = np.random.rand(2, 3)
        fd = EvaluableFunction._second_derivative(self.patch, pts)
        assert np.allclose(self.patch.second_derivative(pts), fd, atol=1e-4)

    def test_unit_square(self):
        square = BilinearPatch.unit_square()
        assert square.target_dim == 3
        assert np.allclose(square.evaluate([0.25, 0.75])[:, 0], [0.25, 0.75, 0.0])
        assert BilinearPatch.unit_square(embed_dim=2).target_dim == 2

    def test_bad_corners(self):
        with pytest.raises(ConfigurationError):
            BilinearPatch(np.zeros((3, 3)))


class TestMultiPatch:
    """测试多片几何"""

    def test_pieces(self):
        first = BilinearPatch.unit_square()
        second = BilinearPatch([[1, 0, 0], [2, 0, 0], [2, 1, 0], [1, 1, 0]])
        mp = MultiPatch([first])
        assert mp.add_patch(second) == 1
        assert mp.num_pieces == len(mp) == 2
        assert mp.piece(1) is second
        assert (mp.domain_dim, mp.target_dim) == (2, 3)
        assert isinstance(mp, FunctionSet)

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            MultiPatch([BilinearPatch.unit_square()]).piece(1)

    def test_dimension_mismatch(self):
        mp = MultiPatch([BilinearPatch.unit_square()])
        with pytest.raises(ConfigurationError):
            mp.add_patch(BilinearPatch.unit_square(embed_dim=2))

    def test_empty(self):
        with pytest.raises(ConfigurationError):
            MultiPatch().domain_dim


class TestLogging:
    """测试日志配置"""

    def teardown_method(self):
        logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    def test_single_console_handler(self):
        setup_logging(logging.DEBUG)
        logger = setup_logging(logging.DEBUG)
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "igamat.log"
        logger = setup_logging(logging.INFO, log_file=str(log_file))
        assert len(logger.handlers) == 2

        logging.getLogger("igamat.geometry").info("Mesh ready")
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding='utf-8')
        assert "Logging initialized." in text
        assert "igamat.geometry - INFO - Mesh ready" in text

    def test_reconfigure_closes_file(self, tmp_path):
        """重新配置时关闭并替换旧的文件处理器"""
        logger = setup_logging(logging.INFO, log_file=str(tmp_path / "first.log"))
        old = [h for h in logger.handlers if isinstance(h, logging.FileHandler)][0]

        logger = setup_logging(logging.WARNING)
        assert old not in logger.handlers
        assert old.stream is None
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING
        assert logger.handlers[0].formatter._fmt == LOG_FORMAT


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
