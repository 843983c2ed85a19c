import math as m

import numpy as np

from robustfit.model import EuclideanTransformation2D, MetricTransformation2D
from robustfit.solver.solver_engine import SolverEngine


class SolverEuclideanTransformation2D(SolverEngine):
    """ 二维欧氏变换求解器（加权 Kabsch / Umeyama 闭式解）

    数据点每行为 [x, y, x', y']，源点在前两列，目标点在后两列。
    一般需要 3 个点对，对某些点配置仅需 2 个点对（弱最小样本）。
    """

    MINIMUM_SIZE = 3
    WEAK_MINIMUM_SIZE = 2

    def __init__(self, weak_minimum_size_allowed=False, degeneracy_threshold=1e-12):
        super().__init__()
        self.weak_minimum_size_allowed = weak_minimum_size_allowed
        self.degeneracy_threshold = degeneracy_threshold

    def sampleSize(self):
        if self.weak_minimum_size_allowed:
            return self.WEAK_MINIMUM_SIZE
        return self.MINIMUM_SIZE

    def estimateModel(self, points, sample, sample_number, weights=None):
        if sample_number < self.sampleSize():
            return []
        selected, selected_weights = self._selectSample(points, sample, sample_number, weights)
        if selected_weights.sum() <= 0.0:
            return []

        source = selected[:, 0:2]
        destination = selected[:, 2:4]
        normalized_weights = selected_weights / selected_weights.sum()

        mean_source = normalized_weights @ source
        mean_destination = normalized_weights @ destination
        centered_source = source - mean_source
        centered_destination = destination - mean_destination

        # 源点全部重合时旋转不确定
        source_variance = float(normalized_weights @ (centered_source ** 2).sum(axis=1))
        if source_variance <= self.degeneracy_threshold:
            return []

        covariance = (centered_destination * normalized_weights[:, None]).T @ centered_source
        u, singular_values, vt = np.linalg.svd(covariance)
        correction = np.diag([1.0, np.sign(np.linalg.det(u @ vt)) or 1.0])
        rotation = u @ correction @ vt

        scale = self._computeScale(singular_values, correction, source_variance)
        if scale <= 0.0:
            return []
        translation = mean_destination - scale * rotation @ mean_source
        angle = m.atan2(rotation[1, 0], rotation[0, 0])
        return [self._createModel(angle, scale, translation)]

    def _computeScale(self, singular_values, correction, source_variance):
        return 1.0

    def _createModel(self, angle, scale, translation):
        return EuclideanTransformation2D(angle, translation)


class SolverMetricTransformation2D(SolverEuclideanTransformation2D):
    """ 二维相似变换求解器，在欧氏变换基础上估计尺度 """

    def _computeScale(self, singular_values, correction, source_variance):
        return float(np.trace(np.diag(singular_values) @ correction)) / source_variance

    def _createModel(self, angle, scale, translation):
        return MetricTransformation2D(angle, scale, translation)
