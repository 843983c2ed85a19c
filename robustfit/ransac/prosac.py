import logging

import numpy as np

from robustfit.exceptions import NotReadyException
from robustfit.sampler import ProsacSampler
from robustfit.utils import getIterationNumber, getProsacTerminationLength
from .ransac import DEFAULT_THRESHOLD, RANSACRobustEstimator
from .robust_estimator import RobustEstimatorMethod

logger = logging.getLogger(__name__)

# 误匹配偶然支持错误模型的概率 (非随机性准则)
BETA = 0.01
# 计算 PROSAC 收敛长度时假设的最大外点比例
MAX_OUTLIERS_PROPORTION = 0.8


class ProgressiveSampling:
    """ PROSAC 与 PROMedS 共用的渐进采样和终止准则

    数据点按质量分数降序排列后交给 ProsacSampler，每当找到更优模型时，
    在排序后的内点掩码上搜索满足最大性与非随机性的终止长度 n*。
    """

    def _initializeProgressive(self, quality_scores, sort_weights):
        self.quality_scores = quality_scores
        self.sort_weights = sort_weights
        self.sorted_indices = None
        self.termination_length = 0

    def isReady(self):
        return super().isReady() and self.quality_scores is not None and \
            len(self.quality_scores) == self.point_number

    def _createSampler(self, points):
        if self.quality_scores is None or len(self.quality_scores) != self.point_number:
            raise NotReadyException("PROSAC 需要与数据点数目相同的质量分数")

        if self.sort_weights:
            # 质量相同的点保持原有顺序
            scores = np.asarray(self.quality_scores, dtype=float)
            self.sorted_indices = np.argsort(-scores, kind="stable")
        else:
            self.sorted_indices = np.arange(self.point_number)
        self.termination_length = self.point_number

        convergence_iterations = getIterationNumber(1.0 - MAX_OUTLIERS_PROPORTION,
                                                    self.sample_number,
                                                    self.settings.confidence,
                                                    self.settings.max_iteration_number)
        sampler = ProsacSampler(points, self.sample_number, convergence_iterations,
                                random_generator=self.random_generator)
        pool = [int(i) for i in self.sorted_indices]
        return sampler, pool

    def _computeIterationNumber(self, score, inliers):
        self.termination_length, iterations = getProsacTerminationLength(inliers[self.sorted_indices],
                                                                         self.sample_number,
                                                                         self.settings.confidence,
                                                                         BETA,
                                                                         self.settings.max_iteration_number,
                                                                         self.max_inlier_ratio)
        logger.debug("%s 终止长度 n* = %d，所需迭代 %d", self.method.value, self.termination_length, iterations)
        return iterations


class PROSACRobustEstimator(ProgressiveSampling, RANSACRobustEstimator):
    """ PROSAC：按质量分数渐进采样的 RANSAC """

    method = RobustEstimatorMethod.PROSAC

    def __init__(self, estimator=None, listener=None, seed=None, threshold=DEFAULT_THRESHOLD,
                 quality_scores=None, sort_weights=True):
        super().__init__(estimator, listener, seed, threshold)
        self._initializeProgressive(quality_scores, sort_weights)
