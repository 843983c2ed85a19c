import logging
from enum import Enum

import numpy as np

from robustfit.exceptions import LockedException, NotReadyException, RobustEstimatorException
from robustfit.sampler import UniformSampler
from robustfit.utils import Score, UniformRandomGenerator, getIterationNumber

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.99
DEFAULT_MAX_ITERATIONS = 5000
DEFAULT_PROGRESS_DELTA = 0.05


class RobustEstimatorMethod(Enum):
    """ 鲁棒估计方法 """
    RANSAC = "RANSAC"
    LMedS = "LMedS"
    MSAC = "MSAC"
    PROSAC = "PROSAC"
    PROMedS = "PROMedS"

    def requiresQualityScores(self):
        return self in (RobustEstimatorMethod.PROSAC, RobustEstimatorMethod.PROMedS)


class RobustEstimatorState(Enum):
    """ 迭代控制器的状态 """
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
    FAILED = "failed"


class RobustEstimatorListener:
    """ 估计过程的监听器，回调在调用 estimate() 的线程上同步执行 """

    def onEstimateStart(self, estimator):
        pass

    def onEstimateEnd(self, estimator):
        pass

    def onEstimateNextIteration(self, estimator, iteration):
        pass

    def onEstimateProgressChange(self, estimator, progress):
        pass


class InliersData:
    """ 最佳模型的内点信息

    inliers 和 residuals 仅在开启对应保存选项时保留，否则为 None
    """

    def __init__(self, inliers=None, residuals=None, num_inliers=0, estimated_threshold=None):
        self.inliers = inliers
        self.residuals = residuals
        self.num_inliers = num_inliers
        self.estimated_threshold = estimated_threshold


class _Settings:

    def __init__(self):
        self.confidence = DEFAULT_CONFIDENCE                    # 结果的置信率
        self.max_iteration_number = DEFAULT_MAX_ITERATIONS      # 全局最大迭代次数
        self.progress_delta = DEFAULT_PROGRESS_DELTA            # 通知进度变化的最小进度增量
        self.compute_and_keep_inliers = False                   # 是否保留内点掩码
        self.compute_and_keep_residuals = False                 # 是否保留全部残差


class _Statistics:

    def __init__(self):
        self.iteration_number = 0
        self.best_iteration = 0
        self.model_number = 0
        self.state = RobustEstimatorState.IDLE


class RobustEstimator:
    """ 鲁棒估计的迭代控制器

    重复执行：采样最小样本 → 估计候选模型 → 对全部数据评分 → 记录最佳模型 →
    更新自适应迭代上限，直到收敛或达到最大迭代次数。
    子类决定评分函数、采样器和停止准则。
    """

    method = None
    # 计算迭代上限时内点率的上界
    max_inlier_ratio = 1.0

    def __init__(self, estimator=None, listener=None, seed=None):
        self.settings = _Settings()
        self.statistics = _Statistics()

        # 模型估计器和监听器
        self.estimator = estimator
        self.listener = listener
        self.random_generator = UniformRandomGenerator(seed)

        self.locked = False
        self.max_iteration = 0
        self.points = None
        self.point_number = 0
        self.sample_number = 0

        # 全局采样器和模型评估的评分函数
        self.main_sampler = None
        self.scoring_function = None

        self.best_score = None
        self.best_inliers = None
        self.best_residuals = None
        self.inliers_data = None

    def isReady(self):
        return self.estimator is not None and self.points is not None and \
            self.point_number >= self.estimator.sampleSize()

    def run(self, points=None, estimator=None):
        """ 运行鲁棒估计求解过程

        参数
        ----------
        points : numpy
            输入的数据点集，每行为一个数据项
        estimator : Estimator
            模型的估计器

        返回
        ----------
        Model
            求解的最佳模型
        """
        if self.locked:
            raise LockedException("鲁棒估计正在运行")
        if points is not None:
            self.points = np.asarray(points)
            self.point_number = np.shape(self.points)[0]
        if estimator is not None:
            self.estimator = estimator
        if not self.isReady():
            raise NotReadyException("数据点不足或缺少模型估计器")

        self.locked = True
        try:
            return self._run()
        finally:
            self.locked = False

    def _run(self):
        points = self.points
        self.sample_number = self.estimator.sampleSize()
        self.statistics = _Statistics()
        self.statistics.state = RobustEstimatorState.RUNNING
        self.inliers_data = None

        self._initializeScoring()
        self.main_sampler, pool = self._createSampler(points)

        so_far_the_best_model = None
        so_far_the_best_score = Score()
        self.best_inliers = None
        self.best_residuals = None

        if self.listener is not None:
            self.listener.onEstimateStart(self)

        self.max_iteration = self.settings.max_iteration_number
        previous_progress = 0.0
        finished = False

        while self.statistics.iteration_number < self.max_iteration:
            self.statistics.iteration_number += 1

            # Sk ← Draw a minimal sample
            sample = self.main_sampler.sample(pool, self.sample_number)
            # 退化样本不产生模型，但仍消耗一次迭代
            if len(sample) != 0 and self.estimator.isValidSample(points, sample):
                # θk ← Estimate a model using Sk
                for model in self.estimator.estimateModel(points, sample):
                    self.statistics.model_number += 1
                    # wk ← Compute the support of θk
                    residuals = self.estimator.residuals(points, model)
                    score, inliers = self.scoring_function.getScore(residuals)
                    if not score.isValid():
                        continue

                    # if wk > w∗ then θ∗, L∗, w∗ ← θk, Lk, wk
                    if so_far_the_best_score < score:
                        so_far_the_best_model = model
                        so_far_the_best_score = score
                        self.best_inliers = inliers
                        self.best_residuals = residuals
                        self.statistics.best_iteration = self.statistics.iteration_number
                        # 更新最大迭代数
                        self.max_iteration = min(self.max_iteration,
                                                 self._computeIterationNumber(score, inliers))
                        logger.debug("%s 迭代 %d: 内点 %d/%d，迭代上限 %d",
                                     self.method.value, self.statistics.iteration_number,
                                     score.inlier_number, self.point_number, self.max_iteration)

            if self.listener is not None:
                self.listener.onEstimateNextIteration(self, self.statistics.iteration_number)
                progress = min(1.0, self.statistics.iteration_number / float(self.max_iteration))
                if progress - previous_progress > self.settings.progress_delta:
                    previous_progress = progress
                    self.listener.onEstimateProgressChange(self, progress)

            if so_far_the_best_model is not None and self._isFinished(so_far_the_best_score):
                finished = True
                break

        if so_far_the_best_model is None:
            self.statistics.state = RobustEstimatorState.FAILED
            raise RobustEstimatorException(
                f"{self.statistics.iteration_number} 次迭代均未找到有效模型")

        if finished or self.max_iteration < self.settings.max_iteration_number:
            self.statistics.state = RobustEstimatorState.CONVERGED
        else:
            self.statistics.state = RobustEstimatorState.MAX_ITERATIONS_REACHED

        self.best_score = so_far_the_best_score
        self.inliers_data = self._createInliersData()
        logger.info("%s 结束: %s，迭代 %d 次，内点 %d/%d",
                    self.method.value, self.statistics.state.value, self.statistics.iteration_number,
                    so_far_the_best_score.inlier_number, self.point_number)

        if self.listener is not None:
            self.listener.onEstimateEnd(self)
        return so_far_the_best_model

    def _initializeScoring(self):
        """ 初始化评分函数 """
        raise NotImplementedError

    def _createSampler(self, points):
        """ 创建全局采样器，返回采样器和采样池 """
        sampler = UniformSampler(points, random_generator=self.random_generator)
        pool = [i for i in range(self.point_number)]
        return sampler, pool

    def _computeIterationNumber(self, score, inliers):
        """ 根据当前最佳模型的内点率计算所需迭代次数 """
        inlier_ratio = min(float(score.inlier_number) / self.point_number, self.max_inlier_ratio)
        return getIterationNumber(inlier_ratio,
                                  self.sample_number,
                                  self.settings.confidence,
                                  self.settings.max_iteration_number)

    def _isFinished(self, best_score):
        """ 除迭代上限外的额外停止准则 """
        return False

    def _createInliersData(self):
        inliers = self.best_inliers if self.settings.compute_and_keep_inliers else None
        residuals = self.best_residuals if self.settings.compute_and_keep_residuals else None
        return InliersData(inliers=inliers,
                           residuals=residuals,
                           num_inliers=self.best_score.inlier_number,
                           estimated_threshold=self.best_score.estimated_threshold)

    def getInliersData(self):
        return self.inliers_data

    def getRefinementStandardDeviation(self):
        """ 局部优化和协方差计算使用的残差标准差 """
        raise NotImplementedError
