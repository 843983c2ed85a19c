import logging

import numpy as np

from robustfit.exceptions import LockedException, NotReadyException
from robustfit.ransac import (DEFAULT_CONFIDENCE, DEFAULT_INLIER_FACTOR,
                              DEFAULT_MAX_ITERATIONS, DEFAULT_PROGRESS_DELTA,
                              DEFAULT_ROBUST_METHOD, DEFAULT_THRESHOLD,
                              ROBUST_ESTIMATORS, RobustEstimatorListener,
                              RobustEstimatorMethod)
from robustfit.refiner import Refiner

logger = logging.getLogger(__name__)

DEFAULT_REFINE_RESULT = True
DEFAULT_KEEP_COVARIANCE = False
DEFAULT_COMPUTE_AND_KEEP_INLIERS = False
DEFAULT_COMPUTE_AND_KEEP_RESIDUALS = False
DEFAULT_SORT_WEIGHTS = True


class _ListenerAdapter(RobustEstimatorListener):
    """ 将迭代控制器的回调转发给用户监听器，回调参数为外观对象本身 """

    def __init__(self, facade, listener):
        self.facade = facade
        self.listener = listener

    def onEstimateStart(self, estimator):
        self.listener.onEstimateStart(self.facade)

    def onEstimateEnd(self, estimator):
        self.listener.onEstimateEnd(self.facade)

    def onEstimateNextIteration(self, estimator, iteration):
        self.listener.onEstimateNextIteration(self.facade, iteration)

    def onEstimateProgressChange(self, estimator, progress):
        self.listener.onEstimateProgressChange(self.facade, progress)


class ModelRobustEstimator:
    """ 模型鲁棒估计的外观基类

    保存配置和数据，负责参数校验和加锁：estimate() 运行期间 isLocked() 为真，
    此时任何修改配置的方法和再次调用 estimate() 都会抛出 LockedException。
    所有参数在修改状态之前校验，校验失败时状态保持不变。

    子类提供 _createEstimator() 以及各自数据的设置方法，数据在内部合并为
    一个 numpy 数组，每行为一个数据项。
    """

    # LMedS / PROMedS 的默认停止阈值
    default_stop_threshold = 1e-3

    def __init__(self, method=DEFAULT_ROBUST_METHOD, listener=None, seed=None):
        self._method = RobustEstimatorMethod(method)
        self._listener = listener
        self._seed = seed

        self._threshold = DEFAULT_THRESHOLD
        self._stop_threshold = self.default_stop_threshold
        self._inlier_factor = DEFAULT_INLIER_FACTOR
        self._confidence = DEFAULT_CONFIDENCE
        self._max_iterations = DEFAULT_MAX_ITERATIONS
        self._progress_delta = DEFAULT_PROGRESS_DELTA
        self._refine_result = DEFAULT_REFINE_RESULT
        self._keep_covariance = DEFAULT_KEEP_COVARIANCE
        self._compute_and_keep_inliers = DEFAULT_COMPUTE_AND_KEEP_INLIERS
        self._compute_and_keep_residuals = DEFAULT_COMPUTE_AND_KEEP_RESIDUALS
        self._sort_weights = DEFAULT_SORT_WEIGHTS

        self._locked = False
        self._points = None
        self._quality_scores = None

        # 最近一次成功估计的结果
        self._inliers_data = None
        self._covariance = None
        self._statistics = None

    @classmethod
    def create(cls, *args, method=DEFAULT_ROBUST_METHOD, **kwargs):
        """ 按鲁棒估计方法创建估计器 """
        return cls(*args, method=method, **kwargs)

    def _createEstimator(self):
        """ 创建模型估计器 """
        raise NotImplementedError

    def _checkLocked(self):
        if self._locked:
            raise LockedException(f"{type(self).__name__} 正在估计，不能修改")

    def getMethod(self):
        return self._method

    def isLocked(self):
        return self._locked

    def getMinimumPoints(self):
        """ 估计模型所需的最少数据项数目 """
        return self._createEstimator().sampleSize()

    def _setData(self, points):
        """ 校验并设置合并后的数据，数据项不足时抛出 ValueError """
        self._checkLocked()
        points = np.asarray(points, dtype=np.float64)
        if np.shape(points)[0] < self.getMinimumPoints():
            raise ValueError(f"至少需要 {self.getMinimumPoints()} 个数据项，实际为 {np.shape(points)[0]}")
        if self._quality_scores is not None and len(self._quality_scores) != np.shape(points)[0]:
            raise ValueError("数据项数目必须与已设置的质量分数数目相同")
        self._points = points

    def getThreshold(self):
        return self._threshold

    def setThreshold(self, threshold):
        self._checkLocked()
        if not np.isfinite(threshold) or threshold <= 0.0:
            raise ValueError("阈值必须大于 0")
        self._threshold = threshold

    def getStopThreshold(self):
        return self._stop_threshold

    def setStopThreshold(self, stop_threshold):
        self._checkLocked()
        if not np.isfinite(stop_threshold) or stop_threshold <= 0.0:
            raise ValueError("停止阈值必须大于 0")
        self._stop_threshold = stop_threshold

    def getConfidence(self):
        return self._confidence

    def setConfidence(self, confidence):
        self._checkLocked()
        if not np.isfinite(confidence) or not 0.0 < confidence <= 1.0:
            raise ValueError("置信率必须在 (0, 1] 之内")
        self._confidence = confidence

    def getMaxIterations(self):
        return self._max_iterations

    def setMaxIterations(self, max_iterations):
        self._checkLocked()
        if not np.isfinite(max_iterations) or max_iterations < 1:
            raise ValueError("最大迭代次数必须不小于 1")
        self._max_iterations = int(max_iterations)

    def getProgressDelta(self):
        return self._progress_delta

    def setProgressDelta(self, progress_delta):
        self._checkLocked()
        if not np.isfinite(progress_delta) or not 0.0 <= progress_delta <= 1.0:
            raise ValueError("进度增量必须在 [0, 1] 之内")
        self._progress_delta = progress_delta

    def getQualityScores(self):
        return self._quality_scores

    def setQualityScores(self, quality_scores):
        """ 设置质量分数，分数越高的数据项越可能是内点 """
        self._checkLocked()
        if quality_scores is None:
            self._quality_scores = None
            return
        quality_scores = np.asarray(quality_scores, dtype=np.float64).ravel()
        if len(quality_scores) < self.getMinimumPoints():
            raise ValueError(f"至少需要 {self.getMinimumPoints()} 个质量分数")
        if self._points is not None and len(quality_scores) != np.shape(self._points)[0]:
            raise ValueError("质量分数数目必须与数据项数目相同")
        self._quality_scores = quality_scores

    def getListener(self):
        return self._listener

    def setListener(self, listener):
        self._checkLocked()
        self._listener = listener

    def isListenerAvailable(self):
        return self._listener is not None

    def isResultRefined(self):
        return self._refine_result

    def setResultRefined(self, refine_result):
        self._checkLocked()
        self._refine_result = bool(refine_result)

    def isCovarianceKept(self):
        return self._keep_covariance

    def setCovarianceKept(self, keep_covariance):
        self._checkLocked()
        self._keep_covariance = bool(keep_covariance)

    def isComputeAndKeepInliersEnabled(self):
        return self._compute_and_keep_inliers

    def setComputeAndKeepInliersEnabled(self, compute_and_keep_inliers):
        self._checkLocked()
        self._compute_and_keep_inliers = bool(compute_and_keep_inliers)

    def isComputeAndKeepResidualsEnabled(self):
        return self._compute_and_keep_residuals

    def setComputeAndKeepResidualsEnabled(self, compute_and_keep_residuals):
        self._checkLocked()
        self._compute_and_keep_residuals = bool(compute_and_keep_residuals)

    def isSortWeightsEnabled(self):
        return self._sort_weights

    def setSortWeightsEnabled(self, sort_weights):
        self._checkLocked()
        self._sort_weights = bool(sort_weights)

    def getSeed(self):
        return self._seed

    def setSeed(self, seed):
        """ 设置采样的随机种子，None 表示每次估计使用不同的随机序列 """
        self._checkLocked()
        self._seed = seed

    def isReady(self):
        """ 数据足够，且需要质量分数的方法已提供与数据等长的质量分数 """
        if self._points is None or np.shape(self._points)[0] < self.getMinimumPoints():
            return False
        if self._method.requiresQualityScores():
            return self._quality_scores is not None and \
                len(self._quality_scores) == np.shape(self._points)[0]
        return True

    def getInliersData(self):
        return self._inliers_data

    def getCovariance(self):
        return self._covariance

    def getStatistics(self):
        """ 最近一次估计的迭代统计 """
        return self._statistics

    def estimate(self):
        """ 运行鲁棒估计

        返回
        ----------
        Model
            估计的最佳模型

        异常
        ----------
        LockedException
            估计正在进行
        NotReadyException
            数据或质量分数不足
        RobustEstimatorException
            未找到有效模型，此时上一次的结果保持不变
        """
        self._checkLocked()
        if not self.isReady():
            raise NotReadyException(f"{type(self).__name__} 尚未准备好")

        self._locked = True
        try:
            logger.debug("%s: %s 估计，%d 个数据项", type(self).__name__, self._method.value, np.shape(self._points)[0])
            estimator = self._createEstimator()
            robust_estimator = self._createRobustEstimator(estimator)
            model = robust_estimator.run(self._points, estimator)

            covariance = None
            if self._refine_result:
                model, covariance = self.attemptRefine(robust_estimator, estimator, model)

            self._inliers_data = robust_estimator.getInliersData()
            self._covariance = covariance
            self._statistics = robust_estimator.statistics
            return model
        finally:
            self._locked = False

    def attemptRefine(self, robust_estimator, estimator, model):
        """ 在内点上优化模型，优化失败时返回原模型

        返回
        ----------
        Model, numpy
            优化后的模型，以及协方差矩阵 (未保留时为 None)
        """
        refiner = Refiner(estimator,
                          keep_covariance=self._keep_covariance,
                          standard_deviation=robust_estimator.getRefinementStandardDeviation())
        refined, _ = refiner.refine(self._points, model, robust_estimator.best_inliers)
        return refined, refiner.covariance if self._keep_covariance else None

    def _createRobustEstimator(self, estimator):
        """ 按方法创建并配置迭代控制器 """
        listener = _ListenerAdapter(self, self._listener) if self._listener is not None else None
        robust_estimator_class = ROBUST_ESTIMATORS[self._method]

        if self._method in (RobustEstimatorMethod.RANSAC, RobustEstimatorMethod.MSAC):
            robust_estimator = robust_estimator_class(estimator, listener, self._seed,
                                                      threshold=self._threshold)
        elif self._method == RobustEstimatorMethod.PROSAC:
            robust_estimator = robust_estimator_class(estimator, listener, self._seed,
                                                      threshold=self._threshold,
                                                      quality_scores=self._quality_scores,
                                                      sort_weights=self._sort_weights)
        elif self._method == RobustEstimatorMethod.LMedS:
            robust_estimator = robust_estimator_class(estimator, listener, self._seed,
                                                      stop_threshold=self._stop_threshold,
                                                      inlier_factor=self._inlier_factor)
        else:
            robust_estimator = robust_estimator_class(estimator, listener, self._seed,
                                                      stop_threshold=self._stop_threshold,
                                                      inlier_factor=self._inlier_factor,
                                                      quality_scores=self._quality_scores,
                                                      sort_weights=self._sort_weights)

        robust_estimator.settings.confidence = self._confidence
        robust_estimator.settings.max_iteration_number = self._max_iterations
        robust_estimator.settings.progress_delta = self._progress_delta
        robust_estimator.settings.compute_and_keep_inliers = self._compute_and_keep_inliers
        robust_estimator.settings.compute_and_keep_residuals = self._compute_and_keep_residuals
        return robust_estimator
