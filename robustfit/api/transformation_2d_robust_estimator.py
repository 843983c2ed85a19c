import numpy as np

from robustfit.estimator import (EstimatorEuclideanTransformation2D,
                                 EstimatorMetricTransformation2D)
from robustfit.ransac import DEFAULT_ROBUST_METHOD
from .model_robust_estimator import ModelRobustEstimator


class EuclideanTransformation2DRobustEstimator(ModelRobustEstimator):
    """ 从含误匹配的二维点对中鲁棒估计欧氏变换 (旋转和平移)

    允许弱最小样本时，最小样本从 3 个点对降为 2 个。
    """

    default_stop_threshold = 1.0
    estimator_class = EstimatorEuclideanTransformation2D

    def __init__(self, input_points=None, output_points=None, method=DEFAULT_ROBUST_METHOD, listener=None,
                 quality_scores=None, seed=None, weak_minimum_size_allowed=False):
        super().__init__(method, listener, seed=seed)
        self._weak_minimum_size_allowed = bool(weak_minimum_size_allowed)
        if input_points is not None or output_points is not None:
            self.setPoints(input_points, output_points)
        if quality_scores is not None:
            self.setQualityScores(quality_scores)

    def _createEstimator(self):
        return self.estimator_class(weak_minimum_size_allowed=self._weak_minimum_size_allowed)

    def isWeakMinimumSizeAllowed(self):
        return self._weak_minimum_size_allowed

    def setWeakMinimumSizeAllowed(self, weak_minimum_size_allowed):
        self._checkLocked()
        self._weak_minimum_size_allowed = bool(weak_minimum_size_allowed)

    def getInputPoints(self):
        return None if self._points is None else self._points[:, 0:2]

    def getOutputPoints(self):
        return None if self._points is None else self._points[:, 2:4]

    def setPoints(self, input_points, output_points):
        """ 设置对应的源点和目标点 """
        self._checkLocked()
        if input_points is None or output_points is None:
            raise ValueError("必须同时提供源点和目标点")
        input_points = np.asarray(input_points, dtype=np.float64)
        output_points = np.asarray(output_points, dtype=np.float64)
        if input_points.ndim != 2 or np.shape(input_points)[1] != 2 or np.shape(input_points) != np.shape(output_points):
            raise ValueError("源点和目标点的形状必须同为 (N, 2)")
        # 合并points到同个矩阵：src在前两列，dst在后两列
        self._setData(np.c_[input_points, output_points])


class MetricTransformation2DRobustEstimator(EuclideanTransformation2DRobustEstimator):
    """ 从含误匹配的二维点对中鲁棒估计相似变换 (旋转、缩放和平移) """

    estimator_class = EstimatorMetricTransformation2D
