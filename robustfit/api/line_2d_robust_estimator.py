import numpy as np

from robustfit.estimator import EstimatorLine2D
from robustfit.ransac import DEFAULT_ROBUST_METHOD
from .model_robust_estimator import ModelRobustEstimator


class Line2DRobustEstimator(ModelRobustEstimator):
    """ 从含外点的二维点集中鲁棒估计直线 """

    def __init__(self, points=None, method=DEFAULT_ROBUST_METHOD, listener=None, quality_scores=None, seed=None):
        super().__init__(method, listener, seed=seed)
        if points is not None:
            self.setPoints(points)
        if quality_scores is not None:
            self.setQualityScores(quality_scores)

    def _createEstimator(self):
        return EstimatorLine2D()

    def getPoints(self):
        return self._points

    def setPoints(self, points):
        self._checkLocked()
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or np.shape(points)[1] != 2:
            raise ValueError("二维点集的形状必须为 (N, 2)")
        self._setData(points)
