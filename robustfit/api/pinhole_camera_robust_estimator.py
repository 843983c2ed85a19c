import numpy as np

from robustfit.estimator import EstimatorPinholeCamera
from robustfit.ransac import DEFAULT_ROBUST_METHOD
from .model_robust_estimator import ModelRobustEstimator


class PinholeCameraRobustEstimator(ModelRobustEstimator):
    """ 从含误匹配的 3D-2D 对应中鲁棒估计针孔相机矩阵

    残差为像素重投影误差，因此阈值和停止阈值以像素为单位。
    """

    default_stop_threshold = 1.0

    def __init__(self, points3d=None, points2d=None, method=DEFAULT_ROBUST_METHOD, listener=None,
                 quality_scores=None, seed=None):
        super().__init__(method, listener, seed=seed)
        if points3d is not None or points2d is not None:
            self.setPoints(points3d, points2d)
        if quality_scores is not None:
            self.setQualityScores(quality_scores)

    def _createEstimator(self):
        return EstimatorPinholeCamera()

    def getPoints3D(self):
        return None if self._points is None else self._points[:, 0:3]

    def getPoints2D(self):
        return None if self._points is None else self._points[:, 3:5]

    def setPoints(self, points3d, points2d):
        """ 设置对应的三维点和图像点 """
        self._checkLocked()
        if points3d is None or points2d is None:
            raise ValueError("必须同时提供三维点和图像点")
        points3d = np.asarray(points3d, dtype=np.float64)
        points2d = np.asarray(points2d, dtype=np.float64)
        if points3d.ndim != 2 or np.shape(points3d)[1] != 3 or points2d.ndim != 2 or \
                np.shape(points2d)[1] != 2 or len(points3d) != len(points2d):
            raise ValueError("三维点形状必须为 (N, 3)，图像点形状必须为 (N, 2)")
        self._setData(np.c_[points3d, points2d])
