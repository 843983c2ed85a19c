import cv2
import numpy as np

from robustfit.model import PinholeCamera
from robustfit.solver import SolverPinholeCameraDLT
from .estimator import Estimator


class EstimatorPinholeCamera(Estimator):
    """ 针孔相机估计器

    数据点每行为 [X, Y, Z, u, v]，残差为重投影误差。局部优化使用分解后的
    11 个参数：fx, fy, skew, cx, cy, 旋转向量 (3), 相机中心 (3)。
    """

    def __init__(self, normalize_subset_points=True):
        super().__init__(SolverPinholeCameraDLT(normalize_points=normalize_subset_points))

    def residuals(self, data, model):
        return np.linalg.norm(model.project(data[:, 0:3]) - data[:, 3:5], axis=1)

    def parameterCount(self):
        return 11

    def modelToParameters(self, model):
        intrinsic, rotation, center = model.decompose()
        rotation_vector = cv2.Rodrigues(rotation)[0].ravel()
        return np.r_[intrinsic[0, 0], intrinsic[1, 1], intrinsic[0, 1],
                     intrinsic[0, 2], intrinsic[1, 2], rotation_vector, center]

    def parametersToModel(self, parameters):
        fx, fy, skew, cx, cy = parameters[0:5]
        intrinsic = np.array([[fx, skew, cx],
                              [0.0, fy, cy],
                              [0.0, 0.0, 1.0]])
        rotation = cv2.Rodrigues(np.asarray(parameters[5:8], dtype=np.float64))[0]
        return PinholeCamera.fromDecomposition(intrinsic, rotation, parameters[8:11]).normalize()

    def residualVector(self, data, parameters):
        model = self.parametersToModel(parameters)
        return (model.project(data[:, 0:3]) - data[:, 3:5]).ravel()
