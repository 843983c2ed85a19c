import numpy as np

from robustfit.model import Plane
from robustfit.solver import SolverPlaneThreePoint
from .estimator import Estimator


class EstimatorPlane(Estimator):
    """ 平面估计器，数据点每行为 [x, y, z]

    局部优化在参考法向量的切平面上参数化：n = normalize(n0 + u*e1 + v*e2)，
    参数为 [u, v, d]，避免球坐标在极点处的奇异性。
    """

    def __init__(self, minimal_solver=None):
        super().__init__(minimal_solver if minimal_solver is not None else SolverPlaneThreePoint())
        self.__reference_normal = np.array([0.0, 0.0, 1.0])
        self.__tangent_basis = np.eye(3)[0:2]

    def residuals(self, data, model):
        return model.distance(data)

    def parameterCount(self):
        return 3

    def modelToParameters(self, model):
        plane = model.copy().normalize()
        normal = plane.descriptor[0:3]
        # 以当前法向量作为参考，构建其切平面的正交基
        _, _, vt = np.linalg.svd(normal.reshape(1, 3))
        self.__reference_normal = normal
        self.__tangent_basis = vt[1:3]
        return np.array([0.0, 0.0, plane.descriptor[3]])

    def parametersToModel(self, parameters):
        normal = self.__normal(parameters)
        return Plane(normal[0], normal[1], normal[2], parameters[2]).normalize()

    def residualVector(self, data, parameters):
        return data[:, 0:3] @ self.__normal(parameters) + parameters[2]

    def __normal(self, parameters):
        normal = self.__reference_normal + parameters[0:2] @ self.__tangent_basis
        return normal / np.linalg.norm(normal)
