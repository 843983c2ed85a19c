import math as m

import numpy as np

from robustfit.model import Line2D
from robustfit.solver import SolverLineTwoPoint
from .estimator import Estimator


class EstimatorLine2D(Estimator):
    """ 二维直线估计器，数据点每行为 [x, y] """

    def __init__(self, minimal_solver=None):
        super().__init__(minimal_solver if minimal_solver is not None else SolverLineTwoPoint())

    def residuals(self, data, model):
        """ 点到直线的欧氏距离 """
        return model.distance(data)

    def parameterCount(self):
        return 2

    def modelToParameters(self, model):
        """ 法向角 theta 和原点到直线的距离 rho: cos(theta)*x + sin(theta)*y = rho """
        line = model.copy().normalize()
        return np.array([m.atan2(line.b, line.a), -line.c])

    def parametersToModel(self, parameters):
        theta, rho = parameters
        return Line2D(m.cos(theta), m.sin(theta), -rho).normalize()

    def residualVector(self, data, parameters):
        theta, rho = parameters
        return m.cos(theta) * data[:, 0] + m.sin(theta) * data[:, 1] - rho
