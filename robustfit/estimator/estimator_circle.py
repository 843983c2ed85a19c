import numpy as np

from robustfit.model import Circle
from robustfit.solver import SolverCircleThreePoint
from .estimator import Estimator


class EstimatorCircle(Estimator):
    """ 圆估计器，数据点每行为 [x, y] """

    def __init__(self, minimal_solver=None):
        super().__init__(minimal_solver if minimal_solver is not None else SolverCircleThreePoint())

    def residuals(self, data, model):
        return model.distance(data)

    def parameterCount(self):
        return 3

    def modelToParameters(self, model):
        return np.array(model.descriptor, dtype=np.float64)

    def parametersToModel(self, parameters):
        cx, cy, radius = parameters
        return Circle(cx, cy, abs(radius))

    def residualVector(self, data, parameters):
        cx, cy, radius = parameters
        return np.hypot(data[:, 0] - cx, data[:, 1] - cy) - radius
