import numpy as np

from robustfit.model import EuclideanTransformation2D, MetricTransformation2D
from robustfit.solver import (SolverEuclideanTransformation2D,
                              SolverMetricTransformation2D)
from .estimator import Estimator


class EstimatorEuclideanTransformation2D(Estimator):
    """ 二维欧氏变换估计器

    数据点每行为 [x, y, x', y']，残差为源点变换后与目标点的欧氏距离。
    """

    solver_class = SolverEuclideanTransformation2D

    def __init__(self, weak_minimum_size_allowed=False):
        super().__init__(self.solver_class(weak_minimum_size_allowed=weak_minimum_size_allowed))

    def isValidSample(self, data, sample):
        """ 样本中源点两两不重合 """
        source = data[list(sample), 0:2]
        for i in range(len(source)):
            for j in range(i + 1, len(source)):
                if np.array_equal(source[i], source[j]):
                    return False
        return True

    def residuals(self, data, model):
        return np.linalg.norm(model.transform(data[:, 0:2]) - data[:, 2:4], axis=1)

    def parameterCount(self):
        return 3

    def modelToParameters(self, model):
        return np.r_[model.rotation_angle, model.translation]

    def parametersToModel(self, parameters):
        angle, tx, ty = parameters
        return EuclideanTransformation2D(angle, (tx, ty))

    def residualVector(self, data, parameters):
        model = self.parametersToModel(parameters)
        return (model.transform(data[:, 0:2]) - data[:, 2:4]).ravel()


class EstimatorMetricTransformation2D(EstimatorEuclideanTransformation2D):
    """ 二维相似变换估计器 """

    solver_class = SolverMetricTransformation2D

    def parameterCount(self):
        return 4

    def modelToParameters(self, model):
        return np.r_[model.rotation_angle, model.scale, model.translation]

    def parametersToModel(self, parameters):
        angle, scale, tx, ty = parameters
        return MetricTransformation2D(angle, scale, (tx, ty))
