import math as m

import numpy as np

from robustfit.model import Circle
from robustfit.solver.solver_engine import SolverEngine


class SolverCircleThreePoint(SolverEngine):
    """ 三点法求解圆（外接圆），多于三点时为加权代数 (Kasa) 拟合 """

    def __init__(self, degeneracy_threshold=1e-10):
        super().__init__()
        self.degeneracy_threshold = degeneracy_threshold

    def sampleSize(self):
        return 3

    def estimateModel(self, points, sample, sample_number, weights=None):
        if sample_number < self.sampleSize():
            return []
        selected, selected_weights = self._selectSample(points, sample, sample_number, weights)

        # 归一化坐标以提高数值稳定性
        centroid = selected[:, 0:2].mean(axis=0)
        scale = np.abs(selected[:, 0:2] - centroid).max()
        if scale <= 0.0:
            return []
        normalized = (selected[:, 0:2] - centroid) / scale

        # x^2 + y^2 + D*x + E*y + F = 0
        sqrt_weights = np.sqrt(selected_weights)
        coefficients = np.c_[normalized, np.ones(len(normalized))] * sqrt_weights[:, None]
        inhomogeneous = -(normalized ** 2).sum(axis=1) * sqrt_weights

        singular_values = np.linalg.svd(coefficients, compute_uv=False)
        # 共线点集无法确定圆
        if singular_values[-1] <= self.degeneracy_threshold * singular_values[0]:
            return []
        solution = np.linalg.lstsq(coefficients, inhomogeneous, rcond=None)[0]

        cx = -solution[0] / 2.0
        cy = -solution[1] / 2.0
        squared_radius = cx ** 2 + cy ** 2 - solution[2]
        if squared_radius <= 0.0:
            return []

        model = Circle(cx * scale + centroid[0],
                       cy * scale + centroid[1],
                       m.sqrt(squared_radius) * scale)
        return [model]
