import numpy as np

from robustfit.model import Plane
from robustfit.solver.solver_engine import SolverEngine


class SolverPlaneThreePoint(SolverEngine):
    """ 三点法求解平面，多于三点时为加权总体最小二乘 """

    def __init__(self, degeneracy_threshold=1e-10):
        super().__init__()
        self.degeneracy_threshold = degeneracy_threshold

    def sampleSize(self):
        return 3

    def estimateModel(self, points, sample, sample_number, weights=None):
        if sample_number < self.sampleSize():
            return []
        selected, selected_weights = self._selectSample(points, sample, sample_number, weights)
        if selected_weights.sum() <= 0.0:
            return []

        centroid = np.average(selected[:, 0:3], axis=0, weights=selected_weights)
        centered = (selected[:, 0:3] - centroid) * np.sqrt(selected_weights)[:, None]

        _, singular_values, vt = np.linalg.svd(centered, full_matrices=True)
        # 共线或重合点集只张成一条直线
        if len(singular_values) < 2 or \
                singular_values[1] <= self.degeneracy_threshold * singular_values[0]:
            return []

        normal = vt[2]
        model = Plane(normal[0], normal[1], normal[2], -float(normal @ centroid))
        return [model.normalize()]
