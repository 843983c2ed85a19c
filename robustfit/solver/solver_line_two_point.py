import numpy as np

from robustfit.model import Line2D
from robustfit.solver.solver_engine import SolverEngine


class SolverLineTwoPoint(SolverEngine):
    """ 两点法求解二维直线，多于两点时为加权总体最小二乘 """

    def __init__(self, degeneracy_threshold=1e-12):
        super().__init__()
        self.degeneracy_threshold = degeneracy_threshold

    def sampleSize(self):
        return 2

    def estimateModel(self, points, sample, sample_number, weights=None):
        if sample_number < self.sampleSize():
            return []
        selected, selected_weights = self._selectSample(points, sample, sample_number, weights)
        if selected_weights.sum() <= 0.0:
            return []

        # 加权质心
        centroid = np.average(selected[:, 0:2], axis=0, weights=selected_weights)
        centered = (selected[:, 0:2] - centroid) * np.sqrt(selected_weights)[:, None]

        # 散布矩阵的最小特征值对应的特征向量即直线法向量
        scatter = centered.T @ centered
        eigenvalues, eigenvectors = np.linalg.eigh(scatter)
        # 所有点重合时无法确定方向
        if eigenvalues[1] <= self.degeneracy_threshold:
            return []

        normal = eigenvectors[:, 0]
        c = -float(normal @ centroid)
        model = Line2D(normal[0], normal[1], c)
        return [model.normalize()]
