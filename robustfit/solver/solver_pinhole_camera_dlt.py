import math as m

import numpy as np

from robustfit.model import PinholeCamera
from robustfit.solver.solver_engine import SolverEngine


class SolverPinholeCameraDLT(SolverEngine):
	""" 直接线性变换 (DLT) 求解针孔相机投影矩阵

	数据点每行为 [X, Y, Z, u, v]，三维点在前三列，对应图像点在后两列。
	"""

	def __init__(self, normalize_points=True, degeneracy_threshold=1e-10):
		super().__init__()
		self.normalize_points = normalize_points
		self.degeneracy_threshold = degeneracy_threshold

	def sampleSize(self):
		""" 每个点对提供两个方程，11 个自由度需要 6 个点对 """
		return 6

	def estimateModel(self,
					  points,
					  sample,
					  sample_number,
					  weights=None):
		if sample_number < self.sampleSize():
			return []
		selected, selected_weights = self._selectSample(points, sample, sample_number, weights)
		points3d = selected[:, 0:3]
		points2d = selected[:, 3:5]

		# 规范化点集以提高数值稳定性
		if self.normalize_points:
			transform3d = self.__normalizingTransform(points3d)
			transform2d = self.__normalizingTransform(points2d)
			if transform3d is None or transform2d is None:
				return []
			points3d = (np.c_[points3d, np.ones(sample_number)] @ transform3d.T)[:, 0:3]
			points2d = (np.c_[points2d, np.ones(sample_number)] @ transform2d.T)[:, 0:2]

		# 参数矩阵设置
		coefficients = np.zeros([2 * sample_number, 12])
		for i in range(sample_number):
			weight = selected_weights[i]
			X = np.r_[points3d[i], 1.0]
			u, v = points2d[i]
			coefficients[2 * i] = np.r_[X, np.zeros(4), -u * X] * weight
			coefficients[2 * i + 1] = np.r_[np.zeros(4), X, -v * X] * weight

		# 最小奇异值对应的右奇异向量即投影矩阵
		_, singular_values, vt = np.linalg.svd(coefficients)
		if len(singular_values) < 12 or \
				singular_values[10] <= self.degeneracy_threshold * singular_values[0]:
			return []
		matrix = vt[11].reshape(3, 4)

		# 反归一化
		if self.normalize_points:
			matrix = np.linalg.inv(transform2d) @ matrix @ transform3d

		if not np.isfinite(matrix).all() or np.linalg.norm(matrix) == 0.0:
			return []
		return [PinholeCamera(matrix).normalize()]

	def __normalizingTransform(self, points):
		""" 平移至质心并缩放，使点到质心的平均距离为 sqrt(dim) """
		dimension = points.shape[1]
		centroid = points.mean(axis=0)
		average_distance = np.linalg.norm(points - centroid, axis=1).mean()
		if average_distance <= 0.0:
			return None
		ratio = m.sqrt(dimension) / average_distance
		transform = np.eye(dimension + 1) * ratio
		transform[dimension, dimension] = 1.0
		transform[0:dimension, dimension] = -ratio * centroid
		return transform
