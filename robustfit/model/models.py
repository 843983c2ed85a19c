import math as m

import cv2
import numpy as np


class Model:
    """ 鲁棒估计求解模型基类 """

    def __init__(self):
        self.descriptor = None

    def copy(self):
        model = self.__class__.__new__(self.__class__)
        model.descriptor = np.array(self.descriptor, dtype=np.float64)
        return model


class Line2D(Model):
    """ 二维直线模型 a*x + b*y + c = 0 """

    def __init__(self, a=0.0, b=1.0, c=0.0):
        super().__init__()
        self.descriptor = np.array([a, b, c], dtype=np.float64)

    @property
    def a(self):
        return float(self.descriptor[0])

    @property
    def b(self):
        return float(self.descriptor[1])

    @property
    def c(self):
        return float(self.descriptor[2])

    def normalize(self):
        """ 归一化直线参数，使法向量为单位向量且 a >= 0 (a 为 0 时 b > 0) """
        norm = m.hypot(self.descriptor[0], self.descriptor[1])
        if norm == 0.0:
            raise ValueError("直线法向量为零，无法归一化")
        self.descriptor = self.descriptor / norm
        a, b = self.descriptor[0], self.descriptor[1]
        if a < 0.0 or (a == 0.0 and b < 0.0):
            self.descriptor = -self.descriptor
        return self

    def isNormalized(self, threshold=1e-12):
        return abs(m.hypot(self.descriptor[0], self.descriptor[1]) - 1.0) <= threshold

    def signedDistance(self, points):
        """ 计算点集到直线的有向距离

        参数
        ----------
        points : numpy
            (N,2) 的点集

        返回
        ----------
        numpy
            (N,) 的有向距离
        """
        points = np.atleast_2d(points)
        a, b, c = self.descriptor
        return (a * points[:, 0] + b * points[:, 1] + c) / m.hypot(a, b)

    def distance(self, points):
        return np.abs(self.signedDistance(points))

    def isLocus(self, point, threshold=1e-12):
        return float(self.distance(point)[0]) <= threshold


class Circle(Model):
    """ 二维圆模型，参数为圆心 (cx, cy) 和半径 r """

    def __init__(self, cx=0.0, cy=0.0, radius=1.0):
        super().__init__()
        self.descriptor = np.array([cx, cy, radius], dtype=np.float64)

    @property
    def center(self):
        return self.descriptor[0:2].copy()

    @property
    def radius(self):
        return float(self.descriptor[2])

    def signedDistance(self, points):
        """ 圆外为正，圆内为负 """
        points = np.atleast_2d(points)
        return np.linalg.norm(points[:, 0:2] - self.descriptor[0:2], axis=1) - self.descriptor[2]

    def distance(self, points):
        return np.abs(self.signedDistance(points))

    def isLocus(self, point, threshold=1e-12):
        return float(self.distance(point)[0]) <= threshold


class Plane(Model):
    """ 三维平面模型 a*x + b*y + c*z + d = 0 """

    def __init__(self, a=0.0, b=0.0, c=1.0, d=0.0):
        super().__init__()
        self.descriptor = np.array([a, b, c, d], dtype=np.float64)

    @property
    def normal(self):
        n = self.descriptor[0:3]
        return n / np.linalg.norm(n)

    def normalize(self):
        """ 归一化平面参数，使法向量为单位向量且第一个非零分量为正 """
        norm = np.linalg.norm(self.descriptor[0:3])
        if norm == 0.0:
            raise ValueError("平面法向量为零，无法归一化")
        self.descriptor = self.descriptor / norm
        for value in self.descriptor[0:3]:
            if value != 0.0:
                if value < 0.0:
                    self.descriptor = -self.descriptor
                break
        return self

    def isNormalized(self, threshold=1e-12):
        return abs(np.linalg.norm(self.descriptor[0:3]) - 1.0) <= threshold

    def signedDistance(self, points):
        points = np.atleast_2d(points)
        n = self.descriptor[0:3]
        return (points[:, 0:3] @ n + self.descriptor[3]) / np.linalg.norm(n)

    def distance(self, points):
        return np.abs(self.signedDistance(points))

    def isLocus(self, point, threshold=1e-12):
        return float(self.distance(point)[0]) <= threshold


class EuclideanTransformation2D(Model):
    """ 二维欧氏变换（旋转 + 平移），descriptor 为 3x3 齐次矩阵 """

    def __init__(self, angle=0.0, translation=(0.0, 0.0)):
        super().__init__()
        self.descriptor = _similarityMatrix(angle, 1.0, translation)

    @property
    def rotation_angle(self):
        return m.atan2(self.descriptor[1, 0], self.descriptor[0, 0])

    @property
    def translation(self):
        return self.descriptor[0:2, 2].copy()

    def transform(self, points):
        """ 变换 (N,2) 点集，返回 (N,2) 点集 """
        points = np.atleast_2d(points)
        return points[:, 0:2] @ self.descriptor[0:2, 0:2].T + self.descriptor[0:2, 2]


class MetricTransformation2D(EuclideanTransformation2D):
    """ 二维相似变换（旋转 + 缩放 + 平移） """

    def __init__(self, angle=0.0, scale=1.0, translation=(0.0, 0.0)):
        Model.__init__(self)
        self.descriptor = _similarityMatrix(angle, scale, translation)

    @property
    def scale(self):
        return m.hypot(self.descriptor[0, 0], self.descriptor[1, 0])


def _similarityMatrix(angle, scale, translation):
    cos_theta = scale * m.cos(angle)
    sin_theta = scale * m.sin(angle)
    return np.array([[cos_theta, -sin_theta, translation[0]],
                     [sin_theta, cos_theta, translation[1]],
                     [0.0, 0.0, 1.0]], dtype=np.float64)


class PinholeCamera(Model):
    """ 针孔相机模型，descriptor 为 3x4 投影矩阵 P = K R [I | -C] """

    def __init__(self, matrix=None):
        super().__init__()
        if matrix is None:
            matrix = np.c_[np.eye(3), np.zeros(3)]
        self.descriptor = np.array(matrix, dtype=np.float64).reshape(3, 4)

    @classmethod
    def fromDecomposition(cls, intrinsic, rotation, center):
        """ 由内参矩阵、旋转矩阵和相机中心构建相机

        参数
        ----------
        intrinsic : numpy
            3x3 内参矩阵 K
        rotation : numpy
            3x3 旋转矩阵 R
        center : numpy
            相机中心 C (3,)

        返回
        ----------
        PinholeCamera
            P = K R [I | -C]
        """
        center = np.asarray(center, dtype=np.float64).reshape(3)
        rotation = np.asarray(rotation, dtype=np.float64)
        matrix = np.asarray(intrinsic, dtype=np.float64) @ np.c_[rotation, -rotation @ center]
        return cls(matrix)

    def normalize(self):
        """ Frobenius 范数归一化，并保证左 3x3 子矩阵行列式为正 """
        self.descriptor = self.descriptor / np.linalg.norm(self.descriptor)
        if np.linalg.det(self.descriptor[:, 0:3]) < 0.0:
            self.descriptor = -self.descriptor
        return self

    def project(self, points3d):
        """ 将 (N,3) 三维点投影为 (N,2) 图像点 """
        points3d = np.atleast_2d(points3d)
        homogeneous = points3d[:, 0:3] @ self.descriptor[:, 0:3].T + self.descriptor[:, 3]
        return homogeneous[:, 0:2] / homogeneous[:, 2:3]

    def decompose(self):
        """ 分解投影矩阵为内参矩阵 K、旋转矩阵 R 和相机中心 C

        返回
        ----------
        numpy, numpy, numpy
            K (K[2,2] = 1 且对角线为正), R (det = 1), C
        """
        matrix = self.descriptor
        if np.linalg.det(matrix[:, 0:3]) < 0.0:
            matrix = -matrix
        intrinsic, rotation, center = cv2.decomposeProjectionMatrix(matrix)[0:3]
        # 使内参矩阵对角线为正，同时保持 K R 不变
        for i in range(3):
            if intrinsic[i, i] < 0.0:
                intrinsic[:, i] = -intrinsic[:, i]
                rotation[i, :] = -rotation[i, :]
        intrinsic = intrinsic / intrinsic[2, 2]
        center = center[0:3, 0] / center[3, 0]
        return intrinsic, rotation, center
