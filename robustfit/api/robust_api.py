import numpy as np

from robustfit.ransac import RobustEstimatorMethod
from .circle_robust_estimator import CircleRobustEstimator
from .line_2d_robust_estimator import Line2DRobustEstimator
from .pinhole_camera_robust_estimator import PinholeCameraRobustEstimator
from .plane_robust_estimator import PlaneRobustEstimator
from .transformation_2d_robust_estimator import (EuclideanTransformation2DRobustEstimator,
                                                 MetricTransformation2DRobustEstimator)


def _transformInliersToMask(inliers):
    """ 转换内点掩码为 cv2 风格的 0/1 mask

    参数
    --------
    inliers : numpy
        布尔内点掩码

    返回
    --------
    numpy
        包含 0 1 的 mask 数组
    """
    return np.asarray(inliers, dtype=np.uint8)


def _run(robust_estimator, threshold, conf, max_iters, refine):
    robust_estimator.setThreshold(threshold)
    robust_estimator.setConfidence(conf)
    robust_estimator.setMaxIterations(max_iters)
    robust_estimator.setResultRefined(refine)
    robust_estimator.setComputeAndKeepInliersEnabled(True)

    model = robust_estimator.estimate()
    mask = _transformInliersToMask(robust_estimator.getInliersData().inliers)
    return model, mask


""" 用于点集拟合和点对变换求解的函数 """
def findLine2D(points, threshold=1.0, conf=0.99, max_iters=5000,
               method=RobustEstimatorMethod.RANSAC, quality_scores=None, refine=True):
    """ 直线求解

    参数
    --------
    points : numpy
        二维点集，形状为 (N, 2)
    threshold : float
        决定内点和外点的阈值
    conf : float
        置信参数
    max_iters : int
        最大迭代次数
    method : RobustEstimatorMethod
        鲁棒估计方法，PROSAC/PROMedS 需提供 quality_scores
    quality_scores : numpy
        数据点的质量分数
    refine : bool
        是否在内点上优化结果

    返回
    --------
    Line2D, numpy
        直线模型，标注内点和外点的mask
    """
    estimator = Line2DRobustEstimator(points, method=method, quality_scores=quality_scores)
    return _run(estimator, threshold, conf, max_iters, refine)


def findCircle(points, threshold=1.0, conf=0.99, max_iters=5000,
               method=RobustEstimatorMethod.RANSAC, quality_scores=None, refine=True):
    """ 圆求解，参数同 findLine2D """
    estimator = CircleRobustEstimator(points, method=method, quality_scores=quality_scores)
    return _run(estimator, threshold, conf, max_iters, refine)


def findPlane(points, threshold=1.0, conf=0.99, max_iters=5000,
              method=RobustEstimatorMethod.RANSAC, quality_scores=None, refine=True):
    """ 平面求解，points 形状为 (N, 3) """
    estimator = PlaneRobustEstimator(points, method=method, quality_scores=quality_scores)
    return _run(estimator, threshold, conf, max_iters, refine)


def findEuclideanTransformation2D(src_points, dst_points, threshold=1.0, conf=0.99, max_iters=5000,
                                  method=RobustEstimatorMethod.RANSAC, quality_scores=None, refine=True,
                                  weak_minimum_size_allowed=False):
    """ 二维欧氏变换求解

    参数
    --------
    src_points : numpy
        源点集合
    dst_points : numpy
        目标点集合
    weak_minimum_size_allowed : bool
        是否允许以 2 个点对作为最小样本

    返回
    --------
    EuclideanTransformation2D, numpy
        变换模型，标注内点和外点的mask
    """
    estimator = EuclideanTransformation2DRobustEstimator(src_points, dst_points, method=method,
                                                         quality_scores=quality_scores,
                                                         weak_minimum_size_allowed=weak_minimum_size_allowed)
    return _run(estimator, threshold, conf, max_iters, refine)


def findMetricTransformation2D(src_points, dst_points, threshold=1.0, conf=0.99, max_iters=5000,
                               method=RobustEstimatorMethod.RANSAC, quality_scores=None, refine=True,
                               weak_minimum_size_allowed=False):
    """ 二维相似变换求解，参数同 findEuclideanTransformation2D """
    estimator = MetricTransformation2DRobustEstimator(src_points, dst_points, method=method,
                                                      quality_scores=quality_scores,
                                                      weak_minimum_size_allowed=weak_minimum_size_allowed)
    return _run(estimator, threshold, conf, max_iters, refine)


def findPinholeCamera(points3d, points2d, threshold=1.0, conf=0.99, max_iters=5000,
                      method=RobustEstimatorMethod.RANSAC, quality_scores=None, refine=True):
    """ 针孔相机矩阵求解，threshold 为像素重投影误差 """
    estimator = PinholeCameraRobustEstimator(points3d, points2d, method=method, quality_scores=quality_scores)
    return _run(estimator, threshold, conf, max_iters, refine)
