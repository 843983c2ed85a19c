import logging
from time import time

import cv2
import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np

import robustfit as rf
from robustfit.utils.helper import (addOutliers, drawInlierSplit,
                                    generateLine2DPoints,
                                    generateTransformation2DPoints,
                                    getTransferError)


def testLine2D(points, quality_scores, threshold=1.0):
    """ 比较各鲁棒估计方法的直线拟合结果 """
    masks = []
    for method in rf.RobustEstimatorMethod:
        t = time()
        estimator = rf.Line2DRobustEstimator.create(points, method=method, quality_scores=quality_scores, seed=0)
        estimator.setThreshold(threshold)
        estimator.setComputeAndKeepInliersEnabled(True)
        line = estimator.estimate()
        mask = estimator.getInliersData().inliers
        masks.append((method.value, mask))

        print(method.value)
        print('Line = ', line.copy().normalize().descriptor)
        print('Inlier number = ', int(mask.sum()))
        print('Iterations = ', estimator.getStatistics().iteration_number)
        print('Elapsed time = ', time() - t, '\n')

    # 绘制各方法的内点外点划分对比图
    plt.figure(figsize=(12, 8))
    mpl.rcParams.update({'font.size': 8})
    for i, (name, mask) in enumerate(masks):
        ax = plt.subplot(2, 3, i + 1)
        drawInlierSplit(points, mask, title=name, ax=ax)
    plt.savefig('line2d.png')


def testMetricTransformation(src_pts, dst_pts, threshold=1.0):
    """ 比较 cv2 与 robustfit 的相似变换求解 """
    for i in range(3):
        t = time()
        if i == 0:
            print('CV2-RANSAC')
            M, mask = cv2.estimateAffinePartial2D(src_pts, dst_pts, method=cv2.RANSAC,
                                                  ransacReprojThreshold=threshold, confidence=0.99)
            transformation = rf.MetricTransformation2D(np.arctan2(M[1, 0], M[0, 0]),
                                                       np.hypot(M[0, 0], M[1, 0]), M[:, 2])
        elif i == 1:
            print('CV2-LMEDS')
            M, mask = cv2.estimateAffinePartial2D(src_pts, dst_pts, method=cv2.LMEDS)
            transformation = rf.MetricTransformation2D(np.arctan2(M[1, 0], M[0, 0]),
                                                       np.hypot(M[0, 0], M[1, 0]), M[:, 2])
        else:
            print('ROBUSTFIT-MSAC')
            transformation, mask = rf.findMetricTransformation2D(src_pts, dst_pts, threshold=threshold,
                                                                 method=rf.RobustEstimatorMethod.MSAC)
        inliers = np.asarray(mask).ravel().astype(bool)
        print('Inlier number = ', int(inliers.sum()))
        print('Elapsed time = ', time() - t)
        print('Error = ', getTransferError(transformation, src_pts[inliers], dst_pts[inliers]), '\n')


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    rng = np.random.default_rng(0)

    # 直线：1000 个点，30% 外点
    truth = rf.Line2D(1.0, -0.5, 10.0).normalize()
    points = generateLine2DPoints(truth, 1000, noise=0.3, rng=rng)
    points, outliers = addOutliers(points, 0.3, 100.0, rng=rng)
    quality_scores = 1.0 / (1.0 + truth.distance(points))
    print(f"Ground truth line = {truth.descriptor}", '\n')
    testLine2D(points, quality_scores)

    # 相似变换：500 个点对，40% 误匹配
    truth = rf.MetricTransformation2D(0.3, 1.2, (20.0, -5.0))
    src_pts, dst_pts = generateTransformation2DPoints(truth, 500, noise=0.3, rng=rng)
    dst_pts, _ = addOutliers(dst_pts, 0.4, 100.0, rng=rng)
    src_pts, dst_pts = np.float32(src_pts), np.float32(dst_pts)
    testMetricTransformation(src_pts, dst_pts)
