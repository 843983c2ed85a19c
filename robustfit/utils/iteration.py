import math as m
import sys

import numpy as np

# 非随机性检验的卡方分位数 (P = 0.10)
CHI_SQUARED = 2.706


def getIterationNumber(inlier_ratio, sample_size, confidence, max_iterations):
    """ 计算给定内点率下达到置信率所需的迭代次数 H(|L*|, µ)

        T = ceil(log(1 - confidence) / log(1 - inlier_ratio ^ sample_size))

    结果限制在 [1, max_iterations] 之内
    """
    if inlier_ratio >= 1.0:
        return 1
    if confidence >= 1.0:
        return max_iterations
    Pi = max(inlier_ratio, 0.0) ** sample_size
    if Pi < sys.float_info.epsilon:
        return max_iterations
    log1 = m.log(1.0 - confidence)
    log2 = m.log(1.0 - Pi)
    iterations = int(m.ceil(log1 / log2))
    return min(max(iterations, 1), max_iterations)


def getMinimumInlierNumber(sample_size, n, beta):
    """ PROSAC 非随机性检验：前 n 个点中至少需要的内点数 I_min(n)

    在误匹配以概率 beta 支持错误模型的假设下，随机支持的内点数近似服从
    均值 n*beta、标准差 sqrt(n*beta*(1-beta)) 的正态分布。
    """
    mu = n * beta
    sigma = m.sqrt(n * beta * (1.0 - beta))
    return int(m.ceil(sample_size + mu + sigma * m.sqrt(CHI_SQUARED)))


def getProsacTerminationLength(sorted_inliers, sample_size, confidence, beta, max_iterations,
                               max_inlier_ratio=1.0):
    """ PROSAC 最大性与非随机性准则下的终止长度 n* 及所需迭代次数 k_n*

    参数
    ----------
    sorted_inliers : numpy
        按质量降序排列的内点掩码
    sample_size : int
        最小样本大小
    confidence : float
        结果的置信率
    beta : float
        误匹配支持错误模型的概率
    max_iterations : int
        迭代次数上限
    max_inlier_ratio : float
        计算迭代次数时内点率的上界

    返回
    ----------
    int, int
        终止长度 n*，以及在 n* 下达到置信率所需的迭代次数
    """
    point_number = len(sorted_inliers)
    cumulative_inliers = np.cumsum(sorted_inliers)

    n_best = point_number
    inliers_best = int(cumulative_inliers[-1])
    # 从 N 向下搜索内点率更高且满足非随机性的前缀
    for n in range(point_number, sample_size, -1):
        inliers_n = int(cumulative_inliers[n - 1])
        if inliers_n * n_best > inliers_best * n and \
                inliers_n >= getMinimumInlierNumber(sample_size, n, beta):
            n_best = n
            inliers_best = inliers_n

    inlier_ratio = min(float(inliers_best) / n_best, max_inlier_ratio)
    iterations = getIterationNumber(inlier_ratio, sample_size, confidence, max_iterations)
    return n_best, iterations
