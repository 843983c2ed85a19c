import math as m

import numpy as np


class Score:
    """ 模型评估得分，value 越大越好 """

    def __init__(self):
        self.inlier_number = 0       # 内点数目
        self.value = -m.inf          # 得分，-inf 表示尚无可用模型
        self.residual_sum = 0.0      # 内点残差和，得分相同时较小者更优
        self.estimated_threshold = None

    def __lt__(self, v):
        if self.value != v.value:
            return self.value < v.value
        return self.residual_sum > v.residual_sum

    def __gt__(self, v):
        return v < self

    def __eq__(self, v):
        return self.value == v.value and self.residual_sum == v.residual_sum

    def isValid(self):
        return self.value > -m.inf


class RansacScoringFunction:
    """ RANSAC 评分：阈值内的内点数目，数目相同时比较内点残差和 """

    def __init__(self):
        self.threshold = 0.0

    def initialize(self, threshold):
        self.threshold = threshold

    def getScore(self, residuals):
        """ 求解模型对应的评估得分

        参数
        ----------
        residuals : numpy
            所有数据点相对当前模型的残差

        返回
        ----------
        Score, numpy
            当前模型参数的评估得分
            当前模型参数的内点掩码
        """
        score = Score()
        # 残差等于阈值时也视为内点
        inliers = residuals <= self.threshold
        score.inlier_number = int(np.count_nonzero(inliers))
        if score.inlier_number == 0:
            return score, inliers
        score.value = float(score.inlier_number)
        score.residual_sum = float(residuals[inliers].sum())
        return score, inliers


class MSACScoringFunction(RansacScoringFunction):
    """ MSAC 评分：截断残差平方和 sum(min(r^2, t^2))，越小越好 """

    def getScore(self, residuals):
        score = Score()
        inliers = residuals <= self.threshold
        score.inlier_number = int(np.count_nonzero(inliers))
        if score.inlier_number == 0:
            return score, inliers
        squared_threshold = self.threshold ** 2
        cost = np.minimum(residuals ** 2, squared_threshold).sum()
        score.value = -float(cost)
        return score, inliers


class LMedSScoringFunction:
    """ LMedS 评分：残差中值，越小越好

    内点由鲁棒尺度估计决定：
        sigma = 1.4826 * (1 + 5 / (N - m)) * median(r)
    残差 r <= inlier_factor * sigma 的点为内点，
    估计阈值不小于停止阈值，避免无噪声数据时阈值退化为 0。
    """

    def __init__(self):
        self.stop_threshold = 0.0
        self.sample_size = 0
        self.inlier_factor = 1.5

    def initialize(self, stop_threshold, sample_size, inlier_factor=1.5):
        self.stop_threshold = stop_threshold
        self.sample_size = sample_size
        self.inlier_factor = inlier_factor

    def getScore(self, residuals):
        score = Score()
        point_number = len(residuals)
        median = float(np.median(residuals))
        score.value = -median

        correction = 1.0
        if point_number > self.sample_size:
            correction += 5.0 / (point_number - self.sample_size)
        sigma = 1.4826 * correction * median
        score.estimated_threshold = max(self.inlier_factor * sigma, self.stop_threshold)

        inliers = residuals <= score.estimated_threshold
        score.inlier_number = int(np.count_nonzero(inliers))
        return score, inliers
