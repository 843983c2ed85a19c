from robustfit.utils import RansacScoringFunction
from .robust_estimator import RobustEstimator, RobustEstimatorMethod

DEFAULT_THRESHOLD = 1.0


class RANSACRobustEstimator(RobustEstimator):
    """ RANSAC：以阈值内的内点数目评价候选模型 """

    method = RobustEstimatorMethod.RANSAC

    def __init__(self, estimator=None, listener=None, seed=None, threshold=DEFAULT_THRESHOLD):
        super().__init__(estimator, listener, seed)
        self.threshold = threshold  # 区分内点与外点的残差阈值
        self.scoring_function = RansacScoringFunction()

    def _initializeScoring(self):
        self.scoring_function.initialize(self.threshold)

    def getRefinementStandardDeviation(self):
        return self.threshold
