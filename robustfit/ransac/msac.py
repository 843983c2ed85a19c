from robustfit.utils import MSACScoringFunction
from .ransac import DEFAULT_THRESHOLD, RANSACRobustEstimator
from .robust_estimator import RobustEstimatorMethod


class MSACRobustEstimator(RANSACRobustEstimator):
    """ MSAC：以截断的残差平方和评价候选模型，内点也按残差大小区分优劣 """

    method = RobustEstimatorMethod.MSAC

    def __init__(self, estimator=None, listener=None, seed=None, threshold=DEFAULT_THRESHOLD):
        super().__init__(estimator, listener, seed, threshold)
        self.scoring_function = MSACScoringFunction()
