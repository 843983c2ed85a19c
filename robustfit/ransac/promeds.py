from .lmeds import DEFAULT_INLIER_FACTOR, DEFAULT_STOP_THRESHOLD, LMedSRobustEstimator
from .prosac import ProgressiveSampling
from .robust_estimator import RobustEstimatorMethod


class PROMedSRobustEstimator(ProgressiveSampling, LMedSRobustEstimator):
    """ PROMedS：按质量分数渐进采样，并以残差中值评价候选模型 """

    method = RobustEstimatorMethod.PROMedS

    def __init__(self, estimator=None, listener=None, seed=None, stop_threshold=DEFAULT_STOP_THRESHOLD,
                 inlier_factor=DEFAULT_INLIER_FACTOR, quality_scores=None, sort_weights=True):
        super().__init__(estimator, listener, seed, stop_threshold, inlier_factor)
        self._initializeProgressive(quality_scores, sort_weights)
