import logging

from robustfit.utils import LMedSScoringFunction
from .robust_estimator import RobustEstimator, RobustEstimatorMethod

logger = logging.getLogger(__name__)

DEFAULT_STOP_THRESHOLD = 1e-3
DEFAULT_INLIER_FACTOR = 1.5


class LMedSRobustEstimator(RobustEstimator):
    """ LMedS：最小化残差中值，无需内点阈值

    当最佳模型的残差中值不大于 stop_threshold 时提前停止，
    内点阈值由残差中值的鲁棒尺度估计得到。
    """

    method = RobustEstimatorMethod.LMedS
    # 内点由残差中值推算，错误模型的中值偏大时内点率被高估，
    # 因此迭代上限只按崩溃点 0.5 收缩，提前结束由 stop_threshold 决定
    max_inlier_ratio = 0.5

    def __init__(self, estimator=None, listener=None, seed=None,
                 stop_threshold=DEFAULT_STOP_THRESHOLD, inlier_factor=DEFAULT_INLIER_FACTOR):
        super().__init__(estimator, listener, seed)
        self.stop_threshold = stop_threshold
        self.inlier_factor = inlier_factor
        self.scoring_function = LMedSScoringFunction()

    def _initializeScoring(self):
        self.scoring_function.initialize(self.stop_threshold, self.sample_number, self.inlier_factor)

    def _isFinished(self, best_score):
        # 得分为负的残差中值
        if -best_score.value <= self.stop_threshold:
            logger.debug("%s 残差中值 %g 不大于停止阈值，提前结束", self.method.value, -best_score.value)
            return True
        return False

    def getRefinementStandardDeviation(self):
        if self.best_score is None or self.best_score.estimated_threshold is None:
            return self.stop_threshold
        return self.best_score.estimated_threshold
