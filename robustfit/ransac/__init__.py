from .robust_estimator import (DEFAULT_CONFIDENCE, DEFAULT_MAX_ITERATIONS,
                               DEFAULT_PROGRESS_DELTA, InliersData,
                               RobustEstimator, RobustEstimatorListener,
                               RobustEstimatorMethod, RobustEstimatorState)
from .ransac import DEFAULT_THRESHOLD, RANSACRobustEstimator
from .msac import MSACRobustEstimator
from .lmeds import DEFAULT_INLIER_FACTOR, DEFAULT_STOP_THRESHOLD, LMedSRobustEstimator
from .prosac import PROSACRobustEstimator
from .promeds import PROMedSRobustEstimator

DEFAULT_ROBUST_METHOD = RobustEstimatorMethod.PROMedS

ROBUST_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACRobustEstimator,
    RobustEstimatorMethod.LMedS: LMedSRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACRobustEstimator,
    RobustEstimatorMethod.PROMedS: PROMedSRobustEstimator,
}
