import numpy as np

from robustfit import Line2D, Line2DRobustEstimator, RobustEstimatorMethod, RobustEstimatorState
from robustfit.estimator import EstimatorLine2D
from robustfit.ransac import PROSACRobustEstimator, RANSACRobustEstimator
from robustfit.utils.helper import addOutliers, generateLine2DPoints

POINT_NUMBER = 1000
OUTLIER_RATIO = 0.5
TRIALS = 10


def _noisyLine(rng):
    truth = Line2D(0.5, 1.0, -3.0).normalize()
    points = generateLine2DPoints(truth, POINT_NUMBER, noise=0.2, rng=rng)
    points, _ = addOutliers(points, OUTLIER_RATIO, 100.0, rng=rng)
    # 质量分数随点到直线的误差增大而降低
    quality_scores = 1.0 / (1.0 + truth.distance(points))
    return points, quality_scores


def _iterations(method, points, quality_scores, seed):
    estimator = Line2DRobustEstimator(points, method=method, quality_scores=quality_scores, seed=seed)
    estimator.setResultRefined(False)
    estimator.estimate()
    return estimator.getStatistics().iteration_number


def test_prosac_needs_fewer_iterations():
    rng = np.random.default_rng(0)
    prosac_iterations = []
    ransac_iterations = []
    for trial in range(TRIALS):
        points, quality_scores = _noisyLine(rng)
        prosac_iterations.append(_iterations(RobustEstimatorMethod.PROSAC, points, quality_scores, trial))
        ransac_iterations.append(_iterations(RobustEstimatorMethod.RANSAC, points, quality_scores, trial))
    assert np.mean(prosac_iterations) < np.mean(ransac_iterations)


def test_promeds_needs_fewer_iterations_than_lmeds():
    rng = np.random.default_rng(1)
    promeds_iterations = []
    lmeds_iterations = []
    for trial in range(TRIALS):
        points, quality_scores = _noisyLine(rng)
        promeds_iterations.append(_iterations(RobustEstimatorMethod.PROMedS, points, quality_scores, trial))
        lmeds_iterations.append(_iterations(RobustEstimatorMethod.LMedS, points, quality_scores, trial))
    assert np.mean(promeds_iterations) <= np.mean(lmeds_iterations)


def test_prosac_core_with_presorted_data():
    rng = np.random.default_rng(2)
    points, quality_scores = _noisyLine(rng)
    order = np.argsort(-quality_scores)

    robust_estimator = PROSACRobustEstimator(EstimatorLine2D(), seed=1, threshold=1.0,
                                             quality_scores=quality_scores[order], sort_weights=False)
    model = robust_estimator.run(points[order])
    assert robust_estimator.statistics.state == RobustEstimatorState.CONVERGED
    assert robust_estimator.termination_length <= POINT_NUMBER
    assert np.all(model.distance(points[order][robust_estimator.best_inliers]) <= 1.0)

    ransac = RANSACRobustEstimator(EstimatorLine2D(), seed=1, threshold=1.0)
    ransac.run(points)
    assert robust_estimator.statistics.iteration_number <= ransac.statistics.iteration_number
