import math as m

import numpy as np
import pytest

from robustfit.sampler import ProsacSampler, UniformSampler
from robustfit.utils import (LMedSScoringFunction, MSACScoringFunction,
                             RansacScoringFunction, Score,
                             UniformRandomGenerator, getIterationNumber,
                             getMinimumInlierNumber, getProsacTerminationLength)


def test_random_generator_is_reproducible():
    first = UniformRandomGenerator(seed=7)
    second = UniformRandomGenerator(seed=7)
    first.resetGenerator(0, 99)
    second.resetGenerator(0, 99)
    for _ in range(20):
        assert first.generateUniqueRandomSet(5) == second.generateUniqueRandomSet(5)


def test_random_generator_unique_and_in_range():
    generator = UniformRandomGenerator(seed=1)
    for _ in range(50):
        sample = generator.generateUniqueRandomSet(4, max=9, to_skip=3)
        assert len(set(sample)) == 4
        assert all(0 <= i <= 9 and i != 3 for i in sample)


def test_random_generator_range_too_small():
    generator = UniformRandomGenerator(seed=1)
    with pytest.raises(ValueError):
        generator.generateUniqueRandomSet(4, max=2)


def test_uniform_sampler():
    points = np.zeros((10, 2))
    sampler = UniformSampler(points, UniformRandomGenerator(seed=3))
    assert sampler.initialized
    pool = [9, 7, 5, 3, 1]
    for _ in range(30):
        sample = sampler.sample(pool, 3)
        assert len(set(sample)) == 3
        assert set(sample) <= set(pool)
    assert sampler.sample(pool, 5) == pool
    assert sampler.sample(pool, 6) == []


def test_prosac_sampler_draws_from_growing_prefix():
    point_number = 100
    sampler = ProsacSampler(np.zeros((point_number, 2)), 2, ransac_convergence_iterations=2000,
                            random_generator=UniformRandomGenerator(seed=5))
    pool = list(range(point_number))

    # 第一个样本总是质量最高的 m 个点
    assert sorted(sampler.sample(pool, 2)) == [0, 1]

    previous_size = sampler.subset_size
    for _ in range(500):
        subset_size = sampler.subset_size
        sample = sampler.sample(pool, 2)
        assert max(sample) < subset_size
        assert subset_size - 1 in sample
        assert sampler.subset_size >= previous_size
        previous_size = sampler.subset_size
    assert 2 < sampler.subset_size <= point_number


def test_prosac_sampler_maps_pool_and_becomes_uniform():
    point_number = 20
    sampler = ProsacSampler(np.zeros((point_number, 2)), 2, ransac_convergence_iterations=10,
                            random_generator=UniformRandomGenerator(seed=5))
    pool = list(reversed(range(point_number)))
    assert sorted(sampler.sample(pool, 2)) == [18, 19]

    # 第 10 次采样之后与 RANSAC 相同，在全部点上均匀采样
    seen = set()
    for _ in range(300):
        seen.update(sampler.sample(pool, 2))
    assert seen == set(range(point_number))


def test_prosac_sampler_wrong_sample_size():
    sampler = ProsacSampler(np.zeros((10, 2)), 2, random_generator=UniformRandomGenerator(seed=1))
    assert sampler.sample(list(range(10)), 3) == []


def test_iteration_number():
    expected = m.ceil(m.log(0.01) / m.log(1.0 - 0.5 ** 2))
    assert getIterationNumber(0.5, 2, 0.99, 1000) == expected == 17
    assert getIterationNumber(1.0, 2, 0.99, 1000) == 1
    assert getIterationNumber(0.0, 2, 0.99, 1000) == 1000
    assert getIterationNumber(0.5, 2, 1.0, 1000) == 1000
    assert getIterationNumber(0.1, 6, 0.99, 50) == 50


def test_prosac_termination_length():
    assert getMinimumInlierNumber(2, 100, 0.01) == 5

    sorted_inliers = np.r_[np.ones(500, dtype=bool), np.zeros(500, dtype=bool)]
    n_best, iterations = getProsacTerminationLength(sorted_inliers, 2, 0.99, 0.01, 1000)
    assert n_best == 500
    assert iterations == 1
    # 内点率上界只影响迭代次数，不影响终止长度
    n_best, iterations = getProsacTerminationLength(sorted_inliers, 2, 0.99, 0.01, 1000, max_inlier_ratio=0.5)
    assert n_best == 500
    assert iterations == 17

    # 只有前 m 个点是内点时不满足非随机性，保持 N
    sorted_inliers = np.r_[np.ones(2, dtype=bool), np.zeros(98, dtype=bool)]
    n_best, iterations = getProsacTerminationLength(sorted_inliers, 2, 0.99, 0.01, 1000)
    assert n_best == 100
    assert iterations == 1000


def test_score_ordering():
    invalid = Score()
    better = Score()
    better.value, better.residual_sum = 10.0, 2.0
    tie = Score()
    tie.value, tie.residual_sum = 10.0, 1.0
    assert not invalid.isValid()
    assert invalid < better
    assert better < tie
    assert tie > better


def test_ransac_and_msac_scoring():
    residuals = np.array([0.0, 0.5, 1.0, 2.0])

    scoring = RansacScoringFunction()
    scoring.initialize(1.0)
    score, inliers = scoring.getScore(residuals)
    assert score.inlier_number == 3
    assert score.value == 3.0
    assert score.residual_sum == pytest.approx(1.5)
    assert inliers.tolist() == [True, True, True, False]

    scoring = MSACScoringFunction()
    scoring.initialize(1.0)
    score, _ = scoring.getScore(residuals)
    assert score.inlier_number == 3
    assert score.value == pytest.approx(-2.25)

    score, _ = scoring.getScore(np.array([5.0, 6.0]))
    assert not score.isValid()


def test_lmeds_scoring():
    scoring = LMedSScoringFunction()
    scoring.initialize(1e-3, 2)
    score, inliers = scoring.getScore(np.array([0.0, 0.0, 0.0, 0.0, 10.0]))
    assert score.value == 0.0
    assert score.estimated_threshold == 1e-3
    assert score.inlier_number == 4

    residuals = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 100.0])
    score, inliers = scoring.getScore(residuals)
    sigma = 1.4826 * (1.0 + 5.0 / 5.0) * 1.0
    assert score.value == -1.0
    assert score.estimated_threshold == pytest.approx(1.5 * sigma)
    assert inliers.tolist() == [True] * 6 + [False]
