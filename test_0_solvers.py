import math as m

import cv2
import numpy as np
import pytest

from robustfit.estimator import (EstimatorCircle, EstimatorEuclideanTransformation2D,
                                 EstimatorLine2D, EstimatorMetricTransformation2D,
                                 EstimatorPinholeCamera, EstimatorPlane)
from robustfit.model import (Circle, EuclideanTransformation2D, Line2D,
                             MetricTransformation2D, PinholeCamera, Plane)
from robustfit.solver import (SolverCircleThreePoint, SolverEuclideanTransformation2D,
                              SolverLineTwoPoint, SolverMetricTransformation2D,
                              SolverPinholeCameraDLT, SolverPlaneThreePoint)
from robustfit.utils.helper import (generateCirclePoints, generateLine2DPoints,
                                    generatePinholeCameraPoints, generatePlanePoints,
                                    generateTransformation2DPoints)

ABSOLUTE_ERROR = 1e-6


def _camera():
    intrinsic = np.array([[800.0, 0.5, 320.0],
                          [0.0, 780.0, 240.0],
                          [0.0, 0.0, 1.0]])
    rotation = cv2.Rodrigues(np.array([0.1, -0.2, 0.05]))[0]
    return PinholeCamera.fromDecomposition(intrinsic, rotation, np.array([0.5, -0.3, -2.0]))


def test_line_normalize():
    line = Line2D(-2.0, 0.0, 4.0).normalize()
    assert line.isNormalized()
    assert np.allclose(line.descriptor, [1.0, 0.0, -2.0])
    assert line.isLocus([2.0, 7.0])


def test_line_two_point_solver():
    points = np.array([[0.0, 0.0], [1.0, 1.0]])
    models = SolverLineTwoPoint().estimateModel(points, [0, 1], 2)
    assert len(models) == 1
    line = models[0]
    assert line.isNormalized()
    assert np.all(line.distance(points) < ABSOLUTE_ERROR)
    assert line.a >= 0.0


def test_line_solver_coincident_points_are_degenerate():
    points = np.array([[3.0, 4.0], [3.0, 4.0]])
    assert SolverLineTwoPoint().estimateModel(points, [0, 1], 2) == []


def test_line_total_least_squares():
    rng = np.random.default_rng(1)
    truth = Line2D(1.0, -2.0, 5.0).normalize()
    points = generateLine2DPoints(truth, 200, noise=0.01, rng=rng)
    line = SolverLineTwoPoint().estimateModel(points, range(200), 200)[0]
    assert np.allclose(line.descriptor, truth.descriptor, atol=1e-2)


def test_circle_three_point_solver():
    truth = Circle(1.0, 2.0, 3.0)
    angles = np.array([0.0, m.pi / 2.0, 3.5])
    points = truth.center + truth.radius * np.c_[np.cos(angles), np.sin(angles)]
    circle = SolverCircleThreePoint().estimateModel(points, [0, 1, 2], 3)[0]
    assert np.allclose(circle.descriptor, truth.descriptor, atol=ABSOLUTE_ERROR)


def test_circle_collinear_points_are_degenerate():
    points = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
    assert SolverCircleThreePoint().estimateModel(points, [0, 1, 2], 3) == []


def test_plane_three_point_solver():
    truth = Plane(1.0, 2.0, -1.0, 3.0).normalize()
    points = generatePlanePoints(truth, 3, rng=np.random.default_rng(2))
    plane = SolverPlaneThreePoint().estimateModel(points, [0, 1, 2], 3)[0]
    assert plane.isNormalized()
    assert np.allclose(plane.descriptor, truth.descriptor, atol=ABSOLUTE_ERROR)


def test_plane_collinear_points_are_degenerate():
    points = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
    assert SolverPlaneThreePoint().estimateModel(points, [0, 1, 2], 3) == []


@pytest.mark.parametrize("weak, size", [(False, 3), (True, 2)])
def test_euclidean_transformation_solver(weak, size):
    truth = EuclideanTransformation2D(0.3, (2.0, -1.0))
    src, dst = generateTransformation2DPoints(truth, size, rng=np.random.default_rng(3))
    solver = SolverEuclideanTransformation2D(weak_minimum_size_allowed=weak)
    assert solver.sampleSize() == size
    model = solver.estimateModel(np.c_[src, dst], range(size), size)[0]
    assert abs(model.rotation_angle - 0.3) < ABSOLUTE_ERROR
    assert np.allclose(model.translation, [2.0, -1.0], atol=ABSOLUTE_ERROR)


def test_metric_transformation_solver():
    truth = MetricTransformation2D(-0.7, 1.5, (10.0, 4.0))
    src, dst = generateTransformation2DPoints(truth, 3, rng=np.random.default_rng(4))
    model = SolverMetricTransformation2D().estimateModel(np.c_[src, dst], [0, 1, 2], 3)[0]
    assert abs(model.scale - 1.5) < ABSOLUTE_ERROR
    assert np.allclose(model.descriptor, truth.descriptor, atol=ABSOLUTE_ERROR)


def test_transformation_coincident_source_points_are_degenerate():
    points = np.array([[1.0, 1.0, 0.0, 0.0], [1.0, 1.0, 5.0, 5.0]])
    solver = SolverEuclideanTransformation2D(weak_minimum_size_allowed=True)
    assert solver.estimateModel(points, [0, 1], 2) == []
    estimator = EstimatorEuclideanTransformation2D(weak_minimum_size_allowed=True)
    assert not estimator.isValidSample(points, [0, 1])


def test_pinhole_camera_decomposition():
    camera = _camera()
    intrinsic, rotation, center = camera.decompose()
    assert abs(intrinsic[2, 2] - 1.0) < ABSOLUTE_ERROR
    assert np.allclose(intrinsic[0:2, 0:2], [[800.0, 0.5], [0.0, 780.0]], atol=1e-6)
    assert abs(np.linalg.det(rotation) - 1.0) < ABSOLUTE_ERROR
    assert np.allclose(center, [0.5, -0.3, -2.0], atol=1e-6)


def test_pinhole_camera_dlt_solver():
    camera = _camera()
    points3d, points2d = generatePinholeCameraPoints(camera, 6, rng=np.random.default_rng(5))
    model = SolverPinholeCameraDLT().estimateModel(np.c_[points3d, points2d], range(6), 6)[0]
    assert np.allclose(model.project(points3d), points2d, atol=ABSOLUTE_ERROR)
    assert np.allclose(model.descriptor, camera.copy().normalize().descriptor, atol=ABSOLUTE_ERROR)


def test_pinhole_camera_coplanar_points_are_degenerate():
    camera = _camera()
    points3d = np.c_[np.random.default_rng(6).uniform(-1.0, 1.0, (6, 2)), np.full(6, 10.0)]
    points2d = camera.project(points3d)
    assert SolverPinholeCameraDLT().estimateModel(np.c_[points3d, points2d], range(6), 6) == []


@pytest.mark.parametrize("estimator, model", [
    (EstimatorLine2D(), Line2D(0.6, -0.8, 3.0)),
    (EstimatorCircle(), Circle(-1.0, 2.0, 5.0)),
    (EstimatorPlane(), Plane(0.0, 0.6, 0.8, -2.0)),
    (EstimatorEuclideanTransformation2D(), EuclideanTransformation2D(0.2, (1.0, 2.0))),
    (EstimatorMetricTransformation2D(), MetricTransformation2D(0.2, 0.5, (1.0, 2.0))),
    (EstimatorPinholeCamera(), _camera().normalize()),
])
def test_estimator_parameterization(estimator, model):
    parameters = estimator.modelToParameters(model)
    assert len(parameters) == estimator.parameterCount()
    restored = estimator.parametersToModel(parameters)
    assert np.allclose(restored.descriptor, model.descriptor, atol=1e-8)
