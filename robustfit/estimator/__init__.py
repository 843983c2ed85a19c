from .estimator import Estimator
from .estimator_line import EstimatorLine2D
from .estimator_circle import EstimatorCircle
from .estimator_plane import EstimatorPlane
from .estimator_transformation_2d import (EstimatorEuclideanTransformation2D,
                                          EstimatorMetricTransformation2D)
from .estimator_pinhole_camera import EstimatorPinholeCamera
