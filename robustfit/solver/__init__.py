from .solver_engine import SolverEngine
from .solver_line_two_point import SolverLineTwoPoint
from .solver_circle_three_point import SolverCircleThreePoint
from .solver_plane_three_point import SolverPlaneThreePoint
from .solver_transformation_2d import (SolverEuclideanTransformation2D,
                                       SolverMetricTransformation2D)
from .solver_pinhole_camera_dlt import SolverPinholeCameraDLT
