from .exceptions import (LockedException, NotReadyException, RobustEstimatorException,
                         RobustFitError)
from .model import (Circle, EuclideanTransformation2D, Line2D, MetricTransformation2D,
                    PinholeCamera, Plane)
from .ransac import (DEFAULT_ROBUST_METHOD, InliersData, RobustEstimatorListener,
                     RobustEstimatorMethod, RobustEstimatorState)
from .api import (CircleRobustEstimator, EuclideanTransformation2DRobustEstimator,
                  Line2DRobustEstimator, MetricTransformation2DRobustEstimator,
                  ModelRobustEstimator, PinholeCameraRobustEstimator, PlaneRobustEstimator,
                  findCircle, findEuclideanTransformation2D, findLine2D,
                  findMetricTransformation2D, findPinholeCamera, findPlane)

__version__ = "0.1.0"
