from .model_robust_estimator import ModelRobustEstimator
from .line_2d_robust_estimator import Line2DRobustEstimator
from .circle_robust_estimator import CircleRobustEstimator
from .plane_robust_estimator import PlaneRobustEstimator
from .transformation_2d_robust_estimator import (EuclideanTransformation2DRobustEstimator,
                                                 MetricTransformation2DRobustEstimator)
from .pinhole_camera_robust_estimator import PinholeCameraRobustEstimator
from .robust_api import (findCircle, findEuclideanTransformation2D, findLine2D,
                         findMetricTransformation2D, findPinholeCamera, findPlane)
