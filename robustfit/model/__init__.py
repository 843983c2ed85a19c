from .models import (Circle, EuclideanTransformation2D, Line2D,
                     MetricTransformation2D, Model, PinholeCamera, Plane)
