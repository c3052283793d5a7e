from .estimator import Estimator
from .estimator_homography import EstimatorHomography
from .estimator_line import EstimatorLine
