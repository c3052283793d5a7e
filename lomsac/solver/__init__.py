from .solver_engine import SolverEngine
from .solver_homography_four_point import SolverHomographyFourPoint
from .solver_line_least_squares import SolverLineLeastSquares
from .solver_line_two_point import SolverLineTwoPoint
