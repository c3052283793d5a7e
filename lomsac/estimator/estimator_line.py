import numpy as np

from lomsac.solver import SolverLineLeastSquares, SolverLineTwoPoint
from .estimator import Estimator


class EstimatorLine(Estimator):
    """ 二维直线估计器，数据点为 N x 2 的坐标矩阵 """

    def __init__(self, points, minimalSolver=SolverLineTwoPoint, nonMinimalSolver=SolverLineLeastSquares):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] < 2:
            raise ValueError("points must be an N x 2 array")
        super().__init__(points)
        self.minimal_solver = minimalSolver()
        self.non_minimal_solver = nonMinimalSolver()

    def sampleSize(self):
        return self.minimal_solver.sampleSize()

    def nonMinimalSampleSize(self):
        return self.non_minimal_solver.sampleSize()

    def estimateModel(self, sample):
        return self.minimal_solver.estimateModel(self.points, sample, self.sampleSize())

    def estimateModelNonminimal(self, sample):
        if len(sample) < self.nonMinimalSampleSize():
            return []
        return self.non_minimal_solver.estimateModel(self.points, sample, len(sample))

    def squaredResidual(self, model, index):
        """ 点到直线的距离平方 """
        a, b, c = model.descriptor
        x, y = self.points[index, 0:2]
        return (a * x + b * y + c) ** 2

    def squaredResiduals(self, model):
        a, b, c = model.descriptor
        return (a * self.points[:, 0] + b * self.points[:, 1] + c) ** 2
