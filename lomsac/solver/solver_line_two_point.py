import numpy as np

from lomsac.model import Line2D
from lomsac.solver.solver_engine import SolverEngine


class SolverLineTwoPoint(SolverEngine):
    """ 两点法求解二维直线模型参数 """

    def sampleSize(self):
        """ 模型参数估计所需的最小样本数 """
        return 2

    def estimateModel(self,
                      points,
                      sample,
                      sample_number=2,
                      weights=None):
        """ 通过两个样本点构造直线，两点重合时无法确定直线 """
        p = points[sample[0], 0:2]
        q = points[sample[1], 0:2]
        direction = q - p
        length = np.linalg.norm(direction)
        if length < np.finfo(np.float64).eps:
            return []
        # 直线的单位法向量
        normal = np.array([-direction[1], direction[0]]) / length
        return [Line2D(np.r_[normal, -np.dot(normal, p)])]
