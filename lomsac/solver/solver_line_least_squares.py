import numpy as np

from lomsac.model import Line2D
from lomsac.solver.solver_engine import SolverEngine


class SolverLineLeastSquares(SolverEngine):
    """ 全最小二乘法拟合二维直线 """

    def sampleSize(self):
        """ 模型参数估计所需的最小样本数 """
        return 2

    def estimateModel(self,
                      points,
                      sample,
                      sample_number,
                      weights=None):
        """ 从给定的样本点，加权拟合直线参数

        参数
        ----------
        points : numpy
            输入的数据点集
        sample : list
            用于估计模型的样本点序号列表
        sample_number : int
            样本点的数目
        weights : list
            数据点集中点的对应权重

        返回
        ----------
        list(Model)
            拟合的直线模型列表，样本退化时为空
        """
        if sample_number < self.sampleSize():
            return []
        selected = points[sample[:sample_number], 0:2]
        if weights is None:
            w = np.ones(sample_number)
        else:
            w = np.asarray([weights[i] for i in sample[:sample_number]], dtype=np.float64)
        if np.sum(w) <= 0.0:
            return []

        # 加权质心，直线必然通过质心
        mass_point = np.sum(selected * w[:, None], axis=0) / np.sum(w)
        centered = (selected - mass_point) * np.sqrt(w)[:, None]

        # 最小奇异值对应的右奇异向量为直线法向量
        _, singular_values, vt = np.linalg.svd(centered, full_matrices=False)
        if singular_values[0] < np.finfo(np.float64).eps:
            return []
        normal = vt[-1]
        return [Line2D(np.r_[normal, -np.dot(normal, mass_point)])]
