import numpy as np


class Estimator:
    """ 模型估计器基类

    估计器持有全部数据点，负责最小样本求解、非最小样本求解、
    最小二乘优化以及单点残差的计算
    """

    def __init__(self, points):
        self.points = points

    def sampleSize(self):
        """ 估计模型所需的最小样本的大小 """
        raise NotImplementedError

    def nonMinimalSampleSize(self):
        """ 估计模型所需的非最小样本的大小 """
        raise NotImplementedError

    def pointNumber(self):
        """ 数据点的数目 """
        return int(np.shape(self.points)[0])

    def estimateModel(self, sample):
        """ 给定最小样本，估计模型

        参数
        ----------
        sample : list
            用于估计模型的样本点序号列表

        返回
        ----------
        list(Model)
            通过样本估计的模型列表，样本退化时为空
        """
        raise NotImplementedError

    def estimateModelNonminimal(self, sample):
        """ 根据数据点集的非最小采样估计模型
            对于一条直线，在一组点上使用SVD而不是从两点构造一条直线

        参数
        ----------
        sample : list
            用于估计模型的样本点序号列表

        返回
        ----------
        list(Model)
            求解成功时包含一个模型，失败时为空
        """
        raise NotImplementedError

    def leastSquares(self, sample, model):
        """ 用样本点对模型做最小二乘优化，原地修改模型，求解失败时保持模型不变 """
        models = self.estimateModelNonminimal(sample)
        if len(models) > 0:
            model.descriptor = models[0].descriptor

    def squaredResidual(self, model, index):
        """ 给定模型和数据点序号，计算误差的平方 """
        raise NotImplementedError

    def squaredResiduals(self, model):
        """ 计算所有数据点在模型下的误差平方，非有限值记为无穷大 """
        residuals = np.array([self.squaredResidual(model, i) for i in range(self.pointNumber())],
                             dtype=np.float64)
        residuals[~np.isfinite(residuals)] = np.inf
        return residuals
