import math as m

import numpy as np

from lomsac.solver import SolverHomographyFourPoint
from .estimator import Estimator


class EstimatorHomography(Estimator):
    """ 单应矩阵估计器，数据点为 N x 4 的矩阵：src 在前两列，dst 在后两列 """

    def __init__(self, points, minimalSolver=SolverHomographyFourPoint, nonMinimalSolver=SolverHomographyFourPoint):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] < 4:
            raise ValueError("points must be an N x 4 array")
        super().__init__(points)
        # 用于估计最小样本模型的估计器
        self.minimal_solver = minimalSolver()
        # 用于估计非最小样本模型的估计器
        self.non_minimal_solver = nonMinimalSolver()

    def sampleSize(self):
        """ 估计模型所需的最小样本的大小 """
        return self.minimal_solver.sampleSize()

    def nonMinimalSampleSize(self):
        """ 估计模型所需的非最小样本的大小 """
        return self.non_minimal_solver.sampleSize()

    def estimateModel(self, sample):
        """ 给定一组数据点，估计最小样本模型，样本违反朝向约束时不估计模型 """
        if not self.__isValidSample(sample):
            return []
        return self.minimal_solver.estimateModel(self.points,
                                                 sample,
                                                 self.sampleSize())

    def estimateModelNonminimal(self, sample):
        """ 根据数据点集的非最小采样估计模型

        参数
        ----------
        sample : list
            用于估计模型的样本点序号列表

        返回
        ----------
        list(Model)
            通过样本估计的模型列表
        """
        sample_number = len(sample)
        if sample_number < self.nonMinimalSampleSize():
            return []

        # 在应用最小二乘模型拟合时，对点坐标进行归一化以实现数值稳定性
        result = self.__normalizePoints(sample)
        if result is None:
            return []
        normalized_points, normalizing_transform_source, normalizing_transform_destination = result

        models = self.non_minimal_solver.estimateModel(normalized_points,
                                                       None,
                                                       sample_number)
        # 单应矩阵的反归一化
        for model in models:
            model.descriptor = np.dot(np.linalg.inv(normalizing_transform_destination), model.descriptor)
            model.descriptor = np.dot(model.descriptor, normalizing_transform_source)
            if abs(model.descriptor[2, 2]) > np.finfo(np.float64).eps:
                model.descriptor = model.descriptor / model.descriptor[2, 2]
        return models

    def squaredResidual(self, model, index):
        """ 给定模型和数据点，计算误差的平方 """
        descriptor = model.descriptor
        # 计算通过模型变换矩阵后的点坐标
        x1, y1, x2, y2 = self.points[index, 0:4]
        t1 = descriptor[0, 0] * x1 + descriptor[0, 1] * y1 + descriptor[0, 2]
        t2 = descriptor[1, 0] * x1 + descriptor[1, 1] * y1 + descriptor[1, 2]
        t3 = descriptor[2, 0] * x1 + descriptor[2, 1] * y1 + descriptor[2, 2]
        if t3 == 0.0:
            return float('inf')
        # 计算源点转换后与目标点的距离，即为点到模型的距离
        return (x2 - (t1 / t3)) ** 2 + (y2 - (t2 / t3)) ** 2

    def squaredResiduals(self, model):
        homogeneous = np.c_[self.points[:, 0:2], np.ones(self.pointNumber())]
        transformed = np.dot(homogeneous, model.descriptor.T)
        with np.errstate(divide='ignore', invalid='ignore'):
            projected = transformed[:, 0:2] / transformed[:, 2:3]
            residuals = np.sum((self.points[:, 2:4] - projected) ** 2, axis=1)
        residuals[~np.isfinite(residuals)] = np.inf
        return residuals

    def __isValidSample(self, sample):
        """ 检查朝向约束，取前四个样本点进行交叉验证 """
        a = self.points[sample[0]]
        b = self.points[sample[1]]
        c = self.points[sample[2]]
        d = self.points[sample[3]]

        p = self.__cross_product(a[0:2], b[0:2], 1)
        q = self.__cross_product(a[2:4], b[2:4], 1)
        if (p[0] * c[0] + p[1] * c[1] + p[2]) * (q[0] * c[2] + q[1] * c[3] + q[2]) < 0:
            return False
        if (p[0] * d[0] + p[1] * d[1] + p[2]) * (q[0] * d[2] + q[1] * d[3] + q[2]) < 0:
            return False

        p = self.__cross_product(c[0:2], d[0:2], 1)
        q = self.__cross_product(c[2:4], d[2:4], 1)
        if (p[0] * a[0] + p[1] * a[1] + p[2]) * (q[0] * a[2] + q[1] * a[3] + q[2]) < 0:
            return False
        if (p[0] * b[0] + p[1] * b[1] + p[2]) * (q[0] * b[2] + q[1] * b[3] + q[2]) < 0:
            return False

        return True

    def __cross_product(self, vector1, vector2, st):
        """ 计算两个向量的 cross-product """
        result = np.zeros(3)
        result[0] = vector1[st] - vector2[st]
        result[1] = vector2[0] - vector1[0]
        result[2] = vector1[0] * vector2[st] - vector1[st] * vector2[0]
        return result

    def __normalizePoints(self, sample):
        ''' 规范化点集函数，样本点全部重合时返回 None '''
        selected = self.points[sample, 0:4]

        # 计算质点坐标 均值
        mass_point_src = np.mean(selected[:, 0:2], axis=0)
        mass_point_dst = np.mean(selected[:, 2:4], axis=0)

        # 求解图像点离质点的平均距离
        average_distance_src = np.mean(np.linalg.norm(selected[:, 0:2] - mass_point_src, axis=1))
        average_distance_dst = np.mean(np.linalg.norm(selected[:, 2:4] - mass_point_dst, axis=1))
        if average_distance_src <= 0.0 or average_distance_dst <= 0.0:
            return None

        # 计算 sqrt（2）/ 平均距离 的比率
        ratio_src = m.sqrt(2) / average_distance_src
        ratio_dst = m.sqrt(2) / average_distance_dst

        # 计算归一化的坐标
        normalized_points = np.c_[(selected[:, 0:2] - mass_point_src) * ratio_src,
                                  (selected[:, 2:4] - mass_point_dst) * ratio_dst]

        # 创建归一化转换
        normalizing_transform_source = np.array([[ratio_src, 0, -ratio_src * mass_point_src[0]],
                                                 [0, ratio_src, -ratio_src * mass_point_src[1]],
                                                 [0, 0, 1]])

        normalizing_transform_destination = np.array([[ratio_dst, 0, -ratio_dst * mass_point_dst[0]],
                                                      [0, ratio_dst, -ratio_dst * mass_point_dst[1]],
                                                      [0, 0, 1]])
        # 返回归一化坐标，源图像转换矩阵，目标图像转换矩阵
        return normalized_points, normalizing_transform_source, normalizing_transform_destination
