import logging

import numpy as np

from lomsac.estimator import EstimatorHomography, EstimatorLine

from .lomsac import LocallyOptimizedMSAC
from .settings import LORansacSettings

logger = logging.getLogger(__name__)


def __transformInliersToMask(inliers, point_number):
    """ 转换 inliers 内点序号列表为 cv2 match 所需的 mask

    参数
    --------
    inliers : list
        内点序号列表
    point_number : int
        点集的数目

    返回
    --------
    numpy
        包含 0 1 的 mask 数组
    """
    mask = np.zeros(point_number, dtype=np.uint8)
    mask[inliers] = 1
    return mask


def estimate(estimator, settings=None, model=None):
    """ 用 LO-MSAC 估计模型

    参数
    --------
    estimator : Estimator
        持有数据点集的模型估计器
    settings : LORansacSettings 可选
        运行参数，默认使用缺省参数
    model : Model 可选
        未找到内点时原样返回的模型

    返回
    --------
    int, Model, RansacStatistics
        内点数目，最佳模型，统计信息
    """
    lomsac = LocallyOptimizedMSAC(settings)
    return lomsac.run(estimator, model)


def __runWithMask(estimator, settings):
    inlier_number, model, statistics = estimate(estimator, settings)
    logger.info('Number of iterations = %d, inlier ratio = %.4f',
                statistics.iteration_number, statistics.inlier_ratio)
    mask = __transformInliersToMask(statistics.inlier_indices, estimator.pointNumber())
    if inlier_number == 0:
        return None, mask
    return model.descriptor, mask


""" 用于直线拟合与特征点匹配，对应模型求解的函数 """
def fitLine(points, threshold=1.0, conf=0.9999, max_iters=10000, min_iters=100, seed=0):
    """ 二维直线拟合

    参数
    --------
    points : numpy
        N x 2 的点坐标
    threshold : float
        决定内点和外点的点线距离阈值
    conf : float
        RANSAC置信参数
    max_iters, min_iters : int
        RANSAC算法最大、最小迭代次数
    seed : int
        随机数种子

    返回
    --------
    numpy, numpy
        直线参数 (a, b, c)，标注内点和外点的mask
    """
    estimator = EstimatorLine(points)
    settings = LORansacSettings(squared_inlier_threshold=threshold ** 2,
                                confidence=conf,
                                max_iteration_number=max_iters,
                                min_iteration_number=min_iters,
                                random_seed=seed)
    return __runWithMask(estimator, settings)


def findHomography(src_points, dst_points, threshold=1.0, conf=0.9999, max_iters=10000, min_iters=100, seed=0):
    """ 单应矩阵求解

    参数
    --------
    src_points : numpy
        源图像特征点集合
    dst_points : numpy
        目标图像特征点集合
    threshold : float
        决定内点和外点的重投影误差阈值
    conf : float
        RANSAC置信参数
    max_iters, min_iters : int
        RANSAC算法最大、最小迭代次数
    seed : int
        随机数种子

    返回
    --------
    numpy, numpy
        单应矩阵，标注内点和外点的mask
    """
    src_points = np.asarray(src_points, dtype=np.float64).reshape(-1, 2)
    dst_points = np.asarray(dst_points, dtype=np.float64).reshape(-1, 2)
    if src_points.shape != dst_points.shape:
        raise ValueError("src_points and dst_points must have the same number of points")

    # 合并points到同个矩阵：
    # src在前两列，dst在后两列
    points = np.c_[src_points, dst_points]

    estimator = EstimatorHomography(points)
    settings = LORansacSettings(squared_inlier_threshold=threshold ** 2,
                                confidence=conf,
                                max_iteration_number=max_iters,
                                min_iteration_number=min_iters,
                                random_seed=seed)
    return __runWithMask(estimator, settings)
