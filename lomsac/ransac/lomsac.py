import logging
import math as m
import sys
from copy import deepcopy

from lomsac.sampler import UniformSampler
from lomsac.utils.score import MSACScoringFunction
from lomsac.utils.uniform_random_generator import UniformRandomGenerator

from .settings import LORansacSettings, RansacStatistics

logger = logging.getLogger(__name__)


def getIterationNumber(inlier_ratio,
                       prob_missing_best_model,
                       sample_size,
                       min_iterations,
                       max_iterations):
    """ 计算当前内点率下所需的迭代次数

    参数
    ----------
    inlier_ratio : float
        当前最佳模型的内点率
    prob_missing_best_model : float
        遗漏最佳模型的概率，即 1 - confidence
    sample_size : int
        最小样本数
    min_iterations, max_iterations : int
        迭代次数的下限和上限，要求 min_iterations <= max_iterations

    返回
    ----------
    int
        截断到 [min_iterations, max_iterations] 的迭代次数
    """
    if inlier_ratio <= 0.0:
        return max_iterations
    if inlier_ratio >= 1.0:
        return min_iterations

    # 样本全部为内点的概率过小时 log(1 - Pi) 为 0
    Pi = inlier_ratio ** sample_size
    if Pi < sys.float_info.epsilon:
        return max_iterations
    log1 = m.log(prob_missing_best_model)
    log2 = m.log(1.0 - Pi)

    iteration_number = m.ceil(log1 / log2 + 0.5)
    iteration_number = min(iteration_number, max_iterations)
    return max(min_iterations, iteration_number)


class LocallyOptimizedMSAC:
    """ 采用 MSAC 评分的局部优化 RANSAC

    参见 Lebeda, Matas, Chum, Fixing the Locally Optimized RANSAC, BMVC 2012
    """

    def __init__(self, settings=None):
        self.settings = settings if settings is not None else LORansacSettings()
        # 模型评估的评分函数
        self.scoring_function = MSACScoringFunction()

    def run(self, estimator, model=None):
        """ 运行 LO-MSAC 求解过程

        参数
        ----------
        estimator : Estimator
            持有数据点集的模型估计器
        model : Model 可选
            未找到内点时原样返回的模型

        返回
        ----------
        int, Model, RansacStatistics
            最佳模型的内点数目，最佳模型，本次运行的统计信息
            内点数目为 0 时返回的模型不可信
        """
        # 运行期间参数只读，基础参数补全局部优化的缺省值
        if isinstance(self.settings, LORansacSettings):
            settings = deepcopy(self.settings)
        else:
            settings = LORansacSettings.fromDict(self.settings.toDict())
        settings.validate()
        statistics = RansacStatistics()

        sample_size = estimator.sampleSize()
        point_number = estimator.pointNumber()
        if sample_size > point_number or sample_size <= 0:
            logger.debug("Cannot sample %d points out of %d, skipping estimation",
                         sample_size, point_number)
            return 0, model, statistics

        main_sampler = UniformSampler(point_number, settings.random_seed)
        pool = [i for i in range(point_number)]

        squared_threshold = settings.squared_inlier_threshold
        max_iteration = max(settings.max_iteration_number, settings.min_iteration_number)

        # 最小样本模型的最佳得分，与全局最佳得分分开记录
        best_minimal_score = float('inf')
        so_far_the_best_model = model

        while statistics.iteration_number < max_iteration:
            # Sk ← Draw a minimal sample
            sample = main_sampler.sample(pool, sample_size)
            statistics.iteration_number += 1

            # θk ← Estimate a model using Sk
            models = estimator.estimateModel(sample)
            if len(models) == 0:
                continue

            best_local_score, best_local_index = self.scoring_function.getBestModel(estimator,
                                                                                    models,
                                                                                    squared_threshold)
            # 只有最小样本模型得分改进时才执行局部优化
            if not best_local_score < best_minimal_score:
                continue
            best_minimal_score = best_local_score
            best_minimal_model = deepcopy(models[best_local_index])

            # θLO, wLO ← Local opt.，结果不差于输入的最小样本模型
            refined_model, refined_score = self.__localOptimization(settings,
                                                                    estimator,
                                                                    best_minimal_model,
                                                                    best_minimal_score)
            statistics.local_optimization_number += 1

            if refined_score < statistics.best_model_score:
                statistics.best_model_score = refined_score
                so_far_the_best_model = refined_model

            # 更新内点信息和最大迭代数
            statistics.inlier_indices = self.scoring_function.getInliers(estimator,
                                                                         so_far_the_best_model,
                                                                         squared_threshold)
            statistics.best_inlier_number = len(statistics.inlier_indices)
            statistics.inlier_ratio = statistics.best_inlier_number / point_number
            max_iteration = getIterationNumber(statistics.inlier_ratio,
                                               1.0 - settings.confidence,
                                               sample_size,
                                               settings.min_iteration_number,
                                               settings.max_iteration_number)
            logger.debug("Iteration %d: score = %f, inlier ratio = %f, iteration budget = %d",
                         statistics.iteration_number, statistics.best_model_score,
                         statistics.inlier_ratio, max_iteration)

        return statistics.best_inlier_number, so_far_the_best_model, statistics

    def __localOptimization(self,
                            settings,
                            estimator,
                            best_minimal_model,
                            best_minimal_score):
        """ 局部优化，见 Lebeda et al. 算法 2 和 3

        参数
        ----------
        settings : LORansacSettings
            本次运行的参数
        estimator : Estimator
            模型的估计器
        best_minimal_model : Model
            最小样本估计的最佳模型
        best_minimal_score : float
            最小样本模型的得分

        返回
        ----------
        Model, float
            局部优化的最佳模型和得分，得分不大于 best_minimal_score
        """
        so_far_the_best_model = best_minimal_model
        so_far_the_best_score = best_minimal_score

        # 非最小样本所需的最少点数
        min_non_minimal_sample_size = estimator.nonMinimalSampleSize()
        if min_non_minimal_sample_size > estimator.pointNumber():
            return so_far_the_best_model, so_far_the_best_score

        squared_threshold = settings.squared_inlier_threshold
        threshold_multiplier = settings.threshold_multiplier

        # 每次局部优化都用同一个种子重新初始化随机数流
        random_generator = UniformRandomGenerator(settings.random_seed)

        # 先在放宽的阈值下对最小样本模型做最小二乘拟合
        initial_model = deepcopy(best_minimal_model)
        self.__leastSquaresFitting(settings,
                                   estimator,
                                   squared_threshold * threshold_multiplier,
                                   random_generator,
                                   initial_model)
        score = self.scoring_function.getScore(estimator, initial_model, squared_threshold)
        if score < so_far_the_best_score:
            so_far_the_best_score = score
            so_far_the_best_model = deepcopy(initial_model)

        base_inliers = self.scoring_function.getInliers(estimator, initial_model, squared_threshold)

        # 每一步局部优化的非最小样本大小
        non_minimal_sample_size = max(min_non_minimal_sample_size,
                                      min(min_non_minimal_sample_size * settings.non_min_sample_multiplier,
                                          len(base_inliers) // 2))

        threshold_update = (threshold_multiplier - 1.0) * squared_threshold / \
            (settings.least_squares_iteration_number - 1)

        for _ in range(settings.lo_step_number):
            sample = list(base_inliers)
            random_generator.shuffleAndResize(sample, non_minimal_sample_size)

            models = estimator.estimateModelNonminimal(sample)
            if len(models) == 0:
                continue
            non_minimal_model = models[0]

            score = self.scoring_function.getScore(estimator, non_minimal_model, squared_threshold)
            if score < so_far_the_best_score:
                so_far_the_best_score = score
                so_far_the_best_model = deepcopy(non_minimal_model)

            self.__leastSquaresFitting(settings,
                                       estimator,
                                       squared_threshold,
                                       random_generator,
                                       non_minimal_model)

            # 阈值从 multiplier * threshold 逐步退火到 threshold
            threshold = threshold_multiplier * squared_threshold
            for _ in range(settings.least_squares_iteration_number):
                self.__leastSquaresFitting(settings,
                                           estimator,
                                           threshold,
                                           random_generator,
                                           non_minimal_model)
                score = self.scoring_function.getScore(estimator, non_minimal_model, squared_threshold)
                if score < so_far_the_best_score:
                    so_far_the_best_score = score
                    so_far_the_best_model = deepcopy(non_minimal_model)
                threshold -= threshold_update

        logger.debug("Local optimization: %f -> %f", best_minimal_score, so_far_the_best_score)
        return so_far_the_best_model, so_far_the_best_score

    def __leastSquaresFitting(self,
                              settings,
                              estimator,
                              squared_threshold,
                              random_generator,
                              model):
        """ 用模型在给定阈值下的内点做最小二乘拟合，原地修改模型

        内点数目超过 min_sample_multiplicator * 最小样本数时随机选取子集
        """
        sample_number = settings.min_sample_multiplicator * estimator.sampleSize()
        inliers = self.scoring_function.getInliers(estimator, model, squared_threshold)
        random_generator.shuffleAndResize(inliers, min(sample_number, len(inliers)))
        estimator.leastSquares(inliers, model)
