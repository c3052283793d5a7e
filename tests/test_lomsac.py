"""Tests for the LO-MSAC estimation engine."""

import logging
from copy import deepcopy

import numpy as np
import pytest

from lomsac.estimator import Estimator, EstimatorLine
from lomsac.model import Line2D, Model
from lomsac.ransac import (ConfigurationError, LocallyOptimizedMSAC,
                           LORansacSettings, RansacSettings)
from tests.conftest import NoModelEstimator


class FailingNonMinimalEstimatorLine(EstimatorLine):
    """ 非最小样本求解总是失败的直线估计器 """

    def estimateModelNonminimal(self, sample):
        return []


class ScriptedEstimator(Estimator):
    """ 按顺序返回预设最小样本模型的估计器，模型描述即残差平方，非最小样本求解得到零残差模型 """

    def __init__(self, residual_list):
        super().__init__(np.zeros((len(residual_list[0]), 2)))
        self.residual_list = list(residual_list)

    def sampleSize(self):
        return 1

    def nonMinimalSampleSize(self):
        return 1

    def estimateModel(self, sample):
        if not self.residual_list:
            return []
        model = Model()
        model.descriptor = np.asarray(self.residual_list.pop(0), dtype=np.float64)
        return [model]

    def estimateModelNonminimal(self, sample):
        model = Model()
        model.descriptor = np.zeros(self.pointNumber())
        return [model]

    def leastSquares(self, sample, model):
        pass

    def squaredResidual(self, model, index):
        return model.descriptor[index]


class TestDegenerateInput:
    """Test the early exit on insufficient data."""

    def test_sample_larger_than_data(self):
        estimator = NoModelEstimator(point_number=2, sample_size=3)
        model = Line2D([0.0, 1.0, 0.0])
        inlier_number, best_model, statistics = LocallyOptimizedMSAC().run(estimator, model)
        assert inlier_number == 0
        assert best_model is model
        assert statistics.iteration_number == 0
        assert statistics.best_inlier_number == 0
        assert statistics.best_model_score == float('inf')
        assert statistics.inlier_ratio == 0.0
        assert statistics.inlier_indices == []

    def test_zero_sample_size(self):
        estimator = NoModelEstimator(point_number=5, sample_size=0)
        inlier_number, best_model, statistics = LocallyOptimizedMSAC().run(estimator)
        assert inlier_number == 0
        assert best_model is None
        assert statistics.iteration_number == 0

    def test_solver_without_models_runs_full_budget(self):
        settings = LORansacSettings(min_iteration_number=10, max_iteration_number=50)
        inlier_number, best_model, statistics = LocallyOptimizedMSAC(settings).run(NoModelEstimator())
        assert inlier_number == 0
        assert best_model is None
        assert statistics.iteration_number == 50
        assert statistics.local_optimization_number == 0

    def test_min_above_max_uses_min(self):
        settings = LORansacSettings(min_iteration_number=30, max_iteration_number=10)
        _, _, statistics = LocallyOptimizedMSAC(settings).run(NoModelEstimator())
        assert statistics.iteration_number == 30

    def test_invalid_settings_fail_fast(self, line_data):
        points, _ = line_data
        settings = LORansacSettings(least_squares_iteration_number=1)
        with pytest.raises(ConfigurationError):
            LocallyOptimizedMSAC(settings).run(EstimatorLine(points))


class TestEstimation:
    """Test estimation on synthetic lines."""

    def test_perfect_data_stops_at_min_iterations(self, perfect_line_points):
        estimator = EstimatorLine(perfect_line_points)
        inlier_number, model, statistics = LocallyOptimizedMSAC().run(estimator)
        assert inlier_number == len(perfect_line_points)
        assert statistics.inlier_ratio == 1.0
        assert statistics.iteration_number == 100
        assert statistics.inlier_indices == list(range(len(perfect_line_points)))

    def test_outlier_robustness(self, line_data):
        points, is_inlier = line_data
        settings = LORansacSettings(squared_inlier_threshold=0.2 ** 2)
        inlier_number, model, statistics = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))

        assert statistics.inlier_ratio > 0.75
        true_inliers = set(np.flatnonzero(is_inlier).tolist())
        assert len(set(statistics.inlier_indices) - true_inliers) <= 2

        a, b, c = model.descriptor
        # y = 2x + 1  <=>  -2x + y - 1 = 0
        expected = np.array([-2.0, 1.0, -1.0]) / np.sqrt(5.0)
        assert np.allclose(np.sign(b) * model.descriptor, expected, atol=0.05)

    def test_statistics_consistent(self, line_data):
        points, _ = line_data
        settings = LORansacSettings(squared_inlier_threshold=0.04)
        inlier_number, _, statistics = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        assert inlier_number == statistics.best_inlier_number
        assert statistics.inlier_indices == sorted(statistics.inlier_indices)
        assert len(statistics.inlier_indices) == statistics.best_inlier_number
        assert statistics.inlier_ratio == statistics.best_inlier_number / len(points)
        assert statistics.local_optimization_number >= 1
        assert statistics.iteration_number <= settings.max_iteration_number
        assert statistics.best_model_score <= len(points) * 0.04

    def test_reproducible(self, line_data):
        points, _ = line_data
        settings = LORansacSettings(squared_inlier_threshold=0.04, random_seed=9)
        first = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        second = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        assert first[0] == second[0]
        assert np.array_equal(first[1].descriptor, second[1].descriptor)
        assert first[2].iteration_number == second[2].iteration_number
        assert first[2].best_model_score == second[2].best_model_score

    def test_best_score_non_increasing(self, line_data, caplog):
        points, _ = line_data
        settings = LORansacSettings(squared_inlier_threshold=0.04)
        with caplog.at_level(logging.DEBUG, logger="lomsac.ransac.lomsac"):
            _, _, statistics = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        scores = [record.args[1] for record in caplog.records
                  if record.msg.startswith("Iteration")]
        assert len(scores) == statistics.local_optimization_number
        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert scores[-1] == statistics.best_model_score

    def test_settings_not_modified(self, line_data):
        points, _ = line_data
        settings = LORansacSettings(squared_inlier_threshold=0.04)
        before = deepcopy(settings.toDict())
        LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        assert settings.toDict() == before


class TestLocalOptimization:
    """Test the local optimization step."""

    @staticmethod
    def localOptimization(lomsac, estimator, model, score):
        return lomsac._LocallyOptimizedMSAC__localOptimization(lomsac.settings, estimator, model, score)

    def test_never_worse_than_minimal_model(self, line_data):
        points, _ = line_data
        estimator = EstimatorLine(points)
        lomsac = LocallyOptimizedMSAC(LORansacSettings(squared_inlier_threshold=0.04))
        rng = np.random.default_rng(1)
        for _ in range(20):
            sample = rng.choice(len(points), 2, replace=False).tolist()
            models = estimator.estimateModel(sample)
            if not models:
                continue
            score = lomsac.scoring_function.getScore(estimator, models[0], 0.04)
            _, refined_score = self.localOptimization(lomsac, estimator, models[0], score)
            assert refined_score <= score

    def test_failing_non_minimal_solver(self, line_data):
        points, _ = line_data
        estimator = FailingNonMinimalEstimatorLine(points)
        lomsac = LocallyOptimizedMSAC(LORansacSettings(squared_inlier_threshold=0.04))
        model = estimator.estimateModel([0, 1])[0]
        score = lomsac.scoring_function.getScore(estimator, model, 0.04)
        refined_model, refined_score = self.localOptimization(lomsac, estimator, model, score)
        assert refined_score == score
        assert np.array_equal(refined_model.descriptor, model.descriptor)

    def test_does_not_modify_input_model(self, line_data):
        points, _ = line_data
        estimator = EstimatorLine(points)
        lomsac = LocallyOptimizedMSAC(LORansacSettings(squared_inlier_threshold=0.04))
        model = estimator.estimateModel([0, 1])[0]
        original = model.descriptor.copy()
        score = lomsac.scoring_function.getScore(estimator, model, 0.04)
        self.localOptimization(lomsac, estimator, model, score)
        assert np.array_equal(model.descriptor, original)

    def test_reseeded_on_every_call(self, line_data):
        points, _ = line_data
        estimator = EstimatorLine(points)
        lomsac = LocallyOptimizedMSAC(LORansacSettings(squared_inlier_threshold=0.04))
        model = estimator.estimateModel([2, 3])[0]
        score = lomsac.scoring_function.getScore(estimator, model, 0.04)
        first_model, first_score = self.localOptimization(lomsac, estimator, model, score)
        second_model, second_score = self.localOptimization(lomsac, estimator, model, score)
        assert first_score == second_score
        assert np.array_equal(first_model.descriptor, second_model.descriptor)

    def test_not_enough_points_for_non_minimal_sample(self):
        estimator = NoModelEstimator(point_number=2, sample_size=3)
        lomsac = LocallyOptimizedMSAC()
        model = Line2D([0.0, 1.0, 0.0])
        refined_model, refined_score = self.localOptimization(lomsac, estimator, model, 5.0)
        assert refined_model is model
        assert refined_score == 5.0


class TestLocalOptimizationTrigger:
    """Test that LO follows the best minimal-sample score only."""

    def test_minimal_improvement_triggers_after_refined_best(self):
        # 最小样本得分依次为 3.0, 2.0, 2.5；第一次局部优化后全局最佳得分已为 0
        estimator = ScriptedEstimator([[1.0, 1.0, 1.0, 0.0],
                                       [1.0, 1.0, 0.0, 0.0],
                                       [1.0, 1.0, 0.5, 0.0]])
        settings = LORansacSettings(min_iteration_number=3, max_iteration_number=3)
        inlier_number, model, statistics = LocallyOptimizedMSAC(settings).run(estimator)
        assert statistics.iteration_number == 3
        assert statistics.local_optimization_number == 2
        assert statistics.best_model_score == 0.0
        assert inlier_number == 4
        assert np.array_equal(model.descriptor, np.zeros(4))

    def test_local_optimization_number_on_line_data(self, line_data):
        points, _ = line_data
        settings = LORansacSettings(squared_inlier_threshold=0.04, random_seed=0)
        _, _, statistics = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        assert statistics.local_optimization_number == 9
        assert statistics.iteration_number == 100


class TestBaseSettings:
    """Test running with settings lacking the LO parameters."""

    def test_base_settings_use_lo_defaults(self, line_data):
        points, is_inlier = line_data
        settings = RansacSettings(squared_inlier_threshold=0.04)
        inlier_number, _, statistics = LocallyOptimizedMSAC(settings).run(EstimatorLine(points))
        assert inlier_number >= 0.75 * len(points)
        assert statistics.local_optimization_number >= 1
        assert type(settings) is RansacSettings
        assert not hasattr(settings, 'threshold_multiplier')

    def test_base_settings_are_validated(self, line_data):
        points, _ = line_data
        with pytest.raises(ConfigurationError):
            LocallyOptimizedMSAC(RansacSettings(confidence=1.5)).run(EstimatorLine(points))
