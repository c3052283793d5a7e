"""Shared fixtures for the LO-MSAC tests."""

import numpy as np
import pytest

from lomsac.estimator import Estimator
from utils_helper import generate_homography_data, generate_line_data


class FixedResidualEstimator(Estimator):
    """ 残差由模型直接给出的估计器，模型为残差平方数组 """

    def __init__(self, point_number):
        super().__init__(np.zeros((point_number, 2)))

    def sampleSize(self):
        return 1

    def nonMinimalSampleSize(self):
        return 1

    def squaredResidual(self, model, index):
        return model[index]

    def squaredResiduals(self, model):
        return np.asarray(model, dtype=np.float64)


class NoModelEstimator(Estimator):
    """ 最小样本求解总是失败的估计器 """

    def __init__(self, point_number=20, sample_size=2):
        super().__init__(np.zeros((point_number, 2)))
        self.sample_size = sample_size

    def sampleSize(self):
        return self.sample_size

    def nonMinimalSampleSize(self):
        return self.sample_size

    def estimateModel(self, sample):
        return []

    def estimateModelNonminimal(self, sample):
        return []

    def squaredResidual(self, model, index):
        return 0.0


@pytest.fixture
def gt_H():
    return np.array([[0.9, 0.05, 30.0],
                     [-0.04, 1.1, -20.0],
                     [1e-4, 5e-5, 1.0]])


@pytest.fixture
def line_data():
    """80% inliers on y = 2x + 1, 20% uniform outliers."""
    return generate_line_data(100, inlier_ratio=0.8, noise=0.05, line=(2.0, 1.0), seed=7)


@pytest.fixture
def perfect_line_points():
    x = np.linspace(0.0, 10.0, 50)
    return np.c_[x, 2.0 * x + 1.0]


@pytest.fixture
def homography_data(gt_H):
    return generate_homography_data(gt_H, 200, inlier_ratio=0.7, noise=0.5, seed=3)


@pytest.fixture
def exact_homography_points(gt_H):
    src, dst, _ = generate_homography_data(gt_H, 40, inlier_ratio=1.0, noise=0.0, seed=11)
    return np.c_[src, dst]
