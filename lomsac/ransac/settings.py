"""
Settings and statistics of the LO-MSAC estimation
"""

import math as m

import yaml


class ConfigurationError(ValueError):
    """ 参数设置无效 """


class RansacSettings:

    def __init__(self, **kwargs):
        self.min_iteration_number = 100                  # 全局最小迭代次数
        self.max_iteration_number = 10000                # 全局最大迭代次数
        self.confidence = 0.9999                         # 不遗漏最佳模型的置信率
        self.squared_inlier_threshold = 1.0              # 决定内点和外点的残差平方阈值
        self.random_seed = 0                             # 随机数种子
        self.update(kwargs)

    def update(self, config):
        """ 用字典更新参数，未知参数名抛出 ConfigurationError """
        for key, value in config.items():
            if key not in vars(self):
                raise ConfigurationError(f"Unknown setting '{key}'")
            setattr(self, key, value)

    def toDict(self):
        return dict(vars(self))

    @classmethod
    def fromDict(cls, config):
        return cls(**dict(config))

    def validate(self):
        """ 检查参数是否有效，无效时抛出 ConfigurationError """
        if self.min_iteration_number < 0 or self.max_iteration_number < 0:
            raise ConfigurationError("Iteration numbers must be non-negative")
        if not 0.0 < self.confidence < 1.0:
            raise ConfigurationError(f"confidence must be in (0, 1), got {self.confidence}")
        if self.squared_inlier_threshold < 0.0:
            raise ConfigurationError("squared_inlier_threshold must be non-negative")


class LORansacSettings(RansacSettings):
    """ 局部优化参数，见 Lebeda et al., Fixing the Locally Optimized RANSAC, BMVC 2012 """

    def __init__(self, **kwargs):
        self.lo_step_number = 10                         # 每次局部优化的非最小采样次数
        self.threshold_multiplier = m.sqrt(2.0)          # 内点重估计时的阈值放大系数
        self.least_squares_iteration_number = 4          # 阈值退火的最小二乘迭代次数
        # 最小二乘优化使用的点数上限为 min_sample_multiplicator * 最小样本数
        self.min_sample_multiplicator = 7
        # 非最小样本数为 min(非最小样本数 * non_min_sample_multiplier, 内点数 / 2)
        self.non_min_sample_multiplier = 3
        super().__init__(**kwargs)

    def validate(self):
        super().validate()
        if self.lo_step_number < 0:
            raise ConfigurationError("lo_step_number must be non-negative")
        if self.threshold_multiplier < 1.0:
            raise ConfigurationError("threshold_multiplier must be at least 1")
        if self.least_squares_iteration_number < 2:
            raise ConfigurationError("least_squares_iteration_number must be at least 2")
        if self.min_sample_multiplicator < 1 or self.non_min_sample_multiplier < 1:
            raise ConfigurationError("Sample multipliers must be at least 1")


class RansacStatistics:

    def __init__(self):
        self.reset()

    def reset(self):
        self.iteration_number = 0
        self.best_inlier_number = 0
        self.best_model_score = float('inf')
        self.inlier_ratio = 0.0
        self.inlier_indices = []
        self.local_optimization_number = 0


def loadSettings(path):
    """ 从 YAML 文件读取局部优化参数

    参数
    ----------
    path : str
        YAML 文件路径，参数可以位于顶层或 lomsac 字段下

    返回
    ----------
    LORansacSettings
        读取的参数，文件为空时使用默认值
    """
    with open(path, 'r') as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{path} does not contain a mapping")
    if 'lomsac' in config:
        config = config['lomsac'] or {}
    settings = LORansacSettings.fromDict(config)
    settings.validate()
    return settings
