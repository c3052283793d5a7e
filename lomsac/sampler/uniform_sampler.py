from lomsac.utils.uniform_random_generator import UniformRandomGenerator

from .sampler import Sampler


class UniformSampler(Sampler):
    """ 均匀随机无放回采样器 """

    def __init__(self, point_number, random_seed=0):
        super().__init__(point_number)
        self.random_generator = UniformRandomGenerator(random_seed)
        self.initialized = self.__initialize()

    def __initialize(self):
        """ 检查数据集是否可以采样，采样范围在每次采样时按采样池设置 """
        return self.point_number > 0

    def sample(self, pool, sample_size):
        """ 根据给定的采样池和样本大小进行采样

        参数
        ----------
        pool : list(int)
            采样的数据集合的序号池
        sample_size : int
            采样的样本数

        返回
        ----------
        list
            采样的数据集合序号列表，样本数大于采样池时返回空列表
        """
        if sample_size > len(pool):
            return []
        # 生成点集序号的随机序列
        subset = self.random_generator.generateUniqueRandomSet(sample_size, max=len(pool)-1)
        # 用 pool 中的索引替换 subset 索引
        return [pool[i] for i in subset]
