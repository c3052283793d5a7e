import random


class UniformRandomGenerator:
    """ 均匀随机数产生器

    每个产生器持有一个独立的随机数流，相同种子与相同调用序列产生相同结果
    """

    def __init__(self, seed=0):
        self.random = random.Random(seed)
        self.range_min = 0       # 可取最小值
        self.range_max = 100000  # 可取最大值

    def resetGenerator(self, min, max):
        """ 设置随机数发生器的随机数范围

        参数
        ----------
        min : int
            可取最小值
        max : int
            可取最大值
        """
        self.range_min, self.range_max = min, max

    def generateUniqueRandomSet(self, sample_size, max=None):
        """ 产生一个均匀随机的不重复随机数序列

        参数
        ----------
        sample_size : int
            选取样本大小
        max : int 可选
            可取最大值

        返回
        ----------
        list
            产生的随机序列样本列表
        """
        # 如果输入了最大值，则重设随机数发生器范围
        if max is not None:
            self.resetGenerator(0, max)
        sample = []
        while len(sample) < sample_size:
            rand_num = self.random.randint(self.range_min, self.range_max)
            # 如果产生的数不和前面重复，则加入样本
            if rand_num in sample:
                continue
            sample.append(rand_num)
        return sample

    def shuffleAndResize(self, sequence, size):
        """ 原地打乱序列，并截取前 size 个元素

        参数
        ----------
        sequence : list
            需要打乱的序列，原地修改
        size : int
            保留的元素数目，序列长度不大于 size 时不截取
        """
        self.random.shuffle(sequence)
        del sequence[size:]
