class SolverEngine:
    """ 模型参数求解器基类 """

    def __init__(self):
        pass

    def sampleSize(self):
        """ 模型参数估计所需的最小样本数 """
        return 0

    def estimateModel(self,
                      points,
                      sample,
                      sample_number,
                      weights=None):
        """ 从给定的样本点，加权拟合模型参数，返回模型列表 """
        raise NotImplementedError
