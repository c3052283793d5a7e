import numpy as np


class Model:
    """ LO-MSAC 算法求解模型基类 """

    def __init__(self):
        self.descriptor = None


class Line2D(Model):
    """ 二维直线模型 a*x + b*y + c = 0，其中 a^2 + b^2 = 1 """

    def __init__(self, coefficients=None):
        super().__init__()
        if coefficients is None:
            coefficients = np.zeros(3)
        self.descriptor = np.asarray(coefficients, dtype=np.float64)


class Homography(Model):
    """ 特征点匹配的单应矩阵模型 """

    def __init__(self, matrix=None):
        super().__init__()
        if matrix is None:
            matrix = np.zeros([3, 3])
        self.descriptor = np.asarray(matrix, dtype=np.float64)
