import numpy as np
from numpy import linalg

from lomsac.model import Homography
from lomsac.solver.solver_engine import SolverEngine


class SolverHomographyFourPoint(SolverEngine):
	""" 四点法求解单应矩阵模型参数 """

	def __init__(self):
		pass

	def sampleSize(self):
		""" 模型参数估计所需的最小样本数 """
		return 4

	def estimateModel(self,
					  points,
					  sample,
					  sample_number,
					  weights=None):
		""" 从给定的样本点，加权拟合模型参数

		参数
		----------
		points : numpy
			输入的数据点集
		sample : list
			用于估计模型的样本点序号列表，为 None 时使用前 sample_number 个点
		sample_number : int
			样本点的数目
		weights : list
			数据点集中点的对应权重

		返回
		----------
		list(Model)
			通过样本估计的模型列表，线性方程组退化时为空
		"""
		if sample is None:
			sample = [i for i in range(sample_number)]
		coefficients = np.zeros([2 * sample_number, 8])
		inhomogeneous = np.zeros(2 * sample_number)

		row_idx = 0
		for i in range(sample_number):
			sample_idx = sample[i]
			weight = 1.0 if weights is None else weights[sample_idx]

			# 取点的坐标
			x1, y1, x2, y2 = points[sample_idx, 0:4]

			# 参数矩阵设置
			coefficients[row_idx] = np.array(
				[-x1, -y1, -1, 0, 0, 0, x2 * x1, x2 * y1]) * weight
			inhomogeneous[row_idx] = -weight * x2
			row_idx += 1

			coefficients[row_idx] = np.array(
				[0, 0, 0, -x1, -y1, -1, y2 * x1, y2 * y1]) * weight
			inhomogeneous[row_idx] = -weight * y2
			row_idx += 1

		# 参数矩阵 coefficients 和 Y inhomogeneous
		# 利用 QR 分解求解 x
		Q, R = linalg.qr(coefficients)
		diagonal = np.abs(np.diag(R))
		if diagonal.min() <= 1e-10 * max(diagonal.max(), 1.0):
			return []
		h = np.dot(linalg.pinv(R), np.dot(Q.T, inhomogeneous)).tolist()
		h.append(1.0)

		descriptor = np.array(h).reshape((3, 3))
		if not np.all(np.isfinite(descriptor)):
			return []
		return [Homography(matrix=descriptor)]
