import numpy as np


class MSACScoringFunction:
    """ MSAC 截断二次损失评分函数，得分越低模型越好 """

    def computeScore(self, squared_residual, squared_threshold):
        """ 单个点的截断损失 """
        return min(squared_residual, squared_threshold)

    def getScore(self, estimator, model, squared_threshold):
        """ 求解模型对应的评估得分

        参数
        ----------
        estimator : Estimator
            持有数据点集的模型估计器
        model : Model
            当前模型参数
        squared_threshold : float
            截断损失的残差平方阈值

        返回
        ----------
        float
            所有点截断损失之和，取值范围 [0, N * squared_threshold]
        """
        squared_residuals = estimator.squaredResiduals(model)
        return float(np.sum(np.minimum(squared_residuals, squared_threshold)))

    def getInliers(self, estimator, model, squared_threshold):
        """ 求解残差平方严格小于阈值的内点序号，按升序排列 """
        squared_residuals = estimator.squaredResiduals(model)
        return np.flatnonzero(squared_residuals < squared_threshold).tolist()

    def getInlierNumber(self, estimator, model, squared_threshold):
        """ 求解内点数目 """
        squared_residuals = estimator.squaredResiduals(model)
        return int(np.count_nonzero(squared_residuals < squared_threshold))

    def getBestModel(self, estimator, models, squared_threshold):
        """ 在候选模型中选取得分最低的模型

        参数
        ----------
        estimator : Estimator
            持有数据点集的模型估计器
        models : list(Model)
            候选模型列表
        squared_threshold : float
            截断损失的残差平方阈值

        返回
        ----------
        float, int
            最佳得分和最佳模型在列表中的序号，得分相同时保留先出现的模型
        """
        best_score = float('inf')
        best_index = 0
        for index, model in enumerate(models):
            score = self.getScore(estimator, model, squared_threshold)
            if score < best_score:
                best_score = score
                best_index = index
        return best_score, best_index
