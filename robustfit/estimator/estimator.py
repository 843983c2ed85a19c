class Estimator:
    """ 模型估计器基类

    连接鲁棒估计核心与具体模型：从样本估计候选模型、计算残差，
    并为局部优化提供参数化形式。
    """

    def __init__(self, minimal_solver, non_minimal_solver=None):
        # 用于估计最小样本模型的求解器
        self.minimal_solver = minimal_solver
        # 用于估计非最小样本模型的求解器
        self.non_minimal_solver = non_minimal_solver if non_minimal_solver is not None else minimal_solver

    def sampleSize(self):
        """ 估计模型所需的最小样本的大小 """
        return self.minimal_solver.sampleSize()

    def nonMinimalSampleSize(self):
        """ 估计模型所需的非最小样本的大小 """
        return self.non_minimal_solver.sampleSize()

    def estimateModel(self, data, sample):
        """ 给定一组数据点，估计最小样本模型

        参数
        ----------
        data : numpy
            输入的数据点集
        sample : list
            用于估计模型的样本点序号列表

        返回
        ----------
        list(Model)
            通过样本估计的模型列表，样本退化时为空
        """
        return self.minimal_solver.estimateModel(data, sample, len(sample))

    def estimateModelNonminimal(self, data, sample, sample_number, weights=None):
        """ 根据数据点集的非最小采样估计模型（最小二乘意义下）

        参数
        ----------
        data : numpy
            输入的数据点集
        sample : list
            用于估计模型的样本点序号列表
        sample_number : int
            样本点数目
        weights : list
            数据点集中点的对应权重

        返回
        ----------
        list(Model)
            通过样本估计的模型列表
        """
        if sample_number < self.nonMinimalSampleSize():
            return []
        return self.non_minimal_solver.estimateModel(data, sample, sample_number, weights=weights)

    def residuals(self, data, model):
        """ 计算所有数据点相对模型的非负残差，返回 (N,) 数组 """
        raise NotImplementedError

    def isValidSample(self, data, sample):
        """ 在计算模型参数之前判断所选样本是否退化 """
        return True

    def parameterCount(self):
        """ 模型自由参数的数目（协方差矩阵的维数） """
        raise NotImplementedError

    def modelToParameters(self, model):
        """ 将模型转换为局部优化使用的参数向量 """
        raise NotImplementedError

    def parametersToModel(self, parameters):
        """ 将参数向量转换回模型 """
        raise NotImplementedError

    def residualVector(self, data, parameters):
        """ 局部优化使用的有向残差向量 """
        raise NotImplementedError
