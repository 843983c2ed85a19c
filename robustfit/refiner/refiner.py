import logging

import numpy as np
from scipy.optimize import approx_fprime, least_squares

logger = logging.getLogger(__name__)


class Refiner:
    """ 在内点上对鲁棒估计的最佳模型进行局部非线性优化

    先以内点做一次非最小样本的最小二乘拟合作为初值，再以 Levenberg-Marquardt
    最小化内点的有向残差。只有在内点代价降低时才替换原模型。
    """

    def __init__(self, estimator, keep_covariance=False, standard_deviation=1.0, max_function_evaluations=None):
        """ 初始化模型优化器

        参数
        ----------
        estimator : Estimator
            提供模型参数化和残差向量的估计器
        keep_covariance : bool
            是否计算并保留参数的协方差矩阵
        standard_deviation : float
            残差的标准差，协方差 = inv(J^T J) * standard_deviation^2
        max_function_evaluations : int 可选
            残差函数的最大求值次数
        """
        self.estimator = estimator
        self.keep_covariance = keep_covariance
        self.standard_deviation = standard_deviation
        self.max_function_evaluations = max_function_evaluations
        self.covariance = None

    def refine(self, points, model, inliers):
        """ 优化模型

        参数
        ----------
        points : numpy
            输入的数据点集
        model : Model
            待优化的模型
        inliers : numpy
            模型的内点掩码

        返回
        ----------
        Model, bool
            优化后的模型，以及模型是否被替换
        """
        self.covariance = None
        inlier_indices = np.flatnonzero(inliers)
        inlier_points = points[inlier_indices]

        try:
            initial_parameters = self.estimator.modelToParameters(model)
            initial_residuals = self.estimator.residualVector(inlier_points, initial_parameters)
            parameter_number = len(initial_parameters)
            # 残差数目少于参数数目时 LM 无法求解
            if initial_residuals.size < parameter_number:
                logger.debug("内点残差 %d 个少于参数 %d 个，跳过优化", initial_residuals.size, parameter_number)
                return model, False
            initial_cost = 0.5 * float(initial_residuals @ initial_residuals)

            start = self.__leastSquaresStart(points, inlier_indices, model)
            start_parameters = self.estimator.modelToParameters(start)

            result = least_squares(lambda p: self.estimator.residualVector(inlier_points, p),
                                   start_parameters,
                                   method="lm",
                                   max_nfev=self.max_function_evaluations)
            if not np.isfinite(result.cost):
                logger.warning("模型优化未得到有限代价，使用未优化的模型")
                return model, False

            improved = result.cost < initial_cost
            refined = self.estimator.parametersToModel(result.x) if improved else model
            logger.debug("模型优化: 代价 %g -> %g，%s", initial_cost, result.cost, "已替换" if improved else "保持")

            if self.keep_covariance:
                # 协方差须在返回模型的参数处求雅可比矩阵
                if improved:
                    jacobian = result.jac
                else:
                    jacobian = approx_fprime(initial_parameters,
                                             lambda p: self.estimator.residualVector(inlier_points, p))
                self.covariance = self.__covariance(jacobian)
            return refined, improved
        except (np.linalg.LinAlgError, ValueError) as error:
            logger.warning("模型优化失败 (%s)，使用未优化的模型", error)
            self.covariance = None
            return model, False

    def __leastSquaresStart(self, points, inlier_indices, model):
        """ 用全部内点的最小二乘拟合作为优化初值，拟合失败时使用原模型 """
        models = self.estimator.estimateModelNonminimal(points, inlier_indices, len(inlier_indices))
        if len(models) == 0:
            return model
        # 多个模型时选取内点残差最小者
        costs = [float(np.sum(self.estimator.residuals(points[inlier_indices], m) ** 2)) for m in models]
        return models[int(np.argmin(costs))]

    def __covariance(self, jacobian):
        jacobian = np.asarray(jacobian)
        try:
            return np.linalg.inv(jacobian.T @ jacobian) * self.standard_deviation ** 2
        except np.linalg.LinAlgError:
            logger.warning("法方程奇异，无法计算协方差")
            return None
