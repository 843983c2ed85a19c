import logging
import math as m

import numpy as np

from robustfit.utils import UniformRandomGenerator
from .sampler import Sampler

logger = logging.getLogger(__name__)


class ProsacSampler(Sampler):
    """ PROSAC 渐进采样器

    采样池需按质量降序排列，采样优先从质量最高的前缀中抽取，
    前缀随迭代增长，迭代次数超过 ransac_convergence_iterations 后退化为均匀采样。
    """

    def __init__(self, container, sample_size, ransac_convergence_iterations=100000, random_generator=None):
        """ 初始化 PORSAC 采样器

        参数
        ----------
        container : numpy
            采样的数据点集
        sample_size : int
            采样的样本数
        ransac_convergence_iterations : int 可选
            完全退化为 RANSAC 均匀采样前的迭代次数
        random_generator : UniformRandomGenerator 可选
            随机数产生器
        """
        super().__init__(container)
        self.random_generator = random_generator if random_generator is not None else UniformRandomGenerator()

        self.sample_size = sample_size
        self.point_number = np.shape(container)[0]
        self.ransac_convergence_iterations = ransac_convergence_iterations
        self.kth_sample_number = 1      # prosac 采样迭代次数
        self.subset_size = 0            # 当前采样前缀大小 n
        self.growth_function = []       # PROSAC 增长函数

        self.initialized = self.initialize(container)

    def initialize(self, container):
        """ PROSAC 采样初始化 growth_function """
        self.growth_function = [0 for i in range(self.point_number)]

        # U_N 中的数据点按质量函数降序排列
        # 令 T_n 为 RANSAC 抽取的 T_N 个样本中仅包含 U_n 中数据点的平均样本数
        #                                  n - i
        # T_n = T_N * Product i = 0...m-1 -------, n >= sample size, N = points size
        #                                  N - i
        T_n = float(self.ransac_convergence_iterations)
        for i in range(self.sample_size):
            T_n *= (self.sample_size - i) / (self.point_number - i)

        T_n_prime = 1
        # 递推关系
        #             n + 1
        # T(n+1) = --------- T(n), m is sample size.
        #           n + 1 - m
        # 增长函数定义为
        # g(t) = min {n, T'_(n) >= t}
        # T'_(n+1) = T'_(n) + (T_(n+1) - T_(n))
        for i in range(self.point_number):
            if i + 1 <= self.sample_size:
                self.growth_function[i] = T_n_prime
                continue
            Tn_plus1 = float(i + 1) * T_n / (i + 1 - self.sample_size)
            self.growth_function[i] = T_n_prime + m.ceil(Tn_plus1 - T_n)
            T_n = Tn_plus1
            T_n_prime = self.growth_function[i]

        self.subset_size = self.sample_size

        # 随机数产生器在 [0, n - 2] 中选取，第 n 个点总是被使用
        self.random_generator.resetGenerator(0, self.subset_size - 2)
        return True

    def sample(self, pool, sample_size):
        """ 根据给定的采样池和样本大小进行采样

        参数
        ----------
        pool : list(int)
            按质量降序排列的数据点序号池
        sample_size : int
            采样的样本数

        返回
        ----------
        list
            采样的数据集合序号列表
        """
        if sample_size != self.sample_size:
            logger.warning("采样错误，PROSAC 采样器初始化的样本数为 %d", self.sample_size)
            self.__incrementIterationNumber()
            return []

        # 迭代次数超过收敛长度后与 RANSAC 相同，均匀随机采样
        if self.kth_sample_number > self.ransac_convergence_iterations:
            subset = self.random_generator.generateUniqueRandomSet(sample_size, max=self.point_number - 1)
        else:
            # 产生 PROSAC 样本 [0, subset_size-2]
            subset = self.random_generator.generateUniqueRandomSet(self.sample_size - 1)
            # 最后一个索引是当前使用的子集末尾的点的索引
            subset.append(self.subset_size - 1)
        self.__incrementIterationNumber()
        return [pool[i] for i in subset]

    def __incrementIterationNumber(self):
        self.kth_sample_number += 1 # PROSAC 迭代数自增

        # 如果与 RANSAC 完全相同，则设置随机生成器以从所有可能的索引生成值
        if self.kth_sample_number > self.ransac_convergence_iterations:
            self.random_generator.resetGenerator(0, self.point_number - 1)
        # 根据需要增加采样池的大小
        elif self.kth_sample_number > self.growth_function[self.subset_size - 1] and \
                self.subset_size < self.point_number:
            self.__growSubset()

    def __growSubset(self):
        self.subset_size += 1 # n = n + 1
        # 重置随机生成器以从当前点子集生成值，但最后一个除外，因为它将始终被使用
        self.random_generator.resetGenerator(0, self.subset_size - 2)
