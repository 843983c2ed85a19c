import logging

import numpy as np

from robustfit.utils import UniformRandomGenerator
from .sampler import Sampler

logger = logging.getLogger(__name__)


class UniformSampler(Sampler):
    """ 均匀随机采样器 """

    def __init__(self, container_, random_generator=None):
        super().__init__(container_)
        self.random_generator = random_generator if random_generator is not None else UniformRandomGenerator()
        self.initialized = self.__initialize(container_)

    def __initialize(self, container_):
        """ 初始化样本构建，必须在样本被调用前"""
        self.random_generator.resetGenerator(0, np.shape(self.container)[0] - 1)
        return True

    def sample(self, pool, sample_size):
        if sample_size > len(pool):
            logger.warning("采样失败，采样池数据 %d 小于所需样本 %d", len(pool), sample_size)
            return []
        # 采样池大小等于样本大小时只有唯一的样本
        if sample_size == len(pool):
            return list(pool)
        # 生成点集序号的随机序列
        subset = self.random_generator.generateUniqueRandomSet(sample_size, max=len(pool) - 1)
        # 用 pool 中的索引替换 subset 索引
        for i in range(sample_size):
            subset[i] = pool[subset[i]]
        return subset
