class RobustFitError(Exception):
    """ robustfit 异常基类 """
    pass


class LockedException(RobustFitError):
    """ 估计器正在运行（已锁定）时试图修改其状态 """
    pass


class NotReadyException(RobustFitError):
    """ 估计器所需数据不完整或不一致，无法开始估计 """
    pass


class RobustEstimatorException(RobustFitError):
    """ 鲁棒估计失败，例如所有采样均退化或从未找到内点

    调用者可以放宽阈值后重试
    """
    pass
