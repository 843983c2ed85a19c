import matplotlib.pyplot as plt
import numpy as np


""" 误差计算模块 """
def getReprojectionError(camera, points3d, points2d):
    """ 相机对 3D-2D 对应的平均重投影误差 """
    return float(np.mean(np.linalg.norm(camera.project(points3d) - points2d, axis=1)))


def getTransferError(transformation, src_points, dst_points):
    """ 变换对点对的平均转移误差 """
    return float(np.mean(np.linalg.norm(transformation.transform(src_points) - dst_points, axis=1)))


""" 合成数据模块 """
def generateLine2DPoints(line, point_number, span=100.0, noise=0.0, rng=None):
    """ 在直线上均匀生成点，可选加入高斯噪声 """
    rng = np.random.default_rng() if rng is None else rng
    line = line.copy().normalize()
    normal = np.array([line.a, line.b])
    direction = np.array([-line.b, line.a])
    # 原点在直线上的垂足
    foot = -line.c * normal
    t = rng.uniform(-span, span, point_number)
    points = foot + t[:, None] * direction
    return points + rng.normal(0.0, noise, points.shape) if noise > 0.0 else points


def generateCirclePoints(circle, point_number, noise=0.0, rng=None):
    rng = np.random.default_rng() if rng is None else rng
    angles = rng.uniform(0.0, 2.0 * np.pi, point_number)
    points = circle.center + circle.radius * np.c_[np.cos(angles), np.sin(angles)]
    return points + rng.normal(0.0, noise, points.shape) if noise > 0.0 else points


def generatePlanePoints(plane, point_number, span=100.0, noise=0.0, rng=None):
    rng = np.random.default_rng() if rng is None else rng
    plane = plane.copy().normalize()
    normal = plane.descriptor[0:3]
    # 平面内的正交基
    _, _, vt = np.linalg.svd(normal.reshape(1, 3))
    foot = -plane.descriptor[3] * normal
    uv = rng.uniform(-span, span, (point_number, 2))
    points = foot + uv @ vt[1:3]
    return points + rng.normal(0.0, noise, points.shape) if noise > 0.0 else points


def generateTransformation2DPoints(transformation, point_number, span=100.0, noise=0.0, rng=None):
    """ 生成源点及其变换后的目标点，噪声只加在目标点上 """
    rng = np.random.default_rng() if rng is None else rng
    src_points = rng.uniform(-span, span, (point_number, 2))
    dst_points = transformation.transform(src_points)
    if noise > 0.0:
        dst_points = dst_points + rng.normal(0.0, noise, dst_points.shape)
    return src_points, dst_points


def generatePinholeCameraPoints(camera, point_number, min_depth=5.0, max_depth=20.0, span=5.0,
                                noise=0.0, rng=None):
    """ 在相机前方生成三维点及其投影，噪声只加在图像点上 """
    rng = np.random.default_rng() if rng is None else rng
    _, rotation, center = camera.decompose()
    camera_points = np.c_[rng.uniform(-span, span, (point_number, 2)),
                          rng.uniform(min_depth, max_depth, point_number)]
    # X_world = R^T X_cam + C
    points3d = camera_points @ rotation + center
    points2d = camera.project(points3d)
    if noise > 0.0:
        points2d = points2d + rng.normal(0.0, noise, points2d.shape)
    return points3d, points2d


def addOutliers(points, outlier_ratio, outlier_error, columns=None, rng=None):
    """ 按比例随机选取数据项，在指定列上加入 [-outlier_error, outlier_error] 的均匀误差

    参数
    ----------
    points : numpy
        (N, d) 数据
    outlier_ratio : float
        外点比例
    outlier_error : float
        外点误差的幅度
    columns : slice 可选
        加入误差的列，默认为全部列
    rng : numpy.random.Generator 可选
        随机数产生器

    返回
    ----------
    numpy, numpy
        加入外点后的数据副本，外点掩码
    """
    rng = np.random.default_rng() if rng is None else rng
    columns = slice(None) if columns is None else columns
    corrupted = np.array(points, dtype=np.float64)
    point_number = np.shape(corrupted)[0]
    outliers = np.zeros(point_number, dtype=bool)
    outliers[rng.choice(point_number, int(round(outlier_ratio * point_number)), replace=False)] = True

    block = corrupted[outliers][:, columns]
    corrupted_block = block + rng.uniform(-outlier_error, outlier_error, block.shape)
    rows = np.flatnonzero(outliers)
    corrupted[np.ix_(rows, np.arange(np.shape(corrupted)[1])[columns])] = corrupted_block
    return corrupted, outliers


""" 对比信息绘制模块 """
def drawInlierSplit(points, mask, title=None, path=None, ax=None):
    """ 绘制二维点集的内点 (绿) 与外点 (红)

    参数
    ----------
    points : numpy
        (N, 2) 点集
    mask : numpy
        内点掩码
    title : str 可选
        图标题
    path : str 可选
        保存图片的路径
    ax : matplotlib.axes.Axes 可选
        绘制的坐标轴，默认新建图
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    else:
        fig = ax.figure
    mask = np.asarray(mask, dtype=bool)
    ax.scatter(points[mask, 0], points[mask, 1], s=4, c='g', label='inliers')
    ax.scatter(points[~mask, 0], points[~mask, 1], s=4, c='r', label='outliers')
    ax.legend()
    if title is not None:
        ax.set_title(title)
    if path is not None:
        fig.savefig(path)
    return fig
