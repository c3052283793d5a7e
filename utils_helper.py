import cv2
import numpy as np


""" 合成数据生成模块（直线、单应） """
def generate_line_data(point_number=100, inlier_ratio=0.8, noise=0.05, line=(2.0, 1.0), seed=42):
    """ 生成直线 y = k * x + b 上带噪声的内点和均匀分布的外点

    返回
    --------
    numpy, numpy
        N x 2 点坐标，内点标记
    """
    rng = np.random.default_rng(seed)
    k, b = line
    inlier_number = int(round(point_number * inlier_ratio))
    outlier_number = point_number - inlier_number

    x = rng.uniform(0.0, 10.0, inlier_number)
    y = k * x + b
    # 沿法向量方向加噪声
    normal = np.array([-k, 1.0]) / np.hypot(k, 1.0)
    offsets = rng.normal(0.0, noise, inlier_number)
    inliers = np.c_[x, y] + offsets[:, None] * normal

    outliers = np.c_[rng.uniform(0.0, 10.0, outlier_number),
                     rng.uniform(-5.0, 25.0, outlier_number)]

    points = np.r_[inliers, outliers]
    is_inlier = np.r_[np.ones(inlier_number, dtype=bool), np.zeros(outlier_number, dtype=bool)]
    perm = rng.permutation(point_number)
    return points[perm], is_inlier[perm]


def generate_homography_data(H, point_number=200, inlier_ratio=0.7, noise=0.5, size=(640, 480), seed=42):
    """ 生成经过单应矩阵 H 变换的点对，外点的目标点随机分布

    返回
    --------
    numpy, numpy, numpy
        源图像点，目标图像点，内点标记
    """
    rng = np.random.default_rng(seed)
    w, h = size
    src_points = np.c_[rng.uniform(0, w, point_number), rng.uniform(0, h, point_number)]
    dst_points = cv2.perspectiveTransform(src_points.reshape(-1, 1, 2), H).reshape(-1, 2)
    dst_points += rng.normal(0.0, noise, dst_points.shape)

    inlier_number = int(round(point_number * inlier_ratio))
    is_inlier = np.zeros(point_number, dtype=bool)
    is_inlier[:inlier_number] = True
    outlier_number = point_number - inlier_number
    dst_points[inlier_number:] = np.c_[rng.uniform(0, w, outlier_number), rng.uniform(0, h, outlier_number)]

    perm = rng.permutation(point_number)
    return src_points[perm], dst_points[perm], is_inlier[perm]


""" 误差计算模块（重投影、点线距离） """
def getReprojectionError(src_points, dst_points, M):
    """ 点对在单应矩阵 M 下的平均重投影误差平方 """
    re_x = cv2.perspectiveTransform(np.asarray(src_points, dtype=np.float64).reshape(-1, 1, 2), M).reshape(-1, 2)
    return float(np.mean(np.sum(np.square(re_x - dst_points), axis=1)))


def getLineError(points, line):
    """ 点到直线 a*x + b*y + c = 0 的平均距离 """
    a, b, c = line
    return float(np.mean(np.abs(a * points[:, 0] + b * points[:, 1] + c) / np.hypot(a, b)))


""" 对比信息绘制模块 """
def draw_compare_homography(img, M, cmp_M):
    """ 在 img 上绘制图像边框经 M（蓝）和 cmp_M（绿）变换后的四边形 """
    h, w = img.shape[0:2]
    pts = np.float32([[0, 0], [0, h-1], [w-1, h-1], [w-1, 0]]).reshape(-1, 1, 2)

    # points transformation
    dst_cmp = cv2.perspectiveTransform(pts, cmp_M)
    dst_m = cv2.perspectiveTransform(pts, M)

    # blue is M estimated, green is ground truth estimated
    img_out = cv2.polylines(img.copy(), [np.int32(dst_m)], True, (0, 0, 255), 3, cv2.LINE_AA)
    img_out = cv2.polylines(img_out, [np.int32(dst_cmp)], True, (0, 255, 0), 3, cv2.LINE_AA)
    return img_out
