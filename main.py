from time import time

import cv2
import matplotlib.pyplot as plt
import matplotlib as mpl
import numpy as np

import lomsac
from lomsac.utils import setupLogger
from utils_helper import *


gt_H = np.array([[0.9, 0.05, 30.0],
                 [-0.04, 1.1, -20.0],
                 [1e-4, 5e-5, 1.0]])
gt_line = (2.0, 1.0)


def testLine(threshold=0.2):
    points, is_inlier = generate_line_data(200, inlier_ratio=0.6, noise=0.05, line=gt_line)
    t = time()
    line, mask = lomsac.fitLine(points, threshold=threshold)
    print('LO-MSAC')
    print('Inliers Ratio = ', mask.astype(np.float32).sum() / np.shape(points)[0])
    print('Elapsed time = ', time()-t)
    # 内点数目为 0 时没有可信的直线
    if line is None:
        print('No line found', '\n')
        return None
    print('Error = ', getLineError(points[is_inlier], line), '\n')

    # 绘制直线拟合结果
    a, b, c = line
    xs = np.array([0.0, 10.0])
    plt.subplot(2, 1, 1)
    plt.title("lo-msac line")
    plt.scatter(points[:, 0], points[:, 1], c=mask, s=8, cmap='coolwarm')
    plt.plot(xs, -(a * xs + c) / b, 'g-')


def testHomography(threshold=1.0):
    src_pts, dst_pts, is_inlier = generate_homography_data(gt_H, 500, inlier_ratio=0.5)
    match_img_list = []
    canvas = np.zeros((480, 640, 3), dtype=np.uint8)
    for i in range(2):
        t = time()
        if i == 0:
            print('CV2-RANSAC')
            H, mask = cv2.findHomography(src_pts, dst_pts, cv2.RANSAC, ransacReprojThreshold=threshold, confidence=0.9999, maxIters=10000)
        else:
            print('LO-MSAC')
            H, mask = lomsac.findHomography(src_pts, dst_pts, threshold=threshold)
        print('Inliers Ratio = ', mask.astype(np.float32).sum() / np.shape(src_pts)[0])
        print('Elapsed time = ', time()-t)
        # 内点数目为 0 时没有可信的单应矩阵
        if H is None:
            print('No homography found', '\n')
            match_img_list.append(canvas.copy())
            continue
        print('Error = ', getReprojectionError(src_pts[is_inlier], dst_pts[is_inlier], H), '\n')
        match_img_list.append(draw_compare_homography(canvas, H, gt_H))

    # 绘制 cv-ransac lo-msac 结果对比图
    plt.subplot(2, 2, 3)
    plt.title("cv-ransac")
    plt.imshow(match_img_list[0])
    plt.subplot(2, 2, 4)
    plt.title("lo-msac")
    plt.imshow(match_img_list[1])


if __name__ == "__main__":
    setupLogger()
    plt.figure(figsize=(12, 8))
    mpl.rcParams.update({'font.size': 8})

    # 测试直线拟合
    testLine(0.2)

    # 测试单应矩阵
    testHomography(1.0)

    plt.show()
