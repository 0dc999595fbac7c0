import os
from typing import List, Tuple

SUPPORTED_IMAGE_EXTENSIONS = frozenset({
    'jpg', 'jpeg', 'png', 'gif', 'bmp', 'webp', 'tiff', 'avif', 'heic', 'svg'
})


def is_image_file(path: str) -> bool:
    """
    根据扩展名判断是否为图片文件(不区分大小写，只看最后一个扩展名)

    Args:
        path: 文件路径

    Returns:
        bool: 是否为图片
    """
    ext = os.path.splitext(os.fspath(path))[1]
    if not ext:
        return False
    return ext[1:].lower() in SUPPORTED_IMAGE_EXTENSIONS


def split_images(files: List[str]) -> Tuple[List[str], List[str]]:
    """将文件列表拆分为 (图片, 其他文件)，保持原有顺序"""
    images = []
    others = []
    for path in files:
        if is_image_file(path):
            images.append(path)
        else:
            others.append(path)
    return images, others


def is_image_dominant(files: List[str]) -> bool:
    """图片数量严格多于其他文件数量时返回True，空列表返回False"""
    if not files:
        return False
    images, others = split_images(files)
    return len(images) > len(others)
