"""
PayJar 代码服务
请求大小限制与示例文件路径安全检查
"""

import os
import logging
from functools import wraps
from flask import request, jsonify

logger = logging.getLogger(__name__)


def limit_request_size(max_size):
    """
    装饰器：限制请求大小

    Args:
        max_size: 最大允许的字节数，或返回该值的无参函数（便于读取运行时配置）

    Returns:
        装饰器函数
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            limit = max_size() if callable(max_size) else max_size
            content_length = request.content_length
            if content_length and content_length > limit:
                logger.warning(f"请求过大: {content_length} bytes")
                return jsonify({
                    'success': False,
                    'error': f'请求大小超过限制 ({limit} bytes)'
                }), 413
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def validate_path(file_path, allowed_dir):
    """
    验证文件路径是否在允许的目录内

    Returns:
        验证通过的绝对路径，或None（如果验证失败）
    """
    abs_path = os.path.abspath(file_path)
    abs_allowed = os.path.abspath(allowed_dir)

    try:
        common = os.path.commonpath([abs_path, abs_allowed])
    except ValueError:
        # 不同驱动器（Windows）
        logger.warning(f"无效路径: {file_path}")
        return None

    if common != abs_allowed:
        logger.warning(f"路径遍历尝试: {file_path}")
        return None
    return abs_path


def is_safe_filename(filename):
    """检查文件名是否安全（不包含路径遍历字符）"""
    unsafe_patterns = ['..', '/', '\\']
    return bool(filename) and not any(pattern in filename for pattern in unsafe_patterns)
