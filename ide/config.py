"""
PayJar IDE 服务器配置
集中管理所有配置常量

环境变量 PAYJAR_IDE_CONFIG 指向一个 YAML 文件时，其顶层键（大小写均可）
会覆盖下面同名的常量。
"""

import os
import logging

import yaml

logger = logging.getLogger(__name__)

# 安全配置
MAX_REQUEST_SIZE = 1024 * 1024  # 1MB
MAX_EXECUTION_TIME = 5  # 5秒

# 纸带机配置
TAPE_LENGTH = 30000
TAPE_MAX_STEPS = 50000000  # 单次纸带运行最多执行的命令数

# 路径配置
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(BASE_DIR, '..'))
ALLOWED_EXAMPLES_DIR = os.path.abspath(os.path.join(PROJECT_ROOT, 'examples'))
EXAMPLE_EXTENSIONS = ('.pj', '.bf')

# CORS配置
CORS_ORIGINS = [
    "http://localhost:5000",
    "http://127.0.0.1:5000",
    "http://localhost:3000",
    "http://127.0.0.1:3000"
]

CORS_METHODS = ["GET", "POST"]
CORS_HEADERS = ["Content-Type"]

# 服务器配置
SERVER_HOST = '0.0.0.0'
SERVER_PORT = 5000
SERVER_VERSION = '1.0.0'

# 日志配置
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_LEVEL = 'INFO'

CONFIG_ENV_VAR = 'PAYJAR_IDE_CONFIG'


def load_overrides(path):
    """
    读取 YAML 配置文件

    Args:
        path: YAML 文件路径

    Returns:
        dict: 键统一为大写的覆盖项；文件为空时返回空字典

    Raises:
        ValueError: 文件顶层不是映射
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"配置文件顶层必须是映射: {path}")
    return {str(key).upper(): value for key, value in data.items()}


def apply_overrides(overrides, namespace=None):
    """把覆盖项写入模块全局变量，只接受已存在的配置名"""
    namespace = namespace if namespace is not None else globals()
    applied = []
    for key, value in overrides.items():
        if key.isupper() and key in namespace and not callable(namespace[key]):
            namespace[key] = value
            applied.append(key)
        else:
            logger.warning(f"忽略未知配置项: {key}")
    return applied


_config_path = os.environ.get(CONFIG_ENV_VAR)
if _config_path:
    apply_overrides(load_overrides(_config_path))
