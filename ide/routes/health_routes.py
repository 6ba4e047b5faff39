"""
健康检查路由
"""

from flask import jsonify

import payjar_runtime
from ide import config


def register_health_routes(app):
    """
    注册健康检查路由

    Args:
        app: Flask应用实例
    """

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """
        健康检查端点
        """
        return jsonify({
            'status': 'ok',
            'message': 'PayJar IDE Server is running',
            'version': config.SERVER_VERSION,
            'runtime_version': payjar_runtime.__version__,
            'max_execution_time': config.MAX_EXECUTION_TIME,
            'max_request_size': config.MAX_REQUEST_SIZE
        })
