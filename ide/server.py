"""
PayJar IDE 后端服务器
提供 PayJar 代码执行、语法诊断和纸带机执行 API

安全特性：
- 执行超时限制（默认5秒）
- 请求大小限制（最大1MB）
- 示例文件路径遍历防护
"""

import logging
from flask import Flask
from flask_cors import CORS

from ide import config
from ide.routes import register_all_routes

logger = logging.getLogger(__name__)


def create_app():
    """创建并配置 Flask 应用"""
    app = Flask(__name__)

    # 配置 CORS - 只允许特定来源
    CORS(app, resources={
        r"/api/*": {
            "origins": config.CORS_ORIGINS,
            "methods": config.CORS_METHODS,
            "allow_headers": config.CORS_HEADERS
        }
    })

    register_all_routes(app)
    return app


app = create_app()


def main():
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format=config.LOG_FORMAT
    )

    print("=" * 60)
    print(f"PayJar IDE Server v{config.SERVER_VERSION}")
    print("=" * 60)
    print("安全特性:")
    print(f"  - 执行超时: {config.MAX_EXECUTION_TIME} 秒")
    print(f"  - 请求大小限制: {config.MAX_REQUEST_SIZE} bytes")
    print("-" * 60)
    print("API 端点:")
    print("  POST /api/run             - 执行 PayJar 代码")
    print("  POST /api/validate        - 语法诊断")
    print("  POST /api/tape/run        - 执行纸带机程序")
    print("  GET  /api/examples        - 列出示例文件")
    print("  GET  /api/examples/<name> - 获取示例内容")
    print("  GET  /api/health          - 健康检查")
    print("=" * 60)

    app.run(host=config.SERVER_HOST, port=config.SERVER_PORT, debug=False)


if __name__ == '__main__':
    main()
