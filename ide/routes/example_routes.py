"""
示例文件路由
处理示例程序（.pj / .bf）的浏览和获取
"""

import os
import logging
from flask import jsonify

from ide import config
from ide.services.code_service import validate_path, is_safe_filename

logger = logging.getLogger(__name__)


def _example_language(filename):
    return 'brainfuck' if filename.endswith('.bf') else 'payjar'


def register_example_routes(app):
    """
    注册示例文件路由

    Args:
        app: Flask应用实例
    """

    @app.route('/api/examples', methods=['GET'])
    def list_examples():
        """
        列出可用的示例文件
        """
        examples_dir = config.ALLOWED_EXAMPLES_DIR
        examples = []

        try:
            if os.path.exists(examples_dir):
                for filename in sorted(os.listdir(examples_dir)):
                    if not filename.endswith(tuple(config.EXAMPLE_EXTENSIONS)):
                        continue
                    if not is_safe_filename(filename):
                        continue

                    file_path = os.path.join(examples_dir, filename)
                    validated_path = validate_path(file_path, examples_dir)
                    if validated_path and os.path.isfile(validated_path):
                        examples.append({
                            'name': filename,
                            'language': _example_language(filename),
                            'size': os.path.getsize(validated_path)
                        })
        except OSError as e:
            logger.error(f"列出示例文件错误: {e}")
            return jsonify({
                'success': False,
                'error': str(e)
            })

        return jsonify({
            'success': True,
            'examples': examples
        })

    @app.route('/api/examples/<path:filename>', methods=['GET'])
    def get_example(filename):
        """
        获取示例文件内容
        """
        examples_dir = config.ALLOWED_EXAMPLES_DIR

        if not is_safe_filename(filename):
            logger.warning(f"非法文件名尝试: {filename}")
            return jsonify({
                'success': False,
                'error': '无效的文件名'
            }), 400

        validated_path = validate_path(os.path.join(examples_dir, filename), examples_dir)
        if not validated_path or not os.path.isfile(validated_path):
            return jsonify({
                'success': False,
                'error': '文件不存在'
            }), 404

        try:
            with open(validated_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            logger.error(f"读取示例文件错误: {e}")
            return jsonify({
                'success': False,
                'error': str(e)
            }), 500

        logger.info(f"读取示例文件: {validated_path}")
        return jsonify({
            'success': True,
            'content': content,
            'name': filename,
            'language': _example_language(filename)
        })
