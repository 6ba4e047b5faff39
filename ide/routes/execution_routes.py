"""
执行相关路由
处理 PayJar 代码运行、语法验证和纸带机程序运行的API端点
"""

import json
import logging
from flask import request, jsonify

from ide import config
from ide.services.execution_service import get_execution_service
from ide.services.code_service import limit_request_size

logger = logging.getLogger(__name__)


def _max_request_size():
    return config.MAX_REQUEST_SIZE


def _parse_input_data(raw):
    """input_data 可以是 JSON 数组或普通文本"""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def register_execution_routes(app):
    """
    注册执行相关路由

    Args:
        app: Flask应用实例
    """

    @app.route('/api/run', methods=['POST'])
    @limit_request_size(_max_request_size)
    def run_code():
        """
        执行 PayJar 代码
        """
        code = request.form.get('code', '')
        if not code.strip():
            return jsonify({'success': False, 'error': '代码为空'})

        input_data = _parse_input_data(request.form.get('input_data'))
        result = get_execution_service().execute_code(code, input_data=input_data)
        return jsonify(result)

    @app.route('/api/validate', methods=['POST'])
    @limit_request_size(_max_request_size)
    def validate_syntax():
        """
        语法验证端点
        """
        code = request.form.get('code', '')

        if not code.strip():
            return jsonify({
                'success': True,
                'valid': True,
                'errors': [],
                'warnings': [],
                'message': '代码为空'
            })

        result = get_execution_service().validate_code(code)
        return jsonify({
            'success': True,
            'valid': result['valid'],
            'errors': result['errors'],
            'warnings': result['warnings']
        })

    @app.route('/api/tape/run', methods=['POST'])
    @limit_request_size(_max_request_size)
    def run_tape_code():
        """
        执行纸带机（Brainfuck）程序
        """
        code = request.form.get('code', '')
        input_text = request.form.get('input', '')
        language = request.form.get('language', 'brainfuck')

        if not code.strip():
            return jsonify({'success': False, 'error': '代码为空'})

        result = get_execution_service().run_tape(code, input_text=input_text, language=language)
        return jsonify(result)
