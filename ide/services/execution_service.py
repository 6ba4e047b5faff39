"""
PayJar 执行服务
统一处理 PayJar 代码和纸带机程序的执行与验证

每个请求都创建独立的解释器和输出目标，执行放在带超时的工作线程中。
"""

import logging
from typing import Dict, List, Any, Optional

from payjar_runtime import run as run_payjar, run_esolang, PayJarError
from payjar_runtime.errors import error_category
from ide import config
from ide.services.syntax_validator import validate_code
from ide.utils.helpers import TimeoutException, execute_with_timeout

logger = logging.getLogger(__name__)


def normalize_input(input_data: Optional[Any]) -> List[str]:
    """把请求中的输入数据整理为 readln() 使用的输入行列表"""
    if input_data is None:
        return []
    if isinstance(input_data, list):
        return [str(item) for item in input_data]
    return str(input_data).split('\n')


class PayJarExecutionService:
    """
    PayJar 执行服务
    统一入口，整合执行、验证和纸带机
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    @property
    def effective_timeout(self) -> float:
        return self.timeout if self.timeout is not None else config.MAX_EXECUTION_TIME

    def execute_code(self, code: str, input_data: Optional[Any] = None) -> Dict[str, Any]:
        """
        执行 PayJar 代码字符串

        Returns:
            dict: success / output / lines / error / error_type / warnings
        """
        input_lines = normalize_input(input_data)
        try:
            result = execute_with_timeout(run_payjar, self.effective_timeout, code, input_lines)
        except TimeoutException:
            logger.warning("PayJar 代码执行超时")
            return {
                'success': False,
                'error': f'执行超时: 代码运行超过 {self.effective_timeout} 秒限制',
                'error_type': 'timeout'
            }

        if not result.success:
            logger.info(f"PayJar 执行失败: {result.error}")
        return result.to_dict()

    def validate_code(self, code: str) -> Dict[str, Any]:
        """验证代码，返回诊断信息"""
        return validate_code(code)

    def run_tape(self, code: str, input_text: str = '', language: str = 'brainfuck') -> Dict[str, Any]:
        """执行纸带机程序"""
        try:
            output = execute_with_timeout(
                run_esolang, self.effective_timeout, code, language, input_text,
                tape_length=config.TAPE_LENGTH, max_steps=config.TAPE_MAX_STEPS
            )
        except TimeoutException:
            logger.warning("纸带机程序执行超时")
            return {
                'success': False,
                'error': f'执行超时: 代码运行超过 {self.effective_timeout} 秒限制',
                'error_type': 'timeout'
            }
        except PayJarError as e:
            logger.info(f"纸带机程序执行失败: {e}")
            return {
                'success': False,
                'error': str(e),
                'error_type': error_category(e)
            }

        return {
            'success': True,
            'output': output
        }


# 全局服务实例
_execution_service = None


def get_execution_service() -> PayJarExecutionService:
    """获取全局执行服务实例"""
    global _execution_service
    if _execution_service is None:
        _execution_service = PayJarExecutionService()
    return _execution_service

