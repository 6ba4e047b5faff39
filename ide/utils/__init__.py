"""
IDE 工具包
"""

from ide.utils.helpers import TimeoutException, execute_with_timeout

__all__ = ['TimeoutException', 'execute_with_timeout']
