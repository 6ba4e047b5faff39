"""
通用工具函数
"""
import threading
import logging

logger = logging.getLogger(__name__)


class TimeoutException(Exception):
    """执行超时异常"""
    pass


def execute_with_timeout(func, timeout_sec, *args, **kwargs):
    """
    在工作线程中执行函数，超过时限即放弃等待

    线程无法被强制终止，超时的工作线程作为守护线程继续运行，直到函数自行返回：
    PayJar 程序受递归深度限制，纸带程序受 TAPE_MAX_STEPS 步数上限约束。
    每次运行持有独立的解释器和输出，不会影响后续请求。

    Args:
        func: 要执行的函数
        timeout_sec: 超时时间（秒），None 表示不限时
        *args, **kwargs: 传递给函数的参数

    Returns:
        函数执行结果

    Raises:
        TimeoutException: 当执行超时时
        Exception: 函数自身抛出的异常原样重新抛出
    """
    outcome = {}

    def target():
        try:
            outcome['result'] = func(*args, **kwargs)
        except Exception as e:
            outcome['error'] = e

    worker = threading.Thread(target=target, name=f"payjar-{getattr(func, '__name__', 'task')}", daemon=True)
    worker.start()
    worker.join(timeout_sec)

    if worker.is_alive():
        logger.warning(f"代码执行超时（{timeout_sec}秒）")
        raise TimeoutException(f"代码执行超过 {timeout_sec} 秒限制")

    if 'error' in outcome:
        raise outcome['error']

    return outcome.get('result')
