"""
PayJar 异常模块

所有引擎共用的异常层次。异常的 str() 即为对外约定的错误文本，
调用方（IDE、命令行）可能会按文本模式匹配，因此消息格式不可随意修改。

关键类：
- PayJarError: 所有 PayJar 异常的基类
- PayJarLexError: 词法错误
- PayJarSyntaxError: 语法错误（携带期望/实际的 token 类型和位置）
- PayJarRuntimeError: 解释执行期错误
- TapeSyntaxError / TapeRuntimeError: 纸带机错误
"""


class PayJarError(Exception):
    """PayJar 异常基类"""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class PayJarLexError(PayJarError):
    pass


class PayJarSyntaxError(PayJarError):
    def __init__(self, message, expected=None, actual=None, index=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.index = index

    @classmethod
    def expected_token(cls, expected, actual, index):
        """构造 eat() 失配时的标准错误"""
        actual_text = actual if actual is not None else 'EOF'
        return cls(
            f"Syntax Error: Expected {expected}, but got {actual_text}. Index: {index}",
            expected=expected,
            actual=actual_text,
            index=index,
        )


class PayJarRuntimeError(PayJarError):
    pass


class TapeSyntaxError(PayJarError):
    def __init__(self, message, position=None):
        super().__init__(message)
        self.position = position


class TapeRuntimeError(PayJarError):
    pass


# 错误类别，供 IDE 分类展示
ERROR_CATEGORIES = {
    PayJarLexError: 'lexer',
    PayJarSyntaxError: 'syntax',
    PayJarRuntimeError: 'runtime',
    TapeSyntaxError: 'syntax',
    TapeRuntimeError: 'runtime',
}


def error_category(error):
    """返回异常所属类别：lexer / syntax / runtime / internal"""
    for error_type, category in ERROR_CATEGORIES.items():
        if isinstance(error, error_type):
            return category
    return 'internal'


def format_error_for_user(error):
    """
    将异常转换为面向用户的单条消息

    PayJar 异常原样返回约定文本；解释器自身的递归溢出和其他意外异常
    统一包装成 Runtime Error，保证调用方总能拿到一条可读消息。
    """
    if isinstance(error, PayJarError):
        return error.message
    if isinstance(error, RecursionError):
        return "Runtime Error: Maximum recursion depth exceeded."
    return f"Runtime Error: {error}"
