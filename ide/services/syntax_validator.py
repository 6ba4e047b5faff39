"""
PayJar 语法验证服务
提供静态语法分析功能，不执行代码只检查语法

核心引擎不跟踪行列号，因此：
- 词法/语法错误统一报告在第 1 行
- 额外的括号匹配扫描带有准确的行列号，作为警告辅助定位
"""

import logging
from typing import List, Dict, Any, Optional

from payjar_runtime import validate as runtime_validate

logger = logging.getLogger(__name__)


BRACKET_PAIRS = {')': '(', '}': '{'}


class SyntaxErrorInfo:
    """语法错误信息类"""

    def __init__(self, line: int, column: int, message: str,
                 severity: str = "error", code: Optional[str] = None,
                 category: Optional[str] = None):
        self.line = line
        self.column = column
        self.message = message
        self.severity = severity  # "error", "warning"
        self.code = code  # 相关代码片段
        self.category = category  # lexer / syntax / structure

    def to_dict(self) -> Dict[str, Any]:
        return {
            'line': self.line,
            'column': self.column,
            'message': self.message,
            'severity': self.severity,
            'code': self.code,
            'category': self.category
        }


class PayJarSyntaxValidator:
    """PayJar语法验证器"""

    def __init__(self):
        self.errors: List[SyntaxErrorInfo] = []
        self.warnings: List[SyntaxErrorInfo] = []
        self.code_lines: List[str] = []

    def validate(self, code: str) -> Dict[str, Any]:
        """
        验证PayJar代码语法

        Args:
            code: PayJar代码字符串

        Returns:
            dict: 包含errors和warnings的验证结果
        """
        self.errors = []
        self.warnings = []
        self.code_lines = code.split('\n')

        if not code.strip():
            self.errors.append(SyntaxErrorInfo(1, 1, "文件为空", category='structure'))
        else:
            self._check_brackets(code)
            self._check_with_runtime(code)

        return {
            'valid': len(self.errors) == 0,
            'errors': [e.to_dict() for e in self.errors],
            'warnings': [w.to_dict() for w in self.warnings],
            'total_errors': len(self.errors),
            'total_warnings': len(self.warnings)
        }

    def _check_with_runtime(self, code: str):
        """使用 payjar_runtime 做完整的词法和语法分析"""
        result = runtime_validate(code)
        if not result.success:
            self.errors.append(SyntaxErrorInfo(
                line=1,
                column=1,
                message=result.error,
                severity="error",
                code=self._get_code_at_line(1),
                category=result.error_type
            ))

    def _check_brackets(self, code: str):
        """
        扫描 () 和 {} 的匹配情况

        跳过字符串、模板字符串和注释，未匹配的括号以警告形式报告其所在行列。
        """
        stack = []
        line, column = 1, 0
        quote = None
        in_line_comment = False
        in_block_comment = False
        i = 0

        while i < len(code):
            char = code[i]
            nxt = code[i + 1] if i + 1 < len(code) else ''
            column += 1

            if char == '\n':
                line, column = line + 1, 0
                in_line_comment = False
            elif in_line_comment:
                pass
            elif in_block_comment:
                if char == '*' and nxt == '/':
                    in_block_comment = False
                    i += 1
                    column += 1
            elif quote:
                if char == quote:
                    quote = None
            elif char == '/' and nxt == '/':
                in_line_comment = True
            elif char == '/' and nxt == '*':
                in_block_comment = True
                i += 1
                column += 1
            elif char in ('"', "'", '`'):
                quote = char
            elif char in ('(', '{'):
                stack.append((char, line, column))
            elif char in BRACKET_PAIRS:
                if stack and stack[-1][0] == BRACKET_PAIRS[char]:
                    stack.pop()
                else:
                    self.warnings.append(SyntaxErrorInfo(
                        line, column, f"多余的闭合括号 '{char}'",
                        severity="warning", code=self._get_code_at_line(line), category='structure'
                    ))
            i += 1

        for char, open_line, open_column in stack:
            self.warnings.append(SyntaxErrorInfo(
                open_line, open_column, f"括号 '{char}' 未闭合",
                severity="warning", code=self._get_code_at_line(open_line), category='structure'
            ))

    def _get_code_at_line(self, line_num: int) -> Optional[str]:
        if 1 <= line_num <= len(self.code_lines):
            return self.code_lines[line_num - 1].strip()
        return None


def validate_code(code: str) -> Dict[str, Any]:
    """
    验证代码的便捷函数

    每次调用使用新的验证器实例，可在多个请求线程中并发调用。
    """
    return PayJarSyntaxValidator().validate(code)
