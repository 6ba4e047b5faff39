"""
PayJar语法验证服务测试文件

测试覆盖范围：
1. 基本功能测试 - 验证器初始化和基本验证
2. 运行时诊断测试 - 词法错误、语法错误
3. 括号匹配测试 - 各种括号匹配情况及行列号
4. 边界情况测试 - 字符串和注释中的括号
"""

import unittest
import sys
import os

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

# 直接导入 syntax_validator 模块，避免通过 services 包的 __init__.py
# 这样可以避免导入 execution_service 等依赖 Flask 的模块
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'services'))
from syntax_validator import (
    SyntaxErrorInfo,
    PayJarSyntaxValidator,
    validate_code
)


VALID_PROGRAM = """public class main(@self) {
    let x = 1;
    println(x);
}"""


class TestSyntaxErrorInfo(unittest.TestCase):
    """测试 SyntaxErrorInfo 类"""

    def test_basic_creation(self):
        """测试基本创建"""
        error = SyntaxErrorInfo(
            line=10,
            column=5,
            message="测试错误",
            severity="error",
            code="test code"
        )
        self.assertEqual(error.line, 10)
        self.assertEqual(error.column, 5)
        self.assertEqual(error.message, "测试错误")
        self.assertEqual(error.severity, "error")
        self.assertEqual(error.code, "test code")

    def test_to_dict(self):
        """测试转换为字典"""
        error = SyntaxErrorInfo(
            line=1,
            column=1,
            message="测试",
            severity="warning"
        )
        result = error.to_dict()
        self.assertEqual(result['line'], 1)
        self.assertEqual(result['column'], 1)
        self.assertEqual(result['message'], "测试")
        self.assertEqual(result['severity'], "warning")
        self.assertIsNone(result['code'])
        self.assertIsNone(result['category'])


class TestPayJarSyntaxValidatorBasic(unittest.TestCase):
    """测试 PayJarSyntaxValidator 基本功能"""

    def setUp(self):
        """每个测试前创建新的验证器"""
        self.validator = PayJarSyntaxValidator()

    def test_empty_code(self):
        """测试空代码"""
        result = self.validator.validate("")
        self.assertFalse(result['valid'])
        self.assertEqual(result['total_errors'], 1)
        self.assertEqual(result['errors'][0]['message'], "文件为空")

    def test_whitespace_only(self):
        """测试只有空白"""
        result = self.validator.validate("   \n\n  ")
        self.assertFalse(result['valid'])

    def test_valid_program(self):
        """测试合法程序"""
        result = self.validator.validate(VALID_PROGRAM)
        self.assertTrue(result['valid'])
        self.assertEqual(result['errors'], [])
        self.assertEqual(result['warnings'], [])

    def test_validator_is_reset_between_runs(self):
        """测试重复使用验证器"""
        self.validator.validate("public class main(@self) {")
        result = self.validator.validate(VALID_PROGRAM)
        self.assertTrue(result['valid'])
        self.assertEqual(result['total_warnings'], 0)


class TestRuntimeDiagnostics(unittest.TestCase):
    """测试词法和语法错误"""

    def setUp(self):
        self.validator = PayJarSyntaxValidator()

    def test_syntax_error(self):
        """测试语法错误"""
        result = self.validator.validate("public class main(@self) {\n    let = 1;\n}")
        self.assertFalse(result['valid'])
        error = result['errors'][0]
        self.assertTrue(error['message'].startswith("Syntax Error: Expected IDENTIFIER"))
        self.assertEqual(error['line'], 1)
        self.assertEqual(error['category'], 'syntax')

    def test_lexer_error(self):
        """测试词法错误"""
        result = self.validator.validate("public class main(@self) {\n    let x = 1 # 2;\n}")
        self.assertFalse(result['valid'])
        self.assertEqual(result['errors'][0]['message'], "Lexer Error: Invalid character: #")
        self.assertEqual(result['errors'][0]['category'], 'lexer')

    def test_runtime_errors_are_not_reported(self):
        """测试不执行代码"""
        result = self.validator.validate("public class main(@self) {\n    println(1 / 0);\n}")
        self.assertTrue(result['valid'])


class TestBracketMatching(unittest.TestCase):
    """测试括号匹配"""

    def setUp(self):
        self.validator = PayJarSyntaxValidator()

    def test_unclosed_brace(self):
        """测试未闭合的花括号"""
        result = self.validator.validate("public class main(@self) {\n    println(1);\n")
        self.assertFalse(result['valid'])
        self.assertEqual(result['total_warnings'], 1)
        warning = result['warnings'][0]
        self.assertEqual(warning['message'], "括号 '{' 未闭合")
        self.assertEqual(warning['line'], 1)
        self.assertEqual(warning['column'], 26)
        self.assertEqual(warning['severity'], 'warning')

    def test_extra_closing_brace(self):
        """测试多余的闭合括号（结尾多余的 token 不影响解析）"""
        result = self.validator.validate("public class main(@self) {\n}\n}")
        self.assertTrue(result['valid'])
        self.assertEqual(result['total_warnings'], 1)
        warning = result['warnings'][0]
        self.assertEqual(warning['message'], "多余的闭合括号 '}'")
        self.assertEqual(warning['line'], 3)
        self.assertEqual(warning['column'], 1)

    def test_mismatched_parenthesis(self):
        """测试括号类型不匹配"""
        result = self.validator.validate("public class main(@self) {\n    println(1};\n}")
        messages = [w['message'] for w in result['warnings']]
        self.assertIn("多余的闭合括号 '}'", messages)
        self.assertFalse(result['valid'])

    def test_brackets_in_strings_and_comments(self):
        """测试字符串和注释中的括号被忽略"""
        code = (
            "public class main(@self) {\n"
            "    println(\"(\");\n"
            "    println(`{`);\n"
            "    // {\n"
            "    /* } ) */\n"
            "}"
        )
        result = self.validator.validate(code)
        self.assertTrue(result['valid'])
        self.assertEqual(result['warnings'], [])


class TestConvenienceFunctions(unittest.TestCase):
    """测试便捷函数"""

    def test_validate_code(self):
        """测试 validate_code 函数"""
        result = validate_code(VALID_PROGRAM)
        self.assertTrue(result['valid'])
        self.assertIn('total_errors', result)


if __name__ == '__main__':
    unittest.main()
