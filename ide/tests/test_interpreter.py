"""
解释器入口测试

测试覆盖范围：
1. run() 的结果结构和失败恢复
2. validate() 只做词法语法检查
3. 命令行子命令
"""

import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from payjar_runtime.interpreter import run, validate, main, RunResult


def wrap(body):
    return "public class main(@self) {\n" + body + "\n}"


class TestRun(unittest.TestCase):
    """测试 run()"""

    def test_success(self):
        result = run(wrap('println("Hello"); println(1 + 1);'))
        self.assertTrue(result.success)
        self.assertEqual(result.output, ['Hello', '2'])
        self.assertIsNone(result.error)
        self.assertEqual(result.warnings, [])

    def test_to_dict(self):
        result = run(wrap('println("a"); println("b");'))
        data = result.to_dict()
        self.assertEqual(data['output'], 'a\nb')
        self.assertEqual(data['lines'], ['a', 'b'])
        self.assertTrue(data['success'])

    def test_partial_output_kept_on_failure(self):
        result = run(wrap("println(1); println(1 / 0); println(2);"))
        self.assertFalse(result.success)
        self.assertEqual(result.output, ['1'])
        self.assertEqual(result.error, "Runtime Error: Division by zero.")
        self.assertEqual(result.error_type, 'runtime')

    def test_lexer_error(self):
        result = run(wrap("let x = 1 # 2;"))
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Lexer Error: Invalid character: #")
        self.assertEqual(result.error_type, 'lexer')
        self.assertEqual(result.output, [])

    def test_syntax_error(self):
        result = run("public class main(@self) {")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Syntax Error: Expected RBRACE, but got EOF. Index: 8")
        self.assertEqual(result.error_type, 'syntax')

    def test_unbounded_recursion(self):
        result = run(wrap("func f() { return f(); } f();"))
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Runtime Error: Maximum recursion depth exceeded.")

    def test_input_lines(self):
        result = run(wrap('let a = readln(""); let b = readln(""); println(a + b);'), input_lines=['x', 'y'])
        self.assertEqual(result.output, ['xy'])

    def test_on_output_callback(self):
        seen = []
        run(wrap("println(1); println(2 / 0);"), on_output=seen.append)
        self.assertEqual(seen, ['1'])

    def test_runs_do_not_share_state(self):
        source = wrap("func f() { return 1; } let x = f(); println(x);")
        self.assertEqual(run(source).output, ['1'])
        self.assertEqual(run(source).output, ['1'])

    def test_result_defaults(self):
        self.assertEqual(RunResult().to_dict()['output'], '')


class TestValidate(unittest.TestCase):
    """测试 validate()"""

    def test_valid(self):
        result = validate(wrap("println(1);"))
        self.assertTrue(result.success)
        self.assertIsNone(result.error)

    def test_does_not_execute(self):
        self.assertTrue(validate(wrap("println(1 / 0); let y = missing;")).success)

    def test_syntax_error(self):
        result = validate(wrap("let = 1;"))
        self.assertFalse(result.success)
        self.assertEqual(result.error_type, 'syntax')
        self.assertTrue(result.error.startswith("Syntax Error: Expected IDENTIFIER"))

    def test_self_in_free_function(self):
        result = validate(wrap("func f(self) { }"))
        self.assertFalse(result.success)
        self.assertEqual(
            result.error, "Syntax Error: The 'self' parameter is only allowed in class method definitions."
        )

    def test_constructor_without_self_is_a_runtime_problem(self):
        source = wrap("class P(@innerSelf) { func init(v) { } } let p = NEW P(1);")
        self.assertTrue(validate(source).success)
        self.assertFalse(run(source).success)

    def test_lexer_error(self):
        result = validate(wrap('println("abc);'))
        self.assertEqual(result.to_dict(), {
            'success': False,
            'error': "Lexer Error: Unterminated string literal",
            'error_type': 'lexer',
        })


class TestCommandLine(unittest.TestCase):
    """测试命令行入口"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def write(self, name, content):
        path = os.path.join(self.temp_dir.name, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def call(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_run(self):
        path = self.write('prog.pj', wrap('println("hi"); println(readln(""));'))
        code, out, _ = self.call(['run', path, '--input', 'typed'])
        self.assertEqual(code, 0)
        self.assertEqual(out, 'hi\ntyped\n')

    def test_run_failure(self):
        path = self.write('bad.pj', wrap("println(1); println(x);"))
        code, out, err = self.call(['run', path])
        self.assertEqual(code, 1)
        self.assertEqual(out, '1\n')
        self.assertIn("Runtime Error: Undefined variable 'x'", err)

    def test_check(self):
        path = self.write('prog.pj', wrap("println(1);"))
        code, out, _ = self.call(['check', path])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), 'OK')

    def test_check_failure(self):
        path = self.write('bad.pj', "public class main(@self) {")
        code, _, err = self.call(['check', path])
        self.assertEqual(code, 1)
        self.assertIn("Expected RBRACE", err)

    def test_tape(self):
        path = self.write('echo.bf', ',.,.')
        code, out, _ = self.call(['tape', path, '--input', 'ok'])
        self.assertEqual(code, 0)
        self.assertEqual(out, 'ok')

    def test_tape_failure(self):
        path = self.write('bad.bf', '<')
        code, _, err = self.call(['tape', path])
        self.assertEqual(code, 1)
        self.assertIn("Data pointer moved left", err)

    def test_missing_file(self):
        code, _, err = self.call(['run', os.path.join(self.temp_dir.name, 'nope.pj')])
        self.assertEqual(code, 1)
        self.assertIn("File not found", err)

    def test_no_command(self):
        code, _, _ = self.call([])
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
