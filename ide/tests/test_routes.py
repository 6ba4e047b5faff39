"""
IDE HTTP 接口测试
使用 Flask 测试客户端
"""

import json
import unittest
import sys
import os
from unittest import mock

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from ide import config
from ide.server import create_app


def wrap(body):
    return "public class main(@self) {\n" + body + "\n}"


class RoutesTestCase(unittest.TestCase):

    def setUp(self):
        self.app = create_app()
        self.client = self.app.test_client()


class TestRunRoute(RoutesTestCase):
    """测试 /api/run"""

    def test_run(self):
        response = self.client.post('/api/run', data={'code': wrap('println("Hello");')})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['output'], 'Hello')

    def test_run_error(self):
        response = self.client.post('/api/run', data={'code': wrap("println(1 / 0);")})
        data = response.get_json()
        self.assertFalse(data['success'])
        self.assertEqual(data['error'], "Runtime Error: Division by zero.")

    def test_empty_code(self):
        data = self.client.post('/api/run', data={'code': '   '}).get_json()
        self.assertEqual(data, {'success': False, 'error': '代码为空'})

    def test_json_input_data(self):
        code = wrap('println(readln("a")); println(readln("b"));')
        response = self.client.post('/api/run', data={'code': code, 'input_data': json.dumps(['x', 'y'])})
        self.assertEqual(response.get_json()['lines'], ['x', 'y'])

    def test_text_input_data(self):
        code = wrap('println(readln("a"));')
        response = self.client.post('/api/run', data={'code': code, 'input_data': 'plain text'})
        self.assertEqual(response.get_json()['output'], 'plain text')

    def test_request_too_large(self):
        with mock.patch.object(config, 'MAX_REQUEST_SIZE', 10):
            response = self.client.post('/api/run', data={'code': wrap('println(1);')})
        self.assertEqual(response.status_code, 413)
        self.assertFalse(response.get_json()['success'])


class TestValidateRoute(RoutesTestCase):
    """测试 /api/validate"""

    def test_valid(self):
        data = self.client.post('/api/validate', data={'code': wrap("println(1);")}).get_json()
        self.assertTrue(data['success'])
        self.assertTrue(data['valid'])

    def test_invalid(self):
        data = self.client.post('/api/validate', data={'code': "public class main(@self) {"}).get_json()
        self.assertFalse(data['valid'])
        self.assertTrue(data['errors'][0]['message'].startswith("Syntax Error"))

    def test_empty(self):
        data = self.client.post('/api/validate', data={'code': ''}).get_json()
        self.assertTrue(data['valid'])
        self.assertEqual(data['message'], '代码为空')


class TestTapeRoute(RoutesTestCase):
    """测试 /api/tape/run"""

    def test_run(self):
        data = self.client.post('/api/tape/run', data={'code': '+' * 64 + '.'}).get_json()
        self.assertEqual(data, {'success': True, 'output': '@'})

    def test_input(self):
        data = self.client.post('/api/tape/run', data={'code': ',.', 'input': 'k'}).get_json()
        self.assertEqual(data['output'], 'k')

    def test_error(self):
        data = self.client.post('/api/tape/run', data={'code': '<'}).get_json()
        self.assertFalse(data['success'])
        self.assertEqual(data['error_type'], 'runtime')


class TestExampleRoutes(RoutesTestCase):
    """测试示例文件接口"""

    def test_list(self):
        data = self.client.get('/api/examples').get_json()
        self.assertTrue(data['success'])
        names = {example['name']: example['language'] for example in data['examples']}
        self.assertEqual(names.get('hello.pj'), 'payjar')
        self.assertEqual(names.get('hello.bf'), 'brainfuck')

    def test_get(self):
        data = self.client.get('/api/examples/hello.pj').get_json()
        self.assertTrue(data['success'])
        self.assertIn('public class main(@self)', data['content'])

    def test_missing(self):
        response = self.client.get('/api/examples/missing.pj')
        self.assertEqual(response.status_code, 404)

    def test_traversal_rejected(self):
        response = self.client.get('/api/examples/..%2Fsetup.cfg')
        self.assertIn(response.status_code, (400, 404))


class TestHealthRoute(RoutesTestCase):
    """测试 /api/health"""

    def test_health(self):
        data = self.client.get('/api/health').get_json()
        self.assertEqual(data['status'], 'ok')
        self.assertEqual(data['version'], config.SERVER_VERSION)
        self.assertIn('runtime_version', data)


if __name__ == '__main__':
    unittest.main()
