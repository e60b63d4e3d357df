import unittest

import requests
from freezegun import freeze_time

from apisig import Signer
from apisig.requests_auth import ApiGatewayAuth

FIXED_TIME = '2015-08-30 12:36:00'
URL = 'https://abc123.execute-api.us-east-1.amazonaws.com/prod/items'


class TestApiGatewayAuth(unittest.TestCase):
    ACCESS_KEY = 'AKIDEXAMPLE'
    SECRET_KEY = 'wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY'
    API_KEY = 'example-api-key-0123456789'

    def _prepare(self, method: str, **kwargs) -> requests.PreparedRequest:
        signer = Signer.from_keys(self.ACCESS_KEY, self.SECRET_KEY, self.API_KEY)
        return requests.Request(method, URL, auth=ApiGatewayAuth(signer), **kwargs).prepare()

    @freeze_time(FIXED_TIME)
    def test_prepared_request_carries_signed_headers(self) -> None:
        prepared = self._prepare('POST', json={'name': 'widget'})

        self.assertEqual(prepared.headers['X-Amz-Date'], '20150830T123600Z')
        self.assertEqual(prepared.headers['x-api-key'], self.API_KEY)
        self.assertEqual(prepared.headers['content-type'], 'application/json')
        self.assertEqual(
            prepared.headers['Authorization'],
            'AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20150830/execute-api/aws4_request, '
            'SignedHeaders=content-type;host;x-amz-date;x-api-key, '
            'Signature=59e58e6d1d0b9d657b3376a7fae27081d49a7e060981761c44a4a9a3b6252854'
        )

    @freeze_time(FIXED_TIME)
    def test_signature_ignores_method_and_body(self) -> None:
        get = self._prepare('GET', params={'page': '2'})
        post = self._prepare('POST', data=b'{"a": 1}')
        self.assertEqual(get.headers['Authorization'], post.headers['Authorization'])
        self.assertEqual(post.body, b'{"a": 1}')

    @freeze_time(FIXED_TIME)
    def test_existing_headers_are_kept(self) -> None:
        prepared = self._prepare('GET', headers={'Accept': 'application/json', 'X-Trace': 'abc'})
        self.assertEqual(prepared.headers['X-Trace'], 'abc')
        self.assertIn('Authorization', prepared.headers)


if __name__ == '__main__':
    unittest.main(verbosity=2)
