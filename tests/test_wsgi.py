import io
import pytest

from urllib.parse import urlencode, parse_qs

from fbsig.testing import sign_params, sign_cookies
from fbsig.wsgi import FacebookMiddleware, WsgiRequest

SECRET = '123456789'
API_KEY = '616313'
USER_SIGNATURE = sign_params({'fb_sig_user': '1'}, SECRET)['fb_sig'].encode()


def make_environ(method='POST', form=None, cookie=None, path='/', content_type='application/x-www-form-urlencoded',
                 body=None):
    if body is None:
        body = urlencode(sorted((form or {}).items())).encode('UTF8')
    environ = {
        'REQUEST_METHOD': method,
        'PATH_INFO': path,
        'CONTENT_TYPE': content_type,
        'CONTENT_LENGTH': str(len(body)),
        'wsgi.input': io.BytesIO(body),
    }
    if cookie:
        environ['HTTP_COOKIE'] = cookie
    return environ


class MockApp(object):
    def __init__(self):
        self.environ = None
        self.body = None

    def __call__(self, environ, start_response):
        self.environ = environ
        self.body = environ['wsgi.input'].read(int(environ.get('CONTENT_LENGTH') or 0))
        start_response('200 OK', [('Content-Type', 'text/plain')])
        return [b'hello']


class StartResponse(object):
    def __init__(self):
        self.status = None
        self.headers = None

    def __call__(self, status, headers):
        self.status = status
        self.headers = dict(headers)


@pytest.fixture
def app():
    return MockApp()


@pytest.fixture
def start_response():
    return StartResponse()


class TestWsgiRequest(object):
    def test_form(self):
        target = WsgiRequest(make_environ(form={'a': '1', 'b': ''}))

        assert target.form == {'a': '1', 'b': ''}
        # Body is still readable
        assert target.environ['wsgi.input'].read() == b'a=1&b='

    def test_form__not_form_content(self):
        target = WsgiRequest(make_environ(form={'a': '1'}, content_type='application/json'))

        assert target.form == {}

    def test_form__no_body(self):
        environ = make_environ()
        del environ['CONTENT_LENGTH']

        assert WsgiRequest(environ).form == {}

    def test_set_form(self):
        target = WsgiRequest(make_environ(form={'a': '1', 'b': '2'}))

        target.form = {'b': '2'}

        assert target.environ['CONTENT_LENGTH'] == '3'
        assert target.environ['wsgi.input'].read() == b'b=2'

    @pytest.mark.parametrize('body, expected', (
        (b'fb_sig_user=1&tag=a&tag=b&fb_sig=x', b'tag=a&tag=b'),
        (b'blob=%FF%FE&fb_sig_user=1&fb_sig=x', b'blob=%FF%FE'),
        (b'fb_sig=x&name=J%C3%BCrgen+Smith&empty=&flag', b'name=J%C3%BCrgen+Smith&empty=&flag'),
    ))
    def test_set_form__preserves_other_fields(self, body, expected):
        target = WsgiRequest(make_environ(body=body))

        target.form = {k: v for k, v in target.form.items() if not k.startswith('fb_sig')}

        assert target.environ['wsgi.input'].read() == expected
        assert target.environ['CONTENT_LENGTH'] == str(len(expected))

    def test_set_form__added_fields(self):
        target = WsgiRequest(make_environ(body=b'a=1&a=2'))

        target.form = {'a': '2', 'c': '3 4'}

        assert target.environ['wsgi.input'].read() == b'a=1&a=2&c=3+4'

    def test_method(self):
        target = WsgiRequest(make_environ())

        target.method = 'PUT'

        assert target.environ['REQUEST_METHOD'] == 'PUT'
        assert target.method == 'PUT'

    @pytest.mark.parametrize('cookie, expected', (
        (None, {}),
        ('a=1; b=2', {'a': '1', 'b': '2'}),
        ('616313_user=22; 616313=abc', {'616313_user': '22', '616313': 'abc'}),
    ))
    def test_cookies(self, cookie, expected):
        target = WsgiRequest(make_environ(cookie=cookie))

        assert target.cookies == expected


class TestFacebookMiddleware(object):
    def test_invalid_signature(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY)

        actual = target(make_environ(form={'fb_sig': 'INVALID'}), start_response)

        assert actual == [b'Invalid Facebook signature']
        assert start_response.status == '400 Bad Request'
        assert start_response.headers['Content-Type'] == 'text/html'
        assert start_response.headers['Content-Length'] == '26'
        assert app.environ is None

    def test_valid_signature(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY, 'my_app')
        form = sign_params({'fb_sig_in_canvas': '1', 'fb_sig_request_method': 'GET', 'foo': 'bar'}, SECRET)

        actual = target(make_environ(form=form), start_response)

        assert actual == [b'hello']
        assert start_response.status == '200 OK'
        environ = app.environ
        assert environ['REQUEST_METHOD'] == 'GET'
        assert environ['facebook.original_method'] == 'POST'
        assert environ['facebook.in_canvas'] is True
        assert environ['facebook.app_name'] == 'my_app'
        assert parse_qs(app.body.decode()) == {'foo': ['bar']}

    def test_valid_cookies(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY)
        cookies = sign_cookies({API_KEY + '_user': '22', API_KEY + '_ss': 'SEKRIT'}, SECRET, API_KEY)
        cookie = '; '.join('%s=%s' % i for i in cookies.items())

        actual = target(make_environ(method='GET', cookie=cookie, content_type=''), start_response)

        assert actual == [b'hello']
        assert app.environ['REQUEST_METHOD'] == 'GET'

    def test_invalid_cookies(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY)

        target(make_environ(cookie='616313=INVALID; 616313_ss=SEKRIT'), start_response)

        assert start_response.status == '400 Bad Request'
        assert app.environ is None

    def test_unsigned(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY)

        target(make_environ(form={'foo': 'bar'}), start_response)

        assert start_response.status == '200 OK'
        assert app.body == b'foo=bar'
        assert not any(k.startswith('facebook.') for k in app.environ)

    @pytest.mark.parametrize('path, expected_status', (
        ('/facebook_only/canvas', '400 Bad Request'),
        ('/other', '200 OK'),
    ))
    def test_condition(self, app, start_response, path, expected_status):
        target = FacebookMiddleware(
            app, SECRET, condition=lambda environ: environ['PATH_INFO'].startswith('/facebook_only')
        )

        target(make_environ(form={'fb_sig': 'INVALID'}, path=path), start_response)

        assert start_response.status == expected_status

    @pytest.mark.parametrize('other_fields', (
        b'tag=a&tag=b',
        b'blob=%FF%FE',
        b'blob=\xff\xfe',
        b'name=J%C3%BCrgen+Smith&empty=&flag',
    ))
    def test_other_fields_reach_app_unchanged(self, app, start_response, other_fields):
        target = FacebookMiddleware(app, SECRET, API_KEY)
        body = b'fb_sig_user=1&' + other_fields + b'&fb_sig=' + USER_SIGNATURE

        target(make_environ(body=body), start_response)

        assert start_response.status == '200 OK'
        assert app.environ['facebook.user'] == '1'
        assert app.body == other_fields

    def test_signed_fields_between_other_fields(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY)
        body = b'tag=a&fb_sig_user=1&tag=b&fb_sig=' + USER_SIGNATURE

        target(make_environ(body=body), start_response)

        assert app.body == b'tag=a&tag=b'
        assert app.environ['CONTENT_LENGTH'] == '11'

    def test_multipart_not_verified(self, app, start_response):
        target = FacebookMiddleware(app, SECRET, API_KEY)
        body = b'--x\r\nContent-Disposition: form-data; name="fb_sig"\r\n\r\nINVALID\r\n--x--\r\n'

        target(make_environ(body=body, content_type='multipart/form-data; boundary=x'), start_response)

        assert start_response.status == '200 OK'
        assert app.body == body
