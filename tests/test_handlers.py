import pytest

from fbsig.constants import HTTPStatus
from fbsig.data_structures import HttpResponse
from fbsig.exceptions import ImmediateHttpResponse
from fbsig.handlers import Handler
from fbsig.testing import MockRequest


class Recorder(object):
    priority = 5

    def __init__(self):
        self.events = []

    def pre_dispatch(self, request, path_args):
        self.events.append('pre_dispatch')
        path_args['extra'] = 'value'

    def post_dispatch(self, request, response):
        self.events.append('post_dispatch')
        response['X-Recorded'] = 'yes'
        return response


class Reject(object):
    def pre_dispatch(self, request, _):
        raise ImmediateHttpResponse('nope', HTTPStatus.FORBIDDEN, {'Content-Type': 'text/plain'})


class TestHandler(object):
    def test_decorator(self):
        recorder = Recorder()

        @Handler(middleware=[recorder])
        def target(request, extra=None):
            recorder.events.append('handler')
            return HttpResponse(extra)

        response = target(MockRequest())

        assert isinstance(target, Handler)
        assert recorder.events == ['pre_dispatch', 'handler', 'post_dispatch']
        assert response.body == 'value'
        assert response.headers == {'X-Recorded': 'yes'}

    def test_no_middleware(self):
        target = Handler(lambda request, **kwargs: HttpResponse(kwargs))

        response = target(MockRequest(), {'a': 1})

        assert response.body == {'a': 1}

    def test_immediate_response(self):
        calls = []
        target = Handler(lambda request: calls.append(request), middleware=[Reject()])

        response = target(MockRequest())

        assert calls == []
        assert response.status == 403
        assert response.body == 'nope'
        assert response.headers == {'Content-Type': 'text/plain'}

    def test_errors_propagate(self):
        def callback(request):
            raise KeyError('boom')

        with pytest.raises(KeyError):
            Handler(callback)(MockRequest())
