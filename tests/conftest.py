from unittest.mock import MagicMock
from urllib.parse import parse_qsl

import pytest
import simplejson

from solrops.admin import CollectionsClient


def fake_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = payload if isinstance(payload, str) else simplejson.dumps(payload)
    return response


def ok_payload(**extra):
    payload = {'responseHeader': {'status': 0, 'QTime': 12}}
    payload.update(extra)
    return payload


def sent_params(session):
    """Query parameters of every GET the session saw, as dicts."""
    return [dict(call.kwargs['params']) for call in session.get.call_args_list]


def sent_names(session):
    return [params.get('name') for params in sent_params(session)]


@pytest.fixture
def session():
    session = MagicMock()
    session.get.return_value = fake_response(ok_payload())
    return session


@pytest.fixture
def client(session):
    return CollectionsClient('10.0.0.1:8983', timeout=5, session=session)


@pytest.fixture
def query():
    def parse(url):
        return dict(parse_qsl(url.split('?', 1)[1]))
    return parse
