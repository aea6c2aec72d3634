import datetime
import json

import pytest

from oktasdk.ds.marshaller import JsonMapMarshaller
from oktasdk.exceptions import MarshalingError
from oktasdk.resources.users import UserProfile
from oktasdk.resources.users import UserStatus


def test_unmarshal_object():
    assert JsonMapMarshaller().unmarshal(b'{"id": "00u1"}') == {'id': '00u1'}


def test_unmarshal_list():
    data = JsonMapMarshaller().unmarshal(
        b'[{"id": "00u1"}]',
        {'next': 'https://test.okta.com/api/v1/users?after=00u1'},
    )
    assert data == {
        'items': [{'id': '00u1'}],
        'nextPage': 'https://test.okta.com/api/v1/users?after=00u1',
        'href': 'local',
    }


def test_unmarshal_last_page():
    data = JsonMapMarshaller().unmarshal('[]')
    assert data == {'items': [], 'nextPage': None, 'href': 'local'}


@pytest.mark.parametrize('body', [b'<html></html>', b'"text"', b'42'])
def test_unmarshal_invalid(body):
    with pytest.raises(MarshalingError):
        JsonMapMarshaller().unmarshal(body)


def test_marshal():
    body = JsonMapMarshaller().marshal({
        'status': UserStatus.ACTIVE,
        'created': datetime.datetime(2020, 1, 2, 3, 4, 5),
        'login': 'jūratė@example.com',
    })
    assert json.loads(body) == {
        'status': 'ACTIVE',
        'created': '2020-01-02T03:04:05',
        'login': 'jūratė@example.com',
    }
    assert 'jūratė'.encode('utf-8') in body


def test_marshal_resource(store):
    profile = store.instantiate(UserProfile, {'login': 'ada@example.com'})
    body = JsonMapMarshaller().marshal({'profile': profile})
    assert json.loads(body) == {'profile': {'login': 'ada@example.com'}}


def test_marshal_pretty_print():
    body = JsonMapMarshaller(pretty_print=True).marshal({'id': '00u1'})
    assert body == b'{\n  "id": "00u1"\n}'


def test_marshal_unsupported():
    with pytest.raises(MarshalingError):
        JsonMapMarshaller().marshal({'value': object()})
