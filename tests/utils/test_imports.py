import pytest

from oktasdk.exceptions import ClassNotFound
from oktasdk.resources.users import User
from oktasdk.utils.imports import class_path
from oktasdk.utils.imports import full_class_name
from oktasdk.utils.imports import importstr


def test_importstr():
    assert importstr('oktasdk.resources.users:User') is User


@pytest.mark.parametrize('path', [
    'oktasdk.resources.users.User',
    'oktasdk.resources.users:Missing',
    'oktasdk.nothing:User',
])
def test_importstr_not_found(path):
    with pytest.raises(ClassNotFound):
        importstr(path)


def test_importstr_impl_hint():
    with pytest.raises(ClassNotFound) as e:
        importstr('acme.impl.users:DefaultUser')
    assert 'implementation package' in str(e.value)


def test_class_names(store):
    assert class_path(User) == 'oktasdk.resources.users:User'
    assert full_class_name(User) == 'oktasdk.resources.users.User'
    assert full_class_name(store.instantiate(User)) == 'oktasdk.resources.users.User'
