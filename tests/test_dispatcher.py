import pytest

from oktasdk import commands
from oktasdk.dispatcher import Command
from oktasdk.dispatcher import command
from oktasdk.resource.base import Resource


def test_dispatch_on_types():
    describe = Command('describe')

    @describe.register(int)
    def _(value):
        return 'int'

    @describe.register(object)
    def _(value):
        return 'object'

    assert describe(1) == 'int'
    assert describe('a') == 'object'


def test_not_implemented():
    describe = Command('describe')

    @describe.register(int)
    def _(value):
        return 'int'

    with pytest.raises(NotImplementedError) as e:
        describe('a')
    assert str(e.value) == 'describe is not implemented for <str>.'


def test_register_requires_types():
    with pytest.raises(TypeError):
        Command('describe').register()


def test_duplicate_command():
    with pytest.raises(ValueError):
        @command
        def get_error_context():
            pass


def test_error_context_command():
    assert commands.get_error_context(object()) == {}
    assert commands.get_error_context(Resource(None)) == {
        'resource': 'this.__class__.__name__',
        'href': 'this.href',
    }
