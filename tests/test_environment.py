import pytest

from loxy.environment import Environment
from loxy.errors import UndefinedVariable
from loxy.lexer import Token, TokenKind


def name(text):
    return Token(TokenKind.IDENTIFIER, text, 1)


def test_define_and_get():
    env = Environment()
    env.define('a', 1.0)
    assert env.get(name('a')) == 1.0


def test_redefinition_overwrites():
    env = Environment()
    env.define('a', 1.0)
    env.define('a', 'two')
    assert env.get(name('a')) == 'two'


def test_get_walks_outward():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(Environment(outer))
    assert inner.get(name('a')) == 1.0
    assert inner.depth() == 2


def test_get_undefined_raises():
    with pytest.raises(UndefinedVariable) as info:
        Environment(Environment()).get(name('nope'))
    assert str(info.value) == "UndefinedVariable: Undefined variable 'nope'."


def test_assign_updates_nearest_binding():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(outer)
    inner.assign(name('a'), 2.0)
    assert outer.values['a'] == 2.0
    assert 'a' not in inner.values


def test_assign_undefined_raises():
    with pytest.raises(UndefinedVariable):
        Environment().assign(name('a'), 1.0)


def test_get_at_looks_only_in_the_target_frame():
    outer = Environment()
    outer.define('a', 'outer')
    middle = Environment(outer)
    middle.define('a', 'middle')
    inner = Environment(middle)
    assert inner.get_at(1, name('a')) == 'middle'
    assert inner.get_at(2, name('a')) == 'outer'
    with pytest.raises(UndefinedVariable):
        inner.get_at(0, name('a'))


def test_ancestor_past_the_global_frame():
    env = Environment(Environment())
    assert env.ancestor(1) is env.enclosing
    assert env.ancestor(5) is None
    with pytest.raises(UndefinedVariable):
        env.get_at(5, name('a'))
