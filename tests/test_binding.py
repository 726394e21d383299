import pytest

from netstruct.binding import BindingRegistry, BindingRule
from netstruct.core import Header
from netstruct.exceptions import BindingError
from netstruct.fields import IntField


class Outer(Header):
    kind = IntField('B')


class InnerA(Header):
    a = IntField('B')


class InnerB(Header):
    protocol_name = 'Inner.B'

    b = IntField('B')


@pytest.fixture
def registry():
    registry = BindingRegistry()
    for header in (Outer, InnerA, InnerB):
        registry.add_header(header)

    return registry


def test_resolve(registry):
    assert registry.resolve('Outer') is Outer
    assert registry.resolve('Inner.B') is InnerB
    assert registry.resolve(InnerA) is InnerA
    assert 'InnerA' in registry
    assert 'InnerB' not in registry

    with pytest.raises(BindingError):
        registry.resolve('Kebab')


def test_duplicate_header(registry):
    with pytest.raises(BindingError):
        registry.add_header(Outer)


def test_rule_without_discriminator():
    with pytest.raises(BindingError):
        BindingRule(Outer, InnerA)


def test_first_rule_wins(registry):
    registry.bind(Outer, InnerA, kind=1)
    registry.bind(Outer, InnerB, kind=1)

    assert registry.lookup(Outer(kind=1)) is InnerA
    assert registry.lookup(Outer(kind=2)) is None


def test_predicate_on_field(registry):
    registry.bind(Outer, InnerA, kind=lambda value: value > 10)

    assert registry.lookup(Outer(kind=11)) is InnerA
    assert registry.lookup(Outer(kind=10)) is None


def test_predicate_on_body(registry):
    registry.bind(Outer, InnerA, kind=1)
    registry.bind(Outer, InnerB, body=lambda data: data.startswith(b'B'))

    assert registry.lookup(Outer(kind=0, body=b'Bkebab')) is InnerB
    assert registry.lookup(Outer(kind=0, body=b'kebab')) is None
    # the order of registration matters
    assert registry.lookup(Outer(kind=1, body=b'Bkebab')) is InnerA


def test_frozen(registry):
    registry.freeze()

    assert registry.frozen

    with pytest.raises(BindingError):
        registry.add_header(Header)

    with pytest.raises(BindingError):
        registry.bind(Outer, InnerA, kind=1)


def test_reconcile(registry):
    registry.bind(Outer, InnerA, kind=1)

    outer = Outer()

    assert registry.reconcile(outer, InnerA())
    assert outer.kind.value == 1

    # the values indicated explicitly are not touched
    outer = Outer(kind=7)

    assert registry.reconcile(outer, InnerA())
    assert outer.kind.value == 7


def test_reconcile_without_rule(registry):
    outer = Outer(kind=3)

    assert not registry.reconcile(outer, InnerB())
    assert outer.kind.value == 3


def test_reconcile_setter(registry):
    def setter(header):
        header.kind = 0x42

    registry.bind(Outer, InnerB, kind=lambda value: value > 0x40, setter=setter)

    outer = Outer()
    registry.reconcile(outer, InnerB())

    assert outer.kind.value == 0x42
