"""
Registry of the headers and of the rules binding them together.

A rule tells that a header (the inner) follows another one (the outer) when
some fields of the outer header have given values, or when the data following
the outer header satisfies a predicate

    registry.bind(Eth, IP, ethertype=0x0800)
    registry.bind(TCP, HTTPRequest, body=lambda data: data.startswith(b'GET '))

The rules for the same outer header are evaluated in the order they were
registered: the first one that matches wins.
"""
import logging
from typing import Callable, Dict, List, Optional, Type

from .core import Header
from .exceptions import BindingError


logger = logging.getLogger(__name__)


class BindingRule(object):
    """A field value can be a concrete value or a predicate over the value
    of the field. Only the concrete values can be used to populate the outer
    header when building; the "setter" callable, receiving the outer header,
    can be indicated to populate it otherwise."""

    def __init__(self, outer: Type[Header], inner: Type[Header], fields: Optional[Dict] = None,
                 body: Optional[Callable[[bytes], bool]] = None, setter: Optional[Callable] = None):
        if not fields and body is None:
            raise BindingError(reason=f'binding {outer.__name__} -> {inner.__name__} without any discriminator')

        self.outer = outer
        self.inner = inner
        self.fields = fields or {}
        self.body = body
        self.setter = setter

    def __repr__(self):
        return '<%s(%s -> %s, %r%s)>' % (
            self.__class__.__name__,
            self.outer.get_protocol_name(),
            self.inner.get_protocol_name(),
            self.fields,
            ', body' if self.body else '',
        )

    def _match_field(self, header: Header, field_name: str, expected) -> bool:
        value = getattr(header, field_name)
        if not isinstance(value, (bool, int)):
            value = value.value

        if callable(expected):
            return bool(expected(value))

        return value == expected

    def match(self, header: Header) -> bool:
        for field_name, expected in self.fields.items():
            if not self._match_field(header, field_name, expected):
                return False

        if self.body is not None:
            return bool(self.body(header.body.to_bytes()))

        return True

    def apply(self, header: Header):
        """Set the discriminator on the outer header, skipping the fields
        explicitly indicated by the user."""
        explicit = header.given_options
        for field_name, value in self.fields.items():
            if callable(value) or field_name in explicit:
                continue

            logger.debug('setting %s.%s to %r' % (header.__class__.__name__, field_name, value))
            setattr(header, field_name, value)

        if self.setter is not None:
            self.setter(header)


class BindingRegistry(object):
    """
    It contains all the headers known and the rules binding them.

    It must be populated before being used: the first dissection or
    construction freezes it and from that moment it's read-only.
    """

    def __init__(self):
        self._headers: Dict[str, Type[Header]] = {}
        self._rules: Dict[Type[Header], List[BindingRule]] = {}
        self._frozen = False

    def __contains__(self, protocol):
        try:
            self.resolve(protocol)
        except BindingError:
            return False

        return True

    def _check_not_frozen(self):
        if self._frozen:
            raise BindingError(reason='the registry is read-only')

    @property
    def frozen(self):
        return self._frozen

    def freeze(self):
        if not self._frozen:
            logger.debug('freezing registry with %d headers' % len(self._headers))
        self._frozen = True

        return self

    @property
    def headers(self) -> List[Type[Header]]:
        return list(self._headers.values())

    def add_header(self, header_cls: Type[Header]) -> Type[Header]:
        self._check_not_frozen()

        name = header_cls.get_protocol_name()
        if name in self._headers:
            raise BindingError(reason=f"header '{name}' already registered")

        self._headers[name] = header_cls

        return header_cls

    def resolve(self, protocol) -> Type[Header]:
        '''Returns the header class from its name (or the class itself if registered).'''
        if isinstance(protocol, type):
            if protocol not in self._headers.values():
                raise BindingError(reason=f"header '{protocol.__name__}' is not registered")
            return protocol

        try:
            return self._headers[protocol]
        except KeyError:
            raise BindingError(reason=f"unknown header '{protocol}'") from None

    def bind(self, outer: Type[Header], inner: Type[Header], body=None, setter=None, **fields) -> BindingRule:
        self._check_not_frozen()

        rule = BindingRule(outer, inner, fields=fields, body=body, setter=setter)
        self._rules.setdefault(outer, []).append(rule)

        return rule

    def lookup(self, header: Header) -> Optional[Type[Header]]:
        '''Find the header following the one passed as argument.'''
        for rule in self._rules.get(header.__class__, []):
            if rule.match(header):
                logger.debug('%r matches' % rule)
                return rule.inner

        return None

    def rule_between(self, outer: Type[Header], inner: Type[Header]) -> Optional[BindingRule]:
        for rule in self._rules.get(outer, []):
            if rule.inner is inner:
                return rule

        return None

    def reconcile(self, outer: Header, inner: Header) -> bool:
        """Let the outer header know which header follows it.

        Returns False if there is no rule for the couple, in this case the
        outer header is left untouched."""
        rule = self.rule_between(outer.__class__, inner.__class__)
        if rule is None:
            logger.debug('no binding between %s and %s' % (
                outer.get_protocol_name(), inner.get_protocol_name()))
            return False

        rule.apply(outer)

        return True
