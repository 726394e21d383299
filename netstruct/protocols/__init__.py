'''
The protocols shipped with netstruct.

Each module exposes a register(registry) function adding its headers and the
rules binding them to the headers of the modules it depends on, so the order
of registration matters: the outer protocols come first.
'''
from ..binding import BindingRegistry
from . import eth, ip, ipv6, icmp, icmpv6, tcp, udp, mldv2, ospfv2, http


MODULES = (eth, ip, ipv6, icmp, icmpv6, tcp, udp, mldv2, ospfv2, http)


def register_all(registry: BindingRegistry) -> BindingRegistry:
    for module in MODULES:
        module.register(registry)

    return registry


def default_registry() -> BindingRegistry:
    '''A read-only registry with all the protocols above.'''
    return register_all(BindingRegistry()).freeze()
