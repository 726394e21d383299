import logging
import os

import pytest

from netstruct.binding import BindingRegistry
from netstruct.protocols import register_all


if 'DEBUG' in os.environ:
    logging.basicConfig(level=logging.DEBUG)


@pytest.fixture
def registry():
    '''A registry with all the protocols, not frozen yet.'''
    return register_all(BindingRegistry())
