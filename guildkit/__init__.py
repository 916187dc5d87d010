"""
Discord API Wrapper
~~~~~~~~~~~~~~~~~~~

An asyncio wrapper for the Discord REST API.

:copyright: (c) 2024-present MCausc78
:license: MIT, see LICENSE for more details.

"""

from . import (
    routes as routes,
    utils as utils,
)

from .base import *
from .cache import *
from .channel import *
from .client import *
from .core import *
from .enums import *
from .errors import *
from .flags import *
from .guild import *
from .http import *
from .interaction import *
from .managers import *
from .message import *
from .parser import *
from .payloads import *
from .permissions import *
from .state import *
from .user import *
from .utils import *

import typing

if typing.TYPE_CHECKING:
    from . import raw as raw

del typing
