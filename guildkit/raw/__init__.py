from .channels import *
from .guilds import *
from .interactions import *
from .messages import *
from .users import *
