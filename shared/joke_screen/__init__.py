from .controller import *
from .state import *
from .themes import *
