from .models import *
from .REST import *
from .REST import ENDPOINT
