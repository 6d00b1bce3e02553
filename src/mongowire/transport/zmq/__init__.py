from . import framing
from . import node
