from .benchmark import Benchmark
from .qprocessconnection import QProcessConnection
from .qtutils import *
