# Schemas package (re-export feature modules for stable imports)
from .analysis.analysis import *
from .vocabulary.vocabulary import *
from .history.history import *
from .common.common import *
