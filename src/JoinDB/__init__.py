__version__ = '1.0.0'

from .engine import MergeConfig, Summary, run
from .DataManager import load_config, dump_report
