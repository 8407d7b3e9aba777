# matexpr/config.py
"""
Centralized configuration for the matexpr library.
This module provides a single source of truth for all configurable parameters.
"""

import numpy as np

# Element type used when wrapping array-likes that carry no dtype of their own
DEFAULT_DTYPE = np.float64

# Rewrite every multiplication chain before evaluating a tree
OPTIMIZE_ON_EVALUATE = True

# Logging defaults used by observability.configure_logging()
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DETAILED_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
