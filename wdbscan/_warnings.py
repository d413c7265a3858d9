"""Warning configuration for the wdbscan package.

This module configures warning filters that must be applied before the numba
kernels are compiled.
"""

import warnings

from numba.core.errors import NumbaPerformanceWarning

# Suppress numba's parallel performance warning (harmless - only raised when a
# parallel=True kernel cannot be parallelised further, e.g. for tiny inputs).
# It doesn't affect results, the kernel then runs serially.
warnings.filterwarnings(
    "ignore",
    category=NumbaPerformanceWarning,
)
