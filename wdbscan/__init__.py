# ================================================
#               Expose entry points
# ================================================

# Import warnings configuration first (must be before the numba kernels are compiled)
import wdbscan._warnings  # noqa: F401
from wdbscan._version import __version__
from wdbscan.core import DBSCAN, compute
from wdbscan.errors import (
    ConfigurationError,
    DBSCANError,
    ResultNotRequestedError,
)
from wdbscan.proximity import (
    BaseProximity,
    KDTreeProximity,
    OnDemandProximity,
    PrecomputedProximity,
)
from wdbscan.result import NOT_COMPUTED, ComputeResult, ResultOptions
from wdbscan.utils import set_log_level

__all__ = [
    "DBSCAN",
    "compute",
    "ComputeResult",
    "ResultOptions",
    "NOT_COMPUTED",
    "BaseProximity",
    "PrecomputedProximity",
    "OnDemandProximity",
    "KDTreeProximity",
    "DBSCANError",
    "ConfigurationError",
    "ResultNotRequestedError",
    "set_log_level",
    "__version__",
]

# ================================================
