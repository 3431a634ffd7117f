# dprforge/__init__.py
__all__ = [
    "__version__",
    "BuildConfiguration",
    "DPRSummary",
    "evaluate",
]

__version__ = "0.1.0"

from .models import BuildConfiguration, DPRSummary  # noqa: E402
from .rules.evaluator import evaluate  # noqa: E402
