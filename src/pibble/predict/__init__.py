"""
predict
=======

Predictive Simulation Engine.

  from pibble.predict import predict, ppc_summary
"""

from .ppc import ppc_summary
from .predictive import predict

__all__ = ["predict", "ppc_summary"]
