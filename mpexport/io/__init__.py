"""
Model adapters - bring models built elsewhere into mpexport.

- model_from_highs: Convert the model held by a highspy.Highs instance
"""

from mpexport.io.highs import HIGHS_AVAILABLE, model_from_highs

__all__ = [
    'HIGHS_AVAILABLE',
    'model_from_highs',
]
