"""
Taste-graph gateway package.

Single HTTP boundary to the taste-graph service: parameter building,
request dispatch and per-endpoint response normalization.
"""

from services.cultural.gateway.client import TasteGraphGateway
from services.cultural.gateway.errors import AuthWarning, HttpError, NetworkError, ShapeError, TasteGraphError
