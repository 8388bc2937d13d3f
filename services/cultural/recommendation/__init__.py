"""
Cultural recommendation orchestration.

Resolver -> Aggregator / Connector -> Scorer -> orchestrator output.
All orchestrators take an explicitly constructed TasteGraphGateway.
"""

from services.cultural.recommendation.components import ComponentGenerator, ComponentRecommendations
from services.cultural.recommendation.connector import CrossDomainConnector, DiscoveryResult, FallbackTier
from services.cultural.recommendation.goal_enhancer import GoalEnhancement, GoalEnhancer
from services.cultural.recommendation.outcome import BranchResult, BranchStatus
