"""Collaborators and settings shared by the recommendation nodes."""

from dataclasses import dataclass, field

from tripflow.recommendation.graph.config import RecommendationGraphConfig, DEFAULT_CONFIG
from tripflow.shared.collaborators import ChatModel


@dataclass
class RecommendationServices:
    chat: ChatModel
    config: RecommendationGraphConfig = field(default_factory=lambda: DEFAULT_CONFIG)
