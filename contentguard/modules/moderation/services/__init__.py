from contentguard.modules.moderation.services.content_analyzer import ContentAnalyzerService
from contentguard.modules.moderation.services.decision_service import DecisionService
from contentguard.modules.moderation.services.vision_analyzer import VisionAnalyzerService
from contentguard.modules.moderation.services.visualization_service import VisualizationService

__all__ = [
    "ContentAnalyzerService",
    "DecisionService",
    "VisionAnalyzerService",
    "VisualizationService",
]
