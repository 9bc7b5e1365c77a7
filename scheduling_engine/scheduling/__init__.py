from scheduling_engine.scheduling.history import HistoryAnalyzer
from scheduling_engine.scheduling.matching import (
    CapabilityMatcher,
    ResourceMatcher,
    find_available_rooms,
    has_schedule_conflict,
    intervals_overlap,
)
from scheduling_engine.scheduling.pricing import PricingCalculator
from scheduling_engine.scheduling.timeline import generate_timeline
from scheduling_engine.scheduling.validation import ValidationPipeline, build_pipeline

__all__ = [
    "CapabilityMatcher",
    "ResourceMatcher",
    "PricingCalculator",
    "HistoryAnalyzer",
    "ValidationPipeline",
    "build_pipeline",
    "generate_timeline",
    "find_available_rooms",
    "has_schedule_conflict",
    "intervals_overlap",
]
