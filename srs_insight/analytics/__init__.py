"""
Analytics: descriptive metrics over the learner's history.

- leeches: leech detection, severity, confusion pairs, root-cause radicals
- accuracy: overall / per-type / per-level accuracy
- stability: solid vs fragile passed knowledge
- milestones: burn, guru and level milestones
- burn_velocity: burn rates, trends and completion projection
- level_progress: per-level started/guru progress
- kanji_grid: per-level SRS band distribution
- jlpt_readiness: Joyo grade readiness and approximate JLPT level
"""

from srs_insight.analytics.accuracy import (
    AccuracyMetrics,
    calculate_accuracy_metrics,
    get_low_accuracy_items,
)
from srs_insight.analytics.burn_velocity import BurnVelocity, calculate_burn_velocity
from srs_insight.analytics.jlpt_readiness import (
    JoyoGrade,
    JoyoReadiness,
    SrsThreshold,
    calculate_joyo_readiness,
    get_cumulative_counts,
)
from srs_insight.analytics.kanji_grid import LevelDistribution, SrsBand, calculate_level_distribution
from srs_insight.analytics.leeches import (
    LeechItem,
    LeechThresholds,
    calculate_severity,
    detect_leeches,
    find_confusion_pairs,
    find_root_cause_radicals,
)
from srs_insight.analytics.level_progress import LevelProgress, calculate_level_progress
from srs_insight.analytics.milestones import Milestone, MilestoneTimeline, calculate_milestones
from srs_insight.analytics.stability import KnowledgeStability, calculate_knowledge_stability

__all__ = [
    "AccuracyMetrics",
    "BurnVelocity",
    "JoyoGrade",
    "JoyoReadiness",
    "KnowledgeStability",
    "LeechItem",
    "LeechThresholds",
    "LevelDistribution",
    "LevelProgress",
    "Milestone",
    "MilestoneTimeline",
    "SrsBand",
    "SrsThreshold",
    "calculate_accuracy_metrics",
    "calculate_burn_velocity",
    "calculate_joyo_readiness",
    "calculate_knowledge_stability",
    "calculate_level_distribution",
    "calculate_level_progress",
    "calculate_milestones",
    "calculate_severity",
    "detect_leeches",
    "find_confusion_pairs",
    "find_root_cause_radicals",
    "get_cumulative_counts",
    "get_low_accuracy_items",
]
