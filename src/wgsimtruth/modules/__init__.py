"""wgsimtruth batch modules."""

from wgsimtruth.modules.base import ModuleBase, ModuleResult
from wgsimtruth.modules.mapping_evaluator import EvaluationSummary, MappingEvaluator

__all__ = ["ModuleBase", "ModuleResult", "EvaluationSummary", "MappingEvaluator"]
