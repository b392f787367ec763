"""Analysis package - schedule-conformance float and criticality.

This package computes, for a schedule whose actual dates are fixed:
- Earliest-required start and latest-required finish per task
- Total float, constraint violations and (near-)criticality per task
- Driving and critical flags per relationship
- Criticality scoped to the ancestors or descendants of a selected task

Main entry points:
- AnalysisService: Full-project analysis and task traces for one snapshot
- analyze_schedule: Convenience wrapper over flat task/relationship lists
- AnalysisWorker: Background runs with latest-result publishing

Configuration:
- AnalysisConfig: Float tolerance, near-critical threshold, trace mode
"""

# Classification
from .classifier import INFINITE_FLOAT, FloatClassifier

# Configuration
from .config import AnalysisConfig, TraceMode

# Core dataclasses
from .core import (
    AnalysisResult,
    CycleReport,
    PropagationResult,
    RelationshipResult,
    TaskResult,
)

# Graph utilities
from .cycles import detect_cycles
from .indexer import ScheduleGraph, build_graph
from .priority_queue import PriorityQueue
from .propagation import RequiredTimePropagator, propagate, topological_order
from .scoping import ancestor_closure, descendant_closure, trace_closure

# High-level service
from .service import AnalysisService, analyze_schedule, run_analysis

# Background execution
from .worker import AnalysisWorker, ResultSlot

__all__ = [
    # Core dataclasses
    "AnalysisResult",
    "CycleReport",
    "PropagationResult",
    "RelationshipResult",
    "TaskResult",
    # Configuration
    "AnalysisConfig",
    "TraceMode",
    # Graph utilities
    "ScheduleGraph",
    "build_graph",
    "detect_cycles",
    "PriorityQueue",
    "topological_order",
    # Propagation and classification
    "RequiredTimePropagator",
    "propagate",
    "FloatClassifier",
    "INFINITE_FLOAT",
    # Scoping
    "ancestor_closure",
    "descendant_closure",
    "trace_closure",
    # High-level service
    "AnalysisService",
    "analyze_schedule",
    "run_analysis",
    # Background execution
    "AnalysisWorker",
    "ResultSlot",
]
