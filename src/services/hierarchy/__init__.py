"""Recipient hierarchy traversal and parent-assignment rules."""

from src.services.hierarchy.rules import (
    HIERARCHY_RULES,
    DepthViolation,
    HierarchyHealthReport,
    HierarchyRule,
    HierarchyValidator,
)
from src.services.hierarchy.traversal import HierarchyNode, HierarchyTraversal

__all__ = [
    "HierarchyTraversal",
    "HierarchyNode",
    "HIERARCHY_RULES",
    "HierarchyRule",
    "HierarchyValidator",
    "HierarchyHealthReport",
    "DepthViolation",
]
