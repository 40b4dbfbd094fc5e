"""Formatting and logging of findings."""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional

from .models import Finding, FindingKind

logger = logging.getLogger(__name__)

MISSING_REF_TEMPLATE = (
    "Missing Ref in: [{context}]{full_path}. Component: {part_type}, "
    "Property: {property_name}, RelativePath: {relative_path}"
)
MISSING_PART_TEMPLATE = "Missing Component / Script in: [{context}]{full_path}"


def format_finding(finding: Finding) -> str:
    """Render ``finding`` as a single log line."""
    if finding.kind is FindingKind.MISSING_PART:
        return MISSING_PART_TEMPLATE.format(context=finding.context, full_path=finding.full_path)
    return MISSING_REF_TEMPLATE.format(
        context=finding.context,
        full_path=finding.full_path,
        part_type=finding.part_type,
        property_name=finding.property_name,
        relative_path=finding.relative_path or "",
    )


class Reporter:
    """Emit each finding as an error record tagged with its node."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def report(self, finding: Finding) -> None:
        self.log.error(format_finding(finding), extra={"node": finding.node, "finding": finding})


class FindingCollector:
    """Forward findings to a reporter while keeping them for a summary."""

    def __init__(self, reporter: Optional[Reporter] = None) -> None:
        self.reporter = reporter or Reporter()
        self.findings: List[Finding] = []

    def report(self, finding: Finding) -> None:
        self.findings.append(finding)
        self.reporter.report(finding)

    def counts(self) -> Counter:
        return Counter(f.kind for f in self.findings)

    def summary(self, context: str) -> str:
        counts = self.counts()
        return (
            f"{context}: {counts[FindingKind.MISSING_REFERENCE]} missing reference(s), "
            f"{counts[FindingKind.MISSING_PART]} missing part(s)"
        )
