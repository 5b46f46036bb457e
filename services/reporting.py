from __future__ import annotations

import os
from typing import Dict

from pipelines.runner import RunContext


def _meta_lines(meta: Dict) -> list[str]:
    lines = []
    for key in sorted(meta):
        value = meta[key]
        if isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items())
        lines.append(f"  {key.replace('_', ' ').title()}: {value}")
    return lines


def print_summary(ctx: RunContext, job: str) -> None:
    """Print per-item result counts of a finished job."""
    counts = ctx.counts()
    print("\n" + "=" * 60)
    print(f"LINKEDIN OUTREACH - {job.upper()} SUMMARY")
    print("=" * 60)
    print(f"Run ID: {os.getenv('RUN_ID', 'N/A')}")
    print(f"Items Processed: {len(ctx.results)}")
    print(f"  Succeeded: {counts['success']}")
    print(f"  Skipped: {counts['skip']}")
    print(f"  Failed: {counts['failure']}")
    if ctx.meta:
        print()
        print("Details:")
        for line in _meta_lines(ctx.meta):
            print(line)
    print("=" * 60)
