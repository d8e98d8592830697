"""Aggregate outcome reported after a batch of deliveries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchReport:
    total_recipients: int = 0
    success_count: int = 0
    failed_count: int = 0


__all__ = ["DispatchReport"]
