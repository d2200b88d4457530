"""Release services: changelog extraction, tag classification, publishing and the gated pipeline."""

from __future__ import annotations
