#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utility modules for the bundle helper: project configuration and manifests.
"""

from __future__ import annotations

from .config import BundleConfig, ProjectSettings, load_manifest_dependencies

__all__ = [
    "BundleConfig",
    "ProjectSettings",
    "load_manifest_dependencies",
]
