"""Shared test fixtures."""

from __future__ import annotations

import pytest

from itemspread.engine.config import DistributionConfig


# Overlapping shapes: three circles stacked near the middle, one rect off to the side
OVERLAP_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <circle id="a" cx="50" cy="50" r="10" fill="#FF6B6B"/>
  <circle id="b" cx="52" cy="50" r="10" fill="#4ECDC4"/>
  <circle id="c" cx="50" cy="53" r="10" fill="#FFEAA7"/>
  <rect x="80" y="80" width="10" height="10" fill="#45B7D1"/>
</svg>'''

# One of everything the collector understands, plus things it must skip
MIXED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">
  <defs>
    <circle id="def-dot" cx="5" cy="5" r="5"/>
  </defs>
  <clipPath id="clip"><rect x="0" y="0" width="10" height="10"/></clipPath>
  <rect id="r1" x="10" y="20" width="30" height="40"/>
  <circle id="c1" cx="100" cy="100" r="5"/>
  <ellipse id="e1" cx="50" cy="150" rx="20" ry="10"/>
  <line id="l1" x1="10" y1="190" x2="60" y2="170"/>
  <polygon id="p1" points="150,10 190,10 170,40"/>
  <path id="path1" d="M 120 120 L 160 120 L 160 140 Z"/>
  <rect id="moved" x="0" y="0" width="5" height="5" transform="rotate(45)"/>
  <circle id="hidden" cx="10" cy="10" r="2" display="none"/>
  <g transform="translate(10 10)">
    <rect id="in-group" x="0" y="0" width="5" height="5"/>
  </g>
  <g>
    <rect id="plain-group" x="180" y="180" width="10" height="10"/>
  </g>
</svg>'''


@pytest.fixture
def overlap_svg() -> str:
    return OVERLAP_SVG


@pytest.fixture
def mixed_svg() -> str:
    return MIXED_SVG


@pytest.fixture
def pair_config() -> DistributionConfig:
    """Config of the two-point worked example."""
    return DistributionConfig(
        spread=1.0,
        damping=1.0,
        radius=10.0,
        max_steps=1,
        max_iterations=1,
        scale_factor=1.0,
        keep_within_bounds=False,
    )


@pytest.fixture
def cluster_points() -> list[list[float]]:
    """Eight overlapping centers in a tight cluster."""
    return [
        [0.0, 0.0],
        [1.0, 0.5],
        [0.5, 1.0],
        [-0.5, 0.2],
        [0.2, -0.7],
        [1.2, -0.3],
        [-0.8, -0.9],
        [0.0, 0.0],
    ]
