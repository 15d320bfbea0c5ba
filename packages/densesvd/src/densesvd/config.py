"""
SVD Configuration
=================
Numerical constants and diagnostic defaults in one place.

Usage:
    from densesvd.config import CONFIG, SVDConfig
    nmax = CONFIG['decompose']['max_iterations']
    cfg = SVDConfig(verbose=1)
    cfg = SVDConfig.from_yaml('svd.yaml')
"""

import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional, TextIO

CONFIG = {

    # =================================================================
    # Diagonalization (implicit-shift QR)
    # =================================================================
    'decompose': {
        'max_iterations': 40,       # QR sweeps allowed per singular value
    },

    # =================================================================
    # Ordering / rank truncation
    # =================================================================
    'sort': {
        'eps': 4.0e-15,             # w[i] / w[0] below this → exactly 0
    },

    # =================================================================
    # Matrix printing
    # =================================================================
    'display': {
        'eps': 4.0e-15,             # |x| below this printed as 0
        'width': 10,
        'precision': 5,
        'offset': '  ',
    },

    # =================================================================
    # Diagnostics
    # =================================================================
    'diagnostics': {
        'verbose': 0,               # 0 silent, 1 phase markers, 2 progress dots
    },
}


def get(path: str, default=None):
    """
    Get a config value by dot-separated path.

    Usage:
        get('decompose.max_iterations')  → 40
        get('sort.eps')                  → 4e-15
    """
    keys = path.split('.')
    val = CONFIG
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


@dataclass(frozen=True)
class SVDConfig:
    """Per-call settings. Passed explicitly; nothing is read from globals."""
    verbose: int = field(default_factory=lambda: get('diagnostics.verbose'))
    max_iterations: int = field(default_factory=lambda: get('decompose.max_iterations'))
    eps: float = field(default_factory=lambda: get('sort.eps'))
    stream: Optional[TextIO] = None  # None → sys.stderr at write time

    def __post_init__(self):
        if self.verbose < 0:
            raise ValueError(f"verbose = {self.verbose}; expected verbose >= 0")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations = {self.max_iterations}; expected >= 0")
        if not self.eps >= 0.0:
            raise ValueError(f"eps = {self.eps}; expected eps >= 0")

    @property
    def diagnostic_stream(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr

    def with_overrides(self, **overrides: Any) -> 'SVDConfig':
        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, values: dict) -> 'SVDConfig':
        allowed = {f.name for f in fields(cls)} - {'stream'}
        unknown = set(values) - allowed
        if unknown:
            raise ValueError(f"unknown SVD config keys: {sorted(unknown)}")
        # YAML reads '4e-15' (no dot) as a string
        casts = {'verbose': int, 'max_iterations': int, 'eps': float}
        cast = {}
        for key, val in values.items():
            try:
                cast[key] = casts[key](val)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"SVD config key '{key}': cannot use {val!r} ({exc})") from exc
        return cls(**cast)

    @classmethod
    def from_yaml(cls, path: Path) -> 'SVDConfig':
        """Load overrides from a YAML mapping (verbose, max_iterations, eps)."""
        import yaml

        with open(path) as f:
            try:
                values = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"{path}: malformed YAML ({exc})") from exc
        if not isinstance(values, dict):
            raise ValueError(f"{path}: expected a mapping at top level")
        return cls.from_dict(values)


def resolve(config: Optional[SVDConfig]) -> SVDConfig:
    return config if config is not None else SVDConfig()
