"""Make ``tracker_app`` importable when the project is not installed.

Running ``pytest`` from a checkout without ``pip install -e .`` would otherwise
fail to resolve the namespace package, so the repository root goes on sys.path.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
