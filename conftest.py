# SPDX-License-Identifier: MIT
"""Pytest environment setup.

* Make the repository root importable so tests resolve the in-tree package
  without installing it.
* Pin BLAS/OpenMP thread pools to one worker so floating point results are
  reproducible across machines.
"""

from __future__ import annotations

import os
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tests.tolerances import THREAD_BOUND_ENV_VARS  # noqa: E402

for _env_key, _env_value in THREAD_BOUND_ENV_VARS.items():
    os.environ.setdefault(_env_key, _env_value)
