# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .gitdriver import GitDriver
from .gitdriver import GitDriverError
from .gitdriver import DEFAULT_MAX_OUTPUT_BYTES
