"""Runtime settings and per-plot presentation configuration.

Only the settings object is imported here; presentation models live in
:mod:`forestprep.config.presentation`.
"""

from .settings import Settings, settings  # noqa: F401
