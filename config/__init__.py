"""
SurfLab - Configuration Module
==============================

Zentrale Konfiguration für alle globalen Einstellungen.
"""

from .tolerances import Tolerances
from .defaults import Defaults
from .feature_flags import is_enabled, set_flag, get_all_flags, FEATURE_FLAGS
