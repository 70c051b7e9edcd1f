"""
Configuration for Coordinate Tolerances and Reference Defaults

This module holds the tunable constants of the exchange core. Tolerances are
controlled via environment variables so a deployment can loosen or tighten
point matching without code changes.

Usage:
    from structural_exchange.config.settings import get_setting

    tolerance = get_setting('coarse_tolerance')   # 0.25 by default
    precision = get_setting('coarse_precision')   # 2 decimals

Environment Variables:
    STRUCTURAL_FINE_TOLERANCE=1e-6     - Rounding step for line/area endpoints
    STRUCTURAL_FINE_PRECISION=6        - Decimals used in fine point keys
    STRUCTURAL_COARSE_TOLERANCE=0.25   - Rounding step for column plan positions
    STRUCTURAL_COARSE_PRECISION=2      - Decimals used in coarse point keys
    STRUCTURAL_DETERMINISTIC_IDS=true  - Sequential entity ids instead of uuid-based

Rollback Strategy:
    Restore the default matching behavior via environment:
    $ unset STRUCTURAL_FINE_TOLERANCE STRUCTURAL_COARSE_TOLERANCE
"""

import os
from typing import Any, Dict


SETTINGS: Dict[str, Any] = {
    # Fine tier: shared vertices of adjoining floors/walls, beam endpoints
    'fine_tolerance': float(os.getenv('STRUCTURAL_FINE_TOLERANCE', '1e-6')),
    'fine_precision': int(os.getenv('STRUCTURAL_FINE_PRECISION', '6')),

    # Coarse tier: plan position of vertical members only
    'coarse_tolerance': float(os.getenv('STRUCTURAL_COARSE_TOLERANCE', '0.25')),
    'coarse_precision': int(os.getenv('STRUCTURAL_COARSE_PRECISION', '2')),

    # Entity id generation
    'deterministic_ids': os.getenv('STRUCTURAL_DETERMINISTIC_IDS', 'true').lower() == 'true',
}


# Literal names substituted by the reference resolver when a lookup misses.
DEFAULT_NAMES: Dict[str, str] = {
    'frame_section': 'Unknown',
    'wall_property': 'Default',
    'floor_property': 'Default',
    'diaphragm': 'D1',
    'story': 'Story1',
    'material': 'Default',
    'load_pattern': 'Dead',
    'load_set': 'Default',
    'floor_type': 'typical',
    'project_name': 'Imported Model',
}


def get_setting(name: str) -> Any:
    """
    Get a configuration value.

    Args:
        name: Setting name (e.g., 'coarse_tolerance')

    Returns:
        Current value of the setting

    Raises:
        KeyError: If setting name is not recognized

    Example:
        >>> get_setting('fine_precision')
        6
    """
    if name not in SETTINGS:
        available = ', '.join(SETTINGS.keys())
        raise KeyError(
            f"Unknown setting: '{name}'. "
            f"Available settings: {available}"
        )

    return SETTINGS[name]


def get_all_settings() -> Dict[str, Any]:
    """
    Get all settings and their current values.

    Returns:
        Dictionary of setting names to values
    """
    return SETTINGS.copy()


def set_setting(name: str, value: Any) -> None:
    """
    Programmatically override a setting (for testing only).

    Args:
        name: Setting name
        value: New value

    Warning:
        This is for testing only. In production, use environment variables.
        Registries read tolerances when they are constructed, so an override
        only affects operations started afterwards.
    """
    if name not in SETTINGS:
        available = ', '.join(SETTINGS.keys())
        raise KeyError(
            f"Unknown setting: '{name}'. "
            f"Available settings: {available}"
        )

    SETTINGS[name] = value


def default_name(field: str) -> str:
    """Return the literal default name used when a ``field`` reference is unresolved."""
    if field not in DEFAULT_NAMES:
        available = ', '.join(DEFAULT_NAMES.keys())
        raise KeyError(
            f"No default name for '{field}'. "
            f"Available fields: {available}"
        )
    return DEFAULT_NAMES[field]
