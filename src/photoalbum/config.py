#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PHOTOALBUM Configuration
Application settings, defaults, and configuration file management.
"""

from __future__ import annotations

import os
import configparser
from pathlib import Path
from typing import Dict, Any, Optional

# ==============================================================================
# CONFIGURATION CONSTANTS
# ==============================================================================

# --- Path Settings ---
CONFIG_FILE_PATH = Path.home() / ".photoalbum.conf"
REPORT_FILENAME = "index.html"

# --- Derived Artifact Settings ---
THUMBNAIL_PREFIX = "thumb_"
MEDIUM_PREFIX = "med_"
THUMBNAIL_PERCENT = 10
MEDIUM_PERCENT = 25

# --- Interaction Settings ---
# 50-byte input buffer less its terminator
CAPTION_MAX_LENGTH = 49

# --- Workflow Settings ---
MAX_WORKERS = 3
POLL_INTERVAL = 1.0

# --- Transform Backend Settings ---
DEFAULT_TRANSFORM_BACKEND = "magick"
MAGICK_BINARY = "magick"
TRANSFORM_BACKENDS = ("magick", "pillow")


# ==============================================================================
# CONFIGURATION FILE MANAGEMENT
# ==============================================================================

def load_app_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from ~/.photoalbum.conf with fallback defaults.

    Args:
        config_path: Alternate config file (defaults to CONFIG_FILE_PATH)

    Returns:
        Dictionary containing all application settings
    """
    path = Path(config_path) if config_path else CONFIG_FILE_PATH
    parser = configparser.ConfigParser()
    config_loaded = False

    if path.exists():
        try:
            parser.read(path)
            config_loaded = True
        except configparser.Error:
            pass  # Will use fallbacks

    config: Dict[str, Any] = {}

    config['config_file_found'] = config_loaded
    config['config_file_path'] = str(path)

    config['output_dir'] = Path(parser.get(
        'album', 'output_dir',
        fallback='.'
    )).expanduser()

    config['report_name'] = parser.get(
        'album', 'report_name',
        fallback=REPORT_FILENAME
    )

    config['thumbnail_percent'] = parser.getint(
        'album', 'thumbnail_percent',
        fallback=THUMBNAIL_PERCENT
    )

    config['medium_percent'] = parser.getint(
        'album', 'medium_percent',
        fallback=MEDIUM_PERCENT
    )

    config['caption_max_length'] = parser.getint(
        'album', 'caption_max_length',
        fallback=CAPTION_MAX_LENGTH
    )

    config['max_workers'] = parser.getint(
        'behavior', 'max_workers',
        fallback=MAX_WORKERS
    )

    config['poll_interval'] = parser.getfloat(
        'behavior', 'poll_interval',
        fallback=POLL_INTERVAL
    )

    config['verbose'] = parser.getboolean(
        'behavior', 'verbose', fallback=False
    )

    config['trace_waits'] = parser.getboolean(
        'behavior', 'trace_waits', fallback=False
    )

    # --- Transform Backend Settings ---
    # Priority: Env Vars > Config File > Defaults
    config['transform_backend'] = os.environ.get(
        'PHOTOALBUM_BACKEND',
        parser.get('transform', 'backend', fallback=DEFAULT_TRANSFORM_BACKEND)
    ).lower()

    config['magick_binary'] = os.environ.get(
        'PHOTOALBUM_MAGICK',
        parser.get('transform', 'magick_binary', fallback=MAGICK_BINARY)
    )

    return config
