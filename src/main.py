"""
Main application for the room element replicator.

Replays (or receives) room scan updates, reconciles each update against the
tracked element collection and keeps an in-process tracking session and its
scene proxies in step.

Usage:
    python src/main.py --config config/config.yaml --source data/sample_scan.yaml

Arguments:
    --config: Path to configuration file
    --source: Scan recording to replay (overrides capture.path)
    --max-batches: Stop after N scan updates

Only the replay backend runs from the command line. The queue backend is for
embedding the engine next to a live scanner thread.
"""

import os
import sys
import argparse
import json
import logging
from typing import Dict, Any, Tuple, Optional

import yaml

from ops.logging import setup_logging
from pipeline.engine import create_engine_from_config
from scene.proxy import ProxyScene


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _merge_layers(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base in place; nested mappings merge key by key."""
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge_layers(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load the replicator configuration.

    Layers, later ones winning:
    1. default.yaml next to config_path (checked-in defaults)
    2. config.yaml next to config_path (local overrides)
    3. config_path itself, when it is a different file
    Missing layers are skipped. Exits the process if a layer cannot be parsed.
    """
    config_dir = os.path.dirname(config_path)
    layers = [
        os.path.join(config_dir, "default.yaml"),
        os.path.join(config_dir, "config.yaml"),
    ]
    if os.path.abspath(config_path) not in {os.path.abspath(p) for p in layers}:
        layers.append(config_path)

    config: Dict[str, Any] = {}
    try:
        for layer in layers:
            if os.path.exists(layer):
                _merge_layers(config, _read_yaml(layer))
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Could not read configuration {config_path}: {e}")
        sys.exit(1)
    return config


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['capture', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Validate capture settings
    capture = config.get('capture') or {}
    if not isinstance(capture, dict):
        return False, "capture must be a mapping"
    backend = capture.get('backend', 'replay')
    if backend not in ('replay', 'queue'):
        return False, "capture.backend must be one of: replay, queue"
    if backend == 'replay':
        path = capture.get('path')
        if not isinstance(path, str) or not path:
            return False, "capture.path is required when capture.backend is 'replay'"
    if 'loop' in capture and not isinstance(capture['loop'], bool):
        return False, "capture.loop must be a boolean"
    if 'poll_timeout' in capture:
        timeout = capture['poll_timeout']
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            return False, "capture.poll_timeout must be a positive number"

    # Optional session settings
    session = config.get('session', {}) or {}
    if 'log_events' in session and not isinstance(session['log_events'], bool):
        return False, "session.log_events must be a boolean"

    # Optional engine settings
    engine = config.get('engine', {}) or {}
    if engine:
        if 'max_consecutive_failures' in engine:
            mcf = engine['max_consecutive_failures']
            if not isinstance(mcf, int) or mcf <= 0:
                return False, "engine.max_consecutive_failures must be a positive integer"
        if 'retry_delay' in engine:
            delay = engine['retry_delay']
            if not isinstance(delay, (int, float)) or delay < 0:
                return False, "engine.retry_delay must be a non-negative number"
        if 'stats_log_interval' in engine:
            interval = engine['stats_log_interval']
            if not isinstance(interval, (int, float)) or interval <= 0:
                return False, "engine.stats_log_interval must be a positive number"
        if engine.get('max_batches') is not None:
            mb = engine['max_batches']
            if not isinstance(mb, int) or mb <= 0:
                return False, "engine.max_batches must be a positive integer"

    # Validate log settings
    if not isinstance(config['log_path'], str):
        return False, "log_path must be a string"
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def main(argv=None) -> int:
    """Main application function."""
    parser = argparse.ArgumentParser(description='Room Element Replicator')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--source', type=str, default=None,
                        help='Scan recording to replay (overrides capture.path)')
    parser.add_argument('--max-batches', type=int, default=None,
                        help='Stop after this many scan updates')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.source:
        config.setdefault('capture', {})
        config['capture']['backend'] = 'replay'
        config['capture']['path'] = args.source
    if args.max_batches is not None:
        config.setdefault('engine', {})
        config['engine']['max_batches'] = args.max_batches

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1
    if config["capture"].get("backend", "replay") != "replay":
        # Queue sources are fed by an embedding process
        logging.error("The command line only supports capture.backend: replay")
        return 1

    setup_logging(config['log_path'], config['log_level'])
    logging.info("Starting Room Element Replicator")

    scene = ProxyScene()
    engine = create_engine_from_config(config, scene=scene)
    try:
        engine.run()
    except RuntimeError as e:
        logging.error(f"Replication failed: {e}")
        return 1

    summary = {"stats": engine.stats.to_dict(), **scene.to_dict()}
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
