"""
Gift Rush Package
=================

Falling gift boxes must be loaded in the needed order. This package holds
the game simulation and its data files:

- game_config.yaml: viewport, spawn / fall difficulty, lives, effects
- gift_templates.json: display name and color per gift category

Front-ends (see tools/play_human.py) feed per-frame input signals to
``GameManager.update`` and draw from ``SnapshotBuilder`` snapshots.
"""
