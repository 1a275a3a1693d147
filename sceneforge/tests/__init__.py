"""
SceneForge Test Suite

Quick checks of the package surface; behaviour-level tests live in the
top-level tests/ directory.

Test Modules:
- test_imports.py: Import verification for all modules
- test_core.py: Records, type paths and the in-memory world
- test_utils.py: Logging helpers
- test_app.py: Config and the sample world

Run all tests:
    pytest sceneforge/tests/ -v

Run specific module:
    pytest sceneforge/tests/test_core.py -v
"""

__all__ = [
    # Import tests
    "test_imports",

    # Core tests
    "test_record_type_paths",
    "test_world_hierarchy",

    # Utility tests
    "test_logging_helpers",
    "test_log_levels",

    # App tests
    "test_sceneforge_config",
    "test_sample_world",
]
