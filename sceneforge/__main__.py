"""
Entry point for running SceneForge as a module.

Usage:
    python -m sceneforge demo
    python -m sceneforge --help
"""

from sceneforge.app.cli import main

if __name__ == "__main__":
    main()
