"""
GridCache — run.py
Main entry point for the GridCache terminal front-end.
"""

import logging
import sys
from pathlib import Path

# Ensure we can import gridcache packages
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

from ui.renderer import Renderer
from ui.states import Engine
from ui.screens import MainMenuState

def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    renderer = Renderer(width=80, height=50, title="GridCache")
    engine = Engine(renderer=renderer, initial_state_cls=MainMenuState)
    engine.run()

if __name__ == "__main__":
    main()
