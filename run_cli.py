"""
Launcher script for equi2cube
Ensures proper Python path setup when run from a source checkout
"""

import sys
from pathlib import Path

# Add project root to Python path so 'equi2cube' can be imported as a package
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from equi2cube.main import main

if __name__ == '__main__':
    sys.exit(main())
