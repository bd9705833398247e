# fedora-postinstall/install.py

import sys
from pathlib import Path

# Run straight from a checkout without installing the package first.
sys.path.insert(0, str(Path(__file__).parent))

from postinstall.main import main

if __name__ == "__main__":
    sys.exit(main())
