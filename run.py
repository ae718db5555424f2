"""
Sprite Tab Runner
=================
Starts the viewer straight from a checkout, without `pip install -e .`.

The package sits under 'src', so that directory is put first on sys.path
before `spritetab.main` is imported. Arguments are passed through to the
CLI unchanged.

Usage:
    $ python run.py --server http://localhost:9999 --scene 42
"""
import sys
import os

src_path: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
sys.path.insert(0, src_path)

# Windows groups taskbar buttons by this id instead of by python.exe
try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID('stash-plugins.sprite-tab')
except (AttributeError, ImportError):
    pass

from spritetab.main import main

if __name__ == "__main__":
    sys.exit(main())
