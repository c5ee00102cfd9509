"""
Controllers
===========
Turn user input into Store updates and run the blocking work (file loading)
off the GUI thread.

Note: brush.py is pure Python; only workers.py depends on PySide6.
"""
