"""
Views
=====
Qt widgets. They read from the Store and redraw on its events; user input
goes through the BrushController.
"""
