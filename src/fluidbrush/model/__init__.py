"""
The MODEL layer contains pure data structures and the brushing logic.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
It deals with particles, bounds, color mapping, filtering and scene snapshots.
"""
