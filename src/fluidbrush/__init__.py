"""
fluidbrush: linked 3D / cross-section brushing of particle fluid simulations.
"""
__version__ = "0.1.0"
