"""
NumPy-backed implementations of the Astute tensor model and autograd engine.
"""
