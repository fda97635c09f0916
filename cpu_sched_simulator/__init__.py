"""
Discrete-time CPU scheduling simulator.
"""
