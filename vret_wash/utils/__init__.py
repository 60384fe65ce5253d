"""
Utility modules for the VRET WASH board
"""
