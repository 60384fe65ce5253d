"""
Service layer for the VRET WASH board
"""
