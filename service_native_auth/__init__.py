"""
Native auth service.
"""
