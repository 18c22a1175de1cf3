"""
Schema package
"""
