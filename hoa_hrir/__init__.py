"""
HOA HRIR Package
"""
