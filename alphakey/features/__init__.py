"""
功能模組
"""
