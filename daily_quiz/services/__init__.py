"""
Quiz engine services
"""
