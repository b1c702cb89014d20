"""
Security Module
Input validation and environment checks
"""
