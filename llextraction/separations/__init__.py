# llextraction/separations/__init__.py
"""Separation processes"""
