"""Shared utilities"""
from .logger import setup_logger
